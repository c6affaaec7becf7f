"""Egg powers."""

from __future__ import annotations

from core.constants import SkipReason

from ..effects import LayEggsEffect
from ..power import PowerContext, effect, prompt
from ..prompts import PlaceEggsPrompt
from .helpers import Gen, ask_to_activate, nest_param, skip


def lay_eggs_on_bird(ctx: PowerContext) -> Gen:
    """Lay eggs on this bird, or on any of your birds when target is "any".

    Optional nest_type restricts "any" to birds with that nest.
    """
    count = ctx.param("count", 1)
    if ctx.param("target", "self") == "self":
        space = ctx.bird.remaining_egg_capacity
        if space == 0:
            yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
            return
        if not (yield from ask_to_activate(ctx)):
            return
        yield from effect(
            LayEggsEffect(player_id=ctx.player_id, placements={ctx.bird.instance_id: min(count, space)})
        )
        return

    nest = nest_param(ctx)
    capacities = ctx.player.board.remaining_egg_capacities()
    if nest is not None:
        nested = {bird.instance_id for bird in ctx.player.board.birds_with_nest_type(nest)}
        capacities = {bird_id: space for bird_id, space in capacities.items() if bird_id in nested}
    if not capacities:
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    choice = yield from prompt(
        PlaceEggsPrompt(
            player_id=ctx.player_id,
            count=min(count, sum(capacities.values())),
            remaining_capacity_by_bird=capacities,
        )
    )
    yield from effect(LayEggsEffect(player_id=ctx.player_id, placements=dict(choice.placements)))


def lay_egg_on_birds_with_nest_type(ctx: PowerContext) -> Gen:
    """Lay one egg on each of your birds with the nest type (wild nests count)."""
    nest = nest_param(ctx)
    targets = [
        bird.instance_id
        for bird in ctx.player.board.birds_with_nest_type(nest)
        if bird.remaining_egg_capacity > 0
    ]
    if not targets:
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    yield from effect(
        LayEggsEffect(player_id=ctx.player_id, placements={bird_id: 1 for bird_id in targets})
    )
