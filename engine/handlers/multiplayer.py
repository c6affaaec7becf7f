"""Powers that affect several players.

Players are visited clockwise starting with the bird's owner (or with the
player the owner picks). Forfeited players are left out.
"""

from __future__ import annotations

from core.constants import SkipReason

from ..effects import (
    AllPlayersDrawCardsEffect,
    AllPlayersGainFoodEffect,
    AllPlayersLayEggsEffect,
)
from ..power import PowerContext, effect, prompt
from ..prompts import PlaceEggsPrompt, SelectPlayerPrompt
from .helpers import (
    Gen,
    ask_to_activate,
    feeder_can_provide,
    food_param,
    habitat_param,
    nest_param,
    select_food_from_feeder,
    skip,
)


def _players_from_owner(ctx: PowerContext):
    return [p for p in ctx.state.clockwise_from(ctx.player_id) if not p.forfeited]


def _share_draws(ctx: PowerContext, player_ids: list[str], count: int) -> dict[str, int]:
    """Hand out up to count cards each, in order, while the deck lasts."""
    left = ctx.state.bird_supply.available
    draws = {}
    for player_id in player_ids:
        n = min(count, left)
        if n <= 0:
            break
        draws[player_id] = n
        left -= n
    return draws


def all_players_gain_food_from_supply(ctx: PowerContext) -> Gen:
    food = food_param(ctx)
    if not (yield from ask_to_activate(ctx)):
        return
    count = ctx.param("count", 1)
    yield from effect(
        AllPlayersGainFoodEffect(gains={p.player_id: {food: count} for p in _players_from_owner(ctx)})
    )


def all_players_draw_cards_from_deck(ctx: PowerContext) -> Gen:
    if ctx.state.bird_supply.available == 0:
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    player_ids = [p.player_id for p in _players_from_owner(ctx)]
    yield from effect(AllPlayersDrawCardsEffect(draws=_share_draws(ctx, player_ids, ctx.param("count", 1))))


def all_players_lay_egg_on_nest_type(ctx: PowerContext) -> Gen:
    """Every player may lay an egg on one of their birds with the nest type."""
    nest = nest_param(ctx)
    count = ctx.param("count", 1)

    def capacities(player):
        return {
            bird.instance_id: bird.remaining_egg_capacity
            for bird in player.board.birds_with_nest_type(nest)
            if bird.remaining_egg_capacity > 0
        }

    if not any(capacities(p) for p in _players_from_owner(ctx)):
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    placements: dict[str, dict[str, int]] = {}
    for player in _players_from_owner(ctx):
        options = capacities(player)
        if not options:
            continue
        choice = yield from prompt(
            PlaceEggsPrompt(
                player_id=player.player_id,
                count=min(count, sum(options.values())),
                remaining_capacity_by_bird=options,
            )
        )
        placements[player.player_id] = dict(choice.placements)
    yield from effect(AllPlayersLayEggsEffect(placements=placements))


def each_player_gains_food_from_feeder(ctx: PowerContext) -> Gen:
    """Pick a starting player; each player in turn takes one die from the feeder."""
    if not feeder_can_provide(ctx.state.birdfeeder):
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    players = _players_from_owner(ctx)
    choice = yield from prompt(
        SelectPlayerPrompt(player_id=ctx.player_id, eligible_players=tuple(p.player_id for p in players))
    )
    for player in ctx.state.clockwise_from(choice.player):
        if player.forfeited:
            continue
        yield from select_food_from_feeder(ctx, player_id=player.player_id)


def _fewest_in_habitat(ctx: PowerContext) -> list[str]:
    habitat = habitat_param(ctx)
    players = _players_from_owner(ctx)
    fewest = min(p.board.count_birds(habitat) for p in players)
    return [p.player_id for p in players if p.board.count_birds(habitat) == fewest]


def players_with_fewest_in_habitat_draw_card(ctx: PowerContext) -> Gen:
    if ctx.state.bird_supply.available == 0:
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    yield from effect(
        AllPlayersDrawCardsEffect(draws=_share_draws(ctx, _fewest_in_habitat(ctx), ctx.param("count", 1)))
    )


def players_with_fewest_in_habitat_gain_food(ctx: PowerContext) -> Gen:
    food = food_param(ctx)
    if not (yield from ask_to_activate(ctx)):
        return
    count = ctx.param("count", 1)
    yield from effect(
        AllPlayersGainFoodEffect(gains={player_id: {food: count} for player_id in _fewest_in_habitat(ctx)})
    )
