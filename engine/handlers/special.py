"""Powers that move birds, play extra birds or repeat other powers."""

from __future__ import annotations

from core.constants import PowerTrigger, SkipReason, HABITATS

from ..effects import MoveBirdEffect, PlayBirdEffect, RepeatBrownPowerEffect
from ..events import BirdPlayedEvent
from ..power import PowerContext, effect, event, prompt
from ..prompts import PlayBirdPrompt, RepeatPowerPrompt, SelectHabitatPrompt
from .helpers import Gen, ask_to_activate, habitat_param, skip
from .predator import PREDATOR_HANDLER_IDS

REPEAT_BROWN_POWER = "repeatBrownPowerInHabitat"
REPEAT_PREDATOR_POWER = "repeatPredatorPowerInHabitat"

REPEAT_HANDLER_IDS = frozenset({REPEAT_BROWN_POWER, REPEAT_PREDATOR_POWER})


def move_to_another_habitat_if_rightmost(ctx: PowerContext) -> Gen:
    """If this bird is the rightmost in its row, move it to another habitat."""
    board = ctx.player.board
    current = board.habitat_of(ctx.bird.instance_id)
    if not board.is_rightmost(ctx.bird.instance_id):
        yield from skip(ctx, SkipReason.CONDITION_NOT_MET)
        return
    targets = tuple(
        habitat
        for habitat in HABITATS
        if habitat != current and ctx.bird.card.can_live_in(habitat) and board.has_space(habitat)
    )
    if not targets:
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    choice = yield from prompt(SelectHabitatPrompt(player_id=ctx.player_id, eligible_habitats=targets))
    yield from effect(
        MoveBirdEffect(
            player_id=ctx.player_id,
            bird_instance_id=ctx.bird.instance_id,
            from_habitat=current,
            to_habitat=choice.habitat,
        )
    )


def play_additional_bird_in_habitat(ctx: PowerContext) -> Gen:
    """Play a second bird into the given habitat, paying its normal cost."""
    habitat = habitat_param(ctx)
    player = ctx.player
    eligible = player.eligible_birds_to_play(ctx.state.board_config, habitat)
    if not eligible:
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    column = player.board.leftmost_empty_column(habitat)
    choice = yield from prompt(
        PlayBirdPrompt(
            player_id=ctx.player_id,
            eligible_birds=tuple(eligible),
            egg_cost_by_habitat={habitat: ctx.state.board_config.egg_cost(column)},
        )
    )
    played = yield from effect(
        PlayBirdEffect(
            player_id=ctx.player_id,
            card_id=choice.bird,
            habitat=choice.habitat,
            food_paid=dict(choice.food_to_spend),
            eggs_paid=dict(choice.eggs_to_spend),
        )
    )
    yield from event(
        BirdPlayedEvent(
            player_id=ctx.player_id,
            bird_instance_id=played.bird_instance_id,
            card_id=played.card_id,
            habitat=played.habitat,
        )
    )


def _repeatable(ctx: PowerContext, predators_only: bool) -> tuple[str, ...]:
    habitat = ctx.player.board.habitat_of(ctx.bird.instance_id)
    birds = []
    for bird in ctx.player.board.birds_in_habitat(habitat):
        power = bird.card.power
        if bird.instance_id == ctx.bird.instance_id or power is None:
            continue
        if power.trigger != PowerTrigger.WHEN_ACTIVATED or power.handler_id in REPEAT_HANDLER_IDS:
            continue
        if predators_only and power.handler_id not in PREDATOR_HANDLER_IDS:
            continue
        birds.append(bird.instance_id)
    return tuple(birds)


def _repeat(ctx: PowerContext, predators_only: bool) -> Gen:
    eligible = _repeatable(ctx, predators_only)
    if not eligible:
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    choice = yield from prompt(RepeatPowerPrompt(player_id=ctx.player_id, eligible_birds=eligible))
    yield from effect(
        RepeatBrownPowerEffect(
            player_id=ctx.player_id,
            source_bird_id=ctx.bird.instance_id,
            target_bird_id=choice.bird,
        )
    )


def repeat_brown_power_in_habitat(ctx: PowerContext) -> Gen:
    """Repeat a brown power of another bird in this bird's habitat."""
    yield from _repeat(ctx, predators_only=False)


def repeat_predator_power_in_habitat(ctx: PowerContext) -> Gen:
    """Repeat a predator power of another bird in this bird's habitat."""
    yield from _repeat(ctx, predators_only=True)
