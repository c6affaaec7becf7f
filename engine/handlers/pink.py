"""Once-between-turns (pink) powers and their trigger rules.

Pink powers react to events of other players' turns. The engine decides
who is offered the power; the trigger rules here decide whether a given
event qualifies for a given bird.
"""

from __future__ import annotations

from core.constants import CardSource, FoodType, Habitat, SelectCardsMode, SkipReason

from ..effects import CacheFoodEffect, LayEggsEffect, TuckCardsEffect
from ..events import (
    BirdPlayedEvent,
    EventType,
    FoodGainedFromHabitatActivationEvent,
    PredatorPowerResolvedEvent,
)
from ..power import PowerContext, effect, prompt
from ..registry import PinkTrigger
from ..prompts import PlaceEggsPrompt, SelectCardsPrompt
from .helpers import (
    Gen,
    ask_to_activate,
    feeder_can_provide,
    food_param,
    nest_param,
    select_food_from_feeder,
    skip,
)


# =============================================================================
# Trigger conditions
# =============================================================================


def _played_in_habitat(event: BirdPlayedEvent, bird, power) -> bool:
    return event.habitat == Habitat(power.param("habitat"))


def _predator_succeeded(event: PredatorPowerResolvedEvent, bird, power) -> bool:
    return event.success


def _gained_matching_food(event: FoodGainedFromHabitatActivationEvent, bird, power) -> bool:
    return event.food.get(FoodType(power.param("food")), 0) > 0


OPPONENT_LAYS_EGGS = PinkTrigger(EventType.EGGS_LAID_FROM_HABITAT_ACTIVATION)
OPPONENT_PLAYS_BIRD_IN_HABITAT = PinkTrigger(EventType.BIRD_PLAYED, _played_in_habitat)
OPPONENT_PREDATOR_SUCCEEDS = PinkTrigger(EventType.PREDATOR_POWER_RESOLVED, _predator_succeeded)
OPPONENT_GAINS_FOOD = PinkTrigger(EventType.FOOD_GAINED_FROM_HABITAT_ACTIVATION, _gained_matching_food)


# =============================================================================
# Handlers
# =============================================================================


def when_opponent_lays_eggs_lay_egg_on_nest_type(ctx: PowerContext) -> Gen:
    nest = nest_param(ctx)
    options = {
        bird.instance_id: bird.remaining_egg_capacity
        for bird in ctx.player.board.birds_with_nest_type(nest)
        if bird.remaining_egg_capacity > 0
    }
    if not options:
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    choice = yield from prompt(
        PlaceEggsPrompt(player_id=ctx.player_id, count=1, remaining_capacity_by_bird=options)
    )
    yield from effect(LayEggsEffect(player_id=ctx.player_id, placements=dict(choice.placements)))


def when_opponent_plays_bird_in_habitat_gain_food(ctx: PowerContext) -> Gen:
    food = food_param(ctx)
    allowed = None if food is None or food == FoodType.WILD else (food,)
    if not feeder_can_provide(ctx.state.birdfeeder, allowed):
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    yield from select_food_from_feeder(ctx, allowed_foods=allowed)


def when_opponent_plays_bird_in_habitat_tuck_card(ctx: PowerContext) -> Gen:
    if not ctx.player.hand:
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    choice = yield from prompt(
        SelectCardsPrompt(
            player_id=ctx.player_id,
            mode=SelectCardsMode.TUCK,
            source=CardSource.HAND,
            count=1,
            eligible_cards=tuple(ctx.player.hand),
        )
    )
    yield from effect(
        TuckCardsEffect(
            player_id=ctx.player_id, bird_instance_id=ctx.bird.instance_id, from_hand=list(choice.cards)
        )
    )


def when_opponent_predator_succeeds_gain_food(ctx: PowerContext) -> Gen:
    food = food_param(ctx)
    allowed = (food,)
    if not feeder_can_provide(ctx.state.birdfeeder, allowed):
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    yield from select_food_from_feeder(ctx, allowed_foods=allowed)


def when_opponent_gains_food_cache_if_match(ctx: PowerContext) -> Gen:
    food = food_param(ctx)
    if not (yield from ask_to_activate(ctx)):
        return
    yield from effect(
        CacheFoodEffect(player_id=ctx.player_id, bird_instance_id=ctx.bird.instance_id, food=food)
    )
