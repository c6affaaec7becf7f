"""Food powers: gaining, caching and trading food."""

from __future__ import annotations

from core.birdfeeder import die_provides
from core.constants import FoodDestination, FoodSource, FoodType, SkipReason, FOOD_TYPES

from ..effects import CacheFoodEffect, DiscardEggsEffect, DiscardFoodEffect, GainFoodEffect
from ..power import PowerContext, effect, prompt
from ..prompts import (
    DiscardEggsPrompt,
    DiscardFoodPrompt,
    SelectFoodDestinationPrompt,
    SelectFoodFromSupplyPrompt,
)
from .helpers import (
    Gen,
    ask_to_activate,
    choose_die,
    feeder_can_provide,
    food_param,
    foods_param,
    gain_die,
    select_food_from_feeder,
    skip,
    take_die_for,
)


def gain_food_from_supply(ctx: PowerContext) -> Gen:
    """Gain a fixed food from the general supply."""
    food = food_param(ctx)
    if not (yield from ask_to_activate(ctx)):
        return
    yield from effect(
        GainFoodEffect(
            player_id=ctx.player_id,
            food={food: ctx.param("count", 1)},
            source=FoodSource.SUPPLY,
        )
    )


def cache_food_from_supply(ctx: PowerContext) -> Gen:
    """Cache a fixed food from the general supply on this bird."""
    food = food_param(ctx)
    if not (yield from ask_to_activate(ctx)):
        return
    yield from effect(
        CacheFoodEffect(
            player_id=ctx.player_id,
            bird_instance_id=ctx.bird.instance_id,
            food=food,
            count=ctx.param("count", 1),
        )
    )


def gain_food_from_feeder(ctx: PowerContext) -> Gen:
    """Take up to count dice of the allowed foods from the birdfeeder."""
    allowed = foods_param(ctx)
    if not feeder_can_provide(ctx.state.birdfeeder, allowed):
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    for _ in range(ctx.param("count", 1)):
        food = yield from select_food_from_feeder(ctx, allowed_foods=allowed)
        if food is None:
            break


def gain_food_from_feeder_with_cache(ctx: PowerContext) -> Gen:
    """Take a die from the feeder; keep the food or cache it on this bird."""
    allowed = foods_param(ctx)
    if not feeder_can_provide(ctx.state.birdfeeder, allowed):
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    chosen = yield from choose_die(ctx, allowed_foods=allowed)
    if chosen is None:
        return
    die, food = chosen
    choice = yield from prompt(
        SelectFoodDestinationPrompt(
            player_id=ctx.player_id,
            source_bird_id=ctx.bird.instance_id,
            food=food,
            destination_options=(FoodDestination.PLAYER_SUPPLY, FoodDestination.CACHE_ON_SOURCE_BIRD),
        )
    )
    yield from gain_die(ctx.player_id, die, food, choice.destination, ctx.bird.instance_id)


def gain_food_from_feeder_if_available(ctx: PowerContext) -> Gen:
    """Gain one specific food from the feeder, if a die shows it."""
    food = food_param(ctx)
    if take_die_for(ctx.state.birdfeeder, food) is None:
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    yield from gain_die(ctx.player_id, take_die_for(ctx.state.birdfeeder, food), food)


def gain_all_food_type_from_feeder(ctx: PowerContext) -> Gen:
    """Gain every die in the feeder that can provide the food."""
    food = food_param(ctx)
    dice = [face for face in ctx.state.birdfeeder.dice if die_provides(face, food)]
    if not dice:
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    yield from effect(
        GainFoodEffect(
            player_id=ctx.player_id,
            food={food: len(dice)},
            source=FoodSource.BIRDFEEDER,
            dice_taken=dice,
        )
    )


def trade_food_type(ctx: PowerContext) -> Gen:
    """Discard one food of any type to gain one food of any type."""
    if ctx.player.total_food() == 0:
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    discard = yield from prompt(
        DiscardFoodPrompt(
            player_id=ctx.player_id,
            food_cost={FoodType.WILD: 1},
            reward_text="Gain 1 food of any type from the supply",
        )
    )
    yield from effect(DiscardFoodEffect(player_id=ctx.player_id, food=dict(discard.food)))
    gain = yield from prompt(
        SelectFoodFromSupplyPrompt(player_id=ctx.player_id, count=1, allowed_foods=tuple(FOOD_TYPES))
    )
    yield from effect(GainFoodEffect(player_id=ctx.player_id, food=dict(gain.food), source=FoodSource.SUPPLY))


def discard_egg_to_gain_food(ctx: PowerContext) -> Gen:
    """Discard eggs from any of your birds to gain food from the supply."""
    eggs = ctx.player.board.eggs_on_birds()
    egg_count = ctx.param("egg_count", 1)
    if sum(eggs.values()) < egg_count:
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    choice = yield from prompt(
        DiscardEggsPrompt(player_id=ctx.player_id, count=egg_count, eggs_by_eligible_bird=eggs)
    )
    yield from effect(DiscardEggsEffect(player_id=ctx.player_id, sources=dict(choice.sources)))

    food = food_param(ctx)
    food_count = ctx.param("food_count", 1)
    if food is not None and food != FoodType.WILD:
        gained = {food: food_count}
    else:
        selection = yield from prompt(
            SelectFoodFromSupplyPrompt(
                player_id=ctx.player_id, count=food_count, allowed_foods=tuple(FOOD_TYPES)
            )
        )
        gained = dict(selection.food)
    yield from effect(GainFoodEffect(player_id=ctx.player_id, food=gained, source=FoodSource.SUPPLY))
