"""Tuck powers: tucking cards under a bird, usually for a reward."""

from __future__ import annotations

from core.constants import CardSource, FoodSource, FoodType, SelectCardsMode, SkipReason

from ..effects import DiscardFoodEffect, GainFoodEffect, LayEggsEffect, TuckCardsEffect
from ..power import PowerContext, effect, prompt
from ..prompts import DiscardFoodPrompt, SelectCardsPrompt, SelectFoodFromSupplyPrompt
from .helpers import Gen, ask_to_activate, draw_from_deck, food_param, foods_param, skip


def tuck_from_hand(ctx: PowerContext, count: int = 1) -> Gen:
    """Ask the owner which cards to tuck under this bird, then tuck them."""
    count = min(count, len(ctx.player.hand))
    choice = yield from prompt(
        SelectCardsPrompt(
            player_id=ctx.player_id,
            mode=SelectCardsMode.TUCK,
            source=CardSource.HAND,
            count=count,
            eligible_cards=tuple(ctx.player.hand),
        )
    )
    yield from effect(
        TuckCardsEffect(
            player_id=ctx.player_id,
            bird_instance_id=ctx.bird.instance_id,
            from_hand=list(choice.cards),
        )
    )


def _needs_hand(ctx: PowerContext) -> Gen:
    """Skip when the hand is empty. Returns True when the power may go on."""
    if not ctx.player.hand:
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return False
    return (yield from ask_to_activate(ctx))


def tuck_and_draw(ctx: PowerContext) -> Gen:
    """Tuck a card from hand, then draw from the deck."""
    if not (yield from _needs_hand(ctx)):
        return
    yield from tuck_from_hand(ctx, ctx.param("tuck", 1))
    yield from draw_from_deck(ctx, ctx.param("draw", 1))


def tuck_from_hand_and_lay(ctx: PowerContext) -> Gen:
    """Tuck a card from hand, then lay an egg on this bird if it has room."""
    if not (yield from _needs_hand(ctx)):
        return
    yield from tuck_from_hand(ctx, ctx.param("tuck", 1))
    eggs = min(ctx.param("eggs", 1), ctx.bird.remaining_egg_capacity)
    if eggs > 0:
        yield from effect(LayEggsEffect(player_id=ctx.player_id, placements={ctx.bird.instance_id: eggs}))


def tuck_and_gain_food(ctx: PowerContext) -> Gen:
    """Tuck a card from hand, then gain a fixed food from the supply."""
    if not (yield from _needs_hand(ctx)):
        return
    yield from tuck_from_hand(ctx, ctx.param("tuck", 1))
    yield from effect(
        GainFoodEffect(
            player_id=ctx.player_id,
            food={food_param(ctx): ctx.param("count", 1)},
            source=FoodSource.SUPPLY,
        )
    )


def tuck_and_gain_food_of_choice(ctx: PowerContext) -> Gen:
    """Tuck a card from hand, then gain one of several foods from the supply."""
    if not (yield from _needs_hand(ctx)):
        return
    yield from tuck_from_hand(ctx, ctx.param("tuck", 1))
    choice = yield from prompt(
        SelectFoodFromSupplyPrompt(
            player_id=ctx.player_id,
            count=ctx.param("count", 1),
            allowed_foods=foods_param(ctx),
        )
    )
    yield from effect(GainFoodEffect(player_id=ctx.player_id, food=dict(choice.food), source=FoodSource.SUPPLY))


def discard_food_to_tuck_from_deck(ctx: PowerContext) -> Gen:
    """Discard food to tuck cards from the top of the deck under this bird."""
    food = food_param(ctx, default=FoodType.WILD.value)
    cost = ctx.param("food_count", 1)
    held = ctx.player.total_food() if food == FoodType.WILD else ctx.player.food.get(food, 0)
    if held < cost or ctx.state.bird_supply.available == 0:
        yield from skip(ctx, SkipReason.RESOURCE_UNAVAILABLE)
        return
    if not (yield from ask_to_activate(ctx)):
        return
    if food == FoodType.WILD:
        choice = yield from prompt(
            DiscardFoodPrompt(
                player_id=ctx.player_id,
                food_cost={FoodType.WILD: cost},
                reward_text="Tuck cards from the deck behind this bird",
            )
        )
        paid = dict(choice.food)
    else:
        paid = {food: cost}
    yield from effect(DiscardFoodEffect(player_id=ctx.player_id, food=paid))
    tuck = min(ctx.param("count", 1), ctx.state.bird_supply.available)
    yield from effect(
        TuckCardsEffect(player_id=ctx.player_id, bird_instance_id=ctx.bird.instance_id, from_deck=tuck)
    )
