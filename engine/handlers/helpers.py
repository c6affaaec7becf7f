"""Building blocks shared by power and turn-action handlers."""

from __future__ import annotations

from typing import Any, Generator, Optional

from core.birdfeeder import Birdfeeder, die_provides
from core.constants import (
    DieFace,
    FoodDestination,
    FoodSource,
    FoodType,
    Habitat,
    NestType,
    SkipReason,
    FOOD_TYPES,
)

from ..effects import ActivatePowerEffect, DrawCardsEffect, GainFoodEffect, RerollBirdfeederEffect
from ..power import HandlerContext, PowerContext, effect, prompt
from ..prompts import ActivatePowerPrompt, SelectFoodFromFeederPrompt
from ..validators import resolve_die_food

Gen = Generator[Any, Any, Any]


# =============================================================================
# Parameters
# =============================================================================


def food_param(ctx: PowerContext, name: str = "food", default: Optional[str] = None) -> Optional[FoodType]:
    value = ctx.param(name, default)
    return FoodType(value) if value is not None else None


def foods_param(ctx: PowerContext, name: str = "foods") -> tuple[FoodType, ...]:
    """Allowed foods; a missing list or one containing "wild" means any food."""
    values = ctx.param(name)
    if not values:
        return tuple(FOOD_TYPES)
    foods = tuple(FoodType(value) for value in values)
    return tuple(FOOD_TYPES) if FoodType.WILD in foods else foods


def habitat_param(ctx: PowerContext, name: str = "habitat") -> Optional[Habitat]:
    value = ctx.param(name)
    return Habitat(value) if value is not None else None


def nest_param(ctx: PowerContext, name: str = "nest_type") -> Optional[NestType]:
    value = ctx.param(name)
    return NestType(value) if value is not None else None


# =============================================================================
# Activation
# =============================================================================


def skip(ctx: PowerContext, reason: SkipReason) -> Gen:
    """Record that the power did nothing, without asking the player."""
    yield from effect(
        ActivatePowerEffect(
            player_id=ctx.player_id,
            bird_instance_id=ctx.bird.instance_id,
            handler_id=ctx.handler_id,
            activated=False,
            skip_reason=reason,
        )
    )


def ask_to_activate(ctx: PowerContext) -> Gen:
    """Offer the power to its owner. Returns True when the owner accepts."""
    choice = yield from prompt(
        ActivatePowerPrompt(
            player_id=ctx.player_id,
            bird_instance_id=ctx.bird.instance_id,
            handler_id=ctx.handler_id,
            power_text=ctx.power.text,
        )
    )
    yield from effect(
        ActivatePowerEffect(
            player_id=ctx.player_id,
            bird_instance_id=ctx.bird.instance_id,
            handler_id=ctx.handler_id,
            activated=choice.activate,
            skip_reason=None if choice.activate else SkipReason.AGENT_DECLINED,
        )
    )
    return choice.activate


# =============================================================================
# Birdfeeder
# =============================================================================


def eligible_dice(feeder: Birdfeeder, allowed_foods: Optional[tuple[FoodType, ...]] = None) -> dict[DieFace, int]:
    """Dice in the feeder that can be taken as one of the allowed foods."""
    available = feeder.available_dice()
    if allowed_foods is None:
        return available
    return {
        face: count
        for face, count in available.items()
        if any(die_provides(face, food) for food in allowed_foods)
    }


def feeder_can_provide(feeder: Birdfeeder, allowed_foods: Optional[tuple[FoodType, ...]] = None) -> bool:
    """A selection is possible now, or after rerolling a single-face feeder."""
    return bool(eligible_dice(feeder, allowed_foods)) or feeder.can_reroll()


def choose_die(
    ctx: HandlerContext,
    player_id: Optional[str] = None,
    allowed_foods: Optional[tuple[FoodType, ...]] = None,
) -> Gen:
    """Ask a player which die to take, handling rerolls along the way.

    Returns:
        (die, food) for the chosen die, or None when no eligible die
        remains and the feeder cannot be rerolled.
    """
    player_id = player_id or ctx.player_id
    feeder = ctx.state.birdfeeder
    rerolls = 0
    while True:
        dice = eligible_dice(feeder, allowed_foods)
        can_reroll = feeder.can_reroll() and rerolls < ctx.config.max_rerolls_per_selection
        if not dice and not can_reroll:
            return None
        choice = yield from prompt(
            SelectFoodFromFeederPrompt(
                player_id=player_id,
                available_dice=dice,
                count=1,
                can_reroll=can_reroll,
                allowed_foods=allowed_foods,
            )
        )
        if not choice.reroll:
            selection = choice.dice[0]
            return selection.die, resolve_die_food(selection.die, selection.as_food)
        yield from effect(RerollBirdfeederEffect(player_id=player_id))
        rerolls += 1


def gain_die(
    player_id: str,
    die: DieFace,
    food: FoodType,
    destination: FoodDestination = FoodDestination.PLAYER_SUPPLY,
    bird_instance_id: Optional[str] = None,
) -> Gen:
    yield from effect(
        GainFoodEffect(
            player_id=player_id,
            food={food: 1},
            source=FoodSource.BIRDFEEDER,
            dice_taken=[die],
            destination=destination,
            bird_instance_id=bird_instance_id,
        )
    )


def select_food_from_feeder(
    ctx: HandlerContext,
    player_id: Optional[str] = None,
    allowed_foods: Optional[tuple[FoodType, ...]] = None,
) -> Gen:
    """Let a player take one die from the feeder into their supply.

    Returns:
        The food gained, or None if nothing could be taken.
    """
    player_id = player_id or ctx.player_id
    chosen = yield from choose_die(ctx, player_id, allowed_foods)
    if chosen is None:
        return None
    die, food = chosen
    yield from gain_die(player_id, die, food)
    return food


def take_die_for(feeder: Birdfeeder, food: FoodType) -> Optional[DieFace]:
    """Die to take for a specific food, preferring single-food faces."""
    faces = [face for face in feeder.dice if die_provides(face, food)]
    if not faces:
        return None
    single = [face for face in faces if face != DieFace.SEED_INVERTEBRATE]
    return single[0] if single else faces[0]


# =============================================================================
# Cards
# =============================================================================


def draw_from_deck(ctx: HandlerContext, count: int, player_id: Optional[str] = None) -> Gen:
    """Draw up to count cards from the deck. Returns the effect, or None."""
    count = min(count, ctx.state.bird_supply.available)
    if count <= 0:
        return None
    drawn = yield from effect(DrawCardsEffect(player_id=player_id or ctx.player_id, from_deck=count))
    return drawn
