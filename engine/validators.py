"""Choice validation.

Validators check a choice against the prompt it answers (and the view the
prompt carried). They return a ValidationError describing the first
problem found, or None when the choice is acceptable. They never raise for
bad agent input.
"""

from __future__ import annotations

from collections import Counter
from typing import Callable, Optional

from core.birdfeeder import die_provides
from core.constants import DieFace, FoodType, DIE_FACE_FOODS
from core.player import payment_error

from .prompts import (
    PromptKind,
    Prompt,
    Choice,
    ValidationError,
    StartingHandPrompt,
    StartingHandChoice,
    TurnActionPrompt,
    TurnActionChoice,
    SelectFoodFromFeederPrompt,
    SelectFoodFromFeederChoice,
    SelectFoodFromSupplyPrompt,
    SelectFoodFromSupplyChoice,
    SelectFoodDestinationPrompt,
    SelectFoodDestinationChoice,
    DiscardEggsPrompt,
    DiscardEggsChoice,
    PlaceEggsPrompt,
    PlaceEggsChoice,
    SelectCardsPrompt,
    SelectCardsChoice,
    DrawCardsPrompt,
    DrawCardsChoice,
    SelectBonusCardsPrompt,
    SelectBonusCardsChoice,
    SelectPlayerPrompt,
    SelectPlayerChoice,
    RepeatPowerPrompt,
    RepeatPowerChoice,
    PlayBirdPrompt,
    PlayBirdChoice,
    DiscardFoodPrompt,
    DiscardFoodChoice,
    SelectHabitatPrompt,
    SelectHabitatChoice,
)

Validator = Callable[[Prompt, Choice], Optional[ValidationError]]


def _error(code: str, message: str) -> ValidationError:
    return ValidationError(code=code, message=message)


def _select_ids(
    chosen: tuple[str, ...],
    eligible: set[str],
    count: int,
    count_code: str = "INVALID_CARD_COUNT",
    item_code: str = "INVALID_CARD",
    duplicate_code: str = "DUPLICATE_CARD",
) -> Optional[ValidationError]:
    if len(chosen) != count:
        return _error(count_code, f"Expected {count} selections, got {len(chosen)}")
    for item in chosen:
        if item not in eligible:
            return _error(item_code, f"{item} is not eligible")
    if len(set(chosen)) != len(chosen):
        return _error(duplicate_code, "The same item was selected twice")
    return None


def _egg_allocation(
    allocation: dict[str, int],
    limits: dict[str, int],
    count: int,
    limit_code: str,
) -> Optional[ValidationError]:
    if any(eggs < 0 for eggs in allocation.values()):
        return _error("INVALID_EGG_COUNT", "Egg amounts cannot be negative")
    if sum(allocation.values()) != count:
        return _error("INVALID_EGG_COUNT", f"Expected {count} eggs, got {sum(allocation.values())}")
    for bird_id, eggs in allocation.items():
        if not eggs:
            continue
        if bird_id not in limits:
            return _error("INVALID_BIRD", f"{bird_id} is not eligible")
        if eggs > limits[bird_id]:
            return _error(limit_code, f"{bird_id} allows at most {limits[bird_id]} eggs, got {eggs}")
    return None


def _food_held(food: dict[FoodType, int], prompt: Prompt) -> bool:
    if prompt.view is None:
        return True
    return all(prompt.view.food.get(f, 0) >= n for f, n in food.items() if n)


# =============================================================================
# Per-kind validators
# =============================================================================


def validate_starting_hand(prompt: StartingHandPrompt, choice: StartingHandChoice) -> Optional[ValidationError]:
    eligible = {card.id for card in prompt.eligible_birds}
    for bird in choice.birds:
        if bird not in eligible:
            return _error("INVALID_BIRD", f"{bird} was not dealt to you")
    if len(set(choice.birds)) != len(choice.birds):
        return _error("DUPLICATE_BIRD", "The same bird was kept twice")
    if choice.bonus_card not in {card.id for card in prompt.eligible_bonus_cards}:
        return _error("INVALID_BONUS_CARD", f"{choice.bonus_card} was not dealt to you")
    food = choice.food_to_discard
    if FoodType.WILD in food or any(n < 0 for n in food.values()):
        return _error("INVALID_FOOD_DISCARD", "Food to discard must be real, non-negative food")
    if sum(food.values()) != len(choice.birds):
        return _error(
            "INVALID_FOOD_DISCARD",
            f"Discard one food per bird kept: {len(choice.birds)} expected, got {sum(food.values())}",
        )
    if not _food_held(food, prompt):
        return _error("INVALID_FOOD_DISCARD", "Cannot discard food you do not have")
    return None


def validate_turn_action(prompt: TurnActionPrompt, choice: TurnActionChoice) -> Optional[ValidationError]:
    if choice.action not in prompt.eligible_actions:
        return _error("INVALID_ACTION", f"{choice.action.value} is not available")
    reward = prompt.rewards_by_action.get(choice.action)
    if choice.take_bonus and (reward is None or not reward.bonus_available):
        return _error("BONUS_UNAVAILABLE", f"No bonus available for {choice.action.value}")
    return None


def validate_activate_power(prompt: Prompt, choice: Choice) -> Optional[ValidationError]:
    return None


def validate_select_food_from_feeder(
    prompt: SelectFoodFromFeederPrompt, choice: SelectFoodFromFeederChoice
) -> Optional[ValidationError]:
    if choice.reroll:
        if not prompt.can_reroll or choice.dice:
            return _error("INVALID_REROLL", "The birdfeeder cannot be rerolled now")
        return None
    if not choice.dice:
        return _error("NO_DICE_SELECTED", "Select a die or reroll")
    if len(choice.dice) != prompt.count:
        return _error("INVALID_DIE_COUNT", f"Expected {prompt.count} dice, got {len(choice.dice)}")
    taken = Counter(selection.die for selection in choice.dice)
    for face, count in taken.items():
        if count > prompt.available_dice.get(face, 0):
            return _error("EXCEEDS_AVAILABLE_DICE", f"Not enough {face.value} dice in the birdfeeder")
    for selection in choice.dice:
        food = resolve_die_food(selection.die, selection.as_food)
        if food is None:
            if selection.die == DieFace.SEED_INVERTEBRATE:
                return _error(
                    "INVALID_SEED_INVERTEBRATE_CHOICE",
                    "Choose seed or invertebrate for the seed/invertebrate die",
                )
            return _error("INVALID_DIE_FOOD", f"A {selection.die.value} die cannot give {selection.as_food}")
        if prompt.allowed_foods is not None and food not in prompt.allowed_foods:
            return _error("INVALID_DIE_FOOD", f"{food.value} is not allowed here")
    return None


def resolve_die_food(die: DieFace, as_food: Optional[FoodType]) -> Optional[FoodType]:
    """Food a die selection yields, or None if the selection is inconsistent."""
    foods = DIE_FACE_FOODS[die]
    if as_food is None:
        return foods[0] if len(foods) == 1 else None
    return as_food if die_provides(die, as_food) else None


def validate_select_food_from_supply(
    prompt: SelectFoodFromSupplyPrompt, choice: SelectFoodFromSupplyChoice
) -> Optional[ValidationError]:
    if any(n < 0 for n in choice.food.values()):
        return _error("INVALID_FOOD_COUNT", "Food amounts cannot be negative")
    if sum(choice.food.values()) != prompt.count:
        return _error("INVALID_FOOD_COUNT", f"Expected {prompt.count} food, got {sum(choice.food.values())}")
    for food, count in choice.food.items():
        if count and food not in prompt.allowed_foods:
            return _error("INVALID_FOOD_TYPE", f"{food.value} is not allowed here")
    return None


def validate_select_food_destination(
    prompt: SelectFoodDestinationPrompt, choice: SelectFoodDestinationChoice
) -> Optional[ValidationError]:
    if choice.destination not in prompt.destination_options:
        return _error("INVALID_DESTINATION", f"{choice.destination.value} is not an option")
    return None


def validate_discard_eggs(prompt: DiscardEggsPrompt, choice: DiscardEggsChoice) -> Optional[ValidationError]:
    return _egg_allocation(choice.sources, prompt.eggs_by_eligible_bird, prompt.count, "EXCEEDS_AVAILABLE")


def validate_place_eggs(prompt: PlaceEggsPrompt, choice: PlaceEggsChoice) -> Optional[ValidationError]:
    return _egg_allocation(
        choice.placements, prompt.remaining_capacity_by_bird, prompt.count, "EXCEEDS_CAPACITY"
    )


def validate_select_cards(prompt: SelectCardsPrompt, choice: SelectCardsChoice) -> Optional[ValidationError]:
    return _select_ids(choice.cards, {card.id for card in prompt.eligible_cards}, prompt.count)


def validate_draw_cards(prompt: DrawCardsPrompt, choice: DrawCardsChoice) -> Optional[ValidationError]:
    total = len(choice.tray_cards) + choice.deck_count
    if choice.deck_count < 0:
        return _error("EXCEEDS_DECK", "Deck count cannot be negative")
    if total > prompt.remaining:
        return _error("TOO_MANY_CARDS", f"At most {prompt.remaining} cards may be drawn, got {total}")
    if total == 0:
        return _error("NO_CARDS_DRAWN", "Draw at least one card")
    tray = {card.id for card in prompt.tray_cards}
    for card_id in choice.tray_cards:
        if card_id not in tray:
            return _error("INVALID_TRAY_CARD", f"{card_id} is not in the tray")
    if len(set(choice.tray_cards)) != len(choice.tray_cards):
        return _error("DUPLICATE_TRAY_CARD", "The same tray card was taken twice")
    if choice.deck_count > prompt.deck_available:
        return _error("EXCEEDS_DECK", f"Only {prompt.deck_available} cards left in the deck")
    return None


def validate_select_bonus_cards(
    prompt: SelectBonusCardsPrompt, choice: SelectBonusCardsChoice
) -> Optional[ValidationError]:
    return _select_ids(choice.cards, {card.id for card in prompt.eligible_cards}, prompt.count)


def validate_select_player(prompt: SelectPlayerPrompt, choice: SelectPlayerChoice) -> Optional[ValidationError]:
    if choice.player not in prompt.eligible_players:
        return _error("INVALID_PLAYER", f"{choice.player} is not eligible")
    return None


def validate_repeat_power(prompt: RepeatPowerPrompt, choice: RepeatPowerChoice) -> Optional[ValidationError]:
    if choice.bird not in prompt.eligible_birds:
        return _error("INVALID_BIRD", f"{choice.bird} cannot be repeated")
    return None


def validate_play_bird(prompt: PlayBirdPrompt, choice: PlayBirdChoice) -> Optional[ValidationError]:
    card = next((c for c in prompt.eligible_birds if c.id == choice.bird), None)
    if card is None:
        return _error("INVALID_BIRD", f"{choice.bird} cannot be played")
    if not card.can_live_in(choice.habitat):
        return _error("INVALID_HABITAT", f"{card.name} cannot live in {choice.habitat.value}")
    if choice.habitat not in prompt.egg_cost_by_habitat:
        return _error("HABITAT_FULL", f"No room in {choice.habitat.value}")

    reason = payment_error(card, choice.food_to_spend)
    if reason is not None:
        return _error("INVALID_FOOD_PAYMENT", reason)
    if not _food_held(choice.food_to_spend, prompt):
        return _error("INSUFFICIENT_FOOD", "Cannot spend food you do not have")

    egg_cost = prompt.egg_cost_by_habitat[choice.habitat]
    if any(n < 0 for n in choice.eggs_to_spend.values()) or sum(choice.eggs_to_spend.values()) != egg_cost:
        return _error("INVALID_EGG_PAYMENT", f"Playing into {choice.habitat.value} costs {egg_cost} eggs")
    if prompt.view is not None:
        for bird_id, eggs in choice.eggs_to_spend.items():
            bird = prompt.view.find_bird(bird_id)
            if eggs and (bird is None or bird.eggs < eggs):
                return _error("INVALID_EGG_PAYMENT", f"{bird_id} does not hold {eggs} eggs")
    return None


def validate_discard_food(prompt: DiscardFoodPrompt, choice: DiscardFoodChoice) -> Optional[ValidationError]:
    if any(n < 0 for n in choice.food.values()):
        return _error("NEGATIVE_FOOD", "Food amounts cannot be negative")
    expected = sum(prompt.food_cost.values())
    if sum(choice.food.values()) != expected:
        return _error("INVALID_FOOD_COUNT", f"Discard exactly {expected} food")
    if FoodType.WILD in choice.food and choice.food[FoodType.WILD]:
        return _error("INVALID_FOOD_TYPE", "Cannot discard wild food")
    for food, needed in prompt.food_cost.items():
        if food != FoodType.WILD and choice.food.get(food, 0) < needed:
            return _error("INVALID_FOOD_TYPE", f"{needed} {food.value} required")
    if not _food_held(choice.food, prompt):
        return _error("INSUFFICIENT_FOOD", "Cannot discard food you do not have")
    return None


def validate_select_habitat(prompt: SelectHabitatPrompt, choice: SelectHabitatChoice) -> Optional[ValidationError]:
    if choice.habitat not in prompt.eligible_habitats:
        return _error("INVALID_HABITAT", f"{choice.habitat.value} is not eligible")
    return None


_VALIDATORS: dict[PromptKind, Validator] = {
    PromptKind.STARTING_HAND: validate_starting_hand,
    PromptKind.TURN_ACTION: validate_turn_action,
    PromptKind.ACTIVATE_POWER: validate_activate_power,
    PromptKind.SELECT_FOOD_FROM_FEEDER: validate_select_food_from_feeder,
    PromptKind.SELECT_FOOD_FROM_SUPPLY: validate_select_food_from_supply,
    PromptKind.SELECT_FOOD_DESTINATION: validate_select_food_destination,
    PromptKind.DISCARD_EGGS: validate_discard_eggs,
    PromptKind.PLACE_EGGS: validate_place_eggs,
    PromptKind.SELECT_CARDS: validate_select_cards,
    PromptKind.DRAW_CARDS: validate_draw_cards,
    PromptKind.SELECT_BONUS_CARDS: validate_select_bonus_cards,
    PromptKind.SELECT_PLAYER: validate_select_player,
    PromptKind.REPEAT_POWER: validate_repeat_power,
    PromptKind.PLAY_BIRD: validate_play_bird,
    PromptKind.DISCARD_FOOD: validate_discard_food,
    PromptKind.SELECT_HABITAT: validate_select_habitat,
}

_missing = set(PromptKind) - set(_VALIDATORS)
if _missing:
    raise RuntimeError(f"No validator for prompt kinds: {sorted(k.value for k in _missing)}")


def validate_choice(prompt: Prompt, choice: Choice) -> Optional[ValidationError]:
    """Validate a choice against the prompt it answers.

    The caller guarantees choice.kind == prompt.kind.
    """
    return _VALIDATORS[prompt.kind](prompt, choice)
