"""Random agent that reads prompt constraints and always answers validly.

Each agent owns a seeded random source, independent of the game's, so a
simulation is reproducible from the game seed and the agent seeds.
"""

from __future__ import annotations

from collections import Counter
from typing import Callable

from core.cards import BirdCard
from core.constants import DIE_FACE_FOODS, FoodCostMode, FoodType, FOOD_TYPES
from core.rng import RandomSource, SeededRandom
from engine.prompts import (
    ActivatePowerChoice,
    ActivatePowerPrompt,
    Choice,
    DieSelection,
    DiscardEggsChoice,
    DiscardEggsPrompt,
    DiscardFoodChoice,
    DiscardFoodPrompt,
    DrawCardsChoice,
    DrawCardsPrompt,
    PlaceEggsChoice,
    PlaceEggsPrompt,
    PlayBirdChoice,
    PlayBirdPrompt,
    PlayerView,
    Prompt,
    PromptKind,
    RepeatPowerChoice,
    RepeatPowerPrompt,
    SelectBonusCardsChoice,
    SelectBonusCardsPrompt,
    SelectCardsChoice,
    SelectCardsPrompt,
    SelectFoodDestinationChoice,
    SelectFoodDestinationPrompt,
    SelectFoodFromFeederChoice,
    SelectFoodFromFeederPrompt,
    SelectFoodFromSupplyChoice,
    SelectFoodFromSupplyPrompt,
    SelectHabitatChoice,
    SelectHabitatPrompt,
    SelectPlayerChoice,
    SelectPlayerPrompt,
    StartingHandChoice,
    StartingHandPrompt,
    TurnActionChoice,
    TurnActionPrompt,
)

from .base import PlayerAgent


def _tokens(food: dict[FoodType, int]) -> list[FoodType]:
    """Expand a food dict into one entry per token, in food-type order."""
    return [item for item in FOOD_TYPES for _ in range(food.get(item, 0))]


class RandomAgent(PlayerAgent):
    """Makes uniformly random choices among the valid ones.

    Example:
        >>> agent = RandomAgent("p1", seed=42)
        >>> choice = asyncio.run(agent.choose_turn_action(prompt))
    """

    def __init__(self, player_id: str, seed: int = 0, rng: RandomSource | None = None):
        super().__init__(player_id)
        self.seed = seed
        self.rng = rng or SeededRandom(seed)
        self._option_handlers: dict[PromptKind, Callable[[Prompt], Choice]] = {
            PromptKind.ACTIVATE_POWER: self._activate_power,
            PromptKind.SELECT_FOOD_FROM_FEEDER: self._select_food_from_feeder,
            PromptKind.SELECT_FOOD_FROM_SUPPLY: self._select_food_from_supply,
            PromptKind.SELECT_FOOD_DESTINATION: self._select_food_destination,
            PromptKind.DISCARD_EGGS: self._discard_eggs,
            PromptKind.PLACE_EGGS: self._place_eggs,
            PromptKind.SELECT_CARDS: self._select_cards,
            PromptKind.DRAW_CARDS: self._draw_cards,
            PromptKind.SELECT_BONUS_CARDS: self._select_bonus_cards,
            PromptKind.SELECT_PLAYER: self._select_player,
            PromptKind.REPEAT_POWER: self._repeat_power,
            PromptKind.PLAY_BIRD: self._play_bird,
            PromptKind.DISCARD_FOOD: self._discard_food,
            PromptKind.SELECT_HABITAT: self._select_habitat,
        }

    # -------------------------------------------------------------------------
    # Agent interface
    # -------------------------------------------------------------------------

    async def choose_starting_hand(self, prompt: StartingHandPrompt) -> StartingHandChoice:
        food = _tokens(prompt.view.food) if prompt.view else []
        most = min(len(prompt.eligible_birds), len(food))
        kept = self.rng.sample(prompt.eligible_birds, self.rng.randint(0, most + 1))
        bonus = self.rng.choice(prompt.eligible_bonus_cards)
        return StartingHandChoice(
            prompt_id=prompt.prompt_id,
            birds=tuple(card.id for card in kept),
            bonus_card=bonus.id,
            food_to_discard=self._food_to_discard(food, kept),
        )

    async def choose_turn_action(self, prompt: TurnActionPrompt) -> TurnActionChoice:
        action = self.rng.choice(prompt.eligible_actions)
        reward = prompt.rewards_by_action.get(action)
        take_bonus = reward is not None and reward.bonus_available and self.rng.randint(0, 2) == 1
        return TurnActionChoice(prompt_id=prompt.prompt_id, action=action, take_bonus=take_bonus)

    async def choose_option(self, prompt: Prompt) -> Choice:
        handler = self._option_handlers.get(prompt.kind)
        if handler is None:
            raise ValueError(f"RandomAgent cannot answer {prompt.kind.value} prompts")
        return handler(prompt)

    # -------------------------------------------------------------------------
    # Payment helpers
    # -------------------------------------------------------------------------

    def _food_to_discard(self, food: list[FoodType], kept: list[BirdCard]) -> dict[FoodType, int]:
        """One food per kept bird, preferring food the kept birds do not eat."""
        needed = set()
        for card in kept:
            if FoodType.WILD in card.food_cost:
                needed.update(FOOD_TYPES)
            needed.update(card.food_cost)
        spare = self.rng.shuffle([item for item in food if item not in needed])
        wanted = self.rng.shuffle([item for item in food if item in needed])
        return dict(Counter((spare + wanted)[: len(kept)]))

    def _food_payment(self, card: BirdCard, held: dict[FoodType, int]) -> dict[FoodType, int]:
        if card.food_cost_mode == FoodCostMode.NONE or not card.food_cost:
            return {}
        if card.food_cost_mode == FoodCostMode.OR:
            options = [item for item in card.food_cost if item != FoodType.WILD and held.get(item, 0) > 0]
            if FoodType.WILD in card.food_cost:
                options = [item for item in FOOD_TYPES if held.get(item, 0) > 0]
            return {self.rng.choice(options): 1} if options else {}

        cost = Counter(card.food_cost)
        wild = cost.pop(FoodType.WILD, 0)
        payment = dict(cost)
        left = Counter(held)
        left.subtract(cost)
        pool = self.rng.shuffle(_tokens({item: count for item, count in left.items() if count > 0}))
        for item in pool[:wild]:
            payment[item] = payment.get(item, 0) + 1
        return payment

    def _spread(self, count: int, limits: dict[str, int]) -> dict[str, int]:
        """Split count over birds in random order, filling each up to its limit."""
        allocation = {}
        remaining = count
        for bird_id in self.rng.shuffle([bird_id for bird_id, limit in limits.items() if limit > 0]):
            if remaining <= 0:
                break
            amount = min(remaining, limits[bird_id])
            allocation[bird_id] = amount
            remaining -= amount
        return allocation

    @staticmethod
    def _eggs_by_bird(view: PlayerView | None) -> dict[str, int]:
        if view is None:
            return {}
        return {bird.instance_id: bird.eggs for row in view.board.values() for bird in row if bird.eggs}

    # -------------------------------------------------------------------------
    # Option prompts
    # -------------------------------------------------------------------------

    def _activate_power(self, prompt: ActivatePowerPrompt) -> ActivatePowerChoice:
        return ActivatePowerChoice(prompt_id=prompt.prompt_id, activate=True)

    def _select_food_from_feeder(self, prompt: SelectFoodFromFeederPrompt) -> SelectFoodFromFeederChoice:
        dice = [face for face, count in prompt.available_dice.items() for _ in range(count)]
        if prompt.can_reroll and (not dice or self.rng.randint(0, 2) == 1):
            return SelectFoodFromFeederChoice(prompt_id=prompt.prompt_id, reroll=True)
        selections = []
        for face in self.rng.sample(dice, min(prompt.count, len(dice))):
            foods = [
                item
                for item in DIE_FACE_FOODS[face]
                if prompt.allowed_foods is None or item in prompt.allowed_foods
            ]
            as_food = self.rng.choice(foods) if len(DIE_FACE_FOODS[face]) > 1 else None
            selections.append(DieSelection(die=face, as_food=as_food))
        return SelectFoodFromFeederChoice(prompt_id=prompt.prompt_id, dice=tuple(selections))

    def _select_food_from_supply(self, prompt: SelectFoodFromSupplyPrompt) -> SelectFoodFromSupplyChoice:
        picks = Counter(self.rng.choice(prompt.allowed_foods) for _ in range(prompt.count))
        return SelectFoodFromSupplyChoice(prompt_id=prompt.prompt_id, food=dict(picks))

    def _select_food_destination(self, prompt: SelectFoodDestinationPrompt) -> SelectFoodDestinationChoice:
        return SelectFoodDestinationChoice(
            prompt_id=prompt.prompt_id,
            destination=self.rng.choice(prompt.destination_options),
        )

    def _discard_eggs(self, prompt: DiscardEggsPrompt) -> DiscardEggsChoice:
        return DiscardEggsChoice(
            prompt_id=prompt.prompt_id,
            sources=self._spread(prompt.count, prompt.eggs_by_eligible_bird),
        )

    def _place_eggs(self, prompt: PlaceEggsPrompt) -> PlaceEggsChoice:
        return PlaceEggsChoice(
            prompt_id=prompt.prompt_id,
            placements=self._spread(prompt.count, prompt.remaining_capacity_by_bird),
        )

    def _select_cards(self, prompt: SelectCardsPrompt) -> SelectCardsChoice:
        cards = self.rng.sample(prompt.eligible_cards, prompt.count)
        return SelectCardsChoice(prompt_id=prompt.prompt_id, cards=tuple(card.id for card in cards))

    def _draw_cards(self, prompt: DrawCardsPrompt) -> DrawCardsChoice:
        most_from_tray = min(prompt.remaining, len(prompt.tray_cards))
        from_tray = self.rng.randint(0, most_from_tray + 1)
        from_deck = min(prompt.remaining - from_tray, prompt.deck_available)
        if from_tray + from_deck == 0:
            from_tray = most_from_tray
        tray = self.rng.sample(prompt.tray_cards, from_tray)
        return DrawCardsChoice(
            prompt_id=prompt.prompt_id,
            tray_cards=tuple(card.id for card in tray),
            deck_count=from_deck,
        )

    def _select_bonus_cards(self, prompt: SelectBonusCardsPrompt) -> SelectBonusCardsChoice:
        cards = self.rng.sample(prompt.eligible_cards, prompt.count)
        return SelectBonusCardsChoice(prompt_id=prompt.prompt_id, cards=tuple(card.id for card in cards))

    def _select_player(self, prompt: SelectPlayerPrompt) -> SelectPlayerChoice:
        return SelectPlayerChoice(prompt_id=prompt.prompt_id, player=self.rng.choice(prompt.eligible_players))

    def _repeat_power(self, prompt: RepeatPowerPrompt) -> RepeatPowerChoice:
        return RepeatPowerChoice(prompt_id=prompt.prompt_id, bird=self.rng.choice(prompt.eligible_birds))

    def _play_bird(self, prompt: PlayBirdPrompt) -> PlayBirdChoice:
        eggs = self._eggs_by_bird(prompt.view)
        total_eggs = sum(eggs.values())
        options = [
            (card, habitat)
            for card in prompt.eligible_birds
            for habitat in card.habitats
            if habitat in prompt.egg_cost_by_habitat and prompt.egg_cost_by_habitat[habitat] <= total_eggs
        ]
        card, habitat = self.rng.choice(options)
        held = prompt.view.food if prompt.view else {}
        return PlayBirdChoice(
            prompt_id=prompt.prompt_id,
            bird=card.id,
            habitat=habitat,
            food_to_spend=self._food_payment(card, held),
            eggs_to_spend=self._spread(prompt.egg_cost_by_habitat[habitat], eggs),
        )

    def _discard_food(self, prompt: DiscardFoodPrompt) -> DiscardFoodChoice:
        held = Counter(prompt.view.food if prompt.view else {})
        food = {item: count for item, count in prompt.food_cost.items() if item != FoodType.WILD and count}
        held.subtract(food)
        pool = self.rng.shuffle(_tokens({item: count for item, count in held.items() if count > 0}))
        for item in pool[: prompt.food_cost.get(FoodType.WILD, 0)]:
            food[item] = food.get(item, 0) + 1
        return DiscardFoodChoice(prompt_id=prompt.prompt_id, food=food)

    def _select_habitat(self, prompt: SelectHabitatPrompt) -> SelectHabitatChoice:
        return SelectHabitatChoice(prompt_id=prompt.prompt_id, habitat=self.rng.choice(prompt.eligible_habitats))
