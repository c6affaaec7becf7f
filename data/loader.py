"""Card content loader for the Wingsim engine.

Loads and validates bird cards, bonus cards and the player board from JSON
files, producing a CardRegistry ready for use by the game engine.
"""

from __future__ import annotations

import json
from collections import Counter
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from core.cards import (
    BirdCard,
    BonusCard,
    BonusScoringTier,
    BonusTrade,
    HabitatRewards,
    PlayerBoardConfig,
    PowerSpec,
)
from core.constants import (
    BonusScoringType,
    FoodCostMode,
    FoodType,
    Habitat,
    NestType,
    PowerTrigger,
    Resource,
    HABITAT_SIZE,
)
from core.errors import ConfigurationError

if TYPE_CHECKING:
    from engine.registry import HandlerRegistry


def resource_path(relative_path: str) -> Path:
    """Get the absolute path of a file bundled in the data/ directory."""
    return Path(__file__).parent / relative_path


class ContentLoadError(ConfigurationError):
    """Raised when card content cannot be read or fails validation."""


class CardRegistry:
    """Immutable lookup of the cards and board a game is played with.

    Cards are referenced by id; the registry hands out the shared frozen
    definitions, never copies.
    """

    def __init__(
        self,
        birds: list[BirdCard],
        bonus_cards: list[BonusCard],
        player_board: Optional[PlayerBoardConfig] = None,
    ):
        self._birds = {card.id: card for card in birds}
        self._bonus_cards = {card.id: card for card in bonus_cards}
        self._player_board = player_board or PlayerBoardConfig.standard()

    def bird(self, card_id: str) -> BirdCard:
        """Get a bird card by id.

        Raises:
            KeyError: If no bird has that id.
        """
        try:
            return self._birds[card_id]
        except KeyError:
            raise KeyError(f"Bird card {card_id} not found in registry") from None

    def bonus_card(self, card_id: str) -> BonusCard:
        """Get a bonus card by id.

        Raises:
            KeyError: If no bonus card has that id.
        """
        try:
            return self._bonus_cards[card_id]
        except KeyError:
            raise KeyError(f"Bonus card {card_id} not found in registry") from None

    def birds(self) -> list[BirdCard]:
        return list(self._birds.values())

    def bonus_cards(self) -> list[BonusCard]:
        return list(self._bonus_cards.values())

    def bird_ids(self) -> list[str]:
        return list(self._birds)

    def bonus_card_ids(self) -> list[str]:
        return list(self._bonus_cards)

    @property
    def player_board(self) -> PlayerBoardConfig:
        return self._player_board

    def handler_ids(self) -> set[str]:
        """Handler ids referenced by bird powers."""
        return {card.power.handler_id for card in self._birds.values() if card.power is not None}

    def __repr__(self) -> str:
        return f"CardRegistry(birds={len(self._birds)}, bonus_cards={len(self._bonus_cards)})"


class CardLoader:
    """Loads and validates card content from JSON files."""

    def __init__(self, handlers: Optional[HandlerRegistry] = None):
        """Initialize the loader.

        Args:
            handlers: When given, every power handler id in the content must
                be registered here.
        """
        self.handlers = handlers

    def load_from_file(self, file_path: str | Path) -> CardRegistry:
        """Load content from a JSON file.

        Args:
            file_path: Path to the JSON content file.

        Returns:
            A CardRegistry with the loaded cards.

        Raises:
            ContentLoadError: If the file cannot be read, parsed or validated.
        """
        path = Path(file_path)

        if not path.exists():
            raise ContentLoadError(f"Content file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ContentLoadError(f"Invalid JSON in content file: {e}") from e
        except OSError as e:
            raise ContentLoadError(f"Error reading content file: {e}") from e

        return self.load_from_dict(data)

    def load_from_dict(self, data: dict[str, Any]) -> CardRegistry:
        """Load content from a dictionary.

        Args:
            data: Dictionary with 'birds' and 'bonus_cards' lists and an
                optional 'player_board'.

        Raises:
            ContentLoadError: If validation fails.
        """
        self._validate_structure(data)

        birds = [self._create_bird(entry) for entry in data["birds"]]
        bonus_cards = [self._create_bonus_card(entry) for entry in data["bonus_cards"]]
        self._check_unique("bird", [card.id for card in birds])
        self._check_unique("bonus card", [card.id for card in bonus_cards])

        board = None
        if data.get("player_board") is not None:
            board = self._create_player_board(data["player_board"])

        registry = CardRegistry(birds, bonus_cards, board)
        self._validate_handlers(registry)
        return registry

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def _validate_structure(self, data: dict[str, Any]) -> None:
        if not isinstance(data, dict):
            raise ContentLoadError("Content must be a dictionary")

        for key in ("birds", "bonus_cards"):
            if key not in data:
                raise ContentLoadError(f"Content missing '{key}' key")
            if not isinstance(data[key], list):
                raise ContentLoadError(f"'{key}' must be a list")

        if len(data["birds"]) == 0:
            raise ContentLoadError("Content must have at least one bird")

    @staticmethod
    def _check_unique(kind: str, ids: list[str]) -> None:
        duplicates = sorted(card_id for card_id, count in Counter(ids).items() if count > 1)
        if duplicates:
            raise ContentLoadError(f"Duplicate {kind} id: {', '.join(duplicates)}")

    def _validate_handlers(self, registry: CardRegistry) -> None:
        if self.handlers is None:
            return
        unknown = sorted(hid for hid in registry.handler_ids() if not self.handlers.has_power(hid))
        if unknown:
            raise ContentLoadError(f"Unknown power handler ids: {', '.join(unknown)}")

    # -------------------------------------------------------------------------
    # Parsing
    # -------------------------------------------------------------------------

    @staticmethod
    def _enum(enum_type, value: Any, where: str):
        try:
            return enum_type(value)
        except ValueError:
            valid = ", ".join(member.value for member in enum_type)
            raise ContentLoadError(f"Invalid {enum_type.__name__} '{value}' in {where}. Valid: {valid}") from None

    @staticmethod
    def _require(entry: dict[str, Any], fields: list[str], where: str) -> None:
        for field in fields:
            if field not in entry:
                raise ContentLoadError(f"{where} missing required field: {field}")

    def _create_power(self, data: Optional[dict[str, Any]], where: str) -> Optional[PowerSpec]:
        if data is None:
            return None
        self._require(data, ["handler", "trigger"], where)
        params = data.get("params", {})
        if not isinstance(params, dict):
            raise ContentLoadError(f"Power params of {where} must be a dictionary")
        return PowerSpec(
            handler_id=data["handler"],
            trigger=self._enum(PowerTrigger, data["trigger"], where),
            params=dict(params),
            text=data.get("text", ""),
        )

    def _create_bird(self, data: dict[str, Any]) -> BirdCard:
        """Create a BirdCard from a bird dictionary."""
        required_fields = ["id", "name", "habitats", "victory_points", "nest_type", "egg_capacity", "food_cost"]
        self._require(data, required_fields, f"Bird {data.get('id', '?')}")

        card_id = data["id"]
        where = f"bird {card_id}"
        habitats = tuple(self._enum(Habitat, value, where) for value in data["habitats"])
        if not habitats:
            raise ContentLoadError(f"Bird {card_id} must live in at least one habitat")

        food_cost = tuple(self._enum(FoodType, value, where) for value in data["food_cost"])
        default_mode = FoodCostMode.AND.value if food_cost else FoodCostMode.NONE.value
        mode = self._enum(FoodCostMode, data.get("food_cost_mode", default_mode), where)

        egg_capacity = data["egg_capacity"]
        if not isinstance(egg_capacity, int) or egg_capacity < 0:
            raise ContentLoadError(f"Invalid egg capacity for {where}: {egg_capacity}")

        return BirdCard(
            id=card_id,
            name=data["name"],
            habitats=habitats,
            power=self._create_power(data.get("power"), where),
            victory_points=data["victory_points"],
            nest_type=self._enum(NestType, data["nest_type"], where),
            egg_capacity=egg_capacity,
            food_cost=food_cost,
            food_cost_mode=mode,
            wingspan_cm=data.get("wingspan_cm", 0),
            bonus_cards=tuple(data.get("bonus_cards", ())),
        )

    def _create_bonus_card(self, data: dict[str, Any]) -> BonusCard:
        """Create a BonusCard from a bonus card dictionary."""
        self._require(data, ["id", "name", "scoring_type"], f"Bonus card {data.get('id', '?')}")
        where = f"bonus card {data['id']}"
        tiers = tuple(
            BonusScoringTier(min_count=tier["min_count"], points=tier["points"]) for tier in data.get("tiers", ())
        )
        return BonusCard(
            id=data["id"],
            name=data["name"],
            condition=data.get("condition", ""),
            scoring_type=self._enum(BonusScoringType, data["scoring_type"], where),
            tiers=tiers,
            points_per_bird=data.get("points_per_bird", 0),
        )

    def _create_habitat_rewards(self, data: dict[str, Any], where: str) -> HabitatRewards:
        self._require(data, ["base"], where)
        bonus = []
        for trade in data.get("bonus", [None] * (HABITAT_SIZE + 1)):
            if trade is None:
                bonus.append(None)
            else:
                bonus.append(BonusTrade(pay=self._enum(Resource, trade["pay"], where), gain=trade.get("gain", 1)))
        try:
            return HabitatRewards(base=tuple(data["base"]), bonus=tuple(bonus))
        except ValueError as e:
            raise ContentLoadError(f"Invalid {where}: {e}") from e

    def _create_player_board(self, data: dict[str, Any]) -> PlayerBoardConfig:
        self._require(data, ["forest", "grassland", "wetland", "play_bird_costs"], "Player board")
        costs = tuple(data["play_bird_costs"])
        if len(costs) != HABITAT_SIZE:
            raise ContentLoadError(f"Player board needs {HABITAT_SIZE} play-bird egg costs, got {len(costs)}")
        return PlayerBoardConfig(
            forest=self._create_habitat_rewards(data["forest"], "forest rewards"),
            grassland=self._create_habitat_rewards(data["grassland"], "grassland rewards"),
            wetland=self._create_habitat_rewards(data["wetland"], "wetland rewards"),
            play_bird_costs=costs,
        )


def load_content(file_path: str | Path, handlers: Optional[HandlerRegistry] = None) -> CardRegistry:
    """Convenience function to load content from a file.

    Args:
        file_path: Path to the JSON content file.
        handlers: Registry used to check power handler ids.
    """
    return CardLoader(handlers=handlers).load_from_file(file_path)


def load_default_content(handlers: Optional[HandlerRegistry] = None) -> CardRegistry:
    """Load the bundled base game content.

    Raises:
        ContentLoadError: If the bundled file is missing or invalid.
    """
    return load_content(resource_path("base_game.json"), handlers=handlers)


def get_content_stats(registry: CardRegistry) -> dict[str, Any]:
    """Get statistics about a content registry.

    Returns:
        Dictionary with card counts by habitat, power colour and handler.
    """
    by_habitat = {habitat.value: 0 for habitat in Habitat}
    by_trigger = {trigger.value: 0 for trigger in PowerTrigger}
    handlers: Counter[str] = Counter()
    vanilla = 0
    for card in registry.birds():
        for habitat in card.habitats:
            by_habitat[habitat.value] += 1
        if card.power is None:
            vanilla += 1
        else:
            by_trigger[card.power.trigger.value] += 1
            handlers[card.power.handler_id] += 1

    return {
        "num_birds": len(registry.birds()),
        "num_bonus_cards": len(registry.bonus_cards()),
        "num_vanilla_birds": vanilla,
        "birds_by_habitat": by_habitat,
        "birds_by_trigger": by_trigger,
        "birds_by_handler": dict(handlers),
    }
