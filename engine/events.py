"""Events: notifications that something happened.

Events never change state. The engine processes them after the handler
that produced them finishes; processing may activate brown, white or pink
bird powers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional

from core.constants import FoodType, Habitat


class EventType(Enum):
    """All event kinds."""

    GAME_STARTED = "game_started"
    ROUND_STARTED = "round_started"
    ROUND_ENDED = "round_ended"
    TURN_STARTED = "turn_started"
    TURN_ENDED = "turn_ended"
    HABITAT_ACTIVATED = "habitat_activated"
    FOOD_GAINED_FROM_HABITAT_ACTIVATION = "food_gained_from_habitat_activation"
    EGGS_LAID_FROM_HABITAT_ACTIVATION = "eggs_laid_from_habitat_activation"
    BIRD_PLAYED = "bird_played"
    PREDATOR_POWER_RESOLVED = "predator_power_resolved"
    PLAYER_FORFEITED = "player_forfeited"
    GAME_ENDED = "game_ended"


@dataclass
class Event:
    """Base class for events."""

    event_type: ClassVar[EventType]


@dataclass
class GameStartedEvent(Event):
    event_type: ClassVar[EventType] = EventType.GAME_STARTED

    player_ids: list[str]


@dataclass
class RoundStartedEvent(Event):
    event_type: ClassVar[EventType] = EventType.ROUND_STARTED

    round: int


@dataclass
class RoundEndedEvent(Event):
    event_type: ClassVar[EventType] = EventType.ROUND_ENDED

    round: int


@dataclass
class TurnStartedEvent(Event):
    event_type: ClassVar[EventType] = EventType.TURN_STARTED

    player_id: str
    round: int
    turn: int


@dataclass
class TurnEndedEvent(Event):
    event_type: ClassVar[EventType] = EventType.TURN_ENDED

    player_id: str
    round: int
    turn: int


@dataclass
class HabitatActivatedEvent(Event):
    """A habitat row was activated by a turn action.

    Attributes:
        brown_birds: Bird instance ids with brown powers, right to left.
    """

    event_type: ClassVar[EventType] = EventType.HABITAT_ACTIVATED

    player_id: str
    habitat: Habitat
    brown_birds: list[str] = field(default_factory=list)


@dataclass
class FoodGainedFromHabitatActivationEvent(Event):
    event_type: ClassVar[EventType] = EventType.FOOD_GAINED_FROM_HABITAT_ACTIVATION

    player_id: str
    food: dict[FoodType, int]


@dataclass
class EggsLaidFromHabitatActivationEvent(Event):
    event_type: ClassVar[EventType] = EventType.EGGS_LAID_FROM_HABITAT_ACTIVATION

    player_id: str
    count: int


@dataclass
class BirdPlayedEvent(Event):
    event_type: ClassVar[EventType] = EventType.BIRD_PLAYED

    player_id: str
    bird_instance_id: str
    card_id: str
    habitat: Habitat


@dataclass
class PredatorPowerResolvedEvent(Event):
    event_type: ClassVar[EventType] = EventType.PREDATOR_POWER_RESOLVED

    player_id: str
    bird_instance_id: str
    success: bool


@dataclass
class PlayerForfeitedEvent(Event):
    event_type: ClassVar[EventType] = EventType.PLAYER_FORFEITED

    player_id: str
    reason: str = ""


@dataclass
class GameEndedEvent(Event):
    event_type: ClassVar[EventType] = EventType.GAME_ENDED

    winner_id: Optional[str]
    scores: dict[str, int]
