"""Game observers.

Observers are called synchronously: on_effect right before an effect is
applied and on_event right before an event is processed. They must not
change the game state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from .effects import Effect, EffectType
from .events import Event, EventType


class GameObserver:
    """Base observer with no-op hooks. Override the ones you need."""

    def on_effect(self, effect: Effect) -> None:
        pass

    def on_event(self, event: Event) -> None:
        pass


@dataclass
class EventLog(GameObserver):
    """Records every effect and event in the order the engine saw them.

    Attributes:
        effects: Effects in application order.
        events: Events in processing order.
        entries: Both streams interleaved.
    """

    effects: list[Effect] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)
    entries: list[Union[Effect, Event]] = field(default_factory=list)

    def on_effect(self, effect: Effect) -> None:
        self.effects.append(effect)
        self.entries.append(effect)

    def on_event(self, event: Event) -> None:
        self.events.append(event)
        self.entries.append(event)

    def effects_of(self, effect_type: EffectType) -> list[Effect]:
        return [effect for effect in self.effects if effect.effect_type == effect_type]

    def events_of(self, event_type: EventType) -> list[Event]:
        return [event for event in self.events if event.event_type == event_type]

    def signature(self) -> list[str]:
        """Printable form of the log, for comparing two runs."""
        return [repr(entry) for entry in self.entries]

    def clear(self) -> None:
        self.effects.clear()
        self.events.clear()
        self.entries.clear()
