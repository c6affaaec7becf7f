"""Handler registry.

Maps power handler ids, turn actions and pink trigger rules to their
implementations. The registry is an explicit value: the default one is
built by build_default_registry() and handed to the engine, and tests may
build their own.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterable, Optional

from core.constants import TurnActionKind
from core.errors import ConfigurationError, UnknownHandlerError

from .events import Event, EventType
from .power import HandlerContext, HandlerGenerator, PowerContext

if TYPE_CHECKING:
    from core.board import BirdInstance
    from core.cards import PowerSpec

PowerHandler = Callable[[PowerContext], HandlerGenerator]
TurnActionHandler = Callable[[HandlerContext, bool], HandlerGenerator]
TriggerCondition = Callable[[Event, "BirdInstance", "PowerSpec"], bool]


def always(event: Event, bird: BirdInstance, power: PowerSpec) -> bool:
    return True


@dataclass(frozen=True)
class PinkTrigger:
    """When a once-between-turns power is offered.

    Attributes:
        event_type: Event that may trigger the power.
        condition: Extra check against the event and the bird's parameters.
    """

    event_type: EventType
    condition: TriggerCondition = always

    def matches(self, event: Event, bird: BirdInstance, power: PowerSpec) -> bool:
        return event.event_type == self.event_type and self.condition(event, bird, power)


class HandlerRegistry:
    """Lookup tables for every handler the engine can run."""

    def __init__(self) -> None:
        self._powers: dict[str, PowerHandler] = {}
        self._turn_actions: dict[TurnActionKind, TurnActionHandler] = {}
        self._pink_triggers: dict[str, PinkTrigger] = {}

    def register_power(
        self,
        handler_id: str,
        handler: PowerHandler,
        pink_trigger: Optional[PinkTrigger] = None,
    ) -> None:
        """Register a power handler (and its trigger rule for pink powers).

        Raises:
            ConfigurationError: If the handler id is already registered.
        """
        if handler_id in self._powers:
            raise ConfigurationError(f"Power handler already registered: {handler_id}")
        self._powers[handler_id] = handler
        if pink_trigger is not None:
            self._pink_triggers[handler_id] = pink_trigger

    def register_turn_action(self, action: TurnActionKind, handler: TurnActionHandler) -> None:
        if action in self._turn_actions:
            raise ConfigurationError(f"Turn action already registered: {action.value}")
        self._turn_actions[action] = handler

    def get_power(self, handler_id: str) -> PowerHandler:
        try:
            return self._powers[handler_id]
        except KeyError:
            raise UnknownHandlerError(handler_id) from None

    def get_turn_action(self, action: TurnActionKind) -> TurnActionHandler:
        try:
            return self._turn_actions[action]
        except KeyError:
            raise ConfigurationError(f"No handler for turn action {action.value}") from None

    def get_pink_trigger(self, handler_id: str) -> Optional[PinkTrigger]:
        return self._pink_triggers.get(handler_id)

    def has_power(self, handler_id: str) -> bool:
        return handler_id in self._powers

    def power_ids(self) -> list[str]:
        return sorted(self._powers)

    def check_handlers(self, handler_ids: Iterable[str]) -> None:
        """Fail fast when content refers to handlers that do not exist.

        Raises:
            UnknownHandlerError: For the first unknown id.
        """
        for handler_id in handler_ids:
            if handler_id not in self._powers:
                raise UnknownHandlerError(handler_id)


def build_default_registry() -> HandlerRegistry:
    """Registry with every built-in turn action and power handler."""
    from .handlers import register_all

    registry = HandlerRegistry()
    register_all(registry)
    return registry
