"""Handler protocol: how power and turn-action handlers talk to the engine.

Handlers are generator functions. They read the state from their context
and yield requests:

- an Effect: applied immediately; the same effect comes back with its
  result fields filled in.
- a PromptRequest: the prompt goes to its player; the validated choice
  comes back.
- an EventYield: the event is processed after the handler returns.
- a DeferredContinuation: queued to run at the end of the current turn.

The helpers below wrap each request so handlers read top to bottom::

    choice = yield from prompt(SelectHabitatPrompt(...))
    yield from effect(MoveBirdEffect(...))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Generator, Optional, TypeVar

from .effects import Effect
from .events import Event
from .prompts import Prompt

if TYPE_CHECKING:
    from core.board import BirdInstance
    from core.cards import PowerSpec
    from core.game_state import GameState
    from core.player import PlayerState
    from .config import EngineConfig

E = TypeVar("E", bound=Effect)

HandlerGenerator = Generator[Any, Any, None]


@dataclass
class PromptRequest:
    prompt: Prompt


@dataclass
class EventYield:
    event: Event


@dataclass
class DeferredContinuation:
    """Handler work to run at the end of the current turn.

    Attributes:
        player_id: Player the continuation belongs to.
        run: Generator function called with the handler context.
        context: Context passed to run.
        description: Label used in logs.
    """

    player_id: str
    run: Callable[[HandlerContext], HandlerGenerator]
    context: HandlerContext
    description: str = ""


@dataclass
class HandlerContext:
    """What a turn-action handler sees.

    Attributes:
        state: Game state (read only; change it through effects).
        player_id: Player the handler acts for.
        config: Engine configuration.
        depth: Nesting depth of power executions.
    """

    state: GameState
    player_id: str
    config: EngineConfig
    depth: int = 0

    @property
    def player(self) -> PlayerState:
        return self.state.get_player(self.player_id)


@dataclass
class PowerContext(HandlerContext):
    """What a bird power handler sees.

    Attributes:
        bird: The bird whose power runs.
        power: The bird's power definition.
        trigger_event: Event that triggered a pink power, if any.
    """

    bird: Optional[BirdInstance] = None
    power: Optional[PowerSpec] = None
    trigger_event: Optional[Event] = None

    @property
    def handler_id(self) -> str:
        return self.power.handler_id if self.power else ""

    def param(self, name: str, default: Any = None) -> Any:
        return self.power.param(name, default) if self.power else default


# =============================================================================
# Yield helpers
# =============================================================================


def effect(item: E) -> Generator[Any, Any, E]:
    """Apply an effect; returns it with result fields filled in."""
    result = yield item
    return result


def prompt(item: Prompt) -> Generator[Any, Any, Any]:
    """Ask a player; returns the validated choice."""
    choice = yield PromptRequest(item)
    return choice


def event(item: Event) -> Generator[Any, Any, None]:
    yield EventYield(item)


def defer_to_end_of_turn(
    ctx: HandlerContext,
    run: Callable[[HandlerContext], HandlerGenerator],
    description: str = "",
) -> Generator[Any, Any, None]:
    yield DeferredContinuation(player_id=ctx.player_id, run=run, context=ctx, description=description)
