"""Action processor: drives handler generators.

The processor runs one handler generator to completion. Effects are
applied immediately through the engine and sent back to the handler,
prompts go through the decision broker, events are collected for the
engine to process afterwards and deferred continuations are queued for the
end of the turn.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from core.board import BirdInstance
from core.constants import CardSource, SkipReason
from core.errors import AgentForfeitError, ProtocolViolationError
from core.logging_config import get_logger

from .effects import ActivatePowerEffect, DrawBonusCardsEffect, DiscardCardsEffect, Effect
from .events import Event
from .power import DeferredContinuation, EventYield, HandlerGenerator, PowerContext, PromptRequest

if TYPE_CHECKING:
    from .game_engine import GameEngine

logger = get_logger(__name__)


@dataclass
class RunResult:
    """Outcome of running one handler.

    Attributes:
        events: Events the handler emitted, in order.
        effects: Effects applied while the handler ran.
        aborted: Whether the handler was stopped because a player other
            than the active player forfeited while answering a prompt.
    """

    events: list[Event] = field(default_factory=list)
    effects: list[Effect] = field(default_factory=list)
    aborted: bool = False

    def activated(self, bird_instance_id: str) -> bool:
        """Check whether the run recorded an activation of the given bird."""
        return any(
            isinstance(item, ActivatePowerEffect)
            and item.bird_instance_id == bird_instance_id
            and item.activated
            for item in self.effects
        )


class ActionProcessor:
    """Runs turn-action, power and continuation generators for an engine."""

    def __init__(self, engine: GameEngine):
        self.engine = engine

    async def run(
        self,
        gen: HandlerGenerator,
        player_id: str,
        depth: int = 0,
        trigger: str = "",
        bird_instance_id: Optional[str] = None,
    ) -> RunResult:
        """Drive a handler generator until it finishes.

        Args:
            gen: The handler generator.
            player_id: Player the handler acts for.
            depth: Power nesting depth, passed on to effects.
            trigger: Label put in the context of prompts.
            bird_instance_id: Bird whose power runs, if any.

        Raises:
            AgentForfeitError: If the active player forfeits.
            ProtocolViolationError: If the handler yields something unknown.
        """
        result = RunResult()
        reply: Any = None
        while True:
            try:
                item = gen.send(reply)
            except StopIteration:
                return result
            reply = None

            if isinstance(item, Effect):
                await self.engine.apply_effect(item, depth)
                result.effects.append(item)
                reply = item
            elif isinstance(item, PromptRequest):
                try:
                    reply = await self.engine.broker.ask(item.prompt, trigger, bird_instance_id)
                except AgentForfeitError as exc:
                    gen.close()
                    if exc.player_id == self.engine.state.active_player.player_id:
                        raise
                    logger.info("%s forfeited during %s; the power stops", exc.player_id, trigger)
                    await self.engine.forfeit_player(exc.player_id, str(exc))
                    result.aborted = True
                    return result
            elif isinstance(item, EventYield):
                result.events.append(item.event)
            elif isinstance(item, DeferredContinuation):
                logger.debug("Deferring %s for %s", item.description or "continuation", item.player_id)
                self.engine.state.end_of_turn_continuations.append(item)
            else:
                gen.close()
                raise ProtocolViolationError(
                    f"Handler {trigger or player_id} yielded unsupported {type(item).__name__}"
                )

    async def execute_power(
        self,
        bird: BirdInstance,
        owner_id: str,
        depth: int = 0,
        trigger_event: Optional[Event] = None,
    ) -> RunResult:
        """Run a bird's power for its owner.

        Powers nested deeper than max_chain_depth are skipped. Cards a power
        revealed but did not hand out are discarded afterwards.
        """
        power = bird.card.power
        if power is None:
            return RunResult()
        engine = self.engine
        if depth > engine.config.max_chain_depth:
            logger.warning(
                "Skipping %s on %s: chain depth %d exceeds %d",
                power.handler_id,
                bird.instance_id,
                depth,
                engine.config.max_chain_depth,
            )
            skipped = ActivatePowerEffect(
                player_id=owner_id,
                bird_instance_id=bird.instance_id,
                handler_id=power.handler_id,
                activated=False,
                skip_reason=SkipReason.CHAIN_DEPTH_EXCEEDED,
            )
            await engine.apply_effect(skipped, depth)
            return RunResult(effects=[skipped])

        handler = engine.registry.get_power(power.handler_id)
        ctx = PowerContext(
            state=engine.state,
            player_id=owner_id,
            config=engine.config,
            depth=depth,
            bird=bird,
            power=power,
            trigger_event=trigger_event,
        )
        logger.debug("Running %s on %s (depth %d)", power.handler_id, bird.instance_id, depth)
        try:
            result = await self.run(handler(ctx), owner_id, depth, power.handler_id, bird.instance_id)
        finally:
            await self._discard_revealed(owner_id, depth)
        return result

    async def _discard_revealed(self, owner_id: str, depth: int) -> None:
        state = self.engine.state
        if state.revealed_cards:
            await self.engine.apply_effect(
                DiscardCardsEffect(
                    player_id=owner_id,
                    card_ids=[card.id for card in state.revealed_cards],
                    source=CardSource.REVEALED_SET,
                ),
                depth,
            )
        if state.revealed_bonus_cards:
            await self.engine.apply_effect(
                DrawBonusCardsEffect(
                    player_id=owner_id,
                    kept=[],
                    discarded=[card.id for card in state.revealed_bonus_cards],
                ),
                depth,
            )
