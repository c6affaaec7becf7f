"""Decision broker: hands prompts to agents and collects valid choices.

The broker owns the prompt protocol. It numbers prompts, attaches the
player's view and the prompt context, makes sure only one prompt is
outstanding, checks that the answer belongs to the prompt, and validates
it. An invalid answer is logged and the same prompt is issued again with
previous_error set; after max_choice_attempts invalid answers the agent
forfeits.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Optional

from core.errors import AgentForfeitError, ConfigurationError, ProtocolViolationError
from core.logging_config import get_logger

from .config import EngineConfig
from .prompts import CHOICE_TYPES, Choice, Prompt, PromptContext, PromptKind
from .validators import validate_choice
from .view_builder import build_player_view

if TYPE_CHECKING:
    from agents.base import PlayerAgent
    from core.game_state import GameState

logger = get_logger(__name__)


class DecisionBroker:
    """Routes prompts to the agent of the prompted player.

    Attributes:
        agents: Agent per player id.
        config: Engine configuration (retry budget).
        state: Game state used to build views; set by the engine.
        prompts_issued: Number of prompt ids handed out so far.
    """

    def __init__(self, agents: dict[str, PlayerAgent], config: EngineConfig):
        self.agents = agents
        self.config = config
        self.state: Optional[GameState] = None
        self.prompts_issued = 0
        self._outstanding: Optional[str] = None

    @property
    def outstanding_prompt(self) -> Optional[str]:
        return self._outstanding

    def _next_prompt_id(self) -> str:
        self.prompts_issued += 1
        return f"prompt_{self.prompts_issued}"

    def _context(self, trigger: str, bird_instance_id: Optional[str]) -> PromptContext:
        state = self.state
        active = state.active_player.player_id if state.round > 0 else None
        return PromptContext(
            round=state.round,
            turn=state.turn,
            active_player_id=active,
            trigger=trigger,
            bird_instance_id=bird_instance_id,
        )

    async def _route(self, agent: PlayerAgent, prompt: Prompt) -> Choice:
        if prompt.kind == PromptKind.STARTING_HAND:
            return await agent.choose_starting_hand(prompt)
        if prompt.kind == PromptKind.TURN_ACTION:
            return await agent.choose_turn_action(prompt)
        return await agent.choose_option(prompt)

    async def ask(self, prompt: Prompt, trigger: str = "", bird_instance_id: Optional[str] = None) -> Choice:
        """Get a valid choice for a prompt.

        Args:
            prompt: Prompt with its kind-specific payload filled in.
            trigger: What raised the prompt (handler id or turn action).
            bird_instance_id: Bird whose power raised the prompt, if any.

        Returns:
            A choice that passed validation.

        Raises:
            ProtocolViolationError: If another prompt is outstanding, or the
                agent answers with the wrong choice type or prompt id.
            AgentForfeitError: If the agent keeps answering invalidly.
            ConfigurationError: If no agent is registered for the player.
        """
        if self.state is None:
            raise ConfigurationError("DecisionBroker has no game state")
        if self._outstanding is not None:
            raise ProtocolViolationError(
                f"Cannot issue a prompt while {self._outstanding} is outstanding", self._outstanding
            )
        agent = self.agents.get(prompt.player_id)
        if agent is None:
            raise ConfigurationError(f"No agent for player {prompt.player_id}")

        prompt_id = self._next_prompt_id()
        current = replace(
            prompt,
            prompt_id=prompt_id,
            view=build_player_view(self.state, prompt.player_id),
            context=self._context(trigger, bird_instance_id),
            previous_error=None,
        )
        expected = CHOICE_TYPES[prompt.kind]
        logger.debug("Issuing %s (%s) to %s", prompt_id, prompt.kind.value, prompt.player_id)

        self._outstanding = prompt_id
        try:
            last_error = None
            for attempt in range(1, self.config.max_choice_attempts + 1):
                choice = await self._route(agent, current)
                if not isinstance(choice, expected):
                    raise ProtocolViolationError(
                        f"{prompt.player_id} answered {prompt_id} ({prompt.kind.value}) "
                        f"with {type(choice).__name__}",
                        prompt_id,
                    )
                if choice.prompt_id != prompt_id:
                    raise ProtocolViolationError(
                        f"{prompt.player_id} answered {choice.prompt_id!r}, expected {prompt_id!r}",
                        prompt_id,
                    )
                last_error = validate_choice(current, choice)
                if last_error is None:
                    return choice
                logger.warning(
                    "Rejected choice from %s for %s (attempt %d/%d): %s %s",
                    prompt.player_id,
                    prompt_id,
                    attempt,
                    self.config.max_choice_attempts,
                    last_error.code,
                    last_error.message,
                )
                current = replace(current, previous_error=last_error)
            raise AgentForfeitError(prompt.player_id, prompt_id, self.config.max_choice_attempts, last_error)
        finally:
            self._outstanding = None
