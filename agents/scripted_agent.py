"""Scripted agent for deterministic scenario tests.

The agent answers prompts from a queue of prepared choices. Scripted
choices are written without a prompt id (it is only known at runtime);
the agent stamps the id of the prompt it answers.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Iterable, Optional, Union

from core.errors import WingsimError
from engine.prompts import Choice, Prompt, StartingHandChoice, StartingHandPrompt, TurnActionChoice, TurnActionPrompt

from .base import PlayerAgent

# A prepared choice, or a function building one from the prompt
ScriptStep = Union[Choice, Callable[[Prompt], Choice]]


class ScriptExhaustedError(WingsimError):
    """Raised when a prompt arrives after every scripted choice was used."""

    def __init__(self, player_id: str, prompt: Prompt, consumed: int) -> None:
        self.player_id = player_id
        self.prompt_kind = prompt.kind
        self.prompt_id = prompt.prompt_id
        self.consumed = consumed
        super().__init__(
            f"Script of {player_id} exhausted: received {prompt.kind.value} prompt "
            f"({prompt.prompt_id}) after {consumed} scripted choices"
        )


class ScriptMismatchError(WingsimError):
    """Raised when the next scripted choice is not of the prompt's kind."""

    def __init__(self, player_id: str, prompt: Prompt, choice: Choice, index: int) -> None:
        self.player_id = player_id
        self.expected_kind = choice.kind
        self.received_kind = prompt.kind
        self.index = index
        super().__init__(
            f"Script of {player_id} at index {index}: scripted {choice.kind.value} "
            f"but received {prompt.kind.value} prompt ({prompt.prompt_id})"
        )


class ScriptedAgent(PlayerAgent):
    """Answers prompts in order from a script.

    Every prompt received is recorded in ``prompts`` so tests can inspect
    what the engine offered.

    Args:
        player_id: The seat this agent plays.
        script: Choices (or prompt -> choice functions) in the order prompts arrive.
        fallback: Agent answering prompts once the script is used up. Without
            one, running out raises ScriptExhaustedError.
        strict: Raise ScriptMismatchError when a scripted choice's kind does
            not match the prompt. Disable to hand the engine mismatched
            choices on purpose.
    """

    def __init__(
        self,
        player_id: str,
        script: Iterable[ScriptStep] = (),
        fallback: Optional[PlayerAgent] = None,
        strict: bool = True,
    ):
        super().__init__(player_id)
        self.script: list[ScriptStep] = list(script)
        self.fallback = fallback
        self.strict = strict
        self.prompts: list[Prompt] = []
        self._index = 0

    @property
    def remaining(self) -> int:
        return len(self.script) - self._index

    def is_exhausted(self) -> bool:
        return self._index >= len(self.script)

    def extend(self, steps: Iterable[ScriptStep]) -> None:
        self.script.extend(steps)

    def prompts_of(self, kind) -> list[Prompt]:
        return [prompt for prompt in self.prompts if prompt.kind == kind]

    async def choose_starting_hand(self, prompt: StartingHandPrompt) -> StartingHandChoice:
        if self.is_exhausted() and self.fallback is not None:
            self.prompts.append(prompt)
            return await self.fallback.choose_starting_hand(prompt)
        return self._next(prompt)

    async def choose_turn_action(self, prompt: TurnActionPrompt) -> TurnActionChoice:
        if self.is_exhausted() and self.fallback is not None:
            self.prompts.append(prompt)
            return await self.fallback.choose_turn_action(prompt)
        return self._next(prompt)

    async def choose_option(self, prompt: Prompt) -> Choice:
        if self.is_exhausted() and self.fallback is not None:
            self.prompts.append(prompt)
            return await self.fallback.choose_option(prompt)
        return self._next(prompt)

    def _next(self, prompt: Prompt) -> Choice:
        self.prompts.append(prompt)
        if self.is_exhausted():
            raise ScriptExhaustedError(self.player_id, prompt, self._index)
        step = self.script[self._index]
        choice = step(prompt) if callable(step) else step
        if self.strict and choice.kind != prompt.kind:
            raise ScriptMismatchError(self.player_id, prompt, choice, self._index)
        self._index += 1
        return replace(choice, prompt_id=prompt.prompt_id)
