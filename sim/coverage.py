"""Power handler coverage tracking.

Counts, per handler id, how often a bird power ran and how often it was
skipped (and why) across any number of games.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Optional

from engine.effects import Effect, EffectType
from engine.observer import GameObserver


@dataclass
class HandlerCoverage:
    """Activation counts for one handler."""

    handler_id: str
    activated: int = 0
    skipped: int = 0
    skip_reasons: Counter = field(default_factory=Counter)

    @property
    def total(self) -> int:
        return self.activated + self.skipped


class HandlerCoverageTracker(GameObserver):
    """Observer that records ACTIVATE_POWER effects by handler id.

    One tracker can be shared by several engines; counts accumulate.
    """

    def __init__(self, known_handlers: Optional[Iterable[str]] = None):
        self._coverage: dict[str, HandlerCoverage] = {}
        self._known = set(known_handlers or ())
        self._games = 0

    def on_effect(self, effect: Effect) -> None:
        if effect.effect_type != EffectType.ACTIVATE_POWER:
            return
        entry = self._coverage.get(effect.handler_id)
        if entry is None:
            entry = self._coverage[effect.handler_id] = HandlerCoverage(effect.handler_id)
        if effect.activated:
            entry.activated += 1
        else:
            entry.skipped += 1
            if effect.skip_reason is not None:
                entry.skip_reasons[effect.skip_reason.value] += 1

    def game_finished(self) -> None:
        self._games += 1

    @property
    def games(self) -> int:
        return self._games

    def coverage(self, handler_id: str) -> HandlerCoverage:
        return self._coverage.get(handler_id, HandlerCoverage(handler_id))

    def seen_handlers(self) -> set[str]:
        return set(self._coverage)

    def activated_handlers(self) -> set[str]:
        return {hid for hid, entry in self._coverage.items() if entry.activated > 0}

    def never_activated(self) -> list[str]:
        """Known handlers that have not run once, sorted."""
        return sorted(self._known - self.activated_handlers())

    def report(self) -> dict[str, dict]:
        """Per-handler counts, sorted by handler id."""
        handler_ids = sorted(self._known | set(self._coverage))
        result = {}
        for handler_id in handler_ids:
            entry = self.coverage(handler_id)
            result[handler_id] = {
                "activated": entry.activated,
                "skipped": entry.skipped,
                "skip_reasons": dict(sorted(entry.skip_reasons.items())),
            }
        return result

    def format_report(self) -> str:
        report = self.report()
        lines = [f"Handler coverage over {self._games} game(s):"]
        width = max((len(hid) for hid in report), default=10)
        for handler_id, counts in report.items():
            reasons = ", ".join(f"{name}={count}" for name, count in counts["skip_reasons"].items())
            line = f"  {handler_id:<{width}}  activated={counts['activated']:<5} skipped={counts['skipped']:<5}"
            if reasons:
                line += f" ({reasons})"
            lines.append(line)
        missing = self.never_activated()
        if missing:
            lines.append(f"Never activated: {', '.join(missing)}")
        return "\n".join(lines)


__all__ = ["HandlerCoverage", "HandlerCoverageTracker"]
