"""Notification evaluator — decides whether received text deserves an alert."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from rawchat.filters.models import NotifyRule
from rawchat.filters.patterns import compile_or_never


@dataclass
class _CompiledRule:
    rule: NotifyRule
    pattern: re.Pattern[str]


class NotificationEvaluator:
    """Matches raw text against ordered notify rules. First-match-wins.

    Pure: evaluation never touches buffers or sessions. Whether an alert is
    actually shown is up to the caller and its notifier.
    """

    def __init__(self, rules: Iterable[NotifyRule]) -> None:
        self.rules = tuple(rules)
        self._compiled = [
            _CompiledRule(
                rule=rule,
                pattern=compile_or_never(rule.match, rule.regex, re.MULTILINE),
            )
            for rule in self.rules
        ]

    def evaluate(self, raw_text: str) -> NotifyRule | None:
        """Return the first rule matching *raw_text*, or None."""
        for cr in self._compiled:
            if cr.pattern.search(raw_text):
                return cr.rule
        return None

    def should_notify(self, raw_text: str, view_visible: bool) -> bool:
        """Whether text arriving for a view should raise a notification.

        Never notifies for a visible view; otherwise true on the first match.
        """
        if view_visible:
            return False
        return self.evaluate(raw_text) is not None
