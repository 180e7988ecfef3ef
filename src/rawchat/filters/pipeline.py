"""Filter pipeline — hot path, cleans each received chunk before display."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from rawchat.filters.models import FilterRule
from rawchat.filters.patterns import compile_or_never
from rawchat.notify.evaluator import NotificationEvaluator


@dataclass(frozen=True)
class FilterResult:
    """Outcome of running one chunk through the pipeline."""

    text: str
    notify: bool = False


@dataclass
class _CompiledRule:
    rule: FilterRule
    pattern: re.Pattern[str]


class FilterPipeline:
    """Ordered deletion rules plus an optional notification observer.

    Rules only ever see the chunk they are given. A pattern straddling two
    separately delivered chunks is not matched.
    """

    def __init__(
        self,
        rules: Iterable[FilterRule],
        evaluator: NotificationEvaluator | None = None,
    ) -> None:
        self.rules = tuple(rules)
        self.evaluator = evaluator
        self._compiled = [
            _CompiledRule(rule=rule, pattern=compile_or_never(rule.match, rule.regex))
            for rule in self.rules
        ]

    def apply(self, raw_text: str) -> str:
        """Strip every rule's matches from *raw_text*.

        Each rule re-scans the text left by the rules before it, and passes
        repeat until nothing changes, so applying the result again is a no-op.
        """
        text = raw_text
        while True:
            before = text
            for cr in self._compiled:
                text = _strip(cr.pattern, text)
            if text == before:
                return text

    def process(
        self,
        raw_text: str,
        view_visible: bool = True,
        notify_text: str | None = None,
    ) -> FilterResult:
        """Filter *raw_text* and evaluate notify rules on the unfiltered text.

        *notify_text* lets the caller hand the evaluator a differently decoded
        copy of the same chunk; it defaults to *raw_text*.
        """
        notify = False
        if self.evaluator is not None:
            observed = raw_text if notify_text is None else notify_text
            notify = self.evaluator.should_notify(observed, view_visible)
        return FilterResult(text=self.apply(raw_text), notify=notify)


def _strip(pattern: re.Pattern[str], text: str) -> str:
    # Deleting a match can join its neighbours into a new match
    while True:
        stripped = pattern.sub("", text)
        if stripped == text:
            return text
        text = stripped
