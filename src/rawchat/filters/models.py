"""Rule data models — immutable dataclasses shared by filters and notifications."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FilterRule:
    """A deletion rule: every match is stripped from newly received text."""

    match: str
    regex: bool = False
    description: str = ""


@dataclass(frozen=True)
class NotifyRule:
    """A notification trigger, evaluated against raw received text."""

    match: str
    regex: bool = True
    description: str = ""


@dataclass(frozen=True)
class RuleSet:
    """Rules read from a rules file. ``None`` means "keep the defaults"."""

    filters: tuple[FilterRule, ...] | None = None
    notify: tuple[NotifyRule, ...] | None = None
