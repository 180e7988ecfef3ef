"""Load filter and notify rules from YAML files."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from rawchat.filters.defaults import DEFAULT_FILTER_RULES
from rawchat.filters.models import FilterRule, NotifyRule, RuleSet

logger = logging.getLogger(__name__)

_DEFAULTS_REF = "defaults"


def load_rules(path: str | Path) -> RuleSet:
    """Load a rule set from a YAML file path."""
    text = Path(path).read_text(encoding="utf-8")
    return load_rules_from_string(text)


def load_rules_from_string(text: str) -> RuleSet:
    """Parse a YAML string into a RuleSet.

    Recognised keys are ``filters`` and ``notify`` (lists of rule mappings)
    and ``inherit: defaults``, which appends the built-in filter rules after
    the file's own filters.
    """
    data = yaml.safe_load(text)
    if data is None:
        return RuleSet()
    if not isinstance(data, dict):
        raise ValueError("Rules YAML must be a mapping")
    return _build_rule_set(data)


def _build_rule_set(data: dict) -> RuleSet:
    filters: tuple[FilterRule, ...] | None = None
    if "filters" in data:
        filters = tuple(_parse_filters(data.get("filters") or []))

    inherit = data.get("inherit", [])
    if isinstance(inherit, str):
        inherit = [inherit]
    for ref in inherit:
        if ref != _DEFAULTS_REF:
            raise ValueError(f"Unknown rule set to inherit: {ref}")
        # Own rules first, built-ins after
        filters = (filters or ()) + DEFAULT_FILTER_RULES

    notify: tuple[NotifyRule, ...] | None = None
    if "notify" in data:
        notify = tuple(_parse_notify(data.get("notify") or []))

    return RuleSet(filters=filters, notify=notify)


def _rule_match(r: dict) -> str | None:
    """The rule's ``match`` string, or None (logged) if it is missing or not text."""
    match = r.get("match")
    if isinstance(match, str):
        return match
    logger.warning("Ignoring malformed rule %r: 'match' must be a string", r)
    return None


def _parse_filters(rules_data: list) -> list[FilterRule]:
    rules: list[FilterRule] = []
    for r in rules_data:
        if isinstance(r, str):
            rules.append(FilterRule(match=r))
            continue
        if not isinstance(r, dict):
            continue
        match = _rule_match(r)
        if match is None:
            continue
        rules.append(
            FilterRule(
                match=match,
                regex=bool(r.get("regex", False)),
                description=r.get("description", ""),
            )
        )
    return rules


def _parse_notify(rules_data: list) -> list[NotifyRule]:
    rules: list[NotifyRule] = []
    for r in rules_data:
        if isinstance(r, str):
            rules.append(NotifyRule(match=r))
            continue
        if not isinstance(r, dict):
            continue
        match = _rule_match(r)
        if match is None:
            continue
        rules.append(
            NotifyRule(
                match=match,
                regex=bool(r.get("regex", True)),
                description=r.get("description", ""),
            )
        )
    return rules
