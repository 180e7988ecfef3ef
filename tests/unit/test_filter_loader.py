"""Tests for YAML rule loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from rawchat.filters.defaults import DEFAULT_FILTER_RULES
from rawchat.filters.loader import load_rules, load_rules_from_string
from rawchat.filters.pipeline import FilterPipeline


def test_load_rules_file(rules_path: Path):
    rules = load_rules(rules_path)

    assert rules.filters is not None
    assert len(rules.filters) == 2
    assert rules.filters[0].regex is True
    assert rules.filters[0].description == "ANSI colour codes"
    assert rules.filters[1].match == "\r"
    assert rules.filters[1].regex is False

    assert rules.notify is not None
    assert [r.match for r in rules.notify] == ["bob", "^!"]
    assert rules.notify[0].regex is False
    assert rules.notify[1].regex is True


def test_loaded_filters_work(rules_path: Path):
    pipeline = FilterPipeline(load_rules(rules_path).filters or ())
    assert pipeline.apply("\x1b[32mgreen\x1b[0m\r\n") == "green\n"


def test_missing_sections_keep_defaults():
    rules = load_rules_from_string("notify:\n  - carol\n")
    assert rules.filters is None
    assert rules.notify is not None


def test_empty_document():
    rules = load_rules_from_string("")
    assert rules.filters is None
    assert rules.notify is None


def test_empty_filter_list_clears_rules():
    rules = load_rules_from_string("filters: []\n")
    assert rules.filters == ()


def test_inherit_defaults_appends_builtins():
    rules = load_rules_from_string('filters:\n  - "\\x1b"\ninherit: defaults\n')
    assert rules.filters is not None
    assert rules.filters[0].match == "\x1b"
    assert rules.filters[1:] == DEFAULT_FILTER_RULES


def test_inherit_defaults_without_own_filters():
    rules = load_rules_from_string("inherit: [defaults]\n")
    assert rules.filters == DEFAULT_FILTER_RULES


def test_unknown_inherit_rejected():
    with pytest.raises(ValueError, match="Unknown rule set"):
        load_rules_from_string("inherit: irc\n")


def test_non_mapping_rejected():
    with pytest.raises(ValueError, match="mapping"):
        load_rules_from_string("- just\n- a list\n")


def test_non_mapping_entries_skipped():
    rules = load_rules_from_string("filters:\n  - 42\n  - match: x\n")
    assert rules.filters is not None
    # 42 is neither a string nor a mapping
    assert [r.match for r in rules.filters] == ["x"]


def test_empty_match_value_is_skipped(caplog):
    rules = load_rules_from_string("filters:\n  - match:\n  - match: '#'\n")
    assert [r.match for r in rules.filters] == ["#"]
    assert FilterPipeline(rules.filters).apply("None of that#") == "None of that"
    assert "Ignoring malformed rule" in caplog.text


def test_missing_match_key_is_skipped(caplog):
    rules = load_rules_from_string(
        "filters:\n  - description: no pattern\nnotify:\n  - regex: true\n  - bob\n"
    )
    assert rules.filters == ()
    assert [r.match for r in rules.notify] == ["bob"]
    assert "Ignoring malformed rule" in caplog.text


def test_non_string_match_is_skipped():
    rules = load_rules_from_string("notify:\n  - match: 42\n  - match: [a, b]\n")
    assert rules.notify == ()
