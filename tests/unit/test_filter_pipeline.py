"""Tests for the filter pipeline — deletion rules on received chunks."""

from __future__ import annotations

import logging

from rawchat.filters.defaults import DEFAULT_FILTER_RULES
from rawchat.filters.models import FilterRule, NotifyRule
from rawchat.filters.pipeline import FilterPipeline
from rawchat.notify.evaluator import NotificationEvaluator


def test_strips_handshake_and_cr(default_pipeline: FilterPipeline):
    assert default_pipeline.apply("\xff\xfb\x01hi there\r") == "hi there"


def test_strips_bell_and_nudge(default_pipeline: FilterPipeline):
    assert default_pipeline.apply("\x01ping\x07 pong\x01") == "ping pong"


def test_keeps_line_feeds(default_pipeline: FilterPipeline):
    assert default_pipeline.apply("one\r\ntwo\r\n") == "one\ntwo\n"


def test_earlier_deletion_exposes_later_match(default_pipeline: FilterPipeline):
    # Removing the CR joins \xff and \xfb into a handshake
    assert default_pipeline.apply("a\xff\r\xfbb") == "ab"


def test_later_deletion_exposes_earlier_match(default_pipeline: FilterPipeline):
    # Removing the nudge joins a handshake that an earlier rule must catch
    assert default_pipeline.apply("a\xff\x01\xfbb") == "ab"


def test_nested_matches_are_removed(default_pipeline: FilterPipeline):
    assert default_pipeline.apply("\xff\xff\xfb\xfbok") == "ok"


def test_default_rules_idempotent(default_pipeline: FilterPipeline):
    samples = [
        "\xff\xfb\x01hi there\r",
        "\xff\xff\xfb\xfb\x07\x07\r\r",
        "a\xff\x01\xfc\x01b",
        "plain text\n",
        "",
    ]
    for raw in samples:
        once = default_pipeline.apply(raw)
        assert default_pipeline.apply(once) == once
        for rule in DEFAULT_FILTER_RULES:
            assert rule.match not in once


def test_chunked_delivery_matches_single_chunk(default_pipeline: FilterPipeline):
    raw = "\xff\xfbhello\r\nworld\x07\r\n\x01bye\r\n"
    whole = default_pipeline.apply(raw)
    # Split only at points that do not cut a two-byte handshake
    for cut in (1, 2, 5, 8, 13, len(raw) - 1):
        if raw[cut - 1 : cut + 1] == "\xff\xfb":
            continue
        chunked = default_pipeline.apply(raw[:cut]) + default_pipeline.apply(raw[cut:])
        assert chunked == whole


def test_pattern_spanning_chunks_is_not_matched(default_pipeline: FilterPipeline):
    first = default_pipeline.apply("hi\xff")
    second = default_pipeline.apply("\xfbthere")
    assert first + second == "hi\xff\xfbthere"
    assert default_pipeline.apply("hi\xff\xfbthere") == "hithere"


def test_rules_replaced_wholesale():
    pipeline = FilterPipeline([FilterRule(match="x")])
    assert pipeline.apply("x\ry\x07") == "\ry\x07"


def test_regex_rule():
    pipeline = FilterPipeline(
        [FilterRule(match=r"\x1b\[[0-9;]*m", regex=True, description="ansi")]
    )
    assert pipeline.apply("\x1b[1;31mred\x1b[0m") == "red"


def test_malformed_rule_falls_back_to_empty(caplog):
    with caplog.at_level(logging.WARNING):
        pipeline = FilterPipeline(
            [FilterRule(match="([", regex=True), FilterRule(match="\r")]
        )
    assert "malformed" in caplog.text.lower()
    assert pipeline.apply("([a\r") == "([a"


def test_empty_rule_is_ignored():
    pipeline = FilterPipeline([FilterRule(match=""), FilterRule(match="z")])
    assert pipeline.apply("zaz") == "a"


def test_no_rules_passes_text_through():
    assert FilterPipeline([]).apply("\xff\xfb\r") == "\xff\xfb\r"


def test_process_notifies_on_raw_text():
    """The bell is stripped from the display but still triggers a notification."""
    pipeline = FilterPipeline(
        DEFAULT_FILTER_RULES,
        evaluator=NotificationEvaluator([NotifyRule(match="\x07", regex=False)]),
    )
    result = pipeline.process("ding\x07", view_visible=False)
    assert result.text == "ding"
    assert result.notify is True


def test_process_uses_notify_text_when_given():
    pipeline = FilterPipeline(
        [], evaluator=NotificationEvaluator([NotifyRule(match="ö", regex=False)])
    )
    raw = "ö".encode().decode("latin-1")
    assert pipeline.process(raw, view_visible=False).notify is False
    assert pipeline.process(raw, view_visible=False, notify_text="ö").notify is True


def test_process_without_evaluator_never_notifies():
    result = FilterPipeline(DEFAULT_FILTER_RULES).process("\x07", view_visible=False)
    assert result.notify is False
    assert result.text == ""
