"""Built-in rule sets."""

from __future__ import annotations

from rawchat.filters.models import FilterRule, NotifyRule

BELL = "\x07"

# Applied in this order; later rules see text already cleaned by earlier ones.
DEFAULT_FILTER_RULES: tuple[FilterRule, ...] = (
    FilterRule(match="\r", description="carriage return"),
    FilterRule(match=BELL, description="bell"),
    FilterRule(match="\xff\xfb", description="handshake (will)"),
    FilterRule(match="\xff\xfc", description="handshake (won't)"),
    FilterRule(match="\x01", description="keepalive nudge"),
)


def default_notify_rules(user_name: str) -> tuple[NotifyRule, ...]:
    """Notify on mentions of *user_name*, ``*`` announcements, and the bell."""
    rules: list[NotifyRule] = []
    if user_name:
        rules.append(
            NotifyRule(match=user_name, regex=False, description="user mention")
        )
    rules.append(NotifyRule(match=r"^\*", description="announcement"))
    rules.append(NotifyRule(match=BELL, regex=False, description="bell"))
    return tuple(rules)
