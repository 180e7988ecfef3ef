"""Global configuration — XDG paths, env vars, rule files, defaults."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from rawchat.filters.defaults import DEFAULT_FILTER_RULES, default_notify_rules
from rawchat.filters.loader import load_rules
from rawchat.filters.models import FilterRule, NotifyRule, RuleSet

logger = logging.getLogger(__name__)

DEFAULT_PORT = 3555


def _default_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "rawchat"
    return Path.home() / ".config" / "rawchat"


def _default_user_name() -> str:
    return os.environ.get("USER") or os.environ.get("LOGNAME") or ""


@dataclass
class RawChatConfig:
    """Application-wide configuration."""

    config_dir: Path = field(default_factory=_default_config_dir)
    default_port: int = DEFAULT_PORT
    user_name: str = field(default_factory=_default_user_name)
    encoding: str = "utf-8"
    recv_size: int = 4096
    connect_timeout: float = 10.0
    bell: bool = True
    filter_rules: tuple[FilterRule, ...] = DEFAULT_FILTER_RULES
    notify_rules: tuple[NotifyRule, ...] | None = None
    verbose: bool = False

    @property
    def rules_path(self) -> Path:
        return self.config_dir / "rules.yaml"

    def effective_notify_rules(self) -> tuple[NotifyRule, ...]:
        """Configured notify rules, or the defaults for the current user."""
        if self.notify_rules is not None:
            return self.notify_rules
        return default_notify_rules(self.user_name)

    def apply_rules(self, rules: RuleSet) -> None:
        """Replace rule lists wholesale with those present in *rules*."""
        if rules.filters is not None:
            self.filter_rules = rules.filters
        if rules.notify is not None:
            self.notify_rules = rules.notify

    @classmethod
    def load(cls, rules_path: str | Path | None = None) -> RawChatConfig:
        """Load config from environment variables, XDG defaults and rule files.

        An explicit *rules_path* wins over ``<config_dir>/rules.yaml``.
        """
        config = cls()

        env_port = os.environ.get("RAWCHAT_PORT")
        if env_port:
            config.default_port = int(env_port)

        env_user = os.environ.get("RAWCHAT_USER")
        if env_user:
            config.user_name = env_user

        env_encoding = os.environ.get("RAWCHAT_ENCODING")
        if env_encoding:
            config.encoding = env_encoding

        env_timeout = os.environ.get("RAWCHAT_CONNECT_TIMEOUT")
        if env_timeout:
            config.connect_timeout = float(env_timeout)

        path = Path(rules_path) if rules_path else config.rules_path
        if path.is_file():
            logger.debug("Loading rules from %s", path)
            config.apply_rules(load_rules(path))

        return config
