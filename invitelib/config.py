# invitelib/config.py
"""
Centralised environment config for the invite sheet tooling.

This module MUST:
- never raise while reading (missing values come back empty)
- report what is missing as data (check_config), not by exiting
- stay free of Google / network imports
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from invitelib.errors import ConfigError

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_PORT = 8080


def env_str(k: str, default: str = "") -> str:
    return (os.getenv(k) or default).strip()


def env_float(k: str, default: float) -> float:
    raw = env_str(k)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def env_int(k: str, default: int) -> int:
    raw = env_str(k)
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


@dataclass(frozen=True)
class InviteConfig:
    spreadsheet_id: str = ""
    sheet_name: str = ""
    credentials_json: str = ""
    credentials_file: str = ""
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    apprise_url: str = ""
    apprise_tag: str = ""
    email_template_path: str = ""
    log_level: str = "info"
    port: int = DEFAULT_PORT


@dataclass(frozen=True)
class ConfigCheck:
    ok: bool
    missing: Tuple[str, ...] = field(default_factory=tuple)


def load_config() -> InviteConfig:
    return InviteConfig(
        spreadsheet_id=env_str("GOOGLE_SPREADSHEET_ID"),
        sheet_name=env_str("GOOGLE_SHEET_NAME"),
        # Inline JSON keeps its newlines; only trim the ends
        credentials_json=(os.getenv("GOOGLE_CREDENTIALS_JSON") or "").strip(),
        credentials_file=env_str("GOOGLE_CREDENTIALS_FILE"),
        timeout_seconds=env_float("SHEETS_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
        apprise_url=env_str("APPRISE_URL"),
        apprise_tag=env_str("APPRISE_TAG"),
        email_template_path=env_str("EMAIL_TEMPLATE_PATH"),
        log_level=env_str("LOG_LEVEL", "info"),
        port=env_int("PORT", DEFAULT_PORT),
    )


def check_config(cfg: InviteConfig, need_notifier: bool = False) -> ConfigCheck:
    missing: List[str] = []
    if not cfg.credentials_json and not cfg.credentials_file:
        missing.append("GOOGLE_CREDENTIALS_JSON or GOOGLE_CREDENTIALS_FILE")
    if not cfg.spreadsheet_id:
        missing.append("GOOGLE_SPREADSHEET_ID")
    if not cfg.sheet_name:
        missing.append("GOOGLE_SHEET_NAME")
    if need_notifier and not cfg.apprise_url:
        missing.append("APPRISE_URL")
    return ConfigCheck(ok=not missing, missing=tuple(missing))


def require_valid(cfg: Optional[InviteConfig] = None, need_notifier: bool = False) -> InviteConfig:
    """load_config + check_config, raising ConfigError listing everything missing."""
    cfg = cfg or load_config()
    check = check_config(cfg, need_notifier=need_notifier)
    if not check.ok:
        raise ConfigError(check.missing)
    return cfg
