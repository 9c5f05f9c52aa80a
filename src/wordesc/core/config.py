"""wordesc configuration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import TextIO

import structlog

from wordesc.core.classify import FLAVORS, get_classifier

USER_CONFIG = Path.home() / ".wordesc" / "config"
PROJECT_CONFIG_NAME = ".wordesc"
ENV_CONFIG = "WORDESC_CONFIG"


@dataclass
class Config:
    """Parsed configuration. None means "not set here"."""

    flavor: str | None = None  # 'shell' | 'general'
    encoding: str | None = None  # None = locale encoding
    max_length: int | None = None
    capacity: int | None = None  # None = unbounded output
    log: Path | None = None  # None = no logging
    log_full: bool = False  # log the input too (requires log path)
    source: str | None = None  # file path of the last config applied


# === Config Loading ===


def _find_project_config(cwd: Path) -> Path | None:
    """Walk up from cwd to find .wordesc file."""
    current = cwd.resolve()
    while True:
        candidate = current / PROJECT_CONFIG_NAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:  # reached root
            return None
        current = parent


def _merge_configs(base: Config, overlay: Config) -> Config:
    """Merge overlay config into base. Settings in overlay win if set."""
    merged = {}
    for f in fields(Config):
        value = getattr(overlay, f.name)
        if value is None or value is False:
            value = getattr(base, f.name)
        merged[f.name] = value
    return Config(**merged)


def _load_file(path: Path) -> Config:
    try:
        config = parse_config(path.read_text())
    except ValueError as e:
        raise ValueError(f"{path}: {e}") from None
    return replace(config, source=str(path))


def load_config(cwd: Path) -> Config:
    """Load config from ~/.wordesc/config, .wordesc, and $WORDESC_CONFIG. Last wins."""
    config = Config()

    # 1. User config (lowest priority)
    if USER_CONFIG.is_file():
        config = _merge_configs(config, _load_file(USER_CONFIG))

    # 2. Project config (walk up from cwd)
    project_path = _find_project_config(cwd)
    if project_path is not None:
        config = _merge_configs(config, _load_file(project_path))

    # 3. Env override (highest priority)
    env_path = os.environ.get(ENV_CONFIG)
    if env_path:
        env_config_path = Path(env_path).expanduser()
        if env_config_path.is_file():
            config = _merge_configs(config, _load_file(env_config_path))

    return config


def parse_config(text: str) -> Config:
    """Parse config text into Config object. Raises ValueError on syntax errors."""
    settings: dict[str, bool | int | str | Path] = {}

    for lineno, raw_line in enumerate(text.splitlines(), 1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        parts = line.split(None, 1)
        directive = parts[0].lower()
        rest = parts[1].strip() if len(parts) > 1 else ""

        try:
            if directive == "set":
                _apply_setting(settings, rest)
            else:
                raise ValueError(f"unknown directive '{directive}'")
        except ValueError as e:
            raise ValueError(f"line {lineno}: {e}") from None

    return Config(
        flavor=settings.get("flavor"),
        encoding=settings.get("encoding"),
        max_length=settings.get("max_length"),
        capacity=settings.get("capacity"),
        log=settings.get("log"),
        log_full=settings.get("log_full", False),
    )


def _parse_count(key: str, value: str | None, minimum: int) -> int:
    if value is None:
        raise ValueError(f"'{key}' requires a number")
    try:
        number = int(value)
    except ValueError:
        raise ValueError(f"'{key}' requires a number, got '{value}'") from None
    if number < minimum:
        raise ValueError(f"'{key}' must be at least {minimum}, got {number}")
    return number


def _apply_setting(settings: dict[str, bool | int | str | Path], rest: str) -> None:
    """Parse and apply a 'set' directive. Raises ValueError on invalid setting."""
    if not rest:
        raise ValueError("'set' requires a setting name")

    parts = rest.split(None, 1)
    key = parts[0].lower()
    value = parts[1].strip() if len(parts) > 1 else None
    key_normalized = key.replace("-", "_")

    # Boolean settings (no value required)
    if key_normalized == "log_full":
        if value is not None:
            raise ValueError(f"'{key}' takes no value")
        settings[key_normalized] = True

    # Integer settings
    elif key_normalized == "max_length":
        settings[key_normalized] = _parse_count(key, value, 0)
    elif key_normalized == "capacity":
        settings[key_normalized] = _parse_count(key, value, 1)

    # Choice settings
    elif key_normalized == "flavor":
        if value not in FLAVORS:
            raise ValueError(f"'flavor' must be 'shell' or 'general', got '{value}'")
        settings[key_normalized] = value

    elif key_normalized == "encoding":
        if value is None:
            raise ValueError("'encoding' requires a codec name")
        # Raises ValueError for unknown or unusable encodings
        settings[key_normalized] = get_classifier(value).encoding

    # Path settings
    elif key_normalized == "log":
        if value is None:
            raise ValueError("'log' requires a path")
        settings[key_normalized] = Path(value).expanduser()

    else:
        raise ValueError(f"unknown setting '{key}'")


# === Logging ===

_logger: structlog.typing.FilteringBoundLogger | None = None
_log_full = False
_log_file: TextIO | None = None


def configure_logging(config: Config) -> None:
    """Configure logging based on config settings, replacing any earlier setup."""
    global _logger, _log_full, _log_file
    close_logging()
    if config.log is None:
        return

    # Ensure log directory exists
    config.log.parent.mkdir(parents=True, exist_ok=True)
    _log_file = config.log.open("a", encoding="utf-8")

    # JSON lines to the log file
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.INFO),
        logger_factory=structlog.WriteLoggerFactory(file=_log_file),
    )
    _logger = structlog.get_logger()
    _log_full = config.log_full


def close_logging() -> None:
    """Stop logging and close the log file, if one is open."""
    global _logger, _log_full, _log_file
    _logger = None
    _log_full = False
    if _log_file is not None:
        _log_file.close()
        _log_file = None


def log_quote(
    strategy: str, length: int, truncated: bool, data: bytes | None = None
) -> None:
    """Log one quoting result. No-op if logging not configured."""
    if _logger is None:
        return

    entry: dict[str, str | int | bool] = {
        "strategy": strategy,
        "length": length,
        "truncated": truncated,
    }
    if _log_full and data is not None:
        entry["input"] = data.decode("utf-8", "backslashreplace")
    _logger.info("quoted", **entry)
