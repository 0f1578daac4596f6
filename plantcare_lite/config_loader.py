"""plantcare_lite.config_loader

Lightweight config loader for plantcare_lite.

- Reads YAML (PyYAML); JSON documents load too since JSON is valid YAML.
- Exposes a typed dataclass `Config` and a `load_config()` helper that accepts
  an optional path override.
- PLANTCARE_* environment variables override file values.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from .care_exceptions import ConfigError

logger = logging.getLogger(__name__)

VALID_VIEWS = ("week", "month")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class Config:
    """Typed configuration for plantcare_lite.

    Fields:
        week_starts_on: first weekday of the week view (0=Monday .. 6=Sunday)
        default_view: "week" or "month"
        iteration_safety_margin: extra iterations per expansion walk (>= 0)
        daytime_start_hour: first hour of the daytime slot (0..23)
        nighttime_start_hour: first hour of the nighttime slot (0..23)
        enable_expansion_cache: memoize expansions of identical series
        log_level: logging level name
    """

    week_starts_on: int = 0
    default_view: str = "week"
    iteration_safety_margin: int = 2
    daytime_start_hour: int = 7
    nighttime_start_hour: int = 19
    enable_expansion_cache: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Config:
        """Create Config from a plain mapping, applying defaults and validation.

        Numeric-like values are coerced to int; out-of-range values fall back
        to defaults or are clamped, logging a warning when that happens.
        """
        if data is None:
            data = {}
        defaults = cls()

        def _coerce_int(key: str, default: int) -> int:
            raw = data.get(key, default)
            try:
                return int(raw)
            except (TypeError, ValueError):
                logger.warning("Config %s=%r is not an int; using default %d", key, raw, default)
                return default

        def _bounded(key: str, default: int, low: int, high: int) -> int:
            value = _coerce_int(key, default)
            if not low <= value <= high:
                logger.warning("Config %s=%d outside %d..%d; using default %d", key, value, low, high, default)
                return default
            return value

        week_starts_on = _bounded("week_starts_on", defaults.week_starts_on, 0, 6)
        daytime_start = _bounded("daytime_start_hour", defaults.daytime_start_hour, 0, 23)
        nighttime_start = _bounded("nighttime_start_hour", defaults.nighttime_start_hour, 0, 23)
        if daytime_start >= nighttime_start:
            logger.warning(
                "daytime_start_hour %d is not before nighttime_start_hour %d; using defaults",
                daytime_start,
                nighttime_start,
            )
            daytime_start = defaults.daytime_start_hour
            nighttime_start = defaults.nighttime_start_hour

        margin = _coerce_int("iteration_safety_margin", defaults.iteration_safety_margin)
        if margin < 0:
            logger.warning("iteration_safety_margin %d below minimum; coercing to 0", margin)
            margin = 0

        default_view = str(data.get("default_view", defaults.default_view)).lower()
        if default_view not in VALID_VIEWS:
            logger.warning("Config default_view=%r unknown; using %r", default_view, defaults.default_view)
            default_view = defaults.default_view

        log_level = data.get("log_level", defaults.log_level)
        log_level = str(log_level).upper() if log_level is not None else defaults.log_level

        cache_raw = data.get("enable_expansion_cache", defaults.enable_expansion_cache)
        if isinstance(cache_raw, str):
            enable_cache = cache_raw.strip().lower() in ("1", "true", "yes", "on")
        else:
            enable_cache = bool(cache_raw)

        return cls(
            week_starts_on=week_starts_on,
            default_view=default_view,
            iteration_safety_margin=margin,
            daytime_start_hour=daytime_start,
            nighttime_start_hour=nighttime_start,
            enable_expansion_cache=enable_cache,
            log_level=log_level,
        )


def apply_env_overrides(config: Config) -> Config:
    """Return a copy of ``config`` with PLANTCARE_* environment overrides applied.

    Recognizes:
    - PLANTCARE_WEEK_STARTS_ON -> week_starts_on (int 0..6)
    - PLANTCARE_DEFAULT_VIEW -> default_view
    - PLANTCARE_LOG_LEVEL -> log_level
    """
    overrides: dict[str, Any] = {}

    week_start = os.environ.get("PLANTCARE_WEEK_STARTS_ON")
    if week_start:
        try:
            value = int(week_start)
        except ValueError:
            logger.warning("Invalid PLANTCARE_WEEK_STARTS_ON=%r; ignoring", week_start)
        else:
            if 0 <= value <= 6:
                overrides["week_starts_on"] = value
            else:
                logger.warning("PLANTCARE_WEEK_STARTS_ON=%d outside 0..6; ignoring", value)

    view = os.environ.get("PLANTCARE_DEFAULT_VIEW")
    if view:
        if view.lower() in VALID_VIEWS:
            overrides["default_view"] = view.lower()
        else:
            logger.warning("Invalid PLANTCARE_DEFAULT_VIEW=%r; ignoring", view)

    level = os.environ.get("PLANTCARE_LOG_LEVEL")
    if level and level.upper() in VALID_LOG_LEVELS:
        overrides["log_level"] = level.upper()

    if overrides:
        logger.debug("Applying environment overrides: %s", overrides)
        return replace(config, **overrides)
    return config


def _load_yaml(path: Path) -> Any:
    try:
        loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Unable to read config {path}: {exc}") from exc
    # safe_load returns None for empty files
    return {} if loaded is None else loaded


def load_config(path: str | None = None) -> Config:
    """Load configuration from a YAML/JSON file and return a Config instance.

    Args:
        path: Optional path to the config file. If not provided the default is
              ./plantcare.yaml (relative to current working dir).

    Behavior:
    - If file is missing: returns defaults (plus environment overrides).
    - If file exists but top-level is not a mapping: raises ConfigError.
    """
    p = Path(path) if path else Path.cwd() / "plantcare.yaml"
    logger.debug("Attempting to load config from %s", p)
    if not p.exists():
        logger.info("Config file %s not found; using defaults", p)
        return apply_env_overrides(Config())

    raw = _load_yaml(p)
    if not isinstance(raw, dict):
        logger.warning("Config file %s parsed but top-level is not a mapping: %r", p, raw)
        raise ConfigError("Config file must contain a mapping at top level")
    cfg = apply_env_overrides(Config.from_dict(raw))
    logger.info("Loaded configuration from %s", p)
    logger.debug("Configuration values: %s", cfg)
    return cfg
