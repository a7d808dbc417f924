"""Tunable thresholds for the evaluators and the reporter.

Settings come from a JSON file whose path is passed explicitly or read from
the MONEYTOR_CONFIG environment variable. A missing file yields the defaults.
"""
import json
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional, Tuple

from moneytor.constants import (
    BEHIND_FALLBACK_DAYS,
    CONFIG_ENV_VAR,
    GOAL_DEADLINE_WINDOW_DAYS,
    MILESTONES,
    WARNING_THRESHOLD,
)


@dataclass(frozen=True)
class Settings:
    warning_threshold: float = WARNING_THRESHOLD
    milestones: Tuple[int, ...] = MILESTONES
    goal_deadline_window_days: int = GOAL_DEADLINE_WINDOW_DAYS
    behind_fallback_days: int = BEHIND_FALLBACK_DAYS


DEFAULT_SETTINGS = Settings()


def _whole_number(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not float(value).is_integer():
        raise ValueError(f"{name} must be a whole number, got {value!r}")
    return int(value)


def _coerce(name: str, value):
    if name == "milestones":
        if not isinstance(value, (list, tuple)) or not value:
            raise ValueError("milestones must be a non-empty list")
        result = tuple(sorted({_whole_number(name, m) for m in value}))
        if any(m <= 0 or m > 100 for m in result):
            raise ValueError("milestones must lie in (0, 100]")
        return result
    if name == "warning_threshold":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"warning_threshold must be a number, got {value!r}")
        value = float(value)
        if not 0 < value < 100:
            raise ValueError("warning_threshold must lie in (0, 100)")
        return value
    value = _whole_number(name, value)
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    return value


def load_settings(path: Optional[str] = None) -> Settings:
    path = path or os.environ.get(CONFIG_ENV_VAR)
    if not path or not Path(path).exists():
        return DEFAULT_SETTINGS

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a JSON object")

    known = {f.name for f in fields(Settings)}
    overrides = {k: _coerce(k, v) for k, v in data.items() if k in known}
    return replace(DEFAULT_SETTINGS, **overrides)
