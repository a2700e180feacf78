"""Configuration management."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml


@dataclass(frozen=True)
class PlannerSettings:
    """Resolved planner settings.

    Only labels, category keys and the routine horizon are configurable;
    the suggestion windows and caps are fixed in ``planner_engine.suggestions``.
    """

    horizon_months: int = 3
    exclude_external: bool = False
    productivity_category: str = "Productivity"
    work_category: str = "Work"
    health_categories: tuple[str, ...] = ("Health", "Sport")
    social_category: str = "Social"
    frequency_reason: str = "Usually every {days} days or so"
    weekly_review_title: str = "Weekly Review"
    weekly_review_reason: str = "Start the week on the right foot!"
    inbox_title: str = "Clear inbox"
    inbox_reason: str = "Finish the week with a clear mind"
    health_title: str = "Workout / Walk"
    health_reason: str = "No recent health activity detected"
    social_title: str = "Call a friend or relative"
    social_reason: str = "It's the weekend, make the most of it!"


_TEXT_FIELDS = {
    "frequency_reason",
    "weekly_review_title",
    "weekly_review_reason",
    "inbox_title",
    "inbox_reason",
    "health_title",
    "health_reason",
    "social_title",
    "social_reason",
}


def load_config(config_path: str) -> dict[str, Any]:
    """Load configuration from YAML or JSON file."""

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    suffix = path.suffix.lower()
    with open(path, encoding="utf-8") as handle:
        if suffix in (".yaml", ".yml"):
            payload = yaml.safe_load(handle)
        elif suffix == ".json":
            payload = json.load(handle)
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValueError(f"Config root must be a mapping: {config_path}")
    return payload


def get_default_config() -> dict[str, Any]:
    """Get default configuration."""

    defaults = PlannerSettings()
    return {
        "routines": {
            "horizon_months": defaults.horizon_months,
        },
        "suggestions": {
            "exclude_external": defaults.exclude_external,
        },
        "categories": {
            "productivity": defaults.productivity_category,
            "work": defaults.work_category,
            "health": list(defaults.health_categories),
            "social": defaults.social_category,
        },
        "texts": {
            "frequency_reason": defaults.frequency_reason,
            "weekly_review_title": defaults.weekly_review_title,
            "weekly_review_reason": defaults.weekly_review_reason,
            "inbox_title": defaults.inbox_title,
            "inbox_reason": defaults.inbox_reason,
            "health_title": defaults.health_title,
            "health_reason": defaults.health_reason,
            "social_title": defaults.social_title,
            "social_reason": defaults.social_reason,
        },
    }


def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def settings_from_config(config: dict[str, Any]) -> PlannerSettings:
    """Build settings from a (possibly partial) nested config mapping."""

    cfg = _merge(get_default_config(), config)
    horizon = cfg["routines"]["horizon_months"]
    if isinstance(horizon, bool) or not isinstance(horizon, int) or horizon < 0:
        raise ValueError(f"routines.horizon_months must be a non-negative integer, got {horizon!r}")

    health = cfg["categories"]["health"]
    if isinstance(health, str):
        health = [health]

    return PlannerSettings(
        horizon_months=horizon,
        exclude_external=bool(cfg["suggestions"]["exclude_external"]),
        productivity_category=str(cfg["categories"]["productivity"]),
        work_category=str(cfg["categories"]["work"]),
        health_categories=tuple(str(c) for c in health),
        social_category=str(cfg["categories"]["social"]),
        **{key: str(value) for key, value in cfg["texts"].items() if key in _TEXT_FIELDS},
    )


def load_settings(config_path: Optional[str] = None) -> PlannerSettings:
    """Load settings from a file merged over the defaults."""

    if config_path is None:
        return PlannerSettings()
    return settings_from_config(load_config(config_path))
