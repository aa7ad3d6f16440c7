import math
import os
import re
from pathlib import Path
from typing import Optional

import yaml

from prnudge_core.elapsed import TIME_MODEL_NAMES
from prnudge_core.errors import ConfigurationError
from prnudge_core.models import ReminderConfig

DEFAULT_CONFIG: dict = {
    "reminder_message": None,
    "review_turnaround_hours": None,
    "review_rolling_reminder_hours": None,
    "time_model": "wall_clock",
}

# GitHub Actions exposes `with:` inputs as INPUT_<NAME> environment variables.
_ACTION_INPUTS = ("reminder_message", "review_turnaround_hours", "review_rolling_reminder_hours", "time_model")


def _action_input(name: str) -> Optional[str]:
    value = os.environ.get(f"INPUT_{name.upper()}", "").strip()
    return value or None


def load_config(config_path: str = ".prnudge.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .prnudge.yml in the current directory
      3. GitHub Actions inputs (INPUT_* environment variables)
      4. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            try:
                file_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Could not parse {config_path}: {e}") from e
        if not isinstance(file_config, dict):
            raise ConfigurationError(f"{config_path} must contain a mapping of settings.")
        config.update(file_config)

    for name in _ACTION_INPUTS:
        value = _action_input(name)
        if value is not None:
            config[name] = value

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    return config


def _parse_hours(config: dict, key: str) -> float:
    raw = config.get(key)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise ConfigurationError(f"{key} is required.")
    if isinstance(raw, bool):
        raise ConfigurationError(f"{key} must be a number of hours, got {raw!r}.")
    try:
        hours = float(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{key} must be a number of hours, got {raw!r}.")
    if not math.isfinite(hours) or hours <= 0:
        raise ConfigurationError(f"{key} must be a positive number of hours, got {raw!r}.")
    return hours


def build_reminder_config(config: dict) -> ReminderConfig:
    """Validate a loaded config dict into the immutable settings used for a run."""
    message = config.get("reminder_message")
    if not message or not str(message).strip():
        raise ConfigurationError("reminder_message is required.")
    message = str(message)
    try:
        re.compile(message)
    except re.error as e:
        raise ConfigurationError(f"reminder_message is not a valid regular expression: {e}") from e

    time_model = config.get("time_model") or "wall_clock"
    if time_model not in TIME_MODEL_NAMES:
        raise ConfigurationError(f"time_model must be one of {', '.join(TIME_MODEL_NAMES)}, got {time_model!r}.")

    return ReminderConfig(
        reminder_message=message,
        review_turnaround_hours=_parse_hours(config, "review_turnaround_hours"),
        review_rolling_reminder_hours=_parse_hours(config, "review_rolling_reminder_hours"),
        time_model=time_model,
    )
