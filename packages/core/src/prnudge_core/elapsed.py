"""Time models deciding whether a duration has passed since a timestamp.

Two interchangeable models are supported and chosen once per run via the
``time_model`` setting:

  wall_clock    → plain elapsed hours
  business_days → hours / 24 rounded up, counted in Monday–Friday days only

The business-day model ignores public holidays.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from datetime import datetime, timedelta

_SATURDAY = 5


class TimeModel(ABC):
    """Strategy interface used by the evaluator for both thresholds."""

    name: str = ""

    @abstractmethod
    def has_elapsed(self, reference: datetime, required_hours: float, now: datetime) -> bool:
        """Return True once ``required_hours`` have passed since ``reference`` at ``now``."""


class WallClock(TimeModel):
    name = "wall_clock"

    def has_elapsed(self, reference: datetime, required_hours: float, now: datetime) -> bool:
        if required_hours <= 0:
            return True
        return now - reference >= timedelta(hours=required_hours)


class BusinessDays(TimeModel):
    """Counts whole calendar days stepped forward from ``reference``, skipping weekends.

    A request made on Friday with a 24-hour turnaround becomes due on Monday
    at the same time of day: Saturday and Sunday are stepped over without
    being counted.
    """

    name = "business_days"

    def has_elapsed(self, reference: datetime, required_hours: float, now: datetime) -> bool:
        required_days = math.ceil(required_hours / 24)
        if required_days <= 0:
            return True

        counted = 0
        day = reference + timedelta(days=1)
        while day <= now:
            if day.weekday() < _SATURDAY:
                counted += 1
                if counted >= required_days:
                    return True
            day += timedelta(days=1)
        return False


_MODELS: dict[str, type[TimeModel]] = {
    WallClock.name: WallClock,
    BusinessDays.name: BusinessDays,
}

TIME_MODEL_NAMES = tuple(_MODELS)


def get_time_model(name: str) -> TimeModel:
    try:
        return _MODELS[name]()
    except KeyError:
        raise ValueError(f"Unknown time model: {name!r}. Choose one of {', '.join(TIME_MODEL_NAMES)}.")
