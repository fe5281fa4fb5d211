"""Validated configuration model for the paced queue.

LimiterSpec holds the minimum spacing between releases, in milliseconds.
Construction rejects missing or non-numeric values and clamps negatives to 0.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping

from core.errors import ConfigurationError

# Keys accepted in a specs mapping, in lookup order.
_SPEC_KEYS = ("tasks_per_millisecond", "tasksPerMillisecond")


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a meaningful interval
    return isinstance(value, (numbers.Real, Decimal)) and not isinstance(value, bool)


@dataclass(frozen=True)
class LimiterSpec:
    """Minimum interval between two releases.

    Field groups:
    - tasks_per_millisecond: spacing in milliseconds, >= 0 after validation
    """

    tasks_per_millisecond: float

    def __post_init__(self) -> None:
        value = self.tasks_per_millisecond
        if not _is_number(value):
            raise ConfigurationError(
                f"tasks_per_millisecond must be a number, got {type(value).__name__}"
            )
        as_float = float(value)
        if not math.isfinite(as_float):
            raise ConfigurationError("tasks_per_millisecond must be finite")

        # Negative spacing means "no pacing"
        object.__setattr__(self, "tasks_per_millisecond", max(0.0, as_float))

    @property
    def interval_seconds(self) -> float:
        return self.tasks_per_millisecond / 1000.0

    @classmethod
    def from_mapping(cls, specs: Mapping[str, Any]) -> "LimiterSpec":
        if specs is None:
            raise ConfigurationError("Missing limiter specs")

        for key in _SPEC_KEYS:
            if key in specs:
                return cls(tasks_per_millisecond=specs[key])

        raise ConfigurationError("Missing tasks_per_millisecond")
