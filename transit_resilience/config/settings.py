"""
Application Settings

Run defaults and time-of-day presets, from environment variables or a
YAML file.
"""

import os
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional

import yaml

from transit_resilience.core.models import Objective, TimeOfDayCoefficients


TIME_OF_DAY_PRESETS: Dict[str, TimeOfDayCoefficients] = {
    "morning": TimeOfDayCoefficients(1.45, 1.25, 0.75, "Morning Peak (7-10 AM)"),
    "afternoon": TimeOfDayCoefficients(1.15, 1.05, 0.90, "Afternoon (12-4 PM)"),
    "evening": TimeOfDayCoefficients(1.65, 1.35, 0.70, "Evening Peak (5-9 PM)"),
    "night": TimeOfDayCoefficients(0.85, 1.40, 1.0, "Night (10 PM-6 AM)"),
    "standard": TimeOfDayCoefficients(1.0, 1.0, 1.0, "Standard"),
}


def _as_bool(value: str) -> bool:
    return str(value).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Defaults for one analysis run."""

    objective: str = "time"
    time_of_day: str = "standard"
    budget: int = 2
    od_sample_size: int = 40
    seed: Optional[int] = None
    log_level: str = "INFO"
    cumulative_reference: bool = False
    time_of_day_presets: Dict[str, TimeOfDayCoefficients] = field(
        default_factory=lambda: dict(TIME_OF_DAY_PRESETS)
    )

    def __post_init__(self):
        Objective.from_string(self.objective)
        if self.budget < 0:
            raise ValueError(f"budget must be >= 0, got {self.budget}")
        if self.od_sample_size < 0:
            raise ValueError(f"od_sample_size must be >= 0, got {self.od_sample_size}")

    @property
    def objective_enum(self) -> Objective:
        return Objective.from_string(self.objective)

    def coefficients(self, time_of_day: Optional[str] = None) -> TimeOfDayCoefficients:
        """Coefficients of a preset; unknown names fall back to standard."""
        key = (time_of_day or self.time_of_day or "standard").lower()
        return self.time_of_day_presets.get(key, self.time_of_day_presets.get("standard", TimeOfDayCoefficients()))

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        seed = os.getenv("TRANSIT_SEED")
        return cls(
            objective=os.getenv("TRANSIT_OBJECTIVE", "time"),
            time_of_day=os.getenv("TRANSIT_TIME_OF_DAY", "standard"),
            budget=int(os.getenv("TRANSIT_BUDGET", "2")),
            od_sample_size=int(os.getenv("TRANSIT_OD_SAMPLE_SIZE", "40")),
            seed=int(seed) if seed not in (None, "") else None,
            log_level=os.getenv("TRANSIT_LOG_LEVEL", "INFO"),
            cumulative_reference=_as_bool(os.getenv("TRANSIT_CUMULATIVE_REFERENCE", "false")),
        )

    @classmethod
    def from_yaml(cls, path: str, base: Optional["Settings"] = None) -> "Settings":
        """
        Load settings from a YAML file, on top of ``base`` (or defaults).

        Example file::

            objective: cost
            budget: 3
            time_of_day: evening
            time_of_day_presets:
              festival:
                time_multiplier: 1.8
                cost_multiplier: 1.5
                label: Festival Traffic
        """
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a mapping at top level")
        return cls.from_dict(data, base=base)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base: Optional["Settings"] = None) -> "Settings":
        base = base or cls()
        known = {f.name for f in fields(cls)} - {"time_of_day_presets"}
        values = {name: getattr(base, name) for name in known}
        values.update({k: v for k, v in data.items() if k in known})

        presets = dict(base.time_of_day_presets)
        for name, raw in (data.get("time_of_day_presets") or {}).items():
            presets[str(name).lower()] = TimeOfDayCoefficients(
                time_multiplier=float(raw.get("time_multiplier", 1.0)),
                cost_multiplier=float(raw.get("cost_multiplier", 1.0)),
                capacity_factor=float(raw.get("capacity_factor", 1.0)),
                label=str(raw.get("label", name)),
            )
        return cls(time_of_day_presets=presets, **values)


def coefficients_for(time_of_day: str) -> TimeOfDayCoefficients:
    """Built-in preset by name; unknown names give standard coefficients."""
    return TIME_OF_DAY_PRESETS.get((time_of_day or "").lower(), TIME_OF_DAY_PRESETS["standard"])
