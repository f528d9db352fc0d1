"""
Application Services

Orchestration of complete analysis runs.
"""

from .scenario_service import (
    ScenarioService,
    ScenarioRequest,
    ScenarioReport,
    ScenarioProgress,
)

__all__ = [
    "ScenarioService",
    "ScenarioRequest",
    "ScenarioReport",
    "ScenarioProgress",
]
