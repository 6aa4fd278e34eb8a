"""skyhop/scenarios — Scenario definition, loading, conditions, and runner."""

from skyhop.scenarios.conditions import (
    VALID_FAILURE_TYPES,
    VALID_SUCCESS_TYPES,
    FailureCondition,
    SuccessCondition,
    check_conditions,
)
from skyhop.scenarios.loader import ScenarioDef, ViewportDef, load_scenario, load_scenarios
from skyhop.scenarios.runner import FrameRecord, ScenarioOutcome, compute_metrics, run_scenario
from skyhop.scenarios.output import format_outcome, print_outcome, print_summary, save_results

__all__ = [
    "VALID_SUCCESS_TYPES",
    "VALID_FAILURE_TYPES",
    "SuccessCondition",
    "FailureCondition",
    "check_conditions",
    "ScenarioDef",
    "ViewportDef",
    "load_scenario",
    "load_scenarios",
    "FrameRecord",
    "ScenarioOutcome",
    "compute_metrics",
    "run_scenario",
    "format_outcome",
    "print_outcome",
    "print_summary",
    "save_results",
]
