"""
Scripted disruption scenarios for the logistics dashboard.
"""

from typing import Dict, Type

from src.simulation_layer.scenario.base import (
    ScenarioContext,
    ScenarioScript,
    ScriptRunner,
    ScriptStep,
    UnknownScenarioError,
)
from src.simulation_layer.scenario.document_issue import DocumentIssueScenario
from src.simulation_layer.scenario.supplier_delay import SupplierDelayScenario
from src.simulation_layer.scenario.traffic_jam import TrafficJamScenario

SCENARIOS: Dict[str, Type[ScenarioScript]] = {
    SupplierDelayScenario.scenario_id: SupplierDelayScenario,
    TrafficJamScenario.scenario_id: TrafficJamScenario,
    DocumentIssueScenario.scenario_id: DocumentIssueScenario,
}


def get_scenario(scenario_id: str) -> ScenarioScript:
    """Instantiate the script registered under scenario_id."""
    try:
        return SCENARIOS[scenario_id]()
    except KeyError:
        raise UnknownScenarioError(
            f"Unknown scenario '{scenario_id}'. Available: {', '.join(SCENARIOS)}"
        ) from None


__all__ = [
    "SCENARIOS",
    "ScenarioContext",
    "ScenarioScript",
    "ScriptRunner",
    "ScriptStep",
    "UnknownScenarioError",
    "get_scenario",
    "DocumentIssueScenario",
    "SupplierDelayScenario",
    "TrafficJamScenario",
]
