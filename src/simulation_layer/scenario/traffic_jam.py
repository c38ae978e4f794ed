"""
Traffic jam: Truck 1 (T001) runs into a jam on Route A after leaving
Checkpoint A; the strategy agent proposes Alt Route B.
"""

from typing import List

from src.simulation_layer.models import KpiSummary, ScenarioPhase
from src.simulation_layer.scenario.base import ScenarioContext, ScenarioScript, ScriptStep


class TrafficJamScenario(ScenarioScript):
    scenario_id = "traffic-jam"
    title = "Traffic Jam"
    focus_truck = "T001"
    kpis = KpiSummary(
        delays_prevented=1, time_saved=1.8, cost_saved=320, sla_improvement=15, active_agents=2
    )

    # Where T001 is put once the script starts, and past which traffic is forced to jam
    JAM_SEGMENT = 1
    JAM_PROGRESS = 30

    def steps(self) -> List[ScriptStep]:
        return [
            ScriptStep(0, "announce-agents", self._announce, ScenarioPhase.AGENTS_ANNOUNCED),
            ScriptStep(1, "position-truck", self._position),
            ScriptStep(2, "detect-jam", self._detect, ScenarioPhase.EVENT_DETECTED),
            ScriptStep(4, "assess-impact", self._assess, ScenarioPhase.IMPACT_ASSESSED),
        ]

    def _announce(self, ctx: ScenarioContext) -> None:
        now = ctx.now()
        ctx.state.start_activity(
            "tj-1", "GPS Monitoring Agent", "Tracking real-time vehicle positions", now
        )
        ctx.state.start_activity(
            "tj-2", "Traffic Analysis Agent", "Monitoring traffic conditions", now + 0.1
        )

    def _position(self, ctx: ScenarioContext) -> None:
        ctx.move_truck(self.focus_truck, self.JAM_SEGMENT, self.JAM_PROGRESS)

    def _detect(self, ctx: ScenarioContext) -> None:
        now = ctx.now()
        ctx.state.complete_activity("tj-2", "Detected severe traffic jam on Route A", now)
        ctx.state.start_activity("tj-3", "Risk Detection Agent", "Calculating delay impact", now)
        ctx.state.environment.traffic = "jam"
        ctx.update_truck(self.focus_truck, status="delayed", is_affected=True, eta="120 min")
        ctx.state.post(
            "Risk Detection Agent",
            "🚧 Detected traffic jam near Route A - expected delay: 2.5h.",
            "warning",
        )
        ctx.state.recommendation_available = True

    def _assess(self, ctx: ScenarioContext) -> None:
        now = ctx.now()
        ctx.state.complete_activity("tj-3", "Delay impact analysis complete", now)
        ctx.state.start_activity("tj-4", "Strategy Agent", "Analyzing alternative routes", now)

    def approve(self, ctx: ScenarioContext) -> None:
        now = ctx.now()
        ctx.state.post(
            "Strategy Agent",
            "🧠 Rerouting to Alt Route B. ETA improves by 1.8h. Fuel usage increases by 3%.",
            "recommendation",
        )
        ctx.state.post("Efficiency Agent", "📉 Delay minimized. Final delivery meets SLA.", "success")
        ctx.update_truck(
            self.focus_truck,
            status="rerouted",
            name="Truck 1 (Rerouted)",
            is_affected=False,
            eta="60 min",
        )
        ctx.state.complete_activity("tj-4", "Selected Alt Route B as optimal solution", now)
        ctx.state.start_activity(
            "tj-5", "Efficiency Agent", "Calculating fuel usage and time impact", now
        )

    def forces_jam(self, ctx: ScenarioContext) -> bool:
        if ctx.state.scenario_completed:
            return False
        truck = ctx.truck(self.focus_truck)
        return (
            truck is not None
            and truck.current_segment >= self.JAM_SEGMENT
            and truck.progress > self.JAM_PROGRESS
        )
