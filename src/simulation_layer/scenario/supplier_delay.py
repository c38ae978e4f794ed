"""
Supplier delay: the supplier at Origin 2 misses its loading slot and
Truck 2 (T002) is held at origin.
"""

from typing import List

from src.simulation_layer.models import KpiSummary, ScenarioPhase
from src.simulation_layer.scenario.base import ScenarioContext, ScenarioScript, ScriptStep


class SupplierDelayScenario(ScenarioScript):
    scenario_id = "supplier-delay"
    title = "Supplier Delay"
    focus_truck = "T002"
    kpis = KpiSummary(
        delays_prevented=1, time_saved=4.0, cost_saved=250, sla_improvement=8, active_agents=2
    )

    def steps(self) -> List[ScriptStep]:
        return [
            ScriptStep(0, "announce-agents", self._announce, ScenarioPhase.AGENTS_ANNOUNCED),
            ScriptStep(2, "detect-loading-delay", self._detect, ScenarioPhase.EVENT_DETECTED),
            ScriptStep(4, "assess-impact", self._assess, ScenarioPhase.IMPACT_ASSESSED),
        ]

    def _announce(self, ctx: ScenarioContext) -> None:
        now = ctx.now()
        ctx.state.start_activity(
            "sd-1", "Supplier Monitoring Agent", "Monitoring supplier loading schedule", now
        )
        ctx.state.start_activity(
            "sd-2", "Logistics Agent", "Tracking shipment readiness", now + 0.1
        )

    def _detect(self, ctx: ScenarioContext) -> None:
        now = ctx.now()
        ctx.state.complete_activity("sd-1", "Detected loading delay at Origin 2", now)
        ctx.state.start_activity(
            "sd-3", "Risk Assessment Agent", "Calculating impact on delivery timeline", now
        )
        ctx.update_truck(self.focus_truck, status="delayed", is_affected=True, eta="65 min")
        ctx.state.post(
            "Supplier Monitoring Agent",
            "⚠️ Supplier at Origin 2 failed to load shipment on time. Truck T002 delayed at origin.",
            "warning",
        )
        ctx.state.recommendation_available = True

    def _assess(self, ctx: ScenarioContext) -> None:
        now = ctx.now()
        ctx.state.complete_activity("sd-3", "Impact analysis complete: 4h delay predicted", now)
        ctx.state.start_activity("sd-4", "Strategy Agent", "Evaluating rerouting options", now)

    def approve(self, ctx: ScenarioContext) -> None:
        now = ctx.now()
        ctx.state.post(
            "Logistics Agent",
            "📦 Recommending reroute of Truck T003 to pick up critical components from Origin 2.",
            "recommendation",
        )
        ctx.state.post(
            "Efficiency Agent",
            "⏱️ Potential delay avoided: 4h. Cost saved: $250.",
            "success",
        )
        ctx.update_truck(
            self.focus_truck,
            status="on-time",
            name="Truck 2 (Rerouted)",
            is_affected=False,
            eta="40 min",
        )
        ctx.state.complete_activity("sd-4", "Selected optimal rerouting solution", now)
        ctx.state.start_activity(
            "sd-5", "Efficiency Agent", "Calculating time and cost savings", now
        )
