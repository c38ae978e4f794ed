"""
Document issue: a customs-code mismatch on Truck 3's (T003) shipment is
caught by document intelligence and fixed from the supplier API.
"""

from typing import List

from src.simulation_layer.models import KpiSummary, ScenarioPhase
from src.simulation_layer.scenario.base import ScenarioContext, ScenarioScript, ScriptStep


class DocumentIssueScenario(ScenarioScript):
    scenario_id = "document-issue"
    title = "Document Issue"
    focus_truck = "T003"
    kpis = KpiSummary(
        delays_prevented=1, time_saved=2.5, cost_saved=850, sla_improvement=12, active_agents=3
    )

    def steps(self) -> List[ScriptStep]:
        return [
            ScriptStep(0, "announce-agents", self._announce, ScenarioPhase.AGENTS_ANNOUNCED),
            ScriptStep(1, "position-truck", self._position),
            ScriptStep(2, "detect-mismatch", self._detect, ScenarioPhase.EVENT_DETECTED),
            ScriptStep(4, "assess-impact", self._assess, ScenarioPhase.IMPACT_ASSESSED),
        ]

    def _announce(self, ctx: ScenarioContext) -> None:
        now = ctx.now()
        ctx.state.start_activity(
            "di-1", "Document Intelligence Agent", "Scanning shipment documentation", now
        )
        ctx.state.start_activity(
            "di-2", "Compliance Agent", "Monitoring regulatory requirements", now + 0.1
        )

    def _position(self, ctx: ScenarioContext) -> None:
        ctx.move_truck(self.focus_truck, 1, 40)

    def _detect(self, ctx: ScenarioContext) -> None:
        now = ctx.now()
        ctx.state.complete_activity("di-1", "Found documentation mismatch in customs code", now)
        ctx.state.start_activity(
            "di-3", "Risk Assessment Agent", "Evaluating customs clearance impact", now
        )
        ctx.update_truck(self.focus_truck, status="cautious", is_affected=True, eta="90 min")
        ctx.state.document_issue = True
        ctx.state.post(
            "Document Intelligence Agent",
            "📄 Mismatch detected in customs code for shipment #82491. "
            "Flagged for manual verification.",
            "warning",
        )
        ctx.state.recommendation_available = True

    def _assess(self, ctx: ScenarioContext) -> None:
        now = ctx.now()
        ctx.state.complete_activity("di-3", "Clearance delay of 3.5h predicted", now)
        ctx.state.start_activity(
            "di-4", "Insight Agent", "Analyzing historical documentation issues", now
        )

    def approve(self, ctx: ScenarioContext) -> None:
        now = ctx.now()
        ctx.state.post(
            "Compliance Agent",
            "📝 Suggested fix: Pull correct documentation from supplier API. "
            "Notify customs handling team.",
            "recommendation",
        )
        ctx.state.post(
            "Insight Agent",
            "🚦 3 similar issues detected this month. "
            "Recommend automated document validation pre-arrival.",
            "info",
        )
        ctx.state.document_fixed = True
        # Cleared for customs; the ETA keeps the clearance time already lost
        ctx.update_truck(self.focus_truck, status="on-time", is_affected=False)
        ctx.state.complete_activity("di-4", "Identified 3 similar issues this month", now)
        ctx.state.start_activity(
            "di-5", "Document Fix Agent", "Retrieving correct customs code from supplier API", now
        )

    def complete(self, ctx: ScenarioContext) -> None:
        ctx.state.complete_activity("di-5", "Applied document correction", ctx.now())
        super().complete(ctx)
