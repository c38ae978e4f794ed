"""
CLI entry point for running a scenario headless on a virtual clock.

Example:
    python scripts/run_simulation.py --scenario traffic-jam --duration 20 --approve-at 6 --seed 42
    python scripts/run_simulation.py --scenario document-issue --export
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List

import pandas as pd

# Ensure project root is in sys.path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import get_settings
from src.simulation_layer.engine import SimulationEngine
from src.simulation_layer.scenario import SCENARIOS
from src.simulation_layer.scheduler import ManualScheduler


def setup_logging(verbose: bool = False, log_file: Path | None = None) -> None:
    """Console logging, plus a log file when one is given."""
    level = logging.DEBUG if verbose else logging.INFO
    formatter = logging.Formatter('[%(levelname)s] %(message)s')

    logger = logging.getLogger()
    logger.setLevel(level)
    # 기존 핸들러 제거 (중복 방지)
    if logger.handlers:
        logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8', mode='w')
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)


def run(
    engine: SimulationEngine,
    scenario: str,
    duration: float,
    approve_at: float | None,
) -> Dict[str, List[dict]]:
    """
    Run one scenario for `duration` virtual seconds.

    Returns:
        {"trajectory": [...], "messages": [...]} rows for export.
    """
    scheduler = engine.scheduler
    interval = engine.settings.tick_interval_s
    trajectory: List[dict] = []
    messages: List[dict] = []

    engine.select_scenario(scenario)
    start = scheduler.now()
    seen_messages = 0
    seen_activities: Dict[str, str] = {}
    approved = False

    while scheduler.now() - start < duration:
        scheduler.advance(interval)
        engine.tick()
        elapsed = scheduler.now() - start

        if approve_at is not None and not approved and elapsed >= approve_at:
            approved = engine.approve()
            if approved:
                print(f"  {elapsed:6.2f}s  >> recommendation approved")

        for message in engine.state.messages[seen_messages:]:
            print(f"  {elapsed:6.2f}s  [{message.kind}] {message.agent}: {message.message}")
            messages.append({"elapsed_s": round(elapsed, 3), **message.to_dict()})
        seen_messages = len(engine.state.messages)

        for activity in engine.state.activities:
            if seen_activities.get(activity.id) != activity.status:
                seen_activities[activity.id] = activity.status
                print(f"  {elapsed:6.2f}s  ({activity.status}) {activity.agent}: {activity.action}")

        for truck in engine.state.trucks:
            trajectory.append({
                "elapsed_s": round(elapsed, 3),
                "truck_id": truck.id,
                "segment": truck.current_segment,
                "progress": truck.progress,
                "x": truck.position.x,
                "y": truck.position.y,
                "status": truck.status,
                "weather": engine.state.environment.weather,
                "traffic": engine.state.environment.traffic,
            })

    return {"trajectory": trajectory, "messages": messages}


def main():
    parser = argparse.ArgumentParser(description="Logistics scenario simulation")
    parser.add_argument(
        "--scenario",
        choices=list(SCENARIOS),
        default="supplier-delay",
        help="Scenario to run (default: supplier-delay)",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=20.0,
        help="Virtual seconds to simulate (default: 20)",
    )
    parser.add_argument(
        "--approve-at",
        type=float,
        default=6.0,
        help="Approve the recommendation at this virtual second (negative: never)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for environment randomization")
    parser.add_argument("--export", action="store_true", help="Write trajectory/messages CSV")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    settings = get_settings()
    setup_logging(args.verbose)

    sim_settings = settings.simulation
    if args.seed is not None:
        sim_settings = sim_settings.model_copy(update={"random_seed": args.seed})

    print("=" * 80)
    print(f"Logistics Simulation: {SCENARIOS[args.scenario].title}")
    print("=" * 80)
    print(f"Duration: {args.duration:.1f}s (tick {sim_settings.tick_interval_s}s)")
    print(f"Seed: {sim_settings.random_seed}")
    print()

    engine = SimulationEngine(scheduler=ManualScheduler(), settings=sim_settings)
    approve_at = args.approve_at if args.approve_at >= 0 else None
    rows = run(engine, args.scenario, args.duration, approve_at)

    state = engine.state
    print()
    print(f"Phase: {state.phase.value}  Completed: {state.scenario_completed}")
    print(f"Weather: {state.environment.weather}  Traffic: {state.environment.traffic}")
    if state.scenario_completed:
        kpis = state.kpis
        print(
            f"KPIs: delays prevented {kpis.delays_prevented}, time saved {kpis.time_saved:.1f}h, "
            f"cost saved ${kpis.cost_saved:.0f}, SLA +{kpis.sla_improvement:.0f}%, "
            f"agents {kpis.active_agents}"
        )

    if args.export:
        output_dir = settings.paths.output_dir
        output_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        trajectory_path = output_dir / f"{args.scenario}_trajectory_{stamp}.csv"
        messages_path = output_dir / f"{args.scenario}_messages_{stamp}.csv"
        pd.DataFrame(rows["trajectory"]).to_csv(trajectory_path, index=False, encoding="utf-8-sig")
        pd.DataFrame(rows["messages"]).to_csv(messages_path, index=False, encoding="utf-8-sig")
        print(f"\nSaved: {trajectory_path}")
        print(f"Saved: {messages_path}")


if __name__ == "__main__":
    main()
