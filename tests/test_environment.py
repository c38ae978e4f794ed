"""Weather / traffic randomization."""

import random

from src.simulation_layer.environment import THINKING_MESSAGES, EnvironmentModel
from src.simulation_layer.models import SimulationState


def test_no_flip_above_probability(scripted_random):
    state = SimulationState()
    model = EnvironmentModel(rng=scripted_random([0.5, 0.5]))
    model.tick(state, now=0.0)
    assert state.environment.weather == "sunny"
    assert state.environment.traffic == "smooth"


def test_flips_below_probability(scripted_random):
    state = SimulationState()
    # weather roll 0.01 -> rainy (index 2), traffic roll 0.01 -> moderate (index 1)
    model = EnvironmentModel(rng=scripted_random([0.01, 0.01], picks=[2, 1]))
    model.tick(state, now=0.0)
    assert state.environment.weather == "rainy"
    assert state.environment.traffic == "moderate"


def test_force_jam_overrides_traffic_draw(scripted_random):
    state = SimulationState()
    model = EnvironmentModel(rng=scripted_random([0.9, 0.01], picks=[0]))
    model.tick(state, now=0.0, force_jam=True)
    assert state.environment.traffic == "jam"


def test_force_jam_needs_a_redraw(scripted_random):
    state = SimulationState()
    model = EnvironmentModel(rng=scripted_random([0.9, 0.9]))
    model.tick(state, now=0.0, force_jam=True)
    assert state.environment.traffic == "smooth"


def test_seeded_runs_are_reproducible():
    def run(seed):
        state = SimulationState()
        model = EnvironmentModel(rng=random.Random(seed), weather_probability=0.3, traffic_probability=0.3)
        history = []
        for tick in range(200):
            model.tick(state, now=tick * 0.15)
            history.append((state.environment.weather, state.environment.traffic))
        return history

    assert run(11) == run(11)


def test_thinking_message_only_for_open_document_issue(scripted_random):
    state = SimulationState()
    model = EnvironmentModel(rng=scripted_random([0.9, 0.9, 0.0]), thinking_duration=2.0)
    model.tick(state, now=5.0)
    assert state.thinking_message is None

    state.current_scenario = "document-issue"
    state.document_issue = True
    model = EnvironmentModel(rng=scripted_random([0.9, 0.9, 0.0], picks=[3]), thinking_duration=2.0)
    model.tick(state, now=5.0)
    assert state.thinking_message == THINKING_MESSAGES[3]
    assert EnvironmentModel.is_thinking(state, 6.9)
    assert not EnvironmentModel.is_thinking(state, 7.0)


def test_no_thinking_once_document_fixed(scripted_random):
    state = SimulationState(current_scenario="document-issue", document_issue=True, document_fixed=True)
    model = EnvironmentModel(rng=scripted_random([0.9, 0.9, 0.0]))
    model.tick(state, now=0.0)
    assert state.thinking_message is None
