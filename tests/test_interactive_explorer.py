"""Tests for convergence_lab.visualization.interactive_explorer (Agg backend)."""

import pytest

from convergence_lab.distributions.distribution_library import Distribution
from convergence_lab.distributions.random_source import NumpyRandomSource
from convergence_lab.simulation.clt_controller import CLTConfiguration, CLTState
from convergence_lab.simulation.lln_controller import LLNState
from convergence_lab.visualization.interactive_explorer import InteractiveExplorer


@pytest.fixture
def explorer():
    return InteractiveExplorer(
        clt_configuration=CLTConfiguration(total_simulations=500, max_sample_size=5),
        random_source=NumpyRandomSource(0),
    )


def test_initial_panels(explorer):
    assert explorer.lln_controller.distribution is Distribution.BERNOULLI
    assert explorer.clt_controller.distribution is Distribution.UNIFORM
    assert len(explorer.clt_axes.patches) == 50
    assert explorer.lln_toggle_button.label.get_text() == "Start"
    assert explorer.lln_speed_slider.val == 151


def test_lln_toggle_and_timer_tick(explorer):
    explorer._on_lln_toggle()
    assert explorer.lln_controller.state is LLNState.RUNNING
    assert explorer.lln_toggle_button.label.get_text() == "Pause"

    explorer._on_lln_timer()
    explorer._on_lln_timer()
    assert explorer.lln_controller.snapshot().sample_count == 2

    explorer._on_lln_toggle()
    assert explorer.lln_controller.state is LLNState.PAUSED
    assert explorer.lln_toggle_button.label.get_text() == "Start"


def test_lln_speed_slider_sets_interval(explorer):
    explorer.lln_speed_slider.set_val(200)
    assert explorer.lln_controller.tick_interval_ms == 1
    assert explorer.lln_timer.interval == 1
    assert explorer.lln_controller.batch_size == 5


def test_lln_distribution_radio_resets(explorer):
    explorer._on_lln_toggle()
    explorer._on_lln_timer()

    explorer._on_lln_distribution("dice")
    snapshot = explorer.lln_controller.snapshot()
    assert snapshot.distribution is Distribution.DICE
    assert snapshot.state is LLNState.IDLE
    assert snapshot.sample_count == 0
    assert explorer.lln_axes.get_ylim() == pytest.approx((1.0, 6.0))


def test_lln_reset(explorer):
    explorer._on_lln_toggle()
    explorer._on_lln_timer()
    explorer._on_lln_reset()
    assert explorer.lln_controller.snapshot().sample_count == 0
    assert explorer.lln_controller.state is LLNState.IDLE


def test_clt_animation_through_timer(explorer):
    explorer._on_clt_toggle()
    assert explorer.clt_controller.is_stepping

    for _ in range(4):
        explorer._on_clt_timer()

    assert explorer.clt_controller.sample_size == 5
    assert explorer.clt_controller.state is CLTState.IDLE
    assert explorer.clt_sample_size_slider.val == 5
    assert explorer.clt_toggle_button.label.get_text() == "Restart"


def test_clt_slider_cancels_stepping(explorer):
    explorer._on_clt_toggle()
    explorer._on_clt_timer()

    explorer.clt_sample_size_slider.set_val(4)
    assert explorer.clt_controller.state is CLTState.IDLE
    assert explorer.clt_controller.sample_size == 4


def test_clt_distribution_radio(explorer):
    explorer.clt_sample_size_slider.set_val(3)
    explorer._on_clt_distribution("exponential")

    assert explorer.clt_controller.distribution is Distribution.EXPONENTIAL
    assert explorer.clt_controller.sample_size == 1
    assert explorer.clt_sample_size_slider.val == 1
    assert explorer.clt_axes.get_xlim() == pytest.approx((0.0, 3.0))


def test_clt_reset(explorer):
    explorer.clt_sample_size_slider.set_val(4)
    explorer._on_clt_reset()
    assert explorer.clt_controller.sample_size == 1
