"""Tests for convergence_lab.simulation.clt_controller."""

import math

import numpy as np
import pytest

from convergence_lab.distributions.distribution_library import (
    Distribution,
    display_domain,
    theoretical_std_dev,
)
from convergence_lab.distributions.random_source import NumpyRandomSource
from convergence_lab.simulation.clt_controller import (
    CLTConfiguration,
    CLTController,
    CLTState,
)


def make_controller(distribution=Distribution.UNIFORM, seed=0, **config):
    config.setdefault("total_simulations", 500)
    return CLTController(
        distribution,
        configuration=CLTConfiguration(**config),
        random_source=NumpyRandomSource(seed),
    )


# ===== Initial state =====


def test_initial_state():
    snapshot = make_controller().snapshot()
    assert snapshot.state is CLTState.IDLE
    assert snapshot.sample_size == 1
    assert snapshot.distribution is Distribution.UNIFORM
    assert len(snapshot.bins) == 50
    assert snapshot.total_simulations == 500


def test_default_distribution_is_uniform():
    controller = CLTController(
        configuration=CLTConfiguration(total_simulations=500),
        random_source=NumpyRandomSource(0),
    )
    assert controller.distribution is Distribution.UNIFORM


# ===== Stepping animation =====


def test_run_animation_steps_to_maximum():
    history = make_controller().run_animation()

    assert len(history) == 50
    assert [s.sample_size for s in history] == list(range(1, 51))
    assert history[0].state is CLTState.STEPPING
    assert history[-1].state is CLTState.IDLE
    assert history[-1].is_complete


def test_tick_while_idle_is_noop():
    controller = make_controller()
    before = controller.snapshot()
    after = controller.tick()
    assert after.sample_size == before.sample_size
    assert after.bins == before.bins


def test_start_at_maximum_rewinds():
    controller = make_controller()
    controller.set_sample_size(50)
    snapshot = controller.start()
    assert snapshot.sample_size == 1
    assert snapshot.state is CLTState.STEPPING


def test_pause_keeps_sample_size():
    controller = make_controller()
    controller.start()
    controller.tick()
    controller.tick()
    snapshot = controller.pause()
    assert snapshot.state is CLTState.IDLE
    assert snapshot.sample_size == 3

    controller.tick()
    assert controller.snapshot().sample_size == 3


def test_toggle_alternates():
    controller = make_controller()
    assert controller.toggle().state is CLTState.STEPPING
    assert controller.toggle().state is CLTState.IDLE


def test_manual_sample_size_cancels_stepping():
    controller = make_controller()
    controller.start()
    controller.tick()

    snapshot = controller.set_sample_size(20)
    assert snapshot.state is CLTState.IDLE
    assert snapshot.sample_size == 20

    controller.tick()
    assert controller.snapshot().sample_size == 20


@pytest.mark.parametrize("sample_size", [0, 51])
def test_sample_size_out_of_range_raises(sample_size):
    with pytest.raises(ValueError, match="Sample size"):
        make_controller().set_sample_size(sample_size)


def test_set_distribution_resets():
    controller = make_controller()
    controller.set_sample_size(30)
    controller.start()

    snapshot = controller.set_distribution(Distribution.EXPONENTIAL)
    assert snapshot.state is CLTState.IDLE
    assert snapshot.sample_size == 1
    assert snapshot.x_domain == display_domain(Distribution.EXPONENTIAL)


def test_reset_returns_to_minimum():
    controller = make_controller()
    controller.set_sample_size(12)
    snapshot = controller.reset()
    assert snapshot.sample_size == 1
    assert snapshot.state is CLTState.IDLE


# ===== Snapshot contents =====


@pytest.mark.parametrize("sample_size", [1, 4, 25])
def test_standard_error_is_sigma_over_root_n(sample_size):
    snapshot = make_controller(Distribution.DICE).set_sample_size(sample_size)
    expected = theoretical_std_dev(Distribution.DICE) / math.sqrt(sample_size)
    assert snapshot.standard_error == pytest.approx(expected)


def test_y_domain_fixed_for_whole_animation():
    history = make_controller(Distribution.BERNOULLI).run_animation()
    domains = {s.y_domain for s in history}
    assert len(domains) == 1
    assert history[0].y_domain[0] == 0.0


def test_sample_means_are_read_only():
    snapshot = make_controller().snapshot()
    assert snapshot.sample_means.shape == (500,)
    with pytest.raises(ValueError):
        snapshot.sample_means[0] = 0.0


def test_listener_receives_each_change():
    received = []
    controller = CLTController(
        configuration=CLTConfiguration(total_simulations=500),
        random_source=NumpyRandomSource(0),
        on_update=received.append,
    )
    assert received == []

    controller.start()
    controller.tick()
    controller.pause()
    assert [s.sample_size for s in received] == [1, 2, 2]


def test_same_seed_is_deterministic():
    first = make_controller(seed=11).set_sample_size(7)
    second = make_controller(seed=11).set_sample_size(7)
    assert first.bins == second.bins
    np.testing.assert_array_equal(first.sample_means, second.sample_means)


def test_metrics_dict():
    metrics = make_controller().set_sample_size(10).get_metrics_dict()
    assert metrics["distribution"] == "uniform"
    assert metrics["sample_size"] == 10
    assert 0.0 <= metrics["ks_statistic"] <= 1.0
    assert 0.0 <= metrics["ks_p_value"] <= 1.0
    assert metrics["histogram_area"] == pytest.approx(1.0)


def test_exponential_approaches_normal():
    controller = make_controller(Distribution.EXPONENTIAL, total_simulations=2000)
    skewed = controller.snapshot().get_metrics_dict()["ks_statistic"]
    smoothed = controller.set_sample_size(50).get_metrics_dict()["ks_statistic"]
    assert smoothed < skewed


def test_print_summary(capsys):
    make_controller().snapshot().print_summary()
    out = capsys.readouterr().out
    assert "CENTRAL LIMIT THEOREM" in out
    assert "Sample Size (n):         1 / 50" in out


# ===== Configuration =====


@pytest.mark.parametrize(
    "overrides",
    [
        {"total_simulations": 0},
        {"min_sample_size": 0},
        {"min_sample_size": 10, "max_sample_size": 5},
        {"bin_count": 0},
        {"step_interval_ms": 0},
        {"y_axis_headroom": 0.5},
    ],
)
def test_invalid_configuration_raises(overrides):
    with pytest.raises(ValueError):
        CLTConfiguration(**overrides)


def test_small_simulation_count_warns(capsys):
    CLTConfiguration(total_simulations=100)
    assert "WARNING" in capsys.readouterr().out


def test_configuration_summary():
    summary = CLTConfiguration().get_summary_dict()
    assert summary["total_simulations"] == 2000
    assert summary["max_sample_size"] == 50
    assert summary["bin_count"] == 50
