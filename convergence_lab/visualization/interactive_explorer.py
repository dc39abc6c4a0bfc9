"""
Interactive Explorer
====================

A two-panel matplotlib window that runs the LLN and CLT controllers side
by side.

Each panel owns one canvas timer, which is the periodic tick source for
its controller:
- LLN: the timer interval follows the speed slider (higher = faster).
- CLT: the timer fires every `step_interval_ms` while stepping.

Widgets map one-to-one onto controller transitions:

    Widget                          Transition
    -----------------------------   ---------------------------------
    LLN distribution radio          LLNController.set_distribution
    LLN speed slider                LLNController.set_speed_from_slider
    LLN Start/Pause, Reset          LLNController.toggle / reset
    CLT distribution radio          CLTController.set_distribution
    CLT sample size slider          CLTController.set_sample_size
    CLT Start/Pause, Reset          CLTController.toggle / reset

Timers are stopped before any manual change is applied so a pending
tick cannot overwrite the user's choice.
"""

from typing import Dict, Optional

import matplotlib.pyplot as plt
from matplotlib.widgets import Button, RadioButtons, Slider

from ..distributions.distribution_library import Distribution
from ..distributions.random_source import AbstractRandomSource
from ..simulation.lln_controller import LLNController, LLNConfiguration, LLNSnapshot
from ..simulation.clt_controller import CLTController, CLTConfiguration, CLTSnapshot
from .convergence_plotter import ConvergencePlotter

_RADIO_LABELS: Dict[str, Distribution] = {
    member.name.lower(): member for member in Distribution
}


class InteractiveExplorer:
    """
    Interactive LLN / CLT window.

    Usage:
        explorer = InteractiveExplorer()
        explorer.show()

    Attributes:
        lln_controller: The LLN simulation.
        clt_controller: The CLT simulation.
        figure: The matplotlib Figure holding plots and widgets.
    """

    def __init__(
        self,
        lln_configuration: Optional[LLNConfiguration] = None,
        clt_configuration: Optional[CLTConfiguration] = None,
        random_source: Optional[AbstractRandomSource] = None
    ) -> None:
        self.figure = plt.figure(figsize=(16, 8))
        self.figure.suptitle(
            'Law of Large Numbers & Central Limit Theorem',
            fontsize=14, fontweight='bold'
        )

        self.lln_axes = self.figure.add_axes([0.05, 0.38, 0.42, 0.50])
        self.clt_axes = self.figure.add_axes([0.55, 0.38, 0.42, 0.50])

        self.lln_controller: LLNController = LLNController(
            Distribution.BERNOULLI,
            configuration=lln_configuration,
            random_source=random_source,
            on_update=self._render_lln
        )
        self.clt_controller: CLTController = CLTController(
            Distribution.UNIFORM,
            configuration=clt_configuration,
            random_source=random_source,
            on_update=self._render_clt
        )

        # ===== TICK SOURCES =====
        self.lln_timer = self.figure.canvas.new_timer(
            interval=self.lln_controller.tick_interval_ms
        )
        self.lln_timer.add_callback(self._on_lln_timer)

        self.clt_timer = self.figure.canvas.new_timer(
            interval=self.clt_controller.configuration.step_interval_ms
        )
        self.clt_timer.add_callback(self._on_clt_timer)

        self._build_lln_widgets()
        self._build_clt_widgets()

        self._render_lln(self.lln_controller.snapshot())
        self._render_clt(self.clt_controller.snapshot())

    # ===== WIDGET LAYOUT =====

    def _build_lln_widgets(self) -> None:
        config = self.lln_controller.configuration

        radio_axes = self.figure.add_axes([0.05, 0.05, 0.12, 0.20])
        radio_axes.set_title('Distribution', fontsize=9)
        self.lln_radio = RadioButtons(radio_axes, list(_RADIO_LABELS), active=0)
        self.lln_radio.on_clicked(self._on_lln_distribution)

        slider_axes = self.figure.add_axes([0.25, 0.22, 0.20, 0.03])
        self.lln_speed_slider = Slider(
            ax=slider_axes,
            label='Speed',
            valmin=config.speed_slider_min,
            valmax=config.speed_slider_max,
            valinit=self.lln_controller.speed_slider_value(),
            valstep=1
        )
        self.lln_speed_slider.on_changed(self._on_lln_speed)

        self.lln_toggle_button = Button(self.figure.add_axes([0.25, 0.10, 0.10, 0.06]), 'Start')
        self.lln_toggle_button.on_clicked(self._on_lln_toggle)

        self.lln_reset_button = Button(self.figure.add_axes([0.36, 0.10, 0.09, 0.06]), 'Reset')
        self.lln_reset_button.on_clicked(self._on_lln_reset)

    def _build_clt_widgets(self) -> None:
        config = self.clt_controller.configuration

        radio_axes = self.figure.add_axes([0.55, 0.05, 0.12, 0.20])
        radio_axes.set_title('Distribution', fontsize=9)
        self.clt_radio = RadioButtons(
            radio_axes, list(_RADIO_LABELS),
            active=list(_RADIO_LABELS.values()).index(self.clt_controller.distribution)
        )
        self.clt_radio.on_clicked(self._on_clt_distribution)

        slider_axes = self.figure.add_axes([0.75, 0.22, 0.20, 0.03])
        self.clt_sample_size_slider = Slider(
            ax=slider_axes,
            label='Sample Size (n)',
            valmin=config.min_sample_size,
            valmax=config.max_sample_size,
            valinit=self.clt_controller.sample_size,
            valstep=1
        )
        self.clt_sample_size_slider.on_changed(self._on_clt_sample_size)

        self.clt_toggle_button = Button(self.figure.add_axes([0.75, 0.10, 0.10, 0.06]), 'Start')
        self.clt_toggle_button.on_clicked(self._on_clt_toggle)

        self.clt_reset_button = Button(self.figure.add_axes([0.86, 0.10, 0.09, 0.06]), 'Reset')
        self.clt_reset_button.on_clicked(self._on_clt_reset)

    # ===== LLN CALLBACKS =====

    def _on_lln_timer(self) -> None:
        self.lln_controller.tick()
        if not self.lln_controller.is_running:
            self.lln_timer.stop()

    def _on_lln_distribution(self, label: str) -> None:
        self.lln_timer.stop()
        self.lln_controller.set_distribution(_RADIO_LABELS[label])

    def _on_lln_speed(self, value: float) -> None:
        self.lln_controller.set_speed_from_slider(int(value))
        self.lln_timer.interval = self.lln_controller.tick_interval_ms

    def _on_lln_toggle(self, event=None) -> None:
        self.lln_controller.toggle()
        if self.lln_controller.is_running:
            self.lln_timer.start()
        else:
            self.lln_timer.stop()

    def _on_lln_reset(self, event=None) -> None:
        self.lln_timer.stop()
        self.lln_controller.reset()

    # ===== CLT CALLBACKS =====

    def _on_clt_timer(self) -> None:
        self.clt_controller.tick()
        if not self.clt_controller.is_stepping:
            self.clt_timer.stop()

    def _on_clt_distribution(self, label: str) -> None:
        self.clt_timer.stop()
        self.clt_controller.set_distribution(_RADIO_LABELS[label])

    def _on_clt_sample_size(self, value: float) -> None:
        self.clt_timer.stop()
        self.clt_controller.set_sample_size(int(value))

    def _on_clt_toggle(self, event=None) -> None:
        self.clt_controller.toggle()
        if self.clt_controller.is_stepping:
            self.clt_timer.start()
        else:
            self.clt_timer.stop()

    def _on_clt_reset(self, event=None) -> None:
        self.clt_timer.stop()
        self.clt_controller.reset()

    # ===== RENDERING =====

    def _render_lln(self, snapshot: LLNSnapshot) -> None:
        ConvergencePlotter.plot_running_mean(snapshot, ax=self.lln_axes)
        if hasattr(self, 'lln_toggle_button'):
            self.lln_toggle_button.label.set_text(
                'Pause' if self.lln_controller.is_running else 'Start'
            )
        self.figure.canvas.draw_idle()

    def _render_clt(self, snapshot: CLTSnapshot) -> None:
        ConvergencePlotter.plot_sampling_distribution(snapshot, ax=self.clt_axes)

        if hasattr(self, 'clt_sample_size_slider'):
            # Mirror n without re-entering _on_clt_sample_size
            slider = self.clt_sample_size_slider
            if int(slider.val) != snapshot.sample_size:
                slider.eventson = False
                slider.set_val(snapshot.sample_size)
                slider.eventson = True

        if hasattr(self, 'clt_toggle_button'):
            if self.clt_controller.is_stepping:
                label = 'Pause'
            elif snapshot.is_complete:
                label = 'Restart'
            else:
                label = 'Start'
            self.clt_toggle_button.label.set_text(label)

        self.figure.canvas.draw_idle()

    def show(self) -> None:
        """Open the window and block until it is closed."""
        plt.show()
