"""Qt application entrypoint for the gasreactor GUI."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from PySide6 import QtCore, QtGui, QtWidgets
from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg
from matplotlib.figure import Figure

from gasreactor.config import Scenario, default_scenario, load_scenario
from gasreactor.gui.simulation import SpeciesHistory
from gasreactor.simulation import Simulation

PLOT_EVERY_TICKS = 15


class PlotCanvas(FigureCanvasQTAgg):
    def __init__(self, parent: QtWidgets.QWidget | None = None) -> None:
        self.figure = Figure(figsize=(4, 3), tight_layout=True)
        super().__init__(self.figure)
        self.setParent(parent)
        self.axes = self.figure.add_subplot(1, 1, 1)

    def plot_history(self, history: SpeciesHistory, colors) -> None:
        self.axes.clear()
        for name, series in history.counts.items():
            if series.any():
                self.axes.plot(history.ticks, series, label=name, color=colors(name))
        self.axes.set_xlabel("Tick")
        self.axes.set_ylabel("Particles")
        if self.axes.get_legend_handles_labels()[0]:
            self.axes.legend(loc="upper right")
        self.draw()


class ParticleView(QtWidgets.QWidget):
    """Draws render items and reports clicks in container coordinates."""

    clicked = QtCore.Signal(float, float)

    def __init__(self, simulation: Simulation, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self.simulation = simulation
        self.setFixedSize(int(simulation.config.width), int(simulation.config.height))
        self.setAutoFillBackground(True)
        palette = self.palette()
        palette.setColor(QtGui.QPalette.ColorRole.Window, QtGui.QColor("white"))
        self.setPalette(palette)

    def paintEvent(self, event: QtGui.QPaintEvent) -> None:
        painter = QtGui.QPainter(self)
        painter.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing)
        font = painter.font()
        font.setPixelSize(14)
        painter.setFont(font)

        for item in self.simulation.render_items():
            center = QtCore.QPointF(item.x, item.y)
            painter.setPen(QtCore.Qt.PenStyle.NoPen)
            painter.setBrush(QtGui.QColor(item.color))
            painter.drawEllipse(center, item.radius, item.radius)

            painter.setPen(QtGui.QColor("white"))
            box = QtCore.QRectF(item.x - item.radius, item.y - item.radius, 2 * item.radius, 2 * item.radius)
            painter.drawText(box, QtCore.Qt.AlignmentFlag.AlignCenter, item.label)
        painter.end()

    def mousePressEvent(self, event: QtGui.QMouseEvent) -> None:
        position = event.position()
        self.clicked.emit(position.x(), position.y())


class ReactorWindow(QtWidgets.QMainWindow):
    def __init__(self, scenario: Scenario) -> None:
        super().__init__()
        self.setWindowTitle("gasreactor")

        self.simulation = Simulation.from_scenario(scenario)
        self.history = SpeciesHistory(self.simulation.species())

        central = QtWidgets.QWidget()
        self.setCentralWidget(central)
        layout = QtWidgets.QHBoxLayout(central)

        self.view = ParticleView(self.simulation)
        self.view.clicked.connect(self._add_particle)

        form_panel = QtWidgets.QWidget()
        form_layout = QtWidgets.QFormLayout(form_panel)
        form_layout.setLabelAlignment(QtCore.Qt.AlignmentFlag.AlignRight)

        self.temperature_spin = self._make_spin(self.simulation.temperature, 0.0, 50.0, 2)
        self.temperature_spin.valueChanged.connect(self.simulation.set_temperature)
        form_layout.addRow("Temperature", self.temperature_spin)

        self.concentration_spins = {}
        counts = self.simulation.species_counts()
        for formula in self.simulation.species():
            spin = QtWidgets.QSpinBox()
            spin.setRange(0, 1000)
            spin.setValue(counts.get(formula, 0))
            spin.editingFinished.connect(lambda f=formula: self._set_concentration(f))
            self.concentration_spins[formula] = spin
            form_layout.addRow(f"{formula} count", spin)

        for reaction in self.simulation.reactions:
            form_layout.addRow(reaction.name, QtWidgets.QLabel(reaction.formula))

        self.pause_button = QtWidgets.QPushButton("Pause")
        self.pause_button.clicked.connect(self._toggle_pause)
        form_layout.addRow(self.pause_button)

        self.plot_canvas = PlotCanvas()
        form_layout.addRow(self.plot_canvas)

        layout.addWidget(self.view)
        layout.addWidget(form_panel)

        self.timer = QtCore.QTimer(self)
        self.timer.timeout.connect(self._advance)
        self.timer.start(self.simulation.config.frame_interval_ms)

    def _make_spin(self, value: float, minimum: float, maximum: float, decimals: int) -> QtWidgets.QDoubleSpinBox:
        spin = QtWidgets.QDoubleSpinBox()
        spin.setRange(minimum, maximum)
        spin.setDecimals(decimals)
        spin.setValue(value)
        spin.setSingleStep(0.1)
        return spin

    def _advance(self) -> None:
        if not self.simulation.tick():
            return
        counts = self.simulation.species_counts()
        self.history.record(self.simulation.tick_count, counts)
        self.view.update()

        if self.simulation.tick_count % PLOT_EVERY_TICKS == 0:
            self.plot_canvas.plot_history(self.history, self.simulation.config.color_for)
            for formula, spin in self.concentration_spins.items():
                if not spin.hasFocus():
                    spin.setValue(counts.get(formula, 0))

    def _add_particle(self, x: float, y: float) -> None:
        self.simulation.click(x, y)

    def _set_concentration(self, formula: str) -> None:
        self.simulation.set_concentration(formula, self.concentration_spins[formula].value())

    def _toggle_pause(self) -> None:
        paused = self.simulation.toggle_pause()
        self.pause_button.setText("Resume" if paused else "Pause")


def main(scenario_file: Optional[Path] = None) -> None:
    scenario = load_scenario(scenario_file) if scenario_file is not None else default_scenario()
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(sys.argv)
    window = ReactorWindow(scenario)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
