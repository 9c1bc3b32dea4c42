# tests/test_viz.py
"""
Smoke tests for the plotting functions: every figure is created and saved
without error.
"""

import os

import matplotlib
matplotlib.use("Agg")

import numpy as np
import plotly.graph_objects as go
import pytest

from kresling import KreslingUnit
from kresling.explore import phase_map
from kresling.pattern import crease_pattern
from kresling.stacking import (
    build_layer_units,
    default_layer_targets,
    folding_sequence_frame,
    optimize_layer_parameters,
    stack_energy_landscape,
    stack_vertex_coordinates,
)
from kresling.surfaces import approximate_surface, surface_stack_rings
from kresling.viz import (
    create_stack_figure,
    create_surface_figure,
    create_unit_figure,
    plot_crease_pattern,
    plot_energy_landscape,
    plot_phase_map,
    plot_stack_energy,
    plot_unit_3d,
)


@pytest.fixture
def bilayer():
    designs = optimize_layer_parameters(default_layer_targets(2), num_cells=6)
    return designs, build_layer_units(designs, num_cells=6)


class TestCharts:
    """matplotlib charts are written to disk."""

    def test_energy_landscape(self, tmp_path):
        out = os.path.join(str(tmp_path), "charts", "landscape.png")
        plot_energy_landscape(KreslingUnit(), out, steps=30)
        assert os.path.getsize(out) > 0

    def test_energy_landscape_monostable(self, tmp_path):
        out = os.path.join(str(tmp_path), "mono.png")
        plot_energy_landscape(KreslingUnit(a=0.5), out, steps=20)
        assert os.path.exists(out)

    def test_stack_energy(self, tmp_path, bilayer):
        designs, units = bilayer
        landscape = stack_energy_landscape(designs, units, steps=20)
        out = os.path.join(str(tmp_path), "stack.png")
        plot_stack_energy(designs, landscape, out)
        assert os.path.exists(out)

    def test_crease_pattern(self, tmp_path):
        out = os.path.join(str(tmp_path), "pattern.png")
        plot_crease_pattern(crease_pattern(KreslingUnit().params), out)
        assert os.path.exists(out)

    def test_phase_map(self, tmp_path):
        df = phase_map(np.linspace(0.5, 2.5, 4), np.linspace(1.0, 4.0, 4))
        out = os.path.join(str(tmp_path), "phase.png")
        plot_phase_map(df, out)
        assert os.path.exists(out)


class TestFigures3D:
    """plotly figures."""

    def test_unit_figure_traces(self):
        unit = KreslingUnit()
        fig = create_unit_figure(unit)
        assert isinstance(fig, go.Figure)
        kinds = [type(trace).__name__ for trace in fig.data]
        assert kinds == ['Mesh3d', 'Scatter3d', 'Scatter3d']
        assert len(fig.data[0].i) == 2 * unit.n

    def test_stack_figure(self, bilayer):
        designs, units = bilayer
        frame = folding_sequence_frame(designs, units, 0.3)
        fig = create_stack_figure(stack_vertex_coordinates(units, frame))
        assert len(fig.data) == 6

    def test_surface_figure_with_layers(self):
        layers = approximate_surface('cone', num_layers=3, num_cells=6)
        fig = create_surface_figure('cone', surface_stack_rings(layers, num_cells=6), resolution=10)
        assert type(fig.data[0]).__name__ == 'Surface'
        assert len(fig.data) == 1 + 3 * 3

    def test_plot_unit_3d_writes_html(self, tmp_path):
        out = os.path.join(str(tmp_path), "html", "unit.html")
        unit = KreslingUnit()
        fig = plot_unit_3d(unit, unit.folded_state(), outpath=out, show=False)
        assert isinstance(fig, go.Figure)
        assert os.path.getsize(out) > 0
