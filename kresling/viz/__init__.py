# kresling/viz - Visualization Tools
"""
VIZ: Charts and 3D Views of Kresling Units
==========================================

This package provides visualization tools:
- viz2d: energy landscapes, crease patterns and phase maps (matplotlib)
- viz3d: interactive unit, stack and surface views (Plotly)
"""

from .viz2d import plot_energy_landscape, plot_stack_energy, plot_crease_pattern, plot_phase_map
from .viz3d import create_unit_figure, create_stack_figure, create_surface_figure, plot_unit_3d

__all__ = [
    'plot_energy_landscape', 'plot_stack_energy', 'plot_crease_pattern', 'plot_phase_map',
    'create_unit_figure', 'create_stack_figure', 'create_surface_figure', 'plot_unit_3d',
]
