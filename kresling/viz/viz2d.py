# kresling/viz/viz2d.py
"""
2D CHARTS: Energy Landscapes, Crease Patterns and Phase Maps
============================================================

PURPOSE:
--------
Static matplotlib figures for reports:

- plot_energy_landscape: relaxed energy vs height of one unit, with the
  stable states and the barrier estimate marked
- plot_stack_energy: total and per-layer energy of a stack vs total height,
  with the stable heights of the folding sequence
- plot_crease_pattern: the flat sheet with mountain/valley assignment
- plot_phase_map: phase of every (beta, c) grid point

Every function saves to outpath and closes the figure.

READING THE LANDSCAPE:
----------------------
A bistable unit shows two wells at zero energy (the stable states) separated
by a hump. The hump height is the energy that must be supplied to snap from
the deployed to the folded state. A monostable unit has a single well or no
zero-energy well at all.
"""

import logging
import os
from typing import Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from matplotlib.lines import Line2D

from ..model import Phase
from ..pattern import CreasePattern
from ..stacking import LayerDesign, stack_stable_heights
from ..unit import KreslingUnit

logger = logging.getLogger(__name__)

COLORS = {
    'energy': '#2C3E50',
    'stable': '#27AE60',
    'barrier': '#E74C3C',
    'mountain': '#0000FF',
    'valley': '#FF0000',
    'outline': '#000000',
    'grid': '#E0E0E0',
    'background': '#FAFAFA',
}

PHASE_COLORS = {
    Phase.MONOSTABLE: '#BDC3C7',
    Phase.BISTABLE_ZERO_ENERGY: '#3498DB',
    Phase.BISTABLE_NONZERO_ENERGY: '#F39C12',
}

LAYER_COLORS = ['#3498DB', '#E67E22', '#9B59B6', '#1ABC9C', '#E74C3C', '#34495E']


def _save(fig, outpath: str) -> None:
    os.makedirs(os.path.dirname(outpath) if os.path.dirname(outpath) else '.', exist_ok=True)
    fig.tight_layout()
    fig.savefig(outpath, dpi=150, bbox_inches='tight', facecolor=COLORS['background'])
    plt.close(fig)
    logger.info("Figure saved to: %s", outpath)


def plot_energy_landscape(
    unit: KreslingUnit,
    outpath: str,
    h_min: Optional[float] = None,
    h_max: Optional[float] = None,
    steps: Optional[int] = None,
    title: str = "Energy Landscape",
) -> None:
    """
    Relaxed energy E(h, phi_eq(h)) vs height for one unit.

    Stable states are marked in green at zero energy; the approximate barrier
    is drawn as a dashed red line.
    """
    landscape = unit.compute_energy_landscape(h_min, h_max, steps).to_frame()

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.plot(landscape['h'], landscape['energy'], color=COLORS['energy'], linewidth=2, label='E(h)')

    states = unit.find_stable_states()
    for label, state in (('State 1', states.state1), ('State 2', states.state2)):
        if state is not None:
            ax.scatter([state.h], [0.0], s=80, color=COLORS['stable'], edgecolors='black', zorder=3)
            ax.annotate(f"{label}\nh={state.h:.3f}", (state.h, 0.0), textcoords='offset points',
                        xytext=(0, 12), ha='center', fontsize=9)

    if unit.is_bistable():
        barrier = unit.compute_energy_barrier()
        ax.axhline(barrier, color=COLORS['barrier'], linestyle='--', linewidth=1.5,
                   label=f'Barrier estimate ({barrier:.4f})')

    ax.set_xlabel('Height h', fontsize=12, fontweight='bold')
    ax.set_ylabel('Energy E', fontsize=12, fontweight='bold')
    ax.set_title(f"{title} ({unit.calculate_phase()})", fontsize=14, fontweight='bold')
    ax.grid(True, alpha=0.3, linestyle='--')
    ax.legend(loc='best', fontsize=10, framealpha=0.9)

    _save(fig, outpath)


def plot_stack_energy(
    designs: Sequence[LayerDesign],
    landscape: pd.DataFrame,
    outpath: str,
    title: str = "Stack Energy Landscape",
) -> None:
    """
    Total and per-layer energy of a stack (from stack_energy_landscape)
    with the stable heights of the folding sequence as vertical lines.
    """
    fig, ax = plt.subplots(figsize=(8, 5))
    ax.plot(landscape['h'], landscape['energy'], color=COLORS['energy'], linewidth=2.5, label='Total')

    layer_columns = [col for col in landscape.columns if col.startswith('energy_layer_')]
    for i, col in enumerate(layer_columns):
        ax.plot(landscape['h'], landscape[col], linewidth=1.2, linestyle=':',
                color=LAYER_COLORS[i % len(LAYER_COLORS)], label=f'Layer {i + 1}')

    for h in stack_stable_heights(designs):
        ax.axvline(h, color=COLORS['stable'], alpha=0.6, linestyle='--', linewidth=1)

    ax.set_xlabel('Total height', fontsize=12, fontweight='bold')
    ax.set_ylabel('Energy', fontsize=12, fontweight='bold')
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.grid(True, alpha=0.3, linestyle='--')
    ax.legend(loc='best', fontsize=10, framealpha=0.9)

    _save(fig, outpath)


def plot_crease_pattern(pattern: CreasePattern, outpath: str, title: str = "Crease Pattern") -> None:
    """Flat sheet: black outline, blue dashed mountains, red dashed valleys."""
    fig, ax = plt.subplots(figsize=(10, 4))

    for segments, color, style, width in (
        (pattern.outline, COLORS['outline'], '-', 2.0),
        (pattern.mountains, COLORS['mountain'], '--', 1.5),
        (pattern.valleys, COLORS['valley'], '--', 1.5),
    ):
        for p, q in segments:
            ax.plot([p[0], q[0]], [p[1], q[1]], color=color, linestyle=style, linewidth=width)

    legend = [
        Line2D([0], [0], color=COLORS['outline'], linewidth=2, label='Outline'),
        Line2D([0], [0], color=COLORS['mountain'], linestyle='--', label='Mountain'),
        Line2D([0], [0], color=COLORS['valley'], linestyle='--', label='Valley'),
    ]
    ax.legend(handles=legend, loc='best', fontsize=9)
    ax.set_aspect('equal')
    ax.axis('off')
    ax.set_title(title, fontsize=14, fontweight='bold')

    _save(fig, outpath)


def plot_phase_map(df: pd.DataFrame, outpath: str, title: str = "Phase Map") -> None:
    """
    Phase of every grid point of phase_map() on a beta vs c chart.
    Failed evaluations are drawn as crosses.
    """
    fig, ax = plt.subplots(figsize=(7, 6))

    for phase in Phase.ALL:
        subset = df[(df['ok'] == True) & (df['phase'] == phase)]
        if len(subset):
            ax.scatter(subset['beta'], subset['c'], s=25, marker='s',
                       color=PHASE_COLORS[phase], label=phase)

    failed = df[df['ok'] != True]
    if len(failed):
        ax.scatter(failed['beta'], failed['c'], s=20, marker='x', color='black', label='failed')

    ax.set_xlabel('beta (rad)', fontsize=12, fontweight='bold')
    ax.set_ylabel('c', fontsize=12, fontweight='bold')
    ax.set_xlim(0.0, np.pi)
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.legend(loc='best', fontsize=9, framealpha=0.9)

    _save(fig, outpath)
