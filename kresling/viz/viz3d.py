# kresling/viz/viz3d.py
"""
3D VISUALIZATION: Interactive Kresling Viewer
=============================================

PURPOSE:
--------
Interactive plotly figures of:
- one unit at a fold state (panels + mountain/valley creases)
- a stack of units at a frame of its folding sequence
- a target surface with its approximating layers

Figures can be shown, or written to standalone HTML for sharing.
"""

import logging
import os
from typing import List, Optional, Sequence, Tuple

import numpy as np
import plotly.graph_objects as go

from ..kernel.geometry import crease_segments, unit_triangles
from ..model import FoldState
from ..surfaces import surface_mesh
from ..unit import KreslingUnit

logger = logging.getLogger(__name__)

PANEL_COLOR = 'lightsteelblue'
MOUNTAIN_COLOR = '#0000FF'
VALLEY_COLOR = '#FF0000'


def _segments_trace(segments, color: str, name: str, showlegend: bool = True) -> go.Scatter3d:
    """All segments in one line trace, broken by None."""
    xs, ys, zs = [], [], []
    for seg in segments:
        xs.extend([seg[0][0], seg[1][0], None])
        ys.extend([seg[0][1], seg[1][1], None])
        zs.extend([seg[0][2], seg[1][2], None])
    return go.Scatter3d(
        x=xs, y=ys, z=zs,
        mode='lines',
        line=dict(color=color, width=4),
        name=name,
        showlegend=showlegend,
        hoverinfo='skip',
    )


def _unit_traces(top: np.ndarray, bottom: np.ndarray, opacity: float, name: str,
                 showlegend: bool = True) -> List:
    n = len(bottom)
    vertices = np.vstack([bottom, top])
    faces = np.array(unit_triangles(n))

    mountains, valleys = crease_segments(top, bottom)
    return [
        go.Mesh3d(
            x=vertices[:, 0], y=vertices[:, 1], z=vertices[:, 2],
            i=faces[:, 0], j=faces[:, 1], k=faces[:, 2],
            color=PANEL_COLOR,
            opacity=opacity,
            flatshading=True,
            name=name,
            showlegend=showlegend,
        ),
        _segments_trace(mountains, MOUNTAIN_COLOR, 'Mountain creases', showlegend),
        _segments_trace(valleys, VALLEY_COLOR, 'Valley creases', showlegend),
    ]


def _apply_layout(fig: go.Figure, title: str) -> None:
    fig.update_layout(
        title=dict(text=title, font=dict(size=16)),
        scene=dict(
            xaxis=dict(title='X'),
            yaxis=dict(title='Y'),
            zaxis=dict(title='Z'),
            aspectmode='data',
            camera=dict(
                eye=dict(x=1.5, y=1.5, z=1.0),
            ),
        ),
        showlegend=True,
        legend=dict(x=0.02, y=0.98),
        margin=dict(l=0, r=0, t=40, b=0),
    )


def create_unit_figure(
    unit: KreslingUnit,
    state: Optional[FoldState] = None,
    title: str = "Kresling Unit",
    opacity: float = 0.6,
) -> go.Figure:
    """
    Plotly figure of one unit.

    Parameters:
    -----------
    unit : KreslingUnit
    state : FoldState
        Fold state to draw; defaults to the deployed state (state1, or the
        configured fallback when the unit has none)
    title : str
    opacity : float
        Panel opacity
    """
    if state is None:
        state = unit.deployed_state()

    coords = unit.get_vertex_coordinates(state.h, state.phi)
    fig = go.Figure(data=_unit_traces(coords.top_vertices, coords.bottom_vertices, opacity, 'Panels'))
    _apply_layout(fig, f"{title} (h={state.h:.3f}, phi={state.phi:.3f})")
    return fig


def create_stack_figure(
    rings: Sequence[Tuple[np.ndarray, np.ndarray]],
    title: str = "Kresling Stack",
    opacity: float = 0.6,
) -> go.Figure:
    """
    Plotly figure of a stack from stack_vertex_coordinates().
    """
    fig = go.Figure()
    for i, (top, bottom) in enumerate(rings):
        for trace in _unit_traces(top, bottom, opacity, f'Layer {i + 1}', showlegend=(i == 0)):
            fig.add_trace(trace)
    _apply_layout(fig, title)
    return fig


def create_surface_figure(
    surface: str,
    rings: Optional[Sequence[Tuple[np.ndarray, np.ndarray]]] = None,
    resolution: Optional[int] = None,
    title: Optional[str] = None,
) -> go.Figure:
    """
    Target surface as a translucent surface plot, optionally overlaid with
    the approximating stack.
    """
    X, Y, Z = surface_mesh(surface, resolution)

    fig = go.Figure()
    fig.add_trace(go.Surface(
        x=X, y=Y, z=Z,
        colorscale='Greens',
        opacity=0.35,
        showscale=False,
        name=surface,
    ))
    if rings:
        for i, (top, bottom) in enumerate(rings):
            for trace in _unit_traces(top, bottom, 0.7, f'Layer {i + 1}', showlegend=(i == 0)):
                fig.add_trace(trace)

    _apply_layout(fig, title or f"Target surface: {surface}")
    return fig


def plot_unit_3d(
    unit: KreslingUnit,
    state: Optional[FoldState] = None,
    title: str = "Kresling Unit",
    outpath: Optional[str] = None,
    show: bool = True,
    **kwargs
) -> go.Figure:
    """
    Create and optionally display/save a 3D unit visualization.

    Parameters:
    -----------
    unit, state, title:
        See create_unit_figure()
    outpath : Optional[str]
        If provided, save as HTML file
    show : bool
        Whether to display the figure (default: True)

    Example:
    --------
    >>> fig = plot_unit_3d(unit, unit.folded_state(), outpath="artifacts/unit.html", show=False)
    """
    fig = create_unit_figure(unit, state=state, title=title, **kwargs)

    if outpath:
        os.makedirs(os.path.dirname(outpath) if os.path.dirname(outpath) else '.', exist_ok=True)
        fig.write_html(outpath)
        logger.info("3D visualization saved to: %s", outpath)

    if show:
        fig.show()

    return fig
