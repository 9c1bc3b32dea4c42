# kresling/export.py
"""
Export: design tables (CSV), crease patterns (SVG) and unit summaries (JSON, text).

Every generator returns the document as a string; write_text() puts it on disk.
"""

import csv
import io
import json
import os
from typing import Optional, Sequence, Union

import numpy as np

from .config import CONFIG
from .model import KreslingParams
from .pattern import crease_pattern
from .stacking import LayerDesign
from .surfaces import SurfaceLayer
from .unit import KreslingUnit


SVG_WIDTH = 800
SVG_HEIGHT = 600
SVG_MARGIN = 20

SVG_STYLE = """    <style>
        .mountain { stroke: #0000FF; stroke-width: 2; stroke-dasharray: 5,3; }
        .valley { stroke: #FF0000; stroke-width: 2; stroke-dasharray: 5,3; }
        .outline { stroke: #000000; stroke-width: 3; fill: none; }
        .text { font-family: Arial; font-size: 12px; }
    </style>"""


def _fmt(value: float, precision: Optional[int] = None) -> str:
    if precision is None:
        precision = CONFIG.export_precision
    return f"{value:.{precision}f}"


def energy_design_csv(designs: Sequence[LayerDesign]) -> str:
    """
    Layer design table for fabrication.

    Columns: Layer,b1,b2,c,beta,h1,h2,Energy Barrier (layers numbered from 1,
    values with 4 decimals).
    """
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")

    writer.writerow(['Layer', 'b1', 'b2', 'c', 'beta', 'h1', 'h2', 'Energy Barrier'])
    for i, design in enumerate(designs):
        writer.writerow([
            i + 1,
            _fmt(design.b1), _fmt(design.b2),
            _fmt(design.c), _fmt(design.beta),
            _fmt(design.h1), _fmt(design.h2),
            _fmt(design.energy_barrier),
        ])

    return output.getvalue()


def surface_layers_csv(layers: Sequence[SurfaceLayer]) -> str:
    """Surface approximation table: Layer,a,b,c,beta,h1,h2."""
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")

    writer.writerow(['Layer', 'a', 'b', 'c', 'beta', 'h1', 'h2'])
    for layer in layers:
        writer.writerow([
            layer.layer,
            _fmt(layer.a), _fmt(layer.b),
            _fmt(layer.c), _fmt(layer.beta),
            _fmt(layer.h1), _fmt(layer.h2),
        ])

    return output.getvalue()


def crease_pattern_svg(params: Union[KreslingParams, Sequence[KreslingParams]]) -> str:
    """
    SVG crease pattern for one unit, or for a stack of units drawn one row
    per layer (bottom layer at the bottom).

    Mountains are blue dashed, valleys red dashed, the cut outline black.
    The drawing is scaled to fit an 800 x 600 canvas centred on the origin.
    """
    layer_params = [params] if isinstance(params, KreslingParams) else list(params)
    if not layer_params:
        raise ValueError("At least one parameter set is required")

    patterns = [crease_pattern(p) for p in layer_params]

    # Stack rows: each pattern shifted up by the height of those below it
    offsets = []
    y_cursor = 0.0
    for pattern in patterns:
        x_min, y_min, x_max, y_max = pattern.bounds()
        offsets.append(np.array([-x_min, y_cursor - y_min]))
        y_cursor += 1.1 * (y_max - y_min)

    all_pts = np.vstack([
        np.vstack([pattern.bottom, pattern.top]) + offset
        for pattern, offset in zip(patterns, offsets)
    ])
    lo = all_pts.min(axis=0)
    hi = all_pts.max(axis=0)
    span = np.maximum(hi - lo, 1e-12)
    scale = min((SVG_WIDTH - 2 * SVG_MARGIN) / span[0], (SVG_HEIGHT - 2 * SVG_MARGIN) / span[1])
    centre = (lo + hi) / 2.0

    def to_svg(p, offset):
        q = (p + offset - centre) * scale
        return float(q[0]), float(-q[1])

    def line(segment, offset, css_class):
        x1, y1 = to_svg(segment[0], offset)
        x2, y2 = to_svg(segment[1], offset)
        return (f'    <line class="{css_class}" x1="{x1:.3f}" y1="{y1:.3f}" '
                f'x2="{x2:.3f}" y2="{y2:.3f}" />')

    svg_lines = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{SVG_WIDTH}" height="{SVG_HEIGHT}" '
        f'viewBox="{-SVG_WIDTH // 2} {-SVG_HEIGHT // 2} {SVG_WIDTH} {SVG_HEIGHT}">',
        SVG_STYLE,
    ]
    for i, (pattern, offset, p) in enumerate(zip(patterns, offsets, layer_params)):
        svg_lines.append(f'  <g id="layer-{i + 1}">')
        svg_lines.extend(line(s, offset, 'outline') for s in pattern.outline)
        svg_lines.extend(line(s, offset, 'mountain') for s in pattern.mountains)
        svg_lines.extend(line(s, offset, 'valley') for s in pattern.valleys)
        x, y = to_svg(pattern.bottom[0], offset)
        svg_lines.append(
            f'    <text class="text" x="{x:.3f}" y="{y + 14:.3f}">'
            f'n={p.n} a={p.a:.4f} b={p.b:.4f} c={p.c:.4f} beta={p.beta:.4f}</text>'
        )
        svg_lines.append('  </g>')
    svg_lines.append('</svg>')

    return "\n".join(svg_lines)


def unit_summary_json(unit: KreslingUnit) -> str:
    """Parameters, derived quantities, stable states, phase and barrier as JSON."""
    states = unit.find_stable_states()

    def state_data(state):
        if state is None:
            return None
        return {'h': round(state.h, 6), 'phi': round(state.phi, 6)}

    model = {
        'version': '1.0',
        'type': 'kresling-unit',
        'parameters': unit.params.as_dict(),
        'derived': {
            'd': round(unit.d, 6),
            'r': round(unit.r, 6),
            'R': round(unit.R, 6),
            'km': round(unit.km, 6),
            'kv': round(unit.kv, 6),
            'lambda': round(unit.lam, 6),
        },
        'stable_states': {
            'state1': state_data(states.state1),
            'state2': state_data(states.state2),
        },
        'phase': unit.calculate_phase(),
        'energy_barrier': round(unit.compute_energy_barrier(), 6),
    }

    return json.dumps(model, indent=2)


def unit_summary_text(unit: KreslingUnit) -> str:
    """Plain-text summary of a unit."""
    p = unit.params
    states = unit.find_stable_states()

    def state_line(label, state):
        if state is None:
            return f"  {label}:       none"
        return f"  {label}:       h = {state.h:.4f}, phi = {state.phi:.4f} rad"

    lines = [
        "KRESLING UNIT SUMMARY",
        "=" * 40,
        "",
        "GEOMETRY",
        f"  Cells n:      {p.n}",
        f"  Edges a, b:   {p.a:.4f}, {p.b:.4f}",
        f"  Crease c, d:  {p.c:.4f}, {unit.d:.4f}",
        f"  Angle beta:   {p.beta:.4f} rad",
        f"  Radii r, R:   {unit.r:.4f}, {unit.R:.4f}",
        "",
        "MECHANICS",
        f"  EA:           {p.EA:.4f}",
        f"  km, kv:       {unit.km:.4f}, {unit.kv:.4f}",
        "",
        "STABILITY",
        f"  lambda:       {unit.lam:.4f}",
        state_line("State 1", states.state1),
        state_line("State 2", states.state2),
        f"  Phase:        {unit.calculate_phase()}",
        f"  Barrier:      {unit.compute_energy_barrier():.6f}",
    ]

    return "\n".join(lines)


def design_filename(num_layers: int, num_cells: int) -> str:
    return f"kresling_energy_design_{num_layers}x{num_cells}.csv"


def pattern_filename(surface: str, num_layers: int, num_cells: int) -> str:
    return f"kresling_pattern_{surface}_{num_layers}x{num_cells}.svg"


def write_text(content: str, path: str) -> str:
    """Write a generated document to disk, creating parent directories."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    return path
