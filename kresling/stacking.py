# kresling/stacking.py
"""
STACKING: Multi-Layer Energy Programming
========================================

PURPOSE:
--------
A stack of Kresling units folds one layer at a time. Choosing each layer's
geometry sets its deployed height h1, folded height h2 and energy barrier,
which programs the folding sequence of the whole column.

WORKFLOW:
---------
1. Describe what each layer should do (LayerTarget: h1, h2, barrier)
2. Pick layer geometry (optimize_layer_parameters -> LayerDesign)
3. Build one KreslingUnit per layer (top edge a = b2, bottom edge b = b1)
4. Query the stack: total energy vs height, stable heights, fold states
   during the folding sequence, stacked 3D geometry

THE PARAMETER STEP IS A STAND-IN:
---------------------------------
optimize_layer_parameters() is not a solver. For the bilayer, six-cell case
it returns the published bilayer values; for anything else it applies a
simple per-layer scaling. Targets are copied through unchanged so the table
and the charts show what was asked for.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .config import CONFIG
from .model import FoldState
from .unit import KreslingUnit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayerTarget:
    """
    Requested behaviour of one layer.

    h1 : deployed height
    h2 : folded height
    energy_barrier : barrier to overcome when the layer snaps
    """
    h1: float
    h2: float
    energy_barrier: float


@dataclass(frozen=True)
class LayerDesign:
    """
    Geometry chosen for one layer plus the targets it was chosen for.

    b1 is the layer's bottom edge, b2 its top edge (= next layer's bottom).
    """
    b1: float
    b2: float
    c: float
    beta: float
    h1: float
    h2: float
    energy_barrier: float


# Published bilayer, six-cell geometry (layer 0 at the bottom)
BILAYER_GEOMETRY = (
    {'b1': 1.0371, 'b2': 0.4715, 'c': 1.0, 'beta': 1.5130},
    {'b1': 0.4715, 'b2': 0.2640, 'c': 0.5064, 'beta': 1.5894},
)


def default_layer_targets(num_layers: Optional[int] = None) -> List[LayerTarget]:
    """
    Default targets: decreasing deployed heights, flat-folded layers and
    increasing barriers, so the bottom layer snaps first.

        h1 = 0.8 - 0.2 i,  h2 = 0,  barrier = 0.001 (i + 1)
    """
    if num_layers is None:
        num_layers = CONFIG.num_layers
    if num_layers < 1:
        raise ValueError(f"num_layers must be >= 1, got {num_layers}")
    return [
        LayerTarget(h1=0.8 - 0.2 * i, h2=0.0, energy_barrier=0.001 * (i + 1))
        for i in range(num_layers)
    ]


def optimize_layer_parameters(targets: Sequence[LayerTarget], num_cells: Optional[int] = None) -> List[LayerDesign]:
    """
    Layer geometry for the requested targets.

    Two layers of six cells get the published bilayer geometry. Otherwise
    layer i is scaled by s = 1 - 0.1 i:

        b1 = 1.0 s,  b2 = 0.5 s,  c = 0.8 s,  beta = 1.5 + 0.05 i
    """
    if num_cells is None:
        num_cells = CONFIG.num_cells
    if not targets:
        raise ValueError("At least one layer target is required")

    designs = []
    if len(targets) == 2 and num_cells == 6:
        for geometry, target in zip(BILAYER_GEOMETRY, targets):
            designs.append(LayerDesign(h1=target.h1, h2=target.h2,
                                       energy_barrier=target.energy_barrier, **geometry))
        return designs

    for i, target in enumerate(targets):
        scale = 1.0 - 0.1 * i
        if scale <= 0:
            raise ValueError(f"Scaling heuristic produces non-positive geometry at layer {i}")
        designs.append(LayerDesign(
            b1=1.0 * scale,
            b2=0.5 * scale,
            c=0.8 * scale,
            beta=1.5 + 0.05 * i,
            h1=target.h1,
            h2=target.h2,
            energy_barrier=target.energy_barrier,
        ))
    return designs


def build_layer_units(designs: Sequence[LayerDesign], num_cells: Optional[int] = None) -> List[KreslingUnit]:
    """One KreslingUnit per layer: a = b2 (top edge), b = b1 (bottom edge)."""
    if num_cells is None:
        num_cells = CONFIG.num_cells
    return [
        KreslingUnit(n=num_cells, a=design.b2, b=design.b1, c=design.c, beta=design.beta)
        for design in designs
    ]


def distribute_height(total_height: float, deployed_heights: Sequence[float]) -> np.ndarray:
    """
    Split a total stack height among layers in proportion to their deployed
    heights. Heights at or above the fully deployed total return the
    deployed heights unchanged.
    """
    deployed = np.asarray(deployed_heights, dtype=float)
    total_deployed = float(deployed.sum())
    if total_height >= total_deployed:
        return deployed.copy()
    return deployed * (total_height / total_deployed)


def stack_energy_landscape(
    designs: Sequence[LayerDesign],
    units: Sequence[KreslingUnit],
    steps: Optional[int] = None,
) -> pd.DataFrame:
    """
    Total relaxed energy of the stack vs its total height.

    Heights run over [0, sum(h1)] in steps + 1 points; each layer takes its
    proportional share and relaxes its twist.

    Returns:
    --------
    pd.DataFrame with columns 'h', 'energy' and one 'energy_layer_<i>' per layer
    """
    if len(designs) != len(units):
        raise ValueError(f"{len(designs)} designs but {len(units)} units")
    if steps is None:
        steps = CONFIG.stack_steps

    deployed = [design.h1 for design in designs]
    total = float(sum(deployed))

    rows = []
    for h in np.linspace(0.0, total, steps + 1):
        layer_heights = distribute_height(h, deployed)
        row = {'h': float(h)}
        energy = 0.0
        for i, (unit, h_layer) in enumerate(zip(units, layer_heights)):
            phi = unit.find_equilibrium_twist_angle(h_layer)
            e_layer = unit.compute_energy(h_layer, phi)
            row[f'energy_layer_{i}'] = e_layer
            energy += e_layer
        row['energy'] = energy
        rows.append(row)

    columns = ['h', 'energy'] + [f'energy_layer_{i}' for i in range(len(units))]
    return pd.DataFrame(rows, columns=columns)


def stack_stable_heights(designs: Sequence[LayerDesign]) -> List[float]:
    """
    Total heights of the L + 1 stable configurations of the folding sequence.

    Entry 0 has every layer deployed; entry k has layers 0..k-1 folded and
    the rest deployed; the last entry has every layer folded.
    """
    if not designs:
        raise ValueError("At least one layer design is required")
    heights = []
    for k in range(len(designs) + 1):
        folded = sum(design.h2 for design in designs[:k])
        deployed = sum(design.h1 for design in designs[k:])
        heights.append(float(folded + deployed))
    return heights


def layer_fold_states(
    designs: Sequence[LayerDesign],
    units: Sequence[KreslingUnit],
) -> List[Dict[str, FoldState]]:
    """
    Deployed and folded fold state of every layer.

    Heights come from the targets; twists from the unit's stable states
    (deployed falls back to 0, folded to pi/2 when the state is absent).
    """
    states = []
    for design, unit in zip(designs, units):
        stable = unit.find_stable_states()
        deployed_phi = stable.state1.phi if stable.state1 is not None else 0.0
        folded_phi = stable.state2.phi if stable.state2 is not None else np.pi / 2
        states.append({
            'deployed': FoldState(h=design.h1, phi=deployed_phi),
            'folded': FoldState(h=design.h2, phi=folded_phi),
        })
    return states


def ease_in_out(t: float) -> float:
    """Cosine easing 0.5 - 0.5 cos(pi t) on [0, 1]."""
    return 0.5 - 0.5 * np.cos(t * np.pi)


def folding_sequence_frame(
    designs: Sequence[LayerDesign],
    units: Sequence[KreslingUnit],
    progress: float,
) -> List[FoldState]:
    """
    Fold state of every layer at a global progress in [0, 1].

    Layers fold bottom-up, one at a time, each taking an equal share of the
    sequence: layers below the active one are folded, layers above are
    deployed, and the active layer is interpolated with cosine easing.
    progress = 1 returns every layer folded.
    """
    if not 0.0 <= progress <= 1.0:
        raise ValueError(f"progress must lie in [0, 1], got {progress}")

    layer_states = layer_fold_states(designs, units)
    num_layers = len(layer_states)
    if progress >= 1.0:
        return [s['folded'] for s in layer_states]

    position = progress * num_layers
    active = int(np.floor(position))
    t = ease_in_out(position - active)

    frame = []
    for i, s in enumerate(layer_states):
        if i < active:
            frame.append(s['folded'])
        elif i > active:
            frame.append(s['deployed'])
        else:
            start, end = s['deployed'], s['folded']
            frame.append(FoldState(
                h=float(start.h + t * (end.h - start.h)),
                phi=float(start.phi + t * (end.phi - start.phi)),
            ))
    return frame


def stack_vertex_coordinates(
    units: Sequence[KreslingUnit],
    fold_states: Sequence[FoldState],
    z_start: float = 0.0,
) -> List[Tuple[np.ndarray, np.ndarray]]:
    """
    Vertex rings of every layer, stacked flush along z.

    Layer i's bottom ring sits where layer i-1's top ring ends.

    Returns:
    --------
    List of (top, bottom) arrays of shape (n, 3), one pair per layer
    """
    if len(units) != len(fold_states):
        raise ValueError(f"{len(units)} units but {len(fold_states)} fold states")

    rings = []
    z_offset = z_start
    for unit, state in zip(units, fold_states):
        coords = unit.get_vertex_coordinates(state.h, state.phi)
        shift = np.array([0.0, 0.0, z_offset + state.h / 2.0])
        rings.append((coords.top_vertices + shift, coords.bottom_vertices + shift))
        z_offset += state.h
    return rings


def design_table(designs: Sequence[LayerDesign], units: Optional[Sequence[KreslingUnit]] = None) -> pd.DataFrame:
    """
    Layer parameter table. With units, adds the model's own stable heights,
    phase and barrier estimate next to the targets.
    """
    rows = []
    for i, design in enumerate(designs):
        row = {'layer': i + 1, **asdict(design)}
        if units is not None:
            unit = units[i]
            stable = unit.find_stable_states()
            row.update({
                'phase': unit.calculate_phase(),
                'model_h1': stable.state1.h if stable.state1 is not None else np.nan,
                'model_h2': stable.state2.h if stable.state2 is not None else np.nan,
                'model_barrier': unit.compute_energy_barrier(),
            })
        rows.append(row)
    return pd.DataFrame(rows)
