# kresling/surfaces.py
"""
SURFACES: Approximating Surfaces of Revolution with Stacked Units
=================================================================

PURPOSE:
--------
Slice a target surface of revolution r(z) into layers and give each layer
the Kresling geometry whose polygons follow the surface radius at the layer
boundaries. The stacked units then approximate the surface's curvature.

TARGET PROFILES (z in [-5, 5]):
-------------------------------
    hyperboloid   r = 3 sqrt(1 + 3 (z/5)^2)
    ellipsoid     r = 6 cos(pi (z + 5)/10 - pi/2)
    sinusoid      r = 2 sin(-0.6 z) + 4
    cone          r = (18 - z)/2
    custom        r = 3 + (z + 5)/5 (placeholder profile)

Any callable r(z) can be passed instead of a name. Surface meshes revolve
the same profile, so a drawn surface and its layers always agree.

PER-LAYER GEOMETRY:
-------------------
For a layer between z and z + dz with radii r and r' and s = sin(pi/n):

    a    = 2 r s
    b    = 2 r' s
    c    = sqrt(dz^2 + (r - r')^2 + 4 r r' s^2)
    beta = pi - acos((b^2 + c^2 - dz^2 - (r - r')^2 - 4 r r' s^2) / (2 b c))
         = pi - acos(b / (2 c))
    h1   = dz,  h2 = 0.2 dz

phi1 and phi2 are the closed-form twist roots; they are None when the layer
has no closed-form stable pair (|lambda| > 1).
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple, Union

import numpy as np

from .config import CONFIG
from .model import FoldState
from .stability import closed_form_twist_angles
from .unit import KreslingUnit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TargetSurface:
    """A named surface of revolution with radius profile r(z)."""
    name: str
    radius: Callable[[float], float]


def _ellipsoid_radius(z):
    phi = ((z + 5.0) / 10.0) * np.pi - np.pi / 2.0
    return 6.0 * np.cos(phi)


SURFACES: Dict[str, TargetSurface] = {
    'hyperboloid': TargetSurface('hyperboloid', lambda z: 3.0 * np.sqrt(1.0 + 3.0 * (z / 5.0) ** 2)),
    'ellipsoid': TargetSurface('ellipsoid', _ellipsoid_radius),
    'sinusoid': TargetSurface('sinusoid', lambda z: 2.0 * np.sin(-0.6 * z) + 4.0),
    'cone': TargetSurface('cone', lambda z: (18.0 - z) / 2.0),
    'custom': TargetSurface('custom', lambda z: 3.0 + (z + 5.0) / 5.0),
}


def get_surface(name: str) -> TargetSurface:
    try:
        return SURFACES[name]
    except KeyError:
        raise KeyError(f"Unknown surface {name!r}; choose from {sorted(SURFACES)}") from None


def surface_mesh(
    surface: Union[str, Callable[[float], float]],
    resolution: Optional[int] = None,
    z_range: Optional[Tuple[float, float]] = None,
):
    """
    Grid of points on a target surface, revolving its profile about z.

    Returns:
    --------
    X, Y, Z : np.ndarray of shape (resolution + 1, resolution + 1)
    """
    radius = surface if callable(surface) else get_surface(surface).radius
    if resolution is None:
        resolution = CONFIG.surface_resolution
    z_min, z_max = CONFIG.surface_z_range if z_range is None else z_range

    theta, Z = np.meshgrid(
        np.linspace(0.0, 2.0 * np.pi, resolution + 1),
        np.linspace(z_min, z_max, resolution + 1),
    )
    R = np.asarray(radius(Z), dtype=float) * np.ones_like(Z)
    return R * np.cos(theta), R * np.sin(theta), Z


@dataclass(frozen=True)
class SurfaceLayer:
    """Geometry and target fold states of one approximating layer."""
    layer: int
    a: float
    b: float
    c: float
    beta: float
    h1: float
    phi1: Optional[float]
    h2: float
    phi2: Optional[float]

    @property
    def is_bistable(self) -> bool:
        return self.phi1 is not None and self.phi2 is not None


def approximate_surface(
    surface: Union[str, Callable[[float], float]],
    num_layers: Optional[int] = None,
    num_cells: Optional[int] = None,
    z_range: Optional[Tuple[float, float]] = None,
    folded_height_ratio: Optional[float] = None,
) -> List[SurfaceLayer]:
    """
    Per-layer Kresling geometry approximating a surface of revolution.

    Parameters:
    -----------
    surface : str or callable
        Name of a target surface (see SURFACES) or a radius profile r(z)
    num_layers, num_cells : int
        Stack size; default from CONFIG
    z_range : (float, float)
        Height interval sliced into equal layers; default (-5, 5)
    folded_height_ratio : float
        Folded height as a fraction of the layer height; default 0.2
    """
    radius = surface if callable(surface) else get_surface(surface).radius
    label = getattr(surface, '__name__', surface)

    num_layers = CONFIG.num_layers if num_layers is None else num_layers
    num_cells = CONFIG.num_cells if num_cells is None else num_cells
    z_min, z_max = CONFIG.surface_z_range if z_range is None else z_range
    ratio = CONFIG.folded_height_ratio if folded_height_ratio is None else folded_height_ratio

    if num_layers < 1:
        raise ValueError(f"num_layers must be >= 1, got {num_layers}")
    if num_cells < 3:
        raise ValueError(f"num_cells must be >= 3, got {num_cells}")

    dz = (z_max - z_min) / num_layers
    s = np.sin(np.pi / num_cells)

    layers = []
    for i in range(num_layers):
        z = z_min + i * dz
        z_next = z_min + (i + 1) * dz
        r = float(radius(z))
        r_next = float(radius(z_next))
        if r <= 0 or r_next <= 0:
            raise ValueError(f"Surface radius must be positive between z={z:.3f} and z={z_next:.3f}")

        a = 2.0 * r * s
        b = 2.0 * r_next * s
        chord_sq = dz**2 + (r - r_next) ** 2 + 4.0 * r * r_next * s**2
        c = float(np.sqrt(chord_sq))
        # c^2 equals chord_sq, so the law-of-cosines argument reduces to b / (2c)
        beta = float(np.pi - np.arccos(np.clip(b / (2.0 * c), -1.0, 1.0)))

        lam = ((b - 2.0 * c * np.cos(beta)) / a) * s
        phi1, phi2 = closed_form_twist_angles(lam, num_cells)
        if phi1 is None:
            logger.warning("Layer %d of %s has no closed-form stable pair", i + 1, label)

        layers.append(SurfaceLayer(
            layer=i + 1,
            a=float(a),
            b=float(b),
            c=c,
            beta=beta,
            h1=float(dz),
            phi1=phi1,
            h2=float(ratio * dz),
            phi2=phi2,
        ))
    return layers


def surface_layer_units(layers: List[SurfaceLayer], num_cells: Optional[int] = None) -> List[KreslingUnit]:
    """One KreslingUnit per approximating layer."""
    num_cells = CONFIG.num_cells if num_cells is None else num_cells
    return [KreslingUnit(n=num_cells, a=l.a, b=l.b, c=l.c, beta=l.beta) for l in layers]


def deployed_fold_states(layers: List[SurfaceLayer]) -> List[FoldState]:
    """Deployed (h1, phi1) of every layer; a missing phi1 is drawn untwisted."""
    return [FoldState(h=l.h1, phi=l.phi1 if l.phi1 is not None else 0.0) for l in layers]


def surface_stack_rings(
    layers: List[SurfaceLayer],
    num_cells: Optional[int] = None,
    z_start: Optional[float] = None,
) -> List[Tuple[np.ndarray, np.ndarray]]:
    """
    Deployed vertex rings of the approximating stack, placed on the surface.

    A layer's a-polygon sits at its lower boundary z and its b-polygon at
    z + dz, so each unit is turned upside down (rotated by pi about x)
    before stacking. The first layer starts at the bottom of the surface
    range.

    Returns:
    --------
    List of (upper, lower) arrays of shape (n, 3), one pair per layer
    """
    z_offset = CONFIG.surface_z_range[0] if z_start is None else z_start
    flip = np.array([1.0, -1.0, -1.0])

    rings = []
    for unit, state in zip(surface_layer_units(layers, num_cells), deployed_fold_states(layers)):
        coords = unit.get_vertex_coordinates(state.h, state.phi)
        shift = np.array([0.0, 0.0, z_offset + state.h / 2.0])
        upper = coords.bottom_vertices * flip + shift
        lower = coords.top_vertices * flip + shift
        rings.append((upper, lower))
        z_offset += state.h
    return rings
