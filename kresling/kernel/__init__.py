# kresling/kernel - Parameter-level geometry and mechanics
"""
KERNEL: THE PURE NUMERICS UNDER KreslingUnit
============================================

These functions take plain numbers (n, r, R, c, d, km, kv) instead of a unit
object, so they can be reused by the stacking, surface and pattern code and
evaluated on numpy arrays.

    geometry.py   radii, crease lengths, vertex rings, triangulation
    energy.py     crease stiffness and strain energy
    search.py     equilibrium twist (grid + optional bounded refinement)
"""

from .geometry import circumradius, valley_crease_length, crease_lengths, vertex_rings
from .energy import crease_stiffness, strain_energy
from .search import equilibrium_twist, twist_search_range

__all__ = [
    'circumradius', 'valley_crease_length', 'crease_lengths', 'vertex_rings',
    'crease_stiffness', 'strain_energy',
    'equilibrium_twist', 'twist_search_range',
]
