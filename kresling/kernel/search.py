# kresling/kernel/search.py
"""
Equilibrium twist search: brute-force grid minimisation over phi, with an
optional bounded refinement inside the winning grid cell.
"""

import logging
from typing import Callable, Tuple

import numpy as np
from scipy.optimize import minimize_scalar

logger = logging.getLogger(__name__)


def twist_search_range(n: int) -> Tuple[float, float]:
    """Admissible twist range [0, min(pi, pi - 2*pi/n)]."""
    return 0.0, min(np.pi, np.pi - 2.0 * np.pi / n)


def grid_argmin(energy_fn: Callable, phi_min: float, phi_max: float, steps: int) -> Tuple[int, np.ndarray, np.ndarray]:
    """
    Evaluate energy_fn on steps + 1 equally spaced angles and return the
    index of the first global minimum (ties resolve to the lowest phi).

    energy_fn must accept a numpy array of angles.

    Returns:
    --------
    (index, phis, energies)
    """
    if steps < 1:
        raise ValueError(f"steps must be >= 1, got {steps}")
    phis = np.linspace(phi_min, phi_max, steps + 1)
    energies = np.asarray(energy_fn(phis), dtype=float)
    # np.argmin returns the first occurrence, i.e. strict '<' tie-breaking
    return int(np.argmin(energies)), phis, energies


def refine_minimum(energy_fn: Callable, phis: np.ndarray, energies: np.ndarray, index: int, xatol: float = 1e-10) -> float:
    """
    Polish a grid minimum with a bounded scalar minimiser.

    The search is confined to the two grid cells around phis[index], so the
    result stays in the basin found by the grid. The grid value is kept if
    the minimiser does not improve on it.
    """
    lo = phis[max(index - 1, 0)]
    hi = phis[min(index + 1, len(phis) - 1)]
    if hi <= lo:
        return float(phis[index])

    result = minimize_scalar(
        lambda p: float(energy_fn(p)),
        bounds=(lo, hi),
        method='bounded',
        options={'xatol': xatol},
    )
    if result.success and result.fun <= energies[index]:
        return float(result.x)

    logger.debug("Bounded refinement did not improve grid minimum at phi=%.6f", phis[index])
    return float(phis[index])


def equilibrium_twist(energy_fn: Callable, n: int, steps: int = 100, refine: bool = False) -> float:
    """
    Twist angle minimising energy_fn(phi) over the admissible range.

    Parameters:
    -----------
    energy_fn : Callable
        Energy as a function of phi at fixed height (vectorised)
    n : int
        Number of cells (sets the search range)
    steps : int
        Grid intervals; steps + 1 samples. Resolution is range / steps.
    refine : bool
        If True, refine the grid optimum with a bounded minimiser.
    """
    phi_min, phi_max = twist_search_range(n)
    index, phis, energies = grid_argmin(energy_fn, phi_min, phi_max, steps)
    if refine:
        return refine_minimum(energy_fn, phis, energies, index)
    return float(phis[index])
