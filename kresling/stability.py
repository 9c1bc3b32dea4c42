# kresling/stability.py
"""
STABILITY: Closed-Form Stable States, Phase and Energy Barrier
==============================================================

PURPOSE:
--------
Decide whether a unit is bistable, where its two stable states are, which
bistability phase it belongs to, and how much energy separates the states.

CLOSED-FORM STABLE STATES:
--------------------------
A stable state has both creases at rest length (E = 0). Requiring c~ = c and
d~ = d and subtracting the two squared-length equations gives

    d^2 - c^2 = 2 r R (cos(phi) - cos(phi + 2*pi/n))
              = 4 r R sin(pi/n) sin(phi + pi/n)

which reduces to a single sine equation sin(phi + pi/n) = lambda with

    lambda = ((b - 2 c cos(beta)) / a) * sin(pi/n)

For |lambda| <= 1 there are two roots:

    phi1 = asin(lambda) - pi/n            (deployed)
    phi2 = pi - asin(lambda) - pi/n       (folded)

and the heights follow from c~ = c. For |lambda| > 1 no closed-form state
exists and the unit is reported as monostable.

PHASES:
-------
- monostable                 no pair of closed-form states
- bistable-zero-energy       c exceeds the folded-flat length cfs, or the
                             saddle twist phi0 lies between phi1 and phi2
- bistable-nonzero-energy    otherwise

ENERGY BARRIER:
---------------
The default estimate evaluates the energy at a fixed saddle configuration
(phi0 = pi/2 - pi/n, h0 from the geometry). It is an approximation, not a
saddle search. ridge_barrier() offers the maximum of the minimum-energy path
between the two stable heights instead.
"""

import logging
from typing import Callable, Optional

import numpy as np

from .model import FoldState, KreslingParams, Phase, StableStates
from .kernel.geometry import circumradius, clamped_sqrt, height_for_mountain_length
from .kernel.search import twist_search_range

logger = logging.getLogger(__name__)


def lambda_parameter(params: KreslingParams) -> float:
    """lambda = ((b - 2 c cos(beta)) / a) * sin(pi/n)."""
    return float(((params.b - 2.0 * params.c * np.cos(params.beta)) / params.a) * np.sin(np.pi / params.n))


def closed_form_twist_angles(lam: float, n: int):
    """
    The two twist roots of sin(phi + pi/n) = lam, or (None, None) if |lam| > 1.
    """
    if abs(lam) > 1.0:
        return None, None
    root = float(np.arcsin(lam))
    phi1 = root - np.pi / n
    phi2 = np.pi - root - np.pi / n
    return float(phi1), float(phi2)


def closed_form_stable_states(params: KreslingParams) -> StableStates:
    """
    Both stable states of a unit from the closed-form solution.

    Returns StableStates(None, None) when |lambda| > 1.
    """
    phi1, phi2 = closed_form_twist_angles(lambda_parameter(params), params.n)
    if phi1 is None:
        return StableStates(None, None)

    r = circumradius(params.a, params.n)
    R = circumradius(params.b, params.n)

    state1 = FoldState(h=height_for_mountain_length(params.c, r, R, phi1), phi=phi1)
    state2 = FoldState(h=height_for_mountain_length(params.c, r, R, phi2), phi=phi2)
    return StableStates(state1, state2)


def saddle_twist(n: int) -> float:
    """Twist angle of the approximate barrier configuration, pi/2 - pi/n."""
    return float(np.pi / 2.0 - np.pi / n)


def folded_flat_length(params: KreslingParams) -> float:
    """cfs = sqrt(r^2 + R^2 + 2 r R cos(2*pi/n))."""
    r = circumradius(params.a, params.n)
    R = circumradius(params.b, params.n)
    return clamped_sqrt(r**2 + R**2 + 2.0 * r * R * np.cos(2.0 * np.pi / params.n))


def classify_phase(params: KreslingParams, states: StableStates) -> str:
    """
    Bistability phase of a unit given its stable states.

    Always returns one of Phase.ALL.
    """
    state1, state2 = states
    if state1 is None or state2 is None:
        return Phase.MONOSTABLE

    if abs(lambda_parameter(params)) > 1.0:
        return Phase.MONOSTABLE

    phi0 = saddle_twist(params.n)
    if params.c > folded_flat_length(params):
        return Phase.BISTABLE_ZERO_ENERGY
    if state1.phi <= phi0 <= state2.phi:
        return Phase.BISTABLE_ZERO_ENERGY
    return Phase.BISTABLE_NONZERO_ENERGY


def saddle_height(params: KreslingParams) -> float:
    """
    Approximate height of the barrier configuration.

        h0 = sqrt(max(0, c^2 - r^2 - R^2 + 2 r R sin(pi/n)))
    """
    r = circumradius(params.a, params.n)
    R = circumradius(params.b, params.n)
    return clamped_sqrt(params.c**2 - r**2 - R**2 + 2.0 * r * R * np.sin(np.pi / params.n))


def ridge_barrier(
    energy_fn: Callable,
    n: int,
    states: StableStates,
    samples: int = 201,
    twist_steps: int = 100,
) -> float:
    """
    Highest point of the minimum-energy path between the two stable heights.

    For each height between state2.h and state1.h the twist is relaxed on the
    same grid as the equilibrium search; the barrier is the largest of these
    relaxed energies. Returns 0.0 when the unit has no stable pair.

    energy_fn(h, phi) must broadcast over numpy arrays.
    """
    state1, state2 = states
    if state1 is None or state2 is None:
        logger.debug("ridge_barrier: no stable pair, barrier is 0")
        return 0.0

    h_lo, h_hi = sorted((state1.h, state2.h))
    heights = np.linspace(h_lo, h_hi, samples)
    phi_min, phi_max = twist_search_range(n)
    phis = np.linspace(phi_min, phi_max, twist_steps + 1)

    energies = np.asarray(energy_fn(heights[:, None], phis[None, :]), dtype=float)
    relaxed = energies.min(axis=1)
    return float(relaxed.max())


def barrier_state(params: KreslingParams, phi0: Optional[float] = None) -> FoldState:
    """Fold state used by the approximate barrier estimate."""
    if phi0 is None:
        phi0 = saddle_twist(params.n)
    return FoldState(h=saddle_height(params), phi=phi0)
