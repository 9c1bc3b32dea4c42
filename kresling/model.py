# kresling/model.py
"""
MODEL DEFINITIONS: Parameters, Fold States, Stable-State Pairs
==============================================================

PURPOSE:
--------
Plain data structures shared by every part of the package:

- KreslingParams: the caller-supplied geometry of one conical Kresling unit
- FoldState: one configuration (height h, twist angle phi) of a unit
- StableStates: the pair of closed-form stable states (either may be absent)

GEOMETRY:
---------
A unit is a twisted shell between two regular n-gons:

    top polygon      edge a, circumradius r = a / (2 sin(pi/n))
    bottom polygon   edge b, circumradius R = b / (2 sin(pi/n))

Each of the n cells carries one mountain crease (rest length c, at angle beta
to the bottom edge) and one valley crease (rest length d, from the law of
cosines on b, c, beta).
"""

import math
from dataclasses import dataclass, field, fields
from typing import Iterator, Optional

import numpy as np


class InvalidParameterError(ValueError):
    """Raised when unit parameters describe no real Kresling geometry."""
    pass


class Phase:
    """Bistability phase labels returned by calculate_phase()."""
    MONOSTABLE = "monostable"
    BISTABLE_ZERO_ENERGY = "bistable-zero-energy"
    BISTABLE_NONZERO_ENERGY = "bistable-nonzero-energy"

    ALL = (MONOSTABLE, BISTABLE_ZERO_ENERGY, BISTABLE_NONZERO_ENERGY)


# Parameters whose change alters the geometry (and thus the stable states)
GEOMETRIC_PARAMS = ('n', 'a', 'b', 'c', 'beta')


@dataclass(frozen=True)
class KreslingParams:
    """
    Geometric and stiffness parameters of one Kresling unit.

    Parameters:
    -----------
    n : int
        Number of unit cells around the polygon (>= 3)
    a : float
        Top-polygon edge length (> 0)
    b : float
        Bottom-polygon edge length (> 0)
    c : float
        Mountain-crease (side) length (> 0)
    beta : float
        Angle between bottom edge and mountain crease, radians in (0, pi)
    EA : float
        Axial stiffness coefficient of the creases (> 0)

    Examples:
    ---------
    >>> KreslingParams()
    KreslingParams(n=6, a=1.0, b=2.0, c=3.0, beta=1.5, EA=1.0)
    >>> KreslingParams(n=6, a=0.4715, b=1.0371, c=1.0, beta=1.5130).beta
    1.513
    """
    n: int = 6
    a: float = 1.0
    b: float = 2.0
    c: float = 3.0
    beta: float = 1.5
    EA: float = 1.0

    def __post_init__(self):
        validate_params(self)
        # Normalise numeric types (numpy scalars, 6.0 for n, ...)
        object.__setattr__(self, 'n', int(self.n))
        for name in ('a', 'b', 'c', 'beta', 'EA'):
            object.__setattr__(self, name, float(getattr(self, name)))

    def as_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _is_integer(value) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, np.integer)):
        return True
    if isinstance(value, (float, np.floating)):
        return math.isfinite(value) and float(value).is_integer()
    return False


def validate_params(params: KreslingParams) -> None:
    """
    Reject parameter sets that would otherwise propagate NaN/Infinity.

    Raises:
    -------
    InvalidParameterError
        If n is not an integer >= 3, if a, b, c or EA is not a finite positive
        number, or if beta is outside the open interval (0, pi).
    """
    if not _is_integer(params.n) or params.n < 3:
        raise InvalidParameterError(f"n must be an integer >= 3, got {params.n!r}")

    for name in ('a', 'b', 'c', 'EA'):
        value = getattr(params, name)
        try:
            ok = math.isfinite(value) and value > 0
        except TypeError:
            ok = False
        if not ok:
            raise InvalidParameterError(f"{name} must be a finite positive number, got {value!r}")

    try:
        beta_ok = math.isfinite(params.beta) and 0.0 < params.beta < math.pi
    except TypeError:
        beta_ok = False
    if not beta_ok:
        raise InvalidParameterError(f"beta must lie in (0, pi) radians, got {params.beta!r}")


@dataclass(frozen=True)
class FoldState:
    """
    One configuration of a unit: height between the polygons and twist angle.

    Only h >= 0 is physically meaningful; negative heights are not rejected.
    """
    h: float
    phi: float

    def __iter__(self) -> Iterator[float]:
        # Allows: h, phi = state
        yield self.h
        yield self.phi


@dataclass(frozen=True)
class StableStates:
    """
    The two closed-form stable states of a unit.

    state1 is the deployed (taller) state, state2 the folded one. Both are
    present for a bistable unit and both are None otherwise.
    """
    state1: Optional[FoldState] = None
    state2: Optional[FoldState] = None

    @property
    def count(self) -> int:
        return sum(s is not None for s in (self.state1, self.state2))

    def __iter__(self) -> Iterator[Optional[FoldState]]:
        yield self.state1
        yield self.state2


@dataclass(frozen=True, eq=False)
class VertexCoordinates:
    """
    3D vertex rings of a unit at one fold state.

    top_vertices, bottom_vertices : np.ndarray of shape (n, 3)
    mid_point : np.ndarray of shape (3,), always (0, 0, h/2)
    """
    top_vertices: np.ndarray = field(repr=False)
    bottom_vertices: np.ndarray = field(repr=False)
    mid_point: np.ndarray
