# kresling/unit.py
"""
KRESLING UNIT: The Geometric-Mechanical Model
=============================================

PURPOSE:
--------
KreslingUnit owns one parameter set (n, a, b, c, beta, EA), derives the
secondary quantities (d, r, R, km, kv) and answers every question the rest of
the package asks about a unit:

    compute_crease_length(h, phi)      strained crease lengths
    compute_energy(h, phi)             crease strain energy
    compute_energy_landscape(...)      relaxed energy vs height (lazy)
    find_equilibrium_twist_angle(h)    energy-minimising twist at height h
    find_stable_states()               closed-form stable pair (cached)
    compute_energy_barrier()           energy separating the two states
    is_bistable() / calculate_phase()  classification
    get_vertex_coordinates(h, phi)     3D vertex rings

PARAMETER CHANGES:
------------------
Two ways to change parameters:

    unit2 = unit.replace(c=2.5)     new unit, unit untouched (preferred)
    unit.set_params(c=2.5)          in place; derived values recomputed and
                                    the stable-state cache cleared

The stable-state cache is keyed to the geometry (n, a, b, c, beta). An
EA-only change rescales km and kv but keeps the cached states. Parameters and
derived quantities live in one immutable snapshot that set_params replaces
in a single assignment; mechanics read the snapshot once per call. Mutation
and cache reads share one lock, so a reader never sees states computed from
old geometry next to new parameters.

USAGE:
------
    unit = KreslingUnit(n=6, a=1.0, b=2.0, c=3.0, beta=1.5)
    states = unit.find_stable_states()
    if unit.is_bistable():
        print(states.state1.h, states.state2.h, unit.compute_energy_barrier())
"""

import logging
import threading
from collections import namedtuple
from dataclasses import replace as dc_replace
from typing import Iterator, Optional, Tuple

import numpy as np
import pandas as pd

from .config import CONFIG
from .model import (
    GEOMETRIC_PARAMS,
    FoldState,
    KreslingParams,
    StableStates,
    VertexCoordinates,
)
from .kernel.geometry import circumradius, crease_lengths, valley_crease_length, vertex_rings
from .kernel.energy import crease_stiffness, strain_energy
from .kernel.search import equilibrium_twist
from .stability import (
    barrier_state,
    classify_phase,
    closed_form_stable_states,
    lambda_parameter,
    ridge_barrier,
    saddle_height,
)

logger = logging.getLogger(__name__)


_Derived = namedtuple('_Derived', ['d', 'r', 'R', 'km', 'kv'])


def derive_quantities(params: KreslingParams) -> _Derived:
    """Valley length, circumradii and crease stiffnesses of a parameter set."""
    d = valley_crease_length(params.b, params.c, params.beta)
    r = float(circumradius(params.a, params.n))
    R = float(circumradius(params.b, params.n))
    km, kv = crease_stiffness(params.EA, params.c, d)
    return _Derived(d=d, r=r, R=R, km=km, kv=kv)


# Parameters and the quantities derived from them, replaced as one object
_Snapshot = namedtuple('_Snapshot', ['params', 'derived'])


def _snapshot(params: KreslingParams) -> _Snapshot:
    return _Snapshot(params=params, derived=derive_quantities(params))


def _energy(state: _Snapshot, h, phi):
    p, der = state
    return strain_energy(h, phi, p.n, der.r, der.R, p.c, der.d, der.km, der.kv)


class EnergyLandscape:
    """
    Relaxed energy vs height: steps + 1 points (h, E(h, phi_eq(h))).

    Lazy and restartable: every iteration recomputes from a snapshot of the
    unit taken at creation, so later parameter changes on the original unit
    do not leak in.
    """

    def __init__(self, unit: "KreslingUnit", h_min: float, h_max: float, steps: int):
        if steps < 1:
            raise ValueError(f"steps must be >= 1, got {steps}")
        self._unit = unit.replace()
        self.h_min = float(h_min)
        self.h_max = float(h_max)
        self.steps = int(steps)

    @property
    def heights(self) -> np.ndarray:
        return np.linspace(self.h_min, self.h_max, self.steps + 1)

    def __len__(self) -> int:
        return self.steps + 1

    def __iter__(self) -> Iterator[Tuple[float, float]]:
        for h in self.heights:
            phi = self._unit.find_equilibrium_twist_angle(h)
            yield float(h), self._unit.compute_energy(h, phi)

    def to_frame(self) -> pd.DataFrame:
        """Landscape as a DataFrame with columns h, phi, energy."""
        rows = []
        for h in self.heights:
            phi = self._unit.find_equilibrium_twist_angle(h)
            rows.append({'h': float(h), 'phi': phi, 'energy': self._unit.compute_energy(h, phi)})
        return pd.DataFrame(rows, columns=['h', 'phi', 'energy'])


class KreslingUnit:
    """
    Mechanical model of one conical Kresling unit.

    Parameters default to CONFIG (n=6, a=1, b=2, c=3, beta=1.5, EA=1).

    Raises:
    -------
    InvalidParameterError
        If the parameters describe no real geometry (see validate_params).
    """

    def __init__(self, n=None, a=None, b=None, c=None, beta=None, EA=None):
        given = {'n': n, 'a': a, 'b': b, 'c': c, 'beta': beta, 'EA': EA}
        values = CONFIG.default_params()
        values.update({k: v for k, v in given.items() if v is not None})

        self._lock = threading.RLock()
        self._state = _snapshot(KreslingParams(**values))
        self._stable_states: Optional[StableStates] = None

    @classmethod
    def from_params(cls, params: KreslingParams) -> "KreslingUnit":
        return cls(**params.as_dict())

    def __repr__(self) -> str:
        p = self._state.params
        return f"KreslingUnit(n={p.n}, a={p.a}, b={p.b}, c={p.c}, beta={p.beta}, EA={p.EA})"

    # ------------------------------------------------------------------
    # Parameters and derived quantities
    # ------------------------------------------------------------------

    @property
    def params(self) -> KreslingParams:
        return self._state.params

    n = property(lambda self: self._state.params.n)
    a = property(lambda self: self._state.params.a)
    b = property(lambda self: self._state.params.b)
    c = property(lambda self: self._state.params.c)
    beta = property(lambda self: self._state.params.beta)
    EA = property(lambda self: self._state.params.EA)

    d = property(lambda self: self._state.derived.d, doc="Valley-crease rest length")
    r = property(lambda self: self._state.derived.r, doc="Top-polygon circumradius")
    R = property(lambda self: self._state.derived.R, doc="Bottom-polygon circumradius")
    km = property(lambda self: self._state.derived.km, doc="Mountain-crease stiffness EA/c")
    kv = property(lambda self: self._state.derived.kv, doc="Valley-crease stiffness EA/d")

    @property
    def lam(self) -> float:
        """lambda = ((b - 2 c cos(beta)) / a) * sin(pi/n)."""
        return lambda_parameter(self._state.params)

    def replace(self, **changes) -> "KreslingUnit":
        """New unit with some parameters changed; self is left untouched."""
        _check_names(changes)
        return KreslingUnit.from_params(dc_replace(self._state.params, **changes))

    def set_params(self, **changes) -> None:
        """
        Change parameters in place.

        Derived quantities are recomputed before the new snapshot is swapped
        in, so readers see either the old or the new geometry, never a mix.
        The stable-state cache is cleared if any of n, a, b, c, beta changed.
        """
        _check_names(changes)
        with self._lock:
            old_params = self._state.params
            new_state = _snapshot(dc_replace(old_params, **changes))
            geometry_changed = any(
                getattr(new_state.params, name) != getattr(old_params, name) for name in GEOMETRIC_PARAMS
            )
            self._state = new_state
            if geometry_changed:
                self._stable_states = None
                logger.debug("Geometry changed (%s); stable-state cache cleared", sorted(changes))

    def invalidate(self) -> None:
        """Drop the cached stable states."""
        with self._lock:
            self._stable_states = None

    # ------------------------------------------------------------------
    # Mechanics
    # ------------------------------------------------------------------

    def compute_crease_length(self, h, phi) -> Tuple[float, float]:
        """Strained (c~, d~) at fold state (h, phi). Accepts numpy arrays."""
        p, der = self._state
        return crease_lengths(h, phi, der.r, der.R, p.n)

    def compute_energy(self, h, phi):
        """Crease strain energy at fold state (h, phi). Accepts numpy arrays."""
        return _energy(self._state, h, phi)

    def find_equilibrium_twist_angle(self, h: float, refine: bool = False, steps: Optional[int] = None) -> float:
        """
        Twist angle minimising the energy at fixed height h.

        Grid search over [0, min(pi, pi - 2*pi/n)] with steps + 1 samples
        (default 101); the first global minimum wins. With refine=True the
        grid optimum is polished by a bounded minimiser in its grid cell.
        """
        if steps is None:
            steps = CONFIG.twist_search_steps
        state = self._state
        return equilibrium_twist(lambda phi: _energy(state, h, phi), state.params.n, steps, refine)

    def compute_energy_landscape(self, h_min: Optional[float] = None, h_max: Optional[float] = None,
                                 steps: Optional[int] = None) -> EnergyLandscape:
        """Relaxed energy at steps + 1 equally spaced heights in [h_min, h_max]."""
        lo, hi = CONFIG.landscape_range
        return EnergyLandscape(
            self,
            lo if h_min is None else h_min,
            hi if h_max is None else h_max,
            CONFIG.landscape_steps if steps is None else steps,
        )

    def find_stable_states(self) -> StableStates:
        """
        Closed-form stable pair, computed once and cached until the geometry
        changes. Repeated calls return the same object.
        """
        with self._lock:
            if self._stable_states is None:
                self._stable_states = closed_form_stable_states(self._state.params)
                logger.debug("Stable states for %r: %r", self, self._stable_states)
            return self._stable_states

    def is_bistable(self) -> bool:
        states = self.find_stable_states()
        return states.state1 is not None and states.state2 is not None

    def calculate_phase(self) -> str:
        """One of 'monostable', 'bistable-zero-energy', 'bistable-nonzero-energy'."""
        with self._lock:
            return classify_phase(self._state.params, self.find_stable_states())

    def compute_h0_for_phi0(self, phi0: float) -> float:
        """
        Approximate barrier height. The estimate depends on the geometry only;
        phi0 is accepted for symmetry with the saddle twist.
        """
        return saddle_height(self._state.params)

    def compute_energy_barrier(self, method: str = "approximate") -> float:
        """
        Energy of the configuration separating the two stable states.

        method='approximate' (default) evaluates E at the fixed saddle estimate
        (phi0 = pi/2 - pi/n, h0 from the geometry). method='ridge' returns the
        maximum of the minimum-energy path between the stable heights.
        """
        if method == "approximate":
            state = self._state
            saddle = barrier_state(state.params)
            return _energy(state, saddle.h, saddle.phi)
        if method == "ridge":
            with self._lock:
                state = self._state
                stable = self.find_stable_states()
            return ridge_barrier(lambda h, phi: _energy(state, h, phi), state.params.n, stable,
                                 twist_steps=CONFIG.twist_search_steps)
        raise ValueError(f"Unknown barrier method {method!r}; use 'approximate' or 'ridge'")

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def get_vertex_coordinates(self, h: float, phi: float) -> VertexCoordinates:
        """Top and bottom vertex rings (n x 3 arrays) and mid point (0, 0, h/2)."""
        p, der = self._state
        top, bottom = vertex_rings(h, phi, der.r, der.R, p.n)
        return VertexCoordinates(
            top_vertices=top,
            bottom_vertices=bottom,
            mid_point=np.array([0.0, 0.0, h / 2.0]),
        )

    def deployed_state(self) -> FoldState:
        """state1, or the configured deployed fallback if absent."""
        state1 = self.find_stable_states().state1
        if state1 is not None:
            return state1
        return FoldState(*CONFIG.deployed_fallback)

    def folded_state(self) -> FoldState:
        """state2, or the configured folded fallback if absent."""
        state2 = self.find_stable_states().state2
        if state2 is not None:
            return state2
        return FoldState(*CONFIG.folded_fallback)


def _check_names(changes: dict) -> None:
    unknown = set(changes) - set(KreslingParams.__dataclass_fields__)
    if unknown:
        raise TypeError(f"Unknown Kresling parameter(s): {', '.join(sorted(unknown))}")
