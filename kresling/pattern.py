# kresling/pattern.py
"""
PATTERN: Flat Crease Pattern of One Unit
========================================

PURPOSE:
--------
Unfold a Kresling unit into the flat sheet it is folded from. Every cell is
two triangles sharing the valley crease:

    lower triangle   B_i, B_i+1, T_i+1   edges b, c, d
    upper triangle   B_i, T_i+1, T_i     edges d, a, c

The triangles are laid edge-to-edge starting from the bottom edge B_0 B_1 on
the x axis, so the sheet is a strip of n cells with a saw-tooth top and
bottom boundary. B_0 T_0 and B_n T_n are the two edges glued together when
the sheet is rolled into a tube.

CREASE ASSIGNMENT:
------------------
- mountain: B_i - T_i   (interior ones, i = 1 .. n-1)
- valley:   B_i - T_i+1 (i = 0 .. n-1)
- outline:  bottom and top polylines plus the two glue edges
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from .model import InvalidParameterError, KreslingParams
from .kernel.geometry import valley_crease_length

logger = logging.getLogger(__name__)

Segment = Tuple[np.ndarray, np.ndarray]


@dataclass(frozen=True, eq=False)
class CreasePattern:
    """
    Flat pattern of one unit.

    bottom, top : (n + 1, 2) arrays of the B_i and T_i vertices
    mountains, valleys, outline : lists of (start, end) 2D points
    """
    bottom: np.ndarray
    top: np.ndarray
    mountains: List[Segment]
    valleys: List[Segment]
    outline: List[Segment]

    def bounds(self) -> Tuple[float, float, float, float]:
        """(x_min, y_min, x_max, y_max) of the sheet."""
        pts = np.vstack([self.bottom, self.top])
        x_min, y_min = pts.min(axis=0)
        x_max, y_max = pts.max(axis=0)
        return float(x_min), float(y_min), float(x_max), float(y_max)


def _place_apex(p: np.ndarray, q: np.ndarray, dist_p: float, dist_q: float, side: int) -> np.ndarray:
    """
    Third vertex of a triangle with base p-q, at dist_p from p and dist_q
    from q, on the left of p->q for side=+1 and the right for side=-1.
    """
    base = q - p
    length = float(np.hypot(base[0], base[1]))
    tol = 1e-9 * max(length, dist_p, dist_q)
    if dist_p + dist_q < length - tol or abs(dist_p - dist_q) > length + tol:
        raise InvalidParameterError(
            f"Edges {dist_p:.4f}, {dist_q:.4f}, {length:.4f} do not form a triangle; "
            "the pattern cannot be drawn flat"
        )
    along = (dist_p**2 - dist_q**2 + length**2) / (2.0 * length)
    across = np.sqrt(max(0.0, dist_p**2 - along**2))
    u = base / length
    normal = np.array([-u[1], u[0]])
    return p + along * u + side * across * normal


def crease_pattern(params: KreslingParams) -> CreasePattern:
    """
    Flat crease pattern of a unit.

    Raises:
    -------
    InvalidParameterError
        If a, c and d do not form a triangle (|c - a| <= d <= c + a fails).
    """
    n, a, b, c = params.n, params.a, params.b, params.c
    d = valley_crease_length(b, c, params.beta)

    bottom = [np.array([0.0, 0.0]), np.array([b, 0.0])]
    top = [None, _place_apex(bottom[0], bottom[1], d, c, +1)]
    top[0] = _place_apex(bottom[0], top[1], c, a, +1)

    for i in range(1, n):
        top.append(_place_apex(bottom[i], top[i], d, a, -1))
        bottom.append(_place_apex(bottom[i], top[i + 1], b, c, -1))

    bottom = np.array(bottom)
    top = np.array(top)

    mountains = [(bottom[i], top[i]) for i in range(1, n)]
    valleys = [(bottom[i], top[i + 1]) for i in range(n)]
    outline = (
        [(bottom[i], bottom[i + 1]) for i in range(n)]
        + [(top[i], top[i + 1]) for i in range(n)]
        + [(bottom[0], top[0]), (bottom[n], top[n])]
    )
    logger.debug("Crease pattern for n=%d spans %s", n, np.ptp(np.vstack([bottom, top]), axis=0))
    return CreasePattern(bottom=bottom, top=top, mountains=mountains, valleys=valleys, outline=outline)
