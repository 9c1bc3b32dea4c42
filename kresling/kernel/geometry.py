# kresling/kernel/geometry.py
"""
GEOMETRY: Radii, Crease Lengths and Vertex Rings
================================================

PURPOSE:
--------
Pure geometric relations of a conical Kresling unit. Nothing here knows
about stiffness or energy; the functions map parameters and fold states to
lengths and coordinates.

CREASE LENGTHS:
---------------
Place bottom vertex j on a circle of radius R at angle 2*pi*j/n (height -h/2)
and top vertex i on a circle of radius r at angle 2*pi*i/n + phi (height +h/2).
The squared distance between them is

    h^2 + r^2 + R^2 - 2 r R cos(phi + 2*pi*(i - j)/n)

The mountain crease joins B_i to T_i (angle offset 0) and the valley crease
joins B_i to T_(i+1) (angle offset +2*pi/n):

    c~ = sqrt(h^2 + r^2 + R^2 - 2 r R cos(phi))
    d~ = sqrt(h^2 + r^2 + R^2 - 2 r R cos(phi + 2*pi/n))

TRIANGULATION:
--------------
Each cell (B_j, B_j+1, T_j+1, T_j) is drawn as two triangles

    (B_j, B_j+1, T_j+1) and (B_j, T_j+1, T_j)

split along the valley crease B_j-T_j+1; the mountain crease B_j-T_j is
the shared edge with the previous cell.
"""

import logging
from typing import List, Tuple

import numpy as np

logger = logging.getLogger(__name__)


def circumradius(edge: float, n: int) -> float:
    """Circumradius of a regular n-gon with the given edge length."""
    return edge / (2.0 * np.sin(np.pi / n))


def valley_crease_length(b: float, c: float, beta: float) -> float:
    """
    Rest length of the valley crease (law of cosines on b, c, beta).

    >>> round(valley_crease_length(2.0, 3.0, 1.5), 4)
    3.4859
    """
    return float(np.sqrt(max(0.0, b**2 + c**2 - 2.0 * b * c * np.cos(beta))))


def clamped_sqrt(radicand):
    """
    Square root with negative radicands clamped to zero.

    Slightly negative values are floating-point noise on a degenerate
    configuration; they become 0 instead of NaN. Works on scalars and arrays.
    """
    radicand = np.asarray(radicand, dtype=float)
    if np.any(radicand < -1e-9):
        logger.debug("Clamping negative radicand (min=%.3e) to zero", float(np.min(radicand)))
    result = np.sqrt(np.maximum(radicand, 0.0))
    return float(result) if result.ndim == 0 else result


def crease_lengths(h, phi, r: float, R: float, n: int):
    """
    Strained mountain and valley crease lengths at fold state (h, phi).

    h and phi may be scalars or broadcastable numpy arrays.

    Returns:
    --------
    (c_tilde, d_tilde)
    """
    h = np.asarray(h, dtype=float)
    phi = np.asarray(phi, dtype=float)
    base = h**2 + r**2 + R**2
    c_tilde = clamped_sqrt(base - 2.0 * r * R * np.cos(phi))
    d_tilde = clamped_sqrt(base - 2.0 * r * R * np.cos(phi + 2.0 * np.pi / n))
    return c_tilde, d_tilde


def height_for_mountain_length(c: float, r: float, R: float, phi: float) -> float:
    """
    Height at which the mountain crease has its rest length c for twist phi.

        h = sqrt(max(0, c^2 - r^2 - R^2 + 2 r R cos(phi)))
    """
    return clamped_sqrt(c**2 - r**2 - R**2 + 2.0 * r * R * np.cos(phi))


def vertex_rings(h: float, phi: float, r: float, R: float, n: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Top and bottom vertex rings at fold state (h, phi).

    Returns:
    --------
    top : np.ndarray (n, 3)
        Top vertex i at radius r, angle 2*pi*i/n + phi, z = +h/2
    bottom : np.ndarray (n, 3)
        Bottom vertex i at radius R, angle 2*pi*i/n, z = -h/2
    """
    angles = 2.0 * np.pi * np.arange(n) / n

    bottom = np.column_stack([
        R * np.cos(angles),
        R * np.sin(angles),
        np.full(n, -h / 2.0),
    ])
    top = np.column_stack([
        r * np.cos(angles + phi),
        r * np.sin(angles + phi),
        np.full(n, h / 2.0),
    ])
    return top, bottom


def unit_triangles(n: int) -> List[Tuple[int, int, int]]:
    """
    Triangle faces of one unit as index triples into the stacked array
    [bottom_0 .. bottom_(n-1), top_0 .. top_(n-1)].
    """
    faces = []
    for j in range(n):
        nj = (j + 1) % n
        b_j, b_next = j, nj
        t_j, t_next = n + j, n + nj
        faces.append((b_j, b_next, t_next))
        faces.append((b_j, t_next, t_j))
    return faces


def crease_segments(top: np.ndarray, bottom: np.ndarray) -> Tuple[List[np.ndarray], List[np.ndarray]]:
    """
    Mountain (B_j -> T_j) and valley (B_j -> T_j+1) crease segments.

    Returns two lists of (2, 3) arrays.
    """
    n = len(bottom)
    mountains = [np.array([bottom[j], top[j]]) for j in range(n)]
    valleys = [np.array([bottom[j], top[(j + 1) % n]]) for j in range(n)]
    return mountains, valleys
