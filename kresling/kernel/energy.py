# kresling/kernel/energy.py
"""
ENERGY: Bar-Spring Strain Energy of the Creases
===============================================

Each crease is modelled as a linear axial spring with stiffness EA / L0:

    km = EA / c        (mountain)
    kv = EA / d        (valley)

The unit has n mountain and n valley creases, all strained equally by
symmetry, so the total elastic energy at fold state (h, phi) is

    E = n * km * (c~ - c)^2 / 2 + n * kv * (d~ - d)^2 / 2

E >= 0 everywhere and E = 0 exactly where both creases are at rest length.
"""

from typing import Tuple

import numpy as np

from .geometry import crease_lengths


def crease_stiffness(EA: float, c: float, d: float) -> Tuple[float, float]:
    """Per-crease stiffness (km, kv)."""
    return EA / c, EA / d


def spring_energy(stiffness: float, length, rest_length: float):
    """Energy of one linear spring: k * (L - L0)^2 / 2."""
    return stiffness * (np.asarray(length, dtype=float) - rest_length) ** 2 / 2.0


def strain_energy(
    h,
    phi,
    n: int,
    r: float,
    R: float,
    c: float,
    d: float,
    km: float,
    kv: float,
):
    """
    Total crease energy at fold state (h, phi).

    h and phi may be scalars or numpy arrays (broadcast together); a scalar
    input returns a float.
    """
    c_tilde, d_tilde = crease_lengths(h, phi, r, R, n)
    energy = n * spring_energy(km, c_tilde, c) + n * spring_energy(kv, d_tilde, d)
    energy = np.asarray(energy, dtype=float)
    return float(energy) if energy.ndim == 0 else energy
