# kresling/config.py
"""
Model configuration and defaults.
"""

import math
from dataclasses import dataclass
from typing import List, Tuple


@dataclass
class ModelConfig:
    """Global configuration for the Kresling model and its consumers."""

    # Default unit parameters (n cells, edges a/b, crease c, angle beta, stiffness EA)
    default_n: int = 6
    default_a: float = 1.0
    default_b: float = 2.0
    default_c: float = 3.0
    default_beta: float = 1.5
    default_EA: float = 1.0

    # Equilibrium twist search: number of grid intervals (samples = steps + 1)
    twist_search_steps: int = 100

    # Energy landscape defaults
    landscape_range: Tuple[float, float] = (0.0, 4.0)
    landscape_steps: int = 100

    # Fold states used when a closed-form stable state is absent
    deployed_fallback: Tuple[float, float] = (2.0, 0.0)
    folded_fallback: Tuple[float, float] = (0.5, math.pi / 4)

    # Energy programming
    num_layers: int = 2
    num_cells: int = 6
    stack_steps: int = 100

    # Surface approximation
    surface_z_range: Tuple[float, float] = (-5.0, 5.0)
    surface_resolution: int = 50
    folded_height_ratio: float = 0.2

    # Export
    export_precision: int = 4

    surfaces: List[str] = None

    def __post_init__(self):
        if self.surfaces is None:
            self.surfaces = ['hyperboloid', 'ellipsoid', 'sinusoid', 'cone', 'custom']

    def default_params(self) -> dict:
        return {
            'n': self.default_n,
            'a': self.default_a,
            'b': self.default_b,
            'c': self.default_c,
            'beta': self.default_beta,
            'EA': self.default_EA,
        }


# Global config instance
CONFIG = ModelConfig()
