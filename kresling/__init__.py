# kresling - Conical Kresling Origami Mechanics
"""
KRESLING: Mechanics and Design of Conical Kresling Origami
==========================================================

This package provides:
- The bar-spring model of one conical Kresling unit (energy, equilibrium,
  stable states, bistability phase, barrier, 3D geometry)
- Multi-layer energy programming (layer tables, stacked landscapes,
  folding sequences)
- Approximation of surfaces of revolution by stacked units
- Flat crease patterns and fabrication exports (CSV, SVG)
- Phase sweeps over the design space

ARCHITECTURE:
-------------
    kernel/         Parameter-level numerics (geometry, energy, twist search)
    model.py        Data definitions (KreslingParams, FoldState, StableStates)
    config.py       Defaults (ModelConfig, CONFIG)
    stability.py    Closed-form stable states, phase, barrier
    unit.py         KreslingUnit: the model object
    stacking.py     Energy programming of multi-layer stacks
    surfaces.py     Surface-of-revolution approximation
    pattern.py      Flat crease pattern
    export.py       CSV / SVG / JSON exports
    explore.py      Sampling and phase sweeps
    viz/            matplotlib charts and plotly 3D views
"""

from .model import (
    InvalidParameterError,
    Phase,
    KreslingParams,
    FoldState,
    StableStates,
    VertexCoordinates,
)
from .config import CONFIG, ModelConfig
from .unit import KreslingUnit, EnergyLandscape

__version__ = "0.1.0"

__all__ = [
    'InvalidParameterError', 'Phase', 'KreslingParams', 'FoldState', 'StableStates',
    'VertexCoordinates', 'CONFIG', 'ModelConfig', 'KreslingUnit', 'EnergyLandscape',
]
