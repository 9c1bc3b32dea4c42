# kresling/explore.py
"""
EXPLORE: Batch Exploration of the Kresling Design Space
=======================================================

PURPOSE:
--------
Evaluate many unit geometries at once to see where bistability lives.

WORKFLOW:
---------
1. Sample random unit parameters within ranges (sample_unit_params)
2. Build each unit and extract its metrics (evaluate_unit)
3. Collect parameters + metrics in one DataFrame (run_phase_sweep)

For structured sweeps over two parameters, phase_map() evaluates a full grid
(e.g. beta vs c) and returns a long-form table ready for a phase diagram.

METRICS:
--------
- lam: the closed-form parameter; |lam| > 1 means no stable pair
- h1, phi1 / h2, phi2: deployed and folded stable states (NaN if absent)
- stroke: h1 - h2, the height change when the unit snaps
- phase: one of the three phase labels
- energy_barrier: approximate barrier energy
"""

import logging
from dataclasses import asdict, dataclass
from typing import List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
from tqdm import tqdm

from .model import InvalidParameterError, KreslingParams, Phase
from .unit import KreslingUnit

logger = logging.getLogger(__name__)


@dataclass
class UnitMetrics:
    """
    Metrics extracted from one unit.

    Geometry:
    ---------
    d : float
        Valley crease rest length
    r, R : float
        Top and bottom circumradius

    Stability:
    ----------
    lam : float
        Closed-form parameter ((b - 2 c cos(beta)) / a) sin(pi/n)
    h1, phi1, h2, phi2 : float
        Stable states (NaN when absent)
    stroke : float
        h1 - h2 (NaN when not bistable)
    is_bistable : bool
    phase : str

    Energy:
    -------
    energy_barrier : float
        Approximate barrier energy
    """
    # Geometry
    d: float
    r: float
    R: float

    # Stability
    lam: float
    h1: float
    phi1: float
    h2: float
    phi2: float
    stroke: float
    is_bistable: bool
    phase: str

    # Energy
    energy_barrier: float


METRIC_COLUMNS = list(UnitMetrics.__dataclass_fields__)


def evaluate_unit(params: Union[KreslingParams, Mapping]) -> Tuple[bool, Optional[UnitMetrics], str]:
    """
    Evaluate a single unit geometry.

    Parameters:
    -----------
    params : KreslingParams or mapping
        A mapping is validated here, so invalid sets are reported, not raised

    Returns:
    --------
    success : bool
        True if the unit could be built and analysed
    metrics : Optional[UnitMetrics]
        Extracted metrics (None if failed)
    reason : str
        Empty if success, error message if failed
    """
    try:
        if isinstance(params, KreslingParams):
            unit = KreslingUnit.from_params(params)
        else:
            unit = KreslingUnit(**params)
        states = unit.find_stable_states()
        s1, s2 = states

        metrics = UnitMetrics(
            d=unit.d,
            r=unit.r,
            R=unit.R,
            lam=unit.lam,
            h1=s1.h if s1 is not None else np.nan,
            phi1=s1.phi if s1 is not None else np.nan,
            h2=s2.h if s2 is not None else np.nan,
            phi2=s2.phi if s2 is not None else np.nan,
            stroke=(s1.h - s2.h) if states.count == 2 else np.nan,
            is_bistable=unit.is_bistable(),
            phase=unit.calculate_phase(),
            energy_barrier=unit.compute_energy_barrier(),
        )
        return True, metrics, ""

    except (InvalidParameterError, TypeError) as e:
        # TypeError: a mapping with names that are not unit parameters
        return False, None, f"invalid: {e}"
    except (ValueError, FloatingPointError) as e:
        return False, None, f"error: {e}"


def sample_unit_params(
    rng: np.random.Generator,
    n: int,
    n_cells_range: Tuple[int, int] = (4, 10),
    a_range: Tuple[float, float] = (0.5, 1.5),
    b_range: Tuple[float, float] = (1.0, 3.0),
    c_range: Tuple[float, float] = (0.5, 4.0),
    beta_range: Tuple[float, float] = (0.3, np.pi - 0.3),
    EA: float = 1.0,
) -> List[KreslingParams]:
    """
    Sample random unit geometries.

    Returns a list of KreslingParams with uniformly sampled values.
    """
    variants = []

    for _ in range(n):
        variants.append(KreslingParams(
            n=int(rng.integers(n_cells_range[0], n_cells_range[1] + 1)),
            a=rng.uniform(a_range[0], a_range[1]),
            b=rng.uniform(b_range[0], b_range[1]),
            c=rng.uniform(c_range[0], c_range[1]),
            beta=rng.uniform(beta_range[0], beta_range[1]),
            EA=EA,
        ))

    return variants


def _result_row(params: Union[KreslingParams, Mapping], success: bool, metrics: Optional[UnitMetrics], reason: str) -> dict:
    row = {
        # Parameters
        **(params.as_dict() if isinstance(params, KreslingParams) else dict(params)),

        # Status
        'ok': success,
        'reason': reason,
    }

    if success and metrics:
        row.update(asdict(metrics))
    else:
        row.update({name: np.nan for name in METRIC_COLUMNS})
    return row


def run_phase_sweep(
    n: int = 100,
    seed: int = 42,
    show_progress: bool = True,
    **sample_kwargs
) -> pd.DataFrame:
    """
    Random sweep of unit geometries.

    Parameters:
    -----------
    n : int
        Number of variants to generate and evaluate
    seed : int
        Random seed for reproducibility
    show_progress : bool
        Whether to show a progress bar
    **sample_kwargs
        Additional arguments passed to sample_unit_params()

    Returns:
    --------
    pd.DataFrame
        One row per variant: parameters, 'ok', 'reason' and all metrics
    """
    rng = np.random.default_rng(seed)
    variants = sample_unit_params(rng, n, **sample_kwargs)

    results = []
    iterator = tqdm(variants, desc="Evaluating") if show_progress else variants

    for params in iterator:
        success, metrics, reason = evaluate_unit(params)
        results.append(_result_row(params, success, metrics, reason))

    df = pd.DataFrame(results)
    logger.info("Phase sweep: %d variants, %d bistable",
                len(df), int((df['is_bistable'] == True).sum()))
    return df


def phase_map(
    beta_values: Sequence[float],
    c_values: Sequence[float],
    base: Optional[KreslingParams] = None,
    show_progress: bool = False,
) -> pd.DataFrame:
    """
    Evaluate every (beta, c) combination on top of a base geometry.

    Returns:
    --------
    pd.DataFrame
        Long-form table with one row per grid point, columns of
        run_phase_sweep() plus a categorical 'phase' over Phase.ALL
    """
    if base is None:
        base = KreslingParams()

    grid = [(beta, c) for beta in beta_values for c in c_values]
    iterator = tqdm(grid, desc="Phase map") if show_progress else grid

    results = []
    for beta, c in iterator:
        params = {**base.as_dict(), 'c': float(c), 'beta': float(beta)}
        success, metrics, reason = evaluate_unit(params)
        results.append(_result_row(params, success, metrics, reason))

    df = pd.DataFrame(results)
    df['phase'] = pd.Categorical(df['phase'], categories=list(Phase.ALL))
    return df
