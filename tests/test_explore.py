# tests/test_explore.py
"""
Test the explore.py module (sampling and phase sweeps).

TEST PHILOSOPHY:
---------------
- Sweeps are small so the suite stays fast
- Same seed = same table
- Invalid geometries are reported in the table, never raised
"""

import numpy as np
import pandas as pd
import pytest

from kresling import KreslingParams, Phase
from kresling.explore import (
    METRIC_COLUMNS,
    UnitMetrics,
    evaluate_unit,
    phase_map,
    run_phase_sweep,
    sample_unit_params,
)


def test_sample_unit_params_ranges():
    rng = np.random.default_rng(0)
    variants = sample_unit_params(rng, 25, n_cells_range=(5, 7), c_range=(1.0, 2.0))
    assert len(variants) == 25
    for params in variants:
        assert isinstance(params, KreslingParams)
        assert 5 <= params.n <= 7
        assert 1.0 <= params.c <= 2.0
        assert 0.0 < params.beta < np.pi


def test_evaluate_reference_unit():
    ok, metrics, reason = evaluate_unit(KreslingParams())
    assert ok
    assert reason == ""
    assert isinstance(metrics, UnitMetrics)
    assert metrics.is_bistable
    assert metrics.phase == Phase.BISTABLE_ZERO_ENERGY
    assert metrics.stroke == pytest.approx(metrics.h1 - metrics.h2)
    assert metrics.lam == pytest.approx(0.78779, abs=1e-4)


def test_evaluate_monostable_unit():
    ok, metrics, _ = evaluate_unit(KreslingParams(a=0.5))
    assert ok
    assert not metrics.is_bistable
    assert np.isnan(metrics.h1)
    assert np.isnan(metrics.stroke)
    assert metrics.phase == Phase.MONOSTABLE


def test_evaluate_reports_invalid_parameters():
    ok, metrics, reason = evaluate_unit({'n': 6, 'a': 1.0, 'b': 2.0, 'c': 3.0, 'beta': 3.5})
    assert not ok
    assert metrics is None
    assert reason.startswith("invalid:")


def test_run_phase_sweep():
    df = run_phase_sweep(n=30, seed=3, show_progress=False)

    assert isinstance(df, pd.DataFrame)
    assert len(df) == 30
    for col in ['n', 'a', 'b', 'c', 'beta', 'EA', 'ok', 'reason'] + METRIC_COLUMNS:
        assert col in df.columns
    assert df['ok'].all()
    assert set(df['phase']).issubset(set(Phase.ALL))
    assert (df['energy_barrier'] >= 0).all()
    print(f"✓ Sweep: {int(df['is_bistable'].sum())} of {len(df)} units bistable")


def test_run_phase_sweep_is_reproducible():
    df1 = run_phase_sweep(n=10, seed=11, show_progress=False)
    df2 = run_phase_sweep(n=10, seed=11, show_progress=False)
    pd.testing.assert_frame_equal(df1, df2)


def test_phase_map_grid():
    betas = np.linspace(0.5, 2.5, 5)
    cs = np.linspace(1.0, 4.0, 4)
    df = phase_map(betas, cs)

    assert len(df) == 20
    assert df['ok'].all()
    assert list(df['phase'].cat.categories) == list(Phase.ALL)
    assert set(np.round(df['beta'], 6)) == set(np.round(betas, 6))


def test_phase_map_reports_out_of_range_angles():
    df = phase_map([1.5, 3.5], [3.0])
    assert list(df['ok']) == [True, False]
    assert df.loc[1, 'reason'].startswith("invalid:")
    assert pd.isna(df.loc[1, 'phase'])


def test_evaluate_reports_unknown_parameter_names():
    """A row with an extra column is reported, the sweep keeps going."""
    ok, metrics, reason = evaluate_unit({'n': 6, 'a': 1.0, 'b': 2.0, 'c': 3.0, 'beta': 1.5, 'height': 2.0})
    assert not ok
    assert metrics is None
    assert reason.startswith("invalid:")
    assert "height" in reason
