# tests/test_stacking.py
"""
Test the stacking module (multi-layer energy programming).

WHY THESE TESTS?
---------------
1. The bilayer table must reproduce the published geometry exactly
2. Height bookkeeping (distribution, stable heights) drives every chart
3. The folding sequence must start fully deployed and end fully folded
4. Stacked rings must meet: layer i's top ring is layer i+1's bottom ring
"""

import numpy as np
import pytest

from kresling.model import FoldState
from kresling.stacking import (
    BILAYER_GEOMETRY,
    LayerTarget,
    build_layer_units,
    default_layer_targets,
    design_table,
    distribute_height,
    ease_in_out,
    folding_sequence_frame,
    layer_fold_states,
    optimize_layer_parameters,
    stack_energy_landscape,
    stack_stable_heights,
    stack_vertex_coordinates,
)


@pytest.fixture
def bilayer():
    designs = optimize_layer_parameters(default_layer_targets(2), num_cells=6)
    units = build_layer_units(designs, num_cells=6)
    return designs, units


class TestLayerParameters:
    """Targets and the parameter table."""

    def test_default_targets(self):
        targets = default_layer_targets(3)
        assert [t.h1 for t in targets] == pytest.approx([0.8, 0.6, 0.4])
        assert [t.h2 for t in targets] == [0.0, 0.0, 0.0]
        assert [t.energy_barrier for t in targets] == pytest.approx([0.001, 0.002, 0.003])

    def test_bilayer_uses_published_geometry(self, bilayer):
        designs, _ = bilayer
        assert designs[0].b1 == 1.0371
        assert designs[0].b2 == 0.4715
        assert designs[0].c == 1.0
        assert designs[0].beta == 1.5130
        assert designs[1].b1 == 0.4715
        assert designs[1].b2 == 0.2640
        assert designs[1].c == 0.5064
        assert designs[1].beta == 1.5894
        assert len(designs) == len(BILAYER_GEOMETRY)

    def test_targets_copied_through(self, bilayer):
        designs, _ = bilayer
        assert designs[0].h1 == pytest.approx(0.8)
        assert designs[1].h1 == pytest.approx(0.6)
        assert designs[1].energy_barrier == pytest.approx(0.002)

    def test_scaling_rule_for_other_stacks(self):
        designs = optimize_layer_parameters(default_layer_targets(3), num_cells=6)
        assert designs[2].b1 == pytest.approx(0.8)
        assert designs[2].b2 == pytest.approx(0.4)
        assert designs[2].c == pytest.approx(0.64)
        assert designs[2].beta == pytest.approx(1.6)

    def test_two_layers_other_cell_count_use_scaling(self):
        designs = optimize_layer_parameters(default_layer_targets(2), num_cells=8)
        assert designs[0].b1 == pytest.approx(1.0)
        assert designs[1].b2 == pytest.approx(0.45)

    def test_layer_units_orientation(self, bilayer):
        """Top edge a = b2, bottom edge b = b1."""
        designs, units = bilayer
        assert units[0].a == designs[0].b2
        assert units[0].b == designs[0].b1
        assert units[1].n == 6

    def test_empty_inputs_rejected(self):
        with pytest.raises(ValueError):
            optimize_layer_parameters([])
        with pytest.raises(ValueError):
            default_layer_targets(0)
        with pytest.raises(ValueError):
            stack_stable_heights([])

    def test_design_table(self, bilayer):
        designs, units = bilayer
        df = design_table(designs, units)
        assert list(df['layer']) == [1, 2]
        for col in ('b1', 'b2', 'c', 'beta', 'h1', 'h2', 'energy_barrier',
                    'phase', 'model_h1', 'model_h2', 'model_barrier'):
            assert col in df.columns
        assert df.loc[0, 'model_h1'] == pytest.approx(0.5996, abs=2e-3)


class TestHeights:
    """Height distribution and stable heights."""

    def test_proportional_split(self):
        np.testing.assert_allclose(distribute_height(0.7, [0.8, 0.6]), [0.4, 0.3])

    def test_capped_at_deployed(self):
        np.testing.assert_allclose(distribute_height(2.0, [0.8, 0.6]), [0.8, 0.6])

    def test_zero_height(self):
        np.testing.assert_allclose(distribute_height(0.0, [0.8, 0.6]), [0.0, 0.0])

    def test_bilayer_stable_heights(self, bilayer):
        designs, _ = bilayer
        assert stack_stable_heights(designs) == pytest.approx([1.4, 0.6, 0.0])

    def test_sequential_stable_heights_three_layers(self):
        """
        Folding bottom-up: after k layers fold, the height is the folded
        heights of layers < k plus the deployed heights of the rest.
        """
        targets = [LayerTarget(1.0, 0.2, 0.001), LayerTarget(0.8, 0.1, 0.002), LayerTarget(0.6, 0.3, 0.003)]
        designs = optimize_layer_parameters(targets, num_cells=6)
        heights = stack_stable_heights(designs)
        assert heights == pytest.approx([2.4, 1.6, 0.9, 0.6])
        assert all(a > b for a, b in zip(heights, heights[1:]))


class TestStackEnergy:
    """Total energy vs total height."""

    def test_landscape_columns_and_size(self, bilayer):
        designs, units = bilayer
        df = stack_energy_landscape(designs, units, steps=20)
        assert len(df) == 21
        assert list(df.columns) == ['h', 'energy', 'energy_layer_0', 'energy_layer_1']
        assert df['h'].iloc[0] == 0.0
        assert df['h'].iloc[-1] == pytest.approx(1.4)

    def test_total_is_sum_of_layers(self, bilayer):
        designs, units = bilayer
        df = stack_energy_landscape(designs, units, steps=10)
        np.testing.assert_allclose(df['energy'], df['energy_layer_0'] + df['energy_layer_1'])
        assert (df['energy'] >= 0).all()

    def test_mismatched_lengths(self, bilayer):
        designs, units = bilayer
        with pytest.raises(ValueError):
            stack_energy_landscape(designs, units[:1])


class TestFoldingSequence:
    """Per-layer fold states during the folding animation."""

    def test_layer_fold_states(self, bilayer):
        designs, units = bilayer
        states = layer_fold_states(designs, units)
        stable = units[0].find_stable_states()
        assert states[0]['deployed'] == FoldState(0.8, stable.state1.phi)
        assert states[0]['folded'] == FoldState(0.0, stable.state2.phi)

    def test_start_fully_deployed(self, bilayer):
        designs, units = bilayer
        frame = folding_sequence_frame(designs, units, 0.0)
        states = layer_fold_states(designs, units)
        assert frame == [s['deployed'] for s in states]

    def test_end_fully_folded(self, bilayer):
        designs, units = bilayer
        frame = folding_sequence_frame(designs, units, 1.0)
        states = layer_fold_states(designs, units)
        assert frame == [s['folded'] for s in states]

    def test_bottom_layer_folds_first(self, bilayer):
        designs, units = bilayer
        states = layer_fold_states(designs, units)

        halfway = folding_sequence_frame(designs, units, 0.5)
        assert halfway[0] == states[0]['folded']
        assert halfway[1].h == pytest.approx(states[1]['deployed'].h)

        quarter = folding_sequence_frame(designs, units, 0.25)
        assert quarter[0].h == pytest.approx(0.4)  # eased midpoint of 0.8 -> 0
        assert quarter[1] == states[1]['deployed']

    def test_easing(self):
        assert ease_in_out(0.0) == pytest.approx(0.0)
        assert ease_in_out(0.5) == pytest.approx(0.5)
        assert ease_in_out(1.0) == pytest.approx(1.0)

    def test_progress_out_of_range(self, bilayer):
        designs, units = bilayer
        with pytest.raises(ValueError):
            folding_sequence_frame(designs, units, 1.5)
        with pytest.raises(ValueError):
            folding_sequence_frame(designs, units, -0.1)


class TestStackGeometry:
    """Stacked vertex rings."""

    def test_layers_stack_flush(self, bilayer):
        _, units = bilayer
        rings = stack_vertex_coordinates(units, [FoldState(0.8, 0.1), FoldState(0.6, 0.2)])

        (top0, bottom0), (top1, bottom1) = rings
        np.testing.assert_allclose(bottom0[:, 2], 0.0, atol=1e-12)
        np.testing.assert_allclose(top0[:, 2], 0.8)
        np.testing.assert_allclose(bottom1[:, 2], 0.8)
        np.testing.assert_allclose(top1[:, 2], 1.4)

    def test_interface_radii_match(self, bilayer):
        """Layer 0's top polygon and layer 1's bottom polygon share edge b2."""
        _, units = bilayer
        rings = stack_vertex_coordinates(units, [FoldState(0.8, 0.0), FoldState(0.6, 0.0)])
        top0 = rings[0][0]
        bottom1 = rings[1][1]
        np.testing.assert_allclose(np.hypot(top0[:, 0], top0[:, 1]), np.hypot(bottom1[:, 0], bottom1[:, 1]))

    def test_z_start(self, bilayer):
        _, units = bilayer
        rings = stack_vertex_coordinates(units, [FoldState(0.8, 0.0), FoldState(0.6, 0.0)], z_start=-1.0)
        np.testing.assert_allclose(rings[0][1][:, 2], -1.0)

    def test_mismatched_lengths(self, bilayer):
        _, units = bilayer
        with pytest.raises(ValueError):
            stack_vertex_coordinates(units, [FoldState(0.8, 0.0)])
