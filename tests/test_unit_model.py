# tests/test_unit_model.py
"""
KRESLING UNIT: Construction, Derived Quantities and Energy
==========================================================

Reference unit used throughout: n=6, a=1, b=2, c=3, beta=1.5, EA=1.

Hand-checked values:
    r = 1, R = 2 (sin(pi/6) = 1/2)
    d = sqrt(4 + 9 - 12 cos(1.5)) = 3.48585
    km = 1/3, kv = 1/d
"""

import numpy as np
import pytest

from kresling import CONFIG, InvalidParameterError, KreslingParams, KreslingUnit


@pytest.fixture
def unit():
    return KreslingUnit(n=6, a=1.0, b=2.0, c=3.0, beta=1.5, EA=1.0)


class TestConstruction:
    """Defaults, derived quantities and parameter access."""

    def test_defaults_come_from_config(self):
        unit = KreslingUnit()
        assert unit.n == CONFIG.default_n
        assert unit.a == CONFIG.default_a
        assert unit.b == CONFIG.default_b
        assert unit.c == CONFIG.default_c
        assert unit.beta == CONFIG.default_beta
        assert unit.EA == CONFIG.default_EA

    def test_partial_arguments_keep_other_defaults(self):
        unit = KreslingUnit(c=2.5)
        assert unit.c == 2.5
        assert unit.a == CONFIG.default_a

    def test_derived_quantities(self, unit):
        """
        WHAT IS THIS TEST?
        ==================
        The circumradii follow r = a / (2 sin(pi/n)) and the valley crease
        follows the law of cosines on (b, c, beta). For n = 6 the radius
        equals the edge length.
        """
        assert unit.r == pytest.approx(1.0)
        assert unit.R == pytest.approx(2.0)
        assert unit.d == pytest.approx(np.sqrt(13.0 - 12.0 * np.cos(1.5)))
        assert unit.d == pytest.approx(3.48585, abs=1e-4)
        assert unit.km == pytest.approx(1.0 / 3.0)
        assert unit.kv == pytest.approx(1.0 / unit.d)
        print("✓ Derived quantities match hand calculation")

    def test_from_params_round_trip(self, unit):
        again = KreslingUnit.from_params(unit.params)
        assert again.params == unit.params

    def test_n_normalised_to_int(self):
        unit = KreslingUnit(n=6.0)
        assert isinstance(unit.n, int)
        assert unit.n == 6

    def test_repr_mentions_parameters(self, unit):
        text = repr(unit)
        assert "n=6" in text
        assert "beta=1.5" in text


class TestValidation:
    """Invalid geometry is rejected at construction."""

    @pytest.mark.parametrize("kwargs", [
        {'n': 2},
        {'n': 0},
        {'n': 4.5},
        {'n': True},
        {'a': 0.0},
        {'b': -1.0},
        {'c': float('nan')},
        {'EA': float('inf')},
        {'EA': 0.0},
        {'beta': 0.0},
        {'beta': np.pi},
        {'beta': -0.2},
        {'a': "1.0"},
    ])
    def test_invalid_parameters_raise(self, kwargs):
        with pytest.raises(InvalidParameterError):
            KreslingUnit(**kwargs)

    def test_invalid_parameter_error_is_value_error(self):
        with pytest.raises(ValueError):
            KreslingParams(n=1)

    def test_params_dataclass_is_frozen(self):
        params = KreslingParams()
        with pytest.raises(Exception):
            params.c = 4.0


class TestCreaseLengths:
    """Strained crease lengths c~ and d~."""

    def test_untwisted_mountain_length(self, unit):
        """
        At phi = 0 the mountain crease joins vertices at the same angle:
        c~^2 = h^2 + (R - r)^2.
        """
        c_t, _ = unit.compute_crease_length(2.0, 0.0)
        assert c_t == pytest.approx(np.sqrt(4.0 + 1.0))

    def test_valley_uses_next_cell(self, unit):
        h, phi = 1.3, 0.4
        c_t, d_t = unit.compute_crease_length(h, phi)
        expected_d = np.sqrt(h**2 + 1 + 4 - 4 * np.cos(phi + np.pi / 3))
        assert d_t == pytest.approx(expected_d)
        assert c_t == pytest.approx(np.sqrt(h**2 + 5 - 4 * np.cos(phi)))

    def test_lengths_are_floats_for_scalars(self, unit):
        c_t, d_t = unit.compute_crease_length(1.0, 0.5)
        assert isinstance(c_t, float)
        assert isinstance(d_t, float)

    def test_coincident_vertices_give_zero_length(self):
        """
        r = R and phi = 0 at h = 0 put top and bottom vertices on top of each
        other: c~ = 0 exactly, never NaN.
        """
        unit = KreslingUnit(n=6, a=1.0, b=1.0, c=1.0, beta=1.0)
        c_t, _ = unit.compute_crease_length(0.0, 0.0)
        assert c_t == pytest.approx(0.0, abs=1e-9)
        assert not np.isnan(c_t)


class TestEnergy:
    """Bar-spring strain energy."""

    def test_energy_nonnegative_on_grid(self, unit):
        hs = np.linspace(0.0, 4.0, 41)[:, None]
        phis = np.linspace(-np.pi, np.pi, 61)[None, :]
        energies = unit.compute_energy(hs, phis)
        assert energies.shape == (41, 61)
        assert np.all(energies >= 0.0)
        print("✓ E >= 0 on the whole (h, phi) grid")

    def test_energy_formula(self, unit):
        h, phi = 2.0, 0.7
        c_t, d_t = unit.compute_crease_length(h, phi)
        expected = 6 * unit.km * (c_t - unit.c) ** 2 / 2 + 6 * unit.kv * (d_t - unit.d) ** 2 / 2
        assert unit.compute_energy(h, phi) == pytest.approx(expected)

    def test_energy_scales_with_EA(self, unit):
        stiff = unit.replace(EA=3.0)
        assert stiff.compute_energy(1.5, 0.3) == pytest.approx(3.0 * unit.compute_energy(1.5, 0.3))

    def test_scalar_energy_is_float(self, unit):
        assert isinstance(unit.compute_energy(1.0, 0.2), float)


class TestVertexCoordinates:
    """3D vertex rings."""

    def test_shapes_and_mid_point(self, unit):
        coords = unit.get_vertex_coordinates(2.0, 0.3)
        assert coords.top_vertices.shape == (6, 3)
        assert coords.bottom_vertices.shape == (6, 3)
        np.testing.assert_allclose(coords.mid_point, [0.0, 0.0, 1.0])

    def test_rings_on_circles_at_correct_heights(self, unit):
        h, phi = 2.0, 0.3
        coords = unit.get_vertex_coordinates(h, phi)
        top, bottom = coords.top_vertices, coords.bottom_vertices

        np.testing.assert_allclose(np.hypot(top[:, 0], top[:, 1]), unit.r)
        np.testing.assert_allclose(np.hypot(bottom[:, 0], bottom[:, 1]), unit.R)
        np.testing.assert_allclose(top[:, 2], h / 2)
        np.testing.assert_allclose(bottom[:, 2], -h / 2)

    def test_top_ring_twisted_by_phi(self, unit):
        coords = unit.get_vertex_coordinates(1.0, 0.3)
        angle = np.arctan2(coords.top_vertices[0, 1], coords.top_vertices[0, 0])
        assert angle == pytest.approx(0.3)
        np.testing.assert_allclose(coords.bottom_vertices[0], [2.0, 0.0, -0.5])

    def test_vertex_distances_match_crease_lengths(self, unit):
        """Mountain B_0-T_0 and valley B_0-T_1 distances equal c~ and d~."""
        h, phi = 1.7, 0.5
        coords = unit.get_vertex_coordinates(h, phi)
        top, bottom = coords.top_vertices, coords.bottom_vertices
        c_t, d_t = unit.compute_crease_length(h, phi)
        assert np.linalg.norm(top[0] - bottom[0]) == pytest.approx(c_t)
        assert np.linalg.norm(top[1] - bottom[0]) == pytest.approx(d_t)
