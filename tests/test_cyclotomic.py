"""
Tests for cyclotomic.py
=======================

Exact point arithmetic: the star of unit vectors, rotation, inflation and
the cartesian projection.

Run: python -m pytest tests/test_cyclotomic.py -v
"""

import numpy as np
import pytest
from scipy.constants import golden

import cyclotomic


G5 = cyclotomic.Geometry(5)
G7 = cyclotomic.Geometry(7)


# =============================================================================
# Geometry
# =============================================================================

@pytest.mark.parametrize("n", [3, 4, 6, 8])
def test_geometry_rejects_bad_orders(n):
	with pytest.raises(ValueError):
		cyclotomic.Geometry(n)


def test_geometry_equality():
	assert cyclotomic.Geometry(7) == G7
	assert hash(cyclotomic.Geometry(7)) == hash(G7)
	assert G5 != G7


def test_star_shape():
	for g in (G5, G7):
		assert len(g.star) == 2 * g.n
		assert g.star_matrix.shape == (2 * g.n, g.n - 1)
		for i in range(g.n - 1):
			assert g.unit(i).coefficients.tolist() == [int(j == i) for j in range(g.n - 1)]


def test_star_is_antisymmetric():
	"""unit(i + n) = -unit(i)"""
	for g in (G5, G7):
		for i in range(2 * g.n):
			assert g.unit(i + g.n) == -g.unit(i)


def test_star_sums_to_zero():
	"""The n-th roots of unity sum to zero"""
	for g in (G5, G7):
		total = g.zero
		for i in range(0, 2 * g.n, 2):
			total = total + g.unit(i)
		assert total.is_zero()


def test_unit_vectors_have_unit_length():
	for g in (G5, G7):
		for i in range(2 * g.n):
			x, y = g.unit(i).to_cartesian()
			assert abs(x - np.cos(i * np.pi / g.n)) < 1e-12
			assert abs(y - np.sin(i * np.pi / g.n)) < 1e-12


def test_unit_wraps_index():
	assert G7.unit(-1) == G7.unit(13)
	assert G7.unit(14) == G7.unit(0)


def test_wrap_angle():
	assert G5.wrap_angle(0) == 10
	assert G5.wrap_angle(10) == 10
	assert G5.wrap_angle(-1) == 9
	assert G5.wrap_angle(13) == 3


# =============================================================================
# Point algebra
# =============================================================================

def test_point_rejects_wrong_length():
	with pytest.raises(ValueError):
		G7.point([1, 2, 3])


def test_point_is_immutable():
	p = G5.point([1, 2, 3, 4])
	with pytest.raises(ValueError):
		p.coefficients[0] = 5


def test_add_and_subtract():
	p = G5.point([1, 2, 3, 4])
	q = G5.point([0, -1, 5, 2])
	assert (p + q).coefficients.tolist() == [1, 1, 8, 6]
	assert (p - q).coefficients.tolist() == [1, 3, -2, 2]
	assert p.plus(q) == p + q
	assert p.minus(q) == p - q
	assert (p - p).is_zero()
	assert -(-p) == p


def test_mixing_geometries_fails():
	with pytest.raises(ValueError):
		G5.unit(0) + G7.unit(0)


def test_points_hash_by_value():
	assert len({G5.point([1, 0, 0, 0]), G5.unit(0), G5.point([0, 1, 0, 0])}) == 2


def test_rotate_unit_vectors():
	for g in (G5, G7):
		for angle in range(-g.n, 3 * g.n):
			assert g.unit(0).rotate(angle) == g.unit(angle)
			assert g.unit(3).rotate(angle) == g.unit(angle + 3)


def test_rotate_composes():
	p = G7.point([3, -1, 4, 1, -5, 9])
	assert p.rotate(3).rotate(5) == p.rotate(8)
	assert p.rotate(7) == -p
	assert p.rotate(14) == p


def test_rotate_matches_cartesian():
	p = G7.point([3, -1, 4, 1, -5, 9])
	x, y = p.to_cartesian()
	c, s = np.cos(2 * np.pi / 7), np.sin(2 * np.pi / 7)
	assert np.allclose(p.rotate(2).to_cartesian(), [c*x - s*y, s*x + c*y])


# =============================================================================
# Inflation
# =============================================================================

def test_trivial_inflation_is_identity():
	for g in (G5, G7):
		p = g.point(range(1, g.n))
		assert p.multiply(g.inflation([0])) == p


def test_inflation_by_golden_ratio():
	"""For n = 5 the walk [1, -1] has length 2cos(pi/5), the golden ratio"""
	inflation = G5.inflation([1, -1])
	x, y = G5.unit(0).multiply(inflation).to_cartesian()
	assert abs(x - golden) < 1e-12
	assert abs(y) < 1e-12


def test_inflation_commutes_with_rotation():
	inflation = G7.inflation([1, -1, 0, 1, -1, 2, -2, 0])
	p = G7.point([1, 0, -2, 0, 0, 1])
	assert p.rotate(3).multiply(inflation) == p.multiply(inflation).rotate(3)


def test_inflation_scales_length():
	edge = [1, -1, 0]
	inflation = G7.inflation(edge)
	factor = 1 + 2 * np.cos(np.pi / 7)
	for i in range(14):
		assert np.allclose(
			G7.unit(i).multiply(inflation).to_cartesian(),
			factor * G7.unit(i).to_cartesian()
		)


def test_multiply_by_array():
	matrix = 2 * np.identity(4, dtype=int)
	assert G5.unit(1).multiply(matrix) == G5.unit(1) + G5.unit(1)


def test_multiply_rejects_wrong_size():
	with pytest.raises(ValueError):
		G5.unit(1).multiply(G7.inflation([0]))
	with pytest.raises(ValueError):
		G5.unit(1).multiply(np.ones((4, 3), dtype=int))
