import math

import numpy as np
import pytest

from griddist.config import DEFAULT_CONFIG, DistributionConfig
from griddist.distribution import Distribution, GridDistributions
from griddist.util import trapezoid_integral

LOWEST, HIGHEST = DEFAULT_CONFIG.lowest, DEFAULT_CONFIG.highest


def total_mass(dist: Distribution) -> float:
    return trapezoid_integral(dist.z_samples(), dist.pdf())


def snapshot(dist: Distribution):
    return dist.lower_bound, dist.upper_bound, dist.z_samples(), dist.pdf()


def assert_unchanged(dist: Distribution, before) -> None:
    lb, ub, z, pdf = before
    assert (dist.lower_bound, dist.upper_bound) == (lb, ub)
    np.testing.assert_array_equal(dist.z_samples(), z)
    np.testing.assert_array_equal(dist.pdf(), pdf)


def test_negate_twice_restores():
    dist = GridDistributions.linear(1, 3)
    original = dist.pdf()
    dist.negate()
    assert (dist.lower_bound, dist.upper_bound) == (-3.0, -1.0)
    assert dist.pdf(-3.0) == pytest.approx(1.0)
    assert dist.pdf(-1.0) == pytest.approx(0.0, abs=1e-12)
    dist.negate()
    assert (dist.lower_bound, dist.upper_bound) == (1.0, 3.0)
    np.testing.assert_allclose(dist.pdf(), original)


def test_shift_keeps_shape():
    dist = GridDistributions.linear(0, 2)
    shape = dist.pdf()
    dist.add(2.5)
    assert (dist.lower_bound, dist.upper_bound) == pytest.approx((2.5, 4.5))
    np.testing.assert_allclose(dist.pdf(), shape)
    assert dist.pdf(4.5) == pytest.approx(1.0)
    dist.subtract(2.5)
    assert (dist.lower_bound, dist.upper_bound) == pytest.approx((0.0, 2.0))
    np.testing.assert_allclose(dist.pdf(), shape)


def test_shift_rebinds_cached_interpolators():
    dist = GridDistributions.uniform(0, 1)
    assert dist.pdf(0.5) == pytest.approx(1.0)
    assert dist.median() == pytest.approx(0.5)
    dist.add(1.0)
    assert dist.pdf(0.5) == 0.0
    assert dist.pdf(1.5) == pytest.approx(1.0)
    assert dist.median() == pytest.approx(1.5)
    assert dist.cdf(1.25) == pytest.approx(0.25)


def test_sum_of_uniforms_is_triangular():
    first = GridDistributions.uniform(0, 1)
    second = GridDistributions.uniform(0, 1)
    before = snapshot(second)
    first.add(second)

    assert (first.lower_bound, first.upper_bound) == (0.0, 2.0)
    assert first.pdf(1.0) == pytest.approx(1.0, abs=1e-2)
    assert first.pdf(0.5) == pytest.approx(0.5, abs=1e-2)
    assert first.pdf(1.5) == pytest.approx(0.5, abs=1e-2)
    assert first.mean() == pytest.approx(1.0, abs=1e-6)
    assert first.variance() == pytest.approx(1 / 6, abs=1e-3)
    assert total_mass(first) == pytest.approx(1.0)
    assert_unchanged(second, before)


def test_sum_with_narrow_operand():
    wide = GridDistributions.uniform(0, 10)
    wide.add(GridDistributions.constant(5.0))
    assert wide.lower_bound == pytest.approx(5.0)
    assert wide.upper_bound == pytest.approx(15.0)
    assert wide.mean() == pytest.approx(10.0, rel=1e-3)


def test_difference_of_uniforms():
    first = GridDistributions.uniform(0, 1)
    second = GridDistributions.uniform(0, 1)
    before = snapshot(second)
    first.subtract(second)

    assert (first.lower_bound, first.upper_bound) == (-1.0, 1.0)
    assert first.mean() == pytest.approx(0.0, abs=1e-6)
    assert first.pdf(0.0) == pytest.approx(1.0, abs=1e-2)
    assert_unchanged(second, before)


@pytest.mark.parametrize('factor,bounds', [
    (2.0, (2.0, 4.0)),
    (0.5, (0.5, 1.0)),
    (-2.0, (-4.0, -2.0)),
])
def test_scaling(factor, bounds):
    dist = GridDistributions.uniform(1, 2)
    dist.multiply(factor)
    assert (dist.lower_bound, dist.upper_bound) == pytest.approx(bounds)
    np.testing.assert_allclose(dist.pdf(), 1 / (bounds[1] - bounds[0]))
    assert total_mass(dist) == pytest.approx(1.0)


def test_scaling_before_the_grid_exists_keeps_sample_count():
    dist = Distribution()
    dist.multiply(10)
    assert dist.sample_count == DEFAULT_CONFIG.min_n_samples
    assert dist.resolution == pytest.approx(1.0)


def test_multiply_by_zero_collapses():
    dist = GridDistributions.uniform(3, 7)
    dist.multiply(0)
    assert dist.lower_bound == 0.0
    assert dist.upper_bound == DEFAULT_CONFIG.min_interval
    assert total_mass(dist) == pytest.approx(1.0)
    assert dist.cdf(dist.upper_bound) == 1.0
    assert 0.0 <= dist.sample() <= DEFAULT_CONFIG.min_interval


def test_product_of_uniforms():
    first = GridDistributions.uniform(1, 2)
    second = GridDistributions.uniform(1, 2)
    before = snapshot(second)
    first.multiply(second)

    assert (first.lower_bound, first.upper_bound) == (1.0, 4.0)
    assert first.sample_count == DEFAULT_CONFIG.mult_n_samples
    assert total_mass(first) == pytest.approx(1.0)
    assert first.mean() == pytest.approx(2.25, rel=2e-2)
    assert_unchanged(second, before)


def test_product_across_zero():
    first = GridDistributions.uniform(-1, 1)
    first.multiply(GridDistributions.uniform(2, 3))
    assert (first.lower_bound, first.upper_bound) == (-3.0, 3.0)
    assert total_mass(first) == pytest.approx(1.0)
    assert first.mean() == pytest.approx(0.0, abs=1e-3)
    assert first.pdf(-2.0) == pytest.approx(first.pdf(2.0), rel=1e-2)


@pytest.mark.parametrize('first,second,bounds', [
    ((1, 2), (-3, -2), (-6, -2)),
    ((-1, 2), (-1, 3), (-3, 6)),
    ((0, 1), (0, 1), (0, 1)),
])
def test_product_bounds(first, second, bounds):
    dist = GridDistributions.uniform(*first)
    dist.multiply(GridDistributions.uniform(*second))
    assert (dist.lower_bound, dist.upper_bound) == pytest.approx(bounds)
    assert total_mass(dist) == pytest.approx(1.0)


def test_divide_by_scalar():
    dist = GridDistributions.uniform(2, 4)
    dist.divide(2)
    assert (dist.lower_bound, dist.upper_bound) == pytest.approx((1.0, 2.0))


def test_divide_by_zero_scalar_is_ignored():
    dist = GridDistributions.uniform(2, 4)
    before = snapshot(dist)
    dist.divide(0)
    assert_unchanged(dist, before)


def test_quotient_of_uniforms():
    first = GridDistributions.uniform(1, 2)
    second = GridDistributions.uniform(1, 2)
    before = snapshot(second)
    first.divide(second)

    assert (first.lower_bound, first.upper_bound) == (0.5, 2.0)
    assert total_mass(first) == pytest.approx(1.0)
    assert first.mean() == pytest.approx(1.5 * math.log(2), rel=2e-2)
    assert_unchanged(second, before)


@pytest.mark.parametrize('numerator,divisor,bounds', [
    ((-1, 1), (-1, 1), (LOWEST, HIGHEST)),
    ((1, 2), (-1, 1), (LOWEST, HIGHEST)),
    ((-1, 1), (0, 1), (LOWEST, HIGHEST)),
    ((1, 2), (0, 1), (0.0, HIGHEST)),
    ((-2, -1), (0, 1), (LOWEST, 0.0)),
    ((1, 2), (-1, 0), (LOWEST, 0.0)),
    ((-2, -1), (-1, 0), (0.0, HIGHEST)),
    ((0, 1), (0, 1), (0.0, HIGHEST)),
    ((-1, 0), (0, 1), (LOWEST, 0.0)),
])
def test_division_by_support_touching_zero(numerator, divisor, bounds):
    dist = GridDistributions.uniform(*numerator)
    dist.divide(GridDistributions.uniform(*divisor))
    assert (dist.lower_bound, dist.upper_bound) == bounds
    assert total_mass(dist) == pytest.approx(1.0)
    np.testing.assert_allclose(dist.pdf(), 1.0 / (bounds[1] - bounds[0]))


def test_reciprocal():
    dist = GridDistributions.uniform(1, 2)
    dist.reciprocal()
    assert (dist.lower_bound, dist.upper_bound) == (0.5, 1.0)
    assert total_mass(dist) == pytest.approx(1.0)
    assert dist.mean() == pytest.approx(math.log(2), rel=1e-2)
    # density of 1/X for X ~ U(1, 2) is 1/z^2
    assert dist.pdf(0.75) == pytest.approx(1 / 0.75 ** 2, rel=1e-2)


def test_reciprocal_of_negative_support():
    dist = GridDistributions.uniform(-2, -1)
    dist.reciprocal()
    assert (dist.lower_bound, dist.upper_bound) == (-1.0, -0.5)


@pytest.mark.parametrize('support,bounds', [
    ((-1, 1), (LOWEST, HIGHEST)),
    ((0, 1), (0.0, HIGHEST)),
    ((-1, 0), (LOWEST, 0.0)),
])
def test_reciprocal_across_zero(support, bounds):
    dist = GridDistributions.uniform(*support)
    dist.reciprocal()
    assert (dist.lower_bound, dist.upper_bound) == bounds
    assert total_mass(dist) == pytest.approx(1.0)


def test_custom_product_grid_size():
    config = DistributionConfig(mult_n_samples=51)
    dist = GridDistributions.uniform(1, 2, config=config)
    dist.multiply(GridDistributions.uniform(1, 2))
    assert dist.sample_count == 51
    assert dist.copy().config is config


class TestOperators:
    def test_operators_leave_operands_alone(self):
        a = GridDistributions.uniform(0, 1)
        b = GridDistributions.uniform(0, 1)
        before = snapshot(a)
        total = a + b
        assert (total.lower_bound, total.upper_bound) == (0.0, 2.0)
        assert_unchanged(a, before)

    @pytest.mark.parametrize('expression,bounds', [
        (lambda d: d + 1, (1.0, 2.0)),
        (lambda d: 1 + d, (1.0, 2.0)),
        (lambda d: d - 1, (-1.0, 0.0)),
        (lambda d: 1 - d, (0.0, 1.0)),
        (lambda d: 2 * d, (0.0, 2.0)),
        (lambda d: d * 2, (0.0, 2.0)),
        (lambda d: d / 2, (0.0, 0.5)),
        (lambda d: -d, (-1.0, 0.0)),
        (lambda d: sum([d, d]), (0.0, 2.0)),
    ])
    def test_bounds(self, expression, bounds):
        result = expression(GridDistributions.uniform(0, 1))
        assert (result.lower_bound, result.upper_bound) == pytest.approx(bounds)

    def test_reflected_division(self):
        result = 2 / GridDistributions.uniform(1, 2)
        assert (result.lower_bound, result.upper_bound) == pytest.approx((1.0, 2.0))

    def test_unsupported_operand(self):
        with pytest.raises(TypeError):
            _ = GridDistributions.uniform(0, 1) + "x"
