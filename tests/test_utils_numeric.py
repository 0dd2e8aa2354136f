"""
Tests for probstat/utils/numeric.py

These tests verify the numeric helpers using small, hand-crafted inputs where
expected values are easy to reason about, plus a few seeded statistical checks
for the sampling primitives.
"""

import math

import numpy as np
import pytest

from probstat.utils.errors import DegenerateInputError, EmptyInputError, SizeMismatchError
from probstat.utils.numeric import (
    average,
    gcd,
    intervals,
    kl_divergence,
    lcm,
    log_add,
    log_intervals,
    lognorm,
    norm,
    rand_double,
    rand_double_in_range,
    sample_distribution,
    sample_gauss,
    squared_distance,
    stdev,
)
from probstat.utils.random_source import SequenceRandomSource


def test_gcd_and_lcm_known_values():
    """Test gcd/lcm on small integers."""
    assert gcd(12, 18) == 6
    assert gcd(7, 13) == 1
    assert lcm(4, 6) == 12
    assert lcm(3, 5) == 15


def test_gcd_and_lcm_zero_policy():
    """Either input 0 gives 0 rather than an error."""
    assert gcd(0, 5) == 0
    assert gcd(5, 0) == 0
    assert lcm(0, 3) == 0
    assert lcm(3, 0) == 0


def test_log_add_matches_direct_computation():
    """exp(log_add(log 2, log 3)) should be 5."""
    assert np.isclose(math.exp(log_add(math.log(2), math.log(3))), 5.0)


def test_log_add_is_commutative():
    assert log_add(-1.5, -0.2) == log_add(-0.2, -1.5)
    assert log_add(3.0, -40.0) == log_add(-40.0, 3.0)


def test_log_add_large_operands_do_not_overflow():
    """Direct exp(1000) overflows; log_add must not."""
    assert np.isclose(log_add(1000.0, 1000.0), 1000.0 + math.log(2))


def test_log_add_both_negative_infinity():
    assert log_add(-math.inf, -math.inf) == -math.inf
    assert log_add(-math.inf, 0.5) == 0.5


def test_log_add_positive_infinity():
    assert log_add(math.inf, math.inf) == math.inf
    assert log_add(math.inf, 2.0) == math.inf
    assert log_add(-math.inf, math.inf) == math.inf


def test_norm_preserves_ratios():
    """norm([1, 1, 2]) should give [0.25, 0.25, 0.5]."""
    result = norm([1.0, 1.0, 2.0])
    assert np.allclose(result, [0.25, 0.25, 0.5])
    assert np.isclose(result.sum(), 1.0)


def test_norm_does_not_modify_input():
    values = np.array([2.0, 6.0])
    norm(values)
    assert values.tolist() == [2.0, 6.0]


def test_norm_rejects_empty_and_zero_sum():
    with pytest.raises(EmptyInputError):
        norm([])
    with pytest.raises(DegenerateInputError):
        norm([0.0, 0.0])


def test_lognorm_sums_to_one():
    """Exponentiated lognorm output sums to 1."""
    result = lognorm([0.0, math.log(3.0)])
    assert np.allclose(result, [math.log(0.25), math.log(0.75)])
    assert np.isclose(np.exp(result).sum(), 1.0)


def test_lognorm_handles_large_scores():
    """Shifting by the max keeps huge log-scores finite."""
    result = lognorm([1000.0, 1000.0])
    assert np.allclose(result, [math.log(0.5), math.log(0.5)])


def test_lognorm_floors_at_minus_200():
    """Implausibly small probabilities saturate at the floor instead of -inf."""
    result = lognorm([0.0, -1000.0, -np.inf])
    assert result.min() >= -200.0
    assert result[1] == -200.0
    assert result[2] == -200.0
    assert np.isclose(result[0], 0.0)


def test_lognorm_custom_floor():
    result = lognorm([0.0, -50.0], floor=-10.0)
    assert result[1] == -10.0


def test_lognorm_rejects_zero_mass():
    """All -inf log-weights carry no mass, like a zero vector for norm()."""
    with pytest.raises(DegenerateInputError):
        lognorm([-np.inf, -np.inf])


def test_average_and_stdev_reference_values():
    """Sample stdev of [2,4,4,4,5,5,7,9] is about 2.138 (N-1 divisor)."""
    data = [2, 4, 4, 4, 5, 5, 7, 9]
    assert np.isclose(average(data), 5.0)
    assert np.isclose(stdev(data), math.sqrt(32.0 / 7.0))
    assert abs(stdev(data) - 2.138) < 1e-3


def test_average_and_stdev_require_enough_elements():
    with pytest.raises(EmptyInputError):
        average([])
    with pytest.raises(EmptyInputError):
        stdev([1.0])


def test_kl_divergence_of_identical_distributions_is_zero():
    p = [0.1, 0.2, 0.7]
    assert np.isclose(kl_divergence(p, p), 0.0)


def test_kl_divergence_known_value():
    """KL([1, 0] || [0.5, 0.5]) = log 2; the p=0 term is skipped."""
    assert np.isclose(kl_divergence([1.0, 0.0], [0.5, 0.5]), math.log(2))


def test_kl_divergence_regularizer_keeps_result_finite():
    p = [0.5, 0.5]
    q = [1.0, 0.0]
    assert kl_divergence(p, q) == math.inf
    assert np.isfinite(kl_divergence(p, q, regularizer=1e-6))


def test_kl_divergence_size_mismatch():
    with pytest.raises(SizeMismatchError):
        kl_divergence([0.5, 0.5], [1.0])


def test_squared_distance_with_scale():
    """((1-3)/2)^2 + ((2-5)/2)^2 = 1 + 2.25."""
    assert np.isclose(squared_distance([1.0, 2.0], [3.0, 5.0], scale=2.0), 3.25)
    assert np.isclose(squared_distance([1.0, 2.0], [1.0, 2.0]), 0.0)


def test_squared_distance_size_mismatch():
    with pytest.raises(SizeMismatchError):
        squared_distance([1.0], [1.0, 2.0])


def test_sample_distribution_walks_residual_mass():
    """u=0.45 against [0.2, 0.3, 0.5]: 0.45 -> 0.25 < 0.3 picks index 1."""
    p = [0.2, 0.3, 0.5]
    assert sample_distribution(p, SequenceRandomSource([0.1])) == 0
    assert sample_distribution(p, SequenceRandomSource([0.45])) == 1
    assert sample_distribution(p, SequenceRandomSource([0.99])) == 2


def test_sample_distribution_falls_back_to_last_index():
    """Mass that does not quite reach 1 still yields a valid index."""
    p = [0.5, 0.4]
    assert sample_distribution(p, SequenceRandomSource([0.95])) == 1


def test_sample_distribution_empirical_frequency(rng):
    """Over many draws from [0.3, 0.7], index 0 appears about 30% of the time."""
    p = [0.3, 0.7]
    draws = [sample_distribution(p, rng) for _ in range(20000)]
    assert set(draws) <= {0, 1}
    assert abs(draws.count(0) / len(draws) - 0.3) < 0.02


def test_sample_distribution_rejects_empty():
    with pytest.raises(EmptyInputError):
        sample_distribution([], SequenceRandomSource([0.5]))


def test_rand_double_in_range_scales_draw():
    assert rand_double(SequenceRandomSource([0.25])) == 0.25
    assert rand_double_in_range(2.0, 4.0, SequenceRandomSource([0.5])) == 3.0


def test_sample_gauss_box_muller_known_draws():
    """x = exp(-0.5) and y = 0 give z = sqrt(1) * cos(0) = 1."""
    rng = SequenceRandomSource([1.0 - math.exp(-0.5), 0.0])
    assert np.isclose(sample_gauss(10.0, 2.0, rng), 12.0)


def test_sample_gauss_moments(rng):
    draws = np.array([sample_gauss(3.0, 2.0, rng) for _ in range(20000)])
    assert abs(draws.mean() - 3.0) < 0.1
    assert abs(draws.std(ddof=1) - 2.0) < 0.1


def test_intervals_linear_and_log():
    assert np.allclose(intervals(0.0, 1.0, 5), [0.0, 0.25, 0.5, 0.75, 1.0])
    assert np.allclose(log_intervals(1.0, 100.0, 3), [1.0, 10.0, 100.0])


def test_intervals_require_two_points():
    with pytest.raises(DegenerateInputError):
        intervals(0.0, 1.0, 1)
    with pytest.raises(DegenerateInputError):
        log_intervals(1.0, 10.0, 1)
    with pytest.raises(DegenerateInputError):
        log_intervals(0.0, 10.0, 3)
