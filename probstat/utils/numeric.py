"""
Numeric and statistical helpers shared by distributions and temporal statistics.

This module provides small, well-documented implementations of the scalar and
vector math used throughout probstat: integer gcd/lcm, log-domain addition and
normalization, mean/standard deviation, divergence and distance measures,
evenly spaced grids, and the sampling primitives that draw from an explicit
random source.

All vector functions accept any 1-D array-like and return new numpy arrays;
inputs are never modified in place. Precondition violations raise the errors
defined in probstat.utils.errors instead of silently producing NaN.
"""

import math

import numpy as np
from loguru import logger
from scipy.special import logsumexp

from probstat.utils.errors import (
    DegenerateInputError,
    require_min_length,
    require_same_length,
)
from probstat.utils.random_source import RandomSource

# Log-probabilities are never allowed to fall below this value after lognorm
LOG_PROB_FLOOR = -200.0

# Terms with p below this contribute nothing to the KL divergence
KL_NEGLIGIBLE_P = 1e-100

# Probabilities below this contribute nothing to the entropy
ENTROPY_NEGLIGIBLE_P = 1e-10


def gcd(m: int, n: int) -> int:
    """
    Greatest common divisor, with 0 as the degenerate result.

    **Functionally**:
    - Returns 0 if either input is 0 (explicit policy, not an error).
    - Signs are ignored: gcd(-4, 6) == 2.

    Args:
        m: First integer.
        n: Second integer.

    Returns:
        Non-negative greatest common divisor, or 0.
    """
    if m == 0 or n == 0:
        return 0
    return math.gcd(m, n)


def lcm(m: int, n: int) -> int:
    """
    Least common multiple, with 0 as the degenerate result.

    **Mathematical**: lcm(m, n) = |m| / gcd(m, n) * |n|
    Dividing before multiplying keeps intermediate values small.

    Args:
        m: First integer.
        n: Second integer.

    Returns:
        Non-negative least common multiple, or 0 if either input is 0.
    """
    if m == 0 or n == 0:
        return 0
    return (abs(m) // gcd(m, n)) * abs(n)


def log_add(a: float, b: float) -> float:
    """
    Add two probabilities given in the log domain.

    **Conceptual**: When probabilities are stored as logarithms to avoid
    underflow, adding them means computing log(exp(a) + exp(b)). Doing that
    literally overflows (or underflows to log(0)) for large-magnitude inputs.

    **Mathematical**: Factor out the larger term:
        log(exp(a) + exp(b)) = max(a, b) + log(1 + exp(-|a - b|))
    The exponent is always <= 0, so exp() stays in (0, 1].

    **Edge cases**:
    - Symmetric: log_add(a, b) == log_add(b, a).
    - log_add(-inf, -inf) == -inf (adding two zero probabilities).
    - If either operand is +inf the result is +inf.

    Args:
        a: First log-probability.
        b: Second log-probability.

    Returns:
        Log of the summed probabilities.
    """
    high = max(a, b)
    if math.isinf(high):
        return high
    return high + math.log1p(math.exp(-abs(a - b)))


def norm(values) -> np.ndarray:
    """
    Normalize a non-negative vector so it sums to 1.

    **Mathematical**: v_i / Σ v_j

    **Edge cases**:
    - Empty input raises EmptyInputError.
    - A zero sum raises DegenerateInputError (there is no mass to spread).

    Args:
        values: Vector of non-negative weights.

    Returns:
        New array whose elements sum to 1 with ratios preserved.
    """
    v = np.asarray(values, dtype=float)
    require_min_length(v, 1, context="norm")
    total = v.sum()
    if total == 0:
        raise DegenerateInputError("norm: cannot normalize a vector that sums to 0.")
    return v / total


def lognorm(log_values, floor: float = LOG_PROB_FLOOR) -> np.ndarray:
    """
    Normalize a vector of log-weights so the implied probabilities sum to 1.

    **Conceptual**: This is the log-domain counterpart of norm(). It turns
    arbitrary log-scores (log-likelihoods, unnormalized log-posteriors) into
    proper log-probabilities without ever leaving the log domain.

    **Mathematical**:
        lp_i = v_i - log Σ_j exp(v_j)
    computed stably by shifting by max(v) before exponentiating (which is what
    scipy's logsumexp does internally). Each result is then floored:
        lp_i = max(lp_i, floor)
    so probabilities implausibly close to 0 saturate at exp(floor) instead of
    propagating as -inf.

    **Edge cases**:
    - Empty input raises EmptyInputError.
    - All -inf input (zero total mass) raises DegenerateInputError.
    - With the floor active, exp(lp) may sum to slightly more than 1; the
      excess is at most n * exp(floor).

    Args:
        log_values: Vector of log-weights.
        floor: Smallest allowed log-probability (default -200).

    Returns:
        New array of normalized, floored log-probabilities.
    """
    v = np.asarray(log_values, dtype=float)
    require_min_length(v, 1, context="lognorm")
    total = logsumexp(v)
    if total == -np.inf:
        raise DegenerateInputError(
            "lognorm: every log-weight is -inf, there is no mass to normalize."
        )
    normalized = v - total
    return np.maximum(normalized, floor)


def average(values) -> float:
    """Arithmetic mean. Raises EmptyInputError for an empty vector."""
    v = np.asarray(values, dtype=float)
    require_min_length(v, 1, context="average")
    return float(v.mean())


def stdev(values) -> float:
    """
    Sample standard deviation with Bessel's correction.

    **Mathematical**:
        s = sqrt( Σ (x_i - mean)^2 / (N - 1) )

    **Edge cases**:
    - Fewer than 2 elements raises EmptyInputError (N - 1 would be 0).
    - Constant input yields 0.

    Args:
        values: Vector of observations.

    Returns:
        Sample standard deviation as a float.
    """
    v = np.asarray(values, dtype=float)
    require_min_length(v, 2, context="stdev")
    return float(np.std(v, ddof=1))


def kl_divergence(p, q, regularizer: float = 0.0, *, epsilon: float = KL_NEGLIGIBLE_P) -> float:
    """
    Kullback-Leibler divergence of p from q, in nats.

    **Conceptual**: Measures how much information is lost when q is used to
    approximate p. It is 0 when p == q and grows as q misplaces p's mass.

    **Mathematical**:
        KL(p || q) = Σ_i p_i * (log p_i - log(q_i + regularizer))
    Terms with p_i < epsilon (1e-100) are skipped: they contribute (essentially) zero
    and skipping them avoids evaluating log(0).

    **Edge cases**:
    - len(p) != len(q) raises SizeMismatchError.
    - q_i + regularizer == 0 where p_i is non-negligible yields +inf; pass a
      small regularizer to keep the result finite.

    Args:
        p: Reference probability vector.
        q: Approximating probability vector.
        regularizer: Constant added to every q_i before taking its log.
        epsilon: Cutoff below which p_i is treated as 0 (default 1e-100).

    Returns:
        The divergence as a float.
    """
    require_same_length(p, q, context="kl_divergence")
    p_arr = np.asarray(p, dtype=float)
    q_arr = np.asarray(q, dtype=float)
    mask = p_arr >= epsilon
    if not mask.any():
        return 0.0
    pm = p_arr[mask]
    with np.errstate(divide="ignore"):
        terms = pm * (np.log(pm) - np.log(q_arr[mask] + regularizer))
    return float(terms.sum())


def squared_distance(p, q, scale: float = 1.0) -> float:
    """
    Sum of squared element-wise differences, each scaled by `scale`.

    **Mathematical**: Σ ((p_i - q_i) / scale)^2

    Raises:
        SizeMismatchError: If len(p) != len(q).
    """
    require_same_length(p, q, context="squared_distance")
    diff = (np.asarray(p, dtype=float) - np.asarray(q, dtype=float)) / scale
    return float(np.sum(diff ** 2))


def sample_distribution(p, rng: RandomSource) -> int:
    """
    Draw an index from a categorical distribution.

    **Conceptual**: Inverse-CDF sampling done by walking the vector. A single
    uniform value u is compared against each probability in turn; the first
    bucket that "contains" u wins.

    **Functionally**:
    - Draw u in [0, 1).
    - For i = 0 .. n-2: return i if u < p_i, otherwise u -= p_i.
    - Fall back to the last index, so a valid index is returned even when
      floating-point rounding leaves a sliver of unconsumed mass.

    **Edge cases**:
    - Empty p raises EmptyInputError.
    - p must already be a probability vector (non-negative, summing to 1);
      this is only reported in a debug record when the mass looks wrong.

    Args:
        p: Probability vector.
        rng: Random source supplying the uniform draw.

    Returns:
        Index in range(len(p)).
    """
    require_min_length(p, 1, context="sample_distribution")
    total = float(np.sum(p))
    if not math.isclose(total, 1.0, abs_tol=1e-6):
        logger.debug("sample_distribution: probability mass is {} (expected 1)", total)
    u = rng.random()
    last = len(p) - 1
    for i in range(last):
        if u < p[i]:
            return i
        u -= p[i]
    return last


def rand_double(rng: RandomSource) -> float:
    """Uniform draw in [0, 1)."""
    return float(rng.random())


def rand_double_in_range(low: float, high: float, rng: RandomSource) -> float:
    """Uniform draw scaled to [low, high)."""
    return float(rng.random()) * (high - low) + low


def sample_gauss(mu: float, sd: float, rng: RandomSource) -> float:
    """
    Draw from a normal distribution N(mu, sd^2) via the Box-Muller transform.

    **Mathematical**: With x, y uniform on (0, 1]:
        z = sqrt(-2 ln x) * cos(2 pi y)
    is standard normal; the result is mu + sd * z.

    The first uniform is taken as 1 - u so it can never be 0 (ln 0 is undefined).

    Args:
        mu: Mean.
        sd: Standard deviation.
        rng: Random source; two draws are consumed per call.

    Returns:
        A single normally distributed value.
    """
    x = 1.0 - rng.random()
    y = rng.random()
    return math.sqrt(-2.0 * math.log(x)) * math.cos(2.0 * math.pi * y) * sd + mu


def intervals(vmin: float, vmax: float, n_points: int) -> np.ndarray:
    """
    Evenly spaced points from vmin to vmax inclusive.

    Raises:
        DegenerateInputError: If n_points < 2.
    """
    if n_points < 2:
        raise DegenerateInputError(f"intervals: need at least 2 points, got {n_points}.")
    return np.linspace(vmin, vmax, n_points)


def log_intervals(vmin: float, vmax: float, n_points: int) -> np.ndarray:
    """
    Log-spaced (geometric) points from vmin to vmax inclusive.

    **Mathematical**: x_i = vmin * exp(i * (ln vmax - ln vmin) / (n - 1))
    so consecutive points share a constant ratio.

    Raises:
        DegenerateInputError: If n_points < 2 or either bound is not positive.
    """
    if n_points < 2:
        raise DegenerateInputError(f"log_intervals: need at least 2 points, got {n_points}.")
    if vmin <= 0 or vmax <= 0:
        raise DegenerateInputError(
            f"log_intervals: bounds must be positive, got vmin={vmin}, vmax={vmax}."
        )
    return np.geomspace(vmin, vmax, n_points)
