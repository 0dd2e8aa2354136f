"""
Labeled discrete probability distributions with log-domain arithmetic.

**Conceptual**: A ProbDistribution is a finite, ordered list of outcomes, each
with a label (of any type), a probability P[i], and a log-probability LP[i].
Modeling code builds one of these from scores (linear weights or log-scores),
normalizes it, and then samples from it, sorts it, or asks for its mode and
entropy.

**Why two representations?**
  - Linear probabilities are what sampling and entropy need.
  - Log-probabilities are what accumulation of many small likelihoods needs
    (products become sums, and nothing underflows to 0).

The classic hazard with this pair is letting the two arrays drift apart by
editing one without recomputing the other. Here both arrays are exposed
read-only, and every mutation goes through a method that rewrites both, so
LP[i] == log(P[i]) holds after every public call.

**Randomness**: sample() and randomize() draw from an explicitly passed
random source (see probstat.utils.random_source). There is no hidden global
generator.
"""

from collections.abc import Iterable, Sequence
from typing import Generic, Optional, TypeVar

import numpy as np
import pandas as pd
from loguru import logger

from probstat.config.settings import NumericSettings
from probstat.utils.errors import SizeMismatchError, require_min_length
from probstat.utils.numeric import kl_divergence, lognorm, norm, rand_double, sample_distribution
from probstat.utils.random_source import RandomSource

T = TypeVar("T")


def _read_only(values: np.ndarray) -> np.ndarray:
    view = values.view()
    view.flags.writeable = False
    return view


def _safe_log(values: np.ndarray) -> np.ndarray:
    # log(0) is -inf by convention for probabilities
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.log(values)


class ProbDistribution(Generic[T]):
    """
    A discrete distribution over labeled outcomes.

    **Usage**:
        dist = ProbDistribution.from_weights(["a", "b", "c"], [1.0, 1.0, 2.0])
        dist.normalize()             # P = [0.25, 0.25, 0.5]
        dist.sample(rng)             # "c" about half of the time
        dist.sort()                  # labels now ["c", "a", "b"]

    Attributes (read-only):
        labels: Outcome labels, in outcome order.
        probabilities: Linear probabilities P.
        log_probabilities: Log-probabilities LP.
    """

    def __init__(self, settings: Optional[NumericSettings] = None):
        """
        Create an empty distribution.

        Args:
            settings: Numeric thresholds (log floor, entropy cutoff). Defaults
                      to NumericSettings() with the standard constants.
        """
        self._settings = settings if settings is not None else NumericSettings()
        self._p = np.zeros(0)
        self._lp = np.zeros(0)
        self._labels: list[Optional[T]] = []

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_weights(
        cls,
        labels: Iterable[T],
        weights: Iterable[float],
        settings: Optional[NumericSettings] = None,
    ) -> "ProbDistribution[T]":
        """
        Build a distribution from labels and linear weights (not normalized).

        Raises:
            SizeMismatchError: If labels and weights differ in length.
        """
        dist = cls(settings)
        labels = list(labels)
        dist.resize(len(labels))
        dist.set_labels(labels)
        dist.set_probabilities(weights)
        return dist

    @classmethod
    def from_log_weights(
        cls,
        labels: Iterable[T],
        log_weights: Iterable[float],
        settings: Optional[NumericSettings] = None,
    ) -> "ProbDistribution[T]":
        """Build a distribution from labels and log-weights (not normalized)."""
        dist = cls(settings)
        labels = list(labels)
        dist.resize(len(labels))
        dist.set_labels(labels)
        dist.set_log_probabilities(log_weights)
        return dist

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def labels(self) -> list[Optional[T]]:
        return list(self._labels)

    @property
    def probabilities(self) -> np.ndarray:
        return _read_only(self._p)

    @property
    def log_probabilities(self) -> np.ndarray:
        return _read_only(self._lp)

    @property
    def settings(self) -> NumericSettings:
        return self._settings

    def __len__(self) -> int:
        return len(self._labels)

    def __repr__(self) -> str:
        return f"ProbDistribution(n={len(self)}, labels={self._labels!r}, P={self._p.tolist()!r})"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def copy(self) -> "ProbDistribution[T]":
        """Return an independent copy (arrays and label list are duplicated)."""
        dup: ProbDistribution[T] = ProbDistribution(self._settings)
        dup._p = self._p.copy()
        dup._lp = self._lp.copy()
        dup._labels = list(self._labels)
        return dup

    def clear(self) -> None:
        """Remove every outcome."""
        self.resize(0)

    def resize(self, size: int) -> None:
        """
        Reset to `size` outcomes, discarding prior content.

        P is all zeros, LP is all -inf (log of 0), labels are None.
        """
        if size < 0:
            raise ValueError(f"resize: size must be non-negative, got {size}")
        self._p = np.zeros(size)
        self._lp = np.full(size, -np.inf)
        self._labels = [None] * size

    def assign(self, size: int, value: float) -> None:
        """
        Reset to `size` outcomes with every P[i] == value, discarding prior content.

        LP is set to log(value) so the pair stays consistent; labels are None.
        """
        self.resize(size)
        self._p = np.full(size, float(value))
        self.p_to_lp()

    # ------------------------------------------------------------------
    # Mutation (always updates P and LP together)
    # ------------------------------------------------------------------

    def set_labels(self, labels: Sequence[T]) -> None:
        """
        Replace all labels.

        Raises:
            SizeMismatchError: If len(labels) differs from the outcome count.
        """
        labels = list(labels)
        if len(labels) != len(self):
            raise SizeMismatchError(
                f"set_labels: expected {len(self)} labels, got {len(labels)}."
            )
        self._labels = labels

    def set_probabilities(self, values: Iterable[float]) -> None:
        """
        Replace P (and recompute LP from it).

        Raises:
            SizeMismatchError: If the length differs from the outcome count.
        """
        p = np.asarray(list(values), dtype=float)
        if len(p) != len(self):
            raise SizeMismatchError(
                f"set_probabilities: expected {len(self)} values, got {len(p)}."
            )
        self._p = p
        self.p_to_lp()

    def set_log_probabilities(self, values: Iterable[float]) -> None:
        """
        Replace LP (and recompute P from it).

        Raises:
            SizeMismatchError: If the length differs from the outcome count.
        """
        lp = np.asarray(list(values), dtype=float)
        if len(lp) != len(self):
            raise SizeMismatchError(
                f"set_log_probabilities: expected {len(self)} values, got {len(lp)}."
            )
        self._lp = lp
        self.lp_to_p()

    def set_outcome(self, index: int, label: T, probability: float) -> None:
        """Set the label and probability of a single outcome (LP[index] follows)."""
        self._labels[index] = label
        self._p[index] = probability
        self._lp[index] = _safe_log(np.asarray(probability, dtype=float))

    def p_to_lp(self) -> None:
        """Recompute LP[i] = log(P[i]) for every outcome."""
        self._lp = _safe_log(self._p)
        self._check_sizes()

    def lp_to_p(self) -> None:
        """Recompute P[i] = exp(LP[i]) for every outcome."""
        self._p = np.exp(self._lp)
        self._check_sizes()

    def normalize(self) -> None:
        """
        Linear-normalize P in place so it sums to 1, then rebuild LP.

        Raises:
            EmptyInputError: If the distribution has no outcomes.
            DegenerateInputError: If P sums to 0.
        """
        self._p = norm(self._p)
        self.p_to_lp()

    def log_normalize(self) -> None:
        """
        Normalize in the log domain, then rebuild P.

        **Conceptual**: Use this when the scores were accumulated as
        log-likelihoods. LP is shifted so that exp(LP) sums to 1, each value is
        floored at settings.log_floor (default -200), and P = exp(LP).

        Raises:
            EmptyInputError: If the distribution has no outcomes.
            DegenerateInputError: If every LP is -inf (for example right after resize()).
        """
        self._lp = lognorm(self._lp, floor=self._settings.log_floor)
        self.lp_to_p()

    def randomize(self, rng: RandomSource) -> None:
        """Assign every P[i] a uniform random value, then normalize."""
        self._p = np.array([rand_double(rng) for _ in range(len(self))], dtype=float)
        self.normalize()

    def sort(self) -> None:
        """
        Reorder outcomes by descending probability.

        **Functionally**:
        - Stable: outcomes with equal P keep their original relative order.
        - Labels move together with their probabilities.
        - LP is rebuilt from the reordered P.
        """
        order = np.argsort(-self._p, kind="stable")
        self._p = self._p[order]
        self._labels = [self._labels[i] for i in order]
        self.p_to_lp()
        logger.debug("Sorted distribution of {} outcome(s)", len(self))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def sample(self, rng: RandomSource) -> Optional[T]:
        """
        Draw one outcome label according to P.

        P must already be a valid probability vector (call normalize() or
        log_normalize() first); this is not enforced.

        Raises:
            EmptyInputError: If the distribution has no outcomes.
        """
        return self._labels[sample_distribution(self._p, rng)]

    def max_p(self) -> float:
        """Largest probability. Raises EmptyInputError when empty."""
        require_min_length(self._p, 1, context="max_p")
        return float(np.max(self._p))

    def mode_id(self) -> int:
        """
        Index of the most probable outcome.

        Ties resolve to the first (lowest) index.

        Raises:
            EmptyInputError: If the distribution has no outcomes.
        """
        require_min_length(self._p, 1, context="mode_id")
        return int(np.argmax(self._p))

    def entropy(self) -> float:
        """
        Shannon entropy in nats.

        **Mathematical**: H = -Σ P_i ln P_i, skipping P_i below
        settings.entropy_epsilon (default 1e-10), which contribute ~0.

        Returns:
            Entropy; log(n) for a uniform distribution over n outcomes.
        """
        p = self._p[self._p >= self._settings.entropy_epsilon]
        return float(-np.sum(p * np.log(p)))

    def kl_divergence(self, other: "ProbDistribution", regularizer: float = 0.0) -> float:
        """
        KL(self || other) over outcome positions, using settings.kl_epsilon.

        Outcomes are matched by index, not by label.

        Raises:
            SizeMismatchError: If the distributions have different sizes.
        """
        return kl_divergence(
            self._p, other._p, regularizer, epsilon=self._settings.kl_epsilon
        )

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def format_lines(self) -> list[str]:
        """
        Render one tab-separated line per outcome: index, label, P[i], LP[i].

        Floats use %g formatting (six significant digits).
        """
        return [
            f"{i}\t{label}\t{p:g}\t{lp:g}"
            for i, (label, p, lp) in enumerate(zip(self._labels, self._p, self._lp))
        ]

    def print_distribution(self) -> None:
        """Write format_lines() to standard output, one outcome per line."""
        for line in self.format_lines():
            print(line)

    def to_frame(self) -> pd.DataFrame:
        """Return the outcomes as a DataFrame with label, probability and log_probability columns."""
        return pd.DataFrame(
            {
                "label": list(self._labels),
                "probability": self._p.copy(),
                "log_probability": self._lp.copy(),
            }
        )

    def _check_sizes(self) -> None:
        if not len(self._p) == len(self._lp) == len(self._labels):
            raise SizeMismatchError(
                "Distribution arrays out of sync: "
                f"len(P)={len(self._p)}, len(LP)={len(self._lp)}, len(labels)={len(self._labels)}."
            )
