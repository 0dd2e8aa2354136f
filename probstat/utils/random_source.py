"""
Random source abstractions for deterministic sampling and testing.

This module provides a simple, testable way to obtain uniform random draws
via a random source object rather than a hidden process-wide generator. Every
sampling operation in probstat (categorical sampling, Gaussian draws,
distribution randomization) takes a random source as an explicit argument.

The key insight: depending on a RandomSource abstraction instead of a global
stream makes sampling code testable and reproducible. Tests can replay an
exact sequence of uniform draws and assert the precise outcome, and two
callers never silently share (or race on) the same stream.
"""

from collections.abc import Iterable
from typing import Protocol

import numpy as np


class RandomSource(Protocol):
    """
    Abstract uniform random number source.

    **Conceptual**: A RandomSource is any object that can answer "give me the
    next uniform value in [0, 1)". numpy.random.Generator satisfies this
    protocol directly, so production code simply passes a Generator.

    **Usage**: Consumers accept a RandomSource (as a function parameter) and
    call rng.random() whenever they need a uniform draw. In production, pass
    numpy.random.default_rng(seed); in tests, pass a SequenceRandomSource.

    **Example**:
        def pick(p, rng: RandomSource):
            u = rng.random()
            ...

        pick(p, np.random.default_rng(7))
        pick(p, SequenceRandomSource([0.25, 0.9]))
    """

    def random(self) -> float:
        """
        Return the next uniform draw.

        Returns:
            float in the half-open interval [0, 1).
        """
        ...


class SequenceRandomSource:
    """
    Random source that replays a fixed sequence of draws (for deterministic tests).

    **Conceptual**: Use this in tests to pin down exactly which uniform values
    a sampling routine sees, so the expected outcome can be computed by hand.
    Once the sequence is exhausted it wraps around to the beginning.

    **Usage**:
        rng = SequenceRandomSource([0.1, 0.95])
        rng.random()  # 0.1
        rng.random()  # 0.95
        rng.random()  # 0.1 again
    """

    def __init__(self, draws: Iterable[float]):
        """
        Initialize with the draws to replay.

        Args:
            draws: Uniform values in [0, 1). Must contain at least one value.

        Raises:
            ValueError: If draws is empty or contains a value outside [0, 1).
        """
        self._draws = [float(d) for d in draws]
        if not self._draws:
            raise ValueError("SequenceRandomSource needs at least one draw.")
        bad = [d for d in self._draws if not 0.0 <= d < 1.0]
        if bad:
            raise ValueError(
                f"Draws must lie in [0, 1), got out-of-range values: {bad[:5]}"
            )
        self._position = 0

    def random(self) -> float:
        """Return the next configured draw, wrapping around at the end."""
        value = self._draws[self._position]
        self._position = (self._position + 1) % len(self._draws)
        return value


def default_random_source(seed: int | None = None) -> np.random.Generator:
    """
    Factory for the production random source.

    **Conceptual**: Wraps numpy.random.default_rng so call sites never touch
    the legacy global numpy stream. Passing the same seed yields the same
    sequence of draws, which is the only reproducibility guarantee probstat
    offers.

    Args:
        seed: Optional integer seed. None draws fresh OS entropy.

    Returns:
        numpy Generator usable wherever a RandomSource is expected.
    """
    return np.random.default_rng(seed)
