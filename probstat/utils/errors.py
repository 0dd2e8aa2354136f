"""
Error classes for numeric and statistical contract violations.

**Conceptual**: Every helper in this package has preconditions (equal vector
lengths, enough elements to compute a standard deviation, a non-zero mass to
normalize). Violating one is a programming error at the call site, not a
runtime fault to retry. These exceptions make the violated contract explicit
so the caller sees exactly which precondition failed and with what input.

All errors derive from ProbstatError, which itself is a ValueError, so
callers that already guard numeric code with `except ValueError` keep working.
"""


class ProbstatError(ValueError):
    """
    Base class for all contract violations raised by probstat.

    **Usage**: Catch this to handle any probstat precondition failure in one
    place, or catch a specific subclass when the recovery differs per kind.
    """
    pass


class SizeMismatchError(ProbstatError):
    """
    Raised when two vectors (or parallel arrays) that must share a length do not.

    Examples: kl_divergence(p, q) with len(p) != len(q), a distribution whose
    probability, log-probability and label arrays drift apart, or a temporal
    sample carrying fewer readings than the dataset dimensionality.
    """
    pass


class EmptyInputError(ProbstatError):
    """
    Raised when an operation receives fewer elements than it needs.

    Examples: average([]), stdev([x]), mode_id() on an empty distribution,
    analyze() on a dataset without samples.
    """
    pass


class DegenerateInputError(ProbstatError):
    """Raised when input is non-empty but mathematically degenerate (zero mass, n < 2 grid points)."""
    pass


class UnsortedInputError(ProbstatError):
    """Raised when a sequence that must be non-decreasing is not."""
    pass


def require_same_length(p, q, context: str | None = None) -> None:
    """
    Check that two sized sequences have equal length.

    Args:
        p: First sequence.
        q: Second sequence.
        context: Optional name of the calling operation, included in the message.

    Raises:
        SizeMismatchError: If len(p) != len(q).
    """
    if len(p) != len(q):
        ctx = f"{context}: " if context else ""
        raise SizeMismatchError(
            f"{ctx}Vectors must have equal length, got {len(p)} and {len(q)}."
        )


def require_min_length(values, minimum: int, context: str | None = None) -> None:
    """
    Check that a sized sequence has at least `minimum` elements.

    Raises:
        EmptyInputError: If len(values) < minimum.
    """
    if len(values) < minimum:
        ctx = f"{context}: " if context else ""
        raise EmptyInputError(
            f"{ctx}Need at least {minimum} element(s), got {len(values)}."
        )
