"""
Time-binned descriptive statistics over multi-dimensional samples.

**Conceptual**: Many analyses ask "how did this quantity behave in each era?"
A TemporalDataset answers that by cutting the time axis at a sorted list of
boundary times and summarizing every dimension of the samples that fall into
each resulting bucket (count, mean, sample standard deviation).

**Interval convention**: N boundaries b0 <= b1 <= ... <= bN-1 define N+1
half-open intervals:
    (-inf, b0), [b0, b1), ..., [bN-1, inf)
A sample exactly on a boundary belongs to the interval that starts there.
E.g. boundaries [1900, 2000]: time 1899 -> interval 0, 1950 -> 1, 2000 -> 2.

**Recomputation**: analyze() rebuilds the whole statistics table from the
current samples on every call. Nothing is maintained incrementally; adding a
sample after analyze() leaves the table stale until the next analyze().
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd
from loguru import logger

from probstat.utils.errors import EmptyInputError, SizeMismatchError, UnsortedInputError
from probstat.utils.numeric import average, stdev


@dataclass(frozen=True)
class TemporalSample:
    """
    One time-stamped observation with `dim_value` numeric readings.

    Attributes:
        label: Free-form identifier (e.g. a piece or record name).
        time: Scalar time stamp (e.g. a year).
        values: Numeric readings; only the first `dim_value` are analyzed.
        dim_value: Dimensionality; defaults to len(values).
    """
    label: str
    time: float
    values: tuple[float, ...]
    dim_value: Optional[int] = None

    def __post_init__(self):
        """Normalize values to a tuple of floats and validate dim_value."""
        object.__setattr__(self, "values", tuple(float(v) for v in self.values))
        if self.dim_value is None:
            object.__setattr__(self, "dim_value", len(self.values))
        if self.dim_value < 0 or self.dim_value > len(self.values):
            raise SizeMismatchError(
                f"TemporalSample '{self.label}': dim_value={self.dim_value} but "
                f"{len(self.values)} value(s) supplied."
            )


@dataclass(frozen=True)
class IntervalStatistic:
    """Count, mean and sample standard deviation of one dimension in one interval."""
    count: int
    mean: float
    stdev: float


def _format_time(value: float) -> str:
    # Whole-number boundaries (years, ticks) print without a decimal part
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


class TemporalDataset:
    """
    Samples partitioned into time intervals, with per-interval statistics.

    **Usage**:
        data = TemporalDataset([1900, 2000])
        data.add_sample(TemporalSample("a", 1850, (1.0, 2.0)))
        data.add_sample(TemporalSample("b", 1950, (3.0, 4.0)))
        table = data.analyze()
        table[1][0]   # IntervalStatistic(count=1, mean=3.0, stdev=0.0)
        data.print_statistics()

    Attributes:
        samples: All added samples, in insertion order.
        statistics: Table indexed [interval_id][dimension] after analyze().
        dim_value: Dimensionality taken from the first sample by analyze().
    """

    def __init__(self, boundaries: Iterable[float] = ()):
        """
        Create a dataset with the given boundary times.

        Args:
            boundaries: Non-decreasing boundary times. They are never sorted
                        here; the caller supplies them in order.

        Raises:
            UnsortedInputError: If a boundary is smaller than its predecessor.
        """
        b = np.asarray(list(boundaries), dtype=float)
        if b.size > 1 and np.any(np.diff(b) < 0):
            raise UnsortedInputError(
                f"Boundary times must be non-decreasing, got {b.tolist()}."
            )
        self._boundaries = b
        self.samples: list[TemporalSample] = []
        self.statistics: list[list[IntervalStatistic]] = []
        self.interval_counts: list[int] = []
        self.dim_value: Optional[int] = None

    @property
    def boundaries(self) -> tuple[float, ...]:
        return tuple(float(x) for x in self._boundaries)

    @property
    def n_intervals(self) -> int:
        return len(self._boundaries) + 1

    def add_sample(self, sample: TemporalSample) -> None:
        """Append a sample. No validation against the boundaries is performed."""
        self.samples.append(sample)

    def add_samples(self, samples: Iterable[TemporalSample]) -> None:
        for sample in samples:
            self.add_sample(sample)

    def interval_id(self, time: float) -> int:
        """
        Interval index for a time stamp.

        **Functionally**: the smallest i with time < boundaries[i]; times at or
        beyond every boundary map to len(boundaries), the last interval.
        """
        return int(np.searchsorted(self._boundaries, time, side="right"))

    def analyze(self) -> list[list[IntervalStatistic]]:
        """
        Recompute the per-interval, per-dimension statistics table.

        **Functionally**:
        - Dimensionality comes from the first sample.
        - Each sample is assigned to interval_id(sample.time).
        - Per interval and dimension: count, mean, and sample stdev (N-1).
          A single-member group has stdev 0; an empty group has count, mean
          and stdev all 0.

        Returns:
            The table, also stored in self.statistics.

        Raises:
            EmptyInputError: If the dataset has no samples.
            SizeMismatchError: If a sample has fewer readings than the dimensionality.
        """
        if not self.samples:
            raise EmptyInputError("analyze: dataset has no samples.")
        dim = self.samples[0].dim_value

        groups: list[list[Sequence[float]]] = [[] for _ in range(self.n_intervals)]
        for sample in self.samples:
            if len(sample.values) < dim:
                raise SizeMismatchError(
                    f"analyze: sample '{sample.label}' has {len(sample.values)} value(s), "
                    f"dataset dimensionality is {dim}."
                )
            groups[self.interval_id(sample.time)].append(sample.values[:dim])

        statistics = []
        for group in groups:
            row = []
            for k in range(dim):
                column = [values[k] for values in group]
                if len(column) == 0:
                    row.append(IntervalStatistic(0, 0.0, 0.0))
                elif len(column) == 1:
                    row.append(IntervalStatistic(1, column[0], 0.0))
                else:
                    row.append(IntervalStatistic(len(column), average(column), stdev(column)))
            statistics.append(row)

        self.dim_value = dim
        self.statistics = statistics
        self.interval_counts = [len(group) for group in groups]
        logger.debug(
            "Analyzed {} sample(s) into {} interval(s) x {} dimension(s)",
            len(self.samples), self.n_intervals, dim,
        )
        return statistics

    def interval_labels(self) -> list[str]:
        """
        Human-readable interval labels: (-inf,b0), [b0,b1), ..., [bN-1,inf).

        Raises:
            EmptyInputError: If there are no boundaries.
        """
        if len(self._boundaries) == 0:
            raise EmptyInputError("interval_labels: no boundary times defined.")
        b = [_format_time(x) for x in self._boundaries]
        labels = [f"(-inf,{b[0]})"]
        labels += [f"[{b[i - 1]},{b[i]})" for i in range(1, len(b))]
        labels.append(f"[{b[-1]},inf)")
        return labels

    def representative_times(self) -> list[float]:
        """
        One time per interval: b0 for the first, midpoints for interior
        intervals, and the last boundary for the final one.
        """
        if len(self._boundaries) == 0:
            raise EmptyInputError("representative_times: no boundary times defined.")
        b = self._boundaries
        times = [float(b[0])]
        times += [0.5 * (b[i - 1] + b[i]) for i in range(1, len(b))]
        times.append(float(b[-1]))
        return times

    def format_statistics(self) -> list[str]:
        """
        Render the statistics table, one tab-separated line per interval.

        Fields: label, representative time, sample count, then mean and stdev
        for each dimension. The two unbounded intervals are prefixed with '#'
        so plotting tools skip them as comments.

        Raises:
            EmptyInputError: If analyze() has not been run or there are no boundaries.
        """
        if not self.statistics:
            raise EmptyInputError("format_statistics: call analyze() first.")
        labels = self.interval_labels()
        times = self.representative_times()
        last = len(labels) - 1
        lines = []
        for i, (label, time, row) in enumerate(zip(labels, times, self.statistics)):
            prefix = "#" if i in (0, last) else ""
            fields = [f"{prefix}{label}", _format_time(time), str(self.interval_counts[i])]
            for stat in row:
                fields.append(f"{stat.mean:g}")
                fields.append(f"{stat.stdev:g}")
            lines.append("\t".join(fields))
        return lines

    def print_time_intervals(self) -> None:
        """Write the interval labels to standard output, one per line."""
        for label in self.interval_labels():
            print(label)

    def print_statistics(self) -> None:
        """Write format_statistics() to standard output."""
        for line in self.format_statistics():
            print(line)

    def to_frame(self) -> pd.DataFrame:
        """
        Long-format DataFrame of the statistics table.

        Columns: interval_id, interval, time, dimension, count, mean, stdev.
        Interval labels and times are omitted (None) when no boundaries exist.
        """
        if not self.statistics:
            raise EmptyInputError("to_frame: call analyze() first.")
        if len(self._boundaries) > 0:
            labels: list[Optional[str]] = self.interval_labels()
            times: list[Optional[float]] = self.representative_times()
        else:
            labels, times = [None], [None]
        rows = []
        for i, row in enumerate(self.statistics):
            for k, stat in enumerate(row):
                rows.append(
                    {
                        "interval_id": i,
                        "interval": labels[i],
                        "time": times[i],
                        "dimension": k,
                        "count": stat.count,
                        "mean": stat.mean,
                        "stdev": stat.stdev,
                    }
                )
        return pd.DataFrame(
            rows,
            columns=["interval_id", "interval", "time", "dimension", "count", "mean", "stdev"],
        )
