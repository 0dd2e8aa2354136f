"""
probstat – Main entry point.

Bootstrap script that loads settings, configures logging, and runs a small
demonstration of both components: a normalized, sorted distribution and a
time-binned statistics table.
"""

from probstat.analytics.distribution import ProbDistribution
from probstat.analytics.temporal_statistics import TemporalDataset, TemporalSample
from probstat.config.settings import get_settings
from probstat.utils.log_config import configure_logging
from probstat.utils.random_source import default_random_source


def main() -> None:
    """Print a demonstration distribution and statistics table to stdout."""
    settings = get_settings()
    configure_logging(settings.logging.level)
    rng = default_random_source(settings.random.seed)

    dist = ProbDistribution.from_weights(
        ["C", "G", "Am", "F"], [4.0, 3.0, 2.0, 1.0], settings=settings.numeric
    )
    dist.normalize()
    dist.sort()
    dist.print_distribution()
    print(f"entropy\t{dist.entropy():g}")
    print(f"sample\t{dist.sample(rng)}")

    data = TemporalDataset([1900, 2000])
    data.add_samples(
        [
            TemporalSample("a", 1850, (1.0, 10.0)),
            TemporalSample("b", 1920, (2.0, 20.0)),
            TemporalSample("c", 1980, (4.0, 40.0)),
            TemporalSample("d", 2010, (8.0, 80.0)),
        ]
    )
    data.analyze()
    data.print_statistics()


if __name__ == "__main__":
    main()
