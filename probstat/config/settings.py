"""
Configuration settings for probstat.

**Conceptual**: This module provides strongly-typed configuration objects that
load from environment variables (via .env files). All settings are validated
when loaded, ensuring fail-fast behavior if a value is malformed.

**What is configurable?**
  - Numeric thresholds: the log-probability floor used by log-normalization,
    and the negligible-probability cutoffs used by KL divergence and entropy.
  - Random seed: a default seed for the production random source.
  - Logging: the loguru level used by configure_logging().

Defaults reproduce the classic behavior (floor -200, cutoffs 1e-100 / 1e-10),
so an empty environment is always a valid configuration.

This module uses python-dotenv to load .env files and dataclasses for type safety.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from probstat.utils.numeric import ENTROPY_NEGLIGIBLE_P, KL_NEGLIGIBLE_P, LOG_PROB_FLOOR

# Load .env from project root (dev/local environments); a missing file is a no-op
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

VALID_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def _read_float(name: str, default: float) -> float:
    raw = os.getenv(name, "")
    if raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got: {raw}")


@dataclass(frozen=True)
class NumericSettings:
    """
    Thresholds used by the numeric helpers and distributions.

    **Conceptual**: Log-domain code needs a few saturation constants so that
    probabilities close to zero do not turn into -inf or NaN. These constants
    are rarely changed, but keeping them in one validated place makes them
    easy to audit and to override in experiments.

    Attributes:
        log_floor: Smallest log-probability kept by log-normalization.
                   Must be negative (default -200).
        kl_epsilon: p_i below this are skipped in KL divergence (default 1e-100).
        entropy_epsilon: P_i below this are skipped in entropy (default 1e-10).
    """
    log_floor: float = LOG_PROB_FLOOR
    kl_epsilon: float = KL_NEGLIGIBLE_P
    entropy_epsilon: float = ENTROPY_NEGLIGIBLE_P

    def __post_init__(self):
        """Validate settings after initialization."""
        if not self.log_floor < 0:
            raise ValueError(
                f"PROBSTAT_LOG_FLOOR must be negative, got: {self.log_floor}"
            )
        if self.kl_epsilon < 0 or self.entropy_epsilon < 0:
            raise ValueError(
                "PROBSTAT_KL_EPSILON and PROBSTAT_ENTROPY_EPSILON must be non-negative, "
                f"got: {self.kl_epsilon}, {self.entropy_epsilon}"
            )

    @classmethod
    def from_env(cls) -> "NumericSettings":
        """
        Load numeric settings from environment variables.

        **Environment variables** (all optional):
          - PROBSTAT_LOG_FLOOR: log-probability floor (default -200).
          - PROBSTAT_KL_EPSILON: KL negligible-probability cutoff (default 1e-100).
          - PROBSTAT_ENTROPY_EPSILON: entropy negligible-probability cutoff (default 1e-10).

        Returns:
            NumericSettings with values loaded from environment.

        Raises:
            ValueError: If a variable is set but not a number, or fails validation.
        """
        return cls(
            log_floor=_read_float("PROBSTAT_LOG_FLOOR", LOG_PROB_FLOOR),
            kl_epsilon=_read_float("PROBSTAT_KL_EPSILON", KL_NEGLIGIBLE_P),
            entropy_epsilon=_read_float("PROBSTAT_ENTROPY_EPSILON", ENTROPY_NEGLIGIBLE_P),
        )


@dataclass(frozen=True)
class RandomSettings:
    """
    Configuration for the default random source.

    Attributes:
        seed: Seed passed to numpy.random.default_rng. None means fresh entropy
              on every run (non-reproducible).
    """
    seed: Optional[int] = None

    @classmethod
    def from_env(cls) -> "RandomSettings":
        """
        Load random settings from PROBSTAT_RANDOM_SEED (optional integer).

        Raises:
            ValueError: If PROBSTAT_RANDOM_SEED is set but not an integer.
        """
        seed_str = os.getenv("PROBSTAT_RANDOM_SEED", "")
        if seed_str == "":
            return cls(seed=None)
        try:
            seed = int(seed_str)
        except ValueError:
            raise ValueError(
                f"PROBSTAT_RANDOM_SEED must be an integer, got: {seed_str}"
            )
        return cls(seed=seed)


@dataclass(frozen=True)
class LoggingSettings:
    """
    Configuration for loguru output.

    Attributes:
        level: Minimum level name emitted by the sink installed in
               configure_logging() (default "WARNING").
    """
    level: str = "WARNING"

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(
                f"PROBSTAT_LOG_LEVEL must be one of {VALID_LOG_LEVELS}, got: {self.level}"
            )

    @classmethod
    def from_env(cls) -> "LoggingSettings":
        """Load logging settings from PROBSTAT_LOG_LEVEL (optional)."""
        return cls(level=os.getenv("PROBSTAT_LOG_LEVEL", "WARNING"))


@dataclass(frozen=True)
class Settings:
    """
    Global settings for probstat.

    **Conceptual**: This is the top-level settings object that aggregates all
    subsystem settings. It provides a single entrypoint for accessing
    configuration throughout the application.

    **Usage pattern**:
      ```python
      from probstat.config.settings import get_settings

      settings = get_settings()
      rng = default_random_source(settings.random.seed)
      ```

    Attributes:
        numeric: Numeric thresholds.
        random: Default random source settings.
        logging: Logging level settings.
    """
    numeric: NumericSettings = field(default_factory=NumericSettings)
    random: RandomSettings = field(default_factory=RandomSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Load global settings from environment variables.

        Returns:
            Settings object with all subsystem settings loaded from environment.

        Raises:
            ValueError: If any subsystem setting is malformed.
        """
        return cls(
            numeric=NumericSettings.from_env(),
            random=RandomSettings.from_env(),
            logging=LoggingSettings.from_env(),
        )


# Lazily loaded singleton; tests can construct Settings(...) directly or call reset_settings()
_default_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the global settings singleton.

    **Conceptual**: Settings are loaded from environment on first call, then
    cached for reuse. Library functions that accept explicit thresholds never
    call this; it is meant for application entry points.

    Returns:
        Global Settings singleton.

    Raises:
        ValueError: If the environment holds malformed settings.
    """
    global _default_settings

    if _default_settings is None:
        _default_settings = Settings.from_env()

    return _default_settings


def reset_settings():
    """
    Reset the global settings singleton (for testing).

    **Testing pattern**:
      ```python
      def test_something(monkeypatch):
          reset_settings()
          monkeypatch.setenv("PROBSTAT_RANDOM_SEED", "7")
          assert get_settings().random.seed == 7
      ```
    """
    global _default_settings
    _default_settings = None
