"""
Pytest configuration file.

Ensures the repo root is on sys.path so that 'import probstat...' works, and
provides shared fixtures.
"""
import sys
from pathlib import Path

import numpy as np
import pytest

# Add the repo root to sys.path
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from probstat.config.settings import reset_settings  # noqa: E402


@pytest.fixture
def rng():
    """Seeded numpy Generator so statistical tests are reproducible."""
    return np.random.default_rng(12345)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Clear cached settings and PROBSTAT_* variables around every test."""
    for name in (
        "PROBSTAT_LOG_FLOOR",
        "PROBSTAT_KL_EPSILON",
        "PROBSTAT_ENTROPY_EPSILON",
        "PROBSTAT_RANDOM_SEED",
        "PROBSTAT_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()
