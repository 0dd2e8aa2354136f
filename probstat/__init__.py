"""
probstat – discrete probability and descriptive statistics toolkit.

Provides labeled probability distributions with log-domain arithmetic and
sampling, time-binned descriptive statistics, and the numeric helpers both
are built on.
"""
