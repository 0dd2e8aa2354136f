"""
Probability distributions and temporal descriptive statistics.

Includes the labeled discrete distribution container and the time-binned
statistics aggregator.
"""
