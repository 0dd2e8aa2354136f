"""
Generic utility functions shared across modules.

Includes numeric helpers, random source abstractions, logging setup,
and error classes.
"""
