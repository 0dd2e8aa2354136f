"""
Configuration loading and validation for numeric, random and logging settings.

Provides strongly typed settings objects loaded from environment variables
with upfront validation.
"""
