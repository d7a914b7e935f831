"""Normalize dates embedded in file names to a "yyyy-mm-dd <rest>" prefix."""

__version__ = "0.1.0"
