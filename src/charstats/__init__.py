"""Character attribute and modifier engine."""

__version__ = "0.1.0"
