"""MySQL statement execution with timing and type statistics."""

__version__ = "0.1.0"
