"""Quote of the Day backend."""

__version__ = "1.0.0"
