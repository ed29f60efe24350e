"""BF asset container tools."""

__version__ = "0.1.0"
