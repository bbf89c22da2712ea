"""Weather, astronomy and forecast command-line utilities."""

__version__ = "0.1.0"

__all__ = ["__version__"]
