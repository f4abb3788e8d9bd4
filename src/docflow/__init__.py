"""DocFlow document translation service."""

__version__ = "0.1.0"
