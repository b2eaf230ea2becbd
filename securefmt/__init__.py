"""Bounded scanf-style formatted input for strings and binary files."""

__version__ = "1.0.0"

__all__ = ["scanformat", "scanner", "scannumber", "scantext", "stream"]