"""
Top-level package for gitstat.

This package exposes the main CLI entry point via the
``gitstat.cli`` module.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
