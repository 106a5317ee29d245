"""
Configuration loading for gitstat.

Provides a loader for the optional ``.gitstat.json`` file located in the
repository root. See :mod:`gitstat.config.loader` for details.
"""

from .loader import ConfigError, load_config  # noqa: F401
