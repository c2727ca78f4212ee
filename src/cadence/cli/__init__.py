"""
CLI layer for cadence.

Entry point::

    cadence --help
"""

from cadence.cli.app import app

__all__ = ["app"]
