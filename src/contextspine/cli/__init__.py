"""
CLI layer for contextspine.

Terminal transport only: argument parsing, coloured output and JSON
printing. Resolution logic lives in ``contextspine.framework``.

Entry point::

    contextspine --help
"""

from contextspine.cli.app import app

__all__ = ["app"]
