"""``sqlmeta`` command line interface."""

from sqlmeta.cli.app import app

__all__ = ["app"]
