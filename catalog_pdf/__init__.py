"""Utilities for generating paginated PDF product catalogs.

This package exposes the CLI entry points used by the ``catalog-pdf`` console
script to render a catalog snapshot into a PDF, preview its numbering, and
seed default ordering metadata.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from catalog_pdf import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
