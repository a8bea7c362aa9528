"""Generate linked API documentation and a hand-written manual as static HTML.

This package exposes the CLI entry points behind the ``darkdocs`` console
script, which renders an extracted entity feed into API pages and a directory
of ``.page`` sources into a manual that can link into those API pages.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from darkdocs import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
