"""Utilities for building the dual-mode landing page.

This package pre-renders the landing page shell for search engines, hydrates
pages in place from the same content collections, and forwards contact form
submissions by email. The CLI entry points are used by ``landing build`` in
CI and ``landing verify`` after each deploy.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from landing_pages import main
>>> main()  # doctest: +SKIP
>>> from landing_pages import app
>>> app.name  # doctest: +SKIP
('landing',)
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
