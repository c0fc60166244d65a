"""CLI exports.

``cli`` and ``main`` come from ``root.py`` so that ``python -m js_sanitizer``
and the console entry point share one implementation.
"""

from .root import cli, main

__all__ = ["cli", "main"]
