"""Public package surface for seer.

Exports ``main`` for programmatic CLI invocation.
The preview core lives in ``seer.preview`` and ``seer.diagram``.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main"]
