"""Public package surface for gridpick.

Exports ``main`` for programmatic CLI invocation and ``pick`` for running one
interactive session over an already-loaded element list.
"""

from __future__ import annotations

__version__ = "2.2.0"


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


def pick(*args, **kwargs):
    """Lazily import the terminal runtime and run one picker session."""
    from .runtime import pick as _pick

    return _pick(*args, **kwargs)


__all__ = ["main", "pick", "__version__"]
