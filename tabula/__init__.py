"""Top-level package for tabula (client-side tabular data engine).

Version identifier is defined in :mod:`tabula.version` to keep a single source
of truth that can be imported without pulling heavier submodules.
"""

from .version import __version__  # re-export

__all__ = ["__version__"]
