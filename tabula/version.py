"""Central version declaration for tabula-engine.

Update this file when cutting a new release tag. Keep semantic versioning.
Automations (CLI --version, packaging) import from here.
"""

__version__ = "0.3.0"

__all__ = ["__version__"]
