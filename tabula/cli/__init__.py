"""CLI package bootstrap.

Defines root group (`cli`) in helpers and imports submodules so their
decorators register commands. Keep this file minimal to avoid circular
imports and duplication.
"""
from tabula.cli.helpers import cli  # root group
from tabula.cli import view_cmds  # noqa: F401
from tabula.cli import search_cmds  # noqa: F401
from tabula.cli import config_cmds  # noqa: F401

__all__ = ["cli"]
