# -*- coding: utf-8; -*-
"""Install c3pmacro hooks to preprocess source files.

We monkey-patch `SourceFileLoader`, so that imported modules are compiled in
a different way, macroexpanding the AST before compiling it into bytecode.

We also change `.pyc` cache invalidation, so that updating a macro definition
causes any source files that import macros from it to be re-expanded and
recompiled. This is considered recursively in a `make`-like fashion.

Only mtime-based pycs use our invalidation logic; PEP 552 (deterministic
pycs) is not supported.

Bytecode caching follows Python's own switches: the `-B` command-line flag,
the `PYTHONDONTWRITEBYTECODE` environment variable, and `sys.dont_write_bytecode`.

Usage::

    import c3pmacro.activate  # noqa: F401
    import mymodule  # macro-imports in `mymodule` now take effect
"""

__all__ = ["activate", "deactivate"]

from importlib.machinery import SourceFileLoader
from .importer import source_to_xcode, path_xstats


def activate():
    """Activate the macro expander for imports.

    Called automatically once, when `c3pmacro.activate` is imported for the
    first time in the current process. Available so that after `deactivate`,
    the expander can be re-activated.
    """
    SourceFileLoader.source_to_code = source_to_xcode
    SourceFileLoader.path_stats = path_xstats


def deactivate():
    """Deactivate the macro expander for imports.

    Modules imported after this are compiled by the standard Python compiler.
    """
    SourceFileLoader.source_to_code = stdlib_source_to_code
    SourceFileLoader.path_stats = stdlib_path_stats


stdlib_source_to_code = SourceFileLoader.source_to_code
stdlib_path_stats = SourceFileLoader.path_stats
activate()
