# -*- coding: utf-8; -*-
"""Importer (finder/loader) customizations, to inject the macro expander."""

__all__ = ["source_to_xcode", "path_xstats", "path_stats", "find_macroimports"]

import ast
from importlib.machinery import SourceFileLoader
import importlib.util
import os
import sysconfig
import tokenize

from . import compiler
from .coreutils import resolve_package, ismacroimport
from .unparser import unparse_with_fallbacks
from .utils import format_location


def source_to_xcode(self, data, path, *, _optimize=-1):
    """[c3pmacro] Import hook for the source to bytecode transformation.

    This function is monkey-patched into `importlib.machinery.SourceFileLoader`.
    """
    return compiler.compile(data, filename=path, optimize=_optimize)


# `SourceLoader.get_code` validates the `.pyc` against the timestamp we return
# from `path_xstats`, so that timestamp decides whether a module is recompiled
# (and whether `importlib.reload` actually reloads it). It must account for the
# macro-definition modules too, recursively.
#
# Timestamps are cached only during a single call of `path_stats`, so that a
# dependency that appears several times in the graph is stat'd once.
#
_stdlib_path_stats = SourceFileLoader.path_stats
def path_xstats(self, path):
    """[c3pmacro] Import hook to compute mtime, accounting for macro-imports.

    This function is monkey-patched into `importlib.machinery.SourceFileLoader`.
    For direct use as an API function, use `c3pmacro.importer.path_stats`.

    If `path` does not end in `.py`, or alternatively, if it points to a `.py` file that
    is part of Python's standard library, we delegate to the standard implementation of
    `SourceFileLoader.path_stats`.
    """
    # The stdlib is big and doesn't use macros.
    if path in _stdlib_sourcefile_paths or not path.endswith(".py"):
        return _stdlib_path_stats(self, path)
    return path_stats(path)


def _detect_stdlib_sourcefile_paths():
    """Return a set of full paths of `.py` files that are part of Python's standard library."""
    stdlib_dir = sysconfig.get_paths()["stdlib"]
    paths = set()
    for root, dirs, files in os.walk(stdlib_dir):
        for filename in files:
            if filename.endswith(".py"):
                paths.add(os.path.join(root, filename))
    return paths
_stdlib_sourcefile_paths = _detect_stdlib_sourcefile_paths()


def find_macroimports(path):
    """Return the macro-import statements at the top level of the `.py` file `path`."""
    # This parse is a cost the `.pyc` exists to avoid, but the macro expansion
    # it lets us skip is much more expensive.
    with tokenize.open(path) as sourcefile:
        tree = ast.parse(sourcefile.read(), filename=path)
    return [statement for statement in tree.body if ismacroimport(statement)]


def path_stats(path, _stats_cache=None):
    """[c3pmacro] Compute a `.py` source file's mtime, accounting for macro-imports.

    This is a public API function for direct use, if you have a `.py` file and
    you want to know its macro-enabled mtime.

    The mtime is the latest of those of `path` and the macro definition files
    it imports macros from, considered recursively in a `make`-like fashion.
    So if any macro definition anywhere in the macro-dependency tree of `path`
    changes, Python treats `path` as changed, and re-expands and recompiles it.

    `_stats_cache` is used internally to speed up the computation, in case the
    dependency graph hits the same source file multiple times.
    """
    if _stats_cache is None:
        _stats_cache = {}
    if path in _stats_cache:
        return _stats_cache[path]

    stat_result = os.stat(path)
    macroimports = find_macroimports(path)

    package_absname = None
    if any(macroimport.level for macroimport in macroimports):
        try:
            package_absname = resolve_package(path)
        except (ValueError, ImportError) as err:
            raise ImportError(f"while resolving absolute package name of {path}, which uses relative macro-imports") from err

    mtimes = []
    for macroimport in macroimports:
        if macroimport.module is None:
            approx_sourcecode = unparse_with_fallbacks(macroimport, color=True)
            loc = format_location(path, macroimport, approx_sourcecode)
            raise SyntaxError(f"{loc}\nmissing module name in macro-import")
        module_absname = importlib.util.resolve_name("." * macroimport.level + macroimport.module, package_absname)

        spec = importlib.util.find_spec(module_absname)
        if spec and spec.origin and spec.origin.endswith(".py"):
            stats = path_stats(spec.origin, _stats_cache)
            mtimes.append(stats["mtime"])

    mtimes.append(stat_result.st_mtime_ns * 1e-9)

    # `size` is optional, but `SourceLoader.get_code` expects the key to be there.
    result = {"mtime": max(mtimes), "size": None}
    _stats_cache[path] = result
    return result
