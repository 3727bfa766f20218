# -*- coding: utf-8; -*-
"""The compiler plugin: the set of macros `c3pmacro` provides, as one unit.

A plugin names its macros once, as an ordered list of `(name, implementation)`
pairs. From those it builds a `Registry`, the first time the registry is
needed, and never again. Code that wants the provided macros in scope without
a macro-import (the `c3pexpand --all` command line, or a build tool calling
`plugin.expand`) goes through here.
"""

__all__ = ["CompilerPlugin", "plugin", "registry"]

from . import compiler
from .macros import slope_subset, stringify
from .registry import Registry


class CompilerPlugin:
    """A named collection of macros, with a lazily built `Registry`.

    `providing_macros`: iterable of `(name, implementation)` pairs. Read exactly once.
    """
    def __init__(self, providing_macros):
        self._providing_macros = providing_macros
        self._registry = None

    @property
    def registry(self):
        """The `Registry` for this plugin's macros. Built on first access."""
        if self._registry is None:
            self._registry = Registry(self._providing_macros)
            self._providing_macros = None
        return self._registry

    def expand(self, source, filename="<c3pmacro plugin>", debughook=None):
        """Expand `source` with this plugin's macros in scope.

        Parameters are as in `c3pmacro.compiler.expand`.
        """
        return compiler.expand(source, filename, registry=self.registry, debughook=debughook)

    def __repr__(self):  # pragma: no cover
        return f"<CompilerPlugin {', '.join(self.registry)}>"


plugin = CompilerPlugin([("stringify", stringify),
                         ("slope_subset", slope_subset)])
registry = plugin.registry
