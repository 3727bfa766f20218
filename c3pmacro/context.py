# -*- coding: utf-8; -*-
"""Per-invocation state handed to a macro implementation.

The expander creates a fresh `ExpansionContext` just before it calls a macro
function, and closes it as soon as the macro function returns. A macro uses
the context to report diagnostics, to allocate fresh identifiers, and to get
at the original source text of the nodes it was given.
"""

__all__ = ["ERROR", "WARNING", "Diagnostic", "MacroInvocation", "ExpansionContext"]

import ast

from .colorizer import colorize, ColorScheme
from .unparser import unparse
from .utils import gensym, get_lineno

ERROR = "error"
WARNING = "warning"


class Diagnostic:
    """A message tied to the source location of an AST node."""
    def __init__(self, severity, message, node, filename):
        if severity not in (ERROR, WARNING):
            raise ValueError(f"`severity` must be '{ERROR}' or '{WARNING}', got {repr(severity)}")
        self.severity = severity
        self.message = message
        self.node = node
        self.filename = filename

    @property
    def lineno(self):
        return get_lineno(self.node)

    @property
    def col_offset(self):
        return getattr(self.node, "col_offset", None)

    def format(self, *, color=False):
        """Render as `filename:lineno:col: severity: message`."""
        def maybe_colorize(text, *colors):
            if not color:
                return text
            return colorize(text, *colors)
        style = ColorScheme.ERROR if self.severity == ERROR else ColorScheme.WARNING
        where = f"{self.filename}:{self.lineno}"
        if self.col_offset is not None:
            where += f":{self.col_offset + 1}"
        return f"{maybe_colorize(where, ColorScheme.SOURCEFILENAME)}: {maybe_colorize(self.severity, style)}: {self.message}"

    def __str__(self):
        return self.format()

    def __repr__(self):  # pragma: no cover
        return f"Diagnostic({repr(self.severity)}, {repr(self.message)}, line {self.lineno})"


class MacroInvocation:
    """An expression macro call site, `name(arg0, ...)`.

    `node` is the `ast.Call` itself, `arguments` the list of its positional
    argument expressions, in source order.
    """
    def __init__(self, name, node, arguments):
        self.name = name
        self.node = node
        self.arguments = list(arguments)

    def __repr__(self):  # pragma: no cover
        return f"<MacroInvocation {self.name} with {len(self.arguments)} argument(s) at line {get_lineno(self.node)}>"


class ExpansionContext:
    """Diagnostics, fresh names and source text, for one macro expansion.

    `macroname`: name of the macro being expanded, as bound in the registry.
    `filename`:  full path to the `.py` file being expanded, or a label.
    `source`:    the source text the tree was parsed from, if available.
    """
    def __init__(self, macroname, filename, source=None):
        self.macroname = macroname
        self.filename = filename
        self.source = source
        self.diagnostics = []
        self.closed = False

    def _diagnose(self, severity, node, message):
        if self.closed:
            raise RuntimeError(f"expansion context for '{self.macroname}' used after its expansion finished")
        diagnostic = Diagnostic(severity, message, node, self.filename)
        self.diagnostics.append(diagnostic)
        return diagnostic

    def error(self, node, message):
        """Report an error at `node`. The expansion fails once the macro returns."""
        return self._diagnose(ERROR, node, message)

    def warning(self, node, message):
        """Report a warning at `node`. The expansion result is still used."""
        return self._diagnose(WARNING, node, message)

    @property
    def errors(self):
        return [d for d in self.diagnostics if d.severity == ERROR]

    @property
    def warnings(self):
        return [d for d in self.diagnostics if d.severity == WARNING]

    def gensym(self, basename=None):
        """Return a fresh identifier that cannot clash with any name at the use site."""
        return gensym(basename)

    def source_text(self, node, *, call=None):
        """Return the exact source code of `node`, as it was spelled in the source.

        Escapes, quoting and f-string placeholders are preserved verbatim.
        If the source is not available (e.g. the tree was generated at run
        time, or by another macro), fall back to unparsing `node`.

        If `node` is an argument of the `ast.Call` node `call`, any parentheses
        around `node` inside the argument list belong to its spelling, so for
        `f((a + b))` the text is `(a + b)`. The parentheses of the call itself
        never do.
        """
        if self.source is not None:
            segment = ast.get_source_segment(self.source, node)
            if segment is not None:
                if call is not None:
                    segment = self._parenthesized_segment(node, call) or segment
                return segment
        return unparse(node)

    def _parenthesized_segment(self, node, call):
        # AST column offsets count UTF-8 bytes.
        lines = self.source.encode("utf-8").splitlines(keepends=True)
        text = b"".join(lines)
        def offset(lineno, col_offset):
            return sum(len(line) for line in lines[:lineno - 1]) + col_offset
        try:
            lo = text.index(b"(", offset(call.func.end_lineno, call.func.end_col_offset)) + 1
            hi = offset(call.end_lineno, call.end_col_offset) - 1
            start = offset(node.lineno, node.col_offset)
            end = offset(node.end_lineno, node.end_col_offset)
        except (AttributeError, TypeError, ValueError):  # no location info, or not a call
            return None
        if not lo <= start <= end <= hi:
            return None
        while True:
            before = text[lo:start].rstrip()
            after = text[end:hi].lstrip()
            if not (before.endswith(b"(") and after.startswith(b")")):
                break
            start = lo + len(before) - 1
            end = hi - len(after) + 1
        return text[start:end].decode("utf-8")

    def close(self):
        self.closed = True
