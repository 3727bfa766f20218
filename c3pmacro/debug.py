# -*- coding: utf-8; -*-
"""Macro debugging utilities."""

__all__ = ["format_registry", "ExpansionTracer"]

import io
import sys
import textwrap

from .colorizer import setcolor, colorize, ColorScheme
from .registry import macroarity, macrokind
from .unparser import unparse_with_fallbacks
from .utils import format_macrofunction


def format_registry(registry, *, label=None, color=False):
    """Return a human-readable report of the macros in `registry`.

    For each macro, show its name, its kind (and arity, if declared),
    and the fully qualified name of the implementing function.

    If `color=True`, colorize the output for printing into a terminal.
    """
    def maybe_setcolor(*colors):
        if not color:
            return ""
        return setcolor(*colors)
    def maybe_colorize(text, *colors):
        if not color:
            return text
        return colorize(text, *colors)

    c, CS = maybe_setcolor, ColorScheme

    with io.StringIO() as output:
        where = f" for {c(CS.SOURCEFILENAME)}{label}{c(CS.HEADING1)}" if label else ""
        output.write(f"{c(CS.HEADING1)}Macros{where}:{c()}\n")
        if not registry:
            output.write(maybe_colorize("    <no macros>\n",
                                        ColorScheme.GREYEDOUT))
        else:
            for name, function in sorted(registry.items()):
                kind = macrokind(function)
                arity = macroarity(function)
                if arity is not None:
                    kind = f"{kind}/{arity}"
                name = maybe_colorize(name, ColorScheme.MACRONAME)
                kind = maybe_colorize(kind, ColorScheme.MACROKIND)
                output.write(f"    {name} ({kind}): {format_macrofunction(function)}\n")
        return output.getvalue()


class ExpansionTracer:
    """Debug hook that prints each macro expansion as it happens.

    Usage::

        from c3pmacro.compiler import expand
        from c3pmacro.debug import ExpansionTracer

        expand(source, filename, debughook=ExpansionTracer(filename))

    Each expansion shows the invocation before, and the result after,
    rendered as source code. `self.count` is the number of expansions seen.
    """
    def __init__(self, filename, *, stream=None, color=True):
        self.filename = filename
        self.stream = stream
        self.color = color
        self.count = 0

    def __call__(self, invocationsubtreeid, invocationtree, expandedtree, macroname, macrofunction):
        self.count += 1
        c = setcolor if self.color else (lambda *colors: "")
        CS = ColorScheme
        stream = self.stream or sys.stderr
        formatter = lambda tree: unparse_with_fallbacks(tree, color=self.color)  # noqa: E731
        print(f"{c(CS.HEADING1)}Step {self.count} ({self.filename}): {c(CS.HEADING2)}applying {c(CS.MACRONAME)}{macroname}{c(CS.HEADING2)} ({format_macrofunction(macrofunction)}) at subtree 0x{invocationsubtreeid:x}:{c()}",
              file=stream)
        print(textwrap.indent(formatter(invocationtree), 2 * " "), file=stream)
        print(f"{c(CS.HEADING2)}Result:{c()}", file=stream)
        print(textwrap.indent(formatter(expandedtree), 2 * " "), file=stream)
