#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Show the macro expansion of a Python source file. Console script `c3pexpand`."""

import argparse
import pathlib
import sys
import tokenize

from colorama import AnsiToWin32  # type: ignore[import]

from . import __version__
from .compiler import expand
from .core import MacroExpansionError
from .debug import ExpansionTracer, format_registry
from .plugin import plugin
from .unparser import unparse


def read_source(filename):
    """Return `(source, filename)` for `filename`; `-` means standard input."""
    if filename == "-":
        return sys.stdin.read(), "<stdin>"
    path = pathlib.Path(filename).expanduser().resolve()
    with tokenize.open(str(path)) as sourcefile:
        return sourcefile.read(), str(path)


def format_error(err):
    """Format an expansion error for the terminal, including its cause, if any."""
    out = [f"{type(err).__name__}: {err}"]
    cause = err.__cause__
    if cause is not None:
        out.append(f"caused by {type(cause).__name__}: {cause}")
    return "\n".join(out)


def main(argv=None):
    """Handle command-line arguments and run.

    Return value is the process exit status.
    """
    parser = argparse.ArgumentParser(prog="c3pexpand",
                                     description="""Print the macro expansion of a Python source file.""",
                                     formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument(dest="filename", metavar="FILE", type=str,
                        help="Python source file to expand, or '-' to read standard input.")
    parser.add_argument("-a", "--all", dest="all_macros", action="store_true", default=False,
                        help="Put every macro c3pmacro provides in scope, without a macro-import.")
    parser.add_argument("-t", "--trace", dest="trace", action="store_true", default=False,
                        help="Print each macro expansion step to stderr.")
    parser.add_argument("--no-color", dest="color", action="store_false", default=True,
                        help="Do not colorize messages.")
    parser.add_argument("-v", "--version", action="version", version=f"c3pexpand (c3pmacro {__version__})")
    opts = parser.parse_args(argv)

    errstream = sys.stderr if opts.color else AnsiToWin32(sys.stderr, strip=True).stream

    source, filename = read_source(opts.filename)
    if filename != "<stdin>":
        # Let the file import macros from its neighbors, like `python FILE` would.
        directory = str(pathlib.Path(filename).parent)
        if directory not in sys.path:
            sys.path.insert(0, directory)

    registry = plugin.registry if opts.all_macros else None
    tracer = None
    if opts.trace:
        tracer = ExpansionTracer(filename, stream=errstream, color=opts.color)
        if registry is not None:
            print(format_registry(registry, label=filename, color=opts.color), file=errstream)

    try:
        expansion = expand(source, filename, registry=registry, debughook=tracer)
    except (MacroExpansionError, SyntaxError, ImportError) as err:
        print(format_error(err), file=errstream)
        return 1

    print(unparse(expansion))
    return 0


if __name__ == "__main__":
    sys.exit(main())
