# -*- coding: utf-8; -*-
"""Back-convert an AST into source code, for error messages and expansion output."""

__all__ = ["UnparserError", "unparse", "unparse_with_fallbacks"]

import ast
from copy import deepcopy

from .colorizer import colorize, ColorScheme


class UnparserError(SyntaxError):
    """Failed to unparse the given AST."""


def unparse(tree):
    """Convert the AST `tree` into Python source code.

    `tree` can be an AST node or a statement suite (`list` of AST nodes).
    A statement suite is unparsed one statement per line.

    `tree` may lack source location info, as a dynamically generated AST
    typically does. The unparser needs line numbers to look up type comments,
    so missing ones are filled in on a copy; `tree` itself is not modified.

    Raises `UnparserError` if the tree cannot be unparsed, typically because
    some node has a field of the wrong type.
    """
    if isinstance(tree, list):
        return "\n".join(unparse(elt) for elt in tree)
    try:
        return ast.unparse(ast.fix_missing_locations(deepcopy(tree)))
    except Exception as err:
        raise UnparserError(f"Cannot unparse {type(tree)} with value {repr(tree)}") from err


def unparse_with_fallbacks(tree, *, color=False):
    """Like `unparse`, but never raises.

    Error messages must not themselves fail, so if unparsing fails, we
    show a raw AST dump instead. If that fails too, we fall back to `repr`.

    If `color=True`, the fallback renderings are dimmed, so that they stand
    out from real source code in a terminal.
    """
    try:
        return unparse(tree)
    except UnparserError:
        try:
            text = ast.dump(tree) if not isinstance(tree, list) else "\n".join(ast.dump(x) for x in tree)
        except Exception:
            text = repr(tree)
    if color:
        text = colorize(text, ColorScheme.GREYEDOUT)
    return text
