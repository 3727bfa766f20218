# -*- coding: utf-8; -*-
"""General utilities. Can be useful for writing both macros as well as macro expanders."""

__all__ = ["gensym", "scrub_uuid", "flatten", "get_lineno",
           "format_location", "format_macrofunction"]

import ast
import uuid

from .colorizer import colorize, ColorScheme


_previous_gensyms = set()
def gensym(basename=None):
    """Create a name for a new, unused lexical identifier, and return the name as an `str`.

    We include an uuid in the name to avoid the need for any lexical scanning.

    Examples::

        gensym()         # --> 'gensym_e010a36f9cd64ad2b14041751ef40a6e'
        gensym("cls")    # --> 'cls_65cc5638659d46209af11e1133698462'
        gensym("")       # --> '7cf67f3eb02c4fdaa1a13e7f55bca908' (bare uuid only)
    """
    if basename and not isinstance(basename, str):
        raise TypeError(f"`basename` must be str, got {type(basename)} with value {repr(basename)}")

    if basename is None:
        basename = "gensym_"
    elif len(basename):
        basename = basename + "_"

    def generate():
        unique = str(uuid.uuid4()).replace("-", "")
        return f"{basename}{unique}"
    sym = generate()
    # uuid4 does not guarantee no collisions, only a vanishingly small chance.
    while sym in _previous_gensyms:
        sym = generate()  # pragma: no cover
    _previous_gensyms.add(sym)
    return sym


def scrub_uuid(string):
    """Scrub any existing `"_uuid"` suffix from `string`."""
    idx = string.rfind("_")
    if idx != -1:
        maybe_uuid = string[(idx + 1):]
        if len(maybe_uuid) == 32:
            try:
                _ = int(maybe_uuid, base=16)
            except ValueError:
                pass
            else:  # yes, it was an uuid
                return string[:idx]
    return string


def flatten(lst, *, recursive=True):
    """Flatten a nested list, dropping `None` entries.

    Useful for splicing in transformations of statement suites.
    """
    out = []
    for elt in lst:
        if isinstance(elt, list):
            sublst = flatten(elt) if recursive else elt
            out.extend(sublst)
        elif elt is not None:
            out.append(elt)
    return out

# --------------------------------------------------------------------------------

def get_lineno(tree):
    """Extract the source line number from `tree`.

    `tree`: AST node or list of AST nodes. Searched recursively (depth first)
    until a `lineno` attribute is found.

    If no `lineno` attribute is found anywhere inside `tree`, the return value is `None`.
    """
    if hasattr(tree, "lineno"):
        return tree.lineno
    elif isinstance(tree, ast.AST):
        for fieldname, node in ast.iter_fields(tree):
            lineno = get_lineno(node)
            if lineno:
                return lineno
    elif isinstance(tree, list):
        for node in tree:
            lineno = get_lineno(node)
            if lineno:
                return lineno
    return None


def format_location(filename, tree, sourcecode):
    """Format a source code location in a standard way, for error messages.

    `filename`: full path to `.py` file.
    `tree`: AST node to get source line number from. (Looks inside automatically if needed.)
    `sourcecode`: source code of `tree`, or `None` to omit it.

    Return value is an `str` containing colored text, suitable for terminal output.
    Example outputs for single-line and multiline source code::

        /path/to/slopes.py:42: stringify(a + b)

        /path/to/slopes.py:7:
        @slope_subset
        class Slope(Enum):
            ...
    """
    if sourcecode:
        sep = " " if "\n" not in sourcecode else "\n"
        source_with_sep = f"{sep}{sourcecode}"
    else:
        source_with_sep = ""

    return f'{colorize(filename, ColorScheme.SOURCEFILENAME)}:{get_lineno(tree)}:{source_with_sep}'


def format_macrofunction(function):
    """Format the fully qualified name of a macro function, for error messages."""
    if not (hasattr(function, "__module__") and hasattr(function, "__qualname__")):
        return repr(function)
    if not function.__module__:
        return function.__qualname__
    return f"{function.__module__}.{function.__qualname__}"
