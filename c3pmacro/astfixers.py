# -*- coding: utf-8; -*-
"""Fix source location info in macro output."""

__all__ = ["fix_locations"]

from ast import iter_child_nodes

_positions = ("lineno", "col_offset", "end_lineno", "end_col_offset")


def _location(node):
    """Return the source range of `node` as a 4-tuple, see `_positions`.

    An absent end position is taken to be the start position.
    """
    end_lineno = getattr(node, "end_lineno", None)
    end_col_offset = getattr(node, "end_col_offset", None)
    if end_lineno is None or end_col_offset is None:
        return (node.lineno, node.col_offset, node.lineno, node.col_offset)
    return (node.lineno, node.col_offset, end_lineno, end_col_offset)


def _setlocation(node, location):
    for attr, value in zip(_positions, location):
        setattr(node, attr, value)


def fix_locations(tree, reference_node, *, mode):
    """Like `ast.fix_missing_locations`, but customized for a macro expander.

    Differences:

      - If `reference_node` has no source location info, return immediately (no-op).
      - If `tree is None`, return immediately (no-op).
      - If `tree` is a `list` of AST nodes, loop over it.

    The `mode` parameter:

      - If `mode="reference"`, populate any missing location info by
        copying it from `reference_node`. Always use the same reference info.

        Good when expanding a macro invocation, to set the source location
        of any macro-generated nodes to that of the macro invocation node.

      - If `mode="update"`, behave exactly like `ast.fix_missing_locations`,
        except that at the top level of `tree`, initialize the location
        from `reference_node`.

      - If `mode="overwrite"`, copy location info from `reference_node`,
        regardless of if the target node already has it.

    Both the start and the end positions are filled in. Pattern nodes in a
    `match` statement cannot be compiled without their end positions. If
    `reference_node` has no end position, its start position is used.

    Modifies `tree` in-place. For convenience, returns the modified `tree`.
    """
    if mode not in ("reference", "update", "overwrite"):
        raise ValueError(f"unknown mode {repr(mode)}")
    if not (hasattr(reference_node, "lineno") and hasattr(reference_node, "col_offset")):
        return tree
    def _fix(tree, location):
        if tree is None:
            return
        if isinstance(tree, list):
            for elt in tree:
                _fix(elt, location)
            return
        if "lineno" in tree._attributes:
            if mode == "overwrite":
                _setlocation(tree, location)
            elif getattr(tree, "lineno", None) is None or getattr(tree, "col_offset", None) is None:
                _setlocation(tree, location)
            else:
                # A node with a start but no end is treated as empty.
                _setlocation(tree, _location(tree))
                if mode == "update":
                    location = _location(tree)
        for child in iter_child_nodes(tree):
            _fix(child, location)
    _fix(tree, _location(reference_node))
    return tree
