# -*- coding: utf-8; -*-
"""Build AST nodes programmatically, for macro output.

Macros build their output node by node instead of filling in source code
templates and re-parsing them. Every identifier that goes into a node is
checked here, so a macro cannot emit a name that Python would refuse to
compile.

Location info is left out; the expander fills it in from the invocation site.
"""

__all__ = ["check_identifier", "safe_identifier",
           "name", "dotted", "constant", "tuple_of",
           "parameter", "classmethod_def",
           "match", "value_case", "wildcard_case", "return_"]

import ast
from keyword import iskeyword


def check_identifier(identifier):
    """Raise `ValueError` unless `identifier` can be used as a Python name. Return it."""
    if not (isinstance(identifier, str) and identifier.isidentifier()) or iskeyword(identifier):
        raise ValueError(f"not a valid identifier: {repr(identifier)}")
    return identifier


def safe_identifier(identifier):
    """Turn `identifier` into a valid name by appending `_` if it is a keyword.

    `class` -> `class_`, `if` -> `if_`. Soft keywords (`match`, `case`, `_`,
    `type`) are valid names, and are returned as-is.
    """
    if iskeyword(identifier):
        identifier = identifier + "_"
    return check_identifier(identifier)


def name(identifier, ctx=None):
    """`identifier`, as an `ast.Name` in load context (unless `ctx` is given)."""
    return ast.Name(id=check_identifier(identifier), ctx=ctx or ast.Load())


def dotted(first, *attrs):
    """`first.attr0.attr1...`, as nested `ast.Attribute` nodes in load context."""
    tree = name(first)
    for attr in attrs:
        tree = ast.Attribute(value=tree, attr=check_identifier(attr), ctx=ast.Load())
    return tree


def constant(value):
    """A literal; `str`, `bytes`, `int`, `float`, `complex`, `bool`, `None` or `...`."""
    if not isinstance(value, (str, bytes, int, float, complex, bool, type(None), type(...))):
        raise TypeError(f"cannot make a constant out of {type(value)} with value {repr(value)}")
    return ast.Constant(value=value)


def tuple_of(*elts):
    """`(elt0, elt1, ...)`, in load context."""
    return ast.Tuple(elts=list(elts), ctx=ast.Load())


def parameter(identifier, annotation=None):
    """A function parameter, optionally annotated with the expression `annotation`."""
    return ast.arg(arg=check_identifier(identifier), annotation=annotation)


def classmethod_def(identifier, params, body, returns=None):
    """`@classmethod def identifier(params): body`.

    `params` is a list of `parameter` nodes, including the class parameter.
    """
    node = ast.FunctionDef(name=check_identifier(identifier),
                           args=ast.arguments(posonlyargs=[], args=list(params), vararg=None,
                                              kwonlyargs=[], kw_defaults=[], kwarg=None,
                                              defaults=[]),
                           body=list(body),
                           decorator_list=[name("classmethod")],
                           returns=returns)
    if "type_params" in ast.FunctionDef._fields:  # Python 3.12+
        node.type_params = []
    return node


def match(subject, cases):
    """`match subject:` with the given `match_case` nodes, in order."""
    if not cases:
        raise ValueError("a match statement needs at least one case")
    return ast.Match(subject=subject, cases=list(cases))


def value_case(value, body):
    """`case value: body`, where `value` is a dotted name (a value pattern)."""
    if type(value) is not ast.Attribute:
        raise TypeError(f"value patterns must be dotted names, got {ast.dump(value)}")
    return ast.match_case(pattern=ast.MatchValue(value=value), guard=None, body=list(body))


def wildcard_case(body):
    """`case _: body`."""
    return ast.match_case(pattern=ast.MatchAs(pattern=None, name=None), guard=None, body=list(body))


def return_(value=None):
    """`return value`."""
    return ast.Return(value=value)
