# -*- coding: utf-8; -*-
"""Test support for macro authors.

Usage::

    from c3pmacro.testing import assert_macro_expansion
    from c3pmacro.macros import stringify

    def test_stringify():
        assert_macro_expansion("stringify(a + b)",
                               "(a + b, 'a + b')",
                               macros={"stringify": stringify})

Both sides are compared as normalized source code (parsed, then unparsed),
so whitespace and quoting style in the expected source do not matter.
"""

__all__ = ["assert_macro_expansion"]

import ast
from textwrap import dedent

from .core import MacroDiagnosticError
from .expander import expand_macros
from .registry import Registry
from .unparser import unparse


def _normalize(source):
    return unparse(ast.parse(dedent(source)))


def assert_macro_expansion(source, expanded_source=None, *, macros, diagnostics=None, filename="<test>"):
    """Expand `source` with `macros` in scope, and check the result.

    `macros`:          `Registry`, or a dict of macro name/function pairs.
                       No macro-import is needed in `source`.

    `expanded_source`: the expected expansion, as source code.

    `diagnostics`:     instead of `expanded_source`, a list of the
                       `(message, lineno)` pairs of the errors expansion
                       is expected to fail with, in order.

    Exactly one of `expanded_source` and `diagnostics` must be given.
    Line numbers refer to `source` after dedenting.

    Return value is the expanded tree (when checking `expanded_source`),
    or the `MacroDiagnosticError` (when checking `diagnostics`).
    """
    if (expanded_source is None) == (diagnostics is None):
        raise TypeError("give exactly one of `expanded_source` and `diagnostics`")
    if not isinstance(macros, Registry):
        macros = Registry(macros)

    source = dedent(source)
    tree = ast.parse(source, filename=filename)

    if diagnostics is not None:
        try:
            expand_macros(tree, macros, filename=filename, source=source)
        except MacroDiagnosticError as err:
            got = [(diagnostic.message, diagnostic.lineno) for diagnostic in err.diagnostics]
            expected = list(diagnostics)
            assert got == expected, f"expected diagnostics {expected}, got {got}"
            return err
        raise AssertionError(f"expected expansion to fail with diagnostics {list(diagnostics)}, but it succeeded")

    expansion = expand_macros(tree, macros, filename=filename, source=source)
    got = unparse(expansion)
    expected = _normalize(expanded_source)
    assert got == expected, f"expansion mismatch\n--- expected ---\n{expected}\n--- got ---\n{got}"
    return expansion
