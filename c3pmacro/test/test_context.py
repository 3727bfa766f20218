# -*- coding: utf-8 -*-
"""Test the per-invocation expansion context."""

import ast

from ..context import ERROR, WARNING, Diagnostic, ExpansionContext, MacroInvocation
from ..utils import scrub_uuid


def test_diagnostics():
    source = "x = 1\nif x:\n    y = 2\n"
    tree = ast.parse(source)
    context = ExpansionContext("mymacro", "<test>", source)
    context.error(tree.body[1].body[0], "bad")
    context.warning(tree.body[0], "meh")

    assert [d.severity for d in context.diagnostics] == [ERROR, WARNING]
    assert len(context.errors) == 1
    assert len(context.warnings) == 1

    error = context.errors[0]
    assert error.lineno == 3
    assert error.col_offset == 4
    assert error.format() == "<test>:3:5: error: bad"
    assert str(context.warnings[0]) == "<test>:1:1: warning: meh"
    # colorized output carries the same text
    assert "error" in error.format(color=True)


def test_diagnostic_without_location():
    diagnostic = Diagnostic(ERROR, "somewhere", ast.Name(id="x", ctx=ast.Load()), "<test>")
    assert diagnostic.lineno is None
    assert diagnostic.format() == "<test>:None: error: somewhere"


def test_invalid_severity():
    try:
        Diagnostic("fatal", "oops", None, "<test>")
    except ValueError:
        pass
    else:
        assert False


def test_closed_context():
    tree = ast.parse("x = 1")
    context = ExpansionContext("mymacro", "<test>")
    assert not context.closed
    context.close()
    assert context.closed
    for report in (context.error, context.warning):
        try:
            report(tree.body[0], "too late")
        except RuntimeError:
            pass
        else:
            assert False
    assert context.diagnostics == []


def test_gensym():
    context = ExpansionContext("mymacro", "<test>")
    a = context.gensym("cls")
    b = context.gensym("cls")
    assert a != b
    assert a.isidentifier()
    assert a.startswith("cls_")
    assert scrub_uuid(a) == "cls"


def test_source_text():
    # Escapes and f-string placeholders are kept exactly as written.
    source = 'greet(f"Hello, {name}!\\n", \'it\\\'s\')'
    tree = ast.parse(source)
    fstring, plain = tree.body[0].value.args
    context = ExpansionContext("greet", "<test>", source)
    assert context.source_text(fstring) == 'f"Hello, {name}!\\n"'
    assert context.source_text(plain) == "'it\\'s'"

    # spacing too
    source = "f(a  +   b)"
    tree = ast.parse(source)
    context = ExpansionContext("f", "<test>", source)
    assert context.source_text(tree.body[0].value.args[0]) == "a  +   b"


def test_source_text_parentheses():
    # Parentheses around an argument are part of its spelling; those of the call are not.
    source = "f((a + b), ( c ),\n  d)"
    call = ast.parse(source).body[0].value
    first, second, third = call.args
    context = ExpansionContext("f", "<test>", source)
    assert context.source_text(first) == "a + b"
    assert context.source_text(first, call=call) == "(a + b)"
    assert context.source_text(second, call=call) == "( c )"
    assert context.source_text(third, call=call) == "d"

    # column offsets count bytes, not characters
    source = "g('é', (x))"
    call = ast.parse(source).body[0].value
    context = ExpansionContext("g", "<test>", source)
    assert context.source_text(call.args[1], call=call) == "(x)"


def test_source_text_fallback():
    # Without source text, or for a node with no location info, we unparse.
    tree = ast.parse("a  +  b")
    context = ExpansionContext("f", "<test>")
    assert context.source_text(tree.body[0].value) == "a + b"

    context = ExpansionContext("f", "<test>", "a  +  b")
    generated = ast.BinOp(left=ast.Name(id="x", ctx=ast.Load()), op=ast.Mult(), right=ast.Constant(value=2))
    assert context.source_text(generated) == "x * 2"


def test_invocation():
    tree = ast.parse("stringify(a, b)")
    call = tree.body[0].value
    invocation = MacroInvocation("stringify", call, call.args)
    assert invocation.name == "stringify"
    assert invocation.node is call
    assert [arg.id for arg in invocation.arguments] == ["a", "b"]
    assert invocation.arguments is not call.args


def runtests():
    test_diagnostics()
    test_diagnostic_without_location()
    test_invalid_severity()
    test_closed_context()
    test_gensym()
    test_source_text()
    test_source_text_parentheses()
    test_source_text_fallback()
    test_invocation()

if __name__ == '__main__':
    runtests()
