# -*- coding: utf-8 -*-
"""Test the AST node builders."""

import ast

from ..builders import (check_identifier, classmethod_def, constant, dotted, match,
                        name, parameter, return_, safe_identifier, tuple_of,
                        value_case, wildcard_case)
from ..unparser import unparse


def test_identifiers():
    assert check_identifier("slope") == "slope"
    assert check_identifier("match") == "match"  # soft keyword
    for invalid in ("class", "1x", "", "a b", None):
        try:
            check_identifier(invalid)
        except ValueError:
            pass
        else:
            assert False, invalid

    assert safe_identifier("slope") == "slope"
    assert safe_identifier("if") == "if_"
    assert safe_identifier("class") == "class_"
    assert safe_identifier("match") == "match"


def test_expressions():
    assert unparse(name("x")) == "x"
    assert type(name("x").ctx) is ast.Load
    assert type(name("x", ast.Store()).ctx) is ast.Store
    assert unparse(dotted("cls", "expert")) == "cls.expert"
    assert unparse(dotted("a", "b", "c")) == "a.b.c"
    assert unparse(tuple_of(name("a"), constant("a"))) == "(a, 'a')"
    assert unparse(constant(None)) == "None"
    try:
        constant([1, 2])
    except TypeError:
        pass
    else:
        assert False
    try:
        dotted("cls", "not valid")
    except ValueError:
        pass
    else:
        assert False


def test_match():
    try:
        match(name("x"), [])
    except ValueError:
        pass
    else:
        assert False
    try:
        value_case(name("x"), [return_()])
    except TypeError:
        pass
    else:
        assert False

    tree = match(name("x"), [value_case(dotted("C", "a"), [return_(constant(1))]),
                             wildcard_case([return_(constant(None))])])
    expected = "match x:\n    case C.a:\n        return 1\n    case _:\n        return None"
    assert unparse(tree) == expected


def test_classmethod_compiles():
    method = classmethod_def("make",
                             [parameter("cls"), parameter("x", annotation=constant("int"))],
                             [return_(tuple_of(name("cls"), name("x")))],
                             returns=constant("tuple"))
    assert unparse(method) == "@classmethod\ndef make(cls, x: 'int') -> 'tuple':\n    return (cls, x)"
    assert getattr(method, "lineno", None) is None  # unparsing does not modify the tree

    module = ast.parse("class C:\n    pass\n")
    module.body[0].body = [method]
    ast.fix_missing_locations(module)
    namespace = {}
    exec(compile(module, "<test>", "exec"), namespace)
    C = namespace["C"]
    assert C.make(1) == (C, 1)


def runtests():
    test_identifiers()
    test_expressions()
    test_match()
    test_classmethod_compiles()

if __name__ == '__main__':
    runtests()
