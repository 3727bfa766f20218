# -*- coding: utf-8 -*-
"""Test the `slope_subset` member macro."""

import ast
import warnings
from textwrap import dedent

from ..compiler import run, temporary_module
from ..core import MacroCapabilityError, MacroDiagnosticError
from ..expander import expand_macros
from ..macros import enum_case_names, isenumdecl, lowercase_first, slope_subset
from ..testing import assert_macro_expansion
from ..utils import scrub_uuid

macros = {"slope_subset": slope_subset}


def test_expansion():
    source = """\
    @slope_subset
    class Slope(Enum):
        beginnerEasy = auto()
        intermediate = auto()
        expert = auto()
    """
    expected = """\
    class Slope(Enum):
        beginnerEasy = auto()
        intermediate = auto()
        expert = auto()

        @classmethod
        def from_slope(cls, slope: 'Slope') -> 'Slope | None':
            match slope:
                case cls.beginnerEasy:
                    return cls.beginnerEasy
                case cls.intermediate:
                    return cls.intermediate
                case cls.expert:
                    return cls.expert
                case _:
                    return None
    """
    assert_macro_expansion(source, expected, macros=macros)
    # called form of the decorator
    assert_macro_expansion(source.replace("@slope_subset", "@slope_subset()"), expected, macros=macros)


def test_no_cases():
    source = """\
    @slope_subset
    class Empty(enum.Enum):
        pass
    """
    expected = """\
    class Empty(enum.Enum):
        pass

        @classmethod
        def from_empty(cls, empty: 'Empty') -> 'Empty | None':
            match empty:
                case _:
                    return None
    """
    assert_macro_expansion(source, expected, macros=macros)


def test_parameter_name():
    assert lowercase_first("Slope") == "slope"
    assert lowercase_first("HTTPCode") == "hTTPCode"
    assert lowercase_first("x") == "x"

    source = """\
    @slope_subset
    class HTTPCode(IntEnum):
        ok = 200
    """
    expected = """\
    class HTTPCode(IntEnum):
        ok = 200

        @classmethod
        def from_hTTPCode(cls, hTTPCode: 'HTTPCode') -> 'HTTPCode | None':
            match hTTPCode:
                case cls.ok:
                    return cls.ok
                case _:
                    return None
    """
    assert_macro_expansion(source, expected, macros=macros)

    # a keyword gets a trailing underscore
    source = """\
    @slope_subset
    class If(Enum):
        then = 1
    """
    expected = """\
    class If(Enum):
        then = 1

        @classmethod
        def from_if(cls, if_: 'If') -> 'If | None':
            match if_:
                case cls.then:
                    return cls.then
                case _:
                    return None
    """
    assert_macro_expansion(source, expected, macros=macros)


def test_class_parameter_renamed_on_clash():
    source = dedent("""\
    @slope_subset
    class Cls(Enum):
        a = 1
    """)
    tree = expand_macros(ast.parse(source), macros, filename="<test>", source=source)
    method = tree.body[0].body[-1]
    clsparam, param = [arg.arg for arg in method.args.args]
    assert param == "cls"
    assert clsparam != "cls"
    assert scrub_uuid(clsparam) == "cls"

    with temporary_module("slope_subset_cls_test_module") as module:
        run(f"from enum import Enum\n{ast.unparse(tree)}", module)
        assert module.Cls.from_cls(module.Cls.a) is module.Cls.a
        assert module.Cls.from_cls(1) is None


def test_enum_detection():
    def classdef(source):
        return ast.parse(source).body[0]
    assert isenumdecl(classdef("class A(Enum): pass"))
    assert isenumdecl(classdef("class A(enum.IntEnum): pass"))
    assert isenumdecl(classdef("class A(str, Enum): pass"))
    assert isenumdecl(classdef("class A(StrEnum): pass"))
    assert isenumdecl(classdef("class A(Flag): pass"))
    assert isenumdecl(classdef("class A(metaclass=EnumMeta): pass"))
    assert not isenumdecl(classdef("class A: pass"))
    assert not isenumdecl(classdef("class A(Base): pass"))
    assert not isenumdecl(classdef("class A(metaclass=ABCMeta): pass"))
    assert not isenumdecl(classdef("def Enum(): pass"))


def test_case_names():
    enumdecl = ast.parse("""\
class Color(Enum):
    '''Colors.'''
    _ignore_ = ["tmp"]
    red = 1
    green: int = 2
    blue, cyan = 3, 4
    magenta = yellow = 5
    red = 6
    label: str
    __private = 7
    _Color__mangled = 8
    __dunder__ = 9
    _sunder_ = 10
    _hidden = 11
    tmp = 12
    shout = lambda self: self.name.upper()
    loud = property(lambda self: self.name)
    def describe(self):
        return self.name
    class Nested:
        pass
""").body[0]
    assert enum_case_names(enumdecl) == ["red", "green", "blue", "cyan", "magenta", "yellow", "_hidden"]

    enumdecl = ast.parse("""\
class Letter(Enum):
    _ignore_ = "x, y"
    x = 1
    y = 2
    z = 3
""").body[0]
    assert enum_case_names(enumdecl) == ["z"]


def test_not_an_enum():
    source = """\
    @slope_subset
    class Point:
        x = 1
    """
    assert_macro_expansion(source,
                           diagnostics=[("'slope_subset' can only be attached to an enum declaration, not to class 'Point', which is not an Enum", 2)],
                           macros=macros)

    source = """\
    @slope_subset
    def f():
        pass
    """
    assert_macro_expansion(source,
                           diagnostics=[("'slope_subset' can only be attached to an enum declaration, not to function 'f'", 2)],
                           macros=macros)

    # The message names the macro as it is bound at the use site.
    source = """\
    @only_slopes
    class Point:
        x = 1
    """
    assert_macro_expansion(source,
                           diagnostics=[("'only_slopes' can only be attached to an enum declaration, not to class 'Point', which is not an Enum", 2)],
                           macros={"only_slopes": slope_subset})


def test_not_an_expression_macro():
    try:
        assert_macro_expansion("x = slope_subset(Slope)", "None", macros=macros)
    except MacroCapabilityError as err:
        assert "slope_subset" in str(err)
    else:
        assert False


def test_already_defined():
    source = """\
    @slope_subset
    class Slope(Enum):
        a = 1
        @classmethod
        def from_slope(cls, slope):
            return "old"
    """
    expected = """\
    class Slope(Enum):
        a = 1
        @classmethod
        def from_slope(cls, slope):
            return "old"

        @classmethod
        def from_slope(cls, slope: 'Slope') -> 'Slope | None':
            match slope:
                case cls.a:
                    return cls.a
                case _:
                    return None
    """
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        tree = assert_macro_expansion(source, expected, macros=macros)
    messages = [str(w.message) for w in caught if issubclass(w.category, SyntaxWarning)]
    assert len(messages) == 1
    assert "already defines 'from_slope'" in messages[0]

    # the generated one is defined last, so it wins
    with temporary_module("slope_subset_redefine_test_module") as module:
        run(f"from enum import Enum\n{ast.unparse(tree)}", module)
        assert module.Slope.from_slope(module.Slope.a) is module.Slope.a

    # an annotated assignment defines the name, too
    source = dedent("""\
    @slope_subset
    class Slope(Enum):
        a = 1
        from_slope: Callable = None
    """)
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        expand_macros(ast.parse(source), macros, filename="<test>", source=source)
    messages = [str(w.message) for w in caught if issubclass(w.category, SyntaxWarning)]
    assert len(messages) == 1
    assert "already defines 'from_slope'" in messages[0]


def test_run():
    source = """\
from enum import Enum, IntEnum, auto

@slope_subset
class Slope(Enum):
    beginnerEasy = auto()
    intermediate = auto()
    expert = auto()

@slope_subset
class Other(Enum):
    expert = 3

@slope_subset
class Outer:
    @slope_subset
    class Inner(IntEnum):
        one = 1
"""
    try:
        run(source, registry=macros)
    except MacroDiagnosticError as err:
        # `Outer` is not an enum; the nested enum alone would be fine.
        assert "Outer" in str(err)
    else:
        assert False

    source = source[:source.index("@slope_subset\nclass Outer")]
    with temporary_module("slope_subset_run_test_module") as module:
        run(source, module, registry=macros)
        Slope, Other = module.Slope, module.Other
        for case in Slope:
            assert Slope.from_slope(case) is case
        assert Slope.from_slope(Other.expert) is None
        assert Slope.from_slope(3) is None
        assert Slope.from_slope(None) is None
        assert Other.from_other(Other.expert) is Other.expert
        assert Other.from_other(Slope.expert) is None


def test_run_member_rules():
    source = """\
from enum import Enum

@slope_subset
class Slope(Enum):
    _ignore_ = ["tmp"]
    easy = 1
    _hidden = 2
    tmp = 3
    describe = lambda self: self.name

@slope_subset
class Empty(Enum):
    pass
"""
    with temporary_module("slope_subset_members_test_module") as module:
        run(source, module, registry=macros)
        Slope, Empty = module.Slope, module.Empty
        assert [case.name for case in Slope] == ["easy", "_hidden"]
        for case in Slope:
            assert Slope.from_slope(case) is case
        assert Slope.from_slope(3) is None
        assert not hasattr(Slope, "tmp")
        assert Slope.easy.describe() == "easy"

        # no cases at all; every value gives `None`
        assert list(Empty) == []
        assert Empty.from_empty(Slope.easy) is None
        assert Empty.from_empty(None) is None


def runtests():
    test_expansion()
    test_no_cases()
    test_parameter_name()
    test_class_parameter_renamed_on_clash()
    test_enum_detection()
    test_case_names()
    test_not_an_enum()
    test_not_an_expression_macro()
    test_already_defined()
    test_run()
    test_run_member_rules()

if __name__ == '__main__':
    runtests()
