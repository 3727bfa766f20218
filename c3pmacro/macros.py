# -*- coding: utf-8; -*-
"""The macros provided by `c3pmacro`.

Usage::

    from c3pmacro.macros import macros, stringify, slope_subset

    value, code = stringify(x + y)  # --> (x + y, "x + y")

    @slope_subset
    class Slope(Enum):
        beginnerEasy = auto()
        intermediate = auto()
        expert = auto()

    Slope.from_slope(Slope.expert)  # --> Slope.expert
"""

__all__ = ["stringify", "slope_subset",
           "isenumdecl", "enum_case_names", "lowercase_first"]

import ast

from .builders import (classmethod_def, constant, dotted, match, name, parameter,
                       return_, safe_identifier, tuple_of, value_case, wildcard_case)
from .core import InternalConsistencyError
from .registry import expressionmacro, membermacro


@expressionmacro(arity=1)
def stringify(invocation, *, context, **kw):
    """[syntax, expr] Produce both a value and the source code that produced it.

    Usage::

        stringify(x + y)

    expands to::

        (x + y, "x + y")

    The string is the argument exactly as it is spelled in the source, so e.g.
    `stringify(f"Hello, {name}")` gives `(f"Hello, {name}", 'f"Hello, {name}"')`;
    the placeholder is not evaluated in the string part.
    Parentheses around the argument are part of its spelling, so
    `stringify((a + b))` gives `'(a + b)'`.
    """
    if not invocation.arguments:
        raise InternalConsistencyError("compiler bug: the macro does not have any arguments")
    argument = invocation.arguments[0]
    return tuple_of(argument, constant(context.source_text(argument, call=invocation.node)))

# --------------------------------------------------------------------------------

_enum_bases = {"Enum", "IntEnum", "StrEnum", "Flag", "IntFlag", "ReprEnum"}
_enum_metaclasses = {"EnumMeta", "EnumType"}

def _lastname(tree):
    """`Enum` -> "Enum", `enum.Enum` -> "Enum", anything else -> `None`."""
    if type(tree) is ast.Name:
        return tree.id
    if type(tree) is ast.Attribute:
        return tree.attr
    return None

def isenumdecl(tree):
    """Return whether `tree` is a class statement that syntactically defines an enum.

    That is, it has one of the standard enum classes as a base, or an enum
    metaclass. Enums derived from a user-defined enum base class cannot be
    told apart from regular classes at this level, and are not detected.
    """
    if type(tree) is not ast.ClassDef:
        return False
    if any(_lastname(base) in _enum_bases for base in tree.bases):
        return True
    return any(kw.arg == "metaclass" and _lastname(kw.value) in _enum_metaclasses
               for kw in tree.keywords)

def _is_dunder(identifier):
    return (len(identifier) > 4 and identifier[:2] == identifier[-2:] == "__" and
            identifier[2] != "_" and identifier[-3] != "_")

def _is_sunder(identifier):
    return (len(identifier) > 2 and identifier[0] == identifier[-1] == "_" and
            identifier[1] != "_" and identifier[-2] != "_")

def _is_private(classname, identifier):
    # `__x` in the body of class `C` is mangled to `_C__x`.
    if identifier.startswith("__") and not identifier.endswith("__"):
        identifier = f"_{classname.lstrip('_')}{identifier}"
    prefix = f"_{classname}__"
    return (len(identifier) > len(prefix) and identifier.startswith(prefix) and
            not identifier.endswith("__"))

_descriptor_factories = {"property", "classmethod", "staticmethod", "nonmember"}

def _is_descriptor(value):
    """Return whether the expression `value` syntactically creates a descriptor."""
    if type(value) is ast.Lambda:
        return True
    return type(value) is ast.Call and _lastname(value.func) in _descriptor_factories

def _ignored_names(enumdecl):
    """The names listed in a literal `_ignore_` of `enumdecl`."""
    names = set()
    for statement in enumdecl.body:
        if type(statement) is ast.Assign and any(type(t) is ast.Name and t.id == "_ignore_" for t in statement.targets):
            value = statement.value
            if type(value) is ast.Constant and isinstance(value.value, str):
                names.update(value.value.replace(",", " ").split())
            elif type(value) in (ast.List, ast.Tuple):
                names.update(elt.value for elt in value.elts
                             if type(elt) is ast.Constant and isinstance(elt.value, str))
    return names

def enum_case_names(enumdecl):
    """Return the names of the members defined in the body of `enumdecl`, in source order.

    The same names that `enum` makes into members: values are ignored, except
    that a `lambda` or a `property(...)`, `classmethod(...)`, `staticmethod(...)`
    or `nonmember(...)` call is a descriptor, not a member. Dunder, sunder and
    private (`__x`, `_Name__x`) names are not members, nor are the names listed in a literal
    `_ignore_`. A single leading underscore is fine.
    """
    ignored = _ignored_names(enumdecl)
    names = []
    def add(target):
        if type(target) is ast.Name:
            identifier = target.id
            if (_is_dunder(identifier) or _is_sunder(identifier) or _is_private(enumdecl.name, identifier) or
                    identifier in ignored or identifier in names):
                return
            names.append(identifier)
        elif type(target) in (ast.Tuple, ast.List):
            for elt in target.elts:
                add(elt)
    for statement in enumdecl.body:
        if type(statement) is ast.Assign:
            if _is_descriptor(statement.value):
                continue
            for target in statement.targets:
                add(target)
        elif type(statement) is ast.AnnAssign and statement.value is not None:
            if not _is_descriptor(statement.value):
                add(statement.target)
    return names

def lowercase_first(identifier):
    """`Slope` -> `slope`, `HTTPCode` -> `hTTPCode`."""
    return identifier[:1].lower() + identifier[1:]

def _defines(classdef, identifier):
    for statement in classdef.body:
        if type(statement) in (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef) and statement.name == identifier:
            return True
        if type(statement) is ast.Assign and any(type(t) is ast.Name and t.id == identifier for t in statement.targets):
            return True
        if type(statement) is ast.AnnAssign and type(statement.target) is ast.Name and statement.target.id == identifier:
            return True
    return False

def _describe(declaration):
    if type(declaration) is ast.ClassDef:
        return f"class '{declaration.name}', which is not an Enum"
    if type(declaration) in (ast.FunctionDef, ast.AsyncFunctionDef):
        return f"function '{declaration.name}'"
    return type(declaration).__name__  # pragma: no cover


@membermacro
def slope_subset(declaration, *, context, **kw):
    """[syntax, member] Add a failable initializer to an enum.

    Usage::

        @slope_subset
        class Slope(Enum):
            beginnerEasy = auto()
            expert = auto()

    adds to the class body::

        @classmethod
        def from_slope(cls, slope: 'Slope') -> 'Slope | None':
            match slope:
                case cls.beginnerEasy:
                    return cls.beginnerEasy
                case cls.expert:
                    return cls.expert
                case _:
                    return None

    The parameter name is the class name with its first letter lower-cased.
    Any value that is not one of the enum's members gives `None`.

    Attaching this to anything other than an enum is an error.
    """
    if not isenumdecl(declaration):
        context.error(declaration, f"'{context.macroname}' can only be attached to an enum declaration, not to {_describe(declaration)}")
        return []

    typename = declaration.name
    paramname = safe_identifier(lowercase_first(typename))
    clsname = "cls" if paramname != "cls" else context.gensym("cls")
    methodname = f"from_{lowercase_first(typename)}"

    if _defines(declaration, methodname):
        context.warning(declaration, f"'{typename}' already defines '{methodname}'; the one generated by '{context.macroname}' replaces it")

    cases = [value_case(dotted(clsname, case), [return_(dotted(clsname, case))])
             for case in enum_case_names(declaration)]
    cases.append(wildcard_case([return_(constant(None))]))

    initializer = classmethod_def(methodname,
                                  [parameter(clsname),
                                   parameter(paramname, annotation=constant(typename))],
                                  [match(name(paramname), cases)],
                                  returns=constant(f"{typename} | None"))
    return [initializer]
