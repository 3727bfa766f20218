# -*- coding: utf-8; -*-
"""Macro capabilities, and the registry that maps macro names to implementations.

A macro implementation is a plain function, tagged with the expansion protocol
it implements:

 - `@expressionmacro`: invoked as `name(arg, ...)` in an expression position.
   Receives a `MacroInvocation`, returns one expression AST node.
 - `@membermacro`: invoked as a decorator `@name` on a declaration.
   Receives the declaration, returns a list of new member declarations
   to be appended to the body of that declaration.

A `Registry` maps names to such functions. It is built once and never edited;
the expander consults it once per invocation site.
"""

__all__ = ["EXPRESSION", "MEMBER",
           "expressionmacro", "membermacro",
           "macrokind", "macroarity",
           "Registry"]

from collections.abc import Mapping
from keyword import iskeyword
from types import MappingProxyType

from .core import EXPRESSION, MEMBER, MacroCapabilityError, MacroResolutionError
from .utils import format_macrofunction


def expressionmacro(function=None, *, arity=None):
    """Decorator. Declare a macro function as an expression macro.

    Usage::

        @expressionmacro
        def mymacro(invocation, *, context, **kw):
            ...

        @expressionmacro(arity=1)
        def mymacro(invocation, *, context, **kw):
            ...

    If `arity` is given, the expander rejects any invocation with a different
    number of arguments, before the macro function gets control.

    This must be the outermost decorator.
    """
    if arity is not None and (not isinstance(arity, int) or arity < 0):
        raise ValueError(f"`arity` must be a non-negative int, got {repr(arity)}")
    def declare(function):
        function._macrokind = EXPRESSION
        function._macroarity = arity
        return function
    if function is None:
        return declare
    return declare(function)

def membermacro(function):
    """Decorator. Declare a macro function as a member macro.

    Usage::

        @membermacro
        def mymacro(declaration, *, attribute, context, **kw):
            ...
            return [new_member, ...]

    This must be the outermost decorator.
    """
    function._macrokind = MEMBER
    return function

def macrokind(function):
    """Return the capability tag of `function` (`EXPRESSION` or `MEMBER`), or `None`."""
    return getattr(function, "_macrokind", None)

def macroarity(function):
    """Return the declared arity of the expression macro `function`, or `None` if not declared."""
    return getattr(function, "_macroarity", None)

# --------------------------------------------------------------------------------

class Registry(Mapping):
    """Immutable mapping of macro name to macro implementation.

    `macros` is a mapping, or an iterable of `(name, function)` pairs, which
    is read exactly once, in order.

    Example::

        registry = Registry([("stringify", stringify),
                             ("slope_subset", slope_subset)])
        macro = registry.resolve("stringify", EXPRESSION)
    """
    def __init__(self, macros=()):
        if isinstance(macros, Mapping):
            macros = macros.items()
        table = {}
        for name, function in macros:
            if not (isinstance(name, str) and name.isidentifier() and not iskeyword(name)):
                raise ValueError(f"macro name must be a valid identifier, got {repr(name)}")
            if macrokind(function) not in (EXPRESSION, MEMBER):
                raise TypeError(f"'{name}': {format_macrofunction(function)} is not declared as a macro; use `@expressionmacro` or `@membermacro`")
            if name in table and table[name] is not function:
                raise ValueError(f"macro name '{name}' bound to both {format_macrofunction(table[name])} and {format_macrofunction(function)}")
            table[name] = function
        self._table = MappingProxyType(table)

    def __getitem__(self, name):
        return self._table[name]
    def __iter__(self):
        return iter(self._table)
    def __len__(self):
        return len(self._table)

    def __eq__(self, other):
        if isinstance(other, Registry):
            return dict(self._table) == dict(other._table)
        return NotImplemented
    __hash__ = None

    def __repr__(self):  # pragma: no cover
        bindings = ", ".join(f"{name}={format_macrofunction(function)}" for name, function in self._table.items())
        return f"Registry({bindings})"

    def kind(self, name):
        """Return the capability tag of the macro bound to `name`, or `None` if unbound."""
        if name not in self._table:
            return None
        return macrokind(self._table[name])

    def resolve(self, name, syntax):
        """Return the implementation for an invocation of `name` in form `syntax`.

        `syntax` is `EXPRESSION` for a call, `MEMBER` for an attached decorator.

        Raises `MacroResolutionError` if `name` is not bound, and
        `MacroCapabilityError` if it is bound to a macro of the other kind.
        """
        try:
            function = self._table[name]
        except KeyError:
            err = MacroResolutionError(f"the name '{name}' is not bound to a macro")
            err.__suppress_context__ = True
            raise err
        kind = macrokind(function)
        if kind != syntax:
            raise MacroCapabilityError(f"'{name}' is bound to the {kind} macro {format_macrofunction(function)}, which cannot be invoked as a {syntax} macro")
        return function

    def extended(self, macros):
        """Return a new `Registry` with the bindings of this one plus `macros`.

        `macros` is as in the constructor. This registry is not modified.
        """
        if isinstance(macros, Mapping):
            macros = macros.items()
        return Registry(list(self._table.items()) + list(macros))
