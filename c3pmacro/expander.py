# -*- coding: utf-8; -*-
"""Find and expand macros.

This layer provides the actual macro expander, defining:

 - Syntax for establishing macro bindings::
       from ... import macros, ...

 - Macro invocation types:
   - expression: `macroname(arg0, ...)`
   - member:     `@macroname` or `@macroname()` on a `class` (or `def`) statement
"""

# We use call syntax for expression macros, so an invocation reads the same
# as the function call it replaces. A name only invokes a macro if it has been
# macro-imported (or the caller put it in the registry), so regular calls to
# functions that happen to share a macro's name elsewhere are left alone.

__all__ = ["MacroExpander", "expand_macros", "find_macros"]

from ast import Call, ClassDef, Import, Name, Starred, alias, copy_location

from .context import MacroInvocation
from .core import EXPRESSION, MEMBER, BaseMacroExpander, MacroExpansionError
from .coreutils import get_macros, ismacroimport
from .registry import Registry, macroarity
from .utils import format_location


def _attribute_name(tree):
    """`@macroname` or `@macroname()` -> "macroname"."""
    if type(tree) is Name:
        return tree.id
    return tree.func.id


class MacroExpander(BaseMacroExpander):
    """The actual macro expander."""

    def visit_Call(self, call):
        """Detect an expression macro invocation.

        Detected syntax::

            macroname(arg0, ...)

        Replace the `Call` node with the AST returned by the macro.
        The core controls whether to expand again in the result.
        """
        if not (type(call.func) is Name and call.func.id in self.registry):
            return self.generic_visit(call)
        macroname = call.func.id
        sourcecode = self.source_text(call)
        macro = self.resolve(EXPRESSION, call, macroname)
        self._validate_arguments(call, macroname, macro, sourcecode)
        invocation = MacroInvocation(macroname, call, call.args)
        return self.expand(EXPRESSION, call, macroname, invocation, sourcecode=sourcecode)

    def _validate_arguments(self, call, macroname, macro, sourcecode):
        """Reject argument lists the macro is not prepared to receive."""
        loc = format_location(self.filename, call, sourcecode)
        if call.keywords:
            raise SyntaxError(f"{loc}\nmacro '{macroname}' does not take named arguments")
        if any(type(arg) is Starred for arg in call.args):
            raise SyntaxError(f"{loc}\nunpacking (splatting) not supported in macro argument position")
        arity = macroarity(macro)
        if arity is not None and len(call.args) != arity:
            plural = "s" if arity != 1 else ""
            raise SyntaxError(f"{loc}\nmacro '{macroname}' takes exactly {arity} argument{plural}, {len(call.args)} given")

    def visit_ClassDef(self, classdef):
        return self._visit_Attached(classdef)

    def visit_FunctionDef(self, functiondef):
        return self._visit_Attached(functiondef)

    def visit_AsyncFunctionDef(self, functiondef):
        return self._visit_Attached(functiondef)

    def _visit_Attached(self, declaration):
        """Detect a member macro invocation.

        Detected syntax::

            @macroname
            class C:
                ...
            @macroname()
            class C:
                ...

        The macro gets the declaration (with the invoking decorator removed)
        and returns a list of new members, which are appended to the class
        body, after the original body has been expanded.

        If there are several member macros, the innermost one expands first.
        A member macro attached to a `def` is detected too, so that the macro
        gets to report it.
        """
        attributes = self._detect_attributes(declaration.decorator_list)
        if not attributes:
            return self.generic_visit(declaration)

        new_members = []
        for attribute in reversed(attributes):
            if attribute not in declaration.decorator_list:  # removed by a macro that already ran
                continue
            macroname = _attribute_name(attribute)
            sourcecode = self.source_text(attribute)
            self.resolve(MEMBER, attribute, macroname)
            loc = format_location(self.filename, attribute, sourcecode)
            if type(attribute) is Call and (attribute.args or attribute.keywords):
                raise SyntaxError(f"{loc}\nmember macro '{macroname}' takes no arguments")

            declaration.decorator_list.remove(attribute)
            kw = {"attribute": attribute}
            members = self.expand(MEMBER, attribute, macroname, declaration, sourcecode=sourcecode, kw=kw) or []
            if members and type(declaration) is not ClassDef:
                raise MacroExpansionError(f"{loc}\nin {MEMBER} macro invocation for '{macroname}': members can only be added to a class body, not to a {type(declaration).__name__}")
            new_members.extend(members)

        declaration = self.generic_visit(declaration)
        declaration.body.extend(new_members)
        return declaration

    def _detect_attributes(self, decorator_list):
        """Return the decorators that invoke a macro, in source order.

        A bare `@name` bound to any macro counts (an expression macro there is
        reported as a capability mismatch); `@name(...)` counts only for member
        macros, because an expression macro call is a valid decorator expression.
        """
        out = []
        for decorator in decorator_list:
            if type(decorator) is Name and decorator.id in self.registry:
                out.append(decorator)
            elif (type(decorator) is Call and type(decorator.func) is Name and
                  self.registry.kind(decorator.func.id) == MEMBER):
                out.append(decorator)
        return out

# --------------------------------------------------------------------------------

def expand_macros(tree, registry, *, filename, source=None):
    """Expand `tree` with the macros in `registry`. Top-level entry point.

    Note that while this is a top-level entry point for the **macro** expander,
    expanding macros is only a part of the full import algorithm. See the function
    `c3pmacro.compiler.expand` for the big picture.

    `registry`: `Registry`, or a dict of macro name/function pairs.

    `filename`: str, full path to the `.py` being macroexpanded, for error reporting.
                In interactive use, can be an arbitrary label.

    `source`:   str, the source code `tree` was parsed from, if available.
    """
    if not isinstance(registry, Registry):
        registry = Registry(registry)
    return MacroExpander(registry, filename, source).visit(tree)


def find_macros(tree, *, filename, reload=False, transform=True):
    """Establish macro bindings from `tree`. Top-level entry point.

    Collect bindings from each macro-import statement (`from ... import macros, ...`)
    at the top level of `tree.body`.

    As a side effect, import the macro definition modules. (We must do this in order
    to load the macro function definitions, so that we can bind to them.)

    `filename`: str, full path to the `.py` being macroexpanded, for resolving
                relative macro-imports and for error reporting.

    `reload`:   If enabled, refresh modules, causing different uses of the same macros
                to point to different function objects. Enable only if implementing a REPL.

    `transform`: If enabled, transform each macro-import into `import ...`,
                 where `...` is the absolute module name the macros are being
                 imported from, so that the macro names are not bound at run time.

    Return value is a dict `{macroname: function, ...}` with all collected bindings.
    """
    bindings = {}
    for index, statement in enumerate(tree.body):
        if ismacroimport(statement):
            module_absname, more_bindings = get_macros(statement, filename=filename, reload=reload)
            bindings.update(more_bindings)
            if transform:
                thealias = copy_location(alias(name=module_absname, asname=None),
                                         statement)
                tree.body[index] = copy_location(Import(names=[thealias]),
                                                 statement)
    return bindings
