# -*- coding: utf-8; -*-
"""Expander core; essentially, how to apply a macro invocation."""

__all__ = ["EXPRESSION", "MEMBER",
           "MacroExpansionError", "MacroApplicationError",
           "MacroResolutionError", "MacroCapabilityError",
           "MacroDiagnosticError", "InternalConsistencyError",
           "BaseMacroExpander"]

from ast import AST, NodeTransformer, expr, stmt
from contextlib import contextmanager
from copy import deepcopy
from typing import Any, Callable, Mapping, Optional
from warnings import warn_explicit

from .astfixers import fix_locations
from .context import ExpansionContext
from .utils import flatten, format_location

EXPRESSION = "expression"
MEMBER = "member"


class MacroExpansionError(Exception):
    """Base class for errors specific to macro expansion.

    For errors detected **at macro expansion time**, a macro should:

     - Report a diagnostic through its `context` (`context.error(node, msg)`),
       if the macro was used in a way it does not support, e.g. attached to
       the wrong kind of declaration. The build then fails with a
       `MacroDiagnosticError` at the use site.

     - Raise `InternalConsistencyError`, if the macro received input that the
       expander guarantees it never sends. That is a bug in the toolchain, not
       in the user's code.

    Anything else a macro raises is reported as a `MacroApplicationError`.
    """

class MacroApplicationError(MacroExpansionError):
    """The expander core caught an exception while applying a macro function.

    The expander uses this type to automatically telescope use site reports
    for nested macro invocations (which occur when a macro expands inside-out).

    **CAUTION**: This type is for internal use only.
    """

class MacroResolutionError(MacroExpansionError):
    """An invocation site names no registered macro. Raised before any macro code runs."""

class MacroCapabilityError(MacroResolutionError):
    """An invocation site names a macro of the wrong kind, e.g. a member macro called as an expression."""

class MacroDiagnosticError(MacroExpansionError):
    """A macro reported one or more errors through its expansion context.

    The `Diagnostic` instances are available as `self.diagnostics`.
    """
    def __init__(self, message, diagnostics=()):
        super().__init__(message)
        self.diagnostics = list(diagnostics)

class InternalConsistencyError(Exception):
    """A macro received input the expander guarantees it never sends.

    Fatal. The expander passes this through as-is, without a use site report,
    because it means the toolchain itself is broken.
    """

# --------------------------------------------------------------------------------

class BaseMacroExpander(NodeTransformer):
    """Expander core. Base class for macro expanders.

    After identifying valid macro syntax, each `visit` method of the actual
    expander should return the result of calling the `expand()` method with
    the proper arguments.

    Constructor parameters:

        registry: `c3pmacro.registry.Registry` of macro name/function pairs
        filename: full path to `.py` file being expanded, for error reporting
        source:   source text `tree` was parsed from, if available.
                  Lets macros see the exact spelling of their input.
    """

    def __init__(self, registry: Mapping[str, Callable[..., Any]], filename: str, source: Optional[str] = None):
        self.registry = registry
        self.filename = filename
        self.source = source
        self.recursive = True
        self._debughook = None  # see `c3pmacro.debug.ExpansionTracer`

    def visit(self, tree):
        """Expand macros in `tree`, using current setting for recursive mode.

        No-op if no macros are registered.

        Treat `visit(stmt_suite)` as a loop for individual elements.
        No-op if `tree is None`.
        """
        if not self.registry:
            return tree
        if tree is None:
            return None
        if isinstance(tree, list):
            new_tree = flatten(self.visit(elt) for elt in tree)
            if new_tree:
                tree[:] = new_tree
                return tree
            return None
        return super().visit(tree)

    def visit_recursively(self, tree):
        """Entry point. Expand macros in `tree`, until no macros are left."""
        with self._recursive_mode(True):
            return self.visit(tree)

    def visit_once(self, tree):
        """Entry point. Expand macros in `tree`, making just one pass."""
        with self._recursive_mode(False):
            return self.visit(tree)

    def _recursive_mode(self, isrecursive: bool):
        """Context manager. Change recursive mode, restoring the old mode when the context exits."""
        @contextmanager
        def recursive_mode():
            wasrecursive = self.recursive
            try:
                self.recursive = isrecursive
                yield
            finally:
                self.recursive = wasrecursive
        return recursive_mode()

    def debughook(self, hook: Callable[..., None]):
        """Context manager. Temporarily set a debug hook, restoring the old one when the context exits.

        The debug hook, if one is installed, is called whenever a macro expands.

        The hook receives the following arguments, passed positionally in this order:
            invocationsubtreeid: int, the `id()` of the *original* macro invocation subtree
                                 before anything was done to it.
            invocationtree:      AST, (a deepcopy of) the macro invocation subtree before expansion.
            expandedtree:        AST or list of AST, the expansion result. It's the actual live copy.
            macroname:           str, name of the macro that was applied.
            macrofunction:       callable, the macro function that was applied.
        """
        @contextmanager
        def debughook_context():
            oldhook = self._debughook
            try:
                self._debughook = hook
                yield
            finally:
                self._debughook = oldhook
        return debughook_context()

    def source_text(self, tree):
        """Return the source code of `tree` for use site reports."""
        return ExpansionContext(None, self.filename, self.source).source_text(tree)

    def resolve(self, syntax, target, macroname):
        """Look up the macro `macroname` for an invocation of kind `syntax` at `target`.

        Configuration errors (`MacroResolutionError`, `MacroCapabilityError`)
        get the use site prepended to their message.
        """
        try:
            return self.registry.resolve(macroname, syntax)
        except MacroResolutionError as err:
            loc = format_location(self.filename, target, self.source_text(target))
            newerr = type(err)(f"{loc}\nin {syntax} macro invocation for '{macroname}': {err}")
            newerr.__suppress_context__ = True
            raise newerr

    def expand(self, syntax, target, macroname, tree, sourcecode, kw=None):
        """Expand a macro invocation.

        Transform the `target` node, replacing it with the expansion result
        of applying `macroname` on `tree`. Then postprocess locally, by
        `_visit_expansion`.

        `syntax` is `EXPRESSION` or `MEMBER`; it must match the capability
        of the macro bound to `macroname`.

        `sourcecode` is the source code of the invocation, for error messages.

        When calling the macro function, we pass the following named arguments:

          - `syntax`:   Our `syntax` argument, as-is.
          - `expander`: The expander instance.
          - `context`:  A fresh `ExpansionContext`, closed when the macro returns.

        To send additional named arguments from the actual expander to the
        macro function, place them in a dictionary and pass that dictionary
        as `kw`.

        Errors the macro reports through its context are raised here as one
        `MacroDiagnosticError`; warnings are issued as `SyntaxWarning`.
        """
        loc = format_location(self.filename, target, sourcecode)  # macro use site
        macro = self.resolve(syntax, target, macroname)

        context = ExpansionContext(macroname, self.filename, self.source)
        kw = kw or {}
        kw.update({"syntax": syntax,
                   "expander": self,
                   "context": context})

        try:
            try:
                expansion = self._apply_macro(macro, tree, kw, macroname, target)
            finally:
                context.close()

            if not context.errors:
                try:
                    expansion = _typecheck_expansion(syntax, expansion)
                except TypeError as err:
                    reason = f"in {syntax} macro invocation for '{macroname}': {err}"
                    err = MacroApplicationError(f"{loc}\n{reason}")
                    err.__suppress_context__ = True
                    raise err

        except InternalConsistencyError:
            raise
        # If something went wrong, generate a standardized macro use site report.
        except Exception as err:
            msg = f"{loc}\nin {syntax} macro invocation for '{macroname}'"
            if isinstance(err, MacroApplicationError) and err.__cause__:
                # Telescope nested use site reports, by keeping the original
                # traceback and `__cause__`, but combining the messages, so
                # that the report reads outside-in, like a Python traceback.
                oldmsg = err.args[0]
                oldmsg_lines = oldmsg.split("\n")
                hint = "An exception occurred during macro expansion.\n\nMacro use site (most recent macro application last):"
                hint_lines = hint.split("\n")
                hint_length_in_lines = len(hint_lines)
                if oldmsg_lines[0] == hint_lines[0]:
                    oldmsg = "\n".join(oldmsg_lines[hint_length_in_lines:])
                msg = f"{hint}\n{msg}\n{oldmsg}"
                raise MacroApplicationError(msg).with_traceback(err.__traceback__) from err.__cause__
            elif isinstance(err, MacroApplicationError):
                raise
            else:
                # Use site report telescoping uses the fact that this
                # is the only raise-from for a `MacroApplicationError`.
                raise MacroApplicationError(msg) from err

        self._report(context, loc)
        return self._visit_expansion(expansion, target)

    def _apply_macro(self, macro, tree, kw, macroname, target):
        """Execute `macro` on `tree`, with the dictionary `kw` unpacked into macro's named arguments."""
        # The macro may edit the AST in-place, so to produce reliable debug
        # information, take the old `id` and a deep copy of the invocation first.
        if self._debughook:
            oldid = id(target)
            oldtree = deepcopy(target)

        newtree = macro(tree, **kw)

        if self._debughook:
            self._debughook(oldid, oldtree, newtree, macroname, macro)
        return newtree

    def _report(self, context, loc):
        """Issue the warnings recorded in `context`; raise if it has errors."""
        for diagnostic in context.warnings:
            warn_explicit(diagnostic.message, SyntaxWarning,
                          filename=self.filename, lineno=diagnostic.lineno or 0)
        errors = context.errors
        if errors:
            report = "\n".join(diagnostic.format(color=True) for diagnostic in errors)
            raise MacroDiagnosticError(f"{loc}\nin macro '{context.macroname}':\n{report}", errors)

    def _visit_expansion(self, expansion, target):
        """Perform local postprocessing.

        Add in missing source location info. Then, if in recursive mode,
        recurse into (`visit`) the once-expanded macro output.
        """
        expansion = fix_locations(expansion, target, mode="reference")
        if self.recursive:
            expansion = self.visit(expansion)
        return expansion


def _typecheck_expansion(syntax, expansion):
    """Check that a macro returned what its protocol promises. Return the normalized expansion."""
    if syntax == EXPRESSION:
        if not isinstance(expansion, expr):
            raise TypeError(f"expected an expression AST node, got {type(expansion)} with value {repr(expansion)}")
        return expansion
    if expansion is None or isinstance(expansion, AST):
        raise TypeError(f"expected a list of statement AST nodes, got {type(expansion)} with value {repr(expansion)}")
    try:
        expansion = list(expansion)
    except TypeError:
        raise TypeError(f"expected a list of statement AST nodes, got {type(expansion)} with value {repr(expansion)}") from None
    if not all(isinstance(elt, stmt) for elt in expansion):
        raise TypeError("expected all elements of the list returned by the macro function to be statement AST nodes")
    return expansion
