# -*- coding: utf-8; -*-
"""Compile macro-enabled code.

This is used by the import hooks in `c3pmacro.importer`, and by the
compiler plugin in `c3pmacro.plugin`. This module orchestrates the
transformations `c3pmacro` performs when a module is imported.

We also provide a public API to compile and run macro-enabled code at run time.
"""

__all__ = ["expand", "compile",
           "run", "create_module",
           "temporary_module"]

import ast
import builtins
from contextlib import contextmanager
import importlib.util
import sys
from types import CodeType, ModuleType

from .expander import MacroExpander, find_macros
from .registry import Registry
from .unparser import unparse
from .utils import gensym


def expand(source, filename, registry=None, debughook=None):
    """Expand macros. Top-level entry point of the compiler.

    `source`:    `str` or `bytes` containing Python source code, an `ast.Module`,
                 or a `list` of statement AST nodes.

                 If `source` is a `list`, it is automatically wrapped into
                 the `body` of a new `ast.Module`.

    `filename`:  Full path to the `.py` file being compiled, or a descriptive label.

    `registry`:  Macros to have in scope even without a macro-import; a
                 `Registry`, or anything its constructor accepts. Macro-imports
                 in `source` add to these. A name both here and in a macro-import,
                 bound to different macros, is a `ValueError`.

    `debughook`: Called after each macro expansion; see
                 `c3pmacro.core.BaseMacroExpander.debughook`.

    Return value is the final expanded AST, an `ast.Module`, ready for Python's
    built-in `compile`.

    A module that uses no macros (no macro-imports, and no `registry`) is returned
    untouched, without walking it.

    When `source` is given as text, macros see the exact source spelling of their
    input. For an AST input, they see an unparsed rendering of it instead.
    """
    if not isinstance(source, (str, bytes, ast.Module, list)):
        raise TypeError(f"`source` must be Python source code (as `str` or `bytes`), an `ast.Module`, or a `list` of statement AST nodes; got {type(source)} with value {repr(source)}")

    text = None
    if isinstance(source, (str, bytes)):
        if isinstance(source, bytes):
            text = importlib.util.decode_source(source)  # uses the "coding" prop line like Python itself does
        else:
            text = source
        try:
            tree = ast.parse(text, filename=filename, mode="exec")
        except SyntaxError as err:
            raise ImportError(f"Failed to parse {filename} as Python.") from err

    else:  # `ast.Module` or a `list` of statement AST nodes
        if isinstance(source, list):  # convenience, not provided by built-in `compile`.
            tree = ast.Module(body=source, type_ignores=[])
        else:
            tree = source

        if not all(isinstance(x, ast.stmt) for x in tree.body):
            invalid_inputs = [x for x in tree.body if not isinstance(x, ast.stmt)]
            invalid_inputs_msg = ", ".join(repr(x) for x in invalid_inputs)
            raise TypeError(f"module body has one or more elements that are not statement AST nodes: {invalid_inputs_msg}")

    module_macro_bindings = find_macros(tree, filename=filename)
    if registry is None:
        if not module_macro_bindings:
            return tree
        registry = Registry(module_macro_bindings)
    else:
        if not isinstance(registry, Registry):
            registry = Registry(registry)
        registry = registry.extended(module_macro_bindings)

    expander = MacroExpander(registry, filename, text)
    if debughook:
        with expander.debughook(debughook):
            expansion = expander.visit(tree)
    else:
        expansion = expander.visit(tree)
    return expansion


def compile(source, filename, optimize=-1, registry=None):
    """[c3pmacro] Compile macro-enabled code.

    Like the built-in `compile` function, but for macro-enabled code.

    `source`, `filename` and `registry` are as in `expand`. This function is a
    thin wrapper that calls `expand`, and then passes the result to Python's
    built-in `compile`, with the given `optimize` level.

    Currently the API differs from the built-in `compile` in that:

     - `mode` is always `"exec"`,
     - `dont_inherit` is always `True`, and
     - flags are not supported.

    Return value is a code object, ready for `exec`.

    **Notes**

    If `source` is a *dynamically generated* AST value, it will be unparsed and
    re-parsed (before expanding) to autogenerate source location info.

    `source` is considered *dynamically generated* when there is no source file,
    i.e. `filename` does not end in `.py`.
    """
    code, _ignored_docstring = _compile(source, filename, optimize, registry)
    return code

def _compile(source, filename, optimize, registry):
    # An AST that did not come from a source file may have no location info
    # at all. Unparsing it gives us source text to attach locations to; any
    # run-time error then points into `unparse(source)`.
    if not (filename and filename.endswith(".py")):
        if isinstance(source, (ast.AST, list)):
            source = unparse(source)
    expansion = expand(source, filename=filename, registry=registry)
    assert isinstance(expansion, ast.Module)  # we always parse in `"exec"` mode
    docstring = ast.get_docstring(expansion, clean=False)
    code = builtins.compile(expansion, filename, mode="exec", dont_inherit=True, optimize=optimize)
    return code, docstring

# --------------------------------------------------------------------------------
# Convenience functions for compiling and running macro-enabled code snippets at run time.

def run(source, module=None, optimize=-1, registry=None):
    """Compile and run macro-enabled code at run time.

    This behaves, for macro-enabled code, somewhat like the built-in `exec` for
    regular code, but instead of a dictionary, we take in an optional module.

    `source` supports the same formats as in `expand`, plus passthrough
    for an already compiled code object that represents a module
    (i.e. the output of our `compile`).

    If `source` is not yet compiled, and the first statement in it is a static
    string, it is assigned to the docstring of the module the code runs in.
    Otherwise the module docstring is set to `None`.

    The `module` parameter allows to run more code in the context of an
    existing module. It can be a dotted name (looked up in `sys.modules`)
    or a `types.ModuleType` object (such as returned by this function).

    If `module is None`, a new module is created with autogenerated unique
    values for `__name__` and `__file__`.

    `registry` is as in `expand`.

    Return value is the module, after the code has been `exec`'d in its `__dict__`.

    Example::

        from c3pmacro.compiler import run
        from c3pmacro.plugin import registry

        module = run("value, code = stringify(6 * 7)", registry=registry)
        assert module.value == 42
        assert module.code == "6 * 7"
    """
    if module is not None and not isinstance(module, (ModuleType, str)):
        raise TypeError(f"`module` must be a `types.ModuleType`, a dotted name as `str`, or `None`; got {type(module)} with value {repr(module)}")

    if module is None:
        module = create_module()
    elif isinstance(module, str):
        dotted_name = module
        try:
            module = sys.modules[dotted_name]
        except KeyError:
            err = ModuleNotFoundError(f"Module '{dotted_name}' not found in `sys.modules`")
            err.__suppress_context__ = True
            raise err
    filename = module.__file__

    if isinstance(source, CodeType):  # already compiled?
        code = source
        module.__doc__ = None
    else:
        code, docstring = _compile(source, filename=filename, optimize=optimize, registry=registry)
        module.__doc__ = docstring

    exec(code, module.__dict__)
    return module


def create_module(dotted_name=None, filename=None, *, update_parent=True):
    """Create a new blank module at run time, insert it into `sys.modules`, and return it.

    This closely emulates what Python's standard importer does. It fills in some
    attributes of the module, and inserts the new module into `sys.modules`,
    overwriting any existing entry by the same name. Used by `run` when no module
    is given.

    `dotted_name`:  Fully qualified name of the module, for `sys.modules`. Optional;
                    if not provided, a unique placeholder name is auto-generated.

                    If `dotted_name` has at least one dot in it, the parent package
                    for the new module must already exist in `sys.modules`. The new
                    module's `__package__` attribute is set to the dotted name of
                    the parent.

    `filename`:     Full path to the `.py` file the module represents, if applicable.
                    Otherwise some descriptive string is recommended. Optional.

    `update_parent`: bool. If `True`, and `dotted_name` has at least one dot in it,
                    the new module is added to its parent's namespace, like Python's
                    importer would do.
    """
    if dotted_name:
        if not isinstance(dotted_name, str):
            raise TypeError(f"`dotted_name` must be an `str`, got {type(dotted_name)} with value {repr(dotted_name)}")
        path = dotted_name.split(".")
        if not all(component.isidentifier() for component in path):
            raise TypeError(f"each component of `dotted_name` must be a valid identifier`, got {repr(dotted_name)}")
    if filename and not isinstance(filename, str):
        raise TypeError(f"`filename` must be an `str`, got {type(filename)} with value {repr(filename)}")

    uuid = gensym("")
    if not filename:
        if dotted_name:
            filename = f"<dynamically created module '{dotted_name}'>"
        else:
            filename = f"<dynamically created module {uuid}>"
    dotted_name = dotted_name or f"dynamically_created_module_{uuid}"

    # `__loader__` and `__spec__` stay `None`; they make no sense for a dynamically
    # created module. `__doc__` is filled later, by `run`.
    module = ModuleType(dotted_name)
    module.__name__ = dotted_name
    module.__file__ = filename

    # Only allow a dotted name if its parent package is already in `sys.modules`;
    # we do not import parent packages here.
    if "." in dotted_name:
        packagename, finalcomponent = dotted_name.rsplit(".", maxsplit=1)
        package = sys.modules.get(packagename, None)

        if not package:
            raise ModuleNotFoundError(f"while dynamically creating module '{dotted_name}': its parent package '{packagename}' not found in `sys.modules`")

        module.__package__ = packagename

        if update_parent:
            setattr(package, finalcomponent, module)

    sys.modules[dotted_name] = module
    return module


@contextmanager
def temporary_module(dotted_name=None, filename=None, *, update_parent=True):
    """Context manager. Create and destroy a temporary module.

    Usage::

        with temporary_module(name, filename) as module:
            ...

    Arguments are passed to `create_module`. The created module is
    automatically inserted to `sys.modules`, and then assigned to
    the as-part.

    When the context exits, the temporary module is removed from
    `sys.modules`. If `update_parent=True`, it is also removed from
    the parent package's namespace, for symmetry.

    This is useful for sandboxed testing of macro-enabled code, because the
    temporary modules will not pollute `sys.modules` beyond their
    useful lifetime.
    """
    module = create_module(dotted_name, filename, update_parent=update_parent)
    try:
        yield module
    finally:
        dotted_name = module.__name__
        sys.modules.pop(dotted_name, None)
        if update_parent and "." in dotted_name:
            packagename, finalcomponent = dotted_name.rsplit(".", maxsplit=1)
            package = sys.modules.get(packagename, None)
            if package is not None and getattr(package, finalcomponent, None) is module:
                delattr(package, finalcomponent)
