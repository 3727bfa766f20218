# -*- coding: utf-8 -*-
"""Run all tests for `c3pmacro`."""

import os
import re
import shutil
import subprocess
import sys
import traceback
from importlib import import_module

from c3pmacro.colorizer import ColorScheme, colorize

import c3pmacro.activate  # noqa: F401, this enables the macro expander.

# --------------------------------------------------------------------------------

def filename_to_modulename(path, filename):
    """Convert .py filename to module name.

    Example::
        "some/dir", "mod.py" --> "some.dir.mod"
    """
    modpath = re.sub(os.path.sep, r".", path)
    themod = re.sub(r"\.py$", r"", filename)
    return ".".join([modpath, themod])

def filenames_to_modulenames(path, filenames):
    """Convert .py filenames to module names.

    Example::
        "some/dir", ["mod1.py", "mod2.py", ...] --> ["some.dir.mod1", "some.dir.mod2", ...]
    """
    return list(sorted(filename_to_modulename(path, fn) for fn in filenames))

def deletepycachedirs(path):
    """Delete all `__pycache__` directories under `path`, so that everything is recompiled."""
    for root, dirs, files in os.walk(path):
        if "__pycache__" in dirs:
            shutil.rmtree(os.path.join(root, "__pycache__"), ignore_errors=True)
            dirs.remove("__pycache__")

# --------------------------------------------------------------------------------
# In the `c3pmacro` codebase, test modules are placed in "test/" subfolders,
# and follow the naming pattern "test_*.py".

def discovertestdirectories(root):
    pattern = f"{os.path.sep}test"
    out = []
    for path, dirs, files in os.walk(root):
        if path.endswith(pattern):
            out.append(path)
    return list(sorted(out))

def discovertestfiles_in(path):
    return [fn for fn in os.listdir(path) if fn.startswith("test_") and fn.endswith(".py")]

# --------------------------------------------------------------------------------
# Demos live in the "demo/" subfolder of the project top level. Each demo is a
# single .py file; helper modules that are not demos start with an underscore.

def discoverdemofiles(root):
    return list(sorted(os.path.join(root, fn) for fn in os.listdir(root)
                       if fn.endswith(".py") and not fn.startswith("_")))

# --------------------------------------------------------------------------------

def runtests(clear_bytecode_cache=True):
    cache_note = "Bytecode cache will be cleared." if clear_bytecode_cache else "Using existing bytecode."
    print(colorize(f"Testing started. {cache_note}", ColorScheme.TESTHEADING), file=sys.stderr)
    errors = 0
    for path in discovertestdirectories("."):
        modnames = filenames_to_modulenames(os.path.relpath(path), discovertestfiles_in(path))
        if clear_bytecode_cache:
            deletepycachedirs(path)
        for m in modnames:
            try:
                print(colorize(f"  Running module '{m}'...", ColorScheme.TESTHEADING),
                      file=sys.stderr)
                mod = import_module(m)
                mod.runtests()
                print(colorize(f"    PASS '{m}'", ColorScheme.TESTPASS), file=sys.stderr)
            except ImportError:
                print(colorize(f"    ERROR '{m}': import failed", ColorScheme.TESTERROR),
                      file=sys.stderr)
                traceback.print_exc()
                errors += 1
            except AssertionError:
                print(colorize(f"    FAIL '{m}': at least one test failed",
                               ColorScheme.TESTFAIL),
                      file=sys.stderr)
                traceback.print_exc()
                errors += 1
            except Exception:
                print(colorize(f"    ERROR '{m}': unexpected exception", ColorScheme.TESTERROR),
                      file=sys.stderr)
                traceback.print_exc()
                errors += 1
    print(colorize("Testing finished.", ColorScheme.TESTHEADING), file=sys.stderr)
    all_passed = (errors == 0)
    return all_passed


# Check that all the demos run without crashing on the version being tested,
# so that they are likely to be up to date. A demo may import its neighbors,
# so run each one like a shell script would.
def rundemos(clear_bytecode_cache=True):
    cache_note = "Bytecode cache will be cleared." if clear_bytecode_cache else "Using existing bytecode."
    print(colorize(f"Demos started. {cache_note}", ColorScheme.TESTHEADING), file=sys.stderr)
    errors = 0
    demofiles = discoverdemofiles("demo")
    if clear_bytecode_cache:
        deletepycachedirs("demo")
    for fn in demofiles:
        print(colorize(f"  Running file '{fn}'...", ColorScheme.TESTHEADING),
              file=sys.stderr)
        cmd = [sys.executable, fn]
        try:
            subprocess.run(cmd, check=True,
                           stdin=subprocess.PIPE, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
            print(colorize(f"    PASS '{fn}'", ColorScheme.TESTPASS), file=sys.stderr)
        except subprocess.CalledProcessError as err:
            print(colorize(f"    FAIL '{fn}': subprocess returned non-zero exit status",
                           ColorScheme.TESTFAIL),
                  file=sys.stderr)
            traceback.print_exc()
            print(err.stderr.decode("utf-8"), file=sys.stderr)
            errors += 1
    print(colorize("Demos finished.", ColorScheme.TESTHEADING), file=sys.stderr)
    all_passed = (errors == 0)
    return all_passed

if __name__ == '__main__':
    t1 = runtests(True)
    t2 = runtests(False)
    t3 = rundemos(True)
    t4 = rundemos(False)
    if not (t1 and t2 and t3 and t4):
        sys.exit(1)  # pragma: no cover, this only runs when the tests fail.
