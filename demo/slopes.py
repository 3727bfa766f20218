# -*- coding: utf-8 -*-
"""Demo: macro-enabled code imported through the import hook.

Run as::

    python3 demo/slopes.py

The macros expand when `_slopes` is imported. To see the expansion, run::

    c3pexpand demo/_slopes.py
"""

import c3pmacro.activate  # noqa: F401, must come before importing macro-enabled modules

import _slopes

_slopes.main()
