"""c3pmacro: compile-time code-generation macros for Python."""

from .context import ExpansionContext  # noqa: F401
from .core import (MacroExpansionError, MacroDiagnosticError,  # noqa: F401
                   InternalConsistencyError)
from .registry import Registry, expressionmacro, membermacro  # noqa: F401
from .unparser import unparse  # noqa: F401
from .utils import gensym  # noqa: F401

# For public API inspection, import modules that wouldn't otherwise get imported.
from . import debug  # noqa: F401
from . import plugin  # noqa: F401
from . import testing  # noqa: F401

__version__ = "1.0.0"
