# -*- coding: utf-8 -*-
"""Demo: compiling and running macro-enabled code snippets at run time."""

from c3pmacro import unparse
from c3pmacro.compiler import run
from c3pmacro.debug import ExpansionTracer, format_registry
from c3pmacro.plugin import plugin

source = '''
from enum import Enum

@slope_subset
class Lift(Enum):
    chair = "chair"
    gondola = "gondola"

lift, code = stringify(Lift.from_lift(Lift.gondola))
'''

print(format_registry(plugin.registry, label="run-time snippet", color=True))
module = run(source, registry=plugin.registry)
print(f"{module.code} --> {module.lift!r}")

tree = plugin.expand("answer = stringify(6 * 7)", debughook=ExpansionTracer("<demo>"))
print(unparse(tree))
