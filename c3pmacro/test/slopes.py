# -*- coding: utf-8 -*-
"""A macro-enabled module, imported by the tests with the import hook active."""

from c3pmacro.macros import macros, stringify, slope_subset  # noqa: F401

from enum import Enum, auto


@slope_subset
class Slope(Enum):
    beginnerEasy = auto()
    intermediate = auto()
    expert = auto()


@slope_subset
class Lift(Enum):
    chair = "chair"
    gondola = "gondola"

name = "world"
greeting = stringify(f"Hello, {name}")
