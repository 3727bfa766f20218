# -*- coding: utf-8 -*-
"""Macro-enabled module for the slopes demo. Imported by `slopes.py`."""

from c3pmacro.macros import macros, stringify, slope_subset  # noqa: F401

from enum import Enum, auto


@slope_subset
class Slope(Enum):
    beginnerEasy = auto()
    intermediate = auto()
    expert = auto()


def show(pair):
    value, code = pair
    print(f"{code:>30} --> {value!r}")


def main():
    show(stringify(Slope.from_slope(Slope.expert)))
    show(stringify(Slope.from_slope("expert")))
    show(stringify([case.name for case in Slope]))
    name = "slopes"
    show(stringify(f"Hello, {name}!"))
