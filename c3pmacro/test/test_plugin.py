# -*- coding: utf-8 -*-
"""Test the compiler plugin and the registry report."""

from ..debug import format_registry
from ..macros import slope_subset, stringify
from ..plugin import CompilerPlugin, plugin, registry
from ..registry import Registry
from ..unparser import unparse


def test_process_wide_plugin():
    assert plugin.registry is registry
    assert list(registry) == ["stringify", "slope_subset"]
    assert registry["stringify"] is stringify
    assert registry["slope_subset"] is slope_subset


def test_registry_built_once():
    consumed = []
    def providing_macros():
        consumed.append(True)
        yield ("stringify", stringify)
    myplugin = CompilerPlugin(providing_macros())
    assert not consumed
    first_registry = myplugin.registry
    assert myplugin.registry is first_registry
    assert consumed == [True]
    assert list(first_registry) == ["stringify"]


def test_invalid_plugin():
    myplugin = CompilerPlugin([("stringify", len)])
    try:
        myplugin.registry
    except TypeError:
        pass
    else:
        assert False


def test_expand():
    tree = plugin.expand("x = stringify(1)")
    assert unparse(tree) == "x = (1, '1')"


def test_format_registry():
    report = format_registry(registry, label="<test>")
    assert report.startswith("Macros for <test>:")
    assert "    slope_subset (member): c3pmacro.macros.slope_subset\n" in report
    assert "    stringify (expression/1): c3pmacro.macros.stringify\n" in report
    # sorted by name
    assert report.index("slope_subset") < report.index("stringify")

    assert "<no macros>" in format_registry(Registry())
    # colorized report has the same names in it
    assert "stringify" in format_registry(registry, color=True)


def runtests():
    test_process_wide_plugin()
    test_registry_built_once()
    test_invalid_plugin()
    test_expand()
    test_format_registry()

if __name__ == '__main__':
    runtests()
