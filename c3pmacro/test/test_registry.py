# -*- coding: utf-8 -*-
"""Test macro capability tags and the macro registry."""

from ..core import EXPRESSION, MEMBER, MacroCapabilityError, MacroResolutionError
from ..macros import slope_subset, stringify
from ..registry import Registry, expressionmacro, macroarity, macrokind, membermacro
from .macros import count_args, first


def test_capability_tags():
    assert macrokind(stringify) == EXPRESSION
    assert macroarity(stringify) == 1
    assert macrokind(slope_subset) == MEMBER
    assert macroarity(slope_subset) is None
    assert macrokind(len) is None

    @expressionmacro
    def bare(invocation, **kw):
        return invocation.arguments[0]  # pragma: no cover
    assert macrokind(bare) == EXPRESSION
    assert macroarity(bare) is None

    @membermacro
    def member(declaration, **kw):
        return []  # pragma: no cover
    assert macrokind(member) == MEMBER


def test_invalid_arity():
    for arity in (-1, "1", 1.5):
        try:
            expressionmacro(arity=arity)
        except ValueError:
            pass
        else:
            assert False


def test_construction():
    registry = Registry([("stringify", stringify), ("slope_subset", slope_subset)])
    assert list(registry) == ["stringify", "slope_subset"]
    assert len(registry) == 2
    assert registry["stringify"] is stringify
    assert "slope_subset" in registry
    assert "nonexistent" not in registry

    # from a mapping, and from a one-shot iterable
    assert Registry({"stringify": stringify}) == Registry([("stringify", stringify)])
    pairs = iter([("stringify", stringify)])
    assert list(Registry(pairs)) == ["stringify"]

    assert not Registry()
    assert len(Registry()) == 0


def test_idempotent():
    pairs = [("stringify", stringify), ("slope_subset", slope_subset)]
    registry1 = Registry(pairs)
    registry2 = Registry(pairs)
    assert registry1 == registry2
    for macroname in registry1:
        assert registry1.resolve(macroname, registry1.kind(macroname)) is registry2.resolve(macroname, registry2.kind(macroname))


def test_invalid_names():
    for macroname in ("not an identifier", "class", "", 42, None):
        try:
            Registry([(macroname, stringify)])
        except ValueError:
            pass
        else:
            assert False, macroname


def test_untagged_implementation():
    def plain(tree, **kw):
        return tree  # pragma: no cover
    for implementation in (plain, len, 42):
        try:
            Registry([("plain", implementation)])
        except TypeError:
            pass
        else:
            assert False


def test_duplicates():
    # The same implementation twice is harmless.
    registry = Registry([("stringify", stringify), ("stringify", stringify)])
    assert len(registry) == 1
    assert registry["stringify"] is stringify

    try:
        Registry([("stringify", stringify), ("stringify", count_args)])
    except ValueError as err:
        assert "stringify" in str(err)
    else:
        assert False


def test_immutable():
    registry = Registry([("stringify", stringify)])
    try:
        registry["count_args"] = count_args
    except TypeError:
        pass
    else:
        assert False
    try:
        registry._table["count_args"] = count_args
    except TypeError:
        pass
    else:
        assert False
    assert list(registry) == ["stringify"]


def test_resolve():
    registry = Registry([("stringify", stringify), ("slope_subset", slope_subset)])
    assert registry.resolve("stringify", EXPRESSION) is stringify
    assert registry.resolve("slope_subset", MEMBER) is slope_subset
    assert registry.kind("stringify") == EXPRESSION
    assert registry.kind("slope_subset") == MEMBER
    assert registry.kind("nonexistent") is None

    try:
        registry.resolve("nonexistent", EXPRESSION)
    except MacroCapabilityError:
        assert False
    except MacroResolutionError as err:
        assert "nonexistent" in str(err)
    else:
        assert False

    try:
        registry.resolve("stringify", MEMBER)
    except MacroCapabilityError as err:
        assert "stringify" in str(err)
    else:
        assert False

    try:
        registry.resolve("slope_subset", EXPRESSION)
    except MacroCapabilityError:
        pass
    else:
        assert False


def test_extended():
    registry = Registry([("stringify", stringify)])
    bigger = registry.extended({"first": first})
    assert list(bigger) == ["stringify", "first"]
    assert "first" not in registry
    assert registry.extended([]) == registry

    try:
        registry.extended([("stringify", first)])
    except ValueError:
        pass
    else:
        assert False


def runtests():
    test_capability_tags()
    test_invalid_arity()
    test_construction()
    test_idempotent()
    test_invalid_names()
    test_untagged_implementation()
    test_duplicates()
    test_immutable()
    test_resolve()
    test_extended()

if __name__ == '__main__':
    runtests()
