from collections import namedtuple
from dataclasses import dataclass
import pytest
from resettable import History
from resettable.accessors import (
    Accessor,
    attribute,
    getItem,
    identity,
    item,
    path,
    registerItemAccess,
    setItem,
)


class _AttributeObject:

    def __repr__(self):
        attrsRepr = ", ".join(f"{k}={v!r}" for k, v in self.__dict__.items())
        return f"{self.__class__.__name__}({attrsRepr})"


@dataclass(frozen=True)
class FrozenPoint:

    x: int
    y: int


@dataclass(frozen=True)
class FrozenShape:

    name: str
    origin: FrozenPoint


Pair = namedtuple("Pair", ["first", "second"])


class TestGenericFunctions:

    def test_getItem(self):
        o = _AttributeObject()
        o.foo = 1
        assert getItem({"a": 1}, "a") == 1
        assert getItem([1, 2], 1) == 2
        assert getItem((1, 2), -1) == 2
        assert getItem(o, "foo") == 1
        assert getItem(Pair(1, 2), "second") == 2
        assert getItem(Pair(1, 2), 0) == 1

    def test_setItem_mutable(self):
        d = {"a": 1}
        lst = [1, 2]
        o = _AttributeObject()
        assert setItem(d, "a", 2) is d
        assert setItem(lst, 0, 3) is lst
        assert setItem(o, "foo", 4) is o
        assert d == {"a": 2}
        assert lst == [3, 2]
        assert o.foo == 4

    def test_setItem_immutable(self):
        t = (1, 2, 3)
        assert setItem(t, 1, 20) == (1, 20, 3)
        assert t == (1, 2, 3)
        pair = Pair(1, 2)
        assert setItem(pair, "first", 10) == Pair(10, 2)
        assert setItem(pair, 1, 20) == Pair(1, 20)
        point = FrozenPoint(1, 2)
        newPoint = setItem(point, "x", 5)
        assert newPoint == FrozenPoint(5, 2)
        assert point == FrozenPoint(1, 2)

    def test_missing_items(self):
        with pytest.raises(KeyError):
            getItem({}, "a")
        with pytest.raises(IndexError):
            getItem([], 0)
        with pytest.raises(AttributeError):
            getItem(_AttributeObject(), "bar")


class TestAccessor:

    def test_docstring_example(self):
        model = {"points": [(0, 0), (10, 20)]}
        accessor = item("points").appending(item(1))
        assert accessor.get(model) == (10, 20)
        assert accessor.set(model, (30, 40)) is model
        assert model == {"points": [(0, 0), (30, 40)]}

    def test_identity(self):
        assert identity.get(12) == 12
        assert identity.set(12, 13) == 13
        assert identity.path == ()

    def test_path(self):
        model = {"a": [1, {"b": (1, 2)}]}
        accessor = path("a", 1, "b", 0)
        assert accessor.path == ("a", 1, "b", 0)
        assert repr(accessor) == "Accessor(path=('a', 1, 'b', 0))"
        assert accessor.get(model) == 1
        accessor.set(model, 100)
        assert model == {"a": [1, {"b": (100, 2)}]}

    def test_nested_frozen_values(self):
        shape = FrozenShape("square", FrozenPoint(0, 0))
        accessor = path("origin", "y")
        newShape = accessor.set(shape, 7)
        assert newShape == FrozenShape("square", FrozenPoint(0, 7))
        assert shape.origin.y == 0

    def test_attribute(self):
        class AttributeDict(dict):
            pass

        d = AttributeDict(a=1)
        d.a = 2
        assert attribute("a").get(d) == 2
        assert item("a").get(d) == 1
        attribute("a").set(d, 3)
        assert d.a == 3
        assert d["a"] == 1

    def test_optional(self):
        accessor = item("a").appending(item("b").optional())
        assert accessor.get({"a": None}) is None
        assert accessor.get({"a": {"b": 2}}) == 2
        model = {"a": None}
        assert accessor.set(model, 3) == {"a": None}
        model = {"a": {"b": 2}}
        assert accessor.set(model, 3) == {"a": {"b": 3}}

    def test_custom_accessor(self):
        celsius = Accessor(
            get=lambda d: (d["fahrenheit"] - 32) * 5 / 9,
            set=lambda d, c: dict(d, fahrenheit=c * 9 / 5 + 32),
            path=("celsius",),
        )
        history = History({"fahrenheit": 212.0})
        history.modify(celsius, lambda c: c - 100)
        assert history.value == {"fahrenheit": 32.0}
        history.undo()
        assert history.value == {"fahrenheit": 212.0}


class Counter:

    def __init__(self):
        self.counts = {}


def _getCount(counter, key):
    return counter.counts.get(key, 0)


def _setCount(counter, key, value):
    counter.counts[key] = value
    return counter


registerItemAccess(Counter, _getCount, _setCount)


def test_registerItemAccess():
    history = History(Counter())
    history["apples"].modify(lambda count: count + 3)
    history["pears"].modify(lambda count: count + 1)
    assert history.value.counts == {"apples": 3, "pears": 1}
    history.undo()
    assert history.value.counts == {"apples": 3, "pears": 0}
