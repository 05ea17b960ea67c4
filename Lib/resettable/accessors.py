from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from dataclasses import FrozenInstanceError, dataclass, replace
from functools import singledispatch
import typing


@dataclass(frozen=True)
class Accessor:

    """An Accessor isolates a part of a value: `get(whole)` returns the part,
    `set(whole, part)` stores the part and returns the updated whole. For
    mutable containers the whole is updated in place and returned as is, for
    immutable ones (tuples, frozen dataclasses) a new whole is returned.

        >>> model = {"points": [(0, 0), (10, 20)]}
        >>> accessor = item("points").appending(item(1))
        >>> accessor.get(model)
        (10, 20)
        >>> accessor.set(model, (30, 40))
        {'points': [(0, 0), (30, 40)]}

    The `path` field is informational: it lists the keys that lead from the
    whole to the part, using the same conventions as path tuples, where a
    path element is a key, an attribute name or a sequence index.
    """

    get: typing.Callable
    set: typing.Callable
    path: tuple = ()

    def __repr__(self):
        return f"{self.__class__.__name__}(path={self.path!r})"

    def appending(self, other):
        """Return an accessor for the part of our part that `other` accesses."""
        outerGet, outerSet = self.get, self.set
        innerGet, innerSet = other.get, other.set

        def getPart(whole):
            return innerGet(outerGet(whole))

        def setPart(whole, part):
            return outerSet(whole, innerSet(outerGet(whole), part))

        return Accessor(getPart, setPart, self.path + other.path)

    def optional(self):
        """Return a variant of this accessor that tolerates a whole that is
        None: getting the part yields None, and setting the part does nothing.
        """
        get, set = self.get, self.set

        def getPart(whole):
            return None if whole is None else get(whole)

        def setPart(whole, part):
            return whole if whole is None else set(whole, part)

        return Accessor(getPart, setPart, self.path)


def _getWhole(whole):
    return whole


def _replaceWhole(whole, part):
    return part


identity = Accessor(_getWhole, _replaceWhole)


def item(key):
    """Return an accessor for the item `key`, which is a mapping key, a
    sequence index or an attribute name, depending on the type of the whole.
    """
    def getPart(whole):
        return getItem(whole, key)

    def setPart(whole, part):
        return setItem(whole, key, part)

    return Accessor(getPart, setPart, (key,))


def attribute(name):
    """Return an accessor for the attribute `name`, also for objects that
    would otherwise be accessed by subscript.
    """
    def getPart(whole):
        return getattr(whole, name)

    def setPart(whole, part):
        return _setAttribute(whole, name, part)

    return Accessor(getPart, setPart, (name,))


def path(*keys):
    """Return an accessor for a nested item, following `keys` from the whole."""
    accessor = identity
    for key in keys:
        accessor = accessor.appending(item(key))
    return accessor


#
# Generic item query and replacement functions. setItem() returns the updated
# container, which is a new object for immutable containers.
#
# Custom types can be supported via the registerItemAccess() function.
#

@singledispatch
def getItem(obj, key):
    return getattr(obj, key)


@getItem.register(Mapping)
def _getMappingItem(obj, key):
    return obj[key]


@getItem.register(Sequence)
def _getSequenceItem(obj, key):
    if isinstance(key, str):
        # namedtuple field
        return getattr(obj, key)
    return obj[key]


@singledispatch
def setItem(obj, key, value):
    return _setAttribute(obj, key, value)


@setItem.register(MutableMapping)
def _setMappingItem(obj, key, value):
    obj[key] = value
    return obj


@setItem.register(MutableSequence)
def _setSequenceItem(obj, key, value):
    obj[key] = value
    return obj


@setItem.register(tuple)
def _setTupleItem(obj, key, value):
    if hasattr(obj, "_replace"):
        if not isinstance(key, str):
            key = obj._fields[key]
        return obj._replace(**{key: value})
    items = list(obj)
    items[key] = value
    return tuple(items)


def _setAttribute(obj, attr, value):
    try:
        setattr(obj, attr, value)
    except FrozenInstanceError:
        return replace(obj, **{attr: value})
    return obj


def registerItemAccess(type, getter=None, setter=None):
    """Register item access functions for a type that isn't handled well by
    the generic functions. `getter(obj, key)` returns an item, `setter(obj,
    key, value)` stores an item and returns the updated object.
    """
    if getter is not None:
        getItem.register(type, getter)
    if setter is not None:
        setItem.register(type, setter)
