from .accessors import identity, item


class SubValueProxy:

    """A SubValueProxy gives access to a part of the value owned by a History,
    and records changes to that part. Proxies for nested parts are obtained
    by subscripting, or by attribute access for names that don't clash with
    the proxy's own methods:

        >>> from resettable import History
        >>> history = History({"title": "untitled", "items": [1, 2, 3]})
        >>> _ = history.proxy["title"].set("shopping list")
        >>> history.proxy.items.append(4).value
        {'title': 'shopping list', 'items': [1, 2, 3, 4]}
        >>> history.undo(2).value
        {'title': 'untitled', 'items': [1, 2, 3]}

    All recording methods return the history, and accept an `operation`
    argument and info keyword arguments, just like History.record().
    """

    def __init__(self, history, accessor=identity):
        self._history = history
        self._accessor = accessor

    def __repr__(self):
        return f"{self.__class__.__name__}({self.value!r}, path={self._accessor.path})"

    @property
    def history(self):
        return self._history

    @property
    def accessor(self):
        return self._accessor

    @property
    def value(self):
        return self._accessor.get(self._history.value)

    # Navigation

    def _childProxy(self, accessor):
        return SubValueProxy(self._history, self._accessor.appending(accessor))

    def __getitem__(self, key):
        return self._childProxy(item(key))

    def __getattr__(self, attr):
        if attr.startswith("_"):
            raise AttributeError(attr)
        return self[attr]

    def at(self, *keys):
        proxy = self
        for key in keys:
            proxy = proxy[key]
        return proxy

    @property
    def ifLet(self):
        """A proxy for the same part, which ignores changes while the part is
        None. Parts nested below it read as None while it is None.
        """
        return IfLetProxy(self._history, self._accessor)

    def _isAbsent(self):
        return False

    # Modification

    def set(self, value, operation="default", **info):
        if self._isAbsent():
            return self._history
        return self._history.assign(self._accessor, value, operation, **info)

    def modify(self, action, undo=None, operation="default", **info):
        """Record a change to the part. See History.modify() for the
        limitations of the snapshot taken when `undo` is not given.
        """
        if self._isAbsent():
            return self._history
        return self._history.modify(self._accessor, action, undo, operation, **info)

    def ifNil(self, value, operation="default", **info):
        """Set the part to `value`, but only if it currently is None."""
        if self.value is not None:
            return self._history
        return self._history.assign(self._accessor, value, operation, **info)

    # Mutable sequence helpers. These record explicit undo actions, as the
    # sequence is modified in place.

    def append(self, element, operation="default", **info):
        def appendElement(sequence):
            sequence.append(element)

        def removeLast(sequence):
            del sequence[-1]

        return self.modify(appendElement, removeLast, operation, **info)

    def insert(self, element, at, operation="default", **info):
        if self._isAbsent():
            return self._history
        numItems = len(self.value)
        if at < 0:
            at = max(0, at + numItems)
        at = min(at, numItems)

        def insertElement(sequence):
            sequence.insert(at, element)

        def removeElement(sequence):
            del sequence[at]

        return self.modify(insertElement, removeElement, operation, **info)

    def remove(self, at, operation="default", **info):
        if self._isAbsent():
            return self._history
        sequence = self.value
        if at < 0:
            at += len(sequence)
        if not (0 <= at < len(sequence)):
            raise IndexError("sequence index out of range")
        removedElement = sequence[at]

        def removeElement(sequence):
            del sequence[at]

        def reinsertElement(sequence):
            sequence.insert(at, removedElement)

        return self.modify(removeElement, reinsertElement, operation, **info)

    def swapAt(self, index1, index2, operation="default", **info):
        def swapElements(sequence):
            sequence[index1], sequence[index2] = sequence[index2], sequence[index1]

        return self.modify(swapElements, swapElements, operation, **info)


class IfLetProxy(SubValueProxy):

    def _childProxy(self, accessor):
        return IfLetProxy(self._history, self._accessor.appending(accessor.optional()))

    def _isAbsent(self):
        return self.value is None
