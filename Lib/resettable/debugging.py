"""Tools to inspect the full contents of a History, for debugging purposes.

    history = History({"v": 0})
    history["v"].set(1)
    history["v"].set(10)
    history.undo()
    print(dump(history))

prints:

    initial:
      {'v': 0}
    >>> step 1:
      replace /v: 1
    step 2:
      replace /v: 10

The functions here walk the history from its root to its most recent step,
and move it back to its original position afterwards.
"""

from collections.abc import Mapping, Sequence
import copy
from dataclasses import dataclass, field
import pprint
import typing


@dataclass(frozen=True)
class Change:

    """A Change describes one difference between two values:

    - op: one of "add", "replace" or "remove"
    - path: a tuple of keys, attribute names or sequence indices leading
      from the root value to the changed item
    - value: the new item, or None when removing an item
    """

    op: str
    path: tuple
    value: typing.Any


@dataclass
class ValuesDump:

    items: list = field(default_factory=list)
    currentIndex: int = 0


def valuesDump(history, copier=copy.deepcopy):
    """Return a ValuesDump with a copy of the value at every position of the
    history, and the index of the current position.
    """
    originalNode = history.currentNode
    result = ValuesDump()
    with history.rewound():
        while True:
            if history.currentNode is originalNode:
                result.currentIndex = len(result.items)
            result.items.append(copier(history.value))
            if not history.canRedo():
                break
            history.redo()
    return result


def diff(old, new, path=()):
    """Return a list of Change objects that describe how `new` differs from
    `old`. Mappings, equally long sequences and objects with the same type
    are compared item by item, other values are compared as a whole.
    """
    if isinstance(old, Mapping) and isinstance(new, Mapping):
        return _diffMappings(old, new, path)
    if _isSequence(old) and _isSequence(new) and len(old) == len(new):
        changes = []
        for index, (oldItem, newItem) in enumerate(zip(old, new)):
            changes.extend(diff(oldItem, newItem, path + (index,)))
        return changes
    if type(old) is type(new) and hasattr(old, "__dict__") and not isinstance(old, type):
        return _diffMappings(vars(old), vars(new), path)
    if old == new:
        return []
    return [Change("replace", path, new)]


def _diffMappings(old, new, path):
    changes = []
    for key in old:
        if key not in new:
            changes.append(Change("remove", path + (key,), None))
        else:
            changes.extend(diff(old[key], new[key], path + (key,)))
    for key in new:
        if key not in old:
            changes.append(Change("add", path + (key,), new[key]))
    return changes


def _isSequence(value):
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def formatPath(path):
    return "/" + "/".join(str(pathElement) for pathElement in path)


def dump(history):
    """Return a text representation of the history: the initial value,
    followed by the changes made by each step. The current position is marked
    with ">>>".
    """
    values = valuesDump(history)
    lines = []
    for index, value in enumerate(values.items):
        header = "initial:" if index == 0 else f"step {index}:"
        if index == values.currentIndex:
            header = ">>> " + header
        lines.append(header)
        if index == 0:
            lines.extend("  " + line for line in pprint.pformat(value).splitlines())
            continue
        changes = diff(values.items[index - 1], value)
        if not changes:
            lines.append("  No state changes")
        for change in changes:
            if change.op == "remove":
                lines.append(f"  remove {formatPath(change.path)}")
            else:
                lines.append(f"  {change.op} {formatPath(change.path)}: {change.value!r}")
    return "\n".join(lines)
