"""# resettable

A general purpose library to record the history of changes made to a value,
to support undo and redo.

A History object owns a single value. Every change to the value is made
through the history, which records it as a reversible step: a forward action
that performs the change and a backward action that reverts it. The history
can then move backward (undo) and forward (redo) through the recorded steps.

    >>> history = History({"title": "untitled", "size": [100, 100]})
    >>> _ = history["title"].set("drawing")
    >>> _ = history["size"][0].modify(lambda width: width * 2)
    >>> history.value
    {'title': 'drawing', 'size': [200, 100]}
    >>> _ = history.undo()
    >>> history.value
    {'title': 'drawing', 'size': [100, 100]}
    >>> _ = history.undoAll()
    >>> history.value
    {'title': 'untitled', 'size': [100, 100]}
    >>> _ = history.redoAll()
    >>> history.value
    {'title': 'drawing', 'size': [200, 100]}

Recording a step after undoing discards the steps that could have been
redone, unless the step is recorded with `operation="insert"`. Two more
operations weave a change into the existing history instead of adding a
step: `operation="amend"` replaces the change made by the current step, and
`operation="inject"` threads a change through the current step, so that it is
undone and redone along with it.

Changes to parts of the value are recorded via accessors: pairs of functions
that get and set a part of a value. A proxy, as returned by `history.proxy`
or `history[key]`, navigates into nested mappings, sequences and objects and
builds the accessors on the fly.

When no undo action is given, the undo action for a change to a part of the
value restores a snapshot of the part taken before the change. That snapshot
is not a copy, so changes that mutate an object in place must be recorded
with an explicit undo action. The sequence helpers of the proxy (append(),
insert(), remove() and swapAt()) do this.

See resettable.debugging for functions to inspect a complete history.
"""

from .accessors import Accessor, attribute, identity, item, path, registerItemAccess
from .history import AMEND, DEFAULT, INJECT, INSERT, History, HistoryError, HistoryNode
from .proxies import IfLetProxy, SubValueProxy

__all__ = [
    "AMEND",
    "Accessor",
    "DEFAULT",
    "History",
    "HistoryError",
    "HistoryNode",
    "INJECT",
    "INSERT",
    "IfLetProxy",
    "SubValueProxy",
    "attribute",
    "identity",
    "item",
    "path",
    "registerItemAccess",
]

try:
    from ._version import version as __version__
except ImportError:
    __version__ = "<unknown>"
