from contextlib import contextmanager
import logging

from .accessors import Accessor, item, path


logger = logging.getLogger(__name__)


# Operation behaviors for recording a step

DEFAULT = "default"
AMEND = "amend"
INSERT = "insert"
INJECT = "inject"

OPERATIONS = (DEFAULT, AMEND, INSERT, INJECT)


class HistoryError(Exception):
    pass


class History:

    """A History owns a single value and records every change made to it as
    a reversible step. The steps form a chain of HistoryNode objects, and the
    history keeps a pointer to the node that represents the present.

        >>> history = History({"v": 0})

    A step is recorded as a pair of actions. An action is a callable taking
    the value; it either mutates the value in place and returns None, or it
    returns a replacement value.

        >>> def forward(d): d["v"] = 1
        >>> def backward(d): d["v"] = 0
        >>> _ = history.record(forward, backward, title="set v")
        >>> history.value
        {'v': 1}
        >>> _ = history.undo()
        >>> history.value
        {'v': 0}
        >>> _ = history.redo()
        >>> history.value
        {'v': 1}

    Undo and redo at either end of the history are no-ops:

        >>> history.redo().value
        {'v': 1}

    Changes to a part of the value are most easily recorded through an
    accessor, in which case the undo action can be derived from a snapshot
    of the part:

        >>> _ = history.modify(("v",), lambda v: v * 10)
        >>> history.value
        {'v': 10}
        >>> history.undo().value
        {'v': 1}

    Each recording call takes an `operation` argument that determines how
    the step is woven into the chain of steps:

    - "default" adds a step after the current one, discarding any steps that
      could be redone.
    - "amend" replaces the change made by the current step, without adding a
      new step. This is useful to coalesce a continuous edit, such as a drag,
      into a single step.
    - "insert" adds a step after the current one, but keeps the steps that
      could be redone.
    - "inject" threads a change into the current step: the change is applied
      now, is undone when the current step is undone and is redone when the
      current step is redone. No step is added and the pointer doesn't move.

    History() has an optional argument called `changeMonitor`, which should
    be a callable taking one positional argument. It is called with the
    history for every step that is recorded, and for every undo() or redo()
    that performed an action. It is not called while the history is
    rewound.

    A change amended or injected at the root position is undone in place by
    an undo at the root, and redone in place by the next redo.
    """

    def __init__(self, value, changeMonitor=None):
        self._value = value
        self._rootNode = HistoryNode()
        self._currentNode = self._rootNode
        self._changeMonitor = changeMonitor
        self._position = 0
        self._actionRunning = False
        self._rewoundDepth = 0
        # Forward action and state of a change amended or injected at the root
        self._rootForward = None
        self._rootChangeUndone = False

    def __repr__(self):
        return f"{self.__class__.__name__}({self._value!r}, position={self.position})"

    @property
    def value(self):
        return self._value

    @property
    def rootNode(self):
        return self._rootNode

    @property
    def currentNode(self):
        return self._currentNode

    @property
    def position(self):
        """The index of the current node, counting from the root node."""
        return self._position

    def iterNodes(self):
        """Iterate over all nodes, from the root node to the most recent node."""
        node = self._rootNode
        while node is not None:
            yield node
            node = node.next

    def stepCount(self):
        """Return the number of recorded steps, that is the number of
        positions after the root position.
        """
        return sum(1 for node in self.iterNodes()) - 1

    @property
    def proxy(self):
        """A proxy for the whole value, used to navigate into parts of the
        value and to record changes to them.
        """
        from .proxies import SubValueProxy
        return SubValueProxy(self)

    def __getitem__(self, key):
        return self.proxy[key]

    # Undo/Redo

    def canUndo(self):
        return self._currentNode.prev is not None

    def canRedo(self):
        return self._currentNode.next is not None

    def undoInfo(self):
        """Return the info dict for the step that undo() would revert, or None
        if there is nothing to undo.

        The info dict is specified as keyword arguments to the recording
        methods, for example record(forward, backward, title="move").
        """
        if self.canUndo():
            return self._currentNode.info
        else:
            return None  # at the root

    def redoInfo(self):
        """Return the info dict for the step that redo() would perform, or None
        if there is nothing to redo.
        """
        if self.canRedo():
            return self._currentNode.next.info
        else:
            return None  # at the most recent step

    def undo(self, count=1):
        """Revert the current step and move to the previous position. Does
        nothing at the root position.
        """
        for _ in range(count):
            self._performStep(backward=True)
        return self

    def redo(self, count=1):
        """Perform the next step and move to the next position. Does nothing
        at the most recent position.
        """
        for _ in range(count):
            self._performStep(backward=False)
        return self

    def undoAll(self):
        """Undo until the position stops changing."""
        while True:
            state = self._stepState()
            self.undo()
            if self._stepState() == state:
                break
        return self

    def redoAll(self):
        """Redo until the position stops changing."""
        while True:
            state = self._stepState()
            self.redo()
            if self._stepState() == state:
                break
        return self

    def _stepState(self):
        return self._currentNode, self._rootChangeUndone

    def _performStep(self, backward):
        self._ensureIdle()
        node = self._currentNode
        direction = "undo" if backward else "redo"
        if node is self._rootNode and node.backward is not None:
            if backward or self._rootChangeUndone:
                self._performRootChange(backward)
                return
        if backward:
            action, apply, offset = node.backward, node.applyBackward, -1
        else:
            action, apply, offset = node.forward, node.applyForward, 1
        with self._runningAction():
            self._currentNode, self._value = apply(self._value)
        if self._currentNode is not node:
            self._position += offset
        if action is None:
            logger.debug("nothing to %s", direction)
            return
        logger.debug("%s to position %d", direction, self._position)
        self._notifyChange()

    def _performRootChange(self, backward):
        # A change amended or injected at the root is undone and redone in
        # place, at most once in each direction.
        direction = "undo" if backward else "redo"
        if backward == self._rootChangeUndone:
            logger.debug("nothing to %s", direction)
            return
        action = self._rootNode.backward if backward else self._rootForward
        with self._runningAction():
            self._value = action(self._value)
        self._rootChangeUndone = backward
        logger.debug("%s root change", direction)
        self._notifyChange()

    @contextmanager
    def rewound(self):
        """Return a context manager that moves the history to the root
        position for the duration of the with-block, and moves it back to the
        original position afterwards.

        Steps can be undone and redone within the block, but not recorded.
        """
        self._ensureIdle()
        originalNode = self._currentNode
        # Changes are not reported while rewound
        self._rewoundDepth += 1
        try:
            while self.canUndo():
                self.undo()
            yield self
        finally:
            try:
                self._moveTo(originalNode)
            finally:
                self._rewoundDepth -= 1

    def _moveTo(self, target):
        node = self._currentNode
        while node is not None and node is not target:
            node = node.next
        step = self.redo if node is target else self.undo
        while self._currentNode is not target:
            previous = self._currentNode
            step()
            if self._currentNode is previous:
                break

    # Recording

    def record(self, forward, backward, operation=DEFAULT, **info):
        """Record a change to the whole value. `forward` performs the change,
        `backward` reverts it. The forward action is applied immediately.
        """
        forward = normalizeAction(forward)
        backward = normalizeAction(backward)
        return self._record(forward, lambda: backward, operation, info)

    def modify(self, accessor, action, undo=None, operation=DEFAULT, **info):
        """Record a change to a part of the value. The accessor can be an
        Accessor object, a path tuple or a single key.

        If no `undo` action is given, the part is snapshotted before the
        change, and undoing the step writes the snapshot back. This only
        reverts changes that replace the part: when `action` mutates an
        object that is referenced by the part, the snapshot is that same
        object, and the mutation will not be undone. Pass an explicit `undo`
        action to record such changes.
        """
        accessor = asAccessor(accessor)
        forward = _subValueAction(accessor, normalizeAction(action))
        if undo is not None:
            backward = _subValueAction(accessor, normalizeAction(undo))

            def makeBackward():
                return backward
        else:
            def makeBackward():
                return _subValueRestorer(accessor, accessor.get(self._value))
        return self._record(forward, makeBackward, operation, info)

    def assign(self, accessor, newValue, operation=DEFAULT, **info):
        """Record the replacement of a part of the value by `newValue`. The
        undo action writes back a snapshot of the part.
        """
        accessor = asAccessor(accessor)

        def forward(whole):
            return accessor.set(whole, newValue)

        def makeBackward():
            return _subValueRestorer(accessor, accessor.get(self._value))
        return self._record(forward, makeBackward, operation, info)

    def _record(self, forward, makeBackward, operation, info):
        # makeBackward is called after an amended step has been rolled back,
        # so that snapshots capture the state before that step.
        if operation not in OPERATIONS:
            raise HistoryError(f"unknown operation: {operation!r}")
        self._ensureIdle()
        if self._rewoundDepth:
            raise HistoryError("can't record a step while the history is rewound")
        node = self._currentNode
        if self._rootChangeUndone:
            # Recording from the root discards an undone root change, like
            # any other step that could be redone
            node.backward = None
            self._rootForward = None
            self._rootChangeUndone = False
        with self._rolledBackForAmend(node, operation == AMEND):
            backward = makeBackward()
            with self._runningAction():
                self._value = forward(self._value)

        if operation == DEFAULT:
            newNode = HistoryNode(prev=node, backward=backward, info=info)
            node.next = newNode
            node.forward = forward
            self._currentNode = newNode
            self._position += 1
        elif operation == INSERT:
            newNode = HistoryNode(prev=node, next=node.next, backward=backward,
                                  forward=node.forward, info=info)
            if node.next is not None:
                node.next.prev = newNode
            node.next = newNode
            node.forward = forward
            self._currentNode = newNode
            self._position += 1
        elif operation == AMEND:
            node.backward = backward
            if node.prev is not None:
                node.prev.forward = forward
            else:
                self._rootForward = forward
            if info:
                node.info = info
        elif operation == INJECT:
            node.backward = _chainActions(backward, node.backward)
            if node.prev is not None:
                node.prev.forward = _chainActions(node.prev.forward, forward)
            else:
                self._rootForward = _chainActions(self._rootForward, forward)
        else:
            assert 0, operation

        logger.debug("recorded %s step at position %d", operation, self._position)
        self._notifyChange()
        return self

    @contextmanager
    def _rolledBackForAmend(self, node, enabled):
        if not enabled or node.backward is None:
            yield
            return
        with self._runningAction():
            self._value = node.backward(self._value)
        try:
            yield
        except Exception:
            # Bring the value back in line with the current position
            reapply = node.prev.forward if node.prev is not None else self._rootForward
            if reapply is not None:
                with self._runningAction():
                    self._value = reapply(self._value)
            raise

    # Helpers

    @contextmanager
    def _runningAction(self):
        self._actionRunning = True
        try:
            yield
        finally:
            self._actionRunning = False

    def _ensureIdle(self):
        if self._actionRunning:
            raise HistoryError("can't change the history from within a running action")

    def _notifyChange(self):
        if self._changeMonitor is not None and not self._rewoundDepth:
            self._changeMonitor(self)


class HistoryNode:

    """A position in the history. The `backward` action moves the value from
    this position to the previous one, the `forward` action moves it from this
    position to the next one.

    The root node has no `backward` action (unless the root itself was
    amended), the most recent node has no `forward` action.
    """

    def __init__(self, prev=None, next=None, backward=None, forward=None, info=None):
        self.prev = prev
        self.next = next
        self.backward = backward
        self.forward = forward
        self.info = info if info is not None else {}

    def __repr__(self):
        return (f"{self.__class__.__name__}(info={self.info}, "
                f"hasBackward={self.backward is not None}, hasForward={self.forward is not None})")

    def applyBackward(self, value):
        """Apply the backward action to `value`. Return a (node, value) tuple
        with the previous node, or this node if it is the root node, and the
        resulting value.
        """
        if self.backward is not None:
            value = self.backward(value)
        return (self.prev if self.prev is not None else self), value

    def applyForward(self, value):
        """Apply the forward action to `value`. Return a (node, value) tuple
        with the next node, or this node if it is the most recent node, and
        the resulting value.
        """
        if self.forward is not None:
            value = self.forward(value)
        return (self.next if self.next is not None else self), value


#
# Action functions. Stored actions always return the resulting value; actions
# passed in by client code may instead mutate the value and return None.
#

def normalizeAction(action):
    def normalizedAction(value):
        result = action(value)
        return value if result is None else result
    return normalizedAction


def asAccessor(accessor):
    if isinstance(accessor, Accessor):
        return accessor
    elif isinstance(accessor, tuple):
        return path(*accessor)
    else:
        return item(accessor)


def _chainActions(first, second):
    if first is None:
        return second
    if second is None:
        return first

    def chainedAction(value):
        return second(first(value))
    return chainedAction


def _subValueAction(accessor, action):
    def subValueAction(whole):
        return accessor.set(whole, action(accessor.get(whole)))
    return subValueAction


def _subValueRestorer(accessor, snapshot):
    def restoreSnapshot(whole):
        return accessor.set(whole, snapshot)
    return restoreSnapshot
