# world-painter/history.py

import structlog

logger = structlog.get_logger()


class RingStack:
    """Fixed-capacity LIFO stack; pushing onto a full stack drops the oldest entry."""

    def __init__(self, capacity):
        self.capacity = max(0, int(capacity))
        self._items = [None] * self.capacity
        self._head = 0  # Slot the next push writes to
        self._count = 0

    def __len__(self):
        return self._count

    def __bool__(self):
        return self._count > 0

    def __iter__(self):
        """Yields entries newest first."""
        for i in range(1, self._count + 1):
            yield self._items[(self._head - i) % self.capacity]

    def push(self, item):
        if self.capacity == 0:
            return
        self._items[self._head] = item
        self._head = (self._head + 1) % self.capacity
        self._count = min(self._count + 1, self.capacity)

    def pop(self):
        if self._count == 0:
            return None
        self._head = (self._head - 1) % self.capacity
        item = self._items[self._head]
        self._items[self._head] = None
        self._count -= 1
        return item

    def clear(self):
        self._items = [None] * self.capacity
        self._head = 0
        self._count = 0


class HistoryManager:
    """Manages the undo/redo stacks of full map snapshots."""

    def __init__(self, history_limit, on_change=None):
        self.history_limit = int(history_limit)
        self.undo_stack = RingStack(self.history_limit)
        self.redo_stack = RingStack(self.history_limit)
        self.on_change = on_change

    @property
    def enabled(self):
        return self.history_limit > 0

    @property
    def can_undo(self):
        return bool(self.undo_stack)

    @property
    def can_redo(self):
        return bool(self.redo_stack)

    def record_for_undo(self, state):
        if not self.enabled:
            return
        self.undo_stack.push(state)
        self.redo_stack.clear()
        self._notify()

    def undo(self, current_state):
        if not self.undo_stack:
            return None
        self.redo_stack.push(current_state)
        state = self.undo_stack.pop()
        logger.debug("Undo", undo_depth=len(self.undo_stack), redo_depth=len(self.redo_stack))
        self._notify()
        return state

    def redo(self, current_state):
        if not self.redo_stack:
            return None
        self.undo_stack.push(current_state)
        state = self.redo_stack.pop()
        logger.debug("Redo", undo_depth=len(self.undo_stack), redo_depth=len(self.redo_stack))
        self._notify()
        return state

    def _notify(self):
        if self.on_change is not None:
            self.on_change(self)
