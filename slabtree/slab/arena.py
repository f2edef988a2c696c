import logging

from ..errors import ArenaFullError, InvalidHandleError

logger = logging.getLogger(__name__)

# Reserved "no slot" value. Never issued, never stored in a tree link.
NO_SLOT = -1


class Arena:
    """Growable pool of slots addressed by integer handles.

    Handles are issued in order starting at 0 and stay valid, always
    naming the same object, until :meth:`close`. Slots are never freed or
    reused. Every lookup is checked: a handle this arena did not issue
    raises :class:`InvalidHandleError` instead of reading a wrong slot.
    """

    def __init__(self, initial_capacity: int = 16, max_slots: int | None = None) -> None:
        if initial_capacity < 1:
            raise ValueError("initial_capacity must be >= 1")
        if max_slots is not None and max_slots < 1:
            raise ValueError("max_slots must be >= 1")
        self._slots: list = [None] * initial_capacity
        self._len = 0
        self.max_slots = max_slots
        self._closed = False

    @property
    def capacity(self) -> int:
        return len(self._slots)

    @property
    def closed(self) -> bool:
        return self._closed

    def allocate(self, node) -> int:
        """Store ``node`` in a fresh slot and return its handle."""
        if self._closed:
            raise ValueError("allocate on closed arena")
        if self.max_slots is not None and self._len >= self.max_slots:
            raise ArenaFullError(f"arena exhausted: {self._len} of {self.max_slots} slots in use")
        if self._len == len(self._slots):
            self._grow()
        handle = self._len
        self._slots[handle] = node
        self._len += 1
        return handle

    def _grow(self) -> None:
        new_capacity = len(self._slots) * 2
        if self.max_slots is not None:
            new_capacity = min(new_capacity, self.max_slots)
        self._slots.extend([None] * (new_capacity - len(self._slots)))
        logger.debug("arena grown to %d slots", new_capacity)

    def _check(self, handle) -> int:
        if self._closed:
            raise InvalidHandleError(f"handle {handle!r} used after arena was closed")
        if isinstance(handle, bool) or not isinstance(handle, int):
            raise InvalidHandleError(f"not a handle: {handle!r}")
        if handle < 0 or handle >= self._len:
            raise InvalidHandleError(f"handle {handle} was not issued by this arena")
        return handle

    def get(self, handle: int):
        """Return the live object stored at ``handle``."""
        return self._slots[self._check(handle)]

    __getitem__ = get

    def __contains__(self, handle) -> bool:
        try:
            self._check(handle)
        except InvalidHandleError:
            return False
        return True

    def __len__(self) -> int:
        return self._len

    def __iter__(self):
        return iter(range(self._len))

    def close(self) -> None:
        """Tear down the arena, invalidating every handle it issued."""
        self._closed = True
        self._slots = []
        self._len = 0
