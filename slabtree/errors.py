class SlabTreeError(Exception):
    """Base class for errors raised by the slab tree."""


class InvalidHandleError(SlabTreeError, LookupError):
    """Handle was not issued by this arena, or the arena was closed."""


class ArenaFullError(SlabTreeError, MemoryError):
    """The arena reached its configured ``max_slots``."""


class InvariantViolation(SlabTreeError, AssertionError):
    """A red-black or ordering invariant does not hold."""
