"""Arena-backed red-black tree."""

from .config import TreeConfig, DEFAULT_TREE_CONFIG
from .errors import ArenaFullError, InvalidHandleError, InvariantViolation, SlabTreeError
from .slab import NO_KEY, NO_SLOT, Arena, Color, Node, SlabRedBlackTree
from .utils import EventLogger, check_invariants

__version__ = "0.1.0"
