from __future__ import annotations

import logging
from typing import Iterator

from .arena import Arena
from .node import NO_KEY, Color, Node
from ..config import DEFAULT_TREE_CONFIG, TreeConfig
from ..errors import ArenaFullError, InvalidHandleError
from ..utils.event_logger import EventLogger
from ..utils.validation import check_invariants

logger = logging.getLogger(__name__)


class SlabRedBlackTree:
    """Red-black tree whose nodes live in an :class:`Arena`.

    Parent and child links are arena handles. Slot 0 holds the nil
    sentinel: it is always black, carries :data:`NO_KEY`, and is the value
    of every absent child and of the root's parent, so no link is ever
    ``None``.

    Keys only need ``<``. A key that is not less than a node's key goes
    right, so equal keys (and incomparable ones such as NaN) end up after
    the keys already in the tree and in-order traversal keeps their
    insertion order.

    Without ``config`` the settings come from the environment; if those
    values are malformed a warning is logged and the defaults are used,
    so construction never fails on the environment alone.
    """

    def __init__(
        self,
        config: TreeConfig | None = None,
        *,
        event_logger: EventLogger | None = None,
        **overrides,
    ) -> None:
        self.event_logger = event_logger
        if config is None:
            try:
                config = TreeConfig.from_env()
            except ValueError as e:
                self._log(f"{e}; using default tree config", logging.WARNING)
                config = DEFAULT_TREE_CONFIG
        self.config = config.with_overrides(**overrides)
        self._arena = Arena(self.config.initial_capacity, self.config.max_slots)

        sentinel = Node(NO_KEY, Color.BLACK, 0, 0, 0)
        self._nil = self._arena.allocate(sentinel)
        sentinel.parent = sentinel.left = sentinel.right = self._nil
        self._root = self._nil
        self._size = 0
        self._log(
            f"SlabRedBlackTree created (capacity={self._arena.capacity}, "
            f"max_slots={self.config.max_slots})"
        )

    def _log(self, msg: str, level: int = logging.INFO) -> None:
        if self.event_logger:
            self.event_logger.log(msg)
        else:
            logger.log(level, msg)

    @property
    def root(self) -> int:
        return self._root

    @property
    def nil(self) -> int:
        return self._nil

    @property
    def arena(self) -> Arena:
        return self._arena

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return f"SlabRedBlackTree(size={self._size}, root={self._root})"

    # Rotations

    def _rotate_left(self, x: int) -> None:
        arena = self._arena
        xn = arena[x]
        y = xn.right
        yn = arena[y]
        xn.right = yn.left
        # may overwrite nil's parent, which is never read
        arena[yn.left].parent = x
        yn.parent = xn.parent
        if xn.parent == self._nil:
            self._root = y
        elif x == arena[xn.parent].left:
            arena[xn.parent].left = y
        else:
            arena[xn.parent].right = y
        yn.left = x
        xn.parent = y
        logger.debug("rotate left at %d", x)

    def _rotate_right(self, x: int) -> None:
        arena = self._arena
        xn = arena[x]
        y = xn.left
        yn = arena[y]
        xn.left = yn.right
        arena[yn.right].parent = x
        yn.parent = xn.parent
        if xn.parent == self._nil:
            self._root = y
        elif x == arena[xn.parent].right:
            arena[xn.parent].right = y
        else:
            arena[xn.parent].left = y
        yn.right = x
        xn.parent = y
        logger.debug("rotate right at %d", x)

    def _check_rotation(self, x: int, child: int) -> None:
        if x == self._nil:
            raise ValueError("cannot rotate the nil sentinel")
        if child == self._nil:
            raise ValueError(f"cannot rotate at {x}: child to lift is nil")

    def rotate_left(self, x: int) -> None:
        """Lift ``x``'s right child into its place.

        Keeps in-order sequence but not coloring; :meth:`insert` is the
        only caller that keeps the tree balanced.
        """
        self._check_rotation(x, self._arena[x].right)
        self._rotate_left(x)

    def rotate_right(self, x: int) -> None:
        """Mirror of :meth:`rotate_left`."""
        self._check_rotation(x, self._arena[x].left)
        self._rotate_right(x)

    # Insertion

    def insert(self, key) -> int:
        """Insert ``key`` and return the handle of its node.

        Raises :class:`ArenaFullError` when the arena is at ``max_slots``;
        the descent runs before allocation and nothing is linked until the
        slot exists, so a failed insert leaves the tree untouched.
        """
        arena = self._arena
        nil = self._nil
        parent = nil
        go_left = False
        x = self._root
        while x != nil:
            parent = x
            node = arena[x]
            go_left = key < node.key
            x = node.left if go_left else node.right

        try:
            z = arena.allocate(Node(key, Color.RED, parent, nil, nil))
        except ArenaFullError as e:
            self._log(f"insert rejected: {e}", logging.WARNING)
            raise

        if parent == nil:
            self._root = z
        elif go_left:
            arena[parent].left = z
        else:
            arena[parent].right = z
        self._size += 1
        self._insert_fixup(z)
        return z

    def _insert_fixup(self, z: int) -> None:
        arena = self._arena
        while arena[arena[z].parent].color is Color.RED:
            p = arena[z].parent
            g = arena[p].parent
            gn = arena[g]
            if p == gn.left:
                u = gn.right
                if arena[u].color is Color.RED:
                    arena[p].color = Color.BLACK
                    arena[u].color = Color.BLACK
                    gn.color = Color.RED
                    z = g
                    continue
                if z == arena[p].right:
                    z = p
                    self._rotate_left(z)
                    p = arena[z].parent
                arena[p].color = Color.BLACK
                gn.color = Color.RED
                self._rotate_right(g)
            else:
                u = gn.left
                if arena[u].color is Color.RED:
                    arena[p].color = Color.BLACK
                    arena[u].color = Color.BLACK
                    gn.color = Color.RED
                    z = g
                    continue
                if z == arena[p].left:
                    z = p
                    self._rotate_right(z)
                    p = arena[z].parent
                arena[p].color = Color.BLACK
                gn.color = Color.RED
                self._rotate_left(g)
        arena[self._root].color = Color.BLACK

    # Lookup and traversal

    def node(self, handle: int) -> Node:
        """Low-level accessor: the live, mutable arena slot for ``handle``.

        Writing to the returned node (including the nil sentinel's color)
        bypasses the tree and can break its invariants; use :meth:`key` and
        :meth:`color` for read-only inspection.
        """
        return self._arena[handle]

    def key(self, handle: int):
        node = self._arena[handle]
        if handle == self._nil:
            raise InvalidHandleError("the nil sentinel has no key")
        return node.key

    def color(self, handle: int) -> Color:
        return self._arena[handle].color

    def search(self, key) -> int | None:
        """Return the handle of a node whose key equals ``key``, or ``None``."""
        arena = self._arena
        x = self._root
        while x != self._nil:
            node = arena[x]
            if key == node.key:
                return x
            x = node.left if key < node.key else node.right
        return None

    def __contains__(self, key) -> bool:
        return self.search(key) is not None

    def minimum(self, handle: int | None = None) -> int:
        """Leftmost handle under ``handle`` (default: root); nil for an empty subtree."""
        x = self._root if handle is None else handle
        arena = self._arena
        if x == self._nil:
            return x
        while arena[x].left != self._nil:
            x = arena[x].left
        return x

    def maximum(self, handle: int | None = None) -> int:
        x = self._root if handle is None else handle
        arena = self._arena
        if x == self._nil:
            return x
        while arena[x].right != self._nil:
            x = arena[x].right
        return x

    def successor(self, handle: int) -> int:
        """Next handle in key order, or nil after the last node."""
        arena = self._arena
        if handle == self._nil:
            raise ValueError("the nil sentinel has no successor")
        node = arena[handle]
        if node.right != self._nil:
            return self.minimum(node.right)
        x = handle
        y = node.parent
        while y != self._nil and x == arena[y].right:
            x = y
            y = arena[y].parent
        return y

    def handles(self) -> Iterator[int]:
        """Yield real node handles in key order."""
        arena = self._arena
        nil = self._nil
        stack: list[int] = []
        x = self._root
        while stack or x != nil:
            while x != nil:
                stack.append(x)
                x = arena[x].left
            x = stack.pop()
            yield x
            x = arena[x].right

    def __iter__(self):
        arena = self._arena
        for handle in self.handles():
            yield arena[handle].key

    def inorder(self) -> list:
        return list(self)

    def height(self) -> int:
        """Number of real nodes on the longest root-to-leaf path."""
        arena = self._arena
        nil = self._nil
        level = [self._root] if self._root != nil else []
        height = 0
        while level:
            height += 1
            nxt = []
            for x in level:
                node = arena[x]
                if node.left != nil:
                    nxt.append(node.left)
                if node.right != nil:
                    nxt.append(node.right)
            level = nxt
        return height

    def validate(self) -> int:
        """Check every red-black invariant; return the root's black height."""
        return check_invariants(self)

    black_height = validate

    def close(self) -> None:
        """Release the arena. Every handle issued by this tree becomes invalid."""
        self._arena.close()
        self._root = self._nil
        self._size = 0
        self._log("SlabRedBlackTree closed")
