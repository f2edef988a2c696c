"""Red-black invariant checks for :class:`~slabtree.slab.tree.SlabRedBlackTree`.

Properties checked:

* the nil sentinel is black, keyless and the only keyless slot;
* the root is black and its parent is nil;
* every link of a reachable node is a handle issued by the arena, and each
  child points back to its parent;
* no red node has a red child;
* every path down to nil crosses the same number of black nodes;
* in-order keys never decrease and every arena slot is reachable.
"""

from ..errors import InvariantViolation
from ..slab.node import NO_KEY, Color


def _black_height(tree, handle: int, seen: set) -> int:
    arena = tree.arena
    nil = tree.nil
    if handle == nil:
        return 0
    if handle in seen:
        raise InvariantViolation(f"node {handle} reached twice")
    seen.add(handle)
    node = arena[handle]
    if node.color not in (Color.RED, Color.BLACK):
        raise InvariantViolation(f"node {handle} has no valid color: {node.color!r}")
    if node.key is NO_KEY:
        raise InvariantViolation(f"node {handle} carries the sentinel key")

    heights = []
    for child in (node.left, node.right):
        if child not in arena:
            raise InvariantViolation(f"node {handle} links to unknown handle {child!r}")
        if child != nil:
            child_node = arena[child]
            if child_node.parent != handle:
                raise InvariantViolation(
                    f"node {child} has parent {child_node.parent}, expected {handle}"
                )
            if node.color is Color.RED and child_node.color is Color.RED:
                raise InvariantViolation(f"red node {handle} has red child {child}")
        heights.append(_black_height(tree, child, seen))

    if heights[0] != heights[1]:
        raise InvariantViolation(
            f"black height differs under node {handle}: {heights[0]} != {heights[1]}"
        )
    return heights[0] + (1 if node.color is Color.BLACK else 0)


def check_invariants(tree) -> int:
    """Raise :class:`InvariantViolation` on the first broken property.

    Returns the black height of the root (0 for an empty tree).
    """
    arena = tree.arena
    nil = tree.nil
    sentinel = arena[nil]
    if sentinel.color is not Color.BLACK:
        raise InvariantViolation("nil sentinel is not black")
    if sentinel.key is not NO_KEY:
        raise InvariantViolation("nil sentinel holds a key")
    for handle in arena:
        if handle != nil and arena[handle].key is NO_KEY:
            raise InvariantViolation(f"slot {handle} is a second sentinel")

    root = tree.root
    if root not in arena:
        raise InvariantViolation(f"root {root!r} is not a live handle")
    if root != nil:
        if arena[root].color is not Color.BLACK:
            raise InvariantViolation("root is not black")
        if arena[root].parent != nil:
            raise InvariantViolation("root's parent is not the nil sentinel")

    seen: set = set()
    height = _black_height(tree, root, seen)
    if len(seen) != len(tree) or len(seen) != len(arena) - 1:
        raise InvariantViolation(
            f"{len(seen)} nodes reachable, tree size {len(tree)}, arena slots {len(arena)}"
        )

    prev = NO_KEY
    for key in tree:
        if prev is not NO_KEY and key < prev:
            raise InvariantViolation(f"keys out of order: {key!r} after {prev!r}")
        prev = key
    return height
