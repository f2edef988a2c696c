from enum import Enum


class Color(Enum):
    RED = "red"
    BLACK = "black"


class _NoKey:
    """Marker stored as the nil sentinel's key."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "NO_KEY"


NO_KEY = _NoKey()


class Node:
    """Arena slot for a red-black tree node. Links are handles, never ``None``."""

    __slots__ = ("key", "color", "parent", "left", "right")

    def __init__(self, key, color: Color, parent: int, left: int, right: int) -> None:
        self.key = key
        self.color = color
        self.parent = parent
        self.left = left
        self.right = right

    def __repr__(self) -> str:
        return (
            f"Node(key={self.key!r}, color={self.color.value}, "
            f"parent={self.parent}, left={self.left}, right={self.right})"
        )
