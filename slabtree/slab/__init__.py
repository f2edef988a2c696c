from .arena import Arena, NO_SLOT
from .node import NO_KEY, Color, Node
from .tree import SlabRedBlackTree
