"""Tree configuration.

Values default to the environment variables SLABTREE_INITIAL_CAPACITY and
SLABTREE_MAX_SLOTS when read through :meth:`TreeConfig.from_env`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping


@dataclass
class TreeConfig:
    """Sizing and limits for the arena backing a tree."""

    initial_capacity: int = 16
    max_slots: int | None = None

    def __post_init__(self) -> None:
        if self.initial_capacity < 1:
            raise ValueError("initial_capacity must be >= 1")
        if self.max_slots is not None and self.max_slots < 1:
            raise ValueError("max_slots must be >= 1")

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "TreeConfig":
        env = os.environ if env is None else env
        max_slots = env.get("SLABTREE_MAX_SLOTS")
        try:
            return cls(
                initial_capacity=int(env.get("SLABTREE_INITIAL_CAPACITY", 16)),
                max_slots=int(max_slots) if max_slots else None,
            )
        except ValueError as e:
            raise ValueError(f"invalid slabtree environment: {e}") from e

    def with_overrides(self, **overrides) -> "TreeConfig":
        """Return a copy with every given field replaced.

        An explicit ``max_slots=None`` is applied too, lifting a limit set
        through the environment.
        """
        return replace(self, **overrides) if overrides else self


DEFAULT_TREE_CONFIG = TreeConfig()
