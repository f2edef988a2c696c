import logging
import os
import sys
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from slabtree import SlabRedBlackTree, TreeConfig
from slabtree.config import DEFAULT_TREE_CONFIG


def test_defaults():
    assert DEFAULT_TREE_CONFIG.initial_capacity == 16
    assert DEFAULT_TREE_CONFIG.max_slots is None


def test_from_env():
    cfg = TreeConfig.from_env({"SLABTREE_INITIAL_CAPACITY": "4", "SLABTREE_MAX_SLOTS": "100"})
    assert cfg.initial_capacity == 4
    assert cfg.max_slots == 100


def test_from_env_empty_max_slots_means_unbounded():
    cfg = TreeConfig.from_env({"SLABTREE_MAX_SLOTS": ""})
    assert cfg.max_slots is None
    assert cfg.initial_capacity == 16


@pytest.mark.parametrize(
    "env",
    [
        {"SLABTREE_INITIAL_CAPACITY": "zero"},
        {"SLABTREE_INITIAL_CAPACITY": "0"},
        {"SLABTREE_MAX_SLOTS": "-3"},
    ],
)
def test_from_env_rejects_bad_values(env):
    with pytest.raises(ValueError):
        TreeConfig.from_env(env)


def test_tree_reads_environment(monkeypatch):
    monkeypatch.setenv("SLABTREE_INITIAL_CAPACITY", "2")
    monkeypatch.setenv("SLABTREE_MAX_SLOTS", "3")
    tree = SlabRedBlackTree()
    assert tree.arena.capacity == 2
    assert tree.config.max_slots == 3


def test_keyword_overrides(monkeypatch):
    monkeypatch.delenv("SLABTREE_INITIAL_CAPACITY", raising=False)
    monkeypatch.delenv("SLABTREE_MAX_SLOTS", raising=False)
    tree = SlabRedBlackTree(initial_capacity=2)
    assert tree.arena.capacity == 2
    for k in range(10):
        tree.insert(k)
    assert tree.arena.capacity == 16
    assert tree.inorder() == list(range(10))


def test_overrides_validate():
    with pytest.raises(ValueError):
        SlabRedBlackTree(TreeConfig(), initial_capacity=0)


def test_explicit_none_lifts_env_limit(monkeypatch):
    monkeypatch.setenv("SLABTREE_MAX_SLOTS", "3")
    tree = SlabRedBlackTree(max_slots=None)
    assert tree.config.max_slots is None
    for k in range(10):
        tree.insert(k)
    assert len(tree) == 10


def test_with_overrides_without_arguments_is_identity():
    cfg = TreeConfig(initial_capacity=4, max_slots=9)
    assert cfg.with_overrides() is cfg
    assert cfg.with_overrides(max_slots=None).max_slots is None


def test_malformed_env_falls_back_to_defaults(monkeypatch, caplog):
    monkeypatch.setenv("SLABTREE_INITIAL_CAPACITY", "lots")
    monkeypatch.delenv("SLABTREE_MAX_SLOTS", raising=False)
    with caplog.at_level(logging.WARNING, logger="slabtree.slab.tree"):
        tree = SlabRedBlackTree()
    assert tree.config == DEFAULT_TREE_CONFIG
    assert any("using default tree config" in r.getMessage() for r in caplog.records)
    tree.insert(1)
    assert tree.inorder() == [1]
