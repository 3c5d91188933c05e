"""
Snapshot Unit Tests
Tests for blocktree/schemas/snapshot.py
"""
import io
import json

import pytest
from pydantic import ValidationError

from blocktree.crypto.hashing import default_hasher
from blocktree.merkle.merkle_tree import MerkleTree, merklefy
from blocktree.merkle.node import Node
from blocktree.schemas.snapshot import NodeSnapshot, TreeSnapshot


class TestNodeSnapshot:
    """Tests for node serialisation."""

    def test_leaf(self):
        snap = NodeSnapshot.from_node(Node("aa", 0, 10, data="payload"))

        assert snap.checksum == "aa"
        assert (snap.start_offset, snap.end_offset) == (0, 10)
        assert snap.data == "payload"
        assert snap.left_child is None
        assert snap.right_child is None

    def test_nested_children(self, scenario_tree):
        snap = NodeSnapshot.from_node(scenario_tree.root)

        assert snap.left_child.checksum == scenario_tree.root.left_child.checksum
        assert snap.right_child.right_child.checksum == scenario_tree.leaves()[-1].checksum

    def test_empty_checksum_rejected(self):
        with pytest.raises(ValidationError):
            NodeSnapshot(checksum="", start_offset=0, end_offset=1)

    def test_frozen(self):
        snap = NodeSnapshot(checksum="aa", start_offset=0, end_offset=1)

        with pytest.raises(ValidationError):
            snap.checksum = "bb"


class TestTreeSnapshot:
    """Tests for whole-tree serialisation."""

    def test_metadata(self, scenario_tree):
        snap = TreeSnapshot.from_tree(scenario_tree)

        assert snap.block_size == 10
        assert snap.algorithm == "blake2b"
        assert snap.leaf_count == 13
        assert snap.node_count == 25
        assert snap.root.checksum == scenario_tree.root_checksum

    def test_explicit_algorithm_label(self, scenario_tree):
        assert TreeSnapshot.from_tree(scenario_tree, algorithm="custom").algorithm == "custom"

    def test_json_is_parseable(self, scenario_tree):
        payload = json.loads(TreeSnapshot.from_tree(scenario_tree).to_json(indent=2))

        assert payload["root"]["checksum"] == scenario_tree.root_checksum
        assert payload["root"]["start_offset"] == 0
        assert payload["root"]["end_offset"] == 130

    def test_json_omits_missing_fields(self):
        tree = merklefy(io.BytesIO(b"x"), default_hasher(), 4)

        payload = json.loads(TreeSnapshot.from_tree(tree).to_json())

        assert "left_child" not in payload["root"]
        assert "data" not in payload["root"]

    def test_json_round_trip_model(self, scenario_tree):
        snap = TreeSnapshot.from_tree(scenario_tree)

        assert TreeSnapshot.model_validate_json(snap.to_json()) == snap

    def test_empty_tree(self):
        tree = merklefy(io.BytesIO(b""), default_hasher(), 10)

        snap = TreeSnapshot.from_tree(tree)

        assert snap.root is None
        assert snap.leaf_count == 0
        assert json.loads(snap.to_json()) == {
            "block_size": 10,
            "algorithm": "blake2b",
            "leaf_count": 0,
            "node_count": 0,
        }

    def test_unbuilt_tree(self):
        snap = TreeSnapshot.from_tree(MerkleTree())

        assert snap.block_size is None
        assert snap.root is None
