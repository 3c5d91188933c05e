"""
Tree snapshots.

JSON-serialisable view of a built tree: every node with its checksum,
byte range, optional payload and children. Parent links are implied by
nesting and not written out.

The layout is for inspection and transport only; it is not a stable
persistence format and nothing reads it back into a MerkleTree.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from blocktree.merkle.merkle_tree import MerkleTree
from blocktree.merkle.node import Node


class NodeSnapshot(BaseModel):
    """Serialised tree node."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    checksum: str = Field(..., min_length=1, description="Lowercase hex digest")
    start_offset: int = Field(..., ge=0)
    end_offset: int = Field(..., ge=0)
    data: Any = Field(default=None, description="Opaque caller payload")
    left_child: Optional["NodeSnapshot"] = Field(default=None)
    right_child: Optional["NodeSnapshot"] = Field(default=None)

    @classmethod
    def from_node(cls, node: Node) -> "NodeSnapshot":
        return cls(
            checksum=node.checksum,
            start_offset=node.start_offset,
            end_offset=node.end_offset,
            data=node.data,
            left_child=cls.from_node(node.left_child) if node.left_child is not None else None,
            right_child=cls.from_node(node.right_child) if node.right_child is not None else None,
        )


NodeSnapshot.model_rebuild()


class TreeSnapshot(BaseModel):
    """Serialised tree with build metadata."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    block_size: int | None = Field(default=None, ge=1)
    algorithm: str | None = Field(default=None, description="Hash primitive name, if known")
    leaf_count: int = Field(default=0, ge=0)
    node_count: int = Field(default=0, ge=0)
    root: NodeSnapshot | None = Field(default=None)

    @classmethod
    def from_tree(cls, tree: MerkleTree, algorithm: str | None = None) -> "TreeSnapshot":
        root = tree.root
        return cls(
            block_size=tree.block_size,
            algorithm=algorithm if algorithm is not None else getattr(tree.hasher, "algorithm", None),
            leaf_count=tree.leaf_count,
            node_count=tree.node_count,
            root=NodeSnapshot.from_node(root) if root is not None else None,
        )

    def to_json(self, indent: int | None = None) -> str:
        return self.model_dump_json(indent=indent, exclude_none=True)


__all__ = ["NodeSnapshot", "TreeSnapshot"]
