"""
Merkle tree vertex.

A Node owns its children; the link back to its parent is a weak
reference so the node graph never holds an ownership cycle. The parent
is attached exactly once, when the parent node is created.
"""
from __future__ import annotations

import weakref
from typing import Any, Optional

from blocktree.schemas.errors import EmptyChecksumError, ParentAlreadySetError


class Node:
    """
    Checksum over the byte range ``[start_offset, end_offset)``.

    Leaves cover one block and have no children. Internal nodes take their
    range from ``left_child.start_offset`` to ``right_child.end_offset``.

    Attributes:
        checksum: Lowercase hex digest; non-empty for a valid node
        start_offset: First byte covered (inclusive)
        end_offset: Last byte covered (exclusive)
        left_child: Owned left subtree, None for leaves
        right_child: Owned right subtree, None for leaves
        data: Opaque payload carried for callers, never hashed
    """

    __slots__ = (
        "checksum",
        "start_offset",
        "end_offset",
        "left_child",
        "right_child",
        "data",
        "_parent_ref",
        "__weakref__",
    )

    def __init__(
        self,
        checksum: str,
        start_offset: int = 0,
        end_offset: int = 0,
        left_child: Optional["Node"] = None,
        right_child: Optional["Node"] = None,
        data: Any = None,
    ) -> None:
        self.checksum = checksum
        self.start_offset = start_offset
        self.end_offset = end_offset
        self.left_child = left_child
        self.right_child = right_child
        self.data = data
        self._parent_ref: Optional[weakref.ref] = None

    @classmethod
    def join(cls, checksum: str, left: "Node", right: "Node") -> "Node":
        """Create the parent of ``left`` and ``right`` and link all three."""
        parent = cls(
            checksum=checksum,
            start_offset=left.start_offset,
            end_offset=right.end_offset,
            left_child=left,
            right_child=right,
        )
        left._attach_parent(parent)
        right._attach_parent(parent)
        return parent

    def _attach_parent(self, parent: "Node") -> None:
        if self._parent_ref is not None:
            raise ParentAlreadySetError(self.checksum)
        self._parent_ref = weakref.ref(parent)

    @property
    def parent(self) -> Optional["Node"]:
        """The parent node, or None for the root (or once the tree is gone)."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def is_leaf(self) -> bool:
        return self.left_child is None and self.right_child is None

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def span(self) -> tuple[int, int]:
        return (self.start_offset, self.end_offset)

    @property
    def size(self) -> int:
        return self.end_offset - self.start_offset

    def start_index(self) -> int:
        return self.start_offset

    def end_index(self) -> int:
        return self.end_offset

    def consistent(self) -> None:
        """
        Check the node-level invariants.

        Raises:
            EmptyChecksumError: If the node carries no checksum
        """
        # Acyclicity holds by construction (parents are only ever created
        # above existing nodes); there is no cycle check here.
        if not self.checksum:
            raise EmptyChecksumError(self.start_offset, self.end_offset)

    def __repr__(self) -> str:
        kind = "leaf" if self.is_leaf else "node"
        return (
            f"Node({kind} {self.checksum[:12]} "
            f"[{self.start_offset}, {self.end_offset}))"
        )


__all__ = ["Node"]
