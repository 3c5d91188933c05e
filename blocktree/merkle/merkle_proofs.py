"""
Inclusion proofs for block Merkle trees.

A proof for a node lists, from the node up to the root, the sibling
checksum met at each join and the side it sits on. A node carried
forward past an odd level has no sibling there and contributes no step.

Verification recomputes the root with the same parent rule the builder
uses: parent = hash(left_hex || right_hex).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

from blocktree.crypto.hashing import ChecksumHasher, default_hasher, hash_concat_hex
from blocktree.merkle.merkle_tree import MerkleTree
from blocktree.merkle.node import Node
from blocktree.schemas.errors import MerkleVerificationException


Side = Literal["left", "right"]


@dataclass(frozen=True)
class ProofStep:
    """
    One join on the path to the root.

    Attributes:
        sibling: Checksum of the other child at this join
        side: Where the sibling sits relative to the proven path
    """
    sibling: str
    side: Side


@dataclass(frozen=True)
class MerkleProof:
    """
    Path from a node's checksum to the tree root.

    Attributes:
        checksum: Checksum being proven
        start_offset: First byte covered by the proven node
        end_offset: End (exclusive) of the proven node's range
        steps: Joins from the node up to the root
        root: Root checksum this proof is against
    """
    checksum: str
    start_offset: int
    end_offset: int
    root: str
    steps: list[ProofStep] = field(default_factory=list)


def build_node_proof(tree: MerkleTree, node: Node) -> MerkleProof:
    """
    Generate the inclusion proof for ``node``.

    Raises:
        MerkleVerificationException: If the tree is empty or the node is
            not part of it
    """
    root = tree.root
    if root is None:
        raise MerkleVerificationException("cannot prove a node of an empty tree")

    steps: list[ProofStep] = []
    current = node
    parent = current.parent
    while parent is not None:
        if parent.left_child is current:
            steps.append(ProofStep(sibling=parent.right_child.checksum, side="right"))
        else:
            steps.append(ProofStep(sibling=parent.left_child.checksum, side="left"))
        current = parent
        parent = current.parent

    if current is not root:
        raise MerkleVerificationException(
            "node does not belong to this tree",
            checksum=node.checksum,
        )

    return MerkleProof(
        checksum=node.checksum,
        start_offset=node.start_offset,
        end_offset=node.end_offset,
        root=root.checksum,
        steps=steps,
    )


def compute_proof_root(proof: MerkleProof, hasher: Optional[ChecksumHasher] = None) -> str:
    """Fold the proof steps over the proven checksum."""
    h = hasher if hasher is not None else default_hasher()
    current = proof.checksum
    for step in proof.steps:
        if step.side == "right":
            current = hash_concat_hex(current, step.sibling, h)
        else:
            current = hash_concat_hex(step.sibling, current, h)
    return current


def verify_node_proof(proof: MerkleProof, hasher: Optional[ChecksumHasher] = None) -> bool:
    """
    True if the proof folds to its claimed root.

    The hasher must be the primitive the tree was built with.
    """
    return compute_proof_root(proof, hasher) == proof.root


__all__ = [
    "ProofStep",
    "MerkleProof",
    "build_node_proof",
    "compute_proof_root",
    "verify_node_proof",
]
