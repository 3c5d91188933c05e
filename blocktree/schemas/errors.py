"""
Error taxonomy for blocktree.

Defines both Pydantic models for structured error reporting (CLI JSON
output, logs) and Python exceptions for control flow.

Underlying stream errors (OSError, ValueError raised by file objects) are
never wrapped: they propagate to the caller verbatim. Nothing in this
package retries.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Build Errors
    NIL_SOURCE = "NIL_SOURCE"
    INVALID_BLOCK_SIZE = "INVALID_BLOCK_SIZE"
    UNSUPPORTED_ALGORITHM = "UNSUPPORTED_ALGORITHM"

    # Index Errors
    NOT_INDEXED = "NOT_INDEXED"

    # Consistency Errors
    EMPTY_CHECKSUM = "EMPTY_CHECKSUM"
    PARENT_ALREADY_SET = "PARENT_ALREADY_SET"

    # Merkle & Commitment Errors
    MERKLE_PROOF_INVALID = "MERKLE_PROOF_INVALID"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class BlockTreeError(BaseModel):
    """
    Error model for structured error communication.

    Used when an error has to cross a process boundary (CLI ``--json``
    output) without raising.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.NOT_INDEXED],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "BlockTreeException":
        """Convert this error model to a raised exception."""
        return BlockTreeException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class BlockTreeException(Exception):
    """
    Base exception for all blocktree errors.

    Carries structured error information and can be converted to/from
    BlockTreeError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "BLOCKTREE_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> BlockTreeError:
        """Convert this exception to a BlockTreeError model."""
        return BlockTreeError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class NilSourceError(BlockTreeException):
    """Raised when a build is attempted without a byte source."""

    def __init__(self, message: str = "nil reader passed in") -> None:
        super().__init__(message=message, code=ErrorCodes.NIL_SOURCE)


class InvalidBlockSizeError(BlockTreeException, ValueError):
    """Raised when the block size is not a positive integer."""

    def __init__(self, block_size: Any) -> None:
        super().__init__(
            message=f"block size must be a positive integer, got {block_size!r}",
            code=ErrorCodes.INVALID_BLOCK_SIZE,
            details={"block_size": repr(block_size)},
        )


class NotIndexedError(BlockTreeException):
    """Raised when a lookup is attempted before any build completed."""

    def __init__(self, message: str = "not yet indexed") -> None:
        super().__init__(message=message, code=ErrorCodes.NOT_INDEXED)


class EmptyChecksumError(BlockTreeException):
    """Raised when a node without a checksum is found in a built tree."""

    def __init__(
        self,
        start_offset: int | None = None,
        end_offset: int | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if start_offset is not None:
            details["start_offset"] = start_offset
        if end_offset is not None:
            details["end_offset"] = end_offset
        super().__init__(
            message="empty checksum",
            code=ErrorCodes.EMPTY_CHECKSUM,
            details=details,
        )


class ParentAlreadySetError(BlockTreeException):
    """Raised when a node is attached to a second parent."""

    def __init__(self, checksum: str) -> None:
        super().__init__(
            message=f"node {checksum[:16]}... already has a parent",
            code=ErrorCodes.PARENT_ALREADY_SET,
            details={"checksum": checksum},
        )


class UnsupportedAlgorithmError(BlockTreeException, ValueError):
    """Raised when a hash algorithm name is not recognised."""

    def __init__(self, algorithm: str, supported: list[str] | None = None) -> None:
        super().__init__(
            message=f"unsupported hash algorithm: {algorithm!r}",
            code=ErrorCodes.UNSUPPORTED_ALGORITHM,
            details={"algorithm": algorithm, "supported": supported or []},
        )


class MerkleVerificationException(BlockTreeException):
    """Raised when a Merkle proof cannot be built or verified."""

    def __init__(
        self,
        message: str,
        checksum: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if checksum:
            full_details["checksum"] = checksum
        super().__init__(
            message=message,
            code=ErrorCodes.MERKLE_PROOF_INVALID,
            details=full_details,
            retryable=False,
        )


__all__ = [
    "ErrorCodes",
    "BlockTreeError",
    "BlockTreeException",
    "NilSourceError",
    "InvalidBlockSizeError",
    "NotIndexedError",
    "EmptyChecksumError",
    "ParentAlreadySetError",
    "UnsupportedAlgorithmError",
    "MerkleVerificationException",
]
