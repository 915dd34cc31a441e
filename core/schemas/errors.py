"""
Schemas - Error Taxonomy
File: errors.py

Purpose: Standard error taxonomy for the Merkle engine.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the engine."""

    # Tree construction
    TREE_VALIDATION_ERROR = "TREE_VALIDATION_ERROR"
    UNSUPPORTED_HASH = "UNSUPPORTED_HASH"

    # Proofs and updates
    LEAF_NOT_FOUND = "LEAF_NOT_FOUND"
    INDEX_OUT_OF_BOUNDS = "INDEX_OUT_OF_BOUNDS"
    PROOF_DECODE_ERROR = "PROOF_DECODE_ERROR"

    # Registry
    TREE_NOT_FOUND = "TREE_NOT_FOUND"
    TREE_EXISTS = "TREE_EXISTS"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class MerkleError(BaseModel):
    """
    Base error model for structured error communication.

    Used when an error has to cross a process boundary (CLI JSON output,
    logs shipped elsewhere) without carrying a Python exception.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.TREE_VALIDATION_ERROR],
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

    def to_exception(self) -> "MerkleException":
        """Convert this error model to a raisable exception."""
        return MerkleException(
            message=self.message,
            code=self.code,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class MerkleException(Exception):
    """
    Base exception for all Merkle engine errors.

    Carries structured error information and can be converted
    to/from MerkleError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "MERKLE_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> MerkleError:
        """Convert this exception to a MerkleError model."""
        return MerkleError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class TreeValidationException(MerkleException):
    """Raised when a tree cannot be built from the given input."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.TREE_VALIDATION_ERROR,
            details=full_details,
            retryable=False,
        )


class UnsupportedHashException(MerkleException):
    """Raised when a hash provider is requested by an unknown name."""

    def __init__(
        self,
        message: str,
        algorithm: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if algorithm is not None:
            full_details["algorithm"] = algorithm
        super().__init__(
            message=message,
            code=ErrorCodes.UNSUPPORTED_HASH,
            details=full_details,
            retryable=False,
        )


class LeafNotFoundException(MerkleException):
    """Raised when proof generation is asked for data the tree does not hold."""

    def __init__(
        self,
        message: str = "data not found",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.LEAF_NOT_FOUND,
            details=details,
            retryable=False,
        )


class IndexOutOfBoundsException(MerkleException):
    """Raised when a leaf index falls outside the tree's leaf range."""

    def __init__(
        self,
        message: str = "index out of bounds",
        index: int | None = None,
        leaf_count: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if index is not None:
            full_details["index"] = index
        if leaf_count is not None:
            full_details["leaf_count"] = leaf_count
        super().__init__(
            message=message,
            code=ErrorCodes.INDEX_OUT_OF_BOUNDS,
            details=full_details,
            retryable=False,
        )


class ProofDecodeException(MerkleException):
    """Raised when a serialized proof cannot be decoded."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.PROOF_DECODE_ERROR,
            details=details,
            retryable=False,
        )


class TreeNotFoundException(MerkleException):
    """Raised when a registry has no tree under the requested name."""

    def __init__(
        self,
        name: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details["name"] = name
        super().__init__(
            message=f"no tree found: {name}",
            code=ErrorCodes.TREE_NOT_FOUND,
            details=full_details,
            retryable=False,
        )


class RegistryException(MerkleException):
    """Raised when a registry operation conflicts with existing state."""

    def __init__(
        self,
        message: str,
        name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if name is not None:
            full_details["name"] = name
        super().__init__(
            message=message,
            code=ErrorCodes.TREE_EXISTS,
            details=full_details,
            retryable=False,
        )

