"""
Schemas - Errors and Transport
File: __init__.py

Purpose: Export the public API for the schemas module.

The transport module imports the Merkle engine, so it is not re-exported
here; import ProofDocument from core.schemas.transport.
"""

from .errors import (
    ErrorCodes,
    IndexOutOfBoundsException,
    LeafNotFoundException,
    MerkleError,
    MerkleException,
    ProofDecodeException,
    RegistryException,
    TreeNotFoundException,
    TreeValidationException,
    UnsupportedHashException,
)

__all__ = [
    "ErrorCodes",
    "MerkleError",
    "MerkleException",
    "TreeValidationException",
    "UnsupportedHashException",
    "LeafNotFoundException",
    "IndexOutOfBoundsException",
    "ProofDecodeException",
    "TreeNotFoundException",
    "RegistryException",
]
