"""
Core cryptographic utilities.

Hash providers consumed by the Merkle engine plus hex helpers.
"""
from .hashing import (
    DEFAULT_HASH_ALGORITHM,
    HASH_PROVIDERS,
    Blake2bHasher,
    Blake2sHasher,
    HashlibHasher,
    HashProvider,
    SHA3_256Hasher,
    SHA256Hasher,
    available_hash_algorithms,
    from_hex,
    get_hash_provider,
    normalize_algorithm,
    to_hex,
)

__all__ = [
    "HashProvider",
    "HashlibHasher",
    "SHA256Hasher",
    "SHA3_256Hasher",
    "Blake2bHasher",
    "Blake2sHasher",
    "HASH_PROVIDERS",
    "DEFAULT_HASH_ALGORITHM",
    "available_hash_algorithms",
    "get_hash_provider",
    "normalize_algorithm",
    "to_hex",
    "from_hex",
]
