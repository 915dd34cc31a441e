"""
Tree Registry
Named collection of Merkle trees with per-tree locking.

The registry is an explicit object: callers create one and pass it
around. Two levels of locking apply:
- the guard (injected, threading.Lock by default) protects the
  name -> tree mapping itself
- every tree gets its own RLock, held for the duration of each
  operation on that tree, so updates never interleave with proof
  generation or root reads on the same tree

Operations on different trees never block each other beyond the brief
mapping lookup.
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, ContextManager, Iterator, Sequence

from core.crypto.hashing import HashProvider
from core.merkle.merkle_proofs import MerkleProof, verify_proof
from core.merkle.merkle_tree import MerkleTree
from core.schemas.errors import RegistryException, TreeNotFoundException


logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    tree: MerkleTree
    lock: threading.RLock = field(default_factory=threading.RLock)


class TreeRegistry:
    """
    Thread-safe mapping from names to MerkleTree instances.

    Example:
        >>> registry = TreeRegistry(SHA256Hasher())
        >>> root = registry.create("docs", [b"Foo", b"Bar", b"Baz"])
        >>> registry.verify("docs", b"Bar")
        True
        >>> new_root = registry.update("docs", 2, b"Qux")
    """

    def __init__(
        self,
        hash_provider: HashProvider,
        guard: ContextManager[Any] | None = None,
    ) -> None:
        """
        Args:
            hash_provider: Provider used for every tree created here
            guard: Mutex protecting the name mapping. Any object usable in
                   a with-statement works (threading.Lock, RLock, ...).
        """
        self.hash_provider = hash_provider
        self._guard = guard if guard is not None else threading.Lock()
        self._entries: dict[str, _Entry] = {}

    # ------------------------------------------------------------------
    # Mapping management
    # ------------------------------------------------------------------

    def create(
        self,
        name: str,
        leaves: Sequence[bytes],
        *,
        replace: bool = False,
    ) -> bytes:
        """
        Build a tree and register it under name.

        The tree is built before the guard is taken, so a failed build
        leaves the registry untouched.

        Returns:
            Root digest of the new tree

        Raises:
            TreeValidationException: If the leaves cannot form a tree
            RegistryException: If name is taken and replace is False
        """
        tree = MerkleTree(leaves, self.hash_provider)
        with self._guard:
            if name in self._entries and not replace:
                raise RegistryException(f"tree already exists: {name}", name=name)
            self._entries[name] = _Entry(tree=tree)
        logger.info(f"Registered tree {name!r} with {tree.leaf_count} leaves")
        return tree.root

    def drop(self, name: str) -> None:
        """
        Remove a tree from the registry.

        Raises:
            TreeNotFoundException: If no tree is registered under name
        """
        with self._guard:
            if self._entries.pop(name, None) is None:
                raise TreeNotFoundException(name)
        logger.info(f"Dropped tree {name!r}")

    def names(self) -> list[str]:
        """Registered names in sorted order."""
        with self._guard:
            return sorted(self._entries)

    def __contains__(self, name: object) -> bool:
        with self._guard:
            return name in self._entries

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    def _entry(self, name: str) -> _Entry:
        with self._guard:
            entry = self._entries.get(name)
        if entry is None:
            raise TreeNotFoundException(name)
        return entry

    @contextmanager
    def locked(self, name: str) -> Iterator[MerkleTree]:
        """
        Hold a tree's lock across several operations.

        The lock is reentrant, so registry methods may be called for the
        same name inside the block.

        Example:
            >>> with registry.locked("docs") as tree:
            ...     proof = tree.generate_proof(b"Bar")
            ...     root = tree.root
        """
        entry = self._entry(name)
        with entry.lock:
            yield entry.tree

    # ------------------------------------------------------------------
    # Tree operations
    # ------------------------------------------------------------------

    def get(self, name: str) -> MerkleTree:
        """
        Return the registered tree.

        The returned object is shared; mutate it only inside locked().
        """
        return self._entry(name).tree

    def root(self, name: str) -> bytes:
        """Current root digest of the named tree."""
        with self.locked(name) as tree:
            return tree.root

    def prove(self, name: str, data: bytes) -> MerkleProof:
        """
        Generate a proof for data in the named tree.

        Raises:
            TreeNotFoundException: If name is not registered
            LeafNotFoundException: If data is not a leaf of the tree
        """
        with self.locked(name) as tree:
            return tree.generate_proof(data)

    def prove_with_root(self, name: str, data: bytes) -> tuple[MerkleProof, bytes]:
        """Generate a proof and read the root it verifies against, atomically."""
        with self.locked(name) as tree:
            return tree.generate_proof(data), tree.root

    def verify(self, name: str, data: bytes) -> bool:
        """
        Prove data against the named tree's live root and verify the proof.

        Raises:
            TreeNotFoundException: If name is not registered
            LeafNotFoundException: If data is not a leaf of the tree
        """
        proof, root = self.prove_with_root(name, data)
        return verify_proof(data, proof, root, self.hash_provider)

    def update(self, name: str, index: int, data: bytes) -> bytes:
        """
        Replace one leaf of the named tree.

        Returns:
            The tree's new root digest

        Raises:
            TreeNotFoundException: If name is not registered
            IndexOutOfBoundsException: If index >= leaf count
        """
        with self.locked(name) as tree:
            tree.update_leaf(index, data)
            new_root = tree.root
        logger.info(f"Updated leaf {index} of tree {name!r}")
        return new_root


__all__ = ["TreeRegistry"]
