"""
Incremental, self-growing Merkle tree.

Conceptual Background:
---------------------
The tree commits to an ordered, append-only sequence of items with a single
hash (the root). Leaves are filled strictly left to right. Inserting an item
rehashes only the path from its leaf to the root; when every leaf slot is
taken, the tree grows by one level and the capacity doubles.

Layout:
------
``levels[0]`` is the root level (one node), ``levels[i]`` has ``2**i`` nodes
and ``levels[-1]`` holds the leaves. Unfilled leaves hold ``EMPTY`` (a
zero-length byte string). A node whose whole subtree is empty holds the seed
hash for its distance above the leaves:

    seed(0)     = EMPTY
    seed(k + 1) = H(seed(k) || seed(k))

so the nodes directly above fresh leaves are ``H(b"")``.

Properties:
----------
- Insert: O(log n), amortized O(1) extra per insert for growth
- Root: O(1)
- Leaf: O(1)

The tree is not thread-safe. Embedders that share one across threads must
serialize every call behind a single lock.
"""

import logging
from typing import List, Optional

from incmerkle.crypto import HashProvider
from incmerkle.utils.logger import get_logger
from incmerkle.utils.validation import (
    validate_bytes,
    validate_data_items,
    validate_height,
)

logger = get_logger("tree")


# =============================================================================
# Constants
# =============================================================================

# Marker for an unfilled leaf; never equal to a provider output
EMPTY = b""

# A tree of height H is built with 2 ** (H + LEAF_LEVEL_OFFSET) leaves
LEAF_LEVEL_OFFSET = 1


class HashProviderError(RuntimeError):
    """The injected hash provider failed or returned an unusable digest."""


# =============================================================================
# Merkle Tree
# =============================================================================


class MerkleTree:
    """
    Append-only binary Merkle tree generic over its hash provider.

    Attributes:
        hasher: The injected HashProvider
        height: Construction height, incremented on every growth
    """

    def __init__(self, height: int, hasher: HashProvider):
        """
        Build a tree with ``2 ** (height + 1)`` empty leaves.

        Args:
            height: Non-negative initial height
            hasher: Object with a ``hash(data: bytes) -> bytes`` method

        Raises:
            TypeError: height is not an int
            ValueError: height is negative or too large
            HashProviderError: hasher failed while seeding the tree
        """
        valid, err = validate_height(height)
        if not valid:
            if isinstance(height, int) and not isinstance(height, bool):
                raise ValueError(err)
            raise TypeError(err)

        self._hasher = hasher
        self._height = height
        self._zeros: List[bytes] = [EMPTY]

        leaf_count = 1 << (height + LEAF_LEVEL_OFFSET)
        levels = [[EMPTY] * leaf_count]
        while len(levels[-1]) > 1:
            distance = len(levels)
            levels.append([self._zero(distance)] * (len(levels[-1]) // 2))
        levels.reverse()

        self._levels: List[List[bytes]] = levels
        self._next_index = 0

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Built tree: height=%d, leaves=%d, root=%s",
                height, leaf_count, self.root().hex(),
            )

    @classmethod
    def new(cls, height: int, hasher: HashProvider) -> "MerkleTree":
        """Alias for the constructor."""
        return cls(height, hasher)

    # =========================================================================
    # Hashing
    # =========================================================================

    def _digest(self, data: bytes) -> bytes:
        try:
            digest = self._hasher.hash(data)
        except Exception as exc:
            raise HashProviderError(
                f"{self._hasher!r} failed on {len(data)}-byte input: {exc}"
            ) from exc

        if isinstance(digest, (bytearray, memoryview)):
            digest = bytes(digest)
        if not isinstance(digest, bytes):
            raise HashProviderError(
                f"{self._hasher!r} returned {type(digest).__name__}, expected bytes"
            )
        if digest == EMPTY:
            raise HashProviderError(f"{self._hasher!r} returned an empty digest")
        return digest

    def _hash_pair(self, left: bytes, right: bytes) -> bytes:
        """Hash two children to produce the parent node."""
        return self._digest(left + right)

    def _zero(self, distance: int) -> bytes:
        """Seed hash of an all-empty subtree ``distance`` levels above the leaves."""
        while len(self._zeros) <= distance:
            below = self._zeros[-1]
            self._zeros.append(self._hash_pair(below, below))
        return self._zeros[distance]

    def empty_subtree_hash(self, distance: int) -> bytes:
        """
        Value held by a node whose subtree contains only empty leaves.

        Args:
            distance: Levels above the leaf level (0 is the leaf itself)
        """
        if distance < 0:
            raise ValueError(f"distance must be >= 0, got {distance}")
        return self._zero(distance)

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def hasher(self) -> HashProvider:
        return self._hasher

    @property
    def height(self) -> int:
        return self._height

    @property
    def depth(self) -> int:
        """Number of hash levels above the leaves."""
        return len(self._levels) - 1

    @property
    def leaf_count(self) -> int:
        """Leaf capacity (filled and empty slots)."""
        return len(self._levels[-1])

    @property
    def size(self) -> int:
        """Number of filled leaves."""
        return self._next_index

    @property
    def is_full(self) -> bool:
        return self._next_index == self.leaf_count

    @property
    def levels(self) -> List[List[bytes]]:
        """Copy of all levels, root first."""
        return [list(level) for level in self._levels]

    def root(self) -> bytes:
        """Get the Merkle root."""
        return self._levels[0][0]

    def leaf(self, index: int) -> bytes:
        """
        Get the leaf at ``index``.

        Raises:
            TypeError: index is not an int (bool included)
            IndexError: index is outside [0, leaf_count)
        """
        if not isinstance(index, int) or isinstance(index, bool):
            raise TypeError(f"index must be int, got {type(index).__name__}")
        leaves = self._levels[-1]
        if index < 0 or index >= len(leaves):
            raise IndexError(f"Leaf index {index} out of range [0, {len(leaves)})")
        return leaves[index]

    def is_empty_slot(self, index: int) -> bool:
        return self.leaf(index) == EMPTY

    def __len__(self) -> int:
        return self._next_index

    def __repr__(self) -> str:
        return (
            f"MerkleTree(height={self._height}, size={self.size}, "
            f"leaf_count={self.leaf_count}, root={self.root().hex()})"
        )

    # =========================================================================
    # Insertion
    # =========================================================================

    def insert(self, data: bytes) -> int:
        """
        Insert a new item and recompute its path to the root.

        The item's hash goes into the first empty leaf. If there is none the
        tree grows by one level first.

        Args:
            data: Raw item bytes

        Returns:
            Index of the leaf that received the item

        Raises:
            TypeError: data is not bytes-like
            HashProviderError: hasher failed (the tree is left unchanged)
        """
        valid, err = validate_bytes(data, "data")
        if not valid:
            raise TypeError(err)

        if self.is_full:
            return self._grow_and_insert(bytes(data))

        index = self._next_index
        path = self._compute_path(self._levels, index, self._digest(bytes(data)))
        self._write_path(self._levels, index, path)
        self._next_index = index + 1

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Inserted leaf %d, root=%s", index, self.root().hex())
        return index

    def _grow_and_insert(self, data: bytes) -> int:
        """
        Add a level on top, double every level, then insert.

        Old nodes keep their positions on the left; the right half of each
        level gets the seed hash for its distance above the leaves.
        """
        leaf_hash = self._digest(data)
        index = self.leaf_count

        grown = []
        for distance, level in enumerate(reversed(self._levels)):
            grown.append(level + [self._zero(distance)] * len(level))
        # New root slot, written by the path recompute below
        grown.append([EMPTY])
        grown.reverse()

        path = self._compute_path(grown, index, leaf_hash)
        self._write_path(grown, index, path)

        self._levels = grown
        self._height += 1
        self._next_index = index + 1

        logger.info(
            f"Tree grew to height={self._height}, leaves={self.leaf_count}, "
            f"root={self.root().hex()}"
        )
        return index

    def _compute_path(
        self,
        levels: List[List[bytes]],
        index: int,
        leaf_hash: bytes,
    ) -> List[bytes]:
        """
        Compute new node values along the path of leaf ``index``.

        Nothing is written, so a provider failure leaves ``levels`` intact.

        Returns:
            Values from the leaf (first) to the root (last)
        """
        path = [leaf_hash]
        node = leaf_hash
        for level in reversed(levels[1:]):
            sibling = level[index ^ 1]
            if index & 1:
                node = self._hash_pair(sibling, node)
            else:
                node = self._hash_pair(node, sibling)
            index >>= 1
            path.append(node)
        return path

    @staticmethod
    def _write_path(levels: List[List[bytes]], index: int, path: List[bytes]) -> None:
        for distance, value in enumerate(path):
            levels[-1 - distance][index >> distance] = value


def build_tree(items: List[bytes], hasher: HashProvider, height: Optional[int] = None) -> MerkleTree:
    """
    Build a tree and insert ``items`` in order.

    Args:
        items: Items to insert
        hasher: Hash provider
        height: Initial height (smallest that fits all items if None)
    """
    valid, err = validate_data_items(items)
    if not valid:
        if "exceeds max length" in err:
            raise ValueError(err)
        raise TypeError(err)

    if height is None:
        height = 0
        while (1 << (height + LEAF_LEVEL_OFFSET)) < len(items):
            height += 1

    tree = MerkleTree(height, hasher)
    for item in items:
        tree.insert(item)
    return tree
