"""Tree core: the incremental Merkle tree and its configuration"""
from incmerkle.core.tree import (
    MerkleTree,
    HashProviderError,
    build_tree,
    EMPTY,
    LEAF_LEVEL_OFFSET,
)
from incmerkle.core.config import TreeConfig, load_config

__all__ = [
    "MerkleTree",
    "HashProviderError",
    "build_tree",
    "EMPTY",
    "LEAF_LEVEL_OFFSET",
    "TreeConfig",
    "load_config",
]
