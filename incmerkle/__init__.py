"""
incmerkle

An incrementally maintained Merkle tree:
- Append-only leaves filled left to right
- Only the insertion path is rehashed
- Capacity doubles when the tree is full
- Pluggable hash provider
"""
