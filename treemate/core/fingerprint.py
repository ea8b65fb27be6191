"""Deterministic fingerprint of a whole search tree.

Used by regression tests to compare two searches; the engine never reads it.
Each node serialises as ``[id/depth/wins/draws/visits/outcome/solved;``
followed by its children's fingerprints and ``]``, and the string is hashed.
"""

import hashlib

from .tree import SearchTree

FINGERPRINT_LENGTH = 32


def hash_string(text: str) -> str:
    return hashlib.sha256(text.encode()).hexdigest()[:FINGERPRINT_LENGTH]


def node_fingerprint(tree: SearchTree, index: int) -> str:
    node = tree.node(index)
    parts = [
        "[{}/{}/{}/{}/{}/{}/{};".format(
            node.id,
            node.depth,
            node.wins,
            node.draws,
            node.visits,
            node.outcome.value,
            1 if node.is_fully_calculated else 0,
        )
    ]
    for child in tree.children(index):
        parts.append(node_fingerprint(tree, child))
    parts.append("]")
    return hash_string("".join(parts))


def tree_fingerprint(tree: SearchTree) -> str:
    return node_fingerprint(tree, tree.root_index)
