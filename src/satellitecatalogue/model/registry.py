"""
Catalogue Registry
==================
Owns the working set (the list of root nodes) and hands out identities.

The registry knows nothing about persistence or navigation. Callers resolve
which parent to act on through the navigation cursor, and the editor saves
the overlay after each mutation.
"""
from __future__ import annotations

import logging
import secrets
import string
import time
from typing import Iterable, List, Optional, Set, Tuple

from satellitecatalogue.model.node import Node

logger = logging.getLogger(__name__)

ROOT_ID_PREFIX = "sat"
MODULE_ID_PREFIX = "mod"

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_RANDOM_LENGTH = 9


class CatalogueRegistry:
    def __init__(self, roots: Iterable[Node] = ()) -> None:
        self.roots: List[Node] = list(roots)

    # --- Lookup ---

    def all_ids(self) -> Set[str]:
        return {node.id for root in self.roots for node in root.walk() if node.id}

    def find(self, node_id: str) -> Optional[Node]:
        for root in self.roots:
            for node in root.walk():
                if node.id == node_id:
                    return node
        return None

    def _locate(self, node_id: str) -> Optional[Tuple[List[Node], int]]:
        """Return the sequence owning the node and the node's index in it."""
        stack: List[List[Node]] = [self.roots]
        while stack:
            siblings = stack.pop()
            for i, node in enumerate(siblings):
                if node.id == node_id:
                    return siblings, i
                if node.modules:
                    stack.append(node.modules)
        return None

    # --- Identity ---

    def generate_id(self, prefix: str = ROOT_ID_PREFIX, taken: Optional[Set[str]] = None) -> str:
        """
        Create an id unique within the whole working set.

        Millisecond timestamp plus a random base36 suffix, re-drawn on the
        (unlikely) event that it already exists anywhere in the tree.
        """
        if taken is None:
            taken = self.all_ids()
        while True:
            millis = time.time_ns() // 1_000_000
            suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_RANDOM_LENGTH))
            candidate = f"{prefix}-{millis}-{suffix}"
            if candidate not in taken:
                taken.add(candidate)
                return candidate

    def ensure_ids(self, node: Node, prefix: str = MODULE_ID_PREFIX, taken: Optional[Set[str]] = None) -> None:
        """
        Give ``node`` and its descendants ids unique within ``taken``.

        Missing ids and ids already claimed by another node are both replaced
        with fresh ones; the first occurrence of an id keeps it. ``taken``
        defaults to the ids of the current working set, so ``node`` must not
        be part of it yet.
        """
        if taken is None:
            taken = self.all_ids()
        for item in node.walk():
            if not item.id or item.id in taken:
                if item.id:
                    logger.warning(f"Duplicate id '{item.id}' on '{item.name}', assigning a new one.")
                item.id = self.generate_id(prefix if item is node else MODULE_ID_PREFIX, taken)
            else:
                taken.add(item.id)

    # --- Mutation ---

    def add_root(self, node: Node) -> Node:
        node.id = None
        self.ensure_ids(node, prefix=ROOT_ID_PREFIX)
        self.roots.append(node)
        logger.debug(f"Added root '{node.name}' ({node.id}).")
        return node

    def add_child(self, parent: Node, node: Node) -> Node:
        node.id = None
        self.ensure_ids(node, prefix=MODULE_ID_PREFIX)
        parent.modules.append(node)
        logger.debug(f"Added '{node.name}' ({node.id}) under '{parent.name}'.")
        return node

    def replace(self, node: Node) -> Node:
        """Swap in ``node`` for the existing node with the same id, at any depth."""
        location = self._locate(node.id) if node.id else None
        if location is None:
            raise KeyError(f"No node with id '{node.id}' in the catalogue.")
        siblings, index = location
        siblings[index] = node
        return node

    def remove_root(self, index: int) -> Node:
        if not 0 <= index < len(self.roots):
            raise IndexError(f"Root index {index} out of range.")
        removed = self.roots.pop(index)
        logger.debug(f"Removed root '{removed.name}' ({removed.id}).")
        return removed

    def remove_child(self, parent: Node, index: int) -> Node:
        if not 0 <= index < len(parent.modules):
            raise IndexError(f"Module index {index} out of range for '{parent.name}'.")
        removed = parent.modules.pop(index)
        logger.debug(f"Removed '{removed.name}' ({removed.id}) from '{parent.name}'.")
        return removed

    def replace_all(self, roots: Iterable[Node]) -> None:
        """Replace the whole working set, giving missing or duplicate ids fresh values."""
        new_roots = list(roots)
        taken: Set[str] = set()
        for root in new_roots:
            self.ensure_ids(root, prefix=ROOT_ID_PREFIX, taken=taken)
        self.roots = new_roots
        logger.info(f"Working set replaced with {len(new_roots)} roots.")
