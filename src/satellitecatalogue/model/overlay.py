"""
Edit Overlay
============
Keeps user edits durable across restarts without touching the baseline.

The overlay is a minimal patch computed at root granularity:

* ``modified``: full copies of baseline roots whose content changed,
* ``added``: roots that do not exist in the baseline,
* ``deleted``: ids of baseline roots missing from the working set.

A modified root is stored whole. Nested edits therefore never need a
recursive merge, which matches how the editor mutates the tree.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from PySide6.QtCore import QSettings

from satellitecatalogue.config import STORAGE_KEY
from satellitecatalogue.model.errors import StorageCorruptError
from satellitecatalogue.model.node import Node, copy_nodes

logger = logging.getLogger(__name__)


@dataclass
class Overlay:
    modified: List[Node] = field(default_factory=list)
    added: List[Node] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.modified or self.added or self.deleted)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "modified": [node.to_dict() for node in self.modified],
            "added": [node.to_dict() for node in self.added],
            "deleted": list(self.deleted),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Overlay:
        if not isinstance(data, dict):
            raise ValueError(f"Overlay must be an object, got {type(data).__name__}.")

        modified = data.get("modified") or []
        added = data.get("added") or []
        deleted = data.get("deleted") or []
        for key, value in (("modified", modified), ("added", added), ("deleted", deleted)):
            if not isinstance(value, list):
                raise ValueError(f"Overlay field '{key}' must be a list.")
        if not all(isinstance(node_id, str) for node_id in deleted):
            raise ValueError("Overlay field 'deleted' must only contain ids.")

        return Overlay(
            modified=[Node.from_dict(item) for item in modified],
            added=[Node.from_dict(item) for item in added],
            deleted=list(deleted),
        )


def compute_overlay(baseline: Sequence[Node], working: Sequence[Node]) -> Overlay:
    """Diff the working set against the baseline, one root at a time."""
    originals = {root.id: root for root in baseline}
    working_ids = {root.id for root in working}

    overlay = Overlay()
    for root in working:
        original = originals.get(root.id)
        if original is None:
            overlay.added.append(root.copy())
        elif root != original:
            overlay.modified.append(root.copy())

    overlay.deleted = [root.id for root in baseline if root.id not in working_ids]
    return overlay


def apply_overlay(baseline: Sequence[Node], overlay: Overlay) -> List[Node]:
    """
    Rebuild a working set from the baseline and a stored overlay.

    Applied in the order modify, add, delete, so a root that is both in
    ``modified`` and ``deleted`` ends up removed. The result keeps baseline
    order for surviving baseline roots, followed by added roots in the order
    they were stored.
    """
    working = copy_nodes(list(baseline))

    for replacement in overlay.modified:
        for i, root in enumerate(working):
            if root.id == replacement.id:
                working[i] = replacement.copy()
                break

    existing = {root.id for root in working}
    for new_root in overlay.added:
        # Re-applying the same overlay must never duplicate a root
        if new_root.id not in existing:
            working.append(new_root.copy())
            existing.add(new_root.id)

    deleted = set(overlay.deleted)
    return [root for root in working if root.id not in deleted]


class OverlayStore:
    """
    Persists the overlay as a single JSON record in ``QSettings``.

    A missing record means "no edits". A record that cannot be parsed is
    reported through the log and ``last_error`` and then treated as empty,
    so a damaged settings file never blocks startup.
    """

    def __init__(self, settings: Optional[QSettings] = None, key: str = STORAGE_KEY) -> None:
        self.settings = settings if settings is not None else QSettings()
        self.key = key
        self.last_error: Optional[StorageCorruptError] = None

    def load(self) -> Overlay:
        self.last_error = None
        raw = self.settings.value(self.key)
        if raw is None or raw == "":
            logger.debug(f"No stored overlay under '{self.key}'.")
            return Overlay()

        try:
            if not isinstance(raw, str):
                raise ValueError(f"Stored record is a {type(raw).__name__}, not text.")
            overlay = Overlay.from_dict(json.loads(raw))
        except ValueError as e:
            # json.JSONDecodeError is a ValueError as well
            self.last_error = StorageCorruptError(f"Stored edits could not be read: {e}")
            logger.error(f"Ignoring corrupt overlay under '{self.key}': {e}")
            return Overlay()

        logger.info(
            f"Loaded overlay: {len(overlay.modified)} modified, "
            f"{len(overlay.added)} added, {len(overlay.deleted)} deleted."
        )
        return overlay

    def save(self, overlay: Overlay) -> None:
        self.settings.setValue(self.key, json.dumps(overlay.to_dict(), ensure_ascii=False))
        self.settings.sync()
        if self.settings.status() != QSettings.Status.NoError:
            logger.error(f"Failed to write overlay to settings: {self.settings.status()}")
        else:
            logger.debug(f"Overlay saved under '{self.key}'.")

    def clear(self) -> None:
        self.settings.remove(self.key)
        self.settings.sync()
        logger.info("Stored overlay cleared.")
