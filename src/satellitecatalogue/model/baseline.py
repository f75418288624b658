"""
Baseline Catalogue Loader
=========================
Reads the satellites shipped with the application.

Each ``*.json`` file in the baseline directory holds one satellite. Files
whose name starts with ``_`` (templates, notes) are skipped. Satellites and
modules written without an ``id`` receive one here, so everything past this
point can rely on ids being present. A repeated id is kept by its first
occurrence and replaced everywhere else.
"""
from __future__ import annotations

import json
import logging
import os
from typing import List, Optional, Set

from satellitecatalogue.config import BASELINE_DIR
from satellitecatalogue.model.node import Node
from satellitecatalogue.model.registry import CatalogueRegistry, ROOT_ID_PREFIX

logger = logging.getLogger(__name__)


def register_satellites(raw_satellites: List[dict]) -> List[Node]:
    """Turn raw satellite records into nodes with every id populated and unique."""
    registry = CatalogueRegistry()
    roots = [Node.from_dict(raw) for raw in raw_satellites]
    taken: Set[str] = set()
    for root in roots:
        registry.ensure_ids(root, prefix=ROOT_ID_PREFIX, taken=taken)
    return roots


def load_baseline(directory: Optional[str] = None) -> List[Node]:
    directory = directory or BASELINE_DIR
    if not os.path.isdir(directory):
        logger.warning(f"Baseline directory not found: {directory}")
        return []

    raw_satellites = []
    for filename in sorted(os.listdir(directory)):
        if filename.startswith("_") or not filename.endswith(".json"):
            continue
        filepath = os.path.join(directory, filename)
        with open(filepath, "r", encoding="utf-8") as f:
            try:
                raw_satellites.append(json.load(f))
            except json.JSONDecodeError as e:
                logger.error(f"Skipping unreadable baseline file '{filename}': {e}")

    roots = register_satellites(raw_satellites)
    logger.info(f"Loaded {len(roots)} baseline satellites from {directory}")
    return roots
