"""
Catalogue Session
=================
Holds the whole editable state of one user session in one place: the
read-only baseline, the working set (via the registry) and the cursor.

Nothing in the model layer is global. Tests and the editor each build their
own session.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from satellitecatalogue.model.cursor import NavigationCursor
from satellitecatalogue.model.node import Node, copy_nodes
from satellitecatalogue.model.overlay import Overlay, apply_overlay, compute_overlay
from satellitecatalogue.model.registry import CatalogueRegistry


@dataclass
class CatalogueSession:
    baseline: List[Node]
    registry: CatalogueRegistry
    cursor: NavigationCursor = field(default_factory=NavigationCursor)

    @classmethod
    def from_baseline(cls, baseline: Sequence[Node], overlay: Optional[Overlay] = None) -> CatalogueSession:
        frozen = copy_nodes(list(baseline))
        working = apply_overlay(frozen, overlay) if overlay is not None else copy_nodes(frozen)
        return cls(baseline=frozen, registry=CatalogueRegistry(working))

    @property
    def roots(self) -> List[Node]:
        return self.registry.roots

    def overlay(self) -> Overlay:
        return compute_overlay(self.baseline, self.registry.roots)

    def reset(self) -> None:
        self.registry.replace_all(copy_nodes(self.baseline))
        self.cursor.exit()
