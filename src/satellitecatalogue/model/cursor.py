"""
Navigation Cursor
=================
Models "where the user is" in the catalogue as plain, serializable state.

The cursor stores indices only: the selected root, the path of module
indices drilled through, and the selected index at the active depth. Every
derived value (current parent, effective module list, breadcrumbs) is
resolved by walking the working set from the root, so nodes never need a
back-reference to their parent.

States:
    HOME         no root entered
    ROOT_VIEW    root entered, path empty
    DRILLED_VIEW root entered, path non-empty

Selection is orthogonal to these states and is reset on every transition,
except that drilling into a node keeps that node selected so it stays
editable from the new depth.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Dict, List, Optional, Sequence

from satellitecatalogue.model.errors import NavigationError
from satellitecatalogue.model.node import Node


class ViewState(StrEnum):
    HOME = "home"
    ROOT_VIEW = "root"
    DRILLED_VIEW = "drilled"


@dataclass
class PathStep:
    step_index: int
    label_name: str


@dataclass
class Breadcrumb:
    level: int
    name: str


@dataclass
class NavigationCursor:
    root_index: Optional[int] = None
    path: List[PathStep] = field(default_factory=list)
    selected_index: Optional[int] = None
    # True when the selection is the node the last path step drilled into
    context_selected: bool = False

    @property
    def view_state(self) -> ViewState:
        if self.root_index is None:
            return ViewState.HOME
        return ViewState.DRILLED_VIEW if self.path else ViewState.ROOT_VIEW

    # --- Transitions ---

    def enter_root(self, roots: Sequence[Node], index: int) -> None:
        if not 0 <= index < len(roots):
            raise NavigationError(f"Root index {index} out of range.")
        self.root_index = index
        self.path = []
        self.clear_selection()

    def exit(self) -> None:
        self.root_index = None
        self.path = []
        self.clear_selection()

    def drill_into(self, roots: Sequence[Node], index: int) -> None:
        modules = self.current_modules(roots)
        if not 0 <= index < len(modules):
            raise NavigationError(f"Module index {index} out of range.")
        node = modules[index]
        if not node.has_children:
            raise NavigationError(f"'{node.name}' has no sub-modules to drill into.")

        self.path.append(PathStep(step_index=index, label_name=node.name))
        self.selected_index = index
        self.context_selected = True

    def select(self, roots: Sequence[Node], index: int) -> None:
        modules = self.current_modules(roots)
        if not 0 <= index < len(modules):
            raise NavigationError(f"Module index {index} out of range.")
        self.selected_index = index
        self.context_selected = False

    def clear_selection(self) -> None:
        self.selected_index = None
        self.context_selected = False

    def navigate_to_breadcrumb_level(self, level: int) -> None:
        """
        Jump back to an ancestor shown in the breadcrumb.

        ``-1`` is the root itself; ``k`` keeps the first ``k + 1`` path steps.
        """
        if self.root_index is None:
            raise NavigationError("No root entered.")
        if level < -1:
            raise NavigationError(f"Invalid breadcrumb level {level}.")
        self.path = self.path[:level + 1]
        self.clear_selection()

    def navigate_back(self) -> None:
        """One level up, or back home from the root view."""
        if self.path:
            self.navigate_to_breadcrumb_level(len(self.path) - 2)
        else:
            self.exit()

    def pop_context(self) -> PathStep:
        """Drop the last path step, used before deleting the drilled node."""
        if not self.path:
            raise NavigationError("Not drilled into any module.")
        step = self.path.pop()
        self.clear_selection()
        return step

    def revalidate(self, roots: Sequence[Node]) -> None:
        """Drop state that no longer points into the working set."""
        if self.root_index is not None and self.root_index >= len(roots):
            self.exit()
            return
        if self.selected_index is None or self.context_selected:
            return
        if self.selected_index >= len(self.current_modules(roots)):
            self.clear_selection()

    # --- Derived views ---

    def current_root(self, roots: Sequence[Node]) -> Optional[Node]:
        if self.root_index is None or not 0 <= self.root_index < len(roots):
            return None
        return roots[self.root_index]

    def _walk(self, roots: Sequence[Node]) -> tuple[Optional[Node], bool]:
        """Follow the path; returns the last node reached and whether every step resolved."""
        node = self.current_root(roots)
        if node is None:
            return None, False
        for step in self.path:
            if not 0 <= step.step_index < len(node.modules):
                return node, False
            node = node.modules[step.step_index]
        return node, True

    def current_modules(self, roots: Sequence[Node]) -> List[Node]:
        node, complete = self._walk(roots)
        if node is None or not complete:
            return []
        return node.modules

    def current_parent(self, roots: Sequence[Node]) -> Optional[Node]:
        node, _ = self._walk(roots)
        return node

    def selected_node(self, roots: Sequence[Node]) -> Optional[Node]:
        if self.selected_index is None:
            return None
        if self.context_selected:
            node, complete = self._walk(roots)
            return node if complete and self.path else None
        modules = self.current_modules(roots)
        if 0 <= self.selected_index < len(modules):
            return modules[self.selected_index]
        return None

    def breadcrumbs(self, roots: Sequence[Node]) -> List[Breadcrumb]:
        root = self.current_root(roots)
        if root is None:
            return []
        crumbs = [Breadcrumb(level=-1, name=root.name)]
        crumbs.extend(Breadcrumb(level=i, name=step.label_name) for i, step in enumerate(self.path))
        return crumbs

    def trail(self, roots: Sequence[Node]) -> List[Node]:
        """Root, each drilled node, then the selected node if it is not the drilled one."""
        node = self.current_root(roots)
        if node is None:
            return []
        nodes = [node]
        for step in self.path:
            if not 0 <= step.step_index < len(node.modules):
                break
            node = node.modules[step.step_index]
            nodes.append(node)
        selected = self.selected_node(roots)
        if selected is not None and not self.context_selected:
            nodes.append(selected)
        return nodes

    # --- Serialization ---

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root_index": self.root_index,
            "path": [{"step_index": s.step_index, "label_name": s.label_name} for s in self.path],
            "selected_index": self.selected_index,
            "context_selected": self.context_selected,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> NavigationCursor:
        return NavigationCursor(
            root_index=data.get("root_index"),
            path=[PathStep(**step) for step in data.get("path", [])],
            selected_index=data.get("selected_index"),
            context_selected=bool(data.get("context_selected", False)),
        )
