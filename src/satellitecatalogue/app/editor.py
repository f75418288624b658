"""
Editor (Application State)
==========================
Thin orchestration layer between the UI and the catalogue model.

Why is this file needed?
------------------------
1. Target resolution: every edit request ("add module here", "delete the
   selected module") is resolved against the navigation cursor.
2. Persistence: after each mutation the overlay is recomputed against the
   baseline and written to settings.
3. Decoupling: views listen to the signals below and re-render from the
   returned ``EditorView``; they never touch the registry directly.

Classes:
    EditKind: The edit requests the UI can make.
    NodeForm: Raw form fields for creating or editing a node.
    EditorView: What the UI needs to draw the current location.
    Editor: The QObject the UI talks to.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import List, Optional, Sequence

from PySide6.QtCore import QObject, QSettings, Signal, Slot

from satellitecatalogue.config import DEFAULT_MODULE_ICON, DEFAULT_ROOT_ICON, EXPORT_FILENAME
from satellitecatalogue.app.workers import ImageLoadWorker
from satellitecatalogue.model.cursor import Breadcrumb, NavigationCursor, ViewState
from satellitecatalogue.model.errors import ImportFormatError, NavigationError, StorageCorruptError, ValidationError
from satellitecatalogue.model.io import IOManager
from satellitecatalogue.model.node import Node
from satellitecatalogue.model.overlay import OverlayStore
from satellitecatalogue.model.session import CatalogueSession

logger = logging.getLogger(__name__)


class EditKind(StrEnum):
    NEW_ROOT = "new-satellite"
    NEW_MODULE = "new-module"
    NEW_SUBCOMPONENT = "new-subcomponent"
    EDIT_ROOT = "satellite"
    EDIT_SELECTED = "module"
    DELETE_ROOT = "delete-satellite"
    DELETE_SELECTED = "delete-module"


@dataclass
class NodeForm:
    name: str
    icon: str = ""
    type: str = ""
    image: str = ""
    description: str = ""

    def cleaned(self, default_icon: str) -> NodeForm:
        """Trimmed copy of the form. Raises ValidationError if the name is blank."""
        name = (self.name or "").strip()
        if not name:
            raise ValidationError("Name is required.")
        return NodeForm(
            name=name,
            icon=(self.icon or "").strip() or default_icon,
            type=(self.type or "").strip(),
            image=(self.image or "").strip(),
            description=self.description or "",
        )

    def build(self) -> Node:
        return Node(
            name=self.name,
            icon=self.icon,
            type=self.type,
            image=self.image,
            description=self.description,
        )

    @staticmethod
    def from_node(node: Node) -> NodeForm:
        return NodeForm(
            name=node.name,
            icon=node.icon,
            type=node.type,
            image=node.image,
            description=node.description,
        )


@dataclass
class EditorView:
    state: ViewState
    root: Optional[Node] = None
    parent: Optional[Node] = None
    modules: List[Node] = field(default_factory=list)
    selected: Optional[Node] = None
    breadcrumbs: List[Breadcrumb] = field(default_factory=list)


class Editor(QObject):
    """Entry point for every catalogue edit coming from the UI."""
    catalogue_changed = Signal(object)
    view_changed = Signal(object)
    error_occurred = Signal(str)

    def __init__(self, session: CatalogueSession, store: OverlayStore, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self.session = session
        self.store = store
        self.load_error: Optional[StorageCorruptError] = None
        self._workers: list[ImageLoadWorker] = []

    @classmethod
    def from_storage(cls, baseline: Sequence[Node], settings: QSettings | None = None) -> Editor:
        """Build the working set from the baseline plus whatever edits were stored."""
        store = OverlayStore(settings)
        overlay = store.load()
        editor = cls(CatalogueSession.from_baseline(baseline, overlay), store)
        editor.load_error = store.last_error
        return editor

    @property
    def roots(self) -> List[Node]:
        return self.session.roots

    @property
    def cursor(self) -> NavigationCursor:
        return self.session.cursor

    # --- View ---

    def view(self) -> EditorView:
        roots = self.roots
        return EditorView(
            state=self.cursor.view_state,
            root=self.cursor.current_root(roots),
            parent=self.cursor.current_parent(roots),
            modules=self.cursor.current_modules(roots),
            selected=self.cursor.selected_node(roots),
            breadcrumbs=self.cursor.breadcrumbs(roots),
        )

    def _emit_view(self) -> EditorView:
        view = self.view()
        self.view_changed.emit(view)
        return view

    def _commit(self) -> EditorView:
        """Persist the overlay and notify listeners after a mutation."""
        self.cursor.revalidate(self.roots)
        overlay = self.session.overlay()
        self.store.save(overlay)
        self.catalogue_changed.emit(self.roots)
        return self._emit_view()

    # --- Navigation ---

    def enter_root(self, index: int) -> EditorView:
        self.cursor.enter_root(self.roots, index)
        return self._emit_view()

    def exit_root(self) -> EditorView:
        self.cursor.exit()
        return self._emit_view()

    def drill_into(self, index: int) -> EditorView:
        self.cursor.drill_into(self.roots, index)
        return self._emit_view()

    def select(self, index: int) -> EditorView:
        self.cursor.select(self.roots, index)
        return self._emit_view()

    def navigate_to_breadcrumb_level(self, level: int) -> EditorView:
        self.cursor.navigate_to_breadcrumb_level(level)
        return self._emit_view()

    def navigate_back(self) -> EditorView:
        self.cursor.navigate_back()
        return self._emit_view()

    # --- Target resolution ---

    def _require_root(self) -> Node:
        root = self.cursor.current_root(self.roots)
        if root is None:
            logger.warning("Edit rejected: no satellite is open.")
            raise NavigationError("Open a satellite first.")
        return root

    def _require_parent(self) -> Node:
        parent = self.cursor.current_parent(self.roots)
        if parent is None:
            logger.warning("Edit rejected: no satellite is open.")
            raise NavigationError("Open a satellite first.")
        return parent

    def _require_selected(self) -> Node:
        selected = self.cursor.selected_node(self.roots)
        if selected is None:
            logger.warning("Edit rejected: no module is selected.")
            raise NavigationError("Select a module first.")
        return selected

    # --- Edits ---

    def form_for(self, kind: EditKind) -> NodeForm:
        """Form to show for ``kind``, pre-filled with the node being edited."""
        if kind == EditKind.EDIT_ROOT:
            return NodeForm.from_node(self._require_root())
        if kind == EditKind.EDIT_SELECTED:
            return NodeForm.from_node(self._require_selected())
        default_icon = DEFAULT_ROOT_ICON if kind == EditKind.NEW_ROOT else DEFAULT_MODULE_ICON
        return NodeForm(name="", icon=default_icon)

    def apply(self, kind: EditKind, form: Optional[NodeForm] = None) -> EditorView:
        if kind == EditKind.DELETE_ROOT:
            return self.delete_root()
        if kind == EditKind.DELETE_SELECTED:
            return self.delete_selected()
        if form is None:
            logger.warning(f"Edit '{kind}' rejected: no form given.")
            raise ValidationError("Name is required.")
        return self.apply_edit(kind, form)

    def apply_edit(self, kind: EditKind, form: NodeForm) -> EditorView:
        registry = self.session.registry

        if kind == EditKind.NEW_ROOT:
            data = self._clean(form, DEFAULT_ROOT_ICON)
            node = registry.add_root(data.build())
            logger.info(f"Satellite added: {node.name}")

        elif kind == EditKind.NEW_MODULE:
            parent = self._require_parent()
            data = self._clean(form, DEFAULT_MODULE_ICON)
            node = registry.add_child(parent, data.build())
            logger.info(f"Module '{node.name}' added to '{parent.name}'")

        elif kind == EditKind.NEW_SUBCOMPONENT:
            selected = self._require_selected()
            data = self._clean(form, DEFAULT_MODULE_ICON)
            node = registry.add_child(selected, data.build())
            logger.info(f"Sub-component '{node.name}' added to '{selected.name}'")

        elif kind == EditKind.EDIT_ROOT:
            root = self._require_root()
            data = self._clean(form, DEFAULT_ROOT_ICON)
            registry.replace(self._edited(root, data))
            logger.info(f"Satellite saved: {data.name}")

        elif kind == EditKind.EDIT_SELECTED:
            selected = self._require_selected()
            data = self._clean(form, DEFAULT_MODULE_ICON)
            registry.replace(self._edited(selected, data))
            self._relabel_path(selected.id, data.name)
            logger.info(f"Module saved: {data.name}")

        else:
            raise ValueError(f"Edit kind '{kind}' does not take a form.")

        return self._commit()

    @staticmethod
    def _clean(form: NodeForm, default_icon: str) -> NodeForm:
        try:
            return form.cleaned(default_icon)
        except ValidationError as e:
            logger.warning(f"Edit rejected: {e}")
            raise

    @staticmethod
    def _edited(node: Node, data: NodeForm) -> Node:
        return replace(
            node,
            name=data.name,
            icon=data.icon,
            type=data.type,
            image=data.image,
            description=data.description,
        )

    def _relabel_path(self, node_id: Optional[str], name: str) -> None:
        """Keep breadcrumb labels in sync when a drilled node is renamed."""
        node = self.cursor.current_root(self.roots)
        for step in self.cursor.path:
            if node is None or not 0 <= step.step_index < len(node.modules):
                return
            node = node.modules[step.step_index]
            if node.id == node_id:
                step.label_name = name

    def delete_root(self) -> EditorView:
        index = self.cursor.root_index
        if index is None:
            logger.warning("Delete rejected: no satellite is open.")
            raise NavigationError("Open a satellite first.")
        removed = self.session.registry.remove_root(index)
        self.cursor.exit()
        logger.info(f"Satellite deleted: {removed.name}")
        return self._commit()

    def delete_selected(self) -> EditorView:
        self._require_selected()
        registry = self.session.registry

        if self.cursor.context_selected and self.cursor.path:
            # Deleting the module we drilled into: step out first so the
            # cursor never points into the removed subtree
            step = self.cursor.pop_context()
            parent = self._require_parent()
            removed = registry.remove_child(parent, step.step_index)
        else:
            parent = self._require_parent()
            removed = registry.remove_child(parent, self.cursor.selected_index)
            self.cursor.clear_selection()

        logger.info(f"Module deleted: {removed.name}")
        return self._commit()

    # --- Bulk import/export ---

    def export_catalogue(self) -> bytes:
        return IOManager.serialize_catalogue(self.roots)

    def export_to_file(self, filepath: str = EXPORT_FILENAME) -> str:
        IOManager.export_to_file(self.roots, filepath)
        return filepath

    def import_catalogue(self, data: bytes) -> EditorView:
        try:
            roots = IOManager.parse_catalogue(data)
        except ImportFormatError as e:
            logger.error(f"Import rejected: {e}")
            raise
        return self._replace_catalogue(roots)

    def import_from_file(self, filepath: str) -> EditorView:
        try:
            roots = IOManager.import_from_file(filepath)
        except ImportFormatError as e:
            logger.error(f"Import rejected: {e}")
            raise
        return self._replace_catalogue(roots)

    def _replace_catalogue(self, roots: List[Node]) -> EditorView:
        self.session.registry.replace_all(roots)
        self.cursor.exit()
        return self._commit()

    def reset_to_baseline(self) -> EditorView:
        self.store.clear()
        self.session.reset()
        self.catalogue_changed.emit(self.roots)
        return self._emit_view()

    # --- Images ---

    def _image_target(self) -> Node:
        selected = self.cursor.selected_node(self.roots)
        if selected is not None:
            return selected
        return self._require_root()

    def assign_image(self, filepath: str) -> EditorView:
        target = self._image_target()
        # Raises before touching the node, so the previous image is kept
        reference = IOManager.read_image_reference(filepath)
        target.image = reference
        logger.info(f"Image assigned to '{target.name}'")
        return self._commit()

    def load_image_async(self, filepath: str) -> ImageLoadWorker:
        target = self._image_target()
        worker = ImageLoadWorker(target.id, filepath)
        worker.loaded.connect(self._on_image_loaded)
        worker.error_occurred.connect(self._on_image_failed)
        worker.finished.connect(lambda: self._forget_worker(worker))
        self._workers.append(worker)
        worker.start()
        return worker

    def _forget_worker(self, worker: ImageLoadWorker) -> None:
        if worker in self._workers:
            self._workers.remove(worker)

    @Slot(str, str)
    def _on_image_loaded(self, target_id: str, reference: str) -> None:
        node = self.session.registry.find(target_id)
        if node is None:
            logger.warning(f"Image loaded for node {target_id}, which no longer exists.")
            self.error_occurred.emit("The module was deleted before its image finished loading.")
            return
        node.image = reference
        logger.info(f"Image assigned to '{node.name}'")
        self._commit()

    @Slot(str, str)
    def _on_image_failed(self, target_id: str, message: str) -> None:
        self.error_occurred.emit(message)
