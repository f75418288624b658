"""
Background Workers (Threading)
==============================
This module contains QThread subclasses for tasks that touch the disk.

Why is this file needed?
------------------------
1. Responsiveness: Reading and encoding a large image on the main thread
   would stall the UI.
2. Signals: The worker only reads. The result is handed back through a
   signal and the editor assigns it on the main thread, so no partially
   loaded state is ever visible.

Classes:
    ImageLoadWorker: Reads an image file into an embeddable reference.
"""
import logging
from PySide6.QtCore import QThread, Signal

from satellitecatalogue.model.errors import CatalogueError
from satellitecatalogue.model.io import IOManager

logger = logging.getLogger(__name__)


class ImageLoadWorker(QThread):
    loaded = Signal(str, str)  # (target node id, image reference)
    error_occurred = Signal(str, str)  # (target node id, message)

    def __init__(self, target_id: str, filepath: str):
        super().__init__()
        self.target_id = target_id
        self.filepath = filepath

    def run(self):
        try:
            logger.info(f"Loading image in background: {self.filepath}")
            reference = IOManager.read_image_reference(self.filepath)
        except CatalogueError as e:
            logger.error(f"Error in ImageLoadWorker: {e}")
            self.error_occurred.emit(self.target_id, str(e))
            return

        self.loaded.emit(self.target_id, reference)
