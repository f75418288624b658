"""
Configuration & Path Management
===============================
This module serves as the central registry for file paths and global constants.

Why is this file needed?
------------------------
1. Abstraction: It prevents hardcoded paths scattered throughout the code.
2. Deployment: It handles the logic required by PyInstaller (sys._MEIPASS) to
   find the baseline catalogue when the app is frozen into an .exe.

Exports:
    ASSETS_PATH (str): Absolute path to the assets directory.
    BASELINE_DIR (str): Directory holding one JSON file per shipped satellite.
    STORAGE_KEY (str): Settings key under which the edit overlay is stored.
    MAX_IMAGE_BYTES (int): Largest image file accepted for upload.
"""
import sys
import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        # PyInstaller temp folder
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, relative_path)

    # Development mode: resolve relative to this file
    # config.py is in src/satellitecatalogue/
    current_file_path: Path = Path(__file__)
    project_root: Path = current_file_path.parent.parent.parent
    return os.path.join(str(project_root), relative_path)


# Global Constants
ASSETS_PATH: str = get_resource_path("assets")
BASELINE_DIR: str = os.path.join(ASSETS_PATH, "satellites")

# Edits are stored under a single, process-wide key
STORAGE_KEY: str = "satellite-catalogue-edits"

# Images are embedded as data URIs in the overlay, keep them small
MAX_IMAGE_BYTES: int = 2 * 1024 * 1024

DEFAULT_ROOT_ICON: str = "🛰️"
DEFAULT_MODULE_ICON: str = "📦"

EXPORT_FILENAME: str = "satellite-catalogue-export.json"

if not os.path.exists(ASSETS_PATH):
    logger.warning(f"Assets path not found at {ASSETS_PATH}")
