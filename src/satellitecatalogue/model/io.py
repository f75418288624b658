"""
Input/Output Manager
Handles bulk export/import of the catalogue and reading images for upload.
"""
import base64
import json
import logging
import mimetypes
import os
from importlib.metadata import version, PackageNotFoundError
from typing import List, Sequence

from satellitecatalogue.config import MAX_IMAGE_BYTES
from satellitecatalogue.model.errors import AssetReadError, ImportFormatError, SizeLimitError
from satellitecatalogue.model.node import Node

# Get module logger
logger = logging.getLogger(__name__)

try:
    APP_VERSION = version("satellite-catalogue")
except PackageNotFoundError:
    APP_VERSION = "0.0.0-dev"


class IOManager:

    @staticmethod
    def serialize_catalogue(roots: Sequence[Node]) -> bytes:
        """Pretty-printed JSON array of every root and its subtree."""
        payload = [root.to_dict() for root in roots]
        return json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")

    @staticmethod
    def parse_catalogue(data: bytes) -> List[Node]:
        try:
            imported = json.loads(data.decode("utf-8") if isinstance(data, bytes) else data)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ImportFormatError(f"Failed to parse import: {e}") from e

        if not isinstance(imported, list):
            raise ImportFormatError("Imported data is not a sequence of satellites.")

        try:
            return [Node.from_dict(item) for item in imported]
        except ValueError as e:
            raise ImportFormatError(f"Invalid satellite in import: {e}") from e

    @staticmethod
    def export_to_file(roots: Sequence[Node], filepath: str) -> None:
        logger.info(f"Exporting {len(roots)} satellites to: {filepath}")
        try:
            with open(filepath, "wb") as f:
                f.write(IOManager.serialize_catalogue(roots))
        except OSError as e:
            logger.exception(f"Failed to export catalogue: {e}")
            raise

    @staticmethod
    def import_from_file(filepath: str) -> List[Node]:
        logger.info(f"Importing catalogue from: {filepath}")
        try:
            with open(filepath, "rb") as f:
                data = f.read()
        except OSError as e:
            raise ImportFormatError(f"Could not read '{filepath}': {e}") from e
        return IOManager.parse_catalogue(data)

    @staticmethod
    def read_image_reference(filepath: str) -> str:
        """
        Read an image file and embed it as a ``data:`` URI.

        The size is checked before reading so oversized files are never
        loaded into memory.
        """
        try:
            size = os.path.getsize(filepath)
        except OSError as e:
            raise AssetReadError(f"Failed to read image '{filepath}': {e}") from e

        if size > MAX_IMAGE_BYTES:
            raise SizeLimitError(
                f"Image too large ({size} bytes, max {MAX_IMAGE_BYTES // (1024 * 1024)} MB)."
            )

        try:
            with open(filepath, "rb") as f:
                binary_data = f.read()
        except OSError as e:
            raise AssetReadError(f"Failed to read image '{filepath}': {e}") from e

        mime, _ = mimetypes.guess_type(filepath)
        encoded = base64.b64encode(binary_data).decode("ascii")
        logger.debug(f"Image '{filepath}' read ({size} bytes).")
        return f"data:{mime or 'application/octet-stream'};base64,{encoded}"
