import json

import pytest

from satellitecatalogue.config import MAX_IMAGE_BYTES
from satellitecatalogue.model.errors import AssetReadError, ImportFormatError, SizeLimitError
from satellitecatalogue.model.io import IOManager
from satellitecatalogue.model.node import Node


def test_serialize_is_pretty_json_list(baseline):
    data = IOManager.serialize_catalogue(baseline)
    assert data.startswith(b"[\n  {")
    assert [item["id"] for item in json.loads(data)] == ["s1", "s2"]


def test_parse_rejects_non_sequence():
    with pytest.raises(ImportFormatError):
        IOManager.parse_catalogue(b'{"id": "x", "name": "X"}')


def test_parse_rejects_invalid_json():
    with pytest.raises(ImportFormatError):
        IOManager.parse_catalogue(b"[{")


def test_parse_rejects_nameless_node():
    with pytest.raises(ImportFormatError):
        IOManager.parse_catalogue(b'[{"id": "x"}]')


def test_parse_keeps_unicode():
    roots = IOManager.parse_catalogue(IOManager.serialize_catalogue([Node(id="r", name="Družice 🛰️")]))
    assert roots[0].name == "Družice 🛰️"


def test_image_reference_is_data_uri(tmp_path):
    image = tmp_path / "a.gif"
    image.write_bytes(b"GIF89a")
    assert IOManager.read_image_reference(str(image)) == "data:image/gif;base64,R0lGODlh"


def test_image_exactly_at_limit_is_accepted(tmp_path):
    image = tmp_path / "edge.png"
    image.write_bytes(b"0" * MAX_IMAGE_BYTES)
    assert IOManager.read_image_reference(str(image)).startswith("data:image/png")


def test_image_over_limit(tmp_path):
    image = tmp_path / "big.png"
    image.write_bytes(b"0" * (MAX_IMAGE_BYTES + 1))
    with pytest.raises(SizeLimitError):
        IOManager.read_image_reference(str(image))


def test_missing_image(tmp_path):
    with pytest.raises(AssetReadError):
        IOManager.read_image_reference(str(tmp_path / "nope.png"))
