import pytest
from PySide6.QtCore import QCoreApplication, QSettings

from satellitecatalogue.app.editor import Editor
from satellitecatalogue.model.node import Node


@pytest.fixture(scope="session")
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def settings_path(tmp_path):
    return str(tmp_path / "edits.ini")


@pytest.fixture
def settings(qapp, settings_path):
    return QSettings(settings_path, QSettings.Format.IniFormat)


@pytest.fixture
def baseline():
    return [
        Node(id="s1", name="Sat", modules=[Node(id="m1", name="Mod")]),
        Node(
            id="s2",
            name="Station",
            modules=[
                Node(id="a", name="A", modules=[
                    Node(id="b", name="B", modules=[Node(id="c", name="C")]),
                    Node(id="d", name="D"),
                ]),
                Node(id="x", name="X"),
            ],
        ),
    ]


@pytest.fixture
def editor(qapp, baseline, settings):
    return Editor.from_storage(baseline, settings)
