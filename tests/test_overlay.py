import json

from PySide6.QtCore import QSettings

from satellitecatalogue.config import STORAGE_KEY
from satellitecatalogue.model.node import Node, copy_nodes
from satellitecatalogue.model.overlay import Overlay, OverlayStore, apply_overlay, compute_overlay


def test_unchanged_working_set_gives_empty_overlay(baseline):
    overlay = compute_overlay(baseline, copy_nodes(baseline))
    assert overlay.modified == []
    assert overlay.added == []
    assert overlay.deleted == []
    assert overlay.is_empty()


def test_nested_edit_stores_whole_root(baseline):
    working = copy_nodes(baseline)
    working[1].modules[0].modules[0].name = "B2"
    overlay = compute_overlay(baseline, working)
    assert [n.id for n in overlay.modified] == ["s2"]
    assert overlay.modified[0].modules[0].modules[0].name == "B2"
    assert overlay.added == []
    assert overlay.deleted == []


def test_added_and_deleted_roots(baseline):
    working = copy_nodes(baseline)[1:]
    working.append(Node(id="new", name="New"))
    overlay = compute_overlay(baseline, working)
    assert [n.id for n in overlay.added] == ["new"]
    assert overlay.deleted == ["s1"]
    assert overlay.modified == []


def test_overlay_entries_are_detached_from_working_set(baseline):
    working = copy_nodes(baseline)
    working[0].name = "Renamed"
    overlay = compute_overlay(baseline, working)
    working[0].name = "Renamed again"
    assert overlay.modified[0].name == "Renamed"


def test_round_trip_reproduces_working_set(baseline):
    working = copy_nodes(baseline)
    working[0].modules.append(Node(id="m2", name="Extra"))
    del working[1]
    working.append(Node(id="n1", name="Fresh", modules=[Node(id="n2", name="Child")]))
    result = apply_overlay(baseline, compute_overlay(baseline, working))
    assert result == working


def test_apply_does_not_touch_baseline(baseline):
    snapshot = copy_nodes(baseline)
    overlay = Overlay(modified=[Node(id="s1", name="Changed")], deleted=["s2"])
    apply_overlay(baseline, overlay)
    assert baseline == snapshot


def test_delete_wins_over_stale_modified(baseline):
    overlay = Overlay(modified=[Node(id="s1", name="Stale edit")], deleted=["s1"])
    result = apply_overlay(baseline, overlay)
    assert [r.id for r in result] == ["s2"]


def test_applying_added_is_idempotent(baseline):
    overlay = Overlay(added=[Node(id="n1", name="New")])
    once = apply_overlay(baseline, overlay)
    twice = apply_overlay(once, overlay)
    assert [r.id for r in twice] == ["s1", "s2", "n1"]


def test_added_entry_with_baseline_id_is_not_duplicated(baseline):
    overlay = Overlay(added=[Node(id="s1", name="Clash")])
    result = apply_overlay(baseline, overlay)
    assert [r.id for r in result] == ["s1", "s2"]
    assert result[0].name == "Sat"


def test_store_missing_record_is_empty(settings):
    store = OverlayStore(settings)
    assert store.load().is_empty()
    assert store.last_error is None


def test_store_persists_across_instances(qapp, settings, settings_path):
    overlay = Overlay(
        modified=[Node(id="s1", name="Sat, renamed", modules=[Node(id="m1", name="Mod")])],
        added=[Node(id="n1", name="Nový 🛰️")],
        deleted=["s2"],
    )
    OverlayStore(settings).save(overlay)

    reopened = OverlayStore(QSettings(settings_path, QSettings.Format.IniFormat))
    assert reopened.load() == overlay


def test_store_corrupt_record_is_reported_and_ignored(settings):
    settings.setValue(STORAGE_KEY, "{not json")
    store = OverlayStore(settings)
    assert store.load().is_empty()
    assert store.last_error is not None


def test_store_wrong_shape_is_treated_as_corrupt(settings):
    settings.setValue(STORAGE_KEY, json.dumps({"modified": "nope"}))
    store = OverlayStore(settings)
    assert store.load().is_empty()
    assert store.last_error is not None


def test_store_clear(settings):
    store = OverlayStore(settings)
    store.save(Overlay(deleted=["s1"]))
    store.clear()
    assert store.load().is_empty()
