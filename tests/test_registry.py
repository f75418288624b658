import pytest

from satellitecatalogue.model.node import Node, copy_nodes
from satellitecatalogue.model.registry import CatalogueRegistry


def test_add_root_assigns_prefixed_id(baseline):
    registry = CatalogueRegistry(copy_nodes(baseline))
    node = registry.add_root(Node(name="New"))
    assert node.id.startswith("sat-")
    assert registry.roots[-1] is node


def test_add_child_appends_in_order(baseline):
    registry = CatalogueRegistry(copy_nodes(baseline))
    parent = registry.roots[0]
    first = registry.add_child(parent, Node(name="First"))
    second = registry.add_child(parent, Node(name="Second"))
    assert [n.name for n in parent.modules] == ["Mod", "First", "Second"]
    assert first.id.startswith("mod-")
    assert first.id != second.id


def test_add_child_backfills_descendant_ids():
    registry = CatalogueRegistry([Node(id="r", name="R")])
    child = registry.add_child(registry.roots[0], Node(name="C", modules=[Node(name="GC")]))
    assert child.modules[0].id is not None


def test_ids_unique_over_many_additions(baseline):
    registry = CatalogueRegistry(copy_nodes(baseline))
    created = []
    for i in range(200):
        if i % 3 == 0:
            created.append(registry.add_root(Node(name=f"root {i}")))
        else:
            created.append(registry.add_child(registry.roots[i % len(registry.roots)], Node(name=f"mod {i}")))
    ids = [n.id for n in created]
    assert len(set(ids)) == len(ids)
    assert len(registry.all_ids()) == len(ids) + 8


def test_generated_id_is_redrawn_when_taken():
    class RejectFirst(set):
        checks = 0

        def __contains__(self, item):
            self.checks += 1
            return self.checks == 1

    taken = RejectFirst()
    node_id = CatalogueRegistry().generate_id("sat", taken)
    assert taken.checks == 2
    assert node_id in set(taken)


def test_find_and_replace_at_depth(baseline):
    registry = CatalogueRegistry(copy_nodes(baseline))
    assert registry.find("c").name == "C"
    registry.replace(Node(id="c", name="C2"))
    assert registry.roots[1].modules[0].modules[0].modules[0].name == "C2"


def test_replace_unknown_id_raises(baseline):
    registry = CatalogueRegistry(copy_nodes(baseline))
    with pytest.raises(KeyError):
        registry.replace(Node(id="missing", name="?"))


def test_remove_discards_subtree(baseline):
    registry = CatalogueRegistry(copy_nodes(baseline))
    removed = registry.remove_child(registry.roots[1], 0)
    assert removed.id == "a"
    assert registry.find("c") is None
    assert [n.id for n in registry.roots[1].modules] == ["x"]


def test_remove_root(baseline):
    registry = CatalogueRegistry(copy_nodes(baseline))
    registry.remove_root(0)
    assert [r.id for r in registry.roots] == ["s2"]
    with pytest.raises(IndexError):
        registry.remove_root(5)


def test_replace_all_backfills_ids():
    registry = CatalogueRegistry()
    registry.replace_all([Node(name="R", modules=[Node(name="M")]), Node(id="keep", name="K")])
    assert registry.roots[0].id.startswith("sat-")
    assert registry.roots[0].modules[0].id.startswith("mod-")
    assert registry.roots[1].id == "keep"


def test_replace_all_gives_duplicate_ids_fresh_values():
    registry = CatalogueRegistry()
    registry.replace_all([
        Node(id="s1", name="One", modules=[Node(id="m", name="A"), Node(id="m", name="B")]),
        Node(id="s1", name="Two", modules=[Node(id="m", name="C")]),
    ])
    first, second = registry.roots
    assert first.id == "s1"
    assert first.modules[0].id == "m"
    assert first.modules[1].id.startswith("mod-")
    assert second.id.startswith("sat-")
    assert second.modules[0].id.startswith("mod-")
    ids = [node.id for root in registry.roots for node in root.walk()]
    assert len(set(ids)) == len(ids)


def test_add_root_ignores_ids_carried_by_the_new_node(baseline):
    registry = CatalogueRegistry(copy_nodes(baseline))
    added = registry.add_root(Node(id="s1", name="Copy", modules=[Node(id="m1", name="Mod")]))
    assert added.id.startswith("sat-")
    assert added.modules[0].id.startswith("mod-")
    assert registry.find("s1").name == "Sat"
