"""
🧪 test_metadata_index.py - багатоключовий індекс та fallback-и.
"""

import logging

from storefront.domain.catalog import MetadataIndex, NodeLevel, parse_catalog_tree
from storefront.shared.utils.slug import slug_to_title, to_slug


def test_lookup_by_id_code_and_slug(catalog_index):
    assert catalog_index.get_display_name("C1") == "Dispositivos móviles"
    assert catalog_index.get_display_name("IM") == "Dispositivos móviles"
    assert catalog_index.get_display_name("im") == "Dispositivos móviles"
    assert catalog_index.get_display_name("dispositivos-moviles") == "Dispositivos móviles"
    assert catalog_index.get_slug("M1") == "smartphones-galaxy"
    assert catalog_index.get_slug("SMARTPHONES") == "smartphones-galaxy"


def test_miss_falls_back_to_formatted_key(catalog_index):
    assert catalog_index.get_display_name("smart-tv") == "Smart Tv"
    assert catalog_index.get_slug("Cámaras Réflex") == "camaras-reflex"
    assert catalog_index.get_display_name("") == ""
    assert catalog_index.get_slug(None) == ""


def test_empty_index_only_gives_fallbacks():
    index = MetadataIndex.empty()
    assert len(index) == 0
    assert index.get_display_name("home-audio") == slug_to_title("home-audio")
    assert index.get_node_by_id("C1") is None


def test_round_trip_for_every_node(catalog_index):
    for node in catalog_index.nodes():
        slug = catalog_index.get_slug(node.id)
        assert slug == to_slug(node.display_name)
        assert catalog_index.get_display_name(slug) == node.display_name
        assert catalog_index.get_node_by_slug(slug).id == node.id


def test_node_accessors(catalog_index):
    assert catalog_index.get_node_by_slug("galaxy-z-fold").id == "S1"
    assert catalog_index.get_node_by_code("tablets").id == "M2"
    assert catalog_index.find_child_by_code("C1", "smartphones").id == "M1"
    assert catalog_index.find_child_by_code("C2", "smartphones") is None
    assert "M20" in catalog_index
    assert [root.id for root in catalog_index.roots] == ["C1", "C2"]


def test_sibling_slug_collision_last_wins(caplog):
    payload = [{"id": "C1", "code": "IM", "displayName": "Móviles", "children": [
        {"id": "M1", "code": "A", "displayName": "Accesorios", "order": 1},
        {"id": "M2", "code": "B", "displayName": "Accesórios", "order": 2},
    ]}]

    with caplog.at_level(logging.WARNING):
        index = MetadataIndex.build(parse_catalog_tree(payload))

    assert index.get_node_by_slug("accesorios").id == "M2"
    assert index.get_node_by_id("M1").display_name == "Accesorios"
    assert len(index.collisions) == 1
    assert index.collisions[0].loser_id == "M1"
    assert "slug_collision" in caplog.text


def test_same_menu_name_under_two_categories_stays_addressable():
    payload = [
        {"id": "C1", "code": "IM", "displayName": "Móviles", "children": [
            {"id": "M1", "code": "ACC", "displayName": "Accesorios"},
        ]},
        {"id": "C2", "code": "TV", "displayName": "Televisores", "order": 1, "children": [
            {"id": "M2", "code": "ACC", "displayName": "Accesorios"},
        ]},
    ]
    index = MetadataIndex.build(parse_catalog_tree(payload))

    assert index.collisions == ()
    assert index.get_node_by_slug("moviles/accesorios").id == "M1"
    assert index.get_node_by_slug("televisores/accesorios").id == "M2"


def test_rebuild_is_deterministic(catalog_payload):
    first = MetadataIndex.build(parse_catalog_tree(catalog_payload))
    second = MetadataIndex.build(parse_catalog_tree(catalog_payload))
    assert [first.get_slug(n.id) for n in first.nodes()] == [second.get_slug(n.id) for n in second.nodes()]


def test_menu_named_like_its_category_round_trips_by_path():
    payload = [{"id": "C2", "code": "TV", "displayName": "Televisores", "children": [
        {"id": "M20", "code": "OLED", "displayName": "Televisores"},
    ]}]
    index = MetadataIndex.build(parse_catalog_tree(payload))

    assert index.collisions == ()
    assert index.get_slug("C2") == "televisores"
    assert index.get_slug("M20") == "televisores/televisores"
    for node in index.nodes():
        assert index.get_node_by_slug(index.get_slug(node.id)).id == node.id


def test_submenu_code_does_not_shadow_category():
    payload = [{"id": "C1", "code": "IM", "displayName": "Dispositivos móviles", "children": [
        {"id": "M1", "code": "ACC", "displayName": "Accesorios", "children": [
            {"id": "S1", "code": "im", "displayName": "Cargadores IM"},
        ]},
    ]}]
    index = MetadataIndex.build(parse_catalog_tree(payload))

    assert index.get_display_name("IM") == "Dispositivos móviles"
    assert index.get_display_name("im") == "Dispositivos móviles"
    assert index.get_category("IM").id == "C1"
    assert index.get_node_by_code("im", level=NodeLevel.SUBMENU).id == "S1"
    assert index.get_node_by_code("IM").id == "C1"


def test_get_category_only_matches_categories(catalog_index):
    assert catalog_index.get_category("C1").id == "C1"
    assert catalog_index.get_category("tv").id == "C2"
    assert catalog_index.get_category("televisores").id == "C2"
    assert catalog_index.get_category("M1") is None
    assert catalog_index.get_category("SMARTPHONES") is None
    assert catalog_index.get_category(None) is None


def test_node_lookup_by_code_at_level(catalog_index):
    assert catalog_index.get_node_by_code("SMARTPHONES", level=NodeLevel.MENU).id == "M1"
    assert catalog_index.get_node_by_code("SMARTPHONES", level=NodeLevel.CATEGORY) is None
    assert catalog_index.get_node_by_code("fold", level=NodeLevel.SUBMENU).id == "S1"
    assert catalog_index.path_of("S1") == "dispositivos-moviles/smartphones-galaxy/galaxy-z-fold"
    assert catalog_index.path_of("missing") == ""
