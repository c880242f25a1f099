"""
🧪 test_catalog_entities.py - парсинг сирого дерева каталогу.
"""

import pytest

from storefront.domain.catalog import CatalogNode, NodeLevel, parse_catalog_tree
from storefront.errors import CatalogPayloadError


def test_roots_and_children_sorted_by_order(catalog_payload):
    roots = parse_catalog_tree(catalog_payload)

    assert [root.code for root in roots] == ["IM", "TV"]
    im = roots[0]
    assert [child.id for child in im.children] == ["M1", "M2"]
    assert im.level is NodeLevel.CATEGORY
    assert im.children[0].level is NodeLevel.MENU
    assert im.children[0].children[0].level is NodeLevel.SUBMENU
    assert im.children[0].parent_id == "C1"


def test_legacy_keys_are_understood():
    payload = {
        "uuid": "cat-1",
        "nombre": "im",
        "nombreVisible": "Dispositivos móviles",
        "activo": False,
        "orden": "3",
        "menus": [
            {"uuid": "m-1", "nombre": "PHONES", "nombreVisible": "Teléfonos", "submenus": [
                {"uuid": "s-1", "nombre": "FOLD"},
            ]},
        ],
    }

    (root,) = parse_catalog_tree(payload)

    assert root.id == "cat-1"
    assert root.code == "im"
    assert root.display_name == "Dispositivos móviles"
    assert root.active is False
    assert root.order == 3
    submenu = root.children[0].children[0]
    assert submenu.display_name == "FOLD"
    assert submenu.slug == "fold"


def test_walk_is_depth_first(catalog_payload):
    roots = parse_catalog_tree(catalog_payload)
    assert [node.id for node in roots[0].walk()] == ["C1", "M1", "S1", "S2", "M2"]


def test_equal_order_keeps_payload_order():
    payload = [{"id": "A", "code": "A", "children": [
        {"id": "x", "code": "X"}, {"id": "y", "code": "Y"}, {"id": "z", "code": "Z", "order": -1},
    ]}]
    (root,) = parse_catalog_tree(payload)
    assert [child.id for child in root.children] == ["z", "x", "y"]


@pytest.mark.parametrize("payload", [
    [{"code": "IM"}],
    [{"id": "C1"}],
    [{"id": "C1", "code": "IM", "children": ["oops"]}],
    ["not-a-node"],
])
def test_invalid_nodes_raise_payload_error(payload):
    with pytest.raises(CatalogPayloadError):
        parse_catalog_tree(payload)


def test_none_payload_is_empty():
    assert parse_catalog_tree(None) == ()


def test_node_slug_derives_from_display_name():
    node = CatalogNode(id="1", code="TV", display_name="Smart TV & Audio")
    assert node.slug == "smart-tv-audio"


@pytest.mark.parametrize("raw, expected", [
    ("false", False),
    ("False", False),
    ("0", False),
    ("no", False),
    ("true", True),
    (1, True),
    (0, False),
])
def test_active_flag_parses_string_booleans(raw, expected):
    (root,) = parse_catalog_tree([{"id": "C1", "code": "IM", "activo": raw}])
    assert root.active is expected
