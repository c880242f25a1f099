# 📦 storefront/domain/catalog/entities.py
"""
📦 Доменні сутності каталогу: вузли дерева та елементи breadcrumbs.

🔹 `CatalogNode` - уніфікована форма для category / menu / submenu (frozen dataclass).
🔹 `parse_catalog_tree` перетворює сире дерево API у кортеж вузлів.
🔹 Розуміє як нові ключі (`id`, `code`, `displayName`), так і легасі (`uuid`, `nombre`, `menus`).
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging                                                      # 🧾 Логування парсингу
from dataclasses import dataclass, field                            # 🧱 Опис сутностей
from enum import Enum, unique                                       # 🔖 Рівні дерева
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

# 🧩 Внутрішні модулі проєкту
from storefront.errors.custom_errors import CatalogPayloadError     # 🧾 Некоректний payload
from storefront.shared.utils.logger import LOG_NAME                 # 🏷️ Префікс логерів
from storefront.shared.utils.slug import to_slug                    # 🔤 Slug з displayName

# ================================
# 🪵 ЛОГЕР МОДУЛЯ
# ================================
logger = logging.getLogger(f"{LOG_NAME}.domain.catalog")


# ================================
# 🔑 АЛІАСИ ПОЛІВ PAYLOAD
# ================================
_ID_KEYS = ("id", "uuid")
_CODE_KEYS = ("code", "nombre")
_NAME_KEYS = ("displayName", "display_name", "nombreVisible")
_ACTIVE_KEYS = ("active", "activo")
_ORDER_KEYS = ("order", "orden")
_CHILDREN_KEYS = ("children", "menus", "submenus")


@unique
class NodeLevel(str, Enum):
    """Рівень вузла у дереві каталогу."""

    CATEGORY = "category"
    MENU = "menu"
    SUBMENU = "submenu"

    @classmethod
    def from_depth(cls, depth: int) -> "NodeLevel":
        """0 → CATEGORY, 1 → MENU, 2+ → SUBMENU."""
        if depth <= 0:
            return cls.CATEGORY
        if depth == 1:
            return cls.MENU
        return cls.SUBMENU


# ================================
# 🌳 ВУЗОЛ КАТАЛОГУ
# ================================
@dataclass(frozen=True, slots=True)
class CatalogNode:
    """
    Іммʼютабельний вузол каталогу.

    `id` унікальний у всьому дереві; `code` унікальний лише серед сусідів одного батька.
    """

    id: str
    code: str
    display_name: str
    active: bool = True
    order: int = 0
    parent_id: Optional[str] = None
    level: NodeLevel = NodeLevel.CATEGORY
    children: Tuple["CatalogNode", ...] = field(default=(), repr=False)

    @property
    def slug(self) -> str:
        """🔤 Slug завжди похідний від `display_name`."""
        return to_slug(self.display_name)

    def walk(self) -> Iterable["CatalogNode"]:
        """🔁 Обхід у глибину: спочатку сам вузол, потім нащадки."""
        yield self
        for child in self.children:
            yield from child.walk()


# ================================
# 🧭 BREADCRUMB
# ================================
@dataclass(frozen=True, slots=True)
class BreadcrumbItem:
    """Один крок навігаційного ланцюжка; термінальний елемент має `href=None`."""

    label: str
    href: Optional[str] = None


# ================================
# 🧾 ПАРСИНГ СИРОГО ДЕРЕВА
# ================================
def _first(raw: Mapping[str, Any], keys: Sequence[str], default: Any = None) -> Any:
    """Перше непорожнє значення серед аліасів ключа."""
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return default


def _to_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


_FALSE_STRINGS = frozenset({"false", "0", "no", "off", "n", ""})


def _to_bool(value: Any) -> bool:
    """"false" / "0" / "no" з payload → False; решта як у `bool()`."""
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def _order_of(raw: Any) -> int:
    return _to_int(_first(raw, _ORDER_KEYS, 0)) if isinstance(raw, Mapping) else 0


def _parse_node(raw: Any, parent_id: Optional[str], depth: int) -> CatalogNode:
    """🧩 Рекурсивно будує `CatalogNode` з одного словника payload."""
    if not isinstance(raw, Mapping):
        raise CatalogPayloadError("Вузол каталогу має бути обʼєктом", details=repr(raw)[:200])

    node_id = _first(raw, _ID_KEYS)
    code = _first(raw, _CODE_KEYS)
    if node_id is None or code is None:
        raise CatalogPayloadError(
            "Вузол каталогу без id або code",
            details=f"depth={depth} keys={sorted(raw.keys())}",
        )

    code_str = str(code).strip()
    display_name = str(_first(raw, _NAME_KEYS, code_str)).strip() or code_str  # 🪪 Fallback на code
    active_raw = _first(raw, _ACTIVE_KEYS, True)
    node_id_str = str(node_id)

    raw_children: List[Any] = []
    for key in _CHILDREN_KEYS:
        value = raw.get(key)
        if isinstance(value, list):
            raw_children = value
            break

    ordered = sorted(raw_children, key=_order_of)                   # 🔢 Рівний order зберігає порядок payload
    children = tuple(_parse_node(child, node_id_str, depth + 1) for child in ordered)

    return CatalogNode(
        id=node_id_str,
        code=code_str,
        display_name=display_name,
        active=_to_bool(active_raw),
        order=_to_int(_first(raw, _ORDER_KEYS, 0)),
        parent_id=parent_id,
        level=NodeLevel.from_depth(depth),
        children=children,
    )


def parse_catalog_tree(payload: Any) -> Tuple[CatalogNode, ...]:
    """
    🌳 Перетворює відповідь API каталогу на кортеж кореневих категорій.

    Args:
        payload: Список категорій або один обʼєкт категорії.

    Returns:
        Tuple[CatalogNode, ...]: Корені, відсортовані за `order`.

    Raises:
        CatalogPayloadError: Якщо вузол не має `id`/`code` або має невірний тип.
    """
    if payload is None:
        return ()
    items = payload if isinstance(payload, list) else [payload]
    roots = [_parse_node(item, None, 0) for item in items]
    roots.sort(key=lambda node: node.order)
    logger.debug("🌳 catalog.parsed", extra={"roots": len(roots)})
    return tuple(roots)


__all__ = ["NodeLevel", "CatalogNode", "BreadcrumbItem", "parse_catalog_tree"]
