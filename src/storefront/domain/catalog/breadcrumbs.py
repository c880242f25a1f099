# 🧭 storefront/domain/catalog/breadcrumbs.py
"""
🧭 Побудова навігаційного ланцюжка (breadcrumbs) для сторінки товару.

🔹 Ланцюжок fallback-ів: категорія → меню (id / легасі-назва / сирий текст) → підменю → товар.
🔹 Підменю додається лише тоді, коли меню знайдено за id.
🔹 Останній елемент завжди `BreadcrumbItem(label=product_id, href=None)`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging                                                      # 🧾 Трасування вибраного рівня fallback
from typing import List, Optional                                   # 🧰 Типи
from urllib.parse import quote                                      # 🌐 Безпечний query-параметр

# 🧩 Внутрішні модулі проєкту
from storefront.shared.utils.logger import LOG_NAME
from storefront.shared.utils.slug import slug_to_title, to_slug
from .entities import BreadcrumbItem, CatalogNode, NodeLevel
from .metadata_index import MetadataIndex

logger = logging.getLogger(f"{LOG_NAME}.domain.catalog.breadcrumbs")

DEFAULT_BASE_PATH = "/products"


class BreadcrumbBuilder:
    """🧭 Складає breadcrumbs поверх конкретного знімка `MetadataIndex`."""

    def __init__(self, index: MetadataIndex, base_path: str = DEFAULT_BASE_PATH) -> None:
        self._index = index
        self._base_path = "/" + base_path.strip("/") if base_path.strip("/") else ""

    def build(
        self,
        product_id: str,
        category_code: Optional[str] = None,
        legacy_subcategory_name: Optional[str] = None,
        menu_id: Optional[str] = None,
        submenu_id: Optional[str] = None,
    ) -> List[BreadcrumbItem]:
        """
        🧭 Повертає ланцюжок для товару.

        Args:
            product_id: Ідентифікатор товару (термінальний лейбл).
            category_code: Код категорії ("IM"); без нього ланцюжок = лише товар.
            legacy_subcategory_name: Стара текстова назва підкатегорії з payload товару.
            menu_id: Ідентифікатор меню.
            submenu_id: Ідентифікатор підменю (враховується лише після меню за id).
        """
        items: List[BreadcrumbItem] = []

        if category_code:
            category = self._index.get_category(category_code)            # 📁 Лише мапи категорій
            if category is not None:
                category_label, category_slug = category.display_name, category.slug
            else:
                category_label, category_slug = slug_to_title(category_code), to_slug(category_code)
            category_href = f"{self._base_path}/{quote(category_slug)}"
            items.append(BreadcrumbItem(label=category_label, href=category_href))

            menu = self._index.get_node_by_id(menu_id)
            if menu is not None:
                menu_href = f"{category_href}?section={quote(menu.slug)}"
                items.append(BreadcrumbItem(label=menu.display_name, href=menu_href))

                submenu = self._index.get_node_by_id(submenu_id)
                if submenu is not None:
                    items.append(
                        BreadcrumbItem(
                            label=submenu.display_name,
                            href=f"{menu_href}&subsection={quote(submenu.slug)}",
                        )
                    )
            elif legacy_subcategory_name:
                legacy_menu = self._match_legacy_menu(category_code, legacy_subcategory_name)
                if legacy_menu is not None:
                    items.append(
                        BreadcrumbItem(
                            label=legacy_menu.display_name,
                            href=f"{category_href}?section={quote(legacy_menu.slug)}",
                        )
                    )
                else:
                    logger.debug("🪫 breadcrumbs.raw_subcategory", extra={"name": legacy_subcategory_name})
                    items.append(
                        BreadcrumbItem(
                            label=legacy_subcategory_name,
                            href=f"{category_href}?section={quote(to_slug(legacy_subcategory_name))}",
                        )
                    )

        items.append(BreadcrumbItem(label=product_id, href=None))
        return items

    def _match_legacy_menu(self, category_code: str, name: str) -> Optional[CatalogNode]:
        """Меню, чий `code` збігається з легасі-назвою: спершу в цій категорії, потім будь-яке."""
        category = self._index.get_category(category_code)
        if category is not None:
            scoped = self._index.find_child_by_code(category.id, name)
            if scoped is not None:
                return scoped
        return self._index.get_node_by_code(name, level=NodeLevel.MENU)


def build_breadcrumbs(
    index: MetadataIndex,
    product_id: str,
    category_code: Optional[str] = None,
    legacy_subcategory_name: Optional[str] = None,
    menu_id: Optional[str] = None,
    submenu_id: Optional[str] = None,
) -> List[BreadcrumbItem]:
    """Скорочення для одноразового виклику без збереження `BreadcrumbBuilder`."""
    return BreadcrumbBuilder(index).build(
        product_id,
        category_code=category_code,
        legacy_subcategory_name=legacy_subcategory_name,
        menu_id=menu_id,
        submenu_id=submenu_id,
    )


__all__ = ["BreadcrumbBuilder", "build_breadcrumbs", "DEFAULT_BASE_PATH"]
