# 🧩 storefront/domain/catalog/interfaces.py
"""
🧩 Контракти зовнішніх колабораторів каталогу.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional


# ================================
# 🔎 ФІЛЬТР ПОШУКУ ТОВАРІВ
# ================================
@dataclass(frozen=True, slots=True)
class ProductFilter:
    """Мінімальний фільтр API пошуку товарів."""

    category_code: str
    menu_id: Optional[str] = None
    submenu_id: Optional[str] = None
    page: int = 1
    limit: int = 50

    def to_query(self) -> Dict[str, Any]:
        """Query-параметри API (порожні значення відкидаються)."""
        query: Dict[str, Any] = {"categoria": self.category_code, "page": self.page, "limit": self.limit}
        if self.menu_id:
            query["menuUuid"] = self.menu_id
        if self.submenu_id:
            query["submenuUuid"] = self.submenu_id
        return query


# ================================
# 🏛️ ІНТЕРФЕЙСИ
# ================================
class ICatalogProvider(ABC):
    """Джерело сирого дерева каталогу."""

    @abstractmethod
    async def get_complete_categories(self) -> List[Mapping[str, Any]]:
        """Повне дерево: категорії з меню та підменю."""

    @abstractmethod
    async def get_category_tree(self, code: str) -> Mapping[str, Any]:
        """Піддерево однієї категорії (ледаче завантаження)."""


class IProductSearchProvider(ABC):
    """Пошук товарів за фільтром; саме цю дію виконує префетч."""

    @abstractmethod
    async def search_products(self, product_filter: ProductFilter) -> List[Mapping[str, Any]]:
        """Повертає список коротких описів товарів."""
