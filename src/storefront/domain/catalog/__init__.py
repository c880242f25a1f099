# 🌳 storefront/domain/catalog/__init__.py
"""
🌳 Пакет `domain.catalog`: дерево каталогу, багатоключовий індекс і breadcrumbs.

🔹 `entities.py` - `CatalogNode`, `BreadcrumbItem`, `parse_catalog_tree`.
🔹 `metadata_index.py` - незмінний `MetadataIndex` зі знімка дерева.
🔹 `breadcrumbs.py` - `BreadcrumbBuilder` з ланцюжком fallback-ів.
🔹 `interfaces.py` - контракти зовнішніх колабораторів (каталог, пошук товарів).
"""

from .entities import BreadcrumbItem, CatalogNode, NodeLevel, parse_catalog_tree
from .metadata_index import MetadataIndex, SlugCollision
from .breadcrumbs import BreadcrumbBuilder, build_breadcrumbs
from .interfaces import ICatalogProvider, IProductSearchProvider, ProductFilter

__all__ = [
    "BreadcrumbItem",
    "CatalogNode",
    "NodeLevel",
    "parse_catalog_tree",
    "MetadataIndex",
    "SlugCollision",
    "BreadcrumbBuilder",
    "build_breadcrumbs",
    "ICatalogProvider",
    "IProductSearchProvider",
    "ProductFilter",
]
