# 🌐 storefront/infrastructure/catalog/__init__.py
"""
🌐 Інфраструктура каталогу.

🔹 `CatalogApiClient` - REST API дерева категорій та пошуку товарів.
🔹 `CatalogMetadataService` - власник знімка `MetadataIndex`.
🔹 `ProductResultCache` - TTL-кеш результатів пошуку.
"""

from __future__ import annotations

from .catalog_client import CatalogApiClient
from .metadata_service import CatalogMetadataService
from .product_cache import ProductResultCache, cache_key

__all__ = ["CatalogApiClient", "CatalogMetadataService", "ProductResultCache", "cache_key"]
