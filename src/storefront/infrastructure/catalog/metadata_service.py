# 🗂️ storefront/infrastructure/catalog/metadata_service.py
"""
🗂️ CatalogMetadataService - власник поточного знімка `MetadataIndex`.

🔹 Завантажує дерево каталогу з API та атомарно підміняє знімок (без інкрементальних патчів).
🔹 Вміє ледаче оновити одну категорію: новий знімок будується з попередніх коренів.
🔹 Сире дерево зберігається у `ReplicatedStore`, щоб стартувати зі знімка, коли API лежить.
🔹 Foreground-оновлення піднімають `FetchFailure`; `ensure_loaded` відкочується на збережений знімок.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio                                                      # 🔐 Серіалізація оновлень
import logging                                                      # 🧾 Логи життєвого циклу знімка
from typing import Any, List, Mapping, Optional                     # 📐 Типізація

# 🧩 Внутрішні модулі проєкту
from storefront.domain.catalog import (
    BreadcrumbBuilder,
    BreadcrumbItem,
    ICatalogProvider,
    MetadataIndex,
    parse_catalog_tree,
)
from storefront.errors.custom_errors import AppError, StorageError
from storefront.shared.storage.replicated_store import ReplicatedStore
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.catalog.metadata")

DEFAULT_SNAPSHOT_KEY = "catalog_tree"

_CODE_KEYS = ("code", "nombre")


def _raw_code(raw: Mapping[str, Any]) -> str:
    for key in _CODE_KEYS:
        if raw.get(key):
            return str(raw[key]).strip().upper()
    return ""


class CatalogMetadataService:
    """🗂️ Тримає актуальний знімок індексу та сире дерево, з якого його побудовано."""

    def __init__(
        self,
        provider: ICatalogProvider,
        *,
        store: Optional[ReplicatedStore] = None,
        snapshot_key: str = DEFAULT_SNAPSHOT_KEY,
        base_path: str = "/products",
    ) -> None:
        self._provider = provider                                   # 🌐 Джерело дерева
        self._store = store                                         # 🗄️ Опційна персистенція
        self._snapshot_key = snapshot_key
        self._base_path = base_path
        self._index = MetadataIndex.empty()                         # 🗂️ Поточний знімок
        self._raw_tree: List[Mapping[str, Any]] = []                # 🌳 Payload поточного знімка
        self._loaded = False
        self._last_error: Optional[AppError] = None
        self._lock = asyncio.Lock()                                 # 🔐 Одне оновлення за раз

    # ================================
    # 📊 СТАН
    # ================================
    @property
    def index(self) -> MetadataIndex:
        return self._index

    @property
    def is_ready(self) -> bool:
        return self._loaded and len(self._index) > 0

    @property
    def last_error(self) -> Optional[AppError]:
        return self._last_error

    # ================================
    # 🔄 ОНОВЛЕННЯ
    # ================================
    async def refresh(self) -> MetadataIndex:
        """🔄 Повне дерево з API → новий знімок. Помилки піднімаються викликачу."""
        async with self._lock:
            try:
                payload = await self._provider.get_complete_categories()
                self._swap(list(payload))
            except AppError as exc:
                self._last_error = exc
                logger.warning("⚠️ catalog.refresh_failed", extra=exc.to_log_extra())
                raise
            await self._persist()
            return self._index

    async def refresh_category(self, code: str) -> MetadataIndex:
        """
        🔄 Ледаче оновлення однієї категорії.

        Новий знімок = попередні корені, де категорія `code` замінена (або додана).
        """
        async with self._lock:
            try:
                subtree = await self._provider.get_category_tree(code)
            except AppError as exc:
                self._last_error = exc
                raise
            wanted = code.strip().upper()
            merged = [raw for raw in self._raw_tree if _raw_code(raw) != wanted]
            merged.append(subtree)
            self._swap(merged)
            await self._persist()
            return self._index

    async def warm_from_store(self) -> bool:
        """♨️ Відновлює останній збережений знімок; False, якщо його немає."""
        if self._store is None:
            return False
        payload = await self._store.get(self._snapshot_key)
        if not isinstance(payload, list):
            return False
        async with self._lock:
            self._swap(payload)
        logger.info("♨️ catalog.warmed_from_store", extra={"nodes": len(self._index)})
        return True

    async def ensure_loaded(self) -> MetadataIndex:
        """
        ✅ Гарантує наявність знімка.

        Спершу API; якщо воно відмовило, береться збережений знімок. Помилка
        піднімається лише тоді, коли знімка немає взагалі.
        """
        if self._loaded:
            return self._index
        try:
            return await self.refresh()
        except AppError:
            if await self.warm_from_store():
                return self._index
            raise

    def clear(self) -> None:
        """🧼 Скидає знімок до порожнього."""
        self._index = MetadataIndex.empty()
        self._raw_tree = []
        self._loaded = False

    # ================================
    # 📖 ДЕЛЕГОВАНІ ЧИТАННЯ
    # ================================
    def get_display_name(self, key: Optional[str]) -> str:
        return self._index.get_display_name(key)

    def get_slug(self, key: Optional[str]) -> str:
        return self._index.get_slug(key)

    def build_breadcrumbs(
        self,
        product_id: str,
        category_code: Optional[str] = None,
        legacy_subcategory_name: Optional[str] = None,
        menu_id: Optional[str] = None,
        submenu_id: Optional[str] = None,
    ) -> List[BreadcrumbItem]:
        return BreadcrumbBuilder(self._index, base_path=self._base_path).build(
            product_id,
            category_code=category_code,
            legacy_subcategory_name=legacy_subcategory_name,
            menu_id=menu_id,
            submenu_id=submenu_id,
        )

    # ================================
    # 🛠️ ДОПОМІЖНІ МЕТОДИ
    # ================================
    def _swap(self, payload: List[Mapping[str, Any]]) -> None:
        """Будує новий знімок повністю і лише потім підміняє посилання."""
        index = MetadataIndex.build(parse_catalog_tree(payload))
        self._index = index
        self._raw_tree = payload
        self._loaded = True
        self._last_error = None

    async def _persist(self) -> None:
        if self._store is None:
            return
        try:
            await self._store.set(self._snapshot_key, self._raw_tree)
        except StorageError as exc:
            logger.warning("⚠️ catalog.snapshot_not_persisted", extra=exc.to_log_extra())


__all__ = ["CatalogMetadataService", "DEFAULT_SNAPSHOT_KEY"]
