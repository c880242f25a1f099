# 🌐 storefront/infrastructure/catalog/catalog_client.py
"""
🌐 CatalogApiClient - HTTP-клієнт REST API каталогу та пошуку товарів.

🎯 Призначення:
    • тягне повне дерево категорій або піддерево однієї категорії;
    • виконує пошук товарів за `ProductFilter` (саме цю дію викликає префетч);
    • розгортає обгортку `{"success", "data", "message"}` і перетворює httpx-винятки на `FetchFailure`.

⚙️ Нотатки:
    • клієнт не ковтає помилок: foreground-виклики отримують `FetchFailure` як є;
    • зовнішній `httpx.AsyncClient` можна передати (тести через `httpx.MockTransport`).
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx                                                        # 🌐 Асинхронний HTTP-клієнт

# 🔠 Системні імпорти
import logging                                                      # 🧾 Логи запитів
from typing import Any, Dict, List, Mapping, Optional               # 📐 Типізація
from urllib.parse import quote                                      # 🔗 Код категорії у шляху

# 🧩 Внутрішні модулі проєкту
from storefront.domain.catalog.interfaces import ICatalogProvider, IProductSearchProvider, ProductFilter
from storefront.errors.custom_errors import FetchFailure
from storefront.errors.strategies import HttpxErrorStrategy, convert_error
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.catalog.client")

COMPLETE_CATEGORIES_PATH = "/categories/visible/complete"
CATEGORY_TREE_PATH = "/categories/{code}/complete"
PRODUCT_SEARCH_PATH = "/products/filtered"


class CatalogApiClient(ICatalogProvider, IProductSearchProvider):
    """🌐 Тонка обгортка над REST API з доменними помилками."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout_sec: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not base_url or not isinstance(base_url, str):
            raise ValueError("Config 'catalog_api.base_url' is required and must be str.")
        self._base_url = base_url.rstrip("/")                       # 🌐 Базова адреса API
        self._timeout = float(timeout_sec)                          # ⏱️ Таймаут запиту
        self._client = client                                       # 🔌 Зовнішній або ледачий клієнт
        self._owns_client = client is None                          # 🧹 Закриваємо лише свій клієнт
        self._strategies = [HttpxErrorStrategy()]                   # 🧠 Конвертація httpx → FetchFailure
        logger.debug("⚙️ CatalogApiClient config: url=%s timeout=%s", self._base_url, self._timeout)

    # ================================
    # 🔓 ПУБЛІЧНИЙ ІНТЕРФЕЙС
    # ================================
    async def get_complete_categories(self) -> List[Mapping[str, Any]]:
        """Повне дерево видимих категорій з меню та підменю."""
        data = await self._get_json(COMPLETE_CATEGORIES_PATH)
        if not isinstance(data, list):
            raise FetchFailure("Неочікуваний формат дерева каталогу", details=type(data).__name__)
        logger.info("🌳 catalog.fetched", extra={"categories": len(data)})
        return data

    async def get_category_tree(self, code: str) -> Mapping[str, Any]:
        """Піддерево однієї категорії за її кодом."""
        data = await self._get_json(CATEGORY_TREE_PATH.format(code=quote(code, safe="")))
        if not isinstance(data, Mapping):
            raise FetchFailure("Неочікуваний формат категорії", details=type(data).__name__)
        return data

    async def search_products(self, product_filter: ProductFilter) -> List[Mapping[str, Any]]:
        """Пошук товарів; повертає список коротких описів."""
        data = await self._get_json(PRODUCT_SEARCH_PATH, params=product_filter.to_query())
        if isinstance(data, Mapping):                               # 🧾 Пагінований варіант {"products": [...]}
            data = data.get("products", [])
        if not isinstance(data, list):
            raise FetchFailure("Неочікуваний формат списку товарів", details=type(data).__name__)
        return data

    async def aclose(self) -> None:
        """🧹 Закриває власний HTTP-клієнт."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
            logger.debug("🧹 CatalogApiClient closed")

    # ================================
    # 🛠️ ДОПОМІЖНІ МЕТОДИ
    # ================================
    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET + розгортання обгортки; будь-яка помилка стає `FetchFailure`."""
        url = f"{self._base_url}{path}"
        try:
            response = await self._get_client().get(url, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            converted = convert_error(exc, self._strategies)
            logger.debug("🌐 catalog.request_failed", extra={"url": url, "error": type(exc).__name__})
            raise (converted or FetchFailure("Помилка запиту", url=url, details=str(exc))) from exc
        except ValueError as exc:                                   # 🧾 Битий JSON
            raise FetchFailure("Некоректний JSON у відповіді", url=url, details=str(exc)) from exc

        if isinstance(payload, Mapping) and "success" in payload:
            if not payload.get("success"):
                raise FetchFailure(str(payload.get("message") or "API повернуло success=false"), url=url)
            return payload.get("data")
        return payload


__all__ = ["CatalogApiClient"]
