# 🖱️ storefront/infrastructure/prefetch/orchestrator.py
"""
🖱️ HoverOrchestrator - перекладає навігаційні події UI на виклики координатора.

🔹 ENTER → debounce-префетч пошуку товарів, результат кладеться у `ProductResultCache`.
🔹 LEAVE → скасування ще не спрацьованого таймера.
🔹 CLICK → foreground-шлях: кеш або прямий запит, помилки йдуть викликачу без змін.
🔹 `prefetch_many` → один груповий `batch` для списку видимих елементів меню.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio                                                      # 🔀 Паралельні пошуки групи
import logging                                                      # 🧾 Логи подій
from dataclasses import dataclass                                   # 🧱 Подія навігації
from enum import Enum                                               # 🏷️ Тип події
from typing import Any, Iterable, List, Mapping, Optional           # 📐 Типізація

# 🧩 Внутрішні модулі проєкту
from storefront.domain.catalog.interfaces import IProductSearchProvider, ProductFilter
from storefront.domain.prefetch import PrefetchParams
from storefront.infrastructure.catalog.product_cache import ProductResultCache
from storefront.shared.utils.logger import LOG_NAME
from .coordinator import PrefetchCoordinator

logger = logging.getLogger(f"{LOG_NAME}.prefetch.orchestrator")

DEFAULT_DEBOUNCE_MS = 200

SearchResult = List[Mapping[str, Any]]


# ================================
# 🏷️ ПОДІЇ НАВІГАЦІЇ
# ================================
class HoverKind(str, Enum):
    ENTER = "enter"
    LEAVE = "leave"
    CLICK = "click"


@dataclass(frozen=True, slots=True)
class NavigationEvent:
    """Подія з меню: що сталося і з яким елементом."""

    kind: HoverKind
    category_code: Optional[str] = None
    menu_id: Optional[str] = None
    submenu_id: Optional[str] = None

    @property
    def params(self) -> PrefetchParams:
        return PrefetchParams(
            category_code=self.category_code or "",
            menu_id=self.menu_id,
            submenu_id=self.submenu_id,
        )


# ================================
# 🖱️ ОРКЕСТРАТОР
# ================================
class HoverOrchestrator:
    """🖱️ Hover / click / batch поверх `PrefetchCoordinator`."""

    def __init__(
        self,
        coordinator: PrefetchCoordinator,
        search_provider: IProductSearchProvider,
        result_cache: ProductResultCache[SearchResult],
        *,
        debounce_ms: float = DEFAULT_DEBOUNCE_MS,
        page: int = 1,
        limit: int = 50,
    ) -> None:
        self._coordinator = coordinator
        self._search = search_provider
        self._cache = result_cache
        self._debounce_ms = max(0.0, float(debounce_ms))
        self._page = page
        self._limit = limit

    @property
    def coordinator(self) -> PrefetchCoordinator:
        return self._coordinator

    def build_filter(self, params: PrefetchParams) -> ProductFilter:
        return ProductFilter(
            category_code=params.category_code,
            menu_id=params.menu_id,
            submenu_id=params.submenu_id,
            page=self._page,
            limit=self._limit,
        )

    # ================================
    # 🖱️ HOVER
    # ================================
    def on_hover_enter(self, event: NavigationEvent) -> bool:
        """
        ⏳ Планує спекулятивний пошук; True, якщо таймер встановлено.

        Повторний ENTER того ж ключа перезапускає debounce. Ключ зі свіжим
        результатом у `ProductResultCache` (напр. після CLICK) не планується.
        """
        if not event.category_code:
            return False
        params = event.params
        product_filter = self.build_filter(params)
        if self._cache.get(product_filter) is not None:
            logger.debug("⚡ hover.already_cached", extra={"key": params.key})
            return False

        async def _prefetch() -> None:
            await self._search_and_store(product_filter)

        return self._coordinator.schedule_prefetch(params, self._debounce_ms, _prefetch)

    def on_hover_leave(self, event: NavigationEvent) -> bool:
        if not event.category_code:
            return False
        return self._coordinator.cancel(event.params)

    # ================================
    # 👆 CLICK
    # ================================
    async def on_click(self, event: NavigationEvent) -> SearchResult:
        """
        👆 Foreground-запит товарів для обраного елемента.

        Очікуючий таймер знімається (запит піде зараз). Свіжий результат префетчу
        повертається з кешу; інакше виконується прямий пошук.

        Raises:
            FetchFailure: Якщо пошук відмовив. Помилка не ковтається.
        """
        params = event.params
        self._coordinator.cancel(params)
        product_filter = self.build_filter(params)

        cached = self._cache.get(product_filter)
        if cached is not None:
            logger.debug("⚡ click.served_from_cache", extra={"key": params.key})
            return cached

        return await self._search_and_store(product_filter)

    # ================================
    # 📦 BATCH
    # ================================
    def prefetch_many(self, events: Iterable[NavigationEvent]) -> Optional["asyncio.Task[None]"]:
        """📦 Один груповий префетч для всіх елементів з категорією."""
        params_list = [event.params for event in events if event.category_code]
        if not params_list:
            return None

        async def _group(survivors: List[PrefetchParams]) -> None:
            results = await asyncio.gather(
                *(self._search_and_store(self.build_filter(params)) for params in survivors),
                return_exceptions=True,
            )
            failures = [result for result in results if isinstance(result, BaseException)]
            if failures:
                raise failures[0]

        return self._coordinator.batch(params_list, _group)

    def dispatch(self, event: NavigationEvent) -> Any:
        """🔀 Маршрутизує подію; для CLICK повертає корутину."""
        if event.kind is HoverKind.ENTER:
            return self.on_hover_enter(event)
        if event.kind is HoverKind.LEAVE:
            return self.on_hover_leave(event)
        return self.on_click(event)

    async def _search_and_store(self, product_filter: ProductFilter) -> SearchResult:
        result = await self._search.search_products(product_filter)
        self._cache.set(product_filter, result)
        return result


__all__ = ["HoverKind", "NavigationEvent", "HoverOrchestrator", "DEFAULT_DEBOUNCE_MS"]
