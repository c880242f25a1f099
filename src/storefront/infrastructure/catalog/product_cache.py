# 💾 storefront/infrastructure/catalog/product_cache.py
"""
💾 In-memory TTL-кеш результатів пошуку товарів.

🔹 Ключ - канонічний рядок фільтра (`products:key:value|...`), порожні значення відкидаються.
🔹 `get()` спершу шукає точний ключ, потім «мʼякий» збіг без `page`/сортування,
   щоб результат префетчу знайшовся для реального запиту.
🔹 Ліміт записів: при переповненні виселяється найстаріший запис.
🔹 `invalidate_pattern`, `cleanup`, `stats`, `clear` для обслуговування.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging                                                      # 🧾 Логи роботи кешу
import time                                                         # ⏱️ Монотонний годинник
from dataclasses import dataclass                                   # 📦 Внутрішні структури
from threading import RLock                                         # 🔒 Потокобезпечний доступ
from typing import Any, Callable, Dict, Generic, Mapping, Optional, TypeVar, Union

# 🧩 Внутрішні модулі проєкту
from storefront.domain.catalog.interfaces import ProductFilter
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.catalog.product_cache")

T = TypeVar("T")

CACHE_KEY_PREFIX = "products:"
_RELAXED_IGNORED = frozenset({"page", "sortBy", "sortOrder"})       # 🧮 Поля, що не впливають на «мʼякий» збіг

FilterLike = Union[ProductFilter, Mapping[str, Any]]


# ================================
# 🔑 КЛЮЧІ
# ================================
def _filter_params(product_filter: FilterLike) -> Dict[str, Any]:
    raw = product_filter.to_query() if isinstance(product_filter, ProductFilter) else dict(product_filter)
    return {key: value for key, value in raw.items() if value is not None and value != ""}


def cache_key(product_filter: FilterLike) -> str:
    """🔑 Канонічний ключ: відсортовані пари `key:value`, незалежно від порядку полів."""
    params = _filter_params(product_filter)
    return CACHE_KEY_PREFIX + "|".join(f"{key}:{params[key]}" for key in sorted(params))


def _relaxed_key(params: Mapping[str, Any]) -> str:
    return "|".join(f"{key}:{params[key]}" for key in sorted(params) if key not in _RELAXED_IGNORED)


# ================================
# 📦 ВНУТРІШНІЙ ЗАПИС
# ================================
@dataclass(slots=True)
class _CacheItem:
    data: Any                                                       # 📄 Відповідь API
    stored_at: float                                                # ⏱️ Момент запису
    expires_at: float                                               # ⏳ Межа свіжості
    relaxed: str                                                    # 🧮 Ключ без page/сортування


# ================================
# 💾 КЕШ РЕЗУЛЬТАТІВ
# ================================
class ProductResultCache(Generic[T]):
    """💾 TTL-кеш відповідей API пошуку товарів."""

    def __init__(
        self,
        *,
        ttl_sec: float = 300.0,
        max_entries: int = 100,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._cache: Dict[str, _CacheItem] = {}                     # 📦 Основне сховище
        self._lock = RLock()                                        # 🔒 Захист від паралельних викликів
        self._ttl = max(0.0, float(ttl_sec))
        self._max_entries = max(1, int(max_entries))
        self._clock = clock
        self._evictions = 0                                         # 🚪 Виселення через ліміт
        logger.debug("⚙️ ProductResultCache init", extra={"ttl_sec": self._ttl, "max_entries": self._max_entries})

    def get(self, product_filter: FilterLike) -> Optional[T]:
        """Точний збіг, інакше перший свіжий запис з тим самим «мʼяким» ключем."""
        key = cache_key(product_filter)
        now = self._clock()
        with self._lock:
            item = self._cache.get(key)
            if item is not None and now <= item.expires_at:
                logger.debug("✅ cache hit: %s", key)
                return item.data                                    # type: ignore[no-any-return]

            relaxed = _relaxed_key(_filter_params(product_filter))
            for candidate in self._cache.values():
                if candidate.relaxed == relaxed and now <= candidate.expires_at:
                    logger.debug("🟡 cache relaxed hit: %s", key)
                    return candidate.data                           # type: ignore[no-any-return]

        logger.debug("🔍 cache miss: %s", key)
        return None

    def set(self, product_filter: FilterLike, data: T, ttl_sec: Optional[float] = None) -> None:
        """Зберігає відповідь; при переповненні виселяє найстаріший запис."""
        key = cache_key(product_filter)
        ttl = self._ttl if ttl_sec is None else max(0.0, float(ttl_sec))
        now = self._clock()
        with self._lock:
            if key not in self._cache and len(self._cache) >= self._max_entries:
                self._evict_oldest_locked()
            self._cache[key] = _CacheItem(
                data=data,
                stored_at=now,
                expires_at=now + ttl,
                relaxed=_relaxed_key(_filter_params(product_filter)),
            )
        logger.debug("💾 set: %s ttl=%s", key, ttl)

    def invalidate(self, product_filter: FilterLike) -> bool:
        """🧹 Видаляє точний ключ; True, якщо запис був."""
        key = cache_key(product_filter)
        with self._lock:
            removed = self._cache.pop(key, None) is not None
        logger.debug("🧹 invalidate %s removed=%s", key, removed)
        return removed

    def invalidate_pattern(self, predicate: Callable[[str], bool]) -> int:
        """🧹 Видаляє всі ключі, для яких `predicate(key)` істинний."""
        with self._lock:
            doomed = [key for key in self._cache if predicate(key)]
            for key in doomed:
                del self._cache[key]
        logger.debug("🧹 invalidate_pattern removed=%d", len(doomed))
        return len(doomed)

    def cleanup(self) -> int:
        """🔪 Прибирає протерміновані записи, повертає кількість."""
        now = self._clock()
        with self._lock:
            doomed = [key for key, item in self._cache.items() if now > item.expires_at]
            for key in doomed:
                del self._cache[key]
        if doomed:
            logger.info("✂️ cleanup removed=%d", len(doomed))
        return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
        logger.info("🧼 Product cache cleared")

    def stats(self) -> Dict[str, int]:
        """📈 Загальна кількість, свіжі, протерміновані, ліміт та виселення."""
        now = self._clock()
        with self._lock:
            total = len(self._cache)
            valid = sum(1 for item in self._cache.values() if now <= item.expires_at)
        return {
            "total_entries": total,
            "valid_entries": valid,
            "expired_entries": total - valid,
            "max_entries": self._max_entries,
            "evictions": self._evictions,
        }

    def _evict_oldest_locked(self) -> None:
        oldest_key = min(self._cache, key=lambda k: self._cache[k].stored_at)
        del self._cache[oldest_key]
        self._evictions += 1
        logger.warning("⚠️ Evicted %s (max_entries=%s)", oldest_key, self._max_entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def __contains__(self, product_filter: object) -> bool:
        if not isinstance(product_filter, (ProductFilter, Mapping)):
            return False
        with self._lock:
            return cache_key(product_filter) in self._cache


__all__ = ["ProductResultCache", "cache_key", "CACHE_KEY_PREFIX"]
