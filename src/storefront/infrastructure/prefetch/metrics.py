# 📈 storefront/infrastructure/prefetch/metrics.py
"""
📈 Prometheus-метрики підсистеми префетчу.

🔹 `PREFETCH_SCHEDULED` / `PREFETCH_CANCELLED` - рух debounce-таймерів.
🔹 `PREFETCH_DEDUPLICATED` - запити, відсічені дедуп-кешем.
🔹 `PREFETCH_COMPLETED` - завершені спекулятивні запити з міткою `outcome`.
🔹 `PREFETCH_BATCH_SIZE` - скільки ключів потрапило в один груповий виклик.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from prometheus_client import Counter, Histogram                      # 📊 Prometheus-метрики

# ================================
# 📊 ЛІЧИЛЬНИКИ ТАЙМЕРІВ
# ================================
PREFETCH_SCHEDULED = Counter(
    "storefront_prefetch_scheduled_total",                           # 🏷️ Імʼя метрики
    "Debounced prefetch timers started",                             # 📝 Опис у Prometheus
)

PREFETCH_CANCELLED = Counter(
    "storefront_prefetch_cancelled_total",
    "Pending prefetch timers cancelled before firing",
)

PREFETCH_DEDUPLICATED = Counter(
    "storefront_prefetch_deduplicated_total",
    "Prefetch requests skipped because the key was busy or fresh",
)

# ================================
# ✅ РЕЗУЛЬТАТИ ЗАПИТІВ
# ================================
PREFETCH_COMPLETED = Counter(
    "storefront_prefetch_completed_total",
    "Speculative fetches finished, by outcome",
    ["outcome"],                                                     # 🏷️ done / failed
)

PREFETCH_BATCH_SIZE = Histogram(
    "storefront_prefetch_batch_size",
    "Number of fingerprints admitted into one grouped prefetch call",
    buckets=(1, 2, 4, 8, 16, 32),
)


__all__ = [
    "PREFETCH_SCHEDULED",
    "PREFETCH_CANCELLED",
    "PREFETCH_DEDUPLICATED",
    "PREFETCH_COMPLETED",
    "PREFETCH_BATCH_SIZE",
]
