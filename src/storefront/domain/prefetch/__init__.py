# 🔮 storefront/domain/prefetch/__init__.py
"""
🔮 Пакет `domain.prefetch`: ключі, стани та записи дедуп-кешу префетчу.
"""

from .status import PrefetchState
from .fingerprint import FINGERPRINT_PREFIX, PrefetchParams, fingerprint
from .entry import PrefetchCacheEntry

__all__ = [
    "PrefetchState",
    "FINGERPRINT_PREFIX",
    "PrefetchParams",
    "fingerprint",
    "PrefetchCacheEntry",
]
