# 🧩 storefront/domain/prefetch/status.py
"""
🧩 status.py - стани автомата префетчу для одного fingerprint.

Переходи:
- IDLE → SCHEDULED → INFLIGHT → DONE (до expires_at) → IDLE
- INFLIGHT → FAILED → IDLE (одразу доступно для повтору, без backoff)
"""

from __future__ import annotations

# 🔠 Стандартні імпорти
import logging                                                        # 🧾 Логування станів
from enum import Enum, unique                                         # 🧱 Enum з гарантією унікальності
from typing import FrozenSet                                          # 🧰 Типи

# 🧩 Внутрішні модулі
from storefront.shared.utils.logger import LOG_NAME                   # 🏷️ Глобальний префікс логера

logger = logging.getLogger(f"{LOG_NAME}.domain.prefetch.status")


@unique
class PrefetchState(str, Enum):
    """Стан запису дедуп-кешу."""
    IDLE = "idle"                # 💤 Нічого не заплановано
    SCHEDULED = "scheduled"      # ⏳ Таймер debounce ще не спрацював
    INFLIGHT = "inflight"        # 🚀 Запит уже йде; скасувати не можна
    DONE = "done"                # ✅ Дані свіжі до expires_at
    FAILED = "failed"            # ❌ Запит впав; можна повторювати

    def __str__(self) -> str:
        return self.value

    @property
    def is_busy(self) -> bool:
        """True для станів, що блокують новий префетч незалежно від часу."""
        return self in _BUSY

    def can_transition_to(self, target: "PrefetchState") -> bool:
        """Чи дозволений перехід `self → target`."""
        allowed = target in _TRANSITIONS[self]
        if not allowed:
            logger.debug("🚧 transition rejected | %s -> %s", self.value, target.value)
        return allowed


_BUSY: FrozenSet[PrefetchState] = frozenset({PrefetchState.SCHEDULED, PrefetchState.INFLIGHT})

_TRANSITIONS = {
    PrefetchState.IDLE: frozenset({PrefetchState.SCHEDULED, PrefetchState.INFLIGHT}),
    PrefetchState.SCHEDULED: frozenset({PrefetchState.SCHEDULED, PrefetchState.INFLIGHT, PrefetchState.IDLE}),
    PrefetchState.INFLIGHT: frozenset({PrefetchState.DONE, PrefetchState.FAILED}),
    PrefetchState.DONE: frozenset({PrefetchState.IDLE, PrefetchState.SCHEDULED, PrefetchState.INFLIGHT}),
    PrefetchState.FAILED: frozenset({PrefetchState.IDLE, PrefetchState.SCHEDULED, PrefetchState.INFLIGHT}),
}


__all__ = ["PrefetchState"]
