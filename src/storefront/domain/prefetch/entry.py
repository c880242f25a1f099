# 🧾 storefront/domain/prefetch/entry.py
"""🧾 Запис дедуп-кешу префетчу: стан, таймер debounce, термін свіжості."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional

from .status import PrefetchState


@dataclass(slots=True)
class PrefetchCacheEntry:
    """Мутабельний запис; змінює його лише координатор."""

    key: str
    state: PrefetchState = PrefetchState.IDLE
    timer_handle: Optional[asyncio.TimerHandle] = None
    expires_at: Optional[float] = None
    attempts: int = 0
    last_error: Optional[str] = None
    generation: int = 0                                             # 🔢 Росте на кожен старт запиту

    def is_fresh(self, now: float) -> bool:
        """DONE і ще не протерміновано."""
        return self.state is PrefetchState.DONE and self.expires_at is not None and now <= self.expires_at

    def clear_timer(self) -> bool:
        """Скасовує відкладений таймер; True, якщо він був."""
        if self.timer_handle is None:
            return False
        self.timer_handle.cancel()
        self.timer_handle = None
        return True
