# 🔮 storefront/infrastructure/prefetch/__init__.py
"""
🔮 Предиктивний префетч.

🔹 `PrefetchCoordinator` - дедуп-кеш, debounce-таймери, груповий batch.
🔹 `HoverOrchestrator` - події hover/click з меню → виклики координатора.
"""

from __future__ import annotations

from .coordinator import DEFAULT_TTL_SEC, PrefetchCoordinator
from .orchestrator import HoverKind, HoverOrchestrator, NavigationEvent

__all__ = [
    "DEFAULT_TTL_SEC",
    "PrefetchCoordinator",
    "HoverKind",
    "HoverOrchestrator",
    "NavigationEvent",
]
