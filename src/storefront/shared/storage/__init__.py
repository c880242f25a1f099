# 🗄️ storefront/shared/storage/__init__.py
"""
🗄️ Сховище знімків каталогу.

🔹 `ReplicatedStore` - write-through на кілька реплік з read-repair.
🔹 `MemoryBackend`, `JsonFileBackend` - готові репліки.
"""

from __future__ import annotations

from .replicated_store import IStorageBackend, JsonFileBackend, MemoryBackend, ReplicatedStore

__all__ = ["IStorageBackend", "JsonFileBackend", "MemoryBackend", "ReplicatedStore"]
