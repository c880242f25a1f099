# 🗄️ storefront/shared/storage/replicated_store.py
"""
🗄️ ReplicatedStore - write-through сховище з кількома репліками та read-repair.

🔹 Запис іде в усі бекенди за порядком; збій одного лише логується.
🔹 Читання опитує бекенди за пріоритетом і доливає значення у ті, де його бракувало.
🔹 `MemoryBackend` для процесу, `JsonFileBackend` для переживання перезапуску (aiofiles).
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import aiofiles                                                     # 💽 Асинхронна робота з файлами

# 🔠 Системні імпорти
import json                                                         # 📄 Серіалізація значень
import logging                                                      # 🧾 Логи реплікації
import os                                                           # 🔁 Атомарна заміна файлу
import re                                                           # 🛡️ Безпечні імена файлів
from pathlib import Path                                            # 📂 Директорія репліки
from typing import Any, Dict, List, Optional, Protocol, Sequence    # 📐 Типізація

# 🧩 Внутрішні модулі проєкту
from storefront.errors.custom_errors import StorageError
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.storage")

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


# ================================
# 🧠 КОНТРАКТ БЕКЕНДУ
# ================================
class IStorageBackend(Protocol):
    """Одна репліка: ключ → JSON-сумісне значення."""

    name: str

    async def get(self, key: str) -> Optional[Any]: ...

    async def set(self, key: str, value: Any) -> None: ...

    async def delete(self, key: str) -> None: ...


# ================================
# 🧠 IN-MEMORY РЕПЛІКА
# ================================
class MemoryBackend:
    """🧠 Словник у памʼяті; живе до кінця процесу."""

    def __init__(self, name: str = "memory") -> None:
        self.name = name
        self._data: Dict[str, Any] = {}

    async def get(self, key: str) -> Optional[Any]:
        return self._data.get(key)

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)


# ================================
# 💽 ФАЙЛОВА РЕПЛІКА
# ================================
class JsonFileBackend:
    """💽 Один JSON-файл на ключ у заданій директорії."""

    def __init__(self, directory: Path | str, name: str = "json_file") -> None:
        self.name = name
        self._dir = Path(directory)

    def _path(self, key: str) -> Path:
        return self._dir / f"{_UNSAFE_CHARS.sub('_', key)}.json"

    async def get(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            return None
        async with aiofiles.open(path, "r", encoding="utf-8") as handle:
            content = await handle.read()
        return json.loads(content)

    async def set(self, key: str, value: Any) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp_path = path.with_suffix(".tmp")
        async with aiofiles.open(tmp_path, "w", encoding="utf-8") as handle:
            await handle.write(json.dumps(value, ensure_ascii=False))
        os.replace(tmp_path, path)                                  # 🔁 Атомарна заміна файлу

    async def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


# ================================
# 🗄️ РЕПЛІКОВАНЕ СХОВИЩЕ
# ================================
class ReplicatedStore:
    """🗄️ Упорядкований список реплік із write-through та read-repair."""

    def __init__(self, backends: Sequence[IStorageBackend]) -> None:
        if not backends:
            raise ValueError("ReplicatedStore needs at least one backend")
        self._backends: List[IStorageBackend] = list(backends)

    @property
    def backends(self) -> List[IStorageBackend]:
        return list(self._backends)

    async def set(self, key: str, value: Any) -> int:
        """
        💾 Пише у всі репліки.

        Returns:
            int: Скільки реплік прийняли запис.

        Raises:
            StorageError: Якщо жодна репліка не прийняла запис.
        """
        written = 0
        for backend in self._backends:
            try:
                await backend.set(key, value)
                written += 1
            except Exception as exc:                                # noqa: BLE001
                logger.warning("⚠️ storage.write_failed", extra={"backend": backend.name, "key": key, "error": repr(exc)})
        if written == 0:
            raise StorageError("Жодна репліка не прийняла запис", details=key)
        logger.debug("💾 storage.written", extra={"key": key, "replicas": written})
        return written

    async def get(self, key: str) -> Optional[Any]:
        """📖 Перше знайдене значення; репліки вище за пріоритетом доливаються."""
        missing: List[IStorageBackend] = []
        for backend in self._backends:
            try:
                value = await backend.get(key)
            except Exception as exc:                                # noqa: BLE001
                logger.warning("⚠️ storage.read_failed", extra={"backend": backend.name, "key": key, "error": repr(exc)})
                missing.append(backend)
                continue
            if value is None:
                missing.append(backend)
                continue
            await self._repair(key, value, missing)
            return value
        logger.debug("⚪ storage.miss", extra={"key": key})
        return None

    async def delete(self, key: str) -> None:
        """🧹 Видаляє ключ з усіх реплік."""
        for backend in self._backends:
            try:
                await backend.delete(key)
            except Exception as exc:                                # noqa: BLE001
                logger.warning("⚠️ storage.delete_failed", extra={"backend": backend.name, "key": key, "error": repr(exc)})

    async def _repair(self, key: str, value: Any, targets: Sequence[IStorageBackend]) -> None:
        for backend in targets:
            try:
                await backend.set(key, value)
                logger.debug("🩹 storage.repaired", extra={"backend": backend.name, "key": key})
            except Exception as exc:                                # noqa: BLE001
                logger.warning("⚠️ storage.repair_failed", extra={"backend": backend.name, "key": key, "error": repr(exc)})


__all__ = ["IStorageBackend", "MemoryBackend", "JsonFileBackend", "ReplicatedStore"]
