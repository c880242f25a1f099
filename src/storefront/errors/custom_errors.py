# 🚨 storefront/errors/custom_errors.py
"""
🚨 Ієрархія доменних винятків ядра каталогу.

🔹 `AppError` - база з `message`/`details` для логів.
🔹 `FetchFailure` - відмова зовнішнього API (каталог/пошук товарів) з URL та HTTP-кодом.
🔹 `CatalogPayloadError`, `StorageError` - некоректне дерево каталогу та збій реплік сховища.

Промах індексу (LookupMiss) винятком не є: читання завжди повертає fallback.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging                                                      # 🧾 Трасування створення помилок
from typing import Dict, Optional                                   # 📐 Типізація

# 🧩 Внутрішні модулі проєкту
from storefront.shared.utils.logger import LOG_NAME                 # 🏷️ Префікс логерів


# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger(f"{LOG_NAME}.errors")


# ================================
# ⚠️ КОДИ ПОМИЛОК
# ================================
class ErrorCode:
    """Категорії помилок для `extra`-полів логів."""

    FETCH = "fetch_failure"
    PAYLOAD = "catalog_payload"
    STORAGE = "storage_error"
    UNKNOWN = "unknown_error"


# ================================
# 🧠 БАЗОВІ ВИНЯТКИ
# ================================
class AppError(Exception):
    """🧠 Базовий виняток застосунку."""

    code: str = ErrorCode.UNKNOWN

    def __init__(self, message: str, *, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message                                      # 💬 Короткий опис
        self.details = details                                      # 🔍 Технічні деталі

    def to_log_extra(self) -> Dict[str, object]:
        """📦 Словник для `logger.extra`."""
        extra: Dict[str, object] = {"error_code": self.code}
        if self.details:
            extra["details"] = self.details
        return extra


class UserVisibleError(AppError):
    """👀 Помилка, яку foreground-шар може показати користувачу як є."""


# ================================
# 🌐 ЗОВНІШНІ ЗАПИТИ
# ================================
class FetchFailure(UserVisibleError):
    """🌐 Зовнішній колаборатор (каталог / пошук товарів) відмовив."""

    code = ErrorCode.FETCH

    def __init__(
        self,
        message: str,
        *,
        details: Optional[str] = None,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, details=details)
        self.url = url                                              # 🔗 Адреса запиту
        self.status_code = status_code                              # 🔢 HTTP-код, якщо є
        logger.debug("🌐 FetchFailure created", extra={"url": url, "status_code": status_code})

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        if self.url:
            extra["url"] = self.url
        if self.status_code is not None:
            extra["status_code"] = self.status_code
        return extra


# ================================
# 🧾 ДАНІ ТА СХОВИЩЕ
# ================================
class CatalogPayloadError(AppError):
    """🧾 Сире дерево каталогу не має обовʼязкових полів."""

    code = ErrorCode.PAYLOAD


class StorageError(AppError):
    """💾 Жодна репліка сховища не прийняла операцію."""

    code = ErrorCode.STORAGE


__all__ = [
    "ErrorCode",
    "AppError",
    "UserVisibleError",
    "FetchFailure",
    "CatalogPayloadError",
    "StorageError",
]
