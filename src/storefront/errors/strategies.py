# 📜 storefront/errors/strategies.py
"""
📜 Стратегії конвертації сторонніх винятків у доменні `AppError`.

🔹 `HttpxErrorStrategy` перетворює таймаути, збої зʼєднання та HTTP-статуси на `FetchFailure`.
🔹 `convert_error` проганяє виняток через список стратегій і повертає перший результат.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx                                                        # 🌐 HTTP-клієнт (винятки)

# 🔠 Системні імпорти
import logging                                                      # 🧾 Логування стратегій
from typing import Iterable, Optional, Protocol                     # 📐 Типи

# 🧩 Внутрішні модулі проєкту
from storefront.shared.utils.logger import LOG_NAME
from .custom_errors import AppError, FetchFailure                   # ⚠️ Доменні помилки


# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger(f"{LOG_NAME}.errors.strategies")

ERROR_HTTP_TIMEOUT = "Каталог не відповів вчасно"
ERROR_HTTP_CONNECTION = "Не вдалося підʼєднатися до API каталогу"
ERROR_HTTP_STATUS = "API каталогу повернуло статус {status_code}"
ERROR_HTTP_GENERIC = "Помилка запиту до API каталогу"


# ================================
# 🧠 КОНТРАКТ СТРАТЕГІЙ
# ================================
class IErrorHandlingStrategy(Protocol):
    """🧠 Контракт: `handle` повертає `AppError` або None, якщо виняток чужий."""

    def handle(self, error: Exception) -> Optional[AppError]:
        ...


# ================================
# 🌐 HTTPX-СТРАТЕГІЯ
# ================================
def _request_url(error: Exception) -> str:
    """🔗 URL запиту з httpx-винятку (request може бути не привʼязаний)."""
    try:
        return str(error.request.url)                               # type: ignore[attr-defined]
    except (AttributeError, RuntimeError):
        return "N/A"


class HttpxErrorStrategy:
    """🌐 Перетворює httpx-помилки на `FetchFailure`."""

    def handle(self, error: Exception) -> Optional[AppError]:
        if isinstance(error, httpx.TimeoutException):               # ⏱️ Таймаути зʼєднання/читання
            url = _request_url(error)
            logger.debug("⏱️ httpx timeout", extra={"url": url})
            return FetchFailure(ERROR_HTTP_TIMEOUT, url=url, details=str(error))

        if isinstance(error, httpx.ConnectError):                   # 🌐 Хост недоступний
            url = _request_url(error)
            logger.debug("🌐 httpx connect error", extra={"url": url})
            return FetchFailure(ERROR_HTTP_CONNECTION, url=url, details=str(error))

        if isinstance(error, httpx.HTTPStatusError):                # 🔢 Неочікуваний статус
            url = _request_url(error)
            status = error.response.status_code
            logger.debug("🔢 httpx status error", extra={"url": url, "status": status})
            return FetchFailure(
                ERROR_HTTP_STATUS.format(status_code=status),
                url=url,
                status_code=status,
                details=str(error),
            )

        if isinstance(error, httpx.HTTPError):                      # 🧯 Решта транспортних помилок
            url = _request_url(error)
            return FetchFailure(ERROR_HTTP_GENERIC, url=url, details=str(error))

        return None


def convert_error(error: Exception, strategies: Iterable[IErrorHandlingStrategy]) -> Optional[AppError]:
    """🔄 Перший `AppError`, який дала стратегія; сам `AppError` повертається як є."""
    if isinstance(error, AppError):
        return error
    for strategy in strategies:
        converted = strategy.handle(error)
        if converted is not None:
            logger.debug("🔁 Strategy converted error via %r", strategy)
            return converted
    return None


__all__ = ["IErrorHandlingStrategy", "HttpxErrorStrategy", "convert_error"]
