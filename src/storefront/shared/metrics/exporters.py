# 📊 storefront/shared/metrics/exporters.py
"""
📊 Запуск HTTP-експортера Prometheus не більше одного разу на процес.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from prometheus_client import start_http_server                     # 📈 HTTP-ендпоінт /metrics

# 🔠 Системні імпорти
import logging
from typing import Optional

# 🧩 Внутрішні модулі проєкту
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.metrics")

_started_port: Optional[int] = None


def maybe_start_prometheus(port: int, addr: str = "0.0.0.0") -> bool:
    """
    📈 Стартує експортер; повторний виклик нічого не робить.

    Returns:
        bool: True, якщо експортер запущено саме цим викликом.
    """
    global _started_port
    if _started_port is not None:
        logger.debug("📈 Prometheus вже працює на порті %s", _started_port)
        return False
    start_http_server(port, addr=addr)
    _started_port = port
    return True


__all__ = ["maybe_start_prometheus"]
