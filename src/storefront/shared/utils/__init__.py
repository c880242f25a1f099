# 🧰 storefront/shared/utils/__init__.py
"""
🧰 Пакет утиліт спільного використання.

🔹 Логування: `init_logging`, `init_logging_from_config`, `get_logger`.
🔹 Slug-кодек: `to_slug`, `slug_to_title`.
"""

from __future__ import annotations

# 🔠 Логування
from .logger import (
    LOG_NAME,
    JsonFormatter,
    LoggingConfig,
    get_logger,
    init_logging,
    init_logging_from_config,
)

# 🔤 Slug-кодек
from .slug import slug_to_title, to_slug

__all__ = [
    # logging
    "LOG_NAME",
    "JsonFormatter",
    "LoggingConfig",
    "get_logger",
    "init_logging",
    "init_logging_from_config",
    # slug
    "to_slug",
    "slug_to_title",
]
