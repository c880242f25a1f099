# ⚙️ storefront/config/__init__.py
"""⚙️ Конфігурація ядра: `ConfigService` та DI-контейнер у `setup`."""

from .config_service import ConfigService

__all__ = ["ConfigService"]
