# ⚙️ storefront/config/setup/__init__.py
"""
⚙️ Пакет для збирання всіх компонентів ядра перед запуском.
"""

from .container import Container

__all__ = ["Container"]
