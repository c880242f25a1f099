# 🛍️ storefront/__init__.py
"""
🛍️ Ядро каталогу вітрини: метадані категорій, breadcrumbs та предиктивний префетч.
"""

__version__ = "0.1.0"
