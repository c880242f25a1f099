# 🏗️ storefront/infrastructure/__init__.py
"""🏗️ Інфраструктура: HTTP-клієнт каталогу, кеші, координатор префетчу."""
