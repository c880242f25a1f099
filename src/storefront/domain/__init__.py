# 🧠 storefront/domain/__init__.py
"""🧠 Доменний шар: каталог та префетч без інфраструктурних залежностей."""
