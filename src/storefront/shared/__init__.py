# 🧰 storefront/shared/__init__.py
"""🧰 Спільні утиліти: логування, slug-кодек, сховище, метрики."""
