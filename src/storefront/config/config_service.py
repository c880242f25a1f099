# ⚙️ storefront/config/config_service.py
"""
⚙️ config_service.py - доступ до статичної конфігурації ядра каталогу.

🔹 Клас `ConfigService`:
- Завантажує конфігурацію з .env, config.json та config.yaml.
- Надає єдиний метод .get() з крапковими ключами ("prefetch.debounce_ms").
- Працює як Singleton; `from_mapping()` дає ізольований екземпляр для тестів.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import yaml                                  # 📦 YAML-парсинг
from dotenv import load_dotenv               # 🔐 Завантаження змінних із .env

# 🔠 Системні імпорти
import copy                                  # 🧬 Глибокі копії оверрайдів
import json                                  # 📄 Робота з JSON-файлами
import logging                               # 🧾 Логування
import os                                    # 📁 Доступ до змінних середовища
from pathlib import Path                     # 📁 Шляхи до файлів конфігурації
from typing import Any, Dict, Mapping, Optional

# 🧩 Внутрішні модулі проєкту
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.config")

CONFIG_DIR = Path(__file__).parent                                  # 📂 Поруч лежать config.json / config.yaml

# Змінні середовища → крапкові ключі конфігурації
ENV_KEYS: Dict[str, str] = {
    "STOREFRONT_API_URL": "catalog_api.base_url",
    "STOREFRONT_API_TIMEOUT": "catalog_api.timeout_sec",
    "STOREFRONT_LOG_LEVEL": "logging.level",
}


# ============================
# ⚙️ СЕРВІС ДОСТУПУ ДО КОНФІГІВ
# ============================
class ConfigService:
    """
    ⚙️ Надає доступ до всіх статичних параметрів ядра.
    Конфігурація зчитується лише один раз на процес.
    """

    _instance: Optional["ConfigService"] = None
    _config: Dict[str, Any]

    def __new__(cls) -> "ConfigService":
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._config = {}
            instance._load_all_configs()
            cls._instance = instance
            logger.debug("🔄 Singleton ConfigService створено")
        return cls._instance

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ConfigService":
        """🧪 Ізольований екземпляр поверх готового словника (без файлів і .env)."""
        instance = object.__new__(cls)
        instance._config = copy.deepcopy(dict(data))
        return instance

    # ===============================
    # 📥 ЗАВАНТАЖЕННЯ
    # ===============================
    def _load_all_configs(self) -> None:
        """
        📥 Обʼєднує джерела у порядку пріоритету (пізніше перезаписує раніше):
        config.yaml → config.json → .env
        """
        self._load_file(CONFIG_DIR / "config.yaml", yaml.safe_load, (yaml.YAMLError,))
        self._load_file(CONFIG_DIR / "config.json", json.load, (json.JSONDecodeError,))

        load_dotenv()                                               # 🔐 .env → os.environ
        env_vars = {
            dotted: os.getenv(env_name)
            for env_name, dotted in ENV_KEYS.items()
            if os.getenv(env_name)
        }
        self._deep_update(self._config, self._unflatten_dict(env_vars))
        logger.info("✅ Конфігурацію успішно завантажено.")

    def _load_file(self, path: Path, loader: Any, errors: tuple) -> None:
        """📄 Читає один файл; відсутній чи битий файл лише логуються."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = loader(f) or {}
        except FileNotFoundError:
            logger.debug("ℹ️ %s відсутній, пропускаємо", path.name)
            return
        except errors as e:
            logger.warning("⚠️ Не вдалося завантажити %s: %s", path.name, e)
            return
        if isinstance(data, dict):
            self._deep_update(self._config, data)

    # ===============================
    # 🔑 ДОСТУП
    # ===============================
    def get(self, key: str, default: Any = None) -> Any:
        """
        🔑 Значення за крапковим ключем (наприклад: 'prefetch.ttl_sec').

        Args:
            key (str): Ключ у форматі з крапкою.
            default (Any): Значення, якщо ключ не знайдено.
        """
        value: Any = self._config
        for part in key.split("."):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default
        return value

    def section(self, key: str) -> Dict[str, Any]:
        """📦 Підсловник конфігурації (порожній, якщо розділу немає)."""
        node = self.get(key, {})
        return dict(node) if isinstance(node, dict) else {}

    # ===============================
    # 🔧 ДОПОМІЖНІ МЕТОДИ ЗЛИТТЯ
    # ===============================
    @staticmethod
    def _unflatten_dict(d: Mapping[str, Any]) -> Dict[str, Any]:
        """🔁 'catalog_api.base_url' → {'catalog_api': {'base_url': ...}}"""
        result: Dict[str, Any] = {}
        for key, value in d.items():
            parts = key.split(".")
            d_ref = result
            for part in parts[:-1]:
                d_ref = d_ref.setdefault(part, {})
            d_ref[parts[-1]] = value
        return result

    @classmethod
    def _deep_update(cls, source: Dict[str, Any], overrides: Mapping[str, Any]) -> None:
        """🔁 Рекурсивне злиття словників."""
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(source.get(key), dict):
                cls._deep_update(source[key], value)
            else:
                source[key] = value


__all__ = ["ConfigService", "ENV_KEYS"]
