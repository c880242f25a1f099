# 📦 storefront/config/setup/container.py
"""
📦 Контейнер залежностей ядра каталогу.

🔹 Збирає сервіси в порядку DI: логування → метрики → клієнт → сховище → знімок → префетч.
🔹 Усі числові параметри беруться з `ConfigService` із запасними значеннями.
🔹 `aclose()` закриває HTTP-клієнт та скасовує таймери префетчу.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging                                                      # 🧾 Логи складання
from pathlib import Path                                            # 📂 Директорія знімків
from typing import Any, Optional                                    # 📐 Типізація

# 🧩 Внутрішні модулі проєкту
from storefront.config.config_service import ConfigService
from storefront.infrastructure.catalog import CatalogApiClient, CatalogMetadataService, ProductResultCache
from storefront.infrastructure.prefetch import HoverOrchestrator, PrefetchCoordinator
from storefront.shared.metrics import maybe_start_prometheus
from storefront.shared.storage import JsonFileBackend, MemoryBackend, ReplicatedStore
from storefront.shared.utils.logger import LOG_NAME, init_logging_from_config

logger = logging.getLogger(f"{LOG_NAME}.container")


# ================================
# 🛠️ ДОПОМІЖНІ ФУНКЦІЇ
# ================================
def _float_or_default(value: Any, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _int_or_default(value: Any, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


# ================================
# 🏛️ КОНТЕЙНЕР ЗАЛЕЖНОСТЕЙ
# ================================
class Container:
    """Координує ініціалізацію інфраструктурних та прикладних сервісів."""

    def __init__(self, config: ConfigService, *, setup_logging: bool = True) -> None:
        self.config = config
        if setup_logging:
            init_logging_from_config(self.config.section("logging"))
        logger.info("🚀 Стартуємо побудову контейнера залежностей")
        self._bootstrap_metrics_if_enabled()
        self._setup_catalog()
        self._setup_prefetch()
        logger.info("✅ Контейнер ініціалізовано успішно")

    # ================================
    # 📈 МЕТРИКИ
    # ================================
    def _bootstrap_metrics_if_enabled(self) -> None:
        if not bool(self.config.get("metrics.enabled", False)):
            logger.debug("📉 Prometheus вимкнено конфігом")
            return
        exporter_name = str(self.config.get("metrics.exporter", "prometheus") or "prometheus").lower()
        if exporter_name != "prometheus":
            logger.debug("📉 Експортер %s не підтримується", exporter_name)
            return
        port = _int_or_default(self.config.get("metrics.prometheus.port"), 9108)
        try:
            if maybe_start_prometheus(port):
                logger.info("📈 Prometheus запущено на порті %s", port)
        except OSError:
            logger.exception("⚠️ Не вдалося стартувати експортер метрик")

    # ================================
    # 🌳 КАТАЛОГ
    # ================================
    def _setup_catalog(self) -> None:
        self.catalog_client = CatalogApiClient(
            base_url=self.config.get("catalog_api.base_url"),
            timeout_sec=_float_or_default(self.config.get("catalog_api.timeout_sec"), 10.0),
        )

        snapshot_dir: Optional[str] = self.config.get("storage.snapshot_dir")
        backends: list = [MemoryBackend()]                          # 🧠 Найшвидша репліка першою
        if snapshot_dir:
            backends.append(JsonFileBackend(Path(snapshot_dir)))   # 💽 Переживає перезапуск
        self.store = ReplicatedStore(backends)

        self.metadata_service = CatalogMetadataService(
            self.catalog_client,
            store=self.store,
            snapshot_key=str(self.config.get("storage.snapshot_key", "catalog_tree")),
        )
        logger.debug("🌳 Каталог зібрано (реплік: %d)", len(backends))

    # ================================
    # 🔮 ПРЕФЕТЧ
    # ================================
    def _setup_prefetch(self) -> None:
        self.result_cache: ProductResultCache = ProductResultCache(
            ttl_sec=_float_or_default(self.config.get("product_cache.ttl_sec"), 300.0),
            max_entries=_int_or_default(self.config.get("product_cache.max_entries"), 100),
        )
        self.prefetch_coordinator = PrefetchCoordinator(
            ttl_sec=_float_or_default(self.config.get("prefetch.ttl_sec"), 300.0),
        )
        self.hover_orchestrator = HoverOrchestrator(
            self.prefetch_coordinator,
            self.catalog_client,
            self.result_cache,
            debounce_ms=_float_or_default(self.config.get("prefetch.debounce_ms"), 200.0),
            page=_int_or_default(self.config.get("prefetch.page"), 1),
            limit=_int_or_default(self.config.get("prefetch.limit"), 50),
        )

    # ================================
    # 🧹 ЗАВЕРШЕННЯ
    # ================================
    async def aclose(self) -> None:
        """🧹 Зупиняє таймери префетчу, чекає живі запити та закриває HTTP-клієнт."""
        self.prefetch_coordinator.clear()
        await self.prefetch_coordinator.drain()
        await self.catalog_client.aclose()
        logger.info("🧹 Контейнер закрито")


__all__ = ["Container"]
