import pytest

from storefront.config import ConfigService
from storefront.config.setup import Container
from storefront.domain.prefetch import PrefetchParams
from storefront.infrastructure.prefetch import HoverOrchestrator
from storefront.shared.storage import JsonFileBackend


@pytest.mark.asyncio
async def test_container_wires_services_from_config(tmp_path):
    cfg = ConfigService.from_mapping({
        "catalog_api": {"base_url": "http://catalog.test/api", "timeout_sec": "5"},
        "prefetch": {"debounce_ms": 50, "ttl_sec": 60, "limit": 24},
        "product_cache": {"max_entries": 3},
        "storage": {"snapshot_dir": str(tmp_path / "snap"), "snapshot_key": "tree"},
        "metrics": {"enabled": False},
    })

    container = Container(cfg, setup_logging=False)

    assert isinstance(container.hover_orchestrator, HoverOrchestrator)
    assert any(isinstance(b, JsonFileBackend) for b in container.store.backends)
    assert container.result_cache.stats()["max_entries"] == 3
    assert container.hover_orchestrator.build_filter(PrefetchParams("IM")).limit == 24

    await container.store.set("tree", [])
    assert (tmp_path / "snap" / "tree.json").exists()
    await container.aclose()


def test_container_requires_base_url():
    with pytest.raises(ValueError):
        Container(ConfigService.from_mapping({}), setup_logging=False)
