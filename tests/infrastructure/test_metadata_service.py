"""
🧪 test_metadata_service.py - життєвий цикл знімка каталогу.
"""

import pytest

from storefront.domain.catalog import ICatalogProvider
from storefront.errors import FetchFailure
from storefront.infrastructure.catalog import CatalogMetadataService
from storefront.shared.storage import MemoryBackend, ReplicatedStore


class StubCatalog(ICatalogProvider):
    def __init__(self, tree=None, error=None):
        self.tree = tree or []
        self.error = error
        self.subtrees = {}
        self.calls = 0

    async def get_complete_categories(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.tree

    async def get_category_tree(self, code):
        if self.error is not None:
            raise self.error
        return self.subtrees[code.upper()]


@pytest.mark.asyncio
async def test_refresh_swaps_snapshot_and_persists(catalog_payload):
    store = ReplicatedStore([MemoryBackend()])
    service = CatalogMetadataService(StubCatalog(catalog_payload), store=store)

    assert not service.is_ready
    before = service.index
    index = await service.refresh()

    assert index is service.index
    assert index is not before
    assert service.is_ready
    assert service.get_display_name("IM") == "Dispositivos móviles"
    assert await store.get("catalog_tree") == catalog_payload


@pytest.mark.asyncio
async def test_refresh_failure_propagates_and_keeps_old_snapshot(catalog_payload):
    provider = StubCatalog(catalog_payload)
    service = CatalogMetadataService(provider)
    await service.refresh()
    old = service.index

    provider.error = FetchFailure("down")
    with pytest.raises(FetchFailure):
        await service.refresh()

    assert service.index is old
    assert isinstance(service.last_error, FetchFailure)


@pytest.mark.asyncio
async def test_refresh_category_replaces_one_root(catalog_payload):
    provider = StubCatalog(catalog_payload)
    provider.subtrees["TV"] = {"id": "C2", "code": "TV", "displayName": "Smart TV", "children": []}
    service = CatalogMetadataService(provider)
    await service.refresh()

    await service.refresh_category("tv")

    assert service.get_display_name("C2") == "Smart TV"
    assert service.index.get_node_by_id("M20") is None
    assert service.get_display_name("IM") == "Dispositivos móviles"


@pytest.mark.asyncio
async def test_ensure_loaded_falls_back_to_store(catalog_payload):
    backend = MemoryBackend()
    await backend.set("catalog_tree", catalog_payload)
    service = CatalogMetadataService(StubCatalog(error=FetchFailure("down")), store=ReplicatedStore([backend]))

    index = await service.ensure_loaded()

    assert len(index) == 7
    assert service.get_slug("M1") == "smartphones-galaxy"


@pytest.mark.asyncio
async def test_ensure_loaded_raises_without_any_snapshot():
    service = CatalogMetadataService(StubCatalog(error=FetchFailure("down")), store=ReplicatedStore([MemoryBackend()]))
    with pytest.raises(FetchFailure):
        await service.ensure_loaded()
    assert len(service.index) == 0


@pytest.mark.asyncio
async def test_ensure_loaded_fetches_once(catalog_payload):
    provider = StubCatalog(catalog_payload)
    service = CatalogMetadataService(provider)
    await service.ensure_loaded()
    await service.ensure_loaded()
    assert provider.calls == 1


@pytest.mark.asyncio
async def test_breadcrumbs_use_current_snapshot(catalog_payload):
    service = CatalogMetadataService(StubCatalog(catalog_payload))
    assert [c.label for c in service.build_breadcrumbs("SKU1", "IM", menu_id="M1")] == ["IM", "SKU1"]

    await service.refresh()
    crumbs = service.build_breadcrumbs("SKU1", "IM", menu_id="M1")
    assert [c.label for c in crumbs] == ["Dispositivos móviles", "Smartphones Galaxy", "SKU1"]

    service.clear()
    assert not service.is_ready
