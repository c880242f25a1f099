# tests/conftest.py
import sys
from pathlib import Path

import pytest

# Додаємо src в sys.path, щоб працював імпорт "storefront.…"
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from storefront.domain.catalog import MetadataIndex, parse_catalog_tree  # noqa: E402


class FakeClock:
    """Керований монотонний годинник для TTL-перевірок."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


CATALOG_PAYLOAD = [
    {
        "id": "C2",
        "code": "TV",
        "displayName": "Televisores",
        "order": 2,
        "children": [
            {"id": "M20", "code": "OLED", "displayName": "OLED", "order": 1},
        ],
    },
    {
        "id": "C1",
        "code": "IM",
        "displayName": "Dispositivos móviles",
        "active": True,
        "order": 1,
        "children": [
            {
                "id": "M1",
                "code": "SMARTPHONES",
                "displayName": "Smartphones Galaxy",
                "order": 1,
                "children": [
                    {"id": "S1", "code": "FOLD", "displayName": "Galaxy Z Fold", "order": 1},
                    {"id": "S2", "code": "FLIP", "displayName": "Galaxy Z Flip", "order": 2},
                ],
            },
            {"id": "M2", "code": "TABLETS", "displayName": "Tablets", "order": 2},
        ],
    },
]


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def catalog_payload():
    import copy

    return copy.deepcopy(CATALOG_PAYLOAD)


@pytest.fixture
def catalog_index(catalog_payload) -> MetadataIndex:
    return MetadataIndex.build(parse_catalog_tree(catalog_payload))
