import pytest

from storefront.domain.prefetch import PrefetchCacheEntry, PrefetchParams, PrefetchState, fingerprint


def test_fingerprint_shape():
    params = PrefetchParams("IM", "M1", None)
    assert fingerprint(params) == "prefetch:category=im|menu=m1|submenu="
    assert params.key == fingerprint(params)


@pytest.mark.parametrize("left,right", [
    (PrefetchParams("IM"), PrefetchParams(" im ")),
    (PrefetchParams("IM,TV"), PrefetchParams("tv, im")),
    (PrefetchParams("IM,IM,TV"), PrefetchParams("TV,IM")),
    (PrefetchParams("IM", "", None), PrefetchParams("IM", None, "")),
])
def test_fingerprint_normalizes_equivalent_params(left, right):
    assert fingerprint(left) == fingerprint(right)


def test_fingerprint_distinguishes_levels():
    assert fingerprint(PrefetchParams("IM", "M1")) != fingerprint(PrefetchParams("IM", None, "M1"))


def test_from_mapping_accepts_aliases():
    params = PrefetchParams.from_mapping({"categoria": "IM", "menuUuid": "M1", "submenu_id": "S1"})
    assert params == PrefetchParams("IM", "M1", "S1")
    assert PrefetchParams.from_mapping({}).category_code == ""


def test_state_transitions():
    assert PrefetchState.SCHEDULED.is_busy
    assert not PrefetchState.DONE.is_busy
    assert PrefetchState.INFLIGHT.can_transition_to(PrefetchState.DONE)
    assert not PrefetchState.INFLIGHT.can_transition_to(PrefetchState.IDLE)
    assert str(PrefetchState.FAILED) == "failed"


def test_entry_freshness():
    entry = PrefetchCacheEntry(key="k", state=PrefetchState.DONE, expires_at=10.0)
    assert entry.is_fresh(10.0)
    assert not entry.is_fresh(10.5)
    assert entry.clear_timer() is False
