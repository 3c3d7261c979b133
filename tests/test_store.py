"""Tests for the in-memory requirement store."""

import pytest

from conftest import make_requirement
from mydeal.db.store import MarketplaceStore
from mydeal.models.errors import RequirementNotFoundError


def _store_with_specs() -> MarketplaceStore:
    store = MarketplaceStore()
    store.add_request(make_requirement("req-x").model_copy(update={"specs": {"capacity": "1.5 Ton"}}))
    return store


class TestRequestSnapshots:
    def test_editing_snapshot_specs_does_not_touch_store(self) -> None:
        store = _store_with_specs()
        store.snapshot()[0].specs["inverter"] = True
        store.get_request("req-x").specs["capacity"] = "2 Ton"
        assert store.get_request("req-x").specs == {"capacity": "1.5 Ton"}

    def test_caller_dict_is_not_shared_after_insert(self) -> None:
        specs = {"brand": "LG"}
        store = MarketplaceStore()
        store.add_request(make_requirement("req-y").model_copy(update={"specs": specs}))
        specs["brand"] = "Voltas"
        assert store.get_request("req-y").specs == {"brand": "LG"}

    def test_missing_requirement(self) -> None:
        with pytest.raises(RequirementNotFoundError):
            MarketplaceStore().get_request("nope")
