"""
Shared fixtures.

Small catalogue used across tests:
    {Carer1, Carer2} × {20250725, 20250726} × {0900, 0930}  → 8 slots
"""

import fakeredis
import pytest

from healthcarer.config import CatalogueConfig
from healthcarer.errors import StoreConnectivityError
from healthcarer.services.slots import BookingService, InMemorySlotStore, SlotsRedisStore


@pytest.fixture
def small_catalogue() -> CatalogueConfig:
    return CatalogueConfig(
        carers=("Carer1", "Carer2"),
        dates=("20250725", "20250726"),
        start_hour=9,
        end_hour=9,
        interval_minutes=30,
    )


@pytest.fixture
def store() -> InMemorySlotStore:
    return InMemorySlotStore()


@pytest.fixture
def service(store, small_catalogue) -> BookingService:
    return BookingService(store, small_catalogue, init_workers=4)


@pytest.fixture
def seeded_service(service) -> BookingService:
    service.initialize()
    return service


@pytest.fixture
def redis_store() -> SlotsRedisStore:
    redis = fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)
    return SlotsRedisStore(redis, key_prefix="test")


class FlakyStore(InMemorySlotStore):
    """In-memory store whose writes fail for selected slot keys."""

    def __init__(self, failing_keys=(), fail_cas=False):
        super().__init__()
        self.failing_keys = set(failing_keys)
        self.fail_cas = fail_cas

    def put_if_absent(self, slot):
        if slot.key in self.failing_keys:
            raise StoreConnectivityError("connection reset")
        return super().put_if_absent(slot)

    def compare_and_set(self, carer_id, date_time_slot, expected, new_slot):
        if self.fail_cas:
            raise StoreConnectivityError("connection reset")
        return super().compare_and_set(carer_id, date_time_slot, expected, new_slot)


@pytest.fixture
def flaky_store_cls():
    return FlakyStore
