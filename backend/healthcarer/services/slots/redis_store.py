# backend/healthcarer/services/slots/redis_store.py
"""
Redis storage for slots.

Keys (prefix defaults to "healthcarer"):
    {prefix}:slot:{carer_id}:{date_time_slot}  Hash  : slot record, wire fields
    {prefix}:carer:{carer_id}                  ZSet  : member = date_time_slot, score = 0
    {prefix}:carers                            Set   : every carer_id with slots

All partition members share score 0, so ZRANGEBYLEX gives ordered
prefix reads on the sort key ("YYYYMMDD#HHMM").

Conditional writes run as Lua scripts: existence/state check and the
write happen in one server-side step, which is what keeps two
concurrent bookings of the same slot from both succeeding.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from redis import Redis
from redis.exceptions import RedisError

from ...errors import StoreConnectivityError
from ...schemas.slots import Availability, Slot
from .store import CasResult, PutResult

logger = logging.getLogger(__name__)


# KEYS: slot hash, partition zset, carers set
# ARGV: carer_id, date_time_slot, availability, date, time_slot, booking_person_name|""
PUT_IF_ABSENT_LUA = """
if redis.call('EXISTS', KEYS[1]) == 1 then
    return 0
end
redis.call('HSET', KEYS[1],
    'carer_id', ARGV[1],
    'date_time_slot', ARGV[2],
    'availability', ARGV[3],
    'date', ARGV[4],
    'time_slot', ARGV[5])
if ARGV[6] ~= '' then
    redis.call('HSET', KEYS[1], 'booking_person_name', ARGV[6])
end
redis.call('ZADD', KEYS[2], 0, ARGV[2])
redis.call('SADD', KEYS[3], ARGV[1])
return 1
"""

# KEYS: slot hash
# ARGV: expected availability, new availability, booking_person_name|""
COMPARE_AND_SET_LUA = """
local current = redis.call('HGET', KEYS[1], 'availability')
if current ~= ARGV[1] then
    return 0
end
redis.call('HSET', KEYS[1], 'availability', ARGV[2])
if ARGV[3] == '' then
    redis.call('HDEL', KEYS[1], 'booking_person_name')
else
    redis.call('HSET', KEYS[1], 'booking_person_name', ARGV[3])
end
return 1
"""


@contextmanager
def _store_errors(operation: str):
    try:
        yield
    except RedisError as e:
        logger.warning(f"Redis {operation} failed: {e}")
        raise StoreConnectivityError(f"Slot store {operation} failed: {e}") from e


class SlotsRedisStore:
    """Redis implementation of the slot store."""

    def __init__(self, redis: Redis, key_prefix: str = "healthcarer"):
        self.redis = redis
        self.key_prefix = key_prefix
        self._put_if_absent = redis.register_script(PUT_IF_ABSENT_LUA)
        self._compare_and_set = redis.register_script(COMPARE_AND_SET_LUA)

    def _slot_key(self, carer_id: str, date_time_slot: str) -> str:
        return f"{self.key_prefix}:slot:{carer_id}:{date_time_slot}"

    def _partition_key(self, carer_id: str) -> str:
        return f"{self.key_prefix}:carer:{carer_id}"

    @property
    def _carers_key(self) -> str:
        return f"{self.key_prefix}:carers"

    # ── Write ────────────────────────────────────────────────────────────

    def put_if_absent(self, slot: Slot) -> PutResult:
        with _store_errors("put_if_absent"):
            created = self._put_if_absent(
                keys=[
                    self._slot_key(slot.carer_id, slot.date_time_slot),
                    self._partition_key(slot.carer_id),
                    self._carers_key,
                ],
                args=[
                    slot.carer_id,
                    slot.date_time_slot,
                    slot.availability.value,
                    slot.date,
                    slot.time_slot,
                    slot.booking_person_name or "",
                ],
            )
        return PutResult.CREATED if int(created) else PutResult.ALREADY_EXISTS

    def compare_and_set(
        self,
        carer_id: str,
        date_time_slot: str,
        expected: Availability,
        new_slot: Slot,
    ) -> CasResult:
        if new_slot.key != (carer_id, date_time_slot):
            raise ValueError("slot identity is immutable")

        with _store_errors("compare_and_set"):
            swapped = self._compare_and_set(
                keys=[self._slot_key(carer_id, date_time_slot)],
                args=[
                    expected.value,
                    new_slot.availability.value,
                    new_slot.booking_person_name or "",
                ],
            )
        return CasResult.OK if int(swapped) else CasResult.PRECONDITION_FAILED

    # ── Read ─────────────────────────────────────────────────────────────

    def get(self, carer_id: str, date_time_slot: str) -> Optional[Slot]:
        with _store_errors("get"):
            raw = self.redis.hgetall(self._slot_key(carer_id, date_time_slot))
        return Slot.model_validate(raw) if raw else None

    def get_by_partition(self, carer_id: str) -> list[Slot]:
        return self.get_by_partition_and_prefix(carer_id, "")

    def get_by_partition_and_prefix(self, carer_id: str, prefix: str) -> list[Slot]:
        if prefix:
            # "\xff" sorts after every digit and "#"
            lo, hi = f"[{prefix}", f"[{prefix}\xff"
        else:
            lo, hi = "-", "+"

        with _store_errors("range read"):
            members = self.redis.zrangebylex(self._partition_key(carer_id), lo, hi)
            if not members:
                return []

            pipe = self.redis.pipeline(transaction=False)
            for dts in members:
                pipe.hgetall(self._slot_key(carer_id, dts))
            rows = pipe.execute()

        return [Slot.model_validate(row) for row in rows if row]

    def scan_all(self) -> Iterator[Slot]:
        """
        Walk every partition.

        Unbounded: fine for a catalogue of a few hundred slots, callers
        that need pages should slice the iterator.
        """
        with _store_errors("scan"):
            carers = sorted(self.redis.smembers(self._carers_key))

        for carer_id in carers:
            yield from self.get_by_partition(carer_id)
