"""Single-level cache sets: address decoding and the LRU and SRRIP policies."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import MutableSequence

KB = 1024
ADDRESS_SIZE = 32
_RP_MASK = 0xFF  # replacement values are stored in eight bits

logger = logging.getLogger(__name__)


class ReplacementPolicy(IntEnum):
    """Cache replacement policies known to the simulator."""

    LRU = 0
    NRU = 1
    RRIP = 2
    RANDOM = 3


class MissHit(IntEnum):
    """Outcome of one access to a cache set."""

    MISS_LOAD = 0
    MISS_STORE = 1
    HIT_LOAD = 2
    HIT_STORE = 3


class CacheParamError(ValueError):
    """Raised when an index, tag, associativity or cache geometry is invalid."""


@dataclass
class Entry:
    """Metadata of one cache way."""

    valid: bool = False
    dirty: bool = False
    tag: int = 0
    rp_value: int = 0
    obl_tag: bool = False


@dataclass
class OperationResult:
    """What an access did: hit or miss, and whether a dirty line left the set."""

    miss_hit: MissHit = MissHit.MISS_LOAD
    dirty_eviction: bool = False
    evicted_address: int = 0


@dataclass(frozen=True)
class CacheParams:
    """Cache size in kilobytes, number of ways and line size in bytes."""

    size: int
    associativity: int
    block_size: int


@dataclass(frozen=True)
class FieldSize:
    """Bit widths of the tag, index and offset fields of an address."""

    tag: int
    idx: int
    offset: int


def _floor_log2(value: int) -> int:
    return value.bit_length() - 1


def params_check(idx: int, tag: int, associativity: int) -> None:
    """Raise CacheParamError unless idx and tag are non-negative and the
    associativity is a positive power of two."""
    if idx < 0 or tag < 0 or associativity <= 0:
        raise CacheParamError(
            f"invalid access parameters: idx={idx}, tag={tag}, "
            f"associativity={associativity}"
        )
    if associativity & (associativity - 1):
        raise CacheParamError(
            f"associativity must be a power of two, got {associativity}"
        )


def field_size_get(cache_params: CacheParams) -> FieldSize:
    """Compute the tag, index and offset widths for a cache geometry."""
    size, assoc, block = (
        cache_params.size,
        cache_params.associativity,
        cache_params.block_size,
    )
    if size <= 0 or assoc <= 0 or block <= 0:
        raise CacheParamError(f"invalid cache parameters: {cache_params}")
    sets = (size * KB) // (block * assoc)
    if sets <= 0:
        raise CacheParamError(f"cache too small for its geometry: {cache_params}")
    idx = _floor_log2(sets)
    offset = _floor_log2(block)
    return FieldSize(tag=ADDRESS_SIZE - offset - idx, idx=idx, offset=offset)


def address_tag_idx_get(address: int, field_size: FieldSize) -> tuple[int, int]:
    """Split an address into its (index, tag) pair."""
    index_mask = (1 << field_size.idx) - 1
    tag_mask = (1 << field_size.tag) - 1
    idx = (address >> field_size.offset) & index_mask
    tag = (address >> (field_size.offset + field_size.idx)) & tag_mask
    return idx, tag


def _log_set(debug: bool, name: str, idx: int, ways: list[Entry]) -> None:
    if debug:
        for number, way in enumerate(ways):
            logger.debug(
                "%s idx %d way #%d: tag %d valid %d rp_value %d dirty %d",
                name, idx, number, way.tag, way.valid, way.rp_value, way.dirty,
            )


def srrip_replacement_policy(
    idx: int,
    tag: int,
    associativity: int,
    loadstore: bool,
    cache_blocks: MutableSequence[Entry],
    result: OperationResult | None = None,
    debug: bool = False,
) -> OperationResult:
    """Access one set under static RRIP with hit priority.

    ``loadstore`` is true for a store. The set is updated in place and the
    result (the given one, or a new one) is returned.
    """
    if idx < 0 or tag < 0 or associativity <= 0:
        raise CacheParamError(
            f"invalid access parameters: idx={idx}, tag={tag}, "
            f"associativity={associativity}"
        )
    if result is None:
        result = OperationResult()

    bits = 1 if associativity <= 2 else 2
    distant = (1 << bits) - 1
    long_rrpv = (1 << bits) - 2
    ways = list(cache_blocks[:associativity])

    empty_way: int | None = None
    distant_way: int | None = None
    for number, way in enumerate(ways):
        if way.valid and way.tag == tag:
            way.rp_value = 0
            if loadstore:
                way.dirty = True
            result.dirty_eviction = False
            result.miss_hit = MissHit.HIT_STORE if loadstore else MissHit.HIT_LOAD
            _log_set(debug, "SRRIP", idx, ways)
            return result
        if not way.valid and empty_way is None:
            empty_way = number
        if way.rp_value == distant and distant_way is None:
            distant_way = number

    result.miss_hit = MissHit.MISS_STORE if loadstore else MissHit.MISS_LOAD

    if empty_way is not None:
        block = ways[empty_way]
        block.valid = True
        block.tag = tag
        block.rp_value = long_rrpv
        block.dirty = bool(loadstore)
        result.dirty_eviction = False
        _log_set(debug, "SRRIP", idx, ways)
        return result

    while distant_way is None:
        for number, way in enumerate(ways):
            way.rp_value = (way.rp_value + 1) & _RP_MASK
            if way.rp_value == distant and distant_way is None:
                distant_way = number

    victim = ways[distant_way]
    if victim.dirty:
        # A dirty victim is reported as a write-back but keeps its line.
        result.dirty_eviction = True
    else:
        victim.valid = True
        victim.tag = tag
        victim.rp_value = long_rrpv
        result.dirty_eviction = False
        result.evicted_address = victim.tag
    victim.dirty = bool(loadstore)
    _log_set(debug, "SRRIP", idx, ways)
    return result


def lru_replacement_policy(
    idx: int,
    tag: int,
    associativity: int,
    loadstore: bool,
    cache_blocks: MutableSequence[Entry],
    result: OperationResult | None = None,
    debug: bool = False,
) -> OperationResult:
    """Access one set under LRU.

    The most recently used way carries ``associativity - 1`` and the least
    recently used carries 0. ``loadstore`` is true for a store.
    """
    params_check(idx, tag, associativity)
    if result is None:
        result = OperationResult()

    mru_value = associativity - 1
    lru_value = 0
    ways = list(cache_blocks[:associativity])

    hit_way: Entry | None = None
    free_way: Entry | None = None
    for way in ways:
        if way.valid and way.tag == tag:
            hit_way = way
        if not way.valid:
            free_way = way

    if hit_way is not None:
        result.miss_hit = MissHit.HIT_STORE if loadstore else MissHit.HIT_LOAD
        result.evicted_address = 0
        result.dirty_eviction = False
        hit_value = hit_way.rp_value
        for way in ways:
            if way.rp_value > hit_value and way.rp_value != lru_value:
                way.rp_value -= 1
        hit_way.rp_value = mru_value
        if loadstore:
            hit_way.dirty = True
        _log_set(debug, "LRU", idx, ways)
        return result

    result.miss_hit = MissHit.MISS_STORE if loadstore else MissHit.MISS_LOAD

    if free_way is not None:
        result.dirty_eviction = False
        result.evicted_address = 0
        for way in ways:
            if way.valid and way.rp_value != lru_value:
                way.rp_value -= 1
        target = free_way
    else:
        # The victim is the last way holding the lowest value (normally 0).
        lowest = min(way.rp_value for way in ways)
        target = [way for way in ways if way.rp_value == lowest][-1]
        for way in ways:
            if way.rp_value != lru_value:
                way.rp_value -= 1
        result.evicted_address = target.tag
        result.dirty_eviction = bool(target.dirty)

    target.dirty = bool(loadstore)
    target.rp_value = mru_value
    target.tag = tag
    target.valid = True
    _log_set(debug, "LRU", idx, ways)
    return result