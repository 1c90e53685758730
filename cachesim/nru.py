"""Not-recently-used replacement for one cache set."""

from __future__ import annotations

import logging
from typing import MutableSequence

from cachesim.l1cache import Entry, MissHit, OperationResult

logger = logging.getLogger(__name__)


def _log_set(debug: bool, idx: int, ways: list[Entry]) -> None:
    if debug:
        for number, way in enumerate(ways):
            logger.debug(
                "NRU idx %d way #%d: tag %d valid %d rp_value %d dirty %d",
                idx, number, way.tag, way.valid, way.rp_value, way.dirty,
            )


def _find_victim(ways: list[Entry]) -> int:
    """Return the first way whose NRU bit is one.

    Whenever the scan reaches the last way without having stopped on it, every
    NRU bit in the set is set back to one, so a search that found its victim
    early still leaves the other ways marked as not recently used.
    """
    last = len(ways) - 1
    victim: int | None = None
    while victim is None:
        for number, way in enumerate(ways):
            if way.rp_value == 1 and victim is None:
                victim = number
            elif number == last:
                for other in ways:
                    other.rp_value = 1
    return victim


def nru_replacement_policy(
    idx: int,
    tag: int,
    associativity: int,
    loadstore: bool,
    cache_blocks: MutableSequence[Entry],
    result: OperationResult | None = None,
    debug: bool = False,
) -> OperationResult:
    """Access one set under NRU.

    A hit clears the way's NRU bit and its dirty bit. A miss fills the first
    invalid way, or else the first way whose NRU bit is one; the filled way is
    marked dirty and gets an NRU bit of zero. Only a dirty victim updates the
    eviction fields of the result. ``loadstore`` is true for a store.
    """
    if result is None:
        result = OperationResult()
    ways = list(cache_blocks[:associativity])
    if not ways:
        return result

    for way in ways:
        if way.valid and way.tag == tag:
            result.miss_hit = MissHit.HIT_STORE if loadstore else MissHit.HIT_LOAD
            way.rp_value = 0
            way.dirty = False
            result.dirty_eviction = False
            result.evicted_address = 0
            _log_set(debug, idx, ways)
            return result

    result.miss_hit = MissHit.MISS_STORE if loadstore else MissHit.MISS_LOAD

    target = next(
        (number for number, way in enumerate(ways) if not way.valid), None
    )
    if target is None:
        target = _find_victim(ways)

    block = ways[target]
    if block.dirty:
        result.dirty_eviction = True
        result.evicted_address = block.tag

    block.rp_value = 0
    block.tag = tag
    block.valid = True
    block.dirty = True
    _log_set(debug, idx, ways)
    return result