"""An LRU L1 set backed by a fully associative FIFO victim cache."""

from __future__ import annotations

import logging
from typing import MutableSequence

from cachesim.l1cache import Entry, MissHit, OperationResult, lru_replacement_policy
from cachesim.utilities import EntryInfo

logger = logging.getLogger(__name__)


def lru_replacement_policy_l1_vc(
    l1_vc_info: EntryInfo,
    loadstore: bool,
    l1_cache_blocks: MutableSequence[Entry],
    vc_cache_blocks: MutableSequence[Entry],
    l1_result: OperationResult | None = None,
    vc_result: OperationResult | None = None,
    debug: bool = False,
) -> tuple[OperationResult, OperationResult]:
    """Access an L1 set and its victim cache.

    A hit in L1 leaves the victim cache and its result untouched. On an L1 miss
    that hits the victim cache, the block moves into L1 and the line L1 evicts
    takes its place. On a miss in both, the line evicted from a full L1 is
    pushed onto the front of the victim cache and the oldest line drops off the
    back. Lines are identified by their L1 tag. ``loadstore`` is true for a
    store. Both structures are updated in place and the results returned.
    """
    if l1_result is None:
        l1_result = OperationResult()
    if vc_result is None:
        vc_result = OperationResult()

    tag = l1_vc_info.l1_tag
    l1_ways = list(l1_cache_blocks[: l1_vc_info.l1_assoc])
    vc_ways = list(vc_cache_blocks[: l1_vc_info.vc_assoc])
    l1_full = all(way.valid for way in l1_ways)

    def access_l1() -> None:
        lru_replacement_policy(
            l1_vc_info.l1_idx,
            tag,
            l1_vc_info.l1_assoc,
            loadstore,
            l1_cache_blocks,
            l1_result,
            debug,
        )

    if any(way.valid and way.tag == tag for way in l1_ways):
        access_l1()
        return l1_result, vc_result

    vc_hit = next((way for way in vc_ways if way.valid and way.tag == tag), None)
    access_l1()

    if vc_hit is not None:
        if l1_full:
            vc_hit.tag = l1_result.evicted_address
            vc_hit.dirty = l1_result.dirty_eviction
        else:
            vc_hit.valid = False
            vc_hit.dirty = False
        vc_result.miss_hit = MissHit.HIT_STORE if loadstore else MissHit.HIT_LOAD
        vc_result.dirty_eviction = False
        vc_result.evicted_address = 0
        return l1_result, vc_result

    vc_result.miss_hit = MissHit.MISS_STORE if loadstore else MissHit.MISS_LOAD
    vc_result.dirty_eviction = False
    vc_result.evicted_address = 0
    if l1_full and vc_ways:
        oldest = vc_ways[-1]
        if oldest.valid:
            vc_result.dirty_eviction = bool(oldest.dirty)
            vc_result.evicted_address = oldest.tag
        oldest.valid = True
        oldest.tag = l1_result.evicted_address
        oldest.dirty = l1_result.dirty_eviction
        oldest.rp_value = 0
        vc_cache_blocks[: len(vc_ways)] = [oldest, *vc_ways[:-1]]

    if debug:
        logger.debug("L1 result %s, VC result %s", l1_result, vc_result)
    return l1_result, vc_result