"""Two inclusive cache levels, both managed with LRU."""

from __future__ import annotations

import logging
from typing import MutableSequence

from cachesim.l1cache import Entry, MissHit, OperationResult, lru_replacement_policy
from cachesim.utilities import EntryInfo

logger = logging.getLogger(__name__)


def lru_replacement_policy_l1_l2(
    l1_l2_info: EntryInfo,
    loadstore: bool,
    l1_cache_blocks: MutableSequence[Entry],
    l2_cache_blocks: MutableSequence[Entry],
    l1_result: OperationResult | None = None,
    l2_result: OperationResult | None = None,
    debug: bool = False,
) -> tuple[OperationResult, OperationResult]:
    """Access one L1 set and one L2 set for the same address.

    L1 is write-through: its dirty bits are cleared before every access, so it
    never reports a dirty eviction. L2 is write-back. When the block is already
    in L1 the L2 access is reported as a hit. ``loadstore`` is true for a store.
    Both sets are updated in place and the two results are returned.
    """
    if l1_result is None:
        l1_result = OperationResult()
    if l2_result is None:
        l2_result = OperationResult()

    l1_ways = list(l1_cache_blocks[: l1_l2_info.l1_assoc])
    l1_hit = any(way.valid and way.tag == l1_l2_info.l1_tag for way in l1_ways)
    for way in l1_ways:
        way.dirty = False
    l1_result.dirty_eviction = False

    lru_replacement_policy(
        l1_l2_info.l1_idx,
        l1_l2_info.l1_tag,
        l1_l2_info.l1_assoc,
        loadstore,
        l1_cache_blocks,
        l1_result,
        debug,
    )
    lru_replacement_policy(
        l1_l2_info.l2_idx,
        l1_l2_info.l2_tag,
        l1_l2_info.l2_assoc,
        loadstore,
        l2_cache_blocks,
        l2_result,
        debug,
    )
    if l1_hit:
        l2_result.miss_hit = MissHit.HIT_STORE if loadstore else MissHit.HIT_LOAD

    if debug:
        logger.debug("L1 result %s, L2 result %s", l1_result, l2_result)
    return l1_result, l2_result