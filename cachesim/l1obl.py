"""LRU cache set with one-block-lookahead tagged prefetching."""

from __future__ import annotations

import logging
from typing import MutableSequence

from cachesim.l1cache import Entry, MissHit, OperationResult, lru_replacement_policy

logger = logging.getLogger(__name__)

_MISSES = (MissHit.MISS_LOAD, MissHit.MISS_STORE)


def _find(ways: list[Entry], tag: int) -> Entry:
    return next(way for way in ways if way.valid and way.tag == tag)


def _prefetch(
    idx: int,
    tag: int,
    associativity: int,
    cache_block_obl: MutableSequence[Entry],
    result_obl: OperationResult,
    debug: bool,
) -> None:
    ways = list(cache_block_obl[:associativity])
    if any(way.valid and way.tag == tag for way in ways):
        return
    lru_replacement_policy(
        idx + 1, tag, associativity, False, cache_block_obl, result_obl, debug
    )
    block = _find(ways, tag)
    block.obl_tag = True
    block.dirty = False


def lru_obl_replacement_policy(
    idx: int,
    tag: int,
    associativity: int,
    loadstore: bool,
    cache_block: MutableSequence[Entry],
    cache_block_obl: MutableSequence[Entry],
    result: OperationResult | None = None,
    result_obl: OperationResult | None = None,
    debug: bool = False,
) -> tuple[OperationResult, OperationResult]:
    """Access a set under LRU and prefetch the next block with tagged OBL.

    ``cache_block_obl`` is the set that holds the next sequential block, which
    shares the accessed block's tag. A miss, or a hit on a block whose
    prefetch tag is set, clears that tag and brings the next block into
    ``cache_block_obl`` (when it is not there already) as a clean line with
    its prefetch tag set. ``loadstore`` is true for a store.
    """
    if result is None:
        result = OperationResult()
    if result_obl is None:
        result_obl = OperationResult()

    lru_replacement_policy(
        idx, tag, associativity, loadstore, cache_block, result, debug
    )
    block = _find(list(cache_block[:associativity]), tag)
    if result.miss_hit in _MISSES or block.obl_tag:
        block.obl_tag = False
        _prefetch(idx, tag, associativity, cache_block_obl, result_obl, debug)

    if debug:
        logger.debug("OBL result %s, prefetch result %s", result, result_obl)
    return result, result_obl