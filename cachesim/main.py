"""Trace-driven simulation of a single cache level."""

from __future__ import annotations

import argparse
import math
import random
import sys
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

from cachesim.l1cache import (
    CacheParamError,
    CacheParams,
    Entry,
    MissHit,
    OperationResult,
    ReplacementPolicy,
    address_tag_idx_get,
    field_size_get,
    lru_replacement_policy,
    srrip_replacement_policy,
)
from cachesim.nru import nru_replacement_policy

_POLICY_FUNCTIONS: dict[ReplacementPolicy, Callable[..., OperationResult]] = {
    ReplacementPolicy.LRU: lru_replacement_policy,
    ReplacementPolicy.NRU: nru_replacement_policy,
    ReplacementPolicy.RRIP: srrip_replacement_policy,
}

# The policy is chosen by the first letter of its name.
_POLICY_INITIALS = {
    "L": ReplacementPolicy.LRU,
    "N": ReplacementPolicy.NRU,
    "S": ReplacementPolicy.RRIP,
}


def _ratio(numerator: int, denominator: int) -> float:
    if denominator:
        return numerator / denominator
    if numerator:
        return math.inf
    return math.nan


@dataclass
class Statistics:
    """Counters gathered over a trace."""

    load_hits: int = 0
    load_misses: int = 0
    store_hits: int = 0
    store_misses: int = 0
    dirty_evictions: int = 0
    total_accesses: int = 0

    @property
    def misses(self) -> int:
        return self.load_misses + self.store_misses

    @property
    def hits(self) -> int:
        return self.load_hits + self.store_hits

    @property
    def miss_rate(self) -> float:
        return _ratio(self.misses, self.total_accesses)

    @property
    def read_miss_rate(self) -> float:
        return _ratio(self.load_misses, self.misses)

    def record(self, result: OperationResult) -> None:
        """Count one access from its result."""
        self.total_accesses += 1
        if result.miss_hit == MissHit.HIT_LOAD:
            self.load_hits += 1
        elif result.miss_hit == MissHit.MISS_LOAD:
            self.load_misses += 1
        elif result.miss_hit == MissHit.HIT_STORE:
            self.store_hits += 1
        elif result.miss_hit == MissHit.MISS_STORE:
            self.store_misses += 1
        if result.dirty_eviction:
            self.dirty_evictions += 1


def print_cache(cache_size: int, assoc: int, block_size: int) -> None:
    """Print the cache configuration."""
    print(f"Cache Size (KB): {cache_size}")
    print(f"Cache Associativity: {assoc}")
    print(f"Cache Block Size (bytes): {block_size}")


def print_usage(stats: Statistics) -> None:
    """Print the statistics of a simulation."""
    print(f"Overall miss rate: {stats.miss_rate:g}")
    print(f"Read miss rate: {stats.read_miss_rate:g}")
    print(f"Dirty evictions: {stats.dirty_evictions}")
    print(f"Load misses: {stats.load_misses}")
    print(f"Store misses: {stats.store_misses}")
    print(f"Total_misses: {stats.misses}")
    print(f"Load hits: {stats.load_hits}")
    print(f"Store hits: {stats.store_hits}")
    print(f"Total hits: {stats.hits}")


def parse_policy(name: str) -> ReplacementPolicy:
    """Map a policy name to a policy; unknown names select RANDOM."""
    return _POLICY_INITIALS.get(name[:1], ReplacementPolicy.RANDOM)


def _parse_line(line: str) -> tuple[bool, int]:
    tokens = line.split()
    if len(tokens) < 4:
        raise ValueError(f"malformed trace line: {line!r}")
    _, inst_type, address, _ic = tokens[:4]
    return int(inst_type) != 0, int(address, 16)


def simulate(
    lines: Iterable[str],
    size: int,
    assoc: int,
    block_size: int,
    policy: ReplacementPolicy,
    rng: random.Random | None = None,
) -> Statistics:
    """Run a trace through a cache and return its statistics.

    Each trace line holds a marker, the access type (0 for a load), the
    address in hexadecimal and an instruction count. A RANDOM policy is
    resolved once to one of the three real policies.
    """
    field_size = field_size_get(CacheParams(size, assoc, block_size))
    sets = (size * 1024) // (block_size * assoc)
    cache = [Entry() for _ in range(sets * assoc)]

    policy = ReplacementPolicy(policy)
    if policy == ReplacementPolicy.RANDOM:
        gen = rng if rng is not None else random
        policy = ReplacementPolicy(gen.randrange(3))
    access = _POLICY_FUNCTIONS[policy]

    stats = Statistics()
    # One result record is shared by the whole run, as in the hardware model.
    result = OperationResult()
    for line in lines:
        if not line.strip():
            continue
        is_store, address = _parse_line(line)
        idx, tag = address_tag_idx_get(address, field_size)
        cache_set = cache[idx * assoc:(idx + 1) * assoc]
        access(idx, tag, assoc, is_store, cache_set, result, False)
        stats.record(result)
    return stats


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cache", description="Simulate a cache over a trace read from stdin."
    )
    parser.add_argument("-t", dest="size", type=int, required=True,
                        help="cache size in kilobytes")
    parser.add_argument("-a", dest="assoc", type=int, required=True,
                        help="associativity")
    parser.add_argument("-l", dest="block_size", type=int, required=True,
                        help="line size in bytes")
    parser.add_argument("-rp", dest="policy", default="RANDOM",
                        help="replacement policy: LRU, NRU, SRRIP or RANDOM")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the simulator on the trace given on standard input."""
    args = _build_parser().parse_args(argv)
    start = time.time()
    try:
        stats = simulate(
            sys.stdin,
            args.size,
            args.assoc,
            args.block_size,
            parse_policy(args.policy),
        )
    except (CacheParamError, ValueError) as error:
        print(f"cache: {error}", file=sys.stderr)
        return 1
    elapsed = int(time.time() - start)
    print(f"Time running: {elapsed} seconds")
    print_cache(args.size, args.assoc, args.block_size)
    print_usage(stats)
    return 0


if __name__ == "__main__":
    sys.exit(main())