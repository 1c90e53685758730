# cachesim

A trace-driven cache simulator. The `cachesim` command runs a memory trace
through one set-associative cache that uses the LRU, NRU or SRRIP
replacement policy. The library also has set-level models for a two-level
(L1/L2) cache, for an L1 cache backed by a victim cache, and for an L1 cache
with one-block-lookahead prefetching.

## Installation

```
pip install .
```

With the test dependencies:

```
pip install .[test]
```

## Command line

`cachesim` reads a trace from standard input. Each non-blank line has at
least four whitespace-separated fields: a marker (ignored), the access type
(`0` for a load, anything else for a store), the address in hexadecimal, and
an instruction count (ignored).

```
# 0 1a2b3c40 7
# 1 1a2b3c80 3
```

Options:

- `-t SIZE`: cache size in kilobytes (required)
- `-a ASSOC`: associativity (required)
- `-l BLOCK_SIZE`: line size in bytes (required)
- `-rp POLICY`: replacement policy, `LRU`, `NRU`, `SRRIP` or `RANDOM`
  (default `RANDOM`). Only the first letter counts: `L`, `N` and `S` select
  LRU, NRU and SRRIP, and anything else selects `RANDOM`. `RANDOM` picks one
  of the three policies once, and that policy is used for the whole trace.

```
cachesim -t 16 -a 4 -l 32 -rp LRU < trace.txt
```

At the end of the trace the command prints the running time in whole
seconds, the cache configuration, and the statistics: overall miss rate,
read miss rate, dirty evictions, load and store misses, total misses, load
and store hits, and total hits. A malformed trace line or an impossible
cache geometry is reported on standard error and the command exits with
status 1.

## Library use

The replacement policies work on one cache set at a time. A set is a list of
`Entry` objects that the policy updates in place, and the outcome of each
access is written to an `OperationResult`, which is also returned. When no
result is passed, a new one is created.

```python
from cachesim.l1cache import Entry, OperationResult, MissHit, lru_replacement_policy

cache_set = [Entry() for _ in range(4)]
result = OperationResult()

lru_replacement_policy(0, 0x12, 4, False, cache_set, result, False)
assert result.miss_hit is MissHit.MISS_LOAD

lru_replacement_policy(0, 0x12, 4, True, cache_set, result, False)
assert result.miss_hit is MissHit.HIT_STORE
```

The `loadstore` argument is true for a store. With `debug` set, the state
of the set is written to the module's logger at debug level.

A negative index or tag, or a non-positive associativity, raises
`CacheParamError` (a `ValueError`); the LRU policy also requires the
associativity to be a power of two.

### Modules

- `cachesim.l1cache`: `Entry`, `OperationResult`, `MissHit`,
  `ReplacementPolicy`, `CacheParams`, `FieldSize` and `CacheParamError`;
  `params_check`, `field_size_get` (tag, index and offset widths of a
  32-bit address), `address_tag_idx_get` (returns `(idx, tag)`), and the
  `lru_replacement_policy` and `srrip_replacement_policy` policies.
- `cachesim.nru`: `nru_replacement_policy`.
- `cachesim.utilities`: `Parameters`, `Sizes`, `LineInfo`, `EntryInfo` and
  `OptimizationType`; `get_sizes` computes the field widths of L1, of an L2
  four times larger with twice the associativity, and the 16-entry victim
  cache; `get_entry_info` splits an address into its L1 and L2 tag, index
  and offset. The `print_params`, `print_sizes`, `print_entry_info`,
  `print_address`, `print_entry`, `print_set` and `print_result` functions
  print these structures to standard output.
- `cachesim.l2cache`: `lru_replacement_policy_l1_l2` accesses an L1 set and
  an L2 set, both under LRU. L1 is write-through (its dirty bits are cleared
  before each access); when the block is already in L1, the L2 access is
  reported as a hit. Returns `(l1_result, l2_result)`.
- `cachesim.victimcache`: `lru_replacement_policy_l1_vc` accesses an LRU L1
  set backed by a fully associative FIFO victim cache. On an L1 miss that
  hits the victim cache the two lines swap; on a miss in both, the line
  evicted from a full L1 is pushed to the front of the victim cache and the
  oldest line drops off the back. Returns `(l1_result, vc_result)`.
- `cachesim.l1obl`: `lru_obl_replacement_policy` accesses a set under LRU
  with tagged one-block-lookahead prefetching: a miss, or a hit on a block
  whose prefetch tag is set, clears that tag and brings the next block into
  a second set as a clean line with its prefetch tag set. Returns
  `(result, result_obl)`.
- `cachesim.debug_utilities`: `get_env_var` (leading integer of an
  environment variable, or 0), `debug_info`, `random_params`,
  `random_access`, `is_in_set` and `print_way_info`.
- `cachesim.main`: `simulate` runs trace lines through a cache and returns
  `Statistics`; `parse_policy`, `print_cache`, `print_usage` and `main`
  (the command).

## Limitations

The command simulates a single cache level only. The two-level, victim
cache and prefetching models are available as library functions working on
individual sets; no command runs a whole trace through them.

## Tests

```
pytest
```