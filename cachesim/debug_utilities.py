"""Helpers for tests and debugging: environment flags, random configurations
and dumps of cache sets."""

from __future__ import annotations

import os
import random
import re
from typing import Sequence

from cachesim.l1cache import Entry
from cachesim.utilities import RAND, LineInfo, OptimizationType, Parameters

CYN = "\x1b[36m"
RESET = "\x1b[0m"
YEL = "\x1b[33m"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def get_env_var(var_name: str) -> int:
    """Return the leading integer of an environment variable, or 0."""
    value = os.environ.get(var_name)
    if value is None:
        return 0
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else 0


def debug_info(enabled: bool, message: str) -> None:
    """Print an information line when enabled."""
    if enabled:
        print(f"{CYN}[INFO]:{RESET} {message}")


def random_params(rng: random.Random | None = None) -> Parameters:
    """Draw a random cache configuration."""
    gen = rng if rng is not None else random
    associativity = 1 << gen.randrange(4)
    block_size = 1 << (3 + gen.randrange(4))
    size = 1 << (8 + gen.randrange(4))
    opt = OptimizationType(gen.randrange(2))
    return Parameters(
        size=size, block_size=block_size, associativity=associativity, opt=opt
    )


def random_access(loadstore: int = RAND, rng: random.Random | None = None) -> LineInfo:
    """Draw a random access; ``loadstore`` is drawn too when it is RAND."""
    gen = rng if rng is not None else random
    address = gen.randrange(4294967295)
    kind = gen.randrange(2) if loadstore == RAND else loadstore
    ic = gen.randrange(10)
    return LineInfo(address=address, loadstore=kind, ic=ic)


def is_in_set(cache_set: Sequence[Entry], assoc: int, tag: int) -> bool:
    """Tell whether any of the first ``assoc`` ways holds ``tag``."""
    return any(block.tag == tag for block in cache_set[:assoc])


def print_way_info(idx: int, associativity: int, cache_blocks: Sequence[Entry]) -> None:
    """Print every way of a set, one per line."""
    for number, block in enumerate(cache_blocks[:associativity]):
        print(
            f"{CYN}INFO: {RESET}Way #{number}: tag: {block.tag}--- "
            f"valid: {int(block.valid)} rp_value: {block.rp_value} --- "
            f"dirty: {int(block.dirty)}"
        )