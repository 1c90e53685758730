"""Simulation parameters, address decomposition and text dumps of cache state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Sequence

from cachesim.l1cache import (
    ADDRESS_SIZE,
    KB,
    CacheParamError,
    Entry,
    OperationResult,
)

VC_SIZE = 16
FACT_ASOC_L2 = 2
FACT_C_SIZE_L2 = 4
RAND = -1
_ADDRESS_MASK = (1 << ADDRESS_SIZE) - 1
_DIVISION = "-" * 72


class OptimizationType(IntEnum):
    """Second structure simulated next to L1."""

    L2 = 0
    VC = 1


@dataclass
class Parameters:
    """Simulation parameters: L1 size in kilobytes, line size in bytes,
    associativity and optimization."""

    size: int
    block_size: int
    associativity: int
    opt: int = OptimizationType.L2


@dataclass
class Sizes:
    """Bit field widths for L1 and L2 and the associativity of each structure."""

    l1_tag_bits: int
    l1_offset_bits: int
    l1_index_bits: int
    l2_tag_bits: int
    l2_offset_bits: int
    l2_index_bits: int
    vc_assoc: int
    l1_assoc: int
    l2_assoc: int


@dataclass
class LineInfo:
    """One memory access of a trace."""

    address: int
    loadstore: int
    ic: int


@dataclass
class EntryInfo:
    """An address decomposed into the fields of each cache level."""

    original_address: int
    l1_tag: int
    l1_idx: int
    l1_offset: int
    l1_assoc: int
    l2_tag: int
    l2_idx: int
    l2_offset: int
    l2_assoc: int
    vc_assoc: int


def _floor_log2(value: int) -> int:
    if value <= 0:
        raise CacheParamError(f"cannot size a field for {value} entries")
    return value.bit_length() - 1


def _hex(value: int) -> str:
    return format(int(value) & _ADDRESS_MASK, "X")


def get_sizes(params: Parameters) -> Sizes:
    """Compute the address field widths of L1, L2 and the victim cache."""
    if params.size <= 0 or params.block_size <= 0 or params.associativity <= 0:
        raise CacheParamError(f"invalid cache parameters: {params}")
    l1_offset = _floor_log2(params.block_size)
    l1_index = _floor_log2(
        (params.size * KB) // (params.associativity * params.block_size)
    )
    l2_assoc = FACT_ASOC_L2 * params.associativity
    l2_offset = _floor_log2(params.block_size)
    l2_index = _floor_log2(
        (FACT_C_SIZE_L2 * params.size * KB) // (l2_assoc * params.block_size)
    )
    return Sizes(
        l1_tag_bits=ADDRESS_SIZE - (l1_index + l1_offset),
        l1_offset_bits=l1_offset,
        l1_index_bits=l1_index,
        l2_tag_bits=ADDRESS_SIZE - (l2_index + l2_offset),
        l2_offset_bits=l2_offset,
        l2_index_bits=l2_index,
        vc_assoc=VC_SIZE,
        l1_assoc=params.associativity,
        l2_assoc=l2_assoc,
    )


def _split(address: int, offset_bits: int, index_bits: int, tag_bits: int):
    offset = address & ((1 << offset_bits) - 1)
    address >>= offset_bits
    idx = address & ((1 << index_bits) - 1)
    address >>= index_bits
    tag = address & ((1 << max(tag_bits, 0)) - 1)
    return tag, idx, offset


def get_entry_info(address: int, sizes: Sizes) -> EntryInfo:
    """Decompose a 32-bit address into its L1 and L2 tag, index and offset."""
    original = address & _ADDRESS_MASK
    l1_tag, l1_idx, l1_offset = _split(
        original, sizes.l1_offset_bits, sizes.l1_index_bits, sizes.l1_tag_bits
    )
    l2_tag, l2_idx, l2_offset = _split(
        original, sizes.l2_offset_bits, sizes.l2_index_bits, sizes.l2_tag_bits
    )
    return EntryInfo(
        original_address=original,
        l1_tag=l1_tag,
        l1_idx=l1_idx,
        l1_offset=l1_offset,
        l1_assoc=sizes.l1_assoc,
        l2_tag=l2_tag,
        l2_idx=l2_idx,
        l2_offset=l2_offset,
        l2_assoc=sizes.l2_assoc,
        vc_assoc=sizes.vc_assoc,
    )


def print_params(params: Parameters) -> None:
    """Print the simulation parameters as a table."""
    print(f"{_DIVISION}\nCache parameters:\n{_DIVISION}")
    if params.opt == OptimizationType.L2:
        print(f"L1 Cache Size (kilobytes): \t\t\t\t {params.size}")
        print(f"L1 Cache Block Size (bytes): \t\t\t\t {params.block_size}")
        print(f"L1 Cache Associativity: \t\t\t\t {params.associativity}")
        print(f"L2 Cache Size (kilobytes): \t\t\t\t {FACT_C_SIZE_L2 * params.size}")
        print(f"L2 Cache Block Size (bytes): \t\t\t\t {params.block_size}")
        print(
            f"L2 Cache Associativity: \t\t\t\t {FACT_ASOC_L2 * params.associativity}"
        )
        print("Optimization: \t\t\t\t\t\t Multilevel cache")
    elif params.opt == OptimizationType.VC:
        print(f"L1 Cache Size (kilobytes): \t\t\t\t {params.size}")
        print(f"L1 Cache Block Size (bytes): \t\t\t\t {params.block_size}")
        print(f"L1 Cache Associativity: \t\t\t\t {params.associativity}")
        print(f"VC Cache Associativity: \t\t\t\t {VC_SIZE}")
        print("Optimization: \t\t\t\t\t\t Victim Cache")
    print(_DIVISION)


def print_sizes(sizes: Sizes, opt: int) -> None:
    """Print the field widths of L1 and of the structure selected by opt."""
    print(f"{_DIVISION}\nSizes information:\n{_DIVISION}")
    print("L1")
    print(f" tag bits: \t\t {sizes.l1_tag_bits}")
    print(f" index bits: \t\t {sizes.l1_index_bits}")
    print(f" offset bits: \t\t {sizes.l1_offset_bits}")
    print(f" asociativity: \t\t {sizes.l1_assoc}")
    if opt == OptimizationType.L2:
        print("L2")
        print(f" tag bits: \t\t {sizes.l2_tag_bits}")
        print(f" index bits: \t\t {sizes.l2_index_bits}")
        print(f" offset bits: \t\t {sizes.l2_offset_bits}")
        print(f" asociativity: \t\t {sizes.l2_assoc}")
    elif opt == OptimizationType.VC:
        print("VC")
        print(f" asociativity: \t\t {sizes.vc_assoc}")
    print(_DIVISION)


def print_entry_info(info: EntryInfo, opt: int) -> None:
    """Print the decomposition of an address."""
    print(f"{_DIVISION}\nEntry information:\n{_DIVISION}")
    print(f" Original Address: 0x{_hex(info.original_address)}")
    print("L1")
    print(f" tag: \t\t\t 0x{_hex(info.l1_tag)}")
    print(f" index: \t\t 0x{_hex(info.l1_idx)}")
    print(f" offset: \t\t 0x{_hex(info.l1_offset)}")
    print(f" asociativity: \t\t {info.l1_assoc}")
    if opt == OptimizationType.L2:
        print("L2")
        print(f" tag: \t\t\t 0x{_hex(info.l2_tag)}")
        print(f" index: \t\t 0x{_hex(info.l2_idx)}")
        print(f" offset: \t\t 0x{_hex(info.l2_offset)}")
        print(f" asociativity: \t\t {info.l2_assoc}")
    elif opt == OptimizationType.VC:
        print("VC")
        print(f" asociativity: \t\t {info.vc_assoc}")
    print(_DIVISION)


def print_address(addr: int, msj: str = "") -> None:
    """Print an address in hexadecimal after a message."""
    print(f"{msj} 0x{_hex(addr)}")


def print_entry(block: Entry, msj: str = "") -> None:
    """Print the metadata of one way, without a line break."""
    print(
        f"{msj}{{v={int(block.valid)}, t=0x{_hex(block.tag)}, "
        f"db={int(block.dirty)}, rpv={block.rp_value}}} ",
        end="",
    )


def print_set(cache_set: Sequence[Entry], assoc: int, msj: str = "") -> None:
    """Print every way of a set on one line."""
    print(msj, end="")
    for block in cache_set[:assoc]:
        print_entry(block)
    print()


def print_result(results: OperationResult, msj: str = "") -> None:
    """Print the outcome of one access."""
    print(
        f"{msj}{{mh={int(results.miss_hit)}, de={int(results.dirty_eviction)}, "
        f"ea={_hex(results.evicted_address)}}}"
    )