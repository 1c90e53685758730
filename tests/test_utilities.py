import pytest

from cachesim.l1cache import (
    ADDRESS_SIZE,
    CacheParamError,
    CacheParams,
    Entry,
    MissHit,
    OperationResult,
    address_tag_idx_get,
    field_size_get,
)
from cachesim.utilities import (
    FACT_ASOC_L2,
    FACT_C_SIZE_L2,
    VC_SIZE,
    OptimizationType,
    Parameters,
    get_entry_info,
    get_sizes,
    print_address,
    print_entry,
    print_entry_info,
    print_params,
    print_result,
    print_set,
    print_sizes,
)

DIVISION = "-" * 72
GEOMETRIES = [(256, 8, 1), (512, 16, 2), (1024, 32, 4), (2048, 64, 8), (32, 64, 4)]


@pytest.mark.parametrize("size,block,assoc", GEOMETRIES)
def test_get_sizes_covers_the_address(size, block, assoc):
    sizes = get_sizes(Parameters(size=size, block_size=block, associativity=assoc))
    assert sizes.l1_tag_bits + sizes.l1_index_bits + sizes.l1_offset_bits == ADDRESS_SIZE
    assert sizes.l2_tag_bits + sizes.l2_index_bits + sizes.l2_offset_bits == ADDRESS_SIZE
    assert 1 << sizes.l1_offset_bits == block
    assert sizes.l2_offset_bits == sizes.l1_offset_bits
    assert (1 << sizes.l1_index_bits) * assoc * block == size * 1024
    assert sizes.l1_assoc == assoc
    assert sizes.l2_assoc == FACT_ASOC_L2 * assoc
    assert (1 << sizes.l2_index_bits) * sizes.l2_assoc * block == (
        FACT_C_SIZE_L2 * size * 1024
    )
    assert sizes.vc_assoc == VC_SIZE


@pytest.mark.parametrize(
    "params",
    [
        Parameters(size=0, block_size=32, associativity=4),
        Parameters(size=16, block_size=0, associativity=4),
        Parameters(size=16, block_size=32, associativity=0),
        Parameters(size=1, block_size=1024, associativity=8),
    ],
)
def test_get_sizes_rejects_bad_geometry(params):
    with pytest.raises(CacheParamError):
        get_sizes(params)


@pytest.mark.parametrize("size,block,assoc", GEOMETRIES)
@pytest.mark.parametrize("address", [0, 0xFFFFFFFF, 0x12345678, 0x1_2345_6789, 0xABCDE0])
def test_entry_info_round_trip(size, block, assoc, address):
    sizes = get_sizes(Parameters(size=size, block_size=block, associativity=assoc))
    info = get_entry_info(address, sizes)
    assert info.original_address == address & 0xFFFFFFFF
    l1 = (
        (info.l1_tag << (sizes.l1_index_bits + sizes.l1_offset_bits))
        | (info.l1_idx << sizes.l1_offset_bits)
        | info.l1_offset
    )
    l2 = (
        (info.l2_tag << (sizes.l2_index_bits + sizes.l2_offset_bits))
        | (info.l2_idx << sizes.l2_offset_bits)
        | info.l2_offset
    )
    assert l1 == info.original_address
    assert l2 == info.original_address
    assert info.l1_offset == info.l2_offset
    assert info.l1_assoc == assoc
    assert info.l2_assoc == sizes.l2_assoc
    assert info.vc_assoc == VC_SIZE


@pytest.mark.parametrize("size,block,assoc", GEOMETRIES)
def test_entry_info_agrees_with_l1_field_split(size, block, assoc):
    sizes = get_sizes(Parameters(size=size, block_size=block, associativity=assoc))
    field_size = field_size_get(CacheParams(size, assoc, block))
    for address in (0x0, 0x7FFF1234, 0xCAFEBABE, 0x00400F00):
        info = get_entry_info(address, sizes)
        assert (info.l1_idx, info.l1_tag) == address_tag_idx_get(address, field_size)


def test_print_params_multilevel(capsys):
    print_params(Parameters(size=32, block_size=16, associativity=4, opt=OptimizationType.L2))
    out = capsys.readouterr().out
    assert "Multilevel cache" in out
    assert "L1 Cache Size (kilobytes): \t\t\t\t 32\n" in out
    assert f"L2 Cache Size (kilobytes): \t\t\t\t {FACT_C_SIZE_L2 * 32}\n" in out
    assert out.count(DIVISION) == 3


def test_print_params_victim_cache(capsys):
    print_params(Parameters(size=32, block_size=16, associativity=4, opt=OptimizationType.VC))
    out = capsys.readouterr().out
    assert "Victim Cache" in out
    assert f"VC Cache Associativity: \t\t\t\t {VC_SIZE}\n" in out
    assert "L2 Cache" not in out


def test_print_params_unknown_optimization(capsys):
    print_params(Parameters(size=32, block_size=16, associativity=4, opt=7))
    out = capsys.readouterr().out
    assert "Optimization" not in out
    assert out.count(DIVISION) == 3


def test_print_sizes_filters_by_optimization(capsys):
    sizes = get_sizes(Parameters(size=64, block_size=32, associativity=2))
    print_sizes(sizes, OptimizationType.VC)
    out = capsys.readouterr().out
    assert "VC\n" in out
    assert "L2\n" not in out
    assert f" tag bits: \t\t {sizes.l1_tag_bits}\n" in out

    print_sizes(sizes, OptimizationType.L2)
    out = capsys.readouterr().out
    assert "L2\n" in out
    assert f" asociativity: \t\t {sizes.l2_assoc}\n" in out


def test_print_entry_info(capsys):
    sizes = get_sizes(Parameters(size=64, block_size=32, associativity=2))
    info = get_entry_info(0xDEADBEEF, sizes)
    print_entry_info(info, OptimizationType.L2)
    out = capsys.readouterr().out
    assert "0xDEADBEEF" in out
    assert f" tag: \t\t\t 0x{info.l1_tag:X}\n" in out
    assert f" index: \t\t 0x{info.l2_idx:X}\n" in out


def test_print_entry_format(capsys):
    print_entry(Entry(valid=True, dirty=False, tag=255, rp_value=3), "blk")
    assert capsys.readouterr().out == "blk{v=1, t=0xFF, db=0, rpv=3} "


def test_print_result_format(capsys):
    print_result(OperationResult(MissHit.HIT_STORE, True, 0xAB), "r")
    assert capsys.readouterr().out == "r{mh=3, de=1, ea=AB}\n"


def test_print_address(capsys):
    print_address(0xDEADBEEF, "addr")
    assert capsys.readouterr().out == "addr 0xDEADBEEF\n"


def test_print_set_prints_only_the_ways(capsys):
    ways = [Entry(valid=True, tag=n) for n in range(6)]
    print_set(ways, 4, "L1 |")
    out = capsys.readouterr().out
    assert out.startswith("L1 |{v=")
    assert out.endswith("\n")
    assert out.count("{v=") == 4