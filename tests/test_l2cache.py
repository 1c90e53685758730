import pytest

from cachesim.l1cache import CacheParamError, Entry, MissHit
from cachesim.l2cache import lru_replacement_policy_l1_l2
from cachesim.utilities import (
    EntryInfo,
    OptimizationType,
    Parameters,
    get_entry_info,
    get_sizes,
)

A_TAG = 1000
A_IDX = 5


def _sizes(assoc):
    return get_sizes(
        Parameters(size=256, block_size=8, associativity=assoc, opt=OptimizationType.L2)
    )


def _info(sizes, l1_tag, l1_idx=A_IDX):
    address = (l1_tag << (sizes.l1_offset_bits + sizes.l1_index_bits)) | (
        l1_idx << sizes.l1_offset_bits
    )
    return get_entry_info(address, sizes)


def _sets(sizes):
    return (
        [Entry() for _ in range(sizes.l1_assoc)],
        [Entry() for _ in range(sizes.l2_assoc)],
    )


def _others(sizes, count):
    # Tags spaced by two keep distinct L2 tags in the same L2 set.
    return [_info(sizes, A_TAG + 2 * (k + 1)) for k in range(count)]


def _expected(loadstore, hit):
    if hit:
        return MissHit.HIT_STORE if loadstore else MissHit.HIT_LOAD
    return MissHit.MISS_STORE if loadstore else MissHit.MISS_LOAD


@pytest.mark.parametrize("assoc", [1, 2, 4, 8])
@pytest.mark.parametrize("loadstore", [False, True])
def test_l1_hit_l2_hit(assoc, loadstore):
    sizes = _sizes(assoc)
    l1, l2 = _sets(sizes)
    for block in _others(sizes, sizes.l2_assoc):
        lru_replacement_policy_l1_l2(block, loadstore, l1, l2)
    a = _info(sizes, A_TAG)
    l1_result, l2_result = lru_replacement_policy_l1_l2(a, loadstore, l1, l2)
    assert l1_result.miss_hit == _expected(loadstore, False)
    assert l2_result.miss_hit == _expected(loadstore, False)
    l1_result, l2_result = lru_replacement_policy_l1_l2(a, loadstore, l1, l2)
    assert l1_result.miss_hit == _expected(loadstore, True)
    assert l2_result.miss_hit == _expected(loadstore, True)


@pytest.mark.parametrize("assoc", [1, 2, 4, 8])
@pytest.mark.parametrize("loadstore", [False, True])
def test_l1_miss_l2_hit(assoc, loadstore):
    sizes = _sizes(assoc)
    l1, l2 = _sets(sizes)
    a = _info(sizes, A_TAG)
    lru_replacement_policy_l1_l2(a, loadstore, l1, l2)
    for block in _others(sizes, sizes.l1_assoc):
        lru_replacement_policy_l1_l2(block, loadstore, l1, l2)
    assert all(way.tag != a.l1_tag for way in l1)
    l1_result, l2_result = lru_replacement_policy_l1_l2(a, loadstore, l1, l2)
    assert l1_result.miss_hit == _expected(loadstore, False)
    assert l2_result.miss_hit == _expected(loadstore, True)


@pytest.mark.parametrize("assoc", [1, 2, 4, 8])
@pytest.mark.parametrize("loadstore", [False, True])
def test_l1_miss_l2_miss(assoc, loadstore):
    sizes = _sizes(assoc)
    l1, l2 = _sets(sizes)
    a = _info(sizes, A_TAG)
    lru_replacement_policy_l1_l2(a, loadstore, l1, l2)
    for block in _others(sizes, sizes.l2_assoc):
        lru_replacement_policy_l1_l2(block, loadstore, l1, l2)
    l1_result, l2_result = lru_replacement_policy_l1_l2(a, loadstore, l1, l2)
    assert l1_result.miss_hit == _expected(loadstore, False)
    assert l2_result.miss_hit == _expected(loadstore, False)


def test_l1_is_write_through():
    sizes = _sizes(1)
    l1, l2 = _sets(sizes)
    a, b = _others(sizes, 2)
    lru_replacement_policy_l1_l2(a, True, l1, l2)
    l1_result, _ = lru_replacement_policy_l1_l2(b, True, l1, l2)
    assert l1_result.evicted_address == a.l1_tag
    assert l1_result.dirty_eviction is False


def test_l2_is_write_back():
    sizes = _sizes(1)
    l1, l2 = _sets(sizes)
    a, b, c = _others(sizes, 3)
    lru_replacement_policy_l1_l2(a, True, l1, l2)
    lru_replacement_policy_l1_l2(b, True, l1, l2)
    _, l2_result = lru_replacement_policy_l1_l2(c, True, l1, l2)
    assert l2_result.evicted_address == a.l2_tag
    assert l2_result.dirty_eviction is True


def test_given_results_are_filled_in():
    sizes = _sizes(2)
    l1, l2 = _sets(sizes)
    from cachesim.l1cache import OperationResult

    mine_l1, mine_l2 = OperationResult(), OperationResult()
    got_l1, got_l2 = lru_replacement_policy_l1_l2(
        _info(sizes, A_TAG), False, l1, l2, mine_l1, mine_l2
    )
    assert got_l1 is mine_l1 and got_l2 is mine_l2
    assert mine_l1.miss_hit == MissHit.MISS_LOAD


def test_invalid_tag_raises():
    info = EntryInfo(
        original_address=0,
        l1_tag=-1,
        l1_idx=0,
        l1_offset=0,
        l1_assoc=2,
        l2_tag=0,
        l2_idx=0,
        l2_offset=0,
        l2_assoc=4,
        vc_assoc=16,
    )
    with pytest.raises(CacheParamError):
        lru_replacement_policy_l1_l2(
            info, False, [Entry(), Entry()], [Entry() for _ in range(4)]
        )