import random
from functools import cmp_to_key

import pytest

from bsdcompat.sorting import heapsort, mergesort


def by_key(a, b):
    return (a[0] > b[0]) - (a[0] < b[0])


def reverse_cmp(a, b):
    return (a < b) - (a > b)


def test_empty_and_single():
    empty_h, empty_m = [], []
    heapsort(empty_h)
    mergesort(empty_m)
    assert empty_h == []
    assert empty_m == []
    single_h, single_m = [42], [42]
    heapsort(single_h)
    mergesort(single_m)
    assert single_h == [42]
    assert single_m == [42]


@pytest.mark.parametrize("size", [2, 3, 5, 6, 7, 16, 17, 33, 100, 257])
def test_matches_sorted(size):
    rng = random.Random(size)
    data = [rng.randint(-50, 50) for _ in range(size)]
    expected = sorted(data)
    by_heap = list(data)
    heapsort(by_heap)
    by_merge = list(data)
    mergesort(by_merge)
    assert by_heap == expected
    assert by_merge == expected


def test_custom_comparator_descending():
    rng = random.Random(7)
    data = [rng.random() for _ in range(80)]
    expected = sorted(data, reverse=True)
    by_heap = list(data)
    heapsort(by_heap, reverse_cmp)
    by_merge = list(data)
    mergesort(by_merge, reverse_cmp)
    assert by_heap == expected
    assert by_merge == expected


def test_presorted_and_reversed():
    for_heap = list(range(200))
    heapsort(for_heap)
    assert for_heap == list(range(200))
    for_merge = list(range(200))
    mergesort(for_merge)
    assert for_merge == list(range(200))

    desc_heap = list(range(200, 0, -1))
    heapsort(desc_heap)
    assert desc_heap == list(range(1, 201))
    desc_merge = list(range(200, 0, -1))
    mergesort(desc_merge)
    assert desc_merge == list(range(1, 201))


def test_strings():
    words = ["pear", "apple", "fig", "banana", "cherry", "date", "kiwi"]
    expected = sorted(words)
    by_heap = list(words)
    heapsort(by_heap)
    by_merge = list(words)
    mergesort(by_merge)
    assert by_heap == expected
    assert by_merge == expected


def test_duplicates_keep_multiset():
    rng = random.Random(3)
    data = [(rng.randint(0, 4), i) for i in range(60)]
    by_heap = list(data)
    heapsort(by_heap, by_key)
    by_merge = list(data)
    mergesort(by_merge, by_key)
    for result in (by_heap, by_merge):
        assert [k for k, _ in result] == sorted(k for k, _ in data)
        assert sorted(i for _, i in result) == list(range(60))


def test_mergesort_is_stable():
    rng = random.Random(11)
    data = [(rng.randint(0, 5), i) for i in range(300)]
    expected = sorted(data, key=cmp_to_key(by_key))
    mergesort(data, by_key)
    assert data == expected


def test_mergesort_stable_with_long_descending_runs():
    data = [(k, i) for i, k in enumerate([9] * 3 + list(range(20, 0, -1)) + [9] * 3)]
    expected = sorted(data, key=lambda pair: pair[0])
    mergesort(data, by_key)
    assert data == expected


def test_mergesort_small_list_stable():
    data = [(1, "a"), (0, "b"), (1, "c"), (0, "d")]
    expected = sorted(data, key=lambda pair: pair[0])
    mergesort(data, by_key)
    assert data == expected


def test_heapsort_immutable_sequence_rejected():
    with pytest.raises(TypeError):
        heapsort((3, 1, 2, 5, 4, 0, 9, 8))


def test_mergesort_immutable_sequence_rejected():
    with pytest.raises(TypeError):
        mergesort((3, 1, 2, 5, 4, 0, 9, 8))