"""In-place heap sort and stable natural merge sort with a comparison function.

Both functions sort a mutable sequence in place, ordering its items by a
three-way ``compare(a, b)`` that returns a negative number, zero or a
positive number.  Without ``compare`` the items' natural ordering is used.
``heapsort`` needs no extra memory but is not stable; ``mergesort`` keeps
equal items in their original order.
"""

from __future__ import annotations

from itertools import zip_longest
from typing import Any, Callable, List, MutableSequence, Optional

Compare = Callable[[Any, Any], int]

# Lists this short are sorted by straight insertion.
_INSERTION_LIMIT = 5


def _natural(a, b) -> int:
    return (a > b) - (a < b)


def _resolve(compare: Optional[Compare]) -> Compare:
    return _natural if compare is None else compare


def heapsort(items: MutableSequence, compare: Optional[Compare] = None) -> None:
    """Sort ``items`` in place with heap sort (not stable)."""
    cmp = _resolve(compare)
    n = len(items)
    if n <= 1:
        return

    # The heap is numbered from 1 to n, as in the classic formulation.
    def at(i: int):
        return items[i - 1]

    def put(i: int, value) -> None:
        items[i - 1] = value

    # Build the heap: every parent is at least as large as its children.
    for start in range(n // 2, 0, -1):
        parent = start
        while (child := parent * 2) <= n:
            if child < n and cmp(at(child), at(child + 1)) < 0:
                child += 1
            if cmp(at(child), at(parent)) <= 0:
                break
            items[parent - 1], items[child - 1] = at(child), at(parent)
            parent = child

    # Move the largest item to its final slot, then restore the heap by
    # sinking a hole to the bottom and sifting the displaced item back up.
    while n > 1:
        displaced = at(n)
        put(n, at(1))
        n -= 1

        parent = 1
        while (child := parent * 2) <= n:
            if child < n and cmp(at(child), at(child + 1)) < 0:
                child += 1
            put(parent, at(child))
            parent = child

        while True:
            child = parent
            parent = child // 2
            if child == 1 or cmp(displaced, at(parent)) < 0:
                put(child, displaced)
                break
            put(child, at(parent))


def _insertion_sort(items: MutableSequence, cmp: Compare) -> None:
    for i in range(1, len(items)):
        j = i
        while j > 0 and cmp(items[j - 1], items[j]) > 0:
            items[j - 1], items[j] = items[j], items[j - 1]
            j -= 1


def _runs(items: MutableSequence, cmp: Compare):
    """Yield maximal ascending runs; strictly descending runs come reversed."""
    source = iter(items)
    run = [next(source)]
    descending: Optional[bool] = None
    for item in source:
        order = cmp(run[-1], item)
        if descending is None:
            descending = order > 0
            run.append(item)
        elif (order > 0) == descending:
            run.append(item)
        else:
            if descending:
                run.reverse()
            yield run
            run = [item]
            descending = None
    if descending:
        run.reverse()
    yield run


def _merge(left: List, right: List, cmp: Compare) -> List:
    merged = []
    i = j = 0
    while i < len(left) and j < len(right):
        if cmp(left[i], right[j]) <= 0:
            merged.append(left[i])
            i += 1
        else:
            merged.append(right[j])
            j += 1
    merged.extend(left[i:])
    merged.extend(right[j:])
    return merged


def mergesort(items: MutableSequence, compare: Optional[Compare] = None) -> None:
    """Sort ``items`` in place with a stable natural merge sort."""
    cmp = _resolve(compare)
    if not items:
        return
    if len(items) <= _INSERTION_LIMIT:
        _insertion_sort(items, cmp)
        return

    runs = list(_runs(items, cmp))
    while len(runs) > 1:
        runs = [
            left if right is None else _merge(left, right, cmp)
            for left, right in zip_longest(runs[0::2], runs[1::2])
        ]
    items[:] = runs[0]