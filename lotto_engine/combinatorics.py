"""Combinatorics kernel: exact counting, exhaustive generation and sampling.

Generators are iterative (explicit index stacks) so large ``n choose k``
enumerations never hit the recursion limit. Invalid sizes produce empty
results or 0, never partial output. All randomness comes from an injected
``numpy.random.Generator``.
"""
import logging
import math
from typing import Iterator, List, Optional, Sequence, TypeVar

import numpy as np

logger = logging.getLogger(__name__)

T = TypeVar("T")


def binomial(n: int, k: int) -> int:
    """C(n, k) as an exact integer; 0 when k < 0 or k > n."""
    if k < 0 or n < 0 or k > n:
        return 0
    if k == 0 or k == n:
        return 1
    return math.comb(n, k)


def factorial(n: int) -> int:
    if n < 0:
        return 0
    return math.factorial(n)


def iter_combinations(elements: Sequence[T], k: int) -> Iterator[List[T]]:
    """Yield every k-subset of ``elements`` in lexicographic index order."""
    n = len(elements)
    if k < 0 or k > n:
        return
    if k == 0:
        yield []
        return

    indices = list(range(k))
    while True:
        yield [elements[i] for i in indices]
        # Rightmost index that can still move forward
        i = k - 1
        while i >= 0 and indices[i] == i + n - k:
            i -= 1
        if i < 0:
            return
        indices[i] += 1
        for j in range(i + 1, k):
            indices[j] = indices[j - 1] + 1


def combinations(elements: Sequence[T], k: int) -> List[List[T]]:
    """All k-subsets; ``[[]]`` for k == 0 and ``[]`` when k > len(elements)."""
    return list(iter_combinations(elements, k))


def combination_at(elements: Sequence[T], k: int, index: int) -> List[T]:
    """Return the ``index``-th k-subset in the order of ``iter_combinations``.

    Uses the combinatorial number system so a single subset of a huge wheel
    can be produced without enumerating the ones before it.
    """
    n = len(elements)
    total = binomial(n, k)
    if total == 0 or index < 0 or index >= total:
        return []

    result = []
    start = 0
    remaining = index
    for slot in range(k):
        left = k - slot - 1
        for candidate in range(start, n):
            # Subsets whose current slot holds ``candidate``
            block = binomial(n - candidate - 1, left)
            if remaining < block:
                result.append(elements[candidate])
                start = candidate + 1
                break
            remaining -= block
    return result


def permutations(elements: Sequence[T]) -> List[List[T]]:
    """All orderings of ``elements`` in lexicographic index order."""
    return permutations_of_size(elements, len(elements))


def permutations_of_size(elements: Sequence[T], r: int) -> List[List[T]]:
    """All ordered selections of ``r`` distinct elements."""
    n = len(elements)
    if r < 0 or r > n:
        return []
    if r == 0:
        return [[]]

    result = []
    used = [False] * n
    stack = [0]
    chosen: List[int] = []
    while stack:
        i = stack[-1]
        if i >= n:
            stack.pop()
            if chosen:
                used[chosen.pop()] = False
            continue
        stack[-1] = i + 1
        if used[i]:
            continue
        used[i] = True
        chosen.append(i)
        if len(chosen) == r:
            result.append([elements[j] for j in chosen])
            used[chosen.pop()] = False
        else:
            stack.append(0)
    return result


def cartesian_product(arrays: Sequence[Sequence[T]]) -> List[List[T]]:
    """One element from each array, rightmost varying fastest."""
    if len(arrays) == 0:
        return [[]]
    if any(len(a) == 0 for a in arrays):
        return []

    result = []
    indices = [0] * len(arrays)
    while True:
        result.append([arrays[pos][i] for pos, i in enumerate(indices)])
        pos = len(arrays) - 1
        while pos >= 0:
            indices[pos] += 1
            if indices[pos] < len(arrays[pos]):
                break
            indices[pos] = 0
            pos -= 1
        if pos < 0:
            return result


def combinations_with_replacement(elements: Sequence[T], k: int) -> List[List[T]]:
    """Non-decreasing k-multisets of ``elements``."""
    n = len(elements)
    if k == 0:
        return [[]]
    if k < 0 or n == 0:
        return []

    result = []
    indices = [0] * k
    while True:
        result.append([elements[i] for i in indices])
        i = k - 1
        while i >= 0 and indices[i] == n - 1:
            i -= 1
        if i < 0:
            return result
        value = indices[i] + 1
        for j in range(i, k):
            indices[j] = value


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Seeded generator for reproducible runs, OS entropy when seed is None."""
    return np.random.default_rng(seed)


def shuffle(items: Sequence[T], rng: np.random.Generator) -> List[T]:
    """Shuffled copy of ``items``."""
    items = list(items)
    return [items[i] for i in rng.permutation(len(items))]


def random_sample(items: Sequence[T], k: int, rng: np.random.Generator) -> List[T]:
    """``k`` items drawn without replacement; ``[]`` if k is out of range."""
    if k < 0 or k > len(items):
        return []
    return shuffle(items, rng)[:k]


def unique_random_numbers(low: int, high: int, count: int,
                          rng: np.random.Generator) -> List[int]:
    """``count`` distinct integers from ``[low, high]``, in draw order."""
    if count < 0 or count > high - low + 1:
        return []
    return [int(n) for n in rng.choice(np.arange(low, high + 1), size=count, replace=False)]


def partition(items: Sequence[T], group_size: int) -> List[List[T]]:
    if group_size <= 0:
        return []
    return [list(items[i:i + group_size]) for i in range(0, len(items), group_size)]


def flatten(groups: Sequence[Sequence[T]]) -> List[T]:
    return [item for group in groups for item in group]


def unique(items: Sequence[T]) -> List[T]:
    """Distinct items, first occurrence order kept."""
    return list(dict.fromkeys(items))


def intersection(a: Sequence[T], b: Sequence[T]) -> List[T]:
    set_b = set(b)
    return unique([x for x in a if x in set_b])


def difference(a: Sequence[T], b: Sequence[T]) -> List[T]:
    set_b = set(b)
    return unique([x for x in a if x not in set_b])


def union(a: Sequence[T], b: Sequence[T]) -> List[T]:
    return unique(list(a) + list(b))


def is_subset(subset: Sequence[T], superset: Sequence[T]) -> bool:
    return set(subset).issubset(superset)
