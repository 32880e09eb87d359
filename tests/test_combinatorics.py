import itertools

import numpy as np

from lotto_engine.combinatorics import (
    binomial,
    cartesian_product,
    combination_at,
    combinations,
    combinations_with_replacement,
    factorial,
    permutations,
    permutations_of_size,
    random_sample,
    shuffle,
    unique,
    unique_random_numbers,
)


def test_binomial_known_values():
    assert binomial(6, 3) == 20
    assert binomial(49, 7) == 85900584
    assert binomial(45, 6) == 8145060
    assert binomial(5, 0) == 1
    assert binomial(5, 5) == 1


def test_binomial_out_of_range_is_zero():
    assert binomial(5, 6) == 0
    assert binomial(5, -1) == 0


def test_factorial():
    assert factorial(0) == 1
    assert factorial(5) == 120
    assert factorial(-1) == 0


def test_combinations_count_matches_binomial():
    for n in range(0, 9):
        for k in range(0, n + 1):
            assert len(combinations(list(range(n)), k)) == binomial(n, k)


def test_combinations_edge_cases():
    assert combinations([1, 2, 3], 0) == [[]]
    assert combinations([1, 2, 3], 4) == []


def test_combinations_lexicographic_order():
    assert combinations([1, 2, 3, 4], 2) == [list(c) for c in itertools.combinations([1, 2, 3, 4], 2)]


def test_combination_at_agrees_with_enumeration():
    elements = list(range(1, 10))
    every = combinations(elements, 4)
    for index, combo in enumerate(every):
        assert combination_at(elements, 4, index) == combo
    assert combination_at(elements, 4, len(every)) == []


def test_permutations():
    assert len(permutations([1, 2, 3, 4])) == 24
    assert permutations_of_size([1, 2, 3], 2) == [[1, 2], [1, 3], [2, 1], [2, 3], [3, 1], [3, 2]]
    assert permutations_of_size([1, 2], 3) == []


def test_cartesian_product():
    assert cartesian_product([[1, 2], ["a", "b"]]) == [[1, "a"], [1, "b"], [2, "a"], [2, "b"]]
    assert cartesian_product([]) == [[]]
    assert cartesian_product([[1], []]) == []


def test_combinations_with_replacement():
    result = combinations_with_replacement([1, 2, 3], 2)
    assert result == [list(c) for c in itertools.combinations_with_replacement([1, 2, 3], 2)]


def test_shuffle_is_a_permutation(rng):
    items = list(range(20))
    shuffled = shuffle(items, rng)
    assert sorted(shuffled) == items
    assert items == list(range(20))


def test_random_sample_bounds(rng):
    assert random_sample([1, 2, 3], 4, rng) == []
    sample = random_sample(list(range(10)), 5, rng)
    assert len(set(sample)) == 5


def test_unique_random_numbers(rng):
    numbers = unique_random_numbers(1, 45, 6, rng)
    assert len(numbers) == 6
    assert len(set(numbers)) == 6
    assert all(1 <= n <= 45 for n in numbers)
    assert unique_random_numbers(1, 5, 6, rng) == []


def test_unique_random_numbers_is_reproducible():
    first = unique_random_numbers(1, 49, 7, np.random.default_rng(7))
    second = unique_random_numbers(1, 49, 7, np.random.default_rng(7))
    assert first == second


def test_unique_keeps_first_occurrence():
    assert unique([3, 1, 3, 2, 1]) == [3, 1, 2]
