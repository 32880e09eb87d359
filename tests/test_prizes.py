import math

import pytest

from lotto_engine.prizes import (
    Symmetry,
    category_probabilities,
    equivalent_patterns,
    estimated_tickets_sold,
    find_prize,
    find_prize_row,
    is_symmetric_match,
    is_valid_matches,
    normalize_matches,
    prize_category,
    prize_for_matches,
    prize_lookup,
    prizes_for_matches,
    resolve_prize_value,
    resolve_table,
    row_probability,
    symmetric_label,
    symmetry_of,
)
from lotto_engine.probability import probability_of_match
from lotto_engine.types import JACKPOT_NOTE, Fixed, Jackpot, PrizeRow, Secondary


def test_symmetry_classes(lottery_4_20, lottery_12_24, lottery_6_45, lottery_5_36_1):
    assert symmetry_of(lottery_4_20) is Symmetry.SWAP
    assert symmetry_of(lottery_12_24) is Symmetry.COMPLEMENT
    assert symmetry_of(lottery_6_45) is Symmetry.NONE
    assert symmetry_of(lottery_5_36_1) is Symmetry.NONE


def test_swap_lookup_is_order_independent(lottery_4_20):
    table = lottery_4_20.get_prize_table("fixed")
    assert find_prize(table, [3, 4], lottery_4_20) == find_prize(table, [4, 3], lottery_4_20)
    assert find_prize(table, [4, 3], lottery_4_20) == Fixed(100_000)
    assert normalize_matches([4, 1], lottery_4_20) == (1, 4)
    assert is_symmetric_match([4, 1], lottery_4_20)
    assert not is_symmetric_match([1, 4], lottery_4_20)


def test_complement_lookup(lottery_12_24):
    table = lottery_12_24.get_prize_table()
    assert find_prize(table, [0], lottery_12_24) == Jackpot()
    assert find_prize(table, [1], lottery_12_24) == find_prize(table, [11], lottery_12_24)
    assert find_prize(table, [6], lottery_12_24) is None
    assert equivalent_patterns([3], lottery_12_24) == ((9,), (3,))
    assert equivalent_patterns([6], lottery_12_24) == ()


def test_wildcard_rows(lottery_5_36_1):
    table = lottery_5_36_1.get_prize_table()
    assert find_prize(table, [4, 0], lottery_5_36_1) == Fixed(7_500)
    assert find_prize(table, [4, 1], lottery_5_36_1) == Fixed(7_500)
    assert find_prize(table, [5, 0], lottery_5_36_1) == Secondary()
    assert find_prize(table, [5, 1], lottery_5_36_1) == Jackpot()
    assert find_prize(table, [1, 1], lottery_5_36_1) is None


def test_first_matching_row_wins(lottery_6_45):
    table = lottery_6_45.get_prize_table()
    assert find_prize_row(table, [6], lottery_6_45).is_jackpot
    assert find_prize_row(table, [2], lottery_6_45) is None


def test_category_probabilities_match_row_formula(lottery_4_20, lottery_12_24, lottery_5_36_1, lottery_7_49):
    for lottery, table in [
        (lottery_4_20, lottery_4_20.get_prize_table("fixed")),
        (lottery_12_24, lottery_12_24.get_prize_table()),
        (lottery_5_36_1, lottery_5_36_1.get_prize_table()),
        (lottery_7_49, lottery_7_49.get_prize_table()),
    ]:
        categories = category_probabilities(lottery, table)
        for row, probability in zip(table.rows, categories):
            assert probability == pytest.approx(row_probability(lottery, row))


def test_swap_row_probability_counts_both_orders(lottery_4_20):
    p3 = probability_of_match(20, 4, 4, 3)
    p4 = probability_of_match(20, 4, 4, 4)
    row = PrizeRow((3, 4), Fixed(100_000))
    assert row_probability(lottery_4_20, row) == pytest.approx(2 * p3 * p4)


def test_resolve_fixed_jackpot_secondary():
    assert resolve_prize_value(PrizeRow((3,), Fixed(750)), superprice=1e8) == 750
    assert resolve_prize_value(PrizeRow((5, 1), Jackpot()), superprice=1e8) == 1e8
    assert resolve_prize_value(PrizeRow((5, 0), Secondary()), 1e8, secondary_prize=2e7) == 2e7
    assert resolve_prize_value(PrizeRow((5, 0), Secondary()), 1e8) == 0


def test_pool_percentage_is_split_among_winners(lottery_4_20):
    table = lottery_4_20.get_prize_table("pool_percentage")
    row = table.rows[11]
    pool = 4_000_000
    probability = row_probability(lottery_4_20, row)
    value = resolve_prize_value(row, 0, pool_amount=pool, ticket_cost=400,
                                category_probability=probability)
    assert estimated_tickets_sold(pool, 400) == 20_000
    assert value == math.floor(0.25 * pool / (20_000 * probability))


def test_pool_percentage_without_pool_pays_nothing(lottery_4_20):
    row = lottery_4_20.get_prize_table("pool_percentage").rows[11]
    assert resolve_prize_value(row, 0, pool_amount=0, ticket_cost=400, category_probability=0.1) == 0


def test_pool_percentage_without_expected_winners_pays_category_total(lottery_4_20):
    row = lottery_4_20.get_prize_table("pool_percentage").rows[11]
    assert resolve_prize_value(row, 0, pool_amount=1_000_000) == 250_000


def test_labelled_pool_top_row_is_a_pool_share(lottery_4_20):
    table = lottery_4_20.get_prize_table("pool_percentage")
    row = table.rows[0]
    assert row.note == JACKPOT_NOTE
    assert not row.is_jackpot

    probability = probability_of_match(20, 4, 4, 4) ** 2
    expected = math.floor(0.30 * 4_000_000 / (20_000 * probability))
    values = resolve_table(lottery_4_20, table, 50_000_000, None, 4_000_000, 400)
    assert values[0] == expected == 1_408_441_500
    assert resolve_table(lottery_4_20, table, 1, None, 4_000_000, 400)[0] == expected


def test_prize_for_matches(lottery_5_36_1):
    table = lottery_5_36_1.get_prize_table()
    assert prize_for_matches(lottery_5_36_1, table, [3, 0], 1e8) == 750
    assert prize_for_matches(lottery_5_36_1, table, [0, 1], 1e8) == 0
    assert prizes_for_matches(lottery_5_36_1, table, [[2, 1], [9, 9], [5, 1]], 1e8) == [75, 0, 1e8]


def test_prize_lookup_covers_every_pattern(lottery_4_20):
    lookup = prize_lookup(lottery_4_20, lottery_4_20.get_prize_table("fixed"), 50_000_000)
    assert len(lookup) == 25
    assert lookup[(4, 4)] == 50_000_000
    assert lookup[(4, 0)] == lookup[(0, 4)] == 4_000
    assert lookup[(1, 1)] == 0


def test_prize_category_and_validity(lottery_4_20):
    assert prize_category([4, 2], lottery_4_20) == "2+4"
    assert is_valid_matches(lottery_4_20, [4, 2])
    assert not is_valid_matches(lottery_4_20, [5, 2])
    assert not is_valid_matches(lottery_4_20, [1])


def test_symmetric_label(lottery_4_20, lottery_6_45):
    assert symmetric_label([4, 3], lottery_4_20) == ("3+4", "4+3")
    assert symmetric_label([2, 2], lottery_4_20) == ("2+2",)
    assert symmetric_label([5], lottery_6_45) == ("5",)
