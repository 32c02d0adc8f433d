"""
Unit tests for business-key deduplication.
"""

from datetime import datetime
from functools import reduce

import pytest
from hypothesis import given
from hypothesis import strategies as st

from txn_cleaning.core.cleaning import (
    business_key,
    deduplicate,
    normalize_record,
    select_rank_one,
    validate_record,
)


def _record(raw, row):
    return validate_record(normalize_record(raw, source_row=row))


@pytest.mark.unit
class TestDeduplicate:
    """Tests for deduplicate()"""

    def test_keeps_most_recent(self, raw_factory):
        older = _record(raw_factory(timestamp="2024-01-01T10:00:00"), 0)
        newer = _record(raw_factory(timestamp="2024-01-02T10:00:00"), 1)

        result = deduplicate([older, newer])

        assert len(result) == 1
        assert result[0].transaction_timestamp == datetime(2024, 1, 2, 10, 0)

    def test_input_order_does_not_matter(self, raw_factory):
        older = _record(raw_factory(timestamp="2024-01-01T10:00:00"), 0)
        newer = _record(raw_factory(timestamp="2024-01-02T10:00:00"), 1)
        assert deduplicate([newer, older]) == deduplicate([older, newer])

    def test_different_keys_are_kept(self, raw_factory):
        records = [
            _record(raw_factory(transaction_id="T1"), 0),
            _record(raw_factory(transaction_id="T2"), 1),
            _record(raw_factory(customer_id="C2"), 2),
            _record(raw_factory(product_name="Gadget"), 3),
            _record(raw_factory(total_amount=10.00), 4),
        ]
        assert len(deduplicate(records)) == 5

    def test_key_uses_normalized_values(self, raw_factory):
        first = _record(raw_factory(product_name="Widget ", total_amount="9.990"), 0)
        second = _record(raw_factory(product_name=" Widget", total_amount=9.99), 1)
        assert business_key(first) == business_key(second)
        assert len(deduplicate([first, second])) == 1

    def test_absent_timestamp_never_wins(self, raw_factory):
        valid = _record(raw_factory(timestamp="2024-01-01T10:00:00"), 5)
        broken = _record(raw_factory(timestamp="garbage"), 0)

        assert deduplicate([broken, valid]) == [valid]
        assert deduplicate([valid, broken]) == [valid]

    def test_tie_goes_to_earliest_input_row(self, raw_factory):
        first = _record(raw_factory(customer_name="first"), 3)
        second = _record(raw_factory(customer_name="second"), 8)

        assert deduplicate([second, first])[0].customer_name == "First"
        assert select_rank_one(first, second) is first
        assert select_rank_one(second, first) is first

    def test_absent_key_components_group_together(self, raw_factory):
        a = _record(raw_factory(total_amount=-1, timestamp="2024-01-01T00:00:00"), 0)
        b = _record(raw_factory(total_amount=None, timestamp="2024-01-03T00:00:00"), 1)
        result = deduplicate([a, b])
        assert len(result) == 1
        assert result[0].source_row == 1

    def test_empty_input(self):
        assert deduplicate([]) == []


@pytest.mark.unit
@given(
    st.lists(
        st.tuples(
            st.sampled_from(["T1", "T2"]),
            st.sampled_from(["C1", "C2"]),
            st.one_of(st.none(), st.datetimes(min_value=datetime(2020, 1, 1), max_value=datetime(2025, 1, 1))),
        ),
        max_size=30,
    )
)
def test_one_pass_matches_sort_then_take_first(rows):
    raw = [
        {
            "transaction_id": txn, "customer_id": cust, "product_name": "Widget",
            "total_amount": 9.99, "timestamp": ts,
        }
        for txn, cust, ts in rows
    ]
    records = [_record(r, i) for i, r in enumerate(raw)]

    # stable sorts: newest first, absent timestamps last, earlier rows first on ties
    ranked = sorted(records, key=lambda r: r.source_row)
    ranked = sorted(ranked, key=lambda r: r.transaction_timestamp or datetime.min, reverse=True)
    expected = {}
    for record in ranked:
        expected.setdefault(business_key(record), record)

    result = {business_key(r): r for r in deduplicate(records)}
    assert result == expected


@pytest.mark.unit
@given(st.permutations(list(range(6))))
def test_select_rank_one_is_order_independent(order):
    base = {"transaction_id": "T1", "customer_id": "C1", "product_name": "W", "total_amount": 1}
    stamps = ["2024-01-01", "2024-01-03", None, "2024-01-03", "2024-01-02", "bad"]
    records = [_record({**base, "timestamp": ts}, i) for i, ts in enumerate(stamps)]

    winner = reduce(select_rank_one, [records[i] for i in order])

    assert winner.source_row == 1
