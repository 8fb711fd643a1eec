# Test type: unit
# Validation: stable sorting per field and direction, sort toggling rules
# Command: pytest test/test_sorting.py -v

from app.models import SortDirection, SortField, SortSpec, TransactionRecord
from app.sources import FIXTURE_TRANSACTIONS
from app.utils.normalize import normalize_records
from app.utils.sorting import sort_records, toggle_sort


def _rec(tid: str, credit: float = 0, when: str = "2023-06-01 10:30", detail: str = ""):
    return TransactionRecord(timestamp=when, transactionId=tid, creditAmount=credit, detail=detail)


def _ids(records):
    return [r.transactionId for r in records]


FIXTURE = normalize_records(FIXTURE_TRANSACTIONS)


class TestSortRecords:
    def test_none_is_identity(self):
        assert _ids(sort_records(FIXTURE, SortSpec.none())) == _ids(FIXTURE)

    def test_none_returns_new_list(self):
        out = sort_records(FIXTURE, SortSpec.none())
        assert out is not FIXTURE

    def test_credit_descending_fixture(self):
        out = sort_records(FIXTURE, SortSpec(field=SortField.CREDIT_AMOUNT, direction=SortDirection.DESC))
        assert out[0].transactionId == "T004"
        assert out[-1].transactionId == "T005"

    def test_credit_ascending_is_numeric(self):
        records = [_rec("A", 100), _rec("B", 9), _rec("C", 25)]
        out = sort_records(records, SortSpec(field=SortField.CREDIT_AMOUNT))
        assert _ids(out) == ["B", "C", "A"]

    def test_detail_lexical(self):
        out = sort_records(FIXTURE, SortSpec(field=SortField.DETAIL))
        assert out[0].detail == "Book store purchase"
        assert out[-1].detail == "Subscription renewal"

    def test_timestamp_chronological(self):
        records = [
            _rec("A", when="2023-06-10 08:00"),
            _rec("B", when="2023-06-02 23:00"),
            _rec("C", when="2023-06-02 09:00"),
        ]
        out = sort_records(records, SortSpec(field=SortField.TIMESTAMP))
        assert _ids(out) == ["C", "B", "A"]

    def test_transaction_id_lexical(self):
        records = [_rec("T10"), _rec("T2"), _rec("T1")]
        out = sort_records(records, SortSpec(field=SortField.TRANSACTION_ID))
        assert _ids(out) == ["T1", "T10", "T2"]

    def test_input_not_mutated(self):
        records = [_rec("B", 2), _rec("A", 1)]
        sort_records(records, SortSpec(field=SortField.CREDIT_AMOUNT))
        assert _ids(records) == ["B", "A"]

    def test_empty_and_single(self):
        spec = SortSpec(field=SortField.DETAIL)
        assert sort_records([], spec) == []
        assert _ids(sort_records([_rec("A")], spec)) == ["A"]


class TestSortStability:
    _records = [_rec("A", 50), _rec("B", 10), _rec("C", 50), _rec("D", 10), _rec("E", 50)]

    def test_ascending_ties_keep_input_order(self):
        out = sort_records(self._records, SortSpec(field=SortField.CREDIT_AMOUNT))
        assert _ids(out) == ["B", "D", "A", "C", "E"]

    def test_descending_ties_keep_input_order(self):
        spec = SortSpec(field=SortField.CREDIT_AMOUNT, direction=SortDirection.DESC)
        out = sort_records(self._records, spec)
        assert _ids(out) == ["A", "C", "E", "B", "D"]


class TestSortInvolution:
    def test_desc_reverses_asc_for_distinct_keys(self):
        asc = sort_records(FIXTURE, SortSpec(field=SortField.CREDIT_AMOUNT))
        spec = toggle_sort(SortSpec(field=SortField.CREDIT_AMOUNT), SortField.CREDIT_AMOUNT)
        desc = sort_records(FIXTURE, spec)
        assert _ids(desc) == list(reversed(_ids(asc)))


class TestToggleSort:
    def test_from_none_starts_ascending(self):
        spec = toggle_sort(SortSpec.none(), SortField.DETAIL)
        assert spec.field is SortField.DETAIL
        assert spec.direction is SortDirection.ASC

    def test_same_field_flips(self):
        spec = toggle_sort(SortSpec(field=SortField.DETAIL), SortField.DETAIL)
        assert spec.direction is SortDirection.DESC
        spec = toggle_sort(spec, SortField.DETAIL)
        assert spec.direction is SortDirection.ASC

    def test_new_field_resets_to_ascending(self):
        current = SortSpec(field=SortField.DETAIL, direction=SortDirection.DESC)
        spec = toggle_sort(current, SortField.CREDIT_AMOUNT)
        assert spec.field is SortField.CREDIT_AMOUNT
        assert spec.direction is SortDirection.ASC
