"""
utils/sorting.py -- Record ordering.

sort_records(records, spec) -> new list; input untouched
toggle_sort(current, field) -> SortSpec

Natural order per field: chronological for timestamp, numeric for
creditAmount, lexical for transactionId and detail. Python's sort is
stable, and reverse=True keeps ties in input order as well.
"""
from __future__ import annotations

from operator import attrgetter
from typing import List

from app.models import SortDirection, SortField, SortSpec, TransactionRecord


def sort_records(records: List[TransactionRecord], spec: SortSpec) -> List[TransactionRecord]:
    if spec.is_none:
        return list(records)
    return sorted(
        records,
        key=attrgetter(spec.field.value),
        reverse=spec.direction is SortDirection.DESC,
    )


def toggle_sort(current: SortSpec, field: SortField) -> SortSpec:
    """Same field flips direction; a new field starts ascending."""
    if current.field is field:
        flipped = SortDirection.DESC if current.direction is SortDirection.ASC else SortDirection.ASC
        return SortSpec(field=field, direction=flipped)
    return SortSpec(field=field, direction=SortDirection.ASC)
