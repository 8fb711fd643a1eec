"""
utils/filters.py -- Filter predicates over normalized records.

build_mask(records, request) -> numpy bool array, True where every present
                                bound holds (logical AND)
apply_filters(records, request) -> records passing the mask, source order

Bounds are all inclusive. Dates compare full date-times, not calendar days.
Text search is a case-insensitive substring test on detail; an absent or
empty term matches everything.
"""
from __future__ import annotations

from typing import List

import numpy as np

from app.models import FilterRequest, TransactionRecord


def build_mask(records: List[TransactionRecord], request: FilterRequest) -> np.ndarray:
    """
    Vectorized conjunction of the credit and date bounds, then the text test.

    Timestamps go to datetime64[s]; credits to float64.
    """
    n = len(records)
    mask = np.ones(n, dtype=bool)
    if n == 0:
        return mask

    if request.minCredit is not None or request.maxCredit is not None:
        credits = np.array([r.creditAmount for r in records], dtype=np.float64)
        if request.minCredit is not None:
            mask &= credits >= request.minCredit
        if request.maxCredit is not None:
            mask &= credits <= request.maxCredit

    if request.startDate is not None or request.endDate is not None:
        stamps = np.array([r.timestamp for r in records], dtype="datetime64[s]")
        if request.startDate is not None:
            mask &= stamps >= np.datetime64(request.startDate, "s")
        if request.endDate is not None:
            mask &= stamps <= np.datetime64(request.endDate, "s")

    if request.searchTerm:
        needle = request.searchTerm.lower()
        mask &= np.array([needle in r.detail.lower() for r in records], dtype=bool)

    return mask


def apply_filters(records: List[TransactionRecord], request: FilterRequest) -> List[TransactionRecord]:
    mask = build_mask(records, request)
    return [r for r, keep in zip(records, mask) if keep]
