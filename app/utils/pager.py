"""
utils/pager.py -- Fixed-size page windows over an ordered sequence.

total_pages(count, page_size) -> ceil(count / page_size), minimum 1
clamp_page(page, pages)       -> page forced into [1, pages]
paginate(records, page_size, page) -> PageSlice

Out-of-range page requests return the nearest valid page, never an error.
"""
from __future__ import annotations

import math
from typing import Sequence, TypeVar

from app.models import PageSlice

T = TypeVar("T")


def total_pages(count: int, page_size: int) -> int:
    if page_size < 1:
        raise ValueError("page_size must be a positive integer")
    return max(1, math.ceil(count / page_size))


def clamp_page(page: int, pages: int) -> int:
    return min(max(page, 1), max(pages, 1))


def paginate(records: Sequence[T], page_size: int, page: int) -> PageSlice[T]:
    pages = total_pages(len(records), page_size)
    current = clamp_page(page, pages)
    start = (current - 1) * page_size
    return PageSlice(
        items=list(records[start:start + page_size]),
        totalPages=pages,
        page=current,
        totalCount=len(records),
    )
