"""
utils/exporter.py -- CSV serialization of a result set.

to_csv(records) -> str
  Header: Date & Time,Transaction ID,Credit,Detail
  One line per record, '\n' separated, no trailing newline.
  Detail is always wrapped in double quotes; embedded quotes are NOT escaped
  (known limitation, kept for output compatibility).
  Timestamps are re-rendered at minute precision, so a source value with
  seconds ('2023-06-01 10:30:45') exports as '2023-06-01 10:30': the
  round-trip to the raw source string is lossy.

Callers pass the full filtered/sorted set, never a single page.
"""
from __future__ import annotations

from typing import List

from app.models import TransactionRecord, fmt_number, fmt_timestamp

EXPORT_FILENAME = "transaction_results.csv"
EXPORT_MEDIA_TYPE = "text/csv; charset=utf-8"

CSV_HEADERS = ("Date & Time", "Transaction ID", "Credit", "Detail")


def _row(r: TransactionRecord) -> str:
    return ",".join(
        (
            fmt_timestamp(r.timestamp),
            r.transactionId,
            fmt_number(r.creditAmount),
            f'"{r.detail}"',
        )
    )


def to_csv(records: List[TransactionRecord]) -> str:
    lines = [",".join(CSV_HEADERS)]
    lines.extend(_row(r) for r in records)
    return "\n".join(lines)
