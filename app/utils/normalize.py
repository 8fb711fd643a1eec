"""
utils/normalize.py -- Raw source record -> TransactionRecord adapter.

normalize_record(raw) -> TransactionRecord
  Tolerates both naming conventions returned by transaction sources:
    dateTime | date_time      -> timestamp
    transId  | transaction_id -> transactionId
    credit                    -> creditAmount (missing -> 0)
    detail   | description    -> detail       (missing -> "")
  Raises MalformedRecordError when the result still is not a valid record
  (unparseable timestamp, empty id, negative or non-numeric credit).

normalize_records(raws, strict=False) -> list[TransactionRecord]
  Lenient (default): malformed records are skipped and logged.
  Strict: the first malformed record raises.
"""
from __future__ import annotations

import logging
import math
from typing import Any, Iterable, List, Mapping

from pydantic import ValidationError

from app.errors import MalformedRecordError
from app.models import TransactionRecord

logger = logging.getLogger(__name__)


def _first(raw: Mapping[str, Any], *keys: str, default: Any = "") -> Any:
    """First truthy value among keys, else default."""
    for key in keys:
        value = raw.get(key)
        if value:
            return value
    return default


def _coerce_credit(value: Any) -> float:
    try:
        credit = float(value)
    except (TypeError, ValueError):
        raise MalformedRecordError(f"Non-numeric credit: {value!r}")
    if math.isnan(credit) or math.isinf(credit):
        raise MalformedRecordError(f"Non-finite credit: {value!r}")
    return credit


def normalize_record(raw: Any) -> TransactionRecord:
    if not isinstance(raw, Mapping):
        raise MalformedRecordError("Record is not an object", raw=raw)

    try:
        credit = _coerce_credit(_first(raw, "credit", default=0))
        return TransactionRecord(
            timestamp=_first(raw, "dateTime", "date_time"),
            transactionId=str(_first(raw, "transId", "transaction_id")),
            creditAmount=credit,
            detail=str(_first(raw, "detail", "description")),
        )
    except MalformedRecordError as exc:
        exc.raw = raw
        raise
    except ValidationError as exc:
        msg = exc.errors()[0].get("msg", "Invalid record") if exc.errors() else "Invalid record"
        raise MalformedRecordError(msg, raw=raw) from exc


def normalize_records(raws: Iterable[Any], strict: bool = False) -> List[TransactionRecord]:
    records: List[TransactionRecord] = []
    for idx, raw in enumerate(raws):
        try:
            records.append(normalize_record(raw))
        except MalformedRecordError as exc:
            if strict:
                raise
            logger.warning("Skipping malformed record #%d: %s", idx, exc)
    return records
