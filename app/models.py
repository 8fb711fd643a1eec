"""
Pydantic models for the Transaction Query API.
All timestamp strings are parsed to datetime ONCE here -- never inside loops.
Empty form strings on filter bounds mean "no constraint".
"""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, GetJsonSchemaHandler, field_validator
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema as _pcs

DATE_FORMAT = "%Y-%m-%d %H:%M"

# Accepted input formats, tried in order. Minute precision is canonical.
_INPUT_FORMATS = (
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d",
)

T = TypeVar("T")


def _to_naive_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def parse_timestamp(v: object) -> datetime:
    """
    Parse a 'YYYY-MM-DD HH:mm' (or date-only / seconds / ISO 'T') string.

    Anything else falls back to ISO 8601 (fractional seconds, offsets,
    trailing 'Z'). Zone-aware values are stored as naive UTC.
    """
    if isinstance(v, datetime):
        return _to_naive_utc(v)
    if not isinstance(v, str):
        raise ValueError("Invalid date format. Expected: YYYY-MM-DD HH:mm")
    text = v.strip()
    for fmt in _INPUT_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return _to_naive_utc(datetime.fromisoformat(text))
    except ValueError:
        raise ValueError("Invalid date format. Expected: YYYY-MM-DD HH:mm")


class _TimestampFieldType:
    """
    Custom Pydantic type that:
      - At runtime: validates and stores a datetime (via parse_timestamp)
      - In OpenAPI/Swagger: shows as a plain string with the minute format.
    """

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> Any:
        return _pcs.no_info_plain_validator_function(
            parse_timestamp,
            serialization=_pcs.plain_serializer_function_ser_schema(
                lambda v: v.strftime(DATE_FORMAT) if isinstance(v, datetime) else str(v),
                info_arg=False,
            ),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, core_schema: Any, handler: GetJsonSchemaHandler
    ) -> JsonSchemaValue:
        return {
            "type": "string",
            "example": "2023-06-01 10:30",
            "description": "Format: YYYY-MM-DD HH:mm",
        }


TimestampField = _TimestampFieldType


def fmt_timestamp(dt: datetime) -> str:
    return dt.strftime(DATE_FORMAT)


def fmt_number(v: float) -> str:
    """Plain number text: 100.0 -> '100', 12.5 -> '12.5'."""
    f = float(v)
    if f.is_integer():
        return str(int(f))
    return repr(f)


def _blank_to_none(v: object) -> object:
    if v is None:
        return None
    if isinstance(v, str) and not v.strip():
        return None
    return v


# ---------------------------------------------------------------------------
# Core records
# ---------------------------------------------------------------------------

class TransactionRecord(BaseModel):
    """One transaction. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    timestamp: TimestampField
    transactionId: str
    creditAmount: float
    detail: str = ""

    @field_validator("transactionId")
    @classmethod
    def check_id(cls, v: str) -> str:
        if not v:
            raise ValueError("Transaction ID is required")
        return v

    @field_validator("creditAmount", mode="before")
    @classmethod
    def check_credit(cls, v: object) -> float:
        if v is None:
            raise ValueError("Credit is required")
        val = float(v)
        if val < 0:
            raise ValueError("Credit must be non-negative")
        return val


class FilterRequest(BaseModel):
    """
    Optional inclusive bounds. Absent (or blank) fields impose no constraint.
    startDate <= endDate and minCredit <= maxCredit are NOT enforced:
    a contradictory request simply matches nothing.
    """

    model_config = ConfigDict(frozen=True)

    startDate: Optional[datetime] = None
    endDate: Optional[datetime] = None
    minCredit: Optional[float] = None
    maxCredit: Optional[float] = None
    searchTerm: Optional[str] = None

    @field_validator("startDate", "endDate", mode="before")
    @classmethod
    def check_dates(cls, v: object) -> Optional[datetime]:
        v = _blank_to_none(v)
        if v is None:
            return None
        return parse_timestamp(v)

    @field_validator("minCredit", "maxCredit", mode="before")
    @classmethod
    def check_credit(cls, v: object) -> Optional[float]:
        v = _blank_to_none(v)
        if v is None:
            return None
        try:
            return float(v)
        except (TypeError, ValueError):
            raise ValueError("Credit bounds must be numeric")

    @field_validator("searchTerm", mode="before")
    @classmethod
    def check_search(cls, v: object) -> Optional[str]:
        if v is None or v == "":
            return None
        return str(v)

    def to_query_params(self) -> Dict[str, str]:
        """Present bounds as query-string values for a remote source."""
        params: Dict[str, str] = {}
        if self.startDate is not None:
            params["startDate"] = fmt_timestamp(self.startDate)
        if self.endDate is not None:
            params["endDate"] = fmt_timestamp(self.endDate)
        if self.minCredit is not None:
            params["minCredit"] = fmt_number(self.minCredit)
        if self.maxCredit is not None:
            params["maxCredit"] = fmt_number(self.maxCredit)
        if self.searchTerm:
            params["searchTerm"] = self.searchTerm
        return params


class SortField(str, Enum):
    TIMESTAMP = "timestamp"
    TRANSACTION_ID = "transactionId"
    CREDIT_AMOUNT = "creditAmount"
    DETAIL = "detail"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SortSpec(BaseModel):
    """field=None means no sort: source order is kept."""

    model_config = ConfigDict(frozen=True)

    field: Optional[SortField] = None
    direction: SortDirection = SortDirection.ASC

    @classmethod
    def none(cls) -> "SortSpec":
        return cls()

    @property
    def is_none(self) -> bool:
        return self.field is None


class PageState(BaseModel):
    pageSize: int = Field(default=10, ge=1)
    currentPage: int = Field(default=1, ge=1)


# ---------------------------------------------------------------------------
# Errors returned (not raised) by the query executor
# ---------------------------------------------------------------------------

class QueryErrorCode(str, Enum):
    FETCH_FAILED = "FETCH_FAILED"
    MALFORMED_RECORD = "MALFORMED_RECORD"


class QueryError(BaseModel):
    model_config = ConfigDict(extra="forbid")

    code: QueryErrorCode
    message: str
    details: Optional[Dict[str, Any]] = None


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------

class QueryBody(BaseModel):
    filters: FilterRequest = Field(default_factory=FilterRequest)
    sort: SortSpec = Field(default_factory=SortSpec)
    page: int = 1


class ExportBody(BaseModel):
    filters: FilterRequest = Field(default_factory=FilterRequest)
    sort: SortSpec = Field(default_factory=SortSpec)


class SortBody(BaseModel):
    field: SortField


class PageBody(BaseModel):
    page: int


# ---------------------------------------------------------------------------
# Response / output models
# ---------------------------------------------------------------------------

class QueryResponse(BaseModel):
    items: List[TransactionRecord]
    totalPages: int
    page: int
    totalCount: int

    @classmethod
    def from_page(cls, p: "PageSlice[TransactionRecord]") -> "QueryResponse":
        return cls(
            items=list(p.items),
            totalPages=p.totalPages,
            page=p.page,
            totalCount=p.totalCount,
        )


class ChartPoint(BaseModel):
    timestamp: str
    credit: float


class SessionResponse(BaseModel):
    status: str
    filters: FilterRequest
    sort: SortSpec
    error: Optional[str] = None
    items: List[TransactionRecord]
    totalPages: int
    page: int
    totalCount: int


class PerformanceResponse(BaseModel):
    time: str
    memory: str
    threads: int


# ---------------------------------------------------------------------------
# Internal data containers (not Pydantic, generic over the item type)
# ---------------------------------------------------------------------------

class PageSlice(Generic[T]):
    """One window of an ordered sequence plus its page metadata."""

    __slots__ = ("items", "totalPages", "page", "totalCount")

    def __init__(self, items: List[T], totalPages: int, page: int, totalCount: int) -> None:
        self.items = items
        self.totalPages = totalPages
        self.page = page
        self.totalCount = totalCount
