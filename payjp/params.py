"""
List query parameters shared by every paginated endpoint.

Parameters are immutable and validated once at construction, so an invalid
``limit`` fails before a request is ever built::

    params = ChargeListParams(limit=10, offset=20, customer="cus_xxx")
    page = client.charges.list(params)

Fields are serialized in declaration order under the name given in their
``form`` metadata; fields left as ``None`` are omitted from the query.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, List, Optional, Tuple, Union

from .encoder import epoch_seconds
from .errors import PayjpValidationError

Timestamp = Union[int, datetime]

MIN_LIMIT = 1
MAX_LIMIT = 100


def _form(name: str, default: Any = None) -> Any:
    return field(default=default, metadata={"form": name})


def to_epoch(value: Optional[Timestamp]) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return epoch_seconds(value)
    return int(value)


@dataclass(frozen=True)
class ListParams:
    """limit (1-100), offset (>= 0), since/until (inclusive epoch bounds)."""

    limit: Optional[int] = _form("limit")
    offset: Optional[int] = _form("offset")
    since: Optional[Timestamp] = _form("since")
    until: Optional[Timestamp] = _form("until")

    def __post_init__(self) -> None:
        errors: List[str] = []
        if self.limit is not None and not (MIN_LIMIT <= self.limit <= MAX_LIMIT):
            errors.append(f"limit should be between {MIN_LIMIT} and {MAX_LIMIT}, but {self.limit}.")
        if self.offset is not None and self.offset < 0:
            errors.append(f"offset should be >= 0, but {self.offset}.")
        errors.extend(self._extra_errors())
        if errors:
            raise PayjpValidationError(
                f"{type(self).__name__} parameter error: {', '.join(errors)}", errors=errors
            )

    def _extra_errors(self) -> List[str]:
        return []

    def to_pairs(self) -> List[Tuple[str, Any]]:
        out: List[Tuple[str, Any]] = []
        for f in fields(self):
            name = f.metadata.get("form")
            if not name:
                continue
            value = getattr(self, f.name)
            if isinstance(value, datetime):
                value = to_epoch(value)
            out.append((name, value))
        return out


@dataclass(frozen=True)
class CustomerListParams(ListParams):
    pass


@dataclass(frozen=True)
class CardListParams(ListParams):
    pass


@dataclass(frozen=True)
class PlanListParams(ListParams):
    pass


@dataclass(frozen=True)
class ChargeListParams(ListParams):
    customer: Optional[str] = _form("customer")
    subscription: Optional[str] = _form("subscription")
    tenant: Optional[str] = _form("tenant")


@dataclass(frozen=True)
class SubscriptionListParams(ListParams):
    plan: Optional[str] = _form("plan")
    status: Optional[str] = _form("status")
    customer: Optional[str] = _form("customer")

    def _extra_errors(self) -> List[str]:
        if self.status is not None and self.status not in SUBSCRIPTION_STATUSES:
            return [f"status should be one of {sorted(SUBSCRIPTION_STATUSES)}, but {self.status!r}."]
        return []


@dataclass(frozen=True)
class TransferListParams(ListParams):
    status: Optional[str] = _form("status")

    def _extra_errors(self) -> List[str]:
        if self.status is not None and self.status not in TRANSFER_STATUSES:
            return [f"status should be one of {sorted(TRANSFER_STATUSES)}, but {self.status!r}."]
        return []


@dataclass(frozen=True)
class TransferChargeListParams(ListParams):
    customer: Optional[str] = _form("customer")


@dataclass(frozen=True)
class EventListParams(ListParams):
    resource_id: Optional[str] = _form("resource_id")
    object: Optional[str] = _form("object")
    type: Optional[str] = _form("type")


@dataclass(frozen=True)
class StatementListParams(ListParams):
    owner: Optional[str] = _form("owner")
    source_transfer: Optional[str] = _form("source_transfer")
    tenant: Optional[str] = _form("tenant")
    term: Optional[str] = _form("term")
    type: Optional[str] = _form("type")


@dataclass(frozen=True)
class BalanceListParams(ListParams):
    since_due_date: Optional[Timestamp] = _form("since_due_date")
    until_due_date: Optional[Timestamp] = _form("until_due_date")
    state: Optional[str] = _form("state")
    closed: Optional[bool] = _form("closed")
    owner: Optional[str] = _form("owner")
    tenant: Optional[str] = _form("tenant")


@dataclass(frozen=True)
class TermListParams(ListParams):
    since_start_at: Optional[Timestamp] = _form("since_start_at")
    until_start_at: Optional[Timestamp] = _form("until_start_at")


@dataclass(frozen=True)
class ThreeDSecureRequestListParams(ListParams):
    resource_id: Optional[str] = _form("resource_id")
    tenant_id: Optional[str] = _form("tenant_id")


SUBSCRIPTION_STATUSES = frozenset({"active", "trial", "canceled", "paused"})
TRANSFER_STATUSES = frozenset({"pending", "paid", "failed", "canceled", "recombination"})


__all__ = [
    "ListParams",
    "CustomerListParams",
    "CardListParams",
    "PlanListParams",
    "ChargeListParams",
    "SubscriptionListParams",
    "TransferListParams",
    "TransferChargeListParams",
    "EventListParams",
    "StatementListParams",
    "BalanceListParams",
    "TermListParams",
    "ThreeDSecureRequestListParams",
    "SUBSCRIPTION_STATUSES",
    "TRANSFER_STATUSES",
    "to_epoch",
]
