from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional, Tuple
from urllib.parse import quote_plus

from .debug import dprint

# ==============================================================================
# application/x-www-form-urlencoded builder
# ==============================================================================

Pair = Tuple[str, Any]

# Card parameter names accepted by /tokens, /charges and /customers.
CARD_FIELDS: Tuple[str, ...] = (
    "number",
    "exp_month",
    "exp_year",
    "cvc",
    "address_state",
    "address_city",
    "address_line1",
    "address_line2",
    "address_zip",
    "country",
    "name",
    "email",
    "phone",
)


def epoch_seconds(value: datetime) -> int:
    """Epoch seconds of ``value``; naive datetimes are read as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp())


def _is_absent(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def encode_value(value: Any) -> str:
    """
    Render a single value the way the API expects it on the wire.

    bool -> "true"/"false", datetime -> epoch seconds (naive is UTC), everything else -> str().
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return str(epoch_seconds(value))
    return str(value)


class FormBuilder:
    """
    Ordered accumulator of (key, value) pairs.

    Absent values (None or "") are skipped, never encoded as empty. Keys keep
    their brackets (card[number], metadata[order_id]); values are percent
    encoded with quote_plus.
    """

    def __init__(self, pairs: Optional[Iterable[Pair]] = None):
        self._pairs: List[Tuple[str, str]] = []
        for key, value in pairs or ():
            self.add(key, value)

    def add(self, key: str, value: Any) -> "FormBuilder":
        if _is_absent(value):
            return self
        self._pairs.append((key, encode_value(value)))
        return self

    def add_metadata(self, metadata: Optional[Mapping[str, Any]]) -> "FormBuilder":
        for k, v in (metadata or {}).items():
            self.add(f"metadata[{k}]", v)
        return self

    def add_card(self, card: Any, *, prefix: str = "card") -> "FormBuilder":
        """
        Expand card details into card[...] pairs. Accepts a mapping or any object
        exposing ``to_form()`` (see ``payjp.models.CardDetails``). With
        ``prefix=""`` the fields are added flat (used when updating a customer card).
        """
        if card is None:
            return self
        data = card.to_form() if hasattr(card, "to_form") else dict(card)
        for name in CARD_FIELDS:
            if name in data:
                self.add(f"{prefix}[{name}]" if prefix else name, data[name])
        self.add_metadata(data.get("metadata"))
        return self

    @property
    def pairs(self) -> List[Tuple[str, str]]:
        return list(self._pairs)

    def __bool__(self) -> bool:
        return bool(self._pairs)

    def encode(self) -> str:
        body = "&".join(f"{quote_plus(k, safe='[]')}={quote_plus(v)}" for k, v in self._pairs)
        dprint("encoder.encode()", {"keys": [k for k, _ in self._pairs]})
        return body


def encode_form(pairs: Iterable[Pair], *, metadata: Optional[Mapping[str, Any]] = None) -> str:
    """
    Encode an ordered list of (key, optional value) pairs as a form body.

    >>> encode_form([("description", "test"), ("email", None)])
    'description=test'
    """
    return FormBuilder(pairs).add_metadata(metadata).encode()


def encode_query(pairs: Iterable[Pair]) -> str:
    """Same as encode_form but prefixed with "?" when anything is set."""
    q = FormBuilder(pairs).encode()
    return f"?{q}" if q else ""


__all__ = [
    "CARD_FIELDS",
    "FormBuilder",
    "encode_value",
    "epoch_seconds",
    "encode_form",
    "encode_query",
]
