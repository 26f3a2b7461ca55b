"""
Decode-then-dispatch for every API response.

A response body is interpreted, in order, as:

1. a resource of the expected kind (``object`` equals the model's ``OBJECT``);
2. an error envelope with a non-zero ``error.status`` -> ``PayjpAPIError``;
3. anything else that is still a JSON object -> ``None`` (tolerated).

Bodies that are not JSON objects, or that claim the expected kind but do not
fit its schema, raise ``PayjpDecodeError``.

Case 3 exists because some resources carry a string ``status`` field that
collides with the error envelope heuristics; such payloads are not errors.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, Iterator, List, Optional, Type, TypeVar

from pydantic import ValidationError

from .debug import dprint
from .errors import PayjpAPIError, PayjpDecodeError

if TYPE_CHECKING:
    from .client import PayjpClient
    from .models import Deleted, PayjpObject

T = TypeVar("T", bound="PayjpObject")

LIST_OBJECT = "list"


@dataclass
class Page(Generic[T]):
    """One page of a list endpoint. Iterates over ``data`` in server order."""

    data: List[T] = field(default_factory=list)
    has_more: bool = False
    count: int = 0
    url: str = ""

    def __iter__(self) -> Iterator[T]:
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def __getitem__(self, index: int) -> T:
        return self.data[index]


def decode_json(body: Any, *, status: Optional[int] = None) -> Any:
    """bytes/str -> JSON value; dicts pass through untouched."""
    if isinstance(body, (dict, list)):
        return body
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    try:
        return json.loads(body)
    except (TypeError, ValueError) as e:
        raise PayjpDecodeError(f"response is not valid JSON: {e}", status=status, body=body) from e


def error_from_payload(data: Any) -> Optional[PayjpAPIError]:
    """Return a PayjpAPIError when ``data`` is an error envelope with non-zero status."""
    if not isinstance(data, dict):
        return None
    err = data.get("error")
    if not isinstance(err, dict):
        return None
    status = err.get("status")
    if isinstance(status, bool) or not isinstance(status, int) or status == 0:
        return None
    return PayjpAPIError.from_envelope(data)


def parse_payload(
    data: Any,
    model: Type[T],
    client: Optional["PayjpClient"] = None,
    *,
    status: Optional[int] = None,
) -> Optional[T]:
    """Discriminate an already-decoded JSON value against ``model``."""
    if not isinstance(data, dict):
        raise PayjpDecodeError(
            f"expected a JSON object for {model.OBJECT!r}, got {type(data).__name__}",
            status=status,
            body=data,
        )

    if data.get("object") == model.OBJECT:
        try:
            obj = model.model_validate(data, context={"client": client})
        except ValidationError as e:
            raise PayjpDecodeError(
                f"{model.OBJECT!r} payload does not match schema: {e.error_count()} error(s)",
                status=status,
                body=data,
            ) from e
        obj.attach(client)
        return obj

    api_error = error_from_payload(data)
    if api_error is not None:
        raise api_error

    dprint("parser: tolerated non-matching payload", {"expected": model.OBJECT, "object": data.get("object")})
    return None


def parse_resource(
    body: Any,
    model: Type[T],
    client: Optional["PayjpClient"] = None,
    *,
    status: Optional[int] = None,
) -> Optional[T]:
    """Decode a raw response body and parse it as ``model``."""
    return parse_payload(decode_json(body, status=status), model, client, status=status)


def parse_items(items: Any, model: Type[T], client: Optional["PayjpClient"] = None) -> List[T]:
    """
    Parse each raw item of a list envelope's ``data``, one slot per item.

    An item that is not the expected kind, or that is an error envelope or
    malformed, becomes an unbound empty ``model()`` in its slot, so the
    result always has ``len(items)`` entries in server order.
    """
    out: List[T] = []
    for index, raw in enumerate(items or []):
        try:
            obj = parse_payload(raw, model, client)
        except (PayjpAPIError, PayjpDecodeError) as e:
            dprint("parser: unreadable list item", {"expected": model.OBJECT, "index": index, "error": str(e)})
            obj = None
        out.append(obj if obj is not None else model())
    return out


def parse_list_payload(
    data: Any,
    model: Type[T],
    client: Optional["PayjpClient"] = None,
    *,
    status: Optional[int] = None,
) -> Page[T]:
    if not isinstance(data, dict):
        raise PayjpDecodeError(
            f"expected a list envelope, got {type(data).__name__}", status=status, body=data
        )
    if data.get("object") == LIST_OBJECT:
        return Page(
            data=parse_items(data.get("data"), model, client),
            has_more=bool(data.get("has_more")),
            count=int(data.get("count") or 0),
            url=str(data.get("url") or ""),
        )

    api_error = error_from_payload(data)
    if api_error is not None:
        raise api_error

    dprint("parser: tolerated non-list payload", {"expected": model.OBJECT, "object": data.get("object")})
    return Page()


def parse_list(
    body: Any,
    model: Type[T],
    client: Optional["PayjpClient"] = None,
    *,
    status: Optional[int] = None,
) -> Page[T]:
    """Decode a list envelope and parse every item as ``model``."""
    return parse_list_payload(decode_json(body, status=status), model, client, status=status)


def parse_deleted(body: Any, *, status: Optional[int] = None) -> Optional["Deleted"]:
    """
    DELETE endpoints answer ``{"deleted": true, "id": ..., "livemode": ...}``.
    Returns it as ``Deleted``, raises the API error, or None for anything else.
    """
    from .models import Deleted

    data = decode_json(body, status=status)
    if not isinstance(data, dict):
        raise PayjpDecodeError("expected a JSON object for delete response", status=status, body=data)
    if data.get("deleted") is True:
        return Deleted.model_validate(data)
    api_error = error_from_payload(data)
    if api_error is not None:
        raise api_error
    return None


__all__ = [
    "Page",
    "decode_json",
    "error_from_payload",
    "parse_payload",
    "parse_resource",
    "parse_items",
    "parse_list_payload",
    "parse_list",
    "parse_deleted",
]
