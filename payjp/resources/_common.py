from __future__ import annotations

from typing import Any, List, Optional, Type, TypeVar

from ..errors import PayjpValidationError
from ..params import ListParams

P = TypeVar("P", bound=ListParams)

MIN_AMOUNT = 50
MAX_AMOUNT = 9_999_999
SUPPORTED_CURRENCY = "jpy"


# ----------------------- validation helpers -----------------------

def _validate_id(name: str, value: str) -> None:
    if not value or not isinstance(value, str):
        raise PayjpValidationError(f"{name} is required and must be a non-empty string.")


def _check_amount(amount: Any, errors: List[str]) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int) or not (MIN_AMOUNT <= amount <= MAX_AMOUNT):
        errors.append(f"amount should be between {MIN_AMOUNT:,} and {MAX_AMOUNT:,}, but {amount}.")


def _check_currency(currency: Optional[str], errors: List[str]) -> str:
    if not currency:
        return SUPPORTED_CURRENCY
    if currency != SUPPORTED_CURRENCY:
        errors.append(f"only supports {SUPPORTED_CURRENCY!r} as currency, but {currency!r}.")
    return currency


def _raise_if(errors: List[str], operation: str) -> None:
    if errors:
        raise PayjpValidationError(f"{operation} parameter error: {', '.join(errors)}", errors=errors)


def _list_params(params: Optional[Any], cls: Type[P]) -> P:
    """Accept None, an instance of ``cls``, or a plain ListParams for limit/offset/since/until."""
    if params is None:
        return cls()
    if isinstance(params, cls):
        return params
    if isinstance(params, ListParams):
        return cls(limit=params.limit, offset=params.offset, since=params.since, until=params.until)
    raise PayjpValidationError(f"params must be {cls.__name__}, got {type(params).__name__}.")
