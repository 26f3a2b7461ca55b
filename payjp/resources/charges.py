from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from ..client import PayjpClient
from ..debug import dprint
from ..encoder import FormBuilder
from ..models import CardDetails, Charge
from ..params import ChargeListParams
from ..parser import Page, parse_list, parse_resource
from ._common import _check_amount, _check_currency, _list_params, _raise_if, _validate_id

MIN_EXPIRY_DAYS = 1
MAX_EXPIRY_DAYS = 60


def _charges_base() -> str:
    return "/charges"


def _charge_path(charge_id: str) -> str:
    return f"{_charges_base()}/{charge_id}"


class ChargesAPI:
    """
    Charges: one-off payments and subscription billings.

    Exactly one payment source is required on create: ``customer`` (optionally
    with ``customer_card``), a card token in ``card``, or raw ``CardDetails``.
    Pass ``capture=False`` to authorize only; ``expiry_days`` (1-60) bounds
    how long the authorization is held. ``idempotency_key`` pins the
    Idempotency-Key header; a fresh one is generated otherwise.
    """

    def __init__(self, client: PayjpClient):
        self.client = client

    def create(
        self,
        amount: int,
        *,
        currency: Optional[str] = None,
        customer: Optional[str] = None,
        customer_card: Optional[str] = None,
        card: Union[str, CardDetails, Dict[str, Any], None] = None,
        capture: Optional[bool] = None,
        description: Optional[str] = None,
        expiry_days: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
        idempotency_key: Optional[str] = None,
    ) -> Optional[Charge]:
        errors: List[str] = []
        _check_amount(amount, errors)

        card_token = card if isinstance(card, str) else None
        card_details = None if isinstance(card, str) or card is None else card
        if isinstance(card_details, dict):
            card_details = CardDetails(**card_details)

        sources = sum(
            [
                bool(customer),
                bool(card_token),
                card_details is not None and card_details.is_complete(),
            ]
        )
        if sources == 0:
            errors.append("one of the following parameters is required: customer, card token, card")
        elif sources > 1:
            errors.append("the following parameters are exclusive: customer, card token, card")

        currency = _check_currency(currency, errors)
        if expiry_days is not None and not (MIN_EXPIRY_DAYS <= expiry_days <= MAX_EXPIRY_DAYS):
            errors.append(
                f"expiry_days should be between {MIN_EXPIRY_DAYS} and {MAX_EXPIRY_DAYS}, but {expiry_days}."
            )
        _raise_if(errors, "Charge.create()")

        form = FormBuilder([("amount", amount), ("currency", currency)])
        if customer:
            form.add("customer", customer)
            form.add("card", customer_card)
        elif card_token:
            form.add("card", card_token)
        else:
            form.add_card(card_details)
        form.add("description", description)
        form.add("capture", capture)
        form.add("expiry_days", expiry_days)
        form.add_metadata(metadata)

        dprint("charges.create()", {"amount": amount, "currency": currency, "capture": capture})
        status, body = self.client.post(_charges_base(), data=form.pairs, idempotency_key=idempotency_key)
        return parse_resource(body, Charge, self.client, status=status)

    def retrieve(self, charge_id: str) -> Optional[Charge]:
        _validate_id("charge_id", charge_id)
        status, body = self.client.get(_charge_path(charge_id))
        return parse_resource(body, Charge, self.client, status=status)

    def update(
        self,
        charge_id: str,
        *,
        description: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[Charge]:
        _validate_id("charge_id", charge_id)
        status, body = self.client.post(
            _charge_path(charge_id), data=[("description", description)], metadata=metadata
        )
        return parse_resource(body, Charge, self.client, status=status)

    def refund(
        self,
        charge_id: str,
        *,
        amount: Optional[int] = None,
        refund_reason: Optional[str] = None,
        idempotency_key: Optional[str] = None,
    ) -> Optional[Charge]:
        """Refund the whole charge, or ``amount`` of it."""
        _validate_id("charge_id", charge_id)
        status, body = self.client.post(
            f"{_charge_path(charge_id)}/refund",
            data=[("amount", amount), ("refund_reason", refund_reason)],
            idempotency_key=idempotency_key,
        )
        return parse_resource(body, Charge, self.client, status=status)

    def capture(
        self, charge_id: str, *, amount: Optional[int] = None, idempotency_key: Optional[str] = None
    ) -> Optional[Charge]:
        """Capture an authorized charge, optionally for a smaller ``amount``."""
        _validate_id("charge_id", charge_id)
        status, body = self.client.post(
            f"{_charge_path(charge_id)}/capture", data=[("amount", amount)], idempotency_key=idempotency_key
        )
        return parse_resource(body, Charge, self.client, status=status)

    def list(self, params: Optional[ChargeListParams] = None) -> Page[Charge]:
        params = _list_params(params, ChargeListParams)
        status, body = self.client.get(_charges_base(), params=params.to_pairs())
        return parse_list(body, Charge, self.client, status=status)
