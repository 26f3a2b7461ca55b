from __future__ import annotations

from typing import Any, Dict, Optional, Union

from ..client import PayjpClient
from ..debug import dprint
from ..encoder import FormBuilder
from ..models import Card, CardDetails, Customer, Deleted, Subscription
from ..params import CardListParams, CustomerListParams, SubscriptionListParams
from ..parser import Page, parse_deleted, parse_list, parse_resource
from ._common import _list_params, _validate_id

CardInput = Union[str, CardDetails, Dict[str, Any], None]


def _customers_base() -> str:
    return "/customers"


def _customer_path(customer_id: str) -> str:
    return f"{_customers_base()}/{customer_id}"


def _add_card_input(form: FormBuilder, card: CardInput, *, prefix: str) -> None:
    # A string is a token id; anything else is raw card details.
    if isinstance(card, str):
        form.add("card", card)
    else:
        form.add_card(card, prefix=prefix)


def _own_card(card: Optional[Card], customer_id: str) -> Optional[Card]:
    if card is not None and not card.customer:
        card.customer = customer_id
    return card


class CustomersAPI:
    """
    Customers and their cards/subscriptions.

    ``card`` arguments accept a token id (``"tok_..."``) or raw ``CardDetails``.
    """

    def __init__(self, client: PayjpClient):
        self.client = client

    # ----------------------- customers -----------------------

    def create(
        self,
        *,
        email: Optional[str] = None,
        description: Optional[str] = None,
        id: Optional[str] = None,
        card: CardInput = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[Customer]:
        form = FormBuilder([("email", email), ("description", description), ("id", id)])
        _add_card_input(form, card, prefix="card")
        form.add_metadata(metadata)
        dprint("customers.create()", {"keys": [k for k, _ in form.pairs]})
        status, body = self.client.post(_customers_base(), data=form.pairs)
        return parse_resource(body, Customer, self.client, status=status)

    def retrieve(self, customer_id: str) -> Optional[Customer]:
        _validate_id("customer_id", customer_id)
        status, body = self.client.get(_customer_path(customer_id))
        return parse_resource(body, Customer, self.client, status=status)

    def update(
        self,
        customer_id: str,
        *,
        email: Optional[str] = None,
        description: Optional[str] = None,
        default_card: Optional[str] = None,
        card: CardInput = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[Customer]:
        _validate_id("customer_id", customer_id)
        form = FormBuilder([("email", email), ("description", description), ("default_card", default_card)])
        _add_card_input(form, card, prefix="card")
        form.add_metadata(metadata)
        status, body = self.client.post(_customer_path(customer_id), data=form.pairs)
        return parse_resource(body, Customer, self.client, status=status)

    def delete(self, customer_id: str) -> Optional[Deleted]:
        _validate_id("customer_id", customer_id)
        status, body = self.client.delete(_customer_path(customer_id))
        return parse_deleted(body, status=status)

    def list(self, params: Optional[CustomerListParams] = None) -> Page[Customer]:
        params = _list_params(params, CustomerListParams)
        status, body = self.client.get(_customers_base(), params=params.to_pairs())
        return parse_list(body, Customer, self.client, status=status)

    # ----------------------- cards -----------------------

    def add_card(
        self,
        customer_id: str,
        card: CardInput = None,
        *,
        default: Optional[bool] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[Card]:
        _validate_id("customer_id", customer_id)
        form = FormBuilder()
        _add_card_input(form, card, prefix="")
        form.add("default", default)
        form.add_metadata(metadata)
        status, body = self.client.post(f"{_customer_path(customer_id)}/cards", data=form.pairs)
        return _own_card(parse_resource(body, Card, self.client, status=status), customer_id)

    def retrieve_card(self, customer_id: str, card_id: str) -> Optional[Card]:
        _validate_id("customer_id", customer_id)
        _validate_id("card_id", card_id)
        status, body = self.client.get(f"{_customer_path(customer_id)}/cards/{card_id}")
        return _own_card(parse_resource(body, Card, self.client, status=status), customer_id)

    def update_card(
        self,
        customer_id: str,
        card_id: str,
        *,
        name: Optional[str] = None,
        exp_month: Optional[int] = None,
        exp_year: Optional[int] = None,
        country: Optional[str] = None,
        address_zip: Optional[str] = None,
        address_state: Optional[str] = None,
        address_city: Optional[str] = None,
        address_line1: Optional[str] = None,
        address_line2: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[Card]:
        _validate_id("customer_id", customer_id)
        _validate_id("card_id", card_id)
        details = CardDetails(
            name=name,
            exp_month=exp_month,
            exp_year=exp_year,
            country=country,
            address_zip=address_zip,
            address_state=address_state,
            address_city=address_city,
            address_line1=address_line1,
            address_line2=address_line2,
            email=email,
            phone=phone,
            metadata=metadata,
        )
        form = FormBuilder().add_card(details, prefix="")
        status, body = self.client.post(f"{_customer_path(customer_id)}/cards/{card_id}", data=form.pairs)
        return _own_card(parse_resource(body, Card, self.client, status=status), customer_id)

    def delete_card(self, customer_id: str, card_id: str) -> Optional[Deleted]:
        _validate_id("customer_id", customer_id)
        _validate_id("card_id", card_id)
        status, body = self.client.delete(f"{_customer_path(customer_id)}/cards/{card_id}")
        return parse_deleted(body, status=status)

    def list_cards(self, customer_id: str, params: Optional[CardListParams] = None) -> Page[Card]:
        _validate_id("customer_id", customer_id)
        params = _list_params(params, CardListParams)
        status, body = self.client.get(f"{_customer_path(customer_id)}/cards", params=params.to_pairs())
        page = parse_list(body, Card, self.client, status=status)
        for card in page:
            _own_card(card, customer_id)
        return page

    # ----------------------- subscriptions -----------------------

    def retrieve_subscription(self, customer_id: str, subscription_id: str) -> Optional[Subscription]:
        _validate_id("customer_id", customer_id)
        _validate_id("subscription_id", subscription_id)
        status, body = self.client.get(f"{_customer_path(customer_id)}/subscriptions/{subscription_id}")
        return parse_resource(body, Subscription, self.client, status=status)

    def list_subscriptions(
        self, customer_id: str, params: Optional[SubscriptionListParams] = None
    ) -> Page[Subscription]:
        _validate_id("customer_id", customer_id)
        params = _list_params(params, SubscriptionListParams)
        status, body = self.client.get(
            f"{_customer_path(customer_id)}/subscriptions", params=params.to_pairs()
        )
        return parse_list(body, Subscription, self.client, status=status)
