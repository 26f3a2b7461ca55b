"""Tests for customers, customer cards and customer subscriptions."""

import pytest

from payjp import CardDetails, CustomerListParams, PayjpAPIError, PayjpSDKError, PayjpValidationError
from payjp.models import Card

import payloads


def test_create_sends_only_set_fields(client, transport):
    transport.responses = [(200, payloads.CUSTOMER)]

    customer = client.customers.create(description="test")

    assert transport.method == "POST"
    assert transport.url == "https://api.pay.jp/v1/customers"
    assert transport.form == "description=test"
    assert customer.id == "cus_121673955bd7aa144de5a8f6c262"
    assert customer.description == "test"
    assert customer.email is None
    assert len(customer.cards) == 1
    assert customer.cards[0].id == "car_f7d9fa98594dc7c2e42bfcd641ff"
    assert customer.subscriptions[0].id == "sub_response1"


def test_create_with_token_and_metadata(client, transport):
    transport.responses = [(200, payloads.CUSTOMER)]
    client.customers.create(email="a@example.com", card="tok_xxx", metadata={"plan": "gold"})

    assert transport.form == "email=a%40example.com&card=tok_xxx&metadata[plan]=gold"


def test_create_with_card_details(client, transport):
    transport.responses = [(200, payloads.CUSTOMER)]
    client.customers.create(card=CardDetails(number="4242424242424242", exp_month=2, exp_year=2030))

    assert transport.form == "card[number]=4242424242424242&card[exp_month]=2&card[exp_year]=2030"


def test_create_error(client, transport):
    transport.responses = [(400, payloads.ERROR)]
    with pytest.raises(PayjpAPIError) as exc:
        client.customers.create(description="test")
    assert str(exc.value) == payloads.ERROR_STR


def test_retrieve(client, transport):
    transport.responses = [(200, payloads.CUSTOMER)]
    customer = client.customers.retrieve("cus_121673955bd7aa144de5a8f6c262")

    assert transport.method == "GET"
    assert transport.url == "https://api.pay.jp/v1/customers/cus_121673955bd7aa144de5a8f6c262"
    assert customer.created == 1433127983


def test_empty_id_is_rejected_before_network(client, transport):
    with pytest.raises(PayjpValidationError):
        client.customers.retrieve("")
    assert transport.calls == 0


def test_update_instance_overwrites_fields(client, transport):
    updated = dict(payloads.CUSTOMER, email="new@example.com")
    transport.responses = [(200, payloads.CUSTOMER), (200, updated)]

    customer = client.customers.retrieve("cus_121673955bd7aa144de5a8f6c262")
    result = customer.update(email="new@example.com", default_card="car_xxx")

    assert result is customer
    assert customer.email == "new@example.com"
    assert transport.url == "https://api.pay.jp/v1/customers/cus_121673955bd7aa144de5a8f6c262"
    assert transport.form == "email=new%40example.com&default_card=car_xxx"


def test_delete(client, transport):
    transport.responses = [(200, payloads.DELETED)]
    deleted = client.customers.delete("cus_xxx")

    assert transport.method == "DELETE"
    assert transport.url == "https://api.pay.jp/v1/customers/cus_xxx"
    assert deleted.deleted is True


def test_list(client, transport):
    transport.responses = [(200, payloads.listing([payloads.CUSTOMER], has_more=True))]

    page = client.customers.list(CustomerListParams(limit=10, offset=15))

    assert transport.url == "https://api.pay.jp/v1/customers?limit=10&offset=15"
    assert page.has_more is True
    assert [c.id for c in page] == ["cus_121673955bd7aa144de5a8f6c262"]


def test_list_without_params_has_no_query(client, transport):
    transport.responses = [(200, payloads.listing([]))]
    client.customers.list()
    assert transport.url == "https://api.pay.jp/v1/customers"


def test_list_limit_out_of_range_makes_no_call(client, transport):
    with pytest.raises(PayjpValidationError):
        client.customers.list(CustomerListParams(limit=101))
    assert transport.calls == 0


# ----------------------- cards -----------------------

def test_add_card_token(client, transport):
    transport.responses = [(200, payloads.CARD)]

    card = client.customers.add_card("cus_xxx", "tok_xxx", default=True)

    assert transport.url == "https://api.pay.jp/v1/customers/cus_xxx/cards"
    assert transport.form == "card=tok_xxx&default=true"
    assert card.customer == "cus_xxx"


def test_update_card_sends_flat_fields(client, transport):
    transport.responses = [(200, dict(payloads.CARD, name="PAY TARO"))]

    card = client.customers.update_card("cus_xxx", "car_xxx", name="PAY TARO", exp_year=2031)

    assert transport.url == "https://api.pay.jp/v1/customers/cus_xxx/cards/car_xxx"
    assert transport.form == "exp_year=2031&name=PAY+TARO"
    assert card.name == "PAY TARO"


def test_card_instance_methods_use_owner(client, transport):
    transport.responses = [(200, payloads.CUSTOMER), (200, dict(payloads.CARD, name="X")), (200, payloads.DELETED)]
    customer = client.customers.retrieve("cus_121673955bd7aa144de5a8f6c262")
    card = customer.cards[0]

    card.update(name="X")
    assert transport.url == (
        "https://api.pay.jp/v1/customers/cus_121673955bd7aa144de5a8f6c262/cards/car_f7d9fa98594dc7c2e42bfcd641ff"
    )
    assert card.name == "X"

    card.delete()
    assert transport.method == "DELETE"


def test_card_without_customer_cannot_update(client):
    card = Card.model_validate(payloads.CARD).attach(client)
    with pytest.raises(PayjpSDKError):
        card.update(name="X")


def test_list_cards(client, transport):
    transport.responses = [(200, payloads.listing([payloads.CARD], has_more=True))]

    page = client.customers.list_cards("cus_xxx")

    assert transport.url == "https://api.pay.jp/v1/customers/cus_xxx/cards"
    assert page.has_more is True
    assert page[0].customer == "cus_xxx"


def test_delete_card(client, transport):
    transport.responses = [(200, payloads.DELETED)]
    client.customers.delete_card("cus_xxx", "car_xxx")
    assert transport.url == "https://api.pay.jp/v1/customers/cus_xxx/cards/car_xxx"
    assert transport.method == "DELETE"


# ----------------------- subscriptions -----------------------

def test_retrieve_subscription_uses_customer_path(client, transport):
    transport.responses = [(200, payloads.SUBSCRIPTION)]
    sub = client.customers.retrieve_subscription("cus_xxx", "sub_response1")

    assert transport.url == "https://api.pay.jp/v1/customers/cus_xxx/subscriptions/sub_response1"
    assert sub.status == "active"


def test_list_subscriptions_from_instance(client, transport):
    transport.responses = [(200, payloads.CUSTOMER), (200, payloads.listing([payloads.SUBSCRIPTION]))]
    customer = client.customers.retrieve("cus_121673955bd7aa144de5a8f6c262")

    page = customer.list_subscriptions()

    assert transport.url == "https://api.pay.jp/v1/customers/cus_121673955bd7aa144de5a8f6c262/subscriptions"
    assert [s.plan.amount for s in page] == [500]
