"""Tests for the decode-then-dispatch parser and derived fields."""

import json
from datetime import datetime, timezone

import pytest

from payjp.errors import PayjpAPIError, PayjpDecodeError
from payjp.models import EPOCH, Balance, Card, Customer, Deleted, Plan, Subscription, derived_name
from payjp.parser import Page, parse_deleted, parse_list, parse_payload, parse_resource

import payloads
from conftest import error_body


def test_matching_object_parses_and_derives_created():
    card = parse_resource(json.dumps(payloads.CARD), Card)

    assert card.id == "car_f7d9fa98594dc7c2e42bfcd641ff"
    assert card.created == 1433127983
    assert card.created_at == datetime(2015, 6, 1, 3, 6, 23, tzinfo=timezone.utc)
    assert card.address_zip_check == "unchecked"
    assert card.metadata == {}


def test_absent_or_null_epoch_derives_epoch_zero():
    data = dict(payloads.PLAN)
    data.pop("created")
    plan = parse_payload(data, Plan)
    assert plan.created is None
    assert plan.created_at == EPOCH

    sub = parse_payload(payloads.SUBSCRIPTION, Subscription)
    assert sub.canceled_at is None
    assert sub.canceled_time == EPOCH
    assert sub.trial_end_at == EPOCH
    assert sub.current_period_end_at.timestamp() == 1435732422


def test_error_envelope_raises_api_error():
    with pytest.raises(PayjpAPIError) as exc:
        parse_resource(json.dumps(payloads.ERROR).encode(), Card)

    err = exc.value
    assert str(err) == payloads.ERROR_STR
    assert (err.status, err.type, err.code, err.message, err.param) == (400, "type", "code", "message", "param")


def test_error_string_without_param():
    with pytest.raises(PayjpAPIError) as exc:
        parse_resource(json.dumps(payloads.RATE_LIMITED), Card)
    assert str(exc.value) == (
        "429: Type: client_error Code: over_capacity "
        "Message: The service is over capacity. Please try again later."
    )
    assert exc.value.retryable


def test_non_matching_payload_is_tolerated():
    assert parse_resource(json.dumps({"object": "plan", "id": "pln_x"}), Card) is None
    # string status collides with nothing: not an error envelope
    assert parse_payload({"status": "active"}, Card) is None
    assert parse_payload({"error": {"status": 0}}, Card) is None


def test_invalid_json_raises_decode_error():
    with pytest.raises(PayjpDecodeError) as exc:
        parse_resource(b"<html>bad gateway</html>", Card, status=502)
    assert exc.value.status == 502
    assert "bad gateway" in exc.value.body_preview


def test_non_object_json_raises_decode_error():
    with pytest.raises(PayjpDecodeError):
        parse_resource("[1, 2]", Card)


def test_matching_object_with_bad_fields_raises_decode_error():
    with pytest.raises(PayjpDecodeError):
        parse_payload({"object": "card", "exp_month": "not-a-number"}, Card)


@pytest.mark.parametrize("created", [10**20, -(10**20), "2015-13-45"])
def test_out_of_range_epoch_raises_decode_error(created):
    with pytest.raises(PayjpDecodeError):
        parse_payload(dict(payloads.CARD, created=created), Card)


def test_api_error_is_not_decode_error():
    with pytest.raises(PayjpAPIError) as exc:
        parse_resource(json.dumps(payloads.ERROR), Card)
    assert not isinstance(exc.value, PayjpDecodeError)


def test_list_preserves_order_and_has_more():
    first = dict(payloads.CARD, id="car_1")
    second = dict(payloads.CARD, id="car_2")
    page = parse_list(json.dumps(payloads.listing([first, second], has_more=True)), Card)

    assert isinstance(page, Page)
    assert [c.id for c in page] == ["car_1", "car_2"]
    assert len(page) == 2
    assert page.has_more is True
    assert page.count == 2


def test_list_keeps_a_slot_for_non_matching_items():
    items = [dict(payloads.CARD, id="car_1"), {"id": "car_2"}, dict(payloads.CARD, id="car_3")]
    page = parse_list(json.dumps(payloads.listing(items, has_more=True)), Card, "client")

    assert len(page) == 3
    assert [c.id for c in page] == ["car_1", "", "car_3"]
    assert isinstance(page[1], Card)
    assert page[1]._client is None
    assert page[1].created_at == EPOCH
    assert page[2]._client == "client"


def test_list_item_error_envelope_does_not_abort_page():
    items = [dict(payloads.CARD, id="car_1"), error_body(400, type="t", code="c", message="m"), "garbage"]
    page = parse_list(json.dumps(payloads.listing(items)), Card)

    assert len(page) == 3
    assert page[0].id == "car_1"
    assert isinstance(page[1], Card) and page[1].id == ""
    assert isinstance(page[2], Card) and page[2].id == ""


def test_empty_list():
    page = parse_list(json.dumps(payloads.listing([])), Card)
    assert page.data == []
    assert page.has_more is False


def test_list_error_envelope_raises():
    with pytest.raises(PayjpAPIError):
        parse_list(json.dumps(payloads.ERROR), Card)


def test_nested_lists_are_materialized_with_client():
    marker = object()
    customer = parse_payload(payloads.CUSTOMER, Customer, marker)

    assert [c.id for c in customer.cards] == ["car_f7d9fa98594dc7c2e42bfcd641ff"]
    assert [s.id for s in customer.subscriptions] == ["sub_response1"]
    assert customer.subscriptions[0].plan.id == "pln_req833f8a3e1c74d4b6e1bfce9a0"
    # one back-reference everywhere, never copied
    assert customer._client is marker
    assert customer.cards[0]._client is marker
    assert customer.subscriptions[0]._client is marker
    assert customer.subscriptions[0].plan._client is marker


def test_balance_with_null_bank_info_and_due_date():
    balance = parse_payload(payloads.balance(), Balance)

    assert balance.id == "ba_xxx"
    assert balance.net == 1000
    assert balance.bank_info is None
    assert balance.due_date is None
    assert balance.due_date_at == EPOCH
    assert balance.statements[0].id == "st_xxx"
    assert balance.type == "collecting"
    assert balance.closed is False


def test_balance_with_bank_info_and_due_date():
    balance = parse_payload(payloads.balance(payloads.BANK_INFO, 1711897200), Balance)

    assert balance.due_date == 1711897200
    assert int(balance.due_date_at.timestamp()) == 1711897200
    assert balance.bank_info.bank_code == "0001"
    assert balance.bank_info.bank_account_holder_name == "ペイ　タロウ"


def test_parse_deleted():
    deleted = parse_deleted(json.dumps(payloads.DELETED))
    assert isinstance(deleted, Deleted)
    assert deleted.deleted is True
    assert deleted.id == "xxx"

    with pytest.raises(PayjpAPIError):
        parse_deleted(json.dumps(payloads.ERROR))


def test_unknown_fields_are_kept():
    card = parse_payload(dict(payloads.CARD, brand_new_field="x"), Card)
    assert card.brand_new_field == "x"


def test_derived_name_rule():
    assert derived_name("created") == "created_at"
    assert derived_name("captured_at") == "captured_time"
