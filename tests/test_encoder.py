"""Tests for form/query encoding."""

from datetime import datetime, timezone

from payjp.encoder import FormBuilder, encode_form, encode_query, encode_value
from payjp.models import CardDetails


def test_absent_values_are_omitted():
    assert encode_form([("description", "test"), ("email", None), ("id", "")]) == "description=test"


def test_empty_input_gives_empty_string():
    assert encode_form([]) == ""
    assert encode_query([]) == ""
    assert encode_query([("limit", None)]) == ""


def test_zero_and_false_are_kept():
    assert encode_form([("amount", 0), ("capture", False), ("prorate", True)]) == (
        "amount=0&capture=false&prorate=true"
    )


def test_values_are_percent_encoded_and_brackets_kept():
    body = encode_form([("description", "a b&c=d")], metadata={"order id": "日本"})
    assert body == "description=a+b%26c%3Dd&metadata[order+id]=%E6%97%A5%E6%9C%AC"


def test_metadata_expands_in_insertion_order():
    body = encode_form([], metadata={"a": "1", "b": 2, "skip": None})
    assert body == "metadata[a]=1&metadata[b]=2"


def test_datetime_encodes_as_epoch():
    when = datetime(2015, 6, 1, tzinfo=timezone.utc)
    assert encode_value(when) == "1433116800"


def test_query_prefix():
    assert encode_query([("limit", 10), ("offset", 0)]) == "?limit=10&offset=0"


def test_card_details_expand_with_prefix():
    card = CardDetails(number="4242424242424242", exp_month=2, exp_year=2030, cvc="123", metadata={"k": "v"})
    form = FormBuilder().add_card(card)
    assert form.encode() == (
        "card[number]=4242424242424242&card[exp_month]=2&card[exp_year]=2030"
        "&card[cvc]=123&metadata[k]=v"
    )


def test_card_fields_flat_without_prefix():
    form = FormBuilder().add_card({"name": "PAY TARO", "exp_year": 2031}, prefix="")
    assert form.pairs == [("exp_year", "2031"), ("name", "PAY TARO")]


def test_builder_is_falsy_when_empty():
    assert not FormBuilder([("x", None)])
    assert FormBuilder([("x", 1)])
