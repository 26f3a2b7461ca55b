"""Tests for immutable list parameters."""

import dataclasses
import time
from datetime import datetime, timezone

import pytest

from payjp.encoder import encode_value
from payjp.errors import PayjpValidationError
from payjp.params import BalanceListParams, ChargeListParams, ListParams, SubscriptionListParams, TransferListParams


@pytest.mark.parametrize("limit", [0, 101, -1])
def test_limit_out_of_range(limit):
    with pytest.raises(PayjpValidationError) as exc:
        ListParams(limit=limit)
    assert "limit should be between 1 and 100" in str(exc.value)


@pytest.mark.parametrize("limit", [1, 100])
def test_limit_bounds_inclusive(limit):
    assert ListParams(limit=limit).limit == limit


def test_negative_offset():
    with pytest.raises(PayjpValidationError):
        ListParams(offset=-1)


def test_params_are_frozen():
    params = ListParams(limit=10)
    with pytest.raises(dataclasses.FrozenInstanceError):
        params.limit = 20


def test_unset_fields_serialize_as_none():
    pairs = ChargeListParams(limit=10, customer="cus_xxx").to_pairs()
    assert pairs == [
        ("limit", 10),
        ("offset", None),
        ("since", None),
        ("until", None),
        ("customer", "cus_xxx"),
        ("subscription", None),
        ("tenant", None),
    ]


def test_datetimes_become_epochs():
    since = datetime(2015, 6, 1, tzinfo=timezone.utc)
    pairs = dict(BalanceListParams(since=since, since_due_date=since, closed=False).to_pairs())
    assert pairs["since"] == 1433116800
    assert pairs["since_due_date"] == 1433116800
    assert pairs["closed"] is False


def test_status_filters_are_checked():
    with pytest.raises(PayjpValidationError):
        SubscriptionListParams(status="bogus")
    with pytest.raises(PayjpValidationError):
        TransferListParams(status="done")
    assert SubscriptionListParams(status="paused").status == "paused"
    assert TransferListParams(status="recombination").status == "recombination"


def test_all_errors_are_reported_together():
    with pytest.raises(PayjpValidationError) as exc:
        SubscriptionListParams(limit=0, offset=-5, status="bogus")
    assert len(exc.value.errors) == 3


@pytest.fixture
def tokyo_tz(monkeypatch):
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset() is unavailable")
    monkeypatch.setenv("TZ", "Asia/Tokyo")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


def test_naive_datetimes_are_read_as_utc(tokyo_tz):
    pairs = dict(ListParams(since=datetime(2015, 6, 1), until=datetime(2015, 6, 1, 9)).to_pairs())
    assert pairs["since"] == 1433116800
    assert pairs["until"] == 1433116800 + 9 * 3600
    assert encode_value(datetime(2015, 6, 1)) == "1433116800"
