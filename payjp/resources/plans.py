from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..client import PayjpClient
from ..encoder import FormBuilder
from ..models import Deleted, Plan
from ..params import PlanListParams
from ..parser import Page, parse_deleted, parse_list, parse_resource
from ._common import _check_amount, _check_currency, _list_params, _raise_if, _validate_id

SUPPORTED_INTERVAL = "month"


def _plans_base() -> str:
    return "/plans"


class PlansAPI:
    """
    Recurring billing plans.

    ``billing_day`` (1-31) fixes the day of month subscriptions are charged;
    leave it unset to bill on the subscription's start date.
    """

    def __init__(self, client: PayjpClient):
        self.client = client

    def create(
        self,
        amount: int,
        *,
        currency: Optional[str] = None,
        interval: Optional[str] = None,
        id: Optional[str] = None,
        name: Optional[str] = None,
        trial_days: Optional[int] = None,
        billing_day: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[Plan]:
        errors: List[str] = []
        _check_amount(amount, errors)
        currency = _check_currency(currency, errors)
        interval = interval or SUPPORTED_INTERVAL
        if interval != SUPPORTED_INTERVAL:
            errors.append(f"only supports {SUPPORTED_INTERVAL!r} as interval, but {interval!r}.")
        if billing_day is not None and not (1 <= billing_day <= 31):
            errors.append(f"billing_day should be between 1 and 31, but {billing_day}.")
        _raise_if(errors, "Plan.create()")

        form = FormBuilder(
            [
                ("amount", amount),
                ("currency", currency),
                ("interval", interval),
                ("id", id),
                ("name", name),
                ("trial_days", trial_days),
                ("billing_day", billing_day),
            ]
        ).add_metadata(metadata)
        status, body = self.client.post(_plans_base(), data=form.pairs)
        return parse_resource(body, Plan, self.client, status=status)

    def retrieve(self, plan_id: str) -> Optional[Plan]:
        _validate_id("plan_id", plan_id)
        status, body = self.client.get(f"{_plans_base()}/{plan_id}")
        return parse_resource(body, Plan, self.client, status=status)

    def update(
        self,
        plan_id: str,
        *,
        name: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[Plan]:
        _validate_id("plan_id", plan_id)
        status, body = self.client.post(f"{_plans_base()}/{plan_id}", data=[("name", name)], metadata=metadata)
        return parse_resource(body, Plan, self.client, status=status)

    def delete(self, plan_id: str) -> Optional[Deleted]:
        _validate_id("plan_id", plan_id)
        status, body = self.client.delete(f"{_plans_base()}/{plan_id}")
        return parse_deleted(body, status=status)

    def list(self, params: Optional[PlanListParams] = None) -> Page[Plan]:
        params = _list_params(params, PlanListParams)
        status, body = self.client.get(_plans_base(), params=params.to_pairs())
        return parse_list(body, Plan, self.client, status=status)
