from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Union

from ..client import PayjpClient
from ..models import Deleted, Subscription
from ..params import SubscriptionListParams, to_epoch
from ..parser import Page, parse_deleted, parse_list, parse_resource
from ._common import _list_params, _raise_if, _validate_id

TrialEnd = Union[int, datetime, None]


def _subscriptions_base() -> str:
    return "/subscriptions"


def _subscription_path(subscription_id: str) -> str:
    return f"{_subscriptions_base()}/{subscription_id}"


def _trial_end_value(trial_end: TrialEnd, skip_trial: bool, errors: List[str]) -> Optional[Union[int, str]]:
    # skip_trial sends trial_end=now, which ends any trial immediately
    if skip_trial and trial_end is not None:
        errors.append("trial_end and skip_trial are exclusive.")
        return None
    if skip_trial:
        return "now"
    return to_epoch(trial_end)


class SubscriptionsAPI:
    """
    Subscriptions bind a customer to a plan.

    Lifecycle: ``pause`` stops billing, ``resume`` restarts it (optionally
    with a new trial), ``cancel`` ends it at the current period, ``delete``
    removes it immediately.
    """

    def __init__(self, client: PayjpClient):
        self.client = client

    def create(
        self,
        customer: str,
        plan: str,
        *,
        trial_end: TrialEnd = None,
        skip_trial: bool = False,
        prorate: Optional[bool] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[Subscription]:
        errors: List[str] = []
        if not customer:
            errors.append("customer is required.")
        if not plan:
            errors.append("plan is required.")
        trial = _trial_end_value(trial_end, skip_trial, errors)
        _raise_if(errors, "Subscription.create()")

        pairs: List[Tuple[str, Any]] = [
            ("customer", customer),
            ("plan", plan),
            ("trial_end", trial),
            ("prorate", prorate),
        ]
        status, body = self.client.post(_subscriptions_base(), data=pairs, metadata=metadata)
        return parse_resource(body, Subscription, self.client, status=status)

    def retrieve(self, subscription_id: str) -> Optional[Subscription]:
        _validate_id("subscription_id", subscription_id)
        status, body = self.client.get(_subscription_path(subscription_id))
        return parse_resource(body, Subscription, self.client, status=status)

    def update(
        self,
        subscription_id: str,
        *,
        plan: Optional[str] = None,
        next_cycle_plan: Optional[str] = None,
        trial_end: TrialEnd = None,
        skip_trial: bool = False,
        prorate: Optional[bool] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[Subscription]:
        _validate_id("subscription_id", subscription_id)
        errors: List[str] = []
        trial = _trial_end_value(trial_end, skip_trial, errors)
        _raise_if(errors, "Subscription.update()")

        pairs: List[Tuple[str, Any]] = [
            ("next_cycle_plan", next_cycle_plan),
            ("plan", plan),
            ("trial_end", trial),
            ("prorate", prorate),
        ]
        status, body = self.client.post(_subscription_path(subscription_id), data=pairs, metadata=metadata)
        return parse_resource(body, Subscription, self.client, status=status)

    def pause(self, subscription_id: str) -> Optional[Subscription]:
        _validate_id("subscription_id", subscription_id)
        status, body = self.client.post(f"{_subscription_path(subscription_id)}/pause")
        return parse_resource(body, Subscription, self.client, status=status)

    def resume(
        self,
        subscription_id: str,
        *,
        trial_end: TrialEnd = None,
        skip_trial: bool = False,
        prorate: Optional[bool] = None,
    ) -> Optional[Subscription]:
        _validate_id("subscription_id", subscription_id)
        errors: List[str] = []
        trial = _trial_end_value(trial_end, skip_trial, errors)
        _raise_if(errors, "Subscription.resume()")
        status, body = self.client.post(
            f"{_subscription_path(subscription_id)}/resume", data=[("trial_end", trial), ("prorate", prorate)]
        )
        return parse_resource(body, Subscription, self.client, status=status)

    def cancel(self, subscription_id: str) -> Optional[Subscription]:
        _validate_id("subscription_id", subscription_id)
        status, body = self.client.post(f"{_subscription_path(subscription_id)}/cancel")
        return parse_resource(body, Subscription, self.client, status=status)

    def delete(self, subscription_id: str) -> Optional[Deleted]:
        _validate_id("subscription_id", subscription_id)
        status, body = self.client.delete(_subscription_path(subscription_id))
        return parse_deleted(body, status=status)

    def list(self, params: Optional[SubscriptionListParams] = None) -> Page[Subscription]:
        params = _list_params(params, SubscriptionListParams)
        status, body = self.client.get(_subscriptions_base(), params=params.to_pairs())
        return parse_list(body, Subscription, self.client, status=status)
