from __future__ import annotations

from typing import Optional

from ..client import PayjpClient
from ..models import ThreeDSecureRequest
from ..params import ThreeDSecureRequestListParams
from ..parser import Page, parse_list, parse_resource
from ._common import _list_params, _validate_id


def _three_d_secure_base() -> str:
    return "/three_d_secure_requests"


class ThreeDSecureRequestsAPI:
    """
    3-D Secure requests for customer cards.

    ``create`` starts authentication for a card (``resource_id`` is the card
    id); the cardholder then completes it in the browser.
    """

    def __init__(self, client: PayjpClient):
        self.client = client

    def create(self, resource_id: str, *, tenant_id: Optional[str] = None) -> Optional[ThreeDSecureRequest]:
        _validate_id("resource_id", resource_id)
        status, body = self.client.post(
            _three_d_secure_base(), data=[("resource_id", resource_id), ("tenant_id", tenant_id)]
        )
        return parse_resource(body, ThreeDSecureRequest, self.client, status=status)

    def retrieve(self, request_id: str) -> Optional[ThreeDSecureRequest]:
        _validate_id("request_id", request_id)
        status, body = self.client.get(f"{_three_d_secure_base()}/{request_id}")
        return parse_resource(body, ThreeDSecureRequest, self.client, status=status)

    def list(self, params: Optional[ThreeDSecureRequestListParams] = None) -> Page[ThreeDSecureRequest]:
        params = _list_params(params, ThreeDSecureRequestListParams)
        status, body = self.client.get(_three_d_secure_base(), params=params.to_pairs())
        return parse_list(body, ThreeDSecureRequest, self.client, status=status)
