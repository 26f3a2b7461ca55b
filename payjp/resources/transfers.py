from __future__ import annotations

from typing import Optional

from ..client import PayjpClient
from ..models import Charge, Transfer
from ..params import TransferChargeListParams, TransferListParams
from ..parser import Page, parse_list, parse_resource
from ._common import _list_params, _validate_id


def _transfers_base() -> str:
    return "/transfers"


class TransfersAPI:
    """Payouts from PAY.JP to the merchant's bank account (read-only)."""

    def __init__(self, client: PayjpClient):
        self.client = client

    def retrieve(self, transfer_id: str) -> Optional[Transfer]:
        _validate_id("transfer_id", transfer_id)
        status, body = self.client.get(f"{_transfers_base()}/{transfer_id}")
        return parse_resource(body, Transfer, self.client, status=status)

    def list(self, params: Optional[TransferListParams] = None) -> Page[Transfer]:
        params = _list_params(params, TransferListParams)
        status, body = self.client.get(_transfers_base(), params=params.to_pairs())
        return parse_list(body, Transfer, self.client, status=status)

    def list_charges(
        self, transfer_id: str, params: Optional[TransferChargeListParams] = None
    ) -> Page[Charge]:
        """Charges settled by a transfer."""
        _validate_id("transfer_id", transfer_id)
        params = _list_params(params, TransferChargeListParams)
        status, body = self.client.get(f"{_transfers_base()}/{transfer_id}/charges", params=params.to_pairs())
        return parse_list(body, Charge, self.client, status=status)
