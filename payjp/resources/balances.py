from __future__ import annotations

from typing import Optional

from ..client import PayjpClient
from ..models import Balance, StatementUrl
from ..params import BalanceListParams
from ..parser import Page, parse_list, parse_resource
from ._common import _list_params, _validate_id


def _balances_base() -> str:
    return "/balances"


class BalancesAPI:
    """
    Balances group the statements of one settlement period.
    ``bank_info`` and ``due_date`` stay null until the balance is scheduled.
    """

    def __init__(self, client: PayjpClient):
        self.client = client

    def retrieve(self, balance_id: str) -> Optional[Balance]:
        _validate_id("balance_id", balance_id)
        status, body = self.client.get(f"{_balances_base()}/{balance_id}")
        return parse_resource(body, Balance, self.client, status=status)

    def list(self, params: Optional[BalanceListParams] = None) -> Page[Balance]:
        params = _list_params(params, BalanceListParams)
        status, body = self.client.get(_balances_base(), params=params.to_pairs())
        return parse_list(body, Balance, self.client, status=status)

    def statement_urls(self, balance_id: str, *, platformer: Optional[bool] = None) -> Optional[StatementUrl]:
        _validate_id("balance_id", balance_id)
        status, body = self.client.post(
            f"{_balances_base()}/{balance_id}/statement_urls", data=[("platformer", platformer)]
        )
        return parse_resource(body, StatementUrl, self.client, status=status)
