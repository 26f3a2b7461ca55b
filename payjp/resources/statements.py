from __future__ import annotations

from typing import Optional

from ..client import PayjpClient
from ..models import Statement, StatementUrl
from ..params import StatementListParams
from ..parser import Page, parse_list, parse_resource
from ._common import _list_params, _validate_id


def _statements_base() -> str:
    return "/statements"


class StatementsAPI:
    def __init__(self, client: PayjpClient):
        self.client = client

    def retrieve(self, statement_id: str) -> Optional[Statement]:
        _validate_id("statement_id", statement_id)
        status, body = self.client.get(f"{_statements_base()}/{statement_id}")
        return parse_resource(body, Statement, self.client, status=status)

    def list(self, params: Optional[StatementListParams] = None) -> Page[Statement]:
        params = _list_params(params, StatementListParams)
        status, body = self.client.get(_statements_base(), params=params.to_pairs())
        return parse_list(body, Statement, self.client, status=status)

    def statement_urls(self, statement_id: str, *, platformer: Optional[bool] = None) -> Optional[StatementUrl]:
        """Issue a short-lived download URL for the statement PDF."""
        _validate_id("statement_id", statement_id)
        status, body = self.client.post(
            f"{_statements_base()}/{statement_id}/statement_urls", data=[("platformer", platformer)]
        )
        return parse_resource(body, StatementUrl, self.client, status=status)
