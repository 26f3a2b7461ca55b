from __future__ import annotations

from typing import Optional

from ..client import PayjpClient
from ..models import Term
from ..params import TermListParams
from ..parser import Page, parse_list, parse_resource
from ._common import _list_params, _validate_id


class TermsAPI:
    def __init__(self, client: PayjpClient):
        self.client = client

    def retrieve(self, term_id: str) -> Optional[Term]:
        _validate_id("term_id", term_id)
        status, body = self.client.get(f"/terms/{term_id}")
        return parse_resource(body, Term, self.client, status=status)

    def list(self, params: Optional[TermListParams] = None) -> Page[Term]:
        params = _list_params(params, TermListParams)
        status, body = self.client.get("/terms", params=params.to_pairs())
        return parse_list(body, Term, self.client, status=status)
