from __future__ import annotations

from typing import Optional

from ..client import PayjpClient
from ..models import Account
from ..parser import parse_resource


class AccountsAPI:
    """The account owning the API key, with its merchant details."""

    def __init__(self, client: PayjpClient):
        self.client = client

    def retrieve(self) -> Optional[Account]:
        status, body = self.client.get("/accounts")
        return parse_resource(body, Account, self.client, status=status)
