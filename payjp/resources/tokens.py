from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from ..client import PayjpClient
from ..encoder import FormBuilder
from ..models import CardDetails, Token
from ..parser import parse_resource
from ._common import _raise_if, _validate_id


def _tokens_base() -> str:
    return "/tokens"


def _validate_card(card: CardDetails) -> None:
    errors: List[str] = []
    if not card.number:
        errors.append("number is required")
    if card.exp_month is None or not (1 <= card.exp_month <= 12):
        errors.append(f"exp_month should be between 1 and 12, but {card.exp_month}")
    if card.exp_year is None or card.exp_year <= 0:
        errors.append("exp_year is required")
    _raise_if(errors, "Token.create()")


class TokensAPI:
    """
    Card tokens.

    Tokens are normally created in the browser with payjp.js; creating them
    server-side needs raw card data and is mostly useful in test mode.
    """

    def __init__(self, client: PayjpClient):
        self.client = client

    def create(
        self, card: Union[CardDetails, Dict[str, Any]], *, idempotency_key: Optional[str] = None
    ) -> Optional[Token]:
        if isinstance(card, dict):
            card = CardDetails(**card)
        _validate_card(card)
        form = FormBuilder().add_card(card)
        status, body = self.client.post(_tokens_base(), data=form.pairs, idempotency_key=idempotency_key)
        return parse_resource(body, Token, self.client, status=status)

    def retrieve(self, token_id: str) -> Optional[Token]:
        _validate_id("token_id", token_id)
        status, body = self.client.get(f"{_tokens_base()}/{token_id}")
        return parse_resource(body, Token, self.client, status=status)
