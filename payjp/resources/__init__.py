"""
Resource APIs for the PAY.JP SDK.

Each class wraps one endpoint family and is attached to ``PayjpClient``
under a snake_case attribute (``client.three_d_secure_requests`` ...).
"""

from __future__ import annotations

from .accounts import AccountsAPI
from .balances import BalancesAPI
from .charges import ChargesAPI
from .customers import CustomersAPI
from .events import EventsAPI
from .plans import PlansAPI
from .statements import StatementsAPI
from .subscriptions import SubscriptionsAPI
from .terms import TermsAPI
from .three_d_secure_requests import ThreeDSecureRequestsAPI
from .tokens import TokensAPI
from .transfers import TransfersAPI

__all__ = (
    "AccountsAPI",
    "BalancesAPI",
    "ChargesAPI",
    "CustomersAPI",
    "EventsAPI",
    "PlansAPI",
    "StatementsAPI",
    "SubscriptionsAPI",
    "TermsAPI",
    "ThreeDSecureRequestsAPI",
    "TokensAPI",
    "TransfersAPI",
)
