"""
PAY.JP Python SDK

Sync client for the PAY.JP REST API (https://api.pay.jp/v1):
- Customers & cards, charges (capture/refund), plans, subscriptions
- Tokens, account, transfers, statements, balances, terms
- 3-D Secure requests, events
- Retry with equal-jitter backoff for 429/5xx and network errors
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------
__version__ = "0.1.0"

# ---------------------------------------------------------------------------
# Public API re-exports
# ---------------------------------------------------------------------------
from .config import PayjpConfig
from .client import PayjpClient
from .errors import (
    PayjpSDKError,
    PayjpConfigError,
    PayjpValidationError,
    PayjpTransportError,
    PayjpDecodeError,
    PayjpAPIError,
)
from .log import LoggerInterface, NullLogger, get_logger
from .debug import is_enabled as debug_enabled, set_debug as set_debug_enabled
from .params import (
    ListParams,
    CustomerListParams,
    CardListParams,
    PlanListParams,
    ChargeListParams,
    SubscriptionListParams,
    TransferListParams,
    TransferChargeListParams,
    EventListParams,
    StatementListParams,
    BalanceListParams,
    TermListParams,
    ThreeDSecureRequestListParams,
)
from .parser import Page
from .models import (
    CardDetails,
    Card,
    Customer,
    Charge,
    Plan,
    Subscription,
    Token,
    Account,
    Merchant,
    Transfer,
    Statement,
    StatementUrl,
    Balance,
    Term,
    ThreeDSecureRequest,
    Event,
    Deleted,
)

__all__ = [
    "__version__",
    # Core
    "PayjpConfig",
    "PayjpClient",
    # Errors
    "PayjpSDKError",
    "PayjpConfigError",
    "PayjpValidationError",
    "PayjpTransportError",
    "PayjpDecodeError",
    "PayjpAPIError",
    # Logging
    "LoggerInterface",
    "NullLogger",
    "get_logger",
    "debug_enabled",
    "set_debug_enabled",
    # List parameters
    "ListParams",
    "CustomerListParams",
    "CardListParams",
    "PlanListParams",
    "ChargeListParams",
    "SubscriptionListParams",
    "TransferListParams",
    "TransferChargeListParams",
    "EventListParams",
    "StatementListParams",
    "BalanceListParams",
    "TermListParams",
    "ThreeDSecureRequestListParams",
    "Page",
    # Models
    "CardDetails",
    "Card",
    "Customer",
    "Charge",
    "Plan",
    "Subscription",
    "Token",
    "Account",
    "Merchant",
    "Transfer",
    "Statement",
    "StatementUrl",
    "Balance",
    "Term",
    "ThreeDSecureRequest",
    "Event",
    "Deleted",
]
