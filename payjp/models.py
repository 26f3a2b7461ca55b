from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationInfo, field_validator, model_validator

from .errors import PayjpSDKError

EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


def from_epoch(value: Any) -> datetime:
    """
    Epoch seconds -> aware UTC datetime. None/absent maps to epoch 0.
    Date strings ("2024-01-31") are read as UTC midnight.
    """
    if value is None or value == "":
        return EPOCH
    try:
        if isinstance(value, str) and not value.lstrip("-").isdigit():
            parsed = datetime.fromisoformat(value)
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
        return datetime.fromtimestamp(int(value), tz=timezone.utc)
    except (OverflowError, OSError, ValueError, TypeError) as e:
        # ValueError so pydantic reports it as a validation error
        raise ValueError(f"invalid timestamp {value!r}: {e}") from e


def derived_name(raw: str) -> str:
    """
    Attribute name of the datetime derived from an epoch field.

    ``created`` -> ``created_at``; fields already ending in ``_at`` swap the
    suffix for ``_time`` (``captured_at`` -> ``captured_time``).
    """
    if raw.endswith("_at"):
        return raw[:-3] + "_time"
    return raw + "_at"


def _client_from(info: ValidationInfo) -> Any:
    return (info.context or {}).get("client")


def _unwrap_list(value: Any) -> Any:
    # Embedded lists arrive as {"object": "list", "data": [...]}
    if isinstance(value, dict) and value.get("object") == "list":
        return value.get("data") or []
    return value


# =============================================================================
# Base models: permissive to avoid breaking on API additions
# =============================================================================
class _APIModel(BaseModel):
    """
    Loose model that accepts extra fields so the SDK doesn't break
    when PAY.JP adds response properties.
    """
    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
    )


class PayjpObject(_APIModel):
    """
    Base for every resource carrying an ``object`` discriminator.

    ``OBJECT`` is the discriminator literal the parser matches against.
    ``EPOCH_FIELDS`` lists the raw epoch fields; each one gets a derived
    UTC datetime attribute named by ``derived_name()``.

    The client handle is a plain back-reference set at parse time; the object
    does not own or close it.
    """

    OBJECT: ClassVar[str] = ""
    EPOCH_FIELDS: ClassVar[Tuple[str, ...]] = ("created",)

    _client: Any = PrivateAttr(default=None)

    object: str = ""
    id: str = ""
    livemode: bool = False
    created: Optional[int] = None
    created_at: datetime = EPOCH

    @model_validator(mode="before")
    @classmethod
    def _derive_timestamps(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for raw in cls.EPOCH_FIELDS:
            data[derived_name(raw)] = from_epoch(data.get(raw))
        # null on a field with a non-null default falls back to that default
        for name, info in cls.model_fields.items():
            if name in data and data[name] is None and info.default is not None:
                del data[name]
        return data

    # -------- client handle --------
    def attach(self, client: Any) -> "PayjpObject":
        self._client = client
        return self

    @property
    def client(self) -> Any:
        if self._client is None:
            raise PayjpSDKError(
                f"{type(self).__name__} {self.id!r} is not bound to a client; "
                "fetch it through PayjpClient to use instance methods."
            )
        return self._client

    def _replace_with(self, fresh: Optional["PayjpObject"]) -> "PayjpObject":
        """Overwrite this object's fields with a freshly fetched copy."""
        if fresh is None:
            return self
        for name in type(self).model_fields:
            setattr(self, name, getattr(fresh, name))
        if fresh.__pydantic_extra__ is not None:
            self.__pydantic_extra__ = dict(fresh.__pydantic_extra__)
        return self


# =============================================================================
# Card input (tokens, charges, customer cards)
# =============================================================================
class CardDetails(BaseModel):
    """
    Raw card details sent as ``card[...]`` form fields.
    Prefer tokens created client-side; this exists for server-side flows/tests.
    """
    model_config = ConfigDict(extra="forbid")

    number: Optional[str] = None
    exp_month: Optional[int] = None
    exp_year: Optional[int] = None
    cvc: Optional[str] = None
    name: Optional[str] = None
    country: Optional[str] = None
    address_zip: Optional[str] = None
    address_state: Optional[str] = None
    address_city: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    def is_complete(self) -> bool:
        return bool(self.number) and (self.exp_month or 0) > 0 and (self.exp_year or 0) > 0

    def to_form(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


# =============================================================================
# Cards
# =============================================================================
class Card(PayjpObject):
    OBJECT: ClassVar[str] = "card"

    name: Optional[str] = None
    last4: str = ""
    exp_month: int = 0
    exp_year: int = 0
    brand: str = ""
    cvc_check: str = ""
    fingerprint: str = ""
    country: Optional[str] = None
    address_zip: Optional[str] = None
    address_zip_check: str = ""
    address_state: Optional[str] = None
    address_city: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    three_d_secure_status: Optional[str] = None
    customer: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    def _owner(self) -> str:
        if not self.customer:
            raise PayjpSDKError(f"Card {self.id!r} does not belong to a customer.")
        return self.customer

    def update(self, **fields: Any) -> "Card":
        return self._replace_with(self.client.customers.update_card(self._owner(), self.id, **fields))

    def delete(self) -> "Deleted":
        return self.client.customers.delete_card(self._owner(), self.id)


# =============================================================================
# Plans
# =============================================================================
class Plan(PayjpObject):
    OBJECT: ClassVar[str] = "plan"

    amount: int = 0
    currency: str = ""
    interval: str = ""
    name: Optional[str] = None
    trial_days: int = 0
    billing_day: Optional[int] = None
    metadata: Optional[Dict[str, Any]] = None

    def update(self, **fields: Any) -> "Plan":
        return self._replace_with(self.client.plans.update(self.id, **fields))

    def delete(self) -> "Deleted":
        return self.client.plans.delete(self.id)


# =============================================================================
# Subscriptions
# =============================================================================
class Subscription(PayjpObject):
    OBJECT: ClassVar[str] = "subscription"
    EPOCH_FIELDS: ClassVar[Tuple[str, ...]] = (
        "created",
        "start",
        "current_period_start",
        "current_period_end",
        "trial_start",
        "trial_end",
        "paused_at",
        "canceled_at",
        "resumed_at",
    )

    customer: str = ""
    plan: Optional[Plan] = None
    next_cycle_plan: Optional[Plan] = None
    status: str = ""
    prorate: bool = False
    start: Optional[int] = None
    current_period_start: Optional[int] = None
    current_period_end: Optional[int] = None
    trial_start: Optional[int] = None
    trial_end: Optional[int] = None
    paused_at: Optional[int] = None
    canceled_at: Optional[int] = None
    resumed_at: Optional[int] = None
    metadata: Optional[Dict[str, Any]] = None

    start_at: datetime = EPOCH
    current_period_start_at: datetime = EPOCH
    current_period_end_at: datetime = EPOCH
    trial_start_at: datetime = EPOCH
    trial_end_at: datetime = EPOCH
    paused_time: datetime = EPOCH
    canceled_time: datetime = EPOCH
    resumed_time: datetime = EPOCH

    @field_validator("plan", "next_cycle_plan", mode="before")
    @classmethod
    def _parse_plan(cls, v: Any, info: ValidationInfo) -> Any:
        from .parser import parse_payload
        if isinstance(v, dict):
            return parse_payload(v, Plan, _client_from(info))
        return v

    def update(self, **fields: Any) -> "Subscription":
        return self._replace_with(self.client.subscriptions.update(self.id, **fields))

    def pause(self) -> "Subscription":
        return self._replace_with(self.client.subscriptions.pause(self.id))

    def resume(self, **fields: Any) -> "Subscription":
        return self._replace_with(self.client.subscriptions.resume(self.id, **fields))

    def cancel(self) -> "Subscription":
        return self._replace_with(self.client.subscriptions.cancel(self.id))

    def delete(self) -> "Deleted":
        return self.client.subscriptions.delete(self.id)


# =============================================================================
# Customers
# =============================================================================
class Customer(PayjpObject):
    OBJECT: ClassVar[str] = "customer"

    email: Optional[str] = None
    description: Optional[str] = None
    default_card: Optional[str] = None
    cards: List[Card] = Field(default_factory=list)
    subscriptions: List[Subscription] = Field(default_factory=list)
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("cards", mode="before")
    @classmethod
    def _parse_cards(cls, v: Any, info: ValidationInfo) -> Any:
        from .parser import parse_items
        if v is None:
            return []
        return parse_items(_unwrap_list(v), Card, _client_from(info))

    @field_validator("subscriptions", mode="before")
    @classmethod
    def _parse_subscriptions(cls, v: Any, info: ValidationInfo) -> Any:
        from .parser import parse_items
        if v is None:
            return []
        return parse_items(_unwrap_list(v), Subscription, _client_from(info))

    @model_validator(mode="after")
    def _own_cards(self) -> "Customer":
        for card in self.cards:
            if not card.customer:
                card.customer = self.id
        return self

    def update(self, **fields: Any) -> "Customer":
        return self._replace_with(self.client.customers.update(self.id, **fields))

    def delete(self) -> "Deleted":
        return self.client.customers.delete(self.id)

    def add_card(self, card: Any = None, **fields: Any) -> Optional[Card]:
        return self.client.customers.add_card(self.id, card, **fields)

    def retrieve_card(self, card_id: str) -> Optional[Card]:
        return self.client.customers.retrieve_card(self.id, card_id)

    def update_card(self, card_id: str, **fields: Any) -> Optional[Card]:
        return self.client.customers.update_card(self.id, card_id, **fields)

    def delete_card(self, card_id: str) -> "Deleted":
        return self.client.customers.delete_card(self.id, card_id)

    def list_cards(self, params: Any = None) -> Any:
        return self.client.customers.list_cards(self.id, params)

    def retrieve_subscription(self, subscription_id: str) -> Optional[Subscription]:
        return self.client.customers.retrieve_subscription(self.id, subscription_id)

    def list_subscriptions(self, params: Any = None) -> Any:
        return self.client.customers.list_subscriptions(self.id, params)


# =============================================================================
# Charges
# =============================================================================
class Charge(PayjpObject):
    OBJECT: ClassVar[str] = "charge"
    EPOCH_FIELDS: ClassVar[Tuple[str, ...]] = ("created", "captured_at", "expired_at")

    amount: int = 0
    amount_refunded: int = 0
    captured: bool = False
    captured_at: Optional[int] = None
    card: Optional[Card] = None
    currency: str = ""
    customer: Optional[str] = None
    description: Optional[str] = None
    expired_at: Optional[int] = None
    failure_code: Optional[str] = None
    failure_message: Optional[str] = None
    paid: bool = False
    refund_reason: Optional[str] = None
    refunded: bool = False
    subscription: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    captured_time: datetime = EPOCH
    expired_time: datetime = EPOCH

    @field_validator("card", mode="before")
    @classmethod
    def _parse_card(cls, v: Any, info: ValidationInfo) -> Any:
        from .parser import parse_payload
        if isinstance(v, dict):
            return parse_payload(v, Card, _client_from(info))
        return v

    def update(self, **fields: Any) -> "Charge":
        return self._replace_with(self.client.charges.update(self.id, **fields))

    def refund(self, **fields: Any) -> "Charge":
        return self._replace_with(self.client.charges.refund(self.id, **fields))

    def capture(self, **fields: Any) -> "Charge":
        return self._replace_with(self.client.charges.capture(self.id, **fields))


# =============================================================================
# Tokens
# =============================================================================
class Token(PayjpObject):
    OBJECT: ClassVar[str] = "token"

    card: Optional[Card] = None
    used: bool = False

    @field_validator("card", mode="before")
    @classmethod
    def _parse_card(cls, v: Any, info: ValidationInfo) -> Any:
        from .parser import parse_payload
        if isinstance(v, dict):
            return parse_payload(v, Card, _client_from(info))
        return v


# =============================================================================
# Accounts
# =============================================================================
class Merchant(PayjpObject):
    OBJECT: ClassVar[str] = "merchant"
    EPOCH_FIELDS: ClassVar[Tuple[str, ...]] = ("created", "livemode_activated_at")

    bank_enabled: bool = False
    brands_accepted: List[str] = Field(default_factory=list)
    business_type: Optional[str] = None
    charge_type: List[str] = Field(default_factory=list)
    contact_phone: Optional[str] = None
    country: Optional[str] = None
    currencies_supported: List[str] = Field(default_factory=list)
    default_currency: str = ""
    details_submitted: bool = False
    livemode_activated_at: Optional[int] = None
    livemode_enabled: bool = False
    product_detail: Optional[str] = None
    product_name: Optional[str] = None
    product_type: List[str] = Field(default_factory=list)
    site_published: Optional[bool] = None
    url: Optional[str] = None

    livemode_activated_time: datetime = EPOCH


class Account(PayjpObject):
    OBJECT: ClassVar[str] = "account"

    email: Optional[str] = None
    merchant: Optional[Merchant] = None
    team_id: Optional[str] = None

    @field_validator("merchant", mode="before")
    @classmethod
    def _parse_merchant(cls, v: Any, info: ValidationInfo) -> Any:
        from .parser import parse_payload
        if isinstance(v, dict):
            return parse_payload(v, Merchant, _client_from(info))
        return v


# =============================================================================
# Transfers
# =============================================================================
class TransferSummary(_APIModel):
    charge_count: int = 0
    charge_fee: int = 0
    charge_gross: int = 0
    net: int = 0
    refund_amount: int = 0
    refund_count: int = 0


class Transfer(PayjpObject):
    OBJECT: ClassVar[str] = "transfer"
    EPOCH_FIELDS: ClassVar[Tuple[str, ...]] = ("created", "term_start", "term_end")

    amount: int = 0
    carried_balance: Optional[int] = None
    charges: List[Charge] = Field(default_factory=list)
    currency: str = ""
    description: Optional[str] = None
    scheduled_date: Optional[str] = None
    status: str = ""
    summary: Optional[TransferSummary] = None
    term_start: Optional[int] = None
    term_end: Optional[int] = None
    transfer_amount: Optional[int] = None
    transfer_date: Optional[str] = None

    term_start_at: datetime = EPOCH
    term_end_at: datetime = EPOCH

    @field_validator("charges", mode="before")
    @classmethod
    def _parse_charges(cls, v: Any, info: ValidationInfo) -> Any:
        from .parser import parse_items
        if v is None:
            return []
        return parse_items(_unwrap_list(v), Charge, _client_from(info))

    def list_charges(self, params: Any = None) -> Any:
        return self.client.transfers.list_charges(self.id, params)


# =============================================================================
# Statements / Balances / Terms
# =============================================================================
class StatementItem(_APIModel):
    amount: int = 0
    name: str = ""
    subject: str = ""
    tax_rate: str = ""


class StatementUrl(PayjpObject):
    """Short-lived download URL for a statement PDF."""
    OBJECT: ClassVar[str] = "statement_url"
    EPOCH_FIELDS: ClassVar[Tuple[str, ...]] = ("expires",)

    url: str = ""
    expires: Optional[int] = None
    expires_at: datetime = EPOCH


class Statement(PayjpObject):
    OBJECT: ClassVar[str] = "statement"
    EPOCH_FIELDS: ClassVar[Tuple[str, ...]] = ("created", "updated")

    items: List[StatementItem] = Field(default_factory=list)
    title: Optional[str] = None
    balance_id: Optional[str] = None
    term: Optional[Any] = None
    net: int = 0
    tenant_id: Optional[str] = None
    type: str = ""
    updated: Optional[int] = None

    updated_at: datetime = EPOCH

    def statement_urls(self, **fields: Any) -> Optional[StatementUrl]:
        return self.client.statements.statement_urls(self.id, **fields)


class BankInfo(_APIModel):
    bank_code: str = ""
    bank_branch_code: str = ""
    bank_account_type: str = ""
    bank_account_number: str = ""
    bank_account_holder_name: str = ""
    bank_account_status: str = ""


class Balance(PayjpObject):
    OBJECT: ClassVar[str] = "balance"
    EPOCH_FIELDS: ClassVar[Tuple[str, ...]] = ("created", "due_date")

    net: int = 0
    type: str = ""
    closed: bool = False
    statements: List[Statement] = Field(default_factory=list)
    due_date: Optional[Union[int, str]] = None
    bank_info: Optional[BankInfo] = None
    tenant_id: Optional[str] = None
    state: Optional[str] = None

    due_date_at: datetime = EPOCH

    @field_validator("statements", mode="before")
    @classmethod
    def _parse_statements(cls, v: Any, info: ValidationInfo) -> Any:
        from .parser import parse_items
        if v is None:
            return []
        return parse_items(_unwrap_list(v), Statement, _client_from(info))

    def statement_urls(self, **fields: Any) -> Optional[StatementUrl]:
        return self.client.balances.statement_urls(self.id, **fields)


class Term(PayjpObject):
    OBJECT: ClassVar[str] = "term"
    EPOCH_FIELDS: ClassVar[Tuple[str, ...]] = ("created", "start_at", "end_at")

    charge_count: int = 0
    refund_count: int = 0
    dispute_count: int = 0
    start_at: Optional[int] = None
    end_at: Optional[int] = None

    start_time: datetime = EPOCH
    end_time: datetime = EPOCH


# =============================================================================
# 3-D Secure requests
# =============================================================================
class ThreeDSecureRequest(PayjpObject):
    OBJECT: ClassVar[str] = "three_d_secure_request"
    EPOCH_FIELDS: ClassVar[Tuple[str, ...]] = (
        "created",
        "started_at",
        "result_received_at",
        "finished_at",
        "expired_at",
    )

    resource_id: str = ""
    state: str = ""
    tenant_id: Optional[str] = None
    three_d_secure_status: str = ""
    started_at: Optional[int] = None
    result_received_at: Optional[int] = None
    finished_at: Optional[int] = None
    expired_at: Optional[int] = None

    started_time: datetime = EPOCH
    result_received_time: datetime = EPOCH
    finished_time: datetime = EPOCH
    expired_time: datetime = EPOCH


# =============================================================================
# Deleted / Events
# =============================================================================
class Deleted(_APIModel):
    """``{"deleted": true, "id": ..., "livemode": ...}`` from DELETE endpoints."""
    deleted: bool = False
    id: str = ""
    livemode: bool = False


class Event(PayjpObject):
    OBJECT: ClassVar[str] = "event"

    type: str = ""
    data: Dict[str, Any] = Field(default_factory=dict)
    pending_webhooks: int = 0

    def data_object(self) -> Any:
        """Parse ``data`` into the resource the event ``type`` refers to."""
        from .parser import parse_payload
        model = EVENT_TYPES.get(self.type)
        if model is None:
            raise PayjpSDKError(f"unknown event type {self.type!r}")
        if model is Deleted:
            return Deleted.model_validate(self.data)
        return parse_payload(self.data, model, self._client)


EVENT_TYPES: Dict[str, Any] = {
    "charge.succeeded": Charge,
    "charge.failed": Charge,
    "charge.updated": Charge,
    "charge.refunded": Charge,
    "charge.captured": Charge,
    "token.created": Token,
    "customer.created": Customer,
    "customer.updated": Customer,
    "customer.deleted": Deleted,
    "customer.card.created": Card,
    "customer.card.updated": Card,
    "customer.card.deleted": Deleted,
    "plan.created": Plan,
    "plan.updated": Plan,
    "plan.deleted": Deleted,
    "subscription.created": Subscription,
    "subscription.updated": Subscription,
    "subscription.deleted": Deleted,
    "subscription.paused": Subscription,
    "subscription.resumed": Subscription,
    "subscription.canceled": Subscription,
    "subscription.renewed": Subscription,
    "transfer.succeeded": Transfer,
}


__all__ = [
    "EPOCH",
    "from_epoch",
    "derived_name",
    "PayjpObject",
    "CardDetails",
    "Card",
    "Plan",
    "Subscription",
    "Customer",
    "Charge",
    "Token",
    "Merchant",
    "Account",
    "TransferSummary",
    "Transfer",
    "StatementItem",
    "StatementUrl",
    "Statement",
    "BankInfo",
    "Balance",
    "Term",
    "ThreeDSecureRequest",
    "Deleted",
    "Event",
    "EVENT_TYPES",
]
