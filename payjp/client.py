from __future__ import annotations

import base64
import platform
import random
import time
import uuid
from typing import Any, Dict, Iterable, Optional, Tuple

import httpx

from .config import PayjpConfig
from .debug import dprint, djson, scrub_form, scrub_headers, set_debug
from .encoder import encode_form, encode_query
from .errors import PayjpTransportError
from .log import LoggerInterface, NullLogger

try:
    # __version__ is defined in payjp/__init__.py
    from . import __version__ as SDK_VERSION  # type: ignore
except ImportError:
    SDK_VERSION = "0.0.0"


# -------------------- constants --------------------

# Treat as transient for retry/backoff
TRANSIENT_STATUS: Tuple[int, ...] = (429, 500, 502, 503, 504)

REQUEST_ID_HEADERS: Tuple[str, ...] = ("X-Request-ID", "X-Request-Id")

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _auth_header(api_key: str) -> str:
    # Basic base64("{api_key}:"), empty password
    token = base64.b64encode(f"{api_key}:".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def _client_user_agent() -> str:
    return (
        f"payjp-python/{SDK_VERSION}"
        f"({platform.python_implementation()} {platform.python_version()},"
        f"os:{platform.system().lower()},arch:{platform.machine()})"
    )


def make_idempotency_key(prefix: str = "payjp") -> str:
    """Random Idempotency-Key, kept under 64 chars."""
    return f"{prefix}_{uuid.uuid4().hex}"[:64]


def ensure_idempotency_key(existing: Optional[str], prefix: str = "payjp") -> str:
    if isinstance(existing, str) and existing.strip():
        return existing.strip()
    return make_idempotency_key(prefix)


def _first_header(headers: httpx.Headers, names: Tuple[str, ...]) -> Optional[str]:
    for n in names:
        v = headers.get(n)
        if v:
            return v
    return None


def retry_delay(retry_count: int, initial_delay: float, max_delay: float) -> float:
    """
    Equal-jitter exponential backoff: the capped delay ``d`` is split in half,
    one half fixed and the other drawn uniformly, so the result lies in
    ``[d/2, d]``.
    """
    delay = min(max_delay, initial_delay * (2 ** retry_count))
    half = delay / 2
    return half + random.uniform(0, half)


class PayjpClient:
    """
    Sync client for the PAY.JP REST API.

    - Adds Authorization header "Basic base64(api_key:)", computed once.
    - Sends form-encoded bodies, reads JSON.
    - Retries network errors and 429/5xx with equal-jitter backoff
      (``config.max_count`` retries, 0 by default).
    - Resource clients hang off the instance: ``client.charges.create(...)``.

    Pass ``transport`` (any ``httpx.BaseTransport``) to stub the network.
    """

    def __init__(
        self,
        config: Optional[PayjpConfig] = None,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        http_client: Optional[httpx.Client] = None,
        logger: Optional[LoggerInterface] = None,
    ):
        self.config = (config or PayjpConfig()).validate()
        if self.config.debug:
            set_debug(True)
        self.logger: LoggerInterface = logger or NullLogger
        self._auth = _auth_header(self.config.api_key)
        self._owns_http = http_client is None

        self._client = http_client or httpx.Client(
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            transport=transport,
            headers={
                "User-Agent": f"payjp-python/{SDK_VERSION}",
                "X-Payjp-Client-User-Agent": _client_user_agent(),
            },
        )
        self._attach_resources()
        dprint(
            "Client init",
            {
                **self.config.masked(),
                "transport": type(transport).__name__ if transport else None,
                "sdk_version": SDK_VERSION,
            },
        )

    def _attach_resources(self) -> None:
        # Local imports: resource modules import models which reference the client
        from .resources import (
            AccountsAPI,
            BalancesAPI,
            ChargesAPI,
            CustomersAPI,
            EventsAPI,
            PlansAPI,
            StatementsAPI,
            SubscriptionsAPI,
            TermsAPI,
            ThreeDSecureRequestsAPI,
            TokensAPI,
            TransfersAPI,
        )

        self.customers = CustomersAPI(self)
        self.charges = ChargesAPI(self)
        self.plans = PlansAPI(self)
        self.subscriptions = SubscriptionsAPI(self)
        self.tokens = TokensAPI(self)
        self.accounts = AccountsAPI(self)
        self.transfers = TransfersAPI(self)
        self.statements = StatementsAPI(self)
        self.balances = BalancesAPI(self)
        self.terms = TermsAPI(self)
        self.three_d_secure_requests = ThreeDSecureRequestsAPI(self)
        self.events = EventsAPI(self)

    # ------------ context manager support ------------
    def __enter__(self) -> "PayjpClient":
        dprint("__enter__()")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        dprint("__exit__() -> close()")
        self.close()

    # ------------ internal helpers ------------
    def _headers(self, *, form: bool = False, idempotency_key: Optional[str] = None) -> Dict[str, str]:
        h: Dict[str, str] = {
            "Authorization": self._auth,
            "Accept": "application/json",
        }
        if form:
            h["Content-Type"] = FORM_CONTENT_TYPE
        if idempotency_key:
            h["Idempotency-Key"] = idempotency_key
        djson("Request headers", scrub_headers(h))
        return h

    def _sleep_for_retry(self, retry_count: int, *, retry_after_header: Optional[str]) -> float:
        # Retry-After (seconds) wins when present, capped by max_delay.
        if retry_after_header:
            try:
                secs = float(retry_after_header)
                if secs >= 0:
                    return min(secs, self.config.max_delay)
            except ValueError:
                pass
        return retry_delay(retry_count, self.config.initial_delay, self.config.max_delay)

    def _send_with_retries(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        attempt = 0
        max_count = self.config.max_count
        while True:
            try:
                dprint("HTTP send", {"method": method, "url": url, "attempt": attempt + 1})
                r = self._client.request(method, url, **kwargs)
            except httpx.TransportError as e:
                if attempt < max_count:
                    wait = self._sleep_for_retry(attempt, retry_after_header=None)
                    self.logger.info(
                        "Current Retry Count: %d. Retry after %.3fs (error=%r)", attempt + 1, wait, e
                    )
                    time.sleep(max(0.0, wait))
                    attempt += 1
                    continue
                self.logger.error("%s %s failed after %d attempt(s): %r", method, url, attempt + 1, e)
                raise PayjpTransportError(
                    f"{method} {url} failed: {e}", method=method, url=url, attempts=attempt + 1
                ) from e

            if r.status_code in TRANSIENT_STATUS and attempt < max_count:
                wait = self._sleep_for_retry(attempt, retry_after_header=r.headers.get("Retry-After"))
                self.logger.info(
                    "Current Retry Count: %d. Retry after %.3fs (status=%d)", attempt + 1, wait, r.status_code
                )
                time.sleep(max(0.0, wait))
                attempt += 1
                continue

            self.logger.debug(
                "%s %s -> %d (attempt %d, request_id=%s)",
                method,
                url,
                r.status_code,
                attempt + 1,
                _first_header(r.headers, REQUEST_ID_HEADERS),
            )
            return r

    def _handle(self, r: httpx.Response) -> Tuple[int, bytes]:
        dprint("Response", {"status": r.status_code, "request_id": _first_header(r.headers, REQUEST_ID_HEADERS)})
        djson("Response body", r.text)
        return r.status_code, r.content

    # ------------ public request helpers ------------
    def get(self, path: str, *, params: Optional[Iterable[Tuple[str, Any]]] = None) -> Tuple[int, bytes]:
        """GET ``path`` with ``params`` rendered as a query string. Returns (status, body)."""
        url = path + encode_query(params or ())
        dprint("GET", {"url": url})
        r = self._send_with_retries("GET", url, headers=self._headers())
        return self._handle(r)

    def post(
        self,
        path: str,
        *,
        data: Optional[Iterable[Tuple[str, Any]]] = None,
        metadata: Optional[Dict[str, Any]] = None,
        idempotency_key: Optional[str] = None,
    ) -> Tuple[int, bytes]:
        """
        POST a form body built from ordered (key, value) pairs. Returns (status, body).

        Every POST carries an Idempotency-Key (``idempotency_key`` or a fresh
        one), sent unchanged on each retry attempt.
        """
        body = encode_form(data or (), metadata=metadata)
        key = ensure_idempotency_key(idempotency_key)
        dprint("POST", {"path": path, "body": scrub_form(body), "idempotency_key": key})
        r = self._send_with_retries(
            "POST",
            path,
            content=body.encode("utf-8") if body else None,
            headers=self._headers(form=bool(body), idempotency_key=key),
        )
        return self._handle(r)

    def delete(self, path: str) -> Tuple[int, bytes]:
        dprint("DELETE", {"path": path})
        r = self._send_with_retries("DELETE", path, headers=self._headers())
        return self._handle(r)

    def close(self) -> None:
        dprint("Client close()")
        if self._owns_http:
            self._client.close()


__all__ = [
    "PayjpClient",
    "TRANSIENT_STATUS",
    "retry_delay",
    "make_idempotency_key",
    "ensure_idempotency_key",
]
