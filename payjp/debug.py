from __future__ import annotations
import os
import json
import datetime
from typing import Any, Dict, Mapping, Optional

# ------------------------------------------------------------------------------
# PAYJP_DEBUG flag, switchable at runtime
# ------------------------------------------------------------------------------
_DEBUG_ENABLED = os.getenv("PAYJP_DEBUG", "0").lower() not in ("0", "false", "no", "off", "")

# Values under these form keys never reach stdout
CARD_SECRET_KEYS = frozenset({"card[number]", "card[cvc]", "number", "cvc"})

MAX_BODY_CHARS = 50000


def is_enabled() -> bool:
    return _DEBUG_ENABLED


def set_debug(enabled: bool) -> None:
    global _DEBUG_ENABLED
    _DEBUG_ENABLED = bool(enabled)


# ------------------------------------------------------------------------------
# Redaction
# ------------------------------------------------------------------------------
def redact_auth(value: Optional[str]) -> Optional[str]:
    """'Basic c2tfdGVzdF86' -> 'Basic ***'. PAY.JP only uses Basic auth."""
    if not value:
        return value
    scheme = value.strip().split(" ", 1)[0]
    return "Basic ***" if scheme.lower() == "basic" else "***"


def mask_key(api_key: Optional[str]) -> str:
    """sk_test_0123456789 -> sk_test_***89"""
    if not api_key:
        return "(empty)"
    prefix = api_key[:8] if api_key.startswith(("sk_", "pk_")) else ""
    tail = api_key[-2:] if len(api_key) > 10 else ""
    return f"{prefix}***{tail}"


def scrub_headers(h: Mapping[str, str]) -> Dict[str, str]:
    return {k: (redact_auth(v) if k.lower() == "authorization" else v) for k, v in (h or {}).items()}


def scrub_form(body: Optional[str]) -> Optional[str]:
    """Mask card number / CVC values in an encoded form body."""
    if not body:
        return body
    parts = []
    for pair in body.split("&"):
        key, sep, value = pair.partition("=")
        if key.replace("%5B", "[").replace("%5D", "]") in CARD_SECRET_KEYS and value:
            value = "***"
        parts.append(f"{key}{sep}{value}")
    return "&".join(parts)


# ------------------------------------------------------------------------------
# Output
# ------------------------------------------------------------------------------
def _emit(*args: Any) -> None:
    now = datetime.datetime.now(datetime.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    print("[payjp]", now, *args, flush=True)


def dprint(*args: Any) -> None:
    if _DEBUG_ENABLED:
        _emit(*args)


def djson(label: str, data: Any) -> None:
    """Pretty-print ``data`` (JSON-able, or a str body) when debugging."""
    if not _DEBUG_ENABLED:
        return
    text = data if isinstance(data, str) else json.dumps(data, ensure_ascii=False, indent=2, default=str)
    if len(text) > MAX_BODY_CHARS:
        text = text[:MAX_BODY_CHARS] + "... (truncated)"
    _emit(f"{label}:", text)
