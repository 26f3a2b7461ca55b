from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Optional, Dict, Any

# Try to load .env if python-dotenv is available (safe if missing)
try:
    from dotenv import load_dotenv  # type: ignore
    load_dotenv()
except ImportError:
    pass

# Error types
from .errors import PayjpConfigError
from .debug import mask_key


DEFAULT_BASE_URL = "https://api.pay.jp/v1"
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_COUNT = 0
DEFAULT_INITIAL_DELAY = 2.0
DEFAULT_MAX_DELAY = 32.0


# ----------------------------- helpers -----------------------------

def _parse_bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    v = value.strip().lower()
    return v not in ("0", "false", "no", "off", "")


def _parse_float(value: Optional[str], default: float) -> float:
    try:
        return float(value) if value is not None else default
    except ValueError:
        return default


def _parse_int(value: Optional[str], default: int) -> int:
    try:
        return int(value) if value is not None else default
    except ValueError:
        return default


def _normalize_base_url(url: Optional[str]) -> str:
    url = (url or "").strip()
    if not url:
        return DEFAULT_BASE_URL
    # Remove trailing slash to avoid double slashes when building paths
    return url[:-1] if url.endswith("/") else url


def _dprint(enabled: bool, *args: Any) -> None:
    if enabled:
        print("[payjp][config]", *args)


# ----------------------------- config -----------------------------

@dataclass
class PayjpConfig:
    """
    Configuration with precedence:
      explicit kwargs > environment (.env) > defaults

    Server-side calls require an API key (``sk_test_...`` / ``sk_live_...``).
    """

    # Credentials
    api_key: Optional[str] = None

    # Routing / network
    base_url: Optional[str] = None
    timeout: Optional[float] = None

    # Retry policy: max_count retries after the first attempt,
    # equal-jitter backoff between initial_delay and max_delay seconds.
    max_count: Optional[int] = None
    initial_delay: Optional[float] = None
    max_delay: Optional[float] = None

    # Diagnostics
    debug: Optional[bool] = None

    # Internal: where each field was sourced from (arg/env/default) for debugging
    _source: Dict[str, str] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        env = os.environ

        # api_key
        if self.api_key is None or self.api_key == "":
            self.api_key = env.get("PAYJP_API_KEY", "")
            self._source["api_key"] = "env"
        else:
            self._source["api_key"] = "arg"

        # base_url
        if self.base_url is None or self.base_url == "":
            self.base_url = _normalize_base_url(env.get("PAYJP_API_BASE"))
            self._source["base_url"] = "env/default"
        else:
            self.base_url = _normalize_base_url(self.base_url)
            self._source["base_url"] = "arg"

        # timeout
        if self.timeout is None:
            self.timeout = _parse_float(env.get("PAYJP_TIMEOUT"), DEFAULT_TIMEOUT)
            self._source["timeout"] = "env/default"
        else:
            self.timeout = float(self.timeout)
            self._source["timeout"] = "arg"

        # retry policy
        if self.max_count is None:
            self.max_count = _parse_int(env.get("PAYJP_MAX_RETRY"), DEFAULT_MAX_COUNT)
            self._source["max_count"] = "env/default"
        else:
            self.max_count = int(self.max_count)
            self._source["max_count"] = "arg"

        if self.initial_delay is None:
            self.initial_delay = _parse_float(env.get("PAYJP_RETRY_INITIAL_DELAY"), DEFAULT_INITIAL_DELAY)
            self._source["initial_delay"] = "env/default"
        else:
            self.initial_delay = float(self.initial_delay)
            self._source["initial_delay"] = "arg"

        if self.max_delay is None:
            self.max_delay = _parse_float(env.get("PAYJP_RETRY_MAX_DELAY"), DEFAULT_MAX_DELAY)
            self._source["max_delay"] = "env/default"
        else:
            self.max_delay = float(self.max_delay)
            self._source["max_delay"] = "arg"

        # debug
        if self.debug is None:
            self.debug = _parse_bool(env.get("PAYJP_DEBUG"), False)
            self._source["debug"] = "env/default"
        else:
            self.debug = bool(self.debug)
            self._source["debug"] = "arg"

        _dprint(bool(self.debug), "Loaded config:", {**self.masked(), "source": self._source})

    # -------- validation & utils --------
    def validate(self) -> "PayjpConfig":
        """Validate credentials and retry settings before building a client."""
        if not self.api_key:
            _dprint(bool(self.debug), "Validation failed: api_key missing")
            raise PayjpConfigError("PAYJP_API_KEY is required for API calls.")
        if self.max_count < 0:
            raise PayjpConfigError(f"max_count must be >= 0, but {self.max_count}.")
        if self.initial_delay < 0 or self.max_delay < 0:
            raise PayjpConfigError("initial_delay and max_delay must be >= 0.")
        if self.timeout <= 0:
            raise PayjpConfigError(f"timeout must be positive, but {self.timeout}.")
        _dprint(bool(self.debug), "Validation OK")
        return self

    def masked(self) -> dict:
        """Return a sanitized dict for logging/diagnostics."""
        return {
            "api_key": mask_key(self.api_key),
            "base_url": self.base_url,
            "timeout": self.timeout,
            "max_count": self.max_count,
            "initial_delay": self.initial_delay,
            "max_delay": self.max_delay,
            "debug": self.debug,
        }

    def copy_with(
        self,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_count: Optional[int] = None,
        initial_delay: Optional[float] = None,
        max_delay: Optional[float] = None,
        debug: Optional[bool] = None,
    ) -> "PayjpConfig":
        """Create a modified copy (handy in tests)."""
        return replace(
            self,
            api_key=self.api_key if api_key is None else api_key,
            base_url=_normalize_base_url(base_url if base_url is not None else self.base_url),
            timeout=self.timeout if timeout is None else float(timeout),
            max_count=self.max_count if max_count is None else int(max_count),
            initial_delay=self.initial_delay if initial_delay is None else float(initial_delay),
            max_delay=self.max_delay if max_delay is None else float(max_delay),
            debug=self.debug if debug is None else bool(debug),
        )

    # -------- alt constructors --------
    @classmethod
    def from_env(cls) -> "PayjpConfig":
        """Build config strictly from environment (.env considered if loaded)."""
        return cls().validate()


__all__ = ["PayjpConfig", "DEFAULT_BASE_URL"]
