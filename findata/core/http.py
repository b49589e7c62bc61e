"""Explicitly constructed HTTP transport for the financial data service."""

import threading
from typing import Any, Callable, Dict, Optional

import requests

from findata.core.config import DEFAULT_BASE_URL, Settings, resolve_api_key
from findata.core.logger import logger
from findata.core.retry import RetryPolicy, send_with_retries


class HTTPClient:
    """Owns one pooled ``requests.Session`` plus the auth header, timeout and retry policy.

    Args:
        api_key: Explicit API key; falls back to ``FINANCIAL_DATASETS_API_KEY``.
        base_url: Service root, without trailing slash.
        timeout: Per-request timeout in seconds.
        policy: 429 backoff policy.
        session: Pre-built session (tests pass a mock here).
        sleep: Replacement for the backoff wait.
        cancel_event: Event that aborts pending backoff waits when set.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        policy: Optional[RetryPolicy] = None,
        session: Optional[requests.Session] = None,
        sleep: Optional[Callable[[float], None]] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.policy = policy or RetryPolicy()
        self.session = session or requests.Session()
        self.sleep = sleep
        self.cancel_event = cancel_event
        self.headers: Dict[str, str] = {}

        key = resolve_api_key(api_key)
        if key:
            self.headers["X-API-KEY"] = key
        else:
            logger.warning("No API key configured. Requests will be sent unauthenticated.")

    @classmethod
    def from_settings(cls, settings: Settings, api_key: Optional[str] = None, **kwargs: Any) -> "HTTPClient":
        """Build a client from :class:`Settings`."""
        policy = RetryPolicy(
            max_retries=settings.max_retries,
            base_delay=settings.backoff_base_seconds,
            step=settings.backoff_step_seconds,
        )
        return cls(
            api_key=api_key,
            base_url=settings.base_url,
            timeout=settings.timeout_seconds,
            policy=policy,
            **kwargs,
        )

    def get(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        ticker: Optional[str] = None,
        deadline: Optional[float] = None,
    ) -> requests.Response:
        """Send a GET to ``path`` relative to the base URL."""
        return self._send("GET", path, params=params, ticker=ticker, deadline=deadline)

    def post(
        self,
        path: str,
        json_body: Dict[str, Any],
        ticker: Optional[str] = None,
        deadline: Optional[float] = None,
    ) -> requests.Response:
        """Send a JSON POST to ``path`` relative to the base URL."""
        return self._send("POST", path, json_body=json_body, ticker=ticker, deadline=deadline)

    def close(self) -> None:
        """Release pooled connections."""
        self.session.close()

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _send(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None,
        ticker: Optional[str] = None,
        deadline: Optional[float] = None,
    ) -> requests.Response:
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.info(f"{method} {url} params={params}")
        return send_with_retries(
            self.session,
            method,
            url,
            headers=self.headers,
            params=params,
            json_body=json_body,
            policy=self.policy,
            timeout=self.timeout,
            sleep=self.sleep,
            cancel_event=self.cancel_event,
            deadline=deadline,
            ticker=ticker,
        )
