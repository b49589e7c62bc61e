"""Rate-limit aware request loop with linear backoff."""

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import requests

from findata.core.exceptions import (
    DeadlineExceededError,
    RequestCancelledError,
    RetriesExhaustedError,
    TransportError,
)
from findata.core.logger import logger

TOO_MANY_REQUESTS = 429


@dataclass
class RetryPolicy:
    """
    Linear backoff applied to HTTP 429 responses only.

    Attributes:
        max_retries: Retries after the first attempt; ``max_retries + 1`` requests at most.
        base_delay: Seconds to wait before the first retry.
        step: Seconds added to the wait for each further retry.
    """
    max_retries: int = 3
    base_delay: float = 60.0
    step: float = 30.0

    def delay_for(self, attempt: int) -> float:
        """Wait before retrying after zero-based ``attempt``: 60, 90, 120, ..."""
        return self.base_delay + self.step * attempt


def send_with_retries(
    session: requests.Session,
    method: str,
    url: str,
    headers: Optional[Dict[str, str]] = None,
    params: Optional[Dict[str, Any]] = None,
    json_body: Optional[Dict[str, Any]] = None,
    policy: Optional[RetryPolicy] = None,
    timeout: float = 30.0,
    sleep: Optional[Callable[[float], None]] = None,
    cancel_event: Optional[threading.Event] = None,
    deadline: Optional[float] = None,
    clock: Callable[[], float] = time.monotonic,
    ticker: Optional[str] = None,
) -> requests.Response:
    """
    Perform one logical request, retrying only while the server answers 429.

    Any status other than 429 is handed back as-is, so the caller must check
    ``response.status_code`` itself. Transport failures are not retried.

    Args:
        session (requests.Session): Pooled transport to send the request on.
        method (str): ``"GET"`` or ``"POST"``.
        url (str): Absolute request URL.
        headers (Optional[Dict[str, str]]): Extra request headers.
        params (Optional[Dict[str, Any]]): Query string parameters.
        json_body (Optional[Dict[str, Any]]): JSON body, sent only with POST.
        policy (Optional[RetryPolicy]): Backoff policy; defaults to ``RetryPolicy()``.
        timeout (float): Per-request timeout in seconds.
        sleep (Optional[Callable[[float], None]]): Replacement for the backoff wait.
        cancel_event (Optional[threading.Event]): When set, aborts the pending wait.
        deadline (Optional[float]): ``clock()`` value after which no wait may end.
        clock (Callable[[], float]): Monotonic clock used with ``deadline``.
        ticker (Optional[str]): Ticker for error context.

    Returns:
        requests.Response: The first non-429 response.

    Raises:
        TransportError: The request could not be sent or timed out.
        RetriesExhaustedError: All ``max_retries + 1`` attempts returned 429.
        RequestCancelledError: ``cancel_event`` was set.
        DeadlineExceededError: A backoff wait would overrun ``deadline``.
    """
    policy = policy or RetryPolicy()
    method = method.upper()
    request_headers = dict(headers or {})
    body = None
    if method == "POST" and json_body is not None:
        request_headers["Content-Type"] = "application/json"
        body = json_body

    total_attempts = policy.max_retries + 1
    for attempt in range(total_attempts):
        if cancel_event is not None and cancel_event.is_set():
            raise RequestCancelledError(f"Request to {url} cancelled", ticker)

        try:
            response = session.request(
                method,
                url,
                params=params,
                json=body,
                headers=request_headers,
                timeout=timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(f"HTTP {method} {url} failed: {exc}", ticker) from exc

        if response.status_code != TOO_MANY_REQUESTS:
            return response

        response.close()
        if attempt == policy.max_retries:
            break

        delay = policy.delay_for(attempt)
        logger.warning(
            f"Rate limited (429) on {url}. Attempt {attempt + 1}/{total_attempts}. "
            f"Retrying in {delay:g} seconds..."
        )
        _wait(delay, sleep, cancel_event, deadline, clock, url, ticker)

    logger.error(f"Giving up on {url} after {total_attempts} rate-limited attempts")
    raise RetriesExhaustedError(
        f"Request to {url} still rate limited after {policy.max_retries} retries",
        attempts=total_attempts,
        ticker=ticker,
    )


def _wait(
    delay: float,
    sleep: Optional[Callable[[float], None]],
    cancel_event: Optional[threading.Event],
    deadline: Optional[float],
    clock: Callable[[], float],
    url: str,
    ticker: Optional[str],
) -> None:
    """Block for ``delay`` seconds unless cancelled or past the deadline."""
    if deadline is not None and clock() + delay > deadline:
        raise DeadlineExceededError(
            f"Backoff of {delay:g}s for {url} would exceed the deadline", ticker
        )

    if sleep is not None:
        sleep(delay)
    elif cancel_event is not None:
        cancel_event.wait(delay)
    else:
        time.sleep(delay)

    if cancel_event is not None and cancel_event.is_set():
        raise RequestCancelledError(f"Request to {url} cancelled during backoff", ticker)
