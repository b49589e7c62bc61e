"""Error taxonomy for the financial data client."""

from typing import Optional


class FinancialDataError(Exception):
    """
    Base class for every failure raised while fetching or decoding financial data.

    Args:
        message: Human-readable description of the failure.
        ticker: Ticker the request was made for, when known.
    """

    def __init__(self, message: str, ticker: Optional[str] = None):
        self.message = message
        self.ticker = ticker
        super().__init__(f"{message} (ticker: {ticker})" if ticker else message)


class TransportError(FinancialDataError):
    """Connection, DNS or timeout failure. Never retried."""


class RetriesExhaustedError(FinancialDataError):
    """Every attempt was answered with HTTP 429."""

    def __init__(self, message: str, attempts: int, ticker: Optional[str] = None):
        self.attempts = attempts
        super().__init__(message, ticker)


class APIStatusError(FinancialDataError):
    """
    Non-200, non-429 response from the service.

    The raw body is kept verbatim so the caller sees what the server said.
    """

    def __init__(self, ticker: str, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        self.ticker = ticker
        self.message = f"Error fetching data: {ticker} - {status_code} - {body}"
        Exception.__init__(self, self.message)


class ResponseDecodeError(FinancialDataError):
    """Malformed JSON, unexpected envelope shape or unparseable timestamp."""


class RequestCancelledError(FinancialDataError):
    """The cancellation event was set while waiting to retry."""


class DeadlineExceededError(FinancialDataError):
    """The next backoff wait would run past the caller's deadline."""
