"""Tests for the rate-limit retry loop."""

import threading
from unittest.mock import MagicMock, call

import pytest
import requests

from findata.core.exceptions import (
    DeadlineExceededError,
    RequestCancelledError,
    RetriesExhaustedError,
    TransportError,
)
from findata.core.retry import RetryPolicy, send_with_retries

URL = "https://api.example.test/prices/"


class TestRetryPolicy:
    def test_linear_backoff_schedule(self):
        policy = RetryPolicy()
        assert [policy.delay_for(i) for i in range(4)] == [60, 90, 120, 150]

    def test_custom_schedule(self):
        policy = RetryPolicy(max_retries=2, base_delay=1, step=2)
        assert [policy.delay_for(i) for i in range(3)] == [1, 3, 5]


class TestSendWithRetries:
    def test_success_on_first_attempt(self, mock_session, no_sleep, make_response):
        mock_session.request.return_value = make_response(200, {"prices": []})

        response = send_with_retries(mock_session, "GET", URL, sleep=no_sleep)

        assert response.status_code == 200
        assert mock_session.request.call_count == 1
        no_sleep.assert_not_called()

    def test_429_then_success_waits_linearly(self, mock_session, no_sleep, make_response):
        mock_session.request.side_effect = [
            make_response(429, text="slow down"),
            make_response(429, text="slow down"),
            make_response(200, {"prices": []}),
        ]

        response = send_with_retries(mock_session, "GET", URL, sleep=no_sleep)

        assert response.status_code == 200
        assert mock_session.request.call_count == 3
        assert no_sleep.call_args_list == [call(60), call(90)]

    def test_exhausted_after_max_retries_plus_one_requests(self, mock_session, no_sleep, make_response):
        mock_session.request.side_effect = [make_response(429, text="slow down") for _ in range(4)]

        with pytest.raises(RetriesExhaustedError) as exc_info:
            send_with_retries(
                mock_session, "GET", URL,
                policy=RetryPolicy(max_retries=3), sleep=no_sleep, ticker="AAPL",
            )

        assert mock_session.request.call_count == 4
        assert exc_info.value.attempts == 4
        assert exc_info.value.ticker == "AAPL"
        assert no_sleep.call_args_list == [call(60), call(90), call(120)]

    def test_zero_retries_fails_after_single_429(self, mock_session, no_sleep, make_response):
        mock_session.request.return_value = make_response(429, text="slow down")

        with pytest.raises(RetriesExhaustedError):
            send_with_retries(mock_session, "GET", URL, policy=RetryPolicy(max_retries=0), sleep=no_sleep)

        assert mock_session.request.call_count == 1
        no_sleep.assert_not_called()

    def test_other_error_status_is_returned_without_retry(self, mock_session, no_sleep, make_response):
        mock_session.request.return_value = make_response(500, text="boom")

        response = send_with_retries(mock_session, "GET", URL, sleep=no_sleep)

        assert response.status_code == 500
        assert mock_session.request.call_count == 1
        no_sleep.assert_not_called()

    def test_transport_error_is_not_retried(self, mock_session, no_sleep):
        mock_session.request.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(TransportError) as exc_info:
            send_with_retries(mock_session, "GET", URL, sleep=no_sleep, ticker="MSFT")

        assert mock_session.request.call_count == 1
        assert "connection refused" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)

    def test_timeout_is_a_transport_error(self, mock_session, no_sleep):
        mock_session.request.side_effect = requests.Timeout("read timed out")

        with pytest.raises(TransportError):
            send_with_retries(mock_session, "GET", URL, sleep=no_sleep)

    def test_post_sends_json_body(self, mock_session, no_sleep):
        body = {"tickers": ["AAPL"], "line_items": ["revenue"]}

        send_with_retries(
            mock_session, "post", URL, headers={"X-API-KEY": "k"},
            json_body=body, timeout=12.5, sleep=no_sleep,
        )

        args, kwargs = mock_session.request.call_args
        assert args == ("POST", URL)
        assert kwargs["json"] == body
        assert kwargs["timeout"] == 12.5
        assert kwargs["headers"] == {"X-API-KEY": "k", "Content-Type": "application/json"}

    def test_get_never_sends_body(self, mock_session, no_sleep):
        send_with_retries(mock_session, "GET", URL, json_body={"ignored": True}, sleep=no_sleep)

        _, kwargs = mock_session.request.call_args
        assert kwargs["json"] is None
        assert "Content-Type" not in kwargs["headers"]

    def test_rate_limited_response_is_closed_before_retry(self, mock_session, no_sleep, make_response):
        limited = make_response(429, text="slow down")
        mock_session.request.side_effect = [limited, make_response(200, {})]

        send_with_retries(mock_session, "GET", URL, sleep=no_sleep)

        limited.close.assert_called_once()


class TestCancellation:
    def test_cancel_during_backoff(self, mock_session, make_response):
        cancel = threading.Event()
        mock_session.request.return_value = make_response(429, text="slow down")

        with pytest.raises(RequestCancelledError):
            send_with_retries(
                mock_session, "GET", URL,
                sleep=lambda delay: cancel.set(), cancel_event=cancel,
            )

        assert mock_session.request.call_count == 1

    def test_already_cancelled_sends_nothing(self, mock_session):
        cancel = threading.Event()
        cancel.set()

        with pytest.raises(RequestCancelledError):
            send_with_retries(mock_session, "GET", URL, cancel_event=cancel)

        mock_session.request.assert_not_called()

    def test_event_wait_is_used_when_no_sleep_given(self, mock_session, make_response):
        cancel = MagicMock()
        cancel.is_set.return_value = False
        mock_session.request.side_effect = [make_response(429, text="x"), make_response(200, {})]

        response = send_with_retries(mock_session, "GET", URL, cancel_event=cancel)

        assert response.status_code == 200
        cancel.wait.assert_called_once_with(60)

    def test_deadline_stops_before_waiting(self, mock_session, no_sleep, make_response):
        mock_session.request.return_value = make_response(429, text="slow down")

        with pytest.raises(DeadlineExceededError):
            send_with_retries(
                mock_session, "GET", URL,
                sleep=no_sleep, deadline=30.0, clock=lambda: 0.0,
            )

        no_sleep.assert_not_called()
        assert mock_session.request.call_count == 1

    def test_deadline_allows_waits_that_fit(self, mock_session, no_sleep, make_response):
        mock_session.request.side_effect = [make_response(429, text="x"), make_response(200, {})]

        response = send_with_retries(
            mock_session, "GET", URL,
            sleep=no_sleep, deadline=100.0, clock=lambda: 0.0,
        )

        assert response.status_code == 200
        no_sleep.assert_called_once_with(60)
