"""Common fixtures for all unit tests."""

from unittest.mock import MagicMock

import pytest

from findata.core.http import HTTPClient
from findata.core.retry import RetryPolicy
from findata.providers.financial_datasets import FinancialDatasetsProvider


def _fake_response(status_code=200, payload=None, text=None):
    response = MagicMock()
    response.status_code = status_code
    if payload is None and text is not None:
        response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
    else:
        response.json.return_value = payload
    response.text = text if text is not None else str(payload)
    return response


@pytest.fixture
def make_response():
    """Factory for stand-ins of requests.Response.

    ``make_response(429, text="slow down")`` gives a body that is not JSON;
    ``make_response(200, {"prices": []})`` gives a decodable one.
    """
    return _fake_response


@pytest.fixture
def mock_session():
    """A requests.Session whose ``request`` answers are set per test via side_effect."""
    session = MagicMock()
    session.request.return_value = _fake_response(200, {})
    return session


@pytest.fixture
def no_sleep():
    """Records backoff waits instead of sleeping."""
    return MagicMock()


@pytest.fixture
def client(mock_session, no_sleep):
    return HTTPClient(
        api_key="test-api-key",
        base_url="https://api.example.test",
        timeout=30.0,
        policy=RetryPolicy(max_retries=3),
        session=mock_session,
        sleep=no_sleep,
    )


@pytest.fixture
def provider(client):
    return FinancialDatasetsProvider(client)
