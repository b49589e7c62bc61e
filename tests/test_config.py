"""Tests for YAML configuration loading and settings."""

import pytest

from findata.core.config import Settings, load_config, resolve_api_key
from findata.core.http import HTTPClient


def test_load_config_reads_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("api:\n  max_retries: 5\noutput_dir: snapshots\n", encoding="utf-8")

    assert load_config(path) == {"api": {"max_retries": 5}, "output_dir": "snapshots"}


def test_missing_config_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.yaml")


def test_empty_config_raises(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(path)


def test_settings_defaults():
    settings = Settings.from_config({})

    assert settings.base_url == "https://api.financialdatasets.ai"
    assert settings.timeout_seconds == 30.0
    assert settings.max_retries == 3
    assert settings.output_dir == "output"


def test_settings_feed_the_client():
    settings = Settings.from_config({
        "api": {"base_url": "https://proxy.test/", "timeout_seconds": 5, "max_retries": 1,
                "backoff_base_seconds": 2, "backoff_step_seconds": 1},
    })

    client = HTTPClient.from_settings(settings, api_key="k")

    assert client.base_url == "https://proxy.test"
    assert client.timeout == 5.0
    assert client.policy.max_retries == 1
    assert client.policy.delay_for(1) == 3.0
    client.close()


def test_resolve_api_key(monkeypatch):
    monkeypatch.setenv("FINANCIAL_DATASETS_API_KEY", "from-env")

    assert resolve_api_key("explicit") == "explicit"
    assert resolve_api_key("") == "from-env"
    monkeypatch.delenv("FINANCIAL_DATASETS_API_KEY")
    assert resolve_api_key(None) is None
