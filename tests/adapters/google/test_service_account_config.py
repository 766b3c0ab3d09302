from __future__ import annotations

import json
from pathlib import Path

import pytest

from clientpl.adapters.google.credentials import ServiceAccountConfig

_ENV_KEYS = (
    "GOOGLE_SERVICE_ACCOUNT_FILE",
    "GOOGLE_TYPE",
    "GOOGLE_PROJECT_ID",
    "GOOGLE_PRIVATE_KEY_ID",
    "GOOGLE_PRIVATE_KEY",
    "GOOGLE_CLIENT_EMAIL",
    "GOOGLE_CLIENT_ID",
    "GOOGLE_AUTH_URI",
    "GOOGLE_TOKEN_URI",
    "GOOGLE_AUTH_PROVIDER_CERT_URL",
    "GOOGLE_CLIENT_CERT_URL",
    "GOOGLE_RETRY_ATTEMPTS",
    "GOOGLE_RETRY_WAIT",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_from_env_unescapes_private_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_PROJECT_ID", "desk-prod")
    monkeypatch.setenv("GOOGLE_PRIVATE_KEY", "-----BEGIN KEY-----\\nabc\\n-----END KEY-----\\n")
    monkeypatch.setenv("GOOGLE_CLIENT_EMAIL", "svc@desk-prod.iam.gserviceaccount.com")
    monkeypatch.setenv("GOOGLE_RETRY_ATTEMPTS", "5")

    config = ServiceAccountConfig.from_env()

    assert config.info["private_key"] == "-----BEGIN KEY-----\nabc\n-----END KEY-----\n"
    assert config.info["type"] == "service_account"
    assert config.info["token_uri"] == "https://oauth2.googleapis.com/token"
    assert config.project_id == "desk-prod"
    assert config.retry_attempts == 5
    assert "client_id" not in config.info


def test_from_env_reads_key_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    key_file = tmp_path / "key.json"
    key_file.write_text(
        json.dumps(
            {
                "type": "service_account",
                "project_id": "desk-dev",
                "private_key": "k",
                "client_email": "svc@desk-dev.iam.gserviceaccount.com",
            }
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv("GOOGLE_SERVICE_ACCOUNT_FILE", str(key_file))

    config = ServiceAccountConfig.from_env()

    assert config.project_id == "desk-dev"
    assert config.info["client_email"] == "svc@desk-dev.iam.gserviceaccount.com"


def test_from_env_requires_key_and_email(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOOGLE_PRIVATE_KEY", "k")

    with pytest.raises(RuntimeError, match="client_email"):
        ServiceAccountConfig.from_env()


def test_from_env_missing_key_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("GOOGLE_SERVICE_ACCOUNT_FILE", str(tmp_path / "absent.json"))

    with pytest.raises(RuntimeError, match="not found"):
        ServiceAccountConfig.from_env()
