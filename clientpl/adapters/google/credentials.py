from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from google.oauth2 import service_account

# Env var -> service-account JSON key.
_INFO_ENV_KEYS = {
    "type": "GOOGLE_TYPE",
    "project_id": "GOOGLE_PROJECT_ID",
    "private_key_id": "GOOGLE_PRIVATE_KEY_ID",
    "private_key": "GOOGLE_PRIVATE_KEY",
    "client_email": "GOOGLE_CLIENT_EMAIL",
    "client_id": "GOOGLE_CLIENT_ID",
    "auth_uri": "GOOGLE_AUTH_URI",
    "token_uri": "GOOGLE_TOKEN_URI",
    "auth_provider_x509_cert_url": "GOOGLE_AUTH_PROVIDER_CERT_URL",
    "client_x509_cert_url": "GOOGLE_CLIENT_CERT_URL",
}


@dataclass(frozen=True)
class ServiceAccountConfig:
    info: dict[str, Any]
    retry_attempts: int = 3
    retry_wait: float = 0.5

    @classmethod
    def from_env(cls) -> "ServiceAccountConfig":
        retry_attempts = int(os.getenv("GOOGLE_RETRY_ATTEMPTS", "3"))
        retry_wait = float(os.getenv("GOOGLE_RETRY_WAIT", "0.5"))
        key_file = os.getenv("GOOGLE_SERVICE_ACCOUNT_FILE")
        if key_file:
            path = Path(key_file).expanduser()
            if not path.is_file():
                raise RuntimeError(f"Service account file not found: {path}")
            info = json.loads(path.read_text(encoding="utf-8"))
        else:
            info = {
                key: value
                for key, env_key in _INFO_ENV_KEYS.items()
                if (value := os.getenv(env_key))
            }
            # Keys stored in env files carry literal "\n" sequences.
            if "private_key" in info:
                info["private_key"] = info["private_key"].replace("\\n", "\n")
            info.setdefault("type", "service_account")
            info.setdefault("token_uri", "https://oauth2.googleapis.com/token")
        missing = [key for key in ("private_key", "client_email") if not info.get(key)]
        if missing:
            raise RuntimeError(
                "Google service account is not configured; missing "
                + ", ".join(missing)
                + ". Set GOOGLE_SERVICE_ACCOUNT_FILE or the GOOGLE_* variables."
            )
        return cls(info=info, retry_attempts=retry_attempts, retry_wait=retry_wait)

    @property
    def project_id(self) -> Optional[str]:
        return self.info.get("project_id")

    def credentials(self, scopes: list[str]) -> service_account.Credentials:
        return service_account.Credentials.from_service_account_info(self.info, scopes=scopes)
