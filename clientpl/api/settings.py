import os
from typing import List

from dotenv import load_dotenv

load_dotenv()

# Comma-separated list of allowed origins for CORS. Any origin when unset.
_origins_env = os.getenv("FRONTEND_ORIGINS") or os.getenv("FRONTEND_ORIGIN")
if _origins_env:
    CORS_ORIGINS: List[str] = [origin.strip() for origin in _origins_env.split(",") if origin.strip()]
else:
    CORS_ORIGINS = ["*"]

PORT = int(os.getenv("PORT", "5000"))
