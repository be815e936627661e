# /httpsource/config.py
from __future__ import annotations

import os

from pydantic import BaseModel


class Settings(BaseModel):
    API_KEY: str | None = os.getenv("API_KEY")

    # Dispatch
    TIMEOUT_SECONDS: float = float(os.getenv("TIMEOUT_SECONDS", "10.0"))
    USER_AGENT: str = os.getenv("USER_AGENT", "httpsource/0.1")

    # Status policy: non-2xx is fatal only when enabled
    STRICT_STATUS: bool = os.getenv("STRICT_STATUS", "false").lower() == "true"

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
