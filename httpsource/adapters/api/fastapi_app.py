# /httpsource/adapters/api/fastapi_app.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Header, HTTPException
from pydantic import BaseModel

from httpsource.adapters.http.aiohttp_client import AiohttpClient
from httpsource.adapters.system.logging_cfg import configure_logger
from httpsource.config import settings
from httpsource.domain.errors import (
    BodyReadError,
    StrictStatusError,
    TransportError,
    ValidationError,
)
from httpsource.domain.fetch_service import FetchExecutor
from httpsource.domain.records import RequestSpec, record_to_state

LOG = logging.getLogger("adapter.api")
configure_logger()

_client = AiohttpClient()
_executor = FetchExecutor(_client, user_agent=settings.USER_AGENT)


@asynccontextmanager
async def lifespan(_: FastAPI):
    yield
    await _client.close()


app = FastAPI(title="httpsource", lifespan=lifespan)


class FetchRequestModel(BaseModel):
    url: str
    method: str = "GET"
    request_headers: Optional[dict[str, str]] = None
    request_body: Optional[str] = None


def get_executor() -> FetchExecutor:
    return _executor


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.post("/fetch")
async def fetch(
    payload: FetchRequestModel,
    x_api_key: str | None = Header(default=None),
    executor: FetchExecutor = Depends(get_executor),
) -> dict:
    if settings.API_KEY and x_api_key != settings.API_KEY:
        raise HTTPException(status_code=401, detail="invalid api key")

    spec = RequestSpec.from_config(payload.model_dump())
    try:
        outcome = await executor.execute(spec)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except StrictStatusError as e:
        raise HTTPException(status_code=502, detail={"error": str(e), "status_code": e.status_code}) from e
    except (TransportError, BodyReadError) as e:
        LOG.warning("fetch.failed", extra={"extra": {"url": spec.url, "error": str(e)}})
        raise HTTPException(status_code=502, detail=str(e)) from e

    return {
        "state": record_to_state(outcome.record),
        "warnings": [{"summary": w.summary, "detail": w.detail} for w in outcome.warnings],
    }
