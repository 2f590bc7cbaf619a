"""FastAPI service for ChatGPT Wrapped.

Analyzes an uploaded export on demand and serves a cached report for the
configured export file (TTL from settings, since the file only changes
on a new OpenAI export).

Deployment: uvicorn app:app --host 127.0.0.1 --port 8203
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.concurrency import run_in_threadpool

from analytics import analyze_export_bytes, build_analytics_payload
from export_parser import DecodeError, ExportError
from settings import CACHE_TTL_SECONDS, EXPORT_PATH

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------
app = FastAPI(title="ChatGPT Wrapped")

# ---------------------------------------------------------------------------
# Thread-safe cache
# ---------------------------------------------------------------------------
_cache_lock = threading.Lock()
_cache: dict[str, Any] = {
    "data": None,
    "built_at": 0.0,
}


def _get_cached_data(force_refresh: bool = False) -> dict[str, Any]:
    """Return the cached report for EXPORT_PATH, rebuilding if stale or forced.

    Raises:
        HTTPException: 404 if the export file is missing, 422 if it
            cannot be analyzed.
    """
    now = time.monotonic()
    with _cache_lock:
        if (
            not force_refresh
            and _cache["data"] is not None
            and (now - _cache["built_at"]) < CACHE_TTL_SECONDS
        ):
            return _cache["data"]

    try:
        data = build_analytics_payload(str(EXPORT_PATH))
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail=f"Export file not found: {EXPORT_PATH}")
    except ExportError as e:
        logger.info("Rejected export %s: %s", EXPORT_PATH, e)
        raise HTTPException(status_code=422, detail=str(e))

    with _cache_lock:
        _cache["data"] = data
        _cache["built_at"] = time.monotonic()

    return data


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
@app.get("/health")
@app.get("/healthz")
def healthz():
    return {"status": "ok"}


@app.post("/api/analyze")
async def api_analyze(request: Request):
    """Analyze the raw export JSON sent as the request body.

    The analysis runs in the threadpool so other routes stay responsive.
    """
    raw = await request.body()
    try:
        result = await run_in_threadpool(analyze_export_bytes, raw)
    except DecodeError as e:
        logger.info("Rejected upload: %s", e)
        raise HTTPException(status_code=400, detail=str(e))
    except ExportError as e:
        logger.info("Rejected upload: %s", e)
        raise HTTPException(status_code=422, detail=str(e))
    return result.as_dict()


@app.get("/api/data")
def api_data():
    """Return the full report for the configured export file."""
    return _get_cached_data()


@app.get("/api/refresh")
def api_refresh():
    """Force a cache rebuild and return fresh data."""
    data = _get_cached_data(force_refresh=True)
    return {
        "status": "refreshed",
        "generated_at": data["generated_at"],
    }
