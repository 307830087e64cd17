"""FastAPI service that serves today's edition from the edition cache."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from .cache import EditionCache, build_cache
from .config import configure_logging, get_settings
from .errors import SectionNotFound, UpstreamServiceError
from .sections import available_sections, section, summarize

logger = logging.getLogger(__name__)

app = FastAPI(title="Daily Prophet")


def cors_options(settings) -> Dict[str, Any]:
    """CORSMiddleware keyword arguments for read-only edition access."""
    origins = [o.strip() for o in settings.cors_allow_origins.split(",") if o.strip()]
    if not origins or "*" in origins:
        origins = ["*"]
    # Starlette rejects credentials combined with a wildcard origin.
    allow_credentials = settings.cors_allow_credentials and origins != ["*"]
    return {
        "allow_origins": origins,
        "allow_credentials": allow_credentials,
        "allow_methods": ["GET", "POST"],
        "allow_headers": ["Content-Type"],
    }


app.add_middleware(CORSMiddleware, **cors_options(get_settings()))


@app.exception_handler(UpstreamServiceError)
def _upstream_failed(request: Request, exc: UpstreamServiceError) -> JSONResponse:
    logger.error("Edition generation failed for %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Server error"},
    )


def get_edition_cache(request: Request) -> EditionCache:
    """Build the cache on first use and keep it on app.state."""
    cache = getattr(request.app.state, "edition_cache", None)
    if cache is None:
        cache = build_cache(get_settings())
        request.app.state.edition_cache = cache
    return cache


@app.get("/", response_class=PlainTextResponse)
def index(cache: EditionCache = Depends(get_edition_cache)) -> str:
    template = cache.generator.template
    names = ", ".join(available_sections(template.sections, template.list_field))
    return (
        f"OK: {template.title}. Endpoints: /all, /today, /section/:name, POST /refresh. "
        f"Sections: {names}"
    )


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/all")
def full_edition(cache: EditionCache = Depends(get_edition_cache)) -> Dict[str, Any]:
    record = cache.get_or_create(cache.today())
    return record.payload


@app.get("/today")
def today_summary(cache: EditionCache = Depends(get_edition_cache)) -> Dict[str, Any]:
    today = cache.today()
    record = cache.get_or_create(today)
    list_field = cache.generator.template.list_field
    return summarize(record.payload, today, list_field=list_field).model_dump()


@app.get("/section/{name}")
def edition_section(name: str, cache: EditionCache = Depends(get_edition_cache)) -> Any:
    record = cache.get_or_create(cache.today())
    template = cache.generator.template
    try:
        return section(
            record.payload, name, sections=template.sections, list_field=template.list_field
        )
    except SectionNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found") from exc


@app.post("/refresh")
def refresh_edition(cache: EditionCache = Depends(get_edition_cache)) -> Dict[str, Any]:
    record = cache.force_refresh(cache.today())
    return record.payload


if __name__ == "__main__":
    import uvicorn

    configure_logging(get_settings().log_level)
    uvicorn.run(
        "daily_prophet.server:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "false").lower() == "true",
    )
