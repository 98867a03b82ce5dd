from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from makeup_api.api.routers.auth import router as auth_router
from makeup_api.api.routers.billing import router as billing_router
from makeup_api.api.routers.me import router as me_router
from makeup_api.api.routers.usage import router as usage_router
from makeup_api.shared.config import Settings, get_settings


logger = logging.getLogger(__name__)

APP_TITLE = "MakeupAI - AIメイク提案アプリ"
APP_DESCRIPTION = "AIがあなたに最適なメイクを提案するパーソナライズドアプリ"


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    _configure_logging(settings.log_level)

    app = FastAPI(
        title=APP_TITLE,
        description=APP_DESCRIPTION,
        servers=[{"url": settings.site_url}],
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins or [settings.site_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(billing_router)
    app.include_router(auth_router)
    app.include_router(me_router)
    app.include_router(usage_router)

    @app.exception_handler(Exception)
    async def unhandled_exception(request: Request, exc: Exception):
        logger.exception("main: unhandled_error path=%s", request.url.path)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    @app.get("/health")
    def health():
        checks = {
            "stripe": "configured" if settings.stripe_secret_key else "missing",
            "supabase": "configured" if settings.supabase_url else "missing",
        }
        status = "healthy" if all(value == "configured" for value in checks.values()) else "degraded"
        return {"status": status, "site_url": settings.site_url, "checks": checks}

    if not settings.stripe_secret_key:
        logger.warning("main: stripe_not_configured billing endpoints will answer 503")
    if not settings.supabase_url:
        logger.warning("main: supabase_not_configured authenticated endpoints will answer 503")

    return app


app = create_app()
