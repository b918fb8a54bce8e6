# app/main.py
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from app.core.mailer import MailDispatcher, Sender
from app.core.rate_limit import RateLimitMiddleware, build_rate_limiter
from app.core.security import BodySizeLimitMiddleware, SecurityHeadersMiddleware
from app.core.settings import Settings, settings as default_settings
from app.lib.contact import ContactHandler
from app.routers.contact import router as contact_router
from app.routers.health import router as health_router

log = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    cfg: Settings = app.state.settings
    if cfg.smtp_verify_on_startup:
        # keep serving even if the relay is down; sends will fail individually
        await app.state.dispatcher.verify()
    log.info(f"[main] contact backend ready on port {cfg.port}")
    yield


def create_app(
    settings: Optional[Settings] = None,
    dispatcher=None,
    rate_limiter=None,
) -> FastAPI:
    settings = settings or default_settings
    dispatcher = dispatcher or MailDispatcher.from_settings(settings)

    app = FastAPI(title=settings.api_title, lifespan=lifespan)
    app.state.settings = settings
    app.state.dispatcher = dispatcher
    app.state.contact_handler = ContactHandler(
        dispatcher,
        owner_email=settings.owner_email,
        sender=Sender(name=settings.from_name, address=settings.from_email),
    )

    # last added runs first: security headers -> CORS -> body size -> rate limit
    app.add_middleware(
        RateLimitMiddleware,
        limiter=rate_limiter or build_rate_limiter(settings),
        path_prefix="/api/contact",
    )
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_body_bytes)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError):
        return JSONResponse({"error": "Invalid request body"}, status_code=400)

    # Routers
    app.include_router(health_router)
    app.include_router(contact_router)
    return app


app = create_app()
