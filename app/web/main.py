from __future__ import annotations

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.middleware.sessions import SessionMiddleware
from starlette.staticfiles import StaticFiles
from starlette.responses import Response
from starlette.status import HTTP_403_FORBIDDEN
from app.web.core.ratelimit import limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.constants import APP_MODE, APP_NAME, APP_VERSION
from app.utils.startup_banner import startup_banner
from app.web.core.deps import (
    SESSION_SECRET,
    STATIC_DIR,
    default_controller_factory,
    drop_all_controllers,
    llm,
    templates,
)
from app.web.core.security import same_origin
from config import IS_PROD

from app.web.routes.pages import router as pages_router
from app.web.routes.api import router as api_router


# -----------------------------
# App
# -----------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    startup_banner(
        surface="Web",
        provider=llm.provider,
        model=llm.model,
        api=llm.base_url,
        version=APP_VERSION,
        mode=APP_MODE,
    )
    yield
    drop_all_controllers()


app = FastAPI(title=f"{APP_NAME} - Latest AI News Quiz", lifespan=lifespan)

# -----------------------------
# Rate limiting
# -----------------------------
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

@app.exception_handler(RateLimitExceeded)
async def ratelimit_handler(request: Request, exc: RateLimitExceeded):
    return PlainTextResponse("Too Many Requests", status_code=429)

# -----------------------------
# Sessions
# -----------------------------
app.add_middleware(
    SessionMiddleware,
    secret_key=SESSION_SECRET,
    same_site="lax",
    https_only=bool(IS_PROD),
    max_age=60 * 60 * 24,
)

# -----------------------------
# Static
# -----------------------------
os.makedirs(STATIC_DIR, exist_ok=True)
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

# shared state
app.state.templates = templates
app.state.controller_factory = default_controller_factory

# -----------------------------
# CSRF origin guard (same-origin)
# -----------------------------


@app.middleware("http")
async def csrf_same_host_guard(request: Request, call_next):
    if request.method in ("POST", "PUT", "DELETE", "PATCH"):
        ok = same_origin(
            str(request.base_url),
            request.headers.get("origin"),
            request.headers.get("referer"),
        )
        if not ok:
            return Response("CSRF blocked", status_code=HTTP_403_FORBIDDEN)

    return await call_next(request)

# -----------------------------
# Security headers
# -----------------------------
@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)

    response.headers["X-Frame-Options"] = "DENY"
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    response.headers["Permissions-Policy"] = "camera=(), microphone=(), geolocation=()"

    csp = (
        "default-src 'self'; "
        "base-uri 'self'; "
        "object-src 'none'; "
        "frame-ancestors 'none'; "
        "img-src 'self' data:; "
        "style-src 'self' 'unsafe-inline'; "
        "script-src 'self'; "
        "form-action 'self'; "
        "connect-src 'self';"
    )

    response.headers["Content-Security-Policy"] = csp
    return response

# -----------------------------
# Routes
# -----------------------------
app.include_router(pages_router)
app.include_router(api_router)
