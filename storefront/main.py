# storefront/main.py
import logging
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from . import __version__, auth, cart, contact, shop
from .cart_service import KeyedLocks
from .config import Settings
from .errors import InvalidInput, StorefrontError
from .logging_config import configure_logging
from .ratelimit import RateLimiter
from .seed import seed_products
from .stores import build_backend

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent.parent
STATIC_DIR = BASE_DIR / "static"

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}
SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
}


def _error_response(status_code: int, message: str, code: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, "code": code})


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return InvalidInput.default_message
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{field}: {first.get('msg')}" if field else first.get("msg", InvalidInput.default_message)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError):
        return _error_response(exc.status_code, exc.message, exc.code)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error_response(InvalidInput.status_code, _validation_message(exc), InvalidInput.code)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title="Storefront",
        description="Storefront API: accounts, product catalog, shopping cart and contact form",
        version=__version__,
    )
    app.state.settings = settings
    app.state.backend = build_backend(settings)
    app.state.cart_locks = KeyedLocks()
    app.state.rate_limiters = {
        "auth": RateLimiter(
            settings.auth_rate_limit, settings.auth_rate_window_seconds,
            "Too many attempts, please try again later",
        ),
        "contact": RateLimiter(
            settings.contact_rate_limit, settings.contact_rate_window_seconds,
            "Too many contact submissions, please try again later",
        ),
    }

    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def response_headers(request: Request, call_next):
        try:
            response = await call_next(request)
        except Exception:
            # storage outages included; details stay in the log
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            response = _error_response(500, "Server error", "server_error")
        for name, value in {**NO_CACHE_HEADERS, **SECURITY_HEADERS}.items():
            response.headers.setdefault(name, value)
        return response

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(shop.router)
    app.include_router(cart.router)
    app.include_router(contact.router)

    if STATIC_DIR.is_dir():
        app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    @app.get("/health")
    async def health():
        return {"status": "ok", "backend": app.state.backend.name}

    @app.on_event("startup")
    async def on_startup():
        backend = app.state.backend
        await backend.startup()
        if settings.seed_demo_products:
            async with backend.open() as stores:
                await seed_products(stores.catalog)
        logger.info("Storefront API ready (backend=%s)", backend.name)

    @app.on_event("shutdown")
    async def on_shutdown():
        await app.state.backend.shutdown()

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("storefront.main:app", host="0.0.0.0", port=5000, reload=True)
