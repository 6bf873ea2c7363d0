"""
FastAPI application factory.

* Registers the auth, travel and chat routers.
* Maps the domain error taxonomy onto ``{"status": false, "error": ...}``
  JSON bodies; store failures are logged and reported generically.
* Applies CORS for the frontend and rate limiting per route.
* Serves uploaded trip images under ``/uploads``.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from redis.exceptions import RedisError
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

from tripshare.api.broadcast import BroadcastChannel
from tripshare.api.middleware import limiter
from tripshare.api.routes import auth, chat, travel
from tripshare.config import settings
from tripshare.domain.errors import NotAuthenticated, StoreFailure, TripShareError
from tripshare.infrastructure.database import engine
from tripshare.infrastructure.redis_client import close_redis
from tripshare.infrastructure.uploads import UPLOAD_URL_PREFIX

logging.basicConfig(level=settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Release the Redis pool and DB engine on shutdown."""
    yield
    await close_redis()
    await engine.dispose()


async def _tripshare_error_handler(request: Request, exc: TripShareError):
    body = {"status": False, "error": exc.message}
    if isinstance(exc, NotAuthenticated):
        body["loggedIn"] = False
    return JSONResponse(status_code=exc.status_code, content=body)


async def _store_error_handler(request: Request, exc: Exception):
    logger.error(
        "Store failure on %s %s", request.method, request.url.path, exc_info=exc
    )
    failure = StoreFailure()
    return JSONResponse(
        status_code=failure.status_code,
        content={"status": False, "error": failure.message},
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title="TripShare API",
        description=(
            "Trip-sharing backend: registration and login, trip listing and "
            "search, a join-request workflow (apply / accept / decline) and "
            "a broadcast chat room."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Chat room (the only in-process shared state besides sessions)
    app.state.chat = BroadcastChannel()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Errors
    app.add_exception_handler(TripShareError, _tripshare_error_handler)
    app.add_exception_handler(SQLAlchemyError, _store_error_handler)
    app.add_exception_handler(RedisError, _store_error_handler)

    # Routers
    app.include_router(auth.router)
    app.include_router(travel.router)
    app.include_router(chat.router)

    # Uploaded trip images
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    app.mount(
        UPLOAD_URL_PREFIX,
        StaticFiles(directory=settings.upload_dir),
        name="uploads",
    )

    return app
