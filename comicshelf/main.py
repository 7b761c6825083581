from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy.exc import IntegrityError

from comicshelf.config import CORS_ORIGINS
from comicshelf.database import Database
from comicshelf.errors import ServiceError
from comicshelf.limiter import limiter
from comicshelf.routes import (
    auth,
    category_routes,
    chapter_routes,
    comic_routes,
    health,
    library_routes,
    review_routes,
    user_routes,
)
from comicshelf.s3 import ObjectStorage
from comicshelf.utils.google_auth import GoogleTokenVerifier
from comicshelf.utils.logging import get_logger

log = get_logger(__name__)


def create_app(
    database: Optional[Database] = None,
    storage: Optional[ObjectStorage] = None,
    google_verifier: Optional[GoogleTokenVerifier] = None,
    create_tables: bool = True,
) -> FastAPI:
    db = database or Database()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if create_tables:
            await db.create_all()
        log.info("ComicShelf API started")
        yield
        await db.dispose()

    app = FastAPI(title="ComicShelf API", lifespan=lifespan)

    app.state.db = db
    app.state.storage = storage or ObjectStorage()
    app.state.google_verifier = google_verifier or GoogleTokenVerifier()
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        return JSONResponse(
            status_code=429,
            content={"detail": "Too many requests. Please slow down."}
        )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        if exc.status_code >= 500:
            log.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        log.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
        return JSONResponse(
            status_code=409,
            content={"detail": "Conflict with existing data"},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        log.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})

    # ✅ Enable CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ✅ Include your routers
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(comic_routes.router)
    app.include_router(chapter_routes.router)
    app.include_router(review_routes.router)
    app.include_router(category_routes.router)
    app.include_router(library_routes.router)
    app.include_router(user_routes.router)

    return app


app = create_app()


def run():
    import os

    import uvicorn

    uvicorn.run(
        "comicshelf.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
    )
