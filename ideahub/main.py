"""
IdeaHub — FastAPI application entry-point.

Run with:
    uvicorn ideahub.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from ideahub.config import settings
from ideahub.database import Database
from ideahub.exceptions import IdeaHubError

# ── Import routers ──
from ideahub.routers import admin, auth, evaluator, ideas

logger = logging.getLogger(__name__)


# ── Lifespan: create tables on startup, release the pool on shutdown ──
@asynccontextmanager
async def lifespan(app: FastAPI):
    database: Database = app.state.database
    await database.create_all()
    logger.info("Database ready: %s", database.engine.url.render_as_string(hide_password=True))
    yield
    await database.dispose()


# ── Exception handlers ──
async def domain_error_handler(request: Request, exc: IdeaHubError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info("Rejected invalid request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Storage failure on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app(database: Optional[Database] = None) -> FastAPI:
    logging.basicConfig(level=settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Submit ideas, moderate them, and vote on the approved ones.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.database = database or Database(settings.DATABASE_URL, echo=settings.DEBUG)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=("*",))

    app.add_exception_handler(IdeaHubError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)

    # ── Register API routers ──
    app.include_router(auth.router, prefix=settings.API_PREFIX)
    app.include_router(ideas.router, prefix=settings.API_PREFIX)
    app.include_router(admin.router, prefix=settings.API_PREFIX)
    app.include_router(evaluator.router, prefix=settings.API_PREFIX)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
