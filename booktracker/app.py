import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from booktracker.config import Settings, load_settings
from booktracker.database import create_sessionmaker, open_store
from booktracker.errors import NotFound, StoreUnavailable, ValidationError
from booktracker.logging_config import setup_logging
from booktracker.routers import books, health

logger = logging.getLogger(__name__)


def _lifespan(settings: Settings | None):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        config = settings or load_settings()
        setup_logging(config.log_level)
        try:
            engine = await open_store(config.database_url)
        except StoreUnavailable as e:
            logger.error("%s", e)
            raise
        logger.info("Store connected")
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        try:
            yield
        finally:
            await engine.dispose()
            logger.info("Store connection closed")

    return lifespan


async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


async def _not_found(request: Request, exc: NotFound) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": "Book not found"})


async def _store_unavailable(request: Request, exc: StoreUnavailable) -> JSONResponse:
    return JSONResponse(status_code=503, content={"detail": "Store unavailable"})


def create_app(settings: Settings | None = None) -> FastAPI:
    app = FastAPI(title="Book Tracker", version="0.1.0", lifespan=_lifespan(settings))
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(NotFound, _not_found)
    app.add_exception_handler(StoreUnavailable, _store_unavailable)
    app.include_router(books.router)
    app.include_router(health.router)
    return app


app = create_app()
