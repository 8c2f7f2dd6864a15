import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from journal_service.api.endpoints import router
from journal_service.api.exception_handlers import register_exception_handlers
from journal_service.core.config import settings
from journal_service.core.database import DatabasePool
from journal_service.core.tracing import instrument_app, setup_tracing, shutdown_tracing
from journal_service.features.database import DatabaseClient
from journal_service.services.http_client import HTTPClientManager
from journal_service.services.inference import HuggingFaceClient
from journal_service.shared.correlation import CorrelationMiddleware
from journal_service.shared.logging_config import setup_logging

setup_logging(service_name=settings.SERVICE_NAME)
logger = logging.getLogger("Journal.Main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_tracing(settings.SERVICE_NAME)

    http_client_manager = HTTPClientManager(default_timeout=settings.INFERENCE_REQUEST_TIMEOUT)
    await http_client_manager.startup()

    pool = DatabasePool(
        settings.DATABASE_URL,
        min_size=settings.DB_POOL_MIN_SIZE,
        max_size=settings.DB_POOL_MAX_SIZE,
    )
    try:
        pool.open()

        app.state.db = DatabaseClient(pool)
        app.state.analyzer = HuggingFaceClient.from_settings(settings, http_client_manager)

        if settings.AUTO_CREATE_SCHEMA:
            app.state.db.setup_schema()

        logger.info("Mood Journal Service started")
        yield
    finally:
        pool.close()
        await http_client_manager.shutdown()
        shutdown_tracing()
        logger.info("Mood Journal Service stopped")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Mood Journal Service",
        description="Journal entries with sentiment and keyword analysis",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.add_middleware(CorrelationMiddleware)
    register_exception_handlers(app)
    app.include_router(router)
    instrument_app(app)
    return app


app = create_app()


@app.get("/")
async def root():
    return {"message": "Mood Journal Service Running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
