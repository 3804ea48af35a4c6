# main.py
from fastapi.middleware.cors import CORSMiddleware
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from .api.router import router
from .config import Settings, settings as default_settings
from .context import CafeContext
from .database.session import connect, flush_tables, list_tables
from .database.table import Table
from .exceptions import EmptyEntityListError
from .generator.scheduler import FixedRateScheduler
from .generator.visits import VisitGenerator
from .utils.services import (
    CAFE_LIST, VISIT_DATA,
    cafe_names, fetch_cafe_names, populate_cafes,
)

import uvicorn

logging.basicConfig(level=default_settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


def bootstrap(settings: Settings) -> CafeContext:
    """Open storage, create and fill the tables, and wire the generator"""
    executor = connect(settings)
    try:
        existing = list_tables(executor)
        if settings.DB_RESET_ON_START:
            flush_tables(executor)
            existing = []
        context = CafeContext(
            settings=settings,
            executor=executor,
            cafe_table=Table(CAFE_LIST, executor),
            visit_table=Table(VISIT_DATA, executor),
        )
        for table in (context.cafe_table, context.visit_table):
            if table.name in existing:
                logger.info(f"Table {table.name} kept from the previous run")
            else:
                table.create()
        if CAFE_LIST.name not in existing:
            populate_cafes(
                context.cafe_table,
                cafe_names(settings.CAFE_COUNT, settings.CAFE_NAME_PREFIX),
            )

        context.cafes = fetch_cafe_names(context.cafe_table)
        if not context.cafes:
            raise EmptyEntityListError("Cafe list is empty after start-up")

        context.generator = VisitGenerator(
            context.visit_table,
            context.cafes,
            generations_per_day=settings.GENERATIONS_PER_DAY,
            visit_limit=settings.VISIT_LIMIT,
            mode=settings.SELECTION_MODE,
        )
        context.scheduler = FixedRateScheduler(
            context.generator.tick,
            interval=settings.GENERATION_INTERVAL,
            delay=settings.GENERATION_DELAY,
        )
    except Exception:
        executor.close()
        raise
    return context


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logging.getLogger().setLevel(settings.LOG_LEVEL)
        logger.info("Cafe visits API starting up...")
        app.state.context = bootstrap(settings)

        if settings.GENERATOR_ENABLED:
            app.state.context.scheduler.start()
            logger.debug("Data generator started")

        try:
            yield
        finally:
            # Shutdown
            try:
                app.state.context.close()
            except Exception as e:
                logger.warning(f"Error closing storage: {e}")
            logger.info("Cafe visits API shutting down...")

    app = FastAPI(
        title="Cafe Visits API",
        description="Synthetic cafe visit data with average visits per cafe",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(router=router)
    return app


app = create_app()


def run() -> None:
    uvicorn.run(app, host=default_settings.HTTP_HOST, port=default_settings.HTTP_PORT)
