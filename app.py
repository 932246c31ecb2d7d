#!/usr/bin/env python3
"""
Main entry point for the link shortener service.

Concurrency: requests are served concurrently on one event loop per worker
(FastAPI + asyncpg connection pool). The pool is opened once when the
process starts and closed when it stops. Set WORKERS > 1 for multi-process
scaling; each worker opens its own pool.

Usage:
    python app.py

Environment variables:
    DATABASE_URL - PostgreSQL connection URL (or memory:// for development)
    CREATE_TABLES - Set to true to create the schema at startup
    STATS_TIMEZONE - IANA timezone for the clicks-today boundary
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import Config, load_config
from linkshort.clock import resolve_timezone
from linkshort.database import create_store
from linkshort.service import LinkShortenerService
from linkshort.common.logging_config import setup_logging
from web_app import create_app


def build_service(config: Config, logger) -> LinkShortenerService:
    """Wire the store and service from configuration. The store is not connected yet."""
    store = create_store(
        database_url=config.database_url,
        pool_min_size=config.db_pool_min_size,
        pool_max_size=config.db_pool_max_size,
        command_timeout_seconds=config.db_command_timeout_seconds,
        logger=logger,
    )
    return LinkShortenerService(
        store=store,
        logger=logger,
        stats_timezone=resolve_timezone(config.stats_timezone),
        max_generation_attempts=config.max_generation_attempts,
        visit_history_limit=config.visit_history_limit,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting link shortener service...")

    service = build_service(config, logger)
    await service.store.connect()

    if config.create_tables:
        await service.store.create_schema()

    app.state.service = service

    logger.info("Service started successfully")

    try:
        yield
    finally:
        logger.info("Shutting down link shortener service...")
        await service.close()
        logger.info("Service stopped")


def create_application() -> FastAPI:
    """Build a fully configured app whose lifespan opens the store.

    Importable as ``app:create_application`` so that uvicorn can rebuild the
    app inside every worker process.
    """
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    # Service is created by the lifespan
    app = create_app(service_instance=None, config=config)

    app.state.config = config
    app.state.logger = logger

    app.router.lifespan_context = lifespan

    return app


def main():
    """Main entry point."""
    app = create_application()
    config = app.state.config
    logger = app.state.logger

    logger.info("Link Shortener Service")
    logger.info(f"Configuration: {config.model_dump(exclude={'database_url'})}")

    if config.workers > 1:
        # Workers need an import string; each one builds its own app and pool.
        logger.info(f"Starting {config.workers} workers on {config.host}:{config.port}")
        uvicorn.run(
            "app:create_application",
            factory=True,
            host=config.host,
            port=config.port,
            workers=config.workers,
            log_level=config.log_level.lower(),
            access_log=True,
        )
        return

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=True,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
