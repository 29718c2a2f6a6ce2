"""
main.py - FastAPI application entry point for winquery.

Loads configuration, sets up logging and CORS, builds the `WindowStore` and
mounts the query router.
"""
import asyncio
import sys
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from winquery import __version__
from winquery.api.routes import router as windows_router
from winquery.config import load_config
from winquery.errors import ProviderError
from winquery.logger import get_logger, setup_logging
from winquery.store import WindowStore
from winquery.window import EnumerationProvider, create_provider


def create_app(
    config: dict[str, Any] | None = None,
    provider: EnumerationProvider | None = None,
    refresh_on_startup: bool = True,
) -> FastAPI:
    """
    Creates and configures the FastAPI application.

    Args:
        config: Full configuration dict; loaded from config.json when None.
        provider: Enumeration provider; the desktop provider from the
            `provider` config section when None.
        refresh_on_startup: Enumerate once when the app starts so the first
            query sees real windows.
    """
    if config is None:
        config = load_config()

    log_config = config.get("logging", {})
    setup_logging(
        level=log_config.get("level", "INFO"),
        log_file=log_config.get("file"),
        format_string=log_config.get("format"),
        force=True
    )
    logger = get_logger(__name__)
    logger.info(f"Starting winquery API server v{__version__}")

    store = WindowStore(
        provider=provider if provider is not None else create_provider(config.get("provider")),
        case_sensitive=config.get("query", {}).get("case_sensitive", False),
    )

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        if refresh_on_startup:
            try:
                await asyncio.to_thread(store.refresh)
            except (ProviderError, ValueError) as e:
                # Keep serving with an empty snapshot; POST /windows/refresh retries
                logger.error(f"Initial window enumeration failed: {e!s}")
        yield

    api_config = config.get("api", {})
    app = FastAPI(
        lifespan=lifespan,
        title="winquery Window Query API",
        description="Filter, sort and select desktop windows from an enumeration snapshot",
        version=__version__,
        debug=config.get("debug", False),
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=api_config.get("cors_origins", ["*"]),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_prefix = api_config.get("api_prefix", "/api/v1")
    app.include_router(windows_router, prefix=api_prefix)

    @app.get("/", summary="API Root", description="Returns basic API information.")
    async def root():
        return {
            "name": "winquery Window Query API",
            "version": __version__,
            "status": "running",
            "docs_url": "/docs",
            "api_prefix": api_prefix,
        }

    @app.get("/health", summary="Health Check", description="Health check endpoint.")
    async def health_check():
        return {
            "service": "winquery",
            "version": __version__,
            "status": "healthy",
            "snapshot_size": len(store.current),
        }

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "detail": str(exc)}
        )

    logger.info("FastAPI application created and configured successfully")
    return app


def main_api_server() -> None:
    """Console script entry point: serves the API with uvicorn."""
    config = load_config()
    api_config = config.get("api", {})

    host = api_config.get("host", "127.0.0.1")
    port = api_config.get("port", 8080)
    debug = config.get("debug", False)

    print(f"Starting winquery API server on {host}:{port}")
    print(f"API Documentation: http://{host}:{port}/docs")

    uvicorn.run(
        create_app(config),
        host=host,
        port=port,
        log_level="debug" if debug else "info",
        access_log=True,
        loop="asyncio" if sys.platform == "win32" else "auto",
        workers=1,
    )


if __name__ == "__main__":
    main_api_server()
