"""
API server for the PDF to Image service.

Exposes service info and the PDF conversion endpoint as JSON REST APIs.
"""
import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware

from pdf_api.api import routes
from pdf_api.config import get
from pdf_api.downloader import PdfDownloader
from pdf_api.logging_config import configure_logging, get_logger
from pdf_api.middleware import CorrelationIdMiddleware, ErrorBoundaryMiddleware

# Initialize centralized logging
LOG_LEVEL = get("app", "log_level").upper()
configure_logging(
    log_level=LOG_LEVEL,
    service="pdf_api",
    enable_file_logging=get("app", "file_logging"),
)
logger = get_logger("pdf_api")


def create_app(downloader: PdfDownloader | None = None) -> Starlette:
    """Build the ASGI application.

    Args:
        downloader: Optional downloader shared by all conversions
            (a fresh default one is created per request otherwise)
    """
    middleware = [
        Middleware(
            CORSMiddleware,
            allow_origins=get("cors", "allow_origins"),
            allow_methods=get("cors", "allow_methods"),
            allow_headers=get("cors", "allow_headers"),
        ),
        Middleware(CorrelationIdMiddleware),
        Middleware(ErrorBoundaryMiddleware),
    ]

    application = Starlette(
        debug=False,
        routes=routes,
        middleware=middleware,
    )
    application.state.downloader = downloader
    return application


app = create_app()

# Alias for compatibility with existing uvicorn command
asgi_app = app

if __name__ == "__main__":
    HOT_RELOAD = get("app", "hot_reload")
    logger.info(f"Starting app with hot reload: {HOT_RELOAD}")
    uvicorn.run(
        "main:asgi_app",
        host=get("app", "host"),
        port=get("app", "port"),
        reload=HOT_RELOAD,
    )
