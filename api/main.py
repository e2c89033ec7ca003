"""
FastAPI main application for the Bookstore Catalog API.
"""

import time
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.config import config
from api.database import APIDatabaseService
from api.models import ErrorResponse
from api.routes import books, health, publishers, shops
from catalog.database import MongoDBManager
from catalog.errors import CatalogError, StoreError
from catalog.repositories import Repositories
from utilities.logger import setup_logging

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.log_file,
        debug=config.debug
    )
    logger.info("Starting Bookstore Catalog API")

    db_manager = MongoDBManager(
        connection_url=config.mongodb_url,
        database_name=config.mongodb_database
    )
    try:
        await db_manager.connect()
    except Exception as e:
        logger.error("Failed to connect to database", error=str(e))
        raise

    app.state.db_service = APIDatabaseService(
        Repositories(db_manager),
        default_page_size=config.default_page_size
    )

    yield

    logger.info("Shutting down Bookstore Catalog API")
    await db_manager.disconnect()


app = FastAPI(
    title=config.api_title,
    description="""
    A REST API over books, publishers and shops.

    ## Features

    * **Books**: filter by publisher and format, paginated and sorted by title
    * **Publishers**: ranked by number of books, deleting one deletes its books
    * **Addresses**: managed inside their publisher
    * **Shops**: nearest-first search within a radius

    ## Pagination

    Book listings report pagination data in the `X-Pagination-Page`,
    `X-Pagination-Page-Size`, `X-Pagination-Total` and
    `X-Pagination-Filtered-Total` response headers.
    """,
    version=config.api_version,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=config.cors_allow_credentials,
    allow_methods=config.cors_allow_methods,
    allow_headers=config.cors_allow_headers,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log one line per request."""
    start = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "Request handled",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round((time.perf_counter() - start) * 1000, 2)
    )
    return response


# Exception handlers
@app.exception_handler(CatalogError)
async def catalog_exception_handler(request: Request, exc: CatalogError):
    """Render catalog errors with the status they carry."""
    if isinstance(exc, StoreError):
        logger.error("Store failure", operation=exc.operation, error=exc.detail, path=request.url.path)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=exc.message,
            detail=exc.detail,
            status_code=exc.status_code
        ).model_dump()
    )


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies and parameters are bad requests."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(
            error="Invalid request",
            detail=str(exc.errors()),
            status_code=status.HTTP_400_BAD_REQUEST
        ).model_dump()
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    logger.error("Unhandled exception", error=str(exc), path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error="Internal server error",
            detail=str(exc),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        ).model_dump()
    )


app.include_router(health.router)
app.include_router(books.router, prefix=config.api_prefix)
app.include_router(publishers.router, prefix=config.api_prefix)
app.include_router(shops.router, prefix=config.api_prefix)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level=config.log_level.lower()
    )
