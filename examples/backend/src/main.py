"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from urllib.parse import urlparse

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi import Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from namerec.oino import ApiParams
from namerec.oino import DbParams
from namerec.oino import OINOError
from src.config import settings
from src.dependencies import container
from src.exceptions import ResourceNotFoundError
from src.exceptions import handle_oino_exception
from src.logging_config import configure_logging
from src.routers import oino

# Configure logging
configure_logging(settings.log_level, settings.library_log_level)
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: ARG001
    """
    Manage application lifecycle.

    Handles:
    - Database connection and table introspection at startup
    - Database connection cleanup at shutdown
    """
    # Startup
    logger.info('Starting OINO backend demo', debug_mode=settings.debug_mode)

    # Log database URL (without password for security)
    parsed_url = urlparse(settings.database_url)
    db_url_safe = (
        f'{parsed_url.scheme}://{parsed_url.hostname}:'
        f'{parsed_url.port or "default"}/{parsed_url.path.lstrip("/")}'
    )
    logger.info('Database URL configured', database=db_url_safe, dialect=settings.dialect.value)

    # Configure DI container - MUST be done before any engine access
    container.config.database_url.from_value(settings.database_url)

    factory = container.factory()
    try:
        db = await factory.create_db(
            DbParams(settings.dialect, settings.database_url, settings.database),
            container.engine(),
        )
        if settings.debug_mode:
            validation = await db.validate()
            logger.info('Database validated', result=validation.print_log())

        apis = container.apis()
        for table in settings.tables:
            apis[table] = await factory.create_api(db, ApiParams(table, hashid_key=settings.hashid_key))
            logger.info('Resource created', resource=table, fields=len(apis[table].datamodel.fields))
    except OINOError as e:
        logger.exception('Failed to initialize OINO', error=str(e), error_type=type(e).__name__)
        raise

    logger.info('OINO initialized successfully', resources=sorted(container.apis()))

    yield

    # Shutdown
    logger.info('Shutting down OINO backend demo')

    # Dispose database engine
    await db.close()

    logger.info('Database connections closed')


# Create FastAPI application
app = FastAPI(
    title='OINO Backend Demo',
    description='FastAPI backend serving database tables as OINO REST resources',
    version='0.1.0',
    lifespan=lifespan,
)

# CORS for browser-based clients
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
    expose_headers=['*'],
)

# Include routers
app.include_router(oino.router)


# Exception handlers
@app.exception_handler(ResourceNotFoundError)
async def resource_not_found_handler(request: Request, exc: ResourceNotFoundError):  # noqa: ARG001
    """Handle requests for unknown resources."""
    error, status_code = handle_oino_exception(exc, settings.debug_mode)
    logger.warning('Resource not found', resource=exc.resource)
    return JSONResponse(status_code=status_code, content=error.model_dump())


@app.exception_handler(OINOError)
async def oino_error_handler(request: Request, exc: OINOError):  # noqa: ARG001
    """Handle OINO errors raised outside request handling (e.g. invalid query parameters)."""
    error, status_code = handle_oino_exception(exc, settings.debug_mode)
    logger.error('OINO error', message=str(exc))
    return JSONResponse(status_code=status_code, content=error.model_dump())


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):  # noqa: ARG001
    """Handle unexpected exceptions."""
    error, status_code = handle_oino_exception(exc, settings.debug_mode)
    logger.exception('Unexpected error', exc_info=exc)
    return JSONResponse(status_code=status_code, content=error.model_dump())


# Health check endpoint
@app.get('/health')
async def health_check() -> dict:
    """Health check endpoint."""
    return {'status': 'ok', 'service': 'oino-backend-demo'}


def run() -> None:
    """Run development server with default settings."""
    uvicorn.run(
        'src.main:app',
        host='0.0.0.0',  # noqa: S104
        port=8000,
        reload=True,
        log_config=None,  # Use our custom logging configuration
    )


if __name__ == '__main__':
    run()
