"""
Main FastAPI application.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from portfolio_site.api.api import api_router
from portfolio_site.api.services.contact import REQUIRED_FIELDS_MESSAGE
from portfolio_site.core.config import (
    API_HOST,
    API_PORT,
    APP_VERSION,
    CORS_ALLOW_ORIGINS,
    DEBUG,
    ENVIRONMENT,
    LOG_LEVEL,
    SITE_NAME,
)
from portfolio_site.core.env_validator import print_environment_summary, validate_environment_variables
from portfolio_site.core.exceptions import AppException, ConfigurationError, MailDeliveryError, ValidationError
from portfolio_site.core.middleware import TrailingSlashMiddleware
from portfolio_site.web.pages import router as pages_router

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Missing mail settings only disable delivery; pages keep working
validate_environment_variables(strict=False)

METHOD_NOT_ALLOWED_MESSAGE = "メソッドが許可されていません"
UNEXPECTED_ERROR_MESSAGE = "予期しないエラーが発生しました"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(f"Starting {SITE_NAME} server...")
    logger.info(f"Environment: {ENVIRONMENT}")
    logger.info(f"Debug mode: {DEBUG}")

    print_environment_summary()

    yield

    logger.info(f"Shutting down {SITE_NAME} server...")


app = FastAPI(
    title=f"{SITE_NAME} API",
    description="Portfolio site with a contact form that emails submissions",
    version=APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs" if DEBUG else None,
    redoc_url="/redoc" if DEBUG else None,
    redirect_slashes=False,  # TrailingSlashMiddleware rewrites paths instead
)

# Starlette applies middleware in reverse order; CORS is added last to be outermost
app.add_middleware(TrailingSlashMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=3600,
)

app.include_router(api_router)
app.include_router(pages_router)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions (404, 405) with the common message body."""
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        message = METHOD_NOT_ALLOWED_MESSAGE
    else:
        message = exc.detail if isinstance(exc.detail, str) else f"HTTP {exc.status_code} error"
    return JSONResponse(status_code=exc.status_code, content={"message": message}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """A body that cannot be read as a contact payload is a bad request."""
    logger.warning(f"Request validation failed on {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": REQUIRED_FIELDS_MESSAGE})


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    """Handle validation errors."""
    logger.warning(f"Validation error: {exc.message}", extra={"details": exc.details})
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=exc.to_response())


@app.exception_handler(MailDeliveryError)
async def mail_delivery_error_handler(request: Request, exc: MailDeliveryError):
    """Mail relay failures: detail is logged, the caller gets the fixed message."""
    logger.error(f"Mail delivery failed: {exc.reason}", extra={"details": exc.details})
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=exc.to_response())


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    """Missing relay settings fail closed with the same body as a failed send."""
    logger.error(f"Configuration error: {exc.message}", extra={"details": exc.details})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"message": MailDeliveryError.PUBLIC_MESSAGE}
    )


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    """Handle generic application exceptions."""
    logger.error(f"Application error: {exc.message}", extra={"details": exc.details})
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"message": UNEXPECTED_ERROR_MESSAGE})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for uncaught exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": UNEXPECTED_ERROR_MESSAGE if not DEBUG else str(exc)},
    )


if __name__ == "__main__":
    uvicorn.run(
        "portfolio_site.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=DEBUG,
        log_level=LOG_LEVEL.lower(),
        proxy_headers=True
    )
