import logging
from contextlib import asynccontextmanager

try:
    import sentry_sdk
except ModuleNotFoundError:  # Sentry optional in local/test envs
    sentry_sdk = None
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

try:
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.logging import LoggingIntegration
except ModuleNotFoundError:  # Sentry optional during local dev/tests
    FastApiIntegration = None
    LoggingIntegration = None

from prospector.api.routes import generate, health
from prospector.config import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    if sentry_sdk and FastApiIntegration and LoggingIntegration and settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            integrations=[
                FastApiIntegration(),
                LoggingIntegration(level=logging.INFO),
            ],
            traces_sample_rate=0.1,
            environment=settings.environment,
        )
        logger.info("Sentry initialized")

    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY is not set; /api/generate will report a configuration error")
    logger.info("Lead source: %s", "apollo" if settings.apollo_enabled else "bundled sample set")

    yield

    logger.info("Shutting down application")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Turns an ideal customer profile into ranked leads with drafted outreach",
    lifespan=lifespan,
    debug=settings.debug,
)

if settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests."""
    logger.info(f"{request.method} {request.url.path}")
    response = await call_next(request)
    logger.info(f"Response status: {response.status_code}")
    return response


@app.exception_handler(RequestValidationError)
async def invalid_request_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are client errors with the same shape as pipeline errors."""
    first = exc.errors()[0] if exc.errors() else {}
    detail = first.get("msg")
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    if location and detail:
        detail = f"{location}: {detail}"
    return JSONResponse(status_code=400, content={"error": "Invalid request body.", "detail": detail})


app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(generate.router, prefix="/api", tags=["generate"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.environment,
    }
