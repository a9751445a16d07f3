import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from app.api.rest_routes.ai import router as ai_router
from app.api.rest_routes.data import router as data_router
from app.api.rest_routes.fertilizer import router as fertilizer_router
from app.api.rest_routes.weather import router as weather_router
from app.core.config import settings
from app.core.errors import RateLimitExceeded, UpstreamServiceError
from app.core.state import build_advisory_state
from app.models.api import error_body

load_dotenv()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

GENERIC_ERROR = "Something went wrong"


@asynccontextmanager
async def lifespan(app: FastAPI):
    advisory = build_advisory_state(settings)
    advisory.load()
    app.state.advisory = advisory
    logger.info("Bhoomi AI advisory service ready (%s)", settings.ENVIRONMENT)
    yield


app = FastAPI(title="Bhoomi AI Advisory API", lifespan=lifespan)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content=error_body(str(exc.detail)))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    detail = "Invalid request"
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        detail = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body(detail))


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=error_body(
            "Rate limit exceeded. Please try again later.", retryAfter=exc.retry_after
        ),
        headers={"Retry-After": str(exc.retry_after)},
    )


@app.exception_handler(UpstreamServiceError)
async def upstream_error_handler(request: Request, exc: UpstreamServiceError):
    logger.error("%s failed on %s: %s", exc.service, request.url.path, exc.message)
    message = GENERIC_ERROR if settings.is_production else exc.message
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=error_body(message)
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    message = GENERIC_ERROR if settings.is_production else str(exc) or GENERIC_ERROR
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=error_body(message)
    )


app.include_router(ai_router)
app.include_router(weather_router)
app.include_router(data_router)
app.include_router(fertilizer_router)


@app.get("/")
async def root():
    return {"message": "Welcome to the Bhoomi AI farmer advisory API!"}


@app.get("/health")
async def health():
    advisory = getattr(app.state, "advisory", None)
    return {
        "status": "ok",
        "environment": settings.ENVIRONMENT,
        "datasetsLoaded": bool(advisory and advisory.knowledge_base.is_data_available()),
    }
