import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from topic_portal.api.api import api_router
from topic_portal.config.dependency_injection import create_database
from topic_portal.core.config import settings
from topic_portal.core.errors import SubmissionError
from topic_portal.schemas.response import ErrorResponse

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Open the storage client at startup and close it at shutdown.
    Handlers reach it through app.state.database.
    """
    database = create_database().open()
    app.state.database = database
    try:
        yield
    finally:
        database.close()


def _error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
        headers=headers,
    )


def _validation_message(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        ctx_error = (error.get("ctx") or {}).get("error")
        loc = tuple(error.get("loc", ()))
        if ctx_error is not None:
            messages.append(str(ctx_error))
        elif error.get("type") == "missing" and loc == ("body",):
            messages.append("All fields are required")
        else:
            field = ".".join(str(part) for part in loc[1:]) or "request"
            messages.append(f"{field}: {error.get('msg')}")
    return ". ".join(dict.fromkeys(messages))


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    lifespan=lifespan,
)

# Set all CORS enabled origins
if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(SubmissionError)
async def submission_error_handler(request: Request, exc: SubmissionError):
    return _error_response(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return _error_response(400, _validation_message(exc))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(500, "An unexpected error occurred")


app.include_router(api_router, prefix=settings.API_PREFIX)


if __name__ == '__main__':
    uvicorn.run(
        'topic_portal.main:app',
        host='0.0.0.0',
        port=settings.BACKEND_PORT,
        reload=True
    )
