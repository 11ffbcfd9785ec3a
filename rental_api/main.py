import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from rental_api.api.v1.api_router import api_router
from rental_api.core.config import settings
from rental_api.core.exceptions import InternalError, RentalError
from rental_api.core.startup import ensure_default_admin

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Vehicle Rental API",
    description="Vehicle listings and date-ranged rental orders with double-booking protection",
    version="1.0.0",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    """Application startup event."""
    await ensure_default_admin()


def _serializable_validation_errors(errors: list) -> list:
    """Convert validation error dicts to JSON-serializable form (e.g. ctx may contain Exception)."""
    out = []
    for e in errors:
        item = {"type": e.get("type"), "loc": e.get("loc"), "msg": e.get("msg")}
        if "ctx" in e and e["ctx"]:
            item["ctx"] = {k: str(v) for k, v in e["ctx"].items()}
        out.append(item)
    return out


def _validation_message(errors: list) -> str:
    """Human-readable message naming the first field that failed."""
    if not errors:
        return "Validation error"
    first = errors[0]
    field = ".".join(str(part) for part in (first.get("loc") or ()) if part not in ("body", "query", "path"))
    if first.get("type") == "missing":
        return f"Missing required field: {field}" if field else "Missing required field"
    if field:
        return f"Invalid {field}: {first.get('msg')}"
    return first.get("msg") or "Validation error"


@app.exception_handler(RentalError)
async def rental_exception_handler(request: Request, exc: RentalError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(StarletteHTTPException)
async def custom_http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    errors_serializable = _serializable_validation_errors(exc.errors())
    if any(e["type"] == "json_invalid" for e in errors_serializable):
        logger.warning("Malformed JSON body: method=%s path=%s", request.method, request.url.path)
        return JSONResponse(
            status_code=InternalError.status_code,
            content={"message": "Request body is not valid JSON"},
        )
    logger.info(
        "Validation error 400: method=%s path=%s errors=%s",
        request.method,
        request.url.path,
        errors_serializable,
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "message": _validation_message(errors_serializable),
            "errors": errors_serializable,
        },
    )


@app.exception_handler(ValidationError)
async def pydantic_validation_exception_handler(request: Request, exc: ValidationError):
    errors_serializable = _serializable_validation_errors(exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "message": _validation_message(errors_serializable),
            "errors": errors_serializable,
        },
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error: method=%s path=%s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": InternalError.default_message},
    )
