import os
from contextlib import asynccontextmanager
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from database import init_db
from utils.errors import AppError, VerificationError
from utils.logger_factory import new_logger

load_dotenv()

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(title="Buddha CEO API", lifespan=lifespan)


@app.middleware("http")
async def log_request(request: Request, call_next):
    # Bodies carry verification codes and contact details, so only the route is logged
    log = new_logger("log_request")
    if request.method != "OPTIONS":  # Skip CORS preflight
        log.info(f"INCOMING REQUEST: {request.method} {request.url.path}")
    return await call_next(request)


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials="*" not in CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(AppError)
async def handle_app_error(request: Request, exc: AppError):
    log = new_logger("handle_app_error")
    if isinstance(exc, VerificationError):
        log.warning(f"{request.method} {request.url.path}: verification failed ({exc.reason.value})")
    elif exc.status_code >= 500:
        log.error(f"{request.method} {request.url.path}: {type(exc).__name__}: {exc.message}")
    else:
        log.info(f"{request.method} {request.url.path}: {exc.status_code} {exc.message}")
    return error_response(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return error_response(exc.status_code, message)


def describe_validation_error(error: dict) -> str:
    location = [str(part) for part in error.get("loc", ()) if part != "body"]
    field = location[-1] if location else None
    if error.get("type") == "json_invalid":
        return "Invalid JSON in request body"
    if error.get("type") == "missing":
        return f"{field} is required" if field else "Request body is required"
    return f"Invalid {field}: {error.get('msg')}" if field else error.get("msg", "Invalid request")


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = describe_validation_error(errors[0]) if errors else "Invalid request"
    new_logger("handle_validation_error").info(f"{request.method} {request.url.path}: 400 {message}")
    return error_response(400, message)


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    new_logger("handle_unexpected_error").exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(500, "Internal server error")


@app.get("/")
def root():
    return {"message": "Buddha CEO API deployed.  Note: the DB connection has not been verified yet."}


from api.events import router as events_router
from api.volunteers import router as volunteers_router
from api.teachers import router as teachers_router
from api.content import router as content_router
from api.resources import router as resources_router
from api.inbox import router as inbox_router
from api.admin import router as admin_router
from api.tracking import router as tracking_router
from api.feedback import router as feedback_router
from api.about import router as about_router
from api.healthcheck import router as health_router

app.include_router(events_router, prefix="/api")
app.include_router(volunteers_router, prefix="/api")
app.include_router(teachers_router, prefix="/api")
app.include_router(content_router, prefix="/api")
app.include_router(resources_router, prefix="/api")
app.include_router(inbox_router, prefix="/api")
app.include_router(admin_router, prefix="/api")
app.include_router(tracking_router, prefix="/api")
app.include_router(feedback_router, prefix="/api")
app.include_router(about_router, prefix="/api")
app.include_router(health_router, prefix="/api")
