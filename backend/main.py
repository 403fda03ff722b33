"""
Main FastAPI application entry point
"""
from contextlib import asynccontextmanager
from http import HTTPStatus
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routes import (auth, files, health, interactions, messaging,
                            metrics, offers, posts, profiles, project_details,
                            projects, tokens, users)
from app.core.config import get_settings
from app.core.errors import ServiceError, to_http_exception
from app.core.logging_config import LoggingConfig
from app.core.metrics import set_app_info
from app.core.middleware import LoggingContextMiddleware
from app.core.middleware_metrics import MetricsMiddleware
from app.services.token_cleanup_scheduler import get_token_cleanup_scheduler

LoggingConfig.configure()

logger = LoggingConfig.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start and stop the token cleanup scheduler"""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode...")
    Path(settings.upload_directory).mkdir(parents=True, exist_ok=True)

    scheduler = get_token_cleanup_scheduler()
    if settings.token_cleanup_enabled:
        await scheduler.start()
    else:
        logger.info("Token cleanup scheduler disabled by configuration")

    yield

    logger.info(f"Shutting down {settings.app_name}...")
    await scheduler.stop()


_settings = get_settings()
app = FastAPI(
    title=_settings.app_name,
    description="Investment platform API connecting project founders and investors",
    version="0.1.0",
    lifespan=lifespan,
)
set_app_info(_settings.app_name, _settings.app_env, app.version)

# Added first, so it sits closest to the routes and sees their logs
app.add_middleware(LoggingContextMiddleware)
app.add_middleware(MetricsMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_body(status_code: int, message) -> dict:
    try:
        reason = HTTPStatus(status_code).phrase
    except ValueError:
        reason = "Error"
    return {"statusCode": status_code, "message": message, "error": reason}


def validation_messages(exc: RequestValidationError) -> list:
    """One readable line per failed field"""
    messages = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form")]
        text = str(error.get("msg", "Invalid value")).replace("Value error, ", "")
        messages.append(f"{'.'.join(location)}: {text}" if location else text)
    return messages


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, exc.detail),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    """Domain errors raised by services become their HTTP status"""
    if exc.status_code >= 500:
        logger.error(f"Service error on {request.method} {request.url.path}: {exc.message}")
    return await http_exception_handler(request, to_http_exception(exc))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = validation_messages(exc)
    logger.info(f"Validation failed on {request.method} {request.url.path}: {messages}")
    return JSONResponse(status_code=400, content=error_body(400, messages))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Anything not mapped above becomes a logged 500"""
    logger.error(
        "Unhandled exception",
        exc_info=exc,
        extra={
            "error": str(exc),
            "error_type": type(exc).__name__,
            "path": request.url.path,
            "method": request.method,
        }
    )
    return JSONResponse(status_code=500, content=error_body(500, "Internal server error"))


app.include_router(health.router)
app.include_router(metrics.router)
app.include_router(auth.router)
app.include_router(tokens.router)
app.include_router(tokens.admin_router)
app.include_router(users.router)
app.include_router(projects.router)
app.include_router(projects.sector_router)
app.include_router(files.router)
for module in (project_details, profiles, offers, messaging, interactions, posts):
    for router in module.routers:
        app.include_router(router)

# Uploaded files are served as-is; the directory may be created later by init_file_storage
app.mount("/uploads", StaticFiles(directory=_settings.upload_directory, check_dir=False), name="uploads")


@app.get("/api")
async def root():
    """Service banner"""
    settings = get_settings()
    return {
        "name": settings.app_name,
        "version": "0.1.0",
        "status": "running",
        "environment": settings.app_env,
    }


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.app_env == "development",
    )
