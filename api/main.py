from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from datetime import datetime

from .endpoints import (
    novel, chapter, analysis, character, place, event, lore, item, note,
    ai_prompt, outline, export
)
from db.database import engine, Base, test_database_connection
from utils.config import settings, validate_config
from utils.errors import ConflictError, NotFoundError, ValidationError
from utils.logging import SessionLogger, get_logger

logger = get_logger(__name__)

# Start API session only if no session exists (preserve test session when under pytest)
existing_session = SessionLogger.get_current_session()
if not existing_session:
    api_session_id = SessionLogger.start_session("api_server")
else:
    api_session_id = existing_session

validate_config()

# Create database tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Local Lore API",
    description="API for Local Lore novel writing and world-building",
    version="1.0.0"
)

class ContentLengthLimitMiddleware(BaseHTTPMiddleware):
    """Reject request bodies larger than MAX_CONTENT_LENGTH."""

    async def dispatch(self, request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > settings.MAX_CONTENT_LENGTH:
            logger.warning(f"Rejected {request.method} {request.url.path}: body of {content_length} bytes")
            return JSONResponse(status_code=413, content={"detail": "Request body too large"})
        return await call_next(request)

app.add_middleware(ContentLengthLimitMiddleware)

# CORS middleware with production-aware configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if settings.is_production():
    logger.info(f"Production CORS origins: {settings.CORS_ORIGINS}")
else:
    logger.info("Development CORS: allowing all origins")

def _validation_message(error: dict) -> str:
    """Turn a pydantic error into the message shown to the editor."""
    location = [str(part) for part in error.get("loc", ()) if part not in ("body", "path", "query")]
    field = location[-1] if location else "Request body"
    error_type = error.get("type", "")

    if error_type in ("missing", "string_too_short"):
        return f"{field} is required"
    if error_type == "string_too_long":
        return f"{field} must be less than {error['ctx']['max_length']} characters"
    if error_type in ("int_parsing", "int_type", "int_from_float"):
        return f"{field} must be a number"
    return f"{field}: {error.get('msg', 'invalid value')}"

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    messages = [_validation_message(error) for error in exc.errors()]
    return JSONResponse(status_code=400, content={"detail": messages[0], "errors": messages})

@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})

@app.exception_handler(ConflictError)
async def conflict_handler(request: Request, exc: ConflictError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    content = {"detail": "An error occurred processing your request"}
    if not settings.is_production():
        content["message"] = str(exc)
    return JSONResponse(status_code=500, content=content)

# Include routers
app.include_router(novel.router)
app.include_router(chapter.router)
app.include_router(analysis.router)
app.include_router(character.router)
app.include_router(place.router)
app.include_router(event.router)
app.include_router(lore.router)
app.include_router(item.router)
app.include_router(note.router)
app.include_router(ai_prompt.router)
app.include_router(outline.router)
app.include_router(export.router)

@app.get("/")
async def root():
    return {"message": "Welcome to Local Lore API"}

@app.get("/health")
async def health_check():
    """Health check including a database round trip"""
    database = test_database_connection()
    return {
        "status": "healthy" if database["connected"] else "unhealthy",
        "service": "local-lore-api",
        "version": "1.0.0",
        "environment": settings.ENVIRONMENT,
        "timestamp": datetime.now().isoformat(),
        "checks": {"database": {"status": "healthy" if database["connected"] else "unhealthy"}}
    }
