"""FastAPI application entry point."""
import logging

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from bandstand.config import settings
from bandstand.database import Base, engine
from bandstand.exceptions import ApplicationException
from bandstand.services.feed_broadcaster import FeedBroadcaster

# Import routers
from bandstand.routers import auth, users, events, posts, instruments, feed, uploads

# Import all models so Base.metadata knows about them
from bandstand.models.user import User                    # noqa: F401
from bandstand.models.event import Event, EventBooking    # noqa: F401
from bandstand.models.post import Post, PostLike          # noqa: F401
from bandstand.models.instrument import Instrument        # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    status.HTTP_400_BAD_REQUEST: "BadRequest",
    status.HTTP_401_UNAUTHORIZED: "Unauthorized",
    status.HTTP_403_FORBIDDEN: "Forbidden",
    status.HTTP_404_NOT_FOUND: "NotFound",
    status.HTTP_405_METHOD_NOT_ALLOWED: "MethodNotAllowed",
    status.HTTP_409_CONFLICT: "Conflict",
}

app = FastAPI(
    title="Bandstand",
    description="Community platform backend: event booking, a live post feed and instrument rental",
    version="0.1.0",
)

# Process-wide feed broadcaster, reached through app.state by routes and the socket
app.state.broadcaster = FeedBroadcaster()

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(auth.router, tags=["Auth"])
app.include_router(users.router, tags=["Users"])
app.include_router(events.router, tags=["Events"])
app.include_router(posts.router, tags=["Posts"])
app.include_router(instruments.router, tags=["Instruments"])
app.include_router(feed.router, tags=["Feed"])
app.include_router(uploads.router, tags=["Uploads"])


def _error(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error, "message": message},
    )


@app.exception_handler(ApplicationException)
async def application_exception_handler(request: Request, exc: ApplicationException):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _error(exc.status_code, exc.error_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    return _error(status.HTTP_400_BAD_REQUEST, "BadRequest", message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, HTTP_ERROR_CODES.get(exc.status_code, "Error"), str(exc.detail))


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal", "Internal server error")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal", "Internal server error")


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
    logger.info("Bandstand API ready, uploads served from %s", settings.UPLOAD_DIR)


@app.get("/health")
def health_check():
    return {"status": "ok"}


def run():
    uvicorn.run("bandstand.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
