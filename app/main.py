import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.auth import router as auth_router
from app.api.routes import router
from app.content import store
from app.core.errors import ContentError
from app.core.logs import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Configure logging on startup and report where content is stored.
    """
    setup_logging()
    logger.info("Starting Site Content Admin, content file: %s", store.CONTENT_FILE)

    yield

    logger.info("Shutting down Site Content Admin")

app = FastAPI(
    title="Site Content Admin",
    description="Admin API for editing the restaurant site's JSON content store",
    version="1.0.0",
    lifespan=lifespan
)


@app.exception_handler(ContentError)
async def content_error_handler(request: Request, exc: ContentError):
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": exc.message})


@app.exception_handler(StarletteHTTPException)
async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405:
        return JSONResponse(status_code=405, content={"success": False, "message": "Method not allowed"})
    return await http_exception_handler(request, exc)


# Include API routes
app.include_router(router)
app.include_router(auth_router)

@app.get("/")
async def root():
    """Root endpoint with basic info"""
    return {
        "service": "Site Content Admin",
        "version": "1.0.0",
        "endpoints": {
            "save": "POST /admin/save-content",
            "content": "GET /admin/content",
            "preview_diff": "POST /admin/preview-diff",
            "migrate": "POST /admin/migrate-content",
            "inspect": "GET /admin/inspect-content",
            "health": "GET /health"
        }
    }
