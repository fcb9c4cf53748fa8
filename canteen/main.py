import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from canteen.api.v1.api import api_router
from canteen.core.config import settings
from canteen.core.exceptions import BaseAppException
from canteen.core.logging_config import setup_logging
from canteen.db.init_db import init_db
from canteen.middleware.logging import LoggingMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    await init_db()
    logger.info("🍽️ Canteen Ticket Service started")
    yield
    logger.info("👋 Canteen Ticket Service stopped")


app_config = {
    "title": "Canteen Ticket Service",
    "description": "Biometric meal ticket issuance, ticket balance ledger and consumption analysis",
    "version": "1.0.0",
    "docs_url": "/api/docs",
    "lifespan": lifespan,
}

app = FastAPI(**app_config)

# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=settings.ALLOWED_METHODS,
    allow_headers=settings.ALLOWED_HEADERS,
)
app.add_middleware(LoggingMiddleware)


@app.exception_handler(BaseAppException)
async def app_exception_handler(request: Request, exc: BaseAppException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": exc.error_code},
        headers=exc.headers,
    )


app.include_router(api_router, prefix="/api/v1")


@app.get("/")
async def root():
    return {
        "message": "🍽️ Welcome to the Canteen Ticket Service!",
        "status": "active",
        "version": "1.0.0",
        "docs": "/api/docs",
    }


def run_http():
    """Run HTTP server on port 9106"""
    import uvicorn
    print("🚀 Starting HTTP server on port 9106...")
    uvicorn.run("canteen.main:app", host="0.0.0.0", port=9106, reload=False)


if __name__ == "__main__":
    run_http()
