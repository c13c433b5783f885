"""
Blood donor matching API: application factory and entry point.
"""
import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from database import db, init_indexes
from exceptions import register_exception_handlers
from logging_config import setup_logging
from routers import blood_requests_router, donors_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    try:
        await init_indexes(db)
        logger.info("MongoDB connected")
    except Exception as e:
        logger.error(f"MongoDB connection error: {e}")
        raise
    yield
    logger.info("Application shutting down")


def create_app(use_lifespan: bool = True) -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="Donor registry and blood request matching API",
        version=settings.APP_VERSION,
        lifespan=lifespan if use_lifespan else None,
    )

    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        logger.info(f"Request: {request.method} {request.url.path}", extra={"request_id": request_id})
        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            f"Response: {response.status_code} - {process_time:.3f}s",
            extra={"request_id": request_id}
        )
        response.headers["X-Request-ID"] = request_id
        return response

    app.include_router(donors_router)
    app.include_router(blood_requests_router)

    @app.get("/")
    async def root():
        return {"status": "healthy", "service": settings.APP_NAME}

    @app.get("/health")
    async def health_check():
        return {
            "status": "OK",
            "message": f"{settings.APP_NAME} is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return app


app = create_app()


def main():
    setup_logging()
    logger.info(f"Starting server on {settings.HOST}:{settings.PORT}")
    uvicorn.run(
        "server:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
