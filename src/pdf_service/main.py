"""Main FastAPI application for PDF Service."""

import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config.settings import get_settings, Settings
from .infrastructure.database.client import DatabaseClient
from .infrastructure.extraction import BaseTextExtractor, PypdfExtractor
from .infrastructure.summarization import BaseSummarizer, OpenAISummarizer
from .core.auth_manager import AuthManager
from .core.document_manager import DocumentManager
from .core.job_manager import JobManager
from .api.errors import register_exception_handlers
from .api.routes import pdfs, users
from .models.requests import HealthResponse

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def create_app(
    settings: Optional[Settings] = None,
    extractor: Optional[BaseTextExtractor] = None,
    summarizer: Optional[BaseSummarizer] = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Configuration (defaults to environment settings)
        extractor: Text extractor override (defaults to pypdf)
        summarizer: Summarizer override (defaults to OpenAI)
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        logger.info(f"Starting {settings.service_name} v{__version__}")

        logger.info("Initializing database...")
        db_client = DatabaseClient(settings.database_url)
        await db_client.initialize()

        # No job survives a restart, so anything still pending was interrupted.
        stale = await db_client.fail_pending_extractions("Extraction interrupted by service restart")
        if stale:
            logger.warning(f"Marked {stale} interrupted extractions as failed")

        extraction_pool = ThreadPoolExecutor(
            max_workers=settings.extraction_workers, thread_name_prefix="pdf-extract"
        )

        text_extractor = extractor or PypdfExtractor()
        text_summarizer = summarizer or OpenAISummarizer(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            timeout_seconds=settings.openai_timeout_seconds,
            max_input_chars=settings.summary_max_input_chars,
            base_url=settings.openai_base_url,
        )

        job_manager = JobManager()
        app.state.db_client = db_client
        app.state.job_manager = job_manager
        app.state.auth_manager = AuthManager(
            db_client,
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            token_ttl=timedelta(hours=settings.token_ttl_hours),
        )
        app.state.document_manager = DocumentManager(
            db_client,
            job_manager,
            text_extractor,
            text_summarizer,
            max_upload_bytes=settings.max_upload_bytes,
            extraction_timeout_seconds=settings.extraction_timeout_seconds,
            executor=extraction_pool,
        )

        logger.info(f"{settings.service_name} is ready")

        yield

        # Cleanup
        logger.info("Shutting down...")
        await job_manager.shutdown()
        extraction_pool.shutdown(wait=False, cancel_futures=True)
        if isinstance(text_summarizer, OpenAISummarizer):
            await text_summarizer.close()
        await db_client.close()
        logger.info("Shutdown complete")

    app = FastAPI(
        title="PDF Service",
        description="Upload PDFs, extract their text and summarize it",
        version=__version__,
        lifespan=lifespan
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info(f"{request.method} {request.url.path}")
        return await call_next(request)

    register_exception_handlers(app)

    app.include_router(users.router)
    app.include_router(pdfs.router)

    @app.get("/api/health", response_model=HealthResponse)
    async def health_check(request: Request):
        """Health check endpoint."""
        db_connected = await request.app.state.db_client.health_check()
        return HealthResponse(
            status="healthy" if db_connected else "degraded",
            service=settings.service_name,
            version=__version__,
            database_connected=db_connected,
            active_extractions=request.app.state.job_manager.active_count,
        )

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": settings.service_name,
            "version": __version__,
            "status": "running"
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "pdf_service.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development"
    )
