from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional
import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables as early as possible
load_dotenv()

from .application.ports.ai_provider import AIProvider
from .application.ports.analysis_repo import AnalysisRepository
from .application.services.analysis_client import LyricsAnalysisClient
from .application.services.analysis_service import AnalysisService
from .config import Settings, settings as default_settings
from .exceptions import (
    LyricsAnalysisError,
    analysis_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from .infrastructure.ai.gemini_provider import GeminiProvider
from .infrastructure.persistence.memory.analysis_repository_memory import InMemoryAnalysisRepository
from .middleware import ErrorHandlingMiddleware, LoggingMiddleware, RequestSizeLimitMiddleware, SecurityMiddleware
from .routers import analysis_router
from .schemas.common.common import HealthResponse

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    ai_provider: Optional[AIProvider] = None,
    analysis_repo: Optional[AnalysisRepository] = None,
) -> FastAPI:
    """Build the API with its store and analysis service wired in.

    The store lives on ``app.state`` for the lifetime of the process; pass
    ``ai_provider`` / ``analysis_repo`` to substitute collaborators.
    """
    settings = settings or default_settings

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format=settings.LOG_FORMAT,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.APP_NAME}...")
        if not settings.gemini_configured:
            logger.warning("GEMINI_API_KEY not configured; analyze requests will fail")
        yield
        logger.info(f"Shutting down {settings.APP_NAME}...")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        docs_url=("/docs" if settings.DOCS_ENABLED else None),
        redoc_url=("/redoc" if settings.DOCS_ENABLED else None),
        openapi_url=("/openapi.json" if settings.DOCS_ENABLED else None),
    )

    repo = analysis_repo if analysis_repo is not None else InMemoryAnalysisRepository(max_records=settings.STORE_MAX_RECORDS)
    provider = ai_provider if ai_provider is not None else GeminiProvider(api_key=settings.GEMINI_API_KEY, model_name=settings.GEMINI_MODEL)
    app.state.settings = settings
    app.state.analysis_repo = repo
    app.state.analysis_service = AnalysisService(
        analysis_repo=repo,
        client=LyricsAnalysisClient(provider=provider, prompt_lyrics_limit=settings.PROMPT_LYRICS_LIMIT),
        recent_default_limit=settings.RECENT_DEFAULT_LIMIT,
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(LyricsAnalysisError, analysis_exception_handler)

    app.add_middleware(ErrorHandlingMiddleware, debug=settings.DEBUG)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(SecurityMiddleware)
    app.add_middleware(RequestSizeLimitMiddleware, max_size=settings.MAX_REQUEST_SIZE)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(analysis_router.router)

    @app.get("/health", response_model=HealthResponse)
    def health_check():
        return HealthResponse(
            status="healthy",
            service=settings.APP_NAME,
            version=settings.APP_VERSION,
            timestamp=datetime.now(timezone.utc).isoformat(),
            provider_configured=settings.gemini_configured,
            stored_analyses=repo.count(),
        )

    return app


app = create_app()


# ------------------------
# Run with correct PORT in local/production
# ------------------------
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "lyrics_insight.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        workers=1,  # the store is per-process
        log_level=default_settings.LOG_LEVEL.lower(),
    )
