"""FastAPI app with health, welcome and mentor search endpoints.

Search failures map to structured error bodies; internal details are
logged, never returned.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from sqlalchemy.ext.asyncio import AsyncSession

from ai.enrichment import get_enrichment_client
from .config import settings
from .db import get_session
from .domains import get_domain_table
from .logging_config import setup_logging
from .pipelines.normalization import ValidationError
from .pipelines.search import MentorSearchService
from .repository import MentorRepository, PersistenceError

logger = logging.getLogger(__name__)

QUERY_REQUIRED = "Search query is required"
INTERNAL_ERROR = "Internal server error"


# Pydantic response models
class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str


class WelcomeResponse(BaseModel):
    """Root endpoint response."""
    message: str
    health: str
    state: str


class ErrorResponse(BaseModel):
    """Error response."""
    error: str
    detail: str | None = None


class SearchRequest(BaseModel):
    """Mentor search request. Validation happens in the pipeline."""
    query: str | None = None


class MentorDTO(CamelModel):
    """Mentor summary data transfer object."""
    id: int
    user_id: int
    first_name: str
    last_name: str | None = None
    profile_picture: str | None = None
    bio: str | None = None


class SearchResponse(CamelModel):
    """Mentor search response."""
    mentors: list[MentorDTO] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    used_fallback: bool = False


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown logic."""
    # Startup
    setup_logging()
    get_domain_table()
    logger.info("Application starting up")

    yield

    # Shutdown
    logger.info("Application shutting down")


app = FastAPI(
    title="Mentor Search",
    version=settings.version,
    description="Free-text mentor search with keyword enrichment and fallbacks",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.server.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, error: str, detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, detail=detail).model_dump(),
    )


# Exception handlers
@app.exception_handler(ValidationError)
async def validation_error_handler(request, exc: ValidationError):
    """Handle missing or blank queries."""
    logger.info(f"Rejected search request: {exc}")
    return _error(status.HTTP_400_BAD_REQUEST, "validation_error", str(exc))


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request, exc: RequestValidationError):
    """Malformed bodies are client errors, reported like a missing query."""
    logger.info(f"Malformed request body: {exc.errors()}")
    return _error(status.HTTP_400_BAD_REQUEST, "validation_error", QUERY_REQUIRED)


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request, exc: PersistenceError):
    """Handle mentor lookup failures."""
    logger.error(f"Persistence error: {exc}")
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "persistence_error", INTERNAL_ERROR)


@app.exception_handler(Exception)
async def unhandled_error_handler(request, exc: Exception):
    """Anything raised outside the route body, e.g. while opening a session."""
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error", INTERNAL_ERROR)


def get_search_service(
    session: AsyncSession = Depends(get_session),
) -> MentorSearchService:
    """Build the search orchestrator for one request."""
    return MentorSearchService(
        lookup=MentorRepository(session),
        enricher=get_enrichment_client(),
        domain_table=get_domain_table(),
    )


@app.get("/", response_model=WelcomeResponse)
async def root() -> WelcomeResponse:
    """Root endpoint."""
    return WelcomeResponse(message="Welcome to the server!", health="100%", state="running")


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="ok",
        version=settings.version,
    )


@app.post(
    "/api/search",
    response_model=SearchResponse,
    status_code=status.HTTP_200_OK,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def search_mentors(
    request: SearchRequest | None = None,
    service: MentorSearchService = Depends(get_search_service),
):
    """Search mentors by free-text query.

    This endpoint:
    1. Extracts keywords from the query
    2. Enriches sparse queries through the text-generation model
    3. Falls back to domain keywords when enrichment fails
    4. Retries with domain keywords when no mentor matches

    Args:
        request: Search request body
        service: Search orchestrator (injected)

    Returns:
        SearchResponse with mentors, the keywords used, and whether the
        fallback lookup produced the result
    """
    try:
        outcome = await service.search(request.query if request else None)

        return SearchResponse(
            mentors=[
                MentorDTO(
                    id=m.id,
                    user_id=m.user_id,
                    first_name=m.first_name,
                    last_name=m.last_name,
                    profile_picture=m.profile_picture,
                    bio=m.bio,
                )
                for m in outcome.mentors
            ],
            keywords=outcome.keywords,
            used_fallback=outcome.used_fallback,
        )

    except (ValidationError, PersistenceError):
        # Re-raise to be caught by exception handlers
        raise
    except Exception as e:
        logger.error(f"Unexpected error searching mentors: {e}", exc_info=True)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error", INTERNAL_ERROR)
