"""Health endpoint."""

from fastapi import APIRouter

from moodreel.api.dependencies.services import CatalogDep
from moodreel.api.schemas import (
    CatalogComponentHealth,
    HealthComponents,
    HealthResponse,
    LLMComponentHealth,
    TMDBComponentHealth,
)
from moodreel.catalog.repository import MovieCatalog
from moodreel.services.llm.llm_service import get_llm_service
from moodreel.settings import settings

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Dataset, LLM and TMDB status.",
)
def health(catalog: CatalogDep) -> HealthResponse:
    """Report component status.

    The API is degraded when the dataset is empty; the LLM and TMDB
    only gate the chat and discovery endpoints.
    """
    components = HealthComponents(
        catalog=_check_catalog(catalog),
        llm=LLMComponentHealth(
            configured=settings.llm.is_configured,
            loaded=get_llm_service().is_loaded,
        ),
        tmdb=TMDBComponentHealth(configured=settings.tmdb.is_configured),
    )
    status = "healthy" if components.catalog.movies else "degraded"
    return HealthResponse(status=status, version=settings.api.version, components=components)


def _check_catalog(catalog: MovieCatalog) -> CatalogComponentHealth:
    return CatalogComponentHealth(
        loaded=True,
        movies=len(catalog),
        enriched=sum(1 for m in catalog.movies if m.has_ai_enrichment),
    )
