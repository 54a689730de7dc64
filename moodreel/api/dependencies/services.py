"""Service providers injected into the routers.

Tests replace them through ``app.dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status

from moodreel.catalog.repository import MovieCatalog, get_catalog
from moodreel.recommendation.engine import MoodRecommender
from moodreel.recommendation.moods import LIBRARY_MOODS
from moodreel.recommendation.playlists import PlaylistService
from moodreel.services.chat.search import ChatSearchService
from moodreel.services.discovery.mood_discovery import (
    MoodDiscoveryService,
    get_mood_discovery_service,
)
from moodreel.services.llm.llm_service import get_llm_service
from moodreel.settings import settings


def provide_catalog() -> MovieCatalog:
    """Process-wide catalog loaded at startup."""
    return get_catalog()


CatalogDep = Annotated[MovieCatalog, Depends(provide_catalog)]


def get_recommender(catalog: CatalogDep) -> MoodRecommender:
    return MoodRecommender(catalog, LIBRARY_MOODS)


def get_playlist_service(catalog: CatalogDep) -> PlaylistService:
    return PlaylistService(catalog)


def get_discovery_service() -> MoodDiscoveryService:
    """Discovery service, only available with TMDB credentials.

    Raises:
        HTTPException: 503 if TMDB_API_KEY is not set.
    """
    if not settings.tmdb.is_configured:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="TMDB discovery is not configured",
        )
    return get_mood_discovery_service()


def get_chat_service() -> ChatSearchService:
    """Chat service, only available with a local model and TMDB credentials.

    Raises:
        HTTPException: 503 if the model file or TMDB credentials are missing.
    """
    if not settings.llm.is_configured or not settings.tmdb.is_configured:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Chat search is not configured",
        )
    return ChatSearchService(get_llm_service())


RecommenderDep = Annotated[MoodRecommender, Depends(get_recommender)]
PlaylistDep = Annotated[PlaylistService, Depends(get_playlist_service)]
DiscoveryDep = Annotated[MoodDiscoveryService, Depends(get_discovery_service)]
ChatDep = Annotated[ChatSearchService, Depends(get_chat_service)]
