"""Live TMDB discovery endpoint."""

from typing import Annotated

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, status

from moodreel.api.dependencies.rate_limit import check_rate_limit
from moodreel.api.dependencies.services import DiscoveryDep
from moodreel.api.schemas import DiscoverResponse, MoodResponse, MovieResponse
from moodreel.etl.tmdb.client import TMDBClientError
from moodreel.monitoring.middleware import RECOMMENDATIONS_TOTAL
from moodreel.recommendation.moods import DISCOVERY_MOODS, UnknownMoodError
from moodreel.utils.logger import setup_logger

logger = setup_logger("api.routers.discover")

router = APIRouter(
    prefix="/discover",
    tags=["Discovery"],
    dependencies=[Depends(check_rate_limit)],
)


@router.get(
    "",
    response_model=list[MoodResponse],
    summary="List discovery moods",
    description="Moods usable with live TMDB discovery.",
)
def list_discovery_moods() -> list[MoodResponse]:
    return [MoodResponse.from_definition(mood) for mood in DISCOVERY_MOODS]


@router.get(
    "/{mood}",
    response_model=DiscoverResponse,
    summary="Discover movies for a mood",
    description="Best rated TMDB movies in the genres of a discovery mood.",
)
def discover(
    mood: str,
    service: DiscoveryDep,
    count: Annotated[int | None, Query(ge=1, le=20)] = None,
) -> DiscoverResponse:
    """Query TMDB live for a discovery mood.

    Args:
        mood: Discovery mood id.
        service: Discovery service.
        count: Number of movies fetched with details.

    Returns:
        Discovered movies.

    Raises:
        HTTPException: 400 if the mood is invalid, 502 if TMDB fails.
    """
    try:
        movies = service.discover(mood, detail_count=count)
    except UnknownMoodError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from None
    except (TMDBClientError, httpx.HTTPError) as e:
        logger.error(f"TMDB discovery failed for '{mood}': {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="TMDB discovery failed",
        ) from None

    RECOMMENDATIONS_TOTAL.labels(taxonomy=DISCOVERY_MOODS.name, mood=mood.lower()).inc()
    return DiscoverResponse(
        mood=mood.lower(),
        movies=[MovieResponse.from_record(m) for m in movies],
    )
