"""Mood endpoints for REST API.

Recommendations over the curated dataset using the library taxonomy,
and the raw mood tag views.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from moodreel.api.dependencies.rate_limit import check_rate_limit
from moodreel.api.dependencies.services import CatalogDep, RecommenderDep
from moodreel.api.schemas import (
    MoodResponse,
    MovieResponse,
    PersonalizedRequest,
    PersonalizedResponse,
    RankedMovieResponse,
    TagCountResponse,
)
from moodreel.monitoring.middleware import RECOMMENDATION_TIER_TOTAL, RECOMMENDATIONS_TOTAL
from moodreel.recommendation.engine import validate_limit
from moodreel.recommendation.moods import UnknownMoodError
from moodreel.recommendation.personalized import personalized_recommend
from moodreel.settings import settings
from moodreel.utils.logger import setup_logger

logger = setup_logger("api.routers.moods")

router = APIRouter(
    prefix="/moods",
    tags=["Moods"],
    dependencies=[Depends(check_rate_limit)],
)


# =============================================================================
# DEPENDENCIES
# =============================================================================


def get_limit(limit: int | None = None) -> int:
    """Resolve the requested number of movies.

    Args:
        limit: Requested count, the configured default when omitted.

    Returns:
        Validated limit.

    Raises:
        HTTPException: 400 if limit is not within 1..max_limit.
    """
    if limit is None:
        return settings.api.default_limit
    try:
        validate_limit(limit)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from None
    if limit > settings.api.max_limit:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"limit must not exceed {settings.api.max_limit}",
        )
    return limit


def _not_found(error: UnknownMoodError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))


# =============================================================================
# ENDPOINTS
# =============================================================================


@router.get(
    "",
    response_model=list[MoodResponse],
    summary="List moods",
    description="Moods available for recommendations over the dataset.",
)
def list_moods(recommender: RecommenderDep) -> list[MoodResponse]:
    return [MoodResponse.from_definition(mood) for mood in recommender.taxonomy]


@router.get(
    "/tags",
    response_model=list[str],
    summary="List mood tags",
    description="Distinct lower-cased AI mood tags present in the dataset.",
)
def list_mood_tags(catalog: CatalogDep) -> list[str]:
    return catalog.mood_tags()


@router.get(
    "/popular",
    response_model=list[TagCountResponse],
    summary="Most frequent mood tags",
    description="Mood tags ranked by the number of movies carrying them.",
)
def popular_moods(
    catalog: CatalogDep,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> list[TagCountResponse]:
    return [TagCountResponse(**entry) for entry in catalog.top_moods(limit)]


@router.get(
    "/tags/{tag}/movies",
    response_model=list[MovieResponse],
    summary="Movies for a mood tag",
    description="Best rated movies carrying an exact AI mood tag.",
)
def movies_for_tag(
    tag: str,
    catalog: CatalogDep,
    limit: Annotated[int, Query(ge=1, le=100)] = 6,
) -> list[MovieResponse]:
    return [MovieResponse.from_record(m) for m in catalog.movies_for_tag(tag, limit)]


@router.get(
    "/{mood}/movies",
    response_model=list[RankedMovieResponse],
    summary="Recommend movies for a mood",
    description=(
        "Tiered recommendation: AI mood tags, then TMDB keywords, then genres, "
        "then the best rated remaining movies."
    ),
)
def recommend_movies(
    mood: str,
    recommender: RecommenderDep,
    limit: Annotated[int, Depends(get_limit)],
) -> list[RankedMovieResponse]:
    """Recommend movies for a library mood.

    Args:
        mood: Library mood id.
        recommender: Recommender bound to the catalog.
        limit: Maximum number of movies.

    Returns:
        Ranked movies, empty when the dataset is empty.

    Raises:
        HTTPException: 404 if the mood is unknown.
    """
    try:
        ranked = recommender.rank(mood, limit)
    except UnknownMoodError as e:
        raise _not_found(e) from None

    RECOMMENDATIONS_TOTAL.labels(taxonomy=recommender.taxonomy.name, mood=mood.lower()).inc()
    for item in ranked:
        RECOMMENDATION_TIER_TOTAL.labels(tier=item.tier).inc()

    return [
        RankedMovieResponse.model_validate({**item.movie.model_dump(), "tier": item.tier})
        for item in ranked
    ]


@router.post(
    "/{mood}/personalized",
    response_model=PersonalizedResponse,
    summary="Personalized recommendation",
    description="Rank movies by mood keywords, preferred genres and a free-text wish.",
)
def personalized(
    mood: str,
    request: PersonalizedRequest,
    recommender: RecommenderDep,
    catalog: CatalogDep,
) -> PersonalizedResponse:
    """Recommend movies weighted by the user's stated preferences.

    Raises:
        HTTPException: 404 if the mood is unknown.
    """
    try:
        definition = recommender.taxonomy.get(mood)
    except UnknownMoodError as e:
        raise _not_found(e) from None

    result = personalized_recommend(
        catalog.movies,
        definition,
        preferred_genres=request.preferred_genres,
        min_score_percent=request.min_score_percent,
        prompt=request.prompt,
        limit=request.limit,
    )
    logger.info(f"Personalized pick for '{definition.id}': {len(result.movies)} movies")

    return PersonalizedResponse(
        mood=definition.id,
        reasoning=result.reasoning,
        suggested_prompt=result.suggested_prompt,
        movies=[MovieResponse.from_record(m) for m in result.movies],
        scores=result.scores,
    )
