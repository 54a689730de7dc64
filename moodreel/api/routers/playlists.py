"""Playlist and random pick endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from moodreel.api.dependencies.rate_limit import check_rate_limit
from moodreel.api.dependencies.services import PlaylistDep
from moodreel.api.schemas import MovieResponse, PlaylistResponse

router = APIRouter(
    tags=["Playlists"],
    dependencies=[Depends(check_rate_limit)],
)


@router.get(
    "/playlists",
    response_model=list[PlaylistResponse],
    summary="List playlists",
    description="Every mood playlist with a short selection of movies.",
)
def list_playlists(service: PlaylistDep) -> list[PlaylistResponse]:
    return [PlaylistResponse.from_playlist(p) for p in service.populated_playlists()]


@router.get(
    "/playlists/{playlist_id}",
    response_model=PlaylistResponse,
    summary="Get playlist",
    description="One mood playlist with a longer selection of movies.",
)
def get_playlist(playlist_id: str, service: PlaylistDep) -> PlaylistResponse:
    """Get a playlist by id.

    Raises:
        HTTPException: 404 if the playlist does not exist.
    """
    playlist = service.playlist_by_id(playlist_id)
    if playlist is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Playlist {playlist_id} not found",
        )
    return PlaylistResponse.from_playlist(playlist)


@router.get(
    "/movies/random",
    response_model=list[MovieResponse],
    summary="Random picks",
    description="Random movies among the best rated of the dataset.",
)
def random_movies(
    service: PlaylistDep,
    count: Annotated[int, Query(ge=1, le=50)] = 8,
) -> list[MovieResponse]:
    return [MovieResponse.from_record(m) for m in service.random_recommendations(count)]
