"""TMDB REST client.

Every request goes through a :class:`RequestWindow` that keeps the
harvest under TMDB's request quota; timeouts and 429 answers are
retried with tenacity before surfacing as :class:`TMDBClientError`.
"""

import logging
import time
from collections import deque
from collections.abc import Callable
from types import TracebackType
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from moodreel.settings import TMDBSettings, settings

logger = logging.getLogger(__name__)

FULL_DETAILS_APPEND = "videos,keywords,credits,release_dates,watch/providers"
"""Sub-resources fetched together with movie details for the dataset."""


class TMDBClientError(Exception):
    """Any failed TMDB call that is not covered by a subclass."""


class TMDBRateLimitError(TMDBClientError):
    """TMDB answered 429."""


class TMDBNotFoundError(TMDBClientError):
    """TMDB answered 404 for the requested resource."""


# =============================================================================
# REQUEST WINDOW
# =============================================================================


class RequestWindow:
    """Throttle for outgoing requests.

    Allows at most ``max_requests`` calls in any ``period`` seconds and
    spaces consecutive calls by at least ``min_gap`` seconds.
    """

    def __init__(
        self,
        max_requests: int,
        period: float,
        min_gap: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.period = period
        self.min_gap = min_gap
        self._clock = clock
        self._stamps: deque[float] = deque()

    @classmethod
    def from_settings(cls, config: TMDBSettings) -> "RequestWindow":
        return cls(config.requests_per_period, config.period_seconds, config.min_request_delay)

    def _delay(self, now: float) -> float:
        while self._stamps and self._stamps[0] <= now - self.period:
            self._stamps.popleft()

        delay = 0.0
        if len(self._stamps) >= self.max_requests:
            delay = self._stamps[0] + self.period - now
        if self._stamps:
            delay = max(delay, self._stamps[-1] + self.min_gap - now)
        return delay

    def acquire(self) -> None:
        """Block until one more request fits, then record it."""
        delay = self._delay(self._clock())
        if delay > 0:
            logger.debug(f"TMDB throttle: sleeping {delay:.2f}s")
            time.sleep(delay)
        self._stamps.append(self._clock())


# =============================================================================
# CLIENT
# =============================================================================


class TMDBClient:
    """Synchronous TMDB client, used as a context manager.

    Example:
        >>> with TMDBClient() as client:
        ...     page = client.discover_movies(page=2, filters={"with_genres": "35"})
    """

    def __init__(
        self,
        config: TMDBSettings | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Create an unopened client.

        Args:
            config: TMDB settings, defaults to the global ones.
            transport: Optional httpx transport (mocked in tests).
        """
        self._config = config or settings.tmdb
        self._transport = transport
        self._window = RequestWindow.from_settings(self._config)
        self._http: httpx.Client | None = None

    def __enter__(self) -> "TMDBClient":
        self._http = httpx.Client(
            base_url=self._config.base_url,
            timeout=self._config.timeout_seconds,
            headers={"Accept": "application/json"},
            transport=self._transport,
        )
        return self

    def __exit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc_val: BaseException | None,
        _exc_tb: TracebackType | None,
    ) -> None:
        if self._http is not None:
            self._http.close()
            self._http = None

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _query(self, params: dict[str, Any] | None) -> dict[str, Any]:
        query: dict[str, Any] = {
            "api_key": self._config.api_key,
            "language": self._config.language,
        }
        query.update(params or {})
        return query

    @retry(
        retry=retry_if_exception_type((httpx.TimeoutException, TMDBRateLimitError)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _get(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """GET ``endpoint`` and return the decoded JSON body.

        Timeouts and 429 answers are retried up to three attempts in total.

        Raises:
            TMDBNotFoundError: 404.
            TMDBRateLimitError: 429 on the last attempt.
            TMDBClientError: Any other non-200 status, or no open session.
        """
        if self._http is None:
            raise TMDBClientError("TMDBClient must be used inside a 'with' block")

        self._window.acquire()
        try:
            response = self._http.get(endpoint, params=self._query(params))
        except httpx.TimeoutException:
            logger.warning(f"TMDB timeout on {endpoint}")
            raise
        return self._decode(response, endpoint)

    @staticmethod
    def _decode(response: httpx.Response, endpoint: str) -> dict[str, Any]:
        status = response.status_code
        if status == 200:
            return response.json()
        if status == 404:
            raise TMDBNotFoundError(f"{endpoint} does not exist on TMDB")
        if status == 429:
            logger.warning(
                f"TMDB quota hit on {endpoint} "
                f"(Retry-After={response.headers.get('Retry-After', '?')})"
            )
            raise TMDBRateLimitError(f"429 from TMDB on {endpoint}")

        logger.error(f"TMDB returned HTTP {status} for {endpoint}")
        raise TMDBClientError(f"HTTP {status} from TMDB on {endpoint}")

    # -------------------------------------------------------------------------
    # API Endpoints
    # -------------------------------------------------------------------------

    def discover_movies(
        self,
        page: int = 1,
        sort_by: str = "popularity.desc",
        filters: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Discover movies with arbitrary TMDB filters.

        Args:
            page: Page number (1-500).
            sort_by: Sort order.
            filters: Extra discover parameters, passed through unchanged
                (e.g. ``with_genres``, ``vote_count.gte``,
                ``primary_release_date.lte``).

        Returns:
            Discover response with results.
        """
        params: dict[str, Any] = {
            "page": page,
            "sort_by": sort_by,
            "include_adult": str(self._config.include_adult).lower(),
        }
        if filters:
            params.update({k: v for k, v in filters.items() if v is not None})

        return self._get("/discover/movie", params)

    def get_top_rated(self, page: int = 1) -> dict[str, Any]:
        """Get a page of the top rated movies."""
        return self._get("/movie/top_rated", {"page": page})

    def get_movie_details(
        self,
        movie_id: int,
        append_to_response: str | None = None,
    ) -> dict[str, Any]:
        """Get detailed movie information.

        Args:
            movie_id: TMDB movie ID.
            append_to_response: Comma-separated sub-resources to embed.

        Returns:
            Movie details response.
        """
        params = {"append_to_response": append_to_response} if append_to_response else None
        return self._get(f"/movie/{movie_id}", params)

    def get_movie_full(self, movie_id: int) -> dict[str, Any]:
        """Get movie details with every sub-resource the dataset needs."""
        return self.get_movie_details(movie_id, FULL_DETAILS_APPEND)

    def get_genres(self) -> dict[str, Any]:
        """Get list of movie genres."""
        return self._get("/genre/movie/list")

    def search_movies(
        self,
        query: str,
        year: int | None = None,
    ) -> dict[str, Any]:
        """Search movies by title.

        Args:
            query: Search query string.
            year: Optional release year.

        Returns:
            Search results response.
        """
        params: dict[str, Any] = {"query": query}
        if year:
            params["year"] = year
        return self._get("/search/movie", params)

    def get_popular(self, page: int = 1) -> dict[str, Any]:
        """Get a page of the currently popular movies."""
        return self._get("/movie/popular", {"page": page})

    def search_keywords(self, query: str) -> dict[str, Any]:
        """Search TMDB keywords by name, used to turn words into keyword ids."""
        return self._get("/search/keyword", {"query": query})
