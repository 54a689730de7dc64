"""Conversational search."""

from moodreel.services.chat.search import (
    ChatQueryError,
    ChatSearchResult,
    ChatSearchService,
    MovieSearchArguments,
)

__all__ = ["ChatQueryError", "ChatSearchResult", "ChatSearchService", "MovieSearchArguments"]
