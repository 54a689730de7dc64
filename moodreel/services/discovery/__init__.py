"""Live mood discovery against TMDB."""

from moodreel.services.discovery.mood_discovery import (
    DISCOVERY_PROFILES,
    DiscoveryProfile,
    MoodDiscoveryService,
    get_mood_discovery_service,
)

__all__ = [
    "DISCOVERY_PROFILES",
    "DiscoveryProfile",
    "MoodDiscoveryService",
    "get_mood_discovery_service",
]
