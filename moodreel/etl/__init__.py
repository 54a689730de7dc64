"""Offline pipelines: TMDB harvest and dataset build."""
