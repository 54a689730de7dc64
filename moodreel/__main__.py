"""Command line entry point. Enables ``python -m moodreel``."""

import argparse
import sys
from pathlib import Path

DEFAULT_HARVEST_FILE = "tmdb_movies.json"


def _harvest_path(output: str | None) -> Path:
    from moodreel.settings import settings

    return Path(output) if output else settings.paths.raw_dir / DEFAULT_HARVEST_FILE


def run_harvest(args: argparse.Namespace) -> None:
    """Harvest the best rated TMDB movies into a raw file."""
    from moodreel.etl.tmdb import TMDBHarvester, write_harvest
    from moodreel.settings import settings

    if not settings.tmdb.is_configured:
        print("TMDB_API_KEY is not set")
        sys.exit(1)

    result = TMDBHarvester().harvest(
        limit=args.limit,
        min_rating=args.min_rating,
        min_votes=args.min_votes,
        max_year=args.max_year,
    )
    path = write_harvest(result, _harvest_path(args.output))

    print(f"{len(result.movies)} movies written to {path}")
    print(f"Average rating: {result.statistics()['average_rating']}")
    if result.errors:
        print(f"{len(result.errors)} errors, see logs")


def run_build(args: argparse.Namespace) -> None:
    """Build the served dataset from a harvest file."""
    from moodreel.etl.enrichment import DatasetBuilder, MovieEnricher
    from moodreel.settings import settings

    enricher = None
    if not args.no_ai:
        if not settings.llm.is_configured:
            print(f"Model not found: {settings.llm.absolute_model_path} (use --no-ai)")
            sys.exit(1)
        from moodreel.services.llm import get_llm_service

        enricher = MovieEnricher(get_llm_service())

    source = _harvest_path(args.input)
    target = Path(args.output) if args.output else settings.paths.dataset_path

    report = DatasetBuilder(enricher=enricher, top_n=args.top_n).build_file(source, target)

    collection = report.collection
    print(f"{collection.count} movies written to {target}")
    print(f"Resumed: {report.resumed_from}, enriched: {report.enriched}")
    print(f"Partially enriched: {report.partially_enriched}")
    print(f"Average rating: {collection.avg_rating}%")


def run_api() -> None:
    """Start the FastAPI server."""
    import uvicorn

    from moodreel.settings import settings

    uvicorn.run(
        "moodreel.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.reload,
        workers=settings.api.workers if not settings.api.reload else 1,
    )


def _load_catalog(dataset: str | None):
    from moodreel.catalog.repository import MovieCatalog
    from moodreel.settings import settings

    return MovieCatalog.from_file(Path(dataset) if dataset else settings.paths.dataset_path)


def run_recommend(args: argparse.Namespace) -> None:
    """Print recommendations for a mood."""
    from moodreel.recommendation import MoodRecommender

    recommender = MoodRecommender(_load_catalog(args.dataset))
    ranked = recommender.rank(args.mood, args.limit)

    if not ranked:
        print("No movies in the dataset")
        return
    for position, item in enumerate(ranked, start=1):
        movie = item.movie
        year = movie.release_year or "----"
        print(f"{position:>3}. {movie.title} ({year})  {movie.score_percent}%  [{item.tier}]")


def run_stats(args: argparse.Namespace) -> None:
    """Print dataset statistics and the most frequent mood tags."""
    catalog = _load_catalog(args.dataset)
    collection = catalog.collection

    print(f"Movies:        {len(catalog)}")
    print(f"Generated at:  {collection.generated_at or '-'}")
    print(f"Avg rating:    {collection.avg_rating if collection.avg_rating is not None else '-'}")
    print(f"Oldest:        {collection.oldest_movie or '-'}")
    print(f"Newest:        {collection.newest_movie or '-'}")
    print(f"Mood tags:     {len(catalog.mood_tags())}")
    print("\nTop moods:")
    for entry in catalog.top_moods(args.limit):
        print(f"  {entry['tag']:<20} {entry['count']}")


def list_checkpoints() -> None:
    """List resumable build progress files."""
    from moodreel.utils import ProgressStore

    files = ProgressStore(prefix="build").list_files()

    print("\nProgress files:")
    for path in files:
        print(f"  - {path.name}")
    print(f"\nTotal: {len(files)}")


def show_status() -> None:
    from moodreel.settings import print_services_status

    print_services_status()


def build_parser() -> argparse.ArgumentParser:
    """Create the command line parser."""
    parser = argparse.ArgumentParser(
        prog="moodreel",
        description="MoodReel - mood-based movie recommendations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m moodreel harvest --limit 250          # Fetch TMDB movies
  python -m moodreel build                        # Enrich and write dataset
  python -m moodreel recommend happy --limit 5    # Recommend from the dataset
  python -m moodreel stats                        # Dataset statistics
  python -m moodreel api                          # Start the API
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command")

    harvest_parser = subparsers.add_parser("harvest", help="Harvest TMDB movies")
    harvest_parser.add_argument("--limit", type=int, default=250)
    harvest_parser.add_argument("--min-rating", type=float)
    harvest_parser.add_argument("--min-votes", type=int)
    harvest_parser.add_argument("--max-year", type=int)
    harvest_parser.add_argument("--output", help="Raw file (default: data/raw/tmdb_movies.json)")

    build_parser_ = subparsers.add_parser("build", help="Build the dataset")
    build_parser_.add_argument("--input", help="Harvest file")
    build_parser_.add_argument("--output", help="Dataset file")
    build_parser_.add_argument("--top-n", type=int)
    build_parser_.add_argument("--no-ai", action="store_true", help="Skip AI enrichment")

    subparsers.add_parser("api", help="Start the API")

    recommend_parser = subparsers.add_parser("recommend", help="Recommend movies for a mood")
    recommend_parser.add_argument("mood")
    recommend_parser.add_argument("--limit", type=int, default=10)
    recommend_parser.add_argument("--dataset")

    stats_parser = subparsers.add_parser("stats", help="Dataset statistics")
    stats_parser.add_argument("--limit", type=int, default=10)
    stats_parser.add_argument("--dataset")

    subparsers.add_parser("list-checkpoints", help="List build progress files")
    subparsers.add_parser("status", help="External services status")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    from moodreel.catalog import DatasetLoadError
    from moodreel.recommendation import UnknownMoodError

    try:
        if args.command == "harvest":
            run_harvest(args)
        elif args.command == "build":
            run_build(args)
        elif args.command == "api":
            run_api()
        elif args.command == "recommend":
            run_recommend(args)
        elif args.command == "stats":
            run_stats(args)
        elif args.command == "list-checkpoints":
            list_checkpoints()
        elif args.command == "status":
            show_status()

    except KeyboardInterrupt:
        print("\nInterrupted")
        sys.exit(130)
    except (DatasetLoadError, UnknownMoodError, ValueError) as e:
        print(f"\nERROR: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
