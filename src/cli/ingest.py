"""Command-line entry point for corpus building and quick questions.

Usage::

    python -m src.cli ingest --query "climate policy"
    python -m src.cli ingest --query ai --concurrency 3
    python -m src.cli ask "What happened with the chip export rules?" --k 5
    python -m src.cli stats

Components are built with the same :func:`src.main.build_components` the
web app uses, so the CLI always embeds with the same model and writes to
the same collection as the deployed service.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Any, Awaitable, Callable

from src.config.settings import Settings
from src.utils.errors import ConfigurationError, NewsRAGError
from src.utils.logging import configure_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m src.cli",
        description="Build and query the newsrag article corpus.",
    )
    subparsers = parser.add_subparsers(dest="command")

    ingest = subparsers.add_parser("ingest", help="Ingest articles for a topic query")
    ingest.add_argument("--query", default=None, help="Topic query (default: DEFAULT_NEWS_QUERY)")
    ingest.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Documents processed at once (default: INGEST_CONCURRENCY, normally 1)",
    )

    ask = subparsers.add_parser("ask", help="Answer a question from the corpus")
    ask.add_argument("question", help="The question to answer")
    ask.add_argument("--k", type=int, default=None, help="Number of chunks to retrieve")

    subparsers.add_parser("stats", help="Show the number of stored points")
    return parser


async def _handle_ingest(args: argparse.Namespace, components: dict[str, Any]) -> int:
    service = components["ingestion_service"]
    query = args.query or components["settings"].default_news_query
    print(f"Ingesting articles for query: {query!r}")

    result = await service.ingest_articles(query=args.query, concurrency=args.concurrency)

    print("\nIngestion complete:")
    print(f"  Articles seen:      {result.documents_seen}")
    print(f"  Articles ingested:  {result.documents_processed}")
    print(f"  Articles skipped:   {result.documents_skipped}")
    print(f"  Points upserted:    {result.points_upserted}")
    print(f"  Time:               {result.ingestion_time:.2f}s")
    return 0


async def _handle_ask(args: argparse.Namespace, components: dict[str, Any]) -> int:
    answer, retrieved = await components["retrieval_service"].answer(args.question, args.k)
    print(answer)
    print(f"\n[{len(retrieved.hits)} context chunks", end="")
    if retrieved.degraded_reason:
        print(f"; degraded: {retrieved.degraded_reason}", end="")
    print("]")
    return 0


async def _handle_stats(args: argparse.Namespace, components: dict[str, Any]) -> int:
    settings: Settings = components["settings"]
    count = await components["vector_store"].count()
    print("Corpus Statistics")
    print("=" * 40)
    print(f"  Collection:  {settings.chromadb_collection}")
    print(f"  Points:      {count}")
    return 0


_HANDLERS: dict[str, Callable[[argparse.Namespace, dict[str, Any]], Awaitable[int]]] = {
    "ingest": _handle_ingest,
    "ask": _handle_ask,
    "stats": _handle_stats,
}


async def _run(args: argparse.Namespace, app_settings: Settings) -> int:
    # Deferred so `--help` does not import chromadb or google-genai.
    from src.main import build_components, close_components, open_components

    components = build_components(app_settings)
    try:
        await open_components(components)
        return await _HANDLERS[args.command](args, components)
    finally:
        await close_components(components)


def main(argv: list[str] | None = None) -> None:
    """Parse the subcommand, build components, and dispatch."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    app_settings = Settings()
    configure_logging(log_level=app_settings.log_level)

    try:
        exit_code = asyncio.run(_run(args, app_settings))
    except ConfigurationError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        exit_code = 2
    except NewsRAGError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
