"""CLI entrypoint: search PubMed in your own language and explain an article."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace

from dotenv import load_dotenv

from ai_service import AIService
from models import Article, ProviderName, SelectionPolicy
from pipeline import SearchPipeline
from settings import Settings


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return number


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(description="Search PubMed with AI query and title translation")
    parser.add_argument("query", help="Medical search query, in any language")
    parser.add_argument("--count", type=_positive_int, default=None, help="Maximum number of articles to fetch")
    parser.add_argument(
        "--provider",
        choices=[p.value for p in ProviderName],
        default=None,
        help="AI provider to use (overrides AI_PROVIDER)",
    )
    parser.add_argument(
        "--policy",
        choices=[p.value for p in SelectionPolicy],
        default=None,
        help="Provider selection policy (overrides AI_SELECTION_POLICY)",
    )
    parser.add_argument(
        "--optimize",
        action="store_true",
        help="Compress a long, descriptive query into concise PubMed terms first",
    )
    parser.add_argument(
        "--summarize",
        type=int,
        default=None,
        metavar="INDEX",
        help="Print a plain-language summary of the result with this 1-based number",
    )
    return parser.parse_args(argv)


def format_article(index: int, article: Article) -> str:
    heading = article.translated_title or article.title
    lines = [f"{index}. {heading}"]
    if article.translated_title:
        lines.append(f"   {article.title}")
    lines.append(f"   {article.journal} | {article.year} | {', '.join(article.authors)}")
    lines.append(f"   {article.url}")
    return "\n".join(lines)


def run(args: argparse.Namespace, settings: Settings) -> int:
    """Run one search and print the results; returns the process exit code."""
    if args.provider:
        settings = replace(settings, provider=ProviderName(args.provider))
    if args.policy:
        settings = replace(settings, policy=SelectionPolicy(args.policy))
    count = args.count if args.count is not None else settings.result_count

    pipeline = SearchPipeline(
        AIService(settings),
        api_key=settings.pubmed_api_key,
        count=count,
    )
    state = pipeline.run(args.query, optimize=args.optimize)

    if state.error:
        print(f"Search failed: {state.error}", file=sys.stderr)
        return 1
    if not state.results:
        print("No results found. Try a different query.")
        return 0

    for index, article in enumerate(state.results, start=1):
        print(format_article(index, article))

    if args.summarize is not None:
        if not 1 <= args.summarize <= len(state.results):
            print(f"--summarize must be between 1 and {len(state.results)}", file=sys.stderr)
            return 2
        article = state.results[args.summarize - 1]
        print()
        print(pipeline.summarize(article))

    return 0


def main() -> None:
    """Initialize config and execute one search."""
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    args = parse_args()
    sys.exit(run(args, Settings.from_env()))


if __name__ == "__main__":
    main()
