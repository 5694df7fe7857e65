"""
Check the configured upstream end to end.

This script:
1) Loads settings from the environment (.env supported)
2) Builds the proxy gateway for the configured upstream family
3) Runs a search and logs the outcome and the first records
4) Optionally looks up the first record's details

Usage:
    python -m scripts.check_upstream "inception"
    UPSTREAM=tmdb TMDB_KEY=... python -m scripts.check_upstream "game of thrones" --type series --detail

Exits with status 1 when the server is misconfigured or the upstream cannot be reached.
"""

import argparse  # command-line options
import sys  # exit status

from loguru import logger  # console logging

from reel_search.config import Settings  # environment-backed settings
from reel_search.gateway import ProxyGateway  # adapter dispatch
from reel_search.models import Outcome  # outcome flags

# Outcomes that mean the deployment itself is broken
FATAL = (Outcome.SERVER_MISCONFIGURED, Outcome.UPSTREAM_UNREACHABLE)


def main(argv=None) -> int:
	parser = argparse.ArgumentParser(description="Run one search through the configured upstream.")
	parser.add_argument("query", help="title to search for")
	parser.add_argument("--page", type=int, default=1, help="1-indexed page")
	parser.add_argument("--type", default="", help="movie, series, or empty for any")
	parser.add_argument("--detail", action="store_true", help="also fetch details of the first record")
	args = parser.parse_args(argv)

	# Headline banner for visibility in console
	logger.info("=" * 60)
	logger.info("Reel Search upstream check")
	logger.info("=" * 60)

	# 1) Settings
	settings = Settings.from_env()
	logger.info(f"[1/3] Upstream family: {settings.upstream_family} | credential: {'set' if settings.has_credentials else 'MISSING'}")

	# 2) Search
	gateway = ProxyGateway(settings)
	outcome = gateway.search(args.query, page=args.page, type_filter=args.type)
	logger.info(f"[2/3] search '{args.query}' page={args.page} -> {outcome.outcome.value} (HTTP {outcome.status_code})")
	if outcome.outcome in FATAL:
		logger.error(f"[FAIL] {outcome.message}")
		return 1
	if outcome.page is None:
		logger.info(f"[OK] No results: {outcome.message}")
		return 0
	logger.info(f"[OK] {outcome.page.total_results} results over {outcome.page.total_pages} pages")
	for i, record in enumerate(outcome.page.records[:5], 1):
		logger.info(f"  {i}. {record.title} ({record.year or '----'}) [{record.media_type.value}] id={record.id}")

	# 3) Detail of the first record
	if args.detail and outcome.page.records:
		first = outcome.page.records[0]
		detail = gateway.detail(first.id)
		logger.info(f"[3/3] detail {first.id} -> {detail.outcome.value}")
		if detail.outcome in FATAL:
			logger.error(f"[FAIL] {detail.message}")
			return 1
		if detail.record is not None:
			logger.info(f"  Director: {detail.record.director} | Actors: {detail.record.actors}")
			logger.info(f"  Ratings: {', '.join(f'{r.source} {r.value}' for r in detail.record.ratings) or 'none'}")

	logger.info("=" * 60)
	return 0


if __name__ == '__main__':
	sys.exit(main())
