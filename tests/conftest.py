"""
Shared fixtures for the Reel Search tests: sample records, a scripted gateway
and a render sink that records what it was asked to draw.
"""

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from reel_search.models import (  # noqa: E402
	DetailOutcome,
	DetailRecord,
	MediaType,
	MovieRecord,
	Outcome,
	SearchOutcome,
	SearchResultPage,
)
from reel_search.view_state import Renderer, ViewStateController  # noqa: E402
from reel_search.watchlist import MemoryStorage, WatchlistStore  # noqa: E402


def movie(record_id, title, year="", media_type=MediaType.MOVIE, poster="N/A"):
	return MovieRecord(id=record_id, title=title, year=year, media_type=media_type, poster_url=poster)


def found(query, records, total=None, page=1, page_size=10):
	return SearchOutcome(
		outcome=Outcome.FOUND,
		page=SearchResultPage(
			query=query,
			page=page,
			total_results=len(records) if total is None else total,
			records=tuple(records),
			page_size=page_size,
		),
	)


def not_found():
	return SearchOutcome(outcome=Outcome.NOT_FOUND, message="Nothing found. Try another name.")


class FakeGateway:
	"""
	Scripted stand-in for ProxyGateway / GatewayClient.
	`searches` maps a query to an outcome or to a callable(page, type_filter);
	`details` maps an id to an outcome. Unknown keys answer NOT_FOUND.
	"""

	def __init__(self):
		self.searches = {}
		self.details = {}
		self.search_calls = []
		self.detail_calls = []

	def search(self, query, page=1, type_filter=None):
		self.search_calls.append((query, page, type_filter))
		answer = self.searches.get(query)
		if callable(answer):
			return answer(page, type_filter)
		return answer or not_found()

	def detail(self, record_id, type_filter=None):
		self.detail_calls.append(record_id)
		answer = self.details.get(record_id)
		if callable(answer):
			return answer()
		return answer or DetailOutcome(outcome=Outcome.NOT_FOUND, message="Nothing found. Try another name.")


class RecordingRenderer(Renderer):

	def __init__(self):
		self.states = []
		self.toggles = []
		self.counts = []

	def render(self, state):
		self.states.append(state)

	def update_toggle(self, toggle):
		self.toggles.append(toggle)

	def update_count(self, count, label):
		self.counts.append((count, label))


@pytest.fixture()
def gateway():
	return FakeGateway()


@pytest.fixture()
def renderer():
	return RecordingRenderer()


@pytest.fixture()
def watchlist():
	return WatchlistStore(MemoryStorage())


@pytest.fixture()
def controller(gateway, watchlist, renderer):
	return ViewStateController(gateway, watchlist, renderer)


@pytest.fixture()
def inception():
	return DetailRecord(
		id="tt1375666",
		title="Inception",
		year="2010",
		media_type=MediaType.MOVIE,
		poster_url="https://img.example/inception.jpg",
		plot="A thief who steals corporate secrets through dream-sharing technology.",
		genre="Action, Adventure, Sci-Fi",
		director="Christopher Nolan, Emma Thomas",
		actors="Leonardo DiCaprio, Joseph Gordon-Levitt",
		runtime="148 min",
		rated="PG-13",
	)
