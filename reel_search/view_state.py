"""
View state controller.

Owns the client-side state: current query, page, sort, type filter and which of
the three screens (search / detail / watchlist) is showing. Every change
replaces a single immutable ViewState and hands it to the render sink.

Requests go through a gateway (ProxyGateway in-process, or GatewayClient over
HTTP). Each state slot (results, detail, related) carries a generation counter:
a response that arrives after a newer request for the same slot is dropped.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple, Union
from urllib.parse import quote

from loguru import logger

from .errors import ReelSearchError
from .models import (
	DetailOutcome,
	DetailRecord,
	MediaType,
	MovieRecord,
	Outcome,
	SearchOutcome,
	is_available,
)
from .pagination import PageButton, pagination_controls
from .sorting import DEFAULT_SORT, SortMode, sort_records
from .watchlist import ToggleState, WatchlistStore, count_label

# User-facing messages
QUERY_REQUIRED_MESSAGE = "Type a movie or series name to search."
NOTHING_FOUND_MESSAGE = "Nothing found. Try another name."
CONNECTION_MESSAGE = "Something went wrong. Check your connection and try again."
DETAIL_ERROR_MESSAGE = "Couldn’t load details. Try again."

RELATED_LIMIT = 6
TRAILER_SEARCH_URL = "https://www.youtube.com/results?search_query="

# Friendly names for well-known rating sources
RATING_LABELS = {
	"Internet Movie Database": "IMDb",
	"Rotten Tomatoes": "Rotten Tomatoes",
	"Metacritic": "Metacritic",
}


class Screen(str, Enum):
	SEARCH = "search"
	DETAIL = "detail"
	WATCHLIST = "watchlist"


@dataclass(frozen=True)
class RecordView:
	"""A record as rendered: the canonical record plus current watchlist membership."""
	record: MovieRecord
	in_watchlist: bool

	@property
	def toggle(self) -> ToggleState:
		return ToggleState(record_id=self.record.id, in_watchlist=self.in_watchlist)


@dataclass(frozen=True)
class DetailView:
	record: DetailRecord
	in_watchlist: bool
	meta: str  # "2010 · PG-13 · 148 min"
	plot: Optional[str]  # None when unavailable
	rows: Tuple[Tuple[str, str], ...]  # (label, value) for the fields that are available
	rating_pills: Tuple[Tuple[str, str], ...]  # (source label, value)
	trailer_url: str

	@property
	def toggle(self) -> ToggleState:
		return ToggleState(record_id=self.record.id, in_watchlist=self.in_watchlist)

	@classmethod
	def build(cls, record: DetailRecord, in_watchlist: bool) -> "DetailView":
		meta = " · ".join(v for v in (record.year, record.rated, record.runtime) if is_available(v))
		rows = tuple(
			(label, value)
			for label, value in (
				("Genre", record.genre),
				("Director", record.director),
				("Actors", record.actors),
				("Box Office", record.box_office),
				("Awards", record.awards),
			)
			if is_available(value)
		)
		pills = tuple((RATING_LABELS.get(r.source, r.source), r.value) for r in record.ratings)
		if not pills and is_available(record.rating):
			pills = (("Rating", record.rating),)
		return cls(
			record=record,
			in_watchlist=in_watchlist,
			meta=meta,
			plot=record.plot if is_available(record.plot) else None,
			rows=rows,
			rating_pills=pills,
			trailer_url=TRAILER_SEARCH_URL + quote(f"{record.title} trailer", safe=''),
		)


@dataclass(frozen=True)
class RelatedStrip:
	"""Secondary "More from {director}" strip on the detail screen."""
	director: str
	records: Tuple[RecordView, ...]

	@property
	def heading(self) -> str:
		return f"More from {self.director}"


@dataclass(frozen=True)
class ViewState:
	screen: Screen = Screen.SEARCH
	# search screen
	query: str = ""
	page: int = 1
	total_results: int = 0
	total_pages: int = 0
	type_filter: Optional[MediaType] = None
	sort_mode: SortMode = DEFAULT_SORT
	results: Tuple[RecordView, ...] = ()
	results_visible: bool = False
	heading: str = ""
	pagination: Tuple[PageButton, ...] = ()
	empty_message: Optional[str] = None
	# shared indicators
	loading: bool = False
	error: Optional[str] = None
	# detail screen
	detail: Optional[DetailView] = None
	detail_opened_from: Screen = Screen.SEARCH
	related: Optional[RelatedStrip] = None
	# watchlist screen and badge
	watchlist: Tuple[RecordView, ...] = ()
	watchlist_count: int = 0
	watchlist_label: str = ""


class Renderer:
	"""Render sink. The default implementation draws nothing."""

	def render(self, state: ViewState) -> None:
		pass

	def update_toggle(self, toggle: ToggleState) -> None:
		"""Flip one toggle control in place, without redrawing its list."""
		pass

	def update_count(self, count: int, label: str) -> None:
		pass


def results_heading(total_results: int, query: str) -> str:
	if total_results == 1:
		return f'1 result for "{query}"'
	return f'{total_results} results for "{query}"'


class ViewStateController:

	def __init__(self, gateway, watchlist: WatchlistStore, renderer: Optional[Renderer] = None):
		self.gateway = gateway  # anything with search(query, page, type) / detail(id)
		self.watchlist = watchlist
		self.renderer = renderer or Renderer()
		self.state = ViewState(watchlist_count=watchlist.count, watchlist_label=watchlist.count_label)
		self._page_records: Tuple[MovieRecord, ...] = ()  # current page as returned, before sorting
		self._generations = {"results": 0, "detail": 0, "related": 0}

	# ---- state plumbing ----------------------------------------------------

	def _commit(self, **changes) -> ViewState:
		"""Replace the state atomically and render it."""
		self.state = replace(self.state, **changes)
		self.renderer.render(self.state)
		return self.state

	def _begin(self, slot: str) -> int:
		self._generations[slot] += 1
		return self._generations[slot]

	def _is_current(self, slot: str, token: int) -> bool:
		if self._generations[slot] != token:
			logger.debug(f"[View] Dropping stale {slot} response (generation {token} < {self._generations[slot]})")
			return False
		return True

	def _views(self, records) -> Tuple[RecordView, ...]:
		records = list(records)
		flags = self.watchlist.membership(records)
		return tuple(RecordView(record=r, in_watchlist=f) for r, f in zip(records, flags))

	def _call_search(self, query: str, page: int, type_filter: Optional[MediaType]) -> SearchOutcome:
		try:
			return self.gateway.search(query, page, type_filter)
		except ReelSearchError as e:
			return SearchOutcome(outcome=e.outcome, message=e.message)

	def _call_detail(self, record_id: str) -> DetailOutcome:
		try:
			return self.gateway.detail(record_id)
		except ReelSearchError as e:
			return DetailOutcome(outcome=e.outcome, message=e.message)

	# ---- search ------------------------------------------------------------

	def search(self, query: Optional[str], page: int = 1) -> ViewState:
		"""Run a search for `query` at `page` with the current type filter and sort."""
		q = (query or "").strip()
		if not q:
			return self._commit(error=QUERY_REQUIRED_MESSAGE, loading=False)

		page = max(1, page)
		token = self._begin("results")
		self._commit(
			screen=Screen.SEARCH,
			query=q,
			page=page,
			loading=True,
			error=None,
			empty_message=None,
			results_visible=False,
			detail=None,
			related=None,
		)
		logger.debug(f"[View] search q='{q}' page={page} type={self.state.type_filter}")

		outcome = self._call_search(q, page, self.state.type_filter)
		if not self._is_current("results", token):
			return self.state

		if outcome.outcome is Outcome.FOUND and outcome.page is not None:
			result = outcome.page
			self._page_records = tuple(result.records)
			if not result.records:
				# e.g. a page past the end: not an error, keep the controls
				return self._commit(
					loading=False,
					results=(),
					total_results=result.total_results,
					total_pages=result.total_pages,
					pagination=tuple(pagination_controls(page, result.total_pages)),
					empty_message=NOTHING_FOUND_MESSAGE,
				)
			return self._commit(
				loading=False,
				total_results=result.total_results,
				total_pages=result.total_pages,
				results=self._views(sort_records(self._page_records, self.state.sort_mode)),
				results_visible=True,
				heading=results_heading(result.total_results, q),
				pagination=tuple(pagination_controls(page, result.total_pages)),
			)

		self._page_records = ()
		cleared = dict(loading=False, results=(), pagination=(), total_results=0, total_pages=0)
		if outcome.outcome is Outcome.NOT_FOUND:
			return self._commit(empty_message=NOTHING_FOUND_MESSAGE, **cleared)
		if outcome.outcome is Outcome.INVALID:
			return self._commit(error=outcome.message or QUERY_REQUIRED_MESSAGE, **cleared)
		# unreachable or misconfigured: same message for the user, retried only on demand
		logger.warning(f"[View] search failed: {outcome.outcome.value} ({outcome.message})")
		return self._commit(error=CONNECTION_MESSAGE, **cleared)

	def go_to_page(self, page: int) -> ViewState:
		"""Re-issue the last search for `page` with the same query and filters."""
		return self.search(self.state.query, page)

	def set_sort_mode(self, mode: Union[str, SortMode]) -> ViewState:
		"""Change the sort and re-sort the current page in place (no new request)."""
		mode = mode if isinstance(mode, SortMode) else SortMode.parse(mode)
		if not self._page_records:
			self.state = replace(self.state, sort_mode=mode)
			return self.state
		return self._commit(sort_mode=mode, results=self._views(sort_records(self._page_records, mode)))

	def set_type_filter(self, type_filter: Optional[MediaType]) -> ViewState:
		"""Type filter used by the next search; None means any type."""
		self.state = replace(self.state, type_filter=type_filter)
		return self.state

	# ---- detail ------------------------------------------------------------

	def open_detail(self, record_id: str) -> ViewState:
		"""Switch to the detail screen and load `record_id`."""
		if self.state.screen is Screen.DETAIL:
			opened_from = self.state.detail_opened_from  # opened from the related strip
		elif self.state.screen is Screen.WATCHLIST:
			opened_from = Screen.WATCHLIST
		else:
			opened_from = Screen.SEARCH

		token = self._begin("detail")
		self._begin("related")  # any pending related lookup belongs to the old detail
		self._commit(
			screen=Screen.DETAIL,
			detail_opened_from=opened_from,
			loading=True,
			error=None,
			detail=None,
			related=None,
		)

		outcome = self._call_detail(record_id)
		if not self._is_current("detail", token):
			return self.state

		if outcome.outcome is not Outcome.FOUND or outcome.record is None:
			logger.info(f"[View] detail {record_id} -> {outcome.outcome.value}")
			return self._commit(loading=False, error=DETAIL_ERROR_MESSAGE)

		record = outcome.record
		self._commit(loading=False, detail=DetailView.build(record, self.watchlist.contains(record.id)))
		self._load_related(record)
		return self.state

	def _load_related(self, record: DetailRecord) -> None:
		"""Fill the "More from {director}" strip; any failure simply leaves it out."""
		names = record.director_names()
		if not names:
			return
		director = names[0]
		token = self._begin("related")

		outcome = self._call_search(director, 1, MediaType.MOVIE)
		if not self._is_current("related", token):
			return
		if self.state.detail is None or self.state.detail.record.id != record.id:
			return
		if outcome.outcome is not Outcome.FOUND:
			logger.debug(f"[View] related lookup for '{director}' -> {outcome.outcome.value}; strip omitted")
			return

		others = [r for r in outcome.records if r.id != record.id][:RELATED_LIMIT]
		if not others:
			return
		self._commit(related=RelatedStrip(director=director, records=self._views(others)))

	def back(self) -> ViewState:
		"""Leave the detail screen for whichever screen opened it."""
		if self.state.screen is not Screen.DETAIL:
			return self.state
		self._begin("detail")
		self._begin("related")
		return self.show_screen(self.state.detail_opened_from)

	# ---- navigation --------------------------------------------------------

	def show_screen(self, screen: Union[str, Screen]) -> ViewState:
		"""Switch between the search and watchlist screens; clears any error."""
		screen = Screen(screen)
		if screen is Screen.DETAIL:
			raise ValueError("Use open_detail() to show the detail screen")

		changes = dict(screen=screen, error=None, loading=False, detail=None, related=None)
		if screen is Screen.WATCHLIST:
			changes["watchlist"] = self._views(self.watchlist.list())
		else:
			# membership may have changed while another screen was showing
			changes["results"] = self._views(r.record for r in self.state.results)
			changes["results_visible"] = bool(self.state.query) and bool(self.state.results)
		return self._commit(**changes)

	# ---- watchlist ---------------------------------------------------------

	def toggle_watchlist(self, record: MovieRecord) -> ToggleState:
		"""
		Add or remove `record`. Search results, detail and related strip update
		the one toggle in place; the watchlist screen re-renders its list after a
		removal because its membership changed.
		"""
		in_list = self.watchlist.toggle(record)
		toggle = ToggleState(record_id=record.id, in_watchlist=in_list)
		count = self.watchlist.count

		if self.state.screen is Screen.WATCHLIST:
			self._commit(
				watchlist=self._views(self.watchlist.list()),
				watchlist_count=count,
				watchlist_label=count_label(count),
			)
			return toggle

		self.state = replace(
			self.state,
			results=self._flip(self.state.results, toggle),
			detail=replace(self.state.detail, in_watchlist=in_list)
			if self.state.detail is not None and self.state.detail.record.id == record.id
			else self.state.detail,
			related=replace(self.state.related, records=self._flip(self.state.related.records, toggle))
			if self.state.related is not None
			else None,
			watchlist_count=count,
			watchlist_label=count_label(count),
		)
		self.renderer.update_toggle(toggle)
		self.renderer.update_count(count, count_label(count))
		return toggle

	def remove_from_watchlist(self, record_id: str) -> ViewState:
		"""Remove action on the watchlist screen (always a full re-render)."""
		self.watchlist.remove(record_id)
		count = self.watchlist.count
		return self._commit(
			watchlist=self._views(self.watchlist.list()),
			watchlist_count=count,
			watchlist_label=count_label(count),
		)

	@staticmethod
	def _flip(views: Tuple[RecordView, ...], toggle: ToggleState) -> Tuple[RecordView, ...]:
		return tuple(
			replace(v, in_watchlist=toggle.in_watchlist) if v.record.id == toggle.record_id else v
			for v in views
		)
