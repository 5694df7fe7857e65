"""
Data models for Reel Search.
Defines the canonical records shared by the upstream adapters, the proxy gateway,
the watchlist store and the view layer.
"""

# Import dataclass to define immutable "record-like" value objects
from dataclasses import dataclass, field  # frozen dataclasses never change after construction
# Enum gives us closed vocabularies that still serialize as plain strings
from enum import Enum  # media types and request outcomes
# Import math for the page-count ceiling
import math  # ceil for total pages
# Import typing helpers for precise and self-documenting types
from typing import Any, Dict, List, Optional, Tuple  # containers and optional values


# Sentinel for detail fields the upstream did not provide (rendering filters on it)
UNAVAILABLE = "N/A"
# Sentinel for "no image available"; a record without a poster is still valid
NO_IMAGE = "N/A"
# Default page size (OMDb serves pages of 10)
PAGE_SIZE = 10


class MediaType(str, Enum):
	"""Canonical media type; every upstream vocabulary collapses to one of these."""
	MOVIE = "movie"
	SERIES = "series"

	@classmethod
	def from_source(cls, raw: Any) -> Optional["MediaType"]:
		"""Map a source-specific type word ("tv", "film", ...) to a MediaType, or None."""
		if isinstance(raw, MediaType):
			return raw
		if not isinstance(raw, str):
			return None
		return _MEDIA_TYPE_VOCAB.get(raw.strip().lower())


# Source vocabulary -> canonical media type
_MEDIA_TYPE_VOCAB = {
	'movie': MediaType.MOVIE,
	'film': MediaType.MOVIE,
	'series': MediaType.SERIES,
	'tv': MediaType.SERIES,
}


class Outcome(str, Enum):
	"""Result flag of a gateway operation; the client branches on it, not on HTTP status."""
	FOUND = "found"
	NOT_FOUND = "not_found"
	INVALID = "invalid"
	SERVER_MISCONFIGURED = "server_misconfigured"
	UPSTREAM_UNREACHABLE = "upstream_unreachable"

	@property
	def status_code(self) -> int:
		if self is Outcome.SERVER_MISCONFIGURED:
			return 500
		if self is Outcome.UPSTREAM_UNREACHABLE:
			return 502
		return 200  # found / not found / invalid all travel as 200


def is_available(value: Optional[str]) -> bool:
	"""True when a text field carries real data (not empty, not the sentinel)."""
	return bool(value) and value != UNAVAILABLE


@dataclass(frozen=True)
class Rating:
	source: str  # e.g. "Internet Movie Database", "TMDB"
	value: str  # e.g. "8.8/10", "87%"


@dataclass(frozen=True)
class MovieRecord:
	"""
	Canonical search-result record.
	Also the shape of a watchlist entry: detail fields are never persisted.
	"""
	id: str  # globally stable id (may embed a media-type tag, e.g. "tv-1399")
	title: str  # display title, non-empty for a valid record
	year: str  # display year ("2010", "2010–2012" or "")
	media_type: MediaType  # movie or series
	poster_url: str = NO_IMAGE  # image URL or the NO_IMAGE sentinel

	@property
	def has_poster(self) -> bool:
		return bool(self.poster_url) and self.poster_url != NO_IMAGE

	def as_entry(self) -> "MovieRecord":
		"""Strip everything but the watchlist-entry fields."""
		return MovieRecord(
			id=self.id,
			title=self.title,
			year=self.year,
			media_type=self.media_type,
			poster_url=self.poster_url,
		)

	def to_dict(self) -> Dict[str, Any]:
		return {
			"id": self.id,
			"title": self.title,
			"year": self.year,
			"mediaType": self.media_type.value,
			"posterUrl": self.poster_url,
		}

	@classmethod
	def from_dict(cls, data: Any) -> Optional["MovieRecord"]:
		"""
		Lenient inverse of to_dict used for persisted entries.
		Returns None when the payload cannot form a valid record (no id or no title).
		"""
		if not isinstance(data, dict):
			return None
		record_id = data.get("id")
		title = data.get("title")
		if not isinstance(record_id, str) or not record_id.strip():
			return None
		if not isinstance(title, str) or not title.strip():
			return None
		year = data.get("year")
		poster = data.get("posterUrl")
		return cls(
			id=record_id.strip(),
			title=title.strip(),
			year=year.strip() if isinstance(year, str) else "",
			media_type=MediaType.from_source(data.get("mediaType")) or MediaType.MOVIE,
			poster_url=poster if isinstance(poster, str) and poster else NO_IMAGE,
		)


@dataclass(frozen=True)
class DetailRecord(MovieRecord):
	"""Canonical detail record; every optional field is text or UNAVAILABLE, never None."""
	plot: str = UNAVAILABLE
	genre: str = UNAVAILABLE
	director: str = UNAVAILABLE
	actors: str = UNAVAILABLE
	runtime: str = UNAVAILABLE
	rated: str = UNAVAILABLE
	box_office: str = UNAVAILABLE
	awards: str = UNAVAILABLE
	rating: str = UNAVAILABLE  # top-level convenience rating mirrored from the primary score
	ratings: Tuple[Rating, ...] = field(default_factory=tuple)  # ordered (source, value) pairs

	def director_names(self) -> List[str]:
		"""Director field split on commas, blanks removed."""
		if not is_available(self.director):
			return []
		return [name.strip() for name in self.director.split(',') if name.strip()]

	def to_dict(self) -> Dict[str, Any]:
		data = super().to_dict()
		data.update({
			"plot": self.plot,
			"genre": self.genre,
			"director": self.director,
			"actors": self.actors,
			"runtime": self.runtime,
			"rated": self.rated,
			"boxOffice": self.box_office,
			"awards": self.awards,
			"rating": self.rating,
			"ratings": [{"source": r.source, "value": r.value} for r in self.ratings],
		})
		return data


@dataclass(frozen=True)
class SearchResultPage:
	query: str  # trimmed query that produced the page
	page: int  # 1-indexed page number
	total_results: int  # upstream's total match count
	records: Tuple[MovieRecord, ...] = ()  # this page's records in upstream order
	page_size: int = PAGE_SIZE  # fixed per upstream family

	@property
	def total_pages(self) -> int:
		return total_pages(self.total_results, self.page_size)


def total_pages(total_results: int, page_size: int = PAGE_SIZE) -> int:
	"""ceil(total_results / page_size); never negative."""
	if total_results <= 0 or page_size <= 0:
		return 0
	return math.ceil(total_results / page_size)


@dataclass(frozen=True)
class SearchOutcome:
	outcome: Outcome
	page: Optional[SearchResultPage] = None  # set only when outcome is FOUND
	message: Optional[str] = None  # user-facing (or operator-facing) explanation

	@property
	def status_code(self) -> int:
		return self.outcome.status_code

	@property
	def records(self) -> Tuple[MovieRecord, ...]:
		return self.page.records if self.page else ()


@dataclass(frozen=True)
class DetailOutcome:
	outcome: Outcome
	record: Optional[DetailRecord] = None  # set only when outcome is FOUND
	message: Optional[str] = None

	@property
	def status_code(self) -> int:
		return self.outcome.status_code
