"""
TMDB adapter (multi-endpoint, type-filtered).

- search dispatches to /search/movie, /search/tv or /search/multi by type filter;
  multi results that are not movies or TV shows (people) are discarded
- canonical ids are synthesized as "{movie|tv}-{numericId}" because TMDB ids are
  only unique within one media type; detail lookups parse them back
- detail maps vote_average to a single "TMDB" rating, keeps the first 5 cast
  members and resolves the first crew member whose job is "Director"
"""

from typing import Any, List, Optional, Tuple, Type, TypeVar

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as SchemaError

from .adapters import (
	UpstreamAdapter,
	coerce_int,
	coerce_number,
	coerce_text,
	dict_items,
	text_or_unavailable,
)
from .errors import NotFound, UpstreamError
from .ids import make_combined_id, media_type_tag, parse_combined_id
from .models import NO_IMAGE, UNAVAILABLE, DetailRecord, MediaType, MovieRecord, Rating, SearchResultPage

TMDB_API = "https://api.themoviedb.org/3"
IMG_BASE = "https://image.tmdb.org/t/p/w500"
RATING_SOURCE = "TMDB"  # fixed source label for the single TMDB score
MAX_CAST = 5

_Schema = TypeVar('_Schema', bound=BaseModel)


def tmdb_id(value: Any) -> Optional[int]:
	"""TMDB ids are non-negative integers; anything else is treated as missing."""
	num = coerce_int(value)
	return num if num is not None and num >= 0 else None


# ---- Input schemas ---------------------------------------------------------

class TmdbStatus(BaseModel):
	"""Fields TMDB sends on error payloads ({"success": false, "status_message": ...})."""
	model_config = ConfigDict(extra='ignore')

	success: Optional[bool] = None
	status_code: Optional[int] = None
	status_message: Optional[str] = None

	@field_validator('success', mode='before')
	@classmethod
	def success_flag(cls, value: Any) -> Optional[bool]:
		return value if isinstance(value, bool) else None

	@field_validator('status_code', mode='before')
	@classmethod
	def status_number(cls, value: Any) -> Optional[int]:
		return coerce_int(value)

	@field_validator('status_message', mode='before')
	@classmethod
	def status_text(cls, value: Any) -> Optional[str]:
		return coerce_text(value)


class TmdbSearchItem(BaseModel):
	model_config = ConfigDict(extra='ignore')

	id: Optional[int] = None
	media_type: Optional[str] = None  # only present on /search/multi
	title: Optional[str] = None  # movies
	name: Optional[str] = None  # tv shows and people
	release_date: Optional[str] = None
	first_air_date: Optional[str] = None
	poster_path: Optional[str] = None

	@field_validator('id', mode='before')
	@classmethod
	def numeric_id(cls, value: Any) -> Optional[int]:
		return tmdb_id(value)

	@field_validator('media_type', 'title', 'name', 'release_date', 'first_air_date', 'poster_path', mode='before')
	@classmethod
	def text_fields(cls, value: Any) -> Optional[str]:
		return coerce_text(value)


class TmdbSearchEnvelope(TmdbStatus):
	page: Optional[int] = None
	total_results: Optional[int] = None
	results: List[TmdbSearchItem] = Field(default_factory=list)

	@field_validator('page', 'total_results', mode='before')
	@classmethod
	def counts(cls, value: Any) -> Optional[int]:
		return coerce_int(value)

	@field_validator('results', mode='before')
	@classmethod
	def result_items(cls, value: Any) -> list:
		return dict_items(value)


class TmdbNamed(BaseModel):
	model_config = ConfigDict(extra='ignore')

	name: Optional[str] = None

	@field_validator('name', mode='before')
	@classmethod
	def name_text(cls, value: Any) -> Optional[str]:
		return coerce_text(value)


class TmdbCrewMember(TmdbNamed):
	job: Optional[str] = None

	@field_validator('job', mode='before')
	@classmethod
	def job_text(cls, value: Any) -> Optional[str]:
		return coerce_text(value)


class TmdbCredits(BaseModel):
	model_config = ConfigDict(extra='ignore')

	cast: List[TmdbNamed] = Field(default_factory=list)
	crew: List[TmdbCrewMember] = Field(default_factory=list)

	@field_validator('cast', 'crew', mode='before')
	@classmethod
	def members(cls, value: Any) -> list:
		return dict_items(value)


class TmdbDetail(TmdbStatus):
	id: Optional[int] = None
	title: Optional[str] = None
	name: Optional[str] = None
	release_date: Optional[str] = None
	first_air_date: Optional[str] = None
	poster_path: Optional[str] = None
	overview: Optional[str] = None
	runtime: Optional[int] = None
	episode_run_time: List[int] = Field(default_factory=list)
	vote_average: Optional[float] = None
	revenue: Optional[int] = None
	genres: List[TmdbNamed] = Field(default_factory=list)
	created_by: List[TmdbNamed] = Field(default_factory=list)
	credits: Optional[TmdbCredits] = None

	@field_validator('id', mode='before')
	@classmethod
	def numeric_id(cls, value: Any) -> Optional[int]:
		return tmdb_id(value)

	@field_validator('runtime', 'revenue', mode='before')
	@classmethod
	def integers(cls, value: Any) -> Optional[int]:
		return coerce_int(value)

	@field_validator('title', 'name', 'release_date', 'first_air_date', 'poster_path', 'overview', mode='before')
	@classmethod
	def text_fields(cls, value: Any) -> Optional[str]:
		return coerce_text(value)

	@field_validator('vote_average', mode='before')
	@classmethod
	def score(cls, value: Any) -> Optional[float]:
		return coerce_number(value)

	@field_validator('episode_run_time', mode='before')
	@classmethod
	def run_times(cls, value: Any) -> list:
		if not isinstance(value, list):
			return []
		return [n for n in (coerce_int(v) for v in value) if n is not None]

	@field_validator('genres', 'created_by', mode='before')
	@classmethod
	def named_items(cls, value: Any) -> list:
		return dict_items(value)

	@field_validator('credits', mode='before')
	@classmethod
	def credits_block(cls, value: Any) -> Optional[dict]:
		return value if isinstance(value, dict) else None


# ---- Adapter ---------------------------------------------------------------

class TmdbAdapter(UpstreamAdapter):
	family = 'tmdb'
	page_size = 20  # TMDB serves fixed pages of 20

	def search(self, query: str, page: int, type_filter: Optional[MediaType]) -> SearchResultPage:
		api_key = self.require_credentials()
		endpoint = 'multi' if type_filter is None else media_type_tag(type_filter)
		params = {'api_key': api_key, 'query': query, 'page': page, 'include_adult': 'false'}
		logger.debug(f"[TMDB] search/{endpoint} q='{query}' page={page}")

		status, payload = self.client.get_json(f"{TMDB_API}/search/{endpoint}", params)
		envelope = self._validate(TmdbSearchEnvelope, payload)
		self._raise_for_status(status, envelope)

		total = envelope.total_results or 0
		if total == 0 and not envelope.results:
			raise NotFound()

		records = []
		for item in envelope.results:
			record = self._record(item, type_filter)
			if record is not None:
				records.append(record)
		if len(records) < len(envelope.results):
			logger.debug(f"[TMDB] Discarded {len(envelope.results) - len(records)} non-title results")

		logger.info(f"[TMDB] search/{endpoint} q='{query}' page={page} -> {len(records)} records of {total}")
		return SearchResultPage(
			query=query,
			page=page,
			total_results=max(total, len(records)),
			records=tuple(records),
			page_size=self.page_size,
		)

	def detail(self, record_id: str, type_filter: Optional[MediaType]) -> DetailRecord:
		api_key = self.require_credentials()
		media_type, numeric_id = self.resolve_id(record_id, type_filter)
		tag = media_type_tag(media_type)
		logger.debug(f"[TMDB] detail {tag}/{numeric_id}")

		status, payload = self.client.get_json(
			f"{TMDB_API}/{tag}/{numeric_id}",
			{'api_key': api_key, 'append_to_response': 'credits'},
		)
		data = self._validate(TmdbDetail, payload)
		self._raise_for_status(status, data)

		title = data.title or data.name
		if data.id is None or not title:
			logger.warning(f"[TMDB] Detail payload for {record_id} has no id/title")
			raise NotFound()

		ratings: Tuple[Rating, ...] = ()
		rating = UNAVAILABLE
		if data.vote_average is not None:
			rating = f"{data.vote_average:.1f}"
			ratings = (Rating(source=RATING_SOURCE, value=f"{rating}/10"),)

		return DetailRecord(
			id=make_combined_id(media_type, data.id),
			title=title,
			year=self._year(data.release_date or data.first_air_date),
			media_type=media_type,
			poster_url=self._poster(data.poster_path),
			plot=text_or_unavailable(data.overview),
			genre=self._join(g.name for g in data.genres),
			director=self._director(data, media_type),
			actors=self._actors(data),
			runtime=self._runtime(data),
			rated=UNAVAILABLE,  # certifications live behind a separate endpoint
			box_office=f"${data.revenue:,}" if data.revenue else UNAVAILABLE,
			awards=UNAVAILABLE,
			rating=rating,
			ratings=ratings,
		)

	@staticmethod
	def resolve_id(record_id: str, type_filter: Optional[MediaType]) -> Tuple[MediaType, str]:
		"""
		Turn a canonical id into (media type, numeric TMDB id).
		An explicit type filter wins over the tag embedded in the id; a bare
		numeric id without a type is looked up as a movie.
		"""
		parsed = parse_combined_id(record_id)
		raw = (record_id or '').strip()
		if parsed is not None:
			numeric_id = parsed[1]
			media_type = type_filter or parsed[0]
		elif raw.isdigit():
			numeric_id = str(int(raw))
			media_type = type_filter or MediaType.MOVIE
		else:
			logger.info(f"[TMDB] Unresolvable id '{record_id}'")
			raise NotFound()
		return media_type, numeric_id

	def _validate(self, schema: Type[_Schema], payload: Any) -> _Schema:
		if not isinstance(payload, dict):
			raise UpstreamError("Unexpected response from TMDB.")
		try:
			return schema.model_validate(payload)
		except SchemaError as e:
			logger.warning(f"[TMDB] Payload rejected by {schema.__name__}: {e.error_count()} errors")
			raise UpstreamError("Unexpected response from TMDB.") from e

	def _raise_for_status(self, status: int, data: TmdbStatus) -> None:
		if status == 404 or data.status_code == 34:  # 34: "The resource you requested could not be found."
			raise NotFound()
		if status >= 400 or data.success is False:
			logger.warning(f"[TMDB] Upstream error (HTTP {status}): {data.status_message or 'unspecified'}")
			raise UpstreamError(data.status_message)

	def _record(self, item: TmdbSearchItem, type_filter: Optional[MediaType]) -> Optional[MovieRecord]:
		if type_filter is None:
			media_type = MediaType.from_source(item.media_type)  # "person" -> None
		else:
			media_type = type_filter
		if media_type is None or item.id is None:
			return None
		title = item.title or item.name
		if not title:
			return None
		return MovieRecord(
			id=make_combined_id(media_type, item.id),
			title=title,
			year=self._year(item.release_date or item.first_air_date),
			media_type=media_type,
			poster_url=self._poster(item.poster_path),
		)

	def _director(self, data: TmdbDetail, media_type: MediaType) -> str:
		if data.credits is not None:
			for member in data.credits.crew:
				if member.job == 'Director' and member.name:
					return member.name
		if media_type is MediaType.SERIES:
			creator = next((c.name for c in data.created_by if c.name), None)
			if creator:
				return creator
		return UNAVAILABLE

	def _actors(self, data: TmdbDetail) -> str:
		if data.credits is None:
			return UNAVAILABLE
		names = [m.name for m in data.credits.cast if m.name]
		return self._join(names[:MAX_CAST])

	def _runtime(self, data: TmdbDetail) -> str:
		minutes = data.runtime or (data.episode_run_time[0] if data.episode_run_time else None)
		return f"{minutes} min" if minutes else UNAVAILABLE

	@staticmethod
	def _join(names) -> str:
		joined = ', '.join(n for n in names if n)
		return joined or UNAVAILABLE

	@staticmethod
	def _year(date: Optional[str]) -> str:
		if date and len(date) >= 4 and date[:4].isdigit():
			return date[:4]
		return ''

	@staticmethod
	def _poster(path: Optional[str]) -> str:
		if not path:
			return NO_IMAGE
		if path.startswith('http'):
			return path
		return f"{IMG_BASE}/{path.lstrip('/')}"
