"""
OMDb adapter (single endpoint, results already close to canonical shape).
Renames fields, coerces types, and tells OMDb's own "no results" flag apart
from error payloads. Transport failures are raised earlier by UpstreamClient.
"""

from typing import Any, List, Optional, Type, TypeVar

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as SchemaError

from .adapters import UpstreamAdapter, coerce_int, coerce_text, dict_items, text_or_unavailable
from .errors import NotFound, UpstreamError
from .models import NO_IMAGE, DetailRecord, MediaType, MovieRecord, Rating, SearchResultPage

OMDB_URL = "https://www.omdbapi.com/"

# Error texts OMDb uses when nothing matches (everything else is a real error)
NOT_FOUND_ERRORS = ('not found', 'incorrect imdb id')

_Schema = TypeVar('_Schema', bound=BaseModel)


# ---- Input schemas ---------------------------------------------------------

class OmdbEnvelope(BaseModel):
	model_config = ConfigDict(extra='ignore', populate_by_name=True)

	response: Optional[str] = Field(default=None, alias='Response')  # "True" / "False"
	error: Optional[str] = Field(default=None, alias='Error')

	@field_validator('response', 'error', mode='before')
	@classmethod
	def envelope_text(cls, value: Any) -> Optional[str]:
		return coerce_text(value)

	@property
	def ok(self) -> bool:
		return (self.response or '').lower() == 'true'


class OmdbSearchItem(BaseModel):
	model_config = ConfigDict(extra='ignore', populate_by_name=True)

	imdb_id: Optional[str] = Field(default=None, alias='imdbID')
	title: Optional[str] = Field(default=None, alias='Title')
	year: Optional[str] = Field(default=None, alias='Year')
	kind: Optional[str] = Field(default=None, alias='Type')
	poster: Optional[str] = Field(default=None, alias='Poster')

	@field_validator('*', mode='before')
	@classmethod
	def text_fields(cls, value: Any) -> Optional[str]:
		return coerce_text(value)


class OmdbSearchEnvelope(OmdbEnvelope):
	total_results: Optional[str] = Field(default=None, alias='totalResults')
	search: List[OmdbSearchItem] = Field(default_factory=list, alias='Search')

	@field_validator('total_results', mode='before')
	@classmethod
	def total_text(cls, value: Any) -> Optional[str]:
		return coerce_text(value)

	@field_validator('search', mode='before')
	@classmethod
	def search_items(cls, value: Any) -> list:
		return dict_items(value)


class OmdbRating(BaseModel):
	model_config = ConfigDict(extra='ignore', populate_by_name=True)

	source: Optional[str] = Field(default=None, alias='Source')
	value: Optional[str] = Field(default=None, alias='Value')

	@field_validator('*', mode='before')
	@classmethod
	def text_fields(cls, value: Any) -> Optional[str]:
		return coerce_text(value)


class OmdbDetail(OmdbEnvelope):
	imdb_id: Optional[str] = Field(default=None, alias='imdbID')
	title: Optional[str] = Field(default=None, alias='Title')
	year: Optional[str] = Field(default=None, alias='Year')
	kind: Optional[str] = Field(default=None, alias='Type')
	poster: Optional[str] = Field(default=None, alias='Poster')
	plot: Optional[str] = Field(default=None, alias='Plot')
	genre: Optional[str] = Field(default=None, alias='Genre')
	director: Optional[str] = Field(default=None, alias='Director')
	actors: Optional[str] = Field(default=None, alias='Actors')
	runtime: Optional[str] = Field(default=None, alias='Runtime')
	rated: Optional[str] = Field(default=None, alias='Rated')
	box_office: Optional[str] = Field(default=None, alias='BoxOffice')
	awards: Optional[str] = Field(default=None, alias='Awards')
	imdb_rating: Optional[str] = Field(default=None, alias='imdbRating')
	ratings: List[OmdbRating] = Field(default_factory=list, alias='Ratings')

	@field_validator(
		'imdb_id', 'title', 'year', 'kind', 'poster', 'plot', 'genre', 'director',
		'actors', 'runtime', 'rated', 'box_office', 'awards', 'imdb_rating',
		mode='before',
	)
	@classmethod
	def text_fields(cls, value: Any) -> Optional[str]:
		return coerce_text(value)

	@field_validator('ratings', mode='before')
	@classmethod
	def rating_items(cls, value: Any) -> list:
		return dict_items(value)


# ---- Adapter ---------------------------------------------------------------

class OmdbAdapter(UpstreamAdapter):
	family = 'omdb'
	page_size = 10

	def search(self, query: str, page: int, type_filter: Optional[MediaType]) -> SearchResultPage:
		params = {'s': query, 'page': page, 'apikey': self.require_credentials()}
		if type_filter is not None:
			params['type'] = type_filter.value  # OMDb already speaks "movie" / "series"
		logger.debug(f"[OMDb] search q='{query}' page={page} type={params.get('type', 'any')}")

		_, payload = self.client.get_json(OMDB_URL, params)
		envelope = self._validate(OmdbSearchEnvelope, payload)
		if not envelope.ok:
			raise self._failure(envelope.error)

		records = [r for r in (self._record(item) for item in envelope.search) if r is not None]
		if len(records) < len(envelope.search):
			logger.warning(f"[OMDb] Dropped {len(envelope.search) - len(records)} results without id/title")

		total = max(coerce_int(envelope.total_results) or 0, len(records))
		logger.info(f"[OMDb] search q='{query}' page={page} -> {len(records)} records of {total}")
		return SearchResultPage(
			query=query,
			page=page,
			total_results=total,
			records=tuple(records),
			page_size=self.page_size,
		)

	def detail(self, record_id: str, type_filter: Optional[MediaType]) -> DetailRecord:
		params = {'i': record_id, 'plot': 'full', 'apikey': self.require_credentials()}
		if type_filter is not None:
			params['type'] = type_filter.value
		logger.debug(f"[OMDb] detail id={record_id}")

		_, payload = self.client.get_json(OMDB_URL, params)
		data = self._validate(OmdbDetail, payload)
		if not data.ok:
			raise self._failure(data.error)
		if not data.imdb_id or not data.title:
			logger.warning(f"[OMDb] Detail payload for {record_id} has no id/title")
			raise NotFound()

		return DetailRecord(
			id=data.imdb_id,
			title=data.title,
			year=self._year(data.year),
			media_type=MediaType.from_source(data.kind) or MediaType.MOVIE,
			poster_url=self._poster(data.poster),
			plot=text_or_unavailable(data.plot),
			genre=text_or_unavailable(data.genre),
			director=text_or_unavailable(data.director),
			actors=text_or_unavailable(data.actors),
			runtime=text_or_unavailable(data.runtime),
			rated=text_or_unavailable(data.rated),
			box_office=text_or_unavailable(data.box_office),
			awards=text_or_unavailable(data.awards),
			rating=text_or_unavailable(data.imdb_rating),
			ratings=tuple(
				Rating(source=r.source, value=r.value)
				for r in data.ratings
				if r.source and r.value
			),
		)

	def _validate(self, schema: Type[_Schema], payload: Any) -> _Schema:
		if not isinstance(payload, dict):
			raise UpstreamError("Unexpected response from OMDb.")
		try:
			return schema.model_validate(payload)
		except SchemaError as e:
			logger.warning(f"[OMDb] Payload rejected by {schema.__name__}: {e.error_count()} errors")
			raise UpstreamError("Unexpected response from OMDb.") from e

	def _failure(self, error: Optional[str]) -> Exception:
		text = (error or '').lower()
		if any(marker in text for marker in NOT_FOUND_ERRORS):
			return NotFound()
		logger.warning(f"[OMDb] Upstream error: {error or 'unspecified'}")
		return UpstreamError(error or None)

	def _record(self, item: OmdbSearchItem) -> Optional[MovieRecord]:
		if not item.imdb_id or not item.title:
			return None
		return MovieRecord(
			id=item.imdb_id,
			title=item.title,
			year=self._year(item.year),
			media_type=MediaType.from_source(item.kind) or MediaType.MOVIE,
			poster_url=self._poster(item.poster),
		)

	@staticmethod
	def _year(value: Optional[str]) -> str:
		if not value or value.upper() == 'N/A':
			return ''
		return value

	@staticmethod
	def _poster(value: Optional[str]) -> str:
		if not value or value.upper() == 'N/A':
			return NO_IMAGE
		return value
