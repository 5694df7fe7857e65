"""
Pydantic models describing the gateway's JSON envelopes.
api.py serializes outcomes through them; client.py validates responses with them
and turns them back into domain outcomes.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .models import (
	NO_IMAGE,
	PAGE_SIZE,
	UNAVAILABLE,
	DetailOutcome,
	DetailRecord,
	MediaType,
	MovieRecord,
	Outcome,
	Rating,
	SearchOutcome,
	SearchResultPage,
)


class RecordOut(BaseModel):
	"""One canonical search record on the wire."""
	model_config = ConfigDict(populate_by_name=True)

	id: str  # canonical id
	title: str  # display title
	year: str = ""  # display year or empty
	media_type: MediaType = Field(default=MediaType.MOVIE, alias='mediaType')  # movie / series
	poster_url: str = Field(default=NO_IMAGE, alias='posterUrl')  # URL or "N/A"

	@classmethod
	def from_record(cls, record: MovieRecord) -> "RecordOut":
		return cls(
			id=record.id,
			title=record.title,
			year=record.year,
			media_type=record.media_type,
			poster_url=record.poster_url,
		)

	def to_record(self) -> MovieRecord:
		return MovieRecord(
			id=self.id,
			title=self.title,
			year=self.year,
			media_type=self.media_type,
			poster_url=self.poster_url or NO_IMAGE,
		)


class RatingOut(BaseModel):
	source: str  # rating source name
	value: str  # formatted score


class DetailOut(RecordOut):
	"""Canonical detail record; missing fields travel as "N/A", never null."""
	plot: str = UNAVAILABLE
	genre: str = UNAVAILABLE
	director: str = UNAVAILABLE
	actors: str = UNAVAILABLE
	runtime: str = UNAVAILABLE
	rated: str = UNAVAILABLE
	box_office: str = Field(default=UNAVAILABLE, alias='boxOffice')
	awards: str = UNAVAILABLE
	rating: str = UNAVAILABLE
	ratings: List[RatingOut] = Field(default_factory=list)

	@classmethod
	def from_detail(cls, record: DetailRecord) -> "DetailOut":
		return cls(
			id=record.id,
			title=record.title,
			year=record.year,
			media_type=record.media_type,
			poster_url=record.poster_url,
			plot=record.plot,
			genre=record.genre,
			director=record.director,
			actors=record.actors,
			runtime=record.runtime,
			rated=record.rated,
			box_office=record.box_office,
			awards=record.awards,
			rating=record.rating,
			ratings=[RatingOut(source=r.source, value=r.value) for r in record.ratings],
		)

	def to_detail(self) -> DetailRecord:
		return DetailRecord(
			id=self.id,
			title=self.title,
			year=self.year,
			media_type=self.media_type,
			poster_url=self.poster_url or NO_IMAGE,
			plot=self.plot,
			genre=self.genre,
			director=self.director,
			actors=self.actors,
			runtime=self.runtime,
			rated=self.rated,
			box_office=self.box_office,
			awards=self.awards,
			rating=self.rating,
			ratings=tuple(Rating(source=r.source, value=r.value) for r in self.ratings),
		)


class SearchEnvelope(BaseModel):
	"""Response body of GET /api/search."""
	model_config = ConfigDict(populate_by_name=True)

	outcome: Outcome  # drives client branching
	error: Optional[str] = None  # message for non-found outcomes
	query: Optional[str] = None
	page: Optional[int] = None
	page_size: Optional[int] = Field(default=None, alias='pageSize')
	total_results: Optional[int] = Field(default=None, alias='totalResults')
	total_pages: Optional[int] = Field(default=None, alias='totalPages')
	records: List[RecordOut] = Field(default_factory=list)

	@classmethod
	def from_outcome(cls, outcome: SearchOutcome) -> "SearchEnvelope":
		page = outcome.page
		if page is None:
			return cls(outcome=outcome.outcome, error=outcome.message)
		return cls(
			outcome=outcome.outcome,
			query=page.query,
			page=page.page,
			page_size=page.page_size,
			total_results=page.total_results,
			total_pages=page.total_pages,
			records=[RecordOut.from_record(r) for r in page.records],
		)

	def to_outcome(self) -> SearchOutcome:
		if self.outcome is not Outcome.FOUND:
			return SearchOutcome(outcome=self.outcome, message=self.error)
		page = SearchResultPage(
			query=self.query or "",
			page=self.page or 1,
			total_results=self.total_results or 0,
			records=tuple(r.to_record() for r in self.records),
			page_size=self.page_size or PAGE_SIZE,
		)
		return SearchOutcome(outcome=Outcome.FOUND, page=page)

	def to_json(self) -> dict:
		return self.model_dump(mode='json', by_alias=True, exclude_none=True)


class DetailEnvelope(BaseModel):
	"""Response body of GET /api/detail."""
	outcome: Outcome
	error: Optional[str] = None
	record: Optional[DetailOut] = None

	@classmethod
	def from_outcome(cls, outcome: DetailOutcome) -> "DetailEnvelope":
		if outcome.record is None:
			return cls(outcome=outcome.outcome, error=outcome.message)
		return cls(outcome=outcome.outcome, record=DetailOut.from_detail(outcome.record))

	def to_outcome(self) -> DetailOutcome:
		if self.outcome is not Outcome.FOUND or self.record is None:
			outcome = Outcome.NOT_FOUND if self.outcome is Outcome.FOUND else self.outcome
			return DetailOutcome(outcome=outcome, message=self.error)
		return DetailOutcome(outcome=Outcome.FOUND, record=self.record.to_detail())

	def to_json(self) -> dict:
		return self.model_dump(mode='json', by_alias=True, exclude_none=True)
