"""
TMDB adapter tests against mocked HTTP (responses).
"""

import pytest
import responses

from reel_search.errors import NotFound, UpstreamError
from reel_search.models import NO_IMAGE, UNAVAILABLE, MediaType
from reel_search.tmdb_adapter import IMG_BASE, TMDB_API, TmdbAdapter
from reel_search.upstream import UpstreamClient

MULTI_PAYLOAD = {
	"page": 1,
	"total_results": 3,
	"total_pages": 1,
	"results": [
		{"id": 27205, "media_type": "movie", "title": "Inception", "release_date": "2010-07-15", "poster_path": "/inc.jpg"},
		{"id": 1399, "media_type": "tv", "name": "Game of Thrones", "first_air_date": "2011-04-17", "poster_path": None},
		{"id": 525, "media_type": "person", "name": "Christopher Nolan"},
	],
}

CAST = [{"name": n} for n in ("Leonardo DiCaprio", "Joseph Gordon-Levitt", "Elliot Page", "Tom Hardy", "Ken Watanabe", "Cillian Murphy", "Michael Caine")]


def make_adapter():
	return TmdbAdapter("tmdb-key", UpstreamClient(timeout_s=1.0))


def test_multi_search_discards_people():
	with responses.RequestsMock() as rsps:
		rsps.add(responses.GET, f"{TMDB_API}/search/multi", json=MULTI_PAYLOAD, status=200)
		page = make_adapter().search("inception", 1, None)
		url = rsps.calls[0].request.url

	assert "query=inception" in url
	assert "include_adult=false" in url
	assert [r.id for r in page.records] == ["movie-27205", "tv-1399"]
	movie, show = page.records
	assert movie.year == "2010"
	assert movie.poster_url == f"{IMG_BASE}/inc.jpg"
	assert show.title == "Game of Thrones"
	assert show.media_type is MediaType.SERIES
	assert show.poster_url == NO_IMAGE
	assert page.page_size == 20


def test_type_filter_picks_endpoint():
	payload = {"page": 1, "total_results": 1, "results": [{"id": 1399, "name": "Game of Thrones", "first_air_date": "2011-04-17"}]}
	with responses.RequestsMock() as rsps:
		rsps.add(responses.GET, f"{TMDB_API}/search/tv", json=payload, status=200)
		page = make_adapter().search("thrones", 1, MediaType.SERIES)

	assert page.records[0].id == "tv-1399"
	assert page.records[0].media_type is MediaType.SERIES


def test_empty_search_is_not_found():
	with responses.RequestsMock() as rsps:
		rsps.add(responses.GET, f"{TMDB_API}/search/movie", json={"page": 1, "total_results": 0, "results": []}, status=200)
		with pytest.raises(NotFound):
			make_adapter().search("qwertyuiop", 1, MediaType.MOVIE)


def test_detail_of_movie():
	payload = {
		"id": 27205,
		"title": "Inception",
		"release_date": "2010-07-15",
		"poster_path": "/inc.jpg",
		"overview": "A thief who steals corporate secrets.",
		"runtime": 148,
		"revenue": 825532764,
		"vote_average": 8.3,
		"genres": [{"name": "Action"}, {"name": "Science Fiction"}],
		"credits": {
			"cast": CAST,
			"crew": [
				{"name": "Emma Thomas", "job": "Producer"},
				{"name": "Christopher Nolan", "job": "Director"},
				{"name": "Someone Else", "job": "Director"},
			],
		},
	}
	with responses.RequestsMock() as rsps:
		rsps.add(responses.GET, f"{TMDB_API}/movie/27205", json=payload, status=200)
		record = make_adapter().detail("movie-27205", None)
		url = rsps.calls[0].request.url

	assert "append_to_response=credits" in url
	assert record.id == "movie-27205"
	assert record.director == "Christopher Nolan"
	assert record.actors == "Leonardo DiCaprio, Joseph Gordon-Levitt, Elliot Page, Tom Hardy, Ken Watanabe"
	assert record.genre == "Action, Science Fiction"
	assert record.runtime == "148 min"
	assert record.box_office == "$825,532,764"
	assert record.rating == "8.3"
	assert [(r.source, r.value) for r in record.ratings] == [("TMDB", "8.3/10")]
	assert record.rated == UNAVAILABLE
	assert record.awards == UNAVAILABLE


def test_detail_without_score_or_credits():
	payload = {"id": 1399, "name": "Game of Thrones", "first_air_date": "2011-04-17"}
	with responses.RequestsMock() as rsps:
		rsps.add(responses.GET, f"{TMDB_API}/tv/1399", json=payload, status=200)
		record = make_adapter().detail("tv-1399", None)

	assert record.media_type is MediaType.SERIES
	assert record.ratings == ()
	assert record.rating == UNAVAILABLE
	assert record.actors == UNAVAILABLE
	assert record.director == UNAVAILABLE
	assert record.plot == UNAVAILABLE


def test_series_director_falls_back_to_creator():
	payload = {
		"id": 1399,
		"name": "Game of Thrones",
		"created_by": [{"name": "David Benioff"}, {"name": "D. B. Weiss"}],
		"episode_run_time": [60],
		"credits": {"cast": [], "crew": []},
	}
	with responses.RequestsMock() as rsps:
		rsps.add(responses.GET, f"{TMDB_API}/tv/1399", json=payload, status=200)
		record = make_adapter().detail("tv-1399", None)

	assert record.director == "David Benioff"
	assert record.runtime == "60 min"


def test_explicit_type_wins_over_id_tag():
	assert TmdbAdapter.resolve_id("tv-1399", MediaType.MOVIE) == (MediaType.MOVIE, "1399")
	assert TmdbAdapter.resolve_id("1399", None) == (MediaType.MOVIE, "1399")
	assert TmdbAdapter.resolve_id("1399", MediaType.SERIES) == (MediaType.SERIES, "1399")
	with pytest.raises(NotFound):
		TmdbAdapter.resolve_id("tt1375666", None)


def test_missing_resource_is_not_found():
	body = {"success": False, "status_code": 34, "status_message": "The resource you requested could not be found."}
	with responses.RequestsMock() as rsps:
		rsps.add(responses.GET, f"{TMDB_API}/movie/1", json=body, status=404)
		with pytest.raises(NotFound):
			make_adapter().detail("movie-1", None)


def test_bad_key_is_upstream_error():
	body = {"success": False, "status_code": 7, "status_message": "Invalid API key: You must be granted a valid key."}
	with responses.RequestsMock() as rsps:
		rsps.add(responses.GET, f"{TMDB_API}/search/multi", json=body, status=401)
		with pytest.raises(UpstreamError) as exc:
			make_adapter().search("inception", 1, None)
	assert "Invalid API key" in exc.value.message


def test_negative_ids_are_skipped():
	payload = {
		"page": 1,
		"total_results": 2,
		"results": [
			{"id": -5, "media_type": "movie", "title": "Broken"},
			{"id": 27205, "media_type": "movie", "title": "Inception", "release_date": "2010-07-15"},
		],
	}
	with responses.RequestsMock() as rsps:
		rsps.add(responses.GET, f"{TMDB_API}/search/multi", json=payload, status=200)
		page = make_adapter().search("inception", 1, None)
	assert [r.id for r in page.records] == ["movie-27205"]


def test_detail_with_negative_id_is_not_found():
	with responses.RequestsMock() as rsps:
		rsps.add(responses.GET, f"{TMDB_API}/movie/7", json={"id": -7, "title": "Broken"}, status=200)
		with pytest.raises(NotFound):
			make_adapter().detail("movie-7", None)
