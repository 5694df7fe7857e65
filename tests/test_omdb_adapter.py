"""
OMDb adapter tests against mocked HTTP (responses).
"""

import pytest
import requests
import responses

from reel_search.errors import ConfigurationError, NotFound, UpstreamError, UpstreamUnreachable
from reel_search.models import NO_IMAGE, UNAVAILABLE, MediaType
from reel_search.omdb_adapter import OMDB_URL, OmdbAdapter
from reel_search.upstream import UpstreamClient

SEARCH_PAYLOAD = {
	"Search": [
		{"Title": "Batman Begins", "Year": "2005", "imdbID": "tt0372784", "Type": "movie", "Poster": "https://img.example/bb.jpg"},
		{"Title": "Batman: The Animated Series", "Year": "1992–1995", "imdbID": "tt0103359", "Type": "series", "Poster": "N/A"},
		{"Title": "No id here", "Year": "1999", "Type": "movie"},
		{"Title": "Batman", "Year": 1989, "imdbID": "tt0096895", "Type": "game"},
	],
	"totalResults": "23",
	"Response": "True",
}

DETAIL_PAYLOAD = {
	"Title": "Inception",
	"Year": "2010",
	"Rated": "PG-13",
	"Runtime": "148 min",
	"Genre": "Action, Adventure, Sci-Fi",
	"Director": "Christopher Nolan",
	"Actors": "Leonardo DiCaprio, Joseph Gordon-Levitt",
	"Plot": "A thief who steals corporate secrets.",
	"Awards": "N/A",
	"Poster": "https://img.example/inception.jpg",
	"Ratings": [
		{"Source": "Internet Movie Database", "Value": "8.8/10"},
		{"Source": "Rotten Tomatoes", "Value": "87%"},
		"junk",
		{"Source": "Metacritic"},
	],
	"imdbRating": "8.8",
	"imdbID": "tt1375666",
	"Type": "movie",
	"Response": "True",
}


def make_adapter(api_key="test-key"):
	return OmdbAdapter(api_key, UpstreamClient(timeout_s=1.0))


def test_search_maps_records():
	with responses.RequestsMock() as rsps:
		rsps.add(responses.GET, OMDB_URL, json=SEARCH_PAYLOAD, status=200)
		page = make_adapter().search("batman", 1, None)

	assert [r.id for r in page.records] == ["tt0372784", "tt0103359", "tt0096895"]
	assert page.total_results == 23
	assert page.total_pages == 3
	assert page.page_size == 10

	begins, animated, original = page.records
	assert begins.poster_url == "https://img.example/bb.jpg"
	assert animated.media_type is MediaType.SERIES
	assert animated.year == "1992–1995"
	assert animated.poster_url == NO_IMAGE
	assert original.year == "1989"
	assert original.media_type is MediaType.MOVIE


def test_search_sends_type_and_page():
	with responses.RequestsMock() as rsps:
		rsps.add(responses.GET, OMDB_URL, json=SEARCH_PAYLOAD, status=200)
		make_adapter().search("batman", 2, MediaType.SERIES)
		url = rsps.calls[0].request.url

	assert "s=batman" in url
	assert "page=2" in url
	assert "type=series" in url
	assert "apikey=test-key" in url


def test_no_matches_is_not_found():
	with responses.RequestsMock() as rsps:
		rsps.add(responses.GET, OMDB_URL, json={"Response": "False", "Error": "Movie not found!"}, status=200)
		with pytest.raises(NotFound):
			make_adapter().search("qwertyuiop", 1, None)


def test_error_payload_is_upstream_error():
	with responses.RequestsMock() as rsps:
		rsps.add(responses.GET, OMDB_URL, json={"Response": "False", "Error": "Invalid API key!"}, status=401)
		with pytest.raises(UpstreamError) as exc:
			make_adapter().search("batman", 1, None)
	assert exc.value.message == "Invalid API key!"


def test_missing_key_fails_before_network():
	with responses.RequestsMock() as rsps:
		with pytest.raises(ConfigurationError):
			make_adapter(api_key="  ").search("batman", 1, None)
		assert len(rsps.calls) == 0


def test_non_json_body_is_unreachable():
	with responses.RequestsMock() as rsps:
		rsps.add(responses.GET, OMDB_URL, body="<html>gateway timeout</html>", status=504)
		with pytest.raises(UpstreamUnreachable):
			make_adapter().search("batman", 1, None)


def test_connection_error_is_unreachable():
	with responses.RequestsMock() as rsps:
		rsps.add(responses.GET, OMDB_URL, body=requests.ConnectionError("connection refused"))
		with pytest.raises(UpstreamUnreachable):
			make_adapter().detail("tt1375666", None)


def test_detail_maps_fields():
	with responses.RequestsMock() as rsps:
		rsps.add(responses.GET, OMDB_URL, json=DETAIL_PAYLOAD, status=200)
		record = make_adapter().detail("tt1375666", None)
		url = rsps.calls[0].request.url

	assert "i=tt1375666" in url
	assert "plot=full" in url
	assert record.title == "Inception"
	assert record.director == "Christopher Nolan"
	assert record.rated == "PG-13"
	assert record.awards == UNAVAILABLE
	assert record.box_office == UNAVAILABLE
	assert record.rating == "8.8"
	assert [(r.source, r.value) for r in record.ratings] == [
		("Internet Movie Database", "8.8/10"),
		("Rotten Tomatoes", "87%"),
	]


def test_detail_of_unknown_id_is_not_found():
	with responses.RequestsMock() as rsps:
		rsps.add(responses.GET, OMDB_URL, json={"Response": "False", "Error": "Incorrect IMDb ID."}, status=200)
		with pytest.raises(NotFound):
			make_adapter().detail("tt0", None)
