"""
FastAPI endpoint tests.
The upstream is mocked with `responses`; TestClient traffic goes through httpx
and is not intercepted.
"""

import pytest
import requests
import responses
from fastapi.testclient import TestClient

import api
from reel_search.config import Settings
from reel_search.gateway import ProxyGateway
from reel_search.omdb_adapter import OMDB_URL

SECRET = "secret-omdb-key"

SEARCH_PAYLOAD = {
	"Search": [
		{"Title": "Inception", "Year": "2010", "imdbID": "tt1375666", "Type": "movie", "Poster": "https://img.example/inception.jpg"},
		{"Title": "Inception: The Cobol Job", "Year": "2010", "imdbID": "tt5295894", "Type": "movie", "Poster": "N/A"},
	],
	"totalResults": "12",
	"Response": "True",
}


def use_gateway(monkeypatch, api_key=SECRET):
	monkeypatch.setattr(api, "GATEWAY", ProxyGateway(Settings(upstream_family="omdb", api_key=api_key)))
	return TestClient(api.app)


def test_health(monkeypatch):
	client = use_gateway(monkeypatch)
	res = client.get("/health")
	assert res.status_code == 200
	assert res.json() == {"status": "ok", "upstream": "omdb", "configured": True}


def test_search_found(monkeypatch):
	client = use_gateway(monkeypatch)
	with responses.RequestsMock() as rsps:
		rsps.add(responses.GET, OMDB_URL, json=SEARCH_PAYLOAD, status=200)
		res = client.get("/api/search", params={"query": "inception", "page": 1})

	assert res.status_code == 200
	body = res.json()
	assert body["outcome"] == "found"
	assert body["totalResults"] == 12
	assert body["totalPages"] == 2
	assert body["pageSize"] == 10
	assert body["records"][0] == {
		"id": "tt1375666",
		"title": "Inception",
		"year": "2010",
		"mediaType": "movie",
		"posterUrl": "https://img.example/inception.jpg",
	}
	assert body["records"][1]["posterUrl"] == "N/A"
	assert SECRET not in res.text


def test_search_not_found(monkeypatch):
	client = use_gateway(monkeypatch)
	with responses.RequestsMock() as rsps:
		rsps.add(responses.GET, OMDB_URL, json={"Response": "False", "Error": "Movie not found!"}, status=200)
		res = client.get("/api/search", params={"query": "qwertyuiop"})
	assert res.status_code == 200
	assert res.json()["outcome"] == "not_found"


def test_search_without_query_is_invalid(monkeypatch):
	client = use_gateway(monkeypatch)
	res = client.get("/api/search")
	assert res.status_code == 200
	assert res.json()["outcome"] == "invalid"


def test_misconfigured_server_is_500(monkeypatch):
	client = use_gateway(monkeypatch, api_key=None)
	res = client.get("/api/search", params={"query": "batman"})
	assert res.status_code == 500
	body = res.json()
	assert body["outcome"] == "server_misconfigured"
	assert "API key" in body["error"]


def test_unreachable_upstream_is_502(monkeypatch):
	client = use_gateway(monkeypatch)
	with responses.RequestsMock() as rsps:
		rsps.add(responses.GET, OMDB_URL, body=requests.ConnectionError("refused"))
		res = client.get("/api/detail", params={"id": "tt1375666"})
	assert res.status_code == 502
	assert res.json()["outcome"] == "upstream_unreachable"


def test_detail_found(monkeypatch):
	client = use_gateway(monkeypatch)
	payload = {
		"Title": "Inception",
		"Year": "2010",
		"Director": "Christopher Nolan",
		"BoxOffice": "$292,587,330",
		"Ratings": [{"Source": "Internet Movie Database", "Value": "8.8/10"}],
		"imdbRating": "8.8",
		"imdbID": "tt1375666",
		"Type": "movie",
		"Response": "True",
	}
	with responses.RequestsMock() as rsps:
		rsps.add(responses.GET, OMDB_URL, json=payload, status=200)
		res = client.get("/api/detail", params={"id": "tt1375666"})

	assert res.status_code == 200
	record = res.json()["record"]
	assert record["boxOffice"] == "$292,587,330"
	assert record["ratings"] == [{"source": "Internet Movie Database", "value": "8.8/10"}]
	assert record["awards"] == "N/A"
	assert record["posterUrl"] == "N/A"
	assert SECRET not in res.text


@pytest.mark.parametrize("raw_type", ["movie", "tv", "series", ""])
def test_accepted_type_values(monkeypatch, raw_type):
	client = use_gateway(monkeypatch)
	with responses.RequestsMock() as rsps:
		rsps.add(responses.GET, OMDB_URL, json=SEARCH_PAYLOAD, status=200)
		res = client.get("/api/search", params={"query": "inception", "type": raw_type})
	assert res.json()["outcome"] == "found"


@pytest.mark.parametrize("raw_page", ["abc", "0", "-3", ""])
def test_bad_page_falls_back_to_first_page(monkeypatch, raw_page):
	client = use_gateway(monkeypatch)
	with responses.RequestsMock() as rsps:
		rsps.add(responses.GET, OMDB_URL, json=SEARCH_PAYLOAD, status=200)
		res = client.get("/api/search", params={"query": "inception", "page": raw_page})
		assert "page=1" in rsps.calls[0].request.url
	assert res.status_code == 200
	body = res.json()
	assert body["outcome"] == "found"
	assert body["page"] == 1
