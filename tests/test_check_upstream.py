"""
Smoke tests for scripts/check_upstream.py.
"""

import responses

from reel_search.omdb_adapter import OMDB_URL
from scripts.check_upstream import main


def set_env(monkeypatch, key):
	monkeypatch.setenv("UPSTREAM", "omdb")
	monkeypatch.delenv("OMDB_API_KEY", raising=False)
	if key:
		monkeypatch.setenv("OMDB_KEY", key)
	else:
		monkeypatch.delenv("OMDB_KEY", raising=False)


def test_exits_nonzero_when_misconfigured(monkeypatch):
	set_env(monkeypatch, None)
	assert main(["inception"]) == 1


def test_search_and_detail(monkeypatch):
	set_env(monkeypatch, "test-key")
	search = {"Search": [{"Title": "Inception", "Year": "2010", "imdbID": "tt1375666", "Type": "movie"}], "totalResults": "1", "Response": "True"}
	detail = {"Title": "Inception", "Year": "2010", "imdbID": "tt1375666", "Type": "movie", "Director": "Christopher Nolan", "Response": "True"}
	with responses.RequestsMock() as rsps:
		rsps.add(responses.GET, OMDB_URL, json=search, status=200)
		rsps.add(responses.GET, OMDB_URL, json=detail, status=200)
		assert main(["inception", "--detail"]) == 0
		assert len(rsps.calls) == 2
