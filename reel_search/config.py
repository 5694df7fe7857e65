"""
Environment-backed settings.
Upstream family, credential, port and client endpoints come from the environment
(optionally seeded from a .env file). A missing credential is not a startup error:
the gateway detects it per request.
"""

import os  # environment lookup
from dataclasses import dataclass  # immutable settings object
from pathlib import Path  # default watchlist location
from typing import Mapping, Optional  # type hints

from dotenv import load_dotenv  # .env support for local runs
from loguru import logger  # console logger


DEFAULT_PORT = 3000
DEFAULT_TIMEOUT_S = 10.0
DEFAULT_WATCHLIST_PATH = str(Path.home() / '.reel_search' / 'watchlist.json')

# Credential variables per upstream family, first match wins
KEY_VARIABLES = {
	'omdb': ('OMDB_KEY', 'OMDB_API_KEY'),
	'tmdb': ('TMDB_KEY', 'TMDB_API_KEY'),
}


@dataclass(frozen=True)
class Settings:
	upstream_family: str = 'omdb'  # which adapter the deployment uses
	api_key: Optional[str] = None  # upstream credential, server side only
	port: int = DEFAULT_PORT  # listen port of the proxy
	timeout_s: float = DEFAULT_TIMEOUT_S  # upstream request timeout
	api_base_url: Optional[str] = None  # where the client finds the proxy
	watchlist_path: str = DEFAULT_WATCHLIST_PATH  # client-side durable store

	@property
	def has_credentials(self) -> bool:
		return bool(self.api_key and self.api_key.strip())

	@property
	def client_base_url(self) -> str:
		return (self.api_base_url or f"http://localhost:{self.port}").rstrip('/')

	@classmethod
	def from_env(cls, environ: Optional[Mapping[str, str]] = None, use_dotenv: bool = True) -> "Settings":
		"""Read settings from `environ` (defaults to os.environ, after loading .env)."""
		if environ is None:
			if use_dotenv:
				load_dotenv(override=False)  # real environment wins over .env
			environ = os.environ

		family = (environ.get('UPSTREAM') or 'omdb').strip().lower()
		api_key = None
		for name in KEY_VARIABLES.get(family, ()):
			if environ.get(name):
				api_key = environ[name].strip()
				break

		port = DEFAULT_PORT
		raw_port = environ.get('PORT')
		if raw_port:
			try:
				port = int(raw_port)
			except ValueError:
				logger.warning(f"[Config] Ignoring invalid PORT={raw_port!r}; using {DEFAULT_PORT}")

		settings = cls(
			upstream_family=family,
			api_key=api_key or None,
			port=port,
			api_base_url=environ.get('REEL_API_URL') or None,
			watchlist_path=environ.get('REEL_WATCHLIST_PATH') or DEFAULT_WATCHLIST_PATH,
		)
		if not settings.has_credentials:
			names = ' or '.join(KEY_VARIABLES.get(family, ('<unknown family>',)))
			logger.warning(f"[Config] No credential for upstream '{family}'; set {names} to enable search")
		return settings
