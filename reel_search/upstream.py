"""
Thin requests wrapper used by the adapters to talk to the upstream movie APIs.
Transport failures and undecodable bodies become UpstreamUnreachable, so no
partial or garbled upstream bytes ever reach a caller.
"""

from typing import Any, Dict, Optional, Tuple

import requests  # HTTP client
from loguru import logger  # console logger

from .errors import UpstreamUnreachable


class UpstreamClient:
	UA = "ReelSearch/1.0"

	def __init__(self, timeout_s: float = 10.0, session: Optional[requests.Session] = None):
		self.timeout_s = timeout_s
		self.session = session or requests.Session()

	def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Tuple[int, Any]:
		"""
		GET `url` and return (status_code, decoded JSON).
		Non-2xx answers with a JSON body are returned as-is; the adapter decides what they mean.
		"""
		# Params carry the credential, so only the bare URL is ever logged
		try:
			resp = self.session.get(
				url,
				params=params or {},
				headers={"User-Agent": self.UA, "Accept": "application/json"},
				timeout=self.timeout_s,
			)
		except requests.RequestException as e:
			logger.warning(f"[Upstream] GET {url} failed: {type(e).__name__}")
			raise UpstreamUnreachable() from e

		try:
			payload = resp.json()
		except ValueError as e:
			logger.warning(f"[Upstream] GET {url} returned a non-JSON body (HTTP {resp.status_code})")
			raise UpstreamUnreachable() from e

		if not isinstance(payload, (dict, list)):
			logger.warning(f"[Upstream] GET {url} returned JSON of type {type(payload).__name__}")
			raise UpstreamUnreachable()

		logger.debug(f"[Upstream] GET {url} -> HTTP {resp.status_code}")
		return resp.status_code, payload
