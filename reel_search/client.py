"""
HTTP client for the proxy gateway.
Has the same search/detail shape as ProxyGateway, so the view controller can run
against the real server (this class) or an in-process gateway.
"""

from typing import Any, Dict, Optional, Union

import requests  # make web requests to the FastAPI server
from loguru import logger  # console logger
from pydantic import ValidationError as SchemaError

from .errors import UpstreamUnreachable
from .models import DetailOutcome, MediaType, Outcome, SearchOutcome
from .schemas import DetailEnvelope, SearchEnvelope

# Default URL where the FastAPI server is expected to run locally
DEFAULT_API_URL = "http://localhost:3000"


class GatewayClient:

	def __init__(self, base_url: str = DEFAULT_API_URL, timeout_s: float = 15.0, session: Optional[requests.Session] = None):
		self.base_url = base_url.rstrip('/')
		self.timeout_s = timeout_s
		self.session = session or requests.Session()

	def search(self, query: str, page: int = 1, type_filter: Union[None, str, MediaType] = None) -> SearchOutcome:
		params: Dict[str, Any] = {'query': query, 'page': page}
		if type_filter:
			params['type'] = type_filter.value if isinstance(type_filter, MediaType) else type_filter
		try:
			payload = self._get('/api/search', params)
			return SearchEnvelope.model_validate(payload).to_outcome()
		except UpstreamUnreachable as e:
			return SearchOutcome(outcome=Outcome.UPSTREAM_UNREACHABLE, message=e.message)
		except SchemaError:
			logger.warning("[Client] /api/search returned an unexpected body")
			return SearchOutcome(outcome=Outcome.UPSTREAM_UNREACHABLE, message=UpstreamUnreachable.default_message)

	def detail(self, record_id: str, type_filter: Union[None, str, MediaType] = None) -> DetailOutcome:
		params: Dict[str, Any] = {'id': record_id}
		if type_filter:
			params['type'] = type_filter.value if isinstance(type_filter, MediaType) else type_filter
		try:
			payload = self._get('/api/detail', params)
			return DetailEnvelope.model_validate(payload).to_outcome()
		except UpstreamUnreachable as e:
			return DetailOutcome(outcome=Outcome.UPSTREAM_UNREACHABLE, message=e.message)
		except SchemaError:
			logger.warning("[Client] /api/detail returned an unexpected body")
			return DetailOutcome(outcome=Outcome.UPSTREAM_UNREACHABLE, message=UpstreamUnreachable.default_message)

	def health(self) -> bool:
		"""True when the server answers /health with 200."""
		try:
			return self.session.get(f"{self.base_url}/health", timeout=3).ok
		except requests.RequestException:
			return False

	def _get(self, path: str, params: Dict[str, Any]) -> Any:
		# 500 and 502 answers still carry a JSON envelope, so status is not checked here
		try:
			resp = self.session.get(f"{self.base_url}{path}", params=params, timeout=self.timeout_s)
		except requests.RequestException as e:
			logger.warning(f"[Client] GET {path} failed: {e}")
			raise UpstreamUnreachable("Could not reach the Reel Search server.") from e
		try:
			return resp.json()
		except ValueError as e:
			logger.warning(f"[Client] GET {path} returned a non-JSON body (HTTP {resp.status_code})")
			raise UpstreamUnreachable("Could not reach the Reel Search server.") from e
