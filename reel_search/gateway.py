"""
Proxy gateway.
Sole holder of the upstream credential. Validates requests, delegates to the
adapter picked for this deployment, and folds every failure into an outcome
(found / not found / invalid / server misconfigured / upstream unreachable).
"""

from typing import Dict, Optional, Type, Union

from loguru import logger

from .adapters import UpstreamAdapter, coerce_int
from .config import Settings
from .errors import ConfigurationError, ReelSearchError, UpstreamError, ValidationError
from .models import DetailOutcome, MediaType, Outcome, SearchOutcome
from .omdb_adapter import OmdbAdapter
from .tmdb_adapter import TmdbAdapter
from .upstream import UpstreamClient

# Upstream family -> adapter class; a new family only needs an entry here
ADAPTERS: Dict[str, Type[UpstreamAdapter]] = {
	OmdbAdapter.family: OmdbAdapter,
	TmdbAdapter.family: TmdbAdapter,
}

# Words accepted for "no type filter"
ANY_TYPE = ('', 'any', 'all')


def build_adapter(settings: Settings, client: UpstreamClient) -> Optional[UpstreamAdapter]:
	"""Adapter for the configured family, or None when the family is unknown."""
	adapter_cls = ADAPTERS.get(settings.upstream_family)
	if adapter_cls is None:
		logger.error(f"[Gateway] Unknown upstream family '{settings.upstream_family}'; known: {sorted(ADAPTERS)}")
		return None
	logger.info(f"[Gateway] Using {adapter_cls.__name__} (credential {'set' if settings.has_credentials else 'MISSING'})")
	return adapter_cls(settings.api_key, client)


def parse_type_filter(raw: Union[None, str, MediaType]) -> Optional[MediaType]:
	"""None / "" / "any" -> None, "movie" -> MOVIE, "series" or "tv" -> SERIES."""
	if raw is None or isinstance(raw, MediaType):
		return raw
	text = str(raw).strip().lower()
	if text in ANY_TYPE:
		return None
	media_type = MediaType.from_source(text)
	if media_type is None:
		raise ValidationError(f"Unknown type filter '{raw}'. Use movie, series or leave it empty.")
	return media_type


class ProxyGateway:
	"""
	search(query, page, type) and detail(id, type) over the configured upstream.
	The adapter is chosen once, from settings, and never per request.
	"""

	def __init__(self, settings: Settings, client: Optional[UpstreamClient] = None):
		self.settings = settings
		self.client = client or UpstreamClient(timeout_s=settings.timeout_s)
		self.adapter = build_adapter(settings, self.client)

	@property
	def configured(self) -> bool:
		return self.adapter is not None and self.settings.has_credentials

	def _require_adapter(self) -> UpstreamAdapter:
		# Checked before anything touches the network
		if self.adapter is None:
			raise ConfigurationError(f"Server: unknown upstream '{self.settings.upstream_family}'.")
		self.adapter.require_credentials()
		return self.adapter

	def search(self, query: Optional[str], page: Union[int, str] = 1, type_filter: Union[None, str, MediaType] = None) -> SearchOutcome:
		try:
			adapter = self._require_adapter()
			q = (query or '').strip()
			if not q:
				raise ValidationError()
			media_type = parse_type_filter(type_filter)
			result = adapter.search(q, max(1, coerce_int(page) or 1), media_type)
		except ReelSearchError as e:
			return SearchOutcome(outcome=e.outcome, message=self._report('search', e))

		logger.info(f"[Gateway] search q='{q}' page={result.page} -> {len(result.records)} records, {result.total_pages} pages")
		return SearchOutcome(outcome=Outcome.FOUND, page=result)

	def detail(self, record_id: Optional[str], type_filter: Union[None, str, MediaType] = None) -> DetailOutcome:
		try:
			adapter = self._require_adapter()
			rid = (record_id or '').strip()
			if not rid:
				raise ValidationError("An id is required.")
			media_type = parse_type_filter(type_filter)
			record = adapter.detail(rid, media_type)
		except ReelSearchError as e:
			return DetailOutcome(outcome=e.outcome, message=self._report('detail', e))

		logger.info(f"[Gateway] detail id={record.id} -> '{record.title}'")
		return DetailOutcome(outcome=Outcome.FOUND, record=record)

	def _report(self, operation: str, error: ReelSearchError) -> str:
		"""Log a failed operation at the level operators need and return its message."""
		name = type(error).__name__
		if isinstance(error, ConfigurationError):
			logger.error(f"[Gateway] {operation}: ServerMisconfigured ({error.message})")
		elif error.outcome is Outcome.UPSTREAM_UNREACHABLE:
			logger.warning(f"[Gateway] {operation}: UpstreamUnreachable ({error.message})")
		elif isinstance(error, UpstreamError):
			logger.warning(f"[Gateway] {operation}: {name} reported as not found ({error.message})")
		else:
			logger.info(f"[Gateway] {operation}: {name} ({error.message})")
		return error.message
