"""
Upstream adapter base class.
An adapter turns one upstream family's raw payloads into canonical records, or
raises a typed failure (NotFound, UpstreamError, ConfigurationError). Partial
payloads never fail: optional fields degrade to UNAVAILABLE.

Coercion helpers here back the per-adapter pydantic input schemas, so a field of
the wrong type becomes None at the boundary instead of a validation error.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .errors import ConfigurationError
from .models import PAGE_SIZE, UNAVAILABLE, DetailRecord, MediaType, SearchResultPage
from .upstream import UpstreamClient


def coerce_text(value: Any) -> Optional[str]:
	"""Text fields: strings are trimmed, numbers stringified, everything else is None."""
	if value is None or isinstance(value, bool):
		return None
	if isinstance(value, (int, float)):
		return str(value)
	if isinstance(value, str):
		return value.strip() or None
	return None


def coerce_number(value: Any) -> Optional[float]:
	if value is None or isinstance(value, bool):
		return None
	if isinstance(value, (int, float)):
		return float(value)
	if isinstance(value, str):
		try:
			return float(value.strip())
		except ValueError:
			return None
	return None


def coerce_int(value: Any) -> Optional[int]:
	if isinstance(value, bool):
		return None
	if isinstance(value, int):
		return value
	if isinstance(value, float) and value.is_integer():
		return int(value)
	if isinstance(value, str) and value.strip().isdigit():
		return int(value.strip())
	return None


def dict_items(value: Any) -> List[Dict[str, Any]]:
	"""Keep only the mapping entries of a list; anything that is not a list gives []."""
	if not isinstance(value, list):
		return []
	return [item for item in value if isinstance(item, dict)]


def text_or_unavailable(value: Optional[str]) -> str:
	"""Fold missing text and the upstream's own "N/A" into the UNAVAILABLE sentinel."""
	if not value or value.strip().upper() == 'N/A':
		return UNAVAILABLE
	return value.strip()


class UpstreamAdapter(ABC):
	"""
	One adapter per upstream API family. Subclasses set `family` and `page_size`
	and implement `search` and `detail`; the gateway picks one per deployment.
	"""
	family = ""
	page_size = PAGE_SIZE

	def __init__(self, api_key: Optional[str], client: UpstreamClient):
		self.api_key = (api_key or "").strip()
		self.client = client

	def require_credentials(self) -> str:
		"""Return the credential or raise ConfigurationError before any network access."""
		if not self.api_key:
			raise ConfigurationError()
		return self.api_key

	@abstractmethod
	def search(self, query: str, page: int, type_filter: Optional[MediaType]) -> SearchResultPage:
		"""Return one page of canonical records for `query`."""

	@abstractmethod
	def detail(self, record_id: str, type_filter: Optional[MediaType]) -> DetailRecord:
		"""Return the canonical detail record for `record_id`."""
