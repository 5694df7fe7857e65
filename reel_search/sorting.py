"""
Page-local sorting of search records.
Only the records of the current page are sorted; ordering across the whole
result set stays with the upstream.
"""

import locale  # locale-aware title ordering
import re
import unicodedata  # accent folding
from enum import Enum
from typing import Iterable, List, Optional

from loguru import logger

from .models import MovieRecord

RE_NON_DIGIT = re.compile(r"\D")


class SortMode(str, Enum):
	YEAR_DESC = "year-desc"
	YEAR_ASC = "year-asc"
	TITLE_ASC = "title-asc"
	TITLE_DESC = "title-desc"

	@classmethod
	def parse(cls, raw: Optional[str]) -> "SortMode":
		"""Unknown or empty input falls back to the default (newest first)."""
		try:
			return cls(raw)
		except ValueError:
			return DEFAULT_SORT


DEFAULT_SORT = SortMode.YEAR_DESC

# Labels shown in sort pickers
SORT_LABELS = {
	SortMode.YEAR_DESC: "Newest first",
	SortMode.YEAR_ASC: "Oldest first",
	SortMode.TITLE_ASC: "Title A–Z",
	SortMode.TITLE_DESC: "Title Z–A",
}


def parse_year(value: Optional[str]) -> int:
	"""
	Numeric year used for sorting: drop every non-digit, keep at most the first
	4 digits. "2010–2012" -> 2010, "" -> 0, "N/A" -> 0.
	"""
	if not value:
		return 0
	digits = RE_NON_DIGIT.sub('', str(value))[:4]
	return int(digits) if digits else 0


def use_system_collation() -> bool:
	"""Collate titles by the user's locale (LC_COLLATE from the environment)."""
	try:
		locale.setlocale(locale.LC_COLLATE, '')
	except locale.Error as e:
		logger.warning(f"[Sort] System collation unavailable ({e}); accents are folded instead")
		return False
	return True


def fold_accents(text: str) -> str:
	"""Casefold and drop combining marks, so "Éclair" sorts as "eclair"."""
	decomposed = unicodedata.normalize('NFKD', text.casefold())
	return ''.join(c for c in decomposed if not unicodedata.combining(c))


def title_key(title: Optional[str]):
	text = title or ''
	# accents and case only break ties
	return (
		locale.strxfrm(fold_accents(text)),
		locale.strxfrm(text.casefold()),
		locale.strxfrm(text),
	)


def sort_records(records: Iterable[MovieRecord], mode: SortMode = DEFAULT_SORT) -> List[MovieRecord]:
	"""Return a new list in `mode` order; equal keys keep their incoming order."""
	items = list(records)
	if mode is SortMode.YEAR_DESC:
		items.sort(key=lambda r: parse_year(r.year), reverse=True)
	elif mode is SortMode.YEAR_ASC:
		items.sort(key=lambda r: parse_year(r.year))
	elif mode is SortMode.TITLE_ASC:
		items.sort(key=lambda r: title_key(r.title))
	elif mode is SortMode.TITLE_DESC:
		items.sort(key=lambda r: title_key(r.title), reverse=True)
	return items
