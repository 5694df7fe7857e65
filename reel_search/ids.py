"""
Combined id codec.
TMDB numeric ids are only unique within one media type, so canonical ids embed
the type: "movie-27205", "tv-1399". Both directions are pure and total.
"""

import re
from typing import Optional, Tuple, Union

from .models import MediaType

# Tag written into combined ids for each media type
_TAGS = {
	MediaType.MOVIE: 'movie',
	MediaType.SERIES: 'tv',
}

# "<tag>-<digits>"; "series" is accepted as an alias of "tv" when parsing
RE_COMBINED_ID = re.compile(r"^(?P<tag>movie|tv|series)-(?P<num>\d+)$", re.I)


def media_type_tag(media_type: MediaType) -> str:
	"""Tag used both in combined ids and in TMDB endpoint paths (/movie, /tv)."""
	return _TAGS[media_type]


def make_combined_id(media_type: MediaType, numeric_id: Union[int, str]) -> str:
	"""Build "{tag}-{numericId}"; raises ValueError when numeric_id is not a non-negative integer."""
	num = str(numeric_id).strip()
	if isinstance(numeric_id, bool) or not num.isdigit():
		raise ValueError(f"Not a numeric id: {numeric_id!r}")
	return f"{media_type_tag(media_type)}-{int(num)}"


def parse_combined_id(value: Optional[str]) -> Optional[Tuple[MediaType, str]]:
	"""Split "tv-1399" into (MediaType.SERIES, "1399"); anything else gives None."""
	if not isinstance(value, str):
		return None
	m = RE_COMBINED_ID.match(value.strip())
	if not m:
		return None
	media_type = MediaType.from_source(m.group('tag'))
	if media_type is None:
		return None
	return media_type, str(int(m.group('num')))
