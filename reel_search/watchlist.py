"""
Watchlist store.
An ordered, id-unique list of watchlist entries persisted under one fixed key.
Every mutation writes the full list before returning. Missing or corrupt stored
data reads as an empty watchlist, never as an error.
"""

import json  # serialized entry list
import os  # atomic file replace
import tempfile  # temp file next to the target
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Union

from loguru import logger

from .models import MovieRecord

# The single durable key holding the serialized entry list
WATCHLIST_KEY = "reel-search-watchlist"


class KeyValueStorage(ABC):
	"""Minimal string key/value store (the shape of browser localStorage)."""

	@abstractmethod
	def get_item(self, key: str) -> Optional[str]:
		"""Stored string for `key`, or None."""

	@abstractmethod
	def set_item(self, key: str, value: str) -> None:
		"""Store `value` under `key` before returning."""


class MemoryStorage(KeyValueStorage):

	def __init__(self, items: Optional[Dict[str, str]] = None):
		self.items = dict(items or {})

	def get_item(self, key: str) -> Optional[str]:
		return self.items.get(key)

	def set_item(self, key: str, value: str) -> None:
		self.items[key] = value


class JsonFileStorage(KeyValueStorage):
	"""
	Keys and string values kept in one JSON object on disk.
	Writes go to a temp file that replaces the target, so a crash mid-write
	leaves the previous contents intact.
	"""

	def __init__(self, path: Union[str, Path]):
		self.path = Path(path)

	def _read_all(self) -> Dict[str, str]:
		if not self.path.exists():
			return {}
		try:
			data = json.loads(self.path.read_text(encoding='utf-8'))
		except (OSError, ValueError) as e:
			logger.warning(f"[Watchlist] Unreadable storage file {self.path}: {e}")
			return {}
		if not isinstance(data, dict):
			logger.warning(f"[Watchlist] Storage file {self.path} is not a JSON object; ignoring it")
			return {}
		return {k: v for k, v in data.items() if isinstance(v, str)}

	def get_item(self, key: str) -> Optional[str]:
		return self._read_all().get(key)

	def set_item(self, key: str, value: str) -> None:
		items = self._read_all()
		items[key] = value
		self.path.parent.mkdir(parents=True, exist_ok=True)
		fd, tmp = tempfile.mkstemp(dir=str(self.path.parent), prefix=self.path.name, suffix='.tmp')
		try:
			with os.fdopen(fd, 'w', encoding='utf-8') as f:
				json.dump(items, f, ensure_ascii=False, indent=2)
			os.replace(tmp, self.path)
		except BaseException:
			if os.path.exists(tmp):
				os.unlink(tmp)
			raise


@dataclass(frozen=True)
class ToggleState:
	"""Visual state of a watchlist toggle control."""
	record_id: str
	in_watchlist: bool

	@property
	def icon(self) -> str:
		return "♥" if self.in_watchlist else "♡"

	@property
	def aria_label(self) -> str:
		return "Remove from watchlist" if self.in_watchlist else "Add to watchlist"

	@property
	def button_label(self) -> str:
		"""Long form used on the detail screen."""
		return "♥ In Watchlist" if self.in_watchlist else "♡ Add to Watchlist"


def count_label(count: int) -> str:
	"""Empty string for an empty list, "1 title", otherwise "{n} titles"."""
	if not count:
		return ""
	return f"{count} title{'s' if count != 1 else ''}"


class WatchlistStore:

	def __init__(self, storage: Optional[KeyValueStorage] = None, key: str = WATCHLIST_KEY):
		self.storage = storage if storage is not None else MemoryStorage()
		self.key = key
		self.count = len(self.list())  # derived; refreshed by every mutation

	@property
	def count_label(self) -> str:
		return count_label(self.count)

	def list(self) -> List[MovieRecord]:
		"""Entries in insertion order; corrupt or missing data gives []."""
		raw = self.storage.get_item(self.key)
		if not raw:
			return []
		try:
			data = json.loads(raw)
		except ValueError:
			logger.warning("[Watchlist] Stored watchlist is not valid JSON; treating it as empty")
			return []
		if not isinstance(data, list):
			logger.warning("[Watchlist] Stored watchlist is not a list; treating it as empty")
			return []

		entries: List[MovieRecord] = []
		seen: Set[str] = set()
		for item in data:
			entry = MovieRecord.from_dict(item)
			if entry is None or entry.id in seen:
				continue  # unusable or duplicate: first occurrence wins
			seen.add(entry.id)
			entries.append(entry)
		return entries

	def ids(self) -> Set[str]:
		return {entry.id for entry in self.list()}

	def contains(self, record_id: str) -> bool:
		return record_id in self.ids()

	def add(self, record: MovieRecord) -> bool:
		"""Append `record` (entry fields only). Returns False when it was already present."""
		entries = self.list()
		if any(e.id == record.id for e in entries):
			return False
		entries.append(record.as_entry())
		self._save(entries)
		logger.debug(f"[Watchlist] Added {record.id} ('{record.title}')")
		return True

	def remove(self, record_id: str) -> bool:
		"""Drop `record_id`. Returns False (and writes nothing) when it was absent."""
		entries = self.list()
		kept = [e for e in entries if e.id != record_id]
		if len(kept) == len(entries):
			return False
		self._save(kept)
		logger.debug(f"[Watchlist] Removed {record_id}")
		return True

	def toggle(self, record: MovieRecord) -> bool:
		"""Flip membership of `record`; returns the new membership."""
		if self.contains(record.id):
			self.remove(record.id)
			return False
		self.add(record)
		return True

	def toggle_state(self, record_id: str) -> ToggleState:
		return ToggleState(record_id=record_id, in_watchlist=self.contains(record_id))

	def membership(self, records: Iterable[MovieRecord]) -> List[bool]:
		"""In-watchlist flag for each record, read once from storage."""
		ids = self.ids()
		return [r.id in ids for r in records]

	def _save(self, entries: List[MovieRecord]) -> None:
		self.storage.set_item(self.key, json.dumps([e.to_dict() for e in entries], ensure_ascii=False))
		self.count = len(entries)
