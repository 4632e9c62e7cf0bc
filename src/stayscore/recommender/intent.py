"""
Single-slot search intent persistence.

The last search a user ran (city + free-text query) is stored as one JSON value
under a well-known key:

    {"city": "pune", "query": "sea view", "at": 1767225600000}

Every save overwrites the slot (no history, no TTL). Loading never raises:
a missing or malformed value yields the empty intent `{city: "", query: "", at: 0}`.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable

from stayscore.config.settings import Settings
from stayscore.core.env import resolve_project_path
from stayscore.core.kv import FileKeyValueStore, InMemoryKeyValueStore, KeyValueStore
from stayscore.domain.models import SearchIntent

logger = logging.getLogger(__name__)


class SearchIntentStore:
    def __init__(
        self,
        store: KeyValueStore,
        *,
        key: str = "lastSearch",
        clock: Callable[[], float] = time.time,
    ):
        self._store = store
        self._key = key
        self._clock = clock

    @property
    def key(self) -> str:
        return self._key

    def save(self, city: Any = "", query: Any = "") -> SearchIntent:
        """Overwrite the slot with a new intent stamped with the current time (epoch ms)."""
        intent = SearchIntent(city=city, query=query, at=int(self._clock() * 1000))
        self._store.set(self._key, json.dumps(intent.model_dump(), ensure_ascii=False))
        logger.debug("Saved search intent city=%r query=%r", intent.city, intent.query)
        return intent

    def load(self) -> SearchIntent:
        """Return the last saved intent, or the empty intent."""
        raw = self._store.get(self._key)
        if not raw:
            return SearchIntent()
        try:
            payload = json.loads(raw)
        except (TypeError, ValueError) as exc:
            logger.debug("Discarding malformed search intent under %r: %s", self._key, exc)
            return SearchIntent()
        if not isinstance(payload, dict):
            logger.debug("Discarding non-object search intent under %r", self._key)
            return SearchIntent()
        return SearchIntent(
            city=payload.get("city"),
            query=payload.get("query"),
            at=payload.get("at"),
        )


def build_intent_store(settings: Settings) -> SearchIntentStore:
    """Create the configured intent store (file-backed by default)."""
    cfg = settings.search_intent
    store: KeyValueStore
    if cfg.backend == "memory":
        store = InMemoryKeyValueStore()
    else:
        store = FileKeyValueStore(resolve_project_path(cfg.store_dir))
    return SearchIntentStore(store, key=cfg.key)
