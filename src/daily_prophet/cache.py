"""Generate-or-fetch cache for daily editions."""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError

from .config import get_settings
from .datekeys import DateKeyer, keyer_from_settings
from .generator import ContentGenerator
from .models import EditionRecord
from .store import KeyValueStore, build_store

logger = logging.getLogger(__name__)


class EditionCache:
    """
    Serve the stored edition for a date key while it is fresh, otherwise regenerate.

    A stored record is fresh when the key recomputed from its `created_at`
    equals the requested key. There is no lock around read-check-write:
    two callers that both miss will both generate and the last `put` wins.
    """

    def __init__(
        self,
        store: KeyValueStore,
        generator: ContentGenerator,
        keyer: Optional[DateKeyer] = None,
        key_prefix: str = "daily:",
    ):
        self.store = store
        self.generator = generator
        self.keyer = keyer or DateKeyer()
        self.key_prefix = key_prefix

    def storage_key(self, date_key: str) -> str:
        return f"{self.key_prefix}{date_key}"

    def today(self) -> str:
        return self.keyer.today()

    def _read(self, key: str) -> Optional[EditionRecord]:
        try:
            raw = self.store.get(key)
            if raw is None:
                return None
            return EditionRecord.from_json(raw)
        except (ValidationError, UnicodeDecodeError) as exc:
            logger.warning(
                "Stored edition unreadable, regenerating: key=%s error=%s",
                key,
                type(exc).__name__,
            )
            return None

    def _generate_and_store(self, date_key: str) -> EditionRecord:
        record = self.generator.generate(date_key)
        key = self.storage_key(date_key)
        self.store.put(key, record.to_json())
        logger.info("Edition stored: key=%s created_at=%s", key, record.created_at.isoformat())
        return record

    def peek(self, date_key: str) -> Optional[EditionRecord]:
        """Return the stored record if it is fresh for `date_key`, else None."""
        key = self.storage_key(date_key)
        record = self._read(key)
        if record is None:
            logger.info("Edition cache miss: key=%s", key)
            return None
        record_key = self.keyer.key_for(record.created_at)
        if record_key != date_key:
            logger.info("Edition stale: key=%s created_for=%s", key, record_key)
            return None
        logger.debug("Edition cache hit: key=%s", key)
        return record

    def get_or_create(self, date_key: str) -> EditionRecord:
        record = self.peek(date_key)
        if record is not None:
            return record
        return self._generate_and_store(date_key)

    def force_refresh(self, date_key: str) -> EditionRecord:
        logger.info("Forced edition refresh: key=%s", self.storage_key(date_key))
        return self._generate_and_store(date_key)


def build_cache(settings=None) -> EditionCache:
    """Wire store, generator and keyer from settings."""
    settings = settings or get_settings()
    return EditionCache(
        store=build_store(settings),
        generator=ContentGenerator(settings=settings),
        keyer=keyer_from_settings(settings),
        key_prefix=settings.key_prefix,
    )
