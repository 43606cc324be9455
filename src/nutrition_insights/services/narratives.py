"""Cached phrasing of insight signals.

The phrasing collaborator turns a signal's facts into prose. Results are
cached per ``signal-type:detail-level:user-id:fact-hash`` for a fixed TTL, so
a cached narrative may predate the user's latest meal by up to the TTL.
"""

import asyncio
import hashlib
import json
import logging
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Protocol
from uuid import UUID

from nutrition_insights.domain.signals import DetailLevel, FactBag, Signal
from nutrition_insights.services.cache import Cache

DEFAULT_NARRATIVE_TTL_SECONDS = 30 * 60

_logger = logging.getLogger(__name__)


class Phraser(Protocol):
    """Text-phrasing collaborator."""

    async def phrase(self, signal: Signal, detail: DetailLevel) -> str | None:
        """Return prose for a signal, or None when nothing should be shown."""


def fact_hash(facts: FactBag) -> str:
    """Stable short hash of a fact bag."""
    payload = json.dumps(facts, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:16]


def narrative_cache_key(
    signal: Signal, detail: DetailLevel, user_id: UUID | None
) -> str:
    owner = str(user_id) if user_id is not None else "anon"
    return f"{signal.signal_type}:{detail.value}:{owner}:{fact_hash(signal.facts)}"


def signal_payload(signal: Signal) -> dict[str, object]:
    """Return a signal as plain JSON-ready data for prompt context."""
    payload = asdict(signal, dict_factory=_plain_dict)
    payload["type"] = signal.signal_type
    return payload


def _plain_dict(items: list[tuple[str, object]]) -> dict[str, object]:
    return {key: _plain(value) for key, value in items}


def _plain(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list | tuple):
        return [_plain(item) for item in value]
    return value


@dataclass
class NarrativeService:
    """Phrase signals through the collaborator with TTL caching."""

    phraser: Phraser
    cache: Cache
    ttl_seconds: int = DEFAULT_NARRATIVE_TTL_SECONDS
    debug: bool = False

    async def narrate(
        self,
        signal: Signal,
        user_id: UUID | None = None,
        detail: DetailLevel = DetailLevel.BRIEF,
    ) -> str | None:
        """Return phrased text for a signal, from cache when fresh."""
        cache_key = narrative_cache_key(signal, detail, user_id)
        cached = self.cache.get(cache_key)
        if isinstance(cached, str):
            return cached

        text = await self.phraser.phrase(signal, detail)
        if text:
            self.cache.set(cache_key, text, ttl_seconds=self.ttl_seconds)
        if self.debug:
            _logger.info(
                "Narrative phrased: key=%s produced=%s", cache_key, text is not None
            )
        return text

    async def narrate_batch(
        self,
        signals: Mapping[str, Signal],
        user_id: UUID | None = None,
        detail: DetailLevel = DetailLevel.BRIEF,
    ) -> dict[str, str | None]:
        """Phrase several signals concurrently.

        A failing item yields None without failing the batch.
        """
        item_ids = list(signals)
        results = await asyncio.gather(
            *(
                self._narrate_item(item_id, signals[item_id], user_id, detail)
                for item_id in item_ids
            )
        )
        return dict(zip(item_ids, results, strict=True))

    async def _narrate_item(
        self,
        item_id: str,
        signal: Signal,
        user_id: UUID | None,
        detail: DetailLevel,
    ) -> str | None:
        try:
            return await self.narrate(signal, user_id=user_id, detail=detail)
        except Exception as exc:
            _logger.warning("Narrative for %s failed: %s", item_id, exc)
            return None
