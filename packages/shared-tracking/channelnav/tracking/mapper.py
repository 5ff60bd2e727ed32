"""
Source mapping - classify UTM parameters into source, detail and channel.

Mappings are evaluated in descending priority. The first mapping whose
source pattern matches (and whose medium pattern matches, when it has one)
wins. Patterns support ``*`` wildcards. When nothing matches, the channel is
inferred from the medium and source.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

from channelnav.tracking.schema import Channel, SourceMapping, UTMParams
from channelnav.tracking.storage import TrackingStore

logger = logging.getLogger(__name__)

SEARCH_ENGINES = ("google", "bing")
SOCIAL_SOURCES = {"facebook", "twitter", "linkedin", "instagram"}
PAID_MEDIUMS = ("paid", "cpc", "ppc")

DEFAULT_CHANNELS = [
    Channel.PAID_SEARCH,
    Channel.ORGANIC_SEARCH,
    Channel.PAID_SOCIAL,
    Channel.ORGANIC_SOCIAL,
    Channel.SOCIAL,
    Channel.EMAIL,
    Channel.DIRECT,
    Channel.REFERRAL,
    Channel.OTHER,
]


@dataclass
class SourceMappingResult:
    """Classification of one set of UTM parameters."""

    source: str
    source_detail: str
    channel: str
    matched_mapping: SourceMapping | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "source": self.source,
            "source_detail": self.source_detail,
            "channel": self.channel,
            "matched_mapping": self.matched_mapping.to_dict() if self.matched_mapping else None,
        }


def matches_pattern(value: str, pattern: str) -> bool:
    """Match a lowercased value against a mapping pattern.

    A pattern containing ``*`` must match the whole value with each ``*``
    standing for any run of characters; otherwise values must be equal.
    """
    lower_pattern = pattern.lower()
    if "*" in lower_pattern:
        regex = ".*".join(re.escape(part) for part in lower_pattern.split("*"))
        return re.fullmatch(regex, value) is not None
    return value == lower_pattern


def format_source_name(name: str) -> str:
    """Title-case a raw identifier for display, e.g. ``unknown_source`` -> ``Unknown Source``."""
    return " ".join(word[:1].upper() + word[1:] for word in re.split(r"[_-]", name))


def infer_channel(params: UTMParams) -> Channel:
    """Infer a channel from raw parameters when no mapping matches."""
    source = (params.utm_source or "").lower()
    medium = (params.utm_medium or "").lower()
    is_search_engine = any(engine in source for engine in SEARCH_ENGINES)

    if "organic" in medium:
        return Channel.ORGANIC_SEARCH if is_search_engine else Channel.ORGANIC_SOCIAL
    if any(paid in medium for paid in PAID_MEDIUMS):
        return Channel.PAID_SEARCH if is_search_engine else Channel.PAID_SOCIAL
    if "email" in medium or "email" in source:
        return Channel.EMAIL
    if "social" in medium or source in SOCIAL_SOURCES:
        return Channel.SOCIAL
    if source == "direct" or (not params.utm_source and not params.utm_medium):
        return Channel.DIRECT
    if "referral" in medium:
        return Channel.REFERRAL
    return Channel.OTHER


class SourceMapper:
    """
    Map UTM parameters to (source, source detail, channel).

    Example:
        mapper = SourceMapper(store)
        result = mapper.map_to_source(UTMParams(utm_source="google", utm_medium="cpc"))
        result.channel  # "Paid Search"
    """

    def __init__(self, store: TrackingStore):
        self.store = store

    def map_to_source(self, params: UTMParams) -> SourceMappingResult:
        """
        Classify UTM parameters.

        Args:
            params: Normalized UTM parameters

        Returns:
            SourceMappingResult; ``matched_mapping`` is None for inferred results.
        """
        utm_source = (params.utm_source or "").lower()
        utm_medium = (params.utm_medium or "").lower()

        for mapping in self.store.list_source_mappings(active_only=True):
            if not matches_pattern(utm_source, mapping.utm_source):
                continue
            if mapping.utm_medium and not matches_pattern(utm_medium, mapping.utm_medium):
                continue

            logger.debug(f"Mapping {mapping.id} matched {utm_source}/{utm_medium}")
            return SourceMappingResult(
                source=mapping.source,
                source_detail=mapping.source_detail,
                channel=mapping.channel,
                matched_mapping=mapping,
            )

        return self._default_mapping(params)

    def _default_mapping(self, params: UTMParams) -> SourceMappingResult:
        """Build an inferred result when no mapping matches."""
        utm_source = (params.utm_source or "").lower() or "unknown"
        utm_medium = (params.utm_medium or "").lower()

        return SourceMappingResult(
            source=format_source_name(utm_source),
            source_detail=format_source_name(utm_medium) if utm_medium else "Unknown",
            channel=infer_channel(params).value,
            matched_mapping=None,
        )

    def available_channels(self) -> list[str]:
        """Return the sorted union of mapped channels and the default taxonomy."""
        channels = {mapping.channel for mapping in self.store.list_source_mappings()}
        channels.update(channel.value for channel in DEFAULT_CHANNELS)
        return sorted(channels)
