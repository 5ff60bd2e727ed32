"""
UTM normalization - rewrite raw tracking parameters into canonical values.

Rules are loaded from the store on every call and applied in descending
priority. Each rule looks at its own target field; a later rule sees the
value produced by earlier ones, so a rewritten value can be rewritten again.
After rule application every value is cleaned up:

    "Summer Sale 2024" -> "summer_sale_2024"
    "google!@#"        -> "google"
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from channelnav.tracking.schema import MatchType, NormalizationRule, UTMField, UTMParams
from channelnav.tracking.storage import TrackingStore

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_INVALID_CHARS = re.compile(r"[^a-z0-9_-]")


@dataclass
class ValidationResult:
    """Advisory result of validating UTM parameters."""

    is_valid: bool
    issues: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"is_valid": self.is_valid, "issues": list(self.issues)}


def matches_rule(value: str, rule: NormalizationRule) -> bool:
    """Check whether a field value matches a rule's pattern.

    Comparisons are case-insensitive. An invalid regex never matches.
    """
    lower_value = value.lower()
    lower_match = rule.match_value.lower()

    if rule.match_type == MatchType.EXACT:
        return lower_value == lower_match
    elif rule.match_type == MatchType.CONTAINS:
        return lower_match in lower_value
    elif rule.match_type == MatchType.STARTS_WITH:
        return lower_value.startswith(lower_match)
    elif rule.match_type == MatchType.ENDS_WITH:
        return lower_value.endswith(lower_match)
    elif rule.match_type == MatchType.REGEX:
        try:
            return re.search(rule.match_value, value, re.IGNORECASE) is not None
        except re.error:
            logger.debug(f"Ignoring invalid regex in rule {rule.id}: {rule.match_value}")
            return False
    return False


def clean_value(value: str) -> str:
    """Lowercase, trim, underscore whitespace runs, strip other characters."""
    cleaned = value.lower().strip()
    cleaned = _WHITESPACE.sub("_", cleaned)
    return _INVALID_CHARS.sub("", cleaned)


class UTMNormalizer:
    """
    Apply normalization rules and cleanup to UTM parameters.

    Example:
        normalizer = UTMNormalizer(store)
        normalizer.normalize(UTMParams(utm_source="fb", utm_medium="cpc"))
        # UTMParams(utm_source="facebook", utm_medium="paid")
    """

    def __init__(self, store: TrackingStore):
        self.store = store

    def normalize(self, params: UTMParams) -> UTMParams:
        """
        Normalize UTM parameters.

        Args:
            params: Raw UTM parameters

        Returns:
            New UTMParams with rules applied and values cleaned; fields that
            are absent or empty after cleanup are omitted.
        """
        values: dict[str, str | None] = {f.value: params.get(f) for f in UTMField}

        for rule in self.store.list_normalization_rules(active_only=True):
            key = UTMField(rule.field).value
            value = values.get(key)
            if value and matches_rule(value, rule):
                logger.debug(
                    f"Rule {rule.id} rewrote {key}: {value!r} -> {rule.normalized_value!r}"
                )
                values[key] = rule.normalized_value

        cleaned: dict[str, str | None] = {}
        for key, value in values.items():
            cleaned[key] = (clean_value(value) or None) if value else None

        return UTMParams(**cleaned)

    def validate_params(self, params: UTMParams) -> ValidationResult:
        """
        Check UTM parameters for common issues.

        Validation is advisory and never blocks ingestion.
        """
        issues: list[str] = []

        if not params.utm_source:
            issues.append("Missing required utm_source parameter")
        elif len(params.utm_source) < 2:
            issues.append("utm_source is too short")

        for key, value in params.to_dict().items():
            if "%" in value or "+" in value:
                issues.append(f"{key} may contain URL encoding that should be decoded")

        return ValidationResult(is_valid=not issues, issues=issues)
