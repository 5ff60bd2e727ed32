"""
UTM ingestion - validate, normalize, map and store touchpoints.

Single records are validated (advisory only), normalized, mapped to a channel
and stored. When the record belongs to a contact, the ``on_contact_updated``
hook runs afterwards (e.g. a CRM property sync); its failures are logged and
never affect the stored record.

Batches accept a list of dicts or a pandas DataFrame. Each row is processed
independently; bad rows are reported by index and skipped.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from channelnav.tracking.attribution import Clock, utc_now
from channelnav.tracking.mapper import SourceMapper
from channelnav.tracking.normalizer import UTMNormalizer, ValidationResult
from channelnav.tracking.schema import UTMField, UTMParams, UTMRecord, parse_timestamp
from channelnav.tracking.storage import TrackingStore

logger = logging.getLogger(__name__)


@dataclass
class IngestRequest:
    """One touchpoint to ingest."""

    params: UTMParams
    contact_id: str | None = None
    deal_id: str | None = None
    timestamp: Any = None
    revenue: float = 0.0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> IngestRequest:
        """
        Create IngestRequest from a dictionary.

        UTM values may be nested under ``params`` or given as top-level
        ``utm_*`` keys (e.g. DataFrame columns).

        Raises:
            ValueError: If ``params`` is not a mapping or revenue is not numeric.
        """
        data = {key: _clean(value) for key, value in data.items()}

        params = data.get("params")
        if params is None:
            params = {f.value: data.get(f.value) for f in UTMField}
        elif not isinstance(params, dict):
            raise ValueError(f"Invalid params: expected a mapping, got {type(params).__name__}")
        else:
            params = {key: _clean(value) for key, value in params.items()}

        revenue = data.get("revenue")
        try:
            revenue = float(revenue) if revenue is not None else 0.0
        except (ValueError, TypeError) as e:
            raise ValueError(f"Invalid revenue: {revenue}") from e

        contact_id = data.get("contact_id")
        deal_id = data.get("deal_id")
        return cls(
            params=UTMParams.from_dict(params),
            contact_id=str(contact_id) if contact_id is not None else None,
            deal_id=str(deal_id) if deal_id is not None else None,
            timestamp=data.get("timestamp"),
            revenue=revenue,
        )


@dataclass
class IngestResult:
    """Stored record plus the advisory validation outcome."""

    record: UTMRecord
    validation: ValidationResult

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary; validation is included only when it found issues."""
        result: dict[str, Any] = {"record": self.record.to_dict()}
        if self.validation.issues:
            result["validation"] = self.validation.to_dict()
        return result


@dataclass
class BatchIngestResult:
    """Outcome of a batch ingestion."""

    records: list[UTMRecord] = field(default_factory=list)
    errors: list[dict[str, Any]] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.records)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "records": [r.to_dict() for r in self.records],
            "count": self.count,
            "errors": list(self.errors),
        }


def _clean(value: Any) -> Any:
    """Turn pandas missing values (NaN, NaT, None) into None.

    Integral floats become ints: a DataFrame column with gaps is upcast to
    float64, and ids such as 101 must not come back as "101.0".
    """
    if isinstance(value, (dict, list, tuple)):
        return value
    if pd.isna(value):
        return None
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _to_rows(data: pd.DataFrame | list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Convert batch input to row dicts; lists are used as given."""
    if isinstance(data, pd.DataFrame):
        return data.to_dict(orient="records")
    return list(data)


class UTMIngestionService:
    """
    Validate, normalize, map and store UTM touchpoints.

    Example:
        service = UTMIngestionService(store, on_contact_updated=hubspot.sync_contact_properties)
        result = service.ingest(
            IngestRequest(params=UTMParams(utm_source="fb", utm_medium="cpc"), contact_id="c-1")
        )
        result.record.channel  # "Paid Social"
    """

    def __init__(
        self,
        store: TrackingStore,
        normalizer: UTMNormalizer | None = None,
        mapper: SourceMapper | None = None,
        on_contact_updated: Callable[[str], object] | None = None,
        clock: Clock | None = None,
    ):
        self.store = store
        self.normalizer = normalizer or UTMNormalizer(store)
        self.mapper = mapper or SourceMapper(store)
        self.on_contact_updated = on_contact_updated
        self.clock = clock or utc_now

    def build_record(self, request: IngestRequest) -> UTMRecord:
        """Normalize and map a request into an (unstored) UTMRecord.

        Raises:
            ValueError: If the timestamp cannot be parsed.
        """
        normalized = self.normalizer.normalize(request.params)
        mapping = self.mapper.map_to_source(normalized)

        if request.timestamp is None or request.timestamp == "":
            timestamp = parse_timestamp(self.clock(), "clock")
        else:
            timestamp = parse_timestamp(request.timestamp)

        return UTMRecord(
            contact_id=request.contact_id,
            deal_id=request.deal_id,
            original_params=request.params,
            normalized_params=normalized,
            source=mapping.source,
            source_detail=mapping.source_detail,
            channel=mapping.channel,
            timestamp=timestamp,
            revenue=request.revenue or 0.0,
        )

    def ingest(self, request: IngestRequest) -> IngestResult:
        """
        Ingest a single touchpoint.

        Args:
            request: Touchpoint to ingest

        Returns:
            IngestResult with the stored record and validation issues.

        Raises:
            ValueError: If the timestamp cannot be parsed.
        """
        validation = self.normalizer.validate_params(request.params)
        if not validation.is_valid:
            logger.warning(f"UTM validation issues: {validation.issues}")

        record = self.build_record(request)
        self.store.add_utm_record(record)
        logger.info(
            f"Stored UTM record {record.id} ({record.source} / {record.channel})"
            + (f" for contact {record.contact_id}" if record.contact_id else "")
        )

        if record.contact_id and self.on_contact_updated is not None:
            try:
                self.on_contact_updated(record.contact_id)
            except Exception:
                logger.exception(f"Failed to sync contact {record.contact_id}")

        return IngestResult(record=record, validation=validation)

    def ingest_batch(self, data: pd.DataFrame | list[dict[str, Any]]) -> BatchIngestResult:
        """
        Ingest many touchpoints.

        Rows are not validated and do not trigger the contact hook.

        Args:
            data: DataFrame or list of dicts, one touchpoint per row

        Returns:
            BatchIngestResult with stored records and ``{index, error}`` entries
            for rows that failed.
        """
        result = BatchIngestResult()

        for index, row in enumerate(_to_rows(data)):
            try:
                record = self.build_record(IngestRequest.from_dict(row))
            except (ValueError, TypeError, KeyError, AttributeError) as e:
                result.errors.append({"index": index, "error": str(e)})
                continue

            self.store.add_utm_record(record)
            result.records.append(record)

        if result.errors:
            logger.warning(f"Batch ingestion skipped {len(result.errors)} rows")
        logger.info(f"Batch ingested {result.count} UTM records")
        return result
