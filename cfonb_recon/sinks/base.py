"""Sink interface and report publishing."""

import logging
from typing import Any, Protocol

from cfonb_recon.models.payment import ReconciliationReport

logger = logging.getLogger(__name__)

MATCHED_ENTITY = "matched-payments"
UNMATCHED_ENTITY = "unmatched-payments"


class Sink(Protocol):
    """Destination for reconciliation results."""

    def write_batch(self, entity_type: str, records: list[Any]) -> None:
        """Write a batch of records of one entity type."""

    def close(self) -> None:
        """Flush and release resources."""


def publish_report(report: ReconciliationReport, sink: Sink, prefix: str = "") -> None:
    """Hand matched and unmatched results to a sink.

    Results keep the report's per-account order. Matched results feed the
    payout and invoice updates downstream; unmatched ones must be stored
    for manual review, so they are always written, even when empty.

    Parameters
    ----------
    report : ReconciliationReport
        Matching outcome.
    sink : Sink
        Destination.
    prefix : str
        Prepended to entity types as ``prefix.entity`` (Kafka topic prefix).
    """
    matched_entity = f"{prefix}.{MATCHED_ENTITY}" if prefix else MATCHED_ENTITY
    unmatched_entity = f"{prefix}.{UNMATCHED_ENTITY}" if prefix else UNMATCHED_ENTITY

    sink.write_batch(matched_entity, report.matched)
    sink.write_batch(unmatched_entity, report.unmatched)
    logger.info(
        "Published %d matched and %d unmatched payment(s)",
        len(report.matched),
        len(report.unmatched),
    )
