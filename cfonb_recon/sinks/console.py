"""Console sink for reviewing results in a terminal."""

import json
from typing import Any

from cfonb_recon.models.payment import Matched, Unmatched
from cfonb_recon.sinks.serialization import to_dict


class ConsoleSink:
    """Print results to stdout.

    Pretty mode prints every record as indented JSON. Otherwise match
    results are printed one per line::

        <account id> | MATCHED   | <amount> | <label> | invoice <id>
    """

    def __init__(self, pretty: bool = True, max_records: int | None = None) -> None:
        """Initialize console sink.

        Parameters
        ----------
        pretty : bool
            Print full JSON records instead of one-line summaries.
        max_records : int | None
            Maximum records to print per batch (None for all).
        """
        self.pretty = pretty
        self.max_records = max_records
        self._counts: dict[str, int] = {}

    def write_batch(self, entity_type: str, records: list[Any]) -> None:
        """Print a batch of records under an entity header."""
        print(f"\n{'='*60}")
        print(f"Entity: {entity_type} ({len(records)} records)")
        print("=" * 60)

        shown = records[: self.max_records] if self.max_records else records
        for record in shown:
            print(self._format(record))

        if self.max_records and len(records) > self.max_records:
            print(f"... and {len(records) - self.max_records} more records")

        self._counts[entity_type] = self._counts.get(entity_type, 0) + len(records)

    def _format(self, record: Any) -> str:
        if self.pretty:
            return json.dumps(to_dict(record), indent=2, ensure_ascii=False, default=str)
        if isinstance(record, (Matched, Unmatched)):
            movement = record.movement
            line = f"{record.account_id} | {record.status.value:<9} | {movement.amount:>14} | {movement.counterparty_label}"
            if isinstance(record, Matched):
                line += f" | invoice {record.expected_payment.invoice_id}"
            return line
        return json.dumps(to_dict(record), ensure_ascii=False, default=str)

    def close(self) -> None:
        """Print per-entity totals."""
        print(f"\n{'='*60}")
        print("Console Sink Summary")
        print("=" * 60)
        for entity_type, count in self._counts.items():
            print(f"  {entity_type}: {count} records")
