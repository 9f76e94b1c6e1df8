"""Console sink for debugging and development."""

import json
from typing import Any

from premium_engine.models import AnalyticsSnapshot, RangeReport
from premium_engine.sinks.serialization import dataclass_to_dict, serialize_value


class ConsoleSink:
    """Output snapshots and records to console (stdout) for debugging."""

    def __init__(self, pretty: bool = True, max_records: int | None = None) -> None:
        """Initialize console sink.

        Parameters
        ----------
        pretty : bool
            Pretty-print JSON output.
        max_records : int | None
            Maximum records to print per batch (None for all).
        """
        self.pretty = pretty
        self.max_records = max_records
        self._counts: dict[str, int] = {}

    def write_snapshot(self, name: str, snapshot: AnalyticsSnapshot | RangeReport) -> None:
        """Print an analytics snapshot."""
        print(f"\n{'='*60}")
        print(f"Snapshot: {name}")
        print("=" * 60)
        self._print(dataclass_to_dict(snapshot))
        self._counts[name] = self._counts.get(name, 0) + 1

    def write_batch(self, entity_type: str, records: list[Any]) -> None:
        """Write a batch of records to console."""
        print(f"\n{'='*60}")
        print(f"Entity: {entity_type} ({len(records)} records)")
        print("=" * 60)

        display_records = records[: self.max_records] if self.max_records else records

        for record in display_records:
            self._print(serialize_value(record))

        if self.max_records and len(records) > self.max_records:
            print(f"... and {len(records) - self.max_records} more records")

        self._counts[entity_type] = self._counts.get(entity_type, 0) + len(records)

    def close(self) -> None:
        """Print summary and close."""
        print(f"\n{'='*60}")
        print("Console Sink Summary")
        print("=" * 60)
        for entity_type, count in self._counts.items():
            print(f"  {entity_type}: {count} records")

    def _print(self, data: Any) -> None:
        if self.pretty:
            print(json.dumps(data, indent=2, ensure_ascii=False))
        else:
            print(json.dumps(data, ensure_ascii=False))
