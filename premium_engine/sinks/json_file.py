"""JSON file sink for report input."""

import json
import logging
from pathlib import Path
from typing import Any

from premium_engine.models import AnalyticsSnapshot, RangeReport
from premium_engine.sinks.serialization import dataclass_to_dict, serialize_value

logger = logging.getLogger(__name__)


class JsonFileSink:
    """Write snapshots and records to JSON files.

    Currency values are written as plain numbers, the form chart and
    summary-card renderers consume.
    """

    def __init__(self, output_dir: str | Path, pretty: bool = False) -> None:
        """Initialize JSON file sink.

        Parameters
        ----------
        output_dir : str | Path
            Directory to write JSON files.
        pretty : bool
            Pretty-print JSON output.
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.pretty = pretty
        self._counts: dict[str, int] = {}

    def write_snapshot(self, name: str, snapshot: AnalyticsSnapshot | RangeReport) -> Path:
        """Write one analytics snapshot to ``<name>.json``."""
        file_path = self.output_dir / f"{name}.json"
        self._dump(file_path, dataclass_to_dict(snapshot, decimal_as_number=True))
        self._counts[name] = 1
        return file_path

    def write_batch(self, entity_type: str, records: list[Any]) -> Path:
        """Write a batch of records to ``<entity_type>.json``."""
        file_path = self.output_dir / f"{entity_type}.json"
        self._dump(file_path, [serialize_value(record, decimal_as_number=True) for record in records])
        self._counts[entity_type] = len(records)
        return file_path

    def close(self) -> None:
        """Log a summary of written files."""
        logger.info("JSON files written to: %s", self.output_dir)
        for entity_type, count in self._counts.items():
            logger.info("  %s: %d records", entity_type, count)

    def _dump(self, file_path: Path, data: Any) -> None:
        with open(file_path, "w", encoding="utf-8") as f:
            if self.pretty:
                json.dump(data, f, indent=2, ensure_ascii=False)
            else:
                json.dump(data, f, ensure_ascii=False)
