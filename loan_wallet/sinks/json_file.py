"""JSON file sink for exporting audit records to files."""

import json
import logging
from pathlib import Path
from typing import Any

from loan_wallet.exceptions import SinkError
from loan_wallet.sinks.serialization import to_dict

logger = logging.getLogger(__name__)


class JsonFileSink:
    """Output audit records to JSON and JSON Lines files."""

    def __init__(self, output_dir: str | Path, pretty: bool = False) -> None:
        """Initialize JSON file sink.

        Parameters
        ----------
        output_dir : str | Path
            Directory to write JSON files.
        pretty : bool
            Pretty-print JSON output (batches only; JSON Lines stay compact).
        """
        self.output_dir = Path(output_dir)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise SinkError(f"Cannot create output directory {self.output_dir}: {exc}") from exc
        self.pretty = pretty
        self._counts: dict[str, int] = {}

    def write_batch(self, entity_type: str, records: list[Any]) -> None:
        """Write a batch of records to ``<entity_type>.json``."""
        file_path = self.output_dir / f"{entity_type}.json"

        data = [to_dict(record) for record in records]

        with open(file_path, "w", encoding="utf-8") as f:
            if self.pretty:
                json.dump(data, f, indent=2, ensure_ascii=False, default=str)
            else:
                json.dump(data, f, ensure_ascii=False, default=str)

        self._counts[entity_type] = len(records)

    def send(self, topic: str, record: Any) -> None:
        """Append one record to the topic's JSON Lines file."""
        # Use topic name as filename (replace dots with underscores)
        file_path = self.output_dir / (topic.replace(".", "_") + ".jsonl")

        with open(file_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(to_dict(record), ensure_ascii=False, default=str) + "\n")

        self._counts[topic] = self._counts.get(topic, 0) + 1

    def close(self) -> None:
        """Log summary."""
        logger.info("JSON files written to: %s", self.output_dir)
        for entity_type, count in self._counts.items():
            logger.info("  %s: %d records", entity_type, count)
