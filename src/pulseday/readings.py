"""Replay reading logs (JSONL) into typed readings for offline aggregation.

Each non-blank line is one JSON object, either a reading::

    {"kind": "heart_rate", "id": "...", "start": "...", "end": "...", "value": 52}
    {"kind": "sleep_analysis", "id": "...", "start": "...", "end": "...", "stage": "asleepCore"}

or a deletion notice::

    {"deleted": "<id>"}

Malformed lines are logged and skipped.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pulseday.samples import QuantityReading, SignalKind, SleepReading, parse_timestamp

logger = logging.getLogger(__name__)


def decode_entry(entry: dict) -> dict | None:
    """Turn one parsed JSON object into a typed record, or None if unusable."""
    if "deleted" in entry:
        return {"type": "deleted", "data": str(entry["deleted"])}

    try:
        kind = str(entry["kind"])
        reading_id = str(entry["id"])
        start = parse_timestamp(entry["start"])
        end = parse_timestamp(entry.get("end", entry["start"]))
        if kind == SignalKind.SLEEP_ANALYSIS.value:
            return {
                "type": "sleep",
                "kind": kind,
                "data": SleepReading(reading_id, start, end, str(entry["stage"])),
            }
        return {
            "type": "quantity",
            "kind": kind,
            "data": QuantityReading(reading_id, start, end, float(entry["value"])),
        }
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Unusable reading entry %r: %s", entry, e)
        return None


def replay_readings(path: str | Path) -> list[dict]:
    """Read a .jsonl reading log.

    Args:
        path: Path to the log file.

    Returns:
        Decoded records (see :func:`pulseday.pipeline.partition_records`).

    Raises:
        FileNotFoundError: If *path* does not exist.
    """
    path = Path(path)
    records: list[dict] = []
    total = 0

    with open(path) as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            total += 1

            try:
                entry = json.loads(line)
            except json.JSONDecodeError:
                logger.warning("%s line %d: invalid JSON, skipping", path.name, line_num)
                continue
            if not isinstance(entry, dict):
                logger.warning("%s line %d: not an object, skipping", path.name, line_num)
                continue

            record = decode_entry(entry)
            if record is not None:
                record["line"] = line_num
                records.append(record)

    logger.info("Replayed %s: %d entries, %d decoded", path.name, total, len(records))
    return records
