"""USDA dataset loading into a compact in-memory record set."""

import asyncio
import csv
import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from nutriempower.domain.foods import FoodRecord

_logger = logging.getLogger(__name__)

_RECORDS_ADAPTER = TypeAdapter(list[FoodRecord])

_FIELD_CANDIDATES: dict[str, tuple[str, ...]] = {
    "id": ("fdc_id", "FDC_ID", "id", "ID"),
    "description": (
        "description",
        "Description",
        "food_description",
        "name",
        "Name",
        "food",
    ),
    "category": (
        "food_category",
        "food_category_id",
        "category",
        "Category",
        "foodCategory",
        "data_type",
    ),
    "nutrients": ("nutrients", "Nutrients"),
}


def normalize_row(row: Mapping[str, object]) -> FoodRecord | None:
    """Map a raw CSV row onto a FoodRecord, or None without a description."""
    values = {
        field: _first_present(row, candidates)
        for field, candidates in _FIELD_CANDIDATES.items()
    }
    if not values["description"]:
        return None
    return FoodRecord(**values)


def _first_present(row: Mapping[str, object], candidates: Iterable[str]) -> str | None:
    for name in candidates:
        raw = row.get(name)
        if raw is None:
            continue
        value = str(raw).strip()
        if value:
            return value
    return None


def compact_rows(
    rows: Iterable[Mapping[str, object]], max_raw_rows: int, max_records: int
) -> list[FoodRecord]:
    """Normalize and dedupe rows, bounded by raw rows examined and records kept."""
    records: list[FoodRecord] = []
    seen: set[str] = set()
    for index, row in enumerate(rows):
        if index >= max_raw_rows or len(records) >= max_records:
            break
        record = normalize_row(row)
        if record is None:
            continue
        key = record.description.lower()
        if key in seen:
            continue
        seen.add(key)
        records.append(record)
    return records


def read_csv_records(
    csv_path: Path, max_raw_rows: int, max_records: int
) -> list[FoodRecord]:
    """Stream a CSV file into a compact record list."""
    with csv_path.open(
        newline="", encoding="utf-8-sig", errors="replace"
    ) as handle:
        reader = csv.DictReader(handle)
        return compact_rows(reader, max_raw_rows, max_records)


def read_snapshot(snapshot_path: Path) -> list[FoodRecord]:
    """Load a compact snapshot written by ``write_snapshot``."""
    return _RECORDS_ADAPTER.validate_json(snapshot_path.read_bytes())


def write_snapshot(snapshot_path: Path, records: list[FoodRecord]) -> None:
    """Persist records as a JSON array, preserving order."""
    snapshot_path.parent.mkdir(parents=True, exist_ok=True)
    payload = [record.model_dump() for record in records]
    snapshot_path.write_text(json.dumps(payload), encoding="utf-8")


class FoodDataset:
    """Process-wide, read-only set of food records.

    ``load`` picks the cheapest available source: the compact snapshot if it
    exists, else the raw CSV (which is then snapshotted), else nothing. Every
    failure is logged and leaves the set empty, so retrieval degrades to no
    context instead of breaking chat.
    """

    def __init__(  # noqa: PLR0913
        self,
        csv_path: Path | str,
        snapshot_path: Path | str,
        max_raw_rows: int = 1000,
        max_records: int = 300,
        records: list[FoodRecord] | None = None,
    ) -> None:
        self.csv_path = Path(csv_path)
        self.snapshot_path = Path(snapshot_path)
        self.max_raw_rows = max_raw_rows
        self.max_records = max_records
        self._records: tuple[FoodRecord, ...] = tuple(records or ())
        self.loaded = records is not None
        self.source = "memory" if records is not None else "none"

    @property
    def records(self) -> tuple[FoodRecord, ...]:
        """Loaded records in load order."""
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    async def load(self) -> None:
        """Populate the record set from the snapshot or the CSV source."""
        try:
            if self.snapshot_path.exists():
                await self._load_snapshot()
            elif self.csv_path.exists():
                await self._load_csv()
            else:
                _logger.warning(
                    "No USDA dataset found at %s or %s; chat runs without context",
                    self.snapshot_path,
                    self.csv_path,
                )
        finally:
            self.loaded = True

    async def _load_snapshot(self) -> None:
        try:
            records = await asyncio.to_thread(read_snapshot, self.snapshot_path)
        except (OSError, ValueError, ValidationError) as exc:
            _logger.warning(
                "Failed to read dataset snapshot %s: %s", self.snapshot_path, exc
            )
            return
        self._records = tuple(records)
        self.source = "snapshot"
        _logger.info("Loaded %s food records from snapshot", len(records))

    async def _load_csv(self) -> None:
        try:
            records = await asyncio.to_thread(
                read_csv_records, self.csv_path, self.max_raw_rows, self.max_records
            )
        except (OSError, csv.Error) as exc:
            _logger.warning("Failed to parse dataset CSV %s: %s", self.csv_path, exc)
            return
        self._records = tuple(records)
        self.source = "csv"
        _logger.info("Loaded %s food records from CSV", len(records))
        try:
            await asyncio.to_thread(write_snapshot, self.snapshot_path, records)
        except (OSError, TypeError, ValueError) as exc:
            _logger.warning(
                "Failed to write dataset snapshot %s: %s", self.snapshot_path, exc
            )
            return
        _logger.info("Saved dataset snapshot to %s", self.snapshot_path)
