"""JSON file Repository Implementation

The whole collection lives in a single file as a JSON-encoded array of wire
records, rewritten on every change. Records that fail validation are skipped
on read and written back untouched.
"""
import asyncio
import datetime as dt
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi.concurrency import run_in_threadpool

from domain.entities import Reservation
from domain.enums import ReservationStatus
from domain.repositories import ReservationStore
from infrastructure.repositories.in_memory_repositories import apply_update, new_reservation_id
from infrastructure.wire_format import parse_records, reservation_from_wire, reservation_to_wire

logger = logging.getLogger(__name__)


class StoreReadError(Exception):
    """Raised internally when the backing file cannot be read or parsed"""


class JsonFileReservationStore(ReservationStore):
    """Reservation store persisted as a JSON array in a local file"""

    def __init__(self, path):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    # ==================== FILE ACCESS (blocking) ====================
    def _load(self) -> List[Any]:
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_text(encoding="utf-8")
            if not raw.strip():
                return []
            records = json.loads(raw)
        except (OSError, ValueError) as e:
            raise StoreReadError(f"Cannot read reservations from {self.path}: {e}") from e
        if not isinstance(records, list):
            raise StoreReadError(f"Cannot read reservations from {self.path}: not a JSON array")
        return records

    def _save(self, records: List[Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            tmp_path.write_text(json.dumps(records, ensure_ascii=False, indent=2), encoding="utf-8")
            tmp_path.replace(self.path)
        finally:
            tmp_path.unlink(missing_ok=True)

    # ==================== STORE OPERATIONS ====================
    async def list_by_date(self, reservation_date: dt.date) -> List[Reservation]:
        try:
            async with self._lock:
                records = await run_in_threadpool(self._load)
        except StoreReadError:
            logger.exception("Failed to list reservations for %s", reservation_date)
            return []
        return [r for r in parse_records(records) if r.date == reservation_date]

    async def append(self, reservation: Reservation) -> Optional[Reservation]:
        stored = reservation.model_copy(update={"reservation_id": new_reservation_id()})
        try:
            async with self._lock:
                records = await run_in_threadpool(self._load)
                records.append(reservation_to_wire(stored))
                await run_in_threadpool(self._save, records)
        except (StoreReadError, OSError):
            logger.exception("Failed to store reservation for %s", reservation.customer_name)
            return None
        return stored

    async def update_by_id(
        self,
        reservation_id: str,
        changes: Dict[str, Any],
        expected_status: Optional[ReservationStatus] = None
    ) -> bool:
        async with self._lock:
            try:
                records = await run_in_threadpool(self._load)
            except StoreReadError:
                logger.exception("Failed to load reservations to update %s", reservation_id)
                return False

            for index, record in enumerate(records):
                if isinstance(record, dict) and str(record.get("id")) == str(reservation_id):
                    break
            else:
                return False

            try:
                reservation = reservation_from_wire(record)
            except ValueError:
                logger.exception("Stored record %s is invalid and cannot be updated", reservation_id)
                return False

            updated = apply_update(reservation, changes, expected_status)
            if updated is None:
                return False

            records[index] = reservation_to_wire(updated)
            try:
                await run_in_threadpool(self._save, records)
            except OSError:
                logger.exception("Failed to save update for reservation %s", reservation_id)
                return False
        return True
