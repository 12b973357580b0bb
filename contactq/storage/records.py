"""
Append-only record store for accepted contacts.

Two files are kept side by side:
- a CSV with header ``Name,Number`` and one ``displayName,identifier`` row
  per contact (read back at start-up to seed the ledger)
- a vCard file with one block per contact

Both are only appended to; clear() exists for the clear-after-flush policy.
"""

from __future__ import annotations

import csv
from pathlib import Path

from contactq.config import CSV_HEADER
from contactq.contacts.models import ContactRecord
from contactq.contacts.vcard import render_card
from contactq.errors import RecordStoreError
from contactq.observability.logging import get_logger

logger = get_logger(__name__)


class ContactRecordStore:
    """CSV + vCard files for persisted contacts."""

    def __init__(self, csv_path: Path | str, vcf_path: Path | str) -> None:
        self.csv_path = Path(csv_path)
        self.vcf_path = Path(vcf_path)

    def ensure_initialized(self) -> None:
        """Create the CSV with its header row if it does not exist yet."""
        if self.csv_path.exists():
            return
        try:
            self.csv_path.parent.mkdir(parents=True, exist_ok=True)
            self._write_header()
        except OSError as e:
            raise RecordStoreError(f"Cannot create {self.csv_path}: {e}") from e
        logger.info("Created contact store %s", self.csv_path)

    def load_identifiers(self) -> list[str]:
        """
        Read every stored identifier, in file order.

        Blank rows, rows without a number column and the header row are
        skipped.
        """
        self.ensure_initialized()
        identifiers: list[str] = []
        try:
            with self.csv_path.open(newline="", encoding="utf-8") as f:
                for row in csv.reader(f):
                    if len(row) < 2:
                        continue
                    number = row[1].strip()
                    if not number or number == CSV_HEADER[1]:
                        continue
                    identifiers.append(number)
        except (OSError, csv.Error) as e:
            raise RecordStoreError(f"Cannot read {self.csv_path}: {e}") from e

        logger.info("Loaded %d stored contacts from %s", len(identifiers), self.csv_path)
        return identifiers

    def append(self, record: ContactRecord) -> None:
        """
        Persist one contact to both files.

        The vCard block is written first and the CSV row last, since the CSV
        seeds the ledger on start-up. If either write fails both files are
        truncated back to their previous size, so a failed append leaves no
        trace.

        Side Effects:
            - Appends a vCard block to the vCard file
            - Appends a row to the CSV file

        Raises:
            RecordStoreError: if either write fails
        """
        self.ensure_initialized()
        csv_size = self._size(self.csv_path)
        vcf_size = self._size(self.vcf_path)
        try:
            with self.vcf_path.open("a", encoding="utf-8") as f:
                f.write(render_card(record) + "\n")
            with self.csv_path.open("a", newline="", encoding="utf-8") as f:
                csv.writer(f).writerow([record.display_name, record.identifier])
        except OSError as e:
            self._rollback(self.vcf_path, vcf_size)
            self._rollback(self.csv_path, csv_size)
            raise RecordStoreError(f"Cannot append contact to store: {e}") from e

    def clear(self) -> None:
        """
        Reset both files: CSV back to its header, vCard file emptied.

        Side Effects:
            - Rewrites the CSV file
            - Truncates the vCard file
        """
        try:
            self._write_header()
            self.vcf_path.write_text("", encoding="utf-8")
        except OSError as e:
            raise RecordStoreError(f"Cannot clear contact store: {e}") from e
        logger.info("Cleared contact store %s and %s", self.csv_path, self.vcf_path)

    def _write_header(self) -> None:
        with self.csv_path.open("w", newline="", encoding="utf-8") as f:
            csv.writer(f).writerow(CSV_HEADER)

    @staticmethod
    def _size(path: Path) -> int | None:
        """Current size in bytes, or None if the path is not a regular file."""
        return path.stat().st_size if path.is_file() else None

    @staticmethod
    def _rollback(path: Path, size: int | None) -> None:
        """Truncate ``path`` back to ``size`` bytes (remove it if it did not exist)."""
        try:
            if size is None:
                if path.is_file():
                    path.unlink()
                return
            with path.open("r+b") as f:
                f.truncate(size)
        except OSError as e:
            logger.error("Could not roll back partial write to %s: %s", path, e)
