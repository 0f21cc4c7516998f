"""
CUSTOMER SERVICE
================

Validation and orchestration above CustomerRepository.

Rules (single source of truth lives in utils.py):
- Phone keys are digit-only; 7-11 digits.
- Name and Address are required; Email is optional but must look like name@domain.tld.

Failure policy:
- insert/update/delete/get_by_phone raise StorageError/ConfigurationError like the repository.
- list_all/search are best-effort for display: failures are logged and [] is returned.
- load_from_csv returns a message string, save_to_csv returns a bool; neither raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from app.custreg.config import ConfigurationError
from app.custreg.modules.customers.models import Customer
from app.custreg.modules.customers.parsers.csv import (
    CsvRowError,
    format_customer_line,
    parse_customer_csv,
)
from app.custreg.modules.customers.repository import (
    CustomerRepository,
    DeleteResult,
    InsertResult,
    UpdateResult,
)
from app.custreg.modules.customers.utils import normalize_phone, normalize_text
from app.custreg.storage import StorageError, write_text_atomic

logger = logging.getLogger(__name__)


@dataclass
class CsvImportResult:
    inserted: list[Customer] = field(default_factory=list)
    rejected: list[CsvRowError] = field(default_factory=list)
    lines_read: int = 0

    @property
    def inserted_count(self) -> int:
        return len(self.inserted)

    @property
    def skipped_count(self) -> int:
        return len(self.rejected)

    def summary(self) -> str:
        return f"Imported {self.inserted_count}, skipped {self.skipped_count} ({self.lines_read} lines read)."


class CustomerService:
    def __init__(self, repository: CustomerRepository) -> None:
        self.repository = repository

    def ensure_schema(self) -> None:
        self.repository.ensure_schema()

    def get_by_phone(self, raw: str) -> Customer | None:
        return self.repository.find(normalize_phone(raw))

    def insert(self, customer: Customer) -> InsertResult:
        return self.repository.insert(customer)

    def update(self, customer: Customer) -> UpdateResult:
        return self.repository.update(customer)

    def delete(self, phone_number: str) -> DeleteResult:
        return self.repository.delete(phone_number)

    def list_all(self) -> list[Customer]:
        try:
            return self.repository.list_all()
        except (StorageError, ConfigurationError) as e:
            logger.warning("list_all failed; returning empty list: %s", e)
            return []

    def search(self, term: str | None) -> list[Customer]:
        """Case-insensitive substring match over every field; blank term returns all rows."""
        t = normalize_text(term).casefold()
        rows = self.list_all()
        if not t:
            return rows
        return [
            c
            for c in rows
            if any(t in (v or "").casefold() for v in (c.phone_number, c.name, c.address, c.email))
        ]

    def import_csv(self, path: str | Path) -> CsvImportResult:
        """
        Parse and insert every acceptable line of `path`.

        Raises OSError/UnicodeDecodeError only for file-level problems; per-row
        failures (validation, duplicate keys, storage errors on one row) are
        collected in the result and the batch always runs to completion.
        """
        text = Path(path).read_text(encoding="utf-8")
        logger.info("CSV import start: %s", path)

        parsed = parse_customer_csv(text)
        result = CsvImportResult(rejected=list(parsed.errors), lines_read=parsed.lines_read)

        for row_number, customer in parsed.rows:
            try:
                outcome = self.repository.insert(customer)
            except StorageError as e:
                logger.warning("CSV row %s insert failed: %s", row_number, e)
                result.rejected.append(CsvRowError(row_number, f"Storage error: {e}"))
                continue
            if outcome is InsertResult.IGNORED:
                result.rejected.append(CsvRowError(row_number, f"Duplicate phone {customer.phone_number}."))
                continue
            result.inserted.append(customer)

        result.rejected.sort(key=lambda err: err.row_number)
        for err in result.rejected:
            logger.debug("CSV row %s skipped: %s", err.row_number, err.message)
        logger.info(
            "CSV import done: inserted=%s skipped=%s lines=%s",
            result.inserted_count,
            result.skipped_count,
            result.lines_read,
        )
        return result

    def load_from_csv(self, path: str | Path) -> str:
        try:
            return self.import_csv(path).summary()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("CSV import could not read %s: %s", path, e)
            return f"Failed to read CSV: {e}"
        except ConfigurationError as e:
            logger.warning("CSV import aborted: %s", e)
            return f"Import failed: {e}"

    def save_to_csv(self, path: str | Path) -> bool:
        try:
            rows = self.repository.list_all()
        except (StorageError, ConfigurationError) as e:
            logger.warning("CSV export aborted, could not list customers: %s", e)
            return False

        text = "".join(format_customer_line(c) + "\n" for c in rows)
        try:
            write_text_atomic(path, text)
        except OSError:
            logger.exception("CSV export failed: %s", path)
            return False
        logger.info("CSV export: %s rows -> %s", len(rows), path)
        return True
