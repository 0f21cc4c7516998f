from __future__ import annotations

import re
from dataclasses import dataclass, field

from app.custreg.modules.customers.models import Customer
from app.custreg.modules.customers.utils import (
    email_error,
    is_valid_phone,
    normalize_phone,
    normalize_text,
)

FIELD_COUNT = 4

LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class CsvRowError:
    row_number: int
    message: str


@dataclass
class CsvParseResult:
    rows: list[tuple[int, Customer]] = field(default_factory=list)
    errors: list[CsvRowError] = field(default_factory=list)
    lines_read: int = 0


def split_records(text: str) -> list[str]:
    """Split on \\n, \\r\\n or \\r only; other Unicode breaks stay inside the field."""
    lines = LINE_BREAK_RE.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def split_line(line: str) -> list[str]:
    """
    Split one record on literal commas into exactly four fields.

    There is no quoting: an address containing a comma shifts the remaining
    fields. Missing trailing fields become "", extra fields are dropped.
    """
    parts = line.split(",")[:FIELD_COUNT]
    return parts + [""] * (FIELD_COUNT - len(parts))


def parse_customer_csv(text: str) -> CsvParseResult:
    """
    Parse `phone,name,address,email` lines.

    Returns accepted customers paired with their 1-based line number, plus one
    CsvRowError per rejected line. Nothing is raised for bad rows; a header row
    is rejected by the phone rule like any other malformed line.
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    out = CsvParseResult()
    seen: set[str] = set()

    for idx, line in enumerate(split_records(text), start=1):
        out.lines_read = idx
        if line.strip() == "":
            continue

        phone_s, name_s, address_s, email_s = split_line(line)
        phone = normalize_phone(phone_s)
        name = normalize_text(name_s)
        address = normalize_text(address_s)
        email = normalize_text(email_s)

        if not is_valid_phone(phone):
            out.errors.append(CsvRowError(idx, f"Invalid phone {phone_s.strip()!r}."))
            continue
        if not name:
            out.errors.append(CsvRowError(idx, "Name is required."))
            continue
        if not address:
            out.errors.append(CsvRowError(idx, "Address is required."))
            continue
        err = email_error(email)
        if err:
            out.errors.append(CsvRowError(idx, err))
            continue
        if phone in seen:
            out.errors.append(CsvRowError(idx, f"Duplicate phone {phone} in file."))
            continue

        seen.add(phone)
        out.rows.append((idx, Customer(phone, name, address, email)))

    return out


def format_customer_line(c: Customer) -> str:
    return ",".join((c.phone_number, c.name, c.address, c.email or ""))
