from __future__ import annotations

import re

PHONE_MIN_DIGITS = 7
PHONE_MAX_DIGITS = 11

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

PHONE_RULE_MESSAGE = f"Phone must be {PHONE_MIN_DIGITS}-{PHONE_MAX_DIGITS} digits."
REQUIRED_FIELDS_MESSAGE = f"{PHONE_RULE_MESSAGE} Name and Address required."


def normalize_text(s: str | None) -> str:
    return (s or "").strip()


def normalize_phone(raw: str | None) -> str:
    """
    Strip everything that is not a digit.

    Examples:
        >>> normalize_phone("(555) 123-4567")
        '5551234567'
        >>> normalize_phone("+1 555.123.4567")
        '15551234567'
    """
    return re.sub(r"[^0-9]+", "", raw or "")


def is_valid_phone(phone: str | None) -> bool:
    p = phone or ""
    return p.isdigit() and p.isascii() and PHONE_MIN_DIGITS <= len(p) <= PHONE_MAX_DIGITS


def email_error(email: str | None) -> str | None:
    """Return None when the email is blank or well-formed, else a message."""
    e = email or ""
    if e == "":
        return None
    if EMAIL_RE.fullmatch(e):
        return None
    return f"Invalid email {e!r}. Expected name@domain.tld (or leave blank)."


def customer_errors(phone: str, name: str, address: str, email: str) -> str | None:
    """
    Submission rule shared by the CSV importer and interactive callers.
    Expects an already-normalized phone and trimmed text fields.
    """
    if not is_valid_phone(phone) or not name or not address:
        return REQUIRED_FIELDS_MESSAGE
    return email_error(email)
