"""
Customer registry module.

Scope:
- Customers CRUD keyed by digit-only phone number
- Phone/email validation shared by every caller
- CSV bulk import (best-effort, per-row rejections) and CSV export
"""
