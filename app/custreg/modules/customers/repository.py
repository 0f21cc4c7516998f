from __future__ import annotations

import enum
import logging

from sqlalchemy import delete, inspect as sa_inspect, select, update
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError

from app.custreg.db import ConnectionProvider
from app.custreg.models import Base
from app.custreg.modules.customers.models import CUSTOMER_COLUMNS, Customer, CustomerRow, customers_table
from app.custreg.storage import StorageError

logger = logging.getLogger(__name__)


class InsertResult(enum.Enum):
    INSERTED = "inserted"
    IGNORED = "ignored"


class UpdateResult(enum.Enum):
    UPDATED = "updated"
    NOT_FOUND = "not_found"


class DeleteResult(enum.Enum):
    DELETED = "deleted"
    NOT_FOUND = "not_found"


class CustomerRepository:
    """
    Raw persistence for the customers table. No domain validation happens
    here; every call opens and releases its own connection.

    Driver failures are re-raised as StorageError. ConfigurationError from the
    provider passes through untouched.
    """

    def __init__(self, provider: ConnectionProvider) -> None:
        self.provider = provider

    def ensure_schema(self) -> None:
        try:
            engine = self.provider.engine
            Base.metadata.create_all(bind=engine, tables=[customers_table])
            insp = sa_inspect(engine)
            cols = {c["name"] for c in insp.get_columns(CustomerRow.__tablename__)}
        except SQLAlchemyError as e:
            raise StorageError(f"Could not create customers table: {e}") from e

        missing = [c for c in CUSTOMER_COLUMNS if c not in cols]
        if missing:
            raise StorageError(f"customers table is missing columns: {', '.join(missing)}")
        logger.info("Schema ensured at %s", self.provider.database_path)

    def insert(self, customer: Customer) -> InsertResult:
        stmt = (
            sqlite_insert(customers_table)
            .values(
                phone=customer.phone_number,
                name=customer.name,
                address=customer.address,
                email=customer.email,
            )
            .on_conflict_do_nothing(index_elements=["phone"])
        )
        try:
            with self.provider.connect() as s:
                rowcount = s.execute(stmt).rowcount
        except SQLAlchemyError as e:
            raise StorageError(f"Insert failed for {customer.phone_number}: {e}") from e

        result = InsertResult.INSERTED if rowcount > 0 else InsertResult.IGNORED
        logger.debug("insert phone=%s result=%s", customer.phone_number, result.value)
        return result

    def update(self, customer: Customer) -> UpdateResult:
        stmt = (
            update(customers_table)
            .where(customers_table.c.phone == customer.phone_number)
            .values(name=customer.name, address=customer.address, email=customer.email)
        )
        try:
            with self.provider.connect() as s:
                rowcount = s.execute(stmt).rowcount
        except SQLAlchemyError as e:
            raise StorageError(f"Update failed for {customer.phone_number}: {e}") from e

        result = UpdateResult.UPDATED if rowcount > 0 else UpdateResult.NOT_FOUND
        logger.debug("update phone=%s result=%s", customer.phone_number, result.value)
        return result

    def delete(self, phone_number: str) -> DeleteResult:
        stmt = delete(customers_table).where(customers_table.c.phone == phone_number)
        try:
            with self.provider.connect() as s:
                rowcount = s.execute(stmt).rowcount
        except SQLAlchemyError as e:
            raise StorageError(f"Delete failed for {phone_number}: {e}") from e

        result = DeleteResult.DELETED if rowcount > 0 else DeleteResult.NOT_FOUND
        logger.debug("delete phone=%s result=%s", phone_number, result.value)
        return result

    def find(self, phone_number: str) -> Customer | None:
        try:
            with self.provider.connect() as s:
                row = s.get(CustomerRow, phone_number)
                return row.to_customer() if row else None
        except SQLAlchemyError as e:
            raise StorageError(f"Lookup failed for {phone_number}: {e}") from e

    def list_all(self) -> list[Customer]:
        # Plain ORDER BY name: SQLite's default BINARY collation, so "Zed" sorts before "amy".
        stmt = select(CustomerRow).order_by(CustomerRow.name.asc(), CustomerRow.phone.asc())
        try:
            with self.provider.connect() as s:
                return [r.to_customer() for r in s.scalars(stmt).all()]
        except SQLAlchemyError as e:
            raise StorageError(f"Listing customers failed: {e}") from e
