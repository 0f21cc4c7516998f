from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from app.custreg.models import Base


@dataclass(frozen=True)
class Customer:
    """
    Plain customer value. Built fresh for every query result and every
    submission; `phone_number` is the normalized digit-only key.
    """
    phone_number: str
    name: str
    address: str
    email: str = ""


class CustomerRow(Base):
    __tablename__ = "customers"

    phone: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str | None] = mapped_column(Text, nullable=True)

    def to_customer(self) -> Customer:
        return Customer(
            phone_number=self.phone,
            name=self.name,
            address=self.address,
            email=self.email or "",
        )


CUSTOMER_COLUMNS = ("phone", "name", "address", "email")
customers_table = CustomerRow.__table__
