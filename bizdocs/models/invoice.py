from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base
from .customer import Customer
from .mixins import DocumentItemMixin, DocumentMixin


class Invoice(DocumentMixin, Base):
    __tablename__ = "invoices"

    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id"), nullable=False)
    estimate_id: Mapped[int | None] = mapped_column(ForeignKey("estimates.id"))
    due_date: Mapped[date] = mapped_column(Date, nullable=False)

    counterparty: Mapped[Customer] = relationship(Customer)
    items: Mapped[list["InvoiceItem"]] = relationship(
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.display_order",
    )


class InvoiceItem(DocumentItemMixin, Base):
    __tablename__ = "invoice_items"

    invoice_id: Mapped[int] = mapped_column(
        ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False
    )
    tax_rate: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))

    document: Mapped[Invoice] = relationship(back_populates="items")
