from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base
from .customer import Customer
from .mixins import DocumentItemMixin, DocumentMixin


class DeliveryNote(DocumentMixin, Base):
    __tablename__ = "delivery_notes"

    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id"), nullable=False)
    estimate_id: Mapped[int | None] = mapped_column(ForeignKey("estimates.id"))
    delivery_date: Mapped[date | None] = mapped_column(Date)

    counterparty: Mapped[Customer] = relationship(Customer)
    items: Mapped[list["DeliveryNoteItem"]] = relationship(
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="DeliveryNoteItem.display_order",
    )


class DeliveryNoteItem(DocumentItemMixin, Base):
    __tablename__ = "delivery_note_items"

    delivery_note_id: Mapped[int] = mapped_column(
        ForeignKey("delivery_notes.id", ondelete="CASCADE"), nullable=False
    )
    tax_rate: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))

    document: Mapped[DeliveryNote] = relationship(back_populates="items")
