from datetime import date

from sqlalchemy import Date, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base
from .customer import Customer
from .mixins import DocumentItemMixin, DocumentMixin


class Estimate(DocumentMixin, Base):
    __tablename__ = "estimates"

    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id"), nullable=False)
    valid_until: Mapped[date | None] = mapped_column(Date)

    counterparty: Mapped[Customer] = relationship(Customer)
    items: Mapped[list["EstimateItem"]] = relationship(
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="EstimateItem.display_order",
    )


class EstimateItem(DocumentItemMixin, Base):
    """Estimate lines always use the document tax rate."""

    __tablename__ = "estimate_items"

    estimate_id: Mapped[int] = mapped_column(
        ForeignKey("estimates.id", ondelete="CASCADE"), nullable=False
    )

    document: Mapped[Estimate] = relationship(back_populates="items")
