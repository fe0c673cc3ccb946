from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base
from .mixins import DocumentItemMixin, DocumentMixin
from .supplier import Supplier


class PurchaseOrder(DocumentMixin, Base):
    __tablename__ = "purchase_orders"

    supplier_id: Mapped[int] = mapped_column(ForeignKey("suppliers.id"), nullable=False)
    estimate_id: Mapped[int | None] = mapped_column(ForeignKey("estimates.id"))
    delivery_date: Mapped[date | None] = mapped_column(Date)
    delivery_location: Mapped[str | None] = mapped_column(String(255))
    payment_terms: Mapped[str | None] = mapped_column(String(255))

    counterparty: Mapped[Supplier] = relationship(Supplier)
    items: Mapped[list["PurchaseOrderItem"]] = relationship(
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="PurchaseOrderItem.display_order",
    )


class PurchaseOrderItem(DocumentItemMixin, Base):
    __tablename__ = "purchase_order_items"

    purchase_order_id: Mapped[int] = mapped_column(
        ForeignKey("purchase_orders.id", ondelete="CASCADE"), nullable=False
    )
    tax_rate: Mapped[Decimal | None] = mapped_column(Numeric(5, 2))

    document: Mapped[PurchaseOrder] = relationship(back_populates="items")
