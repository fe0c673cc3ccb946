from dataclasses import dataclass

from ..models import (
    Customer,
    DeliveryNote,
    DeliveryNoteItem,
    Estimate,
    EstimateItem,
    Invoice,
    InvoiceItem,
    PurchaseOrder,
    PurchaseOrderItem,
    Supplier,
)
from .amounts import CalculatorProfile, profile_for


@dataclass(frozen=True)
class DocumentKind:
    name: str
    slug: str
    label: str
    model: type
    item_model: type
    counterparty_model: type
    counterparty_field: str
    prefix: str
    statuses: tuple[str, ...]
    extra_fields: tuple[str, ...] = ()
    item_has_tax_rate: bool = True

    @property
    def profile(self) -> CalculatorProfile:
        return profile_for(self.name)


ESTIMATE = DocumentKind(
    name="estimate",
    slug="estimates",
    label="Estimate",
    model=Estimate,
    item_model=EstimateItem,
    counterparty_model=Customer,
    counterparty_field="customer_id",
    prefix="EST-",
    statuses=("draft", "sent", "accepted", "rejected", "expired"),
    extra_fields=("valid_until",),
    item_has_tax_rate=False,
)

INVOICE = DocumentKind(
    name="invoice",
    slug="invoices",
    label="Invoice",
    model=Invoice,
    item_model=InvoiceItem,
    counterparty_model=Customer,
    counterparty_field="customer_id",
    prefix="INV-",
    statuses=("draft", "sent", "paid", "cancelled"),
    extra_fields=("due_date",),
)

PURCHASE_ORDER = DocumentKind(
    name="purchase_order",
    slug="purchase-orders",
    label="Purchase order",
    model=PurchaseOrder,
    item_model=PurchaseOrderItem,
    counterparty_model=Supplier,
    counterparty_field="supplier_id",
    prefix="PO-",
    statuses=("draft", "sent", "accepted", "cancelled"),
    extra_fields=("delivery_date", "delivery_location", "payment_terms"),
)

DELIVERY_NOTE = DocumentKind(
    name="delivery_note",
    slug="delivery-notes",
    label="Delivery note",
    model=DeliveryNote,
    item_model=DeliveryNoteItem,
    counterparty_model=Customer,
    counterparty_field="customer_id",
    prefix="DN-",
    statuses=("draft", "sent"),
    extra_fields=("delivery_date",),
)

KINDS: dict[str, DocumentKind] = {
    kind.name: kind for kind in (ESTIMATE, INVOICE, PURCHASE_ORDER, DELIVERY_NOTE)
}
