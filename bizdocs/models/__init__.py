from .base import Base
from .company import Company
from .customer import Customer
from .delivery_note import DeliveryNote, DeliveryNoteItem
from .document_sequence import DocumentSequence
from .estimate import Estimate, EstimateItem
from .invoice import Invoice, InvoiceItem
from .purchase_order import PurchaseOrder, PurchaseOrderItem
from .supplier import Supplier

__all__ = [
    "Base",
    "Company",
    "Customer",
    "DeliveryNote",
    "DeliveryNoteItem",
    "DocumentSequence",
    "Estimate",
    "EstimateItem",
    "Invoice",
    "InvoiceItem",
    "PurchaseOrder",
    "PurchaseOrderItem",
    "Supplier",
]
