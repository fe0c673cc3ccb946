from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from ..services.amounts import CalculatedAmounts, RoundingPolicy, TaxClass, TaxMode


class LineItemIn(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    quantity: Decimal = Field(gt=0, max_digits=12, decimal_places=3)
    unit: str | None = None
    unit_price: Decimal = Field(ge=0, max_digits=14, decimal_places=2)
    tax_class: TaxClass = TaxClass.TAXABLE
    tax_rate: Decimal | None = Field(
        default=None, ge=0, max_digits=5, decimal_places=2
    )
    remarks: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Item name is required.")
        return value


class TaxSettingsIn(BaseModel):
    tax_mode: TaxMode | None = None
    tax_rate: Decimal | None = Field(
        default=None, ge=0, max_digits=5, decimal_places=2
    )
    rounding_policy: RoundingPolicy | None = None


class DocumentIn(TaxSettingsIn):
    subject: str = Field(min_length=1, max_length=255)
    honorific: str | None = None
    issue_date: date | None = None
    remarks: str | None = None
    customer_id: int | None = None
    supplier_id: int | None = None
    valid_until: date | None = None
    due_date: date | None = None
    delivery_date: date | None = None
    delivery_location: str | None = None
    payment_terms: str | None = None
    items: list[LineItemIn] = Field(default_factory=list)


class CalculationIn(TaxSettingsIn):
    items: list[LineItemIn] = Field(default_factory=list)


class StatusIn(BaseModel):
    status: str


class FromEstimateIn(BaseModel):
    estimate_id: int
    supplier_id: int | None = None


class LineItemRead(BaseModel):
    id: int
    name: str
    quantity: Decimal
    unit: str | None = None
    unit_price: Decimal
    tax_class: str
    tax_rate: Decimal | None = None
    amount: Decimal
    remarks: str | None = None
    display_order: int

    model_config = {"from_attributes": True}


class AmountsRead(BaseModel):
    subtotal: Decimal
    tax_amount: Decimal
    tax_amount_8: Decimal
    tax_amount_10: Decimal
    tax_breakdown: dict[str, Decimal]
    total_amount: Decimal

    @classmethod
    def from_calculated(cls, amounts: CalculatedAmounts) -> "AmountsRead":
        return cls(
            subtotal=amounts.subtotal,
            tax_amount=amounts.tax_amount,
            tax_amount_8=amounts.tax_amount_8,
            tax_amount_10=amounts.tax_amount_10,
            tax_breakdown=amounts.breakdown(),
            total_amount=amounts.total_amount,
        )


class DocumentRead(BaseModel):
    id: int
    number: str
    subject: str
    honorific: str | None = None
    issue_date: date
    status: str
    remarks: str | None = None
    customer_id: int | None = None
    supplier_id: int | None = None
    estimate_id: int | None = None
    counterparty_name: str | None = None
    valid_until: date | None = None
    due_date: date | None = None
    delivery_date: date | None = None
    delivery_location: str | None = None
    payment_terms: str | None = None
    tax_mode: str
    tax_rate: Decimal
    rounding_policy: str
    subtotal: Decimal
    tax_amount: Decimal
    tax_amount_8: Decimal
    tax_amount_10: Decimal
    tax_breakdown: dict[str, Decimal]
    total_amount: Decimal
    items: list[LineItemRead] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class DocumentPage(BaseModel):
    documents: list[DocumentRead]
    total: int
    page: int
    total_pages: int
