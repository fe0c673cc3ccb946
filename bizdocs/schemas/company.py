from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from ..services.amounts import RoundingPolicy, TaxMode


class CompanyIn(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    postal_code: str | None = None
    address: str | None = None
    building: str | None = None
    representative: str | None = None
    phone: str | None = None
    fax: str | None = None
    qualified_invoice_number: str | None = None
    bank_name: str | None = None
    branch_name: str | None = None
    account_type: str | None = None
    account_number: str | None = None
    account_holder: str | None = None
    default_tax_mode: TaxMode = TaxMode.EXCLUSIVE
    default_tax_rate: Decimal = Field(
        default=Decimal("10"), ge=0, max_digits=5, decimal_places=2
    )
    default_rounding_policy: RoundingPolicy = RoundingPolicy.FLOOR
    invoice_remarks: str | None = None


class CompanyRead(CompanyIn):
    id: int
    default_tax_mode: str
    default_rounding_policy: str
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
