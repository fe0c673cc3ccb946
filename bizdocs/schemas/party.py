from datetime import datetime

from pydantic import BaseModel, Field


class PartyIn(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=255)
    honorific: str | None = None
    postal_code: str | None = None
    address: str | None = None
    building: str | None = None
    representative: str | None = None
    phone: str | None = None
    fax: str | None = None
    remarks: str | None = None
    is_active: bool = True


class PartyRead(PartyIn):
    id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
