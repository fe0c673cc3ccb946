from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..db import get_db
from ..models import Company
from ..schemas import CompanyIn, CompanyRead
from ..services.documents import current_company

router = APIRouter()


@router.get("/api/company", response_model=CompanyRead)
def get_company(db: Session = Depends(get_db)) -> CompanyRead:
    company = current_company(db)
    if company is None:
        raise HTTPException(status_code=404, detail=["Company settings not found."])
    return company


@router.put("/api/company", response_model=CompanyRead)
def upsert_company(payload: CompanyIn, db: Session = Depends(get_db)) -> CompanyRead:
    company = current_company(db)
    if company is None:
        company = Company()
        db.add(company)
    for field, value in payload.model_dump(mode="json").items():
        setattr(company, field, value)
    company.default_tax_rate = payload.default_tax_rate
    db.commit()
    db.refresh(company)
    return company
