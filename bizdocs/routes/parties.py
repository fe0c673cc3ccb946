from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..db import get_db
from ..models import Customer, Supplier
from ..schemas import PartyIn, PartyRead
from ..services.kinds import KINDS

templates = Jinja2Templates(directory="bizdocs/templates")


def _document_usage(db: Session, model, party_id: int) -> int:
    used = 0
    for kind in KINDS.values():
        if kind.counterparty_model is not model:
            continue
        used += db.execute(
            select(func.count())
            .select_from(kind.model)
            .where(getattr(kind.model, kind.counterparty_field) == party_id)
        ).scalar_one()
    return used


def _search(db: Session, model, q: str | None, active: bool | None) -> list:
    query = select(model).order_by(model.name)
    if q:
        like = f"%{q}%"
        query = query.where(or_(model.name.ilike(like), model.code.ilike(like)))
    if active is not None:
        query = query.where(model.is_active.is_(active))
    return list(db.execute(query).scalars().all())


def build_router(model, slug: str, label: str) -> APIRouter:
    """CRUD endpoints for a document counterparty (customers or suppliers)."""
    router = APIRouter()
    api = f"/api/{slug}"

    def _get_or_404(db: Session, party_id: int):
        party = db.get(model, party_id)
        if party is None:
            raise HTTPException(status_code=404, detail=[f"{label} not found."])
        return party

    def _save(db: Session) -> None:
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise HTTPException(
                status_code=400, detail=[f"{label} code already exists."]
            ) from exc

    @router.get(api, response_model=list[PartyRead])
    def list_parties(
        q: str | None = None,
        active: bool | None = None,
        db: Session = Depends(get_db),
    ) -> list[PartyRead]:
        return _search(db, model, q, active)

    @router.post(api, response_model=PartyRead, status_code=201)
    def create_party(payload: PartyIn, db: Session = Depends(get_db)) -> PartyRead:
        party = model(**payload.model_dump())
        db.add(party)
        _save(db)
        db.refresh(party)
        return party

    @router.get(f"{api}/{{party_id}}", response_model=PartyRead)
    def get_party(party_id: int, db: Session = Depends(get_db)) -> PartyRead:
        return _get_or_404(db, party_id)

    @router.put(f"{api}/{{party_id}}", response_model=PartyRead)
    def update_party(
        party_id: int, payload: PartyIn, db: Session = Depends(get_db)
    ) -> PartyRead:
        party = _get_or_404(db, party_id)
        if party.is_active and not payload.is_active:
            if _document_usage(db, model, party.id):
                raise HTTPException(
                    status_code=400, detail=["Cannot deactivate: in use by documents."]
                )
        for field, value in payload.model_dump().items():
            setattr(party, field, value)
        _save(db)
        db.refresh(party)
        return party

    @router.post(f"{api}/{{party_id}}/deactivate", response_model=PartyRead)
    def deactivate_party(party_id: int, db: Session = Depends(get_db)) -> PartyRead:
        party = _get_or_404(db, party_id)
        if _document_usage(db, model, party.id):
            raise HTTPException(
                status_code=400, detail=["Cannot deactivate: in use by documents."]
            )
        party.is_active = False
        db.commit()
        db.refresh(party)
        return party

    @router.delete(f"{api}/{{party_id}}", status_code=204)
    def delete_party(party_id: int, db: Session = Depends(get_db)) -> None:
        party = _get_or_404(db, party_id)
        if _document_usage(db, model, party.id):
            raise HTTPException(
                status_code=400, detail=["Cannot delete: in use by documents."]
            )
        db.delete(party)
        db.commit()

    @router.get(f"/{slug}", response_class=HTMLResponse)
    def list_page(
        request: Request, q: str | None = None, db: Session = Depends(get_db)
    ) -> HTMLResponse:
        return templates.TemplateResponse(
            request,
            "parties/list.html",
            {
                "request": request,
                "label": label,
                "parties": _search(db, model, q, None),
                "q": q or "",
            },
        )

    return router


customers_router = build_router(Customer, "customers", "Customer")
suppliers_router = build_router(Supplier, "suppliers", "Supplier")
