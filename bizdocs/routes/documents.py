from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from ..config import settings
from ..db import get_db
from ..schemas import (
    AmountsRead,
    CalculationIn,
    DocumentIn,
    DocumentPage,
    DocumentRead,
    FromEstimateIn,
    StatusIn,
)
from ..services import documents as documents_service
from ..services.errors import DocumentError
from ..services.kinds import ESTIMATE, DocumentKind

templates = Jinja2Templates(directory="bizdocs/templates")


def _http_error(exc: DocumentError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.errors)


def _read(kind: DocumentKind, document, today: date | None = None) -> DocumentRead:
    data = DocumentRead.model_validate(document)
    return data.model_copy(
        update={
            "counterparty_name": document.counterparty.name,
            "status": documents_service.display_status(kind, document, today),
        }
    )


def build_router(kind: DocumentKind) -> APIRouter:
    """JSON endpoints and HTML pages for one document kind."""
    router = APIRouter()
    api = f"/api/{kind.slug}"

    def _get_or_404(db: Session, document_id: int):
        try:
            return documents_service.get_document(db, kind, document_id)
        except DocumentError as exc:
            raise _http_error(exc) from exc

    @router.get(api, response_model=DocumentPage)
    def list_documents(
        q: str | None = None,
        status: str | None = None,
        counterparty_id: int | None = None,
        page: int = Query(1, ge=1),
        limit: int = Query(settings.page_size, ge=1, le=100),
        db: Session = Depends(get_db),
    ) -> DocumentPage:
        rows, total = documents_service.list_documents(
            db,
            kind,
            q=q,
            status=status,
            counterparty_id=counterparty_id,
            page=page,
            limit=limit,
        )
        return DocumentPage(
            documents=[_read(kind, row) for row in rows],
            total=total,
            page=page,
            total_pages=documents_service.total_pages(total, limit),
        )

    @router.post(api, response_model=DocumentRead, status_code=201)
    def create_document(
        payload: DocumentIn, db: Session = Depends(get_db)
    ) -> DocumentRead:
        try:
            document = documents_service.create_document(db, kind, payload)
        except DocumentError as exc:
            raise _http_error(exc) from exc
        return _read(kind, document)

    @router.post(f"{api}/calculate", response_model=AmountsRead)
    def calculate(
        payload: CalculationIn, db: Session = Depends(get_db)
    ) -> AmountsRead:
        tax = documents_service.resolve_tax_settings(
            payload, documents_service.company_defaults(db)
        )
        amounts = documents_service.preview_amounts(kind, payload.items, tax)
        return AmountsRead.from_calculated(amounts)

    if kind is not ESTIMATE:

        @router.post(
            f"{api}/from-estimate", response_model=DocumentRead, status_code=201
        )
        def from_estimate(
            payload: FromEstimateIn, db: Session = Depends(get_db)
        ) -> DocumentRead:
            try:
                estimate = documents_service.get_document(
                    db, ESTIMATE, payload.estimate_id
                )
                document = documents_service.convert_estimate(
                    db, estimate, kind, supplier_id=payload.supplier_id
                )
            except DocumentError as exc:
                raise _http_error(exc) from exc
            return _read(kind, document)

    @router.get(f"{api}/{{document_id}}", response_model=DocumentRead)
    def get_document(document_id: int, db: Session = Depends(get_db)) -> DocumentRead:
        return _read(kind, _get_or_404(db, document_id))

    @router.put(f"{api}/{{document_id}}", response_model=DocumentRead)
    def update_document(
        document_id: int, payload: DocumentIn, db: Session = Depends(get_db)
    ) -> DocumentRead:
        document = _get_or_404(db, document_id)
        try:
            document = documents_service.update_document(db, kind, document, payload)
        except DocumentError as exc:
            raise _http_error(exc) from exc
        return _read(kind, document)

    @router.delete(f"{api}/{{document_id}}", status_code=204)
    def delete_document(document_id: int, db: Session = Depends(get_db)) -> None:
        document = _get_or_404(db, document_id)
        try:
            documents_service.delete_document(db, kind, document)
        except DocumentError as exc:
            raise _http_error(exc) from exc

    @router.post(
        f"{api}/{{document_id}}/duplicate", response_model=DocumentRead, status_code=201
    )
    def duplicate_document(
        document_id: int, db: Session = Depends(get_db)
    ) -> DocumentRead:
        document = _get_or_404(db, document_id)
        copy = documents_service.duplicate_document(db, kind, document)
        return _read(kind, copy)

    @router.put(f"{api}/{{document_id}}/status", response_model=DocumentRead)
    def update_status(
        document_id: int, payload: StatusIn, db: Session = Depends(get_db)
    ) -> DocumentRead:
        document = _get_or_404(db, document_id)
        try:
            document = documents_service.set_status(db, kind, document, payload.status)
        except DocumentError as exc:
            raise _http_error(exc) from exc
        return _read(kind, document)

    @router.get(f"/{kind.slug}", response_class=HTMLResponse)
    def list_page(
        request: Request,
        q: str | None = None,
        status: str | None = None,
        page: int = Query(1, ge=1),
        db: Session = Depends(get_db),
    ) -> HTMLResponse:
        rows, total = documents_service.list_documents(
            db, kind, q=q, status=status, page=page
        )
        return templates.TemplateResponse(
            request,
            "documents/list.html",
            {
                "request": request,
                "kind": kind,
                "rows": [_read(kind, row) for row in rows],
                "total": total,
                "page": page,
                "total_pages": documents_service.total_pages(
                    total, settings.page_size
                ),
                "q": q or "",
                "status": status or "all",
            },
        )

    @router.get(f"/{kind.slug}/{{document_id}}", response_class=HTMLResponse)
    def detail_page(
        document_id: int, request: Request, db: Session = Depends(get_db)
    ) -> HTMLResponse:
        document = db.get(kind.model, document_id)
        if not document:
            return templates.TemplateResponse(
                request,
                "not_found.html",
                {"request": request, "label": kind.label, "object_id": document_id},
                status_code=404,
            )
        return templates.TemplateResponse(
            request,
            "documents/detail.html",
            {"request": request, "kind": kind, "document": _read(kind, document)},
        )

    return router
