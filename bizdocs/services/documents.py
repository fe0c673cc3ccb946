import calendar
import logging
import math
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import settings
from ..models import Company
from ..schemas import DocumentIn, LineItemIn
from .amounts import (
    CENT,
    CalculatedAmounts,
    DocumentTaxSettings,
    LineItem,
    RoundingPolicy,
    TaxMode,
    calculate_amounts,
    to_decimal,
)
from .errors import DocumentConflict, DocumentNotFound, DocumentValidationError
from .kinds import ESTIMATE, INVOICE, KINDS, PURCHASE_ORDER, DocumentKind
from .numbering import next_document_number

logger = logging.getLogger(__name__)

COPY_SUFFIX = " (copy)"
REQUIRED_FIELDS = ("due_date",)


def _money(value) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def end_of_next_month(on: date) -> date:
    year, month = (on.year + 1, 1) if on.month == 12 else (on.year, on.month + 1)
    return date(year, month, calendar.monthrange(year, month)[1])


def current_company(db: Session) -> Company | None:
    return db.execute(select(Company).order_by(Company.id)).scalars().first()


def company_defaults(db: Session) -> DocumentTaxSettings:
    company = current_company(db)
    if company:
        return DocumentTaxSettings(
            tax_mode=TaxMode(company.default_tax_mode),
            tax_rate=to_decimal(company.default_tax_rate),
            rounding_policy=RoundingPolicy(company.default_rounding_policy),
        )
    return DocumentTaxSettings(
        tax_mode=TaxMode(settings.default_tax_mode),
        tax_rate=to_decimal(settings.default_tax_rate),
        rounding_policy=RoundingPolicy(settings.default_rounding_policy),
    )


def resolve_tax_settings(
    payload, fallback: DocumentTaxSettings
) -> DocumentTaxSettings:
    rate = payload.tax_rate
    return DocumentTaxSettings(
        tax_mode=payload.tax_mode or fallback.tax_mode,
        tax_rate=rate if rate is not None else fallback.tax_rate,
        rounding_policy=payload.rounding_policy or fallback.rounding_policy,
    )


def document_tax_settings(document) -> DocumentTaxSettings:
    return DocumentTaxSettings(
        tax_mode=TaxMode(document.tax_mode),
        tax_rate=to_decimal(document.tax_rate),
        rounding_policy=RoundingPolicy(document.rounding_policy),
    )


def line_items(document) -> list[LineItem]:
    return [
        LineItem(
            name=item.name,
            quantity=to_decimal(item.quantity),
            unit_price=to_decimal(item.unit_price),
            tax_class=item.tax_class,
            tax_rate=getattr(item, "tax_rate", None),
            unit=item.unit,
            remarks=item.remarks,
        )
        for item in document.items
    ]


def calculate_document(kind: DocumentKind, document) -> CalculatedAmounts:
    return calculate_amounts(
        line_items(document), document_tax_settings(document), kind.profile
    )


def preview_amounts(
    kind: DocumentKind, items: list[LineItemIn], tax: DocumentTaxSettings
) -> CalculatedAmounts:
    """Calculate amounts for an unsaved form; nothing is persisted."""
    lines = [
        LineItem(
            name=item.name,
            quantity=item.quantity,
            unit_price=item.unit_price,
            tax_class=item.tax_class,
            tax_rate=item.tax_rate,
        )
        for item in items
    ]
    return calculate_amounts(lines, tax, kind.profile)


def store_snapshot(kind: DocumentKind, document) -> CalculatedAmounts:
    amounts = calculate_document(kind, document)
    document.subtotal = _money(amounts.subtotal)
    document.tax_amount = _money(amounts.tax_amount)
    document.tax_amount_8 = _money(amounts.tax_amount_8)
    document.tax_amount_10 = _money(amounts.tax_amount_10)
    document.tax_breakdown = amounts.breakdown()
    document.total_amount = _money(amounts.total_amount)
    return amounts


def _build_item(kind: DocumentKind, index: int, **fields):
    if not kind.item_has_tax_rate:
        fields.pop("tax_rate", None)
    return kind.item_model(display_order=index, **fields)


def _items_from_payload(kind: DocumentKind, items: list[LineItemIn]) -> list:
    built = []
    for index, item in enumerate(items):
        built.append(
            _build_item(
                kind,
                index,
                name=item.name,
                quantity=item.quantity,
                unit=item.unit,
                unit_price=item.unit_price,
                tax_class=item.tax_class.value,
                tax_rate=item.tax_rate,
                amount=_money(item.quantity * item.unit_price),
                remarks=item.remarks,
            )
        )
    return built


def _copy_items(
    kind: DocumentKind, source_items, tax_rate: Decimal | None = None
) -> list:
    copied = []
    for index, item in enumerate(source_items):
        rate = getattr(item, "tax_rate", None)
        copied.append(
            _build_item(
                kind,
                index,
                name=item.name,
                quantity=item.quantity,
                unit=item.unit,
                unit_price=item.unit_price,
                tax_class=item.tax_class,
                tax_rate=rate if rate is not None else tax_rate,
                amount=item.amount,
                remarks=item.remarks,
            )
        )
    return copied


def _validate(
    db: Session, kind: DocumentKind, payload: DocumentIn
) -> tuple[int | None, list[str]]:
    errors: list[str] = []
    counterparty_id = getattr(payload, kind.counterparty_field)
    label = kind.counterparty_model.__name__
    if not counterparty_id:
        errors.append(f"{label} is required.")
    else:
        party = db.get(kind.counterparty_model, counterparty_id)
        if party is None:
            errors.append(f"{label} not found.")
        elif not party.is_active:
            errors.append(f"{label} is inactive.")
    if not payload.items:
        errors.append("At least one item is required.")
    return counterparty_id, errors


def _apply_header(kind: DocumentKind, document, payload: DocumentIn) -> None:
    """Replace header fields; NOT NULL dates keep their value when omitted."""
    document.subject = payload.subject.strip()
    document.honorific = payload.honorific
    document.remarks = payload.remarks
    if payload.issue_date is not None:
        document.issue_date = payload.issue_date
    for field in kind.extra_fields:
        value = getattr(payload, field)
        if value is None and field in REQUIRED_FIELDS:
            continue
        setattr(document, field, value)


def _commit(db: Session, action: str, kind: DocumentKind) -> None:
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("%s %s failed", kind.label, action)
        raise


def get_document(db: Session, kind: DocumentKind, document_id: int):
    document = db.get(kind.model, document_id)
    if document is None:
        raise DocumentNotFound(f"{kind.label} {document_id} not found.")
    return document


def display_status(kind: DocumentKind, document, today: date | None = None) -> str:
    """Invoices that were sent and are past their due date read as overdue."""
    today = today or date.today()
    if (
        kind is INVOICE
        and document.status == "sent"
        and document.due_date is not None
        and document.due_date < today
    ):
        return "overdue"
    return document.status


def list_documents(
    db: Session,
    kind: DocumentKind,
    q: str | None = None,
    status: str | None = None,
    counterparty_id: int | None = None,
    page: int = 1,
    limit: int | None = None,
) -> tuple[list, int]:
    model = kind.model
    limit = limit or settings.page_size
    page = max(page, 1)
    filters = []
    if status == "overdue" and kind is INVOICE:
        filters.append(model.status == "sent")
        filters.append(model.due_date < date.today())
    elif status and status != "all":
        filters.append(model.status == status)
    if counterparty_id:
        filters.append(getattr(model, kind.counterparty_field) == counterparty_id)
    if q:
        like = f"%{q}%"
        filters.append(
            or_(
                model.number.ilike(like),
                model.subject.ilike(like),
                kind.counterparty_model.name.ilike(like),
            )
        )

    base = (
        select(model)
        .join(kind.counterparty_model, model.counterparty)
        .where(*filters)
    )
    total = db.execute(
        select(func.count()).select_from(base.subquery())
    ).scalar_one()
    documents = (
        db.execute(
            base.order_by(model.created_at.desc(), model.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        .scalars()
        .all()
    )
    return list(documents), total


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


def create_document(
    db: Session, kind: DocumentKind, payload: DocumentIn, today: date | None = None
):
    today = today or date.today()
    counterparty_id, errors = _validate(db, kind, payload)
    if errors:
        raise DocumentValidationError(errors)

    tax = resolve_tax_settings(payload, company_defaults(db))
    document = kind.model(
        number=next_document_number(db, kind, on=today),
        issue_date=today,
        status="draft",
        tax_mode=TaxMode(tax.tax_mode).value,
        tax_rate=tax.tax_rate,
        rounding_policy=RoundingPolicy(tax.rounding_policy).value,
    )
    setattr(document, kind.counterparty_field, counterparty_id)
    _apply_header(kind, document, payload)
    if document.honorific is None:
        document.honorific = settings.default_honorific
    if kind is INVOICE:
        if document.due_date is None:
            document.due_date = end_of_next_month(document.issue_date)
        if payload.remarks is None:
            company = current_company(db)
            document.remarks = company.invoice_remarks if company else None
    document.items = _items_from_payload(kind, payload.items)
    store_snapshot(kind, document)

    db.add(document)
    _commit(db, "creation", kind)
    db.refresh(document)
    logger.info("Created %s %s", kind.name, document.number)
    return document


def update_document(db: Session, kind: DocumentKind, document, payload: DocumentIn):
    counterparty_id, errors = _validate(db, kind, payload)
    if errors:
        raise DocumentValidationError(errors)

    tax = resolve_tax_settings(payload, document_tax_settings(document))
    setattr(document, kind.counterparty_field, counterparty_id)
    _apply_header(kind, document, payload)
    document.tax_mode = TaxMode(tax.tax_mode).value
    document.tax_rate = tax.tax_rate
    document.rounding_policy = RoundingPolicy(tax.rounding_policy).value
    document.items = _items_from_payload(kind, payload.items)
    store_snapshot(kind, document)

    _commit(db, "update", kind)
    db.refresh(document)
    logger.info("Updated %s %s", kind.name, document.number)
    return document


def delete_document(db: Session, kind: DocumentKind, document) -> None:
    if kind is ESTIMATE:
        for target in KINDS.values():
            if target is ESTIMATE:
                continue
            linked = db.execute(
                select(func.count())
                .select_from(target.model)
                .where(target.model.estimate_id == document.id)
            ).scalar_one()
            if linked:
                raise DocumentConflict(
                    f"Cannot delete: estimate is referenced by {target.label.lower()}s."
                )
    number = document.number
    db.delete(document)
    _commit(db, "deletion", kind)
    logger.info("Deleted %s %s", kind.name, number)


def duplicate_document(
    db: Session, kind: DocumentKind, document, today: date | None = None
):
    today = today or date.today()
    copy = kind.model(
        number=next_document_number(db, kind, on=today),
        subject=f"{document.subject}{COPY_SUFFIX}",
        honorific=document.honorific,
        issue_date=today,
        status="draft",
        remarks=document.remarks,
        tax_mode=document.tax_mode,
        tax_rate=document.tax_rate,
        rounding_policy=document.rounding_policy,
    )
    setattr(
        copy, kind.counterparty_field, getattr(document, kind.counterparty_field)
    )
    for field in kind.extra_fields:
        setattr(copy, field, getattr(document, field))
    copy.items = _copy_items(kind, document.items)
    store_snapshot(kind, copy)

    db.add(copy)
    _commit(db, "duplication", kind)
    db.refresh(copy)
    logger.info("Duplicated %s %s as %s", kind.name, document.number, copy.number)
    return copy


def set_status(db: Session, kind: DocumentKind, document, status: str):
    if status not in kind.statuses:
        allowed = ", ".join(kind.statuses)
        raise DocumentValidationError([f"Status must be one of: {allowed}."])
    document.status = status
    _commit(db, "status change", kind)
    db.refresh(document)
    return document


def convert_estimate(
    db: Session,
    estimate,
    target: DocumentKind,
    supplier_id: int | None = None,
    today: date | None = None,
):
    """Create an invoice, purchase order or delivery note from an estimate."""
    if target is ESTIMATE:
        raise DocumentValidationError(
            ["An estimate cannot be converted to an estimate."]
        )
    today = today or date.today()

    existing = db.execute(
        select(target.model).where(target.model.estimate_id == estimate.id)
    ).scalars().first()
    if existing is not None:
        raise DocumentConflict(
            f"A {target.label.lower()} was already created from this estimate."
        )

    if target is PURCHASE_ORDER:
        if not supplier_id:
            raise DocumentValidationError(["Supplier is required."])
        supplier = db.get(target.counterparty_model, supplier_id)
        if supplier is None:
            raise DocumentValidationError(["Supplier not found."])
        if not supplier.is_active:
            raise DocumentValidationError(["Supplier is inactive."])
        counterparty_id = supplier_id
    else:
        counterparty_id = estimate.customer_id

    document = target.model(
        number=next_document_number(db, target, on=today),
        estimate_id=estimate.id,
        subject=estimate.subject,
        honorific=estimate.honorific,
        issue_date=today,
        status="draft",
        remarks=estimate.remarks,
        tax_mode=estimate.tax_mode,
        tax_rate=estimate.tax_rate,
        rounding_policy=estimate.rounding_policy,
    )
    setattr(document, target.counterparty_field, counterparty_id)
    if target is INVOICE:
        document.due_date = end_of_next_month(today)
    elif hasattr(document, "delivery_date"):
        document.delivery_date = today
    document.items = _copy_items(target, estimate.items, tax_rate=estimate.tax_rate)
    store_snapshot(target, document)

    db.add(document)
    _commit(db, "conversion", target)
    db.refresh(document)
    logger.info(
        "Converted estimate %s to %s %s", estimate.number, target.name, document.number
    )
    return document

