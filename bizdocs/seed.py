from __future__ import annotations

from decimal import Decimal

from sqlalchemy import select

from .db import SessionLocal
from .models import Company, Customer, Supplier


SEED_COMPANY = {
    "name": "Example Trading Co.",
    "default_tax_mode": "exclusive",
    "default_tax_rate": Decimal("10"),
    "default_rounding_policy": "floor",
    "invoice_remarks": "Bank transfer fees are to be borne by the customer.",
}

SEED_CUSTOMERS = [
    {"code": "C0001", "name": "Sample Customer Ltd."},
]

SEED_SUPPLIERS = [
    {"code": "S0001", "name": "Sample Supplier Ltd."},
]


def _seed_parties(session, model, entries: list[dict]) -> int:
    created = 0
    for entry in entries:
        exists = session.execute(
            select(model).where(model.code == entry["code"])
        ).scalar_one_or_none()
        if exists:
            continue
        session.add(model(is_active=True, **entry))
        created += 1
    return created


def seed() -> dict[str, int]:
    counts = {"company": 0, "customers": 0, "suppliers": 0}
    with SessionLocal() as session:
        if session.execute(select(Company)).scalars().first() is None:
            session.add(Company(**SEED_COMPANY))
            counts["company"] = 1
        counts["customers"] = _seed_parties(session, Customer, SEED_CUSTOMERS)
        counts["suppliers"] = _seed_parties(session, Supplier, SEED_SUPPLIERS)
        if any(counts.values()):
            session.commit()
    return counts


def main() -> None:
    counts = seed()
    print(
        "Seeded company: {company}, customers: {customers}, "
        "suppliers: {suppliers}".format(**counts)
    )


if __name__ == "__main__":
    main()
