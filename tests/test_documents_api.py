from datetime import date, timedelta
from decimal import Decimal

import pytest

from bizdocs.models import Invoice


def _payload(customer_id, **overrides):
    payload = {
        "customer_id": customer_id,
        "subject": "Office fit-out",
        "tax_mode": "exclusive",
        "tax_rate": "10",
        "rounding_policy": "floor",
        "items": [
            {
                "name": "Design work",
                "quantity": "1",
                "unit_price": "1000000",
                "tax_class": "taxable",
                "tax_rate": "10",
            },
            {
                "name": "Catering",
                "quantity": "2",
                "unit_price": "250000",
                "tax_class": "taxable",
                "tax_rate": "8",
            },
        ],
    }
    payload.update(overrides)
    return payload


def _dec(value):
    return Decimal(str(value))


def test_create_invoice_stores_calculation_snapshot(client, db_session, customer):
    response = client.post("/api/invoices", json=_payload(customer.id))

    assert response.status_code == 201
    data = response.json()
    assert data["number"].startswith("INV-")
    assert data["status"] == "draft"
    assert data["counterparty_name"] == "Acme Builders"
    assert _dec(data["subtotal"]) == Decimal("1500000")
    assert _dec(data["tax_amount_10"]) == Decimal("100000")
    assert _dec(data["tax_amount_8"]) == Decimal("40000")
    assert _dec(data["tax_amount"]) == Decimal("140000")
    assert _dec(data["total_amount"]) == Decimal("1640000")
    assert [item["name"] for item in data["items"]] == ["Design work", "Catering"]
    assert _dec(data["items"][1]["amount"]) == Decimal("500000")

    invoice = db_session.get(Invoice, data["id"])
    assert invoice.total_amount == Decimal("1640000")
    assert invoice.tax_breakdown == {"8": "40000", "10": "100000"}


def test_invoice_due_date_defaults_to_end_of_next_month(client, customer):
    response = client.post(
        "/api/invoices", json=_payload(customer.id, issue_date="2026-01-20")
    )

    assert response.status_code == 201
    assert response.json()["due_date"] == "2026-02-28"


def test_estimate_uses_document_rate_for_every_line(client, customer):
    response = client.post("/api/estimates", json=_payload(customer.id))

    assert response.status_code == 201
    data = response.json()
    assert data["number"].startswith("EST-")
    assert _dec(data["tax_amount_10"]) == Decimal("150000")
    assert _dec(data["tax_amount_8"]) == 0
    assert all(item["tax_rate"] is None for item in data["items"])


def test_create_requires_items(client, customer):
    response = client.post("/api/invoices", json=_payload(customer.id, items=[]))

    assert response.status_code == 400
    assert "At least one item is required." in response.json()["detail"]


def test_create_requires_existing_customer(client):
    response = client.post("/api/invoices", json=_payload(9999))

    assert response.status_code == 400
    assert "Customer not found." in response.json()["detail"]


@pytest.mark.parametrize(
    "item",
    [
        {"name": "Zero", "quantity": "0", "unit_price": "10"},
        {"name": "Negative", "quantity": "1", "unit_price": "-1"},
        {"name": "   ", "quantity": "1", "unit_price": "10"},
        {"name": "Bad class", "quantity": "1", "unit_price": "10", "tax_class": "vat"},
    ],
)
def test_invalid_items_are_rejected(client, customer, item):
    response = client.post("/api/invoices", json=_payload(customer.id, items=[item]))

    assert response.status_code == 422


def test_update_replaces_items_and_recalculates(client, customer):
    created = client.post("/api/invoices", json=_payload(customer.id)).json()

    response = client.put(
        f"/api/invoices/{created['id']}",
        json=_payload(
            customer.id,
            subject="Revised",
            rounding_policy="ceil",
            items=[{"name": "Repair", "quantity": "1", "unit_price": "334"}],
        ),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["number"] == created["number"]
    assert data["subject"] == "Revised"
    assert len(data["items"]) == 1
    assert _dec(data["tax_amount"]) == Decimal("34")
    assert _dec(data["total_amount"]) == Decimal("368")


def test_get_missing_document_returns_404(client):
    response = client.get("/api/delivery-notes/42")

    assert response.status_code == 404


def test_list_filters_by_search_and_status(client, customer):
    first = client.post("/api/invoices", json=_payload(customer.id)).json()
    client.post("/api/invoices", json=_payload(customer.id, subject="Roof repair"))
    client.put(f"/api/invoices/{first['id']}/status", json={"status": "paid"})

    by_subject = client.get("/api/invoices", params={"q": "roof"}).json()
    by_status = client.get("/api/invoices", params={"status": "paid"}).json()
    everything = client.get("/api/invoices", params={"status": "all"}).json()
    by_name = client.get("/api/invoices", params={"q": "acme"}).json()

    assert [doc["subject"] for doc in by_subject["documents"]] == ["Roof repair"]
    assert [doc["id"] for doc in by_status["documents"]] == [first["id"]]
    assert everything["total"] == 2
    assert by_name["total"] == 2


def test_list_filters_by_customer(client, customer):
    other = client.post("/api/customers", json={"code": "C900", "name": "Globex"})
    other_id = other.json()["id"]
    client.post("/api/invoices", json=_payload(customer.id))
    client.post("/api/invoices", json=_payload(other_id, subject="Globex job"))

    page = client.get("/api/invoices", params={"counterparty_id": other_id}).json()

    assert page["total"] == 1
    assert page["documents"][0]["subject"] == "Globex job"
    assert page["documents"][0]["counterparty_name"] == "Globex"


def test_list_paginates(client, customer):
    for index in range(3):
        client.post("/api/invoices", json=_payload(customer.id, subject=f"Job {index}"))

    page = client.get("/api/invoices", params={"limit": 2, "page": 2}).json()

    assert page["total"] == 3
    assert page["total_pages"] == 2
    assert len(page["documents"]) == 1


def test_sent_invoice_past_due_reads_as_overdue(client, customer):
    past = (date.today() - timedelta(days=3)).isoformat()
    created = client.post(
        "/api/invoices", json=_payload(customer.id, due_date=past)
    ).json()
    client.put(f"/api/invoices/{created['id']}/status", json={"status": "sent"})

    detail = client.get(f"/api/invoices/{created['id']}").json()
    overdue = client.get("/api/invoices", params={"status": "overdue"}).json()

    assert detail["status"] == "overdue"
    assert [doc["id"] for doc in overdue["documents"]] == [created["id"]]


def test_status_must_belong_to_document_kind(client, customer):
    created = client.post("/api/delivery-notes", json=_payload(customer.id)).json()

    response = client.put(
        f"/api/delivery-notes/{created['id']}/status", json={"status": "paid"}
    )

    assert response.status_code == 400


def test_duplicate_creates_new_draft(client, customer):
    created = client.post("/api/invoices", json=_payload(customer.id)).json()
    client.put(f"/api/invoices/{created['id']}/status", json={"status": "sent"})

    response = client.post(f"/api/invoices/{created['id']}/duplicate")

    assert response.status_code == 201
    copy = response.json()
    assert copy["id"] != created["id"]
    assert copy["number"] != created["number"]
    assert copy["subject"] == "Office fit-out (copy)"
    assert copy["status"] == "draft"
    assert copy["total_amount"] == created["total_amount"]
    assert len(copy["items"]) == 2


def test_delete_document(client, customer):
    created = client.post("/api/delivery-notes", json=_payload(customer.id)).json()

    response = client.delete(f"/api/delivery-notes/{created['id']}")

    assert response.status_code == 204
    assert client.get(f"/api/delivery-notes/{created['id']}").status_code == 404


def test_purchase_order_rounds_subtotal(client, supplier):
    payload = _payload(
        None,
        supplier_id=supplier.id,
        items=[
            {
                "name": "Timber",
                "quantity": "1",
                "unit_price": "1000",
                "tax_class": "tax-included",
            }
        ],
    )

    response = client.post("/api/purchase-orders", json=payload)

    assert response.status_code == 201
    data = response.json()
    assert data["number"].startswith("PO-")
    assert data["counterparty_name"] == "Harbour Timber"
    assert _dec(data["subtotal"]) == Decimal("909")
    assert _dec(data["total_amount"]) == Decimal("999")


def test_calculate_preview_does_not_persist(client):
    response = client.post(
        "/api/invoices/calculate",
        json={
            "tax_mode": "inclusive",
            "tax_rate": "10",
            "rounding_policy": "floor",
            "items": [{"name": "Service", "quantity": "1", "unit_price": "1100"}],
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert _dec(data["subtotal"]) == Decimal("1000")
    assert _dec(data["tax_amount"]) == Decimal("100")
    assert _dec(data["total_amount"]) == Decimal("1100")
    assert client.get("/api/invoices").json()["total"] == 0


def test_calculate_preview_with_no_items(client):
    response = client.post("/api/estimates/calculate", json={"items": []})

    assert response.status_code == 200
    data = response.json()
    assert _dec(data["subtotal"]) == 0
    assert _dec(data["tax_amount"]) == 0
    assert _dec(data["total_amount"]) == 0


def test_html_pages_render(client, customer):
    created = client.post("/api/invoices", json=_payload(customer.id)).json()

    listing = client.get("/invoices")
    detail = client.get(f"/invoices/{created['id']}")
    missing = client.get("/invoices/999")

    assert listing.status_code == 200
    assert created["number"] in listing.text
    assert detail.status_code == 200
    assert "1,640,000" in detail.text
    assert missing.status_code == 404


def _recalculate(client, slug, document):
    fields = ("name", "quantity", "unit_price", "tax_class", "tax_rate")
    response = client.post(
        f"/api/{slug}/calculate",
        json={
            "tax_mode": document["tax_mode"],
            "tax_rate": document["tax_rate"],
            "rounding_policy": document["rounding_policy"],
            "items": [
                {field: item[field] for field in fields} for item in document["items"]
            ],
        },
    )
    assert response.status_code == 200
    return response.json()


def _totals(amounts):
    return [
        _dec(amounts[key])
        for key in ("subtotal", "tax_amount", "tax_amount_8", "tax_amount_10")
    ] + [_dec(amounts["total_amount"])]


def test_snapshot_matches_stored_lines_after_duplicate(client, customer):
    items = [
        {"name": "Labour", "quantity": "2.5", "unit_price": "333.33"},
        {"name": "Meals", "quantity": "1.25", "unit_price": "199.99", "tax_rate": "8"},
        {
            "name": "Permit",
            "quantity": "1",
            "unit_price": "1000",
            "tax_class": "tax-included",
        },
    ]
    created = client.post("/api/invoices", json=_payload(customer.id, items=items))
    assert created.status_code == 201
    original = created.json()

    copy = client.post(f"/api/invoices/{original['id']}/duplicate").json()

    assert _totals(copy) == _totals(original)
    assert _totals(_recalculate(client, "invoices", original)) == _totals(original)
    assert [_dec(item["unit_price"]) for item in original["items"]] == [
        Decimal("333.33"),
        Decimal("199.99"),
        Decimal("1000"),
    ]


@pytest.mark.parametrize(
    "overrides",
    [
        {"items": [{"name": "Bolt", "quantity": "1000", "unit_price": "0.005"}]},
        {"items": [{"name": "Bolt", "quantity": "1.0005", "unit_price": "10"}]},
        {
            "items": [
                {
                    "name": "Bolt",
                    "quantity": "1",
                    "unit_price": "10",
                    "tax_rate": "8.125",
                }
            ]
        },
        {"tax_rate": "8.125"},
    ],
)
def test_values_finer_than_stored_precision_are_rejected(client, customer, overrides):
    response = client.post("/api/invoices", json=_payload(customer.id, **overrides))

    assert response.status_code == 422


def test_update_clears_optional_header_fields(client, customer):
    created = client.post(
        "/api/estimates",
        json=_payload(
            customer.id,
            honorific="Dear",
            remarks="old",
            valid_until=date.today().isoformat(),
        ),
    ).json()

    response = client.put(
        f"/api/estimates/{created['id']}",
        json=_payload(customer.id, honorific=None, remarks=None, valid_until=None),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["remarks"] is None
    assert data["honorific"] is None
    assert data["valid_until"] is None


def test_update_keeps_invoice_due_date_when_omitted(client, customer):
    due = (date.today() + timedelta(days=10)).isoformat()
    created = client.post(
        "/api/invoices", json=_payload(customer.id, due_date=due, remarks="Net 10")
    ).json()

    response = client.put(
        f"/api/invoices/{created['id']}", json=_payload(customer.id, remarks=None)
    )

    assert response.json()["due_date"] == due
    assert response.json()["remarks"] is None


def test_inclusive_invoice_splits_tax_out_of_line_amounts(client, customer):
    items = [
        {"name": "Install", "quantity": "1", "unit_price": "1100", "tax_rate": "10"},
        {"name": "Snacks", "quantity": "1", "unit_price": "1080", "tax_rate": "8"},
    ]

    response = client.post(
        "/api/invoices",
        json=_payload(customer.id, tax_mode="inclusive", items=items),
    )

    assert response.status_code == 201
    data = response.json()
    assert data["tax_mode"] == "inclusive"
    assert _dec(data["subtotal"]) == Decimal("2000")
    assert _dec(data["tax_amount_10"]) == Decimal("100")
    assert _dec(data["tax_amount_8"]) == Decimal("80")
    assert _dec(data["total_amount"]) == Decimal("2180")


def test_inactive_customer_cannot_be_used(client, db_session, customer):
    customer.is_active = False
    db_session.commit()

    response = client.post("/api/invoices", json=_payload(customer.id))

    assert response.status_code == 400
    assert "Customer is inactive." in response.json()["detail"]
