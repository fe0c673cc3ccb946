from decimal import Decimal


def _invoice(customer_id, **overrides):
    payload = {
        "customer_id": customer_id,
        "subject": "Maintenance",
        "items": [{"name": "Inspection", "quantity": "1", "unit_price": "1234"}],
    }
    payload.update(overrides)
    return payload


def test_create_and_search_customers(client):
    client.post("/api/customers", json={"code": "C100", "name": "Northwind"})
    client.post("/api/customers", json={"code": "C200", "name": "Contoso"})

    response = client.get("/api/customers", params={"q": "north"})

    assert response.status_code == 200
    assert [row["code"] for row in response.json()] == ["C100"]


def test_duplicate_customer_code_is_rejected(client, customer):
    response = client.post("/api/customers", json={"code": "C001", "name": "Other"})

    assert response.status_code == 400
    assert "Customer code already exists." in response.json()["detail"]


def test_deactivate_guard_when_in_use(client, db_session, customer):
    client.post("/api/invoices", json=_invoice(customer.id))

    response = client.post(f"/api/customers/{customer.id}/deactivate")

    assert response.status_code == 400
    assert "Cannot deactivate: in use by documents." in response.json()["detail"]
    db_session.refresh(customer)
    assert customer.is_active is True


def test_deactivate_unused_supplier(client, supplier):
    response = client.post(f"/api/suppliers/{supplier.id}/deactivate")

    assert response.status_code == 200
    assert response.json()["is_active"] is False
    active = client.get("/api/suppliers", params={"active": True}).json()
    assert active == []


def test_customers_page_lists_customers(client, customer):
    response = client.get("/customers")

    assert response.status_code == 200
    assert "Acme Builders" in response.text


def test_company_settings_drive_document_defaults(client, customer):
    assert client.get("/api/company").status_code == 404

    saved = client.put(
        "/api/company",
        json={
            "name": "Example Trading Co.",
            "default_tax_mode": "exclusive",
            "default_tax_rate": "8",
            "default_rounding_policy": "ceil",
            "invoice_remarks": "Transfer fees are borne by the customer.",
        },
    )
    invoice = client.post("/api/invoices", json=_invoice(customer.id)).json()

    assert saved.status_code == 200
    assert saved.json()["default_rounding_policy"] == "ceil"
    assert Decimal(invoice["tax_rate"]) == Decimal("8")
    assert invoice["rounding_policy"] == "ceil"
    # 1234 at 8% is 98.72, rounded up
    assert Decimal(invoice["tax_amount"]) == Decimal("99")
    assert invoice["remarks"] == "Transfer fees are borne by the customer."


def test_company_settings_update_in_place(client):
    first = client.put("/api/company", json={"name": "First"}).json()
    second = client.put("/api/company", json={"name": "Second"}).json()

    assert first["id"] == second["id"]
    assert second["name"] == "Second"
    assert client.get("/api/company").json()["name"] == "Second"


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
