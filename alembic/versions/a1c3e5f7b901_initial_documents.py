"""initial documents schema

Revision ID: a1c3e5f7b901
Revises:
Create Date: 2026-10-18 09:00:00.000000
"""
from alembic import op
import sqlalchemy as sa


revision = "a1c3e5f7b901"
down_revision = None
branch_labels = None
depends_on = None


def _party_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(length=50), nullable=False, unique=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("honorific", sa.String(length=20), nullable=True),
        sa.Column("postal_code", sa.String(length=20), nullable=True),
        sa.Column("address", sa.String(length=255), nullable=True),
        sa.Column("building", sa.String(length=255), nullable=True),
        sa.Column("representative", sa.String(length=100), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("fax", sa.String(length=50), nullable=True),
        sa.Column("remarks", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    ]


def _document_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("number", sa.String(length=50), nullable=False, unique=True),
        sa.Column("honorific", sa.String(length=20), nullable=True),
        sa.Column("subject", sa.String(length=255), nullable=False),
        sa.Column("issue_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("remarks", sa.Text(), nullable=True),
        sa.Column("tax_mode", sa.String(length=20), nullable=False),
        sa.Column("tax_rate", sa.Numeric(5, 2), nullable=False),
        sa.Column("rounding_policy", sa.String(length=10), nullable=False),
        sa.Column("subtotal", sa.Numeric(14, 2), nullable=False),
        sa.Column("tax_amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("tax_amount_8", sa.Numeric(14, 2), nullable=False),
        sa.Column("tax_amount_10", sa.Numeric(14, 2), nullable=False),
        sa.Column("tax_breakdown", sa.JSON(), nullable=False),
        sa.Column("total_amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    ]


def _item_columns(with_tax_rate: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("quantity", sa.Numeric(12, 3), nullable=False),
        sa.Column("unit", sa.String(length=20), nullable=True),
        sa.Column("unit_price", sa.Numeric(14, 2), nullable=False),
        sa.Column("tax_class", sa.String(length=20), nullable=False),
        sa.Column("amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("remarks", sa.Text(), nullable=True),
        sa.Column("display_order", sa.Integer(), nullable=False),
    ]
    if with_tax_rate:
        columns.append(sa.Column("tax_rate", sa.Numeric(5, 2), nullable=True))
    return columns


def _fk(name: str, target: str, nullable: bool = False) -> sa.Column:
    return sa.Column(name, sa.Integer(), sa.ForeignKey(target), nullable=nullable)


def upgrade() -> None:
    op.create_table("customers", *_party_columns())
    op.create_table("suppliers", *_party_columns())
    op.create_table(
        "company",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("postal_code", sa.String(length=20), nullable=True),
        sa.Column("address", sa.String(length=255), nullable=True),
        sa.Column("building", sa.String(length=255), nullable=True),
        sa.Column("representative", sa.String(length=100), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("fax", sa.String(length=50), nullable=True),
        sa.Column("qualified_invoice_number", sa.String(length=20), nullable=True),
        sa.Column("bank_name", sa.String(length=100), nullable=True),
        sa.Column("branch_name", sa.String(length=100), nullable=True),
        sa.Column("account_type", sa.String(length=20), nullable=True),
        sa.Column("account_number", sa.String(length=20), nullable=True),
        sa.Column("account_holder", sa.String(length=100), nullable=True),
        sa.Column("default_tax_mode", sa.String(length=20), nullable=False),
        sa.Column("default_tax_rate", sa.Numeric(5, 2), nullable=False),
        sa.Column("default_rounding_policy", sa.String(length=10), nullable=False),
        sa.Column("invoice_remarks", sa.Text(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_table(
        "document_sequences",
        sa.Column("document_type", sa.String(length=30), primary_key=True),
        sa.Column("period", sa.String(length=6), primary_key=True),
        sa.Column("last_number", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )

    op.create_table(
        "estimates",
        *_document_columns(),
        _fk("customer_id", "customers.id"),
        sa.Column("valid_until", sa.Date(), nullable=True),
    )
    op.create_table(
        "estimate_items",
        *_item_columns(with_tax_rate=False),
        sa.Column(
            "estimate_id",
            sa.Integer(),
            sa.ForeignKey("estimates.id", ondelete="CASCADE"),
            nullable=False,
        ),
    )
    op.create_table(
        "invoices",
        *_document_columns(),
        _fk("customer_id", "customers.id"),
        _fk("estimate_id", "estimates.id", nullable=True),
        sa.Column("due_date", sa.Date(), nullable=False),
    )
    op.create_table(
        "invoice_items",
        *_item_columns(),
        sa.Column(
            "invoice_id",
            sa.Integer(),
            sa.ForeignKey("invoices.id", ondelete="CASCADE"),
            nullable=False,
        ),
    )
    op.create_table(
        "purchase_orders",
        *_document_columns(),
        _fk("supplier_id", "suppliers.id"),
        _fk("estimate_id", "estimates.id", nullable=True),
        sa.Column("delivery_date", sa.Date(), nullable=True),
        sa.Column("delivery_location", sa.String(length=255), nullable=True),
        sa.Column("payment_terms", sa.String(length=255), nullable=True),
    )
    op.create_table(
        "purchase_order_items",
        *_item_columns(),
        sa.Column(
            "purchase_order_id",
            sa.Integer(),
            sa.ForeignKey("purchase_orders.id", ondelete="CASCADE"),
            nullable=False,
        ),
    )
    op.create_table(
        "delivery_notes",
        *_document_columns(),
        _fk("customer_id", "customers.id"),
        _fk("estimate_id", "estimates.id", nullable=True),
        sa.Column("delivery_date", sa.Date(), nullable=True),
    )
    op.create_table(
        "delivery_note_items",
        *_item_columns(),
        sa.Column(
            "delivery_note_id",
            sa.Integer(),
            sa.ForeignKey("delivery_notes.id", ondelete="CASCADE"),
            nullable=False,
        ),
    )


def downgrade() -> None:
    op.drop_table("delivery_note_items")
    op.drop_table("delivery_notes")
    op.drop_table("purchase_order_items")
    op.drop_table("purchase_orders")
    op.drop_table("invoice_items")
    op.drop_table("invoices")
    op.drop_table("estimate_items")
    op.drop_table("estimates")
    op.drop_table("document_sequences")
    op.drop_table("company")
    op.drop_table("suppliers")
    op.drop_table("customers")
