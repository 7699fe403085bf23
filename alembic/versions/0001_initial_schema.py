"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

json_type = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")

user_role = sa.Enum("buyer", "vendor", "admin", name="user_role")
organization_status = sa.Enum("pending", "active", "suspended", "rejected", name="organization_status")
rfq_status = sa.Enum("draft", "published", "closed", "cancelled", name="rfq_status")
order_status = sa.Enum("pending", "confirmed", "shipped", "delivered", "cancelled", name="order_status")
message_status = sa.Enum("sent", "delivered", "read", name="message_status")


def timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("first_name", sa.String()),
        sa.Column("last_name", sa.String()),
        sa.Column("profile_image_url", sa.String()),
        sa.Column("role", user_role, nullable=False),
        sa.Column("phone", sa.String()),
        sa.Column("preferred_language", sa.String()),
        *timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "organizations",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), sa.ForeignKey("users.id")),
        sa.Column("legal_name", sa.String(), nullable=False),
        sa.Column("trade_name", sa.String()),
        sa.Column("description", sa.Text()),
        sa.Column("logo_url", sa.String()),
        sa.Column("commercial_registration", sa.String()),
        sa.Column("tax_number", sa.String()),
        sa.Column("website", sa.String()),
        sa.Column("phone", sa.String()),
        sa.Column("email", sa.String()),
        sa.Column("address", sa.Text()),
        sa.Column("city", sa.String()),
        sa.Column("status", organization_status, nullable=False),
        sa.Column("rating", sa.Numeric(3, 2)),
        sa.Column("review_count", sa.Integer(), nullable=False),
        sa.Column("categories", json_type),
        *timestamps(),
    )
    op.create_index("ix_organizations_user_id", "organizations", ["user_id"])

    op.create_table(
        "categories",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("name_ar", sa.String()),
        sa.Column("description", sa.Text()),
        sa.Column("description_ar", sa.Text()),
        sa.Column("icon_url", sa.String()),
        sa.Column("parent_id", sa.String(), sa.ForeignKey("categories.id"), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_categories_name", "categories", ["name"])
    op.create_index("ix_categories_parent_id", "categories", ["parent_id"])

    op.create_table(
        "products",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("organization_id", sa.String(), sa.ForeignKey("organizations.id")),
        sa.Column("category_id", sa.String(), sa.ForeignKey("categories.id")),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("name_ar", sa.String()),
        sa.Column("description", sa.Text()),
        sa.Column("description_ar", sa.Text()),
        sa.Column("sku", sa.String()),
        sa.Column("price", sa.Numeric(10, 2)),
        sa.Column("currency", sa.String(), nullable=False),
        sa.Column("images", json_type),
        sa.Column("specifications", json_type),
        sa.Column("stock_quantity", sa.Integer()),
        sa.Column("min_order_quantity", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("rating", sa.Numeric(3, 2)),
        sa.Column("review_count", sa.Integer(), nullable=False),
        *timestamps(),
    )
    op.create_index("ix_products_organization_id", "products", ["organization_id"])
    op.create_index("ix_products_category_id", "products", ["category_id"])
    op.create_index("ix_products_name", "products", ["name"])

    op.create_table(
        "rfqs",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), sa.ForeignKey("users.id")),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category_id", sa.String(), sa.ForeignKey("categories.id")),
        sa.Column("project_type", sa.String()),
        sa.Column("budget_min", sa.Numeric(10, 2)),
        sa.Column("budget_max", sa.Numeric(10, 2)),
        sa.Column("currency", sa.String(), nullable=False),
        sa.Column("deadline", sa.DateTime(timezone=True)),
        sa.Column("attachments", json_type),
        sa.Column("status", rfq_status, nullable=False),
        sa.Column("requirements", json_type),
        sa.Column("location", sa.String()),
        *timestamps(),
    )
    op.create_index("ix_rfqs_user_id", "rfqs", ["user_id"])
    op.create_index("ix_rfqs_category_id", "rfqs", ["category_id"])

    op.create_table(
        "rfq_responses",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("rfq_id", sa.String(), sa.ForeignKey("rfqs.id")),
        sa.Column("organization_id", sa.String(), sa.ForeignKey("organizations.id")),
        sa.Column("price", sa.Numeric(10, 2)),
        sa.Column("currency", sa.String(), nullable=False),
        sa.Column("delivery_time", sa.String()),
        sa.Column("description", sa.Text()),
        sa.Column("attachments", json_type),
        sa.Column("valid_until", sa.DateTime(timezone=True)),
        sa.Column("is_accepted", sa.Boolean(), nullable=True),
        *timestamps(),
    )
    op.create_index("ix_rfq_responses_rfq_id", "rfq_responses", ["rfq_id"])
    op.create_index("ix_rfq_responses_organization_id", "rfq_responses", ["organization_id"])

    op.create_table(
        "orders",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), sa.ForeignKey("users.id")),
        sa.Column("organization_id", sa.String(), sa.ForeignKey("organizations.id")),
        sa.Column("rfq_response_id", sa.String(), sa.ForeignKey("rfq_responses.id")),
        sa.Column("order_number", sa.String(), nullable=False),
        sa.Column("total_amount", sa.Numeric(10, 2)),
        sa.Column("currency", sa.String(), nullable=False),
        sa.Column("status", order_status, nullable=False),
        sa.Column("shipping_address", sa.Text()),
        sa.Column("billing_address", sa.Text()),
        sa.Column("notes", sa.Text()),
        sa.Column("payment_method", sa.String()),
        sa.Column("payment_reference", sa.String()),
        *timestamps(),
    )
    op.create_index("ix_orders_user_id", "orders", ["user_id"])
    op.create_index("ix_orders_organization_id", "orders", ["organization_id"])
    op.create_index("ix_orders_order_number", "orders", ["order_number"], unique=True)

    op.create_table(
        "order_items",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("order_id", sa.String(), sa.ForeignKey("orders.id")),
        sa.Column("product_id", sa.String(), sa.ForeignKey("products.id")),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(10, 2)),
        sa.Column("total_price", sa.Numeric(10, 2)),
        sa.Column("specifications", json_type),
    )
    op.create_index("ix_order_items_order_id", "order_items", ["order_id"])

    op.create_table(
        "messages",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("sender_id", sa.String(), sa.ForeignKey("users.id")),
        sa.Column("recipient_id", sa.String(), sa.ForeignKey("users.id")),
        sa.Column("order_id", sa.String(), sa.ForeignKey("orders.id")),
        sa.Column("rfq_id", sa.String(), sa.ForeignKey("rfqs.id")),
        sa.Column("subject", sa.String()),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("attachments", json_type),
        sa.Column("status", message_status, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("read_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_messages_sender_id", "messages", ["sender_id"])
    op.create_index("ix_messages_recipient_id", "messages", ["recipient_id"])

    op.create_table(
        "reviews",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), sa.ForeignKey("users.id")),
        sa.Column("organization_id", sa.String(), sa.ForeignKey("organizations.id")),
        sa.Column("product_id", sa.String(), sa.ForeignKey("products.id")),
        sa.Column("order_id", sa.String(), sa.ForeignKey("orders.id")),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("title", sa.String()),
        sa.Column("comment", sa.Text()),
        sa.Column("is_verified", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_reviews_user_id", "reviews", ["user_id"])
    op.create_index("ix_reviews_organization_id", "reviews", ["organization_id"])
    op.create_index("ix_reviews_product_id", "reviews", ["product_id"])


def downgrade() -> None:
    for table in (
        "reviews",
        "messages",
        "order_items",
        "orders",
        "rfq_responses",
        "rfqs",
        "products",
        "categories",
        "organizations",
        "users",
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum in (message_status, order_status, rfq_status, organization_status, user_role):
        enum.drop(bind, checkfirst=True)
