"""Initial schema: tenants, subscriptions, catalog stock, tables, cash registers

Revision ID: 3f9c1a7d2b10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f9c1a7d2b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column("id", sa.Uuid(), nullable=False)


def _branch_fk(table: str) -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint(
        ["branch_id"],
        ["branches.id"],
        name=f"fk_{table}_branch_id_branches",
        ondelete="CASCADE",
    )


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def _index(table: str, column: str, unique: bool = False) -> None:
    op.create_index(f"ix_{table}_{column}", table, [column], unique=unique)


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "companies",
        _id(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("document", sa.String(length=32), nullable=True, comment="CNPJ/CPF"),
        sa.Column("onboarding_completed", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_companies"),
    )
    _index("companies", "id")
    _index("companies", "email")

    op.create_table(
        "branches",
        _id(),
        sa.Column("company_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["company_id"],
            ["companies.id"],
            name="fk_branches_company_id_companies",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_branches"),
    )
    _index("branches", "id")
    _index("branches", "company_id")

    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("role", sa.String(length=20), nullable=False, comment="master|admin|manager|waiter"),
        sa.Column("company_id", sa.Uuid(), nullable=True),
        sa.Column("branch_id", sa.Uuid(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.Column("last_login_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(
            ["company_id"],
            ["companies.id"],
            name="fk_users_company_id_companies",
            ondelete="SET NULL",
        ),
        sa.ForeignKeyConstraint(
            ["branch_id"],
            ["branches.id"],
            name="fk_users_branch_id_branches",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
    )
    _index("users", "id")
    _index("users", "email", unique=True)
    _index("users", "company_id")
    _index("users", "branch_id")

    op.create_table(
        "plans",
        _id(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type", sa.String(length=20), nullable=False, comment="TRIAL|BASIC|PREMIUM|ENTERPRISE"),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("billing_period", sa.String(length=20), nullable=False, comment="MONTHLY|QUARTERLY|YEARLY"),
        sa.Column("limits", sa.JSON(), nullable=True, comment="branches/users/products/ordersPerMonth"),
        sa.Column("features", sa.JSON(), nullable=True, comment="Feature flags per plan"),
        sa.Column("is_trial", sa.Boolean(), nullable=False),
        sa.Column("trial_days", sa.Integer(), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("is_featured", sa.Boolean(), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_plans"),
    )
    _index("plans", "id")

    op.create_table(
        "subscriptions",
        _id(),
        sa.Column("company_id", sa.Uuid(), nullable=False),
        sa.Column("plan_id", sa.Uuid(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, comment="ACTIVE|EXPIRED|CANCELED|PAST_DUE"),
        sa.Column("billing_period", sa.String(length=20), nullable=False),
        sa.Column("start_date", sa.DateTime(), nullable=False),
        sa.Column("end_date", sa.DateTime(), nullable=True),
        sa.Column("next_billing_date", sa.DateTime(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["company_id"],
            ["companies.id"],
            name="fk_subscriptions_company_id_companies",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["plan_id"],
            ["plans.id"],
            name="fk_subscriptions_plan_id_plans",
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_subscriptions"),
    )
    _index("subscriptions", "id")
    _index("subscriptions", "company_id", unique=True)
    _index("subscriptions", "plan_id")
    _index("subscriptions", "status")
    _index("subscriptions", "end_date")

    for table in ("products", "complement_options"):
        extra = []
        if table == "products":
            extra = [
                sa.Column("description", sa.Text(), nullable=True),
                sa.Column("image_url", sa.String(length=500), nullable=True),
            ]
        op.create_table(
            table,
            _id(),
            sa.Column("branch_id", sa.Uuid(), nullable=False),
            sa.Column("name", sa.String(length=255), nullable=False),
            *extra,
            sa.Column("price", sa.Numeric(10, 2), nullable=False),
            sa.Column("is_active", sa.Boolean(), nullable=False),
            *_timestamps(),
            _branch_fk(table),
            sa.PrimaryKeyConstraint("id", name=f"pk_{table}"),
        )
        _index(table, "id")
        _index(table, "branch_id")

    op.create_table(
        "ingredient_categories",
        _id(),
        sa.Column("branch_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
        _branch_fk("ingredient_categories"),
        sa.PrimaryKeyConstraint("id", name="pk_ingredient_categories"),
    )
    _index("ingredient_categories", "id")
    _index("ingredient_categories", "branch_id")

    op.create_table(
        "ingredients",
        _id(),
        sa.Column("branch_id", sa.Uuid(), nullable=False),
        sa.Column("category_id", sa.Uuid(), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("unit", sa.String(length=20), nullable=False, comment="un|kg|g|l|ml"),
        sa.Column("cost_price", sa.Numeric(10, 2), nullable=True),
        sa.Column("stock_quantity", sa.Float(), nullable=False),
        sa.Column("min_stock", sa.Float(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        _branch_fk("ingredients"),
        sa.ForeignKeyConstraint(
            ["category_id"],
            ["ingredient_categories.id"],
            name="fk_ingredients_category_id_ingredient_categories",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_ingredients"),
    )
    _index("ingredients", "id")
    _index("ingredients", "branch_id")
    _index("ingredients", "category_id")

    op.create_table(
        "stock_movements",
        _id(),
        sa.Column("branch_id", sa.Uuid(), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False, comment="ENTRADA|SAIDA|AJUSTE|VENDA"),
        sa.Column("product_id", sa.Uuid(), nullable=True),
        sa.Column("option_id", sa.Uuid(), nullable=True),
        sa.Column("ingredient_id", sa.Uuid(), nullable=True),
        sa.Column("variation", sa.Float(), nullable=False),
        sa.Column("quantity", sa.Float(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "(CASE WHEN product_id IS NOT NULL THEN 1 ELSE 0 END)"
            " + (CASE WHEN option_id IS NOT NULL THEN 1 ELSE 0 END)"
            " + (CASE WHEN ingredient_id IS NOT NULL THEN 1 ELSE 0 END) = 1",
            name="ck_stock_movements_single_target",
        ),
        _branch_fk("stock_movements"),
        sa.ForeignKeyConstraint(
            ["product_id"],
            ["products.id"],
            name="fk_stock_movements_product_id_products",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["option_id"],
            ["complement_options.id"],
            name="fk_stock_movements_option_id_complement_options",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["ingredient_id"],
            ["ingredients.id"],
            name="fk_stock_movements_ingredient_id_ingredients",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_stock_movements"),
    )
    for column in ("id", "branch_id", "product_id", "option_id", "ingredient_id", "created_at"):
        _index("stock_movements", column)

    op.create_table(
        "payment_methods",
        _id(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_payment_methods"),
        sa.UniqueConstraint("name", name="uq_payment_methods_name"),
    )
    _index("payment_methods", "id")

    op.create_table(
        "branch_payment_methods",
        _id(),
        sa.Column("branch_id", sa.Uuid(), nullable=False),
        sa.Column("payment_method_id", sa.Uuid(), nullable=False),
        sa.Column("for_dine_in", sa.Boolean(), nullable=False),
        sa.Column("for_delivery", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        _branch_fk("branch_payment_methods"),
        sa.ForeignKeyConstraint(
            ["payment_method_id"],
            ["payment_methods.id"],
            name="fk_branch_payment_methods_payment_method_id_payment_methods",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_branch_payment_methods"),
        sa.UniqueConstraint("branch_id", "payment_method_id", name="uq_branch_payment_method"),
    )
    _index("branch_payment_methods", "id")
    _index("branch_payment_methods", "branch_id")

    op.create_table(
        "notification_reads",
        _id(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("entity_type", sa.String(length=30), nullable=False, comment="ORDER|SYSTEM|ANNOUNCEMENT"),
        sa.Column("entity_id", sa.String(length=64), nullable=False),
        sa.Column("metadata", sa.Text(), nullable=True),
        sa.Column("read_at", sa.DateTime(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name="fk_notification_reads_user_id_users",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_notification_reads"),
        sa.UniqueConstraint("user_id", "entity_type", "entity_id", name="uq_notification_read_entity"),
    )
    _index("notification_reads", "id")
    _index("notification_reads", "user_id")

    op.create_table(
        "announcements",
        _id(),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("body", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_announcements"),
    )
    _index("announcements", "id")

    op.create_table(
        "dining_tables",
        _id(),
        sa.Column("branch_id", sa.Uuid(), nullable=False),
        sa.Column("number", sa.String(length=20), nullable=False),
        sa.Column("identification", sa.String(length=120), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("number_of_people", sa.Integer(), nullable=True),
        sa.Column("user_id", sa.Uuid(), nullable=True),
        sa.Column("reservation_name", sa.String(length=255), nullable=True),
        sa.Column("reservation_phone", sa.String(length=32), nullable=True),
        sa.Column("reserved_for", sa.DateTime(), nullable=True),
        *_timestamps(),
        _branch_fk("dining_tables"),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name="fk_dining_tables_user_id_users",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_dining_tables"),
        sa.UniqueConstraint("branch_id", "number", name="uq_dining_table_branch_number"),
    )
    _index("dining_tables", "id")
    _index("dining_tables", "branch_id")

    op.create_table(
        "orders",
        _id(),
        sa.Column("branch_id", sa.Uuid(), nullable=False),
        sa.Column("table_id", sa.Uuid(), nullable=True),
        sa.Column("order_number", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("total", sa.Numeric(10, 2), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        _branch_fk("orders"),
        sa.ForeignKeyConstraint(
            ["table_id"],
            ["dining_tables.id"],
            name="fk_orders_table_id_dining_tables",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_orders"),
    )
    _index("orders", "id")
    _index("orders", "branch_id")
    _index("orders", "table_id")

    op.create_table(
        "cash_registers",
        _id(),
        sa.Column("branch_id", sa.Uuid(), nullable=False),
        sa.Column("opened_by", sa.Uuid(), nullable=False),
        sa.Column("closed_by", sa.Uuid(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("opening_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("expected_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("closing_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("difference", sa.Numeric(12, 2), nullable=True),
        sa.Column("opening_date", sa.DateTime(), nullable=False),
        sa.Column("closing_date", sa.DateTime(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        _branch_fk("cash_registers"),
        sa.ForeignKeyConstraint(
            ["opened_by"],
            ["users.id"],
            name="fk_cash_registers_opened_by_users",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["closed_by"],
            ["users.id"],
            name="fk_cash_registers_closed_by_users",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_cash_registers"),
    )
    _index("cash_registers", "id")
    _index("cash_registers", "branch_id")
    _index("cash_registers", "opened_by")

    op.create_table(
        "cash_movements",
        _id(),
        sa.Column("cash_register_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=True),
        sa.Column("order_id", sa.Uuid(), nullable=True),
        sa.Column("type", sa.String(length=20), nullable=False, comment="OPENING|SALE|DEPOSIT|WITHDRAWAL"),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("payment_method", sa.String(length=20), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["cash_register_id"],
            ["cash_registers.id"],
            name="fk_cash_movements_cash_register_id_cash_registers",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            name="fk_cash_movements_user_id_users",
            ondelete="SET NULL",
        ),
        sa.ForeignKeyConstraint(
            ["order_id"],
            ["orders.id"],
            name="fk_cash_movements_order_id_orders",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_cash_movements"),
    )
    _index("cash_movements", "id")
    _index("cash_movements", "cash_register_id")


def downgrade() -> None:
    """Downgrade schema."""
    for table in (
        "cash_movements",
        "cash_registers",
        "orders",
        "dining_tables",
        "announcements",
        "notification_reads",
        "branch_payment_methods",
        "payment_methods",
        "stock_movements",
        "ingredients",
        "ingredient_categories",
        "complement_options",
        "products",
        "subscriptions",
        "plans",
        "users",
        "branches",
        "companies",
    ):
        op.drop_table(table)
