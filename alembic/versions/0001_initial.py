"""initial warehouse schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

USER_ROLES = (
    "ADMIN",
    "SUPERVISOR",
    "INSPEKSI_MESIN",
    "ASSEMBLY_STAFF",
    "QC_STAFF",
    "PDI_STAFF",
    "PAINTING_STAFF",
    "PINDAH_LOKASI",
)


def upgrade() -> None:
    op.create_table(
        "user_account",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(80), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(120)),
        sa.Column("role", sa.Enum(*USER_ROLES, name="userrole"), nullable=False),
        sa.Column("job_type", sa.Enum("STAFF", "SUPERVISOR", "ADMIN", name="jobtype")),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "ix_user_account_username", "user_account", ["username"], unique=True
    )

    op.create_table(
        "item_category",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_item_category_name", "item_category", ["name"])

    op.create_table(
        "item",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("code", sa.String(60), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("unit", sa.String(30)),
        sa.Column("stock", sa.Integer(), nullable=False),
        sa.Column("min_stock", sa.Integer(), nullable=False),
        sa.Column("location", sa.String(100)),
        sa.Column("description", sa.Text()),
        sa.Column("category_id", sa.Integer(), sa.ForeignKey("item_category.id")),
        sa.Column("created_by_id", sa.Integer(), sa.ForeignKey("user_account.id")),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("stock >= 0", name="ck_item_stock_nonneg"),
    )

    op.create_table(
        "incoming_shipment",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("arrival_code", sa.String(60), nullable=False, unique=True),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("supplier_name", sa.String(255), nullable=False),
        sa.Column("form_no", sa.String(60), nullable=False, unique=True),
        sa.Column("status", sa.String(30), nullable=False),
        sa.Column("created_by_id", sa.Integer(), sa.ForeignKey("user_account.id")),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "incoming_shipment_line",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "shipment_id",
            sa.Integer(),
            sa.ForeignKey("incoming_shipment.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("item_id", sa.Integer(), sa.ForeignKey("item.id"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
    )

    op.create_table(
        "serialized_unit",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "line_id",
            sa.Integer(),
            sa.ForeignKey("incoming_shipment_line.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("serial_no", sa.String(60), nullable=False),
        sa.Column("location", sa.String(100)),
        sa.Column("notes", sa.Text()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_serialized_unit_serial_no", "serialized_unit", ["serial_no"])

    op.create_table(
        "outgoing_shipment",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("transaction_no", sa.String(40), nullable=False, unique=True),
        sa.Column("delivery_no", sa.String(60)),
        sa.Column("ship_via", sa.String(100)),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("destination", sa.String(255)),
        sa.Column("notes", sa.Text()),
        sa.Column(
            "status",
            sa.Enum("PENDING", "APPROVED", "REJECTED", name="outgoingstatus"),
            nullable=False,
        ),
        sa.Column("created_by_id", sa.Integer(), sa.ForeignKey("user_account.id")),
        sa.Column("approved_by_id", sa.Integer(), sa.ForeignKey("user_account.id")),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "outgoing_shipment_line",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "shipment_id",
            sa.Integer(),
            sa.ForeignKey("outgoing_shipment.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("item_id", sa.Integer(), sa.ForeignKey("item.id"), nullable=False),
        sa.Column(
            "serial_unit_id",
            sa.Integer(),
            sa.ForeignKey("serialized_unit.id"),
            unique=True,
        ),
        sa.Column("quantity", sa.Integer(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("outgoing_shipment_line")
    op.drop_table("outgoing_shipment")
    op.drop_index("ix_serialized_unit_serial_no", table_name="serialized_unit")
    op.drop_table("serialized_unit")
    op.drop_table("incoming_shipment_line")
    op.drop_table("incoming_shipment")
    op.drop_table("item")
    op.drop_index("ix_item_category_name", table_name="item_category")
    op.drop_table("item_category")
    op.drop_index("ix_user_account_username", table_name="user_account")
    op.drop_table("user_account")
    sa.Enum(name="outgoingstatus").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="jobtype").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="userrole").drop(op.get_bind(), checkfirst=True)
