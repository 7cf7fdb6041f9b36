"""create subscription_confirmations table

Revision ID: c57b0e9f3a18
Revises: 8a4e2d6c1b93
Create Date: 2026-10-12 09:20:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "c57b0e9f3a18"
down_revision = "8a4e2d6c1b93"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "subscription_confirmations",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("subscription_id", sa.String(length=36), nullable=False),
        sa.Column("token", sa.String(length=64), nullable=False),
        sa.Column("scheduled_delivery_date", sa.Date(), nullable=False),
        sa.Column("open_slot", sa.Boolean(), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("email_sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("customer_response", sa.String(length=20), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["subscription_id"], ["subscriptions.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "subscription_id",
            "scheduled_delivery_date",
            "open_slot",
            name="uq_subscription_confirmations_open_cycle",
        ),
    )
    op.create_index(
        op.f("ix_subscription_confirmations_token"),
        "subscription_confirmations",
        ["token"],
        unique=True,
    )
    op.create_index(
        "ix_subscription_confirmations_cycle",
        "subscription_confirmations",
        ["subscription_id", "scheduled_delivery_date"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_subscription_confirmations_cycle", table_name="subscription_confirmations")
    op.drop_index(
        op.f("ix_subscription_confirmations_token"), table_name="subscription_confirmations"
    )
    op.drop_table("subscription_confirmations")
