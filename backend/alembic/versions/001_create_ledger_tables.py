"""create ledger tables

Revision ID: 001
Revises: 
Create Date: 2026-10-19 09:00:00
"""

from alembic import op
import sqlalchemy as sa

revision = "001"
down_revision = None
branch_labels = None
depends_on = None

TRANSACTION_TYPES = ("revenue", "expense", "closure")
TRANSACTION_KINDS = ("sale", "expense", "transfer", "opening_fund", "closure", "adjustment")


def upgrade() -> None:
    op.create_table(
        "transactions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("type", sa.Enum(*TRANSACTION_TYPES, name="transactiontype"), nullable=False),
        sa.Column("kind", sa.Enum(*TRANSACTION_KINDS, name="transactionkind"), nullable=True),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("cost_total", sa.Numeric(12, 2), nullable=True),
        sa.Column("wallet", sa.String(32), nullable=True),
        sa.Column("source", sa.String(100), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("method", sa.String(50), nullable=True),
        sa.Column("is_internal", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("user_id", sa.String(36), nullable=True),
        sa.Column("transfer_id", sa.String(36), nullable=True),
        sa.Column("declared_balance", sa.Numeric(12, 2), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_transactions_type", "transactions", ["type"])
    op.create_index("ix_transactions_kind", "transactions", ["kind"])
    op.create_index("ix_transactions_wallet", "transactions", ["wallet"])
    op.create_index("ix_transactions_transfer_id", "transactions", ["transfer_id"])
    op.create_index("ix_transactions_created_at", "transactions", ["created_at"])
    op.create_index("idx_transaction_wallet_created", "transactions", ["wallet", "created_at"])

    # Balance snapshot, seeded lazily from the full history on first read
    op.create_table(
        "wallet_balances",
        sa.Column("wallet", sa.String(32), primary_key=True),
        sa.Column("balance", sa.Numeric(12, 2), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("wallet_balances")
    op.drop_index("idx_transaction_wallet_created", table_name="transactions")
    op.drop_index("ix_transactions_created_at", table_name="transactions")
    op.drop_index("ix_transactions_transfer_id", table_name="transactions")
    op.drop_index("ix_transactions_wallet", table_name="transactions")
    op.drop_index("ix_transactions_kind", table_name="transactions")
    op.drop_index("ix_transactions_type", table_name="transactions")
    op.drop_table("transactions")
