"""create gl accounts, rule sets and rules

Revision ID: 0001
Revises:
Create Date: 2026-10-18
"""

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


RULE_SET_TYPES = ("REVENUE", "COMMISSION", "CANCELLATION_FEE")
RULE_TYPES = ("RESOURCE", "PRODUCT_SUB_TYPE", "PRODUCT_TYPE", "DEFAULT")


def upgrade() -> None:
    op.create_table(
        "gl_accounts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("external_id", sa.String(100), nullable=False),
        sa.Column("deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_gl_accounts_external_id", "gl_accounts", ["external_id"])

    op.create_table(
        "gl_rule_sets",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column(
            "type",
            sa.Enum(*RULE_SET_TYPES, name="gl_rule_set_type_enum", create_constraint=True),
            nullable=False,
        ),
        sa.Column("deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_gl_rule_sets_start_date", "gl_rule_sets", ["start_date"])
    op.create_index("ix_gl_rule_sets_type", "gl_rule_sets", ["type"])

    op.create_table(
        "gl_rules",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "gl_rule_set_id",
            sa.Integer(),
            sa.ForeignKey("gl_rule_sets.id"),
            nullable=False,
        ),
        sa.Column(
            "rule_type",
            sa.Enum(*RULE_TYPES, name="gl_rule_type_enum", create_constraint=True),
            nullable=False,
        ),
        sa.Column("target_id", sa.Integer(), nullable=True),
        sa.Column(
            "account_id",
            sa.Integer(),
            sa.ForeignKey("gl_accounts.id"),
            nullable=False,
        ),
        sa.Column("deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_gl_rules_gl_rule_set_id", "gl_rules", ["gl_rule_set_id"])
    op.create_index("ix_gl_rules_account_id", "gl_rules", ["account_id"])


def downgrade() -> None:
    op.drop_index("ix_gl_rules_account_id", table_name="gl_rules")
    op.drop_index("ix_gl_rules_gl_rule_set_id", table_name="gl_rules")
    op.drop_table("gl_rules")
    op.drop_index("ix_gl_rule_sets_type", table_name="gl_rule_sets")
    op.drop_index("ix_gl_rule_sets_start_date", table_name="gl_rule_sets")
    op.drop_table("gl_rule_sets")
    op.drop_index("ix_gl_accounts_external_id", table_name="gl_accounts")
    op.drop_table("gl_accounts")
    sa.Enum(name="gl_rule_type_enum").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="gl_rule_set_type_enum").drop(op.get_bind(), checkfirst=True)
