"""attempts: snapshot question ids, order responses

Revision ID: 5d8e1b2c4a60
Revises: 3f2c9a1d7b10
Create Date: 2026-01-21
"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "5d8e1b2c4a60"
down_revision = "3f2c9a1d7b10"
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Use batch operations for SQLite compatibility
    with op.batch_alter_table("attempts", schema=None) as batch_op:
        batch_op.add_column(sa.Column("question_ids", sa.JSON(), nullable=True))

    with op.batch_alter_table("attempt_responses", schema=None) as batch_op:
        batch_op.add_column(sa.Column("response_order", sa.Integer(), nullable=True))


def downgrade() -> None:
    with op.batch_alter_table("attempt_responses", schema=None) as batch_op:
        batch_op.drop_column("response_order")

    with op.batch_alter_table("attempts", schema=None) as batch_op:
        batch_op.drop_column("question_ids")
