"""create issuance stats table

Revision ID: 0001_create_issuance_stats
Revises:
Create Date: 2025-01-01
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_create_issuance_stats"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "issuance_stats",
        sa.Column("storage_key", sa.String(length=128), primary_key=True),
        sa.Column("count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_generated", sa.DateTime(timezone=True)),
    )


def downgrade():
    op.drop_table("issuance_stats")
