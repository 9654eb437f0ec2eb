"""Create the workflow state blob table.

The workflow document is stored whole under a fixed key. Large documents use
the nullable ``payload_zstd`` column with a sentinel in ``payload``.
"""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

revision = "20261019_000001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Apply schema changes."""
    op.create_table(
        "state_blobs",
        sa.Column("key", sa.String(length=160), nullable=False),
        sa.Column("payload", sa.Text(), nullable=False),
        sa.Column("payload_zstd", sa.LargeBinary(), nullable=True),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("key", name="pk_state_blobs"),
    )


def downgrade() -> None:
    """Revert schema changes."""
    op.drop_table("state_blobs")
