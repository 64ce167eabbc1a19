"""create_todos_table

Revision ID: 4b7d2e91c0a3
Revises:
Create Date: 2026-03-02 09:14:27.512034

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4b7d2e91c0a3'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the todos table with a unique per-owner position index."""
    op.create_table('todos',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('text', sa.String(length=500), nullable=False),
        sa.Column('completed', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_todos_owner_id', 'todos', ['owner_id'], unique=False)
    op.create_index(
        'ix_todos_owner_id_position',
        'todos',
        ['owner_id', 'position'],
        unique=True,
    )


def downgrade() -> None:
    """Drop the todos table."""
    op.drop_index('ix_todos_owner_id_position', table_name='todos')
    op.drop_index('ix_todos_owner_id', table_name='todos')
    op.drop_table('todos')
