"""create folders table

Revision ID: 3f9c2d1a7b40
Revises: 
Create Date: 2025-06-02 09:14:27.512004

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f9c2d1a7b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Share metadata; payload blobs are stored outside the database
    op.create_table(
        'folders',
        sa.Column('id', sa.Text(), nullable=False),
        sa.Column('hmac', sa.Text(), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('expiration', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        schema='public'
    )
    # Dedup lookup: hmac = ? AND expiration > now
    op.create_index(
        'ix_folders_hmac_expiration',
        'folders',
        ['hmac', 'expiration'],
        schema='public'
    )
    # Cleanup sweep by expiration
    op.create_index(
        'ix_folders_expiration',
        'folders',
        ['expiration'],
        schema='public'
    )


def downgrade() -> None:
    op.drop_index('ix_folders_expiration', table_name='folders', schema='public')
    op.drop_index('ix_folders_hmac_expiration', table_name='folders', schema='public')
    op.drop_table('folders', schema='public')
