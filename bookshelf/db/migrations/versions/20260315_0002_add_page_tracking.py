"""Add page tracking to saved books

Revision ID: 0002
Revises: 0001
Create Date: 2026-03-15 00:00:00.000000+00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0002'
down_revision: Union[str, None] = '0001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Existing books keep their stored percentage until pages are set
    with op.batch_alter_table('saved_books') as batch_op:
        batch_op.add_column(sa.Column('total_pages', sa.Integer(), nullable=True))
        batch_op.add_column(sa.Column('current_page', sa.Integer(), nullable=True))
        batch_op.add_column(sa.Column('reading_started_at', sa.BigInteger(), nullable=True))
        batch_op.add_column(sa.Column('reading_finished_at', sa.BigInteger(), nullable=True))


def downgrade() -> None:
    with op.batch_alter_table('saved_books') as batch_op:
        batch_op.drop_column('reading_finished_at')
        batch_op.drop_column('reading_started_at')
        batch_op.drop_column('current_page')
        batch_op.drop_column('total_pages')
