"""Initial library tables

Revision ID: 0001
Revises:
Create Date: 2026-03-01 00:00:00.000000+00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'reading_lists',
        sa.Column('id', sa.String(64), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('list_type', sa.String(20), nullable=False),
        sa.Column('icon', sa.String(50), nullable=False),
        sa.Column('color', sa.String(20), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.BigInteger(), nullable=False),
        sa.Column('updated_at', sa.BigInteger(), nullable=False),
        sa.Column('local_sync_status', sa.String(20), server_default='pending', nullable=False),
        sa.Column('server_id', sa.String(255), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint("list_type IN ('system', 'custom')", name='check_list_type'),
        sa.CheckConstraint(
            "local_sync_status IN ('pending', 'synced', 'conflict')",
            name='check_list_sync_status',
        ),
    )

    op.create_table(
        'saved_books',
        sa.Column('id', sa.String(64), nullable=False),
        sa.Column('work_key', sa.String(255), nullable=False),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('author_names', sa.JSON(), nullable=False),
        sa.Column('cover_url', sa.String(500), nullable=True),
        sa.Column('first_publish_year', sa.Integer(), nullable=True),
        sa.Column('user_rating', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('reading_progress', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.BigInteger(), nullable=False),
        sa.Column('updated_at', sa.BigInteger(), nullable=False),
        sa.Column('local_sync_status', sa.String(20), server_default='pending', nullable=False),
        sa.Column('server_id', sa.String(255), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            'user_rating IS NULL OR (user_rating >= 0 AND user_rating <= 5)',
            name='check_user_rating_range',
        ),
        sa.CheckConstraint(
            'reading_progress >= 0 AND reading_progress <= 100',
            name='check_reading_progress_range',
        ),
        sa.CheckConstraint(
            "local_sync_status IN ('pending', 'synced', 'conflict')",
            name='check_book_sync_status',
        ),
    )
    op.create_index('ix_saved_books_work_key', 'saved_books', ['work_key'])
    op.create_index('idx_saved_books_created_at', 'saved_books', ['created_at'])

    op.create_table(
        'list_books',
        sa.Column('id', sa.String(64), nullable=False),
        sa.Column('list_id', sa.String(64), nullable=False),
        sa.Column('book_id', sa.String(64), nullable=False),
        sa.Column('added_at', sa.BigInteger(), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False),
        sa.Column('updated_at', sa.BigInteger(), nullable=False),
        sa.Column('local_sync_status', sa.String(20), server_default='pending', nullable=False),
        sa.Column('server_id', sa.String(255), nullable=True),
        sa.ForeignKeyConstraint(['list_id'], ['reading_lists.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['book_id'], ['saved_books.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_list_books_list_id', 'list_books', ['list_id'])
    op.create_index('ix_list_books_book_id', 'list_books', ['book_id'])
    op.create_index('idx_list_books_list_sort', 'list_books', ['list_id', 'sort_order'])


def downgrade() -> None:
    op.drop_index('idx_list_books_list_sort', table_name='list_books')
    op.drop_index('ix_list_books_book_id', table_name='list_books')
    op.drop_index('ix_list_books_list_id', table_name='list_books')
    op.drop_table('list_books')

    op.drop_index('idx_saved_books_created_at', table_name='saved_books')
    op.drop_index('ix_saved_books_work_key', table_name='saved_books')
    op.drop_table('saved_books')

    op.drop_table('reading_lists')
