"""initial schema

Revision ID: 3a9c5e7d1b20
Revises:
Create Date: 2026-10-19 09:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel
from sqlalchemy.dialects import mysql


# revision identifiers, used by Alembic.
revision: str = '3a9c5e7d1b20'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


_CATEGORIES = ('Roads', 'Lighting', 'Water Supply', 'Cleanliness', 'Public Safety', 'Obstructions')
_ISSUE_STATUSES = ('Reported', 'In Progress', 'Resolved', 'Closed')
_FLAG_REASONS = ('Spam', 'Inappropriate Content', 'False Information', 'Harassment', 'Other')

# (table, column, unique)
_INDEXES: tuple[tuple[str, str, bool], ...] = (
    ('users', 'id', False),
    ('users', 'created_at', False),
    ('users', 'username', True),
    ('users', 'email', True),
    ('refresh_tokens', 'id', False),
    ('refresh_tokens', 'created_at', False),
    ('refresh_tokens', 'token', True),
    ('refresh_tokens', 'user_id', False),
    ('issues', 'id', False),
    ('issues', 'created_at', False),
    ('issues', 'category', False),
    ('issues', 'status', False),
    ('issues', 'owner_id', False),
    ('issue_upvotes', 'id', False),
    ('issue_upvotes', 'created_at', False),
    ('issue_upvotes', 'issue_id', False),
    ('issue_upvotes', 'user_id', False),
    ('flags', 'id', False),
    ('flags', 'created_at', False),
    ('flags', 'issue_id', False),
    ('flags', 'flagged_by', False),
    ('flags', 'status', False),
    ('notifications', 'id', False),
    ('notifications', 'created_at', False),
    ('notifications', 'user_id', False),
    ('notifications', 'issue_id', False),
)


def _timestamp_type() -> sa.types.TypeEngine:
    return sa.DateTime(timezone=True).with_variant(mysql.DATETIME(fsp=6), 'mysql')


def _base_columns() -> list[sa.Column]:
    return [
        sa.Column('created_at', _timestamp_type(), nullable=False),
        sa.Column('updated_at', _timestamp_type(), nullable=False),
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        *_base_columns(),
        sa.Column('username', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('hashed_password', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column(
            'verification_level',
            sa.Enum('email', 'phone', 'id_document', 'biometric', name='verification_level'),
            nullable=False,
        ),
        sa.Column('role', sa.Enum('citizen', 'admin', 'municipal_worker', name='user_role'), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'refresh_tokens',
        *_base_columns(),
        sa.Column('token', sqlmodel.sql.sqltypes.AutoString(length=512), nullable=False),
        sa.Column('user_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'issues',
        *_base_columns(),
        sa.Column('title', sqlmodel.sql.sqltypes.AutoString(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.Enum(*_CATEGORIES, name='issue_category'), nullable=False),
        sa.Column('status', sa.Enum(*_ISSUE_STATUSES, name='issue_status'), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('images', sa.Text(), nullable=True),
        sa.Column('owner_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('is_anonymous', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_issues_lat_lng', 'issues', ['latitude', 'longitude'], unique=False)
    op.create_table(
        'issue_upvotes',
        *_base_columns(),
        sa.Column('issue_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('user_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('issue_id', 'user_id'),
    )
    op.create_table(
        'flags',
        *_base_columns(),
        sa.Column('issue_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('flagged_by', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('reason', sa.Enum(*_FLAG_REASONS, name='flag_reason'), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.Enum('pending', 'approved', 'rejected', name='flag_status'), nullable=False),
        sa.Column('reviewed_by', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('review_notes', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('issue_id', 'flagged_by'),
    )
    op.create_table(
        'notifications',
        *_base_columns(),
        sa.Column('user_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('issue_id', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('type', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('content', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('read', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    for table, column, unique in _INDEXES:
        op.create_index(op.f(f'ix_{table}_{column}'), table, [column], unique=unique)


def downgrade() -> None:
    """Downgrade schema."""
    for table, column, _ in reversed(_INDEXES):
        op.drop_index(op.f(f'ix_{table}_{column}'), table_name=table)
    op.drop_index('ix_issues_lat_lng', table_name='issues')
    for table in ('notifications', 'flags', 'issue_upvotes', 'issues', 'refresh_tokens', 'users'):
        op.drop_table(table)
