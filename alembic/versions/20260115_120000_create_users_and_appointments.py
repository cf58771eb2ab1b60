"""create users and appointments

Revision ID: 20260115_120000
Revises:
Create Date: 2026-01-15 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20260115_120000'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column('email', sa.String(254), nullable=False, unique=True),
        sa.Column('first_name', sa.String(80), nullable=False),
        sa.Column('last_name', sa.String(80), nullable=False, server_default=''),
        sa.Column('role', sa.String(16), nullable=False, server_default='client'),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('now()')),
    )
    op.create_index('ix_users_role', 'users', ['role'], unique=False)

    op.create_table(
        'appointments',
        sa.Column('id', sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column('artist_id', sa.BigInteger(),
                  sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('artist_name', sa.String(160), nullable=False, server_default=''),
        sa.Column('client_id', sa.String(128), nullable=False, server_default='guest'),
        sa.Column('client_name', sa.String(120), nullable=False),
        sa.Column('client_email', sa.String(254), nullable=True),
        sa.Column('client_phone', sa.String(20), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', sa.String(32), nullable=False),
        sa.Column('starts_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('ends_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(16), nullable=False, server_default='pending'),
        sa.Column('cancellation_token', sa.String(64), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('now()')),
    )
    # Range scans by start time, optionally per artist; not unique
    op.create_index('ix_appointments_artist_id_starts_at', 'appointments',
                    ['artist_id', 'starts_at'], unique=False)
    op.create_index('ix_appointments_starts_at', 'appointments', ['starts_at'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_appointments_starts_at', table_name='appointments')
    op.drop_index('ix_appointments_artist_id_starts_at', table_name='appointments')
    op.drop_table('appointments')
    op.drop_index('ix_users_role', table_name='users')
    op.drop_table('users')
