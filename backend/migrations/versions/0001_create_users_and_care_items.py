"""create users, medications, appointments, daily_tasks

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('role', sa.String(), nullable=False),
        # 환자 -> 보호자 방향만 저장
        sa.Column('paired_caregiver_id', sa.BigInteger(),
                  sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('pending_caregiver_request_id', sa.BigInteger(),
                  sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("role in ('patient','caregiver')", name='ck_users_role'),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('idx_users_paired_caregiver', 'users', ['paired_caregiver_id'])
    op.create_index('idx_users_pending_caregiver', 'users', ['pending_caregiver_request_id'])

    op.create_table(
        'medications',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('user_id', sa.BigInteger(),
                  sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('dosage', sa.String(), nullable=True),
        sa.Column('time', sa.Time(), nullable=True),
        sa.Column('duration', sa.String(), nullable=True),
        sa.Column('is_taken', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_medications_id', 'medications', ['id'])
    op.create_index('ix_medications_user_id', 'medications', ['user_id'])

    op.create_table(
        'appointments',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('user_id', sa.BigInteger(),
                  sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_appointments_id', 'appointments', ['id'])
    op.create_index('ix_appointments_user_id', 'appointments', ['user_id'])
    op.create_index('idx_appointments_user_date', 'appointments', ['user_id', 'date'])

    op.create_table(
        'daily_tasks',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('user_id', sa.BigInteger(),
                  sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('time', sa.Time(), nullable=True),
        sa.Column('frequency', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_daily_tasks_id', 'daily_tasks', ['id'])
    op.create_index('ix_daily_tasks_user_id', 'daily_tasks', ['user_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('daily_tasks')
    op.drop_table('appointments')
    op.drop_table('medications')
    op.drop_index('idx_users_pending_caregiver', table_name='users')
    op.drop_index('idx_users_paired_caregiver', table_name='users')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')
