"""Create users, recipients, medications and reminder_logs tables

Revision ID: 001
Revises:
Create Date: 2025-07-16 17:56:13.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_create_reminder_tables'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('full_name', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table('recipients',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('timezone', sa.String(), nullable=False, server_default='America/New_York'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_recipients_user_id', 'recipients', ['user_id'])

    op.create_table('medications',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('recipient_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('dosage', sa.String(), nullable=False),
        sa.Column('frequency', sa.String(), nullable=False),
        sa.Column('times', sa.JSON(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            "frequency IN ('once_daily', 'twice_daily', 'three_times_daily', 'four_times_daily', 'custom')",
            name='ck_medications_frequency'
        ),
        sa.CheckConstraint('start_date <= end_date', name='ck_medications_date_range'),
        sa.ForeignKeyConstraint(['recipient_id'], ['recipients.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_medications_recipient_id', 'medications', ['recipient_id'])
    op.create_index('ix_medications_active_range', 'medications', ['is_active', 'start_date', 'end_date'])

    op.create_table('reminder_logs',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('medication_id', sa.Uuid(), nullable=False),
        sa.Column('recipient_id', sa.Uuid(), nullable=False),
        sa.Column('scheduled_time', sa.DateTime(), nullable=False),
        sa.Column('sent_time', sa.DateTime(), nullable=True),
        sa.Column('method', sa.String(), nullable=False, server_default='email'),
        sa.Column('status', sa.String(), nullable=False, server_default='pending'),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("method IN ('email', 'sms')", name='ck_reminder_logs_method'),
        sa.CheckConstraint("status IN ('sent', 'failed', 'pending')", name='ck_reminder_logs_status'),
        sa.ForeignKeyConstraint(['medication_id'], ['medications.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['recipient_id'], ['recipients.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        # One log per dose occurrence; the dispatcher claims a reminder by inserting here
        sa.UniqueConstraint('medication_id', 'scheduled_time', name='uq_reminder_logs_medication_scheduled')
    )
    op.create_index('ix_reminder_logs_medication_id', 'reminder_logs', ['medication_id'])
    op.create_index('ix_reminder_logs_recipient_id', 'reminder_logs', ['recipient_id'])
    op.create_index('ix_reminder_logs_scheduled_time', 'reminder_logs', ['scheduled_time'])
    op.create_index('ix_reminder_logs_status', 'reminder_logs', ['status'])
    op.create_index('ix_reminder_logs_recipient_scheduled', 'reminder_logs', ['recipient_id', 'scheduled_time'])


def downgrade() -> None:
    op.drop_table('reminder_logs')
    op.drop_table('medications')
    op.drop_table('recipients')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')
