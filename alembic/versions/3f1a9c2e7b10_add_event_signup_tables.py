"""add event signup, account and credit tables

Revision ID: 3f1a9c2e7b10
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f1a9c2e7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('event_signups',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('organization_name', sa.String(length=255), nullable=False),
        sa.Column('contact_name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('campaign_source', sa.String(length=100), nullable=True),
        sa.Column('utm_source', sa.String(length=100), nullable=True),
        sa.Column('utm_medium', sa.String(length=100), nullable=True),
        sa.Column('utm_campaign', sa.String(length=100), nullable=True),
        sa.Column('decided_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('decided_by', sa.String(length=255), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('account_id', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_event_signups_id'), 'event_signups', ['id'], unique=False)
    op.create_index(op.f('ix_event_signups_email'), 'event_signups', ['email'], unique=False)
    op.create_index(op.f('ix_event_signups_status'), 'event_signups', ['status'], unique=False)
    op.create_index(op.f('ix_event_signups_campaign_source'), 'event_signups', ['campaign_source'], unique=False)
    op.create_index(op.f('ix_event_signups_account_id'), 'event_signups', ['account_id'], unique=False)
    op.create_index(op.f('ix_event_signups_created_at'), 'event_signups', ['created_at'], unique=False)
    # One active signup per email
    op.create_index(
        'ux_event_signups_email_active',
        'event_signups',
        ['email'],
        unique=True,
        postgresql_where=sa.text("status IN ('pending', 'approved')"),
        sqlite_where=sa.text("status IN ('pending', 'approved')"),
    )

    op.create_table('event_accounts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('signup_id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('organization_name', sa.String(length=255), nullable=False),
        sa.Column('contact_name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('account_type', sa.String(length=20), nullable=False),
        sa.Column('event_signup_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('event_expiry_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['signup_id'], ['event_signups.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('signup_id'),
    )
    op.create_index(op.f('ix_event_accounts_id'), 'event_accounts', ['id'], unique=False)
    op.create_index(op.f('ix_event_accounts_email'), 'event_accounts', ['email'], unique=True)
    op.create_index(op.f('ix_event_accounts_event_expiry_date'), 'event_accounts', ['event_expiry_date'], unique=False)
    op.create_index(op.f('ix_event_accounts_is_active'), 'event_accounts', ['is_active'], unique=False)

    op.create_table('credit_balances',
        sa.Column('account_id', sa.Uuid(), nullable=False),
        sa.Column('subscription_credits', sa.Integer(), nullable=False),
        sa.Column('purchased_credits', sa.Integer(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['account_id'], ['event_accounts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('account_id'),
    )

    op.create_table('credit_transactions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('account_id', sa.Uuid(), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('balance_after', sa.Integer(), nullable=False),
        sa.Column('credit_type', sa.String(length=20), nullable=False),
        sa.Column('transaction_type', sa.String(length=30), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['account_id'], ['event_accounts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_credit_transactions_account_id'), 'credit_transactions', ['account_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_credit_transactions_account_id'), table_name='credit_transactions')
    op.drop_table('credit_transactions')
    op.drop_table('credit_balances')

    op.drop_index(op.f('ix_event_accounts_is_active'), table_name='event_accounts')
    op.drop_index(op.f('ix_event_accounts_event_expiry_date'), table_name='event_accounts')
    op.drop_index(op.f('ix_event_accounts_email'), table_name='event_accounts')
    op.drop_index(op.f('ix_event_accounts_id'), table_name='event_accounts')
    op.drop_table('event_accounts')

    op.drop_index('ux_event_signups_email_active', table_name='event_signups')
    op.drop_index(op.f('ix_event_signups_created_at'), table_name='event_signups')
    op.drop_index(op.f('ix_event_signups_account_id'), table_name='event_signups')
    op.drop_index(op.f('ix_event_signups_campaign_source'), table_name='event_signups')
    op.drop_index(op.f('ix_event_signups_status'), table_name='event_signups')
    op.drop_index(op.f('ix_event_signups_email'), table_name='event_signups')
    op.drop_index(op.f('ix_event_signups_id'), table_name='event_signups')
    op.drop_table('event_signups')
