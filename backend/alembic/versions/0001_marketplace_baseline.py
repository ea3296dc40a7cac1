"""Marketplace baseline: plans, advertisements, payment requests, subscriptions

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '0001_marketplace_baseline'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Create the payment verification schema."""

    op.create_table(
        'subscription_plans',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.String(1000)),
        sa.Column('price', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('duration', sa.String(20), nullable=False, server_default='monthly'),
        sa.Column('post_limit', sa.Integer, nullable=False, server_default='1'),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default='true'),
        sa.Column('sort_order', sa.Integer, nullable=False, server_default='0'),
        *_timestamps(),
        sa.CheckConstraint(
            "duration IN ('weekly', 'monthly', 'yearly')",
            name='ck_subscription_plans_duration',
        ),
    )
    op.create_index('ix_subscription_plans_is_active', 'subscription_plans', ['is_active'])

    op.create_table(
        'advertisements',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text),
        sa.Column('price', sa.Numeric(12, 2)),
        sa.Column('status', sa.String(20), nullable=False, server_default='draft'),
        sa.Column(
            'subscription_plan_id',
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey('subscription_plans.id'),
        ),
        sa.Column('published_at', sa.DateTime(timezone=True)),
        *_timestamps(),
    )
    op.create_index('ix_advertisements_user_id', 'advertisements', ['user_id'])
    op.create_index('ix_advertisements_status', 'advertisements', ['status'])

    op.create_table(
        'payment_requests',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            'advertisement_id',
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey('advertisements.id'),
        ),
        sa.Column(
            'subscription_plan_id',
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey('subscription_plans.id'),
        ),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('payment_method', sa.String(100)),
        sa.Column('transaction_id', sa.String(255)),
        sa.Column('admin_notes', sa.String(2000)),
        sa.Column('payment_proof', sa.String(500)),
        sa.Column('verified_by', postgresql.UUID(as_uuid=True)),
        sa.Column('paid_at', sa.DateTime(timezone=True)),
        *_timestamps(),
    )
    op.create_index('ix_payment_requests_user_id', 'payment_requests', ['user_id'])
    op.create_index('ix_payment_requests_advertisement_id', 'payment_requests', ['advertisement_id'])
    op.create_index('ix_payment_requests_status', 'payment_requests', ['status'])

    op.create_table(
        'user_subscriptions',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            'subscription_plan_id',
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey('subscription_plans.id'),
        ),
        sa.Column('posts_used', sa.Integer, nullable=False, server_default='0'),
        sa.Column('posts_limit', sa.Integer, nullable=False, server_default='0'),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default='true'),
        sa.Column('renewed_at', sa.DateTime(timezone=True)),
        *_timestamps(),
    )
    op.create_index('ix_user_subscriptions_user_id', 'user_subscriptions', ['user_id'])

    # At most one active subscription per user
    op.create_index(
        'uq_user_subscriptions_active_user',
        'user_subscriptions',
        ['user_id'],
        unique=True,
        postgresql_where=sa.text('is_active'),
    )


def downgrade() -> None:
    """Drop the payment verification schema."""
    op.drop_index('uq_user_subscriptions_active_user', table_name='user_subscriptions')
    op.drop_index('ix_user_subscriptions_user_id', table_name='user_subscriptions')
    op.drop_table('user_subscriptions')

    op.drop_index('ix_payment_requests_status', table_name='payment_requests')
    op.drop_index('ix_payment_requests_advertisement_id', table_name='payment_requests')
    op.drop_index('ix_payment_requests_user_id', table_name='payment_requests')
    op.drop_table('payment_requests')

    op.drop_index('ix_advertisements_status', table_name='advertisements')
    op.drop_index('ix_advertisements_user_id', table_name='advertisements')
    op.drop_table('advertisements')

    op.drop_index('ix_subscription_plans_is_active', table_name='subscription_plans')
    op.drop_table('subscription_plans')
