"""create quote of the day tables

Revision ID: 20261018_0900_create_quote_tables
Revises:
Create Date: 2026-10-18 09:00:00
"""
from alembic import op
import sqlalchemy as sa

revision = '20261018_0900_create_quote_tables'
down_revision = None
branch_labels = None
depends_on = None

quote_category = sa.Enum('scripture', 'quote', 'saying', 'poem', name='quote_category')
quote_provenance = sa.Enum('static', 'generated', name='quote_provenance')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True, index=True),
        sa.Column('name', sa.String(255), nullable=True),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('is_premium', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('session_token_hash', sa.String(64), nullable=True, index=True),
        sa.Column('session_expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_table(
        'quotes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('author', sa.String(255), nullable=True),
        sa.Column('reference', sa.String(255), nullable=True),
        sa.Column('category', quote_category, nullable=False),
        sa.Column('language', sa.String(8), nullable=False, index=True),
        sa.Column('is_premium', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('context', sa.Text(), nullable=False),
        sa.Column('explanation', sa.Text(), nullable=False),
        sa.Column('situations', sa.JSON(), nullable=False),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('translations', sa.JSON(), nullable=False),
        sa.Column('provenance', quote_provenance, nullable=False),
        sa.Column('generation_prompt', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_table(
        'daily_selections',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('day', sa.Date(), nullable=False, index=True),
        sa.Column('language', sa.String(8), nullable=False),
        sa.Column('quote_id', sa.Integer(), nullable=False),
        sa.Column('selected_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('day', 'language', name='uq_daily_selection_day_language'),
    )
    op.create_table(
        'favorites',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False, index=True),
        sa.Column('quote_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('user_id', 'quote_id', name='uq_favorite_user_quote'),
    )
    op.create_table(
        'quote_history',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False, index=True),
        sa.Column('quote_id', sa.Integer(), nullable=False),
        sa.Column('shown_on', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('user_id', 'quote_id', 'shown_on', name='uq_history_user_quote_day'),
    )
    op.create_table(
        'rate_limit_counters',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(36), nullable=False, index=True),
        sa.Column('day', sa.Date(), nullable=False),
        sa.Column('count', sa.Integer(), nullable=False, server_default='0'),
        sa.UniqueConstraint('user_id', 'day', name='uq_rate_limit_user_day'),
    )
    op.create_table(
        'synonym_groups',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('group_name', sa.String(64), nullable=False, unique=True),
        sa.Column('terms', sa.JSON(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table('synonym_groups')
    op.drop_table('rate_limit_counters')
    op.drop_table('quote_history')
    op.drop_table('favorites')
    op.drop_table('daily_selections')
    op.drop_table('quotes')
    op.drop_table('users')
    quote_provenance.drop(op.get_bind(), checkfirst=True)
    quote_category.drop(op.get_bind(), checkfirst=True)
