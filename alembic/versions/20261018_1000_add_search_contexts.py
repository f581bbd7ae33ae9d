"""add learned search contexts and search history

Revision ID: 20261018_1000_add_search_contexts
Revises: 20261018_0900_create_quote_tables
Create Date: 2026-10-18 10:00:00
"""
from alembic import op
import sqlalchemy as sa

revision = '20261018_1000_add_search_contexts'
down_revision = '20261018_0900_create_quote_tables'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'search_contexts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('search_query', sa.Text(), nullable=False),
        sa.Column('normalized_query', sa.String(255), nullable=False),
        sa.Column('language', sa.String(8), nullable=False, index=True),
        sa.Column('search_count', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_used_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('normalized_query', 'language', name='uq_search_context_query_language'),
    )
    op.create_table(
        'quote_context_mappings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('context_id', sa.Integer(), sa.ForeignKey('search_contexts.id'), nullable=False, index=True),
        sa.Column('quote_id', sa.Integer(), nullable=False, index=True),
        sa.Column('relevance_score', sa.Integer(), nullable=False),
        sa.Column('is_generated', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('context_id', 'quote_id', name='uq_mapping_context_quote'),
    )
    op.create_table(
        'search_history',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False, index=True),
        sa.Column('context_id', sa.Integer(), sa.ForeignKey('search_contexts.id'), nullable=False),
        sa.Column('searched_at', sa.DateTime(timezone=True), nullable=False, index=True),
    )


def downgrade() -> None:
    op.drop_table('search_history')
    op.drop_table('quote_context_mappings')
    op.drop_table('search_contexts')
