"""Reports and recommendation state

Revision ID: 001_reports
Revises:
Create Date: 2026-10-17
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = '001_reports'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'reports',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('date_of_inspection', sa.String(length=32), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('inspector_name', sa.String(length=255), nullable=False),
        sa.Column('observed_hazard', sa.Text(), nullable=False),
        sa.Column('severity_rating', sa.String(length=32), nullable=False),
        sa.Column('recommended_action', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_reports_inspector_name', 'reports', ['inspector_name'])
    # Newest-first window lookups per inspector
    op.create_index('ix_reports_inspector_created', 'reports', ['inspector_name', 'created_at'])

    op.create_table(
        'recommendation_states',
        sa.Column('key', sa.String(length=300), nullable=False),
        sa.Column('payload', sa.Text(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('key'),
    )


def downgrade() -> None:
    op.drop_table('recommendation_states')
    op.drop_index('ix_reports_inspector_created')
    op.drop_index('ix_reports_inspector_name')
    op.drop_table('reports')
