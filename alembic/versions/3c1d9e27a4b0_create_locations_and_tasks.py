"""create_locations_and_tasks

Revision ID: 3c1d9e27a4b0
Revises:
Create Date: 2026-10-17 10:12:41.208314

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = '3c1d9e27a4b0'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

completion_status_enum = sa.Enum('done', 'postponed', 'canceled', name='completion_status_enum')


def upgrade() -> None:
    op.create_table(
        'locations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('info', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table(
        'tasks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('location_id', sa.Integer(), nullable=False),
        # title and description joined by the first newline
        sa.Column('info', sa.Text(), nullable=False),
        sa.Column('date_added', sa.DateTime(timezone=True), nullable=False),
        sa.Column('date_to_start', sa.DateTime(timezone=True), nullable=False),
        sa.Column('date_to_complete', sa.DateTime(timezone=True), nullable=True),
        sa.Column('date_completed', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completion_status', completion_status_enum, nullable=True),
        sa.Column('tries', sa.Integer(), nullable=False, server_default='0'),
        sa.ForeignKeyConstraint(['location_id'], ['locations.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            'date_to_complete IS NULL OR date_to_complete >= date_to_start',
            name='tasks_complete_after_start',
        ),
        sa.CheckConstraint('tries >= 0', name='tasks_tries_non_negative'),
    )
    op.create_index(op.f('ix_tasks_location_id'), 'tasks', ['location_id'], unique=False)
    op.create_index(op.f('ix_tasks_date_to_start'), 'tasks', ['date_to_start'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_tasks_date_to_start'), table_name='tasks')
    op.drop_index(op.f('ix_tasks_location_id'), table_name='tasks')
    op.drop_table('tasks')
    op.drop_table('locations')
    completion_status_enum.drop(op.get_bind(), checkfirst=True)
