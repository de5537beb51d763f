"""Initial collections: time blocks, projects, weekly summaries, preferences

Revision ID: 0001
Revises:
Create Date: 2025-06-02 09:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
import sqlmodel
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the first four collections."""
    op.create_table(
        'time_block',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('type', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('project_id', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(), nullable=False, server_default=''),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=True),
        sa.Column('duration', sa.Integer(), nullable=True),
        sa.Column('status', sqlmodel.sql.sqltypes.AutoString(), nullable=False, server_default='completed'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    for column in ('date', 'type', 'start_time', 'end_time', 'project_id'):
        op.create_index(op.f(f'ix_time_block_{column}'), 'time_block', [column], unique=False)

    op.create_table(
        'project',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('team', sqlmodel.sql.sqltypes.AutoString(), nullable=False, server_default=''),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(), nullable=False, server_default=''),
        sa.Column('status', sqlmodel.sql.sqltypes.AutoString(), nullable=False, server_default='planning'),
        sa.Column('priority', sqlmodel.sql.sqltypes.AutoString(), nullable=False, server_default='medium'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    for column in ('name', 'team', 'status', 'created_at'):
        op.create_index(op.f(f'ix_project_{column}'), 'project', [column], unique=False)

    op.create_table(
        'weekly_summary',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('week_start', sa.DateTime(), nullable=False),
        sa.Column('week_end', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('payload', sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    for column in ('week_start', 'week_end', 'created_at'):
        op.create_index(op.f(f'ix_weekly_summary_{column}'), 'weekly_summary', [column], unique=False)

    op.create_table(
        'preference',
        sa.Column('key', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('value', sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint('key'),
    )


def downgrade() -> None:
    """Drop all collections."""
    op.drop_table('preference')
    for column in ('week_start', 'week_end', 'created_at'):
        op.drop_index(op.f(f'ix_weekly_summary_{column}'), table_name='weekly_summary')
    op.drop_table('weekly_summary')
    for column in ('name', 'team', 'status', 'created_at'):
        op.drop_index(op.f(f'ix_project_{column}'), table_name='project')
    op.drop_table('project')
    for column in ('date', 'type', 'start_time', 'end_time', 'project_id'):
        op.drop_index(op.f(f'ix_time_block_{column}'), table_name='time_block')
    op.drop_table('time_block')
