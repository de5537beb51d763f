"""Add teams and active timers; cache project name/team on time blocks

Revision ID: 0003
Revises: 0002
Create Date: 2025-09-01 09:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
import sqlmodel
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '0003'
down_revision: Union[str, Sequence[str], None] = '0002'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create team and active_timer; add denormalized project columns and overflow JSON."""
    op.create_table(
        'team',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(), nullable=False, server_default=''),
        sa.Column('lead', sqlmodel.sql.sqltypes.AutoString(), nullable=False, server_default=''),
        sa.Column('status', sqlmodel.sql.sqltypes.AutoString(), nullable=False, server_default='active'),
        sa.Column('color', sqlmodel.sql.sqltypes.AutoString(), nullable=False, server_default='blue'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('extra', sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_team_name'), 'team', ['name'], unique=False)
    op.create_index(op.f('ix_team_status'), 'team', ['status'], unique=False)

    op.create_table(
        'active_timer',
        sa.Column('id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('type', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('project_id', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('project_name', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('project_team', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(), nullable=False, server_default=''),
        sa.Column('content_type', sqlmodel.sql.sqltypes.AutoString(), nullable=False, server_default='other'),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('status', sqlmodel.sql.sqltypes.AutoString(), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('extra', sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    for column in ('type', 'project_id', 'start_time', 'status'):
        op.create_index(op.f(f'ix_active_timer_{column}'), 'active_timer', [column], unique=False)

    with op.batch_alter_table('time_block', schema=None) as batch_op:
        batch_op.add_column(sa.Column('project_name', sqlmodel.sql.sqltypes.AutoString(), nullable=True))
        batch_op.add_column(sa.Column('project_team', sqlmodel.sql.sqltypes.AutoString(), nullable=True))
        batch_op.add_column(sa.Column('extra', sa.JSON(), nullable=True))
        batch_op.create_index(batch_op.f('ix_time_block_project_team'), ['project_team'], unique=False)

    with op.batch_alter_table('project', schema=None) as batch_op:
        batch_op.add_column(sa.Column('extra', sa.JSON(), nullable=True))


def downgrade() -> None:
    with op.batch_alter_table('project', schema=None) as batch_op:
        batch_op.drop_column('extra')

    with op.batch_alter_table('time_block', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_time_block_project_team'))
        batch_op.drop_column('extra')
        batch_op.drop_column('project_team')
        batch_op.drop_column('project_name')

    for column in ('type', 'project_id', 'start_time', 'status'):
        op.drop_index(op.f(f'ix_active_timer_{column}'), table_name='active_timer')
    op.drop_table('active_timer')
    op.drop_index(op.f('ix_team_status'), table_name='team')
    op.drop_index(op.f('ix_team_name'), table_name='team')
    op.drop_table('team')
