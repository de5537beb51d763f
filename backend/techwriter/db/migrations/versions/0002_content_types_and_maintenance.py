"""Index content types, document versions and maintenance status

Revision ID: 0002
Revises: 0001
Create Date: 2025-07-14 09:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
import sqlmodel
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '0002'
down_revision: Union[str, Sequence[str], None] = '0001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Add content type to time blocks; add versioning and maintenance fields to projects."""
    with op.batch_alter_table('time_block', schema=None) as batch_op:
        batch_op.add_column(
            sa.Column('content_type', sqlmodel.sql.sqltypes.AutoString(), nullable=False, server_default='other')
        )
        batch_op.create_index(batch_op.f('ix_time_block_content_type'), ['content_type'], unique=False)

    with op.batch_alter_table('project', schema=None) as batch_op:
        batch_op.add_column(
            sa.Column('content_type', sqlmodel.sql.sqltypes.AutoString(), nullable=False, server_default='other')
        )
        batch_op.add_column(
            sa.Column('version', sqlmodel.sql.sqltypes.AutoString(), nullable=False, server_default='draft-1')
        )
        batch_op.add_column(sa.Column('due_date', sa.DateTime(), nullable=True))
        batch_op.add_column(sa.Column('last_updated', sa.DateTime(), nullable=True))
        batch_op.add_column(
            sa.Column('maintenance_status', sqlmodel.sql.sqltypes.AutoString(), nullable=False, server_default='current')
        )
        for column in ('content_type', 'version', 'last_updated', 'maintenance_status'):
            batch_op.create_index(batch_op.f(f'ix_project_{column}'), [column], unique=False)


def downgrade() -> None:
    with op.batch_alter_table('project', schema=None) as batch_op:
        for column in ('content_type', 'version', 'last_updated', 'maintenance_status'):
            batch_op.drop_index(batch_op.f(f'ix_project_{column}'))
        for column in ('maintenance_status', 'last_updated', 'due_date', 'version', 'content_type'):
            batch_op.drop_column(column)

    with op.batch_alter_table('time_block', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_time_block_content_type'))
        batch_op.drop_column('content_type')
