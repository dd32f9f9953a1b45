"""create subs table

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9b7d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'subs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        # 'MM-YYYY'
        sa.Column('start_date', sa.String(7), nullable=False),
        sa.Column('end_date', sa.String(7), nullable=True),
    )
    op.create_index('ix_subs_user_id', 'subs', ['user_id'])


def downgrade() -> None:
    op.drop_index('ix_subs_user_id', table_name='subs')
    op.drop_table('subs')
