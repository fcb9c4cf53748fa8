"""create employees and feeding_events

Revision ID: 3c1f0a7d2b9e
Revises:
Create Date: 2026-10-19 09:12:44.118302
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = '3c1f0a7d2b9e'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'employees',
        sa.Column('id', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('department', sa.String(length=100), nullable=False),
        sa.Column('ticket_balance', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('ticket_balance >= 0', name='ck_employees_ticket_balance_non_negative'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_employees_name', 'employees', ['name'])
    op.create_index('ix_employees_department', 'employees', ['department'])

    op.create_table(
        'feeding_events',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('employee_id', sa.String(length=50), nullable=False),
        sa.Column('employee_name', sa.String(length=150), nullable=False),
        sa.Column('department', sa.String(length=100), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_feeding_events_employee_id', 'feeding_events', ['employee_id'])
    op.create_index('ix_feeding_events_department', 'feeding_events', ['department'])
    op.create_index('ix_feeding_events_timestamp_id', 'feeding_events', ['timestamp', 'id'])


def downgrade() -> None:
    op.drop_index('ix_feeding_events_timestamp_id', table_name='feeding_events')
    op.drop_index('ix_feeding_events_department', table_name='feeding_events')
    op.drop_index('ix_feeding_events_employee_id', table_name='feeding_events')
    op.drop_table('feeding_events')
    op.drop_index('ix_employees_department', table_name='employees')
    op.drop_index('ix_employees_name', table_name='employees')
    op.drop_table('employees')
