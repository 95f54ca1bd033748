"""Create rental and billing tables

Revision ID: 20260301_000001
Revises: None
Create Date: 2026-03-01

Creates rooms, rentals, tenant_information, electricity_usages,
utility_rates, invoices and number_sequences.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20260301_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all engine tables."""
    op.create_table(
        'rooms',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column(
            'status',
            sa.Enum('available', 'occupied', 'maintenance', name='room_status', create_constraint=True),
            nullable=False,
            server_default='available'
        ),
        sa.Column('price_per_month', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_rooms_status', 'rooms', ['status'])

    op.create_table(
        'rentals',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('room_id', sa.Integer(), nullable=False),
        sa.Column('contract_number', sa.String(length=32), nullable=False),
        sa.Column('contract_date', sa.Date(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column(
            'status',
            sa.Enum(
                'pending', 'approved', 'active', 'cancelled', 'completed',
                name='rental_status',
                create_constraint=True
            ),
            nullable=False,
            server_default='pending'
        ),
        sa.Column('monthly_rent', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('deposit_amount', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('advance_payment', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('total_price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('special_conditions', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('contract_number', name='uq_rentals_contract_number'),
        sa.ForeignKeyConstraint(['room_id'], ['rooms.id'], name='fk_rentals_room_id'),
    )
    op.create_index('ix_rentals_user_id', 'rentals', ['user_id'])
    op.create_index('ix_rentals_room_id_status', 'rentals', ['room_id', 'status'])

    op.create_table(
        'tenant_information',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('rental_id', sa.Integer(), nullable=False),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.Column('document_refs', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('rental_id', name='uq_tenant_information_rental_id'),
        sa.ForeignKeyConstraint(
            ['rental_id'],
            ['rentals.id'],
            name='fk_tenant_information_rental_id',
            ondelete='CASCADE'
        ),
    )

    op.create_table(
        'electricity_usages',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('room_id', sa.Integer(), nullable=False),
        sa.Column('reading_date', sa.Date(), nullable=False),
        sa.Column('previous_units', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('current_units', sa.Integer(), nullable=False),
        sa.Column('units_used', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_billed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['room_id'],
            ['rooms.id'],
            name='fk_electricity_usages_room_id',
            ondelete='CASCADE'
        ),
    )
    op.create_index(
        'ix_electricity_usages_room_id_reading_date',
        'electricity_usages',
        ['room_id', 'reading_date']
    )
    op.create_index('ix_electricity_usages_is_billed', 'electricity_usages', ['is_billed'])

    op.create_table(
        'utility_rates',
        sa.Column('id', sa.Integer(), autoincrement=False, nullable=False),
        sa.Column('electricity_rate_per_unit', sa.Numeric(precision=8, scale=2), nullable=False, server_default='0'),
        sa.Column('water_flat_rate', sa.Numeric(precision=8, scale=2), nullable=False, server_default='0'),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'invoices',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('rental_id', sa.Integer(), nullable=False),
        sa.Column('electricity_usage_id', sa.Integer(), nullable=True),
        sa.Column('invoice_number', sa.String(length=32), nullable=False),
        sa.Column('issue_date', sa.Date(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('room_rent', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('electricity_charge', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('water_charge', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column('total_amount', sa.Numeric(precision=10, scale=2), nullable=False, server_default='0'),
        sa.Column(
            'status',
            sa.Enum('unpaid', 'paid', name='invoice_status', create_constraint=True),
            nullable=False,
            server_default='unpaid'
        ),
        sa.Column('period_month', sa.Integer(), nullable=True),
        sa.Column('period_year', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('invoice_number', name='uq_invoices_invoice_number'),
        sa.ForeignKeyConstraint(
            ['rental_id'],
            ['rentals.id'],
            name='fk_invoices_rental_id',
            ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['electricity_usage_id'],
            ['electricity_usages.id'],
            name='fk_invoices_electricity_usage_id',
            ondelete='NO ACTION'
        ),
    )

    # Create indexes for common queries
    op.create_index('ix_invoices_rental_id', 'invoices', ['rental_id'])
    op.create_index('ix_invoices_issue_date', 'invoices', ['issue_date'])
    op.create_index('ix_invoices_due_date', 'invoices', ['due_date'])
    op.create_index('ix_invoices_status', 'invoices', ['status'])

    op.create_table(
        'number_sequences',
        sa.Column('name', sa.String(length=32), nullable=False),
        sa.Column('last_value', sa.Integer(), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('name'),
    )


def downgrade() -> None:
    """Drop all engine tables."""
    op.drop_table('number_sequences')

    op.drop_index('ix_invoices_status', table_name='invoices')
    op.drop_index('ix_invoices_due_date', table_name='invoices')
    op.drop_index('ix_invoices_issue_date', table_name='invoices')
    op.drop_index('ix_invoices_rental_id', table_name='invoices')
    op.drop_table('invoices')

    op.drop_table('utility_rates')

    op.drop_index('ix_electricity_usages_is_billed', table_name='electricity_usages')
    op.drop_index('ix_electricity_usages_room_id_reading_date', table_name='electricity_usages')
    op.drop_table('electricity_usages')

    op.drop_table('tenant_information')

    op.drop_index('ix_rentals_room_id_status', table_name='rentals')
    op.drop_index('ix_rentals_user_id', table_name='rentals')
    op.drop_table('rentals')

    op.drop_index('ix_rooms_status', table_name='rooms')
    op.drop_table('rooms')
