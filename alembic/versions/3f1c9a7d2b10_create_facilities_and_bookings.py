"""create facilities, bookings and outbox tables

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-18 09:12:44.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


bookingstatus_enum = sa.Enum('PENDING', 'ACTIVE', 'COMPLETED', 'CANCELLED', name='bookingstatus')


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'facilities',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('owner_id', sa.String(length=64), nullable=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('location', sa.String(), nullable=False),
        sa.Column('distance', sa.Float(), nullable=False),
        sa.Column('type', sa.JSON(), nullable=False),
        sa.Column('price_per_kg_per_day', sa.Float(), nullable=False),
        sa.Column('total_capacity', sa.Integer(), nullable=False),
        sa.Column('available_capacity', sa.Integer(), nullable=False),
        sa.Column('rating', sa.Float(), nullable=False),
        sa.Column('review_count', sa.Integer(), nullable=False),
        sa.Column('verified', sa.Boolean(), nullable=False),
        sa.Column('certifications', sa.JSON(), nullable=False),
        sa.Column('contact_phone', sa.String(), nullable=False),
        sa.Column('operating_hours', sa.String(), nullable=False),
        sa.Column('min_booking_days', sa.Integer(), nullable=False),
        sa.Column('amenities', sa.JSON(), nullable=False),
        sa.Column('image_url', sa.String(), nullable=True),
        sa.CheckConstraint('total_capacity > 0', name='ck_facilities_total_positive'),
        sa.CheckConstraint(
            'available_capacity >= 0 AND available_capacity <= total_capacity',
            name='ck_facilities_available_in_range',
        ),
    )
    op.create_index('ix_facilities_owner_id', 'facilities', ['owner_id'])
    op.create_index('ix_facilities_location', 'facilities', ['location'])

    op.create_table(
        'bookings',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('facility_id', sa.String(length=36), sa.ForeignKey('facilities.id'), nullable=False),
        sa.Column('facility_name', sa.String(), nullable=False),
        sa.Column('facility_location', sa.String(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('price_per_kg_per_day', sa.Float(), nullable=False),
        sa.Column('total_cost', sa.Float(), nullable=False),
        sa.Column('start_date', sa.TIMESTAMP(), nullable=False),
        sa.Column('end_date', sa.TIMESTAMP(), nullable=False),
        sa.Column('status', bookingstatus_enum, nullable=False, server_default='PENDING'),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('storage_type', sa.String(), nullable=False),
        sa.Column('storage_category', sa.String(), nullable=False, server_default='Fruits & Vegetables'),
    )
    op.create_index('ix_bookings_user_id', 'bookings', ['user_id'])
    op.create_index('ix_bookings_facility_id', 'bookings', ['facility_id'])

    op.create_table(
        'outbox_events',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('topic', sa.String(length=255), nullable=False),
        sa.Column('payload', sa.Text(), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(), nullable=True),
    )
    op.create_index('ix_outbox_events_id', 'outbox_events', ['id'])
    op.create_index('ix_outbox_events_status', 'outbox_events', ['status'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_outbox_events_status', table_name='outbox_events')
    op.drop_index('ix_outbox_events_id', table_name='outbox_events')
    op.drop_table('outbox_events')

    op.drop_index('ix_bookings_facility_id', table_name='bookings')
    op.drop_index('ix_bookings_user_id', table_name='bookings')
    op.drop_table('bookings')
    # The enum type only exists as a separate object on PostgreSQL
    bookingstatus_enum.drop(op.get_bind(), checkfirst=True)

    op.drop_index('ix_facilities_location', table_name='facilities')
    op.drop_index('ix_facilities_owner_id', table_name='facilities')
    op.drop_table('facilities')
