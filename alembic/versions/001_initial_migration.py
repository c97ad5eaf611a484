"""Initial migration

Revision ID: 001
Revises:
Create Date: 2024-01-01 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


room_type = sa.Enum('ICU', 'GENERAL', 'ISOLATION', 'SURGERY', name='roomtype')
admission_status = sa.Enum('ACTIVE', 'DISCHARGED', 'TRANSFERRED', name='admissionstatus')
treatment_type = sa.Enum('MEDICATION', 'PROCEDURE', 'OBSERVATION', 'SURGERY', 'THERAPY', name='treatmenttype')
treatment_status = sa.Enum('SCHEDULED', 'COMPLETED', 'CANCELLED', name='treatmentstatus')
payment_status = sa.Enum('PENDING', 'PAID', 'PARTIAL', name='paymentstatus')
payment_method = sa.Enum('CASH', 'CARD', 'CHECK', 'INSURANCE', name='paymentmethod')


def upgrade() -> None:
    # Create rooms table
    op.create_table(
        'rooms',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('number', sa.String(length=20), nullable=False),
        sa.Column('room_type', room_type, nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('occupied', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('daily_rate', sa.Numeric(10, 2), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('capacity >= 1', name='check_room_capacity'),
        sa.CheckConstraint('occupied >= 0 AND occupied <= capacity', name='check_room_occupancy'),
        sa.CheckConstraint('daily_rate > 0', name='check_room_rate')
    )
    op.create_index('ix_rooms_number', 'rooms', ['number'], unique=True)

    # Create directory tables
    op.create_table(
        'pets',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('species', sa.String(length=50), nullable=False),
        sa.Column('breed', sa.String(length=100), nullable=True),
        sa.Column('microchip_id', sa.String(length=50), nullable=True),
        sa.Column('owner_id', sa.String(length=36), nullable=False),
        sa.Column('owner_name', sa.String(length=200), nullable=False),
        sa.Column('owner_phone', sa.String(length=30), nullable=True),
        sa.Column('owner_email', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('microchip_id')
    )
    op.create_index('ix_pets_name', 'pets', ['name'], unique=False)
    op.create_index('ix_pets_owner_name', 'pets', ['owner_name'], unique=False)

    op.create_table(
        'doctors',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('specialization', sa.String(length=100), nullable=True),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    # Create admissions table
    op.create_table(
        'admissions',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('pet_id', sa.String(length=36), nullable=False),
        sa.Column('pet_name', sa.String(length=100), nullable=False),
        sa.Column('pet_species', sa.String(length=50), nullable=True),
        sa.Column('pet_breed', sa.String(length=100), nullable=True),
        sa.Column('owner_id', sa.String(length=36), nullable=False),
        sa.Column('owner_name', sa.String(length=200), nullable=False),
        sa.Column('owner_phone', sa.String(length=30), nullable=True),
        sa.Column('doctor_id', sa.String(length=36), nullable=False),
        sa.Column('doctor_name', sa.String(length=200), nullable=False),
        sa.Column('room_number', sa.String(length=20), nullable=False),
        sa.Column('admission_date', sa.Date(), nullable=False),
        sa.Column('admission_time', sa.Time(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=False),
        sa.Column('status', admission_status, nullable=False),
        sa.Column('estimated_discharge', sa.Date(), nullable=True),
        sa.Column('actual_discharge', sa.Date(), nullable=True),
        sa.Column('total_bill', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('daily_rate', sa.Numeric(10, 2), nullable=False),
        sa.Column('notes', sa.Text(), nullable=False, server_default=''),
        sa.Column('transferred_from_id', sa.String(length=36), nullable=True),
        sa.Column('transferred_to_id', sa.String(length=36), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.ForeignKeyConstraint(['room_number'], ['rooms.number']),
        sa.ForeignKeyConstraint(['transferred_from_id'], ['admissions.id']),
        sa.ForeignKeyConstraint(['transferred_to_id'], ['admissions.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('total_bill >= 0', name='check_admission_total_bill')
    )
    op.create_index('ix_admissions_pet_id', 'admissions', ['pet_id'], unique=False)
    op.create_index('ix_admissions_doctor_id', 'admissions', ['doctor_id'], unique=False)
    op.create_index('ix_admissions_room_number', 'admissions', ['room_number'], unique=False)
    op.create_index('ix_admissions_admission_date', 'admissions', ['admission_date'], unique=False)
    op.create_index('ix_admissions_status', 'admissions', ['status'], unique=False)

    # Create treatments table
    op.create_table(
        'treatments',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('admission_id', sa.String(length=36), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('treatment_date', sa.Date(), nullable=False),
        sa.Column('treatment_time', sa.Time(), nullable=False),
        sa.Column('treatment_type', treatment_type, nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('doctor_name', sa.String(length=200), nullable=True),
        sa.Column('cost', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('status', treatment_status, nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.ForeignKeyConstraint(['admission_id'], ['admissions.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('cost >= 0', name='check_treatment_cost')
    )
    op.create_index('ix_treatments_admission_id', 'treatments', ['admission_id'], unique=False)

    # Create discharge records table
    op.create_table(
        'discharge_records',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('admission_id', sa.String(length=36), nullable=False),
        sa.Column('discharge_date', sa.Date(), nullable=False),
        sa.Column('discharge_time', sa.Time(), nullable=False),
        sa.Column('discharge_notes', sa.Text(), nullable=False, server_default=''),
        sa.Column('follow_up_required', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('follow_up_date', sa.Date(), nullable=True),
        sa.Column('follow_up_instructions', sa.Text(), nullable=True),
        sa.Column('medications_dispensed', sa.Text(), nullable=True),
        sa.Column('stay_duration_days', sa.Integer(), nullable=False),
        sa.Column('calculated_bill', sa.Numeric(10, 2), nullable=False),
        sa.Column('final_bill', sa.Numeric(10, 2), nullable=False),
        sa.Column('payment_status', payment_status, nullable=False),
        sa.Column('payment_method', payment_method, nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.ForeignKeyConstraint(['admission_id'], ['admissions.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('admission_id')
    )


def downgrade() -> None:
    # Drop all tables in reverse order of creation
    op.drop_table('discharge_records')
    op.drop_table('treatments')
    op.drop_table('admissions')
    op.drop_table('doctors')
    op.drop_table('pets')
    op.drop_table('rooms')

    # Drop enums
    bind = op.get_bind()
    for enum_type in (payment_method, payment_status, treatment_status,
                      treatment_type, admission_status, room_type):
        enum_type.drop(bind, checkfirst=True)
