"""Initial migration

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create users table
    op.create_table(
        'users',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=50), nullable=True),
        sa.Column('password', sa.String(length=255), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )

    # Create slots table
    op.create_table(
        'slots',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('start_time', sa.Time(), nullable=True),
        sa.Column('end_time', sa.Time(), nullable=True),
        sa.Column('slot_range', sa.String(length=50), nullable=True),
        sa.Column('status', sa.String(length=10), nullable=True, server_default='yes'),
        sa.Column('date', sa.Date(), nullable=True),
        sa.Column('doctor_id', sa.BigInteger(), nullable=False),
        sa.ForeignKeyConstraint(['doctor_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )

    # Create patients table
    op.create_table(
        'patients',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('patient_name', sa.String(length=200), nullable=True),
        sa.Column('mobile_no', sa.String(length=20), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('aadhar_no', sa.BigInteger(), nullable=True),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('date_time', sa.DateTime(), nullable=True),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('role_id', sa.Integer(), nullable=True),
        sa.Column('user_id', sa.BigInteger(), nullable=True),
        sa.Column('slot_id', sa.BigInteger(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['slot_id'], ['slots.id']),
        sa.PrimaryKeyConstraint('id')
    )

    # Create prescriptions table
    op.create_table(
        'prescriptions',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('fever', sa.Float(), nullable=True),
        sa.Column('weight', sa.Float(), nullable=True),
        sa.Column('bp', sa.String(length=255), nullable=True),
        sa.Column('sugar', sa.Float(), nullable=True),
        sa.Column('date', sa.Date(), nullable=True),
        sa.Column('tests', sa.JSON(), nullable=True),
        sa.Column('medicines', sa.JSON(), nullable=True),
        sa.Column('history', sa.JSON(), nullable=True),
        sa.Column('user_id', sa.BigInteger(), nullable=False),
        sa.Column('slot_id', sa.BigInteger(), nullable=False),
        sa.Column('patient_id', sa.BigInteger(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['slot_id'], ['slots.id']),
        sa.ForeignKeyConstraint(['patient_id'], ['patients.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_prescriptions_user_id_date', 'prescriptions', ['user_id', 'date'], unique=False)
    op.create_index('ix_prescriptions_slot_id', 'prescriptions', ['slot_id'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_prescriptions_slot_id', table_name='prescriptions')
    op.drop_index('ix_prescriptions_user_id_date', table_name='prescriptions')
    op.drop_table('prescriptions')
    op.drop_table('patients')
    op.drop_table('slots')
    op.drop_table('users')
