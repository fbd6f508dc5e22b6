"""Initial schema: users, contractors, students, classes, payments

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

payment_frequency = sa.Enum('WEEKLY', 'BI_WEEKLY', 'MONTHLY', 'PER_CLASS', 'CUSTOM', name='paymentfrequency')
student_status = sa.Enum('ACTIVE', 'INACTIVE', 'PAUSED', 'LEAD', 'ARCHIVED', name='studentstatus')
class_status = sa.Enum('SCHEDULED', 'COMPLETED', 'CANCELLED', 'NO_SHOW', name='classstatus')
location_type = sa.Enum('ONLINE', 'IN_PERSON', name='locationtype')
payment_status = sa.Enum('PENDING', 'RECEIVED', 'CANCELLED', 'OVERDUE', name='paymentstatus')


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('phone_number', sa.String(50), nullable=True),
        sa.Column('default_currency', sa.String(3), nullable=False, server_default='BRL'),
        sa.Column('timezone', sa.String(64), nullable=False, server_default='America/Sao_Paulo'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'contractors',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('contact_info', sa.JSON(), nullable=True),
        sa.Column('default_hourly_rate', sa.Numeric(10, 2), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False),
        sa.Column('payment_frequency', payment_frequency, nullable=False),
        sa.Column('payment_terms_days', sa.Integer(), nullable=False),
        sa.Column('min_cancellation_notice_hours', sa.Integer(), nullable=False),
        sa.Column('cancellation_penalty_rate', sa.Numeric(5, 2), nullable=False),
        sa.Column('notes', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_contractors_user_id', 'contractors', ['user_id'])

    op.create_table(
        'students',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('contractor_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('contractors.id'), nullable=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone_number', sa.String(50), nullable=True),
        sa.Column('native_language', sa.String(100), nullable=True),
        sa.Column('proficiency_level', sa.String(10), nullable=True),
        sa.Column('learning_goals', sa.String(), nullable=True),
        sa.Column('notes', sa.String(), nullable=True),
        sa.Column('status', student_status, nullable=False),
        sa.Column('package_details', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_students_user_id', 'students', ['user_id'])
    op.create_index('ix_students_contractor_id', 'students', ['contractor_id'])
    op.create_index('ix_students_status', 'students', ['status'])

    op.create_table(
        'classes',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('student_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('students.id'), nullable=False),
        sa.Column('contractor_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('contractors.id'), nullable=False),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=False),
        sa.Column('status', class_status, nullable=False),
        sa.Column('location_type', location_type, nullable=False),
        sa.Column('virtual_meeting_link', sa.String(500), nullable=True),
        sa.Column('custom_rate', sa.Numeric(10, 2), nullable=True),
        sa.Column('class_notes', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_classes_user_id', 'classes', ['user_id'])
    op.create_index('ix_classes_student_id', 'classes', ['student_id'])
    op.create_index('ix_classes_contractor_id', 'classes', ['contractor_id'])
    op.create_index('ix_classes_start_time', 'classes', ['start_time'])
    op.create_index('ix_classes_status', 'classes', ['status'])

    op.create_table(
        'payments',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('class_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('classes.id'), nullable=True),
        sa.Column('student_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('students.id'), nullable=False),
        sa.Column('contractor_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('contractors.id'), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False),
        sa.Column('status', payment_status, nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('received_date', sa.DateTime(), nullable=True),
        sa.Column('notes', sa.String(500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        # One payment per class; backstop for concurrent completions
        sa.UniqueConstraint('class_id', name='payments_class_id_key'),
    )
    op.create_index('ix_payments_user_id', 'payments', ['user_id'])
    op.create_index('ix_payments_student_id', 'payments', ['student_id'])
    op.create_index('ix_payments_contractor_id', 'payments', ['contractor_id'])
    op.create_index('ix_payments_status', 'payments', ['status'])
    op.create_index('ix_payments_due_date', 'payments', ['due_date'])


def downgrade():
    op.drop_table('payments')
    op.drop_table('classes')
    op.drop_table('students')
    op.drop_table('contractors')
    op.drop_table('users')

    bind = op.get_bind()
    for enum in (payment_status, location_type, class_status, student_status, payment_frequency):
        enum.drop(bind, checkfirst=True)
