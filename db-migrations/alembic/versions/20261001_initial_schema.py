"""Initial schema for the site API

Revision ID: 20261001
Revises: None
Create Date: 2026-10-01 00:00:00.000000

Creates every table the API uses. JSON columns become JSONB on PostgreSQL.
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB


# revision identifiers, used by Alembic.
revision = '20261001'
down_revision = None
branch_labels = None
depends_on = None

JSONType = sa.JSON().with_variant(JSONB(), "postgresql")


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    ]


def _candidate_columns():
    return [
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('first_name', sa.String(length=128), nullable=False),
        sa.Column('last_name', sa.String(length=128), nullable=False),
        sa.Column('email', sa.String(length=256), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=False),
        sa.Column('age', sa.Integer(), nullable=False),
        sa.Column('city', sa.String(length=128), nullable=False),
        sa.Column('state', sa.String(length=128), nullable=False),
        sa.Column('country', sa.String(length=128), nullable=False),
        sa.Column('profession', sa.String(length=128), nullable=False),
        sa.Column('education', sa.String(length=256), nullable=False),
        sa.Column('meditation_experience', sa.Text(), nullable=False),
        sa.Column('teaching_experience', sa.Text(), nullable=True),
        sa.Column('why_teach', sa.Text(), nullable=False),
        sa.Column('availability', sa.String(length=256), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        *_timestamps(),
    ]


def upgrade():
    op.create_table(
        'verification_codes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('identifier', sa.String(length=256), nullable=False),
        sa.Column('purpose', sa.String(length=32), nullable=False),
        sa.Column('code', sa.String(length=6), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('consumed', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('consumed_at', sa.DateTime(), nullable=True),
        sa.Column('attempts', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_verification_codes_identifier_purpose', 'verification_codes',
                    ['identifier', 'purpose', 'created_at'], unique=False)

    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=256), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('type', sa.String(length=32), nullable=False),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('timings', sa.String(length=256), nullable=False),
        sa.Column('image_url', sa.String(length=1024), nullable=True),
        sa.Column('registration_link', sa.String(length=1024), nullable=True),
        sa.Column('max_participants', sa.Integer(), nullable=True),
        sa.Column('current_registrations', sa.Integer(), server_default='0', nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('location', JSONType, nullable=True),
        sa.Column('benefits', JSONType, nullable=True),
        sa.Column('requirements', JSONType, nullable=True),
        sa.Column('what_to_bring', JSONType, nullable=True),
        sa.Column('gallery_images', JSONType, nullable=True),
        sa.Column('date_slots', JSONType, nullable=True),
        sa.Column('teacher_id', sa.String(length=64), nullable=True),
        sa.Column('teacher_name', sa.String(length=256), nullable=True),
        sa.Column('target_audience', sa.String(length=512), nullable=True),
        sa.Column('curriculum', sa.Text(), nullable=True),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('currency', sa.String(length=8), nullable=False),
        sa.Column('created_by', sa.String(length=64), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_events_type'), 'events', ['type'], unique=False)
    op.create_index(op.f('ix_events_start_date'), 'events', ['start_date'], unique=False)
    op.create_index(op.f('ix_events_status'), 'events', ['status'], unique=False)

    op.create_table(
        'registrations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('event_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=256), nullable=False),
        sa.Column('email', sa.String(length=256), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=False),
        sa.Column('city', sa.String(length=128), nullable=True),
        sa.Column('profession', sa.String(length=128), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('payment_status', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_registrations_event_id'), 'registrations', ['event_id'], unique=False)
    op.create_index('idx_registrations_event_email', 'registrations', ['event_id', 'email'], unique=False)

    op.create_table(
        'volunteer_opportunities',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=256), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('location', sa.String(length=256), nullable=False),
        sa.Column('type', sa.String(length=16), nullable=False),
        sa.Column('time_commitment', sa.String(length=256), nullable=False),
        sa.Column('required_skills', JSONType, nullable=True),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('max_volunteers', sa.Integer(), nullable=False),
        sa.Column('current_applications', sa.Integer(), server_default='0', nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('custom_questions', JSONType, nullable=True),
        sa.Column('created_by', JSONType, nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_volunteer_opportunities_status'), 'volunteer_opportunities', ['status'], unique=False)

    op.create_table(
        'volunteer_applications',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=True),
        sa.Column('opportunity_id', sa.Integer(), nullable=True),
        sa.Column('opportunity_title', sa.String(length=256), nullable=True),
        sa.Column('first_name', sa.String(length=128), nullable=False),
        sa.Column('last_name', sa.String(length=128), nullable=False),
        sa.Column('email', sa.String(length=256), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=False),
        sa.Column('city', sa.String(length=128), nullable=False),
        sa.Column('state', sa.String(length=128), nullable=False),
        sa.Column('country', sa.String(length=128), nullable=False),
        sa.Column('age', sa.Integer(), nullable=False),
        sa.Column('profession', sa.String(length=128), nullable=False),
        sa.Column('interest_area', sa.String(length=128), nullable=False),
        sa.Column('experience', sa.Text(), nullable=False),
        sa.Column('availability', sa.String(length=256), nullable=False),
        sa.Column('why_volunteer', sa.Text(), nullable=False),
        sa.Column('skills', sa.Text(), nullable=False),
        sa.Column('custom_answers', JSONType, nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('status_history', JSONType, nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['opportunity_id'], ['volunteer_opportunities.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_volunteer_applications_opportunity_id'), 'volunteer_applications',
                    ['opportunity_id'], unique=False)
    op.create_index(op.f('ix_volunteer_applications_email'), 'volunteer_applications', ['email'], unique=False)
    op.create_index(op.f('ix_volunteer_applications_status'), 'volunteer_applications', ['status'], unique=False)
    op.create_index('idx_volunteer_applications_opportunity_email', 'volunteer_applications',
                    ['opportunity_id', 'email'], unique=False)

    op.create_table('teacher_applications', *_candidate_columns(), sa.PrimaryKeyConstraint('id'))
    op.create_index(op.f('ix_teacher_applications_email'), 'teacher_applications', ['email'], unique=False)
    op.create_index(op.f('ix_teacher_applications_status'), 'teacher_applications', ['status'], unique=False)

    op.create_table(
        'teacher_enrollments',
        *_candidate_columns(),
        sa.Column('name', sa.String(length=256), nullable=False),
        sa.Column('reference_number', sa.String(length=32), nullable=True),
        sa.Column('reviewer_notes', sa.Text(), nullable=True),
        sa.Column('reviewed_by', sa.String(length=64), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_teacher_enrollments_email'), 'teacher_enrollments', ['email'], unique=False)
    op.create_index(op.f('ix_teacher_enrollments_status'), 'teacher_enrollments', ['status'], unique=False)

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=256), nullable=False),
        sa.Column('email', sa.String(length=256), nullable=False),
        sa.Column('role', sa.String(length=32), nullable=False),
        sa.Column('avatar', sa.String(length=1024), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'content',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=256), nullable=False),
        sa.Column('type', sa.String(length=32), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('content', JSONType, nullable=False),
        sa.Column('created_by', sa.String(length=64), nullable=False),
        sa.Column('reviewed_by', sa.String(length=64), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('published_at', sa.DateTime(), nullable=True),
        sa.Column('thumbnail_url', sa.String(length=1024), nullable=True),
        sa.Column('layout', sa.String(length=16), nullable=True),
        sa.Column('media_order', JSONType, nullable=True),
        sa.Column('is_featured', sa.Boolean(), server_default=sa.false(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_content_type'), 'content', ['type'], unique=False)
    op.create_index(op.f('ix_content_status'), 'content', ['status'], unique=False)

    op.create_table(
        'resources',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=256), nullable=False),
        sa.Column('type', sa.String(length=16), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('thumbnail_url', sa.String(length=1024), nullable=True),
        sa.Column('download_url', sa.String(length=1024), nullable=True),
        sa.Column('purchase_url', sa.String(length=1024), nullable=True),
        sa.Column('author', sa.String(length=256), nullable=True),
        sa.Column('isbn', sa.String(length=32), nullable=True),
        sa.Column('pages', sa.String(length=16), nullable=True),
        sa.Column('video_url', sa.String(length=1024), nullable=True),
        sa.Column('link_url', sa.String(length=1024), nullable=True),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('quote', sa.Text(), nullable=True),
        sa.Column('subtitle', sa.String(length=256), nullable=True),
        sa.Column('category', sa.String(length=128), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('created_by', sa.String(length=64), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_resources_type'), 'resources', ['type'], unique=False)
    op.create_index(op.f('ix_resources_status'), 'resources', ['status'], unique=False)

    op.create_table(
        'subscribers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=256), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('subscribed_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_subscribers_email'), 'subscribers', ['email'], unique=True)

    op.create_table(
        'contact_messages',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=256), nullable=False),
        sa.Column('email', sa.String(length=256), nullable=False),
        sa.Column('subject', sa.String(length=512), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_contact_messages_status'), 'contact_messages', ['status'], unique=False)

    op.create_table(
        'visitor_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.String(length=64), nullable=False),
        sa.Column('page', sa.String(length=512), nullable=False),
        sa.Column('page_title', sa.String(length=512), nullable=True),
        sa.Column('referrer', sa.String(length=1024), nullable=True),
        sa.Column('user_agent', sa.String(length=512), nullable=True),
        sa.Column('ip_address', sa.String(length=64), nullable=True),
        sa.Column('device', JSONType, nullable=True),
        sa.Column('duration', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_visitor_logs_session_id'), 'visitor_logs', ['session_id'], unique=False)
    op.create_index(op.f('ix_visitor_logs_page'), 'visitor_logs', ['page'], unique=False)
    op.create_index(op.f('ix_visitor_logs_created_at'), 'visitor_logs', ['created_at'], unique=False)

    op.create_table(
        'activity_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('user_name', sa.String(length=256), nullable=True),
        sa.Column('user_email', sa.String(length=256), nullable=True),
        sa.Column('action', sa.String(length=64), nullable=False),
        sa.Column('resource', sa.String(length=64), nullable=False),
        sa.Column('resource_id', sa.String(length=64), nullable=True),
        sa.Column('details', JSONType, nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_activity_logs_user_id'), 'activity_logs', ['user_id'], unique=False)
    op.create_index(op.f('ix_activity_logs_action'), 'activity_logs', ['action'], unique=False)
    op.create_index(op.f('ix_activity_logs_resource'), 'activity_logs', ['resource'], unique=False)
    op.create_index(op.f('ix_activity_logs_created_at'), 'activity_logs', ['created_at'], unique=False)


def downgrade():
    # Children before parents
    for table in (
        'activity_logs', 'visitor_logs', 'contact_messages', 'subscribers', 'resources', 'content',
        'users', 'teacher_enrollments', 'teacher_applications', 'volunteer_applications',
        'volunteer_opportunities', 'registrations', 'events', 'verification_codes',
    ):
        op.drop_table(table)
