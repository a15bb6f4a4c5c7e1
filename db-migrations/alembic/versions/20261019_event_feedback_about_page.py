"""Event feedback and the About page document

Revision ID: 20261019
Revises: 20261001
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB


# revision identifiers, used by Alembic.
revision = '20261019'
down_revision = '20261001'
branch_labels = None
depends_on = None

JSONType = sa.JSON().with_variant(JSONB(), "postgresql")


def upgrade():
    op.create_table(
        'event_feedback',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('event_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=True),
        sa.Column('user_name', sa.String(length=256), nullable=False),
        sa.Column('user_email', sa.String(length=256), nullable=False),
        sa.Column('type', sa.String(length=16), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=True),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('photo_url', sa.String(length=1024), nullable=True),
        sa.Column('photo_caption', sa.String(length=512), nullable=True),
        sa.Column('admin_notes', sa.Text(), nullable=True),
        sa.Column('reviewed_by', sa.String(length=256), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_event_feedback_event_id'), 'event_feedback', ['event_id'], unique=False)
    op.create_index(op.f('ix_event_feedback_status'), 'event_feedback', ['status'], unique=False)

    op.create_table(
        'about_page',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('who_we_are', JSONType, nullable=True),
        sa.Column('vision_mission', JSONType, nullable=True),
        sa.Column('team_members', JSONType, nullable=True),
        sa.Column('core_values', JSONType, nullable=True),
        sa.Column('services', JSONType, nullable=True),
        sa.Column('partners', JSONType, nullable=True),
        sa.Column('inspiration', JSONType, nullable=True),
        sa.Column('global_reach', JSONType, nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )


def downgrade():
    op.drop_table('about_page')
    op.drop_table('event_feedback')
