"""create initial schema

Revision ID: 3c1f0a7d9b21
Revises:
Create Date: 2026-10-17 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3c1f0a7d9b21'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


ROLE_VALUES = ('super_admin', 'nursery_admin', 'staff', 'regular')
LOCATION_VALUES = ('hayes', 'uxbridge', 'hounslow', 'general')
ACTION_VALUES = (
    'create_user', 'update_user',
    'create_event', 'update_event', 'delete_event',
    'upload_gallery', 'update_gallery', 'delete_gallery',
    'create_newsletter', 'update_newsletter', 'delete_newsletter',
    'create_staff', 'update_staff', 'delete_staff',
    'update_settings',
)


def role_enum():
    # role 타입은 세 테이블이 공유 -> PostgreSQL 에서는 upgrade() 에서 한 번만 생성
    return sa.Enum(*ROLE_VALUES, name='role').with_variant(
        postgresql.ENUM(*ROLE_VALUES, name='role', create_type=False), 'postgresql'
    )


def upgrade() -> None:
    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        postgresql.ENUM(*ROLE_VALUES, name='role').create(bind, checkfirst=True)

    op.create_table(
        'nurseries',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('location', sa.Enum(*LOCATION_VALUES, name='nursery_location'), nullable=False),
        sa.Column('address', sa.String(length=255), nullable=False),
        sa.Column('phone_number', sa.String(length=30), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('hero_image', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('location'),
    )

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('username', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('role', role_enum(), nullable=False),
        sa.Column('nursery_id', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['nursery_id'], ['nurseries.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'sessions',
        sa.Column('session_id', sa.String(length=128), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('role', role_enum(), nullable=False),
        sa.Column('nursery_id', sa.Integer(), nullable=True),
        sa.Column('csrf_token', sa.String(length=128), nullable=True),
        sa.Column('selected_nursery_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('session_id'),
    )
    op.create_index('ix_sessions_user_id', 'sessions', ['user_id'])
    op.create_index('ix_sessions_expires_at', 'sessions', ['expires_at'])

    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('date', sa.String(length=20), nullable=False),
        sa.Column('time', sa.String(length=20), nullable=False),
        sa.Column('location', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('nursery_id', sa.Integer(), nullable=False),
        sa.Column('created_by', sa.Integer(), nullable=False),
        sa.Column('updated_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['nursery_id'], ['nurseries.id']),
        sa.ForeignKeyConstraint(['created_by'], ['users.id']),
        sa.ForeignKeyConstraint(['updated_by'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_events_nursery_id', 'events', ['nursery_id'])

    op.create_table(
        'gallery_images',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('image_url', sa.String(length=500), nullable=False),
        sa.Column('caption', sa.String(length=255), nullable=True),
        sa.Column('nursery_id', sa.Integer(), nullable=False),
        sa.Column('uploaded_by', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['nursery_id'], ['nurseries.id']),
        sa.ForeignKeyConstraint(['uploaded_by'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_gallery_images_nursery_id', 'gallery_images', ['nursery_id'])

    op.create_table(
        'newsletters',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('pdf_url', sa.String(length=500), nullable=True),
        sa.Column('tags', sa.String(length=255), nullable=True),
        sa.Column('nursery_id', sa.Integer(), nullable=False),
        sa.Column('published_by', sa.Integer(), nullable=False),
        sa.Column('publish_date', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['nursery_id'], ['nurseries.id']),
        sa.ForeignKeyConstraint(['published_by'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_newsletters_nursery_id', 'newsletters', ['nursery_id'])

    op.create_table(
        'staff_members',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('job_title', sa.String(length=100), nullable=False),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('nursery_id', sa.Integer(), nullable=False),
        sa.Column('created_by', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['nursery_id'], ['nurseries.id']),
        sa.ForeignKeyConstraint(['created_by'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_staff_members_nursery_id', 'staff_members', ['nursery_id'])

    op.create_table(
        'contact_submissions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('nursery_location', sa.String(length=20), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'activity_logs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=100), nullable=False),
        sa.Column('user_role', role_enum(), nullable=False),
        sa.Column('nursery_id', sa.Integer(), nullable=True),
        sa.Column('nursery_name', sa.String(length=100), nullable=True),
        sa.Column('action_type', sa.Enum(*ACTION_VALUES, name='action_type'), nullable=False),
        sa.Column('resource_id', sa.Integer(), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['nursery_id'], ['nurseries.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_activity_logs_nursery_id', 'activity_logs', ['nursery_id'])

    op.create_table(
        'site_settings',
        sa.Column('key', sa.String(length=100), nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('updated_by', sa.Integer(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['updated_by'], ['users.id']),
        sa.PrimaryKeyConstraint('key'),
    )


def downgrade() -> None:
    op.drop_table('site_settings')
    op.drop_index('ix_activity_logs_nursery_id', table_name='activity_logs')
    op.drop_table('activity_logs')
    op.drop_table('contact_submissions')
    op.drop_index('ix_staff_members_nursery_id', table_name='staff_members')
    op.drop_table('staff_members')
    op.drop_index('ix_newsletters_nursery_id', table_name='newsletters')
    op.drop_table('newsletters')
    op.drop_index('ix_gallery_images_nursery_id', table_name='gallery_images')
    op.drop_table('gallery_images')
    op.drop_index('ix_events_nursery_id', table_name='events')
    op.drop_table('events')
    op.drop_index('ix_sessions_expires_at', table_name='sessions')
    op.drop_index('ix_sessions_user_id', table_name='sessions')
    op.drop_table('sessions')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')
    op.drop_table('nurseries')

    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        sa.Enum(name='action_type').drop(bind, checkfirst=True)
        sa.Enum(name='role').drop(bind, checkfirst=True)
        sa.Enum(name='nursery_location').drop(bind, checkfirst=True)
