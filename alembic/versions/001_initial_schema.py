"""initial_schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
    ]


def _text_column(name, length=None):
    column_type = sa.String(length) if length else sa.Text()
    return sa.Column(name, column_type, nullable=False, server_default='')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_name', sa.String(150), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_user_name', 'users', ['user_name'], unique=True)

    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('owner_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('event_name', sa.String(255), nullable=False),
        sa.Column('event_start_date', sa.Date(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_events_id', 'events', ['id'])
    op.create_index('ix_events_owner_id', 'events', ['owner_id'])

    op.create_table(
        'participants',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('event_id', sa.Integer(), sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        _text_column('participant_id', 100),
        _text_column('bib_no', 50),
        _text_column('first_name', 255),
        _text_column('last_name', 255),
        _text_column('full_name', 255),
        _text_column('name_on_bib', 255),
        _text_column('id_card_passport', 100),
        _text_column('birthday_year', 20),
        _text_column('nationality', 100),
        _text_column('tshirt_size', 20),
        _text_column('start_time', 50),
        _text_column('phone', 50),
        _text_column('email', 255),
        _text_column('blood_type', 20),
        _text_column('medical_information'),
        _text_column('medicines_using'),
        _text_column('emergency_contact_name', 255),
        _text_column('emergency_contact_phone', 50),
        _text_column('parent_full_name', 255),
        _text_column('parent_date_of_birth', 50),
        _text_column('parent_email', 255),
        _text_column('parent_id_card_passport', 100),
        _text_column('parent_relationship', 100),
        sa.Column('signature', sa.Text(), nullable=True),
        sa.Column('signature_storage', sa.String(10), nullable=True),
        sa.Column('uploaded_image', sa.Text(), nullable=True),
        sa.Column('uploaded_image_storage', sa.String(10), nullable=True),
        sa.Column('checkin_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('checkin_by', sa.String(255), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_participants_id', 'participants', ['id'])
    op.create_index('ix_participants_event_id', 'participants', ['event_id'])
    op.create_index('ix_participants_bib_no', 'participants', ['bib_no'])
    op.create_index('ix_participants_checkin_at', 'participants', ['checkin_at'])


def downgrade() -> None:
    op.drop_table('participants')
    op.drop_table('events')
    op.drop_table('users')
