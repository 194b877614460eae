"""Create session, attendance, waitlist and notification tables

Revision ID: a001_create_attendance_tables
Revises:
Create Date: 2026-10-17

The (session_id, user_id) unique constraints on session_attendance and
session_waitlist back up the duplicate checks in the join transactions.
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'a001_create_attendance_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'sessions',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('sport_type', sa.String(50), nullable=False),
        sa.Column('date_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('max_participants', sa.Integer(), nullable=True),
        sa.Column('created_by', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.CheckConstraint(
            'max_participants IS NULL OR max_participants > 0',
            name='check_max_participants_positive',
        ),
    )
    op.create_index('ix_sessions_date_time', 'sessions', ['date_time'])
    op.create_index('ix_sessions_created_by', 'sessions', ['created_by'])

    op.create_table(
        'session_attendance',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('session_id', sa.String(), sa.ForeignKey('sessions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='REGISTERED'),
        sa.Column('marked_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('attended_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('session_id', 'user_id', name='unique_session_attendance_user'),
    )
    op.create_index('ix_session_attendance_session_id', 'session_attendance', ['session_id'])
    op.create_index('ix_session_attendance_user_id', 'session_attendance', ['user_id'])

    op.create_table(
        'session_waitlist',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('session_id', sa.String(), sa.ForeignKey('sessions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=True),
        sa.Column('notified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('notified_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('session_id', 'user_id', name='unique_session_waitlist_user'),
    )
    op.create_index('ix_session_waitlist_session_id', 'session_waitlist', ['session_id'])
    op.create_index('ix_session_waitlist_user_id', 'session_waitlist', ['user_id'])
    # Promotion lookup: next unnotified entry of a session in FIFO order
    op.create_index(
        'idx_session_waitlist_promotion',
        'session_waitlist',
        ['session_id', 'notified', 'created_at', 'id'],
    )

    op.create_table(
        'notifications',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('link', sa.String(500), nullable=True),
        sa.Column('read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])


def downgrade() -> None:
    op.drop_index('ix_notifications_user_id', table_name='notifications')
    op.drop_table('notifications')
    op.drop_index('idx_session_waitlist_promotion', table_name='session_waitlist')
    op.drop_index('ix_session_waitlist_user_id', table_name='session_waitlist')
    op.drop_index('ix_session_waitlist_session_id', table_name='session_waitlist')
    op.drop_table('session_waitlist')
    op.drop_index('ix_session_attendance_user_id', table_name='session_attendance')
    op.drop_index('ix_session_attendance_session_id', table_name='session_attendance')
    op.drop_table('session_attendance')
    op.drop_index('ix_sessions_created_by', table_name='sessions')
    op.drop_index('ix_sessions_date_time', table_name='sessions')
    op.drop_table('sessions')
