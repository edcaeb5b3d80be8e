"""initial_schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

사용자, 근태 기록, 알림 테이블 생성.
Create users, attendance_records and notifications.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID


# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_OPEN_SHIFT_PREDICATE = sa.text("shift_state IN ('assigned', 'in_progress')")


def upgrade() -> None:
    # users — 관리자 및 직원 계정
    # Admin and staff accounts
    op.create_table(
        'users',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('phone_number', sa.String(50), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), server_default='user', nullable=False),
        sa.Column('is_admitted', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('ready_to_work', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('current_attendance_id', UUID(as_uuid=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # attendance_records — 근무 배정/출퇴근 기록
    # Shift assignments, swipe in/out and the legacy presence toggle
    op.create_table(
        'attendance_records',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('location_name', sa.String(255), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('work_date', sa.Date(), nullable=True),
        sa.Column('shift_state', sa.String(20), nullable=True),
        sa.Column('presence_state', sa.String(20), server_default='absent', nullable=False),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('start_latitude', sa.Float(), nullable=True),
        sa.Column('start_longitude', sa.Float(), nullable=True),
        sa.Column('nurse_signature', sa.Text(), nullable=True),
        sa.Column('nurse_name', sa.String(255), nullable=True),
        sa.Column('last_updated', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # 근태 인덱스 — Attendance indexes
    op.create_index('ix_attendance_records_user', 'attendance_records', ['user_id'])
    op.create_index('ix_attendance_records_user_state', 'attendance_records', ['user_id', 'shift_state'])
    op.create_index('ix_attendance_records_work_date', 'attendance_records', ['work_date'])

    # 부분 유니크 인덱스 — 사용자당 열린 근무(assigned/in_progress) 1건
    # At most one open shift per user
    op.create_index(
        'uq_attendance_records_user_open',
        'attendance_records',
        ['user_id'],
        unique=True,
        postgresql_where=_OPEN_SHIFT_PREDICATE,
        sqlite_where=_OPEN_SHIFT_PREDICATE,
    )

    # notifications — 근무 알림
    # Shift reminders, one per (user, attendance)
    op.create_table(
        'notifications',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('attendance_id', UUID(as_uuid=True), sa.ForeignKey('attendance_records.id', ondelete='CASCADE'), nullable=False),
        sa.Column('message', sa.String(1000), nullable=False),
        sa.Column('is_read', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('user_id', 'attendance_id', name='uq_notification_user_attendance'),
    )
    op.create_index('ix_notifications_user_read', 'notifications', ['user_id', 'is_read'])


def downgrade() -> None:
    op.drop_index('ix_notifications_user_read', table_name='notifications')
    op.drop_table('notifications')
    op.drop_index('uq_attendance_records_user_open', table_name='attendance_records')
    op.drop_index('ix_attendance_records_work_date', table_name='attendance_records')
    op.drop_index('ix_attendance_records_user_state', table_name='attendance_records')
    op.drop_index('ix_attendance_records_user', table_name='attendance_records')
    op.drop_table('attendance_records')
    op.drop_table('users')
