"""initial_attendance_schema

Revision ID: c4e1a7d2b9f0
Revises:
Create Date: 2026-10-19 09:00:00.000000

교사 근태 초기 스키마: users, teachers, 근무 스케줄, 특별일, QR 세션, 지문 로그, 근태.
Initial teacher attendance schema: users, teachers, work schedules,
special days, QR sessions, fingerprint logs and attendances.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID


# revision identifiers, used by Alembic.
revision: str = 'c4e1a7d2b9f0'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # users — 로그인 계정 (ADMIN / PRINCIPAL / TEACHER)
    op.create_table(
        'users',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('username', sa.String(100), nullable=False, unique=True),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False, server_default='TEACHER'),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # teachers — 교사 (지문 ID로 장치 로그와 매칭)
    # Teachers; fingerprint_id matches device badge ids
    op.create_table(
        'teachers',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True, unique=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('nip', sa.String(50), nullable=False, unique=True),
        sa.Column('fingerprint_id', sa.String(64), nullable=True, unique=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # work_schedules — 근무 스케줄 템플릿 (기본 템플릿 최대 1개)
    op.create_table(
        'work_schedules',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False, unique=True),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('late_tolerance_minutes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('working_days', JSONB(), nullable=False),
        sa.Column('is_default', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(
        'uq_work_schedules_single_default',
        'work_schedules',
        ['is_default'],
        unique=True,
        postgresql_where=sa.text('is_default = true'),
    )

    # work_schedule_assignments — 기간 적용 (겹침 허용)
    op.create_table(
        'work_schedule_assignments',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('work_schedule_id', UUID(as_uuid=True), sa.ForeignKey('work_schedules.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_work_schedule_assignments_range', 'work_schedule_assignments', ['start_date', 'end_date'])

    # special_days — 날짜별 특별일 (HOLIDAY / CUSTOM_SCHEDULE / OVERTIME)
    op.create_table(
        'special_days',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('date', sa.Date(), nullable=False, unique=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=True),
        sa.Column('end_time', sa.Time(), nullable=True),
        sa.Column('is_overtime', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # qr_sessions — 출퇴근 QR 세션 (날짜+유형별 활성 세션 최대 1개)
    op.create_table(
        'qr_sessions',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('token', sa.String(128), nullable=False, unique=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('valid_from', sa.DateTime(timezone=True), nullable=False),
        sa.Column('valid_until', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(
        'uq_qr_sessions_active_date_type',
        'qr_sessions',
        ['date', 'type'],
        unique=True,
        postgresql_where=sa.text('is_active = true'),
    )

    # fingerprint_logs — 지문 장치 원본 로그
    op.create_table(
        'fingerprint_logs',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('fingerprint_id', sa.String(64), nullable=False),
        sa.Column('scanned_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('raw_type', sa.String(10), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_fingerprint_logs_fingerprint_scanned', 'fingerprint_logs', ['fingerprint_id', 'scanned_at'])

    # attendances — 교사별 일일 근태 (교사+날짜 유일)
    op.create_table(
        'attendances',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('teacher_id', UUID(as_uuid=True), sa.ForeignKey('teachers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('check_in_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('check_out_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='ABSENT'),
        sa.Column('late_minutes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('teacher_id', 'date', name='uq_attendance_teacher_date'),
    )
    op.create_index('ix_attendances_date', 'attendances', ['date'])


def downgrade() -> None:
    op.drop_index('ix_attendances_date', table_name='attendances')
    op.drop_table('attendances')
    op.drop_index('ix_fingerprint_logs_fingerprint_scanned', table_name='fingerprint_logs')
    op.drop_table('fingerprint_logs')
    op.drop_index('uq_qr_sessions_active_date_type', table_name='qr_sessions')
    op.drop_table('qr_sessions')
    op.drop_table('special_days')
    op.drop_index('ix_work_schedule_assignments_range', table_name='work_schedule_assignments')
    op.drop_table('work_schedule_assignments')
    op.drop_index('uq_work_schedules_single_default', table_name='work_schedules')
    op.drop_table('work_schedules')
    op.drop_table('teachers')
    op.drop_table('users')
