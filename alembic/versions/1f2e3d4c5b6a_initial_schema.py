"""Initial schema: users, goals, tasks, check-ins, habits, reflections, planning, summaries

Revision ID: 1f2e3d4c5b6a
Revises:
Create Date: 2026-10-05 09:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = '1f2e3d4c5b6a'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- users ---
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True, index=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=True),
        sa.Column('country', sa.String(100), nullable=True),
        sa.Column('avatar_url', sa.String(500), nullable=True),
        sa.Column('timezone', sa.String(64), nullable=False, server_default='UTC'),
        sa.Column('onboarding_completed', sa.Boolean, nullable=False, server_default=sa.text('false')),
        sa.Column('onboarding_step', sa.Integer, nullable=False, server_default='0'),
        sa.Column('notification_preferences', postgresql.JSONB, nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column('first_task_completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('streak_current', sa.Integer, nullable=False, server_default='0'),
        sa.Column('streak_longest', sa.Integer, nullable=False, server_default='0'),
        sa.Column('last_checkin_date', sa.Date, nullable=True),
        sa.Column('last_active_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # --- goals ---
    op.create_table(
        'goals',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False, index=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('category', sa.String(50), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('success_metric', sa.String(500), nullable=True),
        sa.Column('target_date', sa.Date, nullable=True),
        sa.Column('estimated_value', sa.Numeric(12, 2), nullable=True),
        sa.Column('income_stream_name', sa.String(255), nullable=True),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.text('true')),
        sa.Column('is_archived', sa.Boolean, nullable=False, server_default=sa.text('false')),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('display_order', sa.Integer, nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # --- tasks ---
    op.create_table(
        'tasks',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False, index=True),
        sa.Column('goal_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('goals.id', ondelete='SET NULL'), nullable=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('energy_required', sa.String(20), nullable=False, server_default='medium'),
        sa.Column('work_type', sa.String(50), nullable=False, server_default='admin'),
        sa.Column('time_estimate', sa.String(20), nullable=False, server_default='medium'),
        sa.Column('priority', sa.String(20), nullable=False, server_default='should_do'),
        sa.Column('estimated_value', sa.Numeric(12, 2), nullable=True),
        sa.Column('is_billable', sa.Boolean, nullable=False, server_default=sa.text('false')),
        sa.Column('ideal_context', sa.String(255), nullable=True),
        sa.Column('preferred_time_of_day', postgresql.JSONB, nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='active', index=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('deferred_until', sa.Date, nullable=True),
        sa.Column('times_suggested', sa.Integer, nullable=False, server_default='0'),
        sa.Column('times_accepted', sa.Integer, nullable=False, server_default='0'),
        sa.Column('times_declined', sa.Integer, nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # --- daily_responses ---
    op.create_table(
        'daily_responses',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False, index=True),
        sa.Column('responded_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('energy_level', sa.Integer, nullable=False),
        sa.Column('mental_clarity', sa.Integer, nullable=False),
        sa.Column('emotional_state', sa.Integer, nullable=False),
        sa.Column('available_time', sa.Integer, nullable=False),
        sa.Column('environment_quality', sa.Integer, nullable=False),
        sa.Column('composite_score', sa.Float, nullable=False),
        sa.Column('notes', sa.Text, nullable=True),
        sa.Column('suggested_task_ids', postgresql.JSONB, nullable=True),
    )

    # --- task_suggestions ---
    op.create_table(
        'task_suggestions',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False, index=True),
        sa.Column('daily_response_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('daily_responses.id', ondelete='CASCADE'), nullable=True),
        sa.Column('task_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('tasks.id', ondelete='CASCADE'), nullable=False),
        sa.Column('suggested_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('match_score', sa.Integer, nullable=False),
        sa.Column('match_reasons', postgresql.JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column('suggestion_rank', sa.Integer, nullable=False),
        sa.Column('user_action', sa.String(20), nullable=True),
        sa.Column('responded_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('decline_reason', sa.Text, nullable=True),
    )

    # --- habits ---
    op.create_table(
        'habits',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False, index=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('habit_type', sa.String(20), nullable=False, server_default='foundational'),
        sa.Column('full_version', sa.String(255), nullable=False),
        sa.Column('scaled_version', sa.String(255), nullable=True),
        sa.Column('minimal_version', sa.String(255), nullable=True),
        sa.Column('target_frequency', sa.String(20), nullable=False, server_default='daily'),
        sa.Column('target_days', postgresql.JSONB, nullable=True),
        sa.Column('linked_goal_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('goals.id', ondelete='SET NULL'), nullable=True),
        sa.Column('why_this_helps', sa.Text, nullable=True),
        sa.Column('best_time_of_day', sa.String(20), nullable=True),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.text('true')),
        sa.Column('display_order', sa.Integer, nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        'habit_completions',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('habit_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('habits.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('version_completed', sa.String(20), nullable=False, server_default='full'),
        sa.Column('energy_level_before', sa.Integer, nullable=True),
        sa.Column('energy_level_after', sa.Integer, nullable=True),
        sa.Column('notes', sa.Text, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # --- daily_reflections ---
    op.create_table(
        'daily_reflections',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False, index=True),
        sa.Column('reflection_date', sa.Date, nullable=False),
        sa.Column('rating', sa.Integer, nullable=False),
        sa.Column('went_well', sa.Text, nullable=True),
        sa.Column('would_change', sa.Text, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('user_id', 'reflection_date'),
    )

    # --- weekly_plans / daily_commitments ---
    op.create_table(
        'weekly_plans',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False, index=True),
        sa.Column('week_start_date', sa.Date, nullable=False),
        sa.Column('focus_goal_ids', postgresql.JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column('intentions', sa.Text, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('user_id', 'week_start_date'),
    )

    op.create_table(
        'daily_commitments',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False, index=True),
        sa.Column('task_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('tasks.id', ondelete='CASCADE'), nullable=False),
        sa.Column('commitment_date', sa.Date, nullable=False, index=True),
        sa.Column('completed', sa.Boolean, nullable=False, server_default=sa.text('false')),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('abandoned', sa.Boolean, nullable=False, server_default=sa.text('false')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('user_id', 'commitment_date', 'task_id'),
    )

    # --- daily_summaries ---
    op.create_table(
        'daily_summaries',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False, index=True),
        sa.Column('summary_date', sa.Date, nullable=False),
        sa.Column('tasks_completed', sa.Integer, nullable=False, server_default='0'),
        sa.Column('tasks_accepted', sa.Integer, nullable=False, server_default='0'),
        sa.Column('tasks_deferred', sa.Integer, nullable=False, server_default='0'),
        sa.Column('value_generated', sa.Float, nullable=False, server_default='0'),
        sa.Column('avg_energy_level', sa.Float, nullable=True),
        sa.Column('avg_mental_clarity', sa.Float, nullable=True),
        sa.Column('checkins_count', sa.Integer, nullable=False, server_default='0'),
        sa.Column('goals_worked_on', postgresql.JSONB, nullable=True),
        sa.Column('is_active_day', sa.Boolean, nullable=False, server_default=sa.text('false')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('user_id', 'summary_date'),
    )

    # --- audit_logs ---
    op.create_table(
        'audit_logs',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('action', sa.String(100), nullable=False),
        sa.Column('entity_type', sa.String(50), nullable=False),
        sa.Column('entity_id', sa.String(100), nullable=True),
        sa.Column('details', postgresql.JSONB, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table('audit_logs')
    op.drop_table('daily_summaries')
    op.drop_table('daily_commitments')
    op.drop_table('weekly_plans')
    op.drop_table('daily_reflections')
    op.drop_table('habit_completions')
    op.drop_table('habits')
    op.drop_table('task_suggestions')
    op.drop_table('daily_responses')
    op.drop_table('tasks')
    op.drop_table('goals')
    op.drop_table('users')
