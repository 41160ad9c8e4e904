"""Create Tracky schema

Revision ID: v1
Revises: 
Create Date: 2026-10-19 00:00:00

Habits, daily activity facts, the discipline score cache, streaks,
75 day challenge sessions and logs, and the rewards ledger.
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'v1'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Habits
    op.create_table(
        "habits",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("icon", sa.String(16), nullable=True),
        sa.Column("weight", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("domain", sa.String(32), nullable=False, server_default="personal"),
        sa.Column("active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "name", name="uq_habits_user_name"),
    )
    op.create_index(op.f("ix_habits_user_id"), "habits", ["user_id"], unique=False)

    op.create_table(
        "habit_logs",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("habit_id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["habit_id"], ["habits.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("habit_id", "date", name="uq_habit_logs_habit_date"),
    )
    op.create_index(op.f("ix_habit_logs_habit_id"), "habit_logs", ["habit_id"], unique=False)
    op.create_index(op.f("ix_habit_logs_user_id"), "habit_logs", ["user_id"], unique=False)

    # Daily activity facts
    op.create_table(
        "workout_logs",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("workout_type", sa.String(50), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=True),
        sa.Column("effort", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "date", name="uq_workout_logs_user_date"),
    )
    op.create_index(op.f("ix_workout_logs_user_id"), "workout_logs", ["user_id"], unique=False)

    op.create_table(
        "learning_logs",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("leetcode_solved", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("pages_read", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("study_hours", sa.Float(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "date", name="uq_learning_logs_user_date"),
    )
    op.create_index(op.f("ix_learning_logs_user_id"), "learning_logs", ["user_id"], unique=False)

    op.create_table(
        "discipline_checkins",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("woke_up_on_time", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("cold_shower", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("no_phone_first_hour", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("meditated", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("planned_tomorrow", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "date", name="uq_discipline_checkins_user_date"),
    )
    op.create_index(op.f("ix_discipline_checkins_user_id"), "discipline_checkins", ["user_id"], unique=False)

    # Discipline score cache
    op.create_table(
        "discipline_scores",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("habits_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("fitness_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("learning_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("computed_at", sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "date", name="uq_discipline_scores_user_date"),
        sa.CheckConstraint("total_score >= 0 AND total_score <= 100", name="ck_discipline_scores_total_range"),
    )
    op.create_index(op.f("ix_discipline_scores_user_id"), "discipline_scores", ["user_id"], unique=False)

    # Streaks
    op.create_table(
        "user_streaks",
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("current_streak", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("longest_streak", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("last_qualifying_date", sa.Date(), nullable=True),
        sa.Column("streak_started_at", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("user_id"),
        sa.CheckConstraint("longest_streak >= current_streak", name="ck_user_streaks_longest_gte_current"),
    )

    # Challenges
    op.create_table(
        "challenge_sessions",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("challenge_type", sa.String(16), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("current_day", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("status", sa.String(16), nullable=False, server_default="active"),
        sa.Column("restart_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("completed_at", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_challenge_sessions_user_id"), "challenge_sessions", ["user_id"], unique=False)
    # One active session per user
    op.create_index(
        "uq_challenge_sessions_one_active",
        "challenge_sessions",
        ["user_id"],
        unique=True,
        postgresql_where=sa.text("status = 'active'"),
        sqlite_where=sa.text("status = 'active'"),
    )

    op.create_table(
        "challenge_daily_logs",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("session_id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("day_number", sa.Integer(), nullable=False),
        sa.Column("workout_1_done", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("workout_2_outdoor_done", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("diet_followed", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("water_goal_done", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("reading_done", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("progress_photo", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("no_alcohol", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("reflection_done", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("all_tasks_complete", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("passed", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["session_id"], ["challenge_sessions.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("session_id", "date", name="uq_challenge_daily_logs_session_date"),
        sa.CheckConstraint("day_number >= 1 AND day_number <= 75", name="ck_challenge_daily_logs_day_range"),
    )
    op.create_index(op.f("ix_challenge_daily_logs_session_id"), "challenge_daily_logs", ["session_id"], unique=False)
    op.create_index(op.f("ix_challenge_daily_logs_user_id"), "challenge_daily_logs", ["user_id"], unique=False)

    # Rewards
    op.create_table(
        "xp_events",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("reason", sa.String(64), nullable=False),
        sa.Column("day_number", sa.Integer(), nullable=True),
        sa.Column("event_date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_xp_events_user_id"), "xp_events", ["user_id"], unique=False)

    op.create_table(
        "notifications",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("type", sa.String(32), nullable=False, server_default="achievement"),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("read", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_notifications_user_id"), "notifications", ["user_id"], unique=False)


def downgrade() -> None:
    op.drop_table("notifications")
    op.drop_table("xp_events")
    op.drop_table("challenge_daily_logs")
    op.drop_index("uq_challenge_sessions_one_active", table_name="challenge_sessions")
    op.drop_table("challenge_sessions")
    op.drop_table("user_streaks")
    op.drop_table("discipline_scores")
    op.drop_table("discipline_checkins")
    op.drop_table("learning_logs")
    op.drop_table("workout_logs")
    op.drop_table("habit_logs")
    op.drop_table("habits")
