"""create users, quizzes, questions, choices, attempts, attempt_responses

Revision ID: 3f2c9a1d7b10
Revises:
Create Date: 2026-01-07
"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "3f2c9a1d7b10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("first_name", sa.String(), nullable=False),
        sa.Column("last_name", sa.String(), nullable=False),
        sa.Column("username", sa.String(), nullable=True, unique=True),
        sa.Column("email", sa.String(), nullable=True, unique=True),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("created_at", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.Integer(), nullable=False),
        sa.Column("last_login_at", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Integer(), server_default="1"),
    )
    op.create_index("ix_users_username", "users", ["username"])
    op.create_index("ix_users_email", "users", ["email"])

    op.create_table(
        "quizzes",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("instructions", sa.Text(), nullable=True),
        sa.Column(
            "created_by",
            sa.String(36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.Integer(), nullable=False),
        # 1 = active, 0 = deleted
        sa.Column("is_active", sa.Integer(), server_default="1"),
    )
    op.create_index("ix_quizzes_created_by", "quizzes", ["created_by"])
    op.create_index("ix_quizzes_created_at", "quizzes", ["created_at"])
    op.create_index("ix_quizzes_is_active", "quizzes", ["is_active"])

    op.create_table(
        "questions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "quiz_id",
            sa.String(36),
            sa.ForeignKey("quizzes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("question_text", sa.Text(), nullable=False),
        sa.Column("question_order", sa.Integer(), nullable=False),
        sa.Column("points", sa.Integer(), server_default="1"),
        sa.Column("created_at", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.Integer(), nullable=False),
    )
    op.create_index("ix_questions_quiz_id", "questions", ["quiz_id"])
    op.create_index(
        "idx_questions_quiz_order", "questions", ["quiz_id", "question_order"]
    )

    op.create_table(
        "choices",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "question_id",
            sa.String(36),
            sa.ForeignKey("questions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("choice_text", sa.Text(), nullable=False),
        sa.Column("choice_order", sa.Integer(), nullable=False),
        sa.Column("is_correct", sa.Boolean(), server_default="0"),
        sa.Column("created_at", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.Integer(), nullable=False),
    )
    op.create_index("ix_choices_question_id", "choices", ["question_id"])
    op.create_index(
        "idx_choices_question_order", "choices", ["question_id", "choice_order"]
    )

    op.create_table(
        "attempts",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "quiz_id",
            sa.String(36),
            sa.ForeignKey("quizzes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("total_points", sa.Integer(), nullable=False),
        sa.Column("percentage", sa.Float(), nullable=False),
        sa.Column("started_at", sa.Integer(), nullable=False),
        sa.Column("submitted_at", sa.Integer(), nullable=True),
        sa.Column("time_taken_seconds", sa.Integer(), nullable=True),
    )
    op.create_index("ix_attempts_user_id", "attempts", ["user_id"])
    op.create_index("ix_attempts_quiz_id", "attempts", ["quiz_id"])
    op.create_index("ix_attempts_submitted_at", "attempts", ["submitted_at"])

    op.create_table(
        "attempt_responses",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "attempt_id",
            sa.String(36),
            sa.ForeignKey("attempts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        # No FK: responses outlive a replaced question set
        sa.Column("question_id", sa.String(36), nullable=False),
        sa.Column("choice_id", sa.String(36), nullable=True),
        sa.Column("is_correct", sa.Boolean(), nullable=False),
        sa.Column("points_earned", sa.Integer(), nullable=False),
    )
    op.create_index(
        "ix_attempt_responses_attempt_id", "attempt_responses", ["attempt_id"]
    )
    op.create_index(
        "ix_attempt_responses_question_id", "attempt_responses", ["question_id"]
    )


def downgrade() -> None:
    op.drop_table("attempt_responses")
    op.drop_table("attempts")
    op.drop_table("choices")
    op.drop_table("questions")
    op.drop_table("quizzes")
    op.drop_table("users")
