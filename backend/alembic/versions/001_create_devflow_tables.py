"""Create DevFlow tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Users, accounts, questions, answers, tags, tag_questions, votes,
       collections and interactions.
How:   Portable column types (sa.Uuid, VARCHAR enums) so the same revision
       runs on PostgreSQL and SQLite. UUIDs and timestamps are assigned by
       the application, not by server defaults.

Uniqueness:
    users.email, users.username, accounts(provider, provider_account_id),
    tag_questions(tag_id, question_id), lower(tags.name).
    votes and collections get lookup indexes only.

Rollback: downgrade() drops every table (destructive).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _base_columns():
    return [
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def _counter(name: str) -> sa.Column:
    return sa.Column(name, sa.Integer(), nullable=False, server_default=sa.text("0"))


def _user_fk(name: str = "author_id") -> sa.Column:
    return sa.Column(
        name, sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )


def upgrade() -> None:
    # ── Identity ──────────────────────────────────────────────────────────
    op.create_table(
        "users",
        *_base_columns(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("username", sa.String(30), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("image", sa.String(500), nullable=True),
        sa.Column("location", sa.String(100), nullable=True),
        sa.Column("portfolio", sa.String(500), nullable=True),
        _counter("reputation"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "accounts",
        *_base_columns(),
        _user_fk("user_id"),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("image", sa.String(500), nullable=True),
        sa.Column("password", sa.String(255), nullable=True),
        sa.Column("provider", sa.String(50), nullable=False),
        sa.Column("provider_account_id", sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "provider", "provider_account_id", name="uq_accounts_provider_account"
        ),
    )
    op.create_index("ix_accounts_user_id", "accounts", ["user_id"])

    # ── Content ───────────────────────────────────────────────────────────
    op.create_table(
        "questions",
        *_base_columns(),
        sa.Column("title", sa.String(150), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        _user_fk(),
        _counter("views"),
        _counter("upvotes"),
        _counter("downvotes"),
        _counter("answer_count"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_questions_author_id", "questions", ["author_id"])
    op.create_index("idx_questions_created_at", "questions", [sa.text("created_at DESC")])

    op.create_table(
        "answers",
        *_base_columns(),
        sa.Column("content", sa.Text(), nullable=False),
        _user_fk(),
        sa.Column(
            "question_id",
            sa.Uuid(),
            sa.ForeignKey("questions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _counter("upvotes"),
        _counter("downvotes"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_answers_author_id", "answers", ["author_id"])
    op.create_index("ix_answers_question_id", "answers", ["question_id"])

    # ── Tags ──────────────────────────────────────────────────────────────
    op.create_table(
        "tags",
        *_base_columns(),
        sa.Column("name", sa.String(50), nullable=False),
        _counter("question_count"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("uq_tags_name_lower", "tags", [sa.text("lower(name)")], unique=True)

    op.create_table(
        "tag_questions",
        *_base_columns(),
        sa.Column(
            "tag_id", sa.Uuid(), sa.ForeignKey("tags.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column(
            "question_id",
            sa.Uuid(),
            sa.ForeignKey("questions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tag_id", "question_id", name="uq_tag_questions_pair"),
    )
    op.create_index("ix_tag_questions_tag_id", "tag_questions", ["tag_id"])
    op.create_index("ix_tag_questions_question_id", "tag_questions", ["question_id"])

    # ── Activity ──────────────────────────────────────────────────────────
    op.create_table(
        "votes",
        *_base_columns(),
        _user_fk(),
        sa.Column("target_id", sa.Uuid(), nullable=False),
        sa.Column("target_type", sa.String(16), nullable=False),
        sa.Column("vote_type", sa.String(16), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_votes_author_target", "votes", ["author_id", "target_id", "target_type"]
    )

    op.create_table(
        "collections",
        *_base_columns(),
        _user_fk(),
        sa.Column(
            "question_id",
            sa.Uuid(),
            sa.ForeignKey("questions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_collections_author_question", "collections", ["author_id", "question_id"]
    )

    op.create_table(
        "interactions",
        *_base_columns(),
        _user_fk("user_id"),
        sa.Column("action", sa.String(20), nullable=False),
        sa.Column("action_id", sa.Uuid(), nullable=False),
        sa.Column("action_type", sa.String(16), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_interactions_user_id", "interactions", ["user_id"])


def downgrade() -> None:
    for table in (
        "interactions",
        "collections",
        "votes",
        "tag_questions",
        "tags",
        "answers",
        "questions",
        "accounts",
        "users",
    ):
        op.drop_table(table)
