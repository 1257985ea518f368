"""Initial schema for MathSolve AI

Revision ID: 20261018_000000
Revises: None
Create Date: 2026-10-18 00:00:00.000000

Creates every application table:
- users and the follower graph (users, user_follows, achievements)
- problems with their ratings, solutions and comments
- learning resources and bookmarks

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261018_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

DIFFICULTY = sa.Enum("LOW", "MEDIUM", "HIGH", name="difficulty")
RESOURCE_TYPE = sa.Enum("TUTORIAL", "GUIDE", "REFERENCE", name="resourcetype")
AUTH_PROVIDER = sa.Enum("LOCAL", "GOOGLE", name="authprovider")


def _id_column() -> sa.Column:
    return sa.Column("id", sa.String(36), nullable=False)


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create all tables."""

    op.create_table(
        "users",
        _id_column(),
        sa.Column("username", sa.String(30), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("bio", sa.String(500), nullable=True),
        sa.Column("profile_image", sa.String(500), nullable=True),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("provider", AUTH_PROVIDER, nullable=False),
        sa.Column("provider_id", sa.String(255), nullable=True),
        sa.Column("token_version", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("email_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("email_verification_token", sa.String(128), nullable=True),
        sa.Column("password_reset_token", sa.String(128), nullable=True),
        sa.Column("password_reset_expires", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rank_points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("current_rank", sa.String(20), nullable=False, server_default="Bronze"),
        sa.Column("streak_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_active_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_provider_id", "users", ["provider_id"])
    op.create_index("ix_users_email_verification_token", "users", ["email_verification_token"])
    op.create_index("ix_users_password_reset_token", "users", ["password_reset_token"])
    op.create_index("ix_users_created_at", "users", ["created_at"])

    op.create_table(
        "problems",
        _id_column(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("difficulty", DIFFICULTY, nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("tags", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("solution", sa.Text(), nullable=True),
        sa.Column("creator_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("quality_score", sa.Float(), nullable=False, server_default="0"),
        sa.Column("view_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("attempt_count", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_problems_difficulty", "problems", ["difficulty"])
    op.create_index("ix_problems_category", "problems", ["category"])
    op.create_index("ix_problems_creator_id", "problems", ["creator_id"])
    op.create_index("ix_problems_quality_score", "problems", ["quality_score"])
    op.create_index("ix_problems_created_at", "problems", ["created_at"])

    op.create_table(
        "resources",
        _id_column(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("type", RESOURCE_TYPE, nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("difficulty", DIFFICULTY, nullable=True),
        sa.Column("author_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("view_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("rating", sa.Float(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_resources_type", "resources", ["type"])
    op.create_index("ix_resources_category", "resources", ["category"])
    op.create_index("ix_resources_author_id", "resources", ["author_id"])
    op.create_index("ix_resources_created_at", "resources", ["created_at"])

    op.create_table(
        "problem_ratings",
        _id_column(),
        sa.Column("problem_id", sa.String(36), sa.ForeignKey("problems.id"), nullable=False),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("problem_id", "user_id", name="uq_problem_ratings_problem_user"),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_problem_ratings_rating_range"),
    )
    op.create_index("ix_problem_ratings_problem_id", "problem_ratings", ["problem_id"])
    op.create_index("ix_problem_ratings_user_id", "problem_ratings", ["user_id"])

    op.create_table(
        "solutions",
        _id_column(),
        sa.Column("problem_id", sa.String(36), sa.ForeignKey("problems.id"), nullable=False),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("answer", sa.Text(), nullable=False),
        sa.Column("is_correct", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("points_earned", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("time_spent", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("hints_used", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("problem_id", "user_id", name="uq_solutions_problem_user"),
    )
    op.create_index("ix_solutions_problem_id", "solutions", ["problem_id"])
    op.create_index("ix_solutions_user_id", "solutions", ["user_id"])

    op.create_table(
        "comments",
        _id_column(),
        sa.Column("problem_id", sa.String(36), sa.ForeignKey("problems.id"), nullable=False),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_comments_problem_id", "comments", ["problem_id"])
    op.create_index("ix_comments_user_id", "comments", ["user_id"])
    op.create_index("ix_comments_created_at", "comments", ["created_at"])

    op.create_table(
        "bookmarks",
        _id_column(),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("resource_id", sa.String(36), sa.ForeignKey("resources.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "resource_id", name="uq_bookmarks_user_resource"),
    )
    op.create_index("ix_bookmarks_user_id", "bookmarks", ["user_id"])
    op.create_index("ix_bookmarks_resource_id", "bookmarks", ["resource_id"])
    op.create_index("ix_bookmarks_created_at", "bookmarks", ["created_at"])

    op.create_table(
        "user_follows",
        _id_column(),
        sa.Column("follower_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("following_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("follower_id", "following_id", name="uq_user_follows_pair"),
    )
    op.create_index("ix_user_follows_follower_id", "user_follows", ["follower_id"])
    op.create_index("ix_user_follows_following_id", "user_follows", ["following_id"])

    op.create_table(
        "achievements",
        _id_column(),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("earned_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_achievements_user_id", "achievements", ["user_id"])
    op.create_index("ix_achievements_type", "achievements", ["type"])


def downgrade() -> None:
    """Drop all tables created in upgrade."""
    op.drop_table("achievements")
    op.drop_table("user_follows")
    op.drop_table("bookmarks")
    op.drop_table("comments")
    op.drop_table("solutions")
    op.drop_table("problem_ratings")
    op.drop_table("resources")
    op.drop_table("problems")
    op.drop_table("users")

    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        op.execute("DROP TYPE IF EXISTS authprovider")
        op.execute("DROP TYPE IF EXISTS resourcetype")
        op.execute("DROP TYPE IF EXISTS difficulty")
