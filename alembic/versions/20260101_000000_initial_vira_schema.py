"""Initial schema for ViRA

Revision ID: 20260101_000000
Revises: None
Create Date: 2026-01-01 00:00:00.000000

This is the initial migration that creates every ViRA table:
- Directory tables (vendors, clients, projects, ratings)
- Accounts (user profiles, vendor user links, notifications)
- Review workflow (assignments, reminders)
- Vendor onboarding (invites, applications)

On PostgreSQL the pgvector extension is enabled for the embedding columns.

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa
from pgvector.sqlalchemy import Vector

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20260101_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

EMBEDDING = Vector(1536).with_variant(sa.JSON(none_as_null=True), "sqlite")


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    """Create all tables."""

    if op.get_bind().dialect.name == "postgresql":
        op.execute("CREATE EXTENSION IF NOT EXISTS vector")

    # Create vendors table
    op.create_table(
        "vendors",
        sa.Column("vendor_id", sa.Integer(), nullable=False),
        sa.Column("vendor_code", sa.String(16), nullable=True),
        sa.Column("vendor_name", sa.String(255), nullable=False),
        sa.Column("vendor_type", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("primary_contact", sa.String(), nullable=True),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("website", sa.String(), nullable=True),
        sa.Column("location", sa.String(), nullable=True),
        sa.Column("time_zone", sa.String(), nullable=True),
        sa.Column("industry", sa.String(), nullable=True),
        sa.Column("specialties", sa.String(), nullable=True),
        sa.Column("skills", sa.String(), nullable=True),
        sa.Column("pricing_structure", sa.String(), nullable=True),
        sa.Column("rate_cost", sa.String(), nullable=True),
        sa.Column("pricing_notes", sa.String(), nullable=True),
        sa.Column("availability", sa.String(), nullable=True),
        sa.Column("availability_status", sa.String(), nullable=False, server_default="Available"),
        sa.Column("available_from", sa.Date(), nullable=True),
        sa.Column("availability_notes", sa.String(), nullable=True),
        sa.Column("portfolio_url", sa.String(), nullable=True),
        sa.Column("sample_work_urls", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        sa.Column("onboarding_date", sa.Date(), nullable=True),
        sa.Column("vendor_notes", sa.String(), nullable=True),
        sa.Column("service_categories", sa.JSON(), nullable=False),
        sa.Column("embedding", EMBEDDING, nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("vendor_id"),
        sa.UniqueConstraint("vendor_code"),
        sa.Index("ix_vendors_vendor_name", "vendor_name"),
        sa.Index("ix_vendors_status", "status"),
    )

    # Create clients table
    op.create_table(
        "clients",
        sa.Column("client_id", sa.Integer(), nullable=False),
        sa.Column("client_name", sa.String(255), nullable=False),
        sa.Column("industry", sa.String(), nullable=True),
        sa.Column("time_zone", sa.String(), nullable=True),
        sa.Column("preferred_contact", sa.String(), nullable=True),
        sa.Column("client_notes", sa.String(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("client_id"),
        sa.Index("ix_clients_client_name", "client_name", unique=True),
    )

    # Create user_profiles table
    op.create_table(
        "user_profiles",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("auth_user_id", sa.String(128), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(), nullable=True),
        sa.Column("role", sa.String(), nullable=False, server_default="team"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_login", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_user_profiles_auth_user_id", "auth_user_id", unique=True),
        sa.Index("ix_user_profiles_email", "email", unique=True),
    )

    # Create projects table
    op.create_table(
        "projects",
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("project_title", sa.String(500), nullable=False),
        sa.Column("project_description", sa.String(), nullable=True),
        sa.Column("project_type", sa.String(), nullable=True),
        sa.Column("client_id", sa.Integer(), sa.ForeignKey("clients.client_id"), nullable=True),
        sa.Column("vendor_id", sa.Integer(), sa.ForeignKey("vendors.vendor_id"), nullable=True),
        sa.Column("submitted_by", sa.String(), nullable=True),
        sa.Column("team_member", sa.String(), nullable=True),
        sa.Column("expected_deadline", sa.Date(), nullable=True),
        sa.Column("key_skills_required", sa.String(), nullable=True),
        sa.Column("industry_experience", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        sa.Column("embedding", EMBEDDING, nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("project_id"),
        sa.Index("ix_projects_client_id", "client_id"),
        sa.Index("ix_projects_vendor_id", "vendor_id"),
        sa.Index("ix_projects_status", "status"),
    )

    # Create ratings table
    op.create_table(
        "ratings",
        sa.Column("rating_id", sa.Integer(), nullable=False),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("projects.project_id"), nullable=False),
        sa.Column("vendor_id", sa.Integer(), sa.ForeignKey("vendors.vendor_id"), nullable=False),
        sa.Column("client_id", sa.Integer(), sa.ForeignKey("clients.client_id"), nullable=True),
        sa.Column("rater_email", sa.String(), nullable=False),
        sa.Column("project_success_rating", sa.Integer(), nullable=False),
        sa.Column("quality_rating", sa.Integer(), nullable=True),
        sa.Column("communication_rating", sa.Integer(), nullable=True),
        sa.Column("vendor_overall_rating", sa.Integer(), nullable=False, server_default="5"),
        sa.Column("project_on_time", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("project_on_budget", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("recommend_again", sa.Boolean(), nullable=True),
        sa.Column("recommendation_scope", sa.String(), nullable=True),
        sa.Column("what_went_well", sa.String(), nullable=True),
        sa.Column("areas_for_improvement", sa.String(), nullable=True),
        sa.Column("rating_date", sa.DateTime(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("rating_id"),
        sa.Index("ix_ratings_project_id", "project_id", unique=True),
        sa.Index("ix_ratings_vendor_id", "vendor_id"),
    )

    # Create vendor_users table
    op.create_table(
        "vendor_users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("vendor_id", sa.Integer(), sa.ForeignKey("vendors.vendor_id"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user_profiles.id"), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_vendor_users_vendor_id", "vendor_id"),
        sa.Index("ix_vendor_users_user_id", "user_id"),
    )

    # Create notifications table
    op.create_table(
        "notifications",
        sa.Column("notification_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user_profiles.id"), nullable=False),
        sa.Column("type", sa.String(64), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.String(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("read_at", sa.DateTime(), nullable=True),
        sa.Column("data", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("notification_id"),
        sa.Index("ix_notifications_user_id", "user_id"),
        sa.Index("ix_notifications_is_read", "is_read"),
    )

    # Create review_assignments table
    op.create_table(
        "review_assignments",
        sa.Column("assignment_id", sa.Integer(), nullable=False),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("projects.project_id"), nullable=False),
        sa.Column("reviewer_id", sa.Integer(), sa.ForeignKey("user_profiles.id"), nullable=False),
        sa.Column("assigned_by", sa.Integer(), sa.ForeignKey("user_profiles.id"), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("due_date", sa.DateTime(), nullable=False),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("assignment_id"),
        sa.Index("ix_review_assignments_project_id", "project_id"),
        sa.Index("ix_review_assignments_reviewer_id", "reviewer_id"),
        sa.Index("ix_review_assignments_status", "status"),
    )

    # Create review_reminders table
    op.create_table(
        "review_reminders",
        sa.Column("reminder_id", sa.Integer(), nullable=False),
        sa.Column(
            "assignment_id", sa.Integer(), sa.ForeignKey("review_assignments.assignment_id"), nullable=False
        ),
        sa.Column("reminder_type", sa.String(16), nullable=False),
        sa.Column("email_sent", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("sent_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("reminder_id"),
        sa.Index("ix_review_reminders_assignment_id", "assignment_id"),
    )

    # Create vendor_invites table
    op.create_table(
        "vendor_invites",
        sa.Column("invite_id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("invite_token", sa.String(128), nullable=False),
        sa.Column("invited_by", sa.Integer(), sa.ForeignKey("user_profiles.id"), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("accepted_at", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("invite_id"),
        sa.Index("ix_vendor_invites_email", "email"),
        sa.Index("ix_vendor_invites_invite_token", "invite_token", unique=True),
        sa.Index("ix_vendor_invites_status", "status"),
    )

    # Create vendor_applications table
    op.create_table(
        "vendor_applications",
        sa.Column("application_id", sa.Integer(), nullable=False),
        sa.Column("invite_id", sa.Integer(), sa.ForeignKey("vendor_invites.invite_id"), nullable=False),
        sa.Column("vendor_name", sa.String(255), nullable=False),
        sa.Column("primary_contact", sa.String(), nullable=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("website", sa.String(), nullable=True),
        sa.Column("industry", sa.String(), nullable=True),
        sa.Column("service_category", sa.String(), nullable=True),
        sa.Column("skills", sa.String(), nullable=True),
        sa.Column("pricing_structure", sa.String(), nullable=True),
        sa.Column("rate_cost", sa.String(), nullable=True),
        sa.Column("availability", sa.String(), nullable=True),
        sa.Column("availability_status", sa.String(), nullable=False, server_default="Available"),
        sa.Column("available_from", sa.Date(), nullable=True),
        sa.Column("availability_notes", sa.String(), nullable=True),
        sa.Column("portfolio_url", sa.String(), nullable=True),
        sa.Column("sample_work_urls", sa.String(), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("reviewed_by", sa.Integer(), sa.ForeignKey("user_profiles.id"), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(), nullable=True),
        sa.Column("rejection_reason", sa.String(), nullable=True),
        sa.Column("created_vendor_id", sa.Integer(), sa.ForeignKey("vendors.vendor_id"), nullable=True),
        sa.Column("submitted_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("application_id"),
        sa.Index("ix_vendor_applications_invite_id", "invite_id", unique=True),
        sa.Index("ix_vendor_applications_status", "status"),
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("vendor_applications")
    op.drop_table("vendor_invites")
    op.drop_table("review_reminders")
    op.drop_table("review_assignments")
    op.drop_table("notifications")
    op.drop_table("vendor_users")
    op.drop_table("ratings")
    op.drop_table("projects")
    op.drop_table("user_profiles")
    op.drop_table("clients")
    op.drop_table("vendors")
