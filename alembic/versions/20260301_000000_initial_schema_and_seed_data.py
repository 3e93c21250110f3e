"""Initial schema and seed data for Vibe Creator

Revision ID: 20260301_000000
Revises: None
Create Date: 2026-03-01 00:00:00.000000

This is the initial migration that creates all necessary tables and seeds default data
for the Vibe Creator backend. This includes:
- Accounts (users, login sessions, subscriptions, payment history)
- Editing data (projects, project assets, prompts, prompt versions)
- Export jobs and announcements
- Demo, admin and free accounts plus a welcome announcement

Revision format: YYYYMMDD_HHMMSS_description

"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Sequence, Union

import bcrypt
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ENUM, JSONB

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20260301_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Enum type names follow the lower-cased enum class names SQLModel generates
ENUMS = {
    "userrole": ("USER", "ADMIN"),
    "subscriptiontier": ("FREE", "CREATOR", "PRO"),
    "subscriptionstatus": ("ACTIVE", "EXPIRED", "CANCELLED"),
    "paymentstatus": ("PENDING", "PAID", "EXPIRED", "FAILED"),
    "projectstatus": ("DRAFT", "PROCESSING", "COMPLETED"),
    "assettype": ("VIDEO", "AUDIO", "IMAGE", "VOICE"),
    "prompttype": ("SCRIPT", "VOICE", "VIDEO_GEN", "IMAGE", "RELAXING", "CREATIVE_SCAN"),
    "exportformat": ("MP4", "WEBM", "MOV"),
    "exportresolution": ("SD", "HD", "UHD"),
    "exportstatus": ("QUEUED", "PROCESSING", "COMPLETED", "FAILED"),
}


def _enum(name: str) -> ENUM:
    return ENUM(*ENUMS[name], name=name, create_type=False)


def _id_column(name: str = "id") -> sa.Column:
    return sa.Column(name, sa.String(36), nullable=False)


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create all tables and seed initial data."""
    bind = op.get_bind()
    for name, values in ENUMS.items():
        ENUM(*values, name=name).create(bind, checkfirst=True)

    # Create users table
    op.create_table(
        "users",
        _id_column(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("avatar_url", sa.String(1024), nullable=True),
        sa.Column("role", _enum("userrole"), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_users_email", "email", unique=True),
    )

    # Create user_sessions table
    op.create_table(
        "user_sessions",
        _id_column(),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("token", sa.String(128), nullable=False),
        sa.Column("refresh_token", sa.String(128), nullable=False),
        sa.Column("user_agent", sa.String(512), nullable=True),
        sa.Column("ip_address", sa.String(64), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("refresh_expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_user_sessions_user_id", "user_id"),
        sa.Index("ix_user_sessions_token", "token", unique=True),
        sa.Index("ix_user_sessions_refresh_token", "refresh_token", unique=True),
    )

    # Create subscriptions table
    op.create_table(
        "subscriptions",
        _id_column(),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("tier", _enum("subscriptiontier"), nullable=False),
        sa.Column("status", _enum("subscriptionstatus"), nullable=False),
        sa.Column("exports_used", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("exports_limit", sa.Integer(), nullable=False),
        sa.Column("valid_until", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_subscriptions_user_id", "user_id", unique=True),
    )

    # Create payment_history table
    op.create_table(
        "payment_history",
        _id_column(),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("tier", _enum("subscriptiontier"), nullable=False),
        sa.Column("status", _enum("paymentstatus"), nullable=False),
        sa.Column("xendit_invoice_id", sa.String(128), nullable=True),
        sa.Column("payment_method", sa.String(64), nullable=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_payment_history_user_id", "user_id"),
        sa.Index("ix_payment_history_xendit_invoice_id", "xendit_invoice_id"),
    )

    # Create projects table
    op.create_table(
        "projects",
        _id_column(),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", _enum("projectstatus"), nullable=False),
        sa.Column("settings", JSONB(), nullable=False),
        sa.Column("timeline_data", JSONB(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_projects_user_id", "user_id"),
    )

    # Create project_assets table
    op.create_table(
        "project_assets",
        _id_column(),
        sa.Column("project_id", sa.String(36), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("type", _enum("assettype"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("source_url", sa.String(2048), nullable=True),
        sa.Column("storage_key", sa.String(1024), nullable=False),
        sa.Column("metadata", JSONB(), nullable=False, server_default="{}"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_project_assets_project_id", "project_id"),
    )

    # Create prompts table
    op.create_table(
        "prompts",
        _id_column(),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("type", _enum("prompttype"), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("current_version_id", sa.String(36), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_prompts_user_id", "user_id"),
    )

    # Create prompt_versions table
    op.create_table(
        "prompt_versions",
        _id_column(),
        sa.Column("prompt_id", sa.String(36), sa.ForeignKey("prompts.id"), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("input_data", JSONB(), nullable=False, server_default="{}"),
        sa.Column("generated_prompt", sa.Text(), nullable=False),
        sa.Column("user_notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("prompt_id", "version", name="uq_prompt_versions_prompt_version"),
        sa.Index("ix_prompt_versions_prompt_id", "prompt_id"),
    )

    # Create export_history table
    op.create_table(
        "export_history",
        _id_column(),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("project_id", sa.String(36), nullable=True),
        sa.Column("format", _enum("exportformat"), nullable=False),
        sa.Column("resolution", _enum("exportresolution"), nullable=False),
        sa.Column("watermark", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("status", _enum("exportstatus"), nullable=False),
        sa.Column("progress", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("timeline_data", JSONB(), nullable=True),
        sa.Column("local_path", sa.String(1024), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_export_history_user_id", "user_id"),
        sa.Index("ix_export_history_project_id", "project_id"),
        sa.Index("ix_export_history_status", "status"),
    )

    # Create announcements table
    op.create_table(
        "announcements",
        _id_column(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_announcements_is_active", "is_active"),
    )

    _seed()


def _seed() -> None:
    """Seed the demo accounts and the welcome announcement."""
    now = datetime.now(timezone.utc)

    accounts = [
        # email, password, name, role, tier, exports used, exports limit, valid for
        ("demo@vibecreator.id", "demo123", "Demo User", "USER", "CREATOR", 3, 50, timedelta(days=30)),
        ("admin@vibecreator.id", "admin123", "Admin User", "ADMIN", "PRO", 0, 999999, timedelta(days=365)),
        ("free@vibecreator.id", "free123", "Free User", "USER", "FREE", 4, 5, None),
    ]

    users_table = sa.table(
        "users",
        sa.column("id", sa.String),
        sa.column("email", sa.String),
        sa.column("password", sa.String),
        sa.column("name", sa.String),
        sa.column("role", _enum("userrole")),
        sa.column("created_at", sa.DateTime(timezone=True)),
        sa.column("updated_at", sa.DateTime(timezone=True)),
    )
    subscriptions_table = sa.table(
        "subscriptions",
        sa.column("id", sa.String),
        sa.column("user_id", sa.String),
        sa.column("tier", _enum("subscriptiontier")),
        sa.column("status", _enum("subscriptionstatus")),
        sa.column("exports_used", sa.Integer),
        sa.column("exports_limit", sa.Integer),
        sa.column("valid_until", sa.DateTime(timezone=True)),
        sa.column("created_at", sa.DateTime(timezone=True)),
        sa.column("updated_at", sa.DateTime(timezone=True)),
    )
    announcements_table = sa.table(
        "announcements",
        sa.column("id", sa.String),
        sa.column("title", sa.String),
        sa.column("content", sa.Text),
        sa.column("is_active", sa.Boolean),
        sa.column("created_at", sa.DateTime(timezone=True)),
        sa.column("updated_at", sa.DateTime(timezone=True)),
    )

    users = []
    subscriptions = []
    for email, password, name, role, tier, used, limit, valid_for in accounts:
        user_id = str(uuid.uuid4())
        users.append(
            {
                "id": user_id,
                "email": email,
                "password": bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8"),
                "name": name,
                "role": role,
                "created_at": now,
                "updated_at": now,
            }
        )
        subscriptions.append(
            {
                "id": str(uuid.uuid4()),
                "user_id": user_id,
                "tier": tier,
                "status": "ACTIVE",
                "exports_used": used,
                "exports_limit": limit,
                "valid_until": now + valid_for if valid_for else None,
                "created_at": now,
                "updated_at": now,
            }
        )

    op.bulk_insert(users_table, users)
    op.bulk_insert(subscriptions_table, subscriptions)
    op.bulk_insert(
        announcements_table,
        [
            {
                "id": str(uuid.uuid4()),
                "title": "Welcome to Vibe Creator",
                "content": "Edit your videos in the browser, build AI prompts and export in up to 4K.",
                "is_active": True,
                "created_at": now,
                "updated_at": now,
            }
        ],
    )


def downgrade() -> None:
    """Drop all tables created in upgrade."""
    op.drop_table("announcements")
    op.drop_table("export_history")
    op.drop_table("prompt_versions")
    op.drop_table("prompts")
    op.drop_table("project_assets")
    op.drop_table("projects")
    op.drop_table("payment_history")
    op.drop_table("subscriptions")
    op.drop_table("user_sessions")
    op.drop_table("users")

    # Drop the enum types
    for name in ENUMS:
        op.execute(f"DROP TYPE IF EXISTS {name}")
