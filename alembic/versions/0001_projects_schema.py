# File: alembic/versions/0001_projects_schema.py | Version: 1.0 | Title: Projects, saved views, dashboards & preferences
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_projects_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "user",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(120), nullable=True),
        sa.Column("last_name", sa.String(120), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column("is_admin", sa.Boolean(), nullable=True),
        sa.Column("can_see_admin_menu", sa.Boolean(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_user_email", "user", ["email"], unique=True)

    op.create_table(
        "client",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_table(
        "service",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=True),
    )
    op.create_table(
        "project_type",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("service_id", sa.String(), sa.ForeignKey("service.id"), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True),
    )
    op.create_index("ix_project_type_service_id", "project_type", ["service_id"])

    op.create_table(
        "stage",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("project_type_id", sa.String(), sa.ForeignKey("project_type.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=True),
        sa.Column("max_instance_time", sa.Integer(), nullable=True),
    )
    op.create_index("ix_stage_project_type_id", "stage", ["project_type_id"])

    op.create_table(
        "project",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("client_id", sa.String(), sa.ForeignKey("client.id"), nullable=False),
        sa.Column("project_type_id", sa.String(), sa.ForeignKey("project_type.id"), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("current_status", sa.String(255), nullable=False),
        sa.Column("stage_entered_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("current_assignee_id", sa.String(), sa.ForeignKey("user.id"), nullable=True),
        sa.Column("project_owner_id", sa.String(), sa.ForeignKey("user.id"), nullable=True),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("target_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("archived", sa.Boolean(), nullable=True),
        sa.Column("is_completed", sa.Boolean(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_project_client_id", "project", ["client_id"])
    op.create_index("ix_project_project_type_id", "project", ["project_type_id"])
    op.create_index("ix_project_current_assignee_id", "project", ["current_assignee_id"])
    op.create_index("ix_project_project_owner_id", "project", ["project_owner_id"])
    op.create_index("ix_project_archived_due_date", "project", ["archived", "due_date"])

    op.create_table(
        "project_views",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("filters", sa.Text(), nullable=False),
        sa.Column("view_mode", sa.String(), server_default="list", nullable=False),
        sa.Column("calendar_settings", sa.JSON(), nullable=True),
        sa.Column("pivot_config", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_project_views_user", "project_views", ["user_id"])

    op.create_table(
        "dashboards",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("filters", sa.Text(), nullable=True),
        sa.Column("widgets", sa.JSON(), nullable=False),
        sa.Column("visibility", sa.String(), server_default="private", nullable=False),
        sa.Column("is_homescreen_dashboard", sa.Boolean(), server_default=sa.text("0"), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_dashboards_user", "dashboards", ["user_id"])
    op.create_index("ix_dashboards_visibility", "dashboards", ["visibility"])

    op.create_table(
        "user_project_preferences",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), sa.ForeignKey("user.id"), nullable=False, unique=True),
        sa.Column("default_view_type", sa.String(), nullable=True),
        sa.Column("default_view_id", sa.String(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "column_preferences",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("view_type", sa.String(), nullable=False),
        sa.Column("column_order", sa.JSON(), nullable=True),
        sa.Column("visible_columns", sa.JSON(), nullable=True),
        sa.Column("column_widths", sa.JSON(), nullable=True),
        sa.UniqueConstraint("user_id", "view_type", name="uq_column_prefs_user_view"),
    )

    op.create_table(
        "project_list_snapshots",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("cache_key", sa.String(), nullable=False),
        sa.Column("projects", sa.JSON(), nullable=False),
        sa.Column("stage_stats", sa.JSON(), nullable=True),
        sa.Column("cached_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("user_id", "cache_key", name="uq_snapshot_user_key"),
    )


def downgrade():
    op.drop_table("project_list_snapshots")
    op.drop_table("column_preferences")
    op.drop_table("user_project_preferences")
    op.drop_index("ix_dashboards_visibility", table_name="dashboards")
    op.drop_index("ix_dashboards_user", table_name="dashboards")
    op.drop_table("dashboards")
    op.drop_index("ix_project_views_user", table_name="project_views")
    op.drop_table("project_views")
    for name in (
        "ix_project_archived_due_date",
        "ix_project_project_owner_id",
        "ix_project_current_assignee_id",
        "ix_project_project_type_id",
        "ix_project_client_id",
    ):
        op.drop_index(name, table_name="project")
    op.drop_table("project")
    op.drop_index("ix_stage_project_type_id", table_name="stage")
    op.drop_table("stage")
    op.drop_index("ix_project_type_service_id", table_name="project_type")
    op.drop_table("project_type")
    op.drop_table("service")
    op.drop_table("client")
    op.drop_index("ix_user_email", table_name="user")
    op.drop_table("user")
