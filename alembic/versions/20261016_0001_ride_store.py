"""ride store schema"""

from alembic import op
import sqlalchemy as sa


revision = "20261016_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "rides",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("duration_seconds", sa.Float(), nullable=True),
        sa.Column("distance_km", sa.Float(), nullable=True),
        sa.Column("elevation_gain_m", sa.Float(), nullable=True),
        sa.Column("normalized_power", sa.Float(), nullable=True),
        sa.Column("average_power", sa.Float(), nullable=True),
        sa.Column("training_stress_score", sa.Float(), nullable=True),
        sa.Column("name", sa.String(length=200), nullable=True),
    )
    op.create_index("ix_rides_user_recorded", "rides", ["user_id", "recorded_at"])

    op.create_table(
        "athlete_profiles",
        sa.Column("user_id", sa.String(length=64), primary_key=True),
        sa.Column("ftp", sa.Float(), nullable=True),
        sa.Column("resting_hr", sa.Integer(), nullable=True),
        sa.Column("max_hr", sa.Integer(), nullable=True),
        sa.Column("weekly_hours_target", sa.Float(), nullable=True),
        sa.Column("primary_goal", sa.String(length=60), nullable=True),
    )

    op.create_table(
        "training_plans",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="active"),
        sa.Column("ftp", sa.Float(), nullable=True),
        sa.Column("resting_hr", sa.Integer(), nullable=True),
        sa.Column("max_heart_rate", sa.Integer(), nullable=True),
        sa.Column("hours_per_week", sa.Float(), nullable=True),
        sa.Column("goal_type", sa.String(length=60), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_index("ix_training_plans_user_id", "training_plans", ["user_id"])
    op.create_index("ix_training_plans_status", "training_plans", ["status"])


def downgrade() -> None:
    op.drop_index("ix_training_plans_status", table_name="training_plans")
    op.drop_index("ix_training_plans_user_id", table_name="training_plans")
    op.drop_table("training_plans")
    op.drop_table("athlete_profiles")
    op.drop_index("ix_rides_user_recorded", table_name="rides")
    op.drop_table("rides")
