"""Initial schema: users, trips and memberships.

Revision ID: 001
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── users ─────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(255), unique=True, nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )

    # ── trips ─────────────────────────────────────────────────────────
    op.create_table(
        "trips",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False
        ),
        sa.Column("user_name", sa.String(120), nullable=False),
        sa.Column("trip_name", sa.String(200), nullable=False),
        sa.Column("destination", sa.String(200), nullable=False),
        sa.Column("start_date", sa.Date, nullable=True),
        sa.Column("end_date", sa.Date, nullable=True),
        sa.Column("amount", sa.Float, nullable=True),
        sa.Column("details", sa.Text, nullable=True),
        sa.Column("image_url", sa.String(500), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index("idx_trips_owner", "trips", ["user_id"])
    op.create_index(
        "idx_trips_name_destination", "trips", ["trip_name", "destination"]
    )

    # ── memberships ───────────────────────────────────────────────────
    op.create_table(
        "memberships",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False
        ),
        sa.Column(
            "trip_id", sa.Integer, sa.ForeignKey("trips.id"), nullable=False
        ),
        sa.Column("user_name", sa.String(120), nullable=False),
        sa.Column(
            "status",
            sa.Enum(
                "new",
                "admin",
                "applied",
                "joined",
                "declined",
                name="membershipstatus",
            ),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint("user_id", "trip_id", name="uq_membership_user_trip"),
    )
    op.create_index(
        "idx_memberships_trip_status", "memberships", ["trip_id", "status"]
    )


def downgrade() -> None:
    op.drop_table("memberships")
    op.drop_table("trips")
    op.drop_table("users")
    op.execute("DROP TYPE IF EXISTS membershipstatus")
