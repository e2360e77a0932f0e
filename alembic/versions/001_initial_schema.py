"""initial schema: users, ships, crew_members, ship_items

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)

    op.create_table(
        "ships",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("max_energy_points", sa.Integer(), nullable=True),
        sa.Column("created_by_user_id", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["created_by_user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_ships_id"), "ships", ["id"], unique=False)

    op.create_table(
        "crew_members",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("ship_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column(
            "position",
            sa.Enum(
                "captain", "pilot", "sensor_operator", "gunner", "engineer", "unassigned",
                name="crewposition",
            ),
            nullable=False,
        ),
        sa.Column("permission", sa.JSON(), nullable=False),
        sa.ForeignKeyConstraint(["ship_id"], ["ships.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_crew_members_id"), "crew_members", ["id"], unique=False)
    op.create_index(op.f("ix_crew_members_ship_id"), "crew_members", ["ship_id"], unique=False)

    op.create_table(
        "ship_items",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("ship_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.Column("item_type", sa.String(length=32), nullable=False),
        sa.Column("system", sa.JSON(), nullable=False),
        sa.ForeignKeyConstraint(["ship_id"], ["ships.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_ship_items_id"), "ship_items", ["id"], unique=False)
    op.create_index(op.f("ix_ship_items_ship_id"), "ship_items", ["ship_id"], unique=False)
    op.create_index(op.f("ix_ship_items_item_type"), "ship_items", ["item_type"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_ship_items_item_type"), table_name="ship_items")
    op.drop_index(op.f("ix_ship_items_ship_id"), table_name="ship_items")
    op.drop_index(op.f("ix_ship_items_id"), table_name="ship_items")
    op.drop_table("ship_items")

    op.drop_index(op.f("ix_crew_members_ship_id"), table_name="crew_members")
    op.drop_index(op.f("ix_crew_members_id"), table_name="crew_members")
    op.drop_table("crew_members")

    op.drop_index(op.f("ix_ships_id"), table_name="ships")
    op.drop_table("ships")

    op.drop_index(op.f("ix_users_username"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_index(op.f("ix_users_id"), table_name="users")
    op.drop_table("users")
