"""create shelflife tables

Revision ID: 3f9c2a7d1b4e
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f9c2a7d1b4e"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
    )


def _timestamps() -> list[sa.Column]:
    return [
        _created_at(),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
            onupdate=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True, index=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("household_size", sa.Integer(), nullable=True),
        sa.Column("dietary_preferences", sa.JSON(), nullable=False),
        sa.Column("cooking_style", sa.String(100), nullable=True),
        sa.Column("cooking_goals", sa.JSON(), nullable=False),
        sa.Column(
            "onboarding_completed", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        *_timestamps(),
    )

    op.create_table(
        "pantry_items",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("quantity", sa.Float(), nullable=False, server_default="1"),
        sa.Column("unit", sa.String(50), nullable=True),
        sa.Column("expiry_date", sa.Date(), nullable=False, index=True),
        sa.Column("added_date", sa.Date(), nullable=False),
        *_timestamps(),
    )

    # Recipes are append-only; triggered_by is the provenance of each row
    op.create_table(
        "generated_recipes",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("recipe_name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("serving_size", sa.String(100), nullable=False),
        sa.Column("ingredients", sa.JSON(), nullable=False),
        sa.Column("instructions", sa.JSON(), nullable=False),
        sa.Column("estimated_time", sa.String(50), nullable=False),
        sa.Column("difficulty", sa.String(10), nullable=False),
        sa.Column("triggered_by", sa.JSON(), nullable=False),
        _created_at(),
    )

    op.create_table(
        "recipe_clicks",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("recipe_name", sa.String(255), nullable=False),
        sa.Column("clicked_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "recipe_trigger_states",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id"),
            nullable=False,
            unique=True,
            index=True,
        ),
        sa.Column("item_names", sa.JSON(), nullable=False),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("recipe_trigger_states")
    op.drop_table("recipe_clicks")
    op.drop_table("generated_recipes")
    op.drop_table("pantry_items")
    op.drop_table("users")
