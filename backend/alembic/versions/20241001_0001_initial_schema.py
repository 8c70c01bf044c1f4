"""initial schema

Revision ID: 20241001_0001
Revises:
Create Date: 2024-10-01
"""

from alembic import op
import sqlalchemy as sa


revision = "20241001_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("education", sa.String(length=200)),
        sa.Column("github_url", sa.String(length=512)),
        sa.Column("linkedin_url", sa.String(length=512)),
        sa.Column("portfolio_url", sa.String(length=512)),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_profiles_id", "profiles", ["id"])
    op.create_index("ix_profiles_email", "profiles", ["email"], unique=True)
    op.create_index("ix_profiles_created_at", "profiles", ["created_at"])

    op.create_table(
        "skills",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "profile_id",
            sa.Integer(),
            sa.ForeignKey("profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("skill_name", sa.String(length=50), nullable=False),
        sa.Column("proficiency_level", sa.Integer(), nullable=False, server_default="1"),
        sa.CheckConstraint(
            "proficiency_level BETWEEN 1 AND 5", name="ck_skills_proficiency_range"
        ),
    )
    op.create_index("ix_skills_profile_id", "skills", ["profile_id"])
    op.create_index("ix_skills_skill_name", "skills", ["skill_name"])

    op.create_table(
        "projects",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "profile_id",
            sa.Integer(),
            sa.ForeignKey("profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("links", sa.JSON(), server_default=sa.text("'[]'")),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_projects_profile_id", "projects", ["profile_id"])
    op.create_index("ix_projects_created_at", "projects", ["created_at"])

    op.create_table(
        "work_experience",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "profile_id",
            sa.Integer(),
            sa.ForeignKey("profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("company", sa.String(length=100), nullable=False),
        sa.Column("position", sa.String(length=100), nullable=False),
        sa.Column("start_date", sa.String(length=20), nullable=False),
        sa.Column("end_date", sa.String(length=20)),
        sa.Column("description", sa.Text()),
    )
    op.create_index("ix_work_experience_profile_id", "work_experience", ["profile_id"])


def downgrade() -> None:
    op.drop_table("work_experience")
    op.drop_table("projects")
    op.drop_table("skills")
    op.drop_table("profiles")
