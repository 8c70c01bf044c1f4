"""
Profile SQLAlchemy model.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, utcnow

if TYPE_CHECKING:
    from .project import Project
    from .skill import Skill
    from .work_experience import WorkExperience


class Profile(Base):
    """
    Candidate profile owning skills, projects and work experience.

    Attributes:
        email: Unique across profiles
        education: Free-text education summary
        github_url / linkedin_url / portfolio_url: Optional public links
    """

    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    education: Mapped[str | None] = mapped_column(String(200), nullable=True)
    github_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    linkedin_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    portfolio_url: Mapped[str | None] = mapped_column(String(512), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships (children go away with the profile)
    skills: Mapped[list["Skill"]] = relationship(
        "Skill",
        back_populates="profile",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Skill.id",
    )
    projects: Mapped[list["Project"]] = relationship(
        "Project",
        back_populates="profile",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Project.id",
    )
    work_experience: Mapped[list["WorkExperience"]] = relationship(
        "WorkExperience",
        back_populates="profile",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="WorkExperience.start_date.desc()",
    )

    def __repr__(self) -> str:
        return f"<Profile id={self.id} email={self.email!r}>"
