"""
Skill SQLAlchemy model.
"""

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .profile import Profile


MIN_PROFICIENCY = 1
MAX_PROFICIENCY = 5
DEFAULT_PROFICIENCY = 1


class Skill(Base):
    """A named skill with a 1-5 proficiency level. Names may repeat per profile."""

    __tablename__ = "skills"
    __table_args__ = (
        CheckConstraint(
            f"proficiency_level BETWEEN {MIN_PROFICIENCY} AND {MAX_PROFICIENCY}",
            name="ck_skills_proficiency_range",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    profile_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), index=True
    )
    skill_name: Mapped[str] = mapped_column(String(50), index=True)
    proficiency_level: Mapped[int] = mapped_column(Integer, default=DEFAULT_PROFICIENCY)

    profile: Mapped["Profile"] = relationship("Profile", back_populates="skills")
