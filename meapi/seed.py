"""
Sample data for a fresh database.

seed_database() wipes all four tables and inserts one complete profile so
the API has something to serve. Run it through `me-api-seed`.
"""

from typing import Any

from sqlalchemy.orm import Session

from .logging import get_logger, log_timing
from .models import Profile, Project, Skill, WorkExperience
from .repositories import ProfileRepository

logger = get_logger("seed")

SAMPLE_PROFILE: dict[str, Any] = {
    "name": "Varun Sandesh",
    "email": "varunsandeshtalluru@gmail.com",
    "education": "BTech in Computer Science and Engineering",
    "github_url": "https://github.com/varunsande",
    "linkedin_url": "https://www.linkedin.com/in/talluru-varun-sandesh-2242362b5",
    "portfolio_url": None,
}

SAMPLE_SKILLS: list[dict[str, Any]] = [
    {"skill_name": name, "proficiency_level": level}
    for name, level in [
        ("JavaScript", 4),
        ("Python", 4),
        ("Node.js", 4),
        ("React", 4),
        ("Express.js", 4),
        ("MongoDB", 3),
        ("PostgreSQL", 4),
        ("SQLite", 4),
        ("Git", 3),
        ("Docker", 4),
        ("GCP", 4),
        ("TypeScript", 3),
        ("Next.js", 4),
        ("REST APIs", 4),
    ]
]

SAMPLE_PROJECTS: list[dict[str, Any]] = [
    {
        "title": "Coaching Center Website",
        "description": (
            "Developed a responsive coaching center website featuring course listings, "
            "faculty profiles, student testimonials, online registration, and a contact "
            "page with integrated Google Maps for location assistance."
        ),
        "links": [
            {"name": "GitHub", "url": "https://github.com/varunsande/Code_Tutorials.git"},
            {"name": "Live Demo", "url": "https://varunsande.github.io/Code_Tutorials/"},
        ],
    },
    {
        "title": "Loan Prediction using Python",
        "description": (
            "Developed a machine learning-based loan prediction system in Google Colab to "
            "predict loan approval based on features like income, credit history, education, "
            "and loan amount. Involved data preprocessing, feature engineering, and model "
            "evaluation using popular ML libraries."
        ),
        "links": [
            {"name": "GitHub", "url": "https://github.com/varunsande/loan.git"},
            {
                "name": "Live Demo",
                "url": "https://colab.research.google.com/drive/1qS-c3EfWt0i_O3fR4r_F_CkN8j6G9X1Q?usp=sharing",
            },
        ],
    },
    {
        "title": "Resume Generator Website",
        "description": (
            "Developed a Resume Generator Website that allows users to create and download "
            "professional resumes by inputting personal, educational, and work details. The "
            "site offers customizable templates and formats with PDF download options."
        ),
        "links": [
            {"name": "GitHub", "url": "https://github.com/varunsande/Resume_Generator.git"},
            {"name": "Live Demo", "url": "https://varunsande.github.io/Resume_Generator/"},
        ],
    },
    {
        "title": "Me-API Playground",
        "description": (
            "Personal API playground for managing candidate profile data with CRUD "
            "operations, search functionality, and query endpoints."
        ),
        "links": [
            {"name": "GitHub", "url": "https://github.com/anshumohanacharya/me-api-playground"},
            {"name": "API Endpoint", "url": "https://me-api.anshumohanacharya.dev"},
        ],
    },
]

SAMPLE_WORK_EXPERIENCE: list[dict[str, Any]] = [
    {
        "company": "Tech Solutions Inc.",
        "position": "Full Stack Developer",
        "start_date": "2023-01",
        "end_date": "2024-01",
        "description": (
            "Developed and maintained web applications using React, Node.js, and PostgreSQL. "
            "Implemented RESTful APIs and worked with cloud services including AWS."
        ),
    },
    {
        "company": "StartupXYZ",
        "position": "Frontend Developer",
        "start_date": "2022-06",
        "end_date": "2022-12",
        "description": (
            "Built responsive user interfaces using React and TypeScript. Collaborated with "
            "the design team on UI components and optimized application performance."
        ),
    },
    {
        "company": "Freelance",
        "position": "Web Developer",
        "start_date": "2021-01",
        "end_date": "2022-05",
        "description": (
            "Provided web development services to various clients. Built custom websites, "
            "e-commerce platforms, and web applications using modern JavaScript frameworks."
        ),
    },
]


def clear_database(session: Session) -> None:
    """Delete every row, children first."""
    for model in (WorkExperience, Project, Skill, Profile):
        session.query(model).delete(synchronize_session=False)
    session.flush()
    # Row ids may be reused by the next insert; drop the stale objects
    session.expunge_all()


def table_counts(session: Session) -> dict[str, int]:
    return {
        "profiles": session.query(Profile).count(),
        "skills": session.query(Skill).count(),
        "projects": session.query(Project).count(),
        "work_experience": session.query(WorkExperience).count(),
    }


@log_timing("seed_database")
def seed_database(session: Session) -> Profile:
    """Replace the database contents with the sample profile."""
    clear_database(session)
    profile = ProfileRepository(session).create_with_children(
        SAMPLE_PROFILE,
        skills=SAMPLE_SKILLS,
        projects=SAMPLE_PROJECTS,
        work_experience=SAMPLE_WORK_EXPERIENCE,
    )
    logger.info(
        "database_seeded",
        profile_id=profile.id,
        skills=len(SAMPLE_SKILLS),
        projects=len(SAMPLE_PROJECTS),
        work_experience=len(SAMPLE_WORK_EXPERIENCE),
    )
    return profile
