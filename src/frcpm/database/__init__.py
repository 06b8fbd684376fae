"""Database access: transactional tasks, the SQLAlchemy provider and models."""

from frcpm.database.models import Base, Milestone, Project, Subteam, TeamMember
from frcpm.database.provider import SessionHandle, SQLAlchemyProvider
from frcpm.database.seed import seed_defaults
from frcpm.database.task import DatabaseStage, DatabaseTask

__all__ = [
    # Tasks
    "DatabaseStage",
    "DatabaseTask",
    # Provider
    "SessionHandle",
    "SQLAlchemyProvider",
    # Models
    "Base",
    "Milestone",
    "Project",
    "Subteam",
    "TeamMember",
    "seed_defaults",
]
