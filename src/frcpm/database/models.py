"""
FRCPM SQLAlchemy Models.

Minimal tables for the team data the background services work on:
subteams, team members, projects and their milestones.

Usage:
    from frcpm.database.models import Base, Project, create_all_tables

    engine = create_engine("sqlite:///frcpm.db")
    create_all_tables(engine)
"""

from datetime import date
from typing import Optional

from sqlalchemy import Boolean, Date, ForeignKey, Integer, String, Text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all FRCPM models."""


class Subteam(Base):
    """A group of members sharing a specialty (Mechanical, Programming, ...)."""

    __tablename__ = "subteams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    color_code: Mapped[Optional[str]] = mapped_column(String(7))
    specialties: Mapped[Optional[str]] = mapped_column(Text)

    def __repr__(self) -> str:
        return f"<Subteam {self.name!r}>"


class TeamMember(Base):
    __tablename__ = "team_members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(100))
    last_name: Mapped[Optional[str]] = mapped_column(String(100))
    email: Mapped[Optional[str]] = mapped_column(String(255))
    is_leader: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    subteam_id: Mapped[Optional[int]] = mapped_column(ForeignKey("subteams.id"))

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part) or self.username

    def __repr__(self) -> str:
        return f"<TeamMember {self.username!r}>"


class Project(Base):
    """A build-season project with its schedule."""

    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    goal_end_date: Mapped[date] = mapped_column(Date, nullable=False)
    hard_deadline: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)

    def __repr__(self) -> str:
        return f"<Project {self.name!r}>"


class Milestone(Base):
    __tablename__ = "milestones"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id"), nullable=False)

    def __repr__(self) -> str:
        return f"<Milestone {self.name!r} {self.due_date}>"


def create_all_tables(engine: Engine) -> None:
    """Create every table that does not exist yet."""
    Base.metadata.create_all(engine)
