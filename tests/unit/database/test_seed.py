"""Tests for default data seeding."""

from __future__ import annotations

from datetime import date, timedelta

import pytest
from sqlalchemy import select

from frcpm.database.models import Milestone, Project, Subteam
from frcpm.database.provider import SQLAlchemyProvider
from frcpm.database.seed import BUILD_SEASON_DAYS, DEFAULT_SUBTEAMS, seed_defaults


@pytest.fixture
def provider():
    provider = SQLAlchemyProvider("sqlite://")
    provider.create_schema()
    yield provider
    provider.dispose()


class TestSeedDefaults:
    """seed_defaults behaviour."""

    def test_seeds_empty_database(self, provider: SQLAlchemyProvider) -> None:
        """Four subteams, one project and three milestones are inserted."""
        kickoff = date(2026, 1, 10)
        with provider.session() as session:
            assert seed_defaults(session, today=kickoff) is True

        with provider.session() as session:
            names = session.scalars(select(Subteam.name).order_by(Subteam.id)).all()
            project = session.scalars(select(Project)).one()
            milestones = session.scalars(select(Milestone).order_by(Milestone.due_date)).all()

        assert names == [name for name, _, _ in DEFAULT_SUBTEAMS]
        assert project.start_date == kickoff
        assert project.goal_end_date == kickoff + timedelta(days=BUILD_SEASON_DAYS)
        assert [m.name for m in milestones] == ["Design Review", "Drive Base Complete", "Robot Complete"]
        assert all(m.project_id == project.id for m in milestones)

    def test_seed_is_idempotent(self, provider: SQLAlchemyProvider) -> None:
        """A second call adds nothing."""
        with provider.session() as session:
            seed_defaults(session)
        with provider.session() as session:
            assert seed_defaults(session) is False

        with provider.session() as session:
            assert len(session.scalars(select(Subteam)).all()) == len(DEFAULT_SUBTEAMS)
            assert len(session.scalars(select(Project)).all()) == 1

    def test_existing_subteam_blocks_seed(self, provider: SQLAlchemyProvider) -> None:
        """Any existing subteam means the database is not fresh."""
        with provider.session() as session:
            session.add(Subteam(name="Outreach"))
        with provider.session() as session:
            assert seed_defaults(session) is False

    def test_subteam_colors(self) -> None:
        """Default subteams carry hex colors."""
        assert all(color.startswith("#") and len(color) == 7 for _, color, _ in DEFAULT_SUBTEAMS)
