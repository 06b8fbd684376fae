"""Tests for the repository services.

Tests cover:
- CRUD through RepositoryService on SQLite
- Failed futures for missing arguments
- Finder methods of the concrete services
- Callback delivery on the interactive thread with a threaded executor
"""

from __future__ import annotations

from datetime import date

import pytest

from frcpm.database.models import Milestone, Project, Subteam, TeamMember
from frcpm.database.provider import SQLAlchemyProvider
from frcpm.dispatch.loop import InteractiveLoop
from frcpm.executor.sync import SyncExecutor
from frcpm.executor.threaded import TaskExecutor
from frcpm.services import (
    MilestoneService,
    ProjectService,
    RepositoryService,
    SubteamService,
    TeamMemberService,
)


@pytest.fixture
def provider():
    provider = SQLAlchemyProvider("sqlite://")
    provider.create_schema()
    yield provider
    provider.dispose()


@pytest.fixture
def executor():
    return SyncExecutor()


def make_project(name: str = "Robot", start: date = date(2026, 1, 10)) -> Project:
    return Project(name=name, start_date=start, goal_end_date=start, hard_deadline=start)


# =============================================================================
# CRUD Tests
# =============================================================================


class TestRepositoryServiceCrud:
    """Generic CRUD operations."""

    def test_save_assigns_id(self, provider, executor) -> None:
        """save_async inserts and returns the persisted entity."""
        service = SubteamService(provider, executor)

        saved = service.save_async(Subteam(name="Programming")).result()

        assert saved.id is not None
        assert service.count_async().result() == 1

    def test_save_updates_existing(self, provider, executor) -> None:
        """Saving an entity with an id updates it."""
        service = SubteamService(provider, executor)
        saved = service.save_async(Subteam(name="Programming")).result()

        saved.color_code = "#000000"
        service.save_async(saved).result()

        assert service.find_by_id_async(saved.id).result().color_code == "#000000"
        assert service.count_async().result() == 1

    def test_find_by_id_missing(self, provider, executor) -> None:
        """Unknown ids resolve to None."""
        assert SubteamService(provider, executor).find_by_id_async(99).result() is None

    def test_find_all(self, provider, executor) -> None:
        """find_all_async returns every row."""
        service = SubteamService(provider, executor)
        for name in ("Mechanical", "Electrical"):
            service.save_async(Subteam(name=name)).result()

        assert sorted(s.name for s in service.find_all_async().result()) == ["Electrical", "Mechanical"]

    def test_delete(self, provider, executor) -> None:
        """delete_async removes the entity."""
        service = SubteamService(provider, executor)
        saved = service.save_async(Subteam(name="Business")).result()

        service.delete_async(saved).result()

        assert service.count_async().result() == 0

    def test_delete_by_id(self, provider, executor) -> None:
        """delete_by_id_async reports whether something was deleted."""
        service = SubteamService(provider, executor)
        saved = service.save_async(Subteam(name="Business")).result()

        assert service.delete_by_id_async(saved.id).result() is True
        assert service.delete_by_id_async(saved.id).result() is False

    def test_none_arguments_fail(self, provider, executor) -> None:
        """None entities and ids produce failed futures with ValueError."""
        service = SubteamService(provider, executor)

        for future in (
            service.save_async(None),
            service.delete_async(None),
            service.delete_by_id_async(None),
        ):
            assert isinstance(future.exception(), ValueError)

    def test_constraint_violation_fails_future(self, provider, executor) -> None:
        """Database errors reach on_failure and the future."""
        service = SubteamService(provider, executor)
        service.save_async(Subteam(name="Programming")).result()
        failures: list[BaseException] = []

        future = service.save_async(Subteam(name="Programming"), on_failure=failures.append)

        assert future.exception() is not None
        assert failures == [future.exception()]
        assert service.count_async().result() == 1

    def test_generic_service_needs_model(self, provider, executor) -> None:
        """The base class requires a model."""
        with pytest.raises(TypeError):
            RepositoryService(provider, executor)

        assert RepositoryService(provider, executor, Subteam).entity_name == "Subteam"

    def test_execute_sync(self, provider, executor) -> None:
        """execute_sync runs a transactional operation inline."""
        service = SubteamService(provider, executor)
        service.save_async(Subteam(name="Programming")).result()

        names = service.execute_sync(lambda handle: [s.name for s in handle.session.query(Subteam)])

        assert names == ["Programming"]


# =============================================================================
# Finder Tests
# =============================================================================


class TestServiceFinders:
    """Finder methods on the concrete services."""

    def test_project_find_by_name(self, provider, executor) -> None:
        """Name search is a case-insensitive substring match."""
        service = ProjectService(provider, executor)
        service.save_async(make_project("Competition Robot")).result()
        service.save_async(make_project("Outreach Booth")).result()

        found = service.find_by_name_async("robot").result()

        assert [p.name for p in found] == ["Competition Robot"]

    def test_milestones_by_project(self, provider, executor) -> None:
        """Milestones come back earliest first."""
        project = ProjectService(provider, executor).save_async(make_project()).result()
        service = MilestoneService(provider, executor)
        service.save_async(Milestone(name="Late", due_date=date(2026, 2, 1), project_id=project.id)).result()
        service.save_async(Milestone(name="Early", due_date=date(2026, 1, 15), project_id=project.id)).result()

        found = service.find_by_project_async(project.id).result()

        assert [m.name for m in found] == ["Early", "Late"]

    def test_members_by_subteam(self, provider, executor) -> None:
        """Members are filtered by subteam."""
        subteams = SubteamService(provider, executor)
        programming = subteams.save_async(Subteam(name="Programming")).result()
        mechanical = subteams.save_async(Subteam(name="Mechanical")).result()
        members = TeamMemberService(provider, executor)
        members.save_async(TeamMember(username="ada", subteam_id=programming.id, is_leader=True)).result()
        members.save_async(TeamMember(username="bob", subteam_id=mechanical.id)).result()

        found = members.find_by_subteam_async(programming.id).result()

        assert [m.username for m in found] == ["ada"]
        assert [m.username for m in members.find_leaders_async().result()] == ["ada"]

    def test_subteam_find_by_name(self, provider, executor) -> None:
        """Exact subteam name lookup."""
        service = SubteamService(provider, executor)
        service.save_async(Subteam(name="Programming")).result()

        assert service.find_by_name_async("Programming").result().name == "Programming"
        assert service.find_by_name_async("Nope").result() is None


# =============================================================================
# Threaded Delivery Tests
# =============================================================================


class TestServicesThreaded:
    """Services on the real thread pool."""

    def test_callbacks_on_interactive_thread(self, tmp_path) -> None:
        """Service callbacks run on the interactive thread."""
        provider = SQLAlchemyProvider(f"sqlite:///{tmp_path / 'threaded.db'}")
        provider.create_schema()
        loop = InteractiveLoop().start()
        executor = TaskExecutor(loop, max_workers=2)
        seen: list[bool] = []
        try:
            service = SubteamService(provider, executor)
            future = service.save_async(
                Subteam(name="Programming"),
                on_success=lambda _: seen.append(loop.is_interactive_thread()),
            )
            assert future.result(timeout=5).id is not None
            assert service.count_async().result(timeout=5) == 1
        finally:
            executor.shutdown()
            loop.stop(timeout=5)
            provider.dispose()

        assert seen == [True]
