"""Project and milestone services."""

from __future__ import annotations

from concurrent.futures import Future

from sqlalchemy import select

from frcpm.database.models import Milestone, Project
from frcpm.protocols.executor import FailureCallback, SuccessCallback
from frcpm.services.base import RepositoryService


class ProjectService(RepositoryService[Project]):
    model = Project

    def find_by_name_async(
        self,
        name: str,
        on_success: SuccessCallback[list[Project]] | None = None,
        on_failure: FailureCallback | None = None,
    ) -> Future[list[Project]]:
        """Projects whose name contains ``name``, case-insensitively."""
        statement = select(Project).where(Project.name.ilike(f"%{name}%")).order_by(Project.start_date)
        return self.execute_async(
            f"Find projects by name: {name}",
            lambda handle: list(handle.session.scalars(statement).all()),
            on_success,
            on_failure,
        )


class MilestoneService(RepositoryService[Milestone]):
    model = Milestone

    def find_by_project_async(
        self,
        project_id: int,
        on_success: SuccessCallback[list[Milestone]] | None = None,
        on_failure: FailureCallback | None = None,
    ) -> Future[list[Milestone]]:
        """Milestones of one project, earliest first."""
        statement = select(Milestone).where(Milestone.project_id == project_id).order_by(Milestone.due_date)
        return self.execute_async(
            f"Find milestones for project {project_id}",
            lambda handle: list(handle.session.scalars(statement).all()),
            on_success,
            on_failure,
        )
