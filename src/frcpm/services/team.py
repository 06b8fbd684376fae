"""Subteam and team member services."""

from __future__ import annotations

from concurrent.futures import Future

from sqlalchemy import select

from frcpm.database.models import Subteam, TeamMember
from frcpm.protocols.executor import FailureCallback, SuccessCallback
from frcpm.services.base import RepositoryService


class SubteamService(RepositoryService[Subteam]):
    model = Subteam

    def find_by_name_async(
        self,
        name: str,
        on_success: SuccessCallback[Subteam | None] | None = None,
        on_failure: FailureCallback | None = None,
    ) -> Future[Subteam | None]:
        statement = select(Subteam).where(Subteam.name == name)
        return self.execute_async(
            f"Find subteam by name: {name}",
            lambda handle: handle.session.scalars(statement).first(),
            on_success,
            on_failure,
        )


class TeamMemberService(RepositoryService[TeamMember]):
    model = TeamMember

    def find_by_subteam_async(
        self,
        subteam_id: int,
        on_success: SuccessCallback[list[TeamMember]] | None = None,
        on_failure: FailureCallback | None = None,
    ) -> Future[list[TeamMember]]:
        statement = select(TeamMember).where(TeamMember.subteam_id == subteam_id).order_by(TeamMember.username)
        return self.execute_async(
            f"Find members of subteam {subteam_id}",
            lambda handle: list(handle.session.scalars(statement).all()),
            on_success,
            on_failure,
        )

    def find_leaders_async(
        self,
        on_success: SuccessCallback[list[TeamMember]] | None = None,
        on_failure: FailureCallback | None = None,
    ) -> Future[list[TeamMember]]:
        statement = select(TeamMember).where(TeamMember.is_leader.is_(True)).order_by(TeamMember.username)
        return self.execute_async(
            "Find team leaders",
            lambda handle: list(handle.session.scalars(statement).all()),
            on_success,
            on_failure,
        )
