"""Background CRUD services over the FRCPM tables."""

from frcpm.services.base import RepositoryService
from frcpm.services.projects import MilestoneService, ProjectService
from frcpm.services.team import SubteamService, TeamMemberService

__all__ = [
    "MilestoneService",
    "ProjectService",
    "RepositoryService",
    "SubteamService",
    "TeamMemberService",
]
