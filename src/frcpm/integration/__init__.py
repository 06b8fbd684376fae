"""Read-only clients for external FRC data APIs."""

from frcpm.integration.frc import FrcEvent, FrcEventsClient, FrcTeamRanking
from frcpm.integration.http import ApiClient
from frcpm.integration.tba import TbaEvent, TbaMatch, TbaTeam, TheBlueAllianceClient

__all__ = [
    "ApiClient",
    "FrcEvent",
    "FrcEventsClient",
    "FrcTeamRanking",
    "TbaEvent",
    "TbaMatch",
    "TbaTeam",
    "TheBlueAllianceClient",
]
