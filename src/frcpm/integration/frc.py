"""FIRST FRC Events API v3 client.

Authenticates with HTTP basic auth (username + authorization key). Without
credentials every listing returns an empty list.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any

import httpx
from pydantic import Field

from frcpm.core.config import Settings
from frcpm.core.exceptions import IntegrationError
from frcpm.integration.http import DEFAULT_TIMEOUT, ApiClient
from frcpm.models.base import ApiModel

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://frc-api.firstinspires.org/v3.0"


class FrcEvent(ApiModel):
    code: str
    name: str
    type: str | None = None
    district_code: str | None = Field(default=None, alias="districtCode")
    venue: str | None = None
    city: str | None = None
    state_prov: str | None = Field(default=None, alias="stateprov")
    country: str | None = None
    date_start: datetime | None = Field(default=None, alias="dateStart")
    date_end: datetime | None = Field(default=None, alias="dateEnd")
    website: str | None = None


class FrcTeamRanking(ApiModel):
    rank: int
    team_number: int = Field(alias="teamNumber")
    wins: int = 0
    losses: int = 0
    ties: int = 0
    matches_played: int = Field(default=0, alias="matchesPlayed")
    ranking_score: float | None = Field(default=None, alias="sortOrder1")


class FrcEventsClient(ApiClient):
    """Read-only FRC Events client.

    Args:
        username: API username.
        auth_key: API authorization key.
        season: Default season year.
        base_url: API root.
        timeout: Request timeout in seconds.
        transport: Custom httpx transport, used by tests.
    """

    def __init__(
        self,
        username: str | None = None,
        auth_key: str | None = None,
        *,
        season: int | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        auth = httpx.BasicAuth(username, auth_key) if username and auth_key else None
        super().__init__(base_url, auth=auth, timeout=timeout, transport=transport)
        self.username = username
        self.season = season or date.today().year
        self._configured = auth is not None

    @classmethod
    def from_settings(cls, settings: Settings) -> FrcEventsClient:
        return cls(
            settings.frc_api_username,
            settings.frc_api_key,
            base_url=settings.frc_base_url,
            timeout=settings.http_timeout,
        )

    @property
    def is_configured(self) -> bool:
        return self._configured

    def _list(self, path: str, key: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        if not self.is_configured:
            logger.warning("FRC API credentials not configured; skipping %s", path)
            return []
        data = self.get_json(path, params=params)
        if not data:
            return []
        return data.get(key) or []

    def get_events(self, season: int | None = None) -> list[FrcEvent]:
        year = season or self.season
        events = [FrcEvent.model_validate(item) for item in self._list(f"/{year}/events", "Events")]
        logger.info("Retrieved %d events for season %d", len(events), year)
        return events

    def get_team_events(self, team_number: int, season: int | None = None) -> list[FrcEvent]:
        year = season or self.season
        items = self._list(f"/{year}/events", "Events", params={"teamNumber": team_number})
        return [FrcEvent.model_validate(item) for item in items]

    def get_event_rankings(self, event_code: str, season: int | None = None) -> list[FrcTeamRanking]:
        year = season or self.season
        items = self._list(f"/{year}/rankings/{event_code}", "Rankings")
        return [FrcTeamRanking.model_validate(item) for item in items]

    def validate_connection(self) -> bool:
        """Check the credentials with a cheap request.

        Returns False instead of raising on any API failure.
        """
        if not self.is_configured:
            logger.warning("FRC API not configured: missing username or auth key")
            return False
        try:
            ok = self.get_json(f"/{self.season}/events") is not None
        except IntegrationError as exc:
            logger.error("FRC API connection validation failed: %s", exc)
            return False
        logger.info("FRC API connection validation: %s", "SUCCESS" if ok else "FAILED")
        return ok
