"""The Blue Alliance (TBA) read API v3 client.

Requests carry the ``X-TBA-Auth-Key`` header. Teams are addressed by key
(``"frc254"``); methods taking ``team_key`` fall back to the configured
team when it is omitted.

Example:
    >>> from frcpm.integration.tba import TheBlueAllianceClient
    >>> client = TheBlueAllianceClient(api_key="secret", team_number="254")
    >>> client.team_key, client.is_configured
    ('frc254', True)
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

import httpx
from pydantic import Field

from frcpm.core.config import Settings
from frcpm.core.exceptions import ConfigurationError
from frcpm.integration.http import DEFAULT_TIMEOUT, ApiClient
from frcpm.models.base import ApiModel

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.thebluealliance.com/api/v3"


class TbaTeam(ApiModel):
    key: str
    team_number: int
    nickname: str | None = None
    name: str | None = None
    city: str | None = None
    state_prov: str | None = None
    country: str | None = None
    rookie_year: int | None = None


class TbaEvent(ApiModel):
    key: str
    name: str
    event_code: str
    year: int
    event_type: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    city: str | None = None
    state_prov: str | None = None
    country: str | None = None


class TbaMatch(ApiModel):
    key: str
    comp_level: str
    match_number: int
    event_key: str
    set_number: int | None = None
    winning_alliance: str | None = None
    time: int | None = None
    alliances: dict[str, Any] = Field(default_factory=dict)


class TheBlueAllianceClient(ApiClient):
    """Read-only TBA client.

    Args:
        api_key: TBA read key; without it every call returns nothing.
        team_number: Our team number, used when ``team_key`` is omitted.
        base_url: API root.
        timeout: Request timeout in seconds.
        transport: Custom httpx transport, used by tests.
    """

    def __init__(
        self,
        api_key: str | None = None,
        team_number: str | None = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        headers = {"X-TBA-Auth-Key": api_key} if api_key else {}
        super().__init__(base_url, headers=headers, timeout=timeout, transport=transport)
        self.api_key = api_key
        self.team_number = team_number

    @classmethod
    def from_settings(cls, settings: Settings) -> TheBlueAllianceClient:
        return cls(
            settings.tba_api_key,
            settings.team_number,
            base_url=settings.tba_base_url,
            timeout=settings.http_timeout,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    @property
    def has_team_number(self) -> bool:
        return bool(self.team_number)

    @property
    def team_key(self) -> str | None:
        return f"frc{self.team_number}" if self.team_number else None

    def _resolve_team(self, team_key: str | None) -> str:
        key = team_key or self.team_key
        if key is None:
            raise ConfigurationError("No team key given and no team number configured")
        return key

    def _fetch(self, path: str) -> Any | None:
        if not self.is_configured:
            logger.warning("TBA API key not configured; skipping %s", path)
            return None
        return self.get_json(path)

    # --- Teams ---

    def get_team(self, team_key: str | None = None) -> TbaTeam | None:
        data = self._fetch(f"/team/{self._resolve_team(team_key)}")
        return TbaTeam.model_validate(data) if data else None

    def get_team_events(self, year: int, team_key: str | None = None) -> list[TbaEvent]:
        data = self._fetch(f"/team/{self._resolve_team(team_key)}/events/{year}") or []
        return [TbaEvent.model_validate(item) for item in data]

    def get_team_matches(self, event_key: str, team_key: str | None = None) -> list[TbaMatch]:
        data = self._fetch(f"/team/{self._resolve_team(team_key)}/event/{event_key}/matches") or []
        return [TbaMatch.model_validate(item) for item in data]

    def get_team_event_status(self, event_key: str, team_key: str | None = None) -> dict[str, Any] | None:
        """Raw ranking/alliance/playoff status of a team at one event."""
        return self._fetch(f"/team/{self._resolve_team(team_key)}/event/{event_key}/status")

    # --- Events ---

    def get_event(self, event_key: str) -> TbaEvent | None:
        data = self._fetch(f"/event/{event_key}")
        return TbaEvent.model_validate(data) if data else None

    def get_events_by_year(self, year: int) -> list[TbaEvent]:
        data = self._fetch(f"/events/{year}") or []
        return [TbaEvent.model_validate(item) for item in data]

    def get_event_matches(self, event_key: str) -> list[TbaMatch]:
        data = self._fetch(f"/event/{event_key}/matches") or []
        return [TbaMatch.model_validate(item) for item in data]
