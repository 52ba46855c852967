from __future__ import annotations

import httpx

from windsock.integrations.strava.schemas import StravaSegment

STRAVA_BASE_URL = "https://www.strava.com/api/v3"


class StravaClient:
    """Thin Strava API client.

    - Segment lookups only
    - No retries
    """

    def __init__(self, access_token: str):
        self._access_token = access_token

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._access_token}"}

    def get_segment(self, segment_id: int) -> StravaSegment:
        """Fetch a single segment by id."""
        resp = httpx.get(
            f"{STRAVA_BASE_URL}/segments/{segment_id}",
            headers=self._headers(),
            timeout=15,
        )
        resp.raise_for_status()

        raw = resp.json()
        return StravaSegment(**raw, raw=raw)
