"""Strava OAuth token kept in a local JSON file.

The file named by STRAVA_ACCESS_TOKEN holds the last token response. An
expired token is exchanged for a fresh one and written back in place, so the
next run starts from the new refresh token.
"""

from __future__ import annotations

import datetime as dt
from pathlib import Path

import httpx
from loguru import logger
from pydantic import BaseModel, ConfigDict

from windsock.config.settings import settings

STRAVA_TOKEN_URL = "https://www.strava.com/oauth/token"


class TokenRefreshError(Exception):
    """Raised when no usable token can be produced."""


class StravaToken(BaseModel):
    model_config = ConfigDict(extra="allow")

    access_token: str
    refresh_token: str
    expires_at: int = 0

    def expired(self, now: dt.datetime | None = None) -> bool:
        now = now or dt.datetime.now(dt.timezone.utc)
        return now >= dt.datetime.fromtimestamp(self.expires_at, tz=dt.timezone.utc)


def refresh(token: StravaToken, client_id: str, client_secret: str) -> StravaToken:
    """Trade the token's refresh token for a new access token.

    Raises:
        TokenRefreshError: If Strava rejects the refresh or cannot be reached
    """
    form = {
        "client_id": client_id,
        "client_secret": client_secret,
        "grant_type": "refresh_token",
        "refresh_token": token.refresh_token,
    }
    try:
        resp = httpx.post(STRAVA_TOKEN_URL, data=form, timeout=10)
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        logger.error(f"Strava rejected token refresh: {e.response.status_code} {e.response.text}")
        raise TokenRefreshError(f"token refresh rejected with {e.response.status_code}") from e
    except httpx.RequestError as e:
        logger.error(f"Strava token endpoint unreachable: {e}")
        raise TokenRefreshError(f"token refresh failed: {e}") from e

    return token.model_copy(update=resp.json())


class TokenFile:
    """A token persisted as JSON at ``path``."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> StravaToken:
        return StravaToken.model_validate_json(self.path.read_text(encoding="utf-8"))

    def store(self, token: StravaToken) -> None:
        self.path.write_text(token.model_dump_json(indent=2), encoding="utf-8")


def get_access_token(token_file: str | None = None) -> str:
    """Return a valid access token, refreshing and persisting it if expired.

    Raises:
        TokenRefreshError: If no token file is configured or refresh fails
    """
    path = token_file or settings.strava_access_token
    if not path:
        raise TokenRefreshError("must provide a Strava access token file")

    store = TokenFile(path)
    token = store.load()
    if not token.expired():
        return token.access_token

    logger.info(f"Strava token expired, refreshing from {STRAVA_TOKEN_URL}")
    token = refresh(token, settings.strava_client_id, settings.strava_client_secret)
    store.store(token)
    return token.access_token
