import datetime as dt
import json

import httpx
import pytest

from windsock.config.settings import settings
from windsock.integrations.strava.tokens import StravaToken, TokenRefreshError, get_access_token


def _write(path, **token):
    path.write_text(json.dumps(token))
    return str(path)


def _future() -> int:
    return int((dt.datetime.now(dt.UTC) + dt.timedelta(hours=1)).timestamp())


def test_valid_token_is_returned(tmp_path, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("should not refresh")

    monkeypatch.setattr(httpx, "post", fail)
    path = _write(tmp_path / "token.json", access_token="abc", refresh_token="r", expires_at=_future())
    assert get_access_token(path) == "abc"


def test_expired_token_is_refreshed_and_stored(tmp_path, monkeypatch):
    refreshed = {"access_token": "new", "refresh_token": "r2", "expires_at": _future()}
    sent = {}

    def mock_post(url, data=None, **kwargs):
        sent.update(data)
        return httpx.Response(200, json=refreshed, request=httpx.Request("POST", url))

    monkeypatch.setattr(httpx, "post", mock_post)
    path = _write(tmp_path / "token.json", access_token="old", refresh_token="r1", expires_at=0)

    assert get_access_token(path) == "new"
    assert sent["refresh_token"] == "r1"
    assert sent["grant_type"] == "refresh_token"
    assert json.loads((tmp_path / "token.json").read_text())["refresh_token"] == "r2"


def test_refresh_rejected(tmp_path, monkeypatch):
    def mock_post(url, **kwargs):
        return httpx.Response(401, json={"message": "Bad Request"}, request=httpx.Request("POST", url))

    monkeypatch.setattr(httpx, "post", mock_post)
    path = _write(tmp_path / "token.json", access_token="old", refresh_token="r1", expires_at=0)

    with pytest.raises(TokenRefreshError):
        get_access_token(path)


def test_token_file_required(monkeypatch):
    monkeypatch.setattr(settings, "strava_access_token", "")
    with pytest.raises(TokenRefreshError, match="token file"):
        get_access_token()


def test_token_expiry():
    token = StravaToken(access_token="a", refresh_token="r", expires_at=_future())
    assert not token.expired()
    assert token.expired(dt.datetime.now(dt.UTC) + dt.timedelta(hours=2))
    assert StravaToken(access_token="a", refresh_token="r").expired()
