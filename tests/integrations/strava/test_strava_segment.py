import httpx
import pytest

from windsock.climbs import LatLng
from windsock.integrations.strava.client import StravaClient
from windsock.integrations.strava.schemas import StravaSegment, bearing, map_strava_segment


def _raw(**overrides):
    raw = {
        "id": 8109834,
        "name": "OLH Climb",
        "distance": 4800.0,
        "average_grade": 7.6,
        "elevation_high": 493.0,
        "elevation_low": 126.0,
        "total_elevation_gain": 380.0,
        "start_latlng": [37.3916, -122.2533],
        "end_latlng": [37.3757, -122.2714],
        "activity_type": "Ride",
    }
    raw.update(overrides)
    return raw


def test_get_segment(monkeypatch):
    seen = {}

    def mock_get(url, headers=None, **kwargs):
        seen["url"] = url
        seen["auth"] = headers["Authorization"]
        request = httpx.Request("GET", url)
        return httpx.Response(200, json=_raw(), request=request)

    monkeypatch.setattr(httpx, "get", mock_get)

    segment = StravaClient(access_token="x").get_segment(8109834)

    assert seen["url"].endswith("/segments/8109834")
    assert seen["auth"] == "Bearer x"
    assert segment.name == "OLH Climb"
    assert segment.raw["activity_type"] == "Ride"


def test_get_segment_not_found(monkeypatch):
    def mock_get(url, **kwargs):
        return httpx.Response(404, json={"message": "Record Not Found"}, request=httpx.Request("GET", url))

    monkeypatch.setattr(httpx, "get", mock_get)

    with pytest.raises(httpx.HTTPStatusError):
        StravaClient(access_token="x").get_segment(1)


def test_climb_mapping_uses_net_gain():
    segment = map_strava_segment(StravaSegment(**_raw()))

    assert segment.id == 8109834
    assert segment.average_grade == pytest.approx((493.0 - 126.0) / 4800.0)
    assert segment.total_elevation_gain == pytest.approx(367.0)
    assert segment.median_elevation == pytest.approx(309.5)
    assert segment.location() == LatLng(lat=(37.3916 + 37.3757) / 2, lng=(-122.2533 - 122.2714) / 2)
    assert 180.0 < segment.average_direction < 270.0


def test_flat_mapping_keeps_strava_grade():
    segment = map_strava_segment(StravaSegment(**_raw(average_grade=1.0, total_elevation_gain=80.0)))
    assert segment.average_grade == pytest.approx(0.01)
    assert segment.total_elevation_gain == 80.0


def test_bearing_cardinals():
    origin = LatLng(lat=0.0, lng=0.0)
    assert bearing(origin, LatLng(lat=1.0, lng=0.0)) == pytest.approx(0.0)
    assert bearing(origin, LatLng(lat=0.0, lng=1.0)) == pytest.approx(90.0)
    assert bearing(origin, LatLng(lat=-1.0, lng=0.0)) == pytest.approx(180.0)
    assert bearing(origin, LatLng(lat=0.0, lng=-1.0)) == pytest.approx(270.0)
