"""Tests for response deserialization and the endpoint path/query builder."""

from datetime import date, datetime

import pytest
from pydantic import ValidationError

from garmin_connect.domain.models import (
    BodyComposition,
    Device,
    DownloadFormat,
    SleepData,
    SocialProfile,
    StepsData,
)
from garmin_connect.domain.parsing import parse, shape_name
from garmin_connect.endpoints import USER_SUMMARY_URL, build_path, build_query, format_date
from shared.exceptions import DeserializationError
from tests.conftest import FIXTURES_DIR


def fixture_bytes(name: str) -> bytes:
    return (FIXTURES_DIR / name).read_bytes()


class TestParse:
    def test_profile_keeps_unknown_fields(self):
        profile = parse(fixture_bytes("social_profile.json"), SocialProfile)

        assert profile.display_name == "runner-42"
        assert profile.profile_id == 91842377
        assert profile.model_extra["userLevel"] == 4

    def test_list_shape(self):
        devices = parse(fixture_bytes("devices.json"), list[Device])

        assert [d.device_id for d in devices] == [3442975820, 3316583041]
        assert devices[1].current_firmware_version is None

    def test_explicit_aliases(self):
        sleep = parse(fixture_bytes("sleep_data.json"), SleepData)
        steps = parse(fixture_bytes("steps_data.json"), list[StepsData])

        assert sleep.daily_sleep_dto.calendar_date == date(2024, 3, 14)
        assert sleep.daily_sleep_dto.sleep_start_timestamp_gmt == 1710371400000
        assert steps[1].start_gmt == datetime(2024, 3, 14, 7, 0)

    def test_body_composition(self):
        body = parse(fixture_bytes("body_composition.json"), BodyComposition)

        assert body.start_date == date(2024, 3, 5)
        assert body.total_average.weight == 71250.0

    def test_missing_required_field(self):
        with pytest.raises(DeserializationError) as exc_info:
            parse(b'{"fullName": "Alex Runner"}', SocialProfile)

        err = exc_info.value
        assert err.shape == "SocialProfile"
        assert err.errors[0]["loc"] == "displayName"
        assert err.errors[0]["type"] == "missing"

    def test_malformed_json(self):
        with pytest.raises(DeserializationError) as exc_info:
            parse(b"<html>maintenance</html>", SocialProfile)

        assert exc_info.value.errors[0]["loc"] == "(root)"

    def test_list_expected_object_given(self):
        with pytest.raises(DeserializationError) as exc_info:
            parse(b'{"deviceId": 1}', list[Device])

        assert "list" in exc_info.value.shape

    def test_models_are_frozen(self):
        profile = parse(fixture_bytes("social_profile.json"), SocialProfile)

        with pytest.raises(ValidationError):
            profile.display_name = "someone-else"


class TestShapeName:
    def test_class(self):
        assert shape_name(SocialProfile) == "SocialProfile"

    def test_generic(self):
        assert "Device" in shape_name(list[Device])


class TestEndpointBuilder:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (date(2024, 3, 5), "2024-03-05"),
            (date(2024, 12, 31), "2024-12-31"),
            (datetime(2024, 3, 5, 23, 59), "2024-03-05"),
        ],
    )
    def test_format_date(self, value, expected):
        assert format_date(value) == expected

    def test_build_path_escapes_segments(self):
        assert (
            build_path(USER_SUMMARY_URL, display_name="a b/c")
            == "/usersummary-service/usersummary/daily/a%20b%2Fc"
        )

    def test_build_query_keeps_order_and_drops_none(self):
        params = build_query(
            startDate=date(2024, 3, 5), endDate=date(2024, 3, 9), activityType=None, start=0
        )

        assert params == {"startDate": "2024-03-05", "endDate": "2024-03-09", "start": "0"}
        assert list(params) == ["startDate", "endDate", "start"]

    def test_build_query_lowercases_bools(self):
        assert build_query(includeAll=True) == {"includeAll": "true"}


class TestDownloadFormat:
    def test_lookup_by_name(self):
        assert DownloadFormat("KML") is DownloadFormat.KML

    def test_values(self):
        assert [f.value for f in DownloadFormat] == ["original", "tcx", "gpx", "kml", "csv"]
