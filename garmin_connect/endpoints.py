"""Garmin Connect endpoint templates and the shared path/query builder.

Every facade operation builds its request through build_path/build_query so
date formatting and placeholder substitution live in one place.
"""

from datetime import date, datetime
from urllib.parse import quote

# Identity
SOCIAL_PROFILE_URL = "/userprofile-service/socialProfile"
USER_PREFERENCES_URL = "/userprofile-service/userprofile/personal-information"
USER_SETTINGS_URL = "/userprofile-service/userprofile/user-settings"

# Wellness (keyed by display name)
USER_SUMMARY_URL = "/usersummary-service/usersummary/daily/{display_name}"
USER_SUMMARY_CHART_URL = "/wellness-service/wellness/dailySummaryChart/{display_name}"
HEART_RATES_URL = "/wellness-service/wellness/dailyHeartRate/{display_name}"
SLEEP_DATA_URL = "/wellness-service/wellness/dailySleepData/{display_name}"

BODY_COMPOSITION_URL = "/weight-service/weight/daterangesnapshot"
HYDRATION_DATA_URL = "/usersummary-service/usersummary/hydration/daily/{date}"

# Activities
ACTIVITIES_URL = "/activitylist-service/activities/search/activities"
ACTIVITY_URL = "/activity-service/activity/{activity_id}"
ACTIVITY_SPLITS_URL = "/activity-service/activity/{activity_id}/splits"
ACTIVITY_SPLIT_SUMMARIES_URL = "/activity-service/activity/{activity_id}/split_summaries"
ACTIVITY_WEATHER_URL = "/activity-service/activity/{activity_id}/weather"
ACTIVITY_HR_ZONES_URL = "/activity-service/activity/{activity_id}/hrTimeInZones"
ACTIVITY_DETAILS_URL = "/activity-service/activity/{activity_id}/details"
PERSONAL_RECORDS_URL = "/personalrecord-service/personalrecord/prs/{display_name}"

# Downloads
ORIGINAL_DOWNLOAD_URL = "/download-service/files/activity/{activity_id}"
TCX_DOWNLOAD_URL = "/download-service/export/tcx/activity/{activity_id}"
GPX_DOWNLOAD_URL = "/download-service/export/gpx/activity/{activity_id}"
KML_DOWNLOAD_URL = "/download-service/export/kml/activity/{activity_id}"
CSV_DOWNLOAD_URL = "/download-service/export/csv/activity/{activity_id}"

# Devices
DEVICE_LIST_URL = "/device-service/deviceregistration/devices"
DEVICE_SETTINGS_URL = "/device-service/deviceservice/device-info/settings/{device_id}"
DEVICE_LAST_USED_URL = "/device-service/deviceservice/mylastused"

DATE_FORMAT = "%Y-%m-%d"


def format_date(value: date) -> str:
    """Wire format for every date parameter; the service rejects anything else."""
    if isinstance(value, datetime):
        value = value.date()
    return value.strftime(DATE_FORMAT)


def _format_value(value: object) -> str:
    if isinstance(value, date):
        return format_date(value)
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def build_path(template: str, **segments: object) -> str:
    """Fill *template* placeholders; each value becomes one escaped path segment."""
    return template.format(
        **{name: quote(_format_value(value), safe="") for name, value in segments.items()}
    )


def build_query(**params: object) -> dict[str, str]:
    """Format query parameters in the given order, dropping None values."""
    return {name: _format_value(value) for name, value in params.items() if value is not None}
