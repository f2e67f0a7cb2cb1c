"""Garmin Connect API facade.

Each operation builds its path and query through the shared endpoint
builder, resolves the display name first when the endpoint is keyed by it,
and returns the deserialized model. Session handling, pagination and
downloads are delegated to their own modules.
"""

from datetime import date

from garmin_connect import endpoints
from garmin_connect.domain.models import (
    Activity,
    ActivityDetails,
    ActivitySplits,
    ActivityWeather,
    BodyComposition,
    Device,
    DeviceLastUsed,
    DeviceSettings,
    DownloadFormat,
    ExerciseSets,
    HeartRateData,
    HrTimeInZone,
    HydrationData,
    PersonalRecord,
    SleepData,
    SocialProfile,
    SplitSummaries,
    Stats,
    StepsData,
    UserPreferences,
    UserSettings,
)
from garmin_connect.downloads import download_activity
from garmin_connect.endpoints import build_path, build_query
from garmin_connect.pagination import paginate
from garmin_connect.session import SessionContext
from shared.exceptions import InvalidArgumentError


class GarminConnectClient:
    """Typed async client over one shared SessionContext."""

    def __init__(
        self,
        context: SessionContext,
        page_size: int | None = None,
        max_pages: int | None = None,
    ) -> None:
        if page_size is not None and page_size < 1:
            raise InvalidArgumentError(f"page_size must be >= 1, got {page_size}")
        if max_pages is not None and max_pages < 1:
            raise InvalidArgumentError(f"max_pages must be >= 1 when set, got {max_pages}")
        self._context = context
        self._page_size = page_size
        self._max_pages = max_pages

    @property
    def context(self) -> SessionContext:
        return self._context

    async def __aenter__(self) -> "GarminConnectClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._context.aclose()

    async def _display_name(self) -> str:
        profile = await self._context.get_profile()
        return profile.display_name

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    async def get_social_profile(self) -> SocialProfile:
        return await self._context.get_profile()

    async def get_preferences(self) -> UserPreferences:
        return await self._context.get_preferences()

    async def get_user_settings(self) -> UserSettings:
        return await self._context.request_json(endpoints.USER_SETTINGS_URL, None, UserSettings)

    # ------------------------------------------------------------------
    # Activities
    # ------------------------------------------------------------------

    async def get_activities(self, start: int, limit: int) -> list[Activity]:
        if start < 0 or limit < 1:
            raise InvalidArgumentError(
                f"start must be >= 0 and limit >= 1 (got start={start}, limit={limit})"
            )
        return await self._context.request_json(
            endpoints.ACTIVITIES_URL,
            build_query(start=start, limit=limit),
            list[Activity],
        )

    async def get_activities_by_date(
        self,
        start_date: date,
        end_date: date,
        activity_type: str | None = None,
    ) -> list[Activity]:
        """Every activity in the date range, following pagination to the end."""
        if end_date < start_date:
            raise InvalidArgumentError(
                f"start_date ({start_date}) must not be after end_date ({end_date})"
            )

        async def fetch_page(start: int, limit: int) -> list[Activity]:
            return await self._context.request_json(
                endpoints.ACTIVITIES_URL,
                build_query(
                    startDate=start_date,
                    endDate=end_date,
                    start=start,
                    limit=limit,
                    activityType=activity_type or None,
                ),
                list[Activity],
            )

        return await paginate(fetch_page, page_size=self._page_size, max_pages=self._max_pages)

    async def get_activity_exercise_sets(self, activity_id: int) -> ExerciseSets:
        path = build_path(endpoints.ACTIVITY_URL, activity_id=activity_id)
        return await self._context.request_json(path, None, ExerciseSets)

    async def get_activity_splits(self, activity_id: int) -> ActivitySplits:
        path = build_path(endpoints.ACTIVITY_SPLITS_URL, activity_id=activity_id)
        return await self._context.request_json(path, None, ActivitySplits)

    async def get_activity_split_summaries(self, activity_id: int) -> SplitSummaries:
        path = build_path(endpoints.ACTIVITY_SPLIT_SUMMARIES_URL, activity_id=activity_id)
        return await self._context.request_json(path, None, SplitSummaries)

    async def get_activity_weather(self, activity_id: int) -> ActivityWeather:
        path = build_path(endpoints.ACTIVITY_WEATHER_URL, activity_id=activity_id)
        return await self._context.request_json(path, None, ActivityWeather)

    async def get_activity_hr_in_timezones(self, activity_id: int) -> list[HrTimeInZone]:
        path = build_path(endpoints.ACTIVITY_HR_ZONES_URL, activity_id=activity_id)
        return await self._context.request_json(path, None, list[HrTimeInZone])

    async def get_activity_details(
        self,
        activity_id: int,
        max_chart_size: int = 2000,
        max_polyline_size: int = 4000,
    ) -> ActivityDetails:
        path = build_path(endpoints.ACTIVITY_DETAILS_URL, activity_id=activity_id)
        params = build_query(maxChartSize=max_chart_size, maxPolylineSize=max_polyline_size)
        return await self._context.request_json(path, params, ActivityDetails)

    async def get_personal_records(self, owner_display_name: str) -> list[PersonalRecord]:
        path = build_path(endpoints.PERSONAL_RECORDS_URL, display_name=owner_display_name)
        return await self._context.request_json(path, None, list[PersonalRecord])

    async def download_activity(
        self, activity_id: int, fmt: DownloadFormat | str = DownloadFormat.ORIGINAL
    ) -> bytes:
        """Raw export bytes. ORIGINAL is the zipped FIT file as uploaded by the device."""
        return await download_activity(self._context, activity_id, fmt)

    # ------------------------------------------------------------------
    # Wellness
    # ------------------------------------------------------------------

    async def get_user_summary(self, cdate: date) -> Stats:
        display_name = await self._display_name()
        path = build_path(endpoints.USER_SUMMARY_URL, display_name=display_name)
        return await self._context.request_json(path, build_query(calendarDate=cdate), Stats)

    async def get_wellness_heart_rates(self, cdate: date) -> HeartRateData:
        display_name = await self._display_name()
        path = build_path(endpoints.HEART_RATES_URL, display_name=display_name)
        return await self._context.request_json(path, build_query(date=cdate), HeartRateData)

    async def get_wellness_sleep_data(self, cdate: date) -> SleepData:
        display_name = await self._display_name()
        path = build_path(endpoints.SLEEP_DATA_URL, display_name=display_name)
        return await self._context.request_json(path, build_query(date=cdate), SleepData)

    async def get_wellness_steps_data(self, cdate: date) -> list[StepsData]:
        display_name = await self._display_name()
        path = build_path(endpoints.USER_SUMMARY_CHART_URL, display_name=display_name)
        return await self._context.request_json(path, build_query(date=cdate), list[StepsData])

    async def get_body_composition(self, start_date: date, end_date: date) -> BodyComposition:
        if end_date < start_date:
            raise InvalidArgumentError(
                f"start_date ({start_date}) must not be after end_date ({end_date})"
            )
        return await self._context.request_json(
            endpoints.BODY_COMPOSITION_URL,
            build_query(startDate=start_date, endDate=end_date),
            BodyComposition,
        )

    async def get_hydration_data(self, cdate: date) -> HydrationData:
        path = build_path(endpoints.HYDRATION_DATA_URL, date=cdate)
        return await self._context.request_json(path, None, HydrationData)

    # ------------------------------------------------------------------
    # Devices
    # ------------------------------------------------------------------

    async def get_devices(self) -> list[Device]:
        return await self._context.request_json(endpoints.DEVICE_LIST_URL, None, list[Device])

    async def get_device_settings(self, device_id: int) -> DeviceSettings:
        path = build_path(endpoints.DEVICE_SETTINGS_URL, device_id=device_id)
        return await self._context.request_json(path, None, DeviceSettings)

    async def get_device_last_used(self) -> DeviceLastUsed:
        return await self._context.request_json(
            endpoints.DEVICE_LAST_USED_URL, None, DeviceLastUsed
        )
