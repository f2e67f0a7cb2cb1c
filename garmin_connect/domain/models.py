"""Garmin Connect response models.

Each model mirrors one JSON response shape of the private API. Only the
fields this client relies on are typed; everything else the service sends
is kept on the model as extra attributes so nothing is silently dropped.

Design principles:
- camelCase on the wire, snake_case in Python (alias generator)
- Nullable fields: None = "service did not send it", not zero
- Frozen: cached profile and preferences are replaced wholesale, never mutated
"""

from datetime import date, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class GarminModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )


class DownloadFormat(StrEnum):
    ORIGINAL = "original"
    TCX = "tcx"
    GPX = "gpx"
    KML = "kml"
    CSV = "csv"

    @classmethod
    def _missing_(cls, value: object) -> "DownloadFormat | None":
        # Member names are accepted too: "TCX" as well as "tcx".
        if isinstance(value, str):
            return cls.__members__.get(value.upper())
        return None


# --- Identity ---


class SocialProfile(GarminModel):
    """The authenticated user's public identity; display_name keys wellness endpoints."""

    display_name: str
    id: int | None = None
    profile_id: int | None = None
    garmin_guid: str | None = None
    full_name: str | None = None
    user_name: str | None = None
    location: str | None = None


class UserPreferences(GarminModel):
    display_name: str | None = None
    measurement_system: str | None = None
    preferred_locale: str | None = None
    time_format: str | None = None
    date_format: str | None = None
    first_day_of_week: dict[str, Any] | None = None


class UserData(GarminModel):
    gender: str | None = None
    weight: float | None = None
    height: float | None = None
    birth_date: date | None = None
    measurement_system: str | None = None
    vo2_max_running: float | None = Field(None, alias="vo2MaxRunning")
    lactate_threshold_heart_rate: int | None = None


class UserSettings(GarminModel):
    id: int | None = None
    user_data: UserData | None = None


# --- Activities ---


class ActivityType(GarminModel):
    type_id: int | None = None
    type_key: str | None = None
    parent_type_id: int | None = None


class Activity(GarminModel):
    activity_id: int
    activity_name: str | None = None
    start_time_local: str | None = None
    start_time_gmt: str | None = Field(None, alias="startTimeGMT")
    activity_type: ActivityType | None = None
    distance: float | None = None
    duration: float | None = None
    moving_duration: float | None = None
    elevation_gain: float | None = None
    average_speed: float | None = None
    average_hr: float | None = Field(None, alias="averageHR")
    max_hr: float | None = Field(None, alias="maxHR")
    calories: float | None = None
    steps: int | None = None
    owner_display_name: str | None = None


class ExerciseSet(GarminModel):
    set_type: str | None = None
    repetition_count: int | None = None
    weight: float | None = None
    duration: float | None = None
    exercises: list[dict[str, Any]] = Field(default_factory=list)


class ExerciseSets(GarminModel):
    activity_id: int
    exercise_sets: list[ExerciseSet] | None = None


class Lap(GarminModel):
    start_time_gmt: str | None = Field(None, alias="startTimeGMT")
    distance: float | None = None
    duration: float | None = None
    average_speed: float | None = None
    average_hr: float | None = Field(None, alias="averageHR")
    max_hr: float | None = Field(None, alias="maxHR")
    lap_index: int | None = None


class ActivitySplits(GarminModel):
    activity_id: int
    lap_dtos: list[Lap] = Field(default_factory=list, alias="lapDTOs")


class SplitSummary(GarminModel):
    split_type: str | None = None
    no_of_splits: int | None = None
    distance: float | None = None
    duration: float | None = None


class SplitSummaries(GarminModel):
    activity_id: int
    split_summaries: list[SplitSummary] = Field(default_factory=list)


class ActivityWeather(GarminModel):
    issue_date: str | None = None
    temp: float | None = None
    apparent_temp: float | None = None
    dew_point: float | None = None
    relative_humidity: float | None = None
    wind_direction: int | None = None
    wind_direction_compass_point: str | None = None
    wind_speed: float | None = None
    wind_gust: float | None = None
    weather_type_dto: dict[str, Any] | None = Field(None, alias="weatherTypeDTO")


class HrTimeInZone(GarminModel):
    zone_number: int
    secs_in_zone: float | None = None
    zone_low_boundary: int | None = None


class MetricDescriptor(GarminModel):
    metrics_index: int
    key: str
    unit: dict[str, Any] | None = None


class ActivityDetails(GarminModel):
    activity_id: int
    measurement_count: int | None = None
    metrics_count: int | None = None
    metric_descriptors: list[MetricDescriptor] = Field(default_factory=list)
    activity_detail_metrics: list[dict[str, Any]] = Field(default_factory=list)
    geo_polyline_dto: dict[str, Any] | None = Field(None, alias="geoPolylineDTO")


class PersonalRecord(GarminModel):
    id: int
    type_id: int | None = None
    activity_id: int | None = None
    activity_name: str | None = None
    activity_type: str | None = None
    value: float | None = None
    pr_start_time_gmt: int | None = Field(None, alias="prStartTimeGmt")


# --- Wellness ---


class Stats(GarminModel):
    calendar_date: date
    total_steps: int | None = None
    daily_step_goal: int | None = None
    total_kilocalories: float | None = None
    active_kilocalories: float | None = None
    total_distance_meters: float | None = None
    resting_heart_rate: int | None = None
    min_heart_rate: int | None = None
    max_heart_rate: int | None = None
    average_stress_level: int | None = None
    floors_ascended: float | None = None


class HeartRateData(GarminModel):
    calendar_date: date
    user_profile_pk: int | None = Field(None, alias="userProfilePK")
    resting_heart_rate: int | None = None
    min_heart_rate: int | None = None
    max_heart_rate: int | None = None
    last_seven_days_avg_resting_heart_rate: int | None = None
    # [[epoch_millis, bpm], ...]; bpm may be null while the device was off-wrist
    heart_rate_values: list[list[int | None]] | None = None


class DailySleep(GarminModel):
    calendar_date: date
    sleep_time_seconds: int | None = None
    deep_sleep_seconds: int | None = None
    light_sleep_seconds: int | None = None
    rem_sleep_seconds: int | None = None
    awake_sleep_seconds: int | None = None
    sleep_start_timestamp_gmt: int | None = Field(None, alias="sleepStartTimestampGMT")
    sleep_end_timestamp_gmt: int | None = Field(None, alias="sleepEndTimestampGMT")
    sleep_scores: dict[str, Any] | None = None


class SleepData(GarminModel):
    daily_sleep_dto: DailySleep = Field(alias="dailySleepDTO")
    sleep_movement: list[dict[str, Any]] | None = None
    sleep_levels: list[dict[str, Any]] | None = None


class StepsData(GarminModel):
    start_gmt: datetime = Field(alias="startGMT")
    end_gmt: datetime = Field(alias="endGMT")
    steps: int
    primary_activity_level: str | None = None
    activity_level_constant: bool | None = None


class WeightEntry(GarminModel):
    sample_pk: int | None = Field(None, alias="samplePk")
    calendar_date: date | None = None
    weight: float | None = None
    bmi: float | None = None
    body_fat: float | None = None
    body_water: float | None = None
    bone_mass: float | None = None
    muscle_mass: float | None = None


class BodyCompositionAverage(GarminModel):
    from_date: int | None = None
    until_date: int | None = None
    weight: float | None = None
    bmi: float | None = None
    body_fat: float | None = None


class BodyComposition(GarminModel):
    start_date: date
    end_date: date
    date_weight_list: list[WeightEntry] = Field(default_factory=list)
    total_average: BodyCompositionAverage | None = None


class HydrationData(GarminModel):
    calendar_date: date
    value_in_ml: float | None = Field(None, alias="valueInML")
    goal_in_ml: float | None = Field(None, alias="goalInML")
    sweat_loss_in_ml: float | None = Field(None, alias="sweatLossInML")
    activity_intake_in_ml: float | None = Field(None, alias="activityIntakeInML")


# --- Devices ---


class Device(GarminModel):
    device_id: int
    unit_id: int | None = None
    product_display_name: str | None = None
    display_name: str | None = None
    part_number: str | None = None
    current_firmware_version: str | None = None
    device_status: str | None = None
    primary: bool | None = None


class DeviceSettings(GarminModel):
    device_id: int
    time_format: str | None = None
    measurement_units: str | None = None
    date_format: str | None = None
    language: int | None = None
    auto_sync_steps_before_sync: int | None = None
    activity_tracking: dict[str, Any] | None = None


class DeviceLastUsed(GarminModel):
    user_device_id: int | None = None
    user_profile_number: int | None = None
    application_number: int | None = None
    last_used_device_application_key: str | None = None
    last_used_device_name: str | None = None
    last_used_device_upload_time: int | None = None
    image_url: str | None = None
