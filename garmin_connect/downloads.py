"""Activity export downloads.

One immutable format → template table, built once at import. The format is
checked before any network call because it may come from outside the typed
boundary (CLI input, deserialized config).
"""

from types import MappingProxyType

import structlog

from garmin_connect.domain.models import DownloadFormat
from garmin_connect.endpoints import (
    CSV_DOWNLOAD_URL,
    GPX_DOWNLOAD_URL,
    KML_DOWNLOAD_URL,
    ORIGINAL_DOWNLOAD_URL,
    TCX_DOWNLOAD_URL,
    build_path,
)
from garmin_connect.session import SessionContext
from shared.exceptions import InvalidArgumentError

logger = structlog.get_logger()

DOWNLOAD_URLS = MappingProxyType(
    {
        DownloadFormat.ORIGINAL: ORIGINAL_DOWNLOAD_URL,
        DownloadFormat.TCX: TCX_DOWNLOAD_URL,
        DownloadFormat.GPX: GPX_DOWNLOAD_URL,
        DownloadFormat.KML: KML_DOWNLOAD_URL,
        DownloadFormat.CSV: CSV_DOWNLOAD_URL,
    }
)


def resolve_download_path(activity_id: int, fmt: DownloadFormat | str) -> str:
    """Map (activity, format) to the export path. Accepts members or their string values."""
    try:
        fmt = DownloadFormat(fmt)
    except ValueError:
        raise InvalidArgumentError(
            f"Unexpected download format {fmt!r}. "
            f"Must be one of: {', '.join(f.value for f in DownloadFormat)}"
        ) from None
    return build_path(DOWNLOAD_URLS[fmt], activity_id=activity_id)


async def download_activity(
    context: SessionContext, activity_id: int, fmt: DownloadFormat | str
) -> bytes:
    """Download an activity export; the bytes are returned exactly as sent."""
    path = resolve_download_path(activity_id, fmt)
    content = await context.request_binary(path)
    logger.info(
        "activity_downloaded",
        activity_id=activity_id,
        format=DownloadFormat(fmt).value,
        size_bytes=len(content),
    )
    return content
