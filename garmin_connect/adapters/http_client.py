"""httpx transport with tenacity retry for Garmin Connect calls.

Retry policy:
- Retry on transient errors (429, 500, 502, 503, 504, timeouts)
- Do NOT retry on 400, 401, 403, 404 (client errors / auth failures)
- Exponential backoff with jitter
- After the last attempt the final response is returned as-is, so the
  session layer sees the real status and body
"""

from collections.abc import Mapping

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_exponential_jitter,
)
from tenacity.wait import wait_base

from garmin_connect.adapters.protocol import Session, TransportResponse
from shared.config import settings
from shared.exceptions import TransportError

logger = structlog.get_logger()

TRANSIENT_STATUS_CODES = {429, 500, 502, 503, 504}


def _is_transient(response: httpx.Response) -> bool:
    return response.status_code in TRANSIENT_STATUS_CODES


def _log_retry(retry_state: RetryCallState) -> None:
    outcome = retry_state.outcome
    if outcome is not None and outcome.failed:
        reason = type(outcome.exception()).__name__
    else:
        reason = f"HTTP {outcome.result().status_code}" if outcome else "unknown"
    logger.warning(
        "transport_retry",
        attempt=retry_state.attempt_number,
        reason=reason,
        sleep_seconds=round(retry_state.next_action.sleep, 2) if retry_state.next_action else None,
    )


def _last_response(retry_state: RetryCallState) -> httpx.Response:
    return retry_state.outcome.result()


class HttpxTransport:
    """Transport backed by one shared httpx.AsyncClient."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        max_attempts: int | None = None,
        max_wait_seconds: int | None = None,
        user_agent: str | None = None,
        client: httpx.AsyncClient | None = None,
        retry_wait: wait_base | None = None,
    ) -> None:
        self._max_attempts = max_attempts or settings.retry_max_attempts
        self._max_wait_seconds = max_wait_seconds or settings.retry_max_wait_seconds
        self._retry_wait = retry_wait or wait_exponential_jitter(
            initial=1, max=self._max_wait_seconds, jitter=2
        )
        self._client = client or httpx.AsyncClient(
            base_url=base_url or settings.base_url,
            timeout=timeout or settings.request_timeout_seconds,
            headers={
                "User-Agent": user_agent or settings.user_agent,
            },
        )

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            retry=(
                retry_if_exception_type(httpx.TimeoutException)
                | retry_if_result(_is_transient)
            ),
            wait=self._retry_wait,
            stop=stop_after_attempt(self._max_attempts),
            before_sleep=_log_retry,
            retry_error_callback=_last_response,
            reraise=True,
        )

    async def get(
        self,
        path: str,
        params: Mapping[str, str] | None,
        session: Session,
    ) -> TransportResponse:
        headers = {"Authorization": session.authorization}
        try:
            response = await self._retrying()(
                self._client.get, path, params=params, headers=headers
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"GET {path} failed: {type(exc).__name__}: {exc}") from exc

        return TransportResponse(
            status=response.status_code,
            body=response.content,
            headers=dict(response.headers),
        )

    async def aclose(self) -> None:
        await self._client.aclose()
