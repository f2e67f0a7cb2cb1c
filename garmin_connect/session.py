"""Session context: authenticated requests with transparent renewal.

Responsibilities:
- Every outbound request carries a valid session. An absent or expired
  session is renewed through the login collaborator before the request.
- Renewal is single-flight: concurrent callers share one login and its
  outcome. A successful renewal clears the cached profile and preferences.
- A request rejected with 401 marks its session expired, renews once and
  retries once. A second rejection is an AuthenticationError; there is no
  further renewal inside this layer.
- Profile and preferences are lazily cached, one population per slot.

State machine: UNSET → VALID, EXPIRED → VALID (renewal only);
VALID → EXPIRED (401 for the current session, local expiry, expire()).
"""

import time
from collections.abc import Mapping
from enum import StrEnum
from typing import TypeVar

import structlog

from garmin_connect.adapters.protocol import (
    Credentials,
    LoginCollaborator,
    Session,
    Transport,
    TransportResponse,
)
from garmin_connect.cache import CacheSlot, SlotState
from garmin_connect.domain.models import SocialProfile, UserPreferences
from garmin_connect.domain.parsing import parse
from garmin_connect.endpoints import SOCIAL_PROFILE_URL, USER_PREFERENCES_URL
from garmin_connect.singleflight import SingleFlight
from shared.exceptions import AuthenticationError, HttpError
from shared.metrics import (
    api_duration_seconds,
    api_requests_total,
    session_renewals_total,
    status_class,
)

logger = structlog.get_logger()

T = TypeVar("T")

AUTH_FAILURE_STATUS_CODES = {401}
_RENEWAL_KEY = "renewal"


class SessionState(StrEnum):
    UNSET = "unset"
    VALID = "valid"
    EXPIRED = "expired"


class SessionContext:
    """Owns the session, its renewal policy and the cached identity data."""

    def __init__(
        self,
        transport: Transport,
        login: LoginCollaborator,
        credentials: Credentials,
    ) -> None:
        self._transport = transport
        self._login = login
        self._credentials = credentials
        self._session: Session | None = None
        self._state = SessionState.UNSET
        self._flight = SingleFlight()
        self.profile: CacheSlot[SocialProfile] = CacheSlot("profile")
        self.preferences: CacheSlot[UserPreferences] = CacheSlot("preferences")

    @property
    def state(self) -> SessionState:
        if self._state is SessionState.VALID and self._session.is_expired():
            self._expire(self._session, reason="expiry_elapsed")
        return self._state

    async def __aenter__(self) -> "SessionContext":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._transport.aclose()
        close_login = getattr(self._login, "aclose", None)
        if close_login is not None:
            await close_login()

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def expire(self) -> None:
        """Mark the current session expired; the next request renews it."""
        if self._session is not None:
            self._expire(self._session, reason="explicit")

    async def ensure_valid_session(self) -> Session:
        if self.state is SessionState.VALID:
            return self._session  # type: ignore[return-value]
        return await self._flight.do(_RENEWAL_KEY, self._renew)

    async def _renew(self) -> Session:
        previous = self._state
        logger.info("session_renewing", from_state=previous.value)
        try:
            session = await self._login.login(self._credentials)
        except AuthenticationError as exc:
            session_renewals_total.labels(outcome="failure").inc()
            logger.warning(
                "session_renewal_failed",
                from_state=previous.value,
                detail=exc.detail,
                status=exc.status,
            )
            raise

        self._session = session
        self._state = SessionState.VALID
        self.profile.invalidate()
        self.preferences.invalidate()
        session_renewals_total.labels(outcome="success").inc()
        logger.info("session_renewed", from_state=previous.value)
        return session

    def _expire(self, session: Session, reason: str) -> None:
        # A rejection for a session that has since been replaced is stale.
        if session is not self._session or self._state is not SessionState.VALID:
            return
        self._state = SessionState.EXPIRED
        logger.info("session_expired", reason=reason)

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    async def _send(
        self, path: str, params: Mapping[str, str] | None, session: Session, kind: str
    ) -> TransportResponse:
        start = time.monotonic()
        with api_duration_seconds.labels(kind=kind).time():
            response = await self._transport.get(path, params, session)
        api_requests_total.labels(status_class=status_class(response.status)).inc()
        logger.debug(
            "api_request",
            path=path,
            status=response.status,
            duration_ms=round((time.monotonic() - start) * 1000, 1),
        )
        return response

    async def _get(
        self, path: str, params: Mapping[str, str] | None, kind: str
    ) -> TransportResponse:
        session = await self.ensure_valid_session()
        response = await self._send(path, params, session, kind)

        if response.status in AUTH_FAILURE_STATUS_CODES:
            self._expire(session, reason=f"http_{response.status}")
            session = await self.ensure_valid_session()
            response = await self._send(path, params, session, kind)
            if response.status in AUTH_FAILURE_STATUS_CODES:
                self._expire(session, reason=f"http_{response.status}")
                raise AuthenticationError(
                    f"GET {path} rejected after session renewal",
                    status=response.status,
                )

        if not response.ok:
            logger.warning("api_request_failed", path=path, status=response.status)
            raise HttpError(response.status, response.body, path=path)
        return response

    async def request_json(
        self,
        path: str,
        params: Mapping[str, str] | None,
        shape: type[T],
    ) -> T:
        response = await self._get(path, params, kind="json")
        return parse(response.body, shape)

    async def request_binary(
        self, path: str, params: Mapping[str, str] | None = None
    ) -> bytes:
        response = await self._get(path, params, kind="binary")
        return response.body

    # ------------------------------------------------------------------
    # Cached identity
    # ------------------------------------------------------------------

    async def get_profile(self) -> SocialProfile:
        return await self._cached(self.profile, SOCIAL_PROFILE_URL, SocialProfile)

    async def get_preferences(self) -> UserPreferences:
        return await self._cached(self.preferences, USER_PREFERENCES_URL, UserPreferences)

    async def _cached(self, slot: CacheSlot[T], path: str, shape: type[T]) -> T:
        if slot.state is not SlotState.POPULATED:
            # Renewal invalidates the slots, so it must finish before the
            # population pins its generation.
            await self.ensure_valid_session()
        return await slot.get(lambda: self.request_json(path, None, shape))
