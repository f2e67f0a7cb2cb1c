"""Garmin SSO login through garth: exchanges credentials for an OAuth2 bearer session.

The SSO flow (sign-in form, OAuth1 ticket, OAuth2 exchange) is garth's job.
This adapter runs it off the event loop and maps the resulting OAuth2 token
to a Session. Once an OAuth1 token is held, renewal only re-exchanges it for
a fresh OAuth2 token; the password is sent again only when that fails.

Every failure mode is reported as AuthenticationError:
- 401/403 from the SSO service → invalid credentials
- connection errors → service unreachable
- MFA required without a prompt, or any other garth failure → login failed
"""

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import garth
import requests
import structlog
from garth.exc import GarthException, GarthHTTPError

from garmin_connect.adapters.protocol import Credentials, Session
from shared.config import settings
from shared.exceptions import AuthenticationError
from shared.metrics import api_duration_seconds

logger = structlog.get_logger()

_REJECTED_STATUS_CODES = {401, 403}
# Sessions count as expired this long before the server-side expiry.
_EXPIRY_MARGIN = timedelta(seconds=60)


def _status_of(exc: GarthHTTPError) -> int | None:
    response = getattr(exc.error, "response", None)
    return getattr(response, "status_code", None)


def to_session(token: Any) -> Session:
    """Map a garth OAuth2 token to a Session."""
    expires_at = None
    if getattr(token, "expires_at", None):
        expires_at = datetime.fromtimestamp(token.expires_at, UTC) - _EXPIRY_MARGIN
    return Session(
        access_token=token.access_token,
        token_type=(token.token_type or "Bearer").title(),
        expires_at=expires_at,
    )


class GarthLogin:
    """Login collaborator backed by a garth client.

    *token_dir* persists the garth tokens between processes; when it already
    holds tokens, the first login resumes them instead of signing in again.
    Without *prompt_mfa*, an account that requires MFA fails to log in.
    """

    def __init__(
        self,
        token_dir: str | Path | None = None,
        *,
        prompt_mfa: Callable[[], str] | None = None,
        client: garth.Client | None = None,
    ) -> None:
        token_dir = token_dir or settings.token_dir
        self._token_dir = Path(token_dir).expanduser() if token_dir else None
        self._prompt_mfa = prompt_mfa
        self._client = client or garth.Client()
        self._resumed = False

    async def login(self, credentials: Credentials) -> Session:
        try:
            with api_duration_seconds.labels(kind="login").time():
                token = await asyncio.to_thread(self._login_sync, credentials)
        except GarthHTTPError as exc:
            status = _status_of(exc)
            if status in _REJECTED_STATUS_CODES:
                raise AuthenticationError("Invalid credentials", status=status) from exc
            raise AuthenticationError(f"Login failed: {exc.msg}", status=status) from exc
        except GarthException as exc:
            raise AuthenticationError(f"Login failed: {exc.msg}") from exc
        except requests.RequestException as exc:
            raise AuthenticationError(
                f"Login service unreachable: {type(exc).__name__}"
            ) from exc

        session = to_session(token)
        logger.info(
            "login_succeeded",
            username=credentials.username,
            expires_at=session.expires_at.isoformat() if session.expires_at else None,
        )
        return session

    def _login_sync(self, credentials: Credentials) -> Any:
        self._resume()
        if self._client.oauth1_token is not None:
            try:
                self._client.refresh_oauth2()
                logger.info("oauth2_refreshed")
                self._save()
                return self._client.oauth2_token
            except GarthHTTPError as exc:
                logger.info("oauth2_refresh_failed", status=_status_of(exc))

        if self._prompt_mfa is not None:
            mfa_options: dict[str, Any] = {"prompt_mfa": self._prompt_mfa}
        else:
            mfa_options = {"return_on_mfa": True}
        result = self._client.login(
            credentials.username, credentials.password.get_secret_value(), **mfa_options
        )
        if isinstance(result, tuple) and result and result[0] == "needs_mfa":
            raise AuthenticationError("MFA verification required; pass prompt_mfa to log in")
        self._save()
        return self._client.oauth2_token

    def _resume(self) -> None:
        if self._resumed or self._token_dir is None:
            return
        self._resumed = True
        if not (self._token_dir / "oauth1_token.json").exists():
            return
        self._client.load(str(self._token_dir))
        logger.info("tokens_resumed", token_dir=str(self._token_dir))

    def _save(self) -> None:
        if self._token_dir is None:
            return
        self._token_dir.mkdir(parents=True, exist_ok=True)
        self._client.dump(str(self._token_dir))
