"""Client factory: wires transport, login and session context from config.

Callers that need custom collaborators build SessionContext themselves;
this is the default wiring for scripts and applications.
"""

from garmin_connect.adapters.http_client import HttpxTransport
from garmin_connect.adapters.login import GarthLogin
from garmin_connect.adapters.protocol import Credentials
from garmin_connect.client import GarminConnectClient
from garmin_connect.session import SessionContext
from shared.config import Settings, settings as default_settings
from shared.exceptions import InvalidArgumentError


def get_client(config: Settings | None = None) -> GarminConnectClient:
    """Return a client for the configured account.

    Nothing is sent over the network here; the first request logs in.
    """
    config = config or default_settings
    if not config.username:
        raise InvalidArgumentError("GC_USERNAME and GC_PASSWORD must be set to build a client")

    transport = HttpxTransport(
        config.base_url,
        timeout=config.request_timeout_seconds,
        max_attempts=config.retry_max_attempts,
        max_wait_seconds=config.retry_max_wait_seconds,
        user_agent=config.user_agent,
    )
    login = GarthLogin(config.token_dir)
    credentials = Credentials(username=config.username, password=config.password)
    context = SessionContext(transport, login, credentials)
    return GarminConnectClient(context, page_size=config.page_size, max_pages=config.max_pages)
