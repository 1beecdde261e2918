"""Process-wide logout observer hooked into the bridge's HTTP client."""

import weakref

import httpx
from loguru import logger

from src.cobalt_cms.client.page import ALL_BRIDGE_COOKIES, LoginPage
from src.cobalt_cms.client.settings import BridgeClientSettings


class LogoutObserver:
    """Clears bridge cookies and leaves for the external sign-in page after logout.

    Installation is idempotent per client.
    """

    def __init__(self, settings: BridgeClientSettings):
        self._settings = settings
        self._installed: weakref.WeakSet[httpx.AsyncClient] = weakref.WeakSet()

    def is_installed(self, client: httpx.AsyncClient) -> bool:
        return client in self._installed

    def install(self, client: httpx.AsyncClient, page: LoginPage) -> bool:
        """Attach the response hook once; returns False when already attached."""
        if self.is_installed(client):
            return False

        logout_path = self._settings.logout_path
        redirect_url = self._settings.logout_redirect_url

        async def on_response(response: httpx.Response) -> None:
            if logout_path in response.request.url.path and response.is_success:
                logger.info("Logout detected; clearing bridge cookies")
                for name in ALL_BRIDGE_COOKIES:
                    page.clear_cookie(name)
                page.navigate(redirect_url)

        hooks = client.event_hooks
        hooks["response"] = [*hooks.get("response", []), on_response]
        client.event_hooks = hooks
        self._installed.add(client)
        return True


_observer: LogoutObserver | None = None


def get_logout_observer(settings: BridgeClientSettings | None = None) -> LogoutObserver:
    """Return the process-wide observer, creating it on first use."""
    global _observer

    if _observer is None:
        _observer = LogoutObserver(settings or BridgeClientSettings())
    return _observer


def _reset_observer() -> None:
    """Reset the observer instance (for testing)."""
    global _observer
    _observer = None
