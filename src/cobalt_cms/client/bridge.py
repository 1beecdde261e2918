"""Browser side of the auto-login bridge as an explicit state machine."""

import asyncio
from collections.abc import Awaitable, Callable
from enum import Enum

import httpx
from loguru import logger

from src.cobalt_cms.client.network import get_logout_observer
from src.cobalt_cms.client.page import (
    CMS_SESSION_ALIASES,
    CMS_TOKEN_COOKIE,
    EMAIL_SELECTORS,
    FALLBACK_ALIASES,
    LOGGED_IN_COOKIE,
    PASSWORD_SELECTORS,
    TOKEN_COOKIE,
    LoginPage,
    find_submit_button,
)
from src.cobalt_cms.client.settings import BridgeClientSettings
from src.cobalt_cms.core.exceptions import TokenDecodeError
from src.cobalt_cms.core.models.claims import ExternalClaims
from src.cobalt_cms.core.services.token.codec import decode_external_token


class BridgeState(str, Enum):
    IDLE = "idle"
    WAITING_FOR_FORM = "waiting_for_form"
    AUTHENTICATING = "authenticating"
    REDIRECTING = "redirecting"
    FALLBACK_SUBMIT = "fallback_submit"
    SUCCEEDED = "succeeded"
    SUBMITTED = "submitted"
    FAILED = "failed"
    ABORTED = "aborted"


# any truthy flag passes the client-side access check
CMS_FLAG_KEYS = ("isCms", "isCMS", "is_cms")

TERMINAL_STATES = frozenset(
    {BridgeState.SUCCEEDED, BridgeState.SUBMITTED, BridgeState.FAILED, BridgeState.ABORTED}
)


class BridgeAbort(Exception):
    """Client-side validation failure; shown to the user and ends the flow."""


class BrowserBridge:
    """Runs one auto-login attempt for a single page load.

    There is no cancellation: ``run`` always ends in a terminal state, and a
    new page load means a new bridge.
    """

    def __init__(
        self,
        page: LoginPage,
        http_client: httpx.AsyncClient,
        settings: BridgeClientSettings | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._page = page
        self._client = http_client
        self._settings = settings or BridgeClientSettings()
        self._sleep = sleep
        self.state = BridgeState.IDLE
        self.history: list[BridgeState] = [BridgeState.IDLE]
        self.token: str | None = None
        self.cms_token: str | None = None

    def _transition(self, state: BridgeState) -> None:
        logger.debug(f"Bridge {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def bootstrap(self) -> None:
        """Pick up tokens from the URL or cookies and restore missing cookies."""
        page = self._page
        days = self._settings.cookie_max_age_days
        url_token = page.query_param("token")
        url_cms_token = page.query_param("cmsToken")

        self.token = url_token or page.get_cookie(TOKEN_COOKIE)
        self.cms_token = url_cms_token or page.get_cookie(CMS_TOKEN_COOKIE)

        if url_token and not page.get_cookie(TOKEN_COOKIE):
            page.set_cookie(TOKEN_COOKIE, url_token, days)
            page.set_cookie(LOGGED_IN_COOKIE, "yes", days)
        if url_cms_token and not page.get_cookie(CMS_TOKEN_COOKIE):
            page.set_cookie(CMS_TOKEN_COOKIE, url_cms_token, days)
            page.set_cookie("strapi_jwt", url_cms_token, days)

    async def run(self) -> BridgeState:
        get_logout_observer(self._settings).install(self._client, self._page)
        self.bootstrap()

        if not self.token or self._settings.login_path not in self._page.path:
            return self.state

        await self._sleep(self._settings.bootstrap_delay)
        self._transition(BridgeState.WAITING_FOR_FORM)
        if await self._wait_for_form():
            await self._authenticate()
        elif self.cms_token:
            logger.warning("Timed out waiting for the login form; reusing CMS session")
            await self._redirect_with(self.cms_token)
        else:
            logger.warning("Timed out waiting for the login form")
            self._transition(BridgeState.ABORTED)
        return self.state

    async def _wait_for_form(self) -> bool:
        for attempt in range(1, self._settings.form_poll_attempts + 1):
            if self._page.snapshot().ready:
                return True
            if attempt < self._settings.form_poll_attempts:
                await self._sleep(self._settings.form_poll_interval)
        return False

    def _validate_claims(self, token: str) -> ExternalClaims:
        try:
            claims = decode_external_token(token)
        except TokenDecodeError:
            raise BridgeAbort("Invalid token format") from None
        if not claims.email or not claims.password:
            raise BridgeAbort("Invalid token credentials")
        if not any(claims.raw.get(key) for key in CMS_FLAG_KEYS):
            raise BridgeAbort("User does not have CMS access")
        if claims.is_expired():
            raise BridgeAbort("Token expired")
        return claims

    async def _authenticate(self) -> None:
        self._transition(BridgeState.AUTHENTICATING)
        page = self._page
        page.notify("Processing auto-login...", "info")

        if self.cms_token:
            page.notify("Using existing CMS session...", "success")
            await self._sleep(self._settings.action_delay)
            await self._redirect_with(self.cms_token)
            return

        try:
            claims = self._validate_claims(self.token or "")
        except BridgeAbort as e:
            page.notify(f"Auto-login failed: {e}", "error")
            self._transition(BridgeState.FAILED)
            return

        page.fill_input(EMAIL_SELECTORS, claims.email or "")
        page.fill_input(PASSWORD_SELECTORS, claims.password or "")
        page.notify("Submitting login...", "info")
        await self._sleep(self._settings.action_delay)
        await self._submit(claims)

    async def _request_session(self, claims: ExternalClaims) -> str | None:
        """POST the token to the auto-login endpoint; return the session credential.

        Raises:
            httpx.HTTPError: On transport failure or a non-2xx response
        """
        response = await self._client.post(
            self._settings.auto_login_path,
            json={"email": claims.email, "cobaltToken": self.token, "password": claims.password},
        )
        response.raise_for_status()
        try:
            body = response.json()
        except ValueError:
            body = {}
        credential = body.get("jwt") if isinstance(body, dict) else None
        return credential or response.cookies.get(self._settings.session_cookie_name)

    async def _submit(self, claims: ExternalClaims) -> None:
        page = self._page
        try:
            credential = await self._request_session(claims)
        except httpx.HTTPError as e:
            logger.warning(f"Auto-login request failed: {e}")
            page.notify("API failed, trying form submission...", "info")
            await self._sleep(self._settings.action_delay)
            self._submit_form_fallback()
            return

        page.notify("Login successful! Redirecting...", "success")
        if credential:
            await self._redirect_with(credential)
            return

        self._transition(BridgeState.REDIRECTING)
        await self._sleep(self._settings.success_redirect_delay)
        page.navigate(self._settings.admin_path)
        self._transition(BridgeState.SUCCEEDED)

    async def _redirect_with(self, credential: str) -> None:
        self._transition(BridgeState.REDIRECTING)
        for name in CMS_SESSION_ALIASES:
            self._page.set_cookie(name, credential, self._settings.cookie_max_age_days)
        await self._sleep(self._settings.action_delay)
        self._page.navigate(self._settings.admin_path)
        self._transition(BridgeState.SUCCEEDED)

    def _submit_form_fallback(self) -> None:
        self._transition(BridgeState.FALLBACK_SUBMIT)
        page = self._page
        days = self._settings.cookie_max_age_days

        url_token = page.query_param("token")
        if url_token:
            for name in FALLBACK_ALIASES:
                page.set_cookie(name, url_token, days)
            page.set_cookie(LOGGED_IN_COOKIE, "yes", days)

        button = find_submit_button(page.buttons())
        if button is None:
            logger.error("Login button not found for fallback submission")
            page.notify("Auto-login failed: login button not found", "error")
            self._transition(BridgeState.FAILED)
            return

        button.click()
        self._transition(BridgeState.SUBMITTED)
