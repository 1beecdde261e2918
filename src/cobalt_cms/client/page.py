"""The surface the bridge needs from the login page it runs on."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Literal, Protocol

NotificationLevel = Literal["info", "success", "error"]

EMAIL_SELECTORS = ('input[name="email"]', 'input[type="email"]')
PASSWORD_SELECTORS = ('input[name="password"]', 'input[type="password"]')

# Cookie names read by the host framework or the external sign-in app
TOKEN_COOKIE = "jwtToken"
CMS_TOKEN_COOKIE = "cmsJwtToken"
LOGGED_IN_COOKIE = "logged_in"
CMS_SESSION_ALIASES = ("cmsJwtToken", "strapi_jwt", "strapi_session", "strapi_auth")
FALLBACK_ALIASES = ("jwtToken", "strapi_session", "strapi_auth")
ALL_BRIDGE_COOKIES = (
    "jwtToken",
    "cmsJwtToken",
    "strapi_jwt",
    "strapi-jwt",
    "strapi_session",
    "strapi_auth",
    "logged_in",
)


@dataclass(frozen=True)
class FormSnapshot:
    forms: int
    inputs: int
    buttons: int

    @property
    def ready(self) -> bool:
        return self.forms > 0 and self.inputs >= 2 and self.buttons > 0


@dataclass
class PageButton:
    type: str
    text: str
    css_class: str
    click: Callable[[], None]


class LoginPage(Protocol):
    """Implemented by whatever hosts the bridge (a browser adapter, a test fake)."""

    @property
    def path(self) -> str: ...

    def query_param(self, name: str) -> str | None: ...

    def get_cookie(self, name: str) -> str | None: ...

    def set_cookie(self, name: str, value: str, max_age_days: int) -> None:
        """Set a script-visible cookie with ``path=/`` and ``SameSite=Lax``."""

    def clear_cookie(self, name: str) -> None: ...

    def snapshot(self) -> FormSnapshot: ...

    def fill_input(self, selectors: Sequence[str], value: str) -> bool:
        """Set the first matching input, firing ``input`` and ``change`` events."""

    def buttons(self) -> Sequence[PageButton]: ...

    def notify(self, message: str, level: NotificationLevel) -> None: ...

    def navigate(self, url: str) -> None: ...


def find_submit_button(buttons: Sequence[PageButton]) -> PageButton | None:
    """Locate the login form's submit control.

    Tries an explicit submit button, then a button whose text mentions login,
    then one whose class mentions submit or login.
    """
    for button in buttons:
        if button.type == "submit":
            return button
    for button in buttons:
        if "login" in button.text.lower():
            return button
    for button in buttons:
        if "submit" in button.css_class or "login" in button.css_class:
            return button
    return None
