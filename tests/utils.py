import base64
import json
import time
from collections.abc import Sequence
from typing import Any

from authlib.jose import jwt

from src.cobalt_cms.client.page import FormSnapshot, PageButton


def b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def make_cobalt_token(claims: dict[str, Any], secret: str | None = None) -> str:
    """Build a Cobalt-style token; unsigned unless ``secret`` is given."""
    if secret:
        token = jwt.encode({"alg": "HS256", "typ": "JWT"}, claims, secret)
        return token.decode() if isinstance(token, bytes) else token
    header = b64url(json.dumps({"alg": "none", "typ": "JWT"}).encode())
    payload = b64url(json.dumps(claims).encode())
    return f"{header}.{payload}.c2lnbmF0dXJl"


def cms_claims(email: str = "new@x.com", **overrides: Any) -> dict[str, Any]:
    claims: dict[str, Any] = {
        "sub": "cobalt-user-1",
        "email": email,
        "passWord": "cobalt-pass",
        "preferred_username": "cobalt.user",
        "given_name": "Ada",
        "family_name": "Lovelace",
        "isCMS": True,
        "exp": int(time.time()) + 3600,
    }
    claims.update(overrides)
    return claims


class FakePage:
    """In-memory login page recording what the bridge does to it."""

    def __init__(
        self,
        path: str = "/admin/auth/login",
        query: dict[str, str] | None = None,
        cookies: dict[str, str] | None = None,
        form_ready_after: int = 0,
        buttons: list[PageButton] | None = None,
    ):
        self._path = path
        self._query = query or {}
        self.cookies = dict(cookies or {})
        self._form_ready_after = form_ready_after
        self._snapshots = 0
        self.filled: dict[str, str] = {}
        self.notifications: list[tuple[str, str]] = []
        self.navigations: list[str] = []
        self.clicked: list[str] = []
        if buttons is None:
            buttons = [self.button("submit", "Login")]
        self._buttons = buttons

    def button(self, type_: str, text: str, css_class: str = "") -> PageButton:
        return PageButton(type_, text, css_class, lambda: self.clicked.append(text))

    @property
    def path(self) -> str:
        return self._path

    def query_param(self, name: str) -> str | None:
        return self._query.get(name)

    def get_cookie(self, name: str) -> str | None:
        return self.cookies.get(name)

    def set_cookie(self, name: str, value: str, max_age_days: int) -> None:
        self.cookies[name] = value

    def clear_cookie(self, name: str) -> None:
        self.cookies.pop(name, None)

    def snapshot(self) -> FormSnapshot:
        self._snapshots += 1
        if self._snapshots > self._form_ready_after:
            return FormSnapshot(forms=1, inputs=2, buttons=1)
        return FormSnapshot(forms=0, inputs=0, buttons=0)

    def fill_input(self, selectors: Sequence[str], value: str) -> bool:
        self.filled[selectors[0]] = value
        return True

    def buttons(self) -> Sequence[PageButton]:
        return self._buttons

    def notify(self, message: str, level: str) -> None:
        self.notifications.append((message, level))

    def navigate(self, url: str) -> None:
        self.navigations.append(url)

    @property
    def messages(self) -> list[str]:
        return [message for message, _ in self.notifications]


class SleepRecorder:
    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
