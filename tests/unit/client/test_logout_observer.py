import httpx
import pytest

from src.cobalt_cms.client.network import LogoutObserver, _reset_observer, get_logout_observer
from src.cobalt_cms.client.settings import BridgeClientSettings
from tests.utils import FakePage

BRIDGE_COOKIES = {
    "jwtToken": "a",
    "cmsJwtToken": "b",
    "strapi_jwt": "c",
    "strapi-jwt": "d",
    "strapi_session": "e",
    "strapi_auth": "f",
    "logged_in": "yes",
    "unrelated": "keep",
}


@pytest.fixture(autouse=True)
def _fresh_observer():
    _reset_observer()
    yield
    _reset_observer()


def _client(status: int = 200) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(status)),
        base_url="http://cms.test",
    )


class TestLogoutObserver:
    async def test_installs_once_per_client(self):
        observer = LogoutObserver(BridgeClientSettings())
        page = FakePage()

        async with _client() as client:
            assert observer.install(client, page) is True
            assert observer.install(client, page) is False
            assert observer.is_installed(client)
            assert len(client.event_hooks["response"]) == 1

    async def test_logout_clears_cookies_and_navigates(self):
        settings = BridgeClientSettings()
        page = FakePage(cookies=BRIDGE_COOKIES)

        async with _client() as client:
            get_logout_observer(settings).install(client, page)
            await client.post("/admin/logout")

        assert page.cookies == {"unrelated": "keep"}
        assert page.navigations == [settings.logout_redirect_url]

    async def test_other_responses_ignored(self):
        page = FakePage(cookies=BRIDGE_COOKIES)

        async with _client() as client:
            get_logout_observer().install(client, page)
            await client.get("/admin/content-manager")

        assert page.cookies == BRIDGE_COOKIES
        assert page.navigations == []

    async def test_failed_logout_ignored(self):
        page = FakePage(cookies=BRIDGE_COOKIES)

        async with _client(status=500) as client:
            get_logout_observer().install(client, page)
            await client.post("/admin/logout")

        assert page.cookies == BRIDGE_COOKIES

    def test_singleton(self):
        assert get_logout_observer() is get_logout_observer()
