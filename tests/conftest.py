from collections.abc import AsyncGenerator

import httpx
import pytest
import pytest_asyncio

from wildebeest.config import Settings, override_settings
from wildebeest.identity import Actor, Identity, StaticTokenIdentity
from wildebeest.main import app, init_app_state

DOMAIN = "cloudflare.com"
ADMIN_TOKEN = "admin-secret"


@pytest.fixture(autouse=True)
def _test_settings(tmp_path):
    """Override settings so tests use an isolated DB."""
    settings = Settings(
        state_dir=str(tmp_path),
        domain=DOMAIN,
        admin_token=ADMIN_TOKEN,
    )
    override_settings(settings)
    yield settings
    override_settings(None)


@pytest.fixture
def services(_test_settings):
    """Fresh storage and services wired onto app.state."""
    app.state.identity_lookup = StaticTokenIdentity()
    db = init_app_state(app, _test_settings)
    yield app.state
    db.close()


@pytest.fixture
def db(services):
    return services.db


@pytest.fixture
def config_store(services):
    return services.config_store


@pytest.fixture
def registry(services):
    return services.client_registry


@pytest.fixture
def manager(services):
    return services.subscription_manager


@pytest.fixture
def registered_client(registry):
    """A registered client application."""
    app_ = registry.register_client(
        {
            "redirect_uris": "mastodon://joinmastodon.org/oauth",
            "website": "https://example.com",
            "client_name": "test client",
            "scopes": "read write follow push",
        }
    )
    return registry.get_client(app_.client_id)


@pytest.fixture
def actor():
    return Actor(id=f"https://{DOMAIN}/ap/users/sven")


@pytest.fixture
def auth_headers(services, actor, registered_client):
    """Bearer header resolving to (actor, registered_client)."""
    services.identity_lookup.grant("user-token", Identity(actor=actor, client_id=registered_client.id))
    return {"Authorization": "Bearer user-token"}


@pytest_asyncio.fixture
async def client(services) -> AsyncGenerator[httpx.AsyncClient]:
    """Async test client over the app with fresh services."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url=f"https://{DOMAIN}",
    ) as ac:
        yield ac


def assert_cors(resp: httpx.Response) -> None:
    assert resp.headers["access-control-allow-origin"] == "*"
    assert "authorization" in resp.headers["access-control-allow-headers"]


def assert_json(resp: httpx.Response) -> None:
    assert resp.headers["content-type"].startswith("application/json")


def assert_cache(resp: httpx.Response, max_age: int) -> None:
    assert f"max-age={max_age}" in resp.headers["cache-control"]
