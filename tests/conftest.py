# File: tests/conftest.py
from __future__ import annotations

from collections import Counter
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Dict, List, Union

import pytest
import pytest_asyncio
from aiohttp import web

from captcha_scout.config import ScoutConfig
from captcha_scout.crawler.models import PageData

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]
Route = Union[str, Handler]


class FakeSite:
    """
    Catch-all aiohttp application serving a dict of ``path -> HTML | handler``.

    Unknown paths answer 404.  ``hits`` counts requests per path.
    """

    def __init__(self, routes: Dict[str, Route]) -> None:
        self.routes = routes
        self.hits: Counter[str] = Counter()
        self.base_url = ""

    async def handle(self, request: web.Request) -> web.StreamResponse:
        self.hits[request.path] += 1
        route = self.routes.get(request.path)
        if route is None:
            return web.Response(status=404, text="not found")
        if isinstance(route, str):
            return web.Response(text=route, content_type="text/html")
        return await route(request)

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_route("GET", "/{tail:.*}", self.handle)
        return app


@pytest_asyncio.fixture
async def serve_site(unused_tcp_port_factory) -> AsyncIterator[Callable[[Dict[str, Route]], Awaitable[FakeSite]]]:
    """Start FakeSite instances on free ports; all are cleaned up after the test."""
    runners: List[web.AppRunner] = []

    async def _serve(routes: Dict[str, Route]) -> FakeSite:
        site = FakeSite(routes)
        runner = web.AppRunner(site.app())
        await runner.setup()
        port = unused_tcp_port_factory()
        await web.TCPSite(runner, "127.0.0.1", port).start()
        runners.append(runner)
        site.base_url = f"http://127.0.0.1:{port}"
        return site

    yield _serve
    for runner in runners:
        await runner.cleanup()


@pytest.fixture()
def basic_config() -> ScoutConfig:
    """Fast-failing config for crawler tests."""
    return ScoutConfig(timeout=2.0, script_timeout=1.0)


@pytest.fixture()
def mock_page_data() -> PageData:
    """
    Provide a simple PageData instance with widgets, scripts and links.
    """
    html = (
        "<html><head>"
        '<script src="/static/captcha-loader.js"></script>'
        "<script>var x = 1;</script>"
        "</head><body>"
        '<div class="h-captcha" data-sitekey="10000000-ffff-ffff-ffff-000000000001"></div>'
        '<a href="/login">Log in</a><a href="http://external.com/signup">X</a>'
        "</body></html>"
    )
    return PageData(url="http://example.com/", content=html)
