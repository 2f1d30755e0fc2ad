"""
Shared fixtures: an in-process HTTP site serving pages and assets.
"""

import asyncio
from typing import Dict, Tuple

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer


PNG_BYTES = b'\x89PNG\r\n\x1a\n' + bytes(range(256))


class StaticSite:
    """Routes of the test site, keyed by path."""

    def __init__(self):
        self.routes: Dict[str, Tuple[int, bytes, str, float]] = {}
        self.requests = []
        self.server = None

    def add(
        self,
        path: str,
        body,
        content_type: str = 'text/html',
        status: int = 200,
        delay: float = 0.0
    ) -> str:
        if isinstance(body, str):
            body = body.encode('utf-8')
        self.routes[path] = (status, body, content_type, delay)
        return self.url(path)

    def url(self, path: str) -> str:
        return str(self.server.make_url(path))

    async def handle(self, request: web.Request) -> web.Response:
        self.requests.append(request.path_qs)

        entry = self.routes.get(request.path_qs) or self.routes.get(request.path)
        if entry is None:
            return web.Response(status=404, text='not found')

        status, body, content_type, delay = entry
        if delay:
            await asyncio.sleep(delay)

        return web.Response(status=status, body=body, headers={'Content-Type': content_type})


@pytest.fixture
async def site():
    static_site = StaticSite()

    app = web.Application()
    app.router.add_route('GET', '/{tail:.*}', static_site.handle)

    server = TestServer(app)
    await server.start_server()
    static_site.server = server

    yield static_site

    await server.close()
