from __future__ import annotations

import asyncio
import gzip

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer


CHUNK = b"x" * 8


async def slow_chunks(request: web.Request) -> web.StreamResponse:
    """Send 4 x 8 bytes without a Content-Length, pausing between chunks."""
    resp = web.StreamResponse(headers={"Content-Type": "text/html"})
    await resp.prepare(request)
    try:
        for _ in range(4):
            await resp.write(CHUNK)
            await asyncio.sleep(0.05)
        await resp.write_eof()
    except ConnectionResetError:
        pass
    return resp


async def ten_bytes(request: web.Request) -> web.Response:
    return web.Response(body=b"0123456789", content_type="text/html")


async def eleven_bytes(request: web.Request) -> web.Response:
    return web.Response(body=b"0123456789A", content_type="text/html")


async def html_page(request: web.Request) -> web.Response:
    return web.Response(
        text="<html><head><meta property='og:title' content='Hi'></head></html>",
        content_type="text/html",
        charset="utf-8",
    )


async def echo_header(request: web.Request) -> web.Response:
    return web.Response(text=request.headers.get("X-Probe", ""), content_type="text/html")


async def redirect(request: web.Request) -> web.Response:
    raise web.HTTPFound("/page")


async def missing(request: web.Request) -> web.Response:
    return web.Response(status=404, text="nope", content_type="text/html")


async def json_doc(request: web.Request) -> web.Response:
    return web.json_response({"ok": True})


async def empty_page(request: web.Request) -> web.Response:
    return web.Response(body=b"", content_type="text/html")


GZIP_PLAIN = b"<html>" + b"a" * 5000 + b"</html>"
GZIP_BODY = gzip.compress(GZIP_PLAIN)


async def gzipped(request: web.Request) -> web.Response:
    return web.Response(
        body=GZIP_BODY,
        headers={"Content-Type": "text/html", "Content-Encoding": "gzip"},
    )


@pytest.fixture
async def server():
    app = web.Application()
    app.add_routes(
        [
            web.get("/slow", slow_chunks),
            web.get("/ten", ten_bytes),
            web.get("/eleven", eleven_bytes),
            web.get("/page", html_page),
            web.get("/echo", echo_header),
            web.get("/redirect", redirect),
            web.get("/missing", missing),
            web.get("/json", json_doc),
            web.get("/empty", empty_page),
            web.get("/gzip", gzipped),
        ]
    )
    srv = TestServer(app)
    await srv.start_server()
    yield srv
    await srv.close()
