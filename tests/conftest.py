import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer


async def ok(request):
    return web.Response(text="hello world")


async def missing(request):
    return web.Response(status=404, text="not here")


async def created(request):
    return web.Response(status=201, text="made it")


async def binary(request):
    return web.Response(body=b"\xff\xfeab")


async def echo_host(request):
    return web.Response(text=request.headers.get("Host", ""))


async def echo_method(request):
    return web.Response(text=request.method)


@pytest_asyncio.fixture
async def server():
    app = web.Application()
    app.router.add_get("/ok", ok)
    app.router.add_get("/missing", missing)
    app.router.add_get("/created", created)
    app.router.add_get("/host", echo_host)
    app.router.add_get("/binary", binary)
    app.router.add_route("*", "/method", echo_method)

    srv = TestServer(app)
    await srv.start_server()
    yield srv
    await srv.close()
