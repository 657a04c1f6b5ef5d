import asyncio

from aiohttp import web
from aiohttp.test_utils import TestServer

from sources.remote import FetchConfig, RateLimiter, fetch_documents, is_remote


def make_app():
    calls = {"flaky": 0}

    async def ok(request):
        return web.json_response({"projectId": "ok", "episodes": []})

    async def flaky(request):
        calls["flaky"] += 1
        if calls["flaky"] == 1:
            return web.Response(status=500, text="boom")
        return web.json_response([{"episodeNumber": 1}])

    async def bad(request):
        return web.Response(status=500, text="always down")

    async def not_json(request):
        return web.Response(text="<html>nope</html>")

    async def auth(request):
        if request.headers.get("Authorization") != "Bearer secret":
            return web.Response(status=401, text="unauthorized")
        return web.json_response({"projectId": "private"})

    app = web.Application()
    app.router.add_get("/ok", ok)
    app.router.add_get("/flaky", flaky)
    app.router.add_get("/bad", bad)
    app.router.add_get("/notjson", not_json)
    app.router.add_get("/auth", auth)
    return app, calls


def run_against_server(paths, config):
    async def scenario():
        app, calls = make_app()
        server = TestServer(app)
        await server.start_server()
        try:
            urls = [str(server.make_url(p)) for p in paths]
            results, errors = await fetch_documents(urls, config, quiet=True)
        finally:
            await server.close()
        return urls, results, errors, calls

    return asyncio.run(scenario())


def test_fetch_success_and_failures():
    config = FetchConfig(retries=2, backoff_base=0)
    urls, results, errors, calls = run_against_server(["/ok", "/flaky", "/bad", "/notjson"], config)
    ok_url, flaky_url, bad_url, notjson_url = urls

    assert results[ok_url] == {"projectId": "ok", "episodes": []}
    assert results[flaky_url] == [{"episodeNumber": 1}]
    assert calls["flaky"] == 2
    assert errors[bad_url].startswith("HTTP 500")
    assert errors[notjson_url].startswith("Invalid JSON")
    assert set(results) == {ok_url, flaky_url}


def test_fetch_sends_bearer_token():
    _, results, errors, _ = run_against_server(["/auth"], FetchConfig(api_key="secret", retries=1))
    assert list(results.values()) == [{"projectId": "private"}]
    assert errors == {}

    _, results, errors, _ = run_against_server(["/auth"], FetchConfig(retries=1))
    assert results == {}
    assert list(errors.values())[0].startswith("HTTP 401")


def test_duplicate_urls_fetched_once():
    urls, results, errors, calls = run_against_server(["/flaky", "/flaky"], FetchConfig(retries=3, backoff_base=0))
    assert len(results) == 1
    assert calls["flaky"] == 2
    assert errors == {}


def test_rate_limiter_disabled():
    assert RateLimiter(None).enabled is False
    assert RateLimiter(0).enabled is False
    limiter = RateLimiter(4)
    assert limiter.enabled is True
    assert limiter.interval == 0.25


def test_is_remote():
    assert is_remote("https://host/a.json")
    assert is_remote("http://host/a.json")
    assert not is_remote("data/a.json")
