import asyncio

import pytest
from aiohttp import test_utils

import settings
from cloudflare_oauth import OAuthCallbackServer, OAuthToken, create_auth_session
from errors import AuthError


class RecordingExchange:
    def __init__(self, error: Exception = None):
        self.calls = []
        self.error = error

    async def __call__(self, code: str, verifier: str) -> OAuthToken:
        self.calls.append((code, verifier))
        if self.error:
            raise self.error
        return OAuthToken(access_token=f"token-for-{code}")


def callback_client(server: OAuthCallbackServer) -> test_utils.TestClient:
    return test_utils.TestClient(test_utils.TestServer(server.app))


@pytest.mark.asyncio
async def test_valid_callback_exchanges_and_delivers_token():
    exchange = RecordingExchange()
    server = OAuthCallbackServer(exchange=exchange)
    session = create_auth_session()

    async with callback_client(server) as client:
        future = server.begin_attempt(session)
        resp = await client.get(settings.OAUTH_CALLBACK_PATH, params={"state": session.state, "code": "abc"})

        assert resp.status == 200
        assert resp.content_type == "text/html"
        assert "successful" in await resp.text()

    assert exchange.calls == [("abc", session.code_verifier)]
    assert future.done()
    assert future.result().access_token == "token-for-abc"


@pytest.mark.asyncio
async def test_wrong_state_is_rejected_without_exchange():
    exchange = RecordingExchange()
    server = OAuthCallbackServer(exchange=exchange)
    session = create_auth_session()

    async with callback_client(server) as client:
        future = server.begin_attempt(session)
        resp = await client.get(settings.OAUTH_CALLBACK_PATH, params={"state": "wrong", "code": "abc"})

        assert resp.status == 400
        assert exchange.calls == []
        # Still awaitable: the legitimate redirect can arrive afterwards
        assert not future.done()
        assert server.attempt.last_rejection == "state_mismatch"


@pytest.mark.asyncio
async def test_state_comparison_is_exact():
    exchange = RecordingExchange()
    server = OAuthCallbackServer(exchange=exchange)
    session = create_auth_session()

    async with callback_client(server) as client:
        server.begin_attempt(session)
        for bad in (session.state.upper() if not session.state.isupper() else session.state.lower(),
                    session.state + " ", session.state[:-1]):
            resp = await client.get(settings.OAUTH_CALLBACK_PATH, params={"state": bad, "code": "abc"})
            assert resp.status == 400
        resp = await client.get(settings.OAUTH_CALLBACK_PATH, params={"code": "abc"})
        assert resp.status == 400

    assert exchange.calls == []


@pytest.mark.asyncio
async def test_missing_code_is_rejected():
    exchange = RecordingExchange()
    server = OAuthCallbackServer(exchange=exchange)
    session = create_auth_session()

    async with callback_client(server) as client:
        future = server.begin_attempt(session)
        resp = await client.get(settings.OAUTH_CALLBACK_PATH, params={"state": session.state})

        assert resp.status == 400
        assert not future.done()
        assert exchange.calls == []


@pytest.mark.asyncio
async def test_callback_without_attempt_is_rejected():
    exchange = RecordingExchange()
    server = OAuthCallbackServer(exchange=exchange)

    async with callback_client(server) as client:
        resp = await client.get(settings.OAUTH_CALLBACK_PATH, params={"state": "x", "code": "abc"})
        assert resp.status == 400
    assert exchange.calls == []


@pytest.mark.asyncio
async def test_exchange_failure_fails_the_attempt():
    exchange = RecordingExchange(error=AuthError("rejected", kind="exchange"))
    server = OAuthCallbackServer(exchange=exchange)
    session = create_auth_session()

    async with callback_client(server) as client:
        future = server.begin_attempt(session)
        resp = await client.get(settings.OAUTH_CALLBACK_PATH, params={"state": session.state, "code": "abc"})

        assert resp.status == 502
        with pytest.raises(AuthError) as excinfo:
            future.result()
        assert excinfo.value.kind == "exchange"


@pytest.mark.asyncio
async def test_denied_consent_fails_the_attempt():
    exchange = RecordingExchange()
    server = OAuthCallbackServer(exchange=exchange)
    session = create_auth_session()

    async with callback_client(server) as client:
        future = server.begin_attempt(session)
        resp = await client.get(
            settings.OAUTH_CALLBACK_PATH,
            params={"state": session.state, "error": "access_denied"},
        )

        assert resp.status == 400
        with pytest.raises(AuthError) as excinfo:
            future.result()
        assert excinfo.value.kind == "denied"
    assert exchange.calls == []


@pytest.mark.asyncio
async def test_token_is_delivered_at_most_once():
    exchange = RecordingExchange()
    server = OAuthCallbackServer(exchange=exchange)
    session = create_auth_session()

    async with callback_client(server) as client:
        future = server.begin_attempt(session)
        first = await client.get(settings.OAUTH_CALLBACK_PATH, params={"state": session.state, "code": "one"})
        second = await client.get(settings.OAUTH_CALLBACK_PATH, params={"state": session.state, "code": "two"})

        assert first.status == 200
        assert second.status == 400
        assert future.result().access_token == "token-for-one"
    assert len(exchange.calls) == 1


@pytest.mark.asyncio
async def test_new_attempt_cancels_previous_one():
    server = OAuthCallbackServer(exchange=RecordingExchange())
    first = server.begin_attempt(create_auth_session())
    second = server.begin_attempt(create_auth_session())

    assert first.cancelled()
    assert not second.done()
    server.end_attempt()
    assert second.cancelled()


@pytest.mark.asyncio
async def test_start_and_bounded_stop_on_free_port():
    server = OAuthCallbackServer(exchange=RecordingExchange(), port=0)
    await server.start()
    server.begin_attempt(create_auth_session())

    await asyncio.wait_for(server.stop(timeout=1.0), timeout=3.0)

    assert server.runner is None
    assert server.attempt is None
    # Stopping twice is harmless
    await server.stop(timeout=1.0)


@pytest.mark.asyncio
async def test_unexpected_exchange_error_still_fails_the_attempt():
    exchange = RecordingExchange(error=AttributeError("'list' object has no attribute 'get'"))
    server = OAuthCallbackServer(exchange=exchange)
    session = create_auth_session()

    async with callback_client(server) as client:
        future = server.begin_attempt(session)
        resp = await client.get(settings.OAUTH_CALLBACK_PATH, params={"state": session.state, "code": "abc"})

        assert resp.status == 502
        with pytest.raises(AuthError) as excinfo:
            future.result()
        assert excinfo.value.kind == "exchange"
