from __future__ import annotations

import httpx
import pytest

from portfolio_api.client.api_client import (
    ApiClientError,
    ApiClientSettings,
    PortfolioApiClient,
    format_error,
)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class Recorder:
    def __init__(self, responses: list[httpx.Response] | None = None):
        self._responses = list(responses or [])
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._responses:
            return self._responses.pop(0)
        return httpx.Response(200, json={"success": True, "path": request.url.path})


@pytest.fixture
def sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    recorded: list[float] = []
    monkeypatch.setattr(
        "portfolio_api.client.api_client.time.sleep",
        lambda seconds: recorded.append(seconds),
    )
    return recorded


def _client(recorder: Recorder, clock: FakeClock | None = None) -> PortfolioApiClient:
    return PortfolioApiClient(
        ApiClientSettings(base_url="http://api.test"),
        transport=httpx.MockTransport(recorder),
        clock=clock or FakeClock(),
    )


def test_request_retries_with_linear_backoff(sleeps):
    recorder = Recorder(
        [
            httpx.Response(500),
            httpx.Response(503),
            httpx.Response(200, json={"ok": True}),
        ]
    )

    assert _client(recorder).request("GET", "/api/health") == {"ok": True}
    assert len(recorder.requests) == 3
    assert sleeps == [1.0, 2.0]


def test_request_raises_last_error_after_retries(sleeps):
    recorder = Recorder([httpx.Response(429)] * 3)

    with pytest.raises(ApiClientError) as exc_info:
        _client(recorder).request("GET", "/api/prices/btc")

    assert exc_info.value.status_code == 429
    assert format_error(exc_info.value) == "Rate limit exceeded"
    assert len(recorder.requests) == 3
    assert sleeps == [1.0, 2.0]


def test_unparseable_body_is_retried_then_wrapped(sleeps):
    recorder = Recorder(
        [
            httpx.Response(200, text="<html>gateway</html>"),
            httpx.Response(200, json={"ok": True}),
        ]
    )

    assert _client(recorder).request("GET", "/api/health") == {"ok": True}
    assert sleeps == [1.0]

    broken = Recorder([httpx.Response(200, text="not json")] * 3)
    with pytest.raises(ApiClientError, match="Invalid JSON response"):
        _client(broken).request("GET", "/api/health")
    assert len(broken.requests) == 3


def test_wallet_data_is_cached_until_ttl_expires(sleeps):
    recorder = Recorder()
    clock = FakeClock()
    client = _client(recorder, clock)

    first = client.get_wallet_data("ethereum", "0xabc")
    second = client.get_wallet_data("ethereum", "0xabc")

    assert first == second
    assert len(recorder.requests) == 1
    assert recorder.requests[0].url.path == "/api/wallets/ethereum/0xabc"

    clock.now = 31.0
    client.get_wallet_data("ethereum", "0xabc")

    assert len(recorder.requests) == 2
    assert sleeps == []


def test_rates_outlive_price_ttl():
    recorder = Recorder()
    clock = FakeClock()
    client = _client(recorder, clock)

    client.get_currency_rates()
    client.get_realtime_prices()
    clock.now = 150.0
    client.get_currency_rates()
    client.get_realtime_prices()

    paths = [request.url.path for request in recorder.requests]
    assert paths == ["/api/prices/rates", "/api/prices/realtime", "/api/prices/realtime"]
    assert recorder.requests[1].url.params["coins"] == "bitcoin,ethereum,solana"


def test_convert_sends_from_and_to():
    recorder = Recorder()

    _client(recorder).convert(2, "eth", "sol")

    params = recorder.requests[0].url.params
    assert params["value"] == "2"
    assert params["from"] == "eth"
    assert params["to"] == "sol"


def test_clear_cache_by_prefix_and_stats():
    recorder = Recorder()
    clock = FakeClock()
    client = _client(recorder, clock)

    client.get_wallet_data("ethereum", "0xabc")
    client.get_wallet_data("solana", "So1")
    client.get_prices(["btc", "eth"])

    assert client.cache_stats() == {"total": 3, "fresh": 3, "stale": 0}
    assert client.clear_cache("wallet_ethereum") == 1
    assert client.cache_stats()["total"] == 2

    clock.now = 60.0
    assert client.cache_stats() == {"total": 2, "fresh": 1, "stale": 1}
    assert client.prune_cache() == 1
    assert client.clear_cache() == 1
    assert client.cache_stats()["total"] == 0


def test_post_endpoints_send_json_body():
    recorder = Recorder()
    client = _client(recorder)

    client.add_wallet("ethereum", "0xabc", "Main")
    client.get_goals_progress([{"tokens": []}], {"eth": 1.0})

    assert recorder.requests[0].method == "POST"
    assert recorder.requests[0].url.path == "/api/wallets/add"
    assert recorder.requests[1].url.path == "/api/portfolio/goals/progress"


def test_format_error_messages():
    assert format_error(httpx.ReadTimeout("slow")) == "Request timed out"
    assert format_error(httpx.ConnectError("refused")) == "Network error"
    assert format_error(ApiClientError("HTTP 500", status_code=500)) == "Server error"
    assert format_error(ApiClientError("HTTP 404", status_code=404)) == "HTTP 404"
    assert format_error(ValueError()) == "Unknown error"
