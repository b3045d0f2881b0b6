from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from tradelab.contexts.backtest.adapters.outbound.http import HttpxBacktestExecutionGateway
from tradelab.contexts.backtest.domain.entities import BacktestRequest
from tradelab.contexts.backtest.domain.errors import BacktestTransportError
from tradelab.contexts.backtest.domain.value_objects import MeanReversionParameters
from tradelab.shared_kernel.primitives import DateRange, Symbol


def _request() -> BacktestRequest:
    return BacktestRequest(
        strategy="meanReversion",
        symbols=(Symbol("AAPL"), Symbol("ZZZZ")),
        window=DateRange.parse(start="2024-01-01", end="2024-06-30"),
        initial_capital=10000,
        shares_per_trade=100,
        parameters=MeanReversionParameters(window=20, threshold=0.05),
    )


def _gateway(handler: Any) -> HttpxBacktestExecutionGateway:
    return HttpxBacktestExecutionGateway(
        api_base_url="http://api.local/api/",
        transport=httpx.MockTransport(handler),
    )


def test_gateway_posts_request_body_and_parses_summary() -> None:
    """
    Verify gateway posts the request payload and maps the success envelope.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Per-symbol failures are reported inside `data.results`.
    Raises:
        AssertionError: If request or parsed summary differs.
    Side Effects:
        None.
    """
    captured: dict[str, Any] = {}
    data = {
        "strategy": "meanReversion",
        "symbols": ["AAPL", "ZZZZ"],
        "startDate": "2024-01-01",
        "endDate": "2024-06-30",
        "config": {"window": 20, "threshold": 0.05},
        "results": [
            {
                "symbol": "AAPL",
                "finalPortfolioValue": 10512.5,
                "totalReturn": 5.125,
                "winRate": 60,
                "maxDrawdown": 3.2,
                "totalTrades": 5,
                "trades": [{"type": "BUY", "price": 180.1}],
            },
            {"symbol": "ZZZZ", "error": "No data available"},
        ],
    }

    def handler(request: httpx.Request) -> httpx.Response:
        """
        Capture outbound request and return deterministic success envelope.

        Args:
            request: Outbound backtest request.
        Returns:
            httpx.Response: Successful execution envelope.
        Assumptions:
            Handler runs synchronously inside `httpx.MockTransport`.
        Raises:
            None.
        Side Effects:
            Mutates `captured` for test assertions.
        """
        captured["method"] = request.method
        captured["path"] = request.url.path
        captured["body"] = json.loads(request.content)
        return httpx.Response(status_code=200, json={"success": True, "data": data})

    response = _gateway(handler).run_backtest(request=_request())

    assert captured["method"] == "POST"
    assert captured["path"] == "/api/backtest"
    assert captured["body"] == _request().to_payload()
    assert response.success is True
    assert response.data is not None
    assert response.data.start_date == "2024-01-01"
    assert response.data.results[0].total_return == 5.125
    assert response.data.results[0].total_trades == 5
    assert response.data.results[1].final_portfolio_value == 0.0
    assert response.data.failed_symbols() == ("ZZZZ",)
    assert response.data.total_return == 0.0
    assert dict(response.data.raw_payload) == data


def test_gateway_returns_service_failure_for_unsuccessful_envelope() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            status_code=400,
            json={"success": False, "error": "Invalid strategy"},
        )

    response = _gateway(handler).run_backtest(request=_request())

    assert response.success is False
    assert response.error == "Invalid strategy"
    assert response.data is None


def test_gateway_uses_generic_message_for_blank_service_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=200, json={"success": False})

    response = _gateway(handler).run_backtest(request=_request())

    assert response.error == "Failed to run backtest"


@pytest.mark.parametrize(
    ("response", "message"),
    [
        (httpx.Response(status_code=502, content=b"<html>bad gateway</html>"), "status: 502"),
        (httpx.Response(status_code=500, json={"detail": "boom"}), "status: 500"),
        (httpx.Response(status_code=200, content=b"not json"), "not valid JSON"),
        (httpx.Response(status_code=200, json={"success": True}), "invalid shape"),
        (httpx.Response(status_code=200, json=["unexpected"]), "JSON object"),
        (
            httpx.Response(
                status_code=200,
                json={"success": True, "data": {"results": [{"totalReturn": 1}]}},
            ),
            "invalid shape",
        ),
    ],
)
def test_gateway_raises_transport_error_for_unusable_responses(
    response: httpx.Response,
    message: str,
) -> None:
    """
    Verify bare non-2xx answers and malformed bodies surface as transport failures.

    Args:
        response: Canned execution service response.
        message: Expected fragment of the transport error message.
    Returns:
        None.
    Assumptions:
        Service failures require a `{success: false}` body.
    Raises:
        AssertionError: If malformed response is accepted.
    Side Effects:
        None.
    """
    with pytest.raises(BacktestTransportError, match=message):
        _gateway(lambda request: response).run_backtest(request=_request())


def test_gateway_wraps_network_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(BacktestTransportError, match="connection refused") as error_info:
        _gateway(handler).run_backtest(request=_request())

    assert error_info.value.status_code is None


def test_gateway_keeps_status_code_on_unexpected_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=503, text="")

    with pytest.raises(BacktestTransportError) as error_info:
        _gateway(handler).run_backtest(request=_request())

    assert error_info.value.status_code == 503


def test_gateway_rejects_invalid_settings() -> None:
    with pytest.raises(ValueError):
        HttpxBacktestExecutionGateway(api_base_url="")
    with pytest.raises(ValueError):
        HttpxBacktestExecutionGateway(api_base_url="http://api.local", timeout_seconds=-1)
