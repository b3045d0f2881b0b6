from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from tradelab.contexts.backtest.adapters.outbound.http import HttpxStrategyStore
from tradelab.contexts.backtest.application.dto import (
    SaveStrategyFromBacktestCommand,
    UserStrategyDraft,
    UserStrategyPatch,
)
from tradelab.contexts.backtest.domain.errors import BacktestServiceError, BacktestTransportError

_USER_ROW = {
    "id": 11,
    "user_id": 42,
    "name": "My MR",
    "strategy_type": "mean_reversion",
    "config": {"window": 15, "threshold": 0.04},
    "description": None,
    "is_active": True,
    "is_public": False,
    "created_at": "2024-05-01T10:00:00Z",
}


class _RecordingHandler:
    """
    MockTransport handler recording outbound requests and replying with canned responses.
    """

    def __init__(self, *responses: httpx.Response) -> None:
        self.requests: list[httpx.Request] = []
        self._responses = list(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responses.pop(0)


def _store(handler: Any, **kwargs: Any) -> HttpxStrategyStore:
    return HttpxStrategyStore(
        api_base_url="http://api.local/api",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def test_list_user_strategies_sends_include_inactive_query() -> None:
    """
    Verify user strategy list uses owner path, include-inactive flag and row mapping.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Endpoint answers `{strategies, count}`.
    Raises:
        AssertionError: If request or parsed records differ.
    Side Effects:
        None.
    """
    handler = _RecordingHandler(
        httpx.Response(status_code=200, json={"strategies": [_USER_ROW], "count": 1})
    )

    records = _store(handler).list_user_strategies(user_id=42, include_inactive=True)

    request = handler.requests[0]
    assert request.method == "GET"
    assert request.url.path == "/api/strategies/users/42/strategies"
    assert request.url.params["includeInactive"] == "true"
    assert len(records) == 1
    assert records[0].id == 11
    assert records[0].strategy_type == "mean_reversion"
    assert dict(records[0].config) == {"window": 15, "threshold": 0.04}


def test_list_public_and_custom_strategies_parse_both_list_shapes() -> None:
    handler = _RecordingHandler(
        httpx.Response(status_code=200, json={"strategies": [dict(_USER_ROW, is_public=True)]}),
        httpx.Response(
            status_code=200,
            json={
                "success": True,
                "data": [
                    {
                        "id": 3,
                        "name": "RSI bounce",
                        "buy_conditions": {"op": "AND", "rules": []},
                        "sell_conditions": {"op": "OR", "rules": []},
                        "is_active": False,
                    }
                ],
            },
        ),
    )
    store = _store(handler)

    public = store.list_public_strategies()
    custom = store.list_custom_strategies()

    assert public[0].is_public is True
    assert custom[0].name == "RSI bounce"
    assert custom[0].is_active is False
    assert handler.requests[0].url.path == "/api/strategies/strategies/public"
    assert handler.requests[1].url.path == "/api/custom-strategies"
    assert handler.requests[1].url.params["includeInactive"] == "false"


def test_save_from_backtest_posts_command_payload() -> None:
    """
    Verify save-from-backtest request path and body follow the store contract.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Endpoint answers `{message, strategy}` with status 201.
    Raises:
        AssertionError: If request or parsed record differs.
    Side Effects:
        None.
    """
    handler = _RecordingHandler(
        httpx.Response(
            status_code=201,
            json={
                "message": "Strategy saved successfully from backtest results",
                "strategy": dict(_USER_ROW, id=12, backtest_results={"results": []}),
            },
        )
    )
    command = SaveStrategyFromBacktestCommand(
        name="Mean Reversion - Profitable (2024-07-01)",
        strategy_type="mean_reversion",
        config={"strategy": "meanReversion", "window": 20},
        backtest_results={"results": []},
    )

    record = _store(handler).save_from_backtest(user_id="42", command=command)

    request = handler.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/api/strategies/users/42/strategies/from-backtest"
    assert json.loads(request.content) == command.to_payload()
    assert record.id == 12
    assert record.backtest_results == {"results": []}


def test_create_and_update_user_strategy_use_configured_paths() -> None:
    handler = _RecordingHandler(
        httpx.Response(status_code=201, json={"strategy": _USER_ROW}),
        httpx.Response(status_code=200, json={"strategy": dict(_USER_ROW, name="Renamed")}),
    )
    store = _store(handler, paths={"update_user_strategy": "/v2/strategies/{strategy_id}"})

    created = store.create_user_strategy(
        user_id=42,
        draft=UserStrategyDraft(name="My MR", strategy_type="mean_reversion"),
    )
    updated = store.update_user_strategy(strategy_id=11, patch=UserStrategyPatch(name="Renamed"))

    assert created.name == "My MR"
    assert updated.name == "Renamed"
    assert handler.requests[1].method == "PUT"
    assert handler.requests[1].url.path == "/api/v2/strategies/11"
    assert json.loads(handler.requests[1].content) == {"name": "Renamed"}


def test_bot_limit_rejection_maps_to_service_error_with_code() -> None:
    handler = _RecordingHandler(
        httpx.Response(
            status_code=403,
            json={
                "message": "You have reached the maximum number of active bots (1) for your "
                "plan. Please upgrade your plan to create more bots.",
                "error": "BOT_LIMIT_EXCEEDED",
            },
        )
    )
    command = SaveStrategyFromBacktestCommand(
        name="Second",
        strategy_type="momentum",
        config={},
        backtest_results={},
    )

    with pytest.raises(BacktestServiceError) as error_info:
        _store(handler).save_from_backtest(user_id=42, command=command)

    assert error_info.value.error_code == "BOT_LIMIT_EXCEEDED"
    assert "maximum number of active bots" in error_info.value.service_message


@pytest.mark.parametrize(
    ("response", "expected"),
    [
        (httpx.Response(status_code=200, json={"success": False, "error": "Denied"}), "Denied"),
        (httpx.Response(status_code=404, json={"error": "Strategy not found"}), None),
    ],
)
def test_store_error_bodies_map_to_service_errors(
    response: httpx.Response,
    expected: str | None,
) -> None:
    with pytest.raises(BacktestServiceError) as error_info:
        _store(lambda request: response).list_public_strategies()

    assert error_info.value.service_message == (expected or "Strategy not found")
    assert error_info.value.error_code is None


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(status_code=500, content=b"<html>"),
        httpx.Response(status_code=500, json={"detail": "boom"}),
        httpx.Response(status_code=200, json={"count": 0}),
        httpx.Response(status_code=200, json={"strategies": [{"id": 1}]}),
    ],
)
def test_store_unusable_responses_raise_transport_error(response: httpx.Response) -> None:
    """
    Verify unreadable store answers surface as transport failures.

    Args:
        response: Canned store response.
    Returns:
        None.
    Assumptions:
        Record rows without required fields are unusable.
    Raises:
        AssertionError: If malformed response is accepted.
    Side Effects:
        None.
    """
    with pytest.raises(BacktestTransportError):
        _store(lambda request: response).list_public_strategies()


def test_store_rejects_unknown_path_keys() -> None:
    with pytest.raises(ValueError, match="unknown path key"):
        HttpxStrategyStore(api_base_url="http://api.local", paths={"run_backtest": "/backtest"})
