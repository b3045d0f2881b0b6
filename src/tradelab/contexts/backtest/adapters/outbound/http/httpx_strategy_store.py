from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence, Union

import httpx
from pydantic import ValidationError

from tradelab.contexts.backtest.application.dto import (
    SaveStrategyFromBacktestCommand,
    UserStrategyDraft,
    UserStrategyPatch,
)
from tradelab.contexts.backtest.application.ports import StrategyStore
from tradelab.contexts.backtest.domain.entities import (
    CustomStrategyRecord,
    StrategyRecordId,
    UserStrategyRecord,
)
from tradelab.contexts.backtest.domain.errors import (
    BacktestServiceError,
    BacktestTransportError,
)

from .wire_models import CustomStrategyRecordPayload, StoreErrorPayload, UserStrategyPayload

log = logging.getLogger(__name__)

_RecordPayloadType = Union[type[UserStrategyPayload], type[CustomStrategyRecordPayload]]

_DEFAULT_PATHS: Mapping[str, str] = {
    "user_strategies": "/strategies/users/{user_id}/strategies",
    "public_strategies": "/strategies/strategies/public",
    "custom_strategies": "/custom-strategies",
    "save_from_backtest": "/strategies/users/{user_id}/strategies/from-backtest",
    "update_user_strategy": "/strategies/strategies/{strategy_id}",
}


class HttpxStrategyStore(StrategyStore):
    """
    HttpxStrategyStore — reads and writes user/custom strategies through the strategy
    store HTTP API.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/application/ports/strategy_store.py
      - src/tradelab/contexts/backtest/adapters/outbound/http/wire_models.py
      - apps/cli/wiring/modules/backtest.py
    """

    def __init__(
        self,
        *,
        api_base_url: str,
        timeout_seconds: float = 10.0,
        paths: Mapping[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize store adapter with immutable HTTP settings and optional mock transport.

        Args:
            api_base_url: Absolute base URL of the strategy store.
            timeout_seconds: HTTP timeout per call.
            paths: Optional endpoint path overrides keyed like `backtest_client.api.paths`.
            transport: Optional httpx transport override used in tests.
        Returns:
            None.
        Assumptions:
            Path templates use `{user_id}` and `{strategy_id}` placeholders.
        Raises:
            ValueError: If URL is blank, timeout is non-positive or a path key is unknown.
        Side Effects:
            None.
        """
        normalized_api_base_url = api_base_url.strip().rstrip("/")
        if not normalized_api_base_url:
            raise ValueError("HttpxStrategyStore requires non-empty api_base_url")
        if timeout_seconds <= 0:
            raise ValueError("HttpxStrategyStore requires positive timeout_seconds")
        resolved_paths = dict(_DEFAULT_PATHS)
        for key, value in (paths or {}).items():
            if key not in resolved_paths:
                raise ValueError(f"HttpxStrategyStore got unknown path key: {key!r}")
            resolved_paths[key] = value

        self._api_base_url = normalized_api_base_url
        self._timeout_seconds = timeout_seconds
        self._paths = resolved_paths
        self._transport = transport

    def list_user_strategies(
        self,
        *,
        user_id: StrategyRecordId,
        include_inactive: bool = False,
    ) -> tuple[UserStrategyRecord, ...]:
        body = self._request(
            "GET",
            self._path("user_strategies", user_id=user_id),
            params={"includeInactive": _bool_query(include_inactive)},
        )
        return _parse_records(_list_items(body), UserStrategyPayload)

    def list_public_strategies(self) -> tuple[UserStrategyRecord, ...]:
        body = self._request("GET", self._path("public_strategies"))
        return _parse_records(_list_items(body), UserStrategyPayload)

    def list_custom_strategies(
        self,
        *,
        include_inactive: bool = False,
    ) -> tuple[CustomStrategyRecord, ...]:
        body = self._request(
            "GET",
            self._path("custom_strategies"),
            params={"includeInactive": _bool_query(include_inactive)},
        )
        return _parse_records(_list_items(body), CustomStrategyRecordPayload)

    def create_user_strategy(
        self,
        *,
        user_id: StrategyRecordId,
        draft: UserStrategyDraft,
    ) -> UserStrategyRecord:
        body = self._request(
            "POST",
            self._path("user_strategies", user_id=user_id),
            json=draft.to_payload(),
        )
        return _parse_single(body)

    def update_user_strategy(
        self,
        *,
        strategy_id: StrategyRecordId,
        patch: UserStrategyPatch,
    ) -> UserStrategyRecord:
        body = self._request(
            "PUT",
            self._path("update_user_strategy", strategy_id=strategy_id),
            json=patch.to_payload(),
        )
        return _parse_single(body)

    def save_from_backtest(
        self,
        *,
        user_id: StrategyRecordId,
        command: SaveStrategyFromBacktestCommand,
    ) -> UserStrategyRecord:
        body = self._request(
            "POST",
            self._path("save_from_backtest", user_id=user_id),
            json=command.to_payload(),
        )
        return _parse_single(body)

    def _path(self, key: str, **placeholders: StrategyRecordId) -> str:
        return self._paths[key].format(**{k: str(v) for k, v in placeholders.items()})

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json: Mapping[str, Any] | None = None,
    ) -> Any:
        """
        Perform one store call and return the decoded JSON body of a 2xx answer.

        Args:
            method: HTTP method.
            path: Resolved endpoint path.
            params: Optional query parameters.
            json: Optional JSON body.
        Returns:
            Any: Decoded JSON body.
        Assumptions:
            Store errors carry `{message, error?}` or `{success: false, error}` bodies.
        Raises:
            BacktestTransportError: On network errors, non-JSON bodies or bare non-2xx.
            BacktestServiceError: On non-2xx with a readable error body.
        Side Effects:
            Performs one outbound HTTP request.
        """
        url = f"{self._api_base_url}{path}"
        try:
            with httpx.Client(
                timeout=self._timeout_seconds,
                transport=self._transport,
            ) as http_client:
                response = http_client.request(method, url, params=params, json=json)
        except httpx.HTTPError as error:
            log.warning("strategy store request failed method=%s path=%s", method, path)
            raise BacktestTransportError(f"Strategy store request failed: {error}") from error

        try:
            body = response.json()
        except ValueError:
            raise BacktestTransportError(
                f"Strategy store returned non-JSON body (status {response.status_code})",
                status_code=response.status_code,
            ) from None

        if not response.is_success:
            raise _store_failure(body=body, status_code=response.status_code)
        if isinstance(body, dict) and body.get("success") is False:
            raise _store_failure(body=body, status_code=response.status_code)
        return body


def _bool_query(value: bool) -> str:
    return "true" if value else "false"


def _store_failure(*, body: Any, status_code: int) -> Exception:
    if not isinstance(body, dict):
        return BacktestTransportError(
            f"Unexpected strategy store status: {status_code}",
            status_code=status_code,
        )
    error_payload = StoreErrorPayload.model_validate(body)
    message = error_payload.message or error_payload.error
    if not message:
        return BacktestTransportError(
            f"Unexpected strategy store status: {status_code}",
            status_code=status_code,
        )
    # `{message, error: "BOT_LIMIT_EXCEEDED"}` carries a machine code next to the text
    error_code = error_payload.error if error_payload.message else None
    log.info("strategy store rejected request status=%d code=%s", status_code, error_code)
    return BacktestServiceError(message, error_code=error_code)


def _list_items(body: Any) -> Sequence[Any]:
    """
    Extract record list from `{strategies: [...]}`, `{data: [...]}` or bare list bodies.

    Args:
        body: Decoded JSON body.
    Returns:
        Sequence[Any]: Raw record items.
    Assumptions:
        User and public endpoints use `strategies`; custom endpoint uses `data`.
    Raises:
        BacktestTransportError: If no record list can be found.
    Side Effects:
        None.
    """
    if isinstance(body, list):
        return body
    if isinstance(body, dict):
        for key in ("strategies", "data"):
            items = body.get(key)
            if isinstance(items, list):
                return items
    raise BacktestTransportError("Strategy store response has no strategy list")


def _parse_records(items: Sequence[Any], model: _RecordPayloadType) -> tuple[Any, ...]:
    try:
        return tuple(model.model_validate(item).to_domain() for item in items)
    except (ValidationError, ValueError) as error:
        raise BacktestTransportError(
            f"Strategy store record has invalid shape: {error}"
        ) from error


def _parse_single(body: Any) -> UserStrategyRecord:
    if isinstance(body, dict):
        record = body.get("strategy", body.get("data"))
        if isinstance(record, dict):
            return _parse_records([record], UserStrategyPayload)[0]
    raise BacktestTransportError("Strategy store response has no strategy record")
