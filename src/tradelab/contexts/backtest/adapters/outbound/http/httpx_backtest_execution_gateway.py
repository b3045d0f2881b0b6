from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from tradelab.contexts.backtest.application.ports import BacktestExecutionGateway
from tradelab.contexts.backtest.domain.entities import BacktestRequest, BacktestResponse
from tradelab.contexts.backtest.domain.errors import BacktestTransportError

from .wire_models import BacktestResponsePayload

log = logging.getLogger(__name__)

_RUN_BACKTEST_PATH = "/backtest"


class HttpxBacktestExecutionGateway(BacktestExecutionGateway):
    """
    HttpxBacktestExecutionGateway — submits backtest requests to the execution service
    through `httpx`.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/application/ports/backtest_execution_gateway.py
      - src/tradelab/contexts/backtest/adapters/outbound/http/wire_models.py
      - apps/cli/wiring/modules/backtest.py
    """

    def __init__(
        self,
        *,
        api_base_url: str,
        timeout_seconds: float = 10.0,
        path: str = _RUN_BACKTEST_PATH,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize gateway with immutable HTTP settings and optional mock transport.

        Args:
            api_base_url: Absolute base URL of the execution service.
            timeout_seconds: HTTP timeout for one backtest submission.
            path: Endpoint path of the run operation.
            transport: Optional httpx transport override used in tests.
        Returns:
            None.
        Assumptions:
            Endpoint accepts JSON body and answers `{success, data?, error?}`.
        Raises:
            ValueError: If URL is blank or timeout is non-positive.
        Side Effects:
            None.
        """
        normalized_api_base_url = api_base_url.strip().rstrip("/")
        if not normalized_api_base_url:
            raise ValueError("HttpxBacktestExecutionGateway requires non-empty api_base_url")
        if timeout_seconds <= 0:
            raise ValueError("HttpxBacktestExecutionGateway requires positive timeout_seconds")

        self._endpoint_url = f"{normalized_api_base_url}{path}"
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    def run_backtest(self, *, request: BacktestRequest) -> BacktestResponse:
        """
        Submit one backtest request and parse the outcome envelope.

        Args:
            request: Validated backtest request.
        Returns:
            BacktestResponse: Success with summary or service failure with verbatim message.
        Assumptions:
            Non-2xx responses carrying `{success: false, error}` are service failures.
        Raises:
            BacktestTransportError: On network errors, unusable bodies or bare non-2xx.
        Side Effects:
            Performs one outbound HTTP POST request.
        """
        payload = request.to_payload()
        try:
            with httpx.Client(
                timeout=self._timeout_seconds,
                transport=self._transport,
            ) as http_client:
                response = http_client.post(self._endpoint_url, json=payload)
        except httpx.HTTPError as error:
            log.warning("backtest request failed: %s", error)
            raise BacktestTransportError(f"Backtest request failed: {error}") from error

        body = _decode_json(response=response)
        if response.is_success:
            return _parse_envelope(body=body, status_code=response.status_code)

        if isinstance(body, dict) and body.get("success") is False:
            log.info("execution service rejected backtest status=%d", response.status_code)
            return _parse_envelope(body=body, status_code=response.status_code)
        raise BacktestTransportError(
            f"Unexpected backtest status: {response.status_code}",
            status_code=response.status_code,
        )


def _decode_json(*, response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        if not response.is_success:
            return None
        raise BacktestTransportError(
            "Backtest response is not valid JSON",
            status_code=response.status_code,
        ) from None


def _parse_envelope(*, body: Any, status_code: int) -> BacktestResponse:
    """
    Validate decoded JSON body into domain response.

    Args:
        body: Decoded JSON payload.
        status_code: HTTP status code for diagnostics.
    Returns:
        BacktestResponse: Parsed outcome.
    Assumptions:
        Unknown envelope keys are ignored.
    Raises:
        BacktestTransportError: If body does not match the envelope contract.
    Side Effects:
        None.
    """
    if not isinstance(body, dict):
        raise BacktestTransportError(
            "Backtest response must be a JSON object",
            status_code=status_code,
        )
    try:
        return BacktestResponsePayload.model_validate(body).to_domain()
    except (ValidationError, ValueError) as error:
        raise BacktestTransportError(
            f"Backtest response has invalid shape: {error}",
            status_code=status_code,
        ) from error
