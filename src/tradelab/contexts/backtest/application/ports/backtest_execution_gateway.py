from __future__ import annotations

from typing import Protocol

from tradelab.contexts.backtest.domain.entities import BacktestRequest, BacktestResponse


class BacktestExecutionGateway(Protocol):
    """
    BacktestExecutionGateway — port of the external backtest execution service.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/adapters/outbound/http/
        httpx_backtest_execution_gateway.py
      - src/tradelab/contexts/backtest/application/services/session_state_coordinator.py
    """

    def run_backtest(self, *, request: BacktestRequest) -> BacktestResponse:
        """
        Submit one backtest request and wait for its outcome.

        Args:
            request: Validated backtest request.
        Returns:
            BacktestResponse: Successful summary or `{success: false, error}` outcome.
        Assumptions:
            Exactly one request is in flight per session; no automatic retry.
        Raises:
            BacktestTransportError: If the request did not complete or the response
                cannot be interpreted.
        Side Effects:
            Performs one outbound call to the execution service.
        """
        ...
