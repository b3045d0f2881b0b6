from __future__ import annotations

from typing import Protocol

from tradelab.contexts.backtest.domain.entities import BacktestRequest, BacktestResponse
from tradelab.platform.errors import TradelabError


class BacktestResultListener(Protocol):
    """
    BacktestResultListener — presentation collaborator notified about submission outcomes.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/application/services/session_state_coordinator.py
      - apps/cli/commands/run_backtest.py
    """

    def on_backtest_completed(
        self,
        *,
        request: BacktestRequest,
        response: BacktestResponse,
    ) -> None:
        """Called once per successful submission with the normalized response."""
        ...

    def on_backtest_failed(self, *, error: TradelabError) -> None:
        """Called once per failed submission, including local precondition failures."""
        ...
