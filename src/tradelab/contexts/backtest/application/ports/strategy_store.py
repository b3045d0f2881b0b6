from __future__ import annotations

from typing import Protocol

from tradelab.contexts.backtest.application.dto import (
    SaveStrategyFromBacktestCommand,
    UserStrategyDraft,
    UserStrategyPatch,
)
from tradelab.contexts.backtest.domain.entities import (
    CustomStrategyRecord,
    StrategyRecordId,
    UserStrategyRecord,
)


class StrategyStore(Protocol):
    """
    StrategyStore — port of the external user/custom strategy store.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/adapters/outbound/http/httpx_strategy_store.py
      - src/tradelab/contexts/backtest/adapters/outbound/persistence/in_memory/strategy_store.py
      - src/tradelab/contexts/backtest/application/services/unified_strategy_adapter.py
    """

    def list_user_strategies(
        self,
        *,
        user_id: StrategyRecordId,
        include_inactive: bool = False,
    ) -> tuple[UserStrategyRecord, ...]:
        """
        List strategies saved by one user.

        Args:
            user_id: Owner identifier.
            include_inactive: Whether deactivated strategies are included.
        Returns:
            tuple[UserStrategyRecord, ...]: Records in store order.
        Assumptions:
            Store order is preserved.
        Raises:
            BacktestTransportError: If store is unreachable.
            BacktestServiceError: If store answers with an unsuccessful envelope.
        Side Effects:
            Reads from the store.
        """
        ...

    def list_public_strategies(self) -> tuple[UserStrategyRecord, ...]:
        """
        List community strategies published by any user.

        Args:
            None.
        Returns:
            tuple[UserStrategyRecord, ...]: Public records in store order.
        Assumptions:
            Public records share the user strategy shape.
        Raises:
            BacktestTransportError: If store is unreachable.
            BacktestServiceError: If store answers with an unsuccessful envelope.
        Side Effects:
            Reads from the store.
        """
        ...

    def list_custom_strategies(
        self,
        *,
        include_inactive: bool = False,
    ) -> tuple[CustomStrategyRecord, ...]:
        """
        List condition-based custom strategies of the current user.

        Args:
            include_inactive: Whether deactivated strategies are included.
        Returns:
            tuple[CustomStrategyRecord, ...]: Records in store order.
        Assumptions:
            Condition trees are returned verbatim.
        Raises:
            BacktestTransportError: If store is unreachable.
            BacktestServiceError: If store answers with an unsuccessful envelope.
        Side Effects:
            Reads from the store.
        """
        ...

    def create_user_strategy(
        self,
        *,
        user_id: StrategyRecordId,
        draft: UserStrategyDraft,
    ) -> UserStrategyRecord:
        """
        Create one user strategy.

        Args:
            user_id: Owner identifier.
            draft: New strategy payload.
        Returns:
            UserStrategyRecord: Stored record with store-assigned id.
        Assumptions:
            `draft.strategy_type` uses the storage spelling.
        Raises:
            BacktestTransportError: If store is unreachable.
            BacktestServiceError: If store rejects the draft.
        Side Effects:
            Writes to the store.
        """
        ...

    def update_user_strategy(
        self,
        *,
        strategy_id: StrategyRecordId,
        patch: UserStrategyPatch,
    ) -> UserStrategyRecord:
        """
        Apply a partial update to one stored user strategy.

        Args:
            strategy_id: Stored strategy identifier.
            patch: Fields to change.
        Returns:
            UserStrategyRecord: Updated record.
        Assumptions:
            `None` patch fields are left unchanged.
        Raises:
            BacktestTransportError: If store is unreachable.
            BacktestServiceError: If strategy is missing or update is rejected.
        Side Effects:
            Writes to the store.
        """
        ...

    def save_from_backtest(
        self,
        *,
        user_id: StrategyRecordId,
        command: SaveStrategyFromBacktestCommand,
    ) -> UserStrategyRecord:
        """
        Persist a strategy together with the results of the backtest that produced it.

        Args:
            user_id: Owner identifier.
            command: Save payload.
        Returns:
            UserStrategyRecord: Stored record.
        Assumptions:
            `command.config` is the submitted request payload.
        Raises:
            BacktestTransportError: If store is unreachable.
            BacktestServiceError: If store rejects the save (for example bot limit).
        Side Effects:
            Writes to the store.
        """
        ...
