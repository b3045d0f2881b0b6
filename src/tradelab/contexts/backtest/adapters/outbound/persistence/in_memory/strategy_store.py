from __future__ import annotations

import dataclasses
from datetime import datetime, timezone
from typing import Callable, Iterable

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
from tradelab.contexts.backtest.domain.errors import BacktestServiceError

_BOT_LIMIT_ERROR_CODE = "BOT_LIMIT_EXCEEDED"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class InMemoryStrategyStore(StrategyStore):
    """
    InMemoryStrategyStore — deterministic in-memory StrategyStore adapter for dev/tests.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/application/ports/strategy_store.py
      - src/tradelab/contexts/backtest/adapters/outbound/http/httpx_strategy_store.py
      - tests/unit/contexts/backtest/application
    """

    def __init__(
        self,
        *,
        user_strategies: Iterable[UserStrategyRecord] = (),
        custom_strategies: Iterable[CustomStrategyRecord] = (),
        max_active_per_user: int | None = None,
        clock: Callable[[], str] = _utc_now_iso,
    ) -> None:
        """
        Initialize store with optional seed records.

        Args:
            user_strategies: Seed user/public records.
            custom_strategies: Seed condition-based records.
            max_active_per_user: Optional active-bot limit enforced on saves.
            clock: ISO timestamp source for `created_at`/`updated_at`.
        Returns:
            None.
        Assumptions:
            Adapter lifetime is process-local and non-persistent; new ids are ints.
        Raises:
            ValueError: If seed ids repeat or limit is non-positive.
        Side Effects:
            Creates mutable in-memory dictionary state.
        """
        if max_active_per_user is not None and max_active_per_user <= 0:
            raise ValueError("InMemoryStrategyStore max_active_per_user must be > 0")
        self._user_strategies: dict[StrategyRecordId, UserStrategyRecord] = {}
        for record in user_strategies:
            if record.id in self._user_strategies:
                raise ValueError(f"InMemoryStrategyStore duplicate strategy id: {record.id!r}")
            self._user_strategies[record.id] = record
        self._custom_strategies: tuple[CustomStrategyRecord, ...] = tuple(custom_strategies)
        self._max_active_per_user = max_active_per_user
        self._clock = clock
        numeric_ids = [key for key in self._user_strategies if isinstance(key, int)]
        self._next_id = max(numeric_ids, default=0) + 1

    def list_user_strategies(
        self,
        *,
        user_id: StrategyRecordId,
        include_inactive: bool = False,
    ) -> tuple[UserStrategyRecord, ...]:
        return tuple(
            record
            for record in self._user_strategies.values()
            if _same_id(record.user_id, user_id) and (include_inactive or record.is_active)
        )

    def list_public_strategies(self) -> tuple[UserStrategyRecord, ...]:
        return tuple(
            record
            for record in self._user_strategies.values()
            if record.is_public and record.is_active
        )

    def list_custom_strategies(
        self,
        *,
        include_inactive: bool = False,
    ) -> tuple[CustomStrategyRecord, ...]:
        return tuple(
            record
            for record in self._custom_strategies
            if include_inactive or record.is_active
        )

    def create_user_strategy(
        self,
        *,
        user_id: StrategyRecordId,
        draft: UserStrategyDraft,
    ) -> UserStrategyRecord:
        self._ensure_unique_name(user_id=user_id, name=draft.name)
        return self._insert(
            user_id=user_id,
            name=draft.name,
            strategy_type=draft.strategy_type,
            config=draft.config,
            description=draft.description,
            is_active=draft.is_active,
            is_public=draft.is_public,
            backtest_results=draft.backtest_results,
        )

    def update_user_strategy(
        self,
        *,
        strategy_id: StrategyRecordId,
        patch: UserStrategyPatch,
    ) -> UserStrategyRecord:
        """
        Replace one stored snapshot with patched fields.

        Args:
            strategy_id: Stored strategy identifier.
            patch: Fields to change.
        Returns:
            UserStrategyRecord: Updated snapshot.
        Assumptions:
            Renames keep per-user name uniqueness.
        Raises:
            BacktestServiceError: If strategy is missing or new name is taken.
        Side Effects:
            Replaces snapshot in in-memory dictionary.
        """
        key = next(
            (stored_id for stored_id in self._user_strategies if _same_id(stored_id, strategy_id)),
            None,
        )
        if key is None:
            raise BacktestServiceError("Strategy not found")
        record = self._user_strategies[key]
        changes = patch.to_payload()
        if "name" in changes and changes["name"] != record.name and record.user_id is not None:
            self._ensure_unique_name(user_id=record.user_id, name=changes["name"])
        updated = dataclasses.replace(record, **changes, updated_at=self._clock())
        self._user_strategies[key] = updated
        return updated

    def save_from_backtest(
        self,
        *,
        user_id: StrategyRecordId,
        command: SaveStrategyFromBacktestCommand,
    ) -> UserStrategyRecord:
        """
        Persist a strategy saved from backtest results.

        Args:
            user_id: Owner identifier.
            command: Save payload.
        Returns:
            UserStrategyRecord: Stored record with new integer id.
        Assumptions:
            Active-bot limit applies only to saves from backtest results.
        Raises:
            BacktestServiceError: If name is taken or active-bot limit is reached.
        Side Effects:
            Writes one snapshot to in-memory dictionary.
        """
        self._ensure_unique_name(user_id=user_id, name=command.name)
        if self._max_active_per_user is not None:
            active_count = len(self.list_user_strategies(user_id=user_id))
            if active_count >= self._max_active_per_user:
                raise BacktestServiceError(
                    "You have reached the maximum number of active bots "
                    f"({self._max_active_per_user}) for your plan. "
                    "Please upgrade your plan to create more bots.",
                    error_code=_BOT_LIMIT_ERROR_CODE,
                )
        return self._insert(
            user_id=user_id,
            name=command.name,
            strategy_type=command.strategy_type,
            config=command.config,
            description=command.description,
            is_active=True,
            is_public=False,
            backtest_results=command.backtest_results,
        )

    def _ensure_unique_name(self, *, user_id: StrategyRecordId, name: str) -> None:
        for record in self._user_strategies.values():
            if _same_id(record.user_id, user_id) and record.name == name:
                raise BacktestServiceError(
                    "Strategy with this name already exists for this user"
                )

    def _insert(self, *, user_id: StrategyRecordId, **fields: object) -> UserStrategyRecord:
        now = self._clock()
        record = UserStrategyRecord(
            id=self._next_id,
            user_id=user_id,
            created_at=now,
            updated_at=now,
            **fields,  # type: ignore[arg-type]
        )
        self._user_strategies[record.id] = record
        self._next_id += 1
        return record


def _same_id(left: StrategyRecordId | None, right: StrategyRecordId | None) -> bool:
    # Store ids arrive as ints from JSON and as strings from env/CLI.
    if left is None or right is None:
        return False
    return str(left) == str(right)
