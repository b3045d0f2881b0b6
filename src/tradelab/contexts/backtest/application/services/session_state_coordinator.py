from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from datetime import date
from types import MappingProxyType
from typing import Any, Callable, Iterable, Literal, Mapping, Sequence

from tradelab.contexts.backtest.application.dto import (
    BacktestSelection,
    SaveStrategyFromBacktestCommand,
)
from tradelab.contexts.backtest.application.ports import (
    BacktestExecutionGateway,
    BacktestResultListener,
    StrategyStore,
)
from tradelab.contexts.backtest.domain.entities import (
    BacktestRequest,
    BacktestResponse,
    BacktestSummary,
    StrategyRecordId,
    UnifiedStrategy,
    UserStrategyRecord,
)
from tradelab.contexts.backtest.domain.errors import (
    BacktestPreconditionError,
    BacktestServiceError,
    BacktestSubmissionConflictError,
)
from tradelab.contexts.backtest.domain.value_objects import BacktestFormFields
from tradelab.contexts.strategy_catalog.domain.entities import BasicStrategyDescriptor
from tradelab.contexts.strategy_catalog.domain.services import (
    strategy_storage_type,
    strategy_type_label,
)
from tradelab.platform.errors import TradelabError

from .backtest_request_builder import BacktestRequestBuilder
from .errors import map_backtest_exception
from .unified_strategy_adapter import UnifiedStrategyAdapter

log = logging.getLogger(__name__)

SubmissionStatus = Literal["idle", "submitting", "succeeded", "failed"]

_ALLOWED_STATUS_TRANSITIONS: Mapping[str, frozenset[str]] = MappingProxyType(
    {
        "idle": frozenset({"submitting", "failed"}),
        "submitting": frozenset({"succeeded", "failed", "idle"}),
        "succeeded": frozenset({"idle", "submitting", "failed"}),
        "failed": frozenset({"idle", "submitting", "failed"}),
    }
)


@dataclass(frozen=True, slots=True)
class SubmissionTicket:
    """
    Handle of one in-flight submission; results for a stale generation are dropped.
    """

    generation: int
    request: BacktestRequest


class SessionStateCoordinator:
    """
    SessionStateCoordinator — owns the backtest session state machine
    (`idle -> submitting -> succeeded|failed -> idle`) and the single in-flight submission.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/application/services/backtest_request_builder.py
      - src/tradelab/contexts/backtest/application/services/unified_strategy_adapter.py
      - src/tradelab/contexts/backtest/application/ports/backtest_execution_gateway.py
      - apps/cli/commands/run_backtest.py
    """

    def __init__(
        self,
        *,
        adapter: UnifiedStrategyAdapter,
        gateway: BacktestExecutionGateway,
        form_fields: BacktestFormFields,
        builder: BacktestRequestBuilder | None = None,
        listeners: Sequence[BacktestResultListener] = (),
        today: Callable[[], date] = date.today,
    ) -> None:
        """
        Initialize an idle session with empty selection.

        Args:
            adapter: Unified strategy adapter used to derive active parameters.
            gateway: Execution service port.
            form_fields: Initial test window and sizing inputs.
            builder: Request builder; a default builder is created when omitted.
            listeners: Presentation collaborators notified about outcomes.
            today: Calendar source used for default saved-strategy names.
        Returns:
            None.
        Assumptions:
            Session is driven from one thread; no locking is performed.
        Raises:
            ValueError: If required dependencies are missing.
        Side Effects:
            None.
        """
        if adapter is None:  # type: ignore[truthy-bool]
            raise ValueError("SessionStateCoordinator requires adapter")
        if gateway is None:  # type: ignore[truthy-bool]
            raise ValueError("SessionStateCoordinator requires gateway")
        self._adapter = adapter
        self._gateway = gateway
        self._builder = builder if builder is not None else BacktestRequestBuilder()
        self._listeners: list[BacktestResultListener] = list(listeners)
        self._today = today

        self._symbols: tuple[str, ...] = ()
        self._strategy: UnifiedStrategy | None = None
        self._parameters: dict[str, Any] = {}
        self._form_fields = form_fields
        self._status: SubmissionStatus = "idle"
        self._generation = 0
        self._last_request: BacktestRequest | None = None
        self._last_response: BacktestResponse | None = None
        self._last_error: TradelabError | None = None

    @property
    def symbols(self) -> tuple[str, ...]:
        return self._symbols

    @property
    def strategy(self) -> UnifiedStrategy | None:
        return self._strategy

    @property
    def parameters(self) -> Mapping[str, Any]:
        return MappingProxyType(self._parameters)

    @property
    def form_fields(self) -> BacktestFormFields:
        return self._form_fields

    @property
    def status(self) -> SubmissionStatus:
        return self._status

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def last_request(self) -> BacktestRequest | None:
        return self._last_request

    @property
    def last_response(self) -> BacktestResponse | None:
        return self._last_response

    @property
    def last_error(self) -> TradelabError | None:
        return self._last_error

    def add_listener(self, listener: BacktestResultListener) -> None:
        self._listeners.append(listener)

    def selection(self) -> BacktestSelection:
        return BacktestSelection(
            symbols=self._symbols,
            strategy=self._strategy,
            parameters=self._parameters,
        )

    def set_symbols(self, symbols: Iterable[str]) -> None:
        self._symbols = tuple(symbols)
        self._on_edit()

    def select_strategy(self, strategy: UnifiedStrategy | None) -> None:
        """
        Select a strategy and reset parameters to its active parameters.

        Args:
            strategy: New selection, or `None` to clear.
        Returns:
            None.
        Assumptions:
            Re-selecting an equal strategy keeps edited parameters and status.
        Raises:
            BacktestPreconditionError: `InvalidStrategyVariant` for non-union values.
        Side Effects:
            Replaces parameters and moves finished sessions back to `idle`.
        """
        if strategy == self._strategy:
            return
        parameters = self._adapter.active_parameters(strategy) if strategy is not None else {}
        self._strategy = strategy
        self._parameters = parameters
        self._on_edit()

    def select_catalog_strategy(self, descriptor: BasicStrategyDescriptor) -> None:
        self.select_strategy(self._adapter.from_descriptor(descriptor))

    def set_parameter(self, name: str, value: Any) -> None:
        self._parameters[name] = value
        self._on_edit()

    def update_parameters(self, values: Mapping[str, Any]) -> None:
        self._parameters.update(values)
        self._on_edit()

    def update_form_fields(self, **changes: Any) -> None:
        self._form_fields = dataclasses.replace(self._form_fields, **changes)
        self._on_edit()

    def submit(self) -> BacktestResponse | None:
        """
        Validate, submit and record one backtest.

        Args:
            None.
        Returns:
            BacktestResponse | None: Successful response, or `None` if the session was
                discarded while the request was in flight.
        Assumptions:
            The gateway call is the only asynchronous boundary; no automatic retry.
        Raises:
            BacktestSubmissionConflictError: If a submission is already in flight.
            TradelabError: If validation, transport, or the service failed.
        Side Effects:
            Calls the execution gateway, updates state, notifies listeners.
        """
        ticket = self.begin_submission()
        try:
            response = self._gateway.run_backtest(request=ticket.request)
        except Exception as error:  # noqa: BLE001
            mapped = map_backtest_exception(error=error)
            if self.fail_submission(ticket, error=mapped):
                raise mapped from error
            return None
        if not self.complete_submission(ticket, response=response):
            return None
        if not response.success and self._last_error is not None:
            raise self._last_error
        return response

    def begin_submission(self) -> SubmissionTicket:
        """
        Validate the current selection and move to `submitting`.

        Args:
            None.
        Returns:
            SubmissionTicket: Ticket to pass to `complete_submission`/`fail_submission`.
        Assumptions:
            Precondition failures move the session to `failed` without a network call.
        Raises:
            BacktestSubmissionConflictError: If a submission is already in flight.
            TradelabError: Mapped `validation_error` on precondition failure.
        Side Effects:
            Updates state; notifies listeners on validation failure.
        """
        if self._status == "submitting":
            raise BacktestSubmissionConflictError()
        try:
            request = self._builder.build(self.selection(), self._form_fields)
        except BacktestPreconditionError as error:
            mapped = map_backtest_exception(error=error)
            self._record_failure(mapped)
            raise mapped from error

        self._transition("submitting")
        self._last_request = request
        self._last_response = None
        self._last_error = None
        log.info(
            "submitting backtest strategy=%s symbols=%s",
            request.strategy,
            ",".join(str(symbol) for symbol in request.symbols),
        )
        return SubmissionTicket(generation=self._generation, request=request)

    def complete_submission(
        self,
        ticket: SubmissionTicket,
        *,
        response: BacktestResponse,
    ) -> bool:
        """
        Record the execution service outcome of one ticket.

        Args:
            ticket: Ticket returned by `begin_submission`.
            response: Outcome returned by the execution service.
        Returns:
            bool: `False` if the ticket is stale and the outcome was dropped.
        Assumptions:
            `{success: false}` is recorded as `backtest_failed` with the service message.
        Raises:
            None.
        Side Effects:
            Updates state and notifies listeners.
        """
        if self._is_stale(ticket):
            return False
        if not response.success:
            error = map_backtest_exception(
                error=BacktestServiceError(response.error or ""),
            )
            self._last_response = response
            self._record_failure(error)
            return True

        self._transition("succeeded")
        self._last_response = response
        log.info("backtest succeeded strategy=%s", ticket.request.strategy)
        for listener in tuple(self._listeners):
            listener.on_backtest_completed(request=ticket.request, response=response)
        return True

    def fail_submission(self, ticket: SubmissionTicket, *, error: TradelabError) -> bool:
        if self._is_stale(ticket):
            return False
        self._record_failure(error)
        return True

    def discard(self) -> None:
        """Drop interest in any in-flight result and return to `idle`."""
        self._generation += 1
        if self._status == "submitting":
            log.info("discarding in-flight backtest submission")
            self._transition("idle")

    def save_from_result(
        self,
        store: StrategyStore,
        *,
        user_id: StrategyRecordId,
        name: str | None = None,
        description: str | None = None,
    ) -> UserStrategyRecord:
        """
        Save the last successfully backtested parametric strategy to the strategy store.

        Args:
            store: Strategy store port.
            user_id: Owner identifier.
            name: Strategy name; defaults to `"<label> - Profitable|Loss (<date>)"`.
            description: Description; defaults to a summary of the tested window.
        Returns:
            UserStrategyRecord: Stored record.
        Assumptions:
            Saved config is the submitted request payload; results are the raw service data.
        Raises:
            TradelabError: `validation_error` without a saveable result or with a blank
                name; mapped store failures otherwise.
        Side Effects:
            Writes one strategy to the store.
        """
        request = self._last_request
        response = self._last_response
        if (
            self._status != "succeeded"
            or request is None
            or response is None
            or response.data is None
        ):
            raise map_backtest_exception(error=BacktestPreconditionError("NoBacktestResultToSave"))
        if request.is_custom:
            raise map_backtest_exception(
                error=BacktestPreconditionError(
                    "NoBacktestResultToSave",
                    message="Custom strategies cannot be saved from backtest results",
                )
            )
        if name is not None and not name.strip():
            raise map_backtest_exception(error=BacktestPreconditionError("InvalidStrategyName"))

        label = strategy_type_label(request.strategy)
        command = SaveStrategyFromBacktestCommand(
            name=name if name is not None else self._default_strategy_name(label, response.data),
            description=(
                description
                if description is not None
                else _default_strategy_description(label, request)
            ),
            strategy_type=strategy_storage_type(request.strategy),
            config=request.to_payload(),
            backtest_results=response.data.raw_payload,
        )
        try:
            record = store.save_from_backtest(user_id=user_id, command=command)
        except Exception as error:  # noqa: BLE001
            raise map_backtest_exception(error=error) from error
        log.info("saved strategy %r from backtest result", record.name)
        return record

    def _default_strategy_name(self, label: str, summary: BacktestSummary) -> str:
        performance = "Profitable" if summary.is_profitable else "Loss"
        return f"{label} - {performance} ({self._today().isoformat()})"

    def _on_edit(self) -> None:
        if self._status in ("succeeded", "failed"):
            self._transition("idle")

    def _is_stale(self, ticket: SubmissionTicket) -> bool:
        if ticket.generation != self._generation or self._status != "submitting":
            log.info("dropping stale backtest result generation=%d", ticket.generation)
            return True
        return False

    def _record_failure(self, error: TradelabError) -> None:
        self._transition("failed")
        self._last_error = error
        log.info("backtest failed code=%s message=%s", error.code, error.message)
        for listener in tuple(self._listeners):
            listener.on_backtest_failed(error=error)

    def _transition(self, next_status: SubmissionStatus) -> None:
        allowed = _ALLOWED_STATUS_TRANSITIONS[self._status]
        if next_status not in allowed:
            raise ValueError(
                f"invalid backtest session transition: {self._status} -> {next_status}"
            )
        self._status = next_status


def _default_strategy_description(label: str, request: BacktestRequest) -> str:
    start_date, end_date = request.window.to_wire()
    symbols = ", ".join(str(symbol) for symbol in request.symbols)
    return (
        f"Strategy saved from backtest results. {label} strategy tested on {symbols} "
        f"from {start_date} to {end_date}."
    )
