from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Literal, Mapping

ErrorCode = Literal[
    "validation_error",
    "transport_error",
    "backtest_failed",
    "conflict",
    "unexpected_error",
]

ERROR_CODES: frozenset[str] = frozenset(
    {"validation_error", "transport_error", "backtest_failed", "conflict", "unexpected_error"}
)
_RETRYABLE_CODES = frozenset({"transport_error", "unexpected_error"})


@dataclass(frozen=True, slots=True)
class TradelabError(Exception):
    """
    TradelabError — user-facing outcome of a failed backtest client operation.

    `message` is what the user sees; technical causes live in `details`.

    Docs:
      - docs/architecture/backtest/backtest-request-construction-v1.md
    Related:
      - src/tradelab/contexts/backtest/application/services/errors.py
      - src/tradelab/contexts/backtest/application/services/session_state_coordinator.py
      - apps/cli/commands/run_backtest.py
    """

    code: ErrorCode
    message: str
    details: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        """
        Validate code against the canonical set and freeze details as plain JSON values.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Detail keys are strings; dates and other non-JSON values render via `str`.
        Raises:
            ValueError: If `code` is unknown or `message` is blank.
            TypeError: If `details` is not a mapping when provided.
        Side Effects:
            Replaces `code`, `message` and `details` with normalized values.
        """
        code = self.code.strip()
        if code not in ERROR_CODES:
            raise ValueError(
                f"TradelabError.code must be one of {sorted(ERROR_CODES)}, got {code!r}"
            )
        message = self.message.strip()
        if not message:
            raise ValueError("TradelabError.message must be non-empty")
        object.__setattr__(self, "code", code)
        object.__setattr__(self, "message", message)

        if self.details is None:
            return
        if not isinstance(self.details, Mapping):
            raise TypeError("TradelabError.details must be a mapping when provided")
        # JSON round-trip gives sorted keys, lists for tuples and strings for dates.
        object.__setattr__(
            self,
            "details",
            json.loads(json.dumps(dict(self.details), sort_keys=True, default=str)),
        )

    def __str__(self) -> str:
        return self.message

    @property
    def reason(self) -> str | None:
        """Precondition code behind a `validation_error`, if any."""
        if self.details is None:
            return None
        reason = self.details.get("reason")
        return reason if isinstance(reason, str) else None

    @property
    def user_may_retry(self) -> bool:
        # Only failures outside the request itself can succeed unchanged.
        return self.code in _RETRYABLE_CODES

    def to_payload(self) -> dict[str, Any]:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": dict(self.details or {}),
            }
        }
