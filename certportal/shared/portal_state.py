"""State model for the certificate request form."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Phase(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    BLOCKED = "blocked"
    FAILED = "failed"


class InvalidTransition(RuntimeError):
    """Raised when an event is not allowed from the current phase."""


_ALLOWED: dict[tuple[Phase, str], Phase] = {
    (Phase.IDLE, "submit"): Phase.SUBMITTING,
    (Phase.FAILED, "submit"): Phase.SUBMITTING,
    (Phase.SUCCESS, "submit"): Phase.SUBMITTING,
    (Phase.SUBMITTING, "succeed"): Phase.SUCCESS,
    (Phase.SUBMITTING, "fail"): Phase.FAILED,
    (Phase.SUBMITTING, "block"): Phase.BLOCKED,
    (Phase.IDLE, "block"): Phase.BLOCKED,
    (Phase.SUCCESS, "block"): Phase.BLOCKED,
    (Phase.FAILED, "block"): Phase.BLOCKED,
    (Phase.SUCCESS, "reset"): Phase.IDLE,
    (Phase.FAILED, "reset"): Phase.IDLE,
}


@dataclass(frozen=True)
class PortalState:
    phase: Phase = Phase.IDLE
    count: int = 0
    cap: int = 2
    reason: str | None = None

    @classmethod
    def initial(cls, count: int, cap: int) -> "PortalState":
        state = cls(count=count, cap=cap)
        return state.block() if state.limit_reached else state

    @property
    def remaining(self) -> int:
        return max(0, self.cap - self.count)

    @property
    def limit_reached(self) -> bool:
        return self.count >= self.cap

    @property
    def can_submit(self) -> bool:
        return self.phase in (Phase.IDLE, Phase.FAILED, Phase.SUCCESS) and not self.limit_reached

    def _move(self, event: str, **changes) -> "PortalState":
        target = _ALLOWED.get((self.phase, event))
        if target is None:
            raise InvalidTransition(f"{event} not allowed from {self.phase.value}")
        values = {
            "phase": target,
            "count": self.count,
            "cap": self.cap,
            "reason": None,
        }
        values.update(changes)
        return PortalState(**values)

    def submit(self) -> "PortalState":
        if self.limit_reached:
            return self.block()
        return self._move("submit")

    def succeed(self) -> "PortalState":
        return self._move("succeed", count=self.count + 1)

    def fail(self, reason: str) -> "PortalState":
        return self._move("fail", reason=reason)

    def block(self) -> "PortalState":
        if self.phase is Phase.BLOCKED:
            return self
        return self._move("block")

    def reset(self) -> "PortalState":
        if self.limit_reached:
            return self.block()
        return self._move("reset")
