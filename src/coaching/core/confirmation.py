"""Two-phase delete confirmation.

States: idle -> pending(target) -> idle.
- request(target): idle/pending -> pending(target)
- confirm(): pending -> idle, returns the target to delete
- cancel(): pending -> idle, target discarded
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Generic, TypeVar

T = TypeVar("T")


class ConfirmationState(Enum):
    """State of a delete confirmation."""

    IDLE = auto()
    PENDING = auto()


@dataclass
class DeleteConfirmation(Generic[T]):
    """Holds at most one pending delete target."""

    target: T | None = None

    @property
    def state(self) -> ConfirmationState:
        if self.target is None:
            return ConfirmationState.IDLE
        return ConfirmationState.PENDING

    @property
    def is_pending(self) -> bool:
        return self.target is not None

    def request(self, target: T) -> None:
        """Mark target for deletion, replacing any earlier pending request."""
        self.target = target

    def confirm(self) -> T | None:
        """Commit the pending request.

        Returns:
            The target to delete, or None if nothing was pending
        """
        target = self.target
        self.target = None
        return target

    def cancel(self) -> None:
        """Discard the pending request."""
        self.target = None
