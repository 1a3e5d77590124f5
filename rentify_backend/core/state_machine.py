"""Enumerated status machines with explicit allowed transitions."""

import enum
from collections.abc import Iterable, Mapping

from .exceptions import BusinessLogicError


class StatusMachine:
    """Validates status changes against a transition table.

    A change to the current status is always accepted as a no-op.
    """

    def __init__(
        self,
        name: str,
        transitions: Mapping[enum.Enum, Iterable[enum.Enum]],
    ):
        self.name = name
        self._transitions = {
            source: frozenset(targets) for source, targets in transitions.items()
        }

    def allowed_targets(self, current: enum.Enum) -> frozenset:
        return self._transitions.get(current, frozenset())

    def can_transition(self, current: enum.Enum, target: enum.Enum) -> bool:
        return current == target or target in self.allowed_targets(current)

    def validate(self, current: enum.Enum, target: enum.Enum) -> bool:
        """Raise BusinessLogicError when the change is not allowed.

        Returns:
            True when the status actually changes, False for a no-op.
        """
        if current == target:
            return False
        if target not in self.allowed_targets(current):
            allowed = sorted(s.value for s in self.allowed_targets(current))
            raise BusinessLogicError(
                f"Cannot change {self.name} from '{current.value}' to "
                f"'{target.value}'",
                details={"allowed": allowed},
            )
        return True
