"""Custom exception hierarchy for actionchain."""

from __future__ import annotations

from typing import Any


class ActionChainError(Exception):
    """Base exception for all actionchain errors."""


class ChainStateError(ActionChainError):
    """Raised on an illegal chain transition or a mutation of a frozen sequence."""


class DuplicateActionError(ActionChainError):
    """Raised when the duplicate guard finds two actions of the same class."""

    def __init__(self, message: str, action_name: str = "") -> None:
        super().__init__(message)
        self.action_name = action_name


class CapabilityMissingError(ActionChainError):
    """Raised when a required capability was never provided."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Capability not provided: {key}")
        self.key = key


class CapabilityConflictError(ActionChainError):
    """Raised when a capability key is provided twice."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Capability already provided: {key}")
        self.key = key


class CallbackVetoedError(ActionChainError):
    """Raised when a ``before_`` handler returns False."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Callback '{name}' was vetoed by a before_{name} handler")
        self.name = name


class ActionError(ActionChainError):
    """User-facing failure raised by concrete actions."""

    def __init__(
        self, message: str, key: str = "", data: dict[str, Any] | None = None
    ) -> None:
        super().__init__(message)
        self.key = key
        self.data = data or {}
