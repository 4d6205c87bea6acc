"""Capabilities that actions provide during setup for later actions to use."""

from __future__ import annotations

from collections.abc import KeysView
from typing import Any

from actionchain.exceptions import CapabilityConflictError, CapabilityMissingError


class CapabilityRegistry:
    def __init__(self) -> None:
        self._impls: dict[str, Any] = {}

    def provide(self, key: str, impl: Any, replace: bool = False) -> None:
        if key in self._impls and not replace:
            raise CapabilityConflictError(key)
        self._impls[key] = impl

    def require(self, key: str) -> Any:
        try:
            return self._impls[key]
        except KeyError:
            raise CapabilityMissingError(key) from None

    def get(self, key: str, default: Any = None) -> Any:
        return self._impls.get(key, default)

    def keys(self) -> KeysView[str]:
        return self._impls.keys()

    def clear(self) -> None:
        self._impls.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._impls
