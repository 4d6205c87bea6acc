"""Named callback registry shared by the actions of a chain."""

from __future__ import annotations

import enum
import inspect
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Callable

from actionchain.exceptions import CallbackVetoedError

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


def _key(name: str | enum.Enum) -> str:
    if isinstance(name, enum.Enum):
        return str(name.value)
    return name


class CallbackRegistry:
    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = {}

    def register(self, name: str | enum.Enum, handler: Handler) -> Handler:
        self._handlers.setdefault(_key(name), []).append(handler)
        return handler

    def unregister(self, name: str | enum.Enum, handler: Handler) -> None:
        handlers = self._handlers.get(_key(name), [])
        if handler in handlers:
            handlers.remove(handler)

    def handlers(self, name: str | enum.Enum) -> tuple[Handler, ...]:
        return tuple(self._handlers.get(_key(name), ()))

    def clear(self, name: str | enum.Enum | None = None) -> None:
        if name is None:
            self._handlers.clear()
        else:
            self._handlers.pop(_key(name), None)

    async def invoke(self, name: str | enum.Enum, *args: Any) -> list[Any]:
        key = _key(name)
        results: list[Any] = []
        # Snapshot so a handler registering another one doesn't affect this call.
        for handler in tuple(self._handlers.get(key, ())):
            result = handler(*args)
            if inspect.isawaitable(result):
                result = await result
            results.append(result)
        if results:
            logger.debug("Invoked %d handler(s) for '%s'", len(results), key)
        return results

    @asynccontextmanager
    async def around(self, name: str | enum.Enum, *args: Any) -> AsyncIterator[None]:
        key = _key(name)
        results = await self.invoke(f"before_{key}", *args)
        if any(result is False for result in results):
            raise CallbackVetoedError(key)
        yield
        await self.invoke(f"after_{key}", *args)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, (str, enum.Enum)):
            return False
        return bool(self._handlers.get(_key(name)))

    def __len__(self) -> int:
        return sum(len(h) for h in self._handlers.values())
