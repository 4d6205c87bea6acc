"""Action built from plain callables instead of a subclass."""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, Callable

from actionchain.actions.base import Action

if TYPE_CHECKING:
    from actionchain.runner.runner import Runner


async def _call(func: Callable[..., Any] | None, *args: Any) -> Any:
    if func is None:
        return None
    result = func(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class FunctionAction(Action):
    """Wraps sync or async callables; each one receives the action itself."""

    def __init__(
        self,
        runner: Runner,
        execute: Callable[[FunctionAction], Any],
        rescue: Callable[[FunctionAction, BaseException], Any] | None = None,
        cleanup: Callable[[FunctionAction], Any] | None = None,
        prepare: Callable[[FunctionAction], Any] | None = None,
        name: str | None = None,
    ) -> None:
        super().__init__(runner)
        self._execute = execute
        self._rescue = rescue
        self._cleanup = cleanup
        self._prepare = prepare
        self._name = name or getattr(execute, "__name__", type(self).__name__)
        self.executed = False

    @property
    def name(self) -> str:
        return self._name

    async def prepare(self) -> None:
        await _call(self._prepare, self)

    async def execute(self) -> None:
        await _call(self._execute, self)
        self.executed = True

    async def rescue(self, exception: BaseException) -> None:
        await _call(self._rescue, self, exception)

    async def cleanup(self) -> None:
        await _call(self._cleanup, self)
