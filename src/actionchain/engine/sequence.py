"""Append-only action sequence that freezes when execution starts."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import TYPE_CHECKING, overload

from actionchain.actions.base import Action
from actionchain.exceptions import ChainStateError

if TYPE_CHECKING:
    from actionchain.runner.runner import Runner


class ActionSequence(Sequence[Action]):
    def __init__(self, owner: Runner, actions: Iterable[Action] = ()) -> None:
        self._owner = owner
        self._items: list[Action] = []
        self._frozen = False
        self.extend(actions)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def append(self, action: Action) -> None:
        if self._frozen:
            raise ChainStateError(
                f"Cannot add {action!r}: the action sequence is frozen once execution starts"
            )
        if not isinstance(action, Action):
            raise TypeError(f"Expected an Action instance, got {type(action).__name__}")
        if action.runner is not self._owner:
            raise ChainStateError(f"{action!r} is bound to a different runner")
        self._items.append(action)

    def extend(self, actions: Iterable[Action]) -> None:
        for action in actions:
            self.append(action)

    @overload
    def __getitem__(self, index: int) -> Action: ...

    @overload
    def __getitem__(self, index: slice) -> list[Action]: ...

    def __getitem__(self, index):
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Action]:
        return iter(self._items)

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "open"
        return f"ActionSequence({self._items!r}, {state})"
