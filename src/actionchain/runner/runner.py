"""Runner — the shared target that actions operate on and talk through."""

from __future__ import annotations

import enum
from typing import Any, TypeVar

from actionchain.actions.base import Action
from actionchain.config.settings import Settings
from actionchain.engine.chain import Chain
from actionchain.engine.sequence import ActionSequence
from actionchain.exceptions import ChainStateError
from actionchain.models.chain import ChainResult
from actionchain.runner.callbacks import CallbackRegistry, Handler
from actionchain.runner.capabilities import CapabilityRegistry

A = TypeVar("A", bound=Action)


class Runner:
    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()
        self.callbacks = CallbackRegistry()
        self.capabilities = CapabilityRegistry()
        self._actions = ActionSequence(self)
        self.last_result: ChainResult | None = None
        self.active_chain: Chain | None = None

    @property
    def actions(self) -> ActionSequence:
        return self._actions

    def add_action(self, action_cls: type[A], *args: Any, **kwargs: Any) -> A:
        action = action_cls(self, *args, **kwargs)
        self._actions.append(action)
        return action

    def find_action(self, action_cls: type[A]) -> A | None:
        for action in self._actions:
            if isinstance(action, action_cls):
                return action
        return None

    def register_callback(self, name: str | enum.Enum, handler: Handler) -> Handler:
        return self.callbacks.register(name, handler)

    async def invoke_callback(self, name: str | enum.Enum, *args: Any) -> list[Any]:
        return await self.callbacks.invoke(name, *args)

    def reset(self) -> None:
        """Give the runner a fresh, empty action sequence.

        Not allowed while a chain is running: the chain keeps driving the
        sequence it adopted, so actions added afterwards would never run.
        """
        if self.active_chain is not None:
            raise ChainStateError("Cannot reset the runner while a chain is running")
        self._actions = ActionSequence(self)

    async def execute(
        self, single_action: type[Action] | None = None, *args: Any, **kwargs: Any
    ) -> ChainResult:
        """Run the queued actions as one chain, or only ``single_action`` if given.

        The runner is left with an empty sequence afterwards, whether the
        chain succeeded or raised, and ``last_result`` holds the outcome.
        """
        if single_action is not None:
            self.reset()
            self.add_action(single_action, *args, **kwargs)
        chain = Chain(self)
        try:
            return await chain.run()
        finally:
            self.last_result = chain.result
            self.reset()
