"""Base class for every action run by a chain.

An action is one step executed against a :class:`Runner`. Actions are
constructed all at once, before any of them is prepared, so an action may
set up whatever it needs in ``__init__`` knowing that no other action has
had ``prepare`` or ``execute`` called yet.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from actionchain.runner.runner import Runner


class Action:
    def __init__(self, runner: Runner, *args: Any, **kwargs: Any) -> None:
        self._runner = runner

    @property
    def runner(self) -> Runner:
        return self._runner

    @property
    def name(self) -> str:
        return type(self).__name__

    async def prepare(self) -> None:
        """Called once per action, in chain order, before anything executes.

        This is the place to register callbacks, provide capabilities on the
        runner, or append further actions with ``self.runner.add_action``.
        Appended actions go to the end of the chain and are prepared too.
        """

    async def execute(self) -> None:
        """Called once, after every action is prepared, to do the actual work.

        The action sequence is frozen at this point, so adding actions here
        raises :class:`ChainStateError`. Example::

            await self.runner.invoke_callback("before_boot", vm)
            ...
            await self.runner.invoke_callback("after_boot", vm)
        """

    async def cleanup(self) -> None:
        """Called exactly once, after all actions finished or were rescued.

        Also runs when this action's ``prepare`` or ``execute`` never ran, so
        implementations must not assume either of them completed.
        """

    async def rescue(self, exception: BaseException) -> None:
        """Called on every action of the chain when any ``execute`` raises.

        Runs while a fault is already in flight. Anything raised here is
        recorded as a secondary fault and never replaces ``exception``.
        """

    def __repr__(self) -> str:
        return f"<{self.name}>"
