"""Chain driver — prepare → execute → (rescue) → cleanup over an action sequence."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from actionchain.actions.base import Action
from actionchain.engine.sequence import ActionSequence
from actionchain.exceptions import ChainStateError, DuplicateActionError
from actionchain.models.chain import (
    TERMINAL_STATES,
    ChainResult,
    ChainState,
    LifecyclePhase,
    SecondaryFault,
    TraceEntry,
)

if TYPE_CHECKING:
    from actionchain.runner.runner import Runner

logger = logging.getLogger(__name__)

_TRANSITIONS: dict[ChainState, frozenset[ChainState]] = {
    ChainState.PENDING: frozenset({ChainState.BUILDING}),
    ChainState.BUILDING: frozenset(
        {ChainState.RUNNING, ChainState.TERMINATING, ChainState.ABORTED}
    ),
    ChainState.RUNNING: frozenset({ChainState.TERMINATING, ChainState.FAULTING}),
    ChainState.TERMINATING: frozenset({ChainState.DONE}),
    ChainState.FAULTING: frozenset({ChainState.FAULTED}),
}


class Chain:
    """Runs the lifecycle of every action in a runner's sequence, once.

    Setup prepares actions strictly in order until none is left unprepared
    (actions appended during ``prepare`` land at the tail). Execution then
    runs over the frozen sequence. If an ``execute`` raises, every action is
    rescued with that exception, then every action is cleaned up and the
    original exception is re-raised unchanged. Cleanup runs on every action
    under every outcome, including a fault during setup.
    """

    def __init__(
        self,
        runner: Runner,
        actions: Iterable[Action] = (),
        *,
        dry_run: bool | None = None,
        forbid_duplicates: bool | None = None,
    ) -> None:
        settings = runner.settings
        self._runner = runner
        self._actions: ActionSequence = runner.actions
        if self._actions.frozen:
            raise ChainStateError("Runner still holds the sequence of a finished chain")
        self._actions.extend(actions)
        self._dry_run = settings.dry_run if dry_run is None else dry_run
        self._forbid_duplicates = (
            settings.forbid_duplicate_actions
            if forbid_duplicates is None
            else forbid_duplicates
        )
        self._log_traces = settings.log_traces
        self._state = ChainState.PENDING
        self._result: ChainResult | None = None

    @property
    def runner(self) -> Runner:
        return self._runner

    @property
    def actions(self) -> ActionSequence:
        return self._actions

    @property
    def state(self) -> ChainState:
        return self._state

    @property
    def result(self) -> ChainResult | None:
        return self._result

    @property
    def trace(self) -> list[TraceEntry]:
        return self._result.trace if self._result else []

    @property
    def finished(self) -> bool:
        return self._state in TERMINAL_STATES

    async def run(self) -> ChainResult:
        if self._state is not ChainState.PENDING:
            raise ChainStateError(f"Chain already ran (state: {self._state.value})")
        if self._runner.active_chain is not None:
            raise ChainStateError("Runner is already driving another chain")

        self._runner.active_chain = self
        try:
            return await self._run()
        finally:
            self._runner.active_chain = None

    async def _run(self) -> ChainResult:
        self._result = ChainResult(dry_run=self._dry_run)
        self._transition(ChainState.BUILDING)
        logger.debug("Preparing chain of %d action(s)", len(self._actions))

        cause = await self._setup()
        if cause is not None:
            self._actions.freeze()
            await self._cleanup()
            return self._finish(ChainState.ABORTED, cause)

        if self._dry_run:
            logger.info("Dry run: skipping execution of %d action(s)", len(self._actions))
            self._actions.freeze()
            self._transition(ChainState.TERMINATING)
            await self._cleanup()
            return self._finish(ChainState.DONE)

        self._actions.freeze()
        self._transition(ChainState.RUNNING)

        cause = await self._execute()
        if cause is None:
            self._transition(ChainState.TERMINATING)
            await self._cleanup()
            return self._finish(ChainState.DONE)

        self._transition(ChainState.FAULTING)
        await self._rescue(cause)
        await self._cleanup()
        return self._finish(ChainState.FAULTED, cause)

    async def _setup(self) -> BaseException | None:
        # The sequence is append-only, so walking by index reaches actions
        # appended by earlier prepares.
        index = 0
        while index < len(self._actions):
            action = self._actions[index]
            try:
                await action.prepare()
            except BaseException as exc:
                self._record(index, action, LifecyclePhase.PREPARE, ok=False)
                self._fail(action, LifecyclePhase.PREPARE, exc)
                return exc
            self._record(index, action, LifecyclePhase.PREPARE)
            index += 1

        if self._forbid_duplicates:
            seen: set[type[Action]] = set()
            for action in self._actions:
                if type(action) in seen:
                    exc = DuplicateActionError(
                        f"Duplicate action in chain: {action.name}",
                        action_name=action.name,
                    )
                    self._fail(action, LifecyclePhase.PREPARE, exc)
                    return exc
                seen.add(type(action))
        return None

    async def _execute(self) -> BaseException | None:
        for index, action in enumerate(self._actions):
            try:
                await action.execute()
            except BaseException as exc:
                self._record(index, action, LifecyclePhase.EXECUTE, ok=False)
                self._fail(action, LifecyclePhase.EXECUTE, exc)
                return exc
            self._record(index, action, LifecyclePhase.EXECUTE)
        return None

    async def _rescue(self, cause: BaseException) -> None:
        for index, action in enumerate(self._actions):
            try:
                await action.rescue(cause)
            except BaseException as exc:
                self._record(index, action, LifecyclePhase.RESCUE, ok=False)
                self._secondary(action, LifecyclePhase.RESCUE, exc)
            else:
                self._record(index, action, LifecyclePhase.RESCUE)

    async def _cleanup(self) -> None:
        for index, action in enumerate(self._actions):
            try:
                await action.cleanup()
            except BaseException as exc:
                self._record(index, action, LifecyclePhase.CLEANUP, ok=False)
                self._secondary(action, LifecyclePhase.CLEANUP, exc)
            else:
                self._record(index, action, LifecyclePhase.CLEANUP)

    def _finish(
        self, state: ChainState, cause: BaseException | None = None
    ) -> ChainResult:
        if state not in TERMINAL_STATES:
            raise ChainStateError(f"Cannot finish a chain in state {state.value}")
        result = self._require_result()
        self._transition(state)
        result.state = state
        result.succeeded = cause is None
        result.cause = cause
        result.finished_at = datetime.now(timezone.utc)

        if cause is None:
            # An interrupt caught during cleanup of a clean run still has to reach
            # the caller once every action is cleaned up.
            for fault in result.secondary_faults:
                if not isinstance(fault.exception, Exception):
                    result.succeeded = False
                    result.cause = fault.exception
                    logger.warning(
                        "Chain %s, re-raising %r from %s",
                        state.value,
                        fault.exception,
                        fault.action,
                    )
                    raise fault.exception
            logger.debug("Chain finished: %s", state.value)
            return result

        for fault in result.secondary_faults:
            cause.add_note(
                f"secondary fault in {fault.phase.value}({fault.action}): {fault.message}"
            )
        logger.error(
            "Chain %s: %s failed during %s",
            state.value,
            result.failed_action,
            result.failed_phase.value if result.failed_phase else "?",
        )
        raise cause

    def _fail(self, action: Action, phase: LifecyclePhase, exc: BaseException) -> None:
        result = self._require_result()
        result.failed_action = action.name
        result.failed_phase = phase
        logger.error("%s raised during %s: %r", action.name, phase.value, exc)

    def _secondary(
        self, action: Action, phase: LifecyclePhase, exc: BaseException
    ) -> None:
        self._require_result().secondary_faults.append(
            SecondaryFault(
                action=action.name,
                phase=phase,
                exception=exc,
                message=str(exc) or type(exc).__name__,
            )
        )
        logger.warning(
            "Secondary fault in %s during %s", action.name, phase.value, exc_info=exc
        )

    def _record(
        self, index: int, action: Action, phase: LifecyclePhase, ok: bool = True
    ) -> None:
        self._require_result().trace.append(
            TraceEntry(index=index, action=action.name, phase=phase, ok=ok)
        )
        if self._log_traces:
            logger.debug("%s(%s) #%d ok=%s", phase.value, action.name, index, ok)

    def _transition(self, state: ChainState) -> None:
        if state not in _TRANSITIONS.get(self._state, frozenset()):
            raise ChainStateError(
                f"Illegal chain transition {self._state.value} -> {state.value}"
            )
        logger.debug("Chain state %s -> %s", self._state.value, state.value)
        self._state = state

    def _require_result(self) -> ChainResult:
        if self._result is None:
            raise ChainStateError("Chain has not been started")
        return self._result
