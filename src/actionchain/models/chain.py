"""Chain models — states, trace entries and the result of a chain run."""

from __future__ import annotations

import enum
from datetime import datetime, timezone

from pydantic import BaseModel, Field


class ChainState(str, enum.Enum):
    PENDING = "pending"
    BUILDING = "building"
    RUNNING = "running"
    TERMINATING = "terminating"
    DONE = "done"
    FAULTING = "faulting"
    FAULTED = "faulted"
    ABORTED = "aborted"


TERMINAL_STATES = frozenset({ChainState.DONE, ChainState.FAULTED, ChainState.ABORTED})


class LifecyclePhase(str, enum.Enum):
    PREPARE = "prepare"
    EXECUTE = "execute"
    RESCUE = "rescue"
    CLEANUP = "cleanup"


class TraceEntry(BaseModel):
    index: int
    action: str
    phase: LifecyclePhase
    ok: bool = True


class SecondaryFault(BaseModel):
    model_config = {"arbitrary_types_allowed": True}

    action: str
    phase: LifecyclePhase
    exception: BaseException
    message: str = ""


class ChainResult(BaseModel):
    model_config = {"arbitrary_types_allowed": True}

    state: ChainState = ChainState.PENDING
    succeeded: bool = False
    dry_run: bool = False
    cause: BaseException | None = None
    failed_action: str = ""
    failed_phase: LifecyclePhase | None = None
    secondary_faults: list[SecondaryFault] = Field(default_factory=list)
    trace: list[TraceEntry] = Field(default_factory=list)
    started_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    finished_at: datetime | None = None

    def calls(self, phase: LifecyclePhase | None = None) -> list[tuple[str, str]]:
        """Return ``(phase, action)`` pairs, optionally limited to one phase."""
        return [
            (entry.phase.value, entry.action)
            for entry in self.trace
            if phase is None or entry.phase == phase
        ]
