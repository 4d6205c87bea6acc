"""Shared fixtures and recording actions for all tests."""

from __future__ import annotations

import pytest

from actionchain.actions.base import Action
from actionchain.config.settings import Settings
from actionchain.runner.runner import Runner

_ENV_VARS = (
    "ACTIONCHAIN_LOG_LEVEL",
    "ACTIONCHAIN_DRY_RUN",
    "ACTIONCHAIN_FORBID_DUPLICATE_ACTIONS",
    "ACTIONCHAIN_LOG_TRACES",
)


class TracingAction(Action):
    """Appends ``(phase, label)`` to a shared list on every lifecycle call.

    ``fail_in`` names the phase that raises ``exc``; ``rescue_exc`` and
    ``cleanup_exc`` make rescue / cleanup raise as well.
    """

    def __init__(
        self,
        runner,
        label,
        calls,
        fail_in=None,
        exc=None,
        rescue_exc=None,
        cleanup_exc=None,
        on_prepare=None,
    ):
        super().__init__(runner)
        self.label = label
        self.calls = calls
        self.fail_in = fail_in
        self.exc = exc or RuntimeError(f"{label} failed")
        self.rescue_exc = rescue_exc
        self.cleanup_exc = cleanup_exc
        self.on_prepare = on_prepare
        self.rescued: list[BaseException] = []

    @property
    def name(self):
        return self.label

    async def prepare(self):
        self.calls.append(("prepare", self.label))
        if self.on_prepare is not None:
            self.on_prepare(self)
        if self.fail_in == "prepare":
            raise self.exc

    async def execute(self):
        self.calls.append(("execute", self.label))
        if self.fail_in == "execute":
            raise self.exc

    async def rescue(self, exception):
        self.calls.append(("rescue", self.label))
        self.rescued.append(exception)
        if self.rescue_exc is not None:
            raise self.rescue_exc

    async def cleanup(self):
        self.calls.append(("cleanup", self.label))
        if self.cleanup_exc is not None:
            raise self.cleanup_exc


@pytest.fixture
def clean_env(monkeypatch):
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def settings(clean_env):
    return Settings()


@pytest.fixture
def runner(settings):
    return Runner(settings=settings)


@pytest.fixture
def calls():
    return []


@pytest.fixture
def tracing_action():
    return TracingAction


@pytest.fixture
def make_action(runner, calls):
    """Queue a TracingAction on the shared runner."""
    def _make(label, **kwargs):
        return runner.add_action(TracingAction, label, calls, **kwargs)
    return _make
