"""Entry point and dependency wiring."""

from __future__ import annotations

from actionchain.config.logging_setup import configure_logging
from actionchain.config.settings import Settings
from actionchain.runner.runner import Runner


def build_runner(settings: Settings | None = None) -> Runner:
    settings = settings or Settings()
    configure_logging(settings.log_level)
    return Runner(settings=settings)
