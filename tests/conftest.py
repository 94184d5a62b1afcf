from __future__ import annotations

from collections.abc import Callable

from fakes import OUTPUT_LOCATION, FakeClock, ScriptedBackend
import pytest

from athena_mcp.execute.runner import PollSettings, QueryRunner
from athena_mcp.services.query_service_manager import QueryServiceManager


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_runner(clock: FakeClock) -> Callable[..., QueryRunner]:
    def _make(backend: ScriptedBackend, **settings: int) -> QueryRunner:
        return QueryRunner(
            backend,
            output_location=OUTPUT_LOCATION,
            settings=PollSettings(**settings),
            sleep=clock.sleep,
            clock=clock,
        )

    return _make


@pytest.fixture(autouse=True)
def _fresh_manager() -> None:
    QueryServiceManager.reset_instance()
