from __future__ import annotations

from collections.abc import Callable
import json

from _pytest.monkeypatch import MonkeyPatch
from fakes import ScriptedBackend
import pytest
from starlette.requests import Request

from athena_mcp import server as server_mod
from athena_mcp.execute.runner import QueryRunner
from athena_mcp.services import query_service_manager as qsm_mod
from athena_mcp.services.query_service_manager import QueryServiceManager
from athena_mcp.services.state import ServicePhase


def _request() -> Request:
    return Request({"type": "http", "method": "GET", "path": "/health", "headers": []})


@pytest.mark.asyncio
async def test_health_unavailable_until_ready() -> None:
    resp = await server_mod.health_check(_request())

    assert resp.status_code == 503
    assert json.loads(resp.body) == {
        "status": "unavailable",
        "service": "athena-mcp",
        "phase": "IDLE",
    }


@pytest.mark.asyncio
async def test_health_ready(make_runner: Callable[..., QueryRunner]) -> None:
    QueryServiceManager.get_instance().initialize(make_runner(ScriptedBackend(["SUCCEEDED"])))

    resp = await server_mod.health_check(_request())

    assert resp.status_code == 200
    assert json.loads(resp.body)["status"] == "healthy"


@pytest.mark.asyncio
async def test_lifespan_fails_without_output_location(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.delenv("ATHENA_MCP_OUTPUT_S3_PATH", raising=False)
    monkeypatch.delenv("OUTPUT_S3_PATH", raising=False)

    with pytest.raises(ValueError, match="OUTPUT_S3_PATH"):
        async with server_mod.lifespan(server_mod.mcp):
            pass

    assert QueryServiceManager.get_instance().state.phase is ServicePhase.FAILED


@pytest.mark.asyncio
async def test_lifespan_initializes_and_stops(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setenv("ATHENA_MCP_OUTPUT_S3_PATH", "s3://bucket/out/")
    monkeypatch.setenv("AWS_REGION", "us-east-1")
    monkeypatch.delenv("AWS_PROFILE", raising=False)

    async with server_mod.lifespan(server_mod.mcp):
        assert QueryServiceManager.get_instance().is_ready()

    assert QueryServiceManager.get_instance().state.phase is ServicePhase.STOPPED


@pytest.mark.asyncio
async def test_lifespan_fails_on_backend_error(monkeypatch: MonkeyPatch) -> None:
    def _boom(**_kwargs: object) -> None:
        msg = "boto3 session unavailable"
        raise RuntimeError(msg)

    monkeypatch.setattr(qsm_mod, "AthenaBackend", _boom)
    monkeypatch.setenv("ATHENA_MCP_OUTPUT_S3_PATH", "s3://bucket/out/")

    with pytest.raises(RuntimeError, match="boto3 session unavailable"):
        async with server_mod.lifespan(server_mod.mcp):
            pass

    assert QueryServiceManager.get_instance().state.phase is ServicePhase.FAILED
