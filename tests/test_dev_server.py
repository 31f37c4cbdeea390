import asyncio
import os
import stat
import sys
from pathlib import Path

import httpx
import pytest

from aio_mcp.engine.core import devserver
from aio_mcp.engine.handlers import HandlerContext, handle_app_dev, handle_dev_invoke
from aio_mcp.engine.handlers import dev as dev_module
from aio_mcp.engine.handlers.dev import parse_dev_output

DEV_OUTPUT = """\
Building the app...
Your app is running at https://localhost:9080
web actions:
  -> https://localhost:9080/api/v1/web/starter-kit/info
non-web actions:
  -> starter-kit/publish
press CTRL+C to terminate dev environment
  -> ignored after the banner
"""


def _mock_dev_server(monkeypatch, handler) -> list[httpx.Request]:
    seen: list[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    def create_client(**kwargs):
        return httpx.AsyncClient(transport=httpx.MockTransport(record))

    monkeypatch.setattr(devserver, "create_client", create_client)
    return seen


def _refuse(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


def _fake_cli(directory: Path, body: str) -> Path:
    script = directory / "fake-aio"
    script.write_text(f"#!{sys.executable}\nimport sys, time\n{body}\n", encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR)
    return script


def _with_cli(ctx: HandlerContext, script: Path) -> HandlerContext:
    return HandlerContext(
        project_root=ctx.project_root,
        settings=ctx.settings.model_copy(update={"aio_command": str(script)}),
    )


# ============ aio-app-dev ============


def test_parse_dev_output() -> None:
    web, non_web = parse_dev_output(DEV_OUTPUT)

    assert web == ["-> https://localhost:9080/api/v1/web/starter-kit/info"]
    assert non_web == ["-> starter-kit/publish"]


def test_parse_dev_output_without_sections() -> None:
    assert parse_dev_output("starting\npress CTRL+C\n") == ([], [])


@pytest.mark.asyncio
async def test_app_dev_reports_port_conflict(monkeypatch, ctx: HandlerContext) -> None:
    _mock_dev_server(monkeypatch, lambda request: httpx.Response(401))

    response = await handle_app_dev({}, ctx)

    assert response.body.startswith("❌ **Port Conflict Detected!**")
    assert "Port 9080 is already in use" in response.body


@pytest.mark.asyncio
@pytest.mark.skipif(os.name == "nt", reason="shebang scripts")
async def test_app_dev_started(monkeypatch, tmp_path: Path, ctx: HandlerContext) -> None:
    async def not_running(port):
        return False

    async def ready(port, attempts, interval):
        return True

    monkeypatch.setattr(dev_module, "check_dev_server", not_running)
    monkeypatch.setattr(dev_module, "wait_for_server_ready", ready)
    script = _fake_cli(tmp_path, f"sys.stdout.write({DEV_OUTPUT!r})\nsys.stdout.flush()")

    response = await handle_app_dev({"verbose": True}, _with_cli(ctx, script))
    assert await asyncio.gather(*dev_module._drain_tasks) == [0]

    assert response.body.startswith("🚀 **Adobe I/O App Development Server Started Successfully!**")
    assert "- -> https://localhost:9080/api/v1/web/starter-kit/info" in response.body
    assert "- -> starter-kit/publish" in response.body


@pytest.mark.asyncio
@pytest.mark.skipif(os.name == "nt", reason="shebang scripts")
async def test_app_dev_startup_failure(monkeypatch, tmp_path: Path, ctx: HandlerContext) -> None:
    async def not_running(port):
        return False

    monkeypatch.setattr(dev_module, "check_dev_server", not_running)
    script = _fake_cli(tmp_path, "sys.stderr.write('Error: listen EADDRINUSE :::9080')\nsys.exit(1)")

    response = await handle_app_dev({}, _with_cli(ctx, script))

    assert response.body.startswith("❌ **Failed to start Adobe I/O App development server!**")
    assert "EADDRINUSE" in response.body
    assert "💡 **Port Conflict**" in response.body


@pytest.mark.asyncio
@pytest.mark.skipif(os.name == "nt", reason="shebang scripts")
async def test_app_dev_exit_before_ready(monkeypatch, tmp_path: Path, ctx: HandlerContext) -> None:
    async def not_running(port):
        return False

    monkeypatch.setattr(dev_module, "check_dev_server", not_running)
    script = _fake_cli(tmp_path, "print('nothing to run')")

    response = await handle_app_dev({}, _with_cli(ctx, script))

    assert response.body.startswith("⚠️ **Development server exited before it was ready**")
    assert "nothing to run" in response.body


@pytest.mark.asyncio
async def test_app_dev_missing_binary(monkeypatch, tmp_path: Path, ctx: HandlerContext) -> None:
    _mock_dev_server(monkeypatch, _refuse)

    response = await handle_app_dev({}, _with_cli(ctx, tmp_path / "no-such-aio"))

    assert response.body.startswith("❌ **Process Error**")


# ============ aio-dev-invoke ============


@pytest.mark.asyncio
async def test_invoke_requires_running_server(monkeypatch, ctx: HandlerContext) -> None:
    _mock_dev_server(monkeypatch, _refuse)

    response = await handle_dev_invoke({"actionName": "starter-kit/info"}, ctx)

    assert response.body.startswith("❌ **Development Server Not Running**")


@pytest.mark.asyncio
async def test_invoke_requires_action_name(monkeypatch, ctx: HandlerContext) -> None:
    _mock_dev_server(monkeypatch, lambda request: httpx.Response(401))

    response = await handle_dev_invoke({"method": "POST"}, ctx)

    assert response.body.startswith("❌ **Missing Required Parameter**")


@pytest.mark.asyncio
async def test_invoke_action(monkeypatch, ctx: HandlerContext) -> None:
    seen = _mock_dev_server(monkeypatch, lambda request: httpx.Response(200, json={"ok": True}))

    response = await handle_dev_invoke(
        {"actionName": "starter-kit/info", "parameters": {"name": "test"}, "method": "POST", "port": 9999}, ctx
    )

    invocation = seen[-1]
    assert invocation.method == "POST"
    assert str(invocation.url) == "https://localhost:9999/api/v1/web/starter-kit/info"
    assert invocation.content == b'{"name": "test"}'
    assert response.body.startswith("✅ **Action Invocation Success**")
    assert '"ok": true' in response.body


@pytest.mark.asyncio
async def test_invoke_failure_status(monkeypatch, ctx: HandlerContext) -> None:
    _mock_dev_server(monkeypatch, lambda request: httpx.Response(500, text="boom"))

    response = await handle_dev_invoke({"actionName": "starter-kit/info", "method": "GET"}, ctx)

    assert response.body.startswith("❌ **Action Invocation Failed**")
    assert "500 Internal Server Error" in response.body


@pytest.mark.asyncio
async def test_discover_actions_from_config(monkeypatch, ctx: HandlerContext) -> None:
    (ctx.project_root / "app.config.yaml").write_text(
        "application:\n"
        "  runtimeManifest:\n"
        "    packages:\n"
        "      starter-kit:\n"
        "        actions:\n"
        "          info:\n"
        "            function: info.js\n"
        "          gone:\n"
        "            function: gone.js\n"
    )

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404 if request.url.path.endswith("/gone") else 401)

    _mock_dev_server(monkeypatch, handler)

    response = await handle_dev_invoke({"discoverActions": True}, ctx)

    assert "✅ **Found 1 available actions** on port 9080" in response.body
    assert "- starter-kit/info" in response.body
    assert "Parsed from app.config.yaml" in response.body


@pytest.mark.asyncio
async def test_discover_falls_back_to_common_actions(monkeypatch, ctx: HandlerContext) -> None:
    _mock_dev_server(monkeypatch, lambda request: httpx.Response(404))

    response = await handle_dev_invoke({"discoverActions": True}, ctx)

    assert "❌ **No actions found** on port 9080" in response.body


@pytest.mark.asyncio
async def test_wait_for_server_ready(monkeypatch) -> None:
    responses = iter([httpx.Response(503), httpx.Response(401)])
    _mock_dev_server(monkeypatch, lambda request: next(responses))

    assert await devserver.wait_for_server_ready(9080, attempts=3, interval=0)


@pytest.mark.asyncio
async def test_wait_for_server_gives_up(monkeypatch) -> None:
    _mock_dev_server(monkeypatch, _refuse)

    assert not await devserver.wait_for_server_ready(9080, attempts=2, interval=0)


@pytest.mark.asyncio
async def test_invoke_explicit_port_zero_is_used(monkeypatch, ctx: HandlerContext) -> None:
    seen = _mock_dev_server(monkeypatch, lambda request: httpx.Response(200, json={}))

    response = await handle_dev_invoke({"actionName": "starter-kit/info", "port": 0}, ctx)

    assert "- **URL**: https://localhost:0/api/v1/web/starter-kit/info" in response.body
    assert all(":9080" not in str(request.url) for request in seen)
