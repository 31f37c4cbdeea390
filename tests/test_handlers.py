import json
from pathlib import Path

import pytest

from aio_mcp.engine.handlers import (
    HandlerContext,
    handle_app_deploy,
    handle_app_use,
    handle_commerce_event_subscribe,
    handle_configure_global,
    handle_login,
    handle_onboard,
    handle_where,
)
from aio_mcp.engine.handlers import app as app_module
from aio_mcp.engine.handlers import auth as auth_module
from aio_mcp.engine.handlers import scripts as scripts_module
from aio_mcp.engine.handlers.app import build_deploy_args
from aio_mcp.engine.handlers.auth import DEPLOY_CONFIRMATION

from .helpers import FakeExecutor, failed, ok


@pytest.fixture
def fake_exec(monkeypatch) -> FakeExecutor:
    executor = FakeExecutor()
    for module in (auth_module, app_module, scripts_module):
        monkeypatch.setattr(module, "execute_command", executor)
    return executor


@pytest.fixture
def no_project_ctx(tmp_path: Path, test_settings) -> HandlerContext:
    empty = tmp_path / "empty"
    empty.mkdir()
    return HandlerContext(project_root=empty, settings=test_settings)


def _write_package(root: Path, scripts: dict) -> None:
    (root / "package.json").write_text(json.dumps({"name": "app", "scripts": scripts}), encoding="utf-8")


# ============ AUTH ============


@pytest.mark.asyncio
async def test_login_builds_flags(fake_exec: FakeExecutor, ctx: HandlerContext) -> None:
    fake_exec.results = [ok("logged in")]

    response = await handle_login(
        {"force": True, "context": "prod", "openBrowser": False, "verbose": True}, ctx
    )

    assert fake_exec.calls == [("aio", ["login", "-f", "-c", "prod", "--no-open", "-v"])]
    assert response.body.startswith("✅ Adobe I/O login completed successfully!")
    assert "📋 Command: aio login -f -c prod --no-open -v" in response.body
    assert "logged in" in response.body


@pytest.mark.asyncio
async def test_login_default_opens_browser(fake_exec: FakeExecutor, ctx: HandlerContext) -> None:
    await handle_login({"openBrowser": True, "verbose": False}, ctx)

    assert fake_exec.calls == [("aio", ["login"])]


@pytest.mark.asyncio
async def test_login_failure_includes_stderr(fake_exec: FakeExecutor, ctx: HandlerContext) -> None:
    fake_exec.results = [failed("token expired")]

    response = await handle_login({}, ctx)

    assert response.body.startswith("❌ Adobe I/O login failed!")
    assert "📄 Error:\ntoken expired" in response.body


@pytest.mark.asyncio
async def test_where_asks_for_deploy_confirmation(fake_exec: FakeExecutor, ctx: HandlerContext) -> None:
    fake_exec.results = [ok("Org: Acme")]

    response = await handle_where({"verbose": True}, ctx)

    assert fake_exec.calls == [("aio", ["where"])]
    assert "Org: Acme" in response.body
    assert response.body.endswith(DEPLOY_CONFIRMATION)


@pytest.mark.asyncio
async def test_configure_global_select_requires_name(fake_exec: FakeExecutor, ctx: HandlerContext) -> None:
    response = await handle_configure_global({"action": "select-project"}, ctx)

    assert "Project name is required for 'select-project' action" in response.body
    assert fake_exec.calls == []


@pytest.mark.asyncio
async def test_configure_global_select(fake_exec: FakeExecutor, ctx: HandlerContext) -> None:
    response = await handle_configure_global(
        {"action": "select-workspace", "workspace": "Stage", "verbose": True}, ctx
    )

    assert fake_exec.calls == [("aio", ["console", "workspace", "select", "Stage", "--verbose"])]
    assert response.body.startswith("✅ **Workspace Selected:** Stage")


@pytest.mark.asyncio
async def test_configure_global_show_current_has_no_verbose(
    fake_exec: FakeExecutor, ctx: HandlerContext
) -> None:
    response = await handle_configure_global({"action": "show-current", "verbose": True}, ctx)

    assert fake_exec.calls == [("aio", ["where"])]
    assert response.body.startswith("📋 **Current Configuration:**")


@pytest.mark.asyncio
async def test_configure_global_failure(fake_exec: FakeExecutor, ctx: HandlerContext) -> None:
    fake_exec.results = [failed("not logged in")]

    response = await handle_configure_global({"action": "list-orgs"}, ctx)

    assert response.body.startswith("❌ **Configuration Change Failed!**")
    assert "not logged in" in response.body


# ============ APP ============


def test_build_deploy_args_precedence() -> None:
    args = build_deploy_args(
        {
            "action": "pkg/act",
            "skipBuild": True,
            "forceBuild": True,
            "skipStatic": True,
            "skipActions": True,
            "forceDeploy": True,
            "verbose": True,
        }
    )

    assert args == ["app", "deploy", "-a", "pkg/act", "--no-build", "--no-web-assets", "--no-actions", "--verbose"]


def test_build_deploy_args_force_flags() -> None:
    args = build_deploy_args({"forceBuild": True, "forceDeploy": True})

    assert args == ["app", "deploy", "--force-build", "--force-deploy"]


@pytest.mark.asyncio
async def test_project_tools_require_app_config(
    fake_exec: FakeExecutor, no_project_ctx: HandlerContext
) -> None:
    for handler in (handle_app_use, handle_app_deploy, handle_onboard):
        response = await handler({}, no_project_ctx)
        assert response.body.startswith("❌ Error: No app.config.yaml found in current directory")
    assert fake_exec.calls == []


@pytest.mark.asyncio
async def test_app_use(fake_exec: FakeExecutor, ctx: HandlerContext) -> None:
    response = await handle_app_use({"verbose": False}, ctx)

    assert fake_exec.calls == [("aio", ["app", "use", "--global", "--no-input"])]
    assert "Runtime Namespace Configured Successfully" in response.body


@pytest.mark.asyncio
async def test_deploy_success(fake_exec: FakeExecutor, ctx: HandlerContext) -> None:
    fake_exec.results = [ok("Org: Acme"), ok("Your deployed actions:\n -> pkg/act")]

    response = await handle_app_deploy({}, ctx)

    assert [args for _, args in fake_exec.calls] == [["where"], ["app", "deploy"]]
    assert response.body.startswith("✅ Adobe I/O App deployment completed successfully!")
    assert "Org: Acme" in response.body
    assert DEPLOY_CONFIRMATION not in response.body


@pytest.mark.asyncio
async def test_deploy_nothing_deployed(fake_exec: FakeExecutor, ctx: HandlerContext) -> None:
    fake_exec.results = [ok("Org: Acme"), ok("Building actions...")]

    response = await handle_app_deploy({"action": "pkg/missing"}, ctx)

    assert response.body.startswith("❌ **No actions were deployed!**")


@pytest.mark.asyncio
async def test_deploy_no_actions_marker_is_not_success(fake_exec: FakeExecutor, ctx: HandlerContext) -> None:
    fake_exec.results = [ok(), ok("No actions deployed for pkg\nSuccessful deployment")]

    response = await handle_app_deploy({}, ctx)

    assert response.body.startswith("❌ Adobe I/O App deployment failed!")


@pytest.mark.asyncio
async def test_deploy_failure_suggests_app_use(fake_exec: FakeExecutor, ctx: HandlerContext) -> None:
    fake_exec.results = [ok(), failed("missing Adobe I/O Runtime namespace")]

    response = await handle_app_deploy({}, ctx)

    assert response.body.startswith("❌ Adobe I/O App deployment failed!")
    assert "'aio-app-use' tool" in response.body


@pytest.mark.asyncio
async def test_deploy_stops_when_where_fails(fake_exec: FakeExecutor, ctx: HandlerContext) -> None:
    fake_exec.results = [failed("no config")]

    response = await handle_app_deploy({}, ctx)

    assert response.body.startswith("❌ Failed to get Adobe I/O configuration")
    assert len(fake_exec.calls) == 1


# ============ PROJECT SCRIPTS ============


@pytest.mark.asyncio
async def test_script_requires_package_json(fake_exec: FakeExecutor, ctx: HandlerContext) -> None:
    response = await handle_onboard({}, ctx)

    assert response.body.startswith("❌ Error: Could not read package.json")
    assert fake_exec.calls == []


@pytest.mark.asyncio
async def test_script_must_be_declared(fake_exec: FakeExecutor, ctx: HandlerContext) -> None:
    _write_package(ctx.project_root, {"build": "tsc"})

    response = await handle_commerce_event_subscribe({}, ctx)

    assert response.body.startswith("❌ Error: No 'commerce-event-subscribe' script found in package.json")
    assert fake_exec.calls == []


@pytest.mark.asyncio
async def test_onboard_runs_npm_script(fake_exec: FakeExecutor, ctx: HandlerContext) -> None:
    _write_package(ctx.project_root, {"onboard": "node scripts/onboarding"})
    fake_exec.results = [ok("done")]

    response = await handle_onboard({"verbose": True}, ctx)

    assert fake_exec.calls == [("npm", ["run", "onboard", "--verbose"])]
    assert response.body.startswith("✅ **Adobe I/O App Onboarding Completed Successfully!**")
    assert "📋 **Command:** npm run onboard --verbose" in response.body


@pytest.mark.asyncio
async def test_script_failure_falls_back_to_general_hint(fake_exec: FakeExecutor, ctx: HandlerContext) -> None:
    _write_package(ctx.project_root, {"commerce-event-subscribe": "node scripts/subscribe"})
    fake_exec.results = [failed("something odd happened")]

    response = await handle_commerce_event_subscribe({}, ctx)

    assert "Failed!**" in response.body
    assert "something odd happened" in response.body
    assert response.body.endswith(scripts_module.COMMERCE_EVENT_SUBSCRIBE.fallback_hint)
