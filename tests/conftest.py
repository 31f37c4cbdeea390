from pathlib import Path

import pytest

from aio_mcp.config import PACKAGE_DIR, Settings
from aio_mcp.engine.handlers import HandlerContext
from aio_mcp.mcp import SchemaStore

from .helpers import EXAMPLE_TOOL, write_descriptor


@pytest.fixture
def schemas_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "schemas"
    directory.mkdir()
    write_descriptor(directory, "example-tool.json", EXAMPLE_TOOL)
    return directory


@pytest.fixture
async def example_store(schemas_dir: Path) -> SchemaStore:
    store = SchemaStore(schemas_dir)
    await store.load()
    return store


@pytest.fixture
async def bundled_store() -> SchemaStore:
    store = SchemaStore(PACKAGE_DIR / "schemas")
    await store.load()
    return store


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    root = tmp_path / "app"
    root.mkdir()
    (root / "app.config.yaml").write_text("application: {}\n", encoding="utf-8")
    return root


@pytest.fixture
def test_settings(project_root: Path) -> Settings:
    return Settings(
        project_root=project_root,
        docs_worker_url="https://docs.example.test",
        search_results_count=5,
        dev_server_port=9080,
        dev_server_ready_attempts=1,
        dev_server_poll_interval=0,
        dev_server_settle_delay=0,
    )


@pytest.fixture
def ctx(project_root: Path, test_settings: Settings) -> HandlerContext:
    return HandlerContext(project_root=project_root, settings=test_settings)
