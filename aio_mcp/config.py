"""Configuration for the Adobe I/O MCP server.

Values come from environment variables (or a local .env file). Most use the
AIO_MCP_ prefix; the documentation worker URL, result count and dev server
port keep the names the Adobe tooling already uses.
"""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent

DEFAULT_DOCS_WORKER_URL = "https://commerce-documentation-rag-service.apimesh-adobe-test.workers.dev"


class Settings(BaseSettings):
    """Server settings loaded from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="AIO_MCP_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    # Server identity (answered on MCP initialize)
    server_name: str = "adobe-io-tools"
    protocol_version: str = "2024-11-05"

    # Transport
    transport: Literal["stdio", "http"] = "stdio"
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    # Tool descriptors
    schemas_dir: Path = PACKAGE_DIR / "schemas"

    # External commands
    aio_command: str = "aio"
    npm_command: str = "npm"

    # Working directory checked for app.config.yaml (None = process cwd)
    project_root: Path | None = None

    # Documentation search
    docs_worker_url: str = Field(
        default=DEFAULT_DOCS_WORKER_URL,
        validation_alias=AliasChoices("CLOUDFLARE_WORKER_URL", "AIO_MCP_DOCS_WORKER_URL"),
    )
    search_results_count: int = Field(
        default=5,
        ge=1,
        validation_alias=AliasChoices("SEARCH_RESULTS_COUNT", "AIO_MCP_SEARCH_RESULTS_COUNT"),
    )

    # Local `aio app dev` server
    dev_server_port: int = Field(
        default=9080,
        validation_alias=AliasChoices("SERVER_DEFAULT_PORT", "AIO_MCP_DEV_SERVER_PORT"),
    )
    dev_server_ready_attempts: int = 30
    dev_server_poll_interval: float = 1.0
    dev_server_settle_delay: float = 2.0

    # Outbound HTTP calls made by handlers
    http_timeout: float = 30.0

    def resolve_project_root(self) -> Path:
        """Directory handlers treat as the Adobe I/O App project root."""
        return self.project_root if self.project_root is not None else Path.cwd()


settings = Settings()
