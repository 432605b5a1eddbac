"""Configuration for gh-assistant.

Configuration is loaded from (highest priority first):
- keyword arguments (tests)
- environment variables prefixed with ``GH_ASSISTANT_``
- a local `.env` file (if present)
- the YAML file written by ``gh-assistant config`` (``~/.gh-assistant.yaml``)

The provider API keys also fall back to the conventional ``OPENAI_API_KEY`` and
``ANTHROPIC_API_KEY`` variables so an existing shell setup works unchanged.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".gh-assistant.yaml"
CONFIG_PATH_ENV = "GH_ASSISTANT_CONFIG"

SUPPORTED_PROVIDERS: tuple[str, ...] = ("openai", "anthropic")

# Keys persisted by `gh-assistant config`, in display order.
PERSISTED_KEYS: tuple[str, ...] = (
    "provider",
    "api_key",
    "model",
    "jira_url",
    "jira_email",
    "jira_token",
    "jira_project",
)

DEFAULT_TIMEOUT_SECONDS = 60.0


def config_path() -> Path:
    """Return the path of the persisted YAML configuration file."""

    override = os.environ.get(CONFIG_PATH_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / CONFIG_FILE_NAME


class LLMConfig(BaseModel):
    """Resolved settings for a commit message backend."""

    provider: Literal["openai", "anthropic"] = "openai"
    api_key: str = ""
    model: str | None = None
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)


class JiraConfig(BaseModel):
    """Resolved settings for the Jira ticket service."""

    base_url: str = ""
    email: str = ""
    api_token: str = ""
    project: str = ""
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)


class AssistantSettings(BaseSettings):
    """Settings for the push workflow.

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `AssistantSettings(_env_file=path_to_env)`.
    """

    provider: Literal["openai", "anthropic"] | None = Field(
        default=None,
        description="Commit message backend; inferred from the available API keys when unset",
    )
    api_key: str = Field(default="", description="API key for the selected provider")
    model: str = Field(default="", description="Model override (empty = provider default)")

    openai_api_key: str = Field(default="", validation_alias="OPENAI_API_KEY")
    anthropic_api_key: str = Field(default="", validation_alias="ANTHROPIC_API_KEY")

    jira_url: str = Field(
        default="", description="Jira base URL, e.g. https://yourcompany.atlassian.net"
    )
    jira_email: str = Field(default="", description="Jira account email")
    jira_token: str = Field(default="", description="Jira API token")
    jira_project: str = Field(default="", description="Jira project key, e.g. PROJ")

    log_level: str = Field(default="WARNING", description="Root logging level")

    model_config = SettingsConfigDict(
        env_prefix="GH_ASSISTANT_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=config_path()),
        )

    def resolved_provider(self) -> str:
        if self.provider:
            return self.provider
        if self.anthropic_api_key and not self.openai_api_key:
            return "anthropic"
        return "openai"

    def resolved_api_key(self) -> str:
        """Return the configured key, preferring the one matching the provider."""

        if self.api_key:
            return self.api_key
        if self.resolved_provider() == "anthropic":
            return self.anthropic_api_key or self.openai_api_key
        return self.openai_api_key or self.anthropic_api_key

    def llm_config(self) -> LLMConfig:
        return LLMConfig(
            provider=self.resolved_provider(),  # type: ignore[arg-type]
            api_key=self.resolved_api_key(),
            model=self.model or None,
        )

    def jira_config(self) -> JiraConfig:
        return JiraConfig(
            base_url=self.jira_url.rstrip("/"),
            email=self.jira_email,
            api_token=self.jira_token,
            project=self.jira_project,
        )


def load_persisted_config(path: Path | None = None) -> dict[str, object]:
    """Read the raw YAML mapping, or an empty dict if the file is absent."""

    target = path or config_path()
    if not target.exists():
        return {}
    raw = yaml.safe_load(target.read_text(encoding="utf-8"))
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"Configuration file {target} must contain a mapping")
    return raw


def save_config(updates: Mapping[str, str], path: Path | None = None) -> Path:
    """Merge `updates` into the persisted YAML file and return its path.

    The file holds credentials, so it is only readable by its owner.
    """

    target = path or config_path()
    data = load_persisted_config(target)
    data.update(updates)

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(yaml.safe_dump(data, sort_keys=True), encoding="utf-8")
    target.chmod(0o600)

    logger.info("Configuration saved", extra={"path": str(target), "keys": sorted(updates)})
    return target


def mask_secret(value: str) -> str:
    if not value:
        return ""
    if len(value) > 8:
        return f"{value[:4]}...{value[-4:]}"
    return "****"
