"""Root settings for the export worker.

Precedence, highest first: constructor arguments, EXPORT_WORKER_*
environment variables (``__`` separates nested sections), the merged TOML
layers passed to Settings.from_toml(), model defaults.
"""

from contextvars import ContextVar
from typing import Any

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from export_worker.config.models.jobs import JobsConfig
from export_worker.config.models.observability import ObservabilityConfig
from export_worker.config.models.storage import StorageConfig

# TOML values visible to TomlLayerSource while Settings.from_toml() builds
_toml_layer: ContextVar[dict[str, Any]] = ContextVar("toml_layer")


class TomlLayerSource(PydanticBaseSettingsSource):
    """Settings source over the TOML layer set by Settings.from_toml()."""

    def get_field_value(
        self, field: Any, field_name: str  # noqa: ARG002
    ) -> tuple[Any, str, bool]:
        value = _toml_layer.get({}).get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        return dict(_toml_layer.get({}))


class Settings(BaseSettings):
    """Worker configuration: observability, the status store and the job queue."""

    model_config = SettingsConfigDict(
        env_prefix="EXPORT_WORKER_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Logging, tracing and metrics",
    )
    storage: StorageConfig = Field(
        default_factory=StorageConfig,
        description="Status store and queue introspection backends",
    )
    jobs: JobsConfig = Field(
        default_factory=JobsConfig,
        description="Hatchet connection and the batch export workflow",
    )

    @classmethod
    def from_toml(cls, config: dict[str, Any]) -> "Settings":
        """Build settings with config as the TOML layer."""
        token = _toml_layer.set(config)
        try:
            return cls()
        finally:
            _toml_layer.reset(token)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, env_settings, TomlLayerSource(settings_cls))
