"""
Pydantic configuration models for file-system backends.

Validates backend configs once, when the adapter is built, instead of
looking settings up lazily on every call with scattered defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .exceptions import ConfigurationError


@dataclass(frozen=True)
class ConfigEntry:
    """Declaration of a single configuration setting."""

    name: str
    required: bool
    label: str | None = None
    description: str | None = None
    default: Any = None


class CosFileSystemConfig(BaseModel):
    """Configuration for the Tencent COS file system.

    Credentials, region and bucket are resolved in order:
    1. Explicit values passed in the config dict.
    2. Environment variables (COS_SECRET_ID, COS_SECRET_KEY, COS_REGION, COS_BUCKET).

    Timeouts are in seconds; ``timeout`` bounds each read and
    ``connect_timeout`` bounds connection setup.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    secret_id: str = Field(
        title="SecretId",
        description="API key id, see https://console.cloud.tencent.com/cam/capi",
    )
    secret_key: str = Field(
        title="SecretKey",
        description="API key secret, see https://console.cloud.tencent.com/cam/capi",
    )
    bucket: str = Field(title="Bucket", description="Bucket name in BucketName-APPID form")
    region: str = Field(title="Region", description="Region the bucket belongs to (e.g. 'ap-guangzhou')")
    base_url: str = Field(
        title="Base URL",
        description="e.g. https://files.example.com; not used by the COS URL builder",
    )
    sub_path: str | None = Field(default=None, title="Sub path", description="Key prefix, e.g. a/b/")
    scheme: str = Field(
        default="https", alias="schema", title="Scheme", description="http or https"
    )
    timeout: float = Field(default=600, gt=0, title="Request timeout", description="Seconds")
    connect_timeout: float = Field(default=60, gt=0, title="Connect timeout", description="Seconds")
    proxy: str | None = Field(default=None, title="Proxy", description="e.g. http://host:port")

    @model_validator(mode="before")
    @classmethod
    def resolve_from_env(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Fall back to environment variables for missing credentials."""
        env_map = {
            "secret_id": "COS_SECRET_ID",
            "secret_key": "COS_SECRET_KEY",
            "region": "COS_REGION",
            "bucket": "COS_BUCKET",
        }
        for field, env_var in env_map.items():
            if not values.get(field) and os.environ.get(env_var):
                values[field] = os.environ[env_var]
        return values

    def get_value(self, name: str, default: Any = None, required: bool = True) -> Any:
        """Return a setting by name.

        Args:
            name: Setting name (field name or its alias, e.g. ``"schema"``).
            default: Returned when the setting is unset and not required.
            required: Whether an unset value is an error.

        Raises:
            ConfigurationError: If the setting is unset and required.
        """
        field = _FIELD_BY_ALIAS.get(name, name)
        value = getattr(self, field, None) if field in type(self).model_fields else None
        if value is None or value == "":
            if required:
                raise ConfigurationError(f"Missing required setting '{name}'.")
            return default
        return value


_FIELD_BY_ALIAS = {
    info.alias: name for name, info in CosFileSystemConfig.model_fields.items() if info.alias
}


def config_template(model: type[BaseModel]) -> tuple[ConfigEntry, ...]:
    """Describe the settings a config model declares.

    Args:
        model: A config model class, e.g. :class:`CosFileSystemConfig`.

    Returns:
        One :class:`ConfigEntry` per field, in declaration order.
    """
    entries = []
    for name, info in model.model_fields.items():
        required = info.is_required()
        entries.append(
            ConfigEntry(
                name=info.alias or name,
                required=required,
                label=info.title,
                description=info.description,
                default=None if required else info.default,
            )
        )
    return tuple(entries)


# Map provider names to their config models for dynamic validation
CONFIG_REGISTRY: dict[str, type[BaseModel]] = {
    "cos": CosFileSystemConfig,
}


def validate_config(provider: str, config: dict) -> BaseModel:
    """Validate and return a typed config model for the given provider.

    Args:
        provider: The storage provider name (e.g. 'cos').
        config: Raw configuration dictionary.

    Returns:
        A validated Pydantic config model.

    Raises:
        ValueError: If the provider is unknown.
        ConfigurationError: If the config is missing settings or is invalid.
    """
    model = CONFIG_REGISTRY.get(provider)
    if model is None:
        raise ValueError(f"No config model registered for provider: {provider}")
    try:
        return model(**config)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration for provider '{provider}': {e}") from e


__all__ = [
    "ConfigEntry",
    "CosFileSystemConfig",
    "CONFIG_REGISTRY",
    "config_template",
    "validate_config",
]
