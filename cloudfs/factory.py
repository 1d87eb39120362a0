"""File-system backend factory.

Provides :func:`filesystem_factory`, the single entry-point for creating
file-system adapters.  The function dispatches to provider-specific
registries based on ``provider`` and returns a
:class:`~cloudfs.base.FileSystemBlueprint`.
"""

from cloudfs.base import FileSystemBlueprint, existing_providers
from cloudfs.base.config import validate_config
from cloudfs.cos.factory import SERVICE_REGISTRY as COS_SERVICES


# Nested factory registry: provider -> service registry
_FACTORY_REGISTRY: dict[str, dict[str, type]] = {
    "cos": COS_SERVICES,
}


def filesystem_factory(provider: existing_providers, config: dict) -> FileSystemBlueprint:
    """
    Create a file-system adapter for a storage provider.
    Args:
        provider: The storage provider (e.g., 'cos').
        config: Configuration dictionary to initialize the adapter.
    Returns:
        An adapter implementing FileSystemBlueprint.  No connection is
        made until its first operation.
    Raises:
        ValueError: If the provider is not supported.
        ConfigurationError: If the config is invalid.
    """
    if provider not in _FACTORY_REGISTRY:
        raise ValueError(f"Unsupported storage provider: {provider}")

    service_class = _FACTORY_REGISTRY[provider]["filesystem"]
    config_obj = validate_config(provider, config)
    return service_class(config_obj)
