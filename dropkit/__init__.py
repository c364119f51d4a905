"""dropkit - DigitalOcean compute through a portable async API.

Example:

    from dropkit import DigitalOcean, DigitalOceanComputeService, setup_logging, LogConfig

    setup_logging(LogConfig(level="DEBUG", console=True))

    async with DigitalOceanComputeService(DigitalOcean()) as compute:
        images = await compute.list_images()
        node = await compute.create_node("web", template)
        snapshot = await compute.image_extension.create_image_from_node("web-snap", node.id)
"""

# Portable compute model
from dropkit.compute import (
    CloneImageTemplate,
    GroupNamingConvention,
    Hardware,
    Image,
    Location,
    LoginCredentials,
    NodeMetadata,
    NodeStatus,
    Template,
    TemplateOptions,
)

# Configuration
from dropkit.config import load_config, resolve_logging, resolve_provider

# Exceptions
from dropkit.core.exceptions import (
    AuthorizationError,
    ConfigurationError,
    DropkitError,
    KeyFormatError,
    NoSuchElementError,
    NotFoundError,
    OperationFailedError,
    ProviderError,
    TimeoutError,
    TransportError,
)

# Logging
from dropkit.observability.logging import LogConfig, setup_logging, teardown_logging

# Provider
from dropkit.providers.digitalocean import DigitalOcean, Polling, Timeouts
from dropkit.providers.digitalocean.service import DigitalOceanComputeService

__version__ = "0.1.0"

__all__ = [
    "AuthorizationError",
    "CloneImageTemplate",
    "ConfigurationError",
    "DigitalOcean",
    "DigitalOceanComputeService",
    "DropkitError",
    "GroupNamingConvention",
    "Hardware",
    "Image",
    "KeyFormatError",
    "Location",
    "LogConfig",
    "LoginCredentials",
    "NoSuchElementError",
    "NodeMetadata",
    "NodeStatus",
    "NotFoundError",
    "OperationFailedError",
    "Polling",
    "ProviderError",
    "Template",
    "TemplateOptions",
    "Timeouts",
    "TimeoutError",
    "TransportError",
    "load_config",
    "resolve_logging",
    "resolve_provider",
    "setup_logging",
    "teardown_logging",
]
