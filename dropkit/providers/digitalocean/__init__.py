"""DigitalOcean provider for dropkit (v1 API).

NOTE: Only config classes are imported at package level so that importing
the configuration does not open the HTTP stack. Everything else loads on
first access:

    from dropkit.providers.digitalocean import DigitalOcean, DigitalOceanComputeService

    async with DigitalOceanComputeService(DigitalOcean()) as compute:
        print(await compute.list_locations())

Environment Variables:
    DIGITALOCEAN_CLIENT_ID: Client id (required if not passed directly)
    DIGITALOCEAN_API_KEY: API key (required if not passed directly)
"""

from importlib import import_module

# Only config - no heavy dependencies
from .config import DigitalOcean, Polling, Timeouts

_LAZY = {
    "DigitalOceanClient": ".client",
    "EventKind": ".events",
    "EventPoller": ".events",
    "DigitalOceanComputeServiceAdapter": ".adapter",
    "DigitalOceanTemplateOptions": ".adapter",
    "DigitalOceanImageExtension": ".images",
    "DefaultCredentialsProvisioner": ".credentials",
    "DefaultImageCredentials": ".credentials",
    "DigitalOceanComputeService": ".service",
    "DigitalOceanModule": ".module",
}


# Lazy imports
def __getattr__(name: str):
    if name in _LAZY:
        return getattr(import_module(_LAZY[name], __name__), name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Config (always available)
    "DigitalOcean",
    "Polling",
    "Timeouts",
    # Lazy (loaded on demand)
    "DefaultCredentialsProvisioner",
    "DefaultImageCredentials",
    "DigitalOceanClient",
    "DigitalOceanComputeService",
    "DigitalOceanComputeServiceAdapter",
    "DigitalOceanImageExtension",
    "DigitalOceanModule",
    "DigitalOceanTemplateOptions",
    "EventKind",
    "EventPoller",
]
