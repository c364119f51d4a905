"""Portable compute model shared by every provider."""

from .model import (
    CloneImageTemplate,
    Hardware,
    Image,
    ImageStatus,
    Location,
    LocationScope,
    LoginCredentials,
    NodeAndInitialCredentials,
    NodeMetadata,
    NodeStatus,
    OperatingSystem,
    OsFamily,
    Processor,
    Template,
    TemplateOptions,
)
from .naming import GroupNamingConvention
from .protocols import ComputeServiceAdapter, ImageExtension

__all__ = [
    "CloneImageTemplate",
    "ComputeServiceAdapter",
    "GroupNamingConvention",
    "Hardware",
    "Image",
    "ImageExtension",
    "ImageStatus",
    "Location",
    "LocationScope",
    "LoginCredentials",
    "NodeAndInitialCredentials",
    "NodeMetadata",
    "NodeStatus",
    "OperatingSystem",
    "OsFamily",
    "Processor",
    "Template",
    "TemplateOptions",
]
