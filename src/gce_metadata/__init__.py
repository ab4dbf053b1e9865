from gce_metadata.core.client import DEFAULT_TIMEOUT, METADATA_ROOT, MetadataClient
from gce_metadata.core.exceptions import (
    EmptyResponse,
    InvalidResponse,
    MetadataError,
    ReadFailure,
    TransportError,
)
from gce_metadata.core.metadata import (
    cluster,
    detect_project_id,
    get,
    instance,
    on_gce,
    private_ipv4,
    project,
    public_ipv4,
    zone,
)
from gce_metadata.otel_setup import configure_tracing

__all__ = [
    "DEFAULT_TIMEOUT",
    "METADATA_ROOT",
    "MetadataClient",
    "MetadataError",
    "TransportError",
    "InvalidResponse",
    "ReadFailure",
    "EmptyResponse",
    "get",
    "instance",
    "project",
    "zone",
    "cluster",
    "private_ipv4",
    "public_ipv4",
    "detect_project_id",
    "on_gce",
    "configure_tracing",
]
