from typing import Optional

from gce_metadata.core.client import MetadataClient
from gce_metadata.core.exceptions import MetadataError
from gce_metadata.core.logger import logger

_default_client = MetadataClient()


def _client(client: Optional[MetadataClient]) -> MetadataClient:
    return client if client is not None else _default_client


def get(url: str, *, client: Optional[MetadataClient] = None) -> str:
    """Reads an absolute metadata URL and returns the body as text."""
    return _client(client).get(url)


def instance(*, client: Optional[MetadataClient] = None) -> str:
    """Returns the instance id of the current instance."""
    hostname = _client(client).fetch("instance/hostname")
    # instance/id is numeric; the id we want is the host label of the hostname.
    return hostname.split(".")[0]


def project(*, client: Optional[MetadataClient] = None) -> str:
    """Returns the project id of the current instance."""
    return _client(client).fetch("instance/project-id")


def zone(*, client: Optional[MetadataClient] = None) -> str:
    """Returns the zone of the current instance, e.g. ``us-central1-a``."""
    z = _client(client).fetch("instance/zone")
    # The server answers projects/<number>/zones/<zone>
    return z.split("/")[-1]


def cluster(*, client: Optional[MetadataClient] = None) -> str:
    """Returns the cluster-name attribute of the current instance."""
    return _client(client).fetch("instance/attributes/cluster-name")


def private_ipv4(*, client: Optional[MetadataClient] = None) -> str:
    return _client(client).fetch("instance/network-interfaces/0/ip")


def public_ipv4(*, client: Optional[MetadataClient] = None) -> str:
    return _client(client).fetch(
        "instance/network-interfaces/0/access-configs/0/external-ip"
    )


def detect_project_id(*, client: Optional[MetadataClient] = None) -> Optional[str]:
    """
    Detects the GCP Project ID from the metadata server.
    Returns None when not running on GCP or the server is unreachable.
    """
    try:
        return project(client=client)
    except MetadataError as e:
        logger.debug(f"Project ID not available from metadata server: {e}")
        return None


def on_gce(*, client: Optional[MetadataClient] = None) -> bool:
    """Returns whether the metadata server answers, i.e. we run on GCE."""
    try:
        _client(client).fetch("instance/id")
    except MetadataError as e:
        logger.debug(f"Metadata server check failed: {e}")
        return False
    return True
