"""
OCI media types and constants.

Single source of truth for all OCI-related media types and constants.
"""
from __future__ import annotations

# Manifest types
OCI_IMAGE_MANIFEST = "application/vnd.oci.image.manifest.v1+json"
DOCKER_MANIFEST_V2 = "application/vnd.docker.distribution.manifest.v2+json"

# Registries may serve either form for the same tag
ACCEPTED_MANIFEST_TYPES = [OCI_IMAGE_MANIFEST, DOCKER_MANIFEST_V2]
MANIFEST_ACCEPT_HEADER = ", ".join(ACCEPTED_MANIFEST_TYPES)

OCI_IMAGE_CONFIG = "application/vnd.oci.image.config.v1+json"
OCI_GENERIC_LAYER = "application/octet-stream"

# Empty config for minimal OCI images (always {})
OCI_EMPTY_CONFIG_BYTES = b"{}"
OCI_EMPTY_CONFIG_DIGEST = "sha256:44136fa355b3678a1146ad16f7e8649e94fb4fc21fe77e8310c060f61caaff8a"
OCI_EMPTY_CONFIG_SIZE = 2

DIGEST_ALGORITHM = "sha256"
MANIFEST_SCHEMA_VERSION = 2


__all__ = [
    "OCI_IMAGE_MANIFEST",
    "DOCKER_MANIFEST_V2",
    "ACCEPTED_MANIFEST_TYPES",
    "MANIFEST_ACCEPT_HEADER",
    "OCI_IMAGE_CONFIG",
    "OCI_GENERIC_LAYER",
    "OCI_EMPTY_CONFIG_BYTES",
    "OCI_EMPTY_CONFIG_DIGEST",
    "OCI_EMPTY_CONFIG_SIZE",
    "DIGEST_ALGORITHM",
    "MANIFEST_SCHEMA_VERSION",
]
