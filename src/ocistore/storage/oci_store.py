"""
OCI registry backed object store.

Maps content-addressed objects onto an OCI repository: every object is pushed
as a blob, bound to a tag through a single-layer image manifest, and read back
by resolving the tag to its manifest and the manifest to its layer blob.
"""
from __future__ import annotations

import logging
from typing import List, Mapping, Optional

import httpx

from ..settings import Settings, create_settings_from_config
from .base import ByteRange, Mode
from .keyspace import (
    StorageResource,
    config_tag,
    key_from_tag,
    prefix_for,
    resource_tag,
)
from .models import Descriptor, Manifest
from .oci_errors import OciManifestError
from .oci_media_types import OCI_EMPTY_CONFIG_BYTES, OCI_GENERIC_LAYER
from .registry_http import BlobReader, ByteStream, HeaderPairs, RegistryHTTP

logger = logging.getLogger(__name__)

STORE_TYPE = "oci"


class OciStore:
    """
    Object store on top of one OCI repository.

    The handle is immutable after construction and safe to share between
    callers. Operations do not coordinate with each other: two concurrent
    puts of the same key race at the registry and the last manifest wins.
    """

    def __init__(self, settings: Settings, *, auth: Optional[httpx.Auth] = None,
                 transport: Optional[httpx.BaseTransport] = None):
        """
        Initialize the store.

        Args:
            settings: Store configuration
            auth: Optional httpx auth flow for registries that require one
            transport: Optional transport override (used by tests)
        """
        self._settings = settings
        self._http = RegistryHTTP(
            settings.registry_url,
            settings.repository,
            verify=settings.tls_verify,
            timeout=settings.http_timeout_s,
            auth=auth,
            transport=transport,
            user_agent=settings.user_agent,
        )
        logger.debug(
            f"OCI store for {settings.repository} at {settings.registry_url}, "
            f"tls_verify: {settings.tls_verify}, timeout: {settings.http_timeout_s}"
        )

    @classmethod
    def from_config(cls, config: Mapping[str, str], **kwargs) -> OciStore:
        """
        Create a store from a host configuration map.

        Raises:
            OciConfigError: If the location is missing or malformed
        """
        return cls(create_settings_from_config(config), **kwargs)

    # Host lifecycle

    def create(self, config: bytes) -> None:
        """Persist the store configuration under the reserved tag."""
        self._put_by_tag(config_tag(), config)

    def open(self) -> bytes:
        """Read back the configuration written by create()."""
        with self._get_by_tag(config_tag()) as reader:
            return reader.read()

    @property
    def location(self) -> str:
        return self._settings.parsed.as_location()

    @property
    def origin(self) -> str:
        """Repository path inside the registry."""
        return self._settings.repository

    @property
    def root(self) -> str:
        """Registry origin URL."""
        return self._settings.registry_url

    @property
    def type(self) -> str:
        return STORE_TYPE

    def mode(self) -> Mode:
        return Mode.READ | Mode.WRITE

    def flags(self) -> int:
        return 0

    def size(self) -> int:
        # Registries expose no repository size
        return -1

    def ping(self) -> None:
        self._http.ping()

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> OciStore:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # Resource operations

    def list(self, resource: StorageResource) -> List[bytes]:
        return self._list_by_prefix(prefix_for(resource))

    def put(self, resource: StorageResource, key: bytes, data: ByteStream) -> int:
        tag = resource_tag(prefix_for(resource), key)
        return self._put_by_tag(tag, data)

    def get(self, resource: StorageResource, key: bytes,
            rng: Optional[ByteRange] = None) -> BlobReader:
        tag = resource_tag(prefix_for(resource), key)
        headers = [("Range", rng.header_value())] if rng is not None else None
        return self._get_by_tag(tag, headers)

    def delete(self, resource: StorageResource, key: bytes) -> None:
        tag = resource_tag(prefix_for(resource), key)
        self._delete_by_tag(tag)

    # Tag and manifest protocol

    def _put_by_tag(self, tag: str, data: ByteStream) -> int:
        """
        Upload a payload and bind it to a tag.

        The payload and the empty config are pushed as blobs first; the tag
        only becomes visible once the manifest PUT succeeds.

        Returns:
            Payload size in bytes
        """
        payload_digest, size = self._http.upload_blob(data)
        config_digest, _ = self._http.upload_blob(OCI_EMPTY_CONFIG_BYTES)

        manifest = Manifest.for_payload(
            Descriptor(media_type=OCI_GENERIC_LAYER, digest=payload_digest, size=size),
            config_digest,
        )
        self._http.put_manifest(tag, manifest)
        logger.info(f"Stored {tag} as {payload_digest} ({size} bytes)")
        return size

    def _get_by_tag(self, tag: str, headers: Optional[HeaderPairs] = None) -> BlobReader:
        """
        Open the payload bound to a tag.

        Raises:
            OciManifestError: If the manifest has no usable layer
            OciNotFound: If the tag or its blob does not exist
        """
        manifest = self._http.get_manifest(tag)
        if not manifest.layers:
            raise OciManifestError(f"manifest {tag} has no layers")
        layer = manifest.layers[0]
        if not layer.digest:
            raise OciManifestError(f"manifest {tag} layer digest missing")

        logger.debug(f"Resolved {tag} to blob {layer.digest}")
        return self._http.get_blob(layer.digest, headers)

    def _delete_by_tag(self, tag: str) -> None:
        # Registries delete manifests by digest only
        digest = self._http.head_manifest(tag)
        self._http.delete_manifest(digest)
        logger.info(f"Deleted {tag} (manifest {digest})")

    def _list_by_prefix(self, prefix: str) -> List[bytes]:
        tag_list = self._http.list_tags()
        keys = []
        for tag in tag_list.tags:
            key = key_from_tag(prefix, tag)
            if key is not None:
                keys.append(key)
        return keys


__all__ = ["OciStore", "STORE_TYPE"]
