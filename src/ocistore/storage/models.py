"""
Wire models for OCI distribution documents.

These Pydantic models describe the JSON documents exchanged with the
registry: content descriptors, image manifests, and tag listings.
"""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .oci_media_types import (
    MANIFEST_SCHEMA_VERSION,
    OCI_EMPTY_CONFIG_SIZE,
    OCI_GENERIC_LAYER,
    OCI_IMAGE_CONFIG,
    OCI_IMAGE_MANIFEST,
)


class Descriptor(BaseModel):
    """Content descriptor: media type, digest and size of one blob."""
    model_config = ConfigDict(populate_by_name=True)

    media_type: str = Field(default=OCI_GENERIC_LAYER, alias="mediaType", description="Blob media type")
    digest: str = Field(default="", description="Content digest (sha256:...)")
    size: int = Field(default=0, description="Blob size in bytes")


class Manifest(BaseModel):
    """
    OCI image manifest.

    Manifests written by this client always carry the empty JSON config and
    exactly one layer holding the payload. Manifests read back may come from
    any registry, so only the fields needed to locate the payload are enforced
    by the caller.
    """
    model_config = ConfigDict(populate_by_name=True)

    schema_version: int = Field(default=MANIFEST_SCHEMA_VERSION, alias="schemaVersion")
    media_type: Optional[str] = Field(default=OCI_IMAGE_MANIFEST, alias="mediaType")
    config: Optional[Descriptor] = Field(default=None, description="Config blob descriptor")
    layers: List[Descriptor] = Field(default_factory=list, description="Layer descriptors")

    @classmethod
    def for_payload(cls, payload: Descriptor, config_digest: str) -> Manifest:
        """Build the single-layer manifest binding a payload blob to a tag."""
        return cls(
            schema_version=MANIFEST_SCHEMA_VERSION,
            media_type=OCI_IMAGE_MANIFEST,
            config=Descriptor(
                media_type=OCI_IMAGE_CONFIG,
                digest=config_digest,
                size=OCI_EMPTY_CONFIG_SIZE,
            ),
            layers=[payload],
        )

    def to_json_bytes(self) -> bytes:
        return self.model_dump_json(by_alias=True).encode("utf-8")


class TagList(BaseModel):
    """Response body of ``GET /v2/<repo>/tags/list``."""
    name: str = Field(default="", description="Repository name")
    tags: List[str] = Field(default_factory=list, description="Tags in the repository")

    @field_validator("tags", mode="before")
    @classmethod
    def null_tags_as_empty(cls, v):
        # Registries report a repository without tags as "tags": null
        return [] if v is None else v


__all__ = ["Descriptor", "Manifest", "TagList"]
