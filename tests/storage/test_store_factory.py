"""
Tests for the scheme-based store factory.
"""
from __future__ import annotations

import pytest

from ocistore.storage.keyspace import StorageResource
from ocistore.storage.oci_errors import OciConfigError
from ocistore.storage.oci_store import OciStore
from ocistore.storage.store_factory import open_store, register, schemes


class TestOpenStore:

    def test_oci_registered(self):
        assert "oci" in schemes()

    def test_opens_oci_store(self):
        store = open_store({"location": "oci://localhost:5000/demo"})
        try:
            assert isinstance(store, OciStore)
            assert store.location == "oci://localhost:5000/demo"
        finally:
            store.close()

    def test_forwards_keyword_arguments(self, registry):
        """Test that extra arguments reach the registered factory."""
        with open_store({"location": "oci://localhost:5000/demo"},
                        transport=registry.transport()) as store:
            store.put(StorageResource.LOCK, bytes(32), b"held")
            assert store.list(StorageResource.LOCK) == [bytes(32)]
        assert registry.methods()[-1] == "GET"

    def test_missing_location(self):
        with pytest.raises(OciConfigError, match="location is required"):
            open_store({})

    def test_unknown_scheme(self):
        with pytest.raises(OciConfigError, match="Unknown store scheme: s3"):
            open_store({"location": "s3://bucket/prefix"})

    def test_duplicate_registration(self):
        with pytest.raises(ValueError, match="already registered"):
            register("oci", OciStore.from_config)
