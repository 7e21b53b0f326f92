"""
Tests for the tag key-space.
"""
from __future__ import annotations

import pytest

from ocistore.storage.keyspace import (
    CONFIG_TAG,
    StorageResource,
    config_tag,
    key_from_tag,
    prefix_for,
    resource_tag,
)
from ocistore.storage.oci_errors import UnsupportedOperation

KEY = bytes(range(32))


class TestPrefixes:

    def test_resource_prefixes(self):
        assert prefix_for(StorageResource.PACKFILE) == "packfiles-"
        assert prefix_for(StorageResource.STATE) == "state-"
        assert prefix_for(StorageResource.LOCK) == "locks-"

    @pytest.mark.parametrize("resource", ["state", "", None, object()])
    def test_unknown_resource(self, resource):
        with pytest.raises(UnsupportedOperation):
            prefix_for(resource)


class TestTags:

    def test_resource_tag_lowercase_hex(self):
        tag = resource_tag("state-", b"\xab" * 32)
        assert tag == "state-" + "ab" * 32

    def test_resource_tag_rejects_wrong_length(self):
        with pytest.raises(ValueError, match="32 bytes"):
            resource_tag("state-", b"\x00" * 31)

    def test_resource_tag_rejects_non_bytes(self):
        with pytest.raises(TypeError):
            resource_tag("state-", "00" * 32)

    def test_config_tag_is_reserved_literal(self):
        assert config_tag() == CONFIG_TAG == "CONFIG"

    def test_key_from_tag(self):
        assert key_from_tag("locks-", resource_tag("locks-", KEY)) == KEY

    def test_key_from_tag_accepts_uppercase_hex(self):
        assert key_from_tag("locks-", "locks-" + KEY.hex().upper()) == KEY

    @pytest.mark.parametrize("tag", [
        "CONFIG",
        "state-" + KEY.hex(),
        "locks-",
        "locks-zz" + KEY.hex()[2:],
        "locks-" + KEY.hex()[:-2],
        "locks-" + KEY.hex() + "00",
        "locks-" + KEY.hex()[:-1],
    ])
    def test_key_from_tag_rejects(self, tag):
        assert key_from_tag("locks-", tag) is None

    def test_config_never_decodes_even_with_empty_prefix(self):
        assert key_from_tag("", "CONFIG") is None
