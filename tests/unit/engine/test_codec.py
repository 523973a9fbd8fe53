"""Tests for NamespaceCodec."""

from __future__ import annotations

import pytest

from nscache_core.exceptions import InvalidKeyError
from nscache_engine.codec import NamespaceCodec


@pytest.fixture
def codec() -> NamespaceCodec:
    """Return a codec instance."""
    return NamespaceCodec()


@pytest.mark.unit
class TestEncode:
    """Test physical key derivation."""

    def test_layout(self, codec: NamespaceCodec) -> None:
        """Physical key is length-prefixed namespace plus key."""
        assert codec.encode("tenantA", "user:1") == "7:tenantA:user:1"

    def test_deterministic(self, codec: NamespaceCodec) -> None:
        """Same input always yields the same key, across instances."""
        assert codec.encode("ns", "k") == NamespaceCodec().encode("ns", "k")

    def test_namespaces_do_not_collide(self, codec: NamespaceCodec) -> None:
        """Identical logical keys differ across namespaces."""
        assert codec.encode("tenantA", "user:1") != codec.encode("tenantB", "user:1")

    def test_separator_in_namespace_does_not_collide(self, codec: NamespaceCodec) -> None:
        """('a:b', 'c') and ('a', 'b:c') map to different keys."""
        assert codec.encode("a:b", "c") != codec.encode("a", "b:c")

    def test_distinct_keys_distinct_physical(self, codec: NamespaceCodec) -> None:
        """Distinct keys in one namespace never share a physical key."""
        keys = ["", "a", "_a", "__a", "_metadata", "__metadata", "_metadata:a", "a:b", "a b"]
        physical = {codec.encode("ns", k) for k in keys}
        assert len(physical) == len(keys)

    def test_empty_key_allowed(self, codec: NamespaceCodec) -> None:
        """An empty logical key still encodes."""
        assert codec.encode("ns", "") == "2:ns:"

    def test_empty_namespace_rejected(self, codec: NamespaceCodec) -> None:
        """Empty namespace raises InvalidKeyError."""
        with pytest.raises(InvalidKeyError, match="namespace cannot be empty"):
            codec.encode("", "k")

    def test_non_string_key_rejected(self, codec: NamespaceCodec) -> None:
        """Non-string keys raise InvalidKeyError, which is also a ValueError."""
        with pytest.raises(ValueError, match="must be a string"):
            codec.encode("ns", 42)  # type: ignore[arg-type]


@pytest.mark.unit
class TestReservedKeys:
    """Test control keys and escaping of colliding caller keys."""

    def test_index_key(self, codec: NamespaceCodec) -> None:
        """Index lives at the bare marker."""
        assert codec.encode_index("ns") == "2:ns:_metadata"

    def test_metadata_key(self, codec: NamespaceCodec) -> None:
        """Metadata lives at marker + separator + key."""
        assert codec.encode_metadata("ns", "k") == "2:ns:_metadata:k"

    def test_marker_key_is_escaped(self, codec: NamespaceCodec) -> None:
        """A caller key equal to the marker cannot hit the index."""
        assert codec.encode("ns", "_metadata") == "2:ns:__metadata"
        assert codec.encode("ns", "_metadata") != codec.encode_index("ns")

    def test_metadata_shaped_key_is_escaped(self, codec: NamespaceCodec) -> None:
        """A caller key shaped like a metadata key cannot hit metadata."""
        assert codec.encode("ns", "_metadata:k") != codec.encode_metadata("ns", "k")

    def test_plain_key_not_escaped(self, codec: NamespaceCodec) -> None:
        """Keys not starting with '_' are left as-is."""
        assert codec.encode("ns", "metadata") == "2:ns:metadata"

    @pytest.mark.parametrize(
        ("key", "expected"),
        [
            ("_metadata", True),
            ("_metadata:user", True),
            ("_metadatax", False),
            ("metadata", False),
            ("user", False),
        ],
    )
    def test_is_reserved(self, key: str, expected: bool) -> None:
        """Only control-key spellings are reported as reserved."""
        assert NamespaceCodec.is_reserved(key) is expected
