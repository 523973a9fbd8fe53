"""Namespace codec: maps (namespace, logical key) pairs to physical store keys."""

from __future__ import annotations

from nscache_core.constants import KEY_SEPARATOR, METADATA_MARKER, RESERVED_LEAD
from nscache_core.exceptions import InvalidKeyError


class NamespaceCodec:
    """Derive collision-free physical keys for a namespace.

    Layout: ``<len(namespace)>:<namespace>:<body>``. The length prefix fixes
    where the namespace ends, so namespaces containing ``:`` cannot bleed into
    each other. Ordinary keys starting with ``_`` gain one extra ``_`` in the
    body, which keeps them clear of the reserved ``_metadata`` bodies.

    Example:
        >>> NamespaceCodec().encode("tenantA", "user:1")
        '7:tenantA:user:1'
        >>> NamespaceCodec().encode_index("tenantA")
        '7:tenantA:_metadata'
    """

    def encode(self, namespace: str, key: str) -> str:
        """Physical key for an ordinary caller-supplied key."""
        self._validate_key(key)
        body = RESERVED_LEAD + key if key.startswith(RESERVED_LEAD) else key
        return self._join(namespace, body)

    def encode_metadata(self, namespace: str, key: str) -> str:
        """Physical key of the metadata record for ``key``."""
        self._validate_key(key)
        return self._join(namespace, f"{METADATA_MARKER}{KEY_SEPARATOR}{key}")

    def encode_index(self, namespace: str) -> str:
        """Physical key of the namespace key index."""
        return self._join(namespace, METADATA_MARKER)

    @staticmethod
    def is_reserved(key: str) -> bool:
        """Return True if ``key`` spells a control key body (it is escaped on encode)."""
        return key == METADATA_MARKER or key.startswith(METADATA_MARKER + KEY_SEPARATOR)

    def _join(self, namespace: str, body: str) -> str:
        self._validate_namespace(namespace)
        return f"{len(namespace)}{KEY_SEPARATOR}{namespace}{KEY_SEPARATOR}{body}"

    @staticmethod
    def _validate_namespace(namespace: str) -> None:
        if not isinstance(namespace, str):
            msg = f"namespace must be a string, got {type(namespace).__name__}"
            raise InvalidKeyError(msg)
        if not namespace:
            msg = "namespace cannot be empty"
            raise InvalidKeyError(msg)

    @staticmethod
    def _validate_key(key: str) -> None:
        if not isinstance(key, str):
            msg = f"cache key must be a string, got {type(key).__name__}"
            raise InvalidKeyError(msg)
