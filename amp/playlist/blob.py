"""
Temporary URL registry for in-flight uploads.

A dropped file gets a client-local blob: URL so it can be listed and
played before the upload finishes. The URL is revoked once the permanent
source is known.
"""

import logging
import uuid
from typing import Any, Dict, Optional


logger = logging.getLogger(__name__)

BLOB_SCHEME = "blob:"


def is_blob_url(url: Optional[str]) -> bool:
    """Check whether a URL is a temporary blob: URL."""
    return bool(url) and url.startswith(BLOB_SCHEME)


class BlobRegistry:
    """
    Creates and revokes temporary blob: URLs.

    Each call to create() returns a fresh URL, even for the same payload.
    """

    def __init__(self, origin: str = "local"):
        self.origin = origin
        self._payloads: Dict[str, Any] = {}

    def __len__(self) -> int:
        return len(self._payloads)

    def __contains__(self, url: str) -> bool:
        return url in self._payloads

    def create(self, payload: Any) -> str:
        """
        Create a temporary URL for a payload.

        Args:
            payload: Raw file payload (bytes, path, file object...)

        Returns:
            New blob: URL
        """
        url = f"{BLOB_SCHEME}{self.origin}/{uuid.uuid4()}"
        self._payloads[url] = payload
        logger.debug(f"Created temporary URL {url}")
        return url

    def get(self, url: str) -> Optional[Any]:
        """Payload behind a temporary URL, None if unknown or revoked."""
        return self._payloads.get(url)

    def revoke(self, url: str) -> bool:
        """
        Revoke a temporary URL.

        Returns:
            True if the URL was known, False otherwise
        """
        if url not in self._payloads:
            return False
        del self._payloads[url]
        logger.debug(f"Revoked temporary URL {url}")
        return True
