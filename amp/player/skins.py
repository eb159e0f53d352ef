"""
Skin resolution.

Turns the skin identifier typed by the author into a skin resource URL.
Skin pages look like https://skins.<host>/skin/<token>/<name>/ and the
matching archive is served from https://cdn.<host>/skins/<token>.wsz.
"""

import logging
import re
from typing import Dict, Mapping, Optional


logger = logging.getLogger(__name__)

DEFAULT_SKIN_URL = "https://cdn.webampskins.org/skins/5e4f10275dcb1fb211d4a8b4f1bda236.wsz"

# Skin pages on webamp.org are served from the webampskins.org CDN
DEFAULT_CDN_HOSTS = {"webamp.org": "webampskins.org"}

SKIN_EXTENSION = "wsz"

_ANY_HOST = r"([\w-]+(?:\.[\w-]+)+)"


def skin_page_pattern(host: Optional[str] = None) -> "re.Pattern[str]":
    """
    Compile the skin page pattern.

    Args:
        host: Only accept this host (any host when None)
    """
    host_group = f"({re.escape(host)})" if host else _ANY_HOST
    return re.compile(
        rf"(?:https?:)?(?://)?skins\.{host_group}/skin/(\w+)/(?:.*)?",
        re.ASCII,
    )


class SkinResolver:
    """
    Resolves skin identifiers to skin resource URLs.

    Resolution rules:
        - empty identifier: the default skin URL
        - skin page URL: the CDN archive URL for its token
        - anything else: None (no skin change)

    Args:
        default_url: Skin used when the identifier is empty
        cdn_hosts: Host remapping for the CDN (page host -> CDN host)
        host: Restrict accepted skin pages to one host
    """

    def __init__(
        self,
        default_url: str = DEFAULT_SKIN_URL,
        cdn_hosts: Optional[Mapping[str, str]] = None,
        host: Optional[str] = None,
    ):
        self.default_url = default_url
        self.cdn_hosts: Dict[str, str] = dict(DEFAULT_CDN_HOSTS if cdn_hosts is None else cdn_hosts)
        self.host = host
        self._pattern = skin_page_pattern(host)

    def resolve(self, identifier: Optional[str]) -> Optional[str]:
        """
        Resolve a skin identifier.

        Args:
            identifier: Skin identifier from the block attributes

        Returns:
            Skin resource URL, or None when the identifier is not a skin page
        """
        if not identifier:
            return self.default_url

        match = self._pattern.search(identifier)
        if match is None:
            logger.warning(f"Ignoring unrecognized skin identifier: {identifier!r}")
            return None

        host, token = match.groups()
        cdn_host = self.cdn_hosts.get(host, host)
        return f"https://cdn.{cdn_host}/skins/{token}.{SKIN_EXTENSION}"


def resolve_skin_url(identifier: Optional[str]) -> Optional[str]:
    """Resolve a skin identifier with the default resolver settings."""
    return SkinResolver().resolve(identifier)
